"""
Exception taxonomy for the search core.

Cancellation of a bounded search is a normal outcome and never raises.
Table collisions are silent by design and never raise either.
"""


class SearchError(Exception):
    """Base class for all errors raised by alpha_beta_light."""


class ConfigurationError(SearchError, ValueError):
    """Invalid construction parameters (table size, depth limit, participants)."""


class CapabilityError(SearchError, TypeError):
    """The wrapped game lacks a capability the requested algorithm needs."""


class NoMoveFoundError(SearchError):
    """A search that had to produce a move returned none."""


class TableKindError(SearchError, TypeError):
    """Exact and bounds entries were mixed in one transposition table."""
