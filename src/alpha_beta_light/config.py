"""
Configuration for alpha-beta searches and algorithm tournaments.

Defaults live in plain dicts; the settings dataclasses validate them and are
what the engines and the arena consume.
"""

import logging
import os
from dataclasses import dataclass, fields

from alpha_beta_light.errors import ConfigurationError


# Search Configuration
SEARCH_CONFIG = {
    'depth_limit': 0,                   # 0 = search until terminal positions
    'move_ordering': True,              # Sort successors by heuristic (needs a player heuristic)
    'use_transposition_table': False,   # Memoized variant with bound tightening
    'tt_size': 100_000,                 # Number of buckets (5 entries each)
    'memory_saving_mode': 'none',       # 'none' or 'share_unchanged'
}

# Arena Configuration
ARENA_CONFIG = {
    'rounds': 6,                        # Games per battle phase
    'time_limit_ms': 0,                 # 0 = no wall-clock budget
    'poll_interval_ms': 10,             # Polling interval of the time-limited runner
}

LOG_LEVEL = os.environ.get('ALPHA_BETA_LIGHT_LOG_LEVEL', 'INFO').upper()


def _reject_unknown(cls, data: dict) -> None:
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ConfigurationError(f"Unknown {cls.__name__} keys: {sorted(unknown)}")


@dataclass
class SearchSettings:
    """Settings shared by the alpha-beta family of searches."""

    depth_limit: int = SEARCH_CONFIG['depth_limit']
    move_ordering: bool = SEARCH_CONFIG['move_ordering']
    use_transposition_table: bool = SEARCH_CONFIG['use_transposition_table']
    tt_size: int = SEARCH_CONFIG['tt_size']
    memory_saving_mode: str = SEARCH_CONFIG['memory_saving_mode']

    def __post_init__(self):
        if self.depth_limit < 0:
            raise ConfigurationError(f"depth_limit must be >= 0, got {self.depth_limit}")
        if self.tt_size <= 0:
            raise ConfigurationError(f"tt_size must be positive, got {self.tt_size}")
        # Deferred import: the engine package imports this module
        from alpha_beta_light.engine.node import MemorySavingMode
        try:
            MemorySavingMode(self.memory_saving_mode)
        except ValueError:
            raise ConfigurationError(
                f"Unknown memory_saving_mode {self.memory_saving_mode!r}"
            ) from None

    @classmethod
    def from_dict(cls, data: dict) -> 'SearchSettings':
        _reject_unknown(cls, data)
        merged = {**SEARCH_CONFIG, **data}
        return cls(**merged)


@dataclass
class ArenaSettings:
    """Settings for tournaments between configured algorithms."""

    rounds: int = ARENA_CONFIG['rounds']
    time_limit_ms: int = ARENA_CONFIG['time_limit_ms']
    poll_interval_ms: int = ARENA_CONFIG['poll_interval_ms']

    def __post_init__(self):
        if self.rounds < 1:
            raise ConfigurationError(f"rounds must be >= 1, got {self.rounds}")
        if self.time_limit_ms < 0:
            raise ConfigurationError(f"time_limit_ms must be >= 0, got {self.time_limit_ms}")
        if self.poll_interval_ms <= 0:
            raise ConfigurationError(
                f"poll_interval_ms must be positive, got {self.poll_interval_ms}"
            )

    @classmethod
    def from_dict(cls, data: dict) -> 'ArenaSettings':
        _reject_unknown(cls, data)
        merged = {**ARENA_CONFIG, **data}
        return cls(**merged)


def setup_logging() -> None:
    """Configure root logging once, controlled by ALPHA_BETA_LIGHT_LOG_LEVEL."""
    if getattr(setup_logging, "_configured", False):
        return
    level = getattr(logging, LOG_LEVEL, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    setup_logging._configured = True  # type: ignore[attr-defined]
