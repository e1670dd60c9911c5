"""
alpha_beta_light: adversarial search over generic game states.

Wrap a problem as a `Game`, then search it with `AlphaBetaEngine` or `MTDf`,
optionally under a wall-clock budget, or pit configured algorithms against
each other with the arena.
"""

__version__ = "0.1"
