# Arena module
from alpha_beta_light.arena.battle import AlgorithmSpec, GameAlgorithmBattle
from alpha_beta_light.arena.tournament import PermutationScheduler, Tournament

__all__ = ['AlgorithmSpec', 'GameAlgorithmBattle', 'PermutationScheduler', 'Tournament']
