"""
Search engine for Color Clash.

This module contains the AI components:
- Material evaluation and attack/defense tie-breaks
- Move ordering for alpha-beta pruning
- Coalition minimax (all opponents searched as one minimizing side)
- Budget-bounded iterative deepening and forced-win selection
"""

from color_clash.engine.evaluation import attack_defense, material
from color_clash.engine.move_ordering import order_children, order_root_candidates, top_ranked
from color_clash.engine.minimax import INF, CoalitionMinimax, NodeResult
from color_clash.engine.ai import AIDecision, ChosenMove, SearchState, choose_move

__all__ = [
    'attack_defense',
    'material',
    'order_children',
    'order_root_candidates',
    'top_ranked',
    'INF',
    'CoalitionMinimax',
    'NodeResult',
    'AIDecision',
    'ChosenMove',
    'SearchState',
    'choose_move',
]
