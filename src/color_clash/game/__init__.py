"""
Color Clash rules engine.

This module contains the deterministic game model:
- Board/Cell model and opening-placement geometry
- Move validation, application and cascade resolution
- Alive tracking and elimination-aware turn order
- The authoritative game session
"""

from color_clash.game.board import (
    EMPTY,
    Board,
    Cell,
    compute_exclusion_zone,
    create_board,
    is_initial_placement_legal,
)
from color_clash.game.rules import (
    ExplosionResult,
    Move,
    MoveRejection,
    MoveResult,
    apply_move,
    is_initial_phase,
    legal_moves,
    resolve_explosions,
    simulate_move,
)
from color_clash.game.turns import alive_mask, count_owned_cells, next_actor, next_alive_index
from color_clash.game.state import GameState

__all__ = [
    'EMPTY',
    'Board',
    'Cell',
    'compute_exclusion_zone',
    'create_board',
    'is_initial_placement_legal',
    'ExplosionResult',
    'Move',
    'MoveRejection',
    'MoveResult',
    'apply_move',
    'is_initial_phase',
    'legal_moves',
    'resolve_explosions',
    'simulate_move',
    'alive_mask',
    'count_owned_cells',
    'next_actor',
    'next_alive_index',
    'GameState',
]
