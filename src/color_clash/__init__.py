"""
Color Clash: a turn-based cell-cascade strategy game with a coalition search AI.
"""

from color_clash.config import AIConfig, RulesConfig
from color_clash.errors import ConfigurationError
from color_clash.game import GameState, Move, MoveRejection
from color_clash.engine import choose_move, SearchState

__all__ = [
    'AIConfig',
    'RulesConfig',
    'ConfigurationError',
    'GameState',
    'Move',
    'MoveRejection',
    'choose_move',
    'SearchState',
]
