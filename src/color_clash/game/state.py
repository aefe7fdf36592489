"""
Authoritative game session.

``GameState`` is the copy of a game that accepts move requests in turn order:
it owns the board, the per-player placement flags, the move sequence and the
player expected to move next. Servers, hot-seat loops and the arena all drive
games through it; mirrors stay in sync by replaying the same move history.
"""

import logging
from typing import Optional, Sequence

from color_clash.config import RULES, RulesConfig
from color_clash.errors import ConfigurationError
from color_clash.game.board import compute_exclusion_zone, create_board
from color_clash.game.palette import validate_palette
from color_clash.game.rules import (
    Move,
    MoveRejection,
    MoveResult,
    apply_move,
    is_initial_phase,
    legal_moves,
    resolve_explosions,
)
from color_clash.game.turns import alive_mask, next_actor

logger = logging.getLogger(__name__)


class GameState:
    """
    One game: INITIAL_PLACEMENT -> MAIN_PHASE -> TERMINAL.

    Attributes:
        board: Current board (mutated by accepted moves only)
        colors: Palette, index -> color key
        has_placed: Per-player opening placement flags
        seq: Number of accepted moves
        current_actor: Player expected to move, None once the game is over
        history: Accepted moves in order
        ended_reason: 'elimination', 'runaway', or a reason passed to ``end``
    """

    def __init__(self, grid_size: int, player_colors: Sequence[str],
                 rules: RulesConfig = RULES):
        self.rules = rules.validate()
        self.colors = validate_palette(player_colors)
        self.board = create_board(grid_size, len(self.colors))
        self.exclusion_zone = compute_exclusion_zone(grid_size)
        self.has_placed = [False] * len(self.colors)
        self.seq = 0
        self.current_actor: Optional[int] = 0
        self.alive = [True] * len(self.colors)
        self.history: list[Move] = []
        self.ended_reason: Optional[str] = None

    def __repr__(self):
        return (
            f"GameState({self.grid_size}x{self.grid_size}, players={self.player_count}, "
            f"seq={self.seq}, next={self.current_actor})"
        )

    @property
    def grid_size(self) -> int:
        return self.board.size

    @property
    def player_count(self) -> int:
        return len(self.colors)

    @property
    def initial_phase(self) -> bool:
        return is_initial_phase(self.has_placed)

    @property
    def game_over(self) -> bool:
        return self.current_actor is None

    @property
    def winner(self) -> Optional[int]:
        """Sole surviving player after an elimination finish."""
        if self.ended_reason != 'elimination':
            return None
        survivors = [i for i, alive in enumerate(self.alive) if alive]
        return survivors[0] if len(survivors) == 1 else None

    def legal_moves(self, actor: Optional[int] = None) -> list[Move]:
        actor = self.current_actor if actor is None else actor
        if actor is None:
            return []
        return legal_moves(self.board, actor, self.has_placed[actor], self.exclusion_zone)

    def validate_and_apply_move(self, move: Move) -> MoveResult:
        """
        Apply one move request if it is legal, then resolve its cascade.

        The cascade runs with the phase as it was before the move, so the last
        opening placement still returns its off-board fragments. Rejected
        requests leave the state untouched.
        """
        if self.current_actor is None:
            return MoveResult.rejected(MoveRejection.NO_PLAYERS)
        if move.actor != self.current_actor:
            logger.debug("Rejected %s: expected player %d", move, self.current_actor)
            return MoveResult.rejected(MoveRejection.WRONG_TURN)

        initial_phase = self.initial_phase
        result = apply_move(self.board, move, self.has_placed, self.rules, self.exclusion_zone)
        if not result.ok:
            logger.debug("Rejected %s: %s", move, result.reason.value)
            return result

        explosions = resolve_explosions(self.board, initial_phase, self.rules)
        self.seq += 1
        self.history.append(move)
        self.alive = alive_mask(self.board, self.initial_phase)

        if explosions.runaway:
            self.end('runaway')
        else:
            self.current_actor = next_actor(self.board, move.actor, self.initial_phase)
            if self.current_actor is None:
                self.ended_reason = 'elimination'
                logger.info("Game over after %d moves, winner: %s", self.seq, self.winner)

        result.explosion_count = explosions.explosion_count
        result.runaway = explosions.runaway
        result.game_over = self.game_over
        result.alive = list(self.alive)
        return result

    def skip_turn(self) -> Optional[int]:
        """Pass the turn on when the current player reported no move."""
        if self.current_actor is not None:
            self.current_actor = next_actor(self.board, self.current_actor, self.initial_phase)
            if self.current_actor is None:
                self.ended_reason = 'elimination'
        return self.current_actor

    def end(self, reason: str):
        self.current_actor = None
        self.ended_reason = reason
        logger.info("Game ended after %d moves: %s", self.seq, reason)

    @classmethod
    def replay(cls, grid_size: int, player_colors: Sequence[str], moves: Sequence[Move],
               rules: RulesConfig = RULES) -> 'GameState':
        """Rebuild a mirror by applying ``moves`` in order."""
        state = cls(grid_size, player_colors, rules)
        for i, move in enumerate(moves):
            result = state.validate_and_apply_move(move)
            if not result.ok:
                raise ConfigurationError(
                    f"history move {i} {move} rejected: {result.reason.value}"
                )
        return state

    def snapshot(self) -> dict:
        return {
            'grid_size': self.grid_size,
            'colors': list(self.colors),
            'seq': self.seq,
            'current_actor': self.current_actor,
            'has_placed': list(self.has_placed),
            'alive': list(self.alive),
            'ended_reason': self.ended_reason,
            'grid': self.board.to_lists(),
            'history': [[m.actor, m.row, m.col] for m in self.history],
        }
