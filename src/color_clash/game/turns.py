"""
Turn order helpers.

Players with no cells are eliminated and skipped so that a game never waits
on someone who cannot move. Nobody can be eliminated during initial
placement, since nobody owns anything before their first move.
"""

from typing import Optional, Sequence

import numpy as np

from color_clash.game.board import Board


def count_owned_cells(board: Board) -> list[int]:
    """Cells owned per player index."""
    return [int(n) for n in board.owned_counts()]


def alive_mask(board: Board, initial_phase: bool = False) -> list[bool]:
    """Alive = owns at least one cell; everyone is alive during initial placement."""
    if initial_phase:
        return [True] * board.player_count
    return [bool(n > 0) for n in board.owned_counts()]


def next_alive_index(alive: Sequence[bool], start_index: int) -> Optional[int]:
    """First alive index scanning forward from ``start_index`` (wrapping)."""
    n = len(alive)
    if n == 0:
        return None
    for step in range(n):
        idx = (start_index + step) % n
        if alive[idx]:
            return idx
    return None


def next_actor(board: Board, last_actor: int, initial_phase: bool = False) -> Optional[int]:
    """
    Player who moves after ``last_actor``.

    ``candidate = (last_actor + 1) % N``, advanced past eliminated players.
    Returns None once at most one player is alive (the game is over).
    """
    alive = alive_mask(board, initial_phase)
    if int(np.count_nonzero(alive)) <= 1:
        return None
    return next_alive_index(alive, (last_actor + 1) % board.player_count)
