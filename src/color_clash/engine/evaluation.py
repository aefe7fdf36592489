"""
Static evaluation for the search engine.

Material (the sum of a player's cell values) is the only score the search
optimizes. Attack and defense potentials are tie-breaks between moves whose
searched material is equal.
"""

import numpy as np

from color_clash.game.board import DIRECTIONS, EMPTY, Board


def material(board: Board, player: int) -> int:
    return board.material(player)


def _shift(arr: np.ndarray, dr: int, dc: int, fill) -> np.ndarray:
    """out[r, c] = arr[r + dr, c + dc], ``fill`` where that is off-board."""
    out = np.full_like(arr, fill)
    size = arr.shape[0]
    src_r = slice(max(dr, 0), size + min(dr, 0))
    dst_r = slice(max(-dr, 0), size + min(-dr, 0))
    src_c = slice(max(dc, 0), size + min(dc, 0))
    dst_c = slice(max(-dc, 0), size + min(-dc, 0))
    out[dst_r, dst_c] = arr[src_r, src_c]
    return out


def attack_defense(board: Board, player: int, threshold: int) -> tuple[int, int]:
    """
    Tie-break potentials for ``player``.

    Returns:
        (attack, defense) where attack counts the player's cells next to at
        least one opposing cell with a lower value, and defense counts the
        player's cells exactly one increment below ``threshold``.
    """
    mine = board.owners == player
    values = board.values

    threatens = np.zeros_like(mine)
    for dr, dc in DIRECTIONS:
        n_owner = _shift(board.owners, dr, dc, EMPTY)
        n_value = _shift(values, dr, dc, 0)
        opposing = (n_owner != EMPTY) & (n_owner != player)
        threatens |= opposing & (values > n_value)

    attack = int(np.count_nonzero(mine & threatens))
    defense = int(np.count_nonzero(mine & (values == threshold - 1)))
    return attack, defense
