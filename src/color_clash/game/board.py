"""
Board/Cell model for Color Clash.

The board is an S x S grid held as two flat numpy arrays:

- ``values``: orb count per cell, always in [0, max_cell_value]
- ``owners``: player index per cell, ``EMPTY`` (-1) when unowned

Cascades are resolved by index arithmetic over these arrays (see
``color_clash.game.rules``); cells never hold references to their neighbors.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from color_clash.config import GAME_CONFIG
from color_clash.errors import ConfigurationError


EMPTY = -1

# Orthogonal directions: up, down, left, right
DIRECTIONS = ((-1, 0), (1, 0), (0, -1), (0, 1))


@dataclass(frozen=True)
class Cell:
    """Read-only view of one grid cell."""
    value: int
    owner: Optional[int]


class Board:
    """
    Square grid of cells owned by player indices.

    Board instances are mutated in place by the rules engine; use ``copy()``
    for any lookahead.
    """

    def __init__(self, size: int, player_count: int,
                 values: Optional[np.ndarray] = None,
                 owners: Optional[np.ndarray] = None):
        self.size = size
        self.player_count = player_count
        self.values = np.zeros((size, size), dtype=np.int16) if values is None else values
        self.owners = np.full((size, size), EMPTY, dtype=np.int8) if owners is None else owners

    def __repr__(self):
        return f"Board({self.size}x{self.size}, players={self.player_count})"

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self.size == other.size and
            self.player_count == other.player_count and
            np.array_equal(self.values, other.values) and
            np.array_equal(self.owners, other.owners)
        )

    def copy(self) -> 'Board':
        return Board(self.size, self.player_count, self.values.copy(), self.owners.copy())

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def cell(self, row: int, col: int) -> Cell:
        owner = int(self.owners[row, col])
        return Cell(int(self.values[row, col]), None if owner == EMPTY else owner)

    def set_cell(self, row: int, col: int, value: int, owner: Optional[int]):
        """Write a cell directly (setup and fixtures; rules never call this)."""
        self.values[row, col] = value
        self.owners[row, col] = EMPTY if owner is None or value == 0 else owner

    def neighbors(self, row: int, col: int) -> list[tuple[int, int]]:
        """In-bounds orthogonal neighbors in up, down, left, right order."""
        return [
            (row + dr, col + dc) for dr, dc in DIRECTIONS
            if self.in_bounds(row + dr, col + dc)
        ]

    def owned_counts(self) -> np.ndarray:
        """Number of cells owned by each player index."""
        owned = self.owners[self.owners != EMPTY]
        return np.bincount(owned.astype(np.int64), minlength=self.player_count)[:self.player_count]

    def material(self, player: int) -> int:
        """Sum of cell values owned by ``player``."""
        return int(self.values[self.owners == player].sum())

    def owners_present(self) -> set[int]:
        return {int(o) for o in np.unique(self.owners) if o != EMPTY}

    def explosion_sources(self, threshold: int) -> list[tuple[int, int]]:
        """Cells at or above ``threshold``, row-major."""
        return [(int(r), int(c)) for r, c in np.argwhere(self.values >= threshold)]

    def to_lists(self) -> list[list[dict]]:
        """Nested ``{'value', 'owner'}`` rows (JSON friendly)."""
        return [
            [
                {'value': cell.value, 'owner': cell.owner}
                for cell in (self.cell(r, c) for c in range(self.size))
            ]
            for r in range(self.size)
        ]


def create_board(size: int, color_count: int) -> Board:
    """Empty board; fails fast on sizes or player counts no game can use."""
    if size < GAME_CONFIG['min_grid_size']:
        raise ConfigurationError(
            f"grid size must be >= {GAME_CONFIG['min_grid_size']}, got {size}"
        )
    if not GAME_CONFIG['min_players'] <= color_count <= GAME_CONFIG['max_players']:
        raise ConfigurationError(
            f"player count must be in [{GAME_CONFIG['min_players']}, "
            f"{GAME_CONFIG['max_players']}], got {color_count}"
        )
    return Board(size, color_count)


def compute_exclusion_zone(size: int) -> frozenset[tuple[int, int]]:
    """
    Cells where no opening placement is allowed.

    Odd sizes: the center cell plus its 4 orthogonal neighbors.
    Even sizes: the 2x2 center block.
    """
    if size < GAME_CONFIG['min_grid_size']:
        raise ConfigurationError(
            f"grid size must be >= {GAME_CONFIG['min_grid_size']}, got {size}"
        )
    if size % 2 == 0:
        middle = size // 2
        return frozenset({
            (middle - 1, middle - 1), (middle - 1, middle),
            (middle, middle - 1), (middle, middle),
        })
    middle = size // 2
    return frozenset({(middle, middle)} | {
        (middle + dr, middle + dc) for dr, dc in DIRECTIONS
    })


def is_initial_placement_legal(board: Board, exclusion_zone, row: int, col: int) -> bool:
    """
    An opening placement must avoid the exclusion zone and must not touch
    any owned cell orthogonally.
    """
    if (row, col) in exclusion_zone:
        return False
    return all(board.owners[r, c] == EMPTY for r, c in board.neighbors(row, col))
