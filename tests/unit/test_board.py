"""
Unit tests for the board model and opening-placement geometry.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / 'src'))

from color_clash.errors import ConfigurationError
from color_clash.game.board import (
    EMPTY,
    Cell,
    compute_exclusion_zone,
    create_board,
    is_initial_placement_legal,
)
from color_clash.game.palette import (
    PLAYER_COLORS,
    select_colors,
    validate_palette,
)


class TestExclusionZone:
    """Center cells forbidden for opening placements."""

    def test_even_size_six(self):
        assert compute_exclusion_zone(6) == {(2, 2), (2, 3), (3, 2), (3, 3)}

    def test_even_size_four(self):
        assert compute_exclusion_zone(4) == {(1, 1), (1, 2), (2, 1), (2, 2)}

    def test_odd_size_five(self):
        assert compute_exclusion_zone(5) == {(2, 2), (1, 2), (3, 2), (2, 1), (2, 3)}

    def test_odd_size_three(self):
        assert compute_exclusion_zone(3) == {(1, 1), (0, 1), (2, 1), (1, 0), (1, 2)}

    @pytest.mark.parametrize('size', [3, 4, 5, 6, 7, 8])
    def test_zone_size(self, size):
        expected = 4 if size % 2 == 0 else 5
        assert len(compute_exclusion_zone(size)) == expected

    def test_too_small(self):
        with pytest.raises(ConfigurationError):
            compute_exclusion_zone(2)


class TestBoard:
    """Board creation and queries."""

    def test_create_empty(self):
        board = create_board(5, 3)
        assert board.size == 5
        assert board.player_count == 3
        assert np.all(board.values == 0)
        assert np.all(board.owners == EMPTY)
        assert board.cell(0, 0) == Cell(0, None)

    @pytest.mark.parametrize('size,players', [(2, 2), (5, 1), (5, 9)])
    def test_create_rejects_bad_setup(self, size, players):
        with pytest.raises(ConfigurationError):
            create_board(size, players)

    def test_copy_is_independent(self):
        board = create_board(4, 2)
        board.set_cell(0, 0, 3, 1)
        clone = board.copy()
        clone.set_cell(0, 0, 1, 0)
        assert board.cell(0, 0) == Cell(3, 1)
        assert clone != board

    def test_set_cell_zero_is_unowned(self):
        board = create_board(4, 2)
        board.set_cell(1, 1, 0, 1)
        assert board.cell(1, 1) == Cell(0, None)

    def test_counts_and_material(self):
        board = create_board(4, 3)
        board.set_cell(0, 0, 2, 0)
        board.set_cell(0, 3, 3, 0)
        board.set_cell(3, 3, 1, 2)
        assert list(board.owned_counts()) == [2, 0, 1]
        assert board.material(0) == 5
        assert board.material(1) == 0
        assert board.owners_present() == {0, 2}

    def test_neighbors_in_corner(self):
        board = create_board(4, 2)
        assert board.neighbors(0, 0) == [(1, 0), (0, 1)]
        assert len(board.neighbors(1, 1)) == 4

    def test_explosion_sources_row_major(self):
        board = create_board(4, 2)
        board.set_cell(2, 1, 4, 0)
        board.set_cell(0, 3, 5, 1)
        board.set_cell(1, 1, 3, 1)
        assert board.explosion_sources(4) == [(0, 3), (2, 1)]


class TestInitialPlacement:
    """Opening placement legality."""

    def test_corner_legal_on_empty_board(self):
        board = create_board(6, 2)
        assert is_initial_placement_legal(board, compute_exclusion_zone(6), 0, 0)

    def test_zone_illegal(self):
        board = create_board(6, 2)
        assert not is_initial_placement_legal(board, compute_exclusion_zone(6), 2, 3)

    def test_orthogonal_neighbor_owned_illegal(self):
        board = create_board(6, 2)
        board.set_cell(0, 1, 2, 0)
        zone = compute_exclusion_zone(6)
        assert not is_initial_placement_legal(board, zone, 0, 0)
        assert not is_initial_placement_legal(board, zone, 1, 1)

    def test_diagonal_neighbor_allowed(self):
        board = create_board(6, 2)
        board.set_cell(1, 1, 2, 0)
        assert is_initial_placement_legal(board, compute_exclusion_zone(6), 0, 0)


class TestPalette:
    """Palette selection and validation."""

    def test_select_rotates_from_start(self):
        assert select_colors(3) == ['green', 'red', 'blue']
        assert select_colors(2, 'purple') == ['purple', 'green']

    def test_select_clamps_count(self):
        assert len(select_colors(0)) == 1
        assert len(select_colors(20)) == len(PLAYER_COLORS)

    def test_start_color_is_first_player(self):
        for color in PLAYER_COLORS:
            assert select_colors(4, color)[0] == color

    def test_unknown_start_color_falls_back(self):
        assert select_colors(2, 'teal') == ['green', 'red']

    @pytest.mark.parametrize('colors', [
        ['green'],
        ['green', 'green'],
        ['green', 'teal'],
        list(PLAYER_COLORS) + ['green'],
    ])
    def test_validate_rejects(self, colors):
        with pytest.raises(ConfigurationError):
            validate_palette(colors)
