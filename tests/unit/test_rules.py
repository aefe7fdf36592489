"""
Unit tests for move legality, move application and cascade resolution.

Tests verify:
- Opening placements bounce off-board fragments back to the origin
- Main-phase fragments that leave the board are lost
- Sources explode with their live value and owner within a wave
- Long chains stabilize or are reported as runaway
- Rejected moves never mutate anything
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / 'src'))

from color_clash.config import RULES, RulesConfig
from color_clash.game.board import EMPTY, Board, Cell, create_board
from color_clash.game.rules import (
    Move,
    MoveRejection,
    apply_move,
    is_initial_phase,
    legal_moves,
    resolve_explosions,
    simulate_move,
)


def chain_board() -> Board:
    """3x3 board whose (0, 0) source sets off a six-wave chain."""
    board = create_board(3, 2)
    board.set_cell(0, 0, 4, 0)
    for row, col in [(0, 1), (0, 2), (1, 2), (2, 2), (2, 1)]:
        board.set_cell(row, col, 3, 0)
    return board


class TestOpeningPlacement:
    """First placement of each player."""

    def test_first_placement_in_corner(self):
        board = create_board(3, 2)
        placed = [False, False]
        result = apply_move(board, Move(0, 0, 0), placed)

        assert result.ok
        assert result.is_initial
        assert placed == [True, False]
        assert board.cell(0, 0) == Cell(RULES.initial_placement_value, 0)

        explosions = resolve_explosions(board, initial_phase=True)
        assert explosions.explosion_count == 1
        assert explosions.waves == 1
        assert not explosions.runaway
        assert board.cell(0, 0) == Cell(2, 0)
        assert board.cell(0, 1) == Cell(2, 0)
        assert board.cell(1, 0) == Cell(2, 0)
        assert board.material(0) == 6

    def test_only_far_corner_left_for_second_player(self):
        board = create_board(3, 2)
        placed = [False, False]
        apply_move(board, Move(0, 0, 0), placed)
        resolve_explosions(board, initial_phase=True)

        assert legal_moves(board, 1, False) == [Move(1, 2, 2)]

    def test_corner_bounce_on_larger_board(self):
        board = create_board(6, 2)
        board.set_cell(5, 5, 5, 1)
        resolve_explosions(board, initial_phase=True)

        assert board.cell(5, 5) == Cell(2, 1)
        assert board.cell(4, 5) == Cell(2, 1)
        assert board.cell(5, 4) == Cell(2, 1)

    def test_main_phase_loses_off_board_fragments(self):
        board = create_board(6, 2)
        board.set_cell(5, 5, 5, 1)
        resolve_explosions(board, initial_phase=False)

        assert board.cell(5, 5) == Cell(0, None)
        assert board.cell(4, 5) == Cell(2, 1)
        assert board.cell(5, 4) == Cell(2, 1)

    def test_edge_bounce_is_count_not_fragment(self):
        """Edge cell: one off-board direction returns exactly 1, not 2."""
        board = create_board(5, 2)
        board.set_cell(0, 2, 5, 0)
        resolve_explosions(board, initial_phase=True)

        assert board.cell(0, 2) == Cell(1, 0)
        assert board.cell(0, 1) == Cell(2, 0)
        assert board.cell(0, 3) == Cell(2, 0)
        assert board.cell(1, 2) == Cell(2, 0)


class TestCascade:
    """Wave semantics in the main phase."""

    def test_live_value_and_owner(self):
        board = create_board(3, 2)
        board.set_cell(1, 0, 4, 0)
        board.set_cell(1, 1, 4, 1)
        result = resolve_explosions(board, initial_phase=False)

        assert result.explosion_count == 2
        assert result.waves == 1
        assert board.cell(0, 0) == Cell(1, 0)
        assert board.cell(2, 0) == Cell(1, 0)
        assert board.cell(1, 0) == Cell(2, 0)
        assert board.cell(0, 1) == Cell(2, 0)
        assert board.cell(2, 1) == Cell(2, 0)
        assert board.cell(1, 2) == Cell(2, 0)
        assert board.cell(1, 1) == Cell(0, None)
        assert board.owners_present() == {0}

    def test_chain_stabilizes(self):
        board = chain_board()
        result = resolve_explosions(board, initial_phase=False)

        assert not result.runaway
        assert result.waves == 6
        assert result.explosion_count == 6
        assert board.cell(1, 1) == Cell(3, 0)
        assert board.cell(2, 1) == Cell(0, None)
        assert int(board.values.max()) < RULES.cell_explode_threshold

    def test_chain_runaway_with_tight_bound(self):
        board = chain_board()
        result = resolve_explosions(board, False, RulesConfig(runaway_waves_per_row=1))

        assert result.runaway
        assert result.waves == 3
        assert board.explosion_sources(RULES.cell_explode_threshold)

    def test_stable_board_untouched(self):
        board = create_board(4, 2)
        board.set_cell(1, 1, 3, 0)
        before = board.copy()
        result = resolve_explosions(board, initial_phase=False)

        assert result.explosion_count == 0
        assert result.waves == 0
        assert board == before


class TestMainPhaseMoves:
    """Increments of owned cells."""

    def test_increment(self):
        board = create_board(4, 2)
        board.set_cell(0, 0, 2, 0)
        result = apply_move(board, Move(0, 0, 0), [True, True])

        assert result.ok
        assert not result.is_initial
        assert board.cell(0, 0) == Cell(3, 0)

    def test_increment_is_capped(self):
        board = create_board(4, 2)
        board.set_cell(0, 0, 5, 0)
        apply_move(board, Move(0, 0, 0), [True, True])
        assert board.cell(0, 0) == Cell(5, 0)

    def test_apply_never_cascades(self):
        board = create_board(4, 2)
        board.set_cell(1, 1, 3, 0)
        apply_move(board, Move(0, 1, 1), [True, True])
        assert board.cell(1, 1) == Cell(4, 0)
        assert board.cell(0, 1) == Cell(0, None)


class TestRejections:
    """Every rejection leaves the board and flags untouched."""

    @pytest.mark.parametrize('move,placed,reason', [
        (Move(0, 4, 0), [False, False], MoveRejection.OUT_OF_BOUNDS),
        (Move(0, 0, -1), [True, True], MoveRejection.OUT_OF_BOUNDS),
        (Move(1, 0, 0), [True, False], MoveRejection.INITIAL_NOT_EMPTY),
        (Move(1, 1, 1), [True, False], MoveRejection.INITIAL_INVALID_POSITION),
        (Move(1, 0, 1), [True, False], MoveRejection.INITIAL_INVALID_POSITION),
        (Move(1, 0, 0), [True, True], MoveRejection.NOT_OWNED_CELL),
        (Move(0, 3, 3), [True, True], MoveRejection.NOT_OWNED_CELL),
    ])
    def test_rejection(self, move, placed, reason):
        board = create_board(4, 2)
        board.set_cell(0, 0, 2, 0)
        before = board.copy()
        placed_before = list(placed)

        result = apply_move(board, move, placed)

        assert not result.ok
        assert result.reason == reason
        assert board == before
        assert placed == placed_before

    def test_reason_codes_are_strings(self):
        assert MoveRejection.WRONG_TURN == 'wrong_turn'
        assert MoveRejection('no_players') is MoveRejection.NO_PLAYERS


class TestLegalMoves:
    """Move generation."""

    def test_opening_moves_avoid_zone(self):
        board = create_board(4, 2)
        moves = legal_moves(board, 0, False)
        cells = {(m.row, m.col) for m in moves}
        assert len(moves) == 12
        assert (1, 1) not in cells
        assert (0, 0) in cells

    def test_main_phase_moves_are_owned_cells(self):
        board = create_board(4, 2)
        board.set_cell(2, 3, 1, 1)
        board.set_cell(0, 0, 2, 0)
        board.set_cell(3, 3, 4, 1)
        assert legal_moves(board, 1, True) == [Move(1, 2, 3), Move(1, 3, 3)]

    def test_idempotent(self):
        board = chain_board()
        before = board.copy()
        first = legal_moves(board, 0, True)
        assert legal_moves(board, 0, True) == first
        assert board == before

    def test_phase(self):
        assert is_initial_phase([True, False])
        assert not is_initial_phase([True, True])


class TestSimulateMove:
    """Lookahead on private copies."""

    def test_inputs_untouched(self):
        board = create_board(3, 2)
        placed = [False, False]
        sim = simulate_move(board, placed, Move(0, 0, 0))

        assert sim.is_initial
        assert sim.has_placed == [True, False]
        assert sim.explosions.explosion_count == 1
        assert sim.board.cell(0, 0) == Cell(2, 0)
        assert placed == [False, False]
        assert np.all(board.values == 0)

    def test_illegal_returns_none(self):
        board = create_board(3, 2)
        board.set_cell(0, 0, 2, 0)
        assert simulate_move(board, [True, True], Move(1, 0, 0)) is None

    def test_last_placement_uses_opening_rules(self):
        """The move that completes placement still bounces its fragments."""
        board = create_board(3, 2)
        board.set_cell(0, 0, 2, 0)
        board.set_cell(0, 1, 2, 0)
        board.set_cell(1, 0, 2, 0)
        sim = simulate_move(board, [True, False], Move(1, 2, 2))

        assert sim.board.cell(2, 2) == Cell(2, 1)
        assert not is_initial_phase(sim.has_placed)


class TestRandomPlay:
    """Invariants over many random moves."""

    @pytest.mark.parametrize('seed', range(5))
    def test_values_stay_in_range(self, seed):
        rng = np.random.default_rng(seed)
        size, players = 5, 3
        board = create_board(size, players)
        placed = [False] * players
        actor = 0

        for _ in range(150):
            moves = legal_moves(board, actor, placed[actor])
            if moves:
                move = moves[int(rng.integers(len(moves)))]
                initial = is_initial_phase(placed)
                assert apply_move(board, move, placed).ok
                result = resolve_explosions(board, initial)

                assert board.values.min() >= 0
                assert board.values.max() <= RULES.max_cell_value
                assert np.all((board.values == 0) == (board.owners == EMPTY))
                if result.runaway:
                    break
                assert board.values.max() < RULES.cell_explode_threshold
            actor = (actor + 1) % players
