"""
Rules engine: move legality, move application and cascade resolution.

The same functions back every copy of a board (server-authoritative state,
hot-seat session, AI lookahead), so identical ``(actor, row, col)`` sequences
always produce identical boards.

Cascade contract (one wave):

    sources = cells with value >= threshold (row-major)
    for each source:
        fragment = value - threshold + 1    # threshold -> 1s, cap 5 -> 2s
        clear origin
        each in-bounds neighbor += fragment (capped), claimed by the owner
        initial placement only: out-of-bounds directions are counted and the
        count (not count * fragment) goes back to the origin

Waves repeat until the board is stable or ``runaway_waves_per_row * size``
waves (3 * size by default) have run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from color_clash.config import RULES, RulesConfig
from color_clash.game.board import (
    DIRECTIONS,
    EMPTY,
    Board,
    compute_exclusion_zone,
    is_initial_placement_legal,
)


class MoveRejection(str, Enum):
    """Closed set of reasons a move request is refused."""
    WRONG_TURN = 'wrong_turn'
    OUT_OF_BOUNDS = 'out_of_bounds'
    INITIAL_NOT_EMPTY = 'initial_not_empty'
    INITIAL_INVALID_POSITION = 'initial_invalid_position'
    NOT_OWNED_CELL = 'not_owned_cell'
    NO_PLAYERS = 'no_players'


@dataclass(frozen=True)
class Move:
    actor: int
    row: int
    col: int


@dataclass
class ExplosionResult:
    explosion_count: int = 0
    waves: int = 0
    runaway: bool = False


@dataclass
class MoveResult:
    """
    Outcome of a move request.

    Attributes:
        ok: Whether the move was applied
        reason: Rejection code when ``ok`` is False
        is_initial: Whether the move was an opening placement
        explosion_count: Cells that exploded while resolving the move
        runaway: Cascade did not stabilize within the wave bound
        game_over: At most one player is still alive afterwards
        alive: Alive mask after the move (session-level results only)
    """
    ok: bool
    reason: Optional[MoveRejection] = None
    is_initial: bool = False
    explosion_count: int = 0
    runaway: bool = False
    game_over: bool = False
    alive: list[bool] = field(default_factory=list)

    @classmethod
    def rejected(cls, reason: MoveRejection) -> 'MoveResult':
        return cls(ok=False, reason=reason)


def is_initial_phase(has_placed: Sequence[bool]) -> bool:
    """Initial placement lasts while any player has not placed yet."""
    return not all(has_placed)


def legal_moves(board: Board, actor: int, has_placed_initial: bool,
                exclusion_zone=None) -> list[Move]:
    """
    All legal moves for ``actor``, row-major.

    Before the actor's first placement: every empty cell that is a legal
    opening. Afterwards: every cell the actor owns.
    """
    if exclusion_zone is None:
        exclusion_zone = compute_exclusion_zone(board.size)

    moves = []
    for row in range(board.size):
        for col in range(board.size):
            if has_placed_initial:
                if board.owners[row, col] == actor and board.values[row, col] > 0:
                    moves.append(Move(actor, row, col))
            elif (board.values[row, col] == 0 and
                  is_initial_placement_legal(board, exclusion_zone, row, col)):
                moves.append(Move(actor, row, col))
    return moves


def apply_move(board: Board, move: Move, has_placed: list[bool],
               rules: RulesConfig = RULES, exclusion_zone=None) -> MoveResult:
    """
    Validate and apply one move without resolving explosions.

    Turn order is not checked here (see ``GameState.validate_and_apply_move``).
    On success the board, and ``has_placed`` for an opening placement, are
    mutated in place; a rejected move mutates nothing.
    """
    row, col, actor = move.row, move.col, move.actor
    if not board.in_bounds(row, col):
        return MoveResult.rejected(MoveRejection.OUT_OF_BOUNDS)

    if not has_placed[actor]:
        if exclusion_zone is None:
            exclusion_zone = compute_exclusion_zone(board.size)
        if board.values[row, col] != 0:
            return MoveResult.rejected(MoveRejection.INITIAL_NOT_EMPTY)
        if not is_initial_placement_legal(board, exclusion_zone, row, col):
            return MoveResult.rejected(MoveRejection.INITIAL_INVALID_POSITION)
        board.values[row, col] = rules.initial_placement_value
        board.owners[row, col] = actor
        has_placed[actor] = True
        return MoveResult(ok=True, is_initial=True)

    if not (board.values[row, col] > 0 and board.owners[row, col] == actor):
        return MoveResult.rejected(MoveRejection.NOT_OWNED_CELL)
    board.values[row, col] = min(rules.max_cell_value, int(board.values[row, col]) + 1)
    return MoveResult(ok=True)


def resolve_explosions(board: Board, initial_phase: bool,
                       rules: RulesConfig = RULES) -> ExplosionResult:
    """
    Explode every cell at/above the threshold until the board is stable.

    Each wave lists its sources from the current arrays; a source explodes
    with its value and owner at the moment it is processed, so fragments it
    received earlier in the same wave travel on. After ``max_waves(size)`` waves an
    unstable board is reported as ``runaway`` and left as reached.
    """
    result = ExplosionResult()
    max_waves = rules.max_waves(board.size)
    threshold = rules.cell_explode_threshold

    while True:
        sources = board.explosion_sources(threshold)
        if not sources:
            return result
        if result.waves >= max_waves:
            result.runaway = True
            return result
        result.waves += 1
        for row, col in sources:
            if _explode_cell(board, row, col, initial_phase, rules):
                result.explosion_count += 1


def _explode_cell(board: Board, row: int, col: int, initial_phase: bool,
                  rules: RulesConfig) -> bool:
    value = int(board.values[row, col])
    if value < rules.cell_explode_threshold:
        return False
    owner = int(board.owners[row, col])
    fragment = value - rules.cell_explode_threshold + 1
    board.values[row, col] = 0
    board.owners[row, col] = EMPTY

    bounced = 0
    for dr, dc in DIRECTIONS:
        r, c = row + dr, col + dc
        if board.in_bounds(r, c):
            _add_fragment(board, r, c, fragment, owner, rules)
        elif initial_phase:
            bounced += 1

    # Off-board fragments return as one undivided amount, never bounced * fragment
    if initial_phase and bounced > 0:
        _add_fragment(board, row, col, bounced, owner, rules)
    return True


def _add_fragment(board: Board, row: int, col: int, amount: int, owner: int,
                  rules: RulesConfig):
    board.values[row, col] = min(rules.max_cell_value, int(board.values[row, col]) + amount)
    board.owners[row, col] = owner


@dataclass
class SimulatedMove:
    board: Board
    has_placed: list[bool]
    explosions: ExplosionResult
    is_initial: bool


def simulate_move(board: Board, has_placed: Sequence[bool], move: Move,
                  rules: RulesConfig = RULES, exclusion_zone=None) -> Optional[SimulatedMove]:
    """
    Apply ``move`` and its cascade to private copies of the inputs.

    The phase used for the cascade is the phase before the move, as in a live
    game. Returns None when the move is illegal.
    """
    initial_phase = is_initial_phase(has_placed)
    sim_board = board.copy()
    sim_placed = list(has_placed)
    applied = apply_move(sim_board, move, sim_placed, rules, exclusion_zone)
    if not applied.ok:
        return None
    explosions = resolve_explosions(sim_board, initial_phase, rules)
    return SimulatedMove(sim_board, sim_placed, explosions, applied.is_initial)
