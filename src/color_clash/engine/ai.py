"""
AI move selection for Color Clash.

``choose_move`` is pure: it never mutates the state it is given, and the
caller applies the returned move (or advances the turn) itself.

Selection process:
1. Generate the acting player's legal moves (opening placements or
   increments of owned cells).
2. Simulate each candidate with its cascade and record the immediate
   material gain, explosion count and runaway flag. A runaway caused by the
   acting player's own move is a forced win.
3. Budget-bounded iterative deepening: search every candidate with the
   coalition minimax at depth 1, 2, 3, ... summing the visited branches.
   Stop once the sum reaches ``5 ** ai_depth``, once no search hit the depth
   horizon (the tree is solved), or at ``max_search_depth``. The budget is
   counted in branches rather than seconds, so the result does not depend on
   the speed of the machine.
4. Forced wins go to the candidate with the fewest plies to the win.
   Otherwise rank by (searched value, attack, defense); attack and defense
   only ever break ties.
"""

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

from color_clash.config import AIConfig, RulesConfig
from color_clash.engine.evaluation import attack_defense, material
from color_clash.engine.minimax import INF, CoalitionMinimax
from color_clash.engine.move_ordering import order_root_candidates, top_ranked
from color_clash.errors import ConfigurationError
from color_clash.game.board import Board, compute_exclusion_zone
from color_clash.game.rules import Move, SimulatedMove, legal_moves, simulate_move

logger = logging.getLogger(__name__)


@dataclass
class SearchState:
    """Snapshot handed to the AI: the live objects are never mutated."""
    board: Board
    has_placed: Sequence[bool]
    player_index: int
    colors: Sequence[str]
    exclusion_zone: Optional[frozenset] = None
    rules: Optional[RulesConfig] = None

    @property
    def player_count(self) -> int:
        return len(self.colors)

    @classmethod
    def from_game(cls, game, player_index: Optional[int] = None) -> 'SearchState':
        """Build from a ``GameState`` for its current (or the given) player."""
        return cls(
            board=game.board,
            has_placed=list(game.has_placed),
            player_index=game.current_actor if player_index is None else player_index,
            colors=list(game.colors),
            exclusion_zone=game.exclusion_zone,
            rules=game.rules,
        )

    def validate(self) -> 'SearchState':
        if self.board.player_count != self.player_count:
            raise ConfigurationError(
                f"board has {self.board.player_count} players, palette has {self.player_count}"
            )
        if len(self.has_placed) != self.player_count:
            raise ConfigurationError(
                f"{len(self.has_placed)} placement flags for {self.player_count} players"
            )
        if self.player_index is None or not 0 <= self.player_index < self.player_count:
            raise ConfigurationError(f"invalid acting player {self.player_index}")
        return self


@dataclass(frozen=True)
class ChosenMove:
    row: int
    col: int
    is_initial: bool
    source_value: int

    def to_move(self, actor: int) -> Move:
        return Move(actor, self.row, self.col)


@dataclass
class AIDecision:
    """
    Attributes:
        chosen: Move to play, None when the player has no legal move
        require_advance_turn: Caller must advance the turn without a move
        schedule_game_end: The player never managed an opening placement
            (e.g. a board too small for the player count)
        debug_info: Ranked candidates and budget statistics (debug only)
    """
    chosen: Optional[ChosenMove]
    require_advance_turn: bool = False
    schedule_game_end: bool = False
    debug_info: Optional[dict] = None


@dataclass
class Candidate:
    move: Move
    is_initial: bool
    source_value: int
    sim: SimulatedMove
    gain: float
    score: float
    attack: int = 0
    defense: int = 0
    win_plies: Optional[int] = None
    final_board: Optional[Board] = None
    branch_count: int = 0

    @property
    def explosions(self) -> int:
        return self.sim.explosions.explosion_count

    @property
    def runaway(self) -> bool:
        return self.sim.explosions.runaway

    def to_dict(self) -> dict:
        return {
            'row': self.move.row,
            'col': self.move.col,
            'source_value': self.source_value,
            'explosions': self.explosions,
            'immediate_gain': self.gain,
            'gain': self.score,
            'attack': self.attack,
            'defense': self.defense,
            'win_plies': self.win_plies,
        }


@dataclass
class _BudgetStats:
    budget: int
    effective_depth: int = 0
    stop_reason: str = 'max_depth'
    branches: int = 0
    depth_counts: list = field(default_factory=list)


def _evaluate_candidates(state: SearchState, moves: list[Move], rules: RulesConfig,
                         zone, before: int) -> list[Candidate]:
    player = state.player_index
    candidates = []
    for move in moves:
        sim = simulate_move(state.board, state.has_placed, move, rules, zone)
        gain = INF if sim.explosions.runaway else material(sim.board, player) - before
        attack, defense = attack_defense(sim.board, player, rules.cell_explode_threshold)
        candidates.append(Candidate(
            move=move,
            is_initial=sim.is_initial,
            source_value=int(state.board.values[move.row, move.col]),
            sim=sim,
            gain=gain,
            score=gain,
            attack=attack,
            defense=defense,
        ))
    return candidates


def _deepen(candidates: list[Candidate], searcher: CoalitionMinimax, config: AIConfig,
            before: int) -> _BudgetStats:
    """Iterative deepening over all candidates until the branch budget is spent."""
    stats = _BudgetStats(budget=config.branch_budget)

    for depth in range(1, config.max_search_depth + 1):
        total = 0
        solved = True
        for cand in candidates:
            if cand.runaway:
                cand.score = INF
                cand.win_plies = 1
                cand.final_board = cand.sim.board
                cand.branch_count = 1
            else:
                result = searcher.search(
                    cand.sim.board, cand.sim.has_placed, focus_to_move=False, depth=depth - 1
                )
                cand.score = result.value if math.isinf(result.value) else result.value - before
                cand.win_plies = result.plies if result.value == INF else None
                cand.final_board = result.board
                cand.branch_count = result.branch_count
                solved = solved and result.exhausted
            total += cand.branch_count

        stats.depth_counts.append((depth, total))
        stats.effective_depth = depth
        stats.branches = total
        if total >= stats.budget:
            stats.stop_reason = 'budget'
            break
        if solved:
            stats.stop_reason = 'solved'
            break

    return stats


def _pick(pool: list[Candidate], rng: np.random.Generator) -> Candidate:
    if len(pool) == 1:
        return pool[0]
    return pool[int(rng.integers(len(pool)))]


def _debug_order(candidates: list[Candidate], chosen: Candidate) -> list[Candidate]:
    winning = sorted((c for c in candidates if c.score == INF), key=lambda c: c.win_plies)
    rest = order_root_candidates([c for c in candidates if c.score != INF])
    return [chosen] + [c for c in winning + rest if c is not chosen]


def choose_move(state: SearchState, config: Optional[AIConfig] = None,
                rng: Optional[np.random.Generator] = None) -> AIDecision:
    """
    Choose a move for ``state.player_index``.

    Args:
        state: Board, placement flags, acting player, palette, exclusion zone
            and, for a live game, the rules the game resolves with
        config: Search budget, plus the rules constants used when the state
            carries none (defaults to AIConfig())
        rng: Generator for breaking exact ties

    Returns:
        AIDecision with either a chosen move or the advance/end flags
    """
    config = (config or AIConfig()).validate()
    state.validate()
    rules = state.rules.validate() if state.rules is not None else config.rules
    rng = rng if rng is not None else np.random.default_rng()
    zone = state.exclusion_zone
    if zone is None:
        zone = compute_exclusion_zone(state.board.size)
    player = state.player_index
    start_time = time.perf_counter()

    moves = legal_moves(state.board, player, state.has_placed[player], zone)
    if not moves:
        logger.debug("Player %d has no legal move", player)
        return AIDecision(
            chosen=None,
            require_advance_turn=True,
            schedule_game_end=not state.has_placed[player],
        )

    before = material(state.board, player)
    candidates = order_root_candidates(_evaluate_candidates(state, moves, rules, zone, before))

    searcher = CoalitionMinimax(player, rules, zone)
    stats = _deepen(candidates, searcher, config, before)

    for cand in candidates:
        cand.attack, cand.defense = attack_defense(
            cand.final_board, player, rules.cell_explode_threshold
        )

    winning = [c for c in candidates if c.score == INF]
    if winning:
        fastest = min(c.win_plies for c in winning)
        chosen = _pick([c for c in winning if c.win_plies == fastest], rng)
    else:
        chosen = _pick(top_ranked(candidates), rng)

    elapsed_ms = (time.perf_counter() - start_time) * 1000
    logger.debug(
        "Player %d: %d candidates, depth %d (%s), %d/%d branches, %d nodes, %.1f ms",
        player, len(candidates), stats.effective_depth, stats.stop_reason,
        stats.branches, stats.budget, searcher.nodes_searched, elapsed_ms
    )

    decision = AIDecision(chosen=ChosenMove(
        row=chosen.move.row,
        col=chosen.move.col,
        is_initial=chosen.is_initial,
        source_value=chosen.source_value,
    ))

    if config.debug:
        current_attack, current_defense = attack_defense(
            state.board, player, rules.cell_explode_threshold
        )
        decision.debug_info = {
            'chosen': chosen.to_dict(),
            'ordered': [c.to_dict() for c in _debug_order(candidates, chosen)],
            'budget': stats.budget,
            'effective_depth': stats.effective_depth,
            'stop_reason': stats.stop_reason,
            'branches': stats.branches,
            'depth_counts': stats.depth_counts,
            'nodes_searched': searcher.nodes_searched,
            'elapsed_ms': elapsed_ms,
            'current_attack': current_attack,
            'current_defense': current_defense,
        }
    return decision
