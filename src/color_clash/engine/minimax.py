"""
Coalition minimax with alpha-beta pruning.

The search is written from the point of view of one *focus* player. Plies
alternate between the focus player, who maximizes its own material, and a
coalition of every other player, whose pooled legal moves are searched as
one minimizing side. Treating opponents as if they cooperate is a
conservative worst case for uncoordinated opponents.

Algorithm overview:

    def minimax(board, focus_to_move, depth, alpha, beta):
        if only one player owns cells (after initial placement):
            return +inf if it is the focus else -inf        # 1 ply to the result
        if depth == 0:
            return material(board, focus)

        children = [simulate(board, move) for move in side_moves]
        order children by immediate material
        for child in children:
            if child was a runaway cascade:
                return +inf / -inf                          # short-circuit
            value = minimax(child, not focus_to_move, depth - 1, alpha, beta)
            update best, alpha / beta
            if alpha >= beta:
                break
        return best

Infinite values carry the number of plies to the forced outcome, counting the
move that led into the node: a terminal node is 1 ply, and a node whose
child ends the game (by elimination or by runaway) is 2. The focus prefers
faster wins, the coalition prefers slower ones.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from color_clash.config import RulesConfig
from color_clash.engine.evaluation import material
from color_clash.engine.move_ordering import order_children
from color_clash.game.board import Board
from color_clash.game.rules import (
    Move,
    SimulatedMove,
    is_initial_phase,
    legal_moves,
    simulate_move,
)

INF = math.inf


@dataclass
class NodeResult:
    """
    Result of searching one node.

    Attributes:
        value: Focus player's material at the end of the principal line, or +/-inf
        plies: Plies to the forced outcome when ``value`` is infinite
        board: Board at the end of the principal line
        branch_count: Leaves visited beneath this node
        exhausted: True when no leaf below was cut off by the depth limit
    """
    value: float
    plies: Optional[int] = None
    board: Optional[Board] = None
    branch_count: int = 1
    exhausted: bool = True


@dataclass
class _Child:
    move: Move
    sim: SimulatedMove
    value: float


class CoalitionMinimax:
    """
    Depth-limited coalition search for one focus player.

    Every child is simulated on its own copy of the board, so the boards
    passed in are never mutated.
    """

    def __init__(self, focus: int, rules: RulesConfig, exclusion_zone):
        self.focus = focus
        self.rules = rules
        self.exclusion_zone = exclusion_zone
        self.nodes_searched = 0

    def search(self, board: Board, has_placed: Sequence[bool],
               focus_to_move: bool, depth: int) -> NodeResult:
        return self._minimax(board, has_placed, focus_to_move, depth, -INF, INF)

    def _terminal_value(self, board: Board, has_placed: Sequence[bool]) -> Optional[float]:
        # Nobody owns anything before placing, so no terminal during placement
        if is_initial_phase(has_placed):
            return None
        owners = board.owners_present()
        if len(owners) != 1:
            return None
        return INF if self.focus in owners else -INF

    def side_moves(self, board: Board, has_placed: Sequence[bool],
                   focus_to_move: bool) -> list[Move]:
        """Focus moves, or the pooled moves of every other player."""
        if focus_to_move:
            movers = [self.focus]
        else:
            movers = [p for p in range(board.player_count) if p != self.focus]
        moves = []
        for player in movers:
            moves.extend(legal_moves(board, player, has_placed[player], self.exclusion_zone))
        return moves

    def _expand(self, board: Board, has_placed: Sequence[bool], moves: list[Move]) -> list[_Child]:
        children = []
        for move in moves:
            sim = simulate_move(board, has_placed, move, self.rules, self.exclusion_zone)
            if sim.explosions.runaway:
                value = INF if move.actor == self.focus else -INF
            else:
                value = material(sim.board, self.focus)
            children.append(_Child(move, sim, value))
        return children

    def _minimax(self, board: Board, has_placed: Sequence[bool], focus_to_move: bool,
                 depth: int, alpha: float, beta: float) -> NodeResult:
        self.nodes_searched += 1

        terminal = self._terminal_value(board, has_placed)
        if terminal is not None:
            return NodeResult(terminal, plies=1, board=board)

        if depth <= 0:
            return NodeResult(material(board, self.focus), board=board, exhausted=False)

        moves = self.side_moves(board, has_placed, focus_to_move)
        if not moves:
            # Side cannot move: pass
            return self._minimax(board, has_placed, not focus_to_move, depth - 1, alpha, beta)

        children = order_children(self._expand(board, has_placed, moves), maximizing=focus_to_move)

        best_value = -INF if focus_to_move else INF
        best_plies = None
        best_board = board
        branch_count = 0
        exhausted = True

        for child in children:
            if math.isinf(child.value):
                # Runaway child is terminal (1 ply), same count as an elimination
                return NodeResult(child.value, plies=2, board=child.sim.board)

            result = self._minimax(
                child.sim.board, child.sim.has_placed, not focus_to_move,
                depth - 1, alpha, beta
            )
            branch_count += result.branch_count
            exhausted = exhausted and result.exhausted
            plies = result.plies + 1 if result.plies is not None else None

            if focus_to_move:
                faster_win = (
                    result.value == best_value == INF and
                    (best_plies is None or plies < best_plies)
                )
                if result.value > best_value or faster_win:
                    best_value, best_plies, best_board = result.value, plies, result.board
                alpha = max(alpha, best_value)
                if alpha >= beta:
                    break
            else:
                slower_loss = (
                    result.value == best_value == INF and
                    (best_plies is None or plies > best_plies)
                )
                if result.value < best_value or slower_loss:
                    best_value, best_plies, best_board = result.value, plies, result.board
                beta = min(beta, best_value)
                if beta <= alpha:
                    break

        return NodeResult(
            value=best_value,
            plies=best_plies if math.isinf(best_value) else None,
            board=best_board,
            branch_count=branch_count,
            exhausted=exhausted,
        )
