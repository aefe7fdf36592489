"""
Play complete games between seats to evaluate AI strength.

A seat is anything with ``select_move(game) -> AIDecision``. Games are driven
through ``GameState`` exactly like a live game, including turn skips and
scheduled game ends reported by the AI.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from tqdm import tqdm

from color_clash.config import ARENA_CONFIG, RULES, AIConfig, RulesConfig, default_grid_size
from color_clash.engine.ai import AIDecision, ChosenMove, SearchState, choose_move
from color_clash.game.palette import select_colors
from color_clash.game.state import GameState


class SearchPlayer:
    """Seat backed by the coalition search."""

    def __init__(self, config: Optional[AIConfig] = None, rng: Optional[np.random.Generator] = None):
        self.config = config or AIConfig()
        self.rng = rng if rng is not None else np.random.default_rng()

    def __repr__(self):
        return f"SearchPlayer(depth={self.config.ai_depth})"

    def select_move(self, game: GameState) -> AIDecision:
        return choose_move(SearchState.from_game(game), self.config, self.rng)


class RandomPlayer:
    """Seat that plays a uniformly random legal move."""

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()

    def __repr__(self):
        return "RandomPlayer()"

    def select_move(self, game: GameState) -> AIDecision:
        actor = game.current_actor
        placed = game.has_placed[actor]
        moves = game.legal_moves(actor)
        if not moves:
            return AIDecision(chosen=None, require_advance_turn=True, schedule_game_end=not placed)
        move = moves[int(self.rng.integers(len(moves)))]
        return AIDecision(chosen=ChosenMove(
            row=move.row,
            col=move.col,
            is_initial=not placed,
            source_value=int(game.board.values[move.row, move.col]),
        ))


@dataclass
class GameRecord:
    winner: Optional[int]
    reason: str
    moves: int
    snapshot: dict


def play_game(seats: Sequence, grid_size: Optional[int] = None,
              colors: Optional[Sequence[str]] = None,
              max_moves: int = ARENA_CONFIG['max_moves'],
              rules: RulesConfig = RULES) -> GameRecord:
    """
    Play one game, seat ``i`` controlling player ``i``.

    Ends on elimination, on a runaway cascade (draw), when a seat could not
    make its opening placement, or after ``max_moves`` turns (draw).
    """
    colors = list(colors) if colors else select_colors(len(seats))
    game = GameState(grid_size or default_grid_size(len(seats)), colors, rules)

    turns = 0
    while not game.game_over:
        if turns >= max_moves:
            game.end('move_limit')
            break
        turns += 1

        actor = game.current_actor
        decision = seats[actor].select_move(game)
        if decision.schedule_game_end:
            game.end('no_placement')
            break
        if decision.require_advance_turn:
            game.skip_turn()
            continue

        result = game.validate_and_apply_move(decision.chosen.to_move(actor))
        if not result.ok:
            raise ValueError(
                f"{seats[actor]!r} played an illegal move {decision.chosen}: {result.reason.value}"
            )

    return GameRecord(
        winner=game.winner,
        reason=game.ended_reason,
        moves=game.seq,
        snapshot=game.snapshot(),
    )


class Arena:
    """Evaluate named seats against each other over many games."""

    def __init__(self, players: dict, grid_size: Optional[int] = ARENA_CONFIG['grid_size'],
                 max_moves: int = ARENA_CONFIG['max_moves'], rules: RulesConfig = RULES):
        self.players = list(players.items())
        self.grid_size = grid_size
        self.max_moves = max_moves
        self.rules = rules

    def evaluate(self, num_games: int = ARENA_CONFIG['num_games'], verbose: bool = True) -> dict:
        """
        Play ``num_games`` games, rotating the seat order every game.

        Returns: dict with wins per name, draws, end reasons, win_rates
        """
        wins = {name: 0 for name, _ in self.players}
        reasons = {}
        draws = 0

        iterator = tqdm(range(num_games), desc="Arena") if verbose else range(num_games)

        for i in iterator:
            shift = i % len(self.players)
            order = self.players[shift:] + self.players[:shift]
            record = play_game(
                [seat for _, seat in order],
                grid_size=self.grid_size,
                max_moves=self.max_moves,
                rules=self.rules,
            )
            reasons[record.reason] = reasons.get(record.reason, 0) + 1
            if record.winner is None:
                draws += 1
            else:
                wins[order[record.winner][0]] += 1

        return {
            'wins': wins,
            'draws': draws,
            'reasons': reasons,
            'total': num_games,
            'win_rates': {name: count / num_games for name, count in wins.items()},
        }
