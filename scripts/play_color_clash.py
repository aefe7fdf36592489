#!/usr/bin/env python3
"""
Play Color Clash in the terminal.

Hot-seat for every human seat; seats listed in --ai are played by the
coalition search (practice mode).

    python scripts/play_color_clash.py --players 2 --ai 1
"""
import argparse
import logging
import sys
from pathlib import Path

import numpy as np
from rich.console import Console
from rich.table import Table
from rich.text import Text

# Add src to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / 'src'))

from color_clash.config import AI_CONFIG, AIConfig, default_grid_size
from color_clash.engine.ai import SearchState, choose_move
from color_clash.game.palette import COLOR_HEX, select_colors
from color_clash.game.rules import Move
from color_clash.game.state import GameState

console = Console()


def render_board(game: GameState):
    table = Table(show_header=True, header_style="bold", show_lines=False)
    table.add_column("")
    for col in range(game.grid_size):
        table.add_column(str(col), justify="center")

    for row in range(game.grid_size):
        cells = []
        for col in range(game.grid_size):
            cell = game.board.cell(row, col)
            if cell.owner is None:
                blocked = game.initial_phase and (row, col) in game.exclusion_zone
                cells.append(Text("x" if blocked else "·", style="dim"))
            else:
                color = COLOR_HEX[game.colors[cell.owner]]
                cells.append(Text(str(cell.value), style=f"bold {color}"))
        table.add_row(str(row), *cells)
    console.print(table)


def read_move(game: GameState):
    """Prompt until the current player enters 'row col'; None to quit."""
    actor = game.current_actor
    color = game.colors[actor]
    while True:
        raw = console.input(f"[{COLOR_HEX[color]}]{color}[/] row col (q to quit): ").strip()
        if raw.lower() == 'q':
            return None
        try:
            row, col = (int(x) for x in raw.split())
        except ValueError:
            console.print("❌ Enter two numbers, e.g. '0 2'")
            continue
        return Move(actor, row, col)


def main():
    parser = argparse.ArgumentParser(description="Play Color Clash")
    parser.add_argument('--players', type=int, default=2)
    parser.add_argument('--size', type=int, default=None)
    parser.add_argument('--ai', type=int, nargs='*', default=[], help="Seats played by the AI")
    parser.add_argument('--ai-depth', type=int, default=AI_CONFIG['ai_depth'])
    parser.add_argument('--start-color', type=str, default='green')
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--debug', action='store_true')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)

    colors = select_colors(args.players, args.start_color)
    game = GameState(args.size or default_grid_size(args.players), colors)
    ai_config = AIConfig(ai_depth=args.ai_depth, debug=args.debug)
    rng = np.random.default_rng(args.seed)

    console.rule("🎮 Color Clash")
    console.print(f"Players: {', '.join(colors)} | AI seats: {args.ai or 'none'}")

    while not game.game_over:
        render_board(game)
        actor = game.current_actor

        if actor in args.ai:
            console.print(f"🤖 {colors[actor]} is thinking...")
            decision = choose_move(SearchState.from_game(game), ai_config, rng)
            if decision.schedule_game_end:
                console.print(f"❌ {colors[actor]} has nowhere to place, ending the game")
                game.end('no_placement')
                break
            if decision.require_advance_turn:
                game.skip_turn()
                continue
            move = decision.chosen.to_move(actor)
            console.print(f"🤖 {colors[actor]} plays {move.row} {move.col}")
            if decision.debug_info:
                info = decision.debug_info
                console.print(
                    f"   depth {info['effective_depth']} ({info['stop_reason']}), "
                    f"{info['branches']} branches, {info['elapsed_ms']:.0f} ms"
                )
        else:
            move = read_move(game)
            if move is None:
                console.print("👋 Thanks for playing!")
                return

        result = game.validate_and_apply_move(move)
        if not result.ok:
            console.print(f"❌ Illegal move: {result.reason.value}")
        elif result.explosion_count:
            console.print(f"💥 {result.explosion_count} explosions")

    render_board(game)
    if game.winner is not None:
        console.print(f"🎉 {colors[game.winner]} wins after {game.seq} moves!")
    else:
        console.print(f"🤝 Game over: {game.ended_reason}")


if __name__ == '__main__':
    main()
