#!/usr/bin/env python3
"""
Evaluate the search AI against random play (or a shallower search).

    python scripts/run_arena.py --games 20 --depth 3 --opponent random
"""
import argparse
import json
import sys
from pathlib import Path

import numpy as np

# Add src to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / 'src'))

from color_clash.arena import Arena, RandomPlayer, SearchPlayer
from color_clash.config import AI_CONFIG, ARENA_CONFIG, AIConfig


def main():
    ap = argparse.ArgumentParser(description="Color Clash AI arena")
    ap.add_argument('--games', type=int, default=ARENA_CONFIG['num_games'])
    ap.add_argument('--depth', type=int, default=AI_CONFIG['ai_depth'])
    ap.add_argument('--opponent', choices=['random', 'search'], default='random')
    ap.add_argument('--opponent-depth', type=int, default=1)
    ap.add_argument('--size', type=int, default=ARENA_CONFIG['grid_size'])
    ap.add_argument('--max-moves', type=int, default=ARENA_CONFIG['max_moves'])
    ap.add_argument('--seed', type=int, default=ARENA_CONFIG['seed'])
    args = ap.parse_args()

    rng = np.random.default_rng(args.seed)
    players = {f'search_d{args.depth}': SearchPlayer(AIConfig(ai_depth=args.depth), rng)}
    if args.opponent == 'random':
        players['random'] = RandomPlayer(rng)
    else:
        players[f'opponent_d{args.opponent_depth}'] = SearchPlayer(
            AIConfig(ai_depth=args.opponent_depth), rng
        )

    print("=" * 60)
    print(f"🏟️  Arena: {' vs '.join(players)} ({args.games} games)")
    print("=" * 60)

    arena = Arena(players, grid_size=args.size, max_moves=args.max_moves)
    results = arena.evaluate(num_games=args.games)

    print(json.dumps(results, indent=2))


if __name__ == '__main__':
    main()
