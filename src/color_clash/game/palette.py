"""
Player palette: the ordered color keys a game can assign to its players.

Cells store player indices; the palette of a game maps index -> color key.
"""

from typing import Sequence

from color_clash.config import GAME_CONFIG
from color_clash.errors import ConfigurationError


# Ordered player color keys (cycled from the starting color)
PLAYER_COLORS = ('green', 'red', 'blue', 'yellow', 'magenta', 'cyan', 'orange', 'purple')

# Strong display colors for each key
COLOR_HEX = {
    'red': '#d55f5f',
    'orange': '#d5a35f',
    'yellow': '#d5d35f',
    'green': '#a3d55f',
    'cyan': '#5fd5d3',
    'blue': '#5f95d5',
    'purple': '#8f5fd5',
    'magenta': '#d35fd3',
}

DEFAULT_START_COLOR = 'green'


def select_colors(count: int, start_color: str = DEFAULT_START_COLOR) -> list[str]:
    """
    Pick ``count`` colors rotating through PLAYER_COLORS from ``start_color``.

    Count is clamped to [1, len(PLAYER_COLORS)]; an unknown start color falls
    back to the first entry.
    """
    n = len(PLAYER_COLORS)
    start = PLAYER_COLORS.index(start_color) if start_color in PLAYER_COLORS else 0
    count = max(1, min(count, n))
    return [PLAYER_COLORS[(start + i) % n] for i in range(count)]


def validate_palette(colors: Sequence[str]) -> list[str]:
    colors = list(colors)
    if not GAME_CONFIG['min_players'] <= len(colors) <= GAME_CONFIG['max_players']:
        raise ConfigurationError(
            f"palette must hold {GAME_CONFIG['min_players']}-{GAME_CONFIG['max_players']} "
            f"colors, got {len(colors)}"
        )
    unknown = [c for c in colors if c not in PLAYER_COLORS]
    if unknown:
        raise ConfigurationError(f"unknown palette colors: {unknown}")
    if len(set(colors)) != len(colors):
        raise ConfigurationError(f"duplicate palette colors: {colors}")
    return colors
