"""
Configuration for Color Clash games and the search AI.
"""

from dataclasses import dataclass

from color_clash.errors import ConfigurationError


# Game Configuration
GAME_CONFIG = {
    'max_cell_value': 5,                # Cap for a cell (dots)
    'initial_placement_value': 5,       # Value of the first orb a player places
    'cell_explode_threshold': 4,        # Cells at/above this value explode
    'min_grid_size': 3,
    'min_players': 2,
    'max_players': 8,                   # One per palette entry
    'grid_size_offset': 3,              # Default grid size = players + offset
    'runaway_waves_per_row': 3,         # Cascade bound = waves_per_row * size
}

# AI Configuration
AI_CONFIG = {
    'ai_depth': 3,                      # Budget = branch_factor ** ai_depth visits
    'branch_factor': 5,
    'max_search_depth': 32,             # Hard cap for iterative deepening
    'debug': False,                     # Attach ranked candidates to decisions
}

# Arena Configuration
ARENA_CONFIG = {
    'num_games': 20,
    'max_moves': 400,                   # Declare a draw after this many moves
    'grid_size': None,                  # None -> default_grid_size(players)
    'seed': 42,
}


@dataclass(frozen=True)
class RulesConfig:
    max_cell_value: int = GAME_CONFIG['max_cell_value']
    initial_placement_value: int = GAME_CONFIG['initial_placement_value']
    cell_explode_threshold: int = GAME_CONFIG['cell_explode_threshold']
    runaway_waves_per_row: int = GAME_CONFIG['runaway_waves_per_row']

    def validate(self) -> 'RulesConfig':
        if self.cell_explode_threshold < 1:
            raise ConfigurationError(
                f"cell_explode_threshold must be positive, got {self.cell_explode_threshold}"
            )
        if self.max_cell_value < self.cell_explode_threshold:
            raise ConfigurationError(
                f"max_cell_value ({self.max_cell_value}) is below the explode "
                f"threshold ({self.cell_explode_threshold})"
            )
        if not 1 <= self.initial_placement_value <= self.max_cell_value:
            raise ConfigurationError(
                f"initial_placement_value must be in [1, {self.max_cell_value}], "
                f"got {self.initial_placement_value}"
            )
        if self.runaway_waves_per_row < 1:
            raise ConfigurationError(
                f"runaway_waves_per_row must be >= 1, got {self.runaway_waves_per_row}"
            )
        return self

    def max_waves(self, grid_size: int) -> int:
        """Number of cascade waves after which a chain counts as runaway."""
        return self.runaway_waves_per_row * grid_size


@dataclass(frozen=True)
class AIConfig:
    """Rules constants plus the search budget used by ``choose_move``."""
    max_cell_value: int = GAME_CONFIG['max_cell_value']
    initial_placement_value: int = GAME_CONFIG['initial_placement_value']
    cell_explode_threshold: int = GAME_CONFIG['cell_explode_threshold']
    runaway_waves_per_row: int = GAME_CONFIG['runaway_waves_per_row']
    ai_depth: int = AI_CONFIG['ai_depth']
    max_search_depth: int = AI_CONFIG['max_search_depth']
    debug: bool = AI_CONFIG['debug']

    @property
    def rules(self) -> RulesConfig:
        return RulesConfig(
            max_cell_value=self.max_cell_value,
            initial_placement_value=self.initial_placement_value,
            cell_explode_threshold=self.cell_explode_threshold,
            runaway_waves_per_row=self.runaway_waves_per_row,
        )

    @property
    def branch_budget(self) -> int:
        return AI_CONFIG['branch_factor'] ** self.ai_depth

    def validate(self) -> 'AIConfig':
        self.rules.validate()
        if self.ai_depth < 1:
            raise ConfigurationError(f"ai_depth must be >= 1, got {self.ai_depth}")
        if self.max_search_depth < 1:
            raise ConfigurationError(
                f"max_search_depth must be >= 1, got {self.max_search_depth}"
            )
        return self


def default_grid_size(player_count: int) -> int:
    """Grid size offered for a new game with ``player_count`` players."""
    return max(GAME_CONFIG['min_grid_size'], player_count + GAME_CONFIG['grid_size_offset'])


RULES = RulesConfig()
