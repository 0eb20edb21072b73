"""
Game configuration for TicTacToe.
All the tunable constants for the engine, the AI and the views.
"""

from enum import Enum


class GameConfig:
    """
    Configuration class for game settings.
    Change these values to tune pacing and difficulty.
    """

    # ==================== BOARD SETTINGS ====================
    # TicTacToe is a 3x3 grid
    BOARD_SIZE = 3
    CELL_COUNT = BOARD_SIZE * BOARD_SIZE  # 9 cells, row-major

    # ==================== AI SETTINGS ====================
    # Pause between the player's move and the AI's reply (seconds)
    AI_THINK_DELAY = 0.15

    # Chance that the AI plays a random empty cell instead of searching
    RANDOM_MOVE_CHANCE = 0.3

    # Minimax scores: win = WIN_SCORE - depth, loss = depth - WIN_SCORE
    WIN_SCORE = 10
    # Starting accumulator for max/min, beyond any reachable score
    SCORE_SENTINEL = 999

    # ==================== LOGGING SETTINGS ====================
    LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class Difficulty(Enum):
    """AI difficulty presets (value = chance of a random move)."""
    EASY = 1.0      # Random moves
    MEDIUM = 0.5    # Coin flip between random and minimax
    NORMAL = 0.3    # Default tuning
    HARD = 0.0      # Full minimax, never loses

    @property
    def random_move_chance(self) -> float:
        return self.value
