"""
Logic module for TicTacToe.
Handles game state, rules, the turn state machine, and the AI opponent.
"""

__version__ = "1.0.0"

from .config import GameConfig, Difficulty
from .errors import (
    MoveError,
    OutOfRangeError,
    CellOccupiedError,
    NotPlayerTurnError,
    GameAlreadyEndedError,
)
from .game_state import GameState, GameListener, Mark, Turn, Outcome
from .move_validator import MoveValidator, ValidationResult
from .win_checker import WinChecker, WINNING_LINES
from .ai_player import AIPlayer
from .scheduler import Scheduler, ImmediateScheduler, ManualScheduler
from .game_engine import GameEngine
