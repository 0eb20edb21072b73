"""
Move validator for TicTacToe.
Validates that a player move follows the rules.
"""

import operator
from typing import Optional, List
from dataclasses import dataclass

from .config import GameConfig
from .errors import (
    MoveError,
    OutOfRangeError,
    CellOccupiedError,
    NotPlayerTurnError,
    GameAlreadyEndedError,
)
from .game_state import GameState, Mark, Turn


@dataclass
class ValidationResult:
    """Result of move validation."""
    is_valid: bool
    error: Optional[MoveError] = None

    @property
    def error_message(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None


class MoveValidator:
    """
    Validates TicTacToe moves.

    Rules:
    1. Game must not be over
    2. It must be the player's turn
    3. Index must be a cell on the board (0-8)
    4. Can only place on empty cells
    """

    def validate_move(self, game_state: GameState, index: int) -> ValidationResult:
        """
        Validate a player move.

        Args:
            game_state: Current game state.
            index: Cell to place the mark on (0-8).

        Returns:
            ValidationResult with is_valid and the error to raise.
        """
        if game_state.is_over:
            return ValidationResult(is_valid=False, error=GameAlreadyEndedError(index))

        if game_state.turn != Turn.PLAYER_TURN:
            return ValidationResult(is_valid=False, error=NotPlayerTurnError(index))

        # Any integer type (int, numpy ints) is a cell index; bool is not
        if isinstance(index, bool):
            return ValidationResult(is_valid=False, error=OutOfRangeError(index))
        try:
            position = operator.index(index)
        except TypeError:
            return ValidationResult(is_valid=False, error=OutOfRangeError(index))
        if not 0 <= position < GameConfig.CELL_COUNT:
            return ValidationResult(is_valid=False, error=OutOfRangeError(index))

        mark = game_state.board[position]
        if mark != Mark.EMPTY:
            return ValidationResult(is_valid=False, error=CellOccupiedError(position, mark))

        return ValidationResult(is_valid=True)

    def get_valid_moves(self, game_state: GameState) -> List[int]:
        """
        Get all legal cells for the player.

        Args:
            game_state: Current game state.

        Returns:
            List of cell indices, empty unless it is the player's turn.
        """
        if game_state.is_over or game_state.turn != Turn.PLAYER_TURN:
            return []
        return game_state.empty_cells()
