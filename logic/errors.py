"""
Move errors for TicTacToe.

All of these are recoverable: the views catch them at the boundary and
either ignore the click or ask for another move.
"""

from typing import Optional


class MoveError(Exception):
    """Base class for a rejected player move."""

    def __init__(self, message: str, index: Optional[int] = None):
        super().__init__(message)
        self.index = index


class OutOfRangeError(MoveError):
    """The cell index is outside 0-8."""

    def __init__(self, index):
        super().__init__(f"Invalid position {index!r}. Must be 0-8.", index)


class CellOccupiedError(MoveError):
    """The target cell already holds a mark."""

    def __init__(self, index: int, mark):
        super().__init__(f"Cell {index} is already occupied by {mark.name}", index)
        self.mark = mark


class NotPlayerTurnError(MoveError):
    """A move was attempted while it is not the player's turn."""

    def __init__(self, index: Optional[int] = None, message: str = "It's not the player's turn!"):
        super().__init__(message, index)


class GameAlreadyEndedError(NotPlayerTurnError):
    """A move was attempted after the game ended."""

    def __init__(self, index: Optional[int] = None):
        super().__init__(index, "Game is already over!")
