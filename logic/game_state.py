"""
Game state for TicTacToe.
Defines the board marks, turns, outcomes and the immutable state snapshot
handed to the views, plus the listener interface the engine notifies.
"""

from enum import Enum
from typing import Optional, List, Tuple
from dataclasses import dataclass, field

from .config import GameConfig


class Mark(Enum):
    """The occupant of a cell."""
    EMPTY = "empty"
    PLAYER = "player"
    AI = "ai"

    @property
    def symbol(self) -> str:
        """Display symbol: the human plays O, the computer plays X."""
        return {"empty": " ", "player": "O", "ai": "X"}[self.value]

    def opposite(self) -> "Mark":
        """Get the opposing mark."""
        if self == Mark.EMPTY:
            raise ValueError("EMPTY has no opposite")
        return Mark.AI if self == Mark.PLAYER else Mark.PLAYER


class Turn(Enum):
    """Who may cause the next mutation."""
    PLAYER_TURN = "player_turn"
    AI_THINKING = "ai_thinking"


class Outcome(Enum):
    """Result classification of a game."""
    ONGOING = "ongoing"
    PLAYER_WIN = "player_win"
    AI_WIN = "ai_win"
    DRAW = "draw"

    @property
    def winner(self) -> Optional[Mark]:
        """The winning mark, or None for a draw or an ongoing game."""
        if self == Outcome.PLAYER_WIN:
            return Mark.PLAYER
        if self == Outcome.AI_WIN:
            return Mark.AI
        return None

    @classmethod
    def from_winner(cls, mark: Mark) -> "Outcome":
        if mark == Mark.PLAYER:
            return cls.PLAYER_WIN
        if mark == Mark.AI:
            return cls.AI_WIN
        raise ValueError(f"{mark} cannot win")


Board = Tuple[Mark, ...]


def empty_board() -> Board:
    return (Mark.EMPTY,) * GameConfig.CELL_COUNT


@dataclass(frozen=True)
class GameState:
    """
    Snapshot of a TicTacToe game.

    Tracks:
    - The 9 cells, row-major (index 0 is top-left, 8 is bottom-right)
    - Whose turn it is (None once the game has ended)
    - The outcome (ONGOING until someone wins or the board fills up)
    """

    board: Board = field(default_factory=empty_board)
    turn: Optional[Turn] = Turn.PLAYER_TURN
    outcome: Outcome = Outcome.ONGOING

    @property
    def is_over(self) -> bool:
        return self.outcome != Outcome.ONGOING

    def empty_cells(self) -> List[int]:
        """Indices of all empty cells, ascending."""
        return [i for i, mark in enumerate(self.board) if mark == Mark.EMPTY]

    def render(self) -> str:
        """Text version of the board for the console."""
        size = GameConfig.BOARD_SIZE
        rows = []
        for row in range(size):
            cells = self.board[row * size:(row + 1) * size]
            rows.append(" " + " | ".join(mark.symbol for mark in cells))
        return "\n---+---+---\n".join(rows)


class GameListener:
    """
    Receives game events from the engine.

    Views subclass this and override what they need; every method is a
    no-op by default.
    """

    def on_cell_changed(self, index: int, mark: Mark) -> None:
        """A cell received a mark."""

    def on_turn_changed(self, turn: Optional[Turn]) -> None:
        """The state machine moved; None means the game ended."""

    def on_game_ended(self, outcome: Outcome) -> None:
        """The game finished. Sent exactly once per game."""

    def on_game_reset(self, state: GameState) -> None:
        """A new game started."""
