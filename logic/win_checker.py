"""
Win checker for TicTacToe.
Checks if a mark has completed a line or if the board is full.
"""

from typing import Optional, Sequence, Tuple

from .game_state import Mark, Outcome


# All possible winning lines (cell indices, row-major)
WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    # Rows
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    # Columns
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    # Diagonals
    (0, 4, 8),
    (2, 4, 6),
)


class WinChecker:
    """
    Checks for win conditions in TicTacToe.

    Win condition: 3 identical marks in a row
    (horizontally, vertically, or diagonally).
    Works on any sequence of 9 marks and never modifies it.
    """

    WINNING_LINES = WINNING_LINES

    def check_winner(self, board: Sequence[Mark]) -> Optional[Mark]:
        """
        Check if there's a winner.

        Args:
            board: The 9 cells.

        Returns:
            The winning Mark, or None if no line is complete.
        """
        line = self.get_winning_line(board)
        if line is None:
            return None
        return board[line[0]]

    def get_winning_line(self, board: Sequence[Mark]) -> Optional[Tuple[int, int, int]]:
        """
        Get the first completed line, if there is one.

        Args:
            board: The 9 cells.

        Returns:
            The winning line as an index triple, or None.
        """
        for a, b, c in self.WINNING_LINES:
            if board[a] != Mark.EMPTY and board[a] == board[b] == board[c]:
                return (a, b, c)
        return None

    def is_full(self, board: Sequence[Mark]) -> bool:
        """True when no cell is empty."""
        return all(mark != Mark.EMPTY for mark in board)

    def evaluate(self, board: Sequence[Mark]) -> Outcome:
        """
        Classify the board.

        A completed line wins even on a full board; a full board with no
        line is a draw.
        """
        winner = self.check_winner(board)
        if winner is not None:
            return Outcome.from_winner(winner)
        if self.is_full(board):
            return Outcome.DRAW
        return Outcome.ONGOING
