"""
AI player for TicTacToe.
Uses the Minimax algorithm to choose the best move, blended with an
occasional random move so the game stays beatable.
"""

import logging
from typing import List, Sequence

from .config import GameConfig
from .game_state import Mark
from .win_checker import WinChecker

logger = logging.getLogger(__name__)


class AIPlayer:
    """
    An AI that plays TicTacToe using the Minimax algorithm.

    With probability `random_move_chance` it plays a uniformly random
    empty cell; otherwise it searches the full game tree. With a chance of
    0 it always plays optimally and never loses.
    """

    def __init__(self, random_move_chance: float = GameConfig.RANDOM_MOVE_CHANCE):
        """
        Initialize the AI player.

        Args:
            random_move_chance: Probability of a random move (0.0 - 1.0).
        """
        if not 0.0 <= random_move_chance <= 1.0:
            raise ValueError(f"random_move_chance must be in [0, 1], got {random_move_chance}")
        self.random_move_chance = random_move_chance
        self.win_checker = WinChecker()

        # Keep track of how many positions we've evaluated (for debugging)
        self.moves_evaluated = 0

    def choose_move(self, board: Sequence[Mark], rng) -> int:
        """
        Pick the cell for the AI's next mark.

        Args:
            board: The 9 cells. Must have at least one empty cell and no
                completed line.
            rng: Source of uniform floats in [0, 1) via ``rng.random()``.

        Returns:
            Index of the chosen cell.
        """
        empties = [i for i, mark in enumerate(board) if mark == Mark.EMPTY]
        assert empties, "choose_move called on a full board"
        assert self.win_checker.check_winner(board) is None, "choose_move called on a finished game"

        self.moves_evaluated = 0

        # The random pick is always drawn first so seeded games replay exactly
        move = empties[int(rng.random() * len(empties))]
        if rng.random() >= 1.0 - self.random_move_chance:
            logger.debug("AI plays random move %d", move)
            return move

        cells: List[Mark] = list(board)
        best_score = -GameConfig.SCORE_SENTINEL
        for index in empties:
            cells[index] = Mark.AI
            score = self.minimax(cells, depth=0, maximizing=False)
            cells[index] = Mark.EMPTY

            # Strict > keeps the lowest index on ties
            if score > best_score:
                best_score = score
                move = index

        logger.debug(
            "AI evaluated %d positions. Best move: %d (score: %d)",
            self.moves_evaluated, move, best_score,
        )
        return move

    def minimax(self, cells: List[Mark], depth: int, maximizing: bool) -> int:
        """
        Score a position by exhaustive search.

        The board is modified in place while searching and restored
        before returning.

        Args:
            cells: Mutable list of the 9 cells.
            depth: Plies searched so far.
            maximizing: True if the AI moves next.

        Returns:
            10 - depth for an AI win, depth - 10 for a player win, 0 for a draw.
        """
        self.moves_evaluated += 1

        winner = self.win_checker.check_winner(cells)
        if winner == Mark.AI:
            return GameConfig.WIN_SCORE - depth
        if winner == Mark.PLAYER:
            return depth - GameConfig.WIN_SCORE
        if self.win_checker.is_full(cells):
            return 0

        if maximizing:
            best = -GameConfig.SCORE_SENTINEL
            for index in range(len(cells)):
                if cells[index] != Mark.EMPTY:
                    continue
                cells[index] = Mark.AI
                best = max(best, self.minimax(cells, depth + 1, False))
                cells[index] = Mark.EMPTY
        else:
            best = GameConfig.SCORE_SENTINEL
            for index in range(len(cells)):
                if cells[index] != Mark.EMPTY:
                    continue
                cells[index] = Mark.PLAYER
                best = min(best, self.minimax(cells, depth + 1, True))
                cells[index] = Mark.EMPTY
        return best
