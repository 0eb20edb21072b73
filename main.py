"""
Main entry point for TicTacToe.

Launches the Tkinter UI by default, or a console game with --no-ui.
The console game prints the board and reads cell numbers:

     0 | 1 | 2
    ---+---+---
     3 | 4 | 5
    ---+---+---
     6 | 7 | 8
"""

import argparse
import logging
import sys
import time
from typing import Callable, Optional

import numpy as np

from logic.ai_player import AIPlayer
from logic.config import GameConfig, Difficulty
from logic.errors import MoveError
from logic.game_engine import GameEngine
from logic.game_state import GameListener, Mark, Turn, Outcome
from logic.scheduler import ManualScheduler

logger = logging.getLogger(__name__)


class ConsoleGame(GameListener):
    """
    Console version of the game.

    Game flow:
    1. Human (O) types a cell number
    2. Computer (X) "thinks" for a moment, then answers
    3. Repeat until someone wins or it's a draw
    """

    def __init__(
        self,
        difficulty: Difficulty = Difficulty.NORMAL,
        seed: Optional[int] = None,
        think_delay: float = GameConfig.AI_THINK_DELAY,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
        sleep: Optional[Callable[[float], None]] = time.sleep,
    ):
        """
        Initialize the console game.

        Args:
            difficulty: AI difficulty preset.
            seed: Seed for the AI's random choices (None = unpredictable).
            think_delay: Seconds the computer pauses before answering.
            input_func: Reads a line from the player.
            output_func: Writes a line to the player.
            sleep: Waits out the thinking pause (None = no wait).
        """
        self.input = input_func
        self.output = output_func
        self.sleep = sleep
        self.scheduler = ManualScheduler()
        self.engine = GameEngine(
            listener=self,
            scheduler=self.scheduler,
            ai_player=AIPlayer(difficulty.random_move_chance),
            rng=np.random.default_rng(seed),
            think_delay=think_delay,
        )
        self.results = {outcome: 0 for outcome in Outcome if outcome != Outcome.ONGOING}

    def on_cell_changed(self, index: int, mark: Mark) -> None:
        if mark == Mark.AI:
            self.output(f">>> Computer plays {index}")

    def on_game_ended(self, outcome: Outcome) -> None:
        self.results[outcome] += 1

    def play(self) -> None:
        """Run games until the player quits."""
        self.output("Index map:\n" + self._index_map())

        while True:
            state = self.engine.state

            if state.turn == Turn.AI_THINKING:
                self.output("\n>>> Computer is thinking...")
                if not self.scheduler.run_pending(self.sleep):
                    self.engine.request_ai_move()
                continue

            self.output("\n" + state.render())

            if state.is_over:
                self._show_result(state.outcome)
                answer = self.input("Play again? [y/N]: ").strip().lower()
                if answer not in ("y", "yes"):
                    break
                self.engine.reset()
                continue

            command = self.input("Your move [0-8, r=reset, q=quit]: ").strip().lower()
            if command == "q":
                break
            if command == "r":
                self.scheduler.clear()
                self.engine.reset()
                continue

            try:
                index = int(command)
            except ValueError:
                self.output("Please type a number 0..8.")
                continue

            try:
                self.engine.apply_player_move(index)
            except MoveError as e:
                self.output(f"Illegal move: {e}")

        self.output(self._score_line())

    def _show_result(self, outcome: Outcome):
        """Show the final game result."""
        self.output("\n" + "=" * 40)
        if outcome == Outcome.PLAYER_WIN:
            self.output("   You win! Congratulations!")
        elif outcome == Outcome.AI_WIN:
            self.output("   Computer wins! Better luck next time!")
        else:
            self.output("   It's a draw! Good game!")
        self.output("=" * 40)

    def _score_line(self) -> str:
        return (
            f"You: {self.results[Outcome.PLAYER_WIN]}  "
            f"Computer: {self.results[Outcome.AI_WIN]}  "
            f"Draws: {self.results[Outcome.DRAW]}"
        )

    @staticmethod
    def _index_map() -> str:
        size = GameConfig.BOARD_SIZE
        rows = [
            " " + " | ".join(str(row * size + col) for col in range(size))
            for row in range(size)
        ]
        return "\n---+---+---\n".join(rows)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="TicTacToe vs. the computer")
    parser.add_argument(
        "--no-ui",
        action="store_true",
        help="Run without UI (console mode)"
    )
    parser.add_argument(
        "--difficulty",
        choices=[d.name.lower() for d in Difficulty],
        default=Difficulty.NORMAL.name.lower(),
        help="AI difficulty (default: normal)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the AI's random moves"
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=GameConfig.AI_THINK_DELAY,
        help="Seconds the computer 'thinks' before moving"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log game events"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log AI search details"
    )
    return parser.parse_args(argv)


def configure_logging(args) -> None:
    if args.debug:
        level = logging.DEBUG
    elif args.verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=GameConfig.LOG_FORMAT)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    configure_logging(args)

    if args.delay < 0:
        print("ERROR: --delay must not be negative")
        return 2

    difficulty = Difficulty[args.difficulty.upper()]
    logger.info("Difficulty %s, seed %s, delay %.2fs", difficulty.name, args.seed, args.delay)

    # Launch UI by default
    if not args.no_ui:
        from ui import TicTacToeUI
        ui = TicTacToeUI(
            difficulty=difficulty,
            rng=np.random.default_rng(args.seed),
            think_delay=args.delay,
        )
        ui.run()
        return 0

    print("\n" + "=" * 40)
    print("   TicTacToe - You (O) vs. Computer (X)")
    print(f"   Difficulty: {difficulty.name.capitalize()}")
    print("=" * 40 + "\n")

    game = ConsoleGame(difficulty=difficulty, seed=args.seed, think_delay=args.delay)
    try:
        game.play()
    except (KeyboardInterrupt, EOFError):
        print("\n\nGame interrupted by user.")
    finally:
        print("Goodbye!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
