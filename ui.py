"""
TicTacToe UI
A graphical interface for playing TicTacToe against the computer, using Tkinter.

Shows:
- The 3x3 board (click a cell to place your O)
- Game status and the winner's mark
- Difficulty level selection
- New game button
"""

import logging
import tkinter as tk
from tkinter import ttk
from PIL import ImageTk
from typing import Callable, Optional

from logic.ai_player import AIPlayer
from logic.config import GameConfig, Difficulty
from logic.errors import MoveError
from logic.game_engine import GameEngine
from logic.game_state import GameListener, GameState, Mark, Turn, Outcome
from logic.scheduler import Scheduler
from sprites import render_mark, winner_banner

logger = logging.getLogger(__name__)


CELL_BG = '#16213e'
WIN_BG = '#665c00'
CELL_SIZE = 96


class TkScheduler(Scheduler):
    """Runs callbacks on the Tk event loop."""

    def __init__(self, root: tk.Misc):
        self.root = root

    def schedule(self, callback: Callable[[], None], delay: float) -> None:
        self.root.after(int(delay * 1000), callback)


class TicTacToeUI(GameListener):
    """
    Main UI class: renders the engine's events and forwards clicks to it.
    """

    def __init__(self, difficulty: Difficulty = Difficulty.NORMAL, rng=None,
                 think_delay: float = GameConfig.AI_THINK_DELAY):
        """Initialize the UI."""
        self.difficulty = difficulty

        # Create UI
        self._create_ui()

        self.engine = GameEngine(
            scheduler=TkScheduler(self.root),
            ai_player=AIPlayer(difficulty.random_move_chance),
            rng=rng,
            think_delay=think_delay,
        )
        self.engine.add_listener(self)
        self.engine.reset()

    def _create_ui(self):
        """Create the Tkinter UI."""
        self.root = tk.Tk()
        self.root.title("TicTacToe")
        self.root.configure(bg='#1a1a2e')
        self.root.resizable(False, False)

        # Configure style
        style = ttk.Style()
        style.theme_use('clam')
        style.configure('TFrame', background='#1a1a2e')
        style.configure('TLabel', background='#1a1a2e', foreground='white', font=('Segoe UI', 11))
        style.configure('Title.TLabel', font=('Segoe UI', 16, 'bold'), foreground='#00d4ff')
        style.configure('Status.TLabel', font=('Segoe UI', 14, 'bold'), foreground='#ffd700')
        style.configure('TButton', font=('Segoe UI', 10, 'bold'))

        main_frame = ttk.Frame(self.root)
        main_frame.pack(fill=tk.BOTH, expand=True, padx=10, pady=10)

        ttk.Label(main_frame, text="🎮 TicTacToe", style='Title.TLabel').pack(pady=(0, 10))

        # Sprites must stay referenced or Tk drops them
        self.sprites = {
            mark: ImageTk.PhotoImage(render_mark(mark, CELL_SIZE), master=self.root)
            for mark in Mark
        }

        board_frame = ttk.Frame(main_frame)
        board_frame.pack(pady=10)

        self.cell_buttons = []
        for index in range(GameConfig.CELL_COUNT):
            row, col = divmod(index, GameConfig.BOARD_SIZE)
            button = tk.Button(
                board_frame,
                image=self.sprites[Mark.EMPTY],
                width=CELL_SIZE,
                height=CELL_SIZE,
                bg=CELL_BG,
                activebackground='#1f2f57',
                relief='ridge',
                borderwidth=2,
                command=lambda i=index: self._on_cell_click(i),
            )
            button.grid(row=row, column=col, padx=2, pady=2)
            self.cell_buttons.append(button)

        # Legend
        legend_frame = ttk.Frame(main_frame)
        legend_frame.pack(pady=5)
        ttk.Label(legend_frame, text="O = You  ", foreground='#10b981').pack(side=tk.LEFT)
        ttk.Label(legend_frame, text="X = Computer", foreground='#f87171').pack(side=tk.LEFT)

        # Game status section
        ttk.Separator(main_frame, orient='horizontal').pack(fill=tk.X, pady=10)

        status_frame = ttk.Frame(main_frame)
        status_frame.pack()
        self.status_label = ttk.Label(status_frame, text="", style='Status.TLabel')
        self.status_label.pack(side=tk.LEFT, padx=5)
        self.result_image: Optional[ImageTk.PhotoImage] = None
        self.result_label = ttk.Label(status_frame)
        self.result_label.pack(side=tk.LEFT)

        self.turn_label = ttk.Label(main_frame, text="Turn: -")
        self.turn_label.pack(pady=5)

        # Difficulty section
        ttk.Separator(main_frame, orient='horizontal').pack(fill=tk.X, pady=10)
        ttk.Label(main_frame, text="⚙️ Difficulty", style='Title.TLabel').pack()

        diff_frame = ttk.Frame(main_frame)
        diff_frame.pack(pady=10)

        self.diff_colors = {
            Difficulty.EASY: "#4ade80",
            Difficulty.MEDIUM: "#fbbf24",
            Difficulty.NORMAL: "#60a5fa",
            Difficulty.HARD: "#f87171",
        }
        self.diff_buttons = {}
        for difficulty, color in self.diff_colors.items():
            selected = difficulty == self.difficulty
            btn = tk.Button(
                diff_frame,
                text=difficulty.name.capitalize(),
                font=('Segoe UI', 10, 'bold'),
                width=8,
                bg=color if selected else '#2d3748',
                fg='black' if selected else 'white',
                activebackground=color,
                command=lambda d=difficulty: self._set_difficulty(d),
            )
            btn.pack(side=tk.LEFT, padx=2)
            self.diff_buttons[difficulty] = btn

        tk.Button(
            main_frame,
            text="🔄 New Game",
            font=('Segoe UI', 11, 'bold'),
            bg='#2d3748',
            fg='white',
            width=26,
            command=self._reset_game,
        ).pack(pady=5)

        tk.Button(
            main_frame,
            text="❌ Quit",
            font=('Segoe UI', 11, 'bold'),
            bg='#7f1d1d',
            fg='white',
            width=26,
            command=self._quit,
        ).pack(pady=5)

        # Bind close event
        self.root.protocol("WM_DELETE_WINDOW", self._quit)

    # ------------------------------------------------------------------
    # User input
    # ------------------------------------------------------------------

    def _on_cell_click(self, index: int):
        """Forward a click to the engine. Illegal clicks are ignored."""
        try:
            self.engine.apply_player_move(index)
        except MoveError as e:
            logger.debug("Ignored click on %d: %s", index, e)

    def _set_difficulty(self, difficulty: Difficulty):
        """Set the AI difficulty level (takes effect on the next AI move)."""
        self.difficulty = difficulty
        self.engine.ai = AIPlayer(difficulty.random_move_chance)

        # Update button colors
        for diff, btn in self.diff_buttons.items():
            if diff == difficulty:
                btn.configure(bg=self.diff_colors[diff], fg='black')
            else:
                btn.configure(bg='#2d3748', fg='white')

        logger.info("Difficulty set to: %s", difficulty.name)

    def _reset_game(self):
        self.engine.reset()

    def _quit(self):
        """Quit the application."""
        logger.info("Quitting...")
        self.root.quit()
        self.root.destroy()

    # ------------------------------------------------------------------
    # Engine events
    # ------------------------------------------------------------------

    def on_cell_changed(self, index: int, mark: Mark) -> None:
        self.cell_buttons[index].configure(image=self.sprites[mark], state='disabled')

    def on_turn_changed(self, turn: Optional[Turn]) -> None:
        player_turn = turn == Turn.PLAYER_TURN
        board = self.engine.board
        for index, button in enumerate(self.cell_buttons):
            empty = board[index] == Mark.EMPTY
            button.configure(state='normal' if player_turn and empty else 'disabled')

        if turn == Turn.PLAYER_TURN:
            self.turn_label.configure(text="Turn: You (O)")
        elif turn == Turn.AI_THINKING:
            self.turn_label.configure(text="Turn: Computer (X) thinking...")
        else:
            self.turn_label.configure(text="Game Over")

    def on_game_ended(self, outcome: Outcome) -> None:
        if outcome == Outcome.DRAW:
            self.status_label.configure(text="A DRAW!!!", foreground='#007dff')
        else:
            self.status_label.configure(text="WIN", foreground='#ffd700')
            for index in self.engine.get_winning_line() or ():
                self.cell_buttons[index].configure(bg=WIN_BG)

        self.result_image = ImageTk.PhotoImage(winner_banner(outcome), master=self.root)
        self.result_label.configure(image=self.result_image)

    def on_game_reset(self, state: GameState) -> None:
        for button in self.cell_buttons:
            button.configure(image=self.sprites[Mark.EMPTY], bg=CELL_BG, state='normal')
        self.status_label.configure(text="")
        self.result_image = None
        self.result_label.configure(image='')

    def run(self):
        """Run the UI main loop."""
        self.root.mainloop()


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="TicTacToe UI")
    parser.add_argument(
        "--difficulty",
        choices=[d.name.lower() for d in Difficulty],
        default=Difficulty.NORMAL.name.lower(),
        help="AI difficulty"
    )

    args = parser.parse_args()

    ui = TicTacToeUI(difficulty=Difficulty[args.difficulty.upper()])
    ui.run()


if __name__ == "__main__":
    main()
