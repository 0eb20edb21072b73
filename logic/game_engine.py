"""
Game engine for TicTacToe.
Owns the board and the turn state machine, and drives every mutation.

Game flow:
1. Player places an O (apply_player_move)
2. Engine checks for a win or draw
3. Engine asks the scheduler to call back after a short "thinking" pause
4. AI places an X (request_ai_move), engine checks again
5. Repeat until someone wins or the board is full
"""

import functools
import logging
import operator
from typing import List, Optional, Tuple

import numpy as np

from .ai_player import AIPlayer
from .config import GameConfig
from .game_state import GameState, GameListener, Mark, Turn, Outcome, Board, empty_board
from .move_validator import MoveValidator
from .scheduler import Scheduler, ImmediateScheduler
from .win_checker import WinChecker

logger = logging.getLogger(__name__)


class GameEngine:
    """
    Human vs. computer TicTacToe state machine.

    States: PLAYER_TURN (initial), AI_THINKING, and Ended once the
    outcome is no longer ONGOING. Only apply_player_move and reset are
    meant to be called by a view; request_ai_move is called through the
    scheduler.
    """

    def __init__(
        self,
        listener: Optional[GameListener] = None,
        scheduler: Optional[Scheduler] = None,
        ai_player: Optional[AIPlayer] = None,
        rng=None,
        think_delay: float = GameConfig.AI_THINK_DELAY,
    ):
        """
        Initialize the engine and start a new game.

        Args:
            listener: Optional view to notify of game events.
            scheduler: Runs the delayed AI move (default: immediately).
            ai_player: The computer opponent (default: NORMAL tuning).
            rng: Randomness for the AI; anything with ``random()``
                (default: a fresh numpy Generator).
            think_delay: Seconds between the player's move and the AI's.
        """
        self.scheduler = scheduler if scheduler is not None else ImmediateScheduler()
        self.ai = ai_player if ai_player is not None else AIPlayer()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.think_delay = think_delay
        self.validator = MoveValidator()
        self.win_checker = WinChecker()

        self._listeners: List[GameListener] = []
        if listener is not None:
            self._listeners.append(listener)

        self._board: List[Mark] = list(empty_board())
        self._turn: Optional[Turn] = Turn.PLAYER_TURN
        self._outcome = Outcome.ONGOING
        self._generation = 0

        self.reset()

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: GameListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: GameListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, events: List[Tuple[str, tuple]]) -> None:
        """
        Send events to every listener.

        A failing listener does not stop the others; the first error is
        re-raised once everyone has been notified.
        """
        error: Optional[Exception] = None
        for event, args in events:
            for listener in list(self._listeners):
                try:
                    getattr(listener, event)(*args)
                except Exception as e:
                    logger.exception("Listener %r failed on %s", listener, event)
                    if error is None:
                        error = e
        if error is not None:
            raise error

    # ------------------------------------------------------------------
    # Read-only view of the game
    # ------------------------------------------------------------------

    @property
    def state(self) -> GameState:
        """Immutable snapshot of the current game."""
        return GameState(board=tuple(self._board), turn=self._turn, outcome=self._outcome)

    @property
    def board(self) -> Board:
        return tuple(self._board)

    @property
    def turn(self) -> Optional[Turn]:
        return self._turn

    @property
    def outcome(self) -> Outcome:
        return self._outcome

    @property
    def is_over(self) -> bool:
        return self._outcome != Outcome.ONGOING

    @property
    def generation(self) -> int:
        """Bumped on every reset and every scheduled AI move."""
        return self._generation

    def is_legal(self, index: int) -> bool:
        """True if apply_player_move(index) would succeed."""
        return self.validator.validate_move(self.state, index).is_valid

    def get_winning_line(self) -> Optional[Tuple[int, int, int]]:
        return self.win_checker.get_winning_line(self._board)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Start a new game. Any pending AI move is cancelled."""
        self._generation += 1
        self._board = list(empty_board())
        self._turn = Turn.PLAYER_TURN
        self._outcome = Outcome.ONGOING

        logger.info("New game (generation %d)", self._generation)
        self._notify([
            ("on_game_reset", (self.state,)),
            ("on_turn_changed", (self._turn,)),
        ])

    def apply_player_move(self, index: int) -> None:
        """
        Place the player's mark.

        Args:
            index: Cell index (0-8); any integer type is accepted.

        Raises:
            GameAlreadyEndedError: The game is over.
            NotPlayerTurnError: The AI is thinking.
            OutOfRangeError: Index is not 0-8.
            CellOccupiedError: The cell already holds a mark.
        """
        result = self.validator.validate_move(self.state, index)
        if not result.is_valid:
            logger.debug("Rejected move %r: %s", index, result.error_message)
            raise result.error

        index = operator.index(index)
        logger.info("Player plays %d", index)
        events = self._commit(index, Mark.PLAYER, Turn.AI_THINKING)

        callback = None
        if not self.is_over:
            self._generation += 1
            callback = functools.partial(self._on_think_timer, self._generation)

        # The AI move is scheduled even if a listener raises
        try:
            self._notify(events)
        finally:
            if callback is not None:
                self.scheduler.schedule(callback, self.think_delay)

    def request_ai_move(self) -> Optional[int]:
        """
        Let the AI place its mark.

        Does nothing unless the engine is waiting for the AI, so stale or
        duplicate callbacks are harmless.

        Returns:
            The chosen cell, or None if nothing happened.
        """
        if self._turn != Turn.AI_THINKING or self.is_over:
            logger.debug("Ignoring AI move request in state %s", self._turn)
            return None

        move = self.ai.choose_move(tuple(self._board), self.rng)
        logger.info("AI plays %d", move)
        self._notify(self._commit(move, Mark.AI, Turn.PLAYER_TURN))
        return move

    def _on_think_timer(self, generation: int) -> None:
        if generation != self._generation:
            logger.debug(
                "Dropping stale AI callback (generation %d, current %d)",
                generation, self._generation,
            )
            return
        self.request_ai_move()

    def _commit(self, index: int, mark: Mark, next_turn: Turn) -> List[Tuple[str, tuple]]:
        """
        Place a mark and settle turn and outcome.

        Listeners are not called here; the returned events describe the
        change and are sent once the state is consistent.
        """
        assert self._board[index] == Mark.EMPTY, f"cell {index} is not empty"
        self._board[index] = mark
        events = [("on_cell_changed", (index, mark))]

        outcome = self.win_checker.evaluate(self._board)
        if outcome == Outcome.ONGOING:
            self._turn = next_turn
            events.append(("on_turn_changed", (next_turn,)))
            return events

        self._outcome = outcome
        self._turn = None
        logger.info("Game over: %s", outcome.name)
        events.append(("on_turn_changed", (None,)))
        events.append(("on_game_ended", (outcome,)))
        return events
