"""
Tests for the game engine state machine.
"""

import random

import numpy as np
import pytest

from logic.ai_player import AIPlayer
from logic.errors import (
    MoveError,
    OutOfRangeError,
    CellOccupiedError,
    NotPlayerTurnError,
    GameAlreadyEndedError,
)
from logic.game_engine import GameEngine
from logic.game_state import GameListener, Mark, Turn, Outcome
from logic.scheduler import ManualScheduler

E, P, A = Mark.EMPTY, Mark.PLAYER, Mark.AI


class RecordingListener(GameListener):
    """Keeps every event in order."""

    def __init__(self):
        self.events = []

    def on_cell_changed(self, index, mark):
        self.events.append(("cell", index, mark))

    def on_turn_changed(self, turn):
        self.events.append(("turn", turn))

    def on_game_ended(self, outcome):
        self.events.append(("ended", outcome))

    def on_game_reset(self, state):
        self.events.append(("reset", state.board))

    def of(self, kind):
        return [event for event in self.events if event[0] == kind]


class ScriptedAI:
    """Plays the given cells in order."""

    def __init__(self, *moves):
        self.moves = list(moves)

    def choose_move(self, board, rng):
        return self.moves.pop(0)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def listener():
    return RecordingListener()


@pytest.fixture
def engine(scheduler, listener):
    return GameEngine(
        listener=listener,
        scheduler=scheduler,
        ai_player=AIPlayer(random_move_chance=0.0),
        rng=random.Random(0),
    )


def assert_consistent(engine):
    """Exactly one of PLAYER_TURN / AI_THINKING / Ended holds."""
    state = engine.state
    if state.turn is None:
        assert state.outcome != Outcome.ONGOING
    else:
        assert state.turn in (Turn.PLAYER_TURN, Turn.AI_THINKING)
        assert state.outcome == Outcome.ONGOING


def test_new_engine_starts_empty(engine):
    state = engine.state
    assert state.board == (E,) * 9
    assert state.turn == Turn.PLAYER_TURN
    assert state.outcome == Outcome.ONGOING
    assert not engine.is_over


def test_player_move_hands_turn_to_ai(engine, scheduler, listener):
    engine.apply_player_move(4)

    assert engine.board[4] == P
    assert engine.outcome == Outcome.ONGOING
    assert engine.turn == Turn.AI_THINKING
    assert scheduler.pending == 1
    assert listener.events[-2:] == [("cell", 4, P), ("turn", Turn.AI_THINKING)]
    assert_consistent(engine)


def test_scheduled_callback_makes_ai_move(engine, scheduler, listener):
    engine.apply_player_move(4)
    assert scheduler.run_pending() == 1

    assert engine.turn == Turn.PLAYER_TURN
    assert engine.board.count(A) == 1
    assert listener.events[-1] == ("turn", Turn.PLAYER_TURN)
    assert_consistent(engine)


def test_think_delay_is_passed_to_scheduler(scheduler):
    engine = GameEngine(scheduler=scheduler, rng=random.Random(0), think_delay=0.5)
    delays = []
    engine.apply_player_move(0)
    scheduler.run_pending(sleep=delays.append)
    assert delays == [0.5]


def test_ai_blocks_two_in_a_row(engine, scheduler):
    engine.apply_player_move(0)
    scheduler.run_pending()
    ai_cell = engine.board.index(A)
    assert ai_cell == 4

    engine.apply_player_move(1)
    scheduler.run_pending()
    assert engine.board[2] == A


def test_occupied_cell_is_rejected(engine, scheduler):
    engine.ai = ScriptedAI(5)
    engine.apply_player_move(0)
    scheduler.run_pending()
    assert engine.board[5] == A
    before = engine.board

    with pytest.raises(CellOccupiedError) as info:
        engine.apply_player_move(5)
    assert info.value.index == 5
    assert info.value.mark == A
    assert engine.board == before
    assert engine.turn == Turn.PLAYER_TURN


def test_move_while_ai_thinking_is_rejected(engine):
    engine.apply_player_move(4)
    before = engine.board

    with pytest.raises(NotPlayerTurnError):
        engine.apply_player_move(0)
    assert engine.board == before
    assert engine.turn == Turn.AI_THINKING


@pytest.mark.parametrize(
    "index", [-1, 9, 100, "4", 4.0, True, None, np.int64(9), np.float64(4.0)]
)
def test_out_of_range_is_rejected(engine, index):
    with pytest.raises(OutOfRangeError):
        engine.apply_player_move(index)
    assert engine.board == (E,) * 9


@pytest.mark.parametrize("index", [np.int64(4), np.int32(4), np.uint8(4)])
def test_numpy_integer_index_is_accepted(engine, listener, index):
    engine.apply_player_move(index)

    assert engine.board[4] == P
    assert engine.turn == Turn.AI_THINKING
    cell_event = listener.of("cell")[-1]
    assert cell_event == ("cell", 4, P)
    assert type(cell_event[1]) is int


def test_numpy_index_on_occupied_cell(engine, scheduler):
    engine.apply_player_move(0)
    scheduler.run_pending()

    with pytest.raises(CellOccupiedError) as info:
        engine.apply_player_move(np.int64(0))
    assert info.value.index == 0


def test_errors_share_a_base_class():
    for error in (OutOfRangeError, CellOccupiedError, NotPlayerTurnError, GameAlreadyEndedError):
        assert issubclass(error, MoveError)
    assert issubclass(GameAlreadyEndedError, NotPlayerTurnError)


def test_draw_game(scheduler, listener):
    # Ends on P P A / A A P / P A P
    engine = GameEngine(
        listener=listener,
        scheduler=scheduler,
        ai_player=ScriptedAI(2, 4, 3, 7),
        rng=random.Random(0),
    )
    for cell in (0, 1, 6, 5):
        engine.apply_player_move(cell)
        scheduler.run_pending()
        assert_consistent(engine)
    engine.apply_player_move(8)

    assert engine.board == (P, P, A, A, A, P, P, A, P)
    assert engine.outcome == Outcome.DRAW
    assert engine.turn is None
    assert engine.is_over
    assert scheduler.pending == 0
    assert listener.of("ended") == [("ended", Outcome.DRAW)]
    assert engine.get_winning_line() is None
    assert_consistent(engine)


def test_player_win(scheduler, listener):
    engine = GameEngine(
        listener=listener,
        scheduler=scheduler,
        ai_player=ScriptedAI(3, 4),
        rng=random.Random(0),
    )
    engine.apply_player_move(0)
    scheduler.run_pending()
    engine.apply_player_move(1)
    scheduler.run_pending()
    engine.apply_player_move(2)

    assert engine.outcome == Outcome.PLAYER_WIN
    assert engine.get_winning_line() == (0, 1, 2)
    assert listener.events[-2:] == [("turn", None), ("ended", Outcome.PLAYER_WIN)]


def test_ai_win(scheduler, listener):
    engine = GameEngine(
        listener=listener,
        scheduler=scheduler,
        ai_player=ScriptedAI(3, 4, 5),
        rng=random.Random(0),
    )
    for cell in (0, 1, 8):
        engine.apply_player_move(cell)
        scheduler.run_pending()

    assert engine.outcome == Outcome.AI_WIN
    assert engine.state.outcome.winner == A
    assert len(listener.of("ended")) == 1


def test_moves_after_game_end_are_rejected(scheduler):
    engine = GameEngine(scheduler=scheduler, ai_player=ScriptedAI(3, 4), rng=random.Random(0))
    for cell in (0, 1):
        engine.apply_player_move(cell)
        scheduler.run_pending()
    engine.apply_player_move(2)
    before = engine.board

    with pytest.raises(GameAlreadyEndedError):
        engine.apply_player_move(8)
    assert engine.request_ai_move() is None
    assert engine.board == before


def test_request_ai_move_outside_ai_turn_is_a_no_op(engine, listener):
    count = len(listener.events)
    assert engine.request_ai_move() is None
    assert engine.board == (E,) * 9
    assert len(listener.events) == count


def test_duplicate_callback_is_ignored(engine, scheduler):
    engine.apply_player_move(0)
    engine.request_ai_move()
    assert engine.board.count(A) == 1

    scheduler.run_pending()
    assert engine.board.count(A) == 1
    assert engine.turn == Turn.PLAYER_TURN


def test_reset_cancels_pending_ai_move(engine, scheduler):
    engine.apply_player_move(4)
    engine.reset()
    scheduler.run_pending()

    assert engine.board == (E,) * 9
    assert engine.turn == Turn.PLAYER_TURN
    assert engine.outcome == Outcome.ONGOING


def test_stale_callback_does_not_touch_next_game(engine, scheduler):
    engine.apply_player_move(4)
    (stale,) = scheduler.take_pending()
    assert scheduler.pending == 0

    engine.reset()
    engine.apply_player_move(0)
    stale()
    assert engine.board.count(A) == 0
    assert engine.turn == Turn.AI_THINKING

    scheduler.run_pending()
    assert engine.board.count(A) == 1


@pytest.mark.parametrize("moves", [[], [4], [0, 1], [0, 1, 8]])
def test_reset_from_any_state(moves, listener):
    scheduler = ManualScheduler()
    engine = GameEngine(
        listener=listener,
        scheduler=scheduler,
        ai_player=ScriptedAI(3, 4, 5),
        rng=random.Random(0),
    )
    for index, cell in enumerate(moves):
        engine.apply_player_move(cell)
        if index < len(moves) - 1:
            scheduler.run_pending()

    generation = engine.generation
    engine.reset()

    assert engine.state.board == (E,) * 9
    assert engine.turn == Turn.PLAYER_TURN
    assert engine.outcome == Outcome.ONGOING
    assert engine.generation > generation
    assert listener.events[-2:] == [("reset", (E,) * 9), ("turn", Turn.PLAYER_TURN)]


def test_legal_moves(engine):
    assert all(engine.is_legal(i) for i in range(9))
    engine.apply_player_move(4)
    assert not any(engine.is_legal(i) for i in range(9))


def test_default_engine_answers_immediately():
    engine = GameEngine()
    engine.apply_player_move(4)
    assert engine.turn == Turn.PLAYER_TURN
    assert engine.board.count(A) == 1


def test_state_is_a_snapshot(engine, scheduler):
    state = engine.state
    engine.apply_player_move(0)
    assert state.board[0] == E
    assert engine.state.board[0] == P


def test_listeners_can_be_added_and_removed(engine, listener):
    other = RecordingListener()
    engine.add_listener(other)
    engine.apply_player_move(4)
    engine.remove_listener(other)
    engine.reset()

    assert other.of("cell") == [("cell", 4, P)]
    assert other.of("reset") == []
    assert listener.of("reset") != []


def test_perfect_ai_game_never_lost(scheduler):
    engine = GameEngine(scheduler=scheduler, ai_player=AIPlayer(0.0), rng=random.Random(1))
    while not engine.is_over:
        engine.apply_player_move(engine.state.empty_cells()[0])
        scheduler.run_pending()
        assert_consistent(engine)
    assert engine.outcome in (Outcome.AI_WIN, Outcome.DRAW)


class FailingListener(GameListener):
    """Raises from on_cell_changed."""

    def on_cell_changed(self, index, mark):
        raise RuntimeError(f"view failed on cell {index}")


def test_failing_listener_leaves_player_move_consistent(scheduler, listener):
    engine = GameEngine(scheduler=scheduler, ai_player=AIPlayer(0.0), rng=random.Random(0))
    engine.add_listener(FailingListener())
    engine.add_listener(listener)

    with pytest.raises(RuntimeError):
        engine.apply_player_move(4)

    assert engine.board[4] == P
    assert engine.turn == Turn.AI_THINKING
    assert scheduler.pending == 1
    # Later listeners still hear about the move
    assert listener.events[-2:] == [("cell", 4, P), ("turn", Turn.AI_THINKING)]

    with pytest.raises(NotPlayerTurnError):
        engine.apply_player_move(0)

    with pytest.raises(RuntimeError):
        scheduler.run_pending()
    assert engine.board.count(A) == 1
    assert engine.turn == Turn.PLAYER_TURN
    assert_consistent(engine)


def test_failing_listener_still_ends_game(scheduler):
    engine = GameEngine(scheduler=scheduler, ai_player=ScriptedAI(3, 4), rng=random.Random(0))
    for cell in (0, 1):
        engine.apply_player_move(cell)
        scheduler.run_pending()
    engine.add_listener(FailingListener())

    with pytest.raises(RuntimeError):
        engine.apply_player_move(2)

    assert engine.outcome == Outcome.PLAYER_WIN
    assert engine.turn is None
    assert scheduler.pending == 0


def test_listener_attached_after_construction_sees_reset(scheduler):
    engine = GameEngine(scheduler=scheduler, rng=random.Random(0))
    late = RecordingListener()
    engine.add_listener(late)
    assert late.events == []

    engine.reset()
    assert late.events == [("reset", (E,) * 9), ("turn", Turn.PLAYER_TURN)]
