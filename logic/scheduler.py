"""
Deferred callbacks for the AI "thinking" pause.

The engine never sleeps itself. It hands a callback and a delay to a
scheduler supplied by the view: Tk uses ``root.after``, the console and
tests use the schedulers below.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple


class Scheduler(ABC):
    """Runs a callback once after a delay."""

    @abstractmethod
    def schedule(self, callback: Callable[[], None], delay: float) -> None:
        """
        Run `callback` after `delay` seconds.

        Args:
            callback: Function taking no arguments.
            delay: Seconds to wait.
        """


class ImmediateScheduler(Scheduler):
    """Runs every callback right away, ignoring the delay."""

    def schedule(self, callback: Callable[[], None], delay: float) -> None:
        callback()


class ManualScheduler(Scheduler):
    """
    Queues callbacks until `run_pending` is called.

    Lets the caller decide when the delay is over, and keeps callbacks
    around so tests can fire them late.
    """

    def __init__(self):
        self._queue: List[Tuple[Callable[[], None], float]] = []

    def schedule(self, callback: Callable[[], None], delay: float) -> None:
        self._queue.append((callback, delay))

    @property
    def pending(self) -> int:
        return len(self._queue)

    def run_pending(self, sleep: Optional[Callable[[float], None]] = None) -> int:
        """
        Fire queued callbacks in order.

        Args:
            sleep: Optional function called with each delay before its
                callback runs (e.g. time.sleep).

        Returns:
            Number of callbacks fired.
        """
        fired = 0
        # Callbacks may schedule more work; drain until empty
        while self._queue:
            callback, delay = self._queue.pop(0)
            if sleep is not None and delay > 0:
                sleep(delay)
            callback()
            fired += 1
        return fired

    def take_pending(self) -> List[Callable[[], None]]:
        """Remove the queued callbacks without running them and return them."""
        callbacks = [callback for callback, _ in self._queue]
        self._queue.clear()
        return callbacks

    def clear(self) -> None:
        self._queue.clear()
