# Path: dependency_loader/engine/countdown.py
"""
Completion Countdown

Fan-in primitive for the resolution tree: a parent waits for an
unknown interleaving of child completions, possibly signalled from
several threads, and must be notified exactly once.
"""

import threading
from typing import Callable

from dependency_loader.core.logger import get_logger

logger = get_logger(__name__, 'engine')


class CompletionCountdown:
    """
    Invokes on_complete once, after count_down() was called target times.

    Decrement, comparison and the fired flag are updated under one lock;
    the callback itself runs outside it. Calls past the target are ignored.

    Example:
        countdown = CompletionCountdown(len(children), when_done)
        for child in children:
            resolve(child, countdown.count_down)
    """

    def __init__(self, target: int, on_complete: Callable[[], None]):
        """
        Initialize countdown.

        Args:
            target: Number of completions to wait for (at least 1)
            on_complete: Callback fired once the last completion arrives

        Raises:
            ValueError: If target is lower than 1
        """
        if target < 1:
            raise ValueError(f"Countdown target must be at least 1, got {target}")

        self._lock = threading.Lock()
        self._remaining = target
        self._fired = False
        self._on_complete = on_complete
        self.target = target

    def count_down(self) -> None:
        """Record one completion; fire the callback on the last one."""
        with self._lock:
            if self._fired:
                logger.debug("Completion received after countdown already fired, ignoring")
                return

            self._remaining -= 1
            if self._remaining > 0:
                return

            self._fired = True

        self._on_complete()

    @property
    def remaining(self) -> int:
        with self._lock:
            return self._remaining

    @property
    def fired(self) -> bool:
        with self._lock:
            return self._fired


__all__ = ['CompletionCountdown']
