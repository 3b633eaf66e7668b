"""Bounded store of recent messages, replayed on demand."""

from __future__ import annotations

import copy
import threading
from collections import deque
from typing import Callable

from sparklog.message import LogMsg


class Backtracer:
    """Keeps the last ``size`` messages in a ring while enabled."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._enabled = False
        self._messages: deque[LogMsg] = deque(maxlen=0)

    def __copy__(self) -> "Backtracer":
        other = Backtracer()
        with self._lock:
            other._enabled = self._enabled
            other._messages = deque(self._messages, maxlen=self._messages.maxlen)
        return other

    def enable(self, size: int) -> None:
        """Enable tracing with room for ``size`` messages, dropping any stored ones."""
        if size < 0:
            raise ValueError("backtrace size must not be negative")
        with self._lock:
            self._enabled = True
            self._messages = deque(maxlen=size)

    def disable(self) -> None:
        with self._lock:
            self._enabled = False

    def enabled(self) -> bool:
        return self._enabled

    def push_back(self, msg: LogMsg) -> None:
        """Store a copy of ``msg``, evicting the oldest when full."""
        with self._lock:
            self._messages.append(copy.copy(msg))

    def foreach_pop(self, fun: Callable[[LogMsg], object]) -> None:
        """Call ``fun`` on each stored message, oldest first, removing it afterwards."""
        with self._lock:
            while self._messages:
                fun(self._messages[0])
                self._messages.popleft()