"""Core logging types: levels, source locations, messages and the formatter interface."""

from __future__ import annotations

import abc
import enum
import threading
import time
from dataclasses import dataclass, field


class LogError(Exception):
    """Raised when a logging operation fails."""


class Level(enum.IntEnum):
    """Severity of a log message, ordered from least to most severe."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERR = 4
    CRITICAL = 5
    OFF = 6


_LEVEL_NAMES = {
    Level.TRACE: "trace",
    Level.DEBUG: "debug",
    Level.INFO: "info",
    Level.WARN: "warning",
    Level.ERR: "error",
    Level.CRITICAL: "critical",
    Level.OFF: "off",
}

_SHORT_LEVEL_NAMES = {
    Level.TRACE: "T",
    Level.DEBUG: "D",
    Level.INFO: "I",
    Level.WARN: "W",
    Level.ERR: "E",
    Level.CRITICAL: "C",
    Level.OFF: "O",
}

_NAME_TO_LEVEL = {name: level for level, name in _LEVEL_NAMES.items()}
_NAME_TO_LEVEL.update({"warn": Level.WARN, "err": Level.ERR})


def level_name(level: Level) -> str:
    """Return the full name of a level, e.g. ``"info"``."""
    return _LEVEL_NAMES[Level(level)]


def short_level_name(level: Level) -> str:
    """Return the one-letter name of a level, e.g. ``"I"``."""
    return _SHORT_LEVEL_NAMES[Level(level)]


def level_from_name(name: str) -> Level:
    """Return the level with the given name; ``"warn"`` and ``"err"`` are accepted too."""
    try:
        return _NAME_TO_LEVEL[name]
    except KeyError:
        raise ValueError(f"unknown log level name: {name!r}") from None


@dataclass(frozen=True)
class SourceLoc:
    """Where in the calling code a message was logged."""

    filename: str = ""
    line: int = 0
    funcname: str = ""

    def is_empty(self) -> bool:
        return self.line == 0


@dataclass
class LogMsg:
    """A single log record.

    ``time`` is nanoseconds since the epoch.  The color range fields are
    set by formatters to mark the part of the output that should be colored.
    """

    logger_name: str
    level: Level
    payload: str
    source: SourceLoc = field(default_factory=SourceLoc)
    time: int = field(default_factory=time.time_ns)
    thread_id: int = field(default_factory=threading.get_ident)
    color_range_start: int = 0
    color_range_end: int = 0


class Formatter(abc.ABC):
    """Turns a log message into text."""

    @abc.abstractmethod
    def format(self, msg: LogMsg) -> str:
        """Return the formatted text of ``msg``."""

    @abc.abstractmethod
    def clone(self) -> "Formatter":
        """Return an independent formatter with the same configuration."""


class NullLock:
    """A lock that does nothing, for single-threaded use."""

    def acquire(self, *args, **kwargs) -> bool:
        return True

    def release(self) -> None:
        pass

    def __enter__(self) -> "NullLock":
        return self

    def __exit__(self, *args) -> None:
        return None