"""Sinks: the destinations that formatted log messages are written to."""

from __future__ import annotations

import abc
import copy
import enum
import os
import sys
import threading
from collections import deque
from typing import Optional, TextIO, Union

from sparklog.file_helper import FileHelper
from sparklog.message import Formatter, Level, LogMsg, NullLock
from sparklog.pattern_formatter import PatternFormatter

# Console sinks share one lock so lines from different sinks do not interleave.
_CONSOLE_LOCK = threading.Lock()


class ColorMode(enum.Enum):
    """When a color sink emits ANSI color codes."""

    ALWAYS = "always"
    AUTOMATIC = "automatic"
    NEVER = "never"


def _make_lock(thread_safe: bool):
    return threading.Lock() if thread_safe else NullLock()


class Sink(abc.ABC):
    """A destination for log messages with its own level threshold."""

    def __init__(self) -> None:
        self._level = Level.TRACE

    def should_log(self, msg_level: Level) -> bool:
        return msg_level >= self._level

    def set_level(self, log_level: Level) -> None:
        self._level = Level(log_level)

    def level(self) -> Level:
        return self._level

    @abc.abstractmethod
    def log(self, msg: LogMsg) -> None:
        """Write one message."""

    @abc.abstractmethod
    def flush(self) -> None:
        """Push buffered output to its destination."""

    @abc.abstractmethod
    def set_pattern(self, pattern: str) -> None:
        """Use a pattern formatter with ``pattern``."""

    @abc.abstractmethod
    def set_formatter(self, formatter: Formatter) -> None:
        """Use ``formatter`` for this sink."""


class BaseSink(Sink):
    """Sink that takes care of locking; subclasses implement ``_sink_it`` and ``_flush``."""

    def __init__(self, formatter: Optional[Formatter] = None, thread_safe: bool = True) -> None:
        super().__init__()
        self._formatter: Formatter = formatter if formatter is not None else PatternFormatter()
        self._lock = _make_lock(thread_safe)

    def log(self, msg: LogMsg) -> None:
        with self._lock:
            self._sink_it(msg)

    def flush(self) -> None:
        with self._lock:
            self._flush()

    def set_pattern(self, pattern: str) -> None:
        with self._lock:
            self._formatter = PatternFormatter(pattern)

    def set_formatter(self, formatter: Formatter) -> None:
        with self._lock:
            self._formatter = formatter

    @abc.abstractmethod
    def _sink_it(self, msg: LogMsg) -> None:
        """Write one message; called with the lock held."""

    @abc.abstractmethod
    def _flush(self) -> None:
        """Flush; called with the lock held."""


class NullSink(BaseSink):
    """Discards every message."""

    def _sink_it(self, msg: LogMsg) -> None:
        pass

    def _flush(self) -> None:
        pass


class RingbufferSink(BaseSink):
    """Keeps the most recent ``n_items`` messages in memory."""

    def __init__(self, n_items: int, thread_safe: bool = True) -> None:
        super().__init__(thread_safe=thread_safe)
        if n_items < 0:
            raise ValueError("ring buffer size must not be negative")
        self._queue: deque[LogMsg] = deque(maxlen=n_items)

    def _count(self, lim: int) -> int:
        return min(lim, len(self._queue)) if lim > 0 else len(self._queue)

    def last_raw(self, lim: int = 0) -> list[LogMsg]:
        """Stored messages, oldest first; at most ``lim`` of them when ``lim`` > 0."""
        with self._lock:
            return [copy.copy(msg) for msg in list(self._queue)[: self._count(lim)]]

    def last_formatted(self, lim: int = 0) -> list[str]:
        """Like :meth:`last_raw`, but formatted with the sink's formatter."""
        with self._lock:
            return [self._formatter.format(msg) for msg in list(self._queue)[: self._count(lim)]]

    def _sink_it(self, msg: LogMsg) -> None:
        self._queue.append(copy.copy(msg))

    def _flush(self) -> None:
        pass


class ConsoleSink(Sink):
    """Writes formatted messages to a text stream and flushes after each one."""

    def __init__(self, file: TextIO, thread_safe: bool = True) -> None:
        super().__init__()
        self._file = file
        self._lock = _CONSOLE_LOCK if thread_safe else NullLock()
        self._formatter: Formatter = PatternFormatter()

    def log(self, msg: LogMsg) -> None:
        with self._lock:
            self._file.write(self._formatter.format(msg))
            self._file.flush()

    def flush(self) -> None:
        with self._lock:
            self._file.flush()

    def set_pattern(self, pattern: str) -> None:
        with self._lock:
            self._formatter = PatternFormatter(pattern)

    def set_formatter(self, formatter: Formatter) -> None:
        with self._lock:
            self._formatter = formatter


class StdoutSink(ConsoleSink):
    """Console sink writing to standard output."""

    def __init__(self, thread_safe: bool = True) -> None:
        super().__init__(sys.stdout, thread_safe)


class StderrSink(ConsoleSink):
    """Console sink writing to standard error."""

    def __init__(self, thread_safe: bool = True) -> None:
        super().__init__(sys.stderr, thread_safe)


_COLOR_TERMS = (
    "ansi", "color", "console", "cygwin", "gnome", "konsole", "kterm",
    "linux", "msys", "putty", "rxvt", "screen", "vt100", "xterm",
)


def _is_terminal(file: TextIO) -> bool:
    try:
        return bool(file.isatty())
    except (AttributeError, ValueError, OSError):
        return False


def _is_color_terminal() -> bool:
    if os.name == "nt":
        return True
    term = os.environ.get("TERM")
    if not term:
        return False
    return any(name in term for name in _COLOR_TERMS)


class AnsiColorSink(Sink):
    """Console sink that wraps the color range of each line in an ANSI color code."""

    # Formatting codes
    RESET = "\033[m"
    BOLD = "\033[1m"
    DARK = "\033[2m"
    UNDERLINE = "\033[4m"
    BLINK = "\033[5m"
    REVERSE = "\033[7m"
    CONCEALED = "\033[8m"
    CLEAR_LINE = "\033[K"

    # Foreground colors
    BLACK = "\033[30m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"

    # Background colors
    ON_BLACK = "\033[40m"
    ON_RED = "\033[41m"
    ON_GREEN = "\033[42m"
    ON_YELLOW = "\033[43m"
    ON_BLUE = "\033[44m"
    ON_MAGENTA = "\033[45m"
    ON_CYAN = "\033[46m"
    ON_WHITE = "\033[47m"

    # Bold colors
    YELLOW_BOLD = "\033[33m\033[1m"
    RED_BOLD = "\033[31m\033[1m"
    BOLD_ON_RED = "\033[1m\033[41m"

    def __init__(self, target_file: TextIO, mode: ColorMode = ColorMode.AUTOMATIC, thread_safe: bool = True) -> None:
        super().__init__()
        self._file = target_file
        self._lock = _CONSOLE_LOCK if thread_safe else NullLock()
        self._formatter: Formatter = PatternFormatter()
        self._colors: dict[Level, str] = {
            Level.TRACE: self.WHITE,
            Level.DEBUG: self.CYAN,
            Level.INFO: self.GREEN,
            Level.WARN: self.YELLOW_BOLD,
            Level.ERR: self.RED_BOLD,
            Level.CRITICAL: self.BOLD_ON_RED,
            Level.OFF: self.RESET,
        }
        self._should_do_colors = False
        self.set_color_mode(mode)

    def set_color(self, color_level: Level, color: str) -> None:
        with self._lock:
            self._colors[Level(color_level)] = color

    def set_color_mode(self, mode: ColorMode) -> None:
        mode = ColorMode(mode)
        if mode is ColorMode.ALWAYS:
            self._should_do_colors = True
        elif mode is ColorMode.AUTOMATIC:
            self._should_do_colors = _is_terminal(self._file) and _is_color_terminal()
        else:
            self._should_do_colors = False

    def should_color(self) -> bool:
        return self._should_do_colors

    def log(self, msg: LogMsg) -> None:
        with self._lock:
            msg.color_range_start = 0
            msg.color_range_end = 0
            formatted = self._formatter.format(msg)
            start, end = msg.color_range_start, msg.color_range_end
            if self._should_do_colors and end > start:
                self._file.write(formatted[:start])
                self._file.write(self._colors[msg.level])
                self._file.write(formatted[start:end])
                self._file.write(self.RESET)
                self._file.write(formatted[end:])
            else:
                self._file.write(formatted)
            self._file.flush()

    def flush(self) -> None:
        with self._lock:
            self._file.flush()

    def set_pattern(self, pattern: str) -> None:
        with self._lock:
            self._formatter = PatternFormatter(pattern)

    def set_formatter(self, formatter: Formatter) -> None:
        with self._lock:
            self._formatter = formatter


class AnsiColorStdoutSink(AnsiColorSink):
    """Color sink writing to standard output."""

    def __init__(self, mode: ColorMode = ColorMode.AUTOMATIC, thread_safe: bool = True) -> None:
        super().__init__(sys.stdout, mode, thread_safe)


class AnsiColorStderrSink(AnsiColorSink):
    """Color sink writing to standard error."""

    def __init__(self, mode: ColorMode = ColorMode.AUTOMATIC, thread_safe: bool = True) -> None:
        super().__init__(sys.stderr, mode, thread_safe)


class BasicFileSink(BaseSink):
    """Writes every message to a single file."""

    def __init__(
        self,
        filename: Union[str, "os.PathLike[str]"],
        truncate: bool = False,
        thread_safe: bool = True,
    ) -> None:
        super().__init__(thread_safe=thread_safe)
        self._file_helper = FileHelper()
        self._file_helper.open(filename, truncate)

    def filename(self) -> str:
        return self._file_helper.filename()

    def close(self) -> None:
        with self._lock:
            self._file_helper.close()

    def _sink_it(self, msg: LogMsg) -> None:
        self._file_helper.write(self._formatter.format(msg))

    def _flush(self) -> None:
        self._file_helper.flush()