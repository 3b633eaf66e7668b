"""The logger: filters messages by level and hands them to its sinks."""

from __future__ import annotations

import copy
import sys
import threading
import time
from typing import Callable, Iterable, Optional, Union

from sparklog.backtracer import Backtracer
from sparklog.message import Formatter, Level, LogMsg, SourceLoc
from sparklog.pattern_formatter import PatternFormatter, PatternTimeType
from sparklog.sinks import Sink

ErrorHandler = Callable[[str], object]

_BACKTRACE_START = "****************** Backtrace Start ******************"
_BACKTRACE_END = "****************** Backtrace End ********************"


class Logger:
    """A named logger with a level, a flush level, sinks and optional backtrace.

    Each sink formats messages with its own formatter.  Errors raised while
    formatting or writing are passed to the error handler instead of
    propagating; the default handler reports them on standard error at most
    once a second.
    """

    def __init__(self, name: str, sinks: Union[Sink, Iterable[Sink], None] = None) -> None:
        self._name = name
        if sinks is None:
            self._sinks: list[Sink] = []
        elif isinstance(sinks, Sink):
            self._sinks = [sinks]
        else:
            self._sinks = list(sinks)
        self._level = Level.INFO
        self._flush_level = Level.OFF
        self._custom_err_handler: Optional[ErrorHandler] = None
        self._tracer = Backtracer()
        self._err_lock = threading.Lock()
        self._last_err_time: Optional[float] = None

    def log(self, level: Level, msg: object, *args: object, source: Optional[SourceLoc] = None) -> None:
        """Log ``msg`` at ``level``; with ``args`` it is a ``str.format`` template."""
        level = Level(level)
        log_enabled = self.should_log(level)
        traceback_enabled = self._tracer.enabled()
        if not log_enabled and not traceback_enabled:
            return
        try:
            if args:
                text = str(msg).format(*args)
            elif isinstance(msg, str):
                text = msg
            else:
                text = str(msg)
            record = LogMsg(
                logger_name=self._name,
                level=level,
                payload=text,
                source=source if source is not None else SourceLoc(),
            )
            self._log_it(record, log_enabled, traceback_enabled)
        except Exception as exc:
            self._handle_error(_describe(exc))

    def trace(self, msg: object, *args: object) -> None:
        self.log(Level.TRACE, msg, *args)

    def debug(self, msg: object, *args: object) -> None:
        self.log(Level.DEBUG, msg, *args)

    def info(self, msg: object, *args: object) -> None:
        self.log(Level.INFO, msg, *args)

    def warn(self, msg: object, *args: object) -> None:
        self.log(Level.WARN, msg, *args)

    def error(self, msg: object, *args: object) -> None:
        self.log(Level.ERR, msg, *args)

    def critical(self, msg: object, *args: object) -> None:
        self.log(Level.CRITICAL, msg, *args)

    def should_log(self, msg_level: Level) -> bool:
        return msg_level >= self._level

    def should_backtrace(self) -> bool:
        return self._tracer.enabled()

    def set_level(self, log_level: Level) -> None:
        self._level = Level(log_level)

    def level(self) -> Level:
        return self._level

    def name(self) -> str:
        return self._name

    def set_formatter(self, formatter: Formatter) -> None:
        """Give each sink its own copy of ``formatter``; the last sink gets the original."""
        last = len(self._sinks) - 1
        for index, sink in enumerate(self._sinks):
            sink.set_formatter(formatter if index == last else formatter.clone())

    def set_pattern(self, pattern: str, time_type: PatternTimeType = PatternTimeType.LOCAL) -> None:
        self.set_formatter(PatternFormatter(pattern, time_type))

    def enable_backtrace(self, n_messages: int) -> None:
        """Keep the last ``n_messages`` messages of any level for :meth:`dump_backtrace`."""
        self._tracer.enable(n_messages)

    def disable_backtrace(self) -> None:
        self._tracer.disable()

    def dump_backtrace(self) -> None:
        """Write the stored messages to the sinks, between start and end markers."""
        try:
            if self._tracer.enabled():
                self._sink_it(LogMsg(self._name, Level.INFO, _BACKTRACE_START))
                self._tracer.foreach_pop(self._sink_it)
                self._sink_it(LogMsg(self._name, Level.INFO, _BACKTRACE_END))
        except Exception as exc:
            self._handle_error(_describe(exc))

    def flush(self) -> None:
        self._flush()

    def flush_on(self, log_level: Level) -> None:
        self._flush_level = Level(log_level)

    def flush_level(self) -> Level:
        return self._flush_level

    def sinks(self) -> list[Sink]:
        """The logger's sink list; changes to it take effect immediately."""
        return self._sinks

    def set_error_handler(self, handler: Optional[ErrorHandler]) -> None:
        """Use ``handler`` for logging errors; ``None`` restores the default."""
        self._custom_err_handler = handler

    def clone(self, logger_name: str) -> "Logger":
        """Return a new logger with the same sinks and configuration."""
        other = Logger(logger_name, list(self._sinks))
        other._level = self._level
        other._flush_level = self._flush_level
        other._custom_err_handler = self._custom_err_handler
        other._tracer = copy.copy(self._tracer)
        return other

    def _log_it(self, msg: LogMsg, log_enabled: bool, traceback_enabled: bool) -> None:
        if log_enabled:
            self._sink_it(msg)
        if traceback_enabled:
            self._tracer.push_back(msg)

    def _sink_it(self, msg: LogMsg) -> None:
        for sink in self._sinks:
            if sink.should_log(msg.level):
                try:
                    sink.log(msg)
                except Exception as exc:
                    self._handle_error(_describe(exc))
        if self._should_flush(msg):
            self._flush()

    def _flush(self) -> None:
        for sink in self._sinks:
            try:
                sink.flush()
            except Exception as exc:
                self._handle_error(_describe(exc))

    def _should_flush(self, msg: LogMsg) -> bool:
        return msg.level >= self._flush_level and msg.level != Level.OFF

    def _handle_error(self, text: str) -> None:
        if self._custom_err_handler is not None:
            self._custom_err_handler(text)
            return
        now = time.monotonic()
        with self._err_lock:
            if self._last_err_time is not None and now - self._last_err_time < 1.0:
                return
            self._last_err_time = now
        stamp = time.strftime("%Y-%m-%d %H:%M:%S")
        print(f"[*** LOG ERROR ***] [{stamp}] [{self._name}] {text}", file=sys.stderr)


def _describe(exc: BaseException) -> str:
    return str(exc) or "Unknown exception in logger"