"""Formatters for the individual flags of a log pattern, with padding support."""

from __future__ import annotations

import enum
import os
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from sparklog.fmt_helper import (
    MICROSECONDS,
    MILLISECONDS,
    NANOSECONDS,
    SECONDS,
    pad2,
    pad3,
    pad6,
    pad9,
    time_fraction,
)
from sparklog.message import LogMsg, level_name, short_level_name


class PadSide(enum.Enum):
    """Where padding spaces go relative to the field text."""

    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


@dataclass(frozen=True)
class PaddingInfo:
    """Padding requested for one flag, e.g. ``%-8!l``.

    ``side`` names where the spaces go: LEFT right-aligns the text.
    """

    width: int = 0
    side: PadSide = PadSide.LEFT
    truncate: bool = False
    active: bool = False

    def enabled(self) -> bool:
        return self.active


class OutputBuffer:
    """Growable text buffer that formatters append to."""

    def __init__(self, text: str = "") -> None:
        self._parts: list[str] = [text] if text else []
        self._size = len(text)

    def append(self, text: str) -> None:
        if text:
            self._parts.append(text)
            self._size += len(text)

    def truncate(self, size: int) -> None:
        """Cut the buffer down to its first ``size`` characters."""
        if size < 0:
            raise ValueError("buffer size must not be negative")
        value = self.getvalue()[:size]
        self._parts = [value] if value else []
        self._size = len(value)

    def getvalue(self) -> str:
        joined = "".join(self._parts)
        self._parts = [joined] if joined else []
        return joined

    def __len__(self) -> int:
        return self._size


class FlagFormatter:
    """Formats one element of a pattern into an output buffer."""

    def __init__(self, padinfo: Optional[PaddingInfo] = None) -> None:
        self.padinfo = padinfo if padinfo is not None else PaddingInfo()

    def format(self, msg: LogMsg, tm: time.struct_time, dest: OutputBuffer) -> None:
        raise NotImplementedError

    @contextmanager
    def _padded(self, wrapped_size: int, dest: OutputBuffer) -> Iterator[None]:
        """Pad or truncate around whatever the body appends to ``dest``."""
        info = self.padinfo
        if not info.enabled():
            yield
            return
        remaining = info.width - wrapped_size
        if remaining > 0:
            if info.side is PadSide.LEFT:
                dest.append(" " * remaining)
                remaining = 0
            elif info.side is PadSide.CENTER:
                half = remaining // 2
                dest.append(" " * half)
                remaining = half + (remaining & 1)
        yield
        if remaining >= 0:
            dest.append(" " * remaining)
        elif info.truncate:
            dest.truncate(max(0, len(dest) + remaining))


class AggregateFormatter(FlagFormatter):
    """Literal text copied to the output as is."""

    def __init__(self, text: str = "") -> None:
        super().__init__()
        self._text = text

    def add(self, text: str) -> None:
        self._text += text

    def format(self, msg: LogMsg, tm: time.struct_time, dest: OutputBuffer) -> None:
        dest.append(self._text)


_DAYS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
_FULL_DAYS = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sept", "Oct", "Nov", "Dec")
_FULL_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def _day_index(tm: time.struct_time) -> int:
    # struct_time counts weekdays from Monday; the tables start on Sunday.
    return (tm.tm_wday + 1) % 7


def _ampm(tm: time.struct_time) -> str:
    return "PM" if tm.tm_hour >= 12 else "AM"


def _to12h(tm: time.struct_time) -> int:
    return tm.tm_hour - 12 if tm.tm_hour > 12 else tm.tm_hour


def _whole_seconds(time_ns: int) -> int:
    return time_ns // SECONDS if time_ns >= 0 else -((-time_ns) // SECONDS)


def _utc_minutes_offset(tm: time.struct_time) -> int:
    offset = getattr(tm, "tm_gmtoff", None) or 0
    return int(offset / 60)


def basename(filename: str) -> str:
    """Return the part of ``filename`` after the last path separator."""
    pos = filename.rfind(os.sep)
    return filename[pos + 1:] if pos >= 0 else filename


_Render = Callable[[LogMsg, time.struct_time], Optional[str]]


class _FieldFormatter(FlagFormatter):
    """A flag whose text comes from a render function; ``None`` means nothing is written."""

    def __init__(self, padinfo: PaddingInfo, render: _Render, field_size: Optional[int]) -> None:
        super().__init__(padinfo)
        self._render = render
        self._field_size = field_size

    def format(self, msg: LogMsg, tm: time.struct_time, dest: OutputBuffer) -> None:
        text = self._render(msg, tm)
        if text is None:
            return
        size = len(text) if self._field_size is None else self._field_size
        with self._padded(size, dest):
            dest.append(text)


class _TzOffsetFormatter(FlagFormatter):
    """ISO 8601 offset from UTC (+-HH:MM), refreshed every 10 seconds."""

    def __init__(self, padinfo: PaddingInfo) -> None:
        super().__init__(padinfo)
        self._last_update = 0
        self._offset_minutes = 0

    def format(self, msg: LogMsg, tm: time.struct_time, dest: OutputBuffer) -> None:
        with self._padded(6, dest):
            if msg.time - self._last_update >= 10 * SECONDS:
                self._offset_minutes = _utc_minutes_offset(tm)
                self._last_update = msg.time
            total = self._offset_minutes
            sign = "-" if total < 0 else "+"
            total = abs(total)
            dest.append(f"{sign}{pad2(total // 60)}:{pad2(total % 60)}")


class _ElapsedFormatter(FlagFormatter):
    """Time since the previous message, in the given unit."""

    def __init__(self, padinfo: PaddingInfo, unit_ns: int) -> None:
        super().__init__(padinfo)
        self._unit_ns = unit_ns
        self._last_message_time = time.time_ns()

    def format(self, msg: LogMsg, tm: time.struct_time, dest: OutputBuffer) -> None:
        delta = max(msg.time - self._last_message_time, 0)
        self._last_message_time = msg.time
        text = str(delta // self._unit_ns)
        with self._padded(len(text), dest):
            dest.append(text)


class _ColorStartFormatter(FlagFormatter):
    def format(self, msg: LogMsg, tm: time.struct_time, dest: OutputBuffer) -> None:
        msg.color_range_start = len(dest)


class _ColorStopFormatter(FlagFormatter):
    def format(self, msg: LogMsg, tm: time.struct_time, dest: OutputBuffer) -> None:
        msg.color_range_end = len(dest)


class FullFormatter(FlagFormatter):
    """The default layout: ``[%Y-%m-%d %H:%M:%S.%e] [%n] [%l] %v``, plus source if known."""

    def __init__(self, padinfo: Optional[PaddingInfo] = None) -> None:
        super().__init__(padinfo)
        self._cache_timestamp: Optional[int] = None
        self._cached_datetime = ""

    def format(self, msg: LogMsg, tm: time.struct_time, dest: OutputBuffer) -> None:
        secs = _whole_seconds(msg.time)
        if secs != self._cache_timestamp or not self._cached_datetime:
            self._cached_datetime = (
                f"[{tm.tm_year}-{pad2(tm.tm_mon)}-{pad2(tm.tm_mday)} "
                f"{pad2(tm.tm_hour)}:{pad2(tm.tm_min)}:{pad2(tm.tm_sec)}."
            )
            self._cache_timestamp = secs
        dest.append(self._cached_datetime)
        dest.append(pad3(time_fraction(msg.time, MILLISECONDS)))
        dest.append("] ")
        if msg.logger_name:
            dest.append(f"[{msg.logger_name}] ")
        dest.append("[")
        msg.color_range_start = len(dest)
        dest.append(level_name(msg.level))
        msg.color_range_end = len(dest)
        dest.append("] ")
        if not msg.source.is_empty():
            dest.append(f"[{basename(msg.source.filename)}:{msg.source.line}] ")
        dest.append(msg.payload)


def _source_or_none(render: Callable[[LogMsg], str]) -> _Render:
    def wrapped(msg: LogMsg, tm: time.struct_time) -> Optional[str]:
        return None if msg.source.is_empty() else render(msg)
    return wrapped


def _hms(tm: time.struct_time) -> str:
    return f"{pad2(tm.tm_hour)}:{pad2(tm.tm_min)}:{pad2(tm.tm_sec)}"


_FIELDS: dict[str, tuple[_Render, Optional[int]]] = {
    "n": (lambda msg, tm: msg.logger_name, None),
    "l": (lambda msg, tm: level_name(msg.level), None),
    "L": (lambda msg, tm: short_level_name(msg.level), None),
    "t": (lambda msg, tm: str(msg.thread_id), None),
    "v": (lambda msg, tm: msg.payload, None),
    "a": (lambda msg, tm: _DAYS[_day_index(tm)], None),
    "A": (lambda msg, tm: _FULL_DAYS[_day_index(tm)], None),
    "b": (lambda msg, tm: _MONTHS[tm.tm_mon - 1], None),
    "h": (lambda msg, tm: _MONTHS[tm.tm_mon - 1], None),
    "B": (lambda msg, tm: _FULL_MONTHS[tm.tm_mon - 1], None),
    "c": (
        lambda msg, tm: f"{_DAYS[_day_index(tm)]} {_MONTHS[tm.tm_mon - 1]} {tm.tm_mday} {_hms(tm)} {tm.tm_year}",
        24,
    ),
    "C": (lambda msg, tm: pad2(tm.tm_year % 100), 2),
    "Y": (lambda msg, tm: str(tm.tm_year), 4),
    "D": (lambda msg, tm: f"{pad2(tm.tm_mon)}/{pad2(tm.tm_mday)}/{pad2(tm.tm_year % 100)}", 10),
    "x": (lambda msg, tm: f"{pad2(tm.tm_mon)}/{pad2(tm.tm_mday)}/{pad2(tm.tm_year % 100)}", 10),
    "m": (lambda msg, tm: pad2(tm.tm_mon), 2),
    "d": (lambda msg, tm: pad2(tm.tm_mday), 2),
    "H": (lambda msg, tm: pad2(tm.tm_hour), 2),
    "I": (lambda msg, tm: pad2(_to12h(tm)), 2),
    "M": (lambda msg, tm: pad2(tm.tm_min), 2),
    "S": (lambda msg, tm: pad2(tm.tm_sec), 2),
    "e": (lambda msg, tm: pad3(time_fraction(msg.time, MILLISECONDS)), 3),
    "f": (lambda msg, tm: pad6(time_fraction(msg.time, MICROSECONDS)), 6),
    "F": (lambda msg, tm: pad9(time_fraction(msg.time, NANOSECONDS)), 9),
    "E": (lambda msg, tm: str(_whole_seconds(msg.time)), 10),
    "p": (lambda msg, tm: _ampm(tm), 2),
    "r": (lambda msg, tm: f"{pad2(_to12h(tm))}:{pad2(tm.tm_min)}:{pad2(tm.tm_sec)} {_ampm(tm)}", 11),
    "R": (lambda msg, tm: f"{pad2(tm.tm_hour)}:{pad2(tm.tm_min)}", 5),
    "T": (lambda msg, tm: _hms(tm), 8),
    "X": (lambda msg, tm: _hms(tm), 8),
    "P": (lambda msg, tm: str(os.getpid()), None),
    "@": (_source_or_none(lambda msg: f"{msg.source.filename}:{msg.source.line}"), None),
    "s": (_source_or_none(lambda msg: basename(msg.source.filename)), None),
    "g": (_source_or_none(lambda msg: msg.source.filename), None),
    "#": (_source_or_none(lambda msg: str(msg.source.line)), None),
    "!": (_source_or_none(lambda msg: msg.source.funcname), None),
}

_ELAPSED_UNITS = {
    "u": NANOSECONDS,
    "i": MICROSECONDS,
    "o": MILLISECONDS,
    "O": SECONDS,
}


def make_flag_formatter(flag: str, padding: PaddingInfo) -> FlagFormatter:
    """Return the formatter for a single pattern flag; unknown flags print as ``%`` + flag."""
    if flag in _FIELDS:
        render, size = _FIELDS[flag]
        return _FieldFormatter(padding, render, size)
    if flag in _ELAPSED_UNITS:
        return _ElapsedFormatter(padding, _ELAPSED_UNITS[flag])
    if flag == "+":
        return FullFormatter(padding)
    if flag == "z":
        return _TzOffsetFormatter(padding)
    if flag == "^":
        return _ColorStartFormatter(padding)
    if flag == "$":
        return _ColorStopFormatter(padding)
    if flag == "%":
        return AggregateFormatter("%")
    return AggregateFormatter("%" + flag)