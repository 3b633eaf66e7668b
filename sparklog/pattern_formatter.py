"""Formatter driven by a pattern string such as ``"[%Y-%m-%d %H:%M:%S.%e] [%l] %v"``."""

from __future__ import annotations

import enum
import os
import time
from typing import Optional

from sparklog.flags import (
    AggregateFormatter,
    FlagFormatter,
    FullFormatter,
    OutputBuffer,
    PaddingInfo,
    PadSide,
    make_flag_formatter,
)
from sparklog.fmt_helper import SECONDS
from sparklog.message import Formatter, LogMsg

MAX_PAD_WIDTH = 64
DEFAULT_EOL = os.linesep
_DIGITS = "0123456789"


class PatternTimeType(enum.Enum):
    """Whether timestamps are shown in local time or in UTC."""

    LOCAL = "local"
    UTC = "utc"


def parse_padspec(pattern: str, pos: int) -> tuple[PaddingInfo, int]:
    """Read an optional pad spec (e.g. ``-8!``) starting at ``pos``.

    Returns the padding found and the position just past it.  A side marker
    without digits is consumed but yields no padding.
    """
    end = len(pattern)
    if pos >= end:
        return PaddingInfo(), pos

    marker = pattern[pos]
    if marker == "-":
        side = PadSide.RIGHT
        pos += 1
    elif marker == "=":
        side = PadSide.CENTER
        pos += 1
    else:
        side = PadSide.LEFT

    if pos >= end or pattern[pos] not in _DIGITS:
        return PaddingInfo(), pos

    start = pos
    while pos < end and pattern[pos] in _DIGITS:
        pos += 1
    width = int(pattern[start:pos])

    truncate = pos < end and pattern[pos] == "!"
    if truncate:
        pos += 1

    return PaddingInfo(width=min(width, MAX_PAD_WIDTH), side=side, truncate=truncate, active=True), pos


def _to_time_t(time_ns: int) -> int:
    return time_ns // SECONDS if time_ns >= 0 else -((-time_ns) // SECONDS)


class PatternFormatter(Formatter):
    """Formats messages according to a ``%``-flag pattern; ``"%+"`` is the full default layout."""

    def __init__(
        self,
        pattern: str = "%+",
        time_type: PatternTimeType = PatternTimeType.LOCAL,
        eol: str = DEFAULT_EOL,
    ) -> None:
        self._pattern = pattern
        self._time_type = PatternTimeType(time_type)
        self._eol = eol
        self._last_log_secs: Optional[int] = None
        self._cached_tm: Optional[time.struct_time] = None
        self._formatters: list[FlagFormatter] = self._compile(pattern)

    def pattern(self) -> str:
        return self._pattern

    def clone(self) -> "PatternFormatter":
        return PatternFormatter(self._pattern, self._time_type, self._eol)

    def format(self, msg: LogMsg) -> str:
        secs = _to_time_t(msg.time)
        if self._cached_tm is None or secs != self._last_log_secs:
            self._cached_tm = self._get_time(secs)
            self._last_log_secs = secs
        dest = OutputBuffer()
        for formatter in self._formatters:
            formatter.format(msg, self._cached_tm, dest)
        dest.append(self._eol)
        return dest.getvalue()

    def _get_time(self, secs: int) -> time.struct_time:
        if self._time_type is PatternTimeType.LOCAL:
            return time.localtime(secs)
        return time.gmtime(secs)

    @staticmethod
    def _compile(pattern: str) -> list[FlagFormatter]:
        if pattern == "%+":
            return [FullFormatter(PaddingInfo())]
        formatters: list[FlagFormatter] = []
        user_chars: Optional[AggregateFormatter] = None
        end = len(pattern)
        pos = 0
        while pos < end:
            ch = pattern[pos]
            if ch == "%":
                if user_chars is not None:
                    formatters.append(user_chars)
                    user_chars = None
                padding, pos = parse_padspec(pattern, pos + 1)
                if pos >= end:
                    break
                formatters.append(make_flag_formatter(pattern[pos], padding))
            else:
                if user_chars is None:
                    user_chars = AggregateFormatter()
                user_chars.add(ch)
            pos += 1
        if user_chars is not None:
            formatters.append(user_chars)
        return formatters