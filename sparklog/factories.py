"""Functions that create loggers backed by a single sink."""

from __future__ import annotations

import os
from typing import Union

from sparklog.logger import Logger
from sparklog.message import Level
from sparklog.sinks import (
    AnsiColorStderrSink,
    AnsiColorStdoutSink,
    BasicFileSink,
    ColorMode,
    NullSink,
    RingbufferSink,
    StderrSink,
    StdoutSink,
)


def basic_logger(
    logger_name: str,
    filename: Union[str, "os.PathLike[str]"],
    truncate: bool = False,
    thread_safe: bool = True,
) -> Logger:
    """Logger writing to one file."""
    return Logger(logger_name, BasicFileSink(filename, truncate, thread_safe))


def null_logger(logger_name: str, thread_safe: bool = True) -> Logger:
    """Logger that discards everything; its level is off."""
    logger = Logger(logger_name, NullSink(thread_safe=thread_safe))
    logger.set_level(Level.OFF)
    return logger


def stdout_logger(logger_name: str, thread_safe: bool = True) -> Logger:
    return Logger(logger_name, StdoutSink(thread_safe))


def stderr_logger(logger_name: str, thread_safe: bool = True) -> Logger:
    return Logger(logger_name, StderrSink(thread_safe))


def stdout_color_logger(
    logger_name: str, mode: ColorMode = ColorMode.AUTOMATIC, thread_safe: bool = True
) -> Logger:
    return Logger(logger_name, AnsiColorStdoutSink(mode, thread_safe))


def stderr_color_logger(
    logger_name: str, mode: ColorMode = ColorMode.AUTOMATIC, thread_safe: bool = True
) -> Logger:
    return Logger(logger_name, AnsiColorStderrSink(mode, thread_safe))


def ringbuffer_logger(logger_name: str, n_items: int, thread_safe: bool = True) -> Logger:
    """Logger keeping its last ``n_items`` messages in memory."""
    return Logger(logger_name, RingbufferSink(n_items, thread_safe))