"""Logging with loggers, sinks, pattern formatters and backtraces."""

__version__ = "0.1.0"