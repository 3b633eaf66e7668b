"""Throughput benchmarks for file and disabled loggers."""

from __future__ import annotations

import os
import re
import sys
import threading
import time
from typing import Optional, Sequence, Union

from sparklog.factories import basic_logger, stdout_color_logger
from sparklog.logger import Logger
from sparklog.message import Level
from sparklog.sinks import BasicFileSink

PathLike = Union[str, "os.PathLike[str]"]

_STARS = "**************************************************************"


def _default_reporter() -> Logger:
    reporter = stdout_color_logger("console")
    reporter.set_pattern("[%^%l%$] %v")
    return reporter


def _report(reporter: Logger, name: str, howmany: int, elapsed: float) -> None:
    rate = int(howmany / elapsed) if elapsed > 0 else 0
    reporter.info("{:<30} Elapsed: {:0.2f} secs {:>16n}/sec", name, elapsed, rate)


def _close(logger: Logger) -> None:
    for sink in logger.sinks():
        if isinstance(sink, BasicFileSink):
            sink.close()


def bench(howmany: int, log: Logger, reporter: Optional[Logger] = None) -> float:
    """Log ``howmany`` messages from this thread; report and return the elapsed seconds."""
    reporter = reporter if reporter is not None else _default_reporter()
    start = time.perf_counter()
    for i in range(howmany):
        log.info("Hello logger: msg number {}", i)
    elapsed = time.perf_counter() - start
    _report(reporter, log.name(), howmany, elapsed)
    return elapsed


def bench_mt(howmany: int, log: Logger, thread_count: int, reporter: Optional[Logger] = None) -> float:
    """Split ``howmany`` messages over ``thread_count`` threads; report and return elapsed seconds."""
    reporter = reporter if reporter is not None else _default_reporter()
    per_thread = howmany // thread_count if thread_count > 0 else 0

    def worker() -> None:
        for j in range(per_thread):
            log.info("Hello logger: msg number {}", j)

    threads = [threading.Thread(target=worker) for _ in range(max(thread_count, 0))]
    start = time.perf_counter()
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    elapsed = time.perf_counter() - start
    _report(reporter, log.name(), howmany, elapsed)
    return elapsed


def _level_off_loggers() -> list[Logger]:
    empty = Logger("level-off")
    empty.set_level(Level.OFF)
    tracing = Logger("level-off/backtrace-on")
    tracing.set_level(Level.OFF)
    tracing.enable_backtrace(32)
    return [empty, tracing]


def bench_single_threaded(iters: int, log_dir: PathLike = "logs", reporter: Optional[Logger] = None) -> dict[str, float]:
    """Run the single threaded benchmarks; return elapsed seconds by logger name."""
    reporter = reporter if reporter is not None else _default_reporter()
    reporter.info(_STARS)
    reporter.info("Single threaded: {:n} messages", iters)
    reporter.info(_STARS)

    results: dict[str, float] = {}
    path = os.path.join(os.fspath(log_dir), "basic_st.log")
    for name in ("basic_st", "basic_st/backtrace-on"):
        logger = basic_logger(name, path, truncate=True, thread_safe=False)
        try:
            results[name] = bench(iters, logger, reporter)
        finally:
            _close(logger)

    reporter.info("")
    for logger in _level_off_loggers():
        results[logger.name()] = bench(iters, logger, reporter)
    return results


def bench_threaded_logging(
    threads: int, iters: int, log_dir: PathLike = "logs", reporter: Optional[Logger] = None
) -> dict[str, float]:
    """Run the multi threaded benchmarks; return elapsed seconds by logger name."""
    reporter = reporter if reporter is not None else _default_reporter()
    reporter.info(_STARS)
    reporter.info("Multi threaded: {:n} threads, {:n} messages", threads, iters)
    reporter.info(_STARS)

    results: dict[str, float] = {}
    path = os.path.join(os.fspath(log_dir), "basic_mt.log")
    for name, tracing in (("basic_mt", False), ("basic_mt/backtrace-on", True)):
        logger = basic_logger(name, path, truncate=True)
        if tracing:
            logger.enable_backtrace(32)
        try:
            results[name] = bench_mt(iters, logger, threads, reporter)
        finally:
            _close(logger)

    reporter.info("")
    for logger in _level_off_loggers():
        results[logger.name()] = bench(iters, logger, reporter)
    return results


def _atoi(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run all benchmarks: ``[iterations [threads]]``."""
    args = list(sys.argv[1:] if argv is None else argv)
    reporter = _default_reporter()
    iters = 250000
    threads = 4
    try:
        if len(args) > 0:
            iters = _atoi(args[0])
        if len(args) > 1:
            threads = _atoi(args[1])
        bench_single_threaded(iters, "logs", reporter)
        bench_threaded_logging(1, iters, "logs", reporter)
        bench_threaded_logging(threads, iters, "logs", reporter)
    except Exception as exc:
        reporter.error(str(exc))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())