# sparklog

A logging library built around loggers that send messages to sinks.
Each sink formats with its own formatter, so one logger can write a
short line to the console and a longer one to a file.

Features:

- Loggers with a level, a flush level and any number of sinks
- A pattern formatter with strftime-like flags, padding, truncation and
  color ranges
- Sinks for files, stdout/stderr (plain or ANSI colored), an in-memory
  ring buffer and a null sink
- A backtrace buffer that keeps recent messages of every level and writes
  them out on request
- A small benchmark command

## Installation

```
pip install sparklog
```

Nothing outside the standard library is needed. To run the tests:

```
pip install "sparklog[test]"
pytest
```

## Quick start

```python
from sparklog.factories import basic_logger, stdout_color_logger

console = stdout_color_logger("console")
console.info("Welcome to sparklog, version {}", 1)
console.warn("Easy padding in numbers like {:08d}", 12)

file_log = basic_logger("file", "logs/app.log", truncate=True)
file_log.set_pattern("[%Y-%m-%d %H:%M:%S.%e] [%n] [%l] %v")
file_log.error("Something went wrong: {}", "disk full")
file_log.flush()
```

When extra arguments are given, the message is a `str.format` template
and the arguments are filled into it. Without them the message is logged
as it is (non-string values are passed through `str()`).

## Levels

`sparklog.message.Level` holds the levels, from least to most severe:
`TRACE`, `DEBUG`, `INFO`, `WARN`, `ERR`, `CRITICAL` and `OFF`. A new
logger logs `INFO` and above. `level_name` gives the names used in output
(`trace`, `debug`, `info`, `warning`, `error`, `critical`, `off`),
`short_level_name` the one-letter names, and `level_from_name` goes back
from a name to a level (`"warn"` and `"err"` are accepted as well).

## Loggers and sinks

A `Logger` is made from a name and a sink or a list of sinks:

```python
from sparklog.logger import Logger
from sparklog.message import Level
from sparklog.sinks import BasicFileSink, StdoutSink

log = Logger("app", [StdoutSink(), BasicFileSink("logs/app.log")])
log.set_level(Level.DEBUG)
log.flush_on(Level.ERR)         # flush every sink on errors and above
log.debug("connected to {}", "db-1")
```

The logger methods `trace`, `debug`, `info`, `warn`, `error` and
`critical` log at their level; `log(level, msg, *args, source=...)` takes
the level and an optional `SourceLoc` (file, line, function) used by the
source flags of a pattern. `Logger.sinks()` returns the live sink list, and
`Logger.clone(name)` makes a new logger with the same sinks and settings.

Each sink has a level of its own (`Sink.set_level`, default `TRACE`), so a
file sink can take everything while a console sink shows only warnings and
above.

The sinks are in `sparklog.sinks`:

| Sink | Writes to |
|------|-----------|
| `BasicFileSink` | a single file, appended or truncated; its folder is created if missing |
| `ConsoleSink` | any text stream, flushed after every message |
| `StdoutSink`, `StderrSink` | standard output / standard error, without colors |
| `AnsiColorSink` | a text stream, with the color range shown in color |
| `AnsiColorStdoutSink`, `AnsiColorStderrSink` | standard output / standard error, in color |
| `RingbufferSink` | memory; read back with `last_raw()` / `last_formatted()` |
| `NullSink` | nowhere |

Sinks take `thread_safe=False` to skip locking. The colored sinks take a
`ColorMode` (`ALWAYS`, `AUTOMATIC`, `NEVER`); in automatic mode colors are
used when the target is a terminal whose `TERM` names a color terminal
(always on Windows). `AnsiColorSink.set_color` changes the escape code for
a level, and the class holds the usual codes as constants (`RED`,
`YELLOW_BOLD`, `ON_BLUE`, `RESET`, ...).

`sparklog.factories` builds loggers with one sink already attached:
`basic_logger`, `null_logger` (level off), `stdout_logger`,
`stderr_logger`, `stdout_color_logger`, `stderr_color_logger` and
`ringbuffer_logger`.

## Patterns

`Logger.set_pattern` and `Sink.set_pattern` take a pattern. A pattern is
plain text with `%` flags in it:

| Flag | Meaning | Flag | Meaning |
|------|---------|------|---------|
| `%v` | message text | `%n` | logger name |
| `%l` | level (`info`) | `%L` | short level (`I`) |
| `%t` | thread id | `%P` | process id |
| `%Y` | 4-digit year | `%C` | 2-digit year |
| `%m` | month 01-12 | `%d` | day 01-31 |
| `%H` | hour 00-23 | `%I` | hour 12-hour clock |
| `%M` | minute | `%S` | second |
| `%e` | milliseconds | `%f` | microseconds |
| `%F` | nanoseconds | `%E` | seconds since the epoch |
| `%a` / `%A` | weekday, short / full | `%b` `%h` / `%B` | month, short / full |
| `%c` | date and time | `%D` / `%x` | MM/DD/YY |
| `%T` / `%X` | HH:MM:SS | `%R` | HH:MM |
| `%r` | 12-hour clock with AM/PM | `%p` | AM/PM |
| `%z` | UTC offset (+HH:MM) | `%+` | the default full format |
| `%@` | source file:line | `%s` | source file basename |
| `%g` | full source file | `%#` | source line |
| `%!` | source function | `%%` | a literal `%` |
| `%o` `%i` `%u` `%O` | time since the previous message in ms, us, ns, s | `%^` ... `%$` | color range |

A flag can be given a width: `%8l` pads on the left, `%-8l` on the right
and `%=8l` on both sides. Widths are capped at 64. A `!` after the width
also cuts longer values down to it: `%3!n` prints `pat` for a logger named
`pattern_tester`. An unknown flag is printed as written. The source flags
print nothing when no source location was given.

`PatternFormatter` from `sparklog.pattern_formatter` can also be used on
its own. It takes a pattern, a `PatternTimeType` (`LOCAL` or `UTC`) and
the line ending (the platform's by default), and `format(msg)` returns
the text:

```python
from sparklog.pattern_formatter import PatternFormatter, PatternTimeType

formatter = PatternFormatter("[%L] %v", PatternTimeType.UTC, "\n")
log.set_formatter(formatter)
```

`Logger.set_formatter` gives every sink its own clone of the formatter.
Custom formatters derive from `sparklog.message.Formatter` and implement
`format` and `clone`.

## Backtrace

```python
log.enable_backtrace(32)   # keep the last 32 messages of any level
log.debug("step {}", 1)    # stored even when the logger's level hides it
log.dump_backtrace()       # write the stored messages to the sinks, between markers
```

## Errors

If a sink or a format string fails while a message is being logged, the
exception does not reach the caller; the logger passes the error text to
its error handler. By default this prints to stderr, at most once per
second. `Logger.set_error_handler` installs your own handler, and `None`
restores the default. File problems raise `sparklog.message.LogError`
inside the sinks (for example when a file cannot be opened).

## Benchmark

```
sparklog-bench [messages] [threads]
```

This times single-threaded logging, then logging from one thread and from
the given number of threads, through file sinks (written under `logs/` in
the current directory) and through loggers whose level is off, with and
without a backtrace buffer. Results are printed to the console. The
defaults are 250000 messages and 4 threads. The functions `bench`,
`bench_mt`, `bench_single_threaded` and `bench_threaded_logging` in
`sparklog.bench` can be called directly and return the elapsed seconds.

## What it does not do

There is no global registry of named loggers and no default logger:
loggers are plain objects that you create and keep yourself. There are
no rotating or daily file sinks, no asynchronous logging through a
background thread pool, and no syslog or platform debug-output sinks.