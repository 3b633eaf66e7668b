import os

import pytest

from sparklog.flags import PaddingInfo, PadSide
from sparklog.message import Level, LogMsg, SourceLoc
from sparklog.pattern_formatter import PatternFormatter, PatternTimeType, parse_padspec

LOCAL = PatternTimeType.LOCAL
UTC = PatternTimeType.UTC

# 2001-09-09 01:46:40 UTC (a Sunday) plus 123456789 ns
FIXED_NS = 1_000_000_000 * 1_000_000_000 + 123_456_789


def log_to_str(text, pattern, time_type=LOCAL, eol="\n"):
    msg = LogMsg("pattern_tester", Level.INFO, text)
    return PatternFormatter(pattern, time_type, eol).format(msg)


def test_custom_eol():
    assert log_to_str("Hello custom eol test", "%v", LOCAL, ";)") == "Hello custom eol test;)"


def test_empty_format():
    assert log_to_str("Some message", "", LOCAL, "") == ""


def test_empty_format2():
    assert log_to_str("Some message", "", LOCAL, "\n") == "\n"


def test_level():
    assert log_to_str("Some message", "[%l] %v") == "[info] Some message\n"


def test_short_level():
    assert log_to_str("Some message", "[%L] %v") == "[I] Some message\n"


def test_name():
    assert log_to_str("Some message", "[%n] %v") == "[pattern_tester] Some message\n"


def test_date_mm_dd_yy_local():
    msg = LogMsg("x", Level.INFO, "Some message", time=FIXED_NS)
    out = PatternFormatter("%D %v", LOCAL, "\n").format(msg)
    assert out.endswith(" Some message\n")
    date = out.split(" ")[0]
    assert len(date) == 8 and date[2] == "/" and date[5] == "/"


def test_date_mm_dd_yy_utc():
    msg = LogMsg("x", Level.INFO, "Some message", time=FIXED_NS)
    assert PatternFormatter("%D %v", UTC, "\n").format(msg) == "09/09/01 Some message\n"


def _format_msg(pattern, payload, eol="\n"):
    formatter = PatternFormatter(pattern, LOCAL, eol)
    msg = LogMsg("test", Level.INFO, payload)
    formatter.format(msg)
    return msg


def test_color_range_1():
    msg = _format_msg("%^%v%$", "Hello")
    assert (msg.color_range_start, msg.color_range_end) == (0, 5)
    assert log_to_str("hello", "%^%v%$") == "hello\n"


def test_color_range_2():
    msg = _format_msg("%^%$", "")
    assert (msg.color_range_start, msg.color_range_end) == (0, 0)
    assert log_to_str("", "%^%$") == "\n"


def test_color_range_3():
    formatter = PatternFormatter("%^***%$")
    msg = LogMsg("test", Level.INFO, "ignored")
    formatter.format(msg)
    assert (msg.color_range_start, msg.color_range_end) == (0, 3)


def test_color_range_4():
    msg = _format_msg("XX%^YYY%$", "ignored")
    assert (msg.color_range_start, msg.color_range_end) == (2, 5)
    assert log_to_str("ignored", "XX%^YYY%$") == "XXYYY\n"


def test_color_range_5():
    formatter = PatternFormatter("**%^")
    msg = LogMsg("test", Level.INFO, "ignored")
    formatter.format(msg)
    assert (msg.color_range_start, msg.color_range_end) == (2, 0)


def test_color_range_6():
    formatter = PatternFormatter("**%$")
    msg = LogMsg("test", Level.INFO, "ignored")
    formatter.format(msg)
    assert (msg.color_range_start, msg.color_range_end) == (0, 2)


@pytest.mark.parametrize(
    "pattern, expected",
    [
        ("[%8l] %v", "[    info] Some message\n"),
        ("[%8!l] %v", "[    info] Some message\n"),
        ("[%-8l] %v", "[info    ] Some message\n"),
        ("[%-8!l] %v", "[info    ] Some message\n"),
        ("[%=8l] %v", "[  info  ] Some message\n"),
        ("[%=8!l] %v", "[  info  ] Some message\n"),
        ("[%3L] %v", "[  I] Some message\n"),
        ("[%3!L] %v", "[  I] Some message\n"),
        ("[%-3L] %v", "[I  ] Some message\n"),
        ("[%-3!L] %v", "[I  ] Some message\n"),
        ("[%=3L] %v", "[ I ] Some message\n"),
        ("[%=3!L] %v", "[ I ] Some message\n"),
        ("[%3n] %v", "[pattern_tester] Some message\n"),
        ("[%3!n] %v", "[pat] Some message\n"),
        ("[%-3n] %v", "[pattern_tester] Some message\n"),
        ("[%-3!n] %v", "[pat] Some message\n"),
        ("[%=3n] %v", "[pattern_tester] Some message\n"),
        ("[%=3!n] %v", "[pat] Some message\n"),
        ("[%-300n] %v", "[pattern_tester" + " " * 50 + "] Some message\n"),
        ("[%-300!n] %v", "[pattern_tester" + " " * 50 + "] Some message\n"),
        ("[%-64n] %v", "[pattern_tester" + " " * 50 + "] Some message\n"),
        ("[%-64!n] %v", "[pattern_tester" + " " * 50 + "] Some message\n"),
    ],
)
def test_padding(pattern, expected):
    assert log_to_str("Some message", pattern) == expected


@pytest.mark.parametrize(
    "pattern, expected",
    [
        ("%6!v", "123456\n"),
        ("%5!v", "12345\n"),
        ("%7!v", " 123456\n"),
        ("%-6!v", "123456\n"),
        ("%-5!v", "12345\n"),
        ("%-7!v", "123456 \n"),
        ("%=6!v", "123456\n"),
        ("%=5!v", "12345\n"),
        ("%=7!v", "123456 \n"),
        ("%0!v", "\n"),
    ],
)
def test_padding_truncate(pattern, expected):
    assert log_to_str("123456", pattern) == expected


def test_padding_truncate_funcname():
    formatter = PatternFormatter("%v [%5!!]", LOCAL, "")
    msg1 = LogMsg("test_logger", Level.INFO, "message", source=SourceLoc("ignored", 1, "func"))
    msg2 = LogMsg("test_logger", Level.INFO, "message", source=SourceLoc("ignored", 1, "function"))
    assert formatter.format(msg1) == "message [ func]"
    assert formatter.format(msg2) == "message [funct]"


def _clone_pair(formatter, name="test"):
    clone = formatter.clone()
    msg = LogMsg(name, Level.INFO, "some message")
    return formatter.format(msg), clone.format(msg)


def test_clone_default_formatter():
    first, second = _clone_pair(PatternFormatter())
    assert first == second


def test_clone_default_formatter2():
    first, second = _clone_pair(PatternFormatter("%+"))
    assert first == second


def test_clone_formatter():
    first, second = _clone_pair(PatternFormatter("%D %X [%] [%n] %v"))
    assert first == second


def test_clone_formatter_2():
    formatter = PatternFormatter("%D %X [%] [%n] %v", UTC, "xxxxxx\n")
    first, second = _clone_pair(formatter, "test2")
    assert first == second
    assert first.endswith("[test2] some messagexxxxxx\n")
    assert formatter.clone().pattern() == "%D %X [%] [%n] %v"


TEST_PATH = f"{os.sep}a{os.sep}b{os.sep}{os.sep}myfile.cpp"


def _source_msg(filename):
    return LogMsg("logger-name", Level.INFO, "Hello", source=SourceLoc(filename, 123, "some_func()"))


def test_short_filename_formatter_1():
    assert PatternFormatter("%s", LOCAL, "").format(_source_msg(TEST_PATH)) == "myfile.cpp"


def test_short_filename_formatter_2():
    assert PatternFormatter("%s:%#", LOCAL, "").format(_source_msg("myfile.cpp")) == "myfile.cpp:123"


def test_short_filename_formatter_3():
    assert PatternFormatter("%s %v", LOCAL, "").format(_source_msg("")) == " Hello"


def test_full_filename_formatter():
    assert PatternFormatter("%g", LOCAL, "").format(_source_msg(TEST_PATH)) == TEST_PATH


def test_source_flags_empty_without_location():
    msg = LogMsg("n", Level.INFO, "Hello")
    assert PatternFormatter("[%@][%s][%g][%#][%!]%v", LOCAL, "").format(msg) == "[][][][][]Hello"


@pytest.mark.parametrize(
    "pattern, expected",
    [
        ("%Y-%m-%d %H:%M:%S.%e", "2001-09-09 01:46:40.123"),
        ("%f", "123456"),
        ("%F", "123456789"),
        ("%E", "1000000000"),
        ("%a %A", "Sun Sunday"),
        ("%b %h %B", "Sept Sept September"),
        ("%c", "Sun Sept 9 01:46:40 2001"),
        ("%C", "01"),
        ("%I %p", "01 AM"),
        ("%r", "01:46:40 AM"),
        ("%R", "01:46"),
        ("%T|%X", "01:46:40|01:46:40"),
        ("%x", "09/09/01"),
    ],
)
def test_time_flags_utc(pattern, expected):
    msg = LogMsg("n", Level.INFO, "m", time=FIXED_NS)
    assert PatternFormatter(pattern, UTC, "").format(msg) == expected


def test_full_pattern_utc():
    msg = LogMsg("test", Level.INFO, "hello", time=FIXED_NS)
    out = PatternFormatter("%+", UTC, "\n").format(msg)
    assert out == "[2001-09-09 01:46:40.123] [test] [info] hello\n"
    assert out[msg.color_range_start:msg.color_range_end] == "info"


def test_time_cache_refreshes_on_new_second():
    formatter = PatternFormatter("%S", UTC, "")
    first = formatter.format(LogMsg("n", Level.INFO, "m", time=FIXED_NS))
    second = formatter.format(LogMsg("n", Level.INFO, "m", time=FIXED_NS + 5_000_000_000))
    assert (first, second) == ("40", "45")


def test_percent_and_unknown_flags():
    assert log_to_str("m", "[%%] %Q %v", LOCAL, "") == "[%] %Q m"


def test_trailing_percent_is_dropped():
    assert log_to_str("m", "abc%", LOCAL, "") == "abc"


def test_default_eol_and_pattern():
    formatter = PatternFormatter()
    assert formatter.pattern() == "%+"
    assert formatter.format(LogMsg("n", Level.INFO, "x")).endswith("x" + os.linesep)


def test_parse_padspec_full():
    assert parse_padspec("%-8!l", 1) == (PaddingInfo(8, PadSide.RIGHT, True, True), 4)


def test_parse_padspec_center_and_cap():
    assert parse_padspec("=300n", 0) == (PaddingInfo(64, PadSide.CENTER, False, True), 4)


def test_parse_padspec_no_digits():
    assert parse_padspec("-x", 0) == (PaddingInfo(), 1)
    assert parse_padspec("l", 0) == (PaddingInfo(), 0)
    assert parse_padspec("", 0) == (PaddingInfo(), 0)


def test_side_marker_without_width_uses_next_flag():
    assert log_to_str("m", "%-v", LOCAL, "") == "m"


def test_pattern_time_type_values():
    assert PatternTimeType("utc") is UTC
    with pytest.raises(ValueError):
        PatternFormatter("%v", "sideways", "")