import os
import threading
import time

import pytest

from sparklog.flags import (
    AggregateFormatter,
    FullFormatter,
    OutputBuffer,
    PaddingInfo,
    PadSide,
    basename,
    make_flag_formatter,
)
from sparklog.fmt_helper import SECONDS
from sparklog.message import Level, LogMsg, SourceLoc

T_NS = 1_500_000_000_123_456_789
TM = time.gmtime(T_NS // SECONDS)


def make_msg(payload="Some message", name="pattern_tester", source=None, when=T_NS):
    return LogMsg(
        logger_name=name,
        level=Level.INFO,
        payload=payload,
        source=source if source is not None else SourceLoc(),
        time=when,
    )


def pad(width, side=PadSide.LEFT, truncate=False):
    return PaddingInfo(width, side, truncate, True)


def render(flag, msg=None, tm=TM, padding=None):
    dest = OutputBuffer()
    make_flag_formatter(flag, padding or PaddingInfo()).format(msg or make_msg(), tm, dest)
    return dest.getvalue()


def test_output_buffer_append_truncate():
    buf = OutputBuffer()
    buf.append("hello")
    buf.append(" world")
    assert len(buf) == 11
    buf.truncate(5)
    assert buf.getvalue() == "hello"
    assert len(buf) == 5
    with pytest.raises(ValueError):
        buf.truncate(-1)


def test_padding_info_default_disabled():
    assert PaddingInfo().enabled() is False
    assert pad(3).enabled() is True


@pytest.mark.parametrize(
    "padding, expected",
    [
        (pad(8), "    info"),
        (pad(8, truncate=True), "    info"),
        (pad(8, PadSide.RIGHT), "info    "),
        (pad(8, PadSide.CENTER), "  info  "),
    ],
)
def test_level_padding(padding, expected):
    assert render("l", padding=padding) == expected


@pytest.mark.parametrize(
    "padding, expected",
    [(pad(3), "  I"), (pad(3, PadSide.RIGHT), "I  "), (pad(3, PadSide.CENTER), " I ")],
)
def test_short_level_padding(padding, expected):
    assert render("L", padding=padding) == expected


def test_name_short_padding_and_truncate():
    assert render("n", padding=pad(3)) == "pattern_tester"
    assert render("n", padding=pad(3, truncate=True)) == "pat"
    assert render("n", padding=pad(3, PadSide.CENTER, truncate=True)) == "pat"


@pytest.mark.parametrize(
    "padding, expected",
    [
        (pad(6, truncate=True), "123456"),
        (pad(5, truncate=True), "12345"),
        (pad(7, truncate=True), " 123456"),
        (pad(7, PadSide.RIGHT, truncate=True), "123456 "),
        (pad(7, PadSide.CENTER, truncate=True), "123456 "),
        (pad(0, truncate=True), ""),
    ],
)
def test_payload_truncate(padding, expected):
    assert render("v", make_msg("123456"), padding=padding) == expected


def test_funcname_truncate():
    src_short = SourceLoc("ignored", 1, "func")
    src_long = SourceLoc("ignored", 1, "function")
    assert render("!", make_msg(source=src_short), padding=pad(5, truncate=True)) == " func"
    assert render("!", make_msg(source=src_long), padding=pad(5, truncate=True)) == "funct"


def test_unknown_and_percent_flags():
    assert render("k") == "%k"
    assert render("%") == "%"


def test_aggregate_formatter():
    agg = AggregateFormatter()
    agg.add("ab")
    agg.add("c")
    dest = OutputBuffer("x")
    agg.format(make_msg(), TM, dest)
    assert dest.getvalue() == "xabc"


def test_color_range_marks():
    msg = make_msg("Hello")
    dest = OutputBuffer("XX")
    for flag in "^v$":
        make_flag_formatter(flag, PaddingInfo()).format(msg, TM, dest)
    assert msg.color_range_start == 2
    assert msg.color_range_end == 7
    assert dest.getvalue()[msg.color_range_start:msg.color_range_end] == "Hello"


def test_basename():
    path = os.sep + os.path.join("a", "b", "myfile.cpp")
    assert basename(path) == "myfile.cpp"
    assert basename("myfile.cpp") == "myfile.cpp"


def test_source_flags():
    path = os.path.join("a", "b", "myfile.cpp")
    msg = make_msg(source=SourceLoc(path, 123, "some_func()"))
    assert render("s", msg) == "myfile.cpp"
    assert render("g", msg) == path
    assert render("#", msg) == "123"
    assert render("!", msg) == "some_func()"
    assert render("@", make_msg(source=SourceLoc("myfile.cpp", 123, "f"))) == "myfile.cpp:123"


def test_source_flags_empty_location():
    for flag in "s@g#!":
        assert render(flag, padding=pad(10)) == ""


def test_sub_second_and_epoch_fields():
    assert render("e") == "123"
    assert render("f") == "123456"
    assert render("F") == "123456789"
    assert render("E") == "1500000000"


def test_date_names_on_epoch():
    tm = time.gmtime(0)
    assert render("a", tm=tm) == "Thu"
    assert render("A", tm=tm) == "Thursday"
    assert render("b", tm=tm) == "Jan"
    assert render("h", tm=tm) == "Jan"
    assert render("B", tm=tm) == "January"
    assert render("Y", tm=tm) == "1970"


def test_composite_fields_agree_with_parts():
    m, d, c = render("m"), render("d"), render("C")
    assert render("D") == f"{m}/{d}/{c}"
    assert render("x") == render("D")
    h, mi, s = render("H"), render("M"), render("S")
    assert render("T") == f"{h}:{mi}:{s}"
    assert render("X") == render("T")
    assert render("R") == f"{h}:{mi}"
    assert int(m) == TM.tm_mon
    assert render("c").endswith(f" {h}:{mi}:{s} {TM.tm_year}")
    assert render("c").startswith(render("a") + " " + render("b") + " ")


def test_twelve_hour_clock():
    tm = time.gmtime(13 * 3600)
    assert render("I", tm=tm) == "01"
    assert render("p", tm=tm) == "PM"
    assert render("r", tm=tm) == f"{render('I', tm=tm)}:00:00 PM"
    assert render("p", tm=time.gmtime(0)) == "AM"


def test_utc_offset_on_gmtime():
    assert render("z") == "+00:00"


def test_thread_and_pid():
    assert render("t", make_msg()) == str(threading.get_ident())
    assert render("P") == str(os.getpid())


def test_elapsed_seconds():
    formatter = make_flag_formatter("O", PaddingInfo())
    start = time.time_ns()
    results = []
    for when in (start, start + 3 * SECONDS, start):
        dest = OutputBuffer()
        formatter.format(make_msg(when=when), TM, dest)
        results.append(dest.getvalue())
    assert results == ["0", "3", "0"]


def test_full_formatter_layout():
    msg = make_msg("some message", name="test")
    dest = OutputBuffer()
    FullFormatter().format(msg, TM, dest)
    stamp = time.strftime("%Y-%m-%d %H:%M:%S", TM)
    assert dest.getvalue() == f"[{stamp}.123] [test] [info] some message"
    assert dest.getvalue()[msg.color_range_start:msg.color_range_end] == "info"


def test_full_formatter_cache_and_source():
    formatter = make_flag_formatter("+", PaddingInfo())
    src = SourceLoc(os.path.join("a", "b", "f.cpp"), 7, "fn")
    first, second = OutputBuffer(), OutputBuffer()
    formatter.format(make_msg("one", name=""), TM, first)
    formatter.format(make_msg("two", source=src, when=T_NS + 500_000_000), TM, second)
    stamp = time.strftime("%Y-%m-%d %H:%M:%S", TM)
    assert first.getvalue() == f"[{stamp}.123] [info] one"
    assert second.getvalue() == f"[{stamp}.623] [pattern_tester] [info] [f.cpp:7] two"