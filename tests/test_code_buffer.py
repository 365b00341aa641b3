from __future__ import annotations

import io
import re

import pytest

from codebuffer import CodeBuffer, LineEntry, RenderOptions


def _numbered(count: int = 20) -> CodeBuffer:
    return CodeBuffer([f"line {n}" for n in range(1, count + 1)])


def test_construction_assigns_sequential_numbers_from_start_line() -> None:
    code = CodeBuffer("def foo\n  1\nend\n", start_line=10)

    assert code.line_numbers == [10, 11, 12]
    assert code.lines == ["def foo", "  1", "end"]
    assert len(code) == 3
    assert code.length() == 3


def test_construction_from_stream_chomps_newlines() -> None:
    code = CodeBuffer(io.StringIO("a\nb\r\nc"), start_line=5)

    assert list(code) == [LineEntry("a", 5), LineEntry("b", 6), LineEntry("c", 7)]


def test_construction_splits_on_newlines_only() -> None:
    code = CodeBuffer("x = 1  # a\x0cb\r\n\ndef target():\n", start_line=1)

    assert code.lines == ["x = 1  # a\x0cb", "", "def target():"]
    assert code.between(3).raw_text() == "def target():\n"


def test_between_single_line_example() -> None:
    code = CodeBuffer(["def foo", "  1", "end"], 10)

    assert code.between(11, 11).raw_text() == "  1\n"
    assert code.between(11).raw_text() == "  1\n"


def test_between_window_keeps_numbers_and_order() -> None:
    window = _numbered().between(5, 8)

    assert window.line_numbers == [5, 6, 7, 8]
    assert window.raw_text() == "line 5\nline 6\nline 7\nline 8\n"


def test_between_accepts_range_with_exclusive_stop() -> None:
    assert _numbered().between(range(5, 8)).line_numbers == [5, 6, 7]


def test_between_negative_bounds_index_stored_entries() -> None:
    code = CodeBuffer(["a", "b", "c", "d"], 100)

    assert code.between(-2, -1).lines == ["c", "d"]
    assert code.between(101, -1).line_numbers == [101, 102, 103]


def test_between_outside_buffer_is_empty() -> None:
    code = _numbered()

    assert len(code.between(50, 60)) == 0
    assert code.between(50, 60).raw_text() == ""


def test_between_without_greater_line_is_empty() -> None:
    # No entry is numbered above the end bound, so the end index falls back
    # before the first entry.
    code = _numbered()

    assert len(code.between(15, 20)) == 0
    assert len(code.between(15, 99)) == 0


def test_between_none_returns_receiver() -> None:
    code = _numbered()

    assert code.between(None) is code


def test_take_lines_forward_backward_and_from_end() -> None:
    code = _numbered()

    assert code.take_lines(5, 3).line_numbers == [5, 6, 7]
    assert code.take_lines(5, -3).line_numbers == [3, 4, 5]
    assert code.take_lines(-3, 2).line_numbers == [18, 19]
    assert len(code.take_lines(99, 3)) == 0


def test_before_around_after_windows() -> None:
    code = _numbered()

    assert code.before(10, 2).line_numbers == [8, 9]
    assert code.around(10, 2).line_numbers == [8, 9, 10, 11, 12]
    assert code.after(10, 2).line_numbers == [11, 12]
    assert code.before(None) is code
    assert code.around(None) is code
    assert code.after(None) is code


def test_grep_keeps_matching_lines() -> None:
    code = CodeBuffer(["foo = 1", "bar = 2", "foobar = 3"], 7)

    matched = code.grep(r"foo")

    assert matched.line_numbers == [7, 9]
    assert code.grep(re.compile(r"^bar")).lines == ["bar = 2"]
    assert code.grep(None) is code


def test_select_receives_text_and_line_number() -> None:
    code = _numbered(6)

    evens = code.select(lambda _text, number: number % 2 == 0)

    assert evens.line_numbers == [2, 4, 6]


def test_push_supports_non_contiguous_numbers() -> None:
    code = CodeBuffer()
    code.push("first", 10)
    code.push("second")
    code.append("third\n", 40)

    assert code.line_numbers == [10, 11, 40]
    assert code.lines == ["first", "second", "third"]


def test_transforms_do_not_mutate_receiver() -> None:
    code = _numbered(5)

    code.between(2, 3).with_line_numbers().with_marker(2).with_indentation(4)

    assert code.line_numbers == [1, 2, 3, 4, 5]
    assert code.render() == code.raw_text()


def test_render_line_numbers_are_right_justified() -> None:
    code = CodeBuffer(["a", "b", "c"], 9).with_line_numbers()

    assert code.render() == " 9: a\n10: b\n11: c\n"


def test_render_marker_and_indentation_order() -> None:
    code = (
        CodeBuffer(["x = 1", "y = 2"], 1)
        .with_line_numbers()
        .with_marker(2)
        .with_indentation(2)
    )

    assert code.render() == "      1: x = 1\n   => 2: y = 2\n"


def test_with_marker_falsy_removes_marker() -> None:
    code = CodeBuffer(["a"]).with_marker(1).with_marker(None)

    assert code.render() == "a\n"


def test_render_does_not_change_raw_text() -> None:
    code = CodeBuffer("def f():\n    return 1\n", 3).with_line_numbers().colorize()

    before = code.raw_text()
    code.render(RenderOptions(color=True))

    assert code.raw_text() == before == "def f():\n    return 1\n"


def test_colorize_requires_render_option() -> None:
    code = CodeBuffer(["def f(): pass"]).colorize()

    assert code.render() == "def f(): pass\n"
    colored = code.render(RenderOptions(color=True))
    assert "\x1b[" in colored
    assert re.sub(r"\x1b\[[0-9;]*m", "", colored) == "def f(): pass\n"


def test_equality_between_buffers_and_text() -> None:
    assert CodeBuffer(["a", "b"], 3) == CodeBuffer(["a", "b"], 3)
    assert CodeBuffer(["a", "b"], 3) != CodeBuffer(["a", "b"], 4)
    assert CodeBuffer(["a", "b"]) == "a\nb"
    assert CodeBuffer(["a"]).with_line_numbers() == "1: a\n"


def test_empty_buffer_renders_nothing() -> None:
    code = CodeBuffer()

    assert code.render() == ""
    assert code.raw_text() == ""
    assert len(code.between(1, 5)) == 0


def test_comment_describing_and_expression_at() -> None:
    code = CodeBuffer(
        "# Adds one.\ndef inc(x):\n    return x + 1\n\nvalue = inc(1)\n"
    )

    assert code.comment_describing(2) == "Adds one.\n"
    assert code.expression_at(2) == "def inc(x):\n    return x + 1\n"


@pytest.mark.parametrize("window", [(3, 6), (1, 2), (10, 12)])
def test_between_entries_fall_inside_bounds(window: tuple[int, int]) -> None:
    start, end = window
    code = _numbered()

    result = code.between(start, end)

    assert all(start <= n <= end for n in result.line_numbers)
    assert result.raw_text() == "".join(f"line {n}\n" for n in result.line_numbers)
