"""Line-number-preserving code buffers.

A :class:`CodeBuffer` holds lines of source text together with the line number
each one had where it came from. Windowing and formatting methods never mutate
the receiver: they return a new buffer, so calls can be chained freely::

    CodeBuffer(text, start_line=40).around(52, 3).with_line_numbers().render()

Line numbers are assigned once, when a line enters a buffer, and survive every
later transform.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Union

from codebuffer.kinds import DEFAULT_CODE_KIND
from codebuffer.render import (
    RenderOptions,
    format_line_number,
    format_marker,
    highlight_code,
)
from utils import split_lines

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator
    from typing import IO

BufferSource = Union[str, "Iterable[str]", "IO[str]"]


@dataclass(frozen=True)
class LineEntry:
    """One line of text and the line number it was created with."""

    text: str
    line_number: int

    def __iter__(self) -> Iterator[str | int]:
        yield self.text
        yield self.line_number


@dataclass(frozen=True)
class Formatting:
    """Display flags carried by a buffer; they only affect ``render``."""

    line_numbers: bool = False
    marker_line: int | None = None
    indentation: int | None = None
    color: bool = False


def _chomp(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith(("\n", "\r")):
        return line[:-1]
    return line


def _split_source(source: BufferSource | None) -> list[str]:
    if source is None:
        return []
    if isinstance(source, str):
        return split_lines(source)
    return [_chomp(line) for line in source]


class CodeBuffer:
    """An ordered, immutable sequence of numbered lines plus display flags."""

    __hash__ = None  # type: ignore[assignment]

    def __init__(
        self,
        source: BufferSource | None = None,
        start_line: int = 1,
        code_kind: str = DEFAULT_CODE_KIND,
    ) -> None:
        start = int(start_line)
        self._entries: list[LineEntry] = [
            LineEntry(text, start + offset)
            for offset, text in enumerate(_split_source(source))
        ]
        self.code_kind = code_kind
        self.formatting = Formatting()

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[LineEntry],
        code_kind: str = DEFAULT_CODE_KIND,
    ) -> CodeBuffer:
        buffer = cls(code_kind=code_kind)
        buffer._entries = list(entries)
        return buffer

    # -- building -----------------------------------------------------------

    def push(self, text: str, line_number: int | None = None) -> str:
        """Append a line in place and return it.

        The new line is numbered one past the current last line unless
        ``line_number`` is given, which allows non-contiguous buffers. This is
        the only in-place operation; use it while assembling a buffer.
        """
        if line_number is None:
            line_number = self._entries[-1].line_number + 1 if self._entries else 1
        self._entries.append(LineEntry(_chomp(text), line_number))
        return text

    append = push

    # -- windowing ----------------------------------------------------------

    def select(self, predicate: Callable[[str, int], object]) -> CodeBuffer:
        """Keep the entries for which ``predicate(text, line_number)`` is true."""
        return self._alter(
            entries=[e for e in self._entries if predicate(e.text, e.line_number)]
        )

    def between(
        self, start_line: int | range | None, end_line: int | None = None
    ) -> CodeBuffer:
        """Keep the lines numbered from ``start_line`` to ``end_line`` inclusive.

        ``start_line`` may be a ``range``, whose exclusive stop is converted to
        an inclusive end. Negative bounds are indices counted from the end of
        the stored entries rather than line numbers.
        """
        if start_line is None:
            return self

        start, end = self._reform_bounds(start_line, end_line)
        count = len(self._entries)

        start_idx = self._find_start_index(start)
        if start < 0:
            start_idx += count

        end_idx = self._find_end_index(end)
        if end < 0:
            end_idx += count

        if start_idx < 0 or start_idx > count or end_idx < start_idx:
            return self._alter(entries=[])
        return self._alter(entries=self._entries[start_idx : end_idx + 1])

    def take_lines(self, start_line: int, num_lines: int) -> CodeBuffer:
        """Take ``num_lines`` entries from ``start_line``.

        A negative ``start_line`` is an index from the end of the buffer. A
        negative ``num_lines`` takes lines backward, ending with the start line.
        """
        count = len(self._entries)
        if start_line >= 0:
            start_idx = self._find_start_index(start_line)
        else:
            start_idx = count + start_line

        if start_idx < 0 or start_idx >= count:
            return self._alter(entries=[])

        if num_lines >= 0:
            return self._alter(entries=self._entries[start_idx : start_idx + num_lines])

        first = max(start_idx + num_lines + 1, 0)
        return self._alter(entries=self._entries[first : start_idx + 1])

    def before(self, line_number: int | None, lines: int = 1) -> CodeBuffer:
        """Keep the ``lines`` lines up to, but excluding, ``line_number``."""
        if line_number is None:
            return self
        return self.select(lambda _, ln: line_number - lines <= ln < line_number)

    def around(self, line_number: int | None, lines: int = 1) -> CodeBuffer:
        """Keep ``line_number`` and ``lines`` lines on either side of it."""
        if line_number is None:
            return self
        return self.select(
            lambda _, ln: line_number - lines <= ln <= line_number + lines
        )

    def after(self, line_number: int | None, lines: int = 1) -> CodeBuffer:
        """Keep the ``lines`` lines following, but excluding, ``line_number``."""
        if line_number is None:
            return self
        return self.select(lambda _, ln: line_number < ln <= line_number + lines)

    def grep(self, pattern: str | re.Pattern[str] | None) -> CodeBuffer:
        """Keep the lines in which ``pattern`` is found."""
        if pattern is None:
            return self
        regex = re.compile(pattern)
        return self.select(lambda text, _: regex.search(text))

    # -- formatting ---------------------------------------------------------

    def with_line_numbers(self, enabled: bool = True) -> CodeBuffer:
        return self._alter(line_numbers=bool(enabled))

    def with_marker(self, line_number: int | None = 1) -> CodeBuffer:
        """Point a marker at ``line_number``; a falsy value removes it."""
        return self._alter(marker_line=line_number or None)

    def with_indentation(self, spaces: int | None = 0) -> CodeBuffer:
        """Indent every rendered line; ``None`` turns indentation off."""
        return self._alter(indentation=spaces)

    def colorize(self, enabled: bool = True) -> CodeBuffer:
        return self._alter(color=bool(enabled))

    def render(self, options: RenderOptions | None = None) -> str:
        """Return the formatted text, one newline-terminated line per entry."""
        options = options or RenderOptions()
        fmt = self.formatting
        width = len(str(max(e.line_number for e in self._entries))) if self._entries else 0

        rendered: list[str] = []
        for entry in self._entries:
            text = entry.text
            if fmt.color and options.color:
                text = highlight_code(text, self.code_kind, options.theme)
            if fmt.line_numbers:
                text = f"{format_line_number(entry.line_number, width)}{text}"
            if fmt.marker_line is not None:
                text = f"{format_marker(entry.line_number, fmt.marker_line)}{text}"
            if fmt.indentation is not None:
                text = f"{' ' * fmt.indentation}{text}"
            rendered.append(f"{text}\n")
        return "".join(rendered)

    def raw_text(self) -> str:
        """Return the unformatted text, ignoring every formatting flag."""
        if not self._entries:
            return ""
        return "\n".join(e.text for e in self._entries) + "\n"

    # -- delegated analysis -------------------------------------------------

    def comment_describing(self, line_number: int) -> str:
        """Return the comment block directly above ``line_number``."""
        from docs.extract import comment_above

        return comment_above(self._numbered_lines(), line_number, self.code_kind)

    def expression_at(self, line_number: int) -> str:
        """Return the complete expression that starts at ``line_number``."""
        from parse.expressions import ExpressionBoundaryResolver

        text, _ = ExpressionBoundaryResolver().find_expression(
            self._numbered_lines(), line_number
        )
        return text

    # -- introspection ------------------------------------------------------

    @property
    def entries(self) -> tuple[LineEntry, ...]:
        return tuple(self._entries)

    @property
    def lines(self) -> list[str]:
        return [e.text for e in self._entries]

    @property
    def line_numbers(self) -> list[int]:
        return [e.line_number for e in self._entries]

    def length(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LineEntry]:
        return iter(self._entries)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        if self._entries:
            span = f"{self._entries[0].line_number}..{self._entries[-1].line_number}"
        else:
            span = "empty"
        return f"<CodeBuffer {self.code_kind} lines={span} count={len(self)}>"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CodeBuffer):
            return self._entries == other._entries
        return self.render().rstrip("\n") == str(other).rstrip("\n")

    # -- internals ----------------------------------------------------------

    def _alter(
        self, *, entries: list[LineEntry] | None = None, **formatting: object
    ) -> CodeBuffer:
        clone = CodeBuffer.__new__(CodeBuffer)
        clone._entries = list(self._entries) if entries is None else entries
        clone.code_kind = self.code_kind
        clone.formatting = (
            replace(self.formatting, **formatting) if formatting else self.formatting
        )
        return clone

    def _numbered_lines(self) -> list[str]:
        """Lines indexed by line number (1-based), blank where absent."""
        if not self._entries:
            return []
        lines = [""] * max(e.line_number for e in self._entries)
        for entry in self._entries:
            if entry.line_number >= 1:
                lines[entry.line_number - 1] = entry.text
        return lines

    @staticmethod
    def _reform_bounds(
        start_line: int | range, end_line: int | None
    ) -> tuple[int, int]:
        if isinstance(start_line, range):
            return start_line.start, start_line.stop - 1
        if end_line is None:
            end_line = start_line
        return start_line, end_line

    def _find_start_index(self, start_line: int) -> int:
        if start_line < 0:
            return start_line
        for idx, entry in enumerate(self._entries):
            if entry.line_number >= start_line:
                return idx
        return len(self._entries)

    def _find_end_index(self, end_line: int) -> int:
        if end_line < 0:
            return end_line
        for idx, entry in enumerate(self._entries):
            if entry.line_number > end_line:
                return idx - 1
        return -1


__all__ = ["BufferSource", "CodeBuffer", "Formatting", "LineEntry"]
