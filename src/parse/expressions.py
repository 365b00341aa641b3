"""Expression boundary resolution.

Given the lines of a file and a starting line, find the smallest complete
top-level unit (a definition, a block, or a single statement) that begins
there. The resolver walks candidate end lines and asks a syntax collaborator
whether the text so far forms exactly one complete unit; the collaborator is
the only part that knows the language grammar.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from errors import NotFound
from parse.treesitter_declarations import _get_parser

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

logger = logging.getLogger(__name__)

_NON_UNIT_NODES = frozenset({"comment", "ERROR"})
_CONTINUATION_KEYWORDS = ("else", "elif", "except", "finally")


class SyntaxCollaborator(Protocol):
    """Grammar-aware check used by :class:`ExpressionBoundaryResolver`."""

    def is_complete_unit(self, source: str) -> bool:
        """Return True when ``source`` is exactly one complete unit."""
        ...


class TreeSitterPythonSyntax:
    """Python completeness checks backed by tree-sitter."""

    def is_complete_unit(self, source: str) -> bool:
        tree = _get_parser().parse(source.encode("utf8"))
        root = tree.root_node
        if root.has_error:
            return False

        units = [node for node in root.named_children if node.type != "comment"]
        if len(units) != 1:
            return False

        unit = units[0]
        return unit.type not in _NON_UNIT_NODES and unit.start_point[0] == 0


def _indent_width(line: str) -> int:
    return len(line) - len(line.lstrip())


def _dedent(line: str, width: int) -> str:
    prefix = line[:width]
    if prefix.strip():
        return line.lstrip()
    return line[width:]


def _continues_block(line: str) -> bool:
    word = line.strip().split(":", 1)[0].split(" ", 1)[0]
    return word in _CONTINUATION_KEYWORDS


class ExpressionBoundaryResolver:
    """Find the complete unit of code starting at a given line."""

    def __init__(self, syntax: SyntaxCollaborator | None = None) -> None:
        self.syntax = syntax or TreeSitterPythonSyntax()

    def find_expression(
        self, file_lines: Sequence[str], start_line: int
    ) -> tuple[str, int]:
        """Return ``(text, end_line)`` for the unit opened at ``start_line``.

        ``start_line`` and the returned ``end_line`` are 1-based and inclusive.
        ``text`` holds the original, undedented lines, each newline-terminated.

        Raises:
            NotFound: if ``start_line`` does not open a recognizable unit.
        """
        if not 1 <= start_line <= len(file_lines):
            msg = f"Line {start_line} is outside the file ({len(file_lines)} lines)"
            raise NotFound(msg)

        first = file_lines[start_line - 1]
        if not first.strip():
            msg = f"Line {start_line} is blank"
            raise NotFound(msg)

        width = _indent_width(first)
        start_idx = start_line - 1
        for end_idx in self._candidate_ends(file_lines, start_idx, width):
            chunk = [_dedent(line, width) for line in file_lines[start_idx : end_idx + 1]]
            if self.syntax.is_complete_unit("\n".join(chunk) + "\n"):
                text = "".join(f"{line}\n" for line in file_lines[start_idx : end_idx + 1])
                return text, end_idx + 1

        logger.debug("No complete unit starts at line %d", start_line)
        msg = f"No complete expression starts at line {start_line}"
        raise NotFound(msg)

    @staticmethod
    def _candidate_ends(
        file_lines: Sequence[str], start_idx: int, width: int
    ) -> Iterator[int]:
        """Yield indices of lines after which the unit could end.

        A unit can only end on a code line that is followed by a line at or
        left of the unit's own indentation, or by the end of the file. Blank
        and comment lines are skipped.
        """
        last_code = start_idx
        for idx in range(start_idx + 1, len(file_lines)):
            line = file_lines[idx]
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if _indent_width(line) <= width and not _continues_block(line):
                yield last_code
            last_code = idx
        yield last_code


__all__ = [
    "ExpressionBoundaryResolver",
    "SyntaxCollaborator",
    "TreeSitterPythonSyntax",
]
