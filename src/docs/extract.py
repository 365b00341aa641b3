"""Documentation comment extraction.

The documentation of a declaration is the contiguous run of comment (and
blank) lines directly above it. Comment leaders and the indentation shared by
the captured lines are stripped; an empty string means the declaration simply
has no documentation comment, which is not a lookup failure.
"""

from __future__ import annotations

import re
import textwrap
from typing import TYPE_CHECKING

from codebuffer.kinds import comment_leader_for
from errors import NotFound
from scan.files import FileContentProvider

if TYPE_CHECKING:
    from collections.abc import Sequence

    from locate.models import SourceSpan


def _comment_pattern(leader: str) -> re.Pattern[str]:
    return re.compile(rf"^\s*{re.escape(leader)}")


def _skip_decorators(lines: Sequence[str], idx: int) -> int:
    # Python decorators sit between a class or def and its comment block.
    while idx >= 0 and lines[idx].lstrip().startswith("@"):
        idx -= 1
    return idx


def collect_comment_block(
    lines: Sequence[str], line_number: int, code_kind: str = "python"
) -> list[str]:
    """Return the raw comment run above ``line_number``, top to bottom.

    Leading and trailing blank lines are dropped from the run.
    """
    comment_re = _comment_pattern(comment_leader_for(code_kind))
    idx = line_number - 2
    if code_kind == "python":
        idx = _skip_decorators(lines, idx)

    block: list[str] = []
    while idx >= 0:
        line = lines[idx]
        if line.strip() and not comment_re.match(line):
            break
        block.append(line)
        idx -= 1
    block.reverse()

    while block and not block[0].strip():
        block.pop(0)
    while block and not block[-1].strip():
        block.pop()
    return block


def strip_comment_leaders(block: Sequence[str], code_kind: str = "python") -> str:
    """Remove comment leaders and common indentation from a comment run."""
    if not block:
        return ""
    comment_re = _comment_pattern(comment_leader_for(code_kind))
    stripped = [comment_re.sub("", line, count=1) for line in block]
    return textwrap.dedent("\n".join(stripped)) + "\n"


def comment_above(
    lines: Sequence[str], line_number: int, code_kind: str = "python"
) -> str:
    """Return the cleaned documentation comment above ``line_number``."""
    return strip_comment_leaders(
        collect_comment_block(lines, line_number, code_kind), code_kind
    )


class DocExtractor:
    """Extract documentation comments for resolved declarations."""

    def __init__(self, files: FileContentProvider | None = None) -> None:
        self.files = files or FileContentProvider()

    def extract_doc(
        self,
        span: SourceSpan,
        lines: Sequence[str] | None = None,
        code_kind: str | None = None,
    ) -> str:
        """Return the documentation comment above ``span.start_line``.

        Raises:
            NotFound: if the span points past the end of its file.
            Unreadable: if the file has to be read and cannot be.
        """
        if lines is None:
            lines = self.files.read_lines(span.file)
        if span.start_line > len(lines):
            msg = f"{span} is past the end of the file ({len(lines)} lines)"
            raise NotFound(msg)

        kind = code_kind or self.files.code_kind_for(span.file)
        return comment_above(lines, span.start_line, kind)


__all__ = [
    "DocExtractor",
    "collect_comment_block",
    "comment_above",
    "strip_comment_leaders",
]
