"""Source location resolution for classes and modules.

A function knows where it was defined; a class does not. To find a class we
look at the methods declared directly on it, group them by the file they were
defined in (each file is a *candidate*), and from the first locatable method in
a candidate file scan upward for the nearest ``class <Name>`` declaration.

Python files are searched with tree-sitter declaration nodes first. Other
files, or Python files where the parser finds no matching declaration, fall
back to a textual backward scan. Both are heuristics: a nested class sharing
its last name segment with an unrelated class can be picked by mistake.
"""

from __future__ import annotations

import inspect
import logging
import re
from typing import TYPE_CHECKING

from docs.extract import DocExtractor
from errors import AmbiguousCandidateIndex, NotFound
from locate.introspect import MethodIntrospector, PythonIntrospector
from locate.models import SourceSpan
from parse.expressions import ExpressionBoundaryResolver
from parse.treesitter_declarations import find_declaration_line
from scan.files import FileContentProvider
from utils import unindent

if TYPE_CHECKING:
    from collections.abc import Sequence

    from locate.models import MethodRef
    from locate.modules import ModuleRecord

logger = logging.getLogger(__name__)

DECLARATION_KEYWORD = "class"


def declaration_pattern(
    simple_name: str, keyword: str = DECLARATION_KEYWORD
) -> re.Pattern[str]:
    """Match a declaration line for ``simple_name``.

    An optional namespace path may precede the name (``class outer.Name``,
    ``class Outer::Name``) and nothing is required after it, so reopened or
    base-less declarations match too.
    """
    return re.compile(
        rf"^\s*{re.escape(keyword)}\s+(?:\w+(?:\.|::))*{re.escape(simple_name)}\b"
    )


def scan_backward(
    lines: Sequence[str], pattern: re.Pattern[str], anchor_line: int
) -> int | None:
    """Return the closest line above ``anchor_line`` matching ``pattern``."""
    for idx in range(min(anchor_line, len(lines) + 1) - 2, -1, -1):
        if pattern.search(lines[idx]):
            return idx + 1
    return None


class Candidate:
    """One file in which a class has locatable methods.

    The declaration line is searched for lazily, the first time it is needed.
    """

    def __init__(
        self,
        locator: SourceLocator,
        record: ModuleRecord,
        rank: int,
        file: str,
        anchor_line: int | None,
    ) -> None:
        self.locator = locator
        self.record = record
        self.rank = rank
        self.file = file
        self.anchor_line = anchor_line
        self._line: int | None = None if anchor_line is not None else 1
        self._lines: list[str] | None = None

    def __repr__(self) -> str:
        return f"<Candidate #{self.rank} {self.file} anchor={self.anchor_line}>"

    @property
    def code_kind(self) -> str:
        return self.locator.files.code_kind_for(self.file)

    @property
    def lines(self) -> list[str]:
        if self._lines is None:
            self._lines = self.locator.files.read_lines(self.file)
        return self._lines

    @property
    def line(self) -> int:
        """The declaration line. Raises NotFound if none can be found."""
        if self._line is None:
            assert self.anchor_line is not None
            found = self.locator.find_declaration(
                self.lines, self.record.simple_name, self.anchor_line, self.code_kind
            )
            if found is None:
                msg = (
                    f"No declaration of {self.record.simple_name!r} found above "
                    f"line {self.anchor_line} of {self.file}"
                )
                raise NotFound(msg)
            self._line = found
        return self._line

    @property
    def span(self) -> SourceSpan:
        return SourceSpan(file=self.file, start_line=self.line)

    def source(self) -> str:
        """Return the complete, unindented declaration text."""
        if self.anchor_line is None:
            return "".join(f"{line}\n" for line in self.lines)
        text, _ = self.locator.expressions.find_expression(self.lines, self.line)
        return unindent(text)

    def doc(self) -> str:
        return self.locator.docs.extract_doc(self.span, self.lines, self.code_kind)


class SourceLocator:
    """Resolve where classes and modules are declared."""

    def __init__(
        self,
        introspector: MethodIntrospector | None = None,
        files: FileContentProvider | None = None,
        expressions: ExpressionBoundaryResolver | None = None,
        docs: DocExtractor | None = None,
    ) -> None:
        self.introspector = introspector or PythonIntrospector()
        self.files = files or FileContentProvider()
        self.expressions = expressions or ExpressionBoundaryResolver()
        self.docs = docs or DocExtractor(self.files)

    def find_declaration(
        self,
        lines: Sequence[str],
        simple_name: str,
        anchor_line: int,
        code_kind: str = "python",
    ) -> int | None:
        """Return the declaration line of ``simple_name`` owning ``anchor_line``."""
        if code_kind == "python":
            found = find_declaration_line(lines, simple_name, anchor_line)
            if found is not None:
                return found
            logger.debug(
                "No class node for %s above line %d; scanning text",
                simple_name,
                anchor_line,
            )
        return scan_backward(lines, declaration_pattern(simple_name), anchor_line)

    def candidates(self, record: ModuleRecord) -> list[Candidate]:
        """Return the ranked candidates for ``record`` in discovery order."""
        cached = record.cached_candidates
        if cached is not None:
            return cached

        target = record.resolution_target
        if inspect.ismodule(target):
            file = getattr(target, "__file__", None)
            found = [Candidate(self, record, 0, file, None)] if file else []
        else:
            methods = self.introspector.list_declared_methods(
                target, include_singleton=True
            )
            found = self._group_by_file(record, methods)

        logger.debug("%d candidate(s) for %s", len(found), record.qualified_name)
        record.cache_candidates(found)
        return found

    def _group_by_file(
        self, record: ModuleRecord, methods: list[MethodRef]
    ) -> list[Candidate]:
        anchors: dict[str, int] = {}
        for method in methods:
            if not method.is_locatable:
                continue
            assert method.span is not None
            anchors.setdefault(method.span.file, method.span.start_line)

        return [
            Candidate(self, record, rank, file, anchor)
            for rank, (file, anchor) in enumerate(anchors.items())
        ]

    def candidate(self, record: ModuleRecord, candidate_rank: int = 0) -> Candidate:
        candidates = self.candidates(record)
        if not candidates:
            msg = f"Cannot locate source for {record.nonblank_name}"
            raise NotFound(msg)
        if not 0 <= candidate_rank < len(candidates):
            raise AmbiguousCandidateIndex(candidate_rank, len(candidates))
        return candidates[candidate_rank]

    def resolve(self, record: ModuleRecord, candidate_rank: int = 0) -> SourceSpan:
        """Return the declaration span of ``record`` for the given candidate.

        Raises:
            NotFound: no locatable methods, or no declaration in the candidate.
            AmbiguousCandidateIndex: ``candidate_rank`` out of range.
            Unreadable: the candidate file cannot be read.
        """
        if candidate_rank == 0 and record.cached_span is not None:
            return record.cached_span

        span = self.candidate(record, candidate_rank).span
        if candidate_rank == 0:
            record.cache_span(span)
        return span


__all__ = [
    "DECLARATION_KEYWORD",
    "Candidate",
    "SourceLocator",
    "declaration_pattern",
    "scan_backward",
]
