"""Build code buffers from files, methods and modules."""

from __future__ import annotations

import inspect
from typing import Any

from codebuffer.buffer import CodeBuffer
from locate.methods import MethodRecord
from locate.modules import ModuleRecord
from scan.files import FileContentProvider


def code_from_file(
    filename: str,
    *,
    files: FileContentProvider | None = None,
    code_kind: str | None = None,
) -> CodeBuffer:
    """Load a whole file (or the session buffer) into a buffer.

    The code kind comes from ``files`` (and its configured overrides) unless
    ``code_kind`` is given.
    """
    files = files or FileContentProvider()
    kind = code_kind or files.code_kind_for(filename)
    return CodeBuffer(files.read_lines(filename), 1, kind)


def code_from_method(method: Any, start_line: int | None = None) -> CodeBuffer:
    """Load the definition of ``method``.

    Lines keep their numbers in the defining file unless ``start_line`` is
    given, e.g. 1 to renumber from the top.
    """
    record = method if isinstance(method, MethodRecord) else MethodRecord(method)
    start = start_line or record.source_line or 1
    return CodeBuffer(record.source, start, record.code_kind)


def code_from_module(
    module: Any, start_line: int | None = None, candidate_rank: int = 0
) -> CodeBuffer:
    """Load the declaration of a class or module for the given candidate."""
    record = module if isinstance(module, ModuleRecord) else ModuleRecord(module)
    candidate = record.candidate(candidate_rank)
    start = start_line or candidate.line
    return CodeBuffer(candidate.source(), start, candidate.code_kind)


def as_code(obj: Any) -> CodeBuffer:
    """Convert ``obj`` to a buffer, if it isn't one already."""
    if isinstance(obj, CodeBuffer):
        return obj
    if isinstance(obj, MethodRecord) or inspect.isroutine(obj):
        return code_from_method(obj)
    if isinstance(obj, ModuleRecord) or inspect.isclass(obj) or inspect.ismodule(obj):
        return code_from_module(obj)
    return CodeBuffer(obj)


__all__ = ["as_code", "code_from_file", "code_from_method", "code_from_module"]
