"""Inspected functions and methods."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any

from docs.extract import DocExtractor
from errors import InvalidArgument, NotFound
from locate.introspect import function_span
from parse.expressions import ExpressionBoundaryResolver
from scan.files import FileContentProvider
from utils import unindent

if TYPE_CHECKING:
    from locate.models import SourceSpan


def _underlying_function(obj: Any) -> Any:
    if isinstance(obj, (classmethod, staticmethod)):
        return obj.__func__
    if isinstance(obj, property):
        return obj.fget
    if inspect.ismethod(obj):
        return obj.__func__
    return obj


class MethodRecord:
    """A function, bound method, or method descriptor being inspected."""

    def __init__(
        self,
        obj: Any,
        *,
        files: FileContentProvider | None = None,
        expressions: ExpressionBoundaryResolver | None = None,
        docs: DocExtractor | None = None,
    ) -> None:
        func = _underlying_function(obj)
        if not inspect.isroutine(func):
            msg = f"Tried to create a MethodRecord from a non-method {obj!r}"
            raise InvalidArgument(msg)

        self.obj = obj
        self.func = func
        self.files = files or FileContentProvider()
        self.expressions = expressions or ExpressionBoundaryResolver()
        self.docs = docs or DocExtractor(self.files)
        self._span: SourceSpan | None = None
        self._span_known = False
        self._source: str | None = None

    def __repr__(self) -> str:
        return f"<MethodRecord {self.qualified_name}>"

    @property
    def name(self) -> str:
        return getattr(self.func, "__name__", repr(self.func))

    @property
    def qualified_name(self) -> str:
        return getattr(self.func, "__qualname__", self.name)

    @property
    def owner(self) -> Any:
        """The class the method belongs to, when it can be determined."""
        if inspect.ismethod(self.obj):
            bound_to = self.obj.__self__
            return bound_to if inspect.isclass(bound_to) else type(bound_to)
        objclass = getattr(self.func, "__objclass__", None)
        if objclass is not None:
            return objclass

        qualname = self.qualified_name
        module = inspect.getmodule(self.func)
        if module is None or "." not in qualname or "<locals>" in qualname:
            return None
        owner: Any = module
        for part in qualname.split(".")[:-1]:
            owner = getattr(owner, part, None)
            if owner is None:
                return None
        return owner if inspect.isclass(owner) else None

    @property
    def visibility(self) -> str:
        name = self.name
        if name.startswith("__") and not name.endswith("__"):
            return "private"
        if name.startswith("_") and not name.startswith("__"):
            return "protected"
        return "public"

    @property
    def is_bound(self) -> bool:
        return inspect.ismethod(self.obj) or (
            inspect.isbuiltin(self.obj) and getattr(self.obj, "__self__", None) is not None
        )

    def _signature(self) -> inspect.Signature:
        return inspect.signature(self.obj if inspect.ismethod(self.obj) else self.func)

    @property
    def signature(self) -> str:
        try:
            return f"{self.name}{self._signature()}"
        except (TypeError, ValueError):
            return f"{self.name}(...)"

    @property
    def arity(self) -> int:
        """Number of required positional parameters, or -1 if variadic/unknown."""
        try:
            params = self._signature().parameters.values()
        except (TypeError, ValueError):
            return -1
        required = 0
        for param in params:
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                return -1
            if param.default is param.empty and param.kind != param.KEYWORD_ONLY:
                required += 1
        return required

    @property
    def span(self) -> SourceSpan | None:
        """Where the method was defined, or None for native methods."""
        if not self._span_known:
            self._span = function_span(self.func)
            self._span_known = True
        return self._span

    @property
    def is_native(self) -> bool:
        return self.span is None

    @property
    def source_file(self) -> str | None:
        return self.span.file if self.span else None

    @property
    def source_line(self) -> int | None:
        return self.span.start_line if self.span else None

    @property
    def code_kind(self) -> str:
        return self.files.code_kind_for(self.source_file or "")

    def _require_span(self) -> SourceSpan:
        span = self.span
        if span is None:
            msg = f"Cannot locate source for native method {self.name}"
            raise NotFound(msg)
        return span

    @property
    def source(self) -> str:
        """The complete definition text, unindented."""
        if self._source is None:
            span = self._require_span()
            lines = self.files.read_lines(span.file)
            text, _ = self.expressions.find_expression(lines, span.start_line)
            self._source = unindent(text)
        return self._source

    @property
    def comment_doc(self) -> str:
        """The comment block above the definition ("" if none)."""
        return self.docs.extract_doc(self._require_span(), code_kind=self.code_kind)

    @property
    def doc(self) -> str:
        """The comment block above the definition, else the docstring."""
        comment = self.comment_doc if self.span is not None else ""
        if comment:
            return comment
        docstring = inspect.getdoc(self.func)
        return f"{docstring}\n" if docstring else ""


__all__ = ["MethodRecord"]
