"""Inspected classes and modules, with lazily cached location data."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any

from errors import InvalidArgument, SourceLensError
from utils import lookup_target

if TYPE_CHECKING:
    from locate.locator import Candidate, SourceLocator
    from locate.models import SourceSpan


class ModuleRecord:
    """A class or module being inspected.

    ``resolved_span``, ``doc`` and ``source`` are computed on first use and
    reused for the lifetime of the record; call :meth:`refresh` to drop them.

    A singleton record stands for the per-object namespace of
    ``attached_instance``; its location is that of the instance's class.
    """

    def __init__(
        self,
        target: Any,
        *,
        locator: SourceLocator | None = None,
        attached_instance: Any = None,
        is_singleton: bool = False,
    ) -> None:
        if not (inspect.isclass(target) or inspect.ismodule(target)):
            msg = f"Tried to create a ModuleRecord from a non-class {target!r}"
            raise InvalidArgument(msg)

        if locator is None:
            from locate.locator import SourceLocator

            locator = SourceLocator()

        self.target = target
        self.locator = locator
        self.is_singleton = is_singleton
        self.attached_instance = attached_instance
        self._span: SourceSpan | None = None
        self._candidates: list[Candidate] | None = None
        self._doc: str | None = None
        self._source: str | None = None

    @classmethod
    def for_instance(
        cls, instance: Any, *, locator: SourceLocator | None = None
    ) -> ModuleRecord:
        """Create the singleton record attached to ``instance``."""
        if inspect.isclass(instance) or inspect.ismodule(instance):
            msg = f"{instance!r} is a class or module, not an instance"
            raise InvalidArgument(msg)
        return cls(
            type(instance),
            locator=locator,
            attached_instance=instance,
            is_singleton=True,
        )

    @classmethod
    def from_name(
        cls, name: str, *, locator: SourceLocator | None = None
    ) -> ModuleRecord | None:
        """Look up ``name`` and wrap it, or return None if that fails."""
        try:
            target = lookup_target(name)
        except SourceLensError:
            return None
        if not (inspect.isclass(target) or inspect.ismodule(target)):
            return None
        return cls(target, locator=locator)

    def __repr__(self) -> str:
        return f"<ModuleRecord {self.nonblank_name}>"

    # -- identity -----------------------------------------------------------

    @property
    def resolution_target(self) -> Any:
        """The object whose declaration is searched for."""
        if self.is_singleton:
            return type(self.attached_instance)
        return self.target

    @property
    def kind(self) -> str:
        return "module" if inspect.ismodule(self.target) else "class"

    @property
    def qualified_name(self) -> str | None:
        return self.locator.introspector.name_of(self.resolution_target)

    @property
    def nonblank_name(self) -> str:
        """The qualified name, or the object's repr when it has none."""
        if self.is_singleton:
            return f"<singleton of {self.attached_instance!r}>"
        return self.qualified_name or repr(self.target)

    @property
    def simple_name(self) -> str:
        """The last segment of the name, as written after ``class``."""
        target = self.resolution_target
        return getattr(target, "__name__", "").rsplit(".", 1)[-1]

    @property
    def method_prefix(self) -> str:
        """The prefix shown before method names, e.g. ``"json.JSONDecoder."``."""
        if self.is_singleton:
            return "self."
        return f"{self.nonblank_name}."

    def ancestors(self) -> tuple[Any, ...]:
        return self.locator.introspector.ancestors_of(self.resolution_target)

    # -- cached location data -----------------------------------------------

    @property
    def cached_span(self) -> SourceSpan | None:
        return self._span

    def cache_span(self, span: SourceSpan) -> None:
        self._span = span

    @property
    def cached_candidates(self) -> list[Candidate] | None:
        return self._candidates

    def cache_candidates(self, candidates: list[Candidate]) -> None:
        self._candidates = candidates

    def refresh(self) -> None:
        """Forget every cached location, candidate, doc and source."""
        self._span = None
        self._candidates = None
        self._doc = None
        self._source = None

    @property
    def resolved_span(self) -> SourceSpan:
        return self.locator.resolve(self, 0)

    @property
    def source_file(self) -> str:
        return self.resolved_span.file

    @property
    def source_line(self) -> int:
        return self.resolved_span.start_line

    def candidates(self) -> list[Candidate]:
        return self.locator.candidates(self)

    def candidate(self, rank: int = 0) -> Candidate:
        return self.locator.candidate(self, rank)

    @property
    def doc(self) -> str:
        """The documentation comment above the declaration ("" if none)."""
        if self._doc is None:
            self._doc = self.candidate(0).doc()
        return self._doc

    @property
    def source(self) -> str:
        """The complete declaration text, unindented."""
        if self._source is None:
            self._source = self.candidate(0).source()
        return self._source


__all__ = ["ModuleRecord"]
