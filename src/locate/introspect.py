"""Runtime introspection of classes and modules.

The locator never pokes at live objects directly; it goes through a
:class:`MethodIntrospector`, which exposes exactly what declaration lookup
needs: a name, the ancestry, and the methods declared on a target.
"""

from __future__ import annotations

import inspect
import logging
import types
from typing import TYPE_CHECKING, Any, Protocol

from locate.models import MethodRef, MethodScope, SourceSpan

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

_NATIVE_TYPES = (
    types.BuiltinFunctionType,
    types.WrapperDescriptorType,
    types.MethodDescriptorType,
    types.MethodWrapperType,
    types.ClassMethodDescriptorType,
)


class MethodIntrospector(Protocol):
    """What the locator needs to know about a live class or module."""

    def name_of(self, target: Any) -> str | None: ...

    def ancestors_of(self, target: Any) -> tuple[Any, ...]: ...

    def list_declared_methods(
        self, target: Any, include_singleton: bool = True
    ) -> list[MethodRef]: ...


def function_span(func: Any) -> SourceSpan | None:
    """Return where ``func`` was defined, or None when it has no source."""
    func = inspect.unwrap(func)
    code = getattr(func, "__code__", None)
    if code is None:
        return None

    filename = code.co_filename
    if not filename or (filename.startswith("<") and filename.endswith(">")):
        return None
    return SourceSpan(file=filename, start_line=max(code.co_firstlineno, 1))


def _unwrap_member(value: Any) -> tuple[Any, MethodScope] | None:
    """Map a namespace entry to the function behind it and its scope."""
    if isinstance(value, (classmethod, staticmethod)):
        return value.__func__, "singleton"
    if isinstance(value, property):
        return (value.fget, "instance") if value.fget is not None else None
    if inspect.isfunction(value) or isinstance(value, _NATIVE_TYPES):
        return value, "instance"
    return None


def _mangled(owner_name: str, func_name: str) -> str:
    stripped = owner_name.lstrip("_")
    if not stripped or not func_name.startswith("__") or func_name.endswith("__"):
        return func_name
    return f"_{stripped}{func_name}"


def _is_alias(
    attr_name: str, func: Any, seen: set[int], owner_name: str = ""
) -> bool:
    if id(func) in seen:
        return True
    func_name = getattr(func, "__name__", attr_name)
    # private names are stored mangled: `def __open` on Vault is `_Vault__open`
    return attr_name not in (func_name, _mangled(owner_name, func_name)) and (
        func_name != "<lambda>"
    )


class PythonIntrospector:
    """Introspect Python classes and module objects."""

    def name_of(self, target: Any) -> str | None:
        if inspect.ismodule(target):
            return target.__name__
        qualname = getattr(target, "__qualname__", None) or getattr(
            target, "__name__", None
        )
        if qualname is None:
            return None
        module = getattr(target, "__module__", None)
        if module and module != "builtins":
            return f"{module}.{qualname}"
        return qualname

    def ancestors_of(self, target: Any) -> tuple[Any, ...]:
        if inspect.isclass(target):
            return inspect.getmro(target)
        return (target,)

    def _namespace(self, target: Any) -> Iterator[tuple[str, Any]]:
        if inspect.ismodule(target):
            for attr_name, value in vars(target).items():
                if getattr(value, "__module__", None) == target.__name__:
                    yield attr_name, value
            return
        yield from vars(target).items()

    def list_declared_methods(
        self, target: Any, include_singleton: bool = True
    ) -> list[MethodRef]:
        """Return methods declared directly on ``target``, in namespace order.

        Instance-scoped methods come first, then (when ``include_singleton``)
        classmethods and staticmethods. Inherited methods are never included.
        """
        instance: list[MethodRef] = []
        singleton: list[MethodRef] = []
        seen: set[int] = set()
        owner_name = "" if inspect.ismodule(target) else getattr(target, "__name__", "")

        for attr_name, value in self._namespace(target):
            member = _unwrap_member(value)
            if member is None:
                continue
            func, scope = member
            if scope == "singleton" and not include_singleton:
                continue

            ref = MethodRef(
                owner=target,
                name=attr_name,
                span=function_span(func),
                is_alias=_is_alias(attr_name, func, seen, owner_name),
                scope=scope,
            )
            seen.add(id(func))
            (singleton if scope == "singleton" else instance).append(ref)

        methods = instance + singleton
        logger.debug(
            "%d declared method(s) on %s", len(methods), self.name_of(target)
        )
        return methods


__all__ = ["MethodIntrospector", "PythonIntrospector", "function_span"]
