"""Shared utilities for srclens."""

from __future__ import annotations

import importlib
import re
from typing import Any

from errors import NotFound


def split_lines(text: str) -> list[str]:
    """Split ``text`` on ``\\n`` only, dropping a trailing ``\\r`` per line.

    Unlike ``str.splitlines`` this leaves form feeds and other Unicode line
    separators inside their line, so numbering matches the Python tokenizer.

    Examples:
        >>> split_lines("a\\x0cb\\r\\nc\\n")
        ['a\\x0cb', 'c']
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def unindent(text: str) -> str:
    """Strip the first line's leading whitespace from every line.

    Relative indentation below the first line is preserved.

    Examples:
        >>> unindent("    def f():\\n        pass\\n")
        'def f():\\n    pass\\n'
    """
    if not text:
        return text
    match = re.match(r"[ \t]+", split_lines(text)[0])
    if match is None:
        return text
    return re.sub(rf"^{re.escape(match.group(0))}", "", text, flags=re.MULTILINE)


def _walk_attributes(obj: Any, path: list[str], target: str) -> Any:
    for attr in path:
        try:
            obj = getattr(obj, attr)
        except AttributeError as exc:
            msg = f"Cannot find {target!r}: no attribute {attr!r}"
            raise NotFound(msg) from exc
    return obj


def lookup_target(target: str) -> Any:
    """Import and return the object named by ``target``.

    Accepted forms:
        - ``pkg.mod`` (a module)
        - ``pkg.mod.Class.method`` (longest importable prefix is the module)
        - ``pkg.mod:Class.method`` (explicit module/attribute split)

    Raises:
        NotFound: if no module or attribute matches.
    """
    if not target or not target.strip():
        msg = "Empty target name"
        raise NotFound(msg)

    if ":" in target:
        module_name, _, attr_path = target.partition(":")
        try:
            module = importlib.import_module(module_name)
        except ImportError as exc:
            msg = f"Cannot import module {module_name!r}: {exc}"
            raise NotFound(msg) from exc
        return _walk_attributes(module, [p for p in attr_path.split(".") if p], target)

    parts = target.split(".")
    for split in range(len(parts), 0, -1):
        module_name = ".".join(parts[:split])
        try:
            module = importlib.import_module(module_name)
        except ImportError:
            continue
        return _walk_attributes(module, parts[split:], target)

    builtins = importlib.import_module("builtins")
    if hasattr(builtins, parts[0]):
        return _walk_attributes(builtins, parts, target)

    msg = f"Cannot find {target!r}"
    raise NotFound(msg)


__all__ = ["lookup_target", "split_lines", "unindent"]
