"""Code kinds: detection from filenames and per-kind comment leaders."""

from __future__ import annotations

from pathlib import PurePath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_CODE_KIND = "python"
TEXT_CODE_KIND = "text"

_EXTENSION_KINDS: dict[tuple[str, ...], str] = {
    (".c", ".h"): "c",
    (".cpp", ".hpp", ".cc", ".cxx"): "cpp",
    (".rb", ".ru", ".gemspec"): "ruby",
    (".py", ".pyi", ".pyw"): "python",
    (".diff", ".patch"): "diff",
    (".css",): "css",
    (".html", ".htm"): "html",
    (".yaml", ".yml"): "yaml",
    (".toml",): "toml",
    (".xml",): "xml",
    (".php",): "php",
    (".js", ".mjs"): "javascript",
    (".ts",): "typescript",
    (".java",): "java",
    (".rhtml",): "rhtml",
    (".json",): "json",
    (".sh", ".bash"): "bash",
}

_BASENAME_KINDS: dict[str, str] = {
    "Rakefile": "ruby",
    "Gemfile": "ruby",
    "Makefile": "make",
}

_SLASH_COMMENT_KINDS = frozenset(
    {"c", "cpp", "java", "javascript", "typescript", "php", "css"}
)


def kind_from_filename(
    filename: str,
    default: str = DEFAULT_CODE_KIND,
    overrides: Mapping[str, str] | None = None,
) -> str:
    """Guess the code kind of a file from its extension or basename.

    ``overrides`` maps extensions (".pyx") or basenames ("SConstruct") to kinds
    and takes precedence over the built-in table.
    """
    path = PurePath(filename)
    suffix = path.suffix

    if overrides:
        for key in (path.name, suffix):
            if key and key in overrides:
                return overrides[key]

    if path.name in _BASENAME_KINDS:
        return _BASENAME_KINDS[path.name]

    for extensions, kind in _EXTENSION_KINDS.items():
        if suffix in extensions:
            return kind

    return default


def comment_leader_for(code_kind: str) -> str:
    """Return the line-comment token for a code kind (``#`` when unknown)."""
    if code_kind in _SLASH_COMMENT_KINDS:
        return "//"
    return "#"


__all__ = [
    "DEFAULT_CODE_KIND",
    "TEXT_CODE_KIND",
    "comment_leader_for",
    "kind_from_filename",
]
