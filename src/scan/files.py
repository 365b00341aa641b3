"""File-content provider for srclens lookups."""

from __future__ import annotations

import ast
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from codebuffer.kinds import kind_from_filename
from errors import Unreadable
from utils import split_lines

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)

SESSION_PATH = "(srclens)"
INITIAL_CWD = Path.cwd()


class SessionBuffer:
    """In-memory lines of code entered during the current session.

    Code evaluated through :meth:`evaluate` is compiled under the session path
    with line numbers continuing from the previous input, so functions and
    classes defined here report locations that index straight into
    :attr:`lines`.
    """

    def __init__(self, path: str = SESSION_PATH) -> None:
        self.path = path
        self._lines: list[str] = []

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    def append(self, source: str) -> int:
        """Append ``source`` and return the line number of its first line."""
        first_line = len(self._lines) + 1
        self._lines.extend(split_lines(source))
        return first_line

    def evaluate(self, source: str, namespace: dict[str, Any]) -> None:
        """Append ``source`` and execute it in ``namespace``."""
        first_line = self.append(source)
        tree = ast.parse(source, self.path)
        ast.increment_lineno(tree, first_line - 1)
        exec(compile(tree, self.path, "exec"), namespace)  # noqa: S102

    def clear(self) -> None:
        self._lines.clear()


class FileContentProvider:
    """Read source files as lists of lines.

    Relative paths are tried against the current directory and then against
    the directory the process started in. The session path is served from the
    in-memory :class:`SessionBuffer` and never touches disk.

    ``kind_overrides`` (extension or basename -> code kind) is consulted by
    :meth:`code_kind_for` before the built-in table.
    """

    def __init__(
        self,
        session: SessionBuffer | None = None,
        *,
        search_dirs: Iterable[Path] | None = None,
        kind_overrides: Mapping[str, str] | None = None,
    ) -> None:
        self.session = session or SessionBuffer()
        self.search_dirs = list(search_dirs) if search_dirs is not None else None
        self.kind_overrides = dict(kind_overrides or {})

    def code_kind_for(self, path: str | Path) -> str:
        return kind_from_filename(str(path), overrides=self.kind_overrides)

    def is_session_path(self, path: str | Path) -> bool:
        return str(path) == self.session.path

    def resolve_path(self, path: str | Path) -> Path:
        """Return the first readable absolute location of ``path``."""
        candidate = Path(path).expanduser()
        if candidate.is_absolute():
            if candidate.is_file():
                return candidate
            raise Unreadable(str(path), "no such file")

        dirs = self.search_dirs if self.search_dirs is not None else [Path.cwd(), INITIAL_CWD]
        for directory in dirs:
            resolved = (directory / candidate).resolve()
            if resolved.is_file():
                return resolved

        raise Unreadable(str(path), "no such file")

    def read_lines(self, path: str | Path) -> list[str]:
        """Return the lines of ``path`` without line terminators.

        Raises:
            Unreadable: if the file cannot be located, opened or decoded.
        """
        if self.is_session_path(path):
            return self.session.lines

        resolved = self.resolve_path(path)
        try:
            with resolved.open(encoding="utf-8") as file:
                text = file.read()
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Failed to read %s: %s", resolved, exc)
            raise Unreadable(str(path), str(exc)) from exc

        return split_lines(text)


__all__ = ["INITIAL_CWD", "SESSION_PATH", "FileContentProvider", "SessionBuffer"]
