"""Location models shared by the locator, the doc extractor and the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

MethodScope = Literal["instance", "singleton"]


class SourceSpan(BaseModel):
    """Where a declaration lives: a file and a 1-based line range."""

    model_config = ConfigDict(frozen=True)

    file: str
    start_line: int = Field(ge=1)
    end_line: int | None = Field(default=None, ge=1)

    def as_tuple(self) -> tuple[str, int]:
        return self.file, self.start_line

    def __str__(self) -> str:
        return f"{self.file}:{self.start_line}"


@dataclass(frozen=True)
class MethodRef:
    """A method declared directly on an owner, as reported by introspection.

    ``span`` is None for native methods, whose source cannot be discovered.
    """

    owner: Any
    name: str
    span: SourceSpan | None
    is_alias: bool = False
    scope: MethodScope = "instance"

    @property
    def is_native(self) -> bool:
        return self.span is None

    @property
    def is_locatable(self) -> bool:
        """True for methods that can seed a declaration search."""
        return self.span is not None and not self.is_alias


__all__ = ["MethodRef", "MethodScope", "SourceSpan"]
