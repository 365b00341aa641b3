"""Error taxonomy for srclens lookups."""

from __future__ import annotations


class SourceLensError(Exception):
    """Base class for recoverable lookup failures reported to the user."""


class NotFound(SourceLensError):
    """Raised when no source or documentation can be discovered for a target."""


class Unreadable(SourceLensError):
    """Raised when a source file exists in a location but cannot be read."""

    def __init__(self, path: str, reason: str | None = None) -> None:
        self.path = path
        self.reason = reason
        msg = f"Cannot open {path!r} for reading."
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class AmbiguousCandidateIndex(SourceLensError):
    """Raised when a candidate rank is outside the discovered candidates."""

    def __init__(self, rank: int, count: int) -> None:
        self.rank = rank
        self.count = count
        super().__init__(
            f"No candidate at rank {rank}: only {count} candidate(s) discovered"
        )


class InvalidArgument(TypeError):
    """Raised immediately when a value of the wrong kind is passed in.

    This signals programmer misuse and is intentionally not a SourceLensError.
    """


__all__ = [
    "AmbiguousCandidateIndex",
    "InvalidArgument",
    "NotFound",
    "SourceLensError",
    "Unreadable",
]
