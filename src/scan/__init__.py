"""Source file access for srclens."""

from scan.files import SESSION_PATH, FileContentProvider, SessionBuffer

__all__ = ["SESSION_PATH", "FileContentProvider", "SessionBuffer"]
