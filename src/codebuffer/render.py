"""Terminal rendering helpers for code buffers.

Coloring is delegated to ``rich`` (which drives Pygments lexers). Whether to
color is always passed in explicitly through :class:`RenderOptions`; there is
no process-wide color switch.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.syntax import Syntax
from rich.text import Text

DEFAULT_THEME = "monokai"
LINE_NUMBER_SEPARATOR = ": "
MARKER = " => "
MARKER_PADDING = " " * len(MARKER)


@dataclass(frozen=True)
class RenderOptions:
    """Explicit rendering configuration handed to ``CodeBuffer.render``."""

    color: bool = False
    theme: str = DEFAULT_THEME


def _capture(text: Text) -> str:
    console = Console(
        force_terminal=True,
        color_system="standard",
        highlight=False,
        width=max(len(text.plain), 80),
    )
    with console.capture() as capture:
        console.print(text, end="", soft_wrap=True)
    return capture.get()


def highlight_code(text: str, code_kind: str, theme: str = DEFAULT_THEME) -> str:
    """Return ``text`` with ANSI syntax coloring for ``code_kind``."""
    if not text:
        return text
    syntax = Syntax("", code_kind, theme=theme, background_color="default")
    highlighted = syntax.highlight(text)
    highlighted.rstrip()
    return _capture(highlighted).rstrip("\n")


def style_text(text: str, style: str) -> str:
    """Return ``text`` wrapped in the ANSI codes of a rich style string."""
    if not text:
        return text
    return _capture(Text(text, style=style))


def format_line_number(line_number: int, width: int) -> str:
    return f"{str(line_number).rjust(width)}{LINE_NUMBER_SEPARATOR}"


def format_marker(line_number: int, marker_line: int | None) -> str:
    return MARKER if line_number == marker_line else MARKER_PADDING


__all__ = [
    "DEFAULT_THEME",
    "MARKER",
    "RenderOptions",
    "format_line_number",
    "format_marker",
    "highlight_code",
    "style_text",
]
