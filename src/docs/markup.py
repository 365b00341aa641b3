"""Light markup processing for documentation comments.

Comments may carry RDoc-style inline markup (``<code>``, ``<em>``, ``<i>``,
``+word+``), Markdown-style backtick spans, and YARD/Sphinx-style tags
(``@param``, ``@return`` ...). The markup delimiters are always removed; the
contents are colored only when color is requested.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from codebuffer.render import DEFAULT_THEME, highlight_code, style_text

DOC_TAGS = (
    "param",
    "return",
    "raise",
    "option",
    "yield",
    "attr",
    "deprecated",
    "example",
)

_CODE_TAG = re.compile(r"<code>(?:\s*\n)?(.*?)\s*</code>", re.DOTALL)
_EM_TAG = re.compile(r"<em>(?:\s*\n)?(.*?)\s*</em>", re.DOTALL)
_I_TAG = re.compile(r"<i>(?:\s*\n)?(.*?)\s*</i>", re.DOTALL)
_PLUS_WORD = re.compile(r"\B\+(\w*?)\+\B")
_BACKTICKS = re.compile(r"`(?:\s*\n)?(.*?)\s*`")
_DOC_TAG = re.compile(rf"^@({'|'.join(DOC_TAGS)})\b", re.MULTILINE)


def _replacer(
    transform: Callable[[str], str] | None,
) -> Callable[[re.Match[str]], str]:
    def replace(match: re.Match[str]) -> str:
        inner = match.group(1)
        return transform(inner) if transform else inner

    return replace


def process_comment_markup(
    comment: str,
    code_kind: str = "python",
    *,
    color: bool = False,
    theme: str = DEFAULT_THEME,
) -> str:
    """Strip inline markup from ``comment``, coloring its contents if asked."""

    def code(text: str) -> str:
        return highlight_code(text, code_kind, theme)

    def green(text: str) -> str:
        return style_text(text, "green")

    def blue(text: str) -> str:
        return style_text(text, "blue")

    def yellow(text: str) -> str:
        return style_text(text, "yellow")

    comment = _CODE_TAG.sub(_replacer(code if color else None), comment)
    comment = _EM_TAG.sub(_replacer(green if color else None), comment)
    comment = _I_TAG.sub(_replacer(blue if color else None), comment)
    comment = _PLUS_WORD.sub(_replacer(green if color else None), comment)
    comment = _BACKTICKS.sub(_replacer(code if color else None), comment)
    if color:
        comment = _DOC_TAG.sub(lambda m: "@" + yellow(m.group(1)), comment)
    return comment


__all__ = ["DOC_TAGS", "process_comment_markup"]
