from __future__ import annotations

import pytest

from errors import NotFound
from parse.expressions import ExpressionBoundaryResolver, TreeSitterPythonSyntax
from parse.treesitter_declarations import (
    extract_class_declarations,
    find_declaration_line,
)

SOURCE = '''\
import os


@decorate
def first(a, b):
    if a:
        return b
    else:
        return a

    # trailing comment inside


class Holder:
    def method(self):
        try:
            pass
        except ValueError:
            pass
        finally:
            pass

    TEXT = """
not indented
"""

value = first(
    1,
    2,
)
'''.splitlines()


def _find(start_line: int) -> tuple[str, int]:
    return ExpressionBoundaryResolver().find_expression(SOURCE, start_line)


def test_decorated_function_includes_else_branch() -> None:
    text, end_line = _find(4)

    assert text.startswith("@decorate\ndef first(a, b):\n")
    assert text.endswith("        return a\n")
    assert end_line == 9


def test_method_spans_try_block_continuations() -> None:
    text, end_line = _find(15)

    assert text.startswith("    def method(self):\n")
    assert text.endswith("        finally:\n            pass\n")
    assert end_line == 21


def test_class_with_multiline_string_at_column_zero() -> None:
    text, end_line = _find(14)

    assert text.startswith("class Holder:\n")
    assert text.endswith('not indented\n"""\n')
    assert end_line == 25


def test_statement_spanning_lines() -> None:
    text, end_line = _find(27)

    assert text == "value = first(\n    1,\n    2,\n)\n"
    assert end_line == 30


def test_single_line_statement() -> None:
    assert _find(1) == ("import os\n", 1)


@pytest.mark.parametrize("start_line", [0, 2, 30, 99])
def test_unusable_start_line_is_not_found(start_line: int) -> None:
    with pytest.raises(NotFound):
        _find(start_line)


def test_syntax_collaborator_is_pluggable() -> None:
    class EndsWithPass:
        def is_complete_unit(self, source: str) -> bool:
            return source.rstrip().endswith("pass")

    resolver = ExpressionBoundaryResolver(EndsWithPass())

    _, end_line = resolver.find_expression(SOURCE, 15)

    assert end_line == 21


def test_complete_unit_requires_exactly_one_statement() -> None:
    syntax = TreeSitterPythonSyntax()

    assert syntax.is_complete_unit("def f():\n    pass\n")
    assert syntax.is_complete_unit("x = 1  # note\n")
    assert not syntax.is_complete_unit("x = 1\ny = 2\n")
    assert not syntax.is_complete_unit("def f(:\n")
    assert not syntax.is_complete_unit("# only a comment\n")


def test_class_declarations_include_nested_and_local_classes() -> None:
    lines = [
        "class Outer:",
        "    class Inner:",
        "        pass",
        "",
        "def factory():",
        "    class Inner:",
        "        pass",
        "    return Inner",
    ]

    declarations = extract_class_declarations(lines)

    assert [d.qualified_name for d in declarations] == ["Outer", "Outer.Inner", "Inner"]
    assert [d.start_line for d in declarations] == [1, 2, 6]
    assert find_declaration_line(lines, "Inner", 3) == 2
    assert find_declaration_line(lines, "Inner", 7) == 6
    assert find_declaration_line(lines, "Outer", 1) is None
