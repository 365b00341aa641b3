"""Tree-sitter based class declaration lookup for Python sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from tree_sitter import Language, Node, Parser
from tree_sitter_python import language as get_python_language

if TYPE_CHECKING:
    from collections.abc import Sequence

_PARSER: Parser | None = None


def _get_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with Python language."""
    global _PARSER
    if _PARSER is None:
        lang = Language(get_python_language())
        _PARSER = Parser(lang)

    return _PARSER


@dataclass(frozen=True)
class ClassDeclaration:
    """A ``class`` statement found in a source file."""

    name: str
    qualified_name: str
    start_line: int
    end_line: int

    def encloses(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line


def _handle_class_definition(
    node: Node,
    declarations: list[ClassDeclaration],
    parent_classes: list[str],
) -> None:
    name_node = node.child_by_field_name("name")
    if not (name_node and name_node.text):
        return

    class_name = name_node.text.decode("utf8")
    new_parents = [*parent_classes, class_name]
    declarations.append(
        ClassDeclaration(
            name=class_name,
            qualified_name=".".join(new_parents),
            start_line=node.start_point[0] + 1,
            end_line=node.end_point[0] + 1,
        )
    )

    for child in node.children:
        _traverse_node(child, declarations, new_parents)


def _traverse_node(
    node: Node,
    declarations: list[ClassDeclaration],
    parent_classes: list[str],
) -> None:
    """Traverse the syntax tree and collect class declarations.

    Unlike symbol indexing, function bodies are entered: classes defined inside
    functions still have live class objects that can be inspected.
    """
    if node.type == "class_definition":
        _handle_class_definition(node, declarations, parent_classes)
        return

    for child in node.children:
        _traverse_node(child, declarations, parent_classes)


def extract_class_declarations(lines: Sequence[str]) -> list[ClassDeclaration]:
    """Return every class declaration in ``lines``, in source order."""
    parser = _get_parser()
    tree = parser.parse("\n".join(lines).encode("utf8"))

    declarations: list[ClassDeclaration] = []
    _traverse_node(tree.root_node, declarations, [])
    return declarations


def find_declaration_line(
    lines: Sequence[str],
    simple_name: str,
    anchor_line: int,
) -> int | None:
    """Find the declaration of ``simple_name`` that owns ``anchor_line``.

    The innermost declaration enclosing the anchor wins. When none encloses it
    (the method was attached from elsewhere), the closest declaration above the
    anchor is used. Returns None when the name is not declared above the anchor.
    """
    named = [
        decl
        for decl in extract_class_declarations(lines)
        if decl.name == simple_name and decl.start_line < anchor_line
    ]
    if not named:
        return None

    enclosing = [decl for decl in named if decl.encloses(anchor_line)]
    pool = enclosing or named
    return max(decl.start_line for decl in pool)


__all__ = [
    "ClassDeclaration",
    "extract_class_declarations",
    "find_declaration_line",
]
