"""Parsing utilities for srclens."""

from parse.expressions import (
    ExpressionBoundaryResolver,
    SyntaxCollaborator,
    TreeSitterPythonSyntax,
)
from parse.treesitter_declarations import (
    ClassDeclaration,
    extract_class_declarations,
    find_declaration_line,
)

__all__ = [
    "ClassDeclaration",
    "ExpressionBoundaryResolver",
    "SyntaxCollaborator",
    "TreeSitterPythonSyntax",
    "extract_class_declarations",
    "find_declaration_line",
]
