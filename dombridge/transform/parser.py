"""Tree-sitter helpers for module directives and top-level exports."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

import tree_sitter_javascript as _ts_javascript
import tree_sitter_typescript as _ts_typescript
from tree_sitter import Language, Node, Parser, Tree

EXPORT_DEFAULT = "default"
EXPORT_ALL = "all"
EXPORT_NAMED = "named"

_LANGUAGES: Dict[str, Language] = {
    "javascript": Language(_ts_javascript.language()),
    "typescript": Language(_ts_typescript.language_typescript()),
    "tsx": Language(_ts_typescript.language_tsx()),
}

_PARSERS: Dict[str, Parser] = {}


@dataclass
class ExportDeclaration:
    """A top-level ``export`` statement and its classification."""

    kind: str
    line: int
    column: int
    text: str


def language_for_file(filename: str | None) -> str:
    suffix = Path(filename).suffix.lower() if filename else ""
    if suffix in {".ts", ".mts", ".cts"}:
        return "typescript"
    if suffix == ".tsx":
        return "tsx"
    return "javascript"


def parse_module(source: str, language_key: str = "javascript") -> Tree:
    parser = _PARSERS.get(language_key)
    if parser is None:
        parser = Parser(_LANGUAGES[language_key])
        _PARSERS[language_key] = parser
    return parser.parse(source.encode("utf-8"))


def module_directives(root: Node) -> List[str]:
    """Return the values of the leading directive prologue."""
    directives: List[str] = []
    for child in root.named_children:
        if child.type in {"comment", "hash_bang_line"}:
            continue
        if child.type != "expression_statement" or not child.named_children:
            break
        expression = child.named_children[0]
        if expression.type != "string":
            break
        directives.append(_node_text(expression)[1:-1])
    return directives


def top_level_exports(root: Node) -> List[ExportDeclaration]:
    exports: List[ExportDeclaration] = []
    for child in root.named_children:
        if child.type != "export_statement":
            continue
        row, column = child.start_point
        exports.append(
            ExportDeclaration(
                kind=_classify_export(child),
                line=row + 1,
                column=column,
                text=_node_text(child),
            )
        )
    return exports


def first_error_position(root: Node) -> tuple[int, int] | None:
    if not root.has_error:
        return None
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            row, column = node.start_point
            return row + 1, column
        stack.extend(reversed(node.children))
    row, column = root.start_point
    return row + 1, column


def _classify_export(node: Node) -> str:
    token_types = {child.type for child in node.children}
    if "default" in token_types:
        return EXPORT_DEFAULT
    # `export * from "x"` re-exports without declaring anything in this module.
    if "*" in token_types and "namespace_export" not in token_types:
        return EXPORT_ALL
    return EXPORT_NAMED


def _node_text(node: Node) -> str:
    return node.text.decode("utf-8", errors="ignore") if node.text else ""


__all__ = [
    "EXPORT_ALL",
    "EXPORT_DEFAULT",
    "EXPORT_NAMED",
    "ExportDeclaration",
    "first_error_position",
    "language_for_file",
    "module_directives",
    "parse_module",
    "top_level_exports",
]
