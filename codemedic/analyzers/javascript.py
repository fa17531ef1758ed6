"""Tree-sitter powered structural analyzer for JavaScript and JSX."""

from __future__ import annotations

from typing import Iterator, List, Optional

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser

from .base import ParseError, SourceAnalyzer
from ..models import ClassInfo, FunctionInfo, StructuralSummary

_FUNCTION_DECLARATIONS = {"function_declaration", "generator_function_declaration"}
_FUNCTION_EXPRESSIONS = {"function_expression", "function", "generator_function"}
_CLASS_EXPRESSIONS = {"class"}

_DECISION_NODES = {
    "if_statement",
    "for_statement",
    "for_in_statement",
    "while_statement",
    "do_statement",
    "switch_case",
    "catch_clause",
    "ternary_expression",
}
_DECISION_OPERATORS = {"&&", "||", "??"}


class JavaScriptAnalyzer(SourceAnalyzer):
    """Collects declarations, imports and simple risk markers from JS/JSX source."""

    extensions = frozenset({".js", ".jsx"})

    def __init__(self) -> None:
        self._parser: Optional[Parser] = None

    def analyze(self, content: str) -> StructuralSummary:
        source_bytes = content.encode("utf-8")
        tree = self._get_parser().parse(source_bytes)
        root = tree.root_node
        if root.has_error:
            line = _first_error_line(root)
            raise ParseError(f"JavaScript syntax error near line {line}")

        summary = StructuralSummary()
        for node in _walk(root):
            node_type = node.type
            if node_type in _FUNCTION_DECLARATIONS:
                summary.functions.append(self._function_info(node, source_bytes))
            elif node_type == "class_declaration":
                summary.classes.append(self._class_info(node, source_bytes))
            elif node_type == "import_statement":
                specifier = self._import_source(node, source_bytes)
                if specifier:
                    summary.imports.append(specifier)
            elif node_type == "export_statement":
                self._collect_default_export(node, source_bytes, summary)

            if node_type in _DECISION_NODES:
                summary.complexity_score += 1
            elif node_type == "binary_expression":
                operator = node.child_by_field_name("operator")
                if operator is not None and _node_text(operator, source_bytes) in _DECISION_OPERATORS:
                    summary.complexity_score += 1

            issue = self._issue_for(node, source_bytes)
            if issue:
                summary.potential_issues.append(issue)
        return summary

    def _get_parser(self) -> Parser:
        if self._parser is None:
            self._parser = Parser(Language(tree_sitter_javascript.language()))
        return self._parser

    @staticmethod
    def _function_info(node: Node, source_bytes: bytes) -> FunctionInfo:
        name_node = node.child_by_field_name("name")
        parameters = node.child_by_field_name("parameters")
        param_count = 0
        if parameters is not None:
            param_count = sum(1 for child in parameters.named_children if child.type != "comment")
        return FunctionInfo(
            name=_node_text(name_node, source_bytes) if name_node is not None else "anonymous",
            line=node.start_point[0] + 1,
            param_count=param_count,
        )

    @staticmethod
    def _class_info(node: Node, source_bytes: bytes) -> ClassInfo:
        name_node = node.child_by_field_name("name")
        return ClassInfo(
            name=_node_text(name_node, source_bytes) if name_node is not None else "anonymous",
            line=node.start_point[0] + 1,
        )

    @staticmethod
    def _import_source(node: Node, source_bytes: bytes) -> str:
        source = node.child_by_field_name("source")
        if source is None:
            return ""
        return _node_text(source, source_bytes).strip("'\"`")

    def _collect_default_export(
        self, node: Node, source_bytes: bytes, summary: StructuralSummary
    ) -> None:
        # `export default function () {}` parses as an expression, not a declaration.
        value = node.child_by_field_name("value")
        if value is None:
            return
        if value.type in _FUNCTION_EXPRESSIONS:
            summary.functions.append(self._function_info(value, source_bytes))
        elif value.type in _CLASS_EXPRESSIONS:
            summary.classes.append(self._class_info(value, source_bytes))

    @staticmethod
    def _issue_for(node: Node, source_bytes: bytes) -> Optional[str]:
        line = node.start_point[0] + 1
        if node.type == "debugger_statement":
            return f"Line {line}: debugger statement left in code"
        if node.type == "call_expression":
            callee = node.child_by_field_name("function")
            if callee is not None and callee.type == "identifier" and _node_text(callee, source_bytes) == "eval":
                return f"Line {line}: use of eval()"
        if node.type == "catch_clause":
            body = node.child_by_field_name("body")
            if body is not None and not [child for child in body.named_children if child.type != "comment"]:
                return f"Line {line}: empty catch block swallows errors"
        return None


def _walk(root: Node) -> Iterator[Node]:
    """Pre-order traversal without recursion so deeply nested files are safe."""
    stack: List[Node] = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def _first_error_line(root: Node) -> int:
    for node in _walk(root):
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
    return root.start_point[0] + 1


def _node_text(node: Node, source_bytes: bytes) -> str:
    return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


__all__ = ["JavaScriptAnalyzer"]
