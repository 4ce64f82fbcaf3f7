"""Tree-sitter front end turning Go source into :mod:`pqcscan.model` records."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, List, Tuple

import tree_sitter_go as tsgo
from tree_sitter import Language, Node, Parser

from .model import (
    AssignStmt,
    Call,
    CompoundStmt,
    Expr,
    ExprStmt,
    FuncDecl,
    Ident,
    ImportDecl,
    Opaque,
    Position,
    Selector,
    SourceFile,
    Stmt,
)

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".go"}

GO_LANGUAGE = Language(tsgo.language())

GO_PARSER = Parser()
GO_PARSER.language = GO_LANGUAGE

ASSIGNMENT_TYPES = {"assignment_statement", "short_var_declaration"}
BLOCK_TYPES = {"block", "statement_list"}
STATEMENT_TYPES = ASSIGNMENT_TYPES | {
    "expression_statement",
    "inc_statement",
    "dec_statement",
    "send_statement",
    "var_declaration",
    "const_declaration",
    "type_declaration",
    "return_statement",
    "go_statement",
    "defer_statement",
    "if_statement",
    "for_statement",
    "expression_switch_statement",
    "type_switch_statement",
    "select_statement",
    "labeled_statement",
    "fallthrough_statement",
    "break_statement",
    "continue_statement",
    "goto_statement",
    "empty_statement",
    "block",
}
FUNCTION_TYPES = {"function_declaration", "method_declaration"}
STRUCTURED_EXPRESSION_TYPES = {"identifier", "selector_expression", "call_expression"}
SKIPPED_DIRECTORIES = {"testdata", "vendor"}


def node_text(node: Node | None, source: bytes) -> str:
    if node is None:
        return ""
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


def _hidden(name: str) -> bool:
    return name.startswith((".", "_"))


def iter_source_files(root: Path, extensions: Iterable[str] | None = None) -> List[Path]:
    """List source files the way the go tool sees a module tree.

    ``testdata`` and ``vendor`` directories, and files or directories whose
    names start with ``.`` or ``_``, are left out.
    """

    extensions = set(extensions or SUPPORTED_EXTENSIONS)
    candidates: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [name for name in dirnames if name not in SKIPPED_DIRECTORIES and not _hidden(name)]
        for name in filenames:
            if _hidden(name):
                continue
            path = Path(dirpath) / name
            if path.suffix.lower() in extensions:
                candidates.append(path)
    return sorted(candidates)


class _Converter:
    def __init__(self, path: Path, source: bytes) -> None:
        self.path = path
        self.source = source

    def position(self, node: Node) -> Position:
        line, column = node.start_point
        return Position(self.path, line + 1, column + 1)

    def text(self, node: Node | None) -> str:
        return node_text(node, self.source)

    def _children(self, node: Node) -> List[Node]:
        return [child for child in node.named_children if child.type != "comment"]

    def statements(self, block: Node) -> Tuple[Stmt, ...]:
        result: List[Stmt] = []
        for child in self._children(block):
            if child.type == "statement_list":
                result.extend(self.statements(child))
            elif child.type in STATEMENT_TYPES:
                result.append(self.statement(child))
        return tuple(result)

    def _split(self, node: Node) -> Tuple[Tuple[Expr, ...], Tuple[Stmt, ...]]:
        # Opaque descendants are flattened with an explicit stack; long operator
        # chains would otherwise nest one Python frame per operand.
        expressions: List[Expr] = []
        body: List[Stmt] = []
        stack = list(reversed(self._children(node)))
        while stack:
            child = stack.pop()
            if child.type in BLOCK_TYPES:
                body.extend(self.statements(child))
            elif child.type in STATEMENT_TYPES:
                body.append(self.statement(child))
            elif child.type in STRUCTURED_EXPRESSION_TYPES:
                expressions.append(self.expression(child))
            else:
                stack.extend(reversed(self._children(child)))
        return tuple(expressions), tuple(body)

    def _expression_list(self, node: Node | None) -> Tuple[Expr, ...]:
        if node is None:
            return ()
        if node.type == "expression_list":
            return tuple(self.expression(child) for child in self._children(node))
        return (self.expression(node),)

    def statement(self, node: Node) -> Stmt:
        if node.type == "expression_statement":
            inner = self._children(node)
            if inner:
                return ExprStmt(self.expression(inner[0]), self.position(node))
        if node.type in ASSIGNMENT_TYPES:
            return AssignStmt(
                lhs=self._expression_list(node.child_by_field_name("left")),
                rhs=self._expression_list(node.child_by_field_name("right")),
                position=self.position(node),
            )
        if node.type == "block":
            return CompoundStmt("block", self.position(node), body=self.statements(node))
        expressions, body = self._split(node)
        return CompoundStmt(node.type, self.position(node), expressions, body)

    def expression(self, node: Node) -> Expr:
        if node.type == "identifier":
            return Ident(self.text(node), self.position(node))
        if node.type == "selector_expression":
            operand = node.child_by_field_name("operand")
            member = node.child_by_field_name("field")
            if operand is not None and member is not None:
                return Selector(self.expression(operand), self.text(member), self.position(node))
        if node.type == "call_expression":
            function = node.child_by_field_name("function")
            arguments = node.child_by_field_name("arguments")
            if function is not None:
                args = self._children(arguments) if arguments is not None else []
                return Call(
                    callee=self.expression(function),
                    args=tuple(self.expression(arg) for arg in args),
                    position=self.position(node),
                )
        operands, body = self._split(node)
        return Opaque(node.type, self.position(node), operands, body)

    def import_spec(self, node: Node) -> ImportDecl | None:
        path_node = node.child_by_field_name("path")
        if path_node is None:
            return None
        name_node = node.child_by_field_name("name")
        return ImportDecl(
            literal=self.text(path_node),
            position=self.position(node),
            alias=self.text(name_node) if name_node is not None else None,
        )

    def function(self, node: Node) -> FuncDecl:
        body_node = node.child_by_field_name("body")
        receiver = node.child_by_field_name("receiver")
        return FuncDecl(
            name=self.text(node.child_by_field_name("name")),
            position=self.position(node),
            body=self.statements(body_node) if body_node is not None else None,
            receiver=self.text(receiver) if receiver is not None else None,
        )


def _import_specs(declaration: Node) -> Iterator[Node]:
    for child in declaration.named_children:
        if child.type == "import_spec":
            yield child
        elif child.type == "import_spec_list":
            yield from (spec for spec in child.named_children if spec.type == "import_spec")


def parse_source(source: bytes, path: Path | str = "<memory>") -> SourceFile:
    """Parse Go source into a :class:`SourceFile`."""

    file_path = Path(path)
    tree = GO_PARSER.parse(source)
    root = tree.root_node
    if root.has_error:
        logger.debug("syntax errors while parsing %s; continuing with partial tree", file_path)
    converter = _Converter(file_path, source)
    package = ""
    imports: List[ImportDecl] = []
    functions: List[FuncDecl] = []
    for node in root.named_children:
        if node.type == "package_clause":
            name = next((c for c in node.named_children if c.type == "package_identifier"), None)
            package = converter.text(name)
        elif node.type == "import_declaration":
            for spec in _import_specs(node):
                decl = converter.import_spec(spec)
                if decl is not None:
                    imports.append(decl)
        elif node.type in FUNCTION_TYPES:
            functions.append(converter.function(node))
    return SourceFile(
        path=file_path,
        package=package,
        imports=tuple(imports),
        functions=tuple(functions),
    )


def parse_file(path: Path) -> SourceFile:
    return parse_source(path.read_bytes(), path)
