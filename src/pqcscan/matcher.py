"""Per-file matching of imports and qualified calls against the taxonomy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence

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
from .resolver import decode_import_path, resolve
from .taxonomy import FUNCTION_RULE_ID, classify_function, import_categories


@dataclass(frozen=True, slots=True)
class Diagnostic:
    position: Position
    message: str
    rule_id: str

    def to_dict(self) -> Dict[str, object]:
        return {
            **self.position.to_dict(),
            "ruleId": self.rule_id,
            "message": self.message,
        }


@dataclass(frozen=True, slots=True)
class CallReference:
    """``qualifier.member(...)`` where both sides are plain identifiers."""

    qualifier: str
    member: str
    position: Position

    @property
    def display_name(self) -> str:
        return f"{self.qualifier}.{self.member}"


def call_reference(expr: Expr) -> CallReference | None:
    if not isinstance(expr, Call):
        return None
    callee = expr.callee
    if not isinstance(callee, Selector) or not isinstance(callee.operand, Ident):
        return None
    return CallReference(
        qualifier=callee.operand.name,
        member=callee.member,
        position=callee.operand.position,
    )


def _import_diagnostics(spec: ImportDecl) -> List[Diagnostic]:
    path = decode_import_path(spec.literal)
    return [
        Diagnostic(spec.position, category.message(spec.literal), category.rule_id)
        for category in import_categories(path)
    ]


def _top_level_calls(body: Sequence[Stmt]) -> Iterator[Expr]:
    for stmt in body:
        if isinstance(stmt, AssignStmt):
            yield from stmt.rhs
        elif isinstance(stmt, ExprStmt):
            yield stmt.expr


def _walk_expr(expr: Expr) -> Iterator[Expr]:
    yield expr
    if isinstance(expr, Selector):
        yield from _walk_expr(expr.operand)
    elif isinstance(expr, Call):
        yield from _walk_expr(expr.callee)
        for arg in expr.args:
            yield from _walk_expr(arg)
    elif isinstance(expr, Opaque):
        for operand in expr.operands:
            yield from _walk_expr(operand)
        yield from _all_expressions(expr.body)


def _all_expressions(body: Sequence[Stmt]) -> Iterator[Expr]:
    for stmt in body:
        if isinstance(stmt, AssignStmt):
            children: Sequence[Expr] = (*stmt.lhs, *stmt.rhs)
        elif isinstance(stmt, ExprStmt):
            children = (stmt.expr,)
        else:
            children = stmt.expressions
        for child in children:
            yield from _walk_expr(child)
        if isinstance(stmt, CompoundStmt):
            yield from _all_expressions(stmt.body)


def _function_diagnostics(
    func: FuncDecl, imports: Sequence[ImportDecl], deep: bool
) -> List[Diagnostic]:
    if func.body is None:
        return []
    candidates = _all_expressions(func.body) if deep else _top_level_calls(func.body)
    diagnostics: List[Diagnostic] = []
    for expr in candidates:
        ref = call_reference(expr)
        if ref is None:
            continue
        module_path = resolve(imports, ref.qualifier)
        if module_path is None:
            continue
        if classify_function(module_path, ref.member):
            diagnostics.append(
                Diagnostic(
                    ref.position,
                    f'function "{ref.display_name}" implements quantum-vulnerable cryptography',
                    FUNCTION_RULE_ID,
                )
            )
    return diagnostics


def analyze(source_file: SourceFile, *, deep: bool = False) -> List[Diagnostic]:
    """Return the diagnostics for one parsed file in source order.

    Only assignment right-hand sides and bare expression statements directly in
    a function body are inspected unless ``deep`` is set, in which case every
    call nested anywhere in the body is considered.

    Raises :class:`~pqcscan.errors.MalformedLiteralError` when an import path
    cannot be decoded.
    """

    diagnostics: List[Diagnostic] = []
    for spec in source_file.imports:
        diagnostics.extend(_import_diagnostics(spec))
    for func in source_file.functions:
        diagnostics.extend(_function_diagnostics(func, source_file.imports, deep))
    return diagnostics
