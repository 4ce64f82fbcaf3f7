"""In-memory representation of a parsed Go source file.

The matcher never looks at source text. It only consumes these records, which
the front end in :mod:`pqcscan.golang` builds from tree-sitter syntax trees.
Expressions and statements are small tagged variants; anything the matcher
has no use for is kept as an opaque node so that an exhaustive walk can still
reach nested calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Tuple, Union


@dataclass(frozen=True, slots=True)
class Position:
    path: Path
    line: int
    column: int

    def to_dict(self) -> Dict[str, object]:
        return {"path": str(self.path), "line": self.line, "column": self.column}


@dataclass(frozen=True, slots=True)
class ImportDecl:
    """A single import spec.

    ``literal`` is the path exactly as written, quotes included. ``alias`` is
    the explicit local name (``_`` and ``.`` included) or ``None``.
    """

    literal: str
    position: Position
    alias: str | None = None


@dataclass(frozen=True, slots=True)
class Ident:
    name: str
    position: Position


@dataclass(frozen=True, slots=True)
class Selector:
    operand: "Expr"
    member: str
    position: Position


@dataclass(frozen=True, slots=True)
class Call:
    callee: "Expr"
    args: Tuple["Expr", ...]
    position: Position


@dataclass(frozen=True, slots=True)
class Opaque:
    """Any other expression: literals, binary ops, closures, index exprs..."""

    kind: str
    position: Position
    operands: Tuple["Expr", ...] = ()
    body: Tuple["Stmt", ...] = ()


Expr = Union[Ident, Selector, Call, Opaque]


@dataclass(frozen=True, slots=True)
class AssignStmt:
    lhs: Tuple[Expr, ...]
    rhs: Tuple[Expr, ...]
    position: Position


@dataclass(frozen=True, slots=True)
class ExprStmt:
    expr: Expr
    position: Position


@dataclass(frozen=True, slots=True)
class CompoundStmt:
    """Every other statement (if, for, switch, return, defer, go, blocks...)."""

    kind: str
    position: Position
    expressions: Tuple[Expr, ...] = ()
    body: Tuple["Stmt", ...] = ()


Stmt = Union[AssignStmt, ExprStmt, CompoundStmt]


@dataclass(frozen=True, slots=True)
class FuncDecl:
    """A function or method. ``body`` is ``None`` for external declarations."""

    name: str
    position: Position
    body: Tuple[Stmt, ...] | None = None
    receiver: str | None = None


@dataclass(frozen=True, slots=True)
class SourceFile:
    path: Path
    package: str = ""
    imports: Tuple[ImportDecl, ...] = ()
    functions: Tuple[FuncDecl, ...] = ()

    @property
    def is_external_test(self) -> bool:
        return self.package.endswith("_test")
