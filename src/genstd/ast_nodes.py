"""AST node definitions for Go/Gno declarations and type expressions.

Only the subset needed to compare function signatures is modelled.
Nodes compare by value and carry no positions, so two parses of the
same text are equal; declarations carry a Span for diagnostics.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from genstd.source import Span

# ── Type expressions ─────────────────────────────────────────────


@dataclass(frozen=True)
class Ident:
    name: str


@dataclass(frozen=True)
class QualifiedIdent:
    """``package.Name``, where ``package`` is an import alias."""

    package: str
    name: str


@dataclass(frozen=True)
class StarExpr:
    """Pointer type ``*X`` (or a dereference in expression position)."""

    x: Expr


@dataclass(frozen=True)
class ArrayType:
    """``[len]elt``; ``len`` is None for a slice ``[]elt``."""

    len: Expr | None
    elt: Expr


@dataclass(frozen=True)
class Field:
    names: tuple[str, ...]
    type: Expr
    tag: str | None = None


@dataclass(frozen=True)
class MapType:
    key: Expr
    value: Expr


@dataclass(frozen=True)
class ChanType:
    dir: str  # "chan", "chan<-" or "<-chan"
    value: Expr


@dataclass(frozen=True)
class FuncType:
    params: tuple[Field, ...] = ()
    results: tuple[Field, ...] = ()


@dataclass(frozen=True)
class StructType:
    fields: tuple[Field, ...] = ()


@dataclass(frozen=True)
class InterfaceType:
    # Methods are Fields whose type is a FuncType; embedded elements are
    # Fields with no names.
    methods: tuple[Field, ...] = ()


@dataclass(frozen=True)
class Ellipsis:
    """``...elt`` in a variadic parameter, or ``...`` as an array length."""

    elt: Expr | None = None


# ── Non-type expressions ─────────────────────────────────────────


@dataclass(frozen=True)
class BasicLit:
    kind: str  # "INT", "FLOAT", "IMAG", "CHAR" or "STRING"
    value: str  # literal text, exactly as written


@dataclass(frozen=True)
class ParenExpr:
    x: Expr


@dataclass(frozen=True)
class UnaryExpr:
    op: str
    x: Expr


@dataclass(frozen=True)
class BinaryExpr:
    x: Expr
    op: str
    y: Expr


@dataclass(frozen=True)
class SelectorExpr:
    """``x.name`` where ``x`` is not a bare identifier."""

    x: Expr
    name: str


@dataclass(frozen=True)
class IndexExpr:
    x: Expr
    indices: tuple[Expr, ...]


Expr = Union[
    Ident, QualifiedIdent, StarExpr, ArrayType, MapType, ChanType, FuncType,
    StructType, InterfaceType, Ellipsis, BasicLit, ParenExpr, UnaryExpr,
    BinaryExpr, SelectorExpr, IndexExpr,
]

# Valid type syntax that signature matching does not support.
UNSUPPORTED_TYPES = (MapType, ChanType, FuncType, StructType, InterfaceType, Ellipsis)

# Syntax that cannot denote a type at all.
NON_TYPE_EXPRS = (BasicLit, ParenExpr, UnaryExpr, BinaryExpr, SelectorExpr, IndexExpr)


# ── Declarations ─────────────────────────────────────────────────


@dataclass(frozen=True)
class ImportSpec:
    path: str  # unquoted import path
    name: str | None = None  # explicit alias, "_" or "."


@dataclass(frozen=True)
class FuncDecl:
    name: str
    params: tuple[Field, ...]
    results: tuple[Field, ...]
    span: Span
    recv: Field | None = None
    type_params: bool = False
    has_body: bool = True

    def param_types(self) -> list[Expr]:
        return field_list_types(self.params)

    def result_types(self) -> list[Expr]:
        return field_list_types(self.results)


@dataclass(frozen=True)
class TypeDecl:
    name: str
    span: Span


Declaration = Union[FuncDecl, TypeDecl]


@dataclass(frozen=True)
class File:
    package: str
    imports: tuple[ImportSpec, ...] = ()
    decls: tuple[Declaration, ...] = ()
    filename: str = "<stdin>"

    def funcs(self) -> list[FuncDecl]:
        """Top-level functions; methods are excluded."""
        return [d for d in self.decls if isinstance(d, FuncDecl) and d.recv is None]


def field_list_types(fields: tuple[Field, ...]) -> list[Expr]:
    """Expand grouped fields (``a, b int``) into one type per position."""
    types: list[Expr] = []
    for f in fields:
        types.extend([f.type] * max(1, len(f.names)))
    return types
