"""Merge a Gno type expression with the Go expression implementing it.

The check is structural equality with a single escape hatch: a named
Gno type may stand for a differently-named Go type when the pair is
registered as a LinkedType. Only identifiers, qualified identifiers,
pointers, arrays and slices are supported; merging always recurses on
the Gno side's shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from genstd.ast_nodes import (
    NON_TYPE_EXPRS,
    UNSUPPORTED_TYPES,
    ArrayType,
    BasicLit,
    Expr,
    Ident,
    ImportSpec,
    QualifiedIdent,
    StarExpr,
)
from genstd.errors import ErrorKind, LinkError
from genstd.linked_types import DEFAULT_REGISTRY, LinkedIdent, LinkedTypeRegistry
from genstd.printer import expr_string, package_alias

MergedExpr = Union[Expr, LinkedIdent]


@dataclass(frozen=True)
class ImportContext:
    """The package a declaration lives in and the imports of its file."""

    import_path: str
    imports: tuple[ImportSpec, ...] = ()

    def lookup(self, alias: str) -> str | None:
        """Return the import path bound to ``alias`` in this file, if any."""
        for spec in self.imports:
            if spec.name == alias:
                return spec.path
            if spec.name is None and package_alias(spec.path) == alias:
                return spec.path
        return None

    def resolve(self, alias: str) -> str:
        path = self.lookup(alias)
        if path is not None:
            return path
        raise LinkError(
            ErrorKind.UNKNOWN_IMPORT,
            f"unknown import alias {alias!r} in package {self.import_path!r}",
        )

    def qualify(self, expr: Ident | QualifiedIdent) -> tuple[str, str]:
        """Return the (import path, name) a named type refers to."""
        if isinstance(expr, QualifiedIdent):
            return self.resolve(expr.package), expr.name
        return self.import_path, expr.name


def merge_types(
    gnoe: Expr,
    goe: Expr,
    gno_ctx: ImportContext,
    go_ctx: ImportContext,
    registry: LinkedTypeRegistry = DEFAULT_REGISTRY,
) -> MergedExpr:
    """Return the canonical expression for a Gno/Go type pair.

    Raises LinkError with kind MISMATCH when the types differ,
    UNSUPPORTED for map, func, interface, struct, chan and variadic
    types, and INVALID_EXPRESSION for expressions that are not types.
    """
    _check_shape(gnoe)
    _check_shape(goe)

    if isinstance(gnoe, (Ident, QualifiedIdent)):
        return _merge_named(gnoe, goe, gno_ctx, go_ctx, registry)

    if isinstance(gnoe, StarExpr):
        if not isinstance(goe, StarExpr):
            raise _mismatch(gnoe, goe)
        return StarExpr(x=merge_types(gnoe.x, goe.x, gno_ctx, go_ctx, registry))

    if isinstance(gnoe, ArrayType):
        if not isinstance(goe, ArrayType):
            raise _mismatch(gnoe, goe)
        if (gnoe.len is None) != (goe.len is None):
            raise _mismatch(gnoe, goe)
        if gnoe.len is not None:
            # Literal text is compared as written: [8]int and [0x8]int differ.
            if not (
                isinstance(gnoe.len, BasicLit)
                and isinstance(goe.len, BasicLit)
                and gnoe.len.value == goe.len.value
            ):
                raise _mismatch(gnoe, goe)
        elt = merge_types(gnoe.elt, goe.elt, gno_ctx, go_ctx, registry)
        return ArrayType(len=gnoe.len, elt=elt)

    raise _mismatch(gnoe, goe)


def _merge_named(
    gnoe: Ident | QualifiedIdent,
    goe: Expr,
    gno_ctx: ImportContext,
    go_ctx: ImportContext,
    registry: LinkedTypeRegistry,
) -> MergedExpr:
    if isinstance(gnoe, Ident) and isinstance(goe, Ident) and gnoe.name == goe.name:
        # Unlinked, the name stays unqualified: a builtin, or a type local
        # to the Go package the generated shim is emitted into.
        lt = registry.lookup(gno_ctx.import_path, gnoe.name)
        if lt is not None and (lt.go_package, lt.go_name) == (go_ctx.import_path, goe.name):
            return LinkedIdent(lt=lt)
        return Ident(name=gnoe.name)

    if not isinstance(goe, (Ident, QualifiedIdent)):
        raise _mismatch(gnoe, goe)

    gno_package, gno_name = gno_ctx.qualify(gnoe)
    go_package, go_name = go_ctx.qualify(goe)
    lt = registry.lookup(gno_package, gno_name)
    if lt is None or (lt.go_package, lt.go_name) != (go_package, go_name):
        raise _mismatch(gnoe, goe)
    return LinkedIdent(lt=lt)


def _check_shape(expr: Expr) -> None:
    if isinstance(expr, UNSUPPORTED_TYPES):
        raise LinkError(
            ErrorKind.UNSUPPORTED,
            f"{expr_string(expr)}: {type(expr).__name__} types are not implemented",
        )
    if isinstance(expr, NON_TYPE_EXPRS):
        raise LinkError(
            ErrorKind.INVALID_EXPRESSION,
            f"invalid expression as func param/return type: "
            f"{type(expr).__name__} ({expr_string(expr)})",
        )


def _mismatch(gnoe: Expr, goe: Expr) -> LinkError:
    return LinkError(
        ErrorKind.MISMATCH,
        f"types do not match: {expr_string(gnoe)} (gno) vs {expr_string(goe)} (go)",
    )
