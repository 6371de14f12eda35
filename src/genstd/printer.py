"""Render type expressions back to Go/Gno source text."""

from __future__ import annotations

from enum import Enum, auto
from typing import Callable

from genstd.ast_nodes import (
    ArrayType,
    BasicLit,
    BinaryExpr,
    ChanType,
    Ellipsis,
    Field,
    FuncType,
    Ident,
    IndexExpr,
    InterfaceType,
    MapType,
    ParenExpr,
    QualifiedIdent,
    SelectorExpr,
    StarExpr,
    StructType,
    UnaryExpr,
)
from genstd.linked_types import LinkedIdent


class PrinterMode(Enum):
    # Linked identifiers print as their Gno type: std.Address
    GNO_TYPE = auto()
    # Linked identifiers print as their Go type: crypto.Bech32Address
    GO_QUALIFIED = auto()


def package_alias(path: str) -> str:
    """Default identifier for an import path: its last element."""
    return path.rstrip("/").rsplit("/", 1)[-1]


class ExprPrinter:
    """Writes expressions in the compact form of go/types.ExprString."""

    def __init__(
        self,
        mode: PrinterMode = PrinterMode.GNO_TYPE,
        alias: Callable[[str], str] = package_alias,
    ) -> None:
        self.mode = mode
        self.alias = alias

    def expr_string(self, expr: object) -> str:
        parts: list[str] = []
        self._write(parts, expr)
        return "".join(parts)

    def _write(self, out: list[str], x: object) -> None:
        if isinstance(x, Ident):
            out.append(x.name)
        elif isinstance(x, QualifiedIdent):
            out.append(f"{x.package}.{x.name}")
        elif isinstance(x, LinkedIdent):
            lt = x.lt
            if self.mode is PrinterMode.GO_QUALIFIED:
                out.append(f"{self.alias(lt.go_package)}.{lt.go_name}")
            else:
                out.append(f"{lt.gno_package}.{lt.gno_name}")
        elif isinstance(x, StarExpr):
            out.append("*")
            self._write(out, x.x)
        elif isinstance(x, ArrayType):
            out.append("[")
            if x.len is not None:
                self._write(out, x.len)
            out.append("]")
            self._write(out, x.elt)
        elif isinstance(x, MapType):
            out.append("map[")
            self._write(out, x.key)
            out.append("]")
            self._write(out, x.value)
        elif isinstance(x, ChanType):
            out.append(f"{x.dir} ")
            self._write(out, x.value)
        elif isinstance(x, FuncType):
            out.append("func")
            self._write_signature(out, x)
        elif isinstance(x, StructType):
            out.append("struct{")
            self._write_fields(out, x.fields, "; ")
            out.append("}")
        elif isinstance(x, InterfaceType):
            out.append("interface{")
            for i, method in enumerate(x.methods):
                if i:
                    out.append("; ")
                if method.names and isinstance(method.type, FuncType):
                    out.append(method.names[0])
                    self._write_signature(out, method.type)
                else:
                    self._write(out, method.type)
            out.append("}")
        elif isinstance(x, Ellipsis):
            out.append("...")
            if x.elt is not None:
                self._write(out, x.elt)
        elif isinstance(x, BasicLit):
            out.append(x.value)
        elif isinstance(x, ParenExpr):
            out.append("(")
            self._write(out, x.x)
            out.append(")")
        elif isinstance(x, UnaryExpr):
            out.append(x.op)
            self._write(out, x.x)
        elif isinstance(x, BinaryExpr):
            self._write(out, x.x)
            out.append(f" {x.op} ")
            self._write(out, x.y)
        elif isinstance(x, SelectorExpr):
            self._write(out, x.x)
            out.append(f".{x.name}")
        elif isinstance(x, IndexExpr):
            self._write(out, x.x)
            out.append("[")
            for i, index in enumerate(x.indices):
                if i:
                    out.append(", ")
                self._write(out, index)
            out.append("]")
        else:
            out.append(f"(bad expr {type(x).__name__})")

    def _write_signature(self, out: list[str], fn: FuncType) -> None:
        out.append("(")
        self._write_fields(out, fn.params, ", ")
        out.append(")")
        if not fn.results:
            return
        out.append(" ")
        if len(fn.results) == 1 and not fn.results[0].names:
            self._write(out, fn.results[0].type)
            return
        out.append("(")
        self._write_fields(out, fn.results, ", ")
        out.append(")")

    def _write_fields(self, out: list[str], fields: tuple[Field, ...], sep: str) -> None:
        for i, f in enumerate(fields):
            if i:
                out.append(sep)
            if f.names:
                out.append(", ".join(f.names))
                out.append(" ")
            self._write(out, f.type)


def expr_string(expr: object) -> str:
    """Gno-flavoured rendering, used in messages and for display."""
    return ExprPrinter().expr_string(expr)
