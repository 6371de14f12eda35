"""Validated Gno-to-Go function mappings, consumed by code generation."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from genstd.ast_nodes import ArrayType, ImportSpec, StarExpr
from genstd.config import LinkConfig
from genstd.linked_types import LinkedIdent, LinkedType
from genstd.merge import ImportContext, MergedExpr
from genstd.printer import ExprPrinter, PrinterMode, package_alias


@dataclass(frozen=True)
class MappingType:
    """One parameter or result of a mapped function."""

    # The merged expression; for a typed value, the Gno-side expression.
    type: MergedExpr
    # The Go side receives the raw TypedValue, so no Go<->Gno value
    # conversion is generated for it.
    is_typed_value: bool = False
    # (import path, name) of the Go type carrying a typed value.
    carrier: tuple[str, str] | None = None

    def gno_type(self) -> str:
        return ExprPrinter(PrinterMode.GNO_TYPE).expr_string(self.type)

    def go_qualified_name(self, imports: ImportTable | None = None) -> str:
        alias = imports.alias if imports is not None else package_alias
        if self.carrier is not None:
            path, name = self.carrier
            return f"{alias(path)}.{name}"
        return ExprPrinter(PrinterMode.GO_QUALIFIED, alias).expr_string(self.type)


@dataclass(frozen=True)
class Mapping:
    """A Gno function declaration and the Go function implementing it."""

    gno_import_path: str
    gno_func: str
    go_import_path: str
    go_func: str
    machine_param: bool = False
    params: tuple[MappingType, ...] = ()
    results: tuple[MappingType, ...] = ()
    gno_imports: tuple[ImportSpec, ...] = ()
    go_imports: tuple[ImportSpec, ...] = ()

    def gno_context(self) -> ImportContext:
        return ImportContext(self.gno_import_path, self.gno_imports)

    def go_context(self) -> ImportContext:
        return ImportContext(self.go_import_path, self.go_imports)

    def linked_types(self) -> list[LinkedType]:
        """Linked types used by params and results, in order of first use."""
        seen: list[LinkedType] = []
        for mt in (*self.params, *self.results):
            if mt.is_typed_value:
                continue
            for lt in _linked_in(mt.type):
                if lt not in seen:
                    seen.append(lt)
        return seen

    def uses_interpreter(self) -> bool:
        """True if generated code must import the interpreter package."""
        return self.machine_param or any(
            mt.is_typed_value for mt in (*self.params, *self.results)
        )


def _linked_in(expr: MergedExpr) -> Iterator[LinkedType]:
    if isinstance(expr, LinkedIdent):
        yield expr.lt
    elif isinstance(expr, StarExpr):
        yield from _linked_in(expr.x)
    elif isinstance(expr, ArrayType):
        yield from _linked_in(expr.elt)


class ImportTable:
    """Go imports needed by generated code, with unique aliases.

    Paths are kept sorted. Each alias is the path's last element; when two
    paths share one, later paths get a numeric suffix (std, std2, ...).
    """

    def __init__(self, paths: Iterable[str]) -> None:
        self._aliases: dict[str, str] = {}
        used: set[str] = set()
        for path in sorted(set(paths)):
            base = _identifier(package_alias(path))
            alias = base
            n = 2
            while alias in used:
                alias = f"{base}{n}"
                n += 1
            used.add(alias)
            self._aliases[path] = alias

    @classmethod
    def from_mappings(
        cls, mappings: Iterable[Mapping], config: LinkConfig | None = None,
    ) -> ImportTable:
        config = config or LinkConfig()
        paths: list[str] = []
        for m in mappings:
            paths.append(m.go_import_path)
            paths.extend(lt.go_package for lt in m.linked_types())
            if m.uses_interpreter():
                paths.append(config.interpreter_package)
        return cls(paths)

    def alias(self, path: str) -> str:
        try:
            return self._aliases[path]
        except KeyError:
            raise KeyError(f"import path {path!r} is not in the import table") from None

    def __iter__(self) -> Iterator[tuple[str, str]]:
        """Yield (alias, path) pairs in path order."""
        for path, alias in self._aliases.items():
            yield alias, path

    def __len__(self) -> int:
        return len(self._aliases)


def _identifier(name: str) -> str:
    ident = "".join(ch if ch.isalnum() or ch == "_" else "_" for ch in name)
    if not ident or ident[0].isdigit():
        ident = "_" + ident
    return ident
