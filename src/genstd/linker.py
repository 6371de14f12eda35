"""Link body-less Gno functions to the Go functions implementing them."""

from __future__ import annotations

from collections.abc import Iterable

from genstd.ast_nodes import Expr, QualifiedIdent, StarExpr
from genstd.config import LinkConfig
from genstd.errors import ErrorKind, LinkError
from genstd.linked_types import DEFAULT_REGISTRY, LinkedTypeRegistry
from genstd.mapping import Mapping, MappingType
from genstd.merge import ImportContext, merge_types
from genstd.walker import DeclaredFunc, PackageData


def go_func_name(gno_name: str, config: LinkConfig) -> str:
    """Name of the Go function expected to implement ``gno_name``.

    Exported names map to themselves; unexported ones get a prefix so they
    are reachable from generated code in another Go package.
    """
    if gno_name[:1].isupper():
        return gno_name
    return config.unexported_prefix + gno_name


def link_functions(
    pkgs: Iterable[PackageData],
    config: LinkConfig | None = None,
    registry: LinkedTypeRegistry = DEFAULT_REGISTRY,
) -> list[Mapping]:
    """Return one Mapping per body-less Gno function, in discovery order.

    The first failure aborts linking with a LinkError.
    """
    config = config or LinkConfig()
    mappings: list[Mapping] = []
    for pkg in pkgs:
        go_import_path = config.go_import_path(pkg.import_path)
        for gnof in pkg.gno_bodyless:
            name_want = go_func_name(gnof.name, config)
            gof = pkg.find_go_func(name_want)
            if gof is None:
                raise LinkError(
                    ErrorKind.UNRESOLVED,
                    f"no matching go function declaration ({name_want!r}) exists "
                    f"for function {gnof.name!r} (import path: {pkg.import_path!r})",
                    gnof.decl.span,
                )
            linker = _SignatureLinker(
                gnof, gof, ImportContext(pkg.import_path, gnof.imports),
                ImportContext(go_import_path, gof.imports), config, registry,
            )
            mappings.append(linker.link())
    return mappings


class _SignatureLinker:
    """Matches one Gno declaration against its Go counterpart."""

    def __init__(
        self,
        gnof: DeclaredFunc,
        gof: DeclaredFunc,
        gno_ctx: ImportContext,
        go_ctx: ImportContext,
        config: LinkConfig,
        registry: LinkedTypeRegistry,
    ) -> None:
        self.gnof = gnof
        self.gof = gof
        self.gno_ctx = gno_ctx
        self.go_ctx = go_ctx
        self.config = config
        self.registry = registry

    @property
    def _where(self) -> str:
        return f"{self.gno_ctx.import_path}.{self.gnof.name}"

    def _signature_error(self, kind: ErrorKind, detail: str) -> LinkError:
        return LinkError(
            kind,
            f"{self._where} doesn't match signature of go function "
            f"{self.go_ctx.import_path}.{self.gof.name}: {detail}",
            self.gnof.decl.span,
        )

    def link(self) -> Mapping:
        if self.gnof.decl.type_params or self.gof.decl.type_params:
            raise LinkError(
                ErrorKind.UNSUPPORTED,
                f"{self._where}: type parameters are not implemented",
                self.gnof.decl.span,
            )

        gno_params = self.gnof.decl.param_types()
        gno_results = self.gnof.decl.result_types()
        go_params = self.gof.decl.param_types()
        go_results = self.gof.decl.result_types()

        machine_param = bool(go_params) and self._is_interpreter_type(
            go_params[0], self.config.machine_type, pointer=True,
        )
        if machine_param:
            go_params = go_params[1:]

        if len(gno_params) != len(go_params) or len(gno_results) != len(go_results):
            raise self._signature_error(
                ErrorKind.ARITY,
                f"gno has {len(gno_params)} param(s) and {len(gno_results)} result(s), "
                f"go has {len(go_params)} param(s) and {len(go_results)} result(s)",
            )

        params = tuple(
            self._merge(f"param {i}", gnoe, goe)
            for i, (gnoe, goe) in enumerate(zip(gno_params, go_params))
        )
        results = tuple(
            self._merge(f"result {i}", gnoe, goe)
            for i, (gnoe, goe) in enumerate(zip(gno_results, go_results))
        )

        return Mapping(
            gno_import_path=self.gno_ctx.import_path,
            gno_func=self.gnof.name,
            go_import_path=self.go_ctx.import_path,
            go_func=self.gof.name,
            machine_param=machine_param,
            params=params,
            results=results,
            gno_imports=self.gno_ctx.imports,
            go_imports=self.go_ctx.imports,
        )

    def _merge(self, position: str, gnoe: Expr, goe: Expr) -> MappingType:
        if self._is_interpreter_type(goe, self.config.typed_value_type):
            return MappingType(
                type=gnoe,
                is_typed_value=True,
                carrier=(self.config.interpreter_package, self.config.typed_value_type),
            )
        try:
            merged = merge_types(gnoe, goe, self.gno_ctx, self.go_ctx, self.registry)
        except LinkError as e:
            if e.kind is ErrorKind.MISMATCH:
                raise self._signature_error(e.kind, f"{position}: {e.message}") from e
            raise e.with_context(f"{self._where} {position}", self.gnof.decl.span) from e
        return MappingType(type=merged)

    def _is_interpreter_type(self, expr: Expr, name: str, pointer: bool = False) -> bool:
        """True if ``expr`` is ``[*]<alias>.<name>`` from the interpreter package."""
        if pointer:
            if not isinstance(expr, StarExpr):
                return False
            expr = expr.x
        if not isinstance(expr, QualifiedIdent) or expr.name != name:
            return False
        return self.go_ctx.lookup(expr.package) == self.config.interpreter_package
