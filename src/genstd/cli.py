"""genstd CLI."""

from __future__ import annotations

from pathlib import Path

import click

from genstd import __version__
from genstd.config import LinkConfig, find_config, load_config
from genstd.errors import DiagnosticRenderer, LinkError, SourceError
from genstd.linker import link_functions
from genstd.mapping import Mapping, MappingType
from genstd.parser import parse_file
from genstd.source import read_source
from genstd.walker import walk_stdlibs


def _load_link_config(path: Path) -> LinkConfig:
    try:
        return load_config(find_config(path)).link
    except FileNotFoundError:
        return LinkConfig()


def _format_types(types: tuple[MappingType, ...]) -> str:
    return ", ".join(
        f"{mt.gno_type()} [typed value]" if mt.is_typed_value else mt.go_qualified_name()
        for mt in types
    )


def _format_mapping(m: Mapping) -> str:
    line = f"{m.gno_import_path}.{m.gno_func} -> {m.go_import_path}.{m.go_func}"
    if m.machine_param:
        line += " [machine]"
    line += f" ({_format_types(m.params)})"
    if m.results:
        line += f" ({_format_types(m.results)})"
    return line


@click.group()
@click.version_option(__version__, prog_name="genstd")
def main() -> None:
    """Link Gno standard library declarations to their Go implementations."""


@main.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False))
@click.option("--prefix", default=None, help="Go import path prefix of the stdlibs.")
@click.option("--color/--no-color", default=True, help="Colorize diagnostics.")
def link(path: str, prefix: str | None, color: bool) -> None:
    """Link every body-less Gno function under PATH to its Go function."""
    root = Path(path)
    config = _load_link_config(root)
    if prefix is not None:
        config.go_prefix = prefix

    renderer = DiagnosticRenderer(color=color)
    click.echo(f"linking {root}...", err=True)
    try:
        pkgs = walk_stdlibs(root)
        mappings = link_functions(pkgs, config)
    except SourceError as e:
        for diag in e.diagnostics:
            click.echo(renderer.render(diag), err=True)
        raise SystemExit(1)
    except LinkError as e:
        click.echo(renderer.render(e.to_diagnostic()), err=True)
        raise SystemExit(1)

    for m in mappings:
        click.echo(_format_mapping(m))
    click.echo(f"linked {len(mappings)} function(s) in {len(pkgs)} package(s)", err=True)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def view(file: str) -> None:
    """View the declarations parsed from a Go or Gno source file."""
    try:
        source_file = parse_file(read_source(file), str(file))
    except SourceError as e:
        renderer = DiagnosticRenderer(color=True)
        for diag in e.diagnostics:
            click.echo(renderer.render(diag), err=True)
        raise SystemExit(1)

    _dump_ast(source_file, 0)


def _dump_ast(node: object, depth: int) -> None:
    """Print a readable AST dump."""
    indent = "  " * depth
    name = type(node).__name__

    if hasattr(node, "__dataclass_fields__"):
        fields = node.__dataclass_fields__  # type: ignore[union-attr]
        click.echo(f"{indent}{name}")
        for field_name in fields:
            if field_name == "span":
                continue
            value = getattr(node, field_name)
            if isinstance(value, tuple) and value and hasattr(value[0], "__dataclass_fields__"):
                click.echo(f"{indent}  {field_name}:")
                for item in value:
                    _dump_ast(item, depth + 2)
            elif hasattr(value, "__dataclass_fields__"):
                click.echo(f"{indent}  {field_name}:")
                _dump_ast(value, depth + 2)
            elif value is not None and value != ():
                click.echo(f"{indent}  {field_name}: {value!r}")
    else:
        click.echo(f"{indent}{name}: {node!r}")
