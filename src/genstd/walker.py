"""Discover Gno stdlib packages and their Go implementations on disk."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from genstd.ast_nodes import FuncDecl, ImportSpec
from genstd.parser import parse_file
from genstd.source import read_source


@dataclass(frozen=True)
class DeclaredFunc:
    """A function declaration plus the imports of the file declaring it."""

    decl: FuncDecl
    imports: tuple[ImportSpec, ...] = ()

    @property
    def name(self) -> str:
        return self.decl.name


@dataclass
class PackageData:
    import_path: str
    fs_dir: Path
    gno_bodyless: list[DeclaredFunc] = field(default_factory=list)
    go_funcs: list[DeclaredFunc] = field(default_factory=list)

    def find_go_func(self, name: str) -> DeclaredFunc | None:
        for fn in self.go_funcs:
            if fn.name == name:
                return fn
        return None


def _is_source(path: Path) -> bool:
    if path.suffix not in (".gno", ".go"):
        return False
    if path.name.endswith(".gen.go"):
        return False
    return not path.stem.endswith(("_test", "_filetest"))


def _walk(directory: Path):
    """Yield files under directory in lexical order, depth first."""
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            yield from _walk(entry)
        else:
            yield entry


def walk_stdlibs(root: Path | str) -> list[PackageData]:
    """Parse every package under ``root``.

    A package is a directory below ``root``; its import path is the
    directory relative to ``root``. Gno files contribute their body-less
    (natively implemented) functions, Go files all their top-level
    functions. Packages are returned in discovery order.
    """
    root = Path(root)
    pkgs: list[PackageData] = []
    by_path: dict[str, PackageData] = {}

    for fpath in _walk(root):
        if fpath.parent == root or not _is_source(fpath):
            continue

        import_path = fpath.parent.relative_to(root).as_posix()
        pkg = by_path.get(import_path)
        if pkg is None:
            pkg = PackageData(import_path=import_path, fs_dir=fpath.parent)
            by_path[import_path] = pkg
            pkgs.append(pkg)

        source_file = parse_file(read_source(fpath), str(fpath))
        funcs = [
            DeclaredFunc(decl=fn, imports=source_file.imports)
            for fn in source_file.funcs()
        ]
        if fpath.suffix == ".go":
            pkg.go_funcs.extend(funcs)
        else:
            pkg.gno_bodyless.extend(fn for fn in funcs if not fn.decl.has_body)

    return pkgs
