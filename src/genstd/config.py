"""TOML config loading for genstd.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILENAME = "genstd.toml"


@dataclass
class LinkConfig:
    # Go import path under which each stdlib package's Go sources live.
    go_prefix: str = "github.com/gnolang/gno/gnovm/stdlibs"
    interpreter_package: str = "github.com/gnolang/gno/gnovm/pkg/gnolang"
    machine_type: str = "Machine"
    typed_value_type: str = "TypedValue"
    unexported_prefix: str = "X_"

    def go_import_path(self, import_path: str) -> str:
        return f"{self.go_prefix.rstrip('/')}/{import_path}"


@dataclass
class GenstdConfig:
    link: LinkConfig


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find genstd.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_FILENAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_FILENAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> GenstdConfig:
    """Parse a genstd.toml file into a GenstdConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    defaults = LinkConfig()
    lnk = data.get("link", {})
    return GenstdConfig(
        link=LinkConfig(
            go_prefix=lnk.get("go_prefix", defaults.go_prefix),
            interpreter_package=lnk.get("interpreter_package", defaults.interpreter_package),
            machine_type=lnk.get("machine_type", defaults.machine_type),
            typed_value_type=lnk.get("typed_value_type", defaults.typed_value_type),
            unexported_prefix=lnk.get("unexported_prefix", defaults.unexported_prefix),
        ),
    )
