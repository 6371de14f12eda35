"""Gno types whose values are stored as a differently-named Go type."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class LinkedType:
    """Asserts that Gno type ``gno_package.gno_name`` is Go type
    ``go_package.go_name``."""

    gno_package: str
    gno_name: str
    go_package: str
    go_name: str


@dataclass(frozen=True)
class LinkedIdent:
    """A merged type expression naming a linked type.

    Produced by the type merger in place of an identifier whenever the Gno
    and Go sides name the two halves of a registered LinkedType.
    """

    lt: LinkedType


class LinkedTypeRegistry:
    """Read-only table of linked types, keyed by (gno package, gno name)."""

    def __init__(self, entries: Iterable[LinkedType]) -> None:
        self._entries: dict[tuple[str, str], LinkedType] = {}
        for lt in entries:
            key = (lt.gno_package, lt.gno_name)
            if key in self._entries:
                raise ValueError(f"duplicate linked type {lt.gno_package}.{lt.gno_name}")
            self._entries[key] = lt

    def lookup(self, gno_package: str, gno_name: str) -> LinkedType | None:
        return self._entries.get((gno_package, gno_name))

    def __iter__(self):
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


_CRYPTO = "github.com/gnolang/gno/tm2/pkg/crypto"
_TM2_STD = "github.com/gnolang/gno/tm2/pkg/std"
_STDLIBS_STD = "github.com/gnolang/gno/gnovm/stdlibs/std"

DEFAULT_REGISTRY = LinkedTypeRegistry([
    LinkedType("std", "Address", _CRYPTO, "Bech32Address"),
    LinkedType("std", "Coin", _TM2_STD, "Coin"),
    LinkedType("std", "Coins", _TM2_STD, "Coins"),
    LinkedType("std", "Realm", _STDLIBS_STD, "Realm"),
    LinkedType("std", "BankerType", _STDLIBS_STD, "BankerType"),
    LinkedType("std", "Banker", _STDLIBS_STD, "Banker"),
])
