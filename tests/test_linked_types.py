"""Tests for the linked type registry."""

from __future__ import annotations

import pytest

from genstd.linked_types import DEFAULT_REGISTRY, LinkedType, LinkedTypeRegistry


class TestLinkedTypeRegistry:
    def test_default_entries(self):
        assert len(DEFAULT_REGISTRY) == 6
        assert {lt.gno_name for lt in DEFAULT_REGISTRY} == {
            "Address", "Coin", "Coins", "Realm", "BankerType", "Banker",
        }
        assert all(lt.gno_package == "std" for lt in DEFAULT_REGISTRY)

    def test_lookup(self):
        lt = DEFAULT_REGISTRY.lookup("std", "Address")
        assert lt == LinkedType(
            "std", "Address", "github.com/gnolang/gno/tm2/pkg/crypto", "Bech32Address",
        )
        assert DEFAULT_REGISTRY.lookup("std", "Nope") is None
        assert DEFAULT_REGISTRY.lookup("math", "Address") is None

    def test_duplicate_key_rejected(self):
        with pytest.raises(ValueError, match="duplicate linked type std.A"):
            LinkedTypeRegistry([
                LinkedType("std", "A", "x", "A"),
                LinkedType("std", "A", "y", "B"),
            ])

    def test_same_name_in_other_package_allowed(self):
        registry = LinkedTypeRegistry([
            LinkedType("std", "A", "x", "A"),
            LinkedType("math", "A", "x", "A"),
        ])
        assert len(registry) == 2

    def test_entries_are_frozen(self):
        lt = DEFAULT_REGISTRY.lookup("std", "Coin")
        with pytest.raises(AttributeError):
            lt.go_name = "Other"  # type: ignore[misc]
