"""Tests for mappings, their import table and expression printing."""

from __future__ import annotations

import pytest

from genstd.ast_nodes import ArrayType, BasicLit, Ident, StarExpr
from genstd.linked_types import DEFAULT_REGISTRY, LinkedIdent
from genstd.mapping import ImportTable, Mapping, MappingType
from genstd.parser import parse_expr
from genstd.printer import ExprPrinter, PrinterMode, expr_string, package_alias

GNOLANG = "github.com/gnolang/gno/gnovm/pkg/gnolang"
ADDRESS = LinkedIdent(DEFAULT_REGISTRY.lookup("std", "Address"))
REALM = LinkedIdent(DEFAULT_REGISTRY.lookup("std", "Realm"))


class TestPrinter:
    @pytest.mark.parametrize("source", [
        "int",
        "*[11][]rune",
        "map[string]int",
        "func(s string) (bool, error)",
        "chan<- int",
        "struct{m1 map[string]interface{}}",
        "interface{S() map[int]Banker}",
        "crypto.Bech32Address",
        "1 + 2",
        "List[int, string]",
    ])
    def test_round_trips_compact_form(self, source):
        assert expr_string(parse_expr(source)) == source

    def test_struct_spacing_is_normalized(self):
        assert expr_string(parse_expr("struct{ a, b int }")) == "struct{a, b int}"

    def test_linked_ident_modes(self):
        assert ExprPrinter(PrinterMode.GNO_TYPE).expr_string(ADDRESS) == "std.Address"
        assert ExprPrinter(PrinterMode.GO_QUALIFIED).expr_string(ADDRESS) == "crypto.Bech32Address"

    def test_custom_alias(self):
        printer = ExprPrinter(PrinterMode.GO_QUALIFIED, lambda path: "c")
        assert printer.expr_string(StarExpr(ADDRESS)) == "*c.Bech32Address"

    def test_package_alias(self):
        assert package_alias("github.com/gnolang/gno/tm2/pkg/crypto") == "crypto"
        assert package_alias("std") == "std"


class TestMappingType:
    def test_plain(self):
        mt = MappingType(ArrayType(BasicLit("INT", "4"), ADDRESS))
        assert mt.gno_type() == "[4]std.Address"
        assert mt.go_qualified_name() == "[4]crypto.Bech32Address"

    def test_typed_value(self):
        mt = MappingType(
            parse_expr("interface{}"), is_typed_value=True, carrier=(GNOLANG, "TypedValue"),
        )
        assert mt.gno_type() == "interface{}"
        assert mt.go_qualified_name() == "gnolang.TypedValue"

    def test_uses_import_table_aliases(self):
        table = ImportTable([
            "github.com/gnolang/gno/tm2/pkg/crypto",
            "example.com/other/crypto",
        ])
        assert MappingType(ADDRESS).go_qualified_name(table) == "crypto2.Bech32Address"


class TestMapping:
    def _mapping(self, **kwargs) -> Mapping:
        return Mapping(
            gno_import_path="std",
            gno_func="Fn",
            go_import_path="github.com/gnolang/gno/gnovm/stdlibs/std",
            go_func="Fn",
            **kwargs,
        )

    def test_linked_types_deduplicated_in_order(self):
        m = self._mapping(
            params=(MappingType(REALM), MappingType(StarExpr(ADDRESS)), MappingType(Ident("int"))),
            results=(MappingType(ArrayType(None, REALM)),),
        )
        assert [lt.gno_name for lt in m.linked_types()] == ["Realm", "Address"]

    def test_typed_values_contribute_no_linked_types(self):
        m = self._mapping(
            params=(MappingType(Ident("Address"), is_typed_value=True, carrier=(GNOLANG, "TypedValue")),),
        )
        assert m.linked_types() == []
        assert m.uses_interpreter()

    def test_uses_interpreter(self):
        assert not self._mapping().uses_interpreter()
        assert self._mapping(machine_param=True).uses_interpreter()

    def test_contexts(self):
        m = self._mapping()
        assert m.gno_context().import_path == "std"
        assert m.go_context().import_path == "github.com/gnolang/gno/gnovm/stdlibs/std"


class TestImportTable:
    def test_sorted_and_unique(self):
        table = ImportTable(["b/x", "a/y", "b/x"])
        assert list(table) == [("y", "a/y"), ("x", "b/x")]
        assert len(table) == 2

    def test_alias_collisions(self):
        table = ImportTable([
            "github.com/gnolang/gno/tm2/pkg/std",
            "github.com/gnolang/gno/gnovm/stdlibs/std",
        ])
        assert table.alias("github.com/gnolang/gno/gnovm/stdlibs/std") == "std"
        assert table.alias("github.com/gnolang/gno/tm2/pkg/std") == "std2"

    def test_invalid_identifiers_sanitized(self):
        table = ImportTable(["example.com/go-errors", "example.com/v2x/3d"])
        assert table.alias("example.com/go-errors") == "go_errors"
        assert table.alias("example.com/v2x/3d") == "_3d"

    def test_missing_alias(self):
        with pytest.raises(KeyError):
            ImportTable([]).alias("std")

    def test_from_mappings(self):
        mappings = [
            Mapping(
                gno_import_path="std",
                gno_func="Owner",
                go_import_path="github.com/gnolang/gno/gnovm/stdlibs/std",
                go_func="Owner",
                machine_param=True,
                results=(MappingType(ADDRESS),),
            ),
        ]
        table = ImportTable.from_mappings(mappings)
        assert [path for _, path in table] == [
            "github.com/gnolang/gno/gnovm/pkg/gnolang",
            "github.com/gnolang/gno/gnovm/stdlibs/std",
            "github.com/gnolang/gno/tm2/pkg/crypto",
        ]
