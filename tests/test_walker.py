"""Tests for stdlib package discovery."""

from __future__ import annotations

import pytest

from genstd.ast_nodes import ImportSpec
from genstd.errors import SourceError
from genstd.walker import walk_stdlibs


class TestWalkStdlibs:
    def test_testdata_tree(self, testdata):
        pkgs = walk_stdlibs(testdata / "linkFunctions")
        assert [p.import_path for p in pkgs] == ["std"]
        (std,) = pkgs
        assert std.fs_dir == testdata / "linkFunctions" / "std"
        assert len(std.gno_bodyless) == 8
        assert len(std.go_funcs) == 8

    def test_go_imports_attached(self, testdata):
        (std,) = walk_stdlibs(testdata / "linkFunctions")
        fn = std.find_go_func("FnMachine")
        assert fn is not None
        assert fn.imports == (ImportSpec("github.com/gnolang/gno/gnovm/pkg/gnolang", "gno"),)

    def test_find_missing(self, testdata):
        (std,) = walk_stdlibs(testdata / "linkFunctions")
        assert std.find_go_func("Implemented") is None

    def test_skipped_files(self, stdlib_tree):
        root = stdlib_tree({
            "root.gno": "this is not parsed",
            "pkg/README.md": "not a source file",
            "pkg/pkg.gno": "package pkg\n\nfunc A()\n",
            "pkg/pkg_test.gno": "package pkg\n\nfunc B()\n",
            "pkg/z_filetest.gno": "package pkg\n\nfunc C()\n",
            "pkg/native.gen.go": "package pkg\n\nfunc D() {}\n",
            "pkg/native_test.go": "package pkg\n\nfunc E() {}\n",
        })
        (pkg,) = walk_stdlibs(root)
        assert [fn.name for fn in pkg.gno_bodyless] == ["A"]
        assert pkg.go_funcs == []

    def test_nested_import_paths(self, stdlib_tree):
        root = stdlib_tree({
            "encoding/binary/binary.gno": "package binary\n\nfunc F()\n",
            "encoding/hex/hex.gno": "package hex\n\nfunc G()\n",
            "bytes/bytes.gno": "package bytes\n\nfunc H()\n",
        })
        assert [p.import_path for p in walk_stdlibs(root)] == [
            "bytes", "encoding/binary", "encoding/hex",
        ]

    def test_methods_not_collected(self, stdlib_tree):
        root = stdlib_tree({
            "std/std.gno": "package std\n\ntype Realm struct{}\n\nfunc (r Realm) Addr() string\n",
        })
        (std,) = walk_stdlibs(root)
        assert std.gno_bodyless == []

    def test_parse_error_propagates(self, stdlib_tree):
        root = stdlib_tree({"std/std.gno": "package std\n\nfunc Fn(\n"})
        with pytest.raises(SourceError):
            walk_stdlibs(root)

    def test_invalid_utf8_is_a_source_error(self, tmp_path):
        pkg = tmp_path / "std"
        pkg.mkdir()
        (pkg / "std.gno").write_bytes(b"package std\n\nfunc Fn(s string) // \xff\n")
        with pytest.raises(SourceError) as exc:
            walk_stdlibs(tmp_path)
        diag = exc.value.diagnostics[0]
        assert diag.code == "E100"
        assert "not valid UTF-8" in diag.message
        assert diag.labels[0].span.file == str(pkg / "std.gno")
