"""Tests for the genstd CLI, config, and error rendering."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from genstd.cli import main
from genstd.config import LinkConfig, find_config, load_config
from genstd.errors import (
    Diagnostic,
    DiagnosticLabel,
    DiagnosticRenderer,
    ErrorKind,
    LinkError,
    Severity,
)
from genstd.source import Span

DEFAULT_STD = "github.com/gnolang/gno/gnovm/stdlibs/std"


@pytest.fixture
def runner():
    return CliRunner()


# --- CLI tests ---


class TestCLI:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "link" in result.output
        assert "view" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "genstd" in result.output
        assert "0.1.0" in result.output

    def test_link(self, runner, testdata):
        result = runner.invoke(main, ["link", str(testdata / "linkFunctions")])
        assert result.exit_code == 0, result.output
        assert f"std.Fn -> {DEFAULT_STD}.Fn ()" in result.output
        assert (
            f"std.FnMachineParamRet -> {DEFAULT_STD}.FnMachineParamRet [machine] (int) (int)"
            in result.output
        )
        assert "linked 8 function(s) in 1 package(s)" in result.output

    def test_link_prefix(self, runner, testdata):
        result = runner.invoke(
            main, ["link", str(testdata / "linkFunctions_unexp"), "--prefix", "example.com/libs"],
        )
        assert result.exit_code == 0, result.output
        assert "std.t2 -> example.com/libs/std.X_t2 [machine] ()" in result.output

    def test_link_typed_values(self, runner, testdata):
        result = runner.invoke(main, ["link", str(testdata / "linkFunctions_TypedValue")])
        assert result.exit_code == 0, result.output
        assert "std.TVFull -> " in result.output
        assert "[machine] (Banker [typed value]) (Banker [typed value])" in result.output

    def test_link_uses_config(self, runner, stdlib_tree):
        root = stdlib_tree({
            "genstd.toml": '[link]\ngo_prefix = "example.com/fromconfig"\nunexported_prefix = "N_"\n',
            "std/std.gno": "package std\n\nfunc t1()\n",
            "std/std.go": "package std\n\nfunc N_t1() {}\n",
        })
        result = runner.invoke(main, ["link", str(root)])
        assert result.exit_code == 0, result.output
        assert "std.t1 -> example.com/fromconfig/std.N_t1 ()" in result.output

    def test_link_unresolved(self, runner, testdata):
        result = runner.invoke(
            main, ["link", "--no-color", str(testdata / "linkFunctions_noMatch")],
        )
        assert result.exit_code == 1
        assert "error[E301]: no matching go function declaration" in result.output
        assert "std.gno:3:1" in result.output
        assert "\033[" not in result.output

    def test_link_signature_mismatch(self, runner, testdata):
        result = runner.invoke(
            main, ["link", "--no-color", str(testdata / "linkFunctions_noMatchSig")],
        )
        assert result.exit_code == 1
        assert "error[E302]" in result.output
        assert "doesn't match signature of go function" in result.output

    def test_link_parse_error(self, runner, stdlib_tree):
        root = stdlib_tree({"std/std.gno": "package std\n\nfunc Fn(\n"})
        result = runner.invoke(main, ["link", "--no-color", str(root)])
        assert result.exit_code == 1
        assert "error[E200]" in result.output

    def test_link_invalid_utf8(self, runner, tmp_path):
        (tmp_path / "std").mkdir()
        (tmp_path / "std" / "std.gno").write_bytes(b"package std\n\nfunc Fn() // \xff\n")
        result = runner.invoke(main, ["link", "--no-color", str(tmp_path)])
        assert result.exit_code == 1
        assert "error[E100]: source is not valid UTF-8" in result.output
        assert "Traceback" not in result.output

    def test_link_missing_directory(self, runner, tmp_path):
        result = runner.invoke(main, ["link", str(tmp_path / "nope")])
        assert result.exit_code != 0

    def test_view(self, runner, testdata):
        result = runner.invoke(main, ["view", str(testdata / "linkFunctions" / "std" / "std.go")])
        assert result.exit_code == 0, result.output
        assert "File" in result.output
        assert "package: 'std'" in result.output
        assert "name: 'FnMachineParamRet'" in result.output

    def test_view_invalid_utf8(self, runner, tmp_path):
        bad = tmp_path / "bad.go"
        bad.write_bytes(b"package std // \xfe\n")
        result = runner.invoke(main, ["view", str(bad)])
        assert result.exit_code == 1
        assert "E100" in result.output

    def test_view_parse_error(self, runner, tmp_path):
        bad = tmp_path / "bad.go"
        bad.write_text("func Fn()\n")
        result = runner.invoke(main, ["view", str(bad)])
        assert result.exit_code == 1


# --- Config tests ---


class TestConfig:
    def test_find_config(self, tmp_path):
        (tmp_path / "genstd.toml").write_text("[link]\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == tmp_path / "genstd.toml"

    def test_find_config_missing(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Path, "exists", lambda self: False)
        with pytest.raises(FileNotFoundError):
            find_config(tmp_path)

    def test_load_config(self, tmp_path):
        path = tmp_path / "genstd.toml"
        path.write_text(
            "[link]\n"
            'go_prefix = "example.com/stdlibs"\n'
            'interpreter_package = "example.com/vm"\n'
        )
        link = load_config(path).link
        assert link.go_prefix == "example.com/stdlibs"
        assert link.interpreter_package == "example.com/vm"
        assert link.unexported_prefix == "X_"
        assert link.machine_type == "Machine"

    def test_load_empty_config(self, tmp_path):
        path = tmp_path / "genstd.toml"
        path.write_text("")
        assert load_config(path).link == LinkConfig()

    def test_go_import_path(self):
        assert LinkConfig(go_prefix="example.com/libs/").go_import_path("math") == (
            "example.com/libs/math"
        )


# --- Error rendering tests ---


class TestDiagnosticRenderer:
    def test_render_without_color(self, tmp_path):
        src = tmp_path / "std.gno"
        src.write_text("package std\n\nfunc Fn()\n")
        diag = Diagnostic(
            severity=Severity.ERROR,
            code="E301",
            message="no matching go function declaration",
            labels=[DiagnosticLabel(Span(str(src), 3, 1, 3, 9), "declared here")],
            notes=["exported names are looked up unchanged"],
        )
        output = DiagnosticRenderer(color=False).render(diag)
        lines = output.splitlines()
        assert lines[0] == "error[E301]: no matching go function declaration"
        assert f"--> {src}:3:1" in lines[1]
        assert "func Fn()" in output
        assert "^^^^^^^^^" in output
        assert "declared here" in output
        assert "= note: exported names are looked up unchanged" in output

    def test_render_with_color(self):
        diag = Diagnostic(severity=Severity.WARNING, code="W001", message="careful")
        output = DiagnosticRenderer(color=True).render(diag)
        assert "\033[1;33m" in output
        assert "careful" in output

    def test_missing_source_file(self):
        diag = Diagnostic(
            severity=Severity.ERROR,
            code="E303",
            message="types do not match",
            labels=[DiagnosticLabel(Span("/nonexistent.go", 1, 1, 1, 1), "")],
        )
        output = DiagnosticRenderer(color=False).render(diag)
        assert "/nonexistent.go:1:1" in output


class TestLinkError:
    def test_to_diagnostic(self):
        span = Span("std.gno", 3, 1, 3, 9)
        diag = LinkError(ErrorKind.ARITY, "bad arity", span).to_diagnostic()
        assert diag.code == "E302"
        assert diag.severity is Severity.ERROR
        assert diag.labels[0].span == span

    def test_with_context(self):
        err = LinkError(ErrorKind.UNSUPPORTED, "MapType types are not implemented")
        wrapped = err.with_context("std.Fn param 0")
        assert wrapped.kind is ErrorKind.UNSUPPORTED
        assert wrapped.message == "std.Fn param 0: MapType types are not implemented"
