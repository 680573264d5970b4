"""Tests for the approxgen command line."""
from __future__ import annotations

from pathlib import Path

import pytest

from approxgen.compiler.cli import main

GOOD = """
@derive(AbsDiffEq, RelativeEq)
@approx(epsilon = float, absolute = 0.1, relative = 0.01)
struct Foo(@approx(approximate) float, str);
"""

WARN = """
@approx(epsilon = float, absolute = 0.1, relative = 0.01)
struct Plain { x: float }
"""

BAD = "struct S { @approx(skip, approximate) x: float }\n"


@pytest.fixture
def write(tmp_path: Path):
    def _write(text: str, name: str = "shapes.apx") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


def test_version(capsys) -> None:
    assert main(["--version"]) == 0
    assert capsys.readouterr().out.startswith("approxgen ")


def test_missing_source(capsys) -> None:
    assert main(["--quiet"]) == 2
    assert "source file required" in capsys.readouterr().err


def test_unreadable_source(tmp_path: Path, capsys) -> None:
    assert main([str(tmp_path / "missing.apx"), "-q"]) == 2
    assert "cannot read" in capsys.readouterr().err


def test_writes_module_next_to_source(write, capsys) -> None:
    source = write(GOOD)
    assert main([str(source)]) == 0

    out = capsys.readouterr().out
    target = source.resolve().with_name("shapes_approx.py")
    assert "approxgen" in out.splitlines()[0]
    assert f"Generated 1 types -> {target}" in out
    assert "class Foo:" in target.read_text(encoding="utf-8")


def test_explicit_output_path(write, tmp_path: Path) -> None:
    source = write(GOOD)
    target = tmp_path / "out" / "generated.py"
    target.parent.mkdir()
    assert main([str(source), "-o", str(target), "-q"]) == 0
    assert target.exists()
    assert not source.with_name("shapes_approx.py").exists()


def test_stdout_is_only_the_module(write, capsys) -> None:
    assert main([str(write(GOOD)), "--stdout"]) == 0
    out = capsys.readouterr().out
    assert out.startswith('"""Approximate equality generated by approxgen')
    assert "def relative_eq(self, other: Foo, epsilon: float, max_relative: float) -> bool:" in out


def test_check_writes_nothing(write, capsys) -> None:
    source = write(GOOD)
    assert main([str(source), "--check"]) == 0
    assert "OK: 1 types checked in shapes.apx" in capsys.readouterr().out
    assert not source.with_name("shapes_approx.py").exists()


def test_errors_exit_2_and_write_nothing(write, capsys) -> None:
    source = write(BAD)
    assert main([str(source), "-q"]) == 2
    err = capsys.readouterr().err
    assert "[CE1001]" in err
    assert "cannot both skip and use approximate equality" in err
    assert not source.with_name("shapes_approx.py").exists()


def test_syntax_error_exit_2(write, capsys) -> None:
    assert main([str(write("struct {")), "-q"]) == 2
    assert "[CE2001]" in capsys.readouterr().err


def test_warnings_exit_1_and_still_generate(write, capsys) -> None:
    source = write(WARN)
    assert main([str(source), "-q"]) == 1
    assert "[CW1002]" in capsys.readouterr().err
    assert source.with_name("shapes_approx.py").exists()


def test_runtime_module_and_frozen_flags(write, capsys) -> None:
    source = write(GOOD)
    assert main([str(source), "--stdout", "--runtime-module", "mypkg.tol", "--no-frozen"]) == 0
    out = capsys.readouterr().out
    assert "import mypkg.tol as _approx" in out
    assert "@dataclass\nclass Foo:" in out


def test_invalid_runtime_module_flag(write, capsys) -> None:
    assert main([str(write(GOOD)), "-q", "--runtime-module", "not valid"]) == 2
    assert "--runtime-module" in capsys.readouterr().err


def test_project_configuration_is_applied(write, tmp_path: Path, capsys) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[tool.approxgen]\nruntime-module = "proj.tol"\noutput-suffix = "_cmp.py"\n', encoding="utf-8")
    source = write(GOOD)
    assert main([str(source), "-q"]) == 0
    generated = source.with_name("shapes_cmp.py").read_text(encoding="utf-8")
    assert "import proj.tol as _approx" in generated

    # command line wins over the project table
    assert main([str(source), "--stdout", "--runtime-module", "cli.tol"]) == 0
    assert "import cli.tol as _approx" in capsys.readouterr().out


def test_invalid_project_configuration(write, tmp_path: Path, capsys) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.approxgen]\nfrozen = 1\n", encoding="utf-8")
    assert main([str(write(GOOD)), "-q"]) == 2
    assert "must be a bool" in capsys.readouterr().err


def test_dump_flags(write, capsys) -> None:
    assert main([str(write(GOOD)), "--check", "-q", "--dump-parse", "--dump-ast", "--dump-ir"]) == 0
    out = capsys.readouterr().out
    assert "struct_decl" in out
    assert "StructDecl(" in out
    assert "Foo.abs_diff_eq:" in out
    assert "Foo.relative_eq:" in out
    assert "ToleranceCall(" in out
