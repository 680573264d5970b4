"""Tests for approxgen.compiler.config."""
from __future__ import annotations

from pathlib import Path

import pytest

from approxgen.compiler.config import ConfigError, GeneratorConfig, find_pyproject, load_config


def test_defaults_without_pyproject(tmp_path: Path) -> None:
    config = load_config(tmp_path / "shapes.apx")
    assert config == GeneratorConfig()
    assert config.runtime_module == "approxgen.runtime"
    assert config.frozen is True
    assert config.output_path(tmp_path / "shapes.apx") == tmp_path / "shapes_approx.py"


def test_reads_nearest_pyproject(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[tool.approxgen]\nruntime-module = "outer.runtime"\n', encoding="utf-8")
    nested = tmp_path / "pkg" / "geometry"
    nested.mkdir(parents=True)
    (tmp_path / "pkg" / "pyproject.toml").write_text(
        '[tool.approxgen]\n'
        'runtime-module = "pkg.tolerance"\n'
        'frozen = false\n'
        'output-suffix = "_cmp.py"\n',
        encoding="utf-8",
    )

    source = nested / "shapes.apx"
    assert find_pyproject(source) == tmp_path / "pkg" / "pyproject.toml"

    config = load_config(source)
    assert config.runtime_module == "pkg.tolerance"
    assert config.frozen is False
    assert config.origin == tmp_path / "pkg" / "pyproject.toml"
    assert config.output_path(source) == nested / "shapes_cmp.py"


def test_pyproject_without_table_gives_defaults(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "demo"\n', encoding="utf-8")
    assert load_config(tmp_path / "a.apx") == GeneratorConfig()


@pytest.mark.parametrize("body, message", [
    ('unknown = 1', "unknown key 'unknown'"),
    ('frozen = "yes"', "frozen"),
    ('runtime-module = 3', "runtime-module"),
    ('runtime-module = "not a module"', "not a module path"),
    ('output-suffix = "_approx.txt"', "must end with '.py'"),
])
def test_invalid_values_raise(tmp_path: Path, body: str, message: str) -> None:
    (tmp_path / "pyproject.toml").write_text(f"[tool.approxgen]\n{body}\n", encoding="utf-8")
    with pytest.raises(ConfigError, match=message):
        load_config(tmp_path / "a.apx")


def test_malformed_toml_raises(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.approxgen\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="cannot read"):
        load_config(tmp_path / "a.apx")


def test_override_ignores_unset_options() -> None:
    config = GeneratorConfig(runtime_module="a.b").override(runtime_module=None, frozen=False)
    assert config.runtime_module == "a.b"
    assert config.frozen is False
