"""Project configuration from the `[tool.approxgen]` table of pyproject.toml."""
from __future__ import annotations
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

from approxgen.backend.codegen_python import DEFAULT_RUNTIME_MODULE


class ConfigError(Exception):
    """Invalid `[tool.approxgen]` configuration."""


@dataclass(frozen=True)
class GeneratorConfig:
    runtime_module: str = DEFAULT_RUNTIME_MODULE
    frozen: bool = True
    output_suffix: str = "_approx.py"
    origin: Optional[Path] = None     # pyproject.toml the values came from

    def output_path(self, source: Path) -> Path:
        """Default output file for a declaration file: `shapes.apx` -> `shapes_approx.py`."""
        return source.with_name(source.stem + self.output_suffix)

    def override(self, **changes: Any) -> "GeneratorConfig":
        """Apply command-line overrides, ignoring options left unset (None)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


# toml key -> (attribute, expected type)
_KEYS: Dict[str, tuple] = {
    "runtime-module": ("runtime_module", str),
    "frozen": ("frozen", bool),
    "output-suffix": ("output_suffix", str),
}


def find_pyproject(start: Path) -> Optional[Path]:
    """Nearest pyproject.toml at or above `start`."""
    here = start if start.is_dir() else start.parent
    for directory in (here, *here.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def parse_config(table: Dict[str, Any], origin: Optional[Path] = None) -> GeneratorConfig:
    """Build a GeneratorConfig from a `[tool.approxgen]` table.

    Raises:
        ConfigError: on unknown keys or values of the wrong type.
    """
    where = f" in {origin}" if origin else ""
    values: Dict[str, Any] = {}
    for key, value in table.items():
        if key not in _KEYS:
            known = ", ".join(sorted(_KEYS))
            raise ConfigError(f"unknown key '{key}' in [tool.approxgen]{where}; expected one of: {known}")
        attr, expected = _KEYS[key]
        if not isinstance(value, expected):
            raise ConfigError(f"[tool.approxgen] {key}{where} must be a {expected.__name__}, "
                              f"got {type(value).__name__}")
        values[attr] = value

    module = values.get("runtime_module")
    if module is not None and not all(part.isidentifier() for part in module.split(".")):
        raise ConfigError(f"[tool.approxgen] runtime-module{where} is not a module path: '{module}'")

    suffix = values.get("output_suffix")
    if suffix is not None and not suffix.endswith(".py"):
        raise ConfigError(f"[tool.approxgen] output-suffix{where} must end with '.py': '{suffix}'")

    return GeneratorConfig(origin=origin, **values)


def load_config(start: Path) -> GeneratorConfig:
    """Configuration for a declaration file, defaults when no project sets any.

    Raises:
        ConfigError: the pyproject.toml is unreadable or its table invalid.
    """
    pyproject = find_pyproject(start)
    if pyproject is None:
        return GeneratorConfig()
    try:
        with open(pyproject, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"cannot read {pyproject}: {e}") from e

    table = data.get("tool", {}).get("approxgen")
    if table is None:
        return GeneratorConfig()
    if not isinstance(table, dict):
        raise ConfigError(f"[tool.approxgen] in {pyproject} must be a table")
    return parse_config(table, origin=pyproject)
