"""
Configuration loading.

Settings come from mutrack.toml (top-level keys) or the [tool.mutrack]
table of pyproject.toml, whichever is found first walking up from the
starting directory.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from .errors import ConfigError

OutputFormat = Literal["table", "json"]

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
OUTPUT_FORMATS = ("table", "json")


@dataclass(frozen=True)
class MutrackConfig:
    mutation_dir: Path | None = None
    log_level: str = "WARNING"
    output: OutputFormat = "table"
    source: Path | None = None  # file the settings were read from


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _parse(data: dict[str, Any], source: Path) -> MutrackConfig:
    log_level = str(data.get("log_level", "WARNING")).strip().upper() or "WARNING"
    if log_level not in LOG_LEVELS:
        raise ConfigError(f"{source}: log_level must be one of {', '.join(LOG_LEVELS)}")

    output = str(data.get("output", "table")).strip().lower() or "table"
    if output not in OUTPUT_FORMATS:
        raise ConfigError(f"{source}: output must be one of {', '.join(OUTPUT_FORMATS)}")

    mutation_dir = None
    raw_dir = data.get("mutation_dir")
    if raw_dir is not None:
        if not isinstance(raw_dir, str) or not raw_dir.strip():
            raise ConfigError(f"{source}: mutation_dir must be a non-empty string")
        mutation_dir = Path(raw_dir)
        if not mutation_dir.is_absolute():
            mutation_dir = (source.parent / mutation_dir).resolve()

    return MutrackConfig(
        mutation_dir=mutation_dir,
        log_level=log_level,
        output=output,  # type: ignore[arg-type]
        source=source,
    )


def load_config(path: Path) -> MutrackConfig:
    """
    Load settings from a TOML file.

    pyproject.toml is read from its [tool.mutrack] table; any other file is
    read from its top level.
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    if path.name == "pyproject.toml":
        data = _coerce_dict(_coerce_dict(data.get("tool")).get("mutrack"))
    return _parse(data, path)


def _has_tool_table(pyproject: Path) -> bool:
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, OSError):
        return False
    return "mutrack" in _coerce_dict(data.get("tool"))


def find_config(start: Path) -> Path | None:
    """Find the nearest config file by walking up from `start`."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        candidate = p / "mutrack.toml"
        if candidate.is_file():
            return candidate
        pyproject = p / "pyproject.toml"
        if pyproject.is_file() and _has_tool_table(pyproject):
            return pyproject
    return None


def resolve_config(start: Path) -> MutrackConfig:
    """Load the nearest config, or defaults when there is none."""
    path = find_config(start)
    if path is None:
        return MutrackConfig()
    return load_config(path)
