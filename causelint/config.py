"""
Analyzer configuration.

Sources, lowest precedence first:
1. Built-in defaults
2. causelint.toml, or [tool.causelint] in pyproject.toml
3. CLI flags
"""
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, Optional, Tuple

import structlog

from .detectors import DEFAULT_ERROR_CONSTRUCTORS
from .parsing import SUPPORTED_SUFFIXES

logger = structlog.get_logger(component="causelint.config")

DEFAULT_EXCLUDE_DIRS: Tuple[str, ...] = ("node_modules", "dist", "build", "coverage")

CONFIG_FILENAME = "causelint.toml"
PYPROJECT_FILENAME = "pyproject.toml"

_KEYS = {
    "error-constructors": "error_constructors",
    "extensions":         "extensions",
    "exclude-dirs":       "exclude_dirs",
}


class ConfigError(ValueError):
    """Configuration file is unreadable or holds invalid values."""


@dataclass(frozen=True)
class AnalyzerConfig:
    error_constructors: Tuple[str, ...] = DEFAULT_ERROR_CONSTRUCTORS
    extensions: Tuple[str, ...] = SUPPORTED_SUFFIXES
    exclude_dirs: Tuple[str, ...] = DEFAULT_EXCLUDE_DIRS

    def with_error_constructors(self, names: Iterable[str]) -> "AnalyzerConfig":
        """Extend (not replace) the recognized constructor names."""
        merged = list(self.error_constructors)
        for name in names:
            if name not in merged:
                merged.append(name)
        return replace(self, error_constructors=tuple(merged))


def _string_tuple(key: str, value: object, source: Path) -> Tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) and v for v in value):
        raise ConfigError(f"{source}: '{key}' must be a list of non-empty strings")
    return tuple(value)


def config_from_table(table: dict, source: Path) -> AnalyzerConfig:
    """
    Build a config from a parsed TOML table.

    `error-constructors` extends the default names, like the CLI flag.
    """
    if not isinstance(table, dict):
        raise ConfigError(f"{source}: causelint configuration must be a table")

    unknown = sorted(set(table) - set(_KEYS))
    if unknown:
        raise ConfigError(f"{source}: unknown option(s): {', '.join(unknown)}")

    values = {_KEYS[key]: _string_tuple(key, value, source) for key, value in table.items()}

    extensions = values.get("extensions")
    if extensions is not None:
        unsupported = [ext for ext in extensions if ext.lower() not in SUPPORTED_SUFFIXES]
        if unsupported:
            raise ConfigError(f"{source}: unsupported extension(s): {', '.join(unsupported)}")

    names = values.pop("error_constructors", ())
    return AnalyzerConfig(**values).with_error_constructors(names)


def _read_toml(path: Path) -> dict:
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e


def load_config(root: Path, explicit: Optional[Path] = None) -> AnalyzerConfig:
    """
    Load configuration for a project rooted at `root`.

    An explicit file is read as a causelint.toml (top-level keys), unless
    it is named pyproject.toml. Missing files fall back to defaults.
    """
    if explicit is not None:
        if not explicit.is_file():
            raise ConfigError(f"Config file does not exist: {explicit}")
        candidates = [explicit]
    else:
        candidates = [root / CONFIG_FILENAME, root / PYPROJECT_FILENAME]

    for path in candidates:
        if not path.is_file():
            continue

        data = _read_toml(path)
        if path.name == PYPROJECT_FILENAME:
            tool = data.get("tool", {})
            if not isinstance(tool, dict):
                raise ConfigError(f"{path}: [tool] must be a table")
            table = tool.get("causelint")
            if table is None:
                continue
            if not isinstance(table, dict):
                raise ConfigError(f"{path}: [tool.causelint] must be a table")
        else:
            table = data

        config = config_from_table(table, path)
        logger.debug("config_loaded", path=str(path))
        return config

    return AnalyzerConfig()
