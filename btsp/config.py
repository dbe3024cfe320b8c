"""Compiler configuration loaded from ``btsp.yaml``.

Example::

    compiler:
      output_name: main
      output_dir: build
      atomic_write: true

Lookup order: an explicit path, then ``$BTSP_CONFIG``, then the nearest
``btsp.yaml`` in the working directory or its parents. With no file the
defaults below apply.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml


CONFIG_FILENAME = "btsp.yaml"
CONFIG_ENV_VAR = "BTSP_CONFIG"


class ConfigError(ValueError):
    """Raised for a config file that cannot be used."""


@dataclass
class CompilerConfig:
    """Settings the compile operation reads."""

    output_name: str = "main"
    output_dir: str = "."
    source_suffix: str = ".btsp"
    debug_suffix: str = ".btspdebug"
    encoding: str = "utf-8"
    atomic_write: bool = True

    def output_path(self, output_name: str | None = None) -> Path:
        """Where the debug dump for ``output_name`` is written."""
        return Path(self.output_dir) / f"{output_name or self.output_name}{self.debug_suffix}"


def load_config(path: str | Path) -> CompilerConfig:
    """Load a CompilerConfig from a YAML file."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")

    section = data.get("compiler", {}) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"{path}: 'compiler' must be a mapping")

    known = {f.name: f for f in fields(CompilerConfig)}
    unknown = sorted(set(section) - set(known))
    if unknown:
        raise ConfigError(f"{path}: unknown compiler setting(s): {', '.join(unknown)}")

    for key, value in section.items():
        expected = bool if known[key].type == "bool" else str
        if not isinstance(value, expected):
            raise ConfigError(f"{path}: '{key}' must be a {expected.__name__}")

    return CompilerConfig(**section)


def find_config(start: str | Path = ".") -> Path | None:
    """Return the nearest btsp.yaml at or above ``start``, if any."""
    current = Path(start).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def resolve_config(
    path: str | Path | None = None,
    start: str | Path = ".",
    **overrides,
) -> CompilerConfig:
    """Load the effective config and apply non-None ``overrides`` on top."""
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or find_config(start)

    config = load_config(path) if path else CompilerConfig()
    updates = {k: v for k, v in overrides.items() if v is not None}
    return replace(config, **updates) if updates else config
