"""Tests for btsp.yaml configuration loading."""

import tempfile
from pathlib import Path

import pytest
import yaml

from btsp.config import (
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    CompilerConfig,
    ConfigError,
    find_config,
    load_config,
    resolve_config,
)


def _write_config(directory: Path, data) -> Path:
    path = directory / CONFIG_FILENAME
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


def test_defaults():
    config = CompilerConfig()
    assert config.output_name == "main"
    assert config.source_suffix == ".btsp"
    assert config.debug_suffix == ".btspdebug"
    assert config.atomic_write is True
    assert config.output_path() == Path(".") / "main.btspdebug"
    assert config.output_path("demo") == Path(".") / "demo.btspdebug"


def test_load_config():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = _write_config(
            Path(tmpdir),
            {"compiler": {"output_name": "dump", "output_dir": "out", "atomic_write": False}},
        )
        config = load_config(path)

    assert config.output_name == "dump"
    assert config.output_dir == "out"
    assert config.atomic_write is False
    assert config.encoding == "utf-8"


def test_load_empty_config():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / CONFIG_FILENAME
        path.write_text("")
        assert load_config(path) == CompilerConfig()


def test_load_config_unknown_key():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = _write_config(Path(tmpdir), {"compiler": {"optimize": True}})
        with pytest.raises(ConfigError, match="optimize"):
            load_config(path)


def test_load_config_wrong_type():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = _write_config(Path(tmpdir), {"compiler": {"atomic_write": "yes please"}})
        with pytest.raises(ConfigError, match="atomic_write"):
            load_config(path)


def test_load_config_not_a_mapping():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = _write_config(Path(tmpdir), ["compiler"])
        with pytest.raises(ConfigError):
            load_config(path)


def test_load_config_invalid_yaml():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / CONFIG_FILENAME
        path.write_text("compiler: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)


def test_find_config_in_parent():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir).resolve()
        path = _write_config(root, {"compiler": {}})
        nested = root / "src" / "scripts"
        nested.mkdir(parents=True)

        assert find_config(nested) == path


def test_resolve_config_overrides(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    with tempfile.TemporaryDirectory() as tmpdir:
        _write_config(Path(tmpdir), {"compiler": {"output_name": "dump", "output_dir": "out"}})
        config = resolve_config(start=tmpdir, output_dir="elsewhere", output_name=None)

    assert config.output_name == "dump"
    assert config.output_dir == "elsewhere"


def test_resolve_config_from_env(monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        path = _write_config(Path(tmpdir), {"compiler": {"output_name": "envdump"}})
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert resolve_config().output_name == "envdump"


def test_resolve_config_explicit_path_wins(monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        env_path = _write_config(Path(tmpdir), {"compiler": {"output_name": "env"}})
        explicit = Path(tmpdir) / "other.yaml"
        explicit.write_text("compiler:\n  output_name: explicit\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(env_path))

        assert resolve_config(explicit).output_name == "explicit"
