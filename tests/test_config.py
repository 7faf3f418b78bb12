"""Tests for configuration loading."""

import pytest
from pathlib import Path

from emacros.config import load_config

_ENV_KEYS = ["EMACROS_GLOBAL_DIR", "EMACROS_SUBDIR", "EMACROS_LOG_LEVEL"]


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return home


class TestConfig:
    def test_defaults(self, isolated_home: Path):
        config = load_config()
        assert config.global_dir == isolated_home
        assert config.subdir == "emacros"
        assert config.file_prefix == "emacros"
        assert config.extension == "el"
        assert config.mode_suffix == "-mode"
        assert config.log_level == "INFO"

    def test_env_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("EMACROS_GLOBAL_DIR", str(tmp_path / "shared"))
        monkeypatch.setenv("EMACROS_SUBDIR", "")
        monkeypatch.setenv("EMACROS_LOG_LEVEL", "DEBUG")

        config = load_config()
        assert config.global_dir == tmp_path / "shared"
        assert config.subdir is None
        assert config.log_level == "DEBUG"

    def test_toml_file(self, tmp_path: Path):
        toml_path = tmp_path / "custom.toml"
        toml_path.write_text("""
log_level = "WARNING"

[files]
global_dir = "/srv/macros"
subdir = false
prefix = "kmacro"
extension = "lisp"

[mode]
suffix = "-m"
separator = "/"
""")
        config = load_config(toml_path)
        assert config.global_dir == Path("/srv/macros")
        assert config.subdir is None
        assert config.file_prefix == "kmacro"
        assert config.extension == "lisp"
        assert config.mode_suffix == "-m"
        assert config.namespace_separator == "/"
        assert config.log_level == "WARNING"

    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("EMACROS_SUBDIR", "kbd")

        toml_path = tmp_path / "emacros.toml"
        toml_path.write_text("""
[files]
subdir = "macros"
""")
        config = load_config(toml_path)
        assert config.subdir == "kbd"  # env wins

    def test_discovers_file_in_cwd(self, tmp_path: Path):
        (tmp_path / "emacros.toml").write_text('[files]\nsubdir = ""\n')
        config = load_config()
        assert config.subdir is None

    def test_discovers_file_in_home(self, isolated_home: Path):
        (isolated_home / ".emacros").mkdir()
        (isolated_home / ".emacros" / "emacros.toml").write_text('log_level = "ERROR"\n')
        config = load_config()
        assert config.log_level == "ERROR"
