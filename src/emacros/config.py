"""Configuration loading from environment variables and emacros.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

_CONFIG_FILENAME = "emacros.toml"
_DEFAULT_SUBDIR = "emacros"


@dataclass
class MacroConfig:
    """Where definition files live and how they are named."""

    global_dir: Path = field(default_factory=Path.home)
    subdir: str | None = _DEFAULT_SUBDIR
    file_prefix: str = "emacros"
    extension: str = "el"
    mode_suffix: str = "-mode"
    namespace_separator: str = ":"
    log_level: str = "INFO"


def _subdir_value(raw: object) -> str | None:
    """Normalize a subdirectory setting; empty or false disables it."""
    if raw is None or raw is False:
        return None
    text = str(raw).strip()
    return text or None


def load_config(config_path: Path | None = None) -> MacroConfig:
    """Load configuration from environment variables and optional emacros.toml.

    Priority: environment variables > emacros.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.emacros/
        for candidate in [Path.cwd() / _CONFIG_FILENAME, Path.home() / ".emacros" / _CONFIG_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    files_data = file_data.get("files", {})
    mode_data = file_data.get("mode", {})

    global_dir = os.getenv("EMACROS_GLOBAL_DIR", files_data.get("global_dir"))
    subdir = os.getenv("EMACROS_SUBDIR", files_data.get("subdir", _DEFAULT_SUBDIR))

    config = MacroConfig(
        global_dir=Path(global_dir).expanduser() if global_dir else Path.home(),
        subdir=_subdir_value(subdir),
        file_prefix=files_data.get("prefix", "emacros"),
        extension=files_data.get("extension", "el"),
        mode_suffix=mode_data.get("suffix", "-mode"),
        namespace_separator=mode_data.get("separator", ":"),
        log_level=os.getenv("EMACROS_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
    return config
