"""Definition file naming: (scope, mode, directory) -> absolute path."""

from __future__ import annotations

import os
from pathlib import Path

from emacros.config import MacroConfig
from emacros.models import Scope


def mode_namespace(mode: str, suffix: str = "-mode", separator: str = ":") -> str:
    """Normalize a mode name: drop the mode suffix, else cut at the separator."""
    if suffix and mode.endswith(suffix) and len(mode) > len(suffix):
        return mode[: -len(suffix)]
    if separator and separator in mode:
        return mode.split(separator, 1)[0]
    return mode


def absolute_path(path: Path | str) -> Path:
    # normpath instead of resolve(): no filesystem access
    return Path(os.path.normpath(os.path.abspath(os.path.expanduser(str(path)))))


class PathResolver:
    """Pure mapping from scope and mode to definition file paths."""

    def __init__(self, config: MacroConfig) -> None:
        self.config = config

    def global_root(self) -> Path:
        return absolute_path(self.config.global_dir)

    def root_for(self, scope: Scope, directory: Path | str) -> Path:
        return self.global_root() if scope is Scope.GLOBAL else absolute_path(directory)

    def is_global_root(self, directory: Path | str) -> bool:
        """True when the local directory is the global root itself."""
        return absolute_path(directory) == self.global_root()

    def file_name(self, mode: str) -> str:
        cfg = self.config
        ns = mode_namespace(mode, cfg.mode_suffix, cfg.namespace_separator)
        if cfg.subdir:
            return f"for-{ns}.{cfg.extension}"
        return f".{cfg.file_prefix}-for-{ns}.{cfg.extension}"

    def resolve(self, scope: Scope, mode: str, directory: Path | str) -> Path:
        """Return the definition file for ``mode`` in the given scope."""
        root = self.root_for(scope, directory)
        if self.config.subdir:
            root = root / self.config.subdir
        return root / self.file_name(mode)

    def scope_of(self, path: Path | str, mode: str, directory: Path | str) -> Scope | None:
        """Which scope an arbitrary path corresponds to, if any."""
        target = absolute_path(path)
        for scope in (Scope.LOCAL, Scope.GLOBAL):
            if self.resolve(scope, mode, directory) == target:
                return scope
        return None
