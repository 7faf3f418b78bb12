"""Per-session state: bound macros, load cache and defaults.

Everything here lives in a ``Session`` value passed to each command, so two
sessions never see each other's bindings or caches.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from emacros.models import MacroCode, MacroRecord, Scope


@dataclass
class SessionState:
    """Defaults offered to the operator between commands."""

    default_scope: Scope = Scope.LOCAL
    last_used: str | None = None
    last_saved: str | None = None

    def touch(self, name: str) -> None:
        self.last_used = name
        self.last_saved = name

    def forget(self, name: str) -> None:
        if self.last_used == name:
            self.last_used = None
        if self.last_saved == name:
            self.last_saved = None

    def reset(self) -> None:
        self.default_scope = Scope.LOCAL
        self.last_used = None
        self.last_saved = None


@dataclass
class LoadCacheEntry:
    directories: set[Path] = field(default_factory=set)
    global_loaded: bool = False


class LoadCache:
    """Which definition files were already read this session."""

    def __init__(self) -> None:
        self._entries: dict[str, LoadCacheEntry] = {}

    def _entry(self, mode: str) -> LoadCacheEntry:
        if mode not in self._entries:
            self._entries[mode] = LoadCacheEntry()
        return self._entries[mode]

    def global_loaded(self, mode: str) -> bool:
        entry = self._entries.get(mode)
        return bool(entry and entry.global_loaded)

    def mark_global(self, mode: str) -> None:
        self._entry(mode).global_loaded = True

    def local_loaded(self, mode: str, directory: Path) -> bool:
        entry = self._entries.get(mode)
        return bool(entry and directory in entry.directories)

    def mark_local(self, mode: str, directory: Path) -> None:
        self._entry(mode).directories.add(directory)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, mode: str) -> bool:
        return mode in self._entries


class MacroRegistry:
    """Macros currently bound in the session, by name."""

    def __init__(self) -> None:
        self._bindings: dict[str, MacroCode] = {}

    def bind(self, name: str, code: MacroCode) -> None:
        self._bindings[name] = code

    def unbind(self, name: str) -> bool:
        return self._bindings.pop(name, None) is not None

    def rebind(self, old: str, new: str, code: MacroCode) -> None:
        self._bindings.pop(old, None)
        self._bindings[new] = code

    def get(self, name: str) -> MacroCode | None:
        return self._bindings.get(name)

    def names(self) -> list[str]:
        return sorted(self._bindings)

    def snapshot(self) -> list[MacroRecord]:
        return [MacroRecord(name, self._bindings[name]) for name in self.names()]

    def complete(self, prefix: str) -> list[str]:
        return [name for name in self.names() if name.startswith(prefix)]

    def clear(self) -> list[str]:
        """Unbind everything; returns the names that were bound."""
        names = self.names()
        self._bindings.clear()
        return names

    def __contains__(self, name: str) -> bool:
        return name in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)


@dataclass
class Session:
    registry: MacroRegistry = field(default_factory=MacroRegistry)
    cache: LoadCache = field(default_factory=LoadCache)
    state: SessionState = field(default_factory=SessionState)
