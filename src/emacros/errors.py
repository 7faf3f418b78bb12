"""Error taxonomy shared by every macro operation."""

from __future__ import annotations

from pathlib import Path


class MacroError(Exception):
    """Base class for all macro store failures."""


class ValidationError(MacroError):
    """A candidate macro name was rejected."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Invalid macro name {name!r}: {reason}")
        self.name = name
        self.reason = reason


class ConflictError(MacroError):
    """A non-overwrite write found an existing record with the same name."""

    def __init__(self, name: str, path: Path) -> None:
        super().__init__(f"Macro {name!r} already exists in {path}")
        self.name = name
        self.path = path


class NotFoundError(MacroError):
    """The target macro is absent from every scope that was searched."""

    def __init__(self, message: str, name: str | None = None, reason: str = "absent") -> None:
        super().__init__(message)
        self.name = name
        self.reason = reason


class NoMacrosError(NotFoundError):
    """The registry holds no macros at all."""

    def __init__(self) -> None:
        super().__init__("No named macros are defined", reason="empty")


class AmbiguousNameError(MacroError):
    """A prefix matched more than one macro."""

    def __init__(self, prefix: str, candidates: list[str]) -> None:
        super().__init__(f"Prefix {prefix!r} is ambiguous: {', '.join(candidates)}")
        self.prefix = prefix
        self.candidates = candidates


class AbortedError(MacroError):
    """The operator declined a confirmation or cancelled input."""


class ScopeError(MacroError):
    """Local and global scopes cannot be told apart for this operation."""


class DuplicateRecordError(MacroError):
    """A definition file holds more than one record with the same name."""

    def __init__(self, name: str, path: Path, count: int) -> None:
        super().__init__(
            f"Macro {name!r} is defined {count} times in {path}; fix the file by hand"
        )
        self.name = name
        self.path = path
        self.count = count


class IOFailure(MacroError):
    """Reading or persisting a definition file failed."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"I/O error on {path}: {cause}")
        self.path = path
        self.cause = cause
