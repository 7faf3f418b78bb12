"""Macro name validation, usable per keystroke or on submission."""

from __future__ import annotations

import re
from collections.abc import Collection
from dataclasses import dataclass

NAME_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
# Anything the Lisp reader would read back as an integer, e.g. "12", "-3", "+7", "5."
_INTEGER_PATTERN = re.compile(r"[-+]?[0-9]+\.?")


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    reason: str = ""

    def __bool__(self) -> bool:
        return self.ok


_OK = ValidationResult(True)


def validate_name(
    candidate: str,
    reserved: Collection[str] = (),
    partial: bool = False,
) -> ValidationResult:
    """Check a macro name.

    With ``partial=True`` only the character set is checked, so a prompt can
    reject a bad keystroke without complaining about an unfinished name.
    """
    if candidate and not NAME_PATTERN.fullmatch(candidate):
        bad = sorted({c for c in candidate if not NAME_PATTERN.fullmatch(c)})
        return ValidationResult(False, f"illegal characters: {''.join(bad)!r}")
    if partial:
        return _OK
    if not candidate:
        return ValidationResult(False, "name is empty")
    if _INTEGER_PATTERN.fullmatch(candidate):
        return ValidationResult(False, "name must not be an integer")
    if candidate in reserved:
        return ValidationResult(False, "name is already bound to a command")
    return _OK
