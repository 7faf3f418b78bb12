"""Macro record types and the code payload variants."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Scope(str, Enum):
    """Which definition file a macro lives in."""

    LOCAL = "local"
    GLOBAL = "global"

    @property
    def other(self) -> Scope:
        return Scope.GLOBAL if self is Scope.LOCAL else Scope.LOCAL


@dataclass(frozen=True)
class Char:
    """A literal character event. Values above 255 carry modifier bits."""

    code: int

    def __post_init__(self) -> None:
        if self.code < 0:
            raise ValueError(f"Char code must be non-negative, got {self.code}")


@dataclass(frozen=True)
class KeyToken:
    """A symbolic key event such as ``return`` or ``f1``."""

    name: str


Event = Union[Char, KeyToken]


@dataclass(frozen=True)
class TextPayload:
    """Macro body stored as a plain string."""

    text: str


@dataclass(frozen=True)
class EventSequence:
    """Macro body stored as an ordered list of key events."""

    events: tuple[Event, ...]

    @classmethod
    def of(cls, *items: int | str) -> EventSequence:
        """Build a sequence from ints (chars) and strings (key names)."""
        return cls(tuple(Char(i) if isinstance(i, int) else KeyToken(i) for i in items))


MacroCode = Union[TextPayload, EventSequence]


@dataclass(frozen=True)
class MacroRecord:
    """A named macro as persisted in a definition file."""

    name: str
    code: MacroCode
