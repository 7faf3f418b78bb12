"""Protocols for the host-side collaborators and shared types."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Protocol, runtime_checkable

if TYPE_CHECKING:
    from emacros.models import MacroCode
    from emacros.validation import ValidationResult


@dataclass
class Context:
    """What the host is editing when a command runs."""

    mode: str
    directory: Path
    interactive: bool = True


# Called by a prompter on each input increment (partial=True) and on submit.
NameValidator = Callable[..., "ValidationResult"]


@runtime_checkable
class Prompter(Protocol):
    """Turns operator input into validated strings and yes/no answers."""

    def ask(
        self,
        prompt: str,
        *,
        default: str | None = None,
        validator: NameValidator | None = None,
    ) -> str | None:
        """Read a line. Returns None when the operator cancels."""
        ...

    def confirm(self, prompt: str) -> bool:
        """Ask a yes/no question."""
        ...

    def notify(self, message: str) -> None:
        """Show a message without waiting for input."""
        ...


@runtime_checkable
class Recorder(Protocol):
    """Captures keystrokes into a macro body."""

    def last_recorded(self) -> MacroCode | None: ...


@runtime_checkable
class Player(Protocol):
    """Replays a macro body against whatever is being edited."""

    def play(self, code: MacroCode) -> None: ...
