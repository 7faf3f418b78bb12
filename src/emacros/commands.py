"""Operator-facing macro commands.

Thin wrappers over ``MacroCommands``: they fill in missing arguments by
prompting (offering the last used macro as default) and turn results into
short status messages. They can be bound to keys, menus or a shell.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from emacros.errors import AbortedError, MacroError
from emacros.models import Scope

if TYPE_CHECKING:
    from emacros.connectors.base import Context, Player, Recorder
    from emacros.core import MacroCommands
    from emacros.session import Session


def parse_scope(value: str | Scope | None) -> Scope | None:
    if value is None or isinstance(value, Scope):
        return value
    try:
        return Scope(value.strip().lower())
    except ValueError:
        raise MacroError(f"Unknown scope {value!r}; use local or global") from None


def get_commands(
    app: MacroCommands,
    session: Session,
    current_context: Callable[[], Context],
    *,
    recorder: Recorder | None = None,
    player: Player | None = None,
) -> dict[str, Callable[..., str]]:
    """Return a dict of command_name -> callable for macro operations."""
    prompter = app.prompter

    def _name(prompt: str, given: str | None, default: str | None = None) -> str:
        if given:
            return given
        answer = prompter.ask(prompt, default=default, validator=app.validate)
        if not answer:
            raise AbortedError(f"{prompt}: cancelled")
        return answer

    def _player() -> Player:
        if player is None:
            raise MacroError("No player available to execute macros")
        return player

    def add_last_recorded(name: str | None = None, scope: str | None = None) -> str:
        """Save the most recently recorded macro under a name."""
        code = recorder.last_recorded() if recorder is not None else None
        if code is None:
            raise MacroError("No macro has been recorded yet")
        name = _name("Name for last recorded macro", name)
        path = app.add(session, current_context(), name, code, scope=parse_scope(scope))
        return f"Saved macro {name} to {path}"

    def rename(old: str | None = None, new: str | None = None) -> str:
        """Rename a macro in the local and global files."""
        old = _name("Rename macro", old, session.state.last_used)
        new = _name(f"Rename {old} to", new)
        scopes = app.rename(session, current_context(), old, new)
        where = " and ".join(s.value for s in scopes)
        return f"Renamed macro {old} to {session.state.last_used} in {where} file"

    def move(name: str | None = None, from_scope: str = "local") -> str:
        """Move a macro from one scope to the other."""
        name = _name("Move macro", name, session.state.last_used)
        path = app.move(session, current_context(), name, parse_scope(from_scope))
        return f"Moved macro {name} to {path}"

    def remove(name: str | None = None) -> str:
        """Delete a macro from every file that holds it."""
        name = _name("Remove macro", name, session.state.last_used)
        scopes = app.remove(session, current_context(), name)
        where = " and ".join(s.value for s in scopes)
        return f"Removed macro {name} from {where} file"

    def execute(name: str | None = None) -> str:
        """Run a macro by name."""
        name = _name("Execute macro", name, session.state.last_used)
        app.execute(session, name, _player())
        return f"Executed {name}"

    def auto_execute(prefix: str) -> str:
        """Run the macro a prefix identifies."""
        name = app.auto_execute(session, prefix, _player())
        return f"Executed {name}"

    def load() -> str:
        """Load the macro files for the current mode and directory."""
        report = app.load(session, current_context())
        if not report.files_read:
            return "Macros already loaded"
        return f"Loaded {report.total} macros from {len(report.files_read)} file(s)"

    def list_with_code() -> str:
        """List macros with their bodies."""
        return app.describe(session)

    def list_names() -> str:
        """List macro names only."""
        return "\n".join(app.list_names(session))

    def refresh() -> str:
        """Forget all macros and reload the current mode and directory."""
        report = app.refresh(session, current_context())
        return f"Refreshed: {report.total} macros loaded"

    return {
        "add_last_recorded": add_last_recorded,
        "rename": rename,
        "move": move,
        "remove": remove,
        "execute": execute,
        "auto_execute": auto_execute,
        "load": load,
        "list_with_code": list_with_code,
        "list_names": list_names,
        "refresh": refresh,
    }
