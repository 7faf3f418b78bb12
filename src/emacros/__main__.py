"""Entry point: python -m emacros [shell|list|names] [MODE]

- No args / "shell": Interactive macro shell in the current directory
- "list":            Print macros with their bodies for MODE
- "names":           Print macro names for MODE
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from emacros.config import load_config
from emacros.errors import MacroError

_DEFAULT_MODE = "fundamental-mode"


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _build(mode: str):
    config = load_config()
    _setup_logging(config.log_level)

    from emacros.connectors.base import Context
    from emacros.connectors.cli import SHELL_WORDS, ConsolePrompter
    from emacros.core import MacroCommands
    from emacros.session import Session

    prompter = ConsolePrompter()
    app = MacroCommands(config, prompter, reserved_names=SHELL_WORDS)
    context = Context(mode=mode, directory=Path.cwd())
    return app, Session(), context, prompter


def _run_shell(mode: str) -> None:
    """Interactive REPL mode."""
    from emacros.commands import get_commands
    from emacros.connectors.cli import EchoPlayer, MacroShell, TextRecorder

    app, session, context, prompter = _build(mode)
    recorder = TextRecorder()
    commands = get_commands(
        app, session, lambda: context, recorder=recorder, player=EchoPlayer()
    )
    try:
        MacroShell(commands, context, recorder, prompter).run()
    except KeyboardInterrupt:
        pass


def _run_listing(mode: str, names_only: bool) -> None:
    app, session, context, _ = _build(mode)
    context.interactive = False
    try:
        app.load(session, context)
        if names_only:
            print("\n".join(app.list_names(session)))
        else:
            print(app.describe(session))
    except MacroError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def main() -> None:
    cmd = sys.argv[1] if len(sys.argv) > 1 else "shell"
    mode = sys.argv[2] if len(sys.argv) > 2 else _DEFAULT_MODE

    if cmd == "shell":
        _run_shell(mode)
    elif cmd in ("list", "names"):
        _run_listing(mode, names_only=cmd == "names")
    else:
        print("Usage: python -m emacros [shell|list|names] [MODE]")
        print("  shell   Interactive macro shell (default)")
        print("  list    Print macros with their bodies")
        print("  names   Print macro names only")
        sys.exit(1)


if __name__ == "__main__":
    main()
