"""Console collaborators and the interactive macro shell."""

from __future__ import annotations

import inspect
import logging
import shlex
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from emacros.codec import render
from emacros.errors import MacroError
from emacros.models import TextPayload

if TYPE_CHECKING:
    from emacros.connectors.base import Context, NameValidator
    from emacros.models import MacroCode

logger = logging.getLogger(__name__)

_YES = ("y", "yes")
_NO = ("n", "no")


class ConsolePrompter:
    """Prompter reading from stdin and writing to stdout."""

    def __init__(self, stdin=None, stdout=None) -> None:
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout

    def read_line(self, prompt: str) -> str | None:
        self._stdout.write(prompt)
        self._stdout.flush()
        raw = self._stdin.readline()
        if not raw:
            return None
        return raw.rstrip("\n")

    def ask(
        self,
        prompt: str,
        *,
        default: str | None = None,
        validator: NameValidator | None = None,
    ) -> str | None:
        shown = f"{prompt} (default {default}): " if default else f"{prompt}: "
        while True:
            line = self.read_line(shown)
            if line is None:
                return None
            text = line.strip() or (default or "")
            if validator is None:
                return text
            result = validator(text)
            if result.ok:
                return text
            self.notify(result.reason)

    def confirm(self, prompt: str) -> bool:
        while True:
            line = self.read_line(f"{prompt} (y or n) ")
            if line is None:
                return False
            answer = line.strip().lower()
            if answer in _YES:
                return True
            if answer in _NO:
                return False
            self.notify("Please answer y or n.")

    def notify(self, message: str) -> None:
        print(message, file=self._stdout)


class TextRecorder:
    """Holds the most recent text captured with the shell's ``record`` command."""

    def __init__(self) -> None:
        self._last: MacroCode | None = None

    def record(self, text: str) -> None:
        self._last = TextPayload(text)

    def last_recorded(self) -> MacroCode | None:
        return self._last


class EchoPlayer:
    """Player that prints what would be replayed."""

    def __init__(self, stdout=None) -> None:
        self._stdout = stdout or sys.stdout

    def play(self, code: MacroCode) -> None:
        logger.debug("Playing %s", type(code).__name__)
        print(render(code), file=self._stdout)


_SHELL_COMMANDS = {
    "add": "add_last_recorded",
    "rename": "rename",
    "move": "move",
    "remove": "remove",
    "run": "execute",
    "auto": "auto_execute",
    "load": "load",
    "list": "list_with_code",
    "names": "list_names",
    "refresh": "refresh",
}

# Words the shell reads itself; a macro of the same name could never be typed
SHELL_WORDS = frozenset(_SHELL_COMMANDS) | {"help", "record", "mode", "cd", "exit", "quit"}

_HELP = """\
record TEXT...        capture TEXT as the last recorded macro
add [NAME] [SCOPE]    save the last recording (scope: local or global)
rename [OLD] [NEW]    rename a macro
move [NAME] [FROM]    move a macro out of FROM (default local)
remove [NAME]         delete a macro
run [NAME]            execute a macro
auto PREFIX           execute the macro PREFIX identifies
load | refresh        load macro files / reload from scratch
list | names          list macros with bodies / names only
mode MODE | cd DIR    change the current mode or directory
exit                  leave the shell"""


class MacroShell:
    """Line-oriented REPL over the macro commands."""

    def __init__(self, commands: dict, context: Context, recorder: TextRecorder, prompter: ConsolePrompter) -> None:
        self._commands = commands
        self._context = context
        self._recorder = recorder
        self._prompter = prompter

    def run(self) -> None:
        self._prompter.notify("Macro shell (type 'help', 'exit' or Ctrl+D to quit)")
        self._prompter.notify("-" * 48)
        self._dispatch(["load"])
        while True:
            line = self._prompter.read_line(f"\n[{self._context.mode}] ")
            if line is None or line.strip().lower() in ("exit", "quit"):
                self._prompter.notify("Bye!")
                break
            try:
                words = shlex.split(line)
            except ValueError as e:
                self._prompter.notify(f"Parse error: {e}")
                continue
            if words:
                self._dispatch(words)

    def _dispatch(self, words: list[str]) -> None:
        head, args = words[0].lower(), words[1:]
        if head == "help":
            self._prompter.notify(_HELP)
        elif head == "record":
            self._recorder.record(" ".join(args))
            self._prompter.notify("Recorded.")
        elif head == "mode" and len(args) == 1:
            self._context.mode = args[0]
            self._dispatch(["load"])
        elif head == "cd" and len(args) == 1:
            self._context.directory = Path(args[0]).expanduser().absolute()
            self._dispatch(["load"])
        elif head in _SHELL_COMMANDS:
            command = self._commands[_SHELL_COMMANDS[head]]
            try:
                inspect.signature(command).bind(*args)
            except TypeError:
                self._prompter.notify(f"Wrong arguments for {head}; see 'help'")
                return
            try:
                self._prompter.notify(command(*args))
            except MacroError as e:
                self._prompter.notify(f"Error: {e}")
        else:
            self._prompter.notify(f"Unknown command: {head}")
