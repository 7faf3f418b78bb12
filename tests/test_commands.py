"""Tests for operator-facing commands and the console shell."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from conftest import FakePrompter, RecordingPlayer
from emacros.__main__ import _build
from emacros.commands import get_commands, parse_scope
from emacros.config import MacroConfig
from emacros.connectors.base import Context, Player, Prompter, Recorder
from emacros.connectors.cli import ConsolePrompter, EchoPlayer, MacroShell, TextRecorder
from emacros.core import MacroCommands
from emacros.errors import AbortedError, MacroError
from emacros.models import Scope, TextPayload
from emacros.paths import PathResolver
from emacros.session import Session
from emacros.validation import validate_name


@pytest.fixture
def recorder() -> TextRecorder:
    return TextRecorder()


@pytest.fixture
def player() -> RecordingPlayer:
    return RecordingPlayer()


@pytest.fixture
def commands(app, session, context, recorder, player) -> dict:
    return get_commands(app, session, lambda: context, recorder=recorder, player=player)


class TestGetCommands:
    def test_exposes_every_command(self, commands: dict):
        assert set(commands) == {
            "add_last_recorded",
            "rename",
            "move",
            "remove",
            "execute",
            "auto_execute",
            "load",
            "list_with_code",
            "list_names",
            "refresh",
        }

    def test_add_without_recording(self, commands: dict):
        with pytest.raises(MacroError, match="recorded"):
            commands["add_last_recorded"]("greet")

    def test_add_prompts_for_name(self, commands, recorder, prompter, session):
        recorder.record("Hello")
        prompter.answers = ["bad name", "greet"]
        message = commands["add_last_recorded"]()
        assert message.startswith("Saved macro greet to ")
        assert session.registry.get("greet") == TextPayload("Hello")
        assert any("illegal characters" in m for m in prompter.messages)

    def test_add_with_scope(self, commands, recorder, app, context):
        recorder.record("Hello")
        commands["add_last_recorded"]("greet", "global")
        assert app.path_for(Scope.GLOBAL, context).exists()

    def test_defaults_to_last_used(self, commands, recorder, prompter, session):
        recorder.record("Hello")
        commands["add_last_recorded"]("greet")
        prompter.answers = ["", "hello_fn"]
        assert commands["rename"]() == "Renamed macro greet to hello_fn in local file"
        prompter.answers = [""]
        assert commands["remove"]() == "Removed macro hello_fn from local file"

    def test_cancelled_name(self, commands, prompter):
        prompter.answers = [None]
        with pytest.raises(AbortedError):
            commands["remove"]()

    def test_move_and_execute(self, commands, recorder, player):
        recorder.record("Hello")
        commands["add_last_recorded"]("greet")
        assert commands["move"]("greet").endswith(".emacros-for-python.el")
        assert commands["execute"]("greet") == "Executed greet"
        assert commands["auto_execute"]("gr") == "Executed greet"
        assert player.played == [TextPayload("Hello"), TextPayload("Hello")]

    def test_listing_and_load(self, commands, recorder, app, context):
        assert commands["load"]() == "Loaded 0 macros from 2 file(s)"
        assert commands["load"]() == "Macros already loaded"
        recorder.record("Hello")
        commands["add_last_recorded"]("greet")
        assert commands["list_names"]() == "greet"
        assert commands["list_with_code"]() == 'greet  "Hello"'
        assert commands["refresh"]() == "Refreshed: 1 macros loaded"

    def test_execute_without_player(self, app, session, context):
        commands = get_commands(app, session, lambda: context)
        with pytest.raises(MacroError, match="No player"):
            commands["execute"]("greet")


class TestParseScope:
    def test_values(self):
        assert parse_scope("Local") is Scope.LOCAL
        assert parse_scope(" global ") is Scope.GLOBAL
        assert parse_scope(None) is None
        assert parse_scope(Scope.GLOBAL) is Scope.GLOBAL

    def test_unknown(self):
        with pytest.raises(MacroError, match="Unknown scope"):
            parse_scope("everywhere")


class TestConsolePrompter:
    def test_protocols(self):
        assert isinstance(ConsolePrompter(), Prompter)
        assert isinstance(FakePrompter(), Prompter)
        assert isinstance(TextRecorder(), Recorder)
        assert isinstance(EchoPlayer(), Player)

    def test_ask_revalidates(self):
        out = io.StringIO()
        prompter = ConsolePrompter(io.StringIO("no good\n\ngreet\n"), out)
        assert prompter.ask("Name", validator=validate_name) == "greet"
        assert "illegal characters" in out.getvalue()
        assert "name is empty" in out.getvalue()

    def test_ask_default_and_eof(self):
        prompter = ConsolePrompter(io.StringIO("\n"), io.StringIO())
        assert prompter.ask("Name", default="greet") == "greet"
        assert prompter.ask("Name") is None

    def test_confirm(self):
        out = io.StringIO()
        prompter = ConsolePrompter(io.StringIO("maybe\nY\nno\n"), out)
        assert prompter.confirm("Overwrite?") is True
        assert prompter.confirm("Overwrite?") is False
        assert prompter.confirm("Overwrite?") is False  # EOF
        assert "Please answer y or n." in out.getvalue()


class TestMacroShell:
    def _run(self, config: MacroConfig, context: Context, script: str) -> str:
        out = io.StringIO()
        prompter = ConsolePrompter(io.StringIO(script), out)
        app = MacroCommands(config, prompter)
        recorder = TextRecorder()
        commands = get_commands(
            app, Session(), lambda: context, recorder=recorder, player=EchoPlayer(out)
        )
        MacroShell(commands, context, recorder, prompter).run()
        return out.getvalue()

    def test_session(self, config, context):
        output = self._run(
            config,
            context,
            "record hello world\nadd greet local\nnames\nrun greet\nremove greet\nnames\nexit\n",
        )
        assert "Saved macro greet" in output
        assert '"hello world"' in output
        assert "Removed macro greet from local file" in output
        assert "Error: No named macros are defined" in output
        assert output.rstrip().endswith("Bye!")

    def test_bad_input(self, config, context):
        output = self._run(config, context, "frobnicate\nauto\nrecord 'unbalanced\n")
        assert "Unknown command: frobnicate" in output
        assert "Wrong arguments for auto" in output
        assert "Parse error" in output

    def test_cd_and_mode(self, config, context, tmp_path: Path):
        output = self._run(config, context, f"mode c-mode\ncd {tmp_path / 'other'}\n")
        assert context.mode == "c-mode"
        assert context.directory == tmp_path / "other"
        assert output.count("Loaded 0 macros") == 3

    def test_format_error_reported(self, config, context):
        local = PathResolver(config).resolve(Scope.LOCAL, context.mode, context.directory)
        local.parent.mkdir(parents=True, exist_ok=True)
        local.write_text("(emacros-new-macro 'm [97 98\n", encoding="utf-8")
        output = self._run(config, context, "rename m n\n")
        assert "Error: unterminated vector" in output
        assert output.rstrip().endswith("Bye!")


class TestEntryPoint:
    def test_shell_words_are_reserved(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        for key in ("EMACROS_GLOBAL_DIR", "EMACROS_SUBDIR", "EMACROS_LOG_LEVEL"):
            monkeypatch.delenv(key, raising=False)

        app, _, context, _ = _build("python-mode")

        assert "bound to a command" in app.validate("run").reason
        assert not app.validate("record").ok
        assert app.validate("greet").ok
        assert context.directory == tmp_path
