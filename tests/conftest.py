"""Shared fixtures: a scripted prompter and a throwaway config/context."""

from __future__ import annotations

from pathlib import Path

import pytest

from emacros.config import MacroConfig
from emacros.connectors.base import Context
from emacros.core import MacroCommands
from emacros.session import Session


class FakePrompter:
    """Answers prompts from queues; records everything it was asked."""

    def __init__(self, answers=None, confirms=None):
        self.answers = list(answers or [])
        self.confirms = list(confirms or [])
        self.questions: list[str] = []
        self.messages: list[str] = []

    def ask(self, prompt, *, default=None, validator=None):
        self.questions.append(prompt)
        while self.answers:
            answer = self.answers.pop(0)
            if answer is None:
                return None
            text = answer.strip() or (default or "")
            if validator is None:
                return text
            result = validator(text)
            if result.ok:
                return text
            self.messages.append(result.reason)
        return None

    def confirm(self, prompt):
        self.questions.append(prompt)
        return self.confirms.pop(0) if self.confirms else False

    def notify(self, message):
        self.messages.append(message)


class RecordingPlayer:
    def __init__(self):
        self.played = []

    def play(self, code):
        self.played.append(code)


@pytest.fixture
def prompter() -> FakePrompter:
    return FakePrompter()


@pytest.fixture
def config(tmp_path: Path) -> MacroConfig:
    return MacroConfig(global_dir=tmp_path / "home", subdir=None)


@pytest.fixture
def context(tmp_path: Path) -> Context:
    return Context(mode="python-mode", directory=tmp_path / "proj", interactive=False)


@pytest.fixture
def session() -> Session:
    return Session()


@pytest.fixture
def app(config: MacroConfig, prompter: FakePrompter) -> MacroCommands:
    return MacroCommands(config, prompter)
