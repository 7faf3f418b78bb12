"""Choosing local or global scope for an operation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from emacros.errors import AbortedError, ScopeError
from emacros.models import Scope

if TYPE_CHECKING:
    from emacros.connectors.base import Context, Prompter
    from emacros.paths import PathResolver
    from emacros.session import SessionState

logger = logging.getLogger(__name__)

_ANSWERS = {
    "l": Scope.LOCAL,
    "local": Scope.LOCAL,
    "g": Scope.GLOBAL,
    "global": Scope.GLOBAL,
}


class ScopeCoordinator:
    """Decides which definition file an operation targets."""

    def __init__(self, resolver: PathResolver, prompter: Prompter) -> None:
        self.resolver = resolver
        self.prompter = prompter

    def scope_for_add(
        self,
        state: SessionState,
        context: Context,
        explicit: Scope | None = None,
    ) -> Scope:
        """Scope for a new definition.

        In the global root itself there is no separate local file, so global
        is forced. Otherwise an explicit scope wins, then an interactive
        choice, then the session default.
        """
        if self.resolver.is_global_root(context.directory):
            if explicit is Scope.LOCAL or explicit is None:
                self.prompter.notify("Current directory is the global root; saving globally.")
            return Scope.GLOBAL
        if explicit is not None:
            return explicit
        if not context.interactive:
            return state.default_scope
        return self._ask_scope(state.default_scope)

    def _ask_scope(self, default: Scope) -> Scope:
        prompt = f"Save locally or globally? [l]ocal, [g]lobal, RET for {default.value}"
        while True:
            answer = self.prompter.ask(prompt)
            if answer is None:
                raise AbortedError("Scope selection cancelled")
            answer = answer.strip().lower()
            if not answer:
                return default
            if answer in _ANSWERS:
                return _ANSWERS[answer]
            self.prompter.notify(f"Not a scope: {answer!r}")

    def move_scopes(self, context: Context, from_scope: Scope) -> tuple[Scope, Scope]:
        """Source and target scope for a move; refuses when both are one directory."""
        if self.resolver.is_global_root(context.directory):
            raise ScopeError(
                "Local and global macro directories are the same; nothing to move between"
            )
        return from_scope, from_scope.other
