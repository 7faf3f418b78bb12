"""Macro command orchestrator.

Responsibilities:
1. Add: save a macro body under a name in the local or global file
2. Rename: rewrite a macro's name in place in whichever files hold it
3. Move: transfer a macro between the local and global file
4. Remove: delete a macro from every file that holds it
5. Load / Refresh: bind the files of the current context into the session

Each transaction checks everything that needs the operator's answer before
its first write; once writing starts it runs to completion.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from emacros.codec import parse_block, render
from emacros.conflicts import ConflictResolver, Resolution
from emacros.errors import AbortedError, AmbiguousNameError, NoMacrosError, NotFoundError, ValidationError
from emacros.loader import DefinitionReader, LoadReport, MacroLoader
from emacros.models import MacroCode, MacroRecord, Scope
from emacros.paths import PathResolver, absolute_path
from emacros.scope import ScopeCoordinator
from emacros.store.medium import open_medium
from emacros.store.records import RecordStore, read_definition_file
from emacros.validation import ValidationResult, validate_name

if TYPE_CHECKING:
    from emacros.config import MacroConfig
    from emacros.connectors.base import Context, Player, Prompter
    from emacros.session import Session
    from emacros.store.medium import Workspace

logger = logging.getLogger(__name__)


class MacroCommands:
    """Runs macro transactions against the definition files and a session."""

    def __init__(
        self,
        config: MacroConfig,
        prompter: Prompter,
        *,
        workspace: Workspace | None = None,
        reserved_names: Collection[str] = (),
        reader: DefinitionReader = read_definition_file,
    ) -> None:
        self.config = config
        self.prompter = prompter
        self.workspace = workspace
        self.reserved_names = frozenset(reserved_names)
        self.resolver = PathResolver(config)
        self.scopes = ScopeCoordinator(self.resolver, prompter)
        self.conflicts = ConflictResolver(prompter)
        self.loader = MacroLoader(self.resolver, reader)

    # ── Names & paths ────────────────────────────────────────

    def validate(self, candidate: str, partial: bool = False) -> ValidationResult:
        return validate_name(candidate, self.reserved_names, partial=partial)

    def _check_name(self, name: str) -> None:
        result = self.validate(name)
        if not result:
            raise ValidationError(name, result.reason)

    def path_for(self, scope: Scope, context: Context) -> Path:
        return self.resolver.resolve(scope, context.mode, context.directory)

    def _scopes(self, context: Context) -> tuple[Scope, ...]:
        # In the global root both scopes name the same file
        if self.resolver.is_global_root(context.directory):
            return (Scope.GLOBAL,)
        return (Scope.LOCAL, Scope.GLOBAL)

    # ── Media ────────────────────────────────────────────────

    @contextmanager
    def _store(self, path: Path) -> Iterator[RecordStore]:
        with open_medium(path, self.workspace) as medium:
            yield RecordStore(medium)

    def _guard_unsaved(self, store: RecordStore) -> None:
        """Writing saves the whole buffer, so unsaved edits need the operator's consent."""
        if not store.medium.has_unsaved_edits:
            return
        if not self.prompter.confirm(f"{store.path} has unsaved edits. Save them and continue?"):
            raise AbortedError(f"Left {store.path} untouched")

    # ── Add ──────────────────────────────────────────────────

    def add(
        self,
        session: Session,
        context: Context,
        name: str,
        code: MacroCode,
        scope: Scope | None = None,
        path: Path | None = None,
    ) -> Path:
        """Save ``code`` as ``name``. Returns the file written.

        ``path`` picks an arbitrary file instead of the local/global one; such
        a save does not change the session's default scope.
        """
        self._check_name(name)
        if path is not None:
            target = absolute_path(path)
            used = self.resolver.scope_of(target, context.mode, context.directory)
        else:
            used = self.scopes.scope_for_add(session.state, context, scope)
            target = self.path_for(used, context)

        with self._store(target) as store:
            self._guard_unsaved(store)
            overwrite = self.conflicts.require(store, name, used)
            store.insert(MacroRecord(name, code), overwrite=overwrite)

        session.registry.bind(name, code)
        session.state.touch(name)
        if path is None:
            session.state.default_scope = used
        logger.info("Saved macro %s to %s", name, target)
        return target

    # ── Rename ───────────────────────────────────────────────

    def rename(self, session: Session, context: Context, old: str, new: str) -> list[Scope]:
        """Rename ``old`` to ``new`` in the local file, then the global file.

        Returns the scopes where the rename happened.
        """
        while new == old:
            answer = self.prompter.ask(
                f"{new} is the current name; enter a different one", validator=self.validate
            )
            if answer is None:
                raise AbortedError("Rename cancelled")
            new = answer
        self._check_name(new)

        planned: list[Scope] = []
        skipped: list[Scope] = []
        code: MacroCode | None = None
        scopes = self._scopes(context)
        for scope in scopes:
            with self._store(self.path_for(scope, context)) as store:
                record = store.get(old)
                if record is None:
                    continue
                self._guard_unsaved(store)
                if self.conflicts.resolve(store, new, scope) is Resolution.DECLINED:
                    skipped.append(scope)
                    continue
            planned.append(scope)
            if code is None:
                code = record.code

        if not planned:
            raise self._rename_miss(old, new, scopes, skipped)

        for scope in planned:
            path = self.path_for(scope, context)
            with self._store(path) as store:
                store.delete(new)
                store.rename(old, new)
            logger.info("Renamed macro %s to %s in %s", old, new, path)

        session.registry.rebind(old, new, code)
        session.state.touch(new)
        return planned

    @staticmethod
    def _rename_miss(old: str, new: str, scopes: tuple[Scope, ...], skipped: list[Scope]) -> NotFoundError:
        absent = [s for s in scopes if s not in skipped]
        if not absent:
            where = " and ".join(s.value for s in skipped)
            return NotFoundError(
                f"Macro {old} not renamed: kept existing {new} in {where} file", old, "skipped"
            )
        if skipped:
            return NotFoundError(
                f"Macro {old} not renamed: kept existing {new} in {skipped[0].value} file, "
                f"and {old} is not in the {absent[0].value} file",
                old,
                "skipped_and_absent",
            )
        where = " or ".join(s.value for s in scopes)
        return NotFoundError(f"Macro {old} not found in {where} file", old, "absent")

    # ── Move ─────────────────────────────────────────────────

    def move(self, session: Session, context: Context, name: str, from_scope: Scope) -> Path:
        """Move ``name`` out of ``from_scope`` into the other scope. Returns the target file."""
        source_scope, target_scope = self.scopes.move_scopes(context, from_scope)
        source_path = self.path_for(source_scope, context)
        target_path = self.path_for(target_scope, context)

        with self._store(source_path) as source, self._store(target_path) as target:
            block = source.block(name)
            if block is None:
                raise NotFoundError(
                    f"Macro {name} not found in {source_scope.value} file {source_path}", name
                )
            record = parse_block(block)
            self._guard_unsaved(source)
            self._guard_unsaved(target)
            if self.conflicts.require(target, name, target_scope):
                target.delete(name)
            # Target first: a failure in between leaves two copies, never none
            target.append_block(block)
            source.delete(name)

        session.registry.bind(name, record.code)
        session.state.default_scope = target_scope
        session.state.touch(name)
        logger.info("Moved macro %s from %s to %s", name, source_path, target_path)
        return target_path

    # ── Remove ───────────────────────────────────────────────

    def remove(self, session: Session, context: Context, name: str) -> list[Scope]:
        """Delete ``name`` from the local and global files. Returns where it was found."""
        removed: list[Scope] = []
        for scope in self._scopes(context):
            with self._store(self.path_for(scope, context)) as store:
                if store.find(name) is None:
                    continue
                self._guard_unsaved(store)
            removed.append(scope)

        if not removed:
            raise NotFoundError(f"Macro {name} not found in local or global file", name)

        for scope in removed:
            path = self.path_for(scope, context)
            with self._store(path) as store:
                store.delete(name)
            logger.info("Removed macro %s from %s", name, path)

        session.registry.unbind(name)
        session.state.forget(name)
        return removed

    # ── Load / Refresh ───────────────────────────────────────

    def load(self, session: Session, context: Context) -> LoadReport:
        return self.loader.load(session, context)

    def refresh(self, session: Session, context: Context) -> LoadReport:
        return self.loader.refresh(session, context)

    # ── Listing & execution ──────────────────────────────────

    def list_macros(self, session: Session) -> list[MacroRecord]:
        records = session.registry.snapshot()
        if not records:
            raise NoMacrosError()
        return records

    def list_names(self, session: Session) -> list[str]:
        return [record.name for record in self.list_macros(session)]

    def describe(self, session: Session) -> str:
        """Listing with each macro's body rendered for display."""
        records = self.list_macros(session)
        width = max(len(r.name) for r in records)
        return "\n".join(f"{r.name.ljust(width)}  {render(r.code)}" for r in records)

    def execute(self, session: Session, name: str, player: Player) -> MacroCode:
        code = session.registry.get(name)
        if code is None:
            raise NotFoundError(f"No macro named {name}", name)
        player.play(code)
        session.state.last_used = name
        return code

    def auto_execute(self, session: Session, prefix: str, player: Player) -> str:
        """Execute the one macro ``prefix`` identifies. Returns its name."""
        candidates = session.registry.complete(prefix)
        if prefix in candidates:
            candidates = [prefix]
        if not candidates:
            raise NotFoundError(f"No macro starts with {prefix}", prefix)
        if len(candidates) > 1:
            raise AmbiguousNameError(prefix, candidates)
        self.execute(session, candidates[0], player)
        return candidates[0]
