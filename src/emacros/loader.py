"""Loading definition files into a session, at most once per file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

from emacros.models import MacroRecord, Scope
from emacros.paths import absolute_path, mode_namespace
from emacros.store.records import read_definition_file

if TYPE_CHECKING:
    from emacros.connectors.base import Context
    from emacros.paths import PathResolver
    from emacros.session import Session

logger = logging.getLogger(__name__)

DefinitionReader = Callable[[Path], Optional[list[MacroRecord]]]


@dataclass
class LoadReport:
    """What a single Load call actually read."""

    files_read: list[Path] = field(default_factory=list)
    bound: dict[Scope, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.bound.values())


class MacroLoader:
    """Binds records from the global and local files of a mode."""

    def __init__(self, resolver: PathResolver, reader: DefinitionReader = read_definition_file) -> None:
        self.resolver = resolver
        self._reader = reader

    def _namespace(self, mode: str) -> str:
        cfg = self.resolver.config
        return mode_namespace(mode, cfg.mode_suffix, cfg.namespace_separator)

    def _bind_file(self, session: Session, path: Path, scope: Scope, report: LoadReport) -> None:
        records = self._reader(path)
        report.files_read.append(path)
        if records is None:
            logger.debug("No %s macro file at %s", scope.value, path)
            return
        for record in records:
            session.registry.bind(record.name, record.code)
        report.bound[scope] = len(records)
        logger.info("Loaded %d %s macros from %s", len(records), scope.value, path)

    def load(self, session: Session, context: Context) -> LoadReport:
        """Read the global then the local file for the context, unless already read.

        A missing file is remembered too, so it is not probed again.
        """
        mode = self._namespace(context.mode)
        directory = absolute_path(context.directory)
        report = LoadReport()

        if session.cache.global_loaded(mode):
            logger.debug("Global macros for %s already loaded", mode)
        else:
            path = self.resolver.resolve(Scope.GLOBAL, context.mode, directory)
            self._bind_file(session, path, Scope.GLOBAL, report)
            session.cache.mark_global(mode)

        if session.cache.local_loaded(mode, directory):
            logger.debug("Local macros for %s in %s already loaded", mode, directory)
        else:
            # In the global root the local file is the global one, read above
            if not self.resolver.is_global_root(directory):
                path = self.resolver.resolve(Scope.LOCAL, context.mode, directory)
                self._bind_file(session, path, Scope.LOCAL, report)
            session.cache.mark_local(mode, directory)

        return report

    def refresh(self, session: Session, context: Context) -> LoadReport:
        """Forget everything this session knows, then load the context afresh."""
        dropped = session.registry.clear()
        session.cache.clear()
        session.state.reset()
        logger.info("Refreshing macros: unbound %d", len(dropped))
        return self.load(session, context)
