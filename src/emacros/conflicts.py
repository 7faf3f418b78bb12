"""Overwrite confirmation when a write would clobber an existing record."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from emacros.errors import AbortedError

if TYPE_CHECKING:
    from emacros.connectors.base import Prompter
    from emacros.models import Scope
    from emacros.store.records import RecordStore

logger = logging.getLogger(__name__)


class Resolution(Enum):
    ABSENT = "absent"
    OVERWRITE = "overwrite"
    DECLINED = "declined"


class ConflictResolver:
    """Asks the operator before an existing record is replaced."""

    def __init__(self, prompter: Prompter) -> None:
        self.prompter = prompter

    def resolve(self, store: RecordStore, name: str, scope: Scope | None = None) -> Resolution:
        if store.find(name) is None:
            return Resolution.ABSENT
        where = f"{scope.value} file" if scope is not None else "file"
        question = f"Macro {name} already exists in {where} {store.path}. Overwrite?"
        if self.prompter.confirm(question):
            logger.debug("Overwrite of %s in %s approved", name, store.path)
            return Resolution.OVERWRITE
        return Resolution.DECLINED

    def require(self, store: RecordStore, name: str, scope: Scope | None = None) -> bool:
        """Like resolve(), but a refusal aborts the whole operation.

        Returns True when an existing record may be replaced, False when there
        was nothing to replace.
        """
        resolution = self.resolve(store, name, scope)
        if resolution is Resolution.DECLINED:
            raise AbortedError(f"Kept existing macro {name} in {store.path}")
        return resolution is Resolution.OVERWRITE
