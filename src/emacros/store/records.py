"""Find, insert, rename and delete record blocks inside one definition file.

The file text is the source of truth; every mutating call reads the medium,
edits the text and writes it back before returning. Neighbouring records are
never touched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from emacros.codec import HEADER_PATTERN, RecordFormatError, header_pattern, parse_block, serialize_record
from emacros.errors import ConflictError, DuplicateRecordError
from emacros.models import MacroRecord
from emacros.store.medium import FileMedium, Medium

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordLocation:
    """Offsets of one record block in the file text."""

    name: str
    start: int
    name_start: int
    name_end: int
    end: int


class RecordStore:
    """Record-level access to one definition file."""

    def __init__(self, medium: Medium) -> None:
        self.medium = medium

    @property
    def path(self) -> Path:
        return self.medium.path

    # ── Scanning ─────────────────────────────────────────────

    @staticmethod
    def _block_end(text: str, after: int) -> int:
        nxt = HEADER_PATTERN.search(text, after)
        return nxt.start() if nxt else len(text)

    def _scan(self, text: str) -> list[RecordLocation]:
        return [
            RecordLocation(m.group(1), m.start(), m.start(1), m.end(1), self._block_end(text, m.end(1)))
            for m in HEADER_PATTERN.finditer(text)
        ]

    def _locate(self, text: str, name: str) -> RecordLocation | None:
        hits = [
            RecordLocation(name, m.start(), m.start(1), m.end(1), self._block_end(text, m.end(1)))
            for m in header_pattern(name).finditer(text)
        ]
        if len(hits) > 1:
            raise DuplicateRecordError(name, self.path, len(hits))
        return hits[0] if hits else None

    def find(self, name: str) -> RecordLocation | None:
        """Locate ``name``; raises DuplicateRecordError if it appears more than once."""
        return self._locate(self.medium.read(), name)

    def __contains__(self, name: str) -> bool:
        return self.find(name) is not None

    def block(self, name: str) -> str | None:
        """Raw text of the record block, including its trailing newline if any."""
        text = self.medium.read()
        loc = self._locate(text, name)
        return text[loc.start : loc.end] if loc else None

    def get(self, name: str) -> MacroRecord | None:
        block = self.block(name)
        return parse_block(block) if block is not None else None

    def records(self) -> list[MacroRecord]:
        """Every well-formed record, in file order. Bad blocks are logged and skipped."""
        text = self.medium.read()
        result: list[MacroRecord] = []
        seen: set[str] = set()
        for loc in self._scan(text):
            try:
                record = parse_block(text[loc.start : loc.end])
            except RecordFormatError as e:
                logger.warning("Skipping malformed macro %r in %s: %s", loc.name, self.path, e)
                continue
            if record.name in seen:
                logger.warning("Macro %r is defined more than once in %s", record.name, self.path)
            seen.add(record.name)
            result.append(record)
        return result

    # ── Mutation ─────────────────────────────────────────────

    @staticmethod
    def _with_block(text: str, block: str) -> str:
        if text and not text.endswith("\n"):
            text += "\n"
        if not block.endswith("\n"):
            block += "\n"
        return text + block

    def insert(self, record: MacroRecord, overwrite: bool = False) -> None:
        """Append ``record`` at the end of the file.

        An existing record of the same name is replaced when ``overwrite`` is
        set, otherwise ConflictError is raised and nothing is written.
        """
        text = self.medium.read()
        loc = self._locate(text, record.name)
        if loc is not None:
            if not overwrite:
                raise ConflictError(record.name, self.path)
            text = text[: loc.start] + text[loc.end :]
        self.medium.write(self._with_block(text, serialize_record(record)))

    def append_block(self, block: str) -> None:
        """Append an already-serialized block verbatim."""
        self.medium.write(self._with_block(self.medium.read(), block))

    def delete(self, name: str) -> bool:
        """Remove the record block for ``name``. Returns False if it was absent."""
        text = self.medium.read()
        loc = self._locate(text, name)
        if loc is None:
            return False
        self.medium.write(text[: loc.start] + text[loc.end :])
        return True

    def rename(self, old: str, new: str) -> MacroRecord | None:
        """Rewrite the header of ``old`` in place. Returns the renamed record, or None."""
        text = self.medium.read()
        loc = self._locate(text, old)
        if loc is None:
            return None
        text = text[: loc.name_start] + new + text[loc.name_end :]
        block_end = self._block_end(text, loc.name_start + len(new))
        # Parse first: a malformed block must leave the file as it was
        record = parse_block(text[loc.start : block_end])
        self.medium.write(text)
        return record


def read_definition_file(path: Path) -> list[MacroRecord] | None:
    """All records of a file on disk, or None when the file does not exist."""
    if not path.is_file():
        return None
    return RecordStore(FileMedium(path)).records()
