"""Backing media for definition files: open buffers or the raw filesystem.

A buffer is preferred whenever the host has the file open, so unsaved edits
in it are kept rather than overwritten from disk.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Protocol

from emacros.errors import IOFailure

logger = logging.getLogger(__name__)


def _write_plain(path: Path, text: str) -> None:
    """Write text as-is: no backup copy, no reformatting."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise IOFailure(path, e) from e
    logger.debug("Wrote %s (%d chars)", path, len(text))


class Buffer:
    """An open, editable copy of a file with its own unsaved-edits flag."""

    def __init__(self, path: Path, text: str = "", modified: bool = False) -> None:
        self.path = path
        self.text = text
        self.modified = modified

    def edit(self, text: str) -> None:
        self.text = text
        self.modified = True

    def save(self) -> None:
        _write_plain(self.path, self.text)
        self.modified = False


class Workspace:
    """The host's open buffers, keyed by absolute path."""

    def __init__(self) -> None:
        self._buffers: dict[Path, Buffer] = {}

    def open(self, path: Path) -> Buffer:
        path = path.absolute()
        buf = self._buffers.get(path)
        if buf is None:
            try:
                text = path.read_text(encoding="utf-8") if path.exists() else ""
            except OSError as e:
                raise IOFailure(path, e) from e
            buf = Buffer(path, text)
            self._buffers[path] = buf
        return buf

    def find(self, path: Path) -> Buffer | None:
        return self._buffers.get(path.absolute())

    def close(self, path: Path) -> None:
        self._buffers.pop(path.absolute(), None)

    def __len__(self) -> int:
        return len(self._buffers)


class Medium(Protocol):
    """Where a RecordStore reads and writes the text of one definition file."""

    @property
    def path(self) -> Path: ...

    @property
    def has_unsaved_edits(self) -> bool: ...

    def read(self) -> str: ...

    def write(self, text: str) -> None:
        """Replace the content and persist it before returning."""
        ...


class BufferMedium:
    """Medium backed by an open buffer; writes go through the buffer."""

    def __init__(self, buffer: Buffer) -> None:
        self.buffer = buffer

    @property
    def path(self) -> Path:
        return self.buffer.path

    @property
    def has_unsaved_edits(self) -> bool:
        return self.buffer.modified

    def read(self) -> str:
        return self.buffer.text

    def write(self, text: str) -> None:
        self.buffer.text = text
        self.buffer.save()


class FileMedium:
    """Medium reading and writing the file directly. A missing file reads as empty."""

    has_unsaved_edits = False

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> str:
        if not self._path.exists():
            return ""
        try:
            return self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise IOFailure(self._path, e) from e

    def write(self, text: str) -> None:
        _write_plain(self._path, text)


@contextmanager
def open_medium(path: Path, workspace: Workspace | None = None) -> Iterator[BufferMedium | FileMedium]:
    """Yield the medium for ``path``: its open buffer if any, else a transient file medium."""
    buf = workspace.find(path) if workspace is not None else None
    if buf is not None:
        yield BufferMedium(buf)
    else:
        # Holds no handle between calls; nothing to close afterwards.
        yield FileMedium(path)
