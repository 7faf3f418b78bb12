"""Definition file storage.

Layout (no subdirectory configured):
    <directory>/.emacros-for-<mode>.el     # local macros for one mode
    <global_dir>/.emacros-for-<mode>.el    # global macros for one mode

With a subdirectory (default ``emacros``):
    <directory>/emacros/for-<mode>.el
    <global_dir>/emacros/for-<mode>.el
"""

from emacros.store.medium import Buffer, BufferMedium, FileMedium, Workspace, open_medium
from emacros.store.records import RecordLocation, RecordStore, read_definition_file

__all__ = [
    "Buffer",
    "BufferMedium",
    "FileMedium",
    "RecordLocation",
    "RecordStore",
    "Workspace",
    "open_medium",
    "read_definition_file",
]
