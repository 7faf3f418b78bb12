"""Named keyboard macros kept in per-mode local and global definition files."""

from emacros.config import MacroConfig, load_config
from emacros.connectors.base import Context
from emacros.core import MacroCommands
from emacros.models import Char, EventSequence, KeyToken, MacroRecord, Scope, TextPayload
from emacros.session import Session

__all__ = [
    "Char",
    "Context",
    "EventSequence",
    "KeyToken",
    "MacroCommands",
    "MacroConfig",
    "MacroRecord",
    "Scope",
    "Session",
    "TextPayload",
    "load_config",
]
