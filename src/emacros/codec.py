"""On-disk record format.

Each record is one Lisp form starting at the beginning of a line::

    (emacros-new-macro 'greet "Hello")
    (emacros-new-macro 'nav [down down return 97 134217825])

Strings hold text payloads. Vectors hold event sequences: integers are
character events, bare symbols are key tokens.
"""

from __future__ import annotations

import re

from emacros.errors import MacroError
from emacros.models import Char, Event, EventSequence, KeyToken, MacroCode, MacroRecord, TextPayload

RECORD_MARKER = "(emacros-new-macro '"
HEADER_PATTERN = re.compile(
    r"^" + re.escape(RECORD_MARKER) + r"([A-Za-z0-9_-]+)[ \t\r\n]", re.MULTILINE
)

PLACEHOLDER = "�"

_STRING_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t"}
_READ_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "e": "\x1b", "a": "\x07", "f": "\f"}
_SYMBOL_PATTERN = re.compile(r"[^\s\[\]()\"';#?\\`,][^\s\[\]()\"';`,\\]*")
_INTEGER_PATTERN = re.compile(r"[-+]?[0-9]+\.?")
_NAMED_CHARS = {0: "C-@", 9: "TAB", 13: "RET", 27: "ESC", 32: "SPC", 127: "DEL"}


class RecordFormatError(MacroError, ValueError):
    """A record block could not be parsed."""


def header_pattern(name: str) -> re.Pattern[str]:
    """Match the header of exactly ``name``; "foo" never matches "foo2"."""
    return re.compile(
        r"^" + re.escape(RECORD_MARKER) + "(" + re.escape(name) + ")" + r"[ \t\r\n]", re.MULTILINE
    )


# ── Writing ──────────────────────────────────────────────────


def quote_string(text: str) -> str:
    """Quote text as a single-line Lisp string literal."""
    out = []
    for ch in text:
        if ch in _STRING_ESCAPES:
            out.append(_STRING_ESCAPES[ch])
        elif ord(ch) < 32 or ord(ch) == 127:
            out.append(f"\\{ord(ch):03o}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def _symbol(token: KeyToken) -> str:
    if not _SYMBOL_PATTERN.fullmatch(token.name) or _INTEGER_PATTERN.fullmatch(token.name):
        raise ValueError(f"Key token {token.name!r} cannot be written as a symbol")
    return token.name


def serialize_code(code: MacroCode) -> str:
    if isinstance(code, TextPayload):
        return quote_string(code.text)
    parts = [str(ev.code) if isinstance(ev, Char) else _symbol(ev) for ev in code.events]
    return "[" + " ".join(parts) + "]"


def serialize_record(record: MacroRecord) -> str:
    """Render one record block, without a trailing newline."""
    return f"{RECORD_MARKER}{record.name} {serialize_code(record.code)})"


# ── Reading ──────────────────────────────────────────────────


class _Reader:
    """Minimal reader for the two datum shapes a record may hold."""

    def __init__(self, text: str, pos: int = 0) -> None:
        self.text = text
        self.pos = pos

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_space(self) -> None:
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if ch.isspace():
                self.pos += 1
            elif ch == ";":
                end = self.text.find("\n", self.pos)
                self.pos = len(self.text) if end < 0 else end + 1
            else:
                break

    def expect(self, ch: str) -> None:
        self.skip_space()
        if self._peek() != ch:
            found = self._peek() or "end of record"
            raise RecordFormatError(f"expected {ch!r} at offset {self.pos}, found {found!r}")
        self.pos += 1

    def read_code(self) -> MacroCode:
        self.skip_space()
        ch = self._peek()
        if ch == '"':
            return TextPayload(self._read_string())
        if ch == "[":
            return EventSequence(tuple(self._read_vector()))
        raise RecordFormatError(f"unsupported macro body at offset {self.pos}: {ch!r}")

    def _read_string(self) -> str:
        self.pos += 1
        out = []
        while True:
            if self.pos >= len(self.text):
                raise RecordFormatError("unterminated string")
            ch = self.text[self.pos]
            self.pos += 1
            if ch == '"':
                return "".join(out)
            if ch != "\\":
                out.append(ch)
                continue
            esc = self._peek()
            if not esc:
                raise RecordFormatError("unterminated string")
            self.pos += 1
            if esc in "01234567":
                digits = esc
                while len(digits) < 3 and self._peek() and self._peek() in "01234567":
                    digits += self._peek()
                    self.pos += 1
                out.append(chr(int(digits, 8)))
            elif esc == "\n":
                continue  # line continuation
            else:
                out.append(_READ_ESCAPES.get(esc, esc))

    def _read_vector(self) -> list[Event]:
        self.pos += 1
        events: list[Event] = []
        while True:
            self.skip_space()
            ch = self._peek()
            if not ch:
                raise RecordFormatError("unterminated vector")
            if ch == "]":
                self.pos += 1
                return events
            start = self.pos
            while self._peek() and not self._peek().isspace() and self._peek() not in "[]()\";":
                self.pos += 1
            token = self.text[start : self.pos]
            if not token:
                raise RecordFormatError(f"unexpected {ch!r} in vector at offset {start}")
            if _INTEGER_PATTERN.fullmatch(token):
                value = int(token.rstrip("."))
                if value < 0:
                    raise RecordFormatError(f"negative character code {value}")
                events.append(Char(value))
            else:
                events.append(KeyToken(token))


def parse_code(text: str) -> MacroCode:
    """Parse a standalone datum such as ``"abc"`` or ``[97 return]``."""
    reader = _Reader(text)
    code = reader.read_code()
    reader.skip_space()
    if reader.pos != len(text):
        raise RecordFormatError(f"trailing text after macro body at offset {reader.pos}")
    return code


def parse_block(block: str) -> MacroRecord:
    """Parse one record block as delimited by the header scan."""
    match = HEADER_PATTERN.match(block)
    if not match:
        raise RecordFormatError("block does not start with a record header")
    reader = _Reader(block, match.end(1))
    code = reader.read_code()
    reader.expect(")")
    return MacroRecord(match.group(1), code)


# ── Display ──────────────────────────────────────────────────


def describe_event(event: Event) -> str:
    if isinstance(event, KeyToken):
        return f"<{event.name}>"
    code = event.code
    if code > 255:
        return PLACEHOLDER
    if code in _NAMED_CHARS:
        return _NAMED_CHARS[code]
    if code < 32:
        return "C-" + chr(code + 96)
    return chr(code)


def render(code: MacroCode) -> str:
    """Human-readable form of a macro body, for listings only."""
    if isinstance(code, TextPayload):
        return quote_string(code.text)
    return " ".join(describe_event(ev) for ev in code.events)
