"""Generic, language-agnostic comment stripping.

One scanner serves every language: it understands ``//`` line comments,
``/* */`` block comments, and enough of string (``"..."``), char (``'...'``)
and raw string (`` `...` ``) literals to leave comment-like sequences inside
them alone. Languages with other comment syntaxes (``#`` for example) keep
their comments.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterator, Optional

TEXT = "text"
COMMENT = "comment"
STRING = "string"
CHAR = "char"
RAW_STRING = "raw_string"

ErrorHandler = Callable[[int, str], None]

_SLASH = ord("/")
_STAR = ord("*")
_NEWLINE = ord("\n")
_BACKSLASH = ord("\\")

_LITERAL_KINDS: Dict[int, str] = {
    ord('"'): STRING,
    ord("'"): CHAR,
    ord("`"): RAW_STRING,
}


@dataclass(frozen=True)
class Token:
    """A span of the scanned input."""

    kind: str
    start: int
    end: int


class Scanner:
    """Splits source bytes into comment, literal and plain text spans.

    Malformed input (unterminated literals or comments) is reported through
    ``on_error`` with the offending offset; scanning always continues.
    """

    def __init__(self, data: bytes, on_error: Optional[ErrorHandler] = None) -> None:
        self._data = data
        self._on_error = on_error
        self.error_count = 0

    def tokens(self) -> Iterator[Token]:
        data = self._data
        size = len(data)
        pos = 0
        text_start = 0
        while pos < size:
            ch = data[pos]
            if ch == _SLASH and pos + 1 < size and data[pos + 1] in (_SLASH, _STAR):
                kind = COMMENT
                end = self._scan_comment(pos)
            elif ch in _LITERAL_KINDS:
                kind = _LITERAL_KINDS[ch]
                end = self._scan_literal(pos)
            else:
                pos += 1
                continue

            if text_start < pos:
                yield Token(TEXT, text_start, pos)
            yield Token(kind, pos, end)
            pos = text_start = end

        if text_start < size:
            yield Token(TEXT, text_start, size)

    def _scan_comment(self, start: int) -> int:
        data = self._data
        if data[start + 1] == _SLASH:
            # The terminating newline is not part of the comment.
            end = data.find(b"\n", start + 2)
            return len(data) if end == -1 else end

        end = data.find(b"*/", start + 2)
        if end == -1:
            self._error(start, "comment not terminated")
            return len(data)
        return end + 2

    def _scan_literal(self, start: int) -> int:
        data = self._data
        size = len(data)
        quote = data[start]
        if _LITERAL_KINDS[quote] == RAW_STRING:
            end = data.find(data[start : start + 1], start + 1)
            if end == -1:
                self._error(start, "literal not terminated")
                return size
            return end + 1

        pos = start + 1
        while pos < size:
            ch = data[pos]
            if ch == quote:
                return pos + 1
            if ch == _NEWLINE:
                break
            if ch == _BACKSLASH:
                # An escaped newline still ends the literal.
                if pos + 1 < size and data[pos + 1] == _NEWLINE:
                    pos += 1
                    break
                pos += 2
                continue
            pos += 1
        self._error(start, "literal not terminated")
        return min(pos, size)

    def _error(self, offset: int, message: str) -> None:
        self.error_count += 1
        if self._on_error is not None:
            self._on_error(offset, message)


def strip_comments(data: bytes, on_error: Optional[ErrorHandler] = None) -> bytes:
    """Return ``data`` with every comment token removed."""
    scanner = Scanner(data, on_error)
    return b"".join(
        data[token.start : token.end] for token in scanner.tokens() if token.kind != COMMENT
    )


__all__ = ["Scanner", "Token", "strip_comments"]
