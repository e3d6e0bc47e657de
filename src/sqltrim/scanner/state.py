"""Lexical state carried by the scanner between chunks."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class LexMode(str, Enum):
    """Lexical mode of the scanner."""

    NORMAL = "normal"
    SINGLE_QUOTE = "single_quote"
    DOUBLE_QUOTE = "double_quote"
    BACKTICK = "backtick"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"

    @property
    def is_quote(self) -> bool:
        return self in _DELIMITERS

    @property
    def delimiter(self) -> int:
        """Closing byte of a quote mode."""
        return _DELIMITERS[self]

    @property
    def construct(self) -> str:
        """Name used in diagnostics."""
        return _CONSTRUCTS[self]


_DELIMITERS: dict[LexMode, int] = {
    LexMode.SINGLE_QUOTE: ord("'"),
    LexMode.DOUBLE_QUOTE: ord('"'),
    LexMode.BACKTICK: ord("`"),
}

_CONSTRUCTS: dict[LexMode, str] = {
    LexMode.NORMAL: "statement",
    LexMode.SINGLE_QUOTE: "single-quoted string",
    LexMode.DOUBLE_QUOTE: "double-quoted string",
    LexMode.BACKTICK: "backtick-quoted identifier",
    LexMode.LINE_COMMENT: "line comment",
    LexMode.BLOCK_COMMENT: "block comment",
}

# Opening byte -> mode entered from NORMAL
QUOTE_OPENERS: dict[int, LexMode] = {byte: mode for mode, byte in _DELIMITERS.items()}


@dataclass(slots=True)
class ScanState:
    """Scanner context that must survive a chunk boundary.

    Attributes:
        mode: Current lexical mode
        escape_pending: A backslash inside a quote was the last byte seen,
            so the next byte is taken literally
        construct_start: Absolute offset where the current quote or comment
            began, -1 in NORMAL mode
    """

    mode: LexMode = LexMode.NORMAL
    escape_pending: bool = False
    construct_start: int = -1

    def enter(self, mode: LexMode, offset: int) -> None:
        self.mode = mode
        self.construct_start = offset

    def leave(self) -> None:
        self.mode = LexMode.NORMAL
        self.construct_start = -1

    def snapshot(self) -> ScanState:
        """Return an independent copy, e.g. to checkpoint a scan."""
        return replace(self)

    @property
    def is_open(self) -> bool:
        """True when end of input here would leave a construct unterminated."""
        return self.mode.is_quote or self.mode is LexMode.BLOCK_COMMENT
