"""Streaming statement boundary scanner.

Splits a SQL dump into top-level statements without loading it whole. Input
arrives in chunks of any size; the scanner keeps only the bytes of the
statement it has not finished yet, plus a small ScanState describing where in
the lexical grammar the last chunk ended.

The scan jumps between "interesting" bytes with compiled regex searches and
bytes.find, so the Python-level work is proportional to the number of quotes,
comments and terminators rather than to the size of the dump.

Usage:
    with open("dump.sql", "rb") as fh:
        for span in iter_statements(fh):
            print(span.start, span.size)
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import BinaryIO

from sqltrim.core.errors import MalformedInputError
from sqltrim.scanner.state import QUOTE_OPENERS, LexMode, ScanState

DEFAULT_CHUNK_SIZE = 1024 * 1024

_NORMAL_SPECIAL = re.compile(rb"[;'\"`#/\-]")
_QUOTE_SPECIAL: dict[LexMode, re.Pattern[bytes]] = {
    LexMode.SINGLE_QUOTE: re.compile(rb"[\\']"),
    LexMode.DOUBLE_QUOTE: re.compile(rb'[\\"]'),
    LexMode.BACKTICK: re.compile(rb"[\\`]"),
}

_SEMICOLON = ord(";")
_BACKSLASH = ord("\\")
_HASH = ord("#")
_DASH = ord("-")
_SLASH = ord("/")
_STAR = ord("*")
_NEWLINE = ord("\n")
_WHITESPACE = frozenset(b" \t\r\n\f\v")
_HSPACE = frozenset(b" \t\r\f\v")


@dataclass(frozen=True, slots=True)
class StatementSpan:
    """One top-level statement of the dump.

    Attributes:
        start: Absolute offset of the first byte (leading whitespace and
            comments since the previous statement included)
        end: Absolute offset of the terminating ``;`` (or end of input)
        data: Raw bytes from ``start`` through the terminator, trailing
            horizontal whitespace and one newline
        terminated: False for a final statement that had no ``;``
    """

    start: int
    end: int
    data: bytes
    terminated: bool = True

    @property
    def body(self) -> bytes:
        """Statement text without the terminator."""
        return self.data[: self.end - self.start]

    @property
    def size(self) -> int:
        return len(self.data)


class StatementScanner:
    """Incremental scanner turning byte chunks into StatementSpans.

    Call ``feed`` for each chunk, then ``finish`` once at end of input.
    Results do not depend on how the input is chunked.
    """

    def __init__(self) -> None:
        self.state = ScanState()
        self._buffer = bytearray()
        self._base = 0  # absolute offset of _buffer[0]
        self._pos = 0  # where scanning resumes in _buffer
        self._finished = False

    @property
    def offset(self) -> int:
        """Number of input bytes received so far."""
        return self._base + len(self._buffer)

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet emitted as a span."""
        return len(self._buffer)

    def feed(self, chunk: bytes) -> list[StatementSpan]:
        """Add a chunk and return the statements it completed."""
        if self._finished:
            raise RuntimeError("scanner already finished")
        if not chunk:
            return []
        self._buffer += chunk
        return self._scan(final=False)

    def finish(self) -> list[StatementSpan]:
        """Signal end of input and return the remaining statements.

        Raises:
            MalformedInputError: input ended inside a quote or block comment
        """
        if self._finished:
            return []
        self._finished = True

        spans = self._scan(final=True)
        if self.state.is_open:
            raise MalformedInputError(self.state.construct_start, self.state.mode.construct)

        buf = self._buffer
        if buf.strip():
            spans.append(
                StatementSpan(
                    start=self._base,
                    end=self._base + len(buf),
                    data=bytes(buf),
                    terminated=False,
                )
            )
        self._base += len(buf)
        self._pos = 0
        buf.clear()
        return spans

    def _scan(self, final: bool) -> list[StatementSpan]:
        buf = self._buffer
        n = len(buf)
        state = self.state
        pos = self._pos
        start = 0
        spans: list[StatementSpan] = []

        while pos < n:
            if state.escape_pending:
                state.escape_pending = False
                pos += 1
                continue

            mode = state.mode
            if mode is LexMode.NORMAL:
                match = _NORMAL_SPECIAL.search(buf, pos)
                if match is None:
                    pos = n
                    break
                i = match.start()
                byte = buf[i]

                if byte == _SEMICOLON:
                    stop = _terminator_end(buf, i, final)
                    if stop is None:
                        pos = i
                        break
                    spans.append(
                        StatementSpan(
                            start=self._base + start,
                            end=self._base + i,
                            data=bytes(buf[start:stop]),
                        )
                    )
                    start = pos = stop
                elif byte in QUOTE_OPENERS:
                    state.enter(QUOTE_OPENERS[byte], self._base + i)
                    pos = i + 1
                else:
                    opener = _comment_opener(buf, i, final)
                    if opener is None:
                        pos = i
                        break
                    comment_mode, width = opener
                    if comment_mode is not None:
                        state.enter(comment_mode, self._base + i)
                    pos = i + width

            elif mode.is_quote:
                match = _QUOTE_SPECIAL[mode].search(buf, pos)
                if match is None:
                    pos = n
                    break
                i = match.start()

                if buf[i] == _BACKSLASH:
                    if i + 1 < n:
                        pos = i + 2
                    else:
                        state.escape_pending = True
                        pos = n
                elif i + 1 < n:
                    if buf[i + 1] == mode.delimiter:
                        pos = i + 2
                    else:
                        state.leave()
                        pos = i + 1
                elif final:
                    state.leave()
                    pos = i + 1
                else:
                    # A doubled delimiter may straddle the chunk boundary
                    pos = i
                    break

            elif mode is LexMode.LINE_COMMENT:
                i = buf.find(b"\n", pos)
                if i < 0:
                    pos = n
                    break
                state.leave()
                pos = i + 1

            else:
                i = buf.find(b"*/", pos)
                if i < 0:
                    # Keep the last byte: it may be the '*' of a split "*/"
                    pos = max(pos, n - 1)
                    break
                state.leave()
                pos = i + 2

        if start:
            del buf[:start]
            self._base += start
            pos -= start
        self._pos = pos
        return spans


def _terminator_end(buf: bytearray, i: int, final: bool) -> int | None:
    """End of the terminator at ``i``: the ';', trailing blanks and one newline.

    Returns None when the buffer ends inside the trailing blanks and more
    input may follow.
    """
    n = len(buf)
    j = i + 1
    while j < n and buf[j] in _HSPACE:
        j += 1
    if j < n:
        return j + 1 if buf[j] == _NEWLINE else j
    return n if final else None


def _comment_opener(buf: bytearray, i: int, final: bool) -> tuple[LexMode | None, int] | None:
    """Decide whether the byte at ``i`` opens a comment.

    Returns (mode, width) where mode is None for an ordinary byte, or None
    when the answer depends on bytes not received yet.
    """
    n = len(buf)
    byte = buf[i]

    if byte == _HASH:
        if i + 1 >= n:
            return (LexMode.LINE_COMMENT, 1) if final else None
        if buf[i + 1] in _WHITESPACE:
            return LexMode.LINE_COMMENT, 1
        return None, 1

    if byte == _DASH:
        if i + 1 >= n:
            return (None, 1) if final else None
        if buf[i + 1] != _DASH:
            return None, 1
        if i + 2 >= n:
            return (LexMode.LINE_COMMENT, 2) if final else None
        if buf[i + 2] in _WHITESPACE:
            return LexMode.LINE_COMMENT, 2
        return None, 1

    # '/'
    if i + 1 >= n:
        return (None, 1) if final else None
    if buf[i + 1] == _STAR:
        return LexMode.BLOCK_COMMENT, 2
    return None, 1


def iter_statements(
    stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> Iterator[StatementSpan]:
    """Yield the statements of a binary stream in input order.

    Raises:
        MalformedInputError: the stream ends inside a quote or block comment
    """
    scanner = StatementScanner()
    read = stream.read
    while chunk := read(chunk_size):
        yield from scanner.feed(chunk)
    yield from scanner.finish()


def split_statements(data: bytes) -> list[StatementSpan]:
    """Split an in-memory dump into statements."""
    scanner = StatementScanner()
    spans = scanner.feed(data)
    spans.extend(scanner.finish())
    return spans
