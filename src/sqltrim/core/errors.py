"""Error types raised by sqltrim.

Library functions raise these; the CLI turns them into a diagnostic on
stderr and a distinct exit code.
"""

from __future__ import annotations

from pathlib import Path


class SqlTrimError(Exception):
    """Base class for all sqltrim errors."""


class InvalidPatternError(SqlTrimError):
    """An include/exclude expression does not compile as a regular expression."""

    def __init__(self, option: str, pattern: str, reason: str):
        self.option = option
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"invalid {option} pattern {pattern!r}: {reason}")


class InputOpenError(SqlTrimError):
    """The dump file cannot be opened for reading."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot open input {path}: {reason}")


class OutputCreateError(SqlTrimError):
    """The destination file cannot be created."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot create output {path}: {reason}")


class MalformedInputError(SqlTrimError):
    """End of input reached inside a quoted string or block comment.

    Attributes:
        offset: Absolute byte offset where the unterminated construct began
        construct: Human readable name of the construct (e.g. "single-quoted string")
    """

    def __init__(self, offset: int, construct: str):
        self.offset = offset
        self.construct = construct
        super().__init__(f"unterminated {construct} starting at byte offset {offset}")


class OutputWriteError(SqlTrimError):
    """Writing to the destination failed after copying had started."""

    def __init__(self, path: Path | str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot write output {path}: {reason} (output is truncated)")
