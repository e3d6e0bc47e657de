"""Streaming lexical scanner for SQL dumps."""

from sqltrim.scanner.scanner import (
    DEFAULT_CHUNK_SIZE,
    StatementScanner,
    StatementSpan,
    iter_statements,
    split_statements,
)
from sqltrim.scanner.state import LexMode, ScanState

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "LexMode",
    "ScanState",
    "StatementScanner",
    "StatementSpan",
    "iter_statements",
    "split_statements",
]
