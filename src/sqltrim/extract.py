"""Extract mode: copy the statements of selected tables to a new dump."""

from __future__ import annotations

from typing import BinaryIO

from pydantic import BaseModel, Field

from sqltrim.classifier import classify
from sqltrim.core.logging import ScanMetrics, get_logger
from sqltrim.policy import KEEP_ALL, InclusionSpec, keep
from sqltrim.scanner import DEFAULT_CHUNK_SIZE, iter_statements

logger = get_logger(__name__)


class ExtractSummary(BaseModel):
    """Outcome of an extract run."""

    statements_read: int = 0
    statements_written: int = 0
    bytes_read: int = 0
    bytes_written: int = 0
    tables_seen: list[str] = Field(default_factory=list)
    tables_kept: list[str] = Field(default_factory=list)


def extract_sql(
    reader: BinaryIO,
    writer: BinaryIO,
    spec: InclusionSpec = KEEP_ALL,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> ExtractSummary:
    """Copy the kept statements of ``reader`` to ``writer``.

    Statements are written byte for byte, in input order. Unscoped statements
    are always written.

    Args:
        reader: Binary stream positioned at the start of the dump
        writer: Binary stream receiving the trimmed dump
        spec: Include/exclude patterns
        chunk_size: Bytes read per chunk

    Returns:
        ExtractSummary with counters and the tables seen, in first-seen order

    Raises:
        MalformedInputError: the dump ends inside a quote or block comment.
            Everything before the unterminated statement has been written.
    """
    metrics = ScanMetrics(operation="extract")
    seen: dict[str, bool] = {}
    write = writer.write

    for span in iter_statements(reader, chunk_size):
        name = classify(span.data).table
        kept = keep(name, spec)
        if name is not None and name not in seen:
            seen[name] = kept
            logger.debug("table_seen", table=name, kept=kept, offset=span.start)
        if kept:
            write(span.data)
        metrics.record(span.size, kept)

    metrics.finish()
    logger.info("extract_finished", filtering=spec.is_filtering, **metrics.to_dict())

    return ExtractSummary(
        statements_read=metrics.statements_read,
        statements_written=metrics.statements_kept,
        bytes_read=metrics.bytes_read,
        bytes_written=metrics.bytes_kept,
        tables_seen=list(seen),
        tables_kept=[name for name, kept in seen.items() if kept],
    )
