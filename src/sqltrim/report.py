"""Show-tables mode: per-table statement counts and sizes."""

from __future__ import annotations

from enum import Enum
from typing import BinaryIO

from pydantic import BaseModel, Field

from sqltrim.classifier import StatementKind, classify, count_insert_rows
from sqltrim.core.logging import ScanMetrics, get_logger
from sqltrim.policy import KEEP_ALL, InclusionSpec
from sqltrim.scanner import DEFAULT_CHUNK_SIZE, iter_statements

logger = get_logger(__name__)


class ReportOrder(str, Enum):
    """Row order of the table report."""

    FIRST_SEEN = "first-seen"
    SIZE = "size"
    NAME = "name"


class TableStats(BaseModel):
    """Accumulated statistics of one table."""

    name: str
    statements: int = 0
    size: int = 0
    rows: int = 0


class TableReport(BaseModel):
    """Statistics of all kept tables of a dump, in first-seen order."""

    tables: list[TableStats] = Field(default_factory=list)
    unscoped_statements: int = 0
    unscoped_size: int = 0
    rows_counted: bool = False

    @property
    def total_size(self) -> int:
        return sum(t.size for t in self.tables)

    @property
    def table_names(self) -> list[str]:
        return [t.name for t in self.tables]

    def get(self, name: str) -> TableStats | None:
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def ordered(self, order: ReportOrder = ReportOrder.FIRST_SEEN) -> list[TableStats]:
        """Return the tables in the requested order.

        SIZE is largest first, ties broken by name.
        """
        if order is ReportOrder.SIZE:
            return sorted(self.tables, key=lambda t: (-t.size, t.name))
        if order is ReportOrder.NAME:
            return sorted(self.tables, key=lambda t: t.name)
        return list(self.tables)


def compute_table_stats(
    reader: BinaryIO,
    spec: InclusionSpec = KEEP_ALL,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    count_rows: bool = False,
) -> TableReport:
    """Walk a dump and accumulate statistics for every kept table.

    Each table-scoped statement counts once towards its governing table, with
    its full size including the terminator. Tables rejected by ``spec`` are
    left out, so the report lists exactly the tables an extract with the same
    spec would keep.

    Args:
        reader: Binary stream positioned at the start of the dump
        spec: Include/exclude patterns
        chunk_size: Bytes read per chunk
        count_rows: Also count the VALUES tuples of INSERT statements

    Raises:
        MalformedInputError: the dump ends inside a quote or block comment
    """
    metrics = ScanMetrics(operation="show_tables")
    stats: dict[str, TableStats] = {}
    unscoped_statements = 0
    unscoped_size = 0

    for span in iter_statements(reader, chunk_size):
        classification = classify(span.data)
        name = classification.table

        if name is None:
            unscoped_statements += 1
            unscoped_size += span.size
            metrics.record(span.size, kept=True)
            continue

        kept = spec.keeps_table(name)
        metrics.record(span.size, kept)
        if not kept:
            continue

        entry = stats.get(name)
        if entry is None:
            entry = stats[name] = TableStats(name=name)
            logger.debug("table_seen", table=name, offset=span.start)
        entry.statements += 1
        entry.size += span.size
        if count_rows and classification.kind is StatementKind.INSERT:
            entry.rows += count_insert_rows(span.data)

    metrics.finish()
    logger.info("show_tables_finished", tables=len(stats), **metrics.to_dict())

    return TableReport(
        tables=list(stats.values()),
        unscoped_statements=unscoped_statements,
        unscoped_size=unscoped_size,
        rows_counted=count_rows,
    )
