"""Show-tables command - list the tables of a SQL dump with their sizes."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table as RichTable

from sqltrim.cli.common import (
    ExcludeOption,
    IncludeOption,
    InputFileArg,
    JsonFlag,
    VerboseOption,
    abort,
    console,
    open_input,
    setup_logging,
)
from sqltrim.core.config import get_settings
from sqltrim.core.errors import SqlTrimError
from sqltrim.core.formatting import human_bytes
from sqltrim.core.logging import log_context
from sqltrim.policy import InclusionSpec
from sqltrim.report import ReportOrder, TableReport, compute_table_stats


def show_tables(
    file: InputFileArg,
    human: Annotated[
        bool,
        typer.Option(
            "--human",
            help="Display sizes in human readable units (KiB, MiB, GiB)",
        ),
    ] = False,
    include: IncludeOption = None,
    exclude: ExcludeOption = None,
    rows: Annotated[
        bool,
        typer.Option(
            "--rows",
            help="Count the rows inserted into each table",
        ),
    ] = False,
    sort: Annotated[
        ReportOrder,
        typer.Option(
            "--sort",
            help="Row order of the report",
        ),
    ] = ReportOrder.FIRST_SEEN,
    json_output: JsonFlag = False,
    verbose: VerboseOption = 0,
) -> None:
    """Show the tables in a SQL dump.

    Lists every table (after --include/--exclude) with its number of
    statements and their total size.

    Examples:

        sqltrim show-tables dump.sql --human

        sqltrim show-tables dump.sql --sort size --rows

        sqltrim show-tables dump.sql --include '^wp_' --json
    """
    setup_logging(verbose)
    chunk_size = get_settings().chunk_size

    try:
        spec = InclusionSpec.from_patterns(include, exclude)
        with log_context(input=str(file)), open_input(file) as reader:
            report = compute_table_stats(reader, spec, chunk_size, count_rows=rows)
    except SqlTrimError as e:
        abort(e)

    if json_output:
        _show_json(report, sort)
    else:
        _show_rich(report, sort, human)


def _show_json(report: TableReport, sort: ReportOrder) -> None:
    """Output the report as JSON."""
    data = report.model_dump()
    data["tables"] = [t.model_dump() for t in report.ordered(sort)]
    data["total_size"] = report.total_size
    console.print_json(data=data)


def _show_rich(report: TableReport, sort: ReportOrder, human: bool) -> None:
    """Print the report as a Rich table."""
    if not report.tables:
        console.print("[yellow]No tables found[/yellow]")
        return

    def fmt(size: int) -> str:
        return human_bytes(size) if human else str(size)

    table = RichTable(show_header=True, header_style="bold")
    table.add_column("Table")
    table.add_column("Statements", justify="right")
    table.add_column("Size" if human else "Bytes", justify="right")
    if report.rows_counted:
        table.add_column("Rows", justify="right")

    for stats in report.ordered(sort):
        row = [escape(stats.name), f"{stats.statements:,}", fmt(stats.size)]
        if report.rows_counted:
            row.append(f"{stats.rows:,}")
        table.add_row(*row)

    console.print(table)
    console.print(f"{len(report.tables)} tables, {fmt(report.total_size)} total")
