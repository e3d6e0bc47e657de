"""Extract command - write the statements of selected tables to a new dump."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, BinaryIO

import typer

from sqltrim.cli.common import (
    ExcludeOption,
    IncludeOption,
    InputFileArg,
    VerboseOption,
    abort,
    open_input,
    open_output,
    setup_logging,
)
from sqltrim.core.config import get_settings
from sqltrim.core.errors import MalformedInputError, OutputWriteError, SqlTrimError
from sqltrim.core.logging import get_logger, log_context
from sqltrim.extract import ExtractSummary, extract_sql
from sqltrim.policy import InclusionSpec

logger = get_logger(__name__)


def extract(
    file: InputFileArg,
    dest: Annotated[
        Path | None,
        typer.Argument(
            help="The destination file to write to (default: standard output)",
            dir_okay=False,
        ),
    ] = None,
    include: IncludeOption = None,
    exclude: ExcludeOption = None,
    verbose: VerboseOption = 0,
) -> None:
    """Extract tables from a SQL dump.

    Statements belonging to kept tables, and statements that belong to no
    table (SET, comments, transaction control), are copied unchanged.

    Examples:

        sqltrim extract dump.sql trimmed.sql --include '^wp_'

        sqltrim extract dump.sql --exclude '_log$' > trimmed.sql
    """
    setup_logging(verbose)
    chunk_size = get_settings().chunk_size

    try:
        spec = InclusionSpec.from_patterns(include, exclude)
        with log_context(input=str(file)), open_input(file) as reader:
            if dest is None:
                stdout = typer.get_binary_stream("stdout")
                summary = _copy(reader, stdout, "<stdout>", spec, chunk_size)
            else:
                with open_output(dest, source=file) as writer:
                    summary = _copy(reader, writer, str(dest), spec, chunk_size)
    except SqlTrimError as e:
        abort(e)

    logger.info(
        "tables_extracted",
        tables_seen=len(summary.tables_seen),
        tables_kept=len(summary.tables_kept),
    )


def _copy(
    reader: BinaryIO,
    writer: BinaryIO,
    dest: str,
    spec: InclusionSpec,
    chunk_size: int,
) -> ExtractSummary:
    """Run the extract and flush, warning when the output is left truncated."""
    try:
        summary = extract_sql(reader, writer, spec, chunk_size)
        writer.flush()
    except MalformedInputError as e:
        logger.warning("truncated_output", dest=dest, offset=e.offset)
        raise
    except OSError as e:
        reason = e.strerror or str(e)
        logger.warning("truncated_output", dest=dest, reason=reason)
        raise OutputWriteError(dest, reason) from e
    return summary
