"""Shared CLI utilities and constants."""

from __future__ import annotations

from enum import IntEnum
from pathlib import Path
from typing import Annotated, BinaryIO, NoReturn

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from sqltrim.core.config import get_settings
from sqltrim.core.errors import (
    InputOpenError,
    InvalidPatternError,
    MalformedInputError,
    OutputCreateError,
    OutputWriteError,
    SqlTrimError,
)
from sqltrim.core.logging import configure_logging

# Load .env file from current directory (SQLTRIM_* settings)
load_dotenv()

# Shared console instances; stdout may carry the extracted dump
console = Console()
err_console = Console(stderr=True)


class ExitCode(IntEnum):
    """Process exit codes. Typer itself uses 2 for usage errors."""

    OK = 0
    FAILURE = 1
    INVALID_PATTERN = 3
    INPUT_OPEN = 4
    OUTPUT_CREATE = 5
    MALFORMED_INPUT = 6
    OUTPUT_WRITE = 7


_EXIT_CODES: dict[type[SqlTrimError], ExitCode] = {
    InvalidPatternError: ExitCode.INVALID_PATTERN,
    InputOpenError: ExitCode.INPUT_OPEN,
    OutputCreateError: ExitCode.OUTPUT_CREATE,
    MalformedInputError: ExitCode.MALFORMED_INPUT,
    OutputWriteError: ExitCode.OUTPUT_WRITE,
}


# Common type aliases for typer arguments and options
InputFileArg = Annotated[
    Path,
    typer.Argument(
        help="The SQL dump to read",
    ),
]

IncludeOption = Annotated[
    str | None,
    typer.Option(
        "--include",
        help="Only include tables that match this regex",
    ),
]

ExcludeOption = Annotated[
    str | None,
    typer.Option(
        "--exclude",
        help="Exclude tables that match this regex",
    ),
]

JsonFlag = Annotated[
    bool,
    typer.Option(
        "--json",
        help="Output as JSON for scripting",
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-v=INFO, -vv=DEBUG)",
    ),
]


def setup_logging(verbosity: int = 0) -> None:
    """Configure structured logging based on verbosity level.

    Without -v the level comes from SQLTRIM_LOG_LEVEL (WARNING by default).

    Args:
        verbosity: 0=settings, 1=INFO, 2+=DEBUG
    """
    settings = get_settings()
    if verbosity >= 2:
        level = "DEBUG"
    elif verbosity >= 1:
        level = "INFO"
    else:
        level = settings.log_level

    configure_logging(
        log_level=level,
        log_format=settings.log_format,
        show_timestamps=verbosity >= 1,
        color=settings.log_format == "console" and err_console.is_terminal,
    )


def exit_code_for(error: SqlTrimError) -> ExitCode:
    for error_type, code in _EXIT_CODES.items():
        if isinstance(error, error_type):
            return code
    return ExitCode.FAILURE


def abort(error: SqlTrimError) -> NoReturn:
    """Print a diagnostic for ``error`` on stderr and exit with its code."""
    err_console.print(f"[red]Error:[/red] {escape(str(error))}", soft_wrap=True)
    raise typer.Exit(exit_code_for(error))


def open_input(path: Path) -> BinaryIO:
    """Open the dump for binary reading.

    Raises:
        InputOpenError: the file is missing or unreadable
    """
    try:
        return path.open("rb")
    except OSError as e:
        raise InputOpenError(path, e.strerror or str(e)) from e


def open_output(path: Path, source: Path | None = None) -> BinaryIO:
    """Create or truncate the destination file.

    Args:
        path: Destination path
        source: Input path; the destination may not be the same file

    Raises:
        OutputCreateError: the file cannot be created, or is the input itself
    """
    try:
        if source is not None and path.exists() and path.samefile(source):
            raise OutputCreateError(path, "same file as input")
        return path.open("wb")
    except OSError as e:
        raise OutputCreateError(path, e.strerror or str(e)) from e
