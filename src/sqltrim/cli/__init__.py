"""CLI for sqltrim.

Usage:
    sqltrim extract dump.sql trimmed.sql --include '^wp_'
    sqltrim show-tables dump.sql --human

Environment:
    Loads .env file from current directory if present.
    SQLTRIM_CHUNK_SIZE, SQLTRIM_LOG_LEVEL and SQLTRIM_LOG_FORMAT tune the run.
"""

from sqltrim.cli.main import app, main

__all__ = ["app", "main"]
