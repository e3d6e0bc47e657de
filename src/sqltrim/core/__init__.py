"""Core infrastructure: configuration, logging, errors and formatting."""

from sqltrim.core.config import Settings, get_settings
from sqltrim.core.errors import (
    InputOpenError,
    InvalidPatternError,
    MalformedInputError,
    OutputCreateError,
    OutputWriteError,
    SqlTrimError,
)

__all__ = [
    "InputOpenError",
    "InvalidPatternError",
    "MalformedInputError",
    "OutputCreateError",
    "OutputWriteError",
    "Settings",
    "SqlTrimError",
    "get_settings",
]
