"""sqltrim - trim SQL dumps down to selected tables.

Example:
    from sqltrim import InclusionSpec, extract_sql

    spec = InclusionSpec.from_patterns(include="^wp_", exclude="_log$")
    with open("dump.sql", "rb") as src, open("trimmed.sql", "wb") as dst:
        summary = extract_sql(src, dst, spec)
"""

__version__ = "0.1.0"

from sqltrim.classifier import Classification, StatementKind, classify
from sqltrim.extract import ExtractSummary, extract_sql
from sqltrim.policy import InclusionSpec, keep
from sqltrim.report import TableReport, TableStats, compute_table_stats
from sqltrim.scanner import StatementScanner, StatementSpan, iter_statements

__all__ = [
    "Classification",
    "ExtractSummary",
    "InclusionSpec",
    "StatementKind",
    "StatementScanner",
    "StatementSpan",
    "TableReport",
    "TableStats",
    "__version__",
    "classify",
    "compute_table_stats",
    "extract_sql",
    "iter_statements",
    "keep",
]
