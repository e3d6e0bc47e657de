"""Include/exclude decision for table names.

Patterns are compiled once into an immutable InclusionSpec that is passed
explicitly to every decision.

Rules:
- A statement without a table (SET, transaction control, comment-only,
  UNLOCK TABLES, views, triggers) is always kept, filter or no filter.
- A table is kept when it matches the include pattern (if any) and does not
  match the exclude pattern (if any). Matching is re.search, case-sensitive.
- For statements naming several tables the first one decides.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from sqltrim.classifier import Classification
from sqltrim.core.errors import InvalidPatternError


def compile_pattern(option: str, pattern: str | None) -> re.Pattern[str] | None:
    """Compile a user-supplied pattern.

    Raises:
        InvalidPatternError: the pattern is not a valid regular expression
    """
    if pattern is None:
        return None
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(option, pattern, str(e)) from e


@dataclass(frozen=True)
class InclusionSpec:
    """Compiled include/exclude patterns."""

    include: re.Pattern[str] | None = None
    exclude: re.Pattern[str] | None = None

    @classmethod
    def from_patterns(cls, include: str | None = None, exclude: str | None = None) -> InclusionSpec:
        """Build a spec from pattern strings.

        Raises:
            InvalidPatternError: either pattern fails to compile
        """
        return cls(
            include=compile_pattern("include", include),
            exclude=compile_pattern("exclude", exclude),
        )

    @property
    def is_filtering(self) -> bool:
        return self.include is not None or self.exclude is not None

    def keeps_table(self, name: str) -> bool:
        if self.include is not None and self.include.search(name) is None:
            return False
        if self.exclude is not None and self.exclude.search(name) is not None:
            return False
        return True


KEEP_ALL = InclusionSpec()


def keep(table_name: str | None, spec: InclusionSpec) -> bool:
    """Decide whether a statement owned by ``table_name`` is kept."""
    if table_name is None:
        return True
    return spec.keeps_table(table_name)


def keep_statement(classification: Classification, spec: InclusionSpec) -> bool:
    """Decide whether a classified statement is kept."""
    return keep(classification.table, spec)
