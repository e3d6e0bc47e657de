"""Statement classification.

Looks at the leading keywords of a statement to find out which table it
belongs to. Only the head of the statement is inspected; the remainder
(column definitions, VALUES payloads) is never parsed, except by
count_insert_rows when row counts are requested.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class StatementKind(str, Enum):
    """Kind of statement as far as table filtering is concerned."""

    CREATE_TABLE = "create_table"
    INSERT = "insert"
    DROP_TABLE = "drop_table"
    ALTER_TABLE = "alter_table"
    LOCK_TABLES = "lock_tables"
    UNLOCK_TABLES = "unlock_tables"
    UNSCOPED = "unscoped"


@dataclass(frozen=True, slots=True)
class Classification:
    """Result of classifying one statement.

    Attributes:
        kind: Statement kind
        tables: Table names in statement order. DROP TABLE and LOCK TABLES
            may name several; the first one governs filtering.
    """

    kind: StatementKind
    tables: tuple[str, ...] = ()

    @property
    def table(self) -> str | None:
        """The table that owns the statement, None when unscoped."""
        return self.tables[0] if self.tables else None

    @property
    def is_scoped(self) -> bool:
        return bool(self.tables)


UNSCOPED = Classification(StatementKind.UNSCOPED)

# Whitespace and comments before the first keyword. MySQL executable comments
# (/*!40000 ... */) are entered rather than skipped, their body is SQL.
_NOISE = re.compile(
    rb"""
      \s+
    | --(?=\s|$)[^\n]*
    | \#(?=\s|$)[^\n]*
    | /\*(?!M?!).*?\*/
    | /\*M?!\d*
    """,
    re.X | re.S,
)

_HEAD = re.compile(
    rb"""
    (?:
      (?P<create_table>CREATE\s+(?:OR\s+REPLACE\s+)?(?:TEMPORARY\s+)?TABLE(?:\s+IF\s+NOT\s+EXISTS)?)
    | (?P<insert>(?:INSERT|REPLACE)(?:\s+(?:LOW_PRIORITY|DELAYED|HIGH_PRIORITY))?(?:\s+IGNORE)?(?:\s+INTO)?)
    | (?P<drop_table>DROP\s+(?:TEMPORARY\s+)?TABLES?(?:\s+IF\s+EXISTS)?)
    | (?P<alter_table>ALTER\s+(?:ONLINE\s+)?(?:IGNORE\s+)?TABLE)
    | (?P<unlock_tables>UNLOCK\s+TABLES?)
    | (?P<lock_tables>LOCK\s+TABLES?)
    )
    (?![\w$])
    """,
    re.I | re.X,
)

_IDENT = rb"""(?:`(?:[^`]|``)*`|"(?:[^"]|"")*"|'(?:[^']|'')*'|[^\s`"'.,;()]+)"""
_QUALIFIED_NAME = re.compile(rb"\s*(" + _IDENT + rb")(?:\s*\.\s*(" + _IDENT + rb"))?")
_LIST_SEPARATOR = re.compile(rb"\s*,")
_LOCK_ITEM_TAIL = re.compile(rb"[^,]*")

_MULTI_NAME_KINDS = frozenset({StatementKind.DROP_TABLE, StatementKind.LOCK_TABLES})


def unquote_identifier(raw: bytes) -> str:
    """Strip one layer of identifier quoting and unescape doubled delimiters.

    Examples:
        unquote_identifier(b"`wp_posts`") -> "wp_posts"
        unquote_identifier(b'"a""b"') -> 'a"b'
        unquote_identifier(b"users") -> "users"
    """
    if len(raw) >= 2 and raw[0] in b"`\"'" and raw[-1] == raw[0]:
        quote = raw[:1]
        raw = raw[1:-1].replace(quote + quote, quote)
    return raw.decode("utf-8", errors="replace")


def _skip_noise(body: bytes) -> int:
    pos = 0
    while match := _NOISE.match(body, pos):
        if match.end() == pos:
            break
        pos = match.end()
    return pos


def _parse_names(body: bytes, pos: int, kind: StatementKind) -> tuple[str, ...]:
    names: list[str] = []
    while match := _QUALIFIED_NAME.match(body, pos):
        raw = match.group(2) or match.group(1)
        names.append(unquote_identifier(raw))
        pos = match.end()
        if kind not in _MULTI_NAME_KINDS:
            break
        if kind is StatementKind.LOCK_TABLES:
            # alias and lock type: "[AS alias] READ|WRITE"
            pos = _LOCK_ITEM_TAIL.match(body, pos).end()  # type: ignore[union-attr]
        separator = _LIST_SEPARATOR.match(body, pos)
        if separator is None:
            break
        pos = separator.end()
    return tuple(names)


def classify(body: bytes) -> Classification:
    """Classify a statement by its leading keywords.

    Args:
        body: Raw statement bytes (terminator optional)

    Returns:
        Classification with the kind and the referenced table names.
        Statements that are not table-scoped, or whose table name cannot be
        read, classify as UNSCOPED.
    """
    head = _HEAD.match(body, _skip_noise(body))
    if head is None:
        return UNSCOPED

    kind = StatementKind(head.lastgroup)
    if kind is StatementKind.UNLOCK_TABLES:
        return Classification(kind)

    tables = _parse_names(body, head.end(), kind)
    if not tables:
        return UNSCOPED
    return Classification(kind, tables)


_ROW_TOKENS = re.compile(
    rb"""
      '(?:[^'\\]|\\.|'')*'
    | "(?:[^"\\]|\\.|"")*"
    | `(?:[^`]|``)*`
    | (?P<values>\bVALUES?\b)
    | (?P<update>\bON\s+DUPLICATE\b)
    | (?P<open>\()
    | (?P<close>\))
    """,
    re.I | re.X | re.S,
)


def count_insert_rows(body: bytes) -> int:
    """Count the row tuples of an INSERT ... VALUES statement.

    Counting starts after the INSERT keywords, so leading comments are
    ignored. Parentheses inside string literals and the column list before
    VALUES are not counted. INSERT ... SELECT, and anything that is not an
    INSERT, counts as zero rows.
    """
    head = _HEAD.match(body, _skip_noise(body))
    if head is None or head.lastgroup != StatementKind.INSERT.value:
        return 0

    rows = 0
    depth = 0
    in_values = False
    for match in _ROW_TOKENS.finditer(body, head.end()):
        token = match.lastgroup
        if token is None:
            continue
        if token == "open":
            if in_values and depth == 0:
                rows += 1
            depth += 1
        elif token == "close":
            depth = max(depth - 1, 0)
        elif depth == 0:
            if token == "update":
                break
            in_values = True
    return rows
