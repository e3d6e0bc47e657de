"""Tests for the streaming statement scanner."""

from io import BytesIO

import pytest
from conftest import DUMP, MALFORMED

from sqltrim.core.errors import MalformedInputError
from sqltrim.scanner import (
    LexMode,
    StatementScanner,
    iter_statements,
    split_statements,
)


def scan_in_chunks(data: bytes, chunk_size: int) -> list[bytes]:
    """Return the span payloads of ``data`` read ``chunk_size`` bytes at a time."""
    return [span.data for span in iter_statements(BytesIO(data), chunk_size)]


class TestStatementBoundaries:
    """Tests for finding statement terminators."""

    def test_two_statements(self):
        """Spans carry offsets, the terminator and the trailing newline."""
        spans = split_statements(b"SELECT 1;\nSELECT 2;")

        assert len(spans) == 2
        first, second = spans
        assert (first.start, first.end) == (0, 8)
        assert first.data == b"SELECT 1;\n"
        assert first.body == b"SELECT 1"
        assert (second.start, second.end) == (10, 18)
        assert second.data == b"SELECT 2;"
        assert second.terminated

    def test_trailing_blanks_stay_with_statement(self):
        """Blanks after ';' up to the newline belong to the statement."""
        spans = split_statements(b"A;  \r\nB; C;")

        assert [s.data for s in spans] == [b"A;  \r\n", b"B; ", b"C;"]

    def test_semicolons_inside_strings(self):
        """Quoted and escaped semicolons do not split a statement."""
        sql = b"""INSERT INTO t VALUES ('a;b', 'c\\'d', "e\\"f");"""

        spans = split_statements(sql)

        assert len(spans) == 1
        assert spans[0].data == sql

    def test_doubled_quote_is_escaped_quote(self):
        spans = split_statements(b"INSERT INTO t VALUES ('it''s; fine');SELECT 1;")

        assert [s.body for s in spans] == [
            b"INSERT INTO t VALUES ('it''s; fine')",
            b"SELECT 1",
        ]

    def test_backtick_identifier_with_semicolon(self):
        spans = split_statements(b"CREATE TABLE `odd;name` (id int);")

        assert len(spans) == 1

    def test_line_comment_is_inert(self):
        """A line comment containing ';' spawns no statement."""
        spans = split_statements(b"-- drop table x;\nSELECT 1;")

        assert len(spans) == 1
        assert spans[0].start == 0
        assert spans[0].body == b"-- drop table x;\nSELECT 1"

    def test_hash_comment(self):
        spans = split_statements(b"# a;b\nSELECT 1;")

        assert len(spans) == 1

    def test_hash_without_whitespace_is_not_a_comment(self):
        spans = split_statements(b"SELECT 1 #x;SELECT 2;")

        assert len(spans) == 2

    def test_double_dash_without_whitespace_is_not_a_comment(self):
        spans = split_statements(b"SELECT 5--1;SELECT 2;")

        assert [s.body for s in spans] == [b"SELECT 5--1", b"SELECT 2"]

    def test_block_comment_is_inert(self):
        spans = split_statements(b"/* a; 'b */ SELECT 1;")

        assert len(spans) == 1

    def test_executable_comment_terminated_after_close(self):
        spans = split_statements(b"/*!40101 SET NAMES utf8 */;\nSET x=1;\n")

        assert [s.data for s in spans] == [b"/*!40101 SET NAMES utf8 */;\n", b"SET x=1;\n"]

    def test_missing_final_terminator(self):
        """The last statement is emitted even without ';'."""
        spans = split_statements(b"SELECT 1;\nSELECT 2")

        assert len(spans) == 2
        assert spans[1].data == b"SELECT 2"
        assert not spans[1].terminated

    def test_trailing_line_comment_is_emitted(self):
        spans = split_statements(b"SELECT 1;\n-- done")

        assert [s.data for s in spans] == [b"SELECT 1;\n", b"-- done"]

    def test_empty_input(self):
        assert split_statements(b"") == []

    def test_whitespace_only_input(self):
        assert split_statements(b"  \n\t\n") == []

    def test_empty_statement(self):
        """A lone ';' is a statement with an empty body."""
        spans = split_statements(b"SELECT 1;;")

        assert [s.data for s in spans] == [b"SELECT 1;", b";"]
        assert spans[1].body == b""

    def test_spans_cover_dump(self):
        """Concatenating all spans reproduces the input."""
        spans = split_statements(DUMP)

        assert b"".join(s.data for s in spans) == DUMP
        assert len(spans) == 16


class TestChunking:
    """Results must not depend on how the input is chunked."""

    def test_chunk_sizes_agree(self):
        expected = scan_in_chunks(DUMP, len(DUMP))

        for chunk_size in (1, 2, 3, 5, 7, 16, 64, 4096):
            assert scan_in_chunks(DUMP, chunk_size) == expected, chunk_size

    def test_doubled_quote_across_boundary(self):
        sql = b"INSERT INTO t VALUES ('it''s;x');SELECT 1;"

        for chunk_size in range(1, len(sql) + 1):
            assert len(scan_in_chunks(sql, chunk_size)) == 2, chunk_size

    def test_escape_across_boundary(self):
        sql = rb"SELECT 'a\';b';SELECT 2;"

        for chunk_size in range(1, len(sql) + 1):
            assert scan_in_chunks(sql, chunk_size) == [rb"SELECT 'a\';b';", b"SELECT 2;"]

    def test_comment_openers_across_boundary(self):
        sql = b"SELECT 1 -- c;\n;/* x; */SELECT 2;# y;\n"

        expected = scan_in_chunks(sql, len(sql))
        assert len(expected) == 3
        for chunk_size in range(1, len(sql) + 1):
            assert scan_in_chunks(sql, chunk_size) == expected, chunk_size

    def test_only_pending_statement_is_buffered(self):
        scanner = StatementScanner()

        spans = scanner.feed(b"SELECT 1;\nINSERT INTO t VALUES (1")

        assert [s.data for s in spans] == [b"SELECT 1;\n"]
        assert scanner.pending == len(b"INSERT INTO t VALUES (1")
        assert scanner.offset == 33


class TestScanState:
    """Tests for the state carried between chunks."""

    def test_state_after_open_quote(self):
        scanner = StatementScanner()

        scanner.feed(b"SELECT 'abc")

        assert scanner.state.mode is LexMode.SINGLE_QUOTE
        assert scanner.state.construct_start == 7

    def test_pending_escape(self):
        scanner = StatementScanner()

        scanner.feed(b"SELECT 'abc\\")
        assert scanner.state.escape_pending

        scanner.feed(b"'")
        assert not scanner.state.escape_pending
        assert scanner.state.mode is LexMode.SINGLE_QUOTE

    def test_snapshot_is_independent(self):
        scanner = StatementScanner()
        scanner.feed(b"SELECT `x")

        snapshot = scanner.state.snapshot()
        scanner.feed(b"` ")

        assert snapshot.mode is LexMode.BACKTICK
        assert scanner.state.mode is LexMode.NORMAL

    def test_feed_after_finish_fails(self):
        scanner = StatementScanner()
        scanner.finish()

        with pytest.raises(RuntimeError):
            scanner.feed(b"SELECT 1;")


class TestMalformedInput:
    """Tests for input ending inside a quote or block comment."""

    def test_unterminated_string(self):
        """The error points at the opening quote."""
        with pytest.raises(MalformedInputError) as exc_info:
            split_statements(MALFORMED)

        assert exc_info.value.offset == MALFORMED.index(b"'")
        assert exc_info.value.construct == "single-quoted string"

    def test_complete_statements_are_yielded_first(self):
        spans = []
        with pytest.raises(MalformedInputError):
            for span in iter_statements(BytesIO(MALFORMED), 4):
                spans.append(span)

        assert [s.data for s in spans] == [b"SELECT 1;\n"]

    def test_unterminated_block_comment(self):
        with pytest.raises(MalformedInputError) as exc_info:
            split_statements(b"SELECT 1; /* open")

        assert exc_info.value.offset == 10
        assert exc_info.value.construct == "block comment"

    def test_unterminated_backtick(self):
        with pytest.raises(MalformedInputError) as exc_info:
            split_statements(b"CREATE TABLE `t")

        assert exc_info.value.construct == "backtick-quoted identifier"

    def test_unterminated_line_comment_is_fine(self):
        spans = split_statements(b"SELECT 1; -- no newline")

        assert len(spans) == 2
