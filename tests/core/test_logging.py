"""Tests for logging helpers."""

from sqltrim.core.logging import ScanMetrics, _run_context, log_context


class TestScanMetrics:
    """Tests for ScanMetrics."""

    def test_record(self):
        metrics = ScanMetrics(operation="extract")

        metrics.record(100, kept=True)
        metrics.record(50, kept=False)
        metrics.finish()

        data = metrics.to_dict()
        assert data["statements_read"] == 2
        assert data["statements_kept"] == 1
        assert data["bytes_read"] == 150
        assert data["bytes_kept"] == 100
        assert metrics.duration_seconds >= 0


class TestLogContext:
    """Tests for log_context()."""

    def test_nested_context_is_restored(self):
        with log_context(input="a.sql"):
            with log_context(table="users"):
                assert _run_context.get() == {"input": "a.sql", "table": "users"}
            assert _run_context.get() == {"input": "a.sql"}
        assert not _run_context.get()
