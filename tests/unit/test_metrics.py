"""
Unit tests for Prometheus metrics.
"""

import pytest

from jsontable.common.metrics import (
    cells_coerced_total,
    columns_inferred_total,
    get_metrics,
    get_metrics_content_type,
    json_read_duration_seconds,
    json_reads_total,
    record_coerced_cells,
    record_table,
    records_processed_total,
    track_read,
)
from jsontable.ingest.column_type import ColumnType


class TestTrackRead:
    """Tests for the read decorator."""

    def test_counts_success(self):
        initial = json_reads_total.labels(format="test", status="success")._value.get()

        @track_read("test")
        def read():
            return "table"

        assert read() == "table"
        final = json_reads_total.labels(format="test", status="success")._value.get()
        assert final == initial + 1

    def test_counts_failure_and_reraises(self):
        initial = json_reads_total.labels(format="test", status="failure")._value.get()

        @track_read("test")
        def read():
            raise RuntimeError("bad input")

        with pytest.raises(RuntimeError):
            read()
        final = json_reads_total.labels(format="test", status="failure")._value.get()
        assert final == initial + 1

    def test_disabled_metrics_are_not_recorded(self, settings_env):
        settings_env(metrics_enabled="false")
        initial = json_reads_total.labels(format="off", status="success")._value.get()

        @track_read("off")
        def read():
            return 1

        read()
        assert json_reads_total.labels(format="off", status="success")._value.get() == initial


class TestRecorders:
    """Tests for table and coercion counters."""

    def test_record_table(self):
        rows_before = records_processed_total.labels(format="test")._value.get()
        ints_before = columns_inferred_total.labels(column_type="integer")._value.get()

        record_table("test", 5, [ColumnType.INTEGER, ColumnType.INTEGER, ColumnType.STRING])

        assert records_processed_total.labels(format="test")._value.get() == rows_before + 5
        assert columns_inferred_total.labels(column_type="integer")._value.get() == ints_before + 2

    def test_record_coerced_cells_ignores_zero(self):
        before = cells_coerced_total._value.get()
        record_coerced_cells(0)
        assert cells_coerced_total._value.get() == before


class TestExposition:
    """Tests for metrics output."""

    def test_get_metrics(self):
        json_read_duration_seconds.labels(format="json").observe(0.01)
        output = get_metrics()

        assert isinstance(output, bytes)
        assert b"json_reads_total" in output
        assert b"json_read_duration_seconds" in output

    def test_content_type(self):
        assert "text/plain" in get_metrics_content_type()
