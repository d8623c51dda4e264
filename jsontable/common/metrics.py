"""
Prometheus metrics for table reads.

Provides counters and histograms for tracking:
- Reads by format and outcome
- Records processed
- Inferred column types
- Cells coerced to missing values during materialization
"""

import time
from typing import Callable
from functools import wraps
from prometheus_client import (
    Counter,
    Histogram,
    generate_latest,
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
)

from jsontable.config.settings import get_settings

# Create a global registry
REGISTRY = CollectorRegistry()

# ========== Counters ==========

json_reads_total = Counter(
    "json_reads_total",
    "Total number of table reads",
    ["format", "status"],  # json/jsonl, success/failure
    registry=REGISTRY,
)

records_processed_total = Counter(
    "records_processed_total",
    "Total number of records materialized into rows",
    ["format"],
    registry=REGISTRY,
)

columns_inferred_total = Counter(
    "columns_inferred_total",
    "Total number of columns resolved, by final type",
    ["column_type"],
    registry=REGISTRY,
)

cells_coerced_total = Counter(
    "cells_coerced_total",
    "Cells replaced by the missing sentinel because the value did not parse",
    registry=REGISTRY,
)

# ========== Histograms ==========

json_read_duration_seconds = Histogram(
    "json_read_duration_seconds",
    "Time to read a document into a table",
    ["format"],
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
    registry=REGISTRY,
)


def metrics_enabled() -> bool:
    return get_settings().metrics_enabled


# ========== Metric Decorators ==========

def track_read(fmt: str):
    """
    Decorator to track read latency and outcome.

    Args:
        fmt: Input format (json/jsonl)
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if not metrics_enabled():
                return func(*args, **kwargs)

            start_time = time.time()
            status = "success"
            try:
                return func(*args, **kwargs)
            except Exception:
                status = "failure"
                raise
            finally:
                duration = time.time() - start_time
                json_read_duration_seconds.labels(format=fmt).observe(duration)
                json_reads_total.labels(format=fmt, status=status).inc()

        return wrapper
    return decorator


def record_table(fmt: str, row_count: int, column_types) -> None:
    """Record row and column-type counts for a completed table."""
    if not metrics_enabled():
        return
    records_processed_total.labels(format=fmt).inc(row_count)
    for column_type in column_types:
        columns_inferred_total.labels(column_type=column_type.value).inc()


def record_coerced_cells(count: int) -> None:
    if count and metrics_enabled():
        cells_coerced_total.inc(count)


def get_metrics() -> bytes:
    """
    Get current metrics in Prometheus format.

    Returns:
        Metrics as bytes
    """
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get content type for metrics exposition."""
    return CONTENT_TYPE_LATEST
