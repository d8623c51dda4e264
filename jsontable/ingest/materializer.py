"""
Table materialization.

Second pass of a read: replays the buffered flattened records against the
frozen, resolved schema and appends one typed cell per column per record.

Materialization is lenient: a value that cannot be parsed into its
column's type (possible when an override or sampling chose the type) is
stored as the column's missing sentinel and counted, rather than failing
the read.
"""

import logging
from collections import Counter
from typing import Dict, Sequence

from jsontable.common.metrics import record_coerced_cells
from jsontable.ingest.column_type import ColumnType, missing_sentinel
from jsontable.ingest.flattener import FlattenedRecord
from jsontable.ingest.table import Column, Table
from jsontable.ingest.type_resolver import CoercionError, ResolvedColumn, ValueParser
from jsontable.ingest.value_tree import detect_json_kind

logger = logging.getLogger(__name__)


class TableMaterializer:
    """Builds a Table from flattened records and resolved column types."""

    def __init__(self, parser: ValueParser):
        self.parser = parser
        self.coerced_cells: Dict[str, int] = {}

    def materialize(
        self,
        records: Sequence[FlattenedRecord],
        columns: Sequence[ResolvedColumn],
        table_name: str,
    ) -> Table:
        """
        Materialize every record into typed columns.

        Args:
            records: Flattened records from the schema pass, in order
            columns: Resolved columns in schema order
            table_name: Name of the resulting table

        Returns:
            Table with one row per record; SKIP columns are left out
        """
        kept = [c for c in columns if c.column_type != ColumnType.SKIP]
        table = Table(
            name=table_name,
            columns=[Column(name=c.path, column_type=c.column_type) for c in kept],
            record_count=len(records),
        )
        coerced: Counter = Counter()

        for record in records:
            values = record.values
            for resolved, column in zip(kept, table.columns):
                if resolved.path not in values:
                    column.append(missing_sentinel(resolved.column_type))
                    continue

                value = values[resolved.path]
                try:
                    column.append(self.parser.parse(value, resolved.column_type, detect_json_kind(value)))
                except CoercionError:
                    coerced[resolved.path] += 1
                    column.append(missing_sentinel(resolved.column_type))

        self.coerced_cells = dict(coerced)
        if coerced:
            total = sum(coerced.values())
            logger.warning(
                f"Stored {total} unparseable cells as missing values",
                extra={"extra_fields": {"table": table_name, "coerced_cells": self.coerced_cells}},
            )
            record_coerced_cells(total)

        return table
