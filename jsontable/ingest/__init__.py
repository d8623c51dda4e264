"""
Ingest module for JSON-to-table reads.

Provides record flattening, schema discovery, type resolution and
table materialization for heterogeneous JSON records.
"""

from jsontable.ingest.column_type import ColumnType, missing_sentinel
from jsontable.ingest.errors import (
    JsonTableError,
    MalformedInputError,
    SourceIOError,
    StructuralShapeError,
    UnsupportedOverrideError,
)
from jsontable.ingest.flattener import PathFlattener, flatten_object
from jsontable.ingest.schema_accumulator import ColumnSchema, SchemaAccumulator, TypeEvidence
from jsontable.ingest.type_resolver import TypeOverrides, TypeResolver, ValueParser
from jsontable.ingest.materializer import TableMaterializer
from jsontable.ingest.table import Column, Table
from jsontable.ingest.source import Source
from jsontable.ingest.options import ReadOptions
from jsontable.ingest.reader import JsonReader, JsonlReader, read_file, read_string

__all__ = [  # ruff: noqa: RUF022
    # Types
    "ColumnType",
    "missing_sentinel",
    # Errors
    "JsonTableError",
    "MalformedInputError",
    "SourceIOError",
    "StructuralShapeError",
    "UnsupportedOverrideError",
    # Schema discovery
    "PathFlattener",
    "flatten_object",
    "ColumnSchema",
    "SchemaAccumulator",
    "TypeEvidence",
    # Type resolution
    "TypeOverrides",
    "TypeResolver",
    "ValueParser",
    # Materialization
    "TableMaterializer",
    "Column",
    "Table",
    # Reading
    "Source",
    "ReadOptions",
    "JsonReader",
    "JsonlReader",
    "read_file",
    "read_string",
]
