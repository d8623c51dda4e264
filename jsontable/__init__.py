"""Read heterogeneous JSON and JSONL records into typed tables."""

from jsontable.ingest import (
    Column,
    ColumnType,
    JsonlReader,
    JsonReader,
    JsonTableError,
    MalformedInputError,
    ReadOptions,
    Source,
    SourceIOError,
    StructuralShapeError,
    Table,
    UnsupportedOverrideError,
    missing_sentinel,
    read_file,
    read_string,
)

__version__ = "0.1.0"

__all__ = [
    "Column",
    "ColumnType",
    "JsonlReader",
    "JsonReader",
    "JsonTableError",
    "MalformedInputError",
    "ReadOptions",
    "Source",
    "SourceIOError",
    "StructuralShapeError",
    "Table",
    "UnsupportedOverrideError",
    "missing_sentinel",
    "read_file",
    "read_string",
]
