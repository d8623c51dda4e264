"""
JSON and JSONL readers.

Coordinates a read end to end:

    source -> value trees -> pointer selection -> flattening
           -> schema pass -> type resolution -> materialization pass -> Table

The whole record set is parsed and buffered before the schema pass and
kept until materialization finishes, so memory grows with document size.
Readers are stateless; concurrent reads on separate threads share nothing.
"""

import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from jsontable.common.logging_config import (
    PerformanceTracker,
    clear_read_id,
    get_read_id,
    set_read_id,
)
from jsontable.common.metrics import record_table, track_read
from jsontable.ingest.flattener import PathFlattener
from jsontable.ingest.materializer import TableMaterializer
from jsontable.ingest.options import ReadOptions
from jsontable.ingest.schema_accumulator import SchemaAccumulator
from jsontable.ingest.source import parse_json_document, parse_jsonl_records
from jsontable.ingest.table import Table
from jsontable.ingest.type_resolver import TypeResolver
from jsontable.ingest.value_tree import as_record_list, select_pointer

logger = logging.getLogger(__name__)


class JsonReader:
    """Reads a JSON document holding an array of records."""

    fmt = "json"

    @track_read("json")
    def read(self, options: ReadOptions) -> Table:
        """
        Read a document into a table.

        Args:
            options: Source and read options

        Returns:
            The materialized table

        Raises:
            MalformedInputError: If the document is not valid JSON or not a record list
            StructuralShapeError: If records disagree on shape
            SourceIOError: If the source cannot be read
            UnsupportedOverrideError: If an override cannot hold a column's values
        """
        return self._read(options)

    def load_document(self, text: str) -> Any:
        return parse_json_document(text)

    def load_records(self, options: ReadOptions) -> List[Any]:
        """Parse the source and select the record list."""
        document = self.load_document(options.source.read_text())
        if options.path:
            document = select_pointer(document, options.path)
        return as_record_list(document)

    def _read(self, options: ReadOptions) -> Table:
        owns_read_id = get_read_id() is None
        if owns_read_id:
            set_read_id()

        try:
            with PerformanceTracker("load_records", logger, format=self.fmt):
                records = self.load_records(options)

            flattener = PathFlattener(header=options.header)
            records = flattener.prepare(records)
            parser = options.value_parser()

            accumulator = SchemaAccumulator(flattener, parser, options.max_sample_size)
            with PerformanceTracker("schema_pass", logger, records=len(records)):
                flattened = accumulator.observe_all(records)
                schema = accumulator.finish()

            resolver = TypeResolver(options.type_overrides(), options.prune_empty_columns)
            columns = resolver.resolve_schema(schema)

            materializer = TableMaterializer(parser)
            with PerformanceTracker("materialize_pass", logger, columns=len(columns)):
                table = materializer.materialize(flattened, columns, options.table_name)

            record_table(self.fmt, table.row_count, table.type_array())
            logger.info(
                f"Read table {table.name!r}: {table.row_count} rows, {table.column_count} columns",
                extra={"extra_fields": {
                    "format": self.fmt,
                    "options": options.describe(),
                    "column_types": {c.name: c.column_type.value for c in table.columns},
                }},
            )
            return table
        finally:
            if owns_read_id:
                clear_read_id()


class JsonlReader(JsonReader):
    """Reads newline-delimited JSON, one record per line."""

    fmt = "jsonl"

    @track_read("jsonl")
    def read(self, options: ReadOptions) -> Table:
        """Read a JSONL document into a table; a pointer applies to the list of lines."""
        return self._read(options)

    def load_document(self, text: str) -> Any:
        return parse_jsonl_records(text)


READERS = {
    "json": JsonReader,
    "jsonl": JsonlReader,
    "ndjson": JsonlReader,
}


def get_reader(fmt: str) -> JsonReader:
    try:
        return READERS[fmt.lower().lstrip(".")]()
    except KeyError:
        raise ValueError(f"Unsupported format {fmt!r}; expected one of {sorted(READERS)}") from None


def read_string(text: str, fmt: str = "json", **options) -> Table:
    """
    Read a JSON or JSONL string into a table.

    Args:
        text: Document text
        fmt: "json", "jsonl" or "ndjson"
        **options: ReadOptions fields
    """
    return get_reader(fmt).read(ReadOptions.from_string(text, **options))


def read_file(path: Union[str, Path], fmt: Optional[str] = None, **options) -> Table:
    """
    Read a JSON or JSONL file into a table.

    Args:
        path: File path
        fmt: Format; taken from the file extension when omitted
        **options: ReadOptions fields
    """
    fmt = fmt or Path(path).suffix or "json"
    return get_reader(fmt).read(ReadOptions.from_file(path, **options))
