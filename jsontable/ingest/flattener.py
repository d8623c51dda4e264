"""
Record flattening.

Turns one parsed record into an ordered mapping of column path to leaf value.
Object records are flattened recursively into dotted paths; positional
records (arrays) are addressed by header name or by synthetic name.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from jsontable.ingest.errors import MalformedInputError, StructuralShapeError
from jsontable.ingest.value_tree import JsonKind, detect_json_kind

PATH_SEPARATOR = "."


class RecordShape(str, Enum):
    """Top-level shape shared by every record of one read."""
    OBJECT = "object"
    POSITIONAL = "positional"


@dataclass
class FlattenedRecord:
    """Leaf values of one record keyed by column path, in record order."""
    values: Dict[str, Any] = field(default_factory=dict)
    # Paths that held nested objects in this record
    containers: List[str] = field(default_factory=list)


def detect_record_shape(record: Any) -> RecordShape:
    """
    Detect the top-level shape of a record.

    Raises:
        MalformedInputError: If the record is not an object or an array
    """
    kind = detect_json_kind(record)
    if kind == JsonKind.OBJECT:
        return RecordShape.OBJECT
    if kind == JsonKind.ARRAY:
        return RecordShape.POSITIONAL
    raise MalformedInputError(
        f"Each record must be a JSON object or array, got {kind.value}")


def synthetic_column_name(index: int) -> str:
    return f"C{index}"


def flatten_object(
    obj: Dict[str, Any],
    parent_path: str = "",
    result: Optional[FlattenedRecord] = None,
) -> FlattenedRecord:
    """
    Flatten a nested JSON object to dotted paths.

    Arrays are kept whole as leaf values. A key containing the separator
    addresses the same column as the equally spelled nested path.

    Args:
        obj: The JSON object to flatten
        parent_path: Current path prefix
        result: Record being filled (created on the outermost call)

    Returns:
        FlattenedRecord with leaf values and the nested-object paths seen

    Raises:
        MalformedInputError: If two keys of one record flatten to the same path
    """
    if result is None:
        result = FlattenedRecord()

    for key, value in obj.items():
        path = f"{parent_path}{PATH_SEPARATOR}{key}" if parent_path else str(key)

        if detect_json_kind(value) == JsonKind.OBJECT:
            result.containers.append(path)
            flatten_object(value, path, result)
        elif path in result.values:
            raise MalformedInputError(f"Record holds two values for column path {path!r}")
        else:
            result.values[path] = value

    return result


def header_names(row: List[Any]) -> List[str]:
    """Column names from a header row; nulls get synthetic names."""
    names = []
    for index, cell in enumerate(row):
        kind = detect_json_kind(cell)
        if kind == JsonKind.NULL:
            names.append(synthetic_column_name(index))
        elif kind == JsonKind.STRING:
            names.append(cell)
        elif kind == JsonKind.BOOLEAN:
            names.append("true" if cell else "false")
        else:
            names.append(str(cell))

    seen = set()
    for name in names:
        if name in seen:
            raise MalformedInputError(f"Duplicate column name in header row: {name!r}")
        seen.add(name)
    return names


class PathFlattener:
    """
    Flattens the records of one read.

    The shape of the first record fixes the shape for the whole read. In
    positional mode the first record also fixes the column names and arity.
    """

    def __init__(self, header: Optional[bool] = None):
        """
        Initialize flattener.

        Args:
            header: Whether the first positional row is a header row;
                None detects it (header iff every cell is a string)
        """
        self.header = header
        self.shape: Optional[RecordShape] = None
        self.positional_names: Optional[List[str]] = None
        self.has_header_row = False

    def prepare(self, records: List[Any]) -> List[Any]:
        """
        Establish the record shape and strip a positional header row.

        Args:
            records: All records of the read

        Returns:
            The data records (header row removed)
        """
        if not records:
            return records

        first = records[0]
        self.shape = detect_record_shape(first)
        if self.shape == RecordShape.OBJECT:
            return records

        use_header = self.header
        if use_header is None:
            use_header = bool(first) and all(
                detect_json_kind(cell) == JsonKind.STRING for cell in first)

        if use_header:
            self.has_header_row = True
            self.positional_names = header_names(first)
            return records[1:]

        self.positional_names = [synthetic_column_name(i) for i in range(len(first))]
        return records

    def flatten(self, record: Any, index: Optional[int] = None) -> FlattenedRecord:
        """
        Flatten one record.

        Args:
            record: Parsed record
            index: Position of the record, used in error messages

        Raises:
            MalformedInputError: If the record is a scalar
            StructuralShapeError: If the record's shape or arity disagrees
                with the first record
        """
        shape = detect_record_shape(record)
        if self.shape is None:
            self.shape = shape
            if shape == RecordShape.POSITIONAL:
                self.positional_names = [synthetic_column_name(i) for i in range(len(record))]
        where = f"Record {index}" if index is not None else "Record"

        if shape != self.shape:
            raise StructuralShapeError(
                f"{where} is a JSON {'array' if shape == RecordShape.POSITIONAL else 'object'} "
                f"but earlier records are {self.shape.value} records")

        if shape == RecordShape.OBJECT:
            return flatten_object(record)

        if len(record) != len(self.positional_names):
            raise StructuralShapeError(
                f"{where} has {len(record)} values but the first row has "
                f"{len(self.positional_names)}")
        return FlattenedRecord(values=dict(zip(self.positional_names, record)))
