"""
Schema discovery across a record stream.

First pass of a read: every record is flattened, new column paths are
appended in first-seen order, and each column's type evidence is widened
with the values it holds. No row data is written here.
"""

import logging
from typing import Any, Dict, List, Optional, Set

from jsontable.ingest.column_type import ColumnType, join_types
from jsontable.ingest.errors import StructuralShapeError
from jsontable.ingest.flattener import FlattenedRecord, PathFlattener
from jsontable.ingest.type_resolver import ValueParser
from jsontable.ingest.value_tree import JsonKind, detect_json_kind, is_container

logger = logging.getLogger(__name__)

MAX_SAMPLE_VALUES = 10


class TypeEvidence:
    """Type evidence and statistics for a single column path."""

    def __init__(self, path: str):
        self.path = path
        self.inferred: Optional[ColumnType] = None
        self.presence_count = 0
        self.null_count = 0
        self.saw_structured = False
        self.sample_values: List[Any] = []

    def add_value(self, value: Any, kind: JsonKind, value_type: Optional[ColumnType]) -> None:
        """Record one observed value. Evidence only ever widens."""
        self.presence_count += 1

        if value_type is None:
            self.null_count += 1
        else:
            self.inferred = join_types(self.inferred, value_type)

        if is_container(kind):
            self.saw_structured = True

        if len(self.sample_values) < MAX_SAMPLE_VALUES:
            self.sample_values.append(value)

    def add_unsampled(self, kind: JsonKind, is_null: bool) -> None:
        """Count a value seen after the sample; it adds no type evidence."""
        self.presence_count += 1
        if is_null:
            self.null_count += 1
        if is_container(kind):
            self.saw_structured = True

    @property
    def has_values(self) -> bool:
        """True if any non-null value was seen, sampled or not."""
        return self.presence_count > self.null_count

    def get_presence_fraction(self, total_records: int) -> float:
        """Fraction of records that contain this path."""
        return self.presence_count / total_records if total_records > 0 else 0.0

    def __repr__(self) -> str:
        inferred = self.inferred.value if self.inferred else None
        return f"TypeEvidence(path={self.path!r}, inferred={inferred}, presence={self.presence_count})"


class ColumnSchema:
    """
    Ordered mapping of column path to type evidence.

    Paths keep their insertion position forever. After `freeze()` the
    schema is read-only.
    """

    def __init__(self):
        self._columns: Dict[str, TypeEvidence] = {}
        self._leaf_paths: Set[str] = set()
        self.container_paths: Set[str] = set()
        self.frozen = False

    def __len__(self) -> int:
        return len(self._columns)

    def __contains__(self, path: str) -> bool:
        return path in self._columns

    def paths(self) -> List[str]:
        return list(self._columns)

    def evidence(self, path: str) -> TypeEvidence:
        return self._columns[path]

    def freeze(self) -> None:
        self.frozen = True

    def _check_mutable(self) -> None:
        if self.frozen:
            raise RuntimeError("ColumnSchema is frozen")

    def add_container(self, path: str) -> None:
        """
        Mark a path as holding a nested object.

        A leaf path that has only held nulls so far is dropped; the object
        paths beneath it replace it.

        Raises:
            StructuralShapeError: If the path held a plain value before
        """
        self._check_mutable()
        if path in self._leaf_paths:
            if self._columns[path].has_values:
                raise StructuralShapeError(
                    f"Path {path!r} holds a nested object here but a plain value in an earlier record")
            logger.debug(f"Path {path!r} held only nulls; reading it as a nested object")
            del self._columns[path]
            self._leaf_paths.discard(path)
        self.container_paths.add(path)

    def add_leaf(self, path: str) -> TypeEvidence:
        """Get the evidence for a leaf path, appending the path if it is new."""
        self._check_mutable()
        evidence = self._columns.get(path)
        if evidence is not None:
            return evidence

        if path in self.container_paths:
            raise StructuralShapeError(
                f"Path {path!r} holds a plain value here but a nested object in an earlier record")

        evidence = TypeEvidence(path)
        self._columns[path] = evidence
        self._leaf_paths.add(path)
        return evidence


class SchemaAccumulator:
    """
    Builds the ColumnSchema for one read.

    Records are observed strictly once, in stream order. When a sample size
    is set, only the first `max_sample_size` records contribute type
    evidence; later records still add their new paths and are counted
    as present or null.
    """

    def __init__(
        self,
        flattener: PathFlattener,
        parser: ValueParser,
        max_sample_size: Optional[int] = None,
    ):
        """
        Initialize accumulator.

        Args:
            flattener: Flattener whose record shape is already prepared
            parser: Per-value inference rules
            max_sample_size: Number of records used for type evidence
                (None = all records)
        """
        self.flattener = flattener
        self.parser = parser
        self.max_sample_size = max_sample_size
        self.schema = ColumnSchema()
        self.records_observed = 0

        # A header row fixes the columns even when no data row follows
        for name in flattener.positional_names or []:
            self.schema.add_leaf(name)

    def observe(self, record: Any) -> FlattenedRecord:
        """
        Add one record's paths and values to the schema.

        Returns:
            The flattened record

        Raises:
            StructuralShapeError: If the record disagrees with earlier records
        """
        flattened = self.flattener.flatten(record, self.records_observed)
        sampling = self.max_sample_size is None or self.records_observed < self.max_sample_size
        self.records_observed += 1

        for path in flattened.containers:
            self.schema.add_container(path)

        for path, value in flattened.values.items():
            kind = detect_json_kind(value)
            if kind == JsonKind.NULL and path in self.schema.container_paths:
                # null where other records hold an object: nothing to add
                continue
            evidence = self.schema.add_leaf(path)
            if sampling:
                evidence.add_value(value, kind, self.parser.infer(value, kind))
            else:
                evidence.add_unsampled(kind, self.parser.is_null(value, kind))

        return flattened

    def observe_all(self, records: List[Any]) -> List[FlattenedRecord]:
        flattened = [self.observe(record) for record in records]
        logger.debug(
            f"Discovered {len(self.schema)} columns across {self.records_observed} records")
        return flattened

    def finish(self) -> ColumnSchema:
        """Freeze and return the schema."""
        self.schema.freeze()
        return self.schema

    def get_summary(self) -> Dict[str, Any]:
        """
        Get a summary of the discovered schema.

        Returns:
            Dictionary with per-column evidence
        """
        return {
            "records_observed": self.records_observed,
            "total_columns": len(self.schema),
            "columns": {
                path: {
                    "inferred_type": evidence.inferred.value if evidence.inferred else None,
                    "presence": evidence.get_presence_fraction(self.records_observed),
                    "null_count": evidence.null_count,
                    "structured": evidence.saw_structured,
                    "sample_values": list(evidence.sample_values),
                }
                for path, evidence in ((p, self.schema.evidence(p)) for p in self.schema.paths())
            },
        }
