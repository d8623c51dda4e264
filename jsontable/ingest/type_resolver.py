"""
Column type inference and resolution.

`ValueParser` decides the narrowest type of a single leaf value and parses
leaf values into a given column type. `TypeResolver` turns the evidence
gathered for each column into exactly one ColumnType, letting user
overrides win over evidence.
"""

import json
import logging
import math
import re
from dataclasses import dataclass, field
from typing import (
    Any,
    Callable,
    FrozenSet,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Union,
)

import numpy as np

from jsontable.ingest.column_type import (
    FLOATING_TYPES,
    INTEGER_RANGES,
    INTEGRAL_TYPES,
    TEMPORAL_TYPES,
    ColumnType,
    missing_sentinel,
)
from jsontable.ingest.errors import UnsupportedOverrideError
from jsontable.ingest.temporal import TemporalFormats, infer_temporal, parse_as, widen_temporal
from jsontable.ingest.value_tree import JsonKind, detect_json_kind

logger = logging.getLogger(__name__)

INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")
DECIMAL_PATTERN = re.compile(r"^[+-]?(\d+\.\d*|\.\d+|\d+)([eE][+-]?\d+)?$")

TRUE_STRINGS = frozenset({"true", "yes"})
FALSE_STRINGS = frozenset({"false", "no"})

# Column types an array or object leaf can be stored as
STRUCTURAL_TYPES = frozenset({ColumnType.STRING, ColumnType.SKIP})

FullOverride = Union[Sequence[ColumnType], Callable[[str], ColumnType]]
PartialOverride = Union[Mapping[str, ColumnType], Callable[[str], Optional[ColumnType]]]


class CoercionError(ValueError):
    """A single value cannot be parsed into the column's type."""
    pass


def fits_float32(value: float) -> bool:
    """True if a float survives a round trip through 32-bit precision."""
    with np.errstate(over="ignore"):
        narrowed = np.float32(value)
    if not np.isfinite(narrowed):
        return False
    return float(str(narrowed)) == value


def narrowest_integral(value: int, minimize: bool) -> ColumnType:
    for column_type in (ColumnType.SHORT, ColumnType.INTEGER, ColumnType.LONG):
        if column_type == ColumnType.SHORT and not minimize:
            continue
        low, high = INTEGER_RANGES[column_type]
        if low <= value <= high:
            return column_type
    return ColumnType.DOUBLE


def render_string(value: Any, kind: JsonKind) -> str:
    """Text form of a leaf value in a STRING column."""
    if kind == JsonKind.STRING:
        return value
    if kind == JsonKind.BOOLEAN:
        return "true" if value else "false"
    if kind in (JsonKind.ARRAY, JsonKind.OBJECT):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return json.dumps(value)


@dataclass
class ValueParser:
    """
    Per-value inference and parsing rules.

    The same rules are used while gathering evidence and while
    materializing, so a value that contributed evidence for a type always
    parses into that type (or any type above it in the lattice).
    """
    missing_value_indicators: FrozenSet[str] = frozenset()
    minimize_column_sizes: bool = False
    temporal_formats: TemporalFormats = field(default_factory=TemporalFormats.build)

    def is_null(self, value: Any, kind: JsonKind) -> bool:
        """JSON null, or a string configured as a missing-value indicator."""
        if kind == JsonKind.NULL:
            return True
        return kind == JsonKind.STRING and (
            value in self.missing_value_indicators
            or value.strip() in self.missing_value_indicators
        )

    def infer(self, value: Any, kind: Optional[JsonKind] = None) -> Optional[ColumnType]:
        """
        Narrowest column type able to hold one value.

        Returns:
            The inferred type, or None for null-like values (no evidence)
        """
        if kind is None:
            kind = detect_json_kind(value)
        if self.is_null(value, kind):
            return None

        if kind == JsonKind.BOOLEAN:
            return ColumnType.BOOLEAN
        if kind == JsonKind.INTEGER:
            return narrowest_integral(value, self.minimize_column_sizes)
        if kind == JsonKind.FLOAT:
            return self._infer_float(value)
        if kind in (JsonKind.ARRAY, JsonKind.OBJECT):
            return ColumnType.STRING
        return self._infer_string(value.strip())

    def _infer_float(self, value: float) -> ColumnType:
        if self.minimize_column_sizes and math.isfinite(value) and fits_float32(value):
            return ColumnType.FLOAT
        return ColumnType.DOUBLE

    def _infer_string(self, text: str) -> ColumnType:
        user_match = self.temporal_formats.match_user_format(text)
        if user_match is not None:
            return user_match[0]

        lowered = text.lower()
        if lowered in TRUE_STRINGS or lowered in FALSE_STRINGS:
            return ColumnType.BOOLEAN
        if INTEGER_PATTERN.match(text):
            return narrowest_integral(int(text), self.minimize_column_sizes)
        if DECIMAL_PATTERN.match(text):
            number = float(text)
            if math.isfinite(number):
                return self._infer_float(number)

        temporal = infer_temporal(text, self.temporal_formats)
        if temporal is not None:
            return temporal[0]
        return ColumnType.STRING

    def parse(self, value: Any, target: ColumnType, kind: Optional[JsonKind] = None) -> Any:
        """
        Parse one value into a column type.

        Null-like values become the type's missing sentinel.

        Raises:
            CoercionError: If the value cannot be represented in the type
        """
        if kind is None:
            kind = detect_json_kind(value)
        if self.is_null(value, kind):
            return missing_sentinel(target)

        if target == ColumnType.STRING:
            return render_string(value, kind)
        if kind in (JsonKind.ARRAY, JsonKind.OBJECT):
            raise CoercionError(f"{kind.value} value cannot be stored as {target.value}")

        if target == ColumnType.BOOLEAN:
            return self._parse_boolean(value, kind)
        if target in INTEGRAL_TYPES:
            return self._parse_integral(value, kind, target)
        if target in FLOATING_TYPES:
            return self._parse_floating(value, kind, target)
        if target in TEMPORAL_TYPES:
            return self._parse_temporal(value, kind, target)
        raise CoercionError(f"Cannot parse values as {target.value}")

    def _parse_boolean(self, value: Any, kind: JsonKind) -> bool:
        if kind == JsonKind.BOOLEAN:
            return value
        if kind == JsonKind.STRING:
            lowered = value.strip().lower()
            if lowered in TRUE_STRINGS:
                return True
            if lowered in FALSE_STRINGS:
                return False
        raise CoercionError(f"{value!r} is not a boolean")

    def _parse_integral(self, value: Any, kind: JsonKind, target: ColumnType) -> int:
        if kind == JsonKind.INTEGER:
            number = value
        elif kind == JsonKind.STRING and INTEGER_PATTERN.match(value.strip()):
            number = int(value.strip())
        else:
            raise CoercionError(f"{value!r} is not an integer")

        low, high = INTEGER_RANGES[target]
        if not low <= number <= high:
            raise CoercionError(f"{number} is out of range for {target.value}")
        return number

    def _parse_floating(self, value: Any, kind: JsonKind, target: ColumnType) -> float:
        if kind in (JsonKind.INTEGER, JsonKind.FLOAT):
            number = float(value)
        elif kind == JsonKind.STRING and DECIMAL_PATTERN.match(value.strip()):
            number = float(value.strip())
        else:
            raise CoercionError(f"{value!r} is not a number")

        if target == ColumnType.FLOAT:
            with np.errstate(over="ignore"):
                return float(np.float32(number))
        return number

    def _parse_temporal(self, value: Any, kind: JsonKind, target: ColumnType) -> Any:
        if kind != JsonKind.STRING:
            raise CoercionError(f"{value!r} is not a {target.value} string")
        text = value.strip()

        parsed = parse_as(text, target, self.temporal_formats)
        if parsed is None:
            matched = self.temporal_formats.match_user_format(text) or infer_temporal(
                text, self.temporal_formats)
            if matched is not None:
                parsed = widen_temporal(matched[1], target)
        if parsed is None:
            raise CoercionError(f"{value!r} is not a {target.value}")
        return parsed


class TypeOverrides:
    """
    User-supplied column types.

    `column_types` covers every column, either as a sequence indexed by
    column position or as a function of the column name.
    `column_types_partial` covers some columns, as a name-to-type mapping
    or as a function returning None for columns it leaves to inference.
    """

    def __init__(
        self,
        column_types: Optional[FullOverride] = None,
        column_types_partial: Optional[PartialOverride] = None,
    ):
        self.column_types = column_types
        self.column_types_partial = column_types_partial

    def __bool__(self) -> bool:
        return self.column_types is not None or self.column_types_partial is not None

    def validate(self, column_paths: Sequence[str], container_paths: Iterable[str]) -> None:
        """
        Check overrides against the discovered schema.

        Raises:
            UnsupportedOverrideError: For a positional list of the wrong
                length or a mapping entry that names a nested object
        """
        if self.column_types is not None and not callable(self.column_types):
            if len(self.column_types) != len(column_paths):
                raise UnsupportedOverrideError(
                    f"{len(self.column_types)} column types given for "
                    f"{len(column_paths)} columns")

        if isinstance(self.column_types_partial, Mapping):
            containers = set(container_paths)
            for name in self.column_types_partial:
                if name in containers:
                    raise UnsupportedOverrideError(
                        f"Column {name!r} is a nested object; override its leaf paths instead")
            unknown = set(self.column_types_partial) - set(column_paths)
            if unknown:
                logger.debug(f"Ignoring overrides for absent columns: {sorted(unknown)}")

    def lookup(self, name: str, index: int) -> Optional[ColumnType]:
        if self.column_types is not None:
            if callable(self.column_types):
                return self.column_types(name)
            return self.column_types[index]

        if self.column_types_partial is not None:
            if callable(self.column_types_partial):
                return self.column_types_partial(name)
            return self.column_types_partial.get(name)
        return None


@dataclass
class ResolvedColumn:
    path: str
    column_type: ColumnType
    overridden: bool = False


class TypeResolver:
    """Resolves one ColumnType per column from evidence and overrides."""

    def __init__(self, overrides: Optional[TypeOverrides] = None, prune_empty_columns: bool = False):
        self.overrides = overrides or TypeOverrides()
        self.prune_empty_columns = prune_empty_columns

    def resolve(self, evidence, override: Optional[ColumnType] = None) -> ColumnType:
        """
        Decide the type of one column.

        Args:
            evidence: The column's TypeEvidence
            override: User-chosen type, if any

        Raises:
            UnsupportedOverrideError: If an array-valued column is forced
                into a scalar type
        """
        if override is not None:
            if evidence.saw_structured and override not in STRUCTURAL_TYPES:
                raise UnsupportedOverrideError(
                    f"Column {evidence.path!r} holds arrays or objects and cannot be "
                    f"read as {override.value}")
            return override

        if evidence.inferred is None:
            return ColumnType.STRING
        return evidence.inferred

    def resolve_schema(self, schema) -> List[ResolvedColumn]:
        """
        Resolve every column of a frozen ColumnSchema, in column order.

        SKIP columns are kept here (the materializer drops them); empty
        columns are dropped when pruning is enabled.
        """
        paths = schema.paths()
        if self.overrides:
            self.overrides.validate(paths, schema.container_paths)

        resolved = []
        for index, path in enumerate(paths):
            evidence = schema.evidence(path)
            override = self.overrides.lookup(path, index) if self.overrides else None
            if override is None and self.prune_empty_columns and not evidence.has_values:
                logger.debug(f"Pruning column {path!r}: no non-null values")
                continue
            resolved.append(ResolvedColumn(
                path=path,
                column_type=self.resolve(evidence, override),
                overridden=override is not None,
            ))
        return resolved

