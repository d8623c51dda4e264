"""
Column types, missing-value sentinels and the widening lattice.

Two chains are ordered by widening:

    SHORT < INTEGER < LONG < FLOAT < DOUBLE
    LOCAL_DATE < LOCAL_DATE_TIME < INSTANT

BOOLEAN and LOCAL_TIME stand alone. Joining types from different chains
gives STRING, which sits above everything. SKIP is only ever chosen by an
override and drops the column.
"""

from enum import Enum
from typing import Any, Optional


class ColumnType(str, Enum):
    """Concrete type held by one column."""
    BOOLEAN = "boolean"
    SHORT = "short"
    INTEGER = "integer"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    LOCAL_DATE = "local_date"
    LOCAL_TIME = "local_time"
    LOCAL_DATE_TIME = "local_date_time"
    INSTANT = "instant"
    SKIP = "skip"


NUMERIC_CHAIN = (
    ColumnType.SHORT,
    ColumnType.INTEGER,
    ColumnType.LONG,
    ColumnType.FLOAT,
    ColumnType.DOUBLE,
)
TEMPORAL_CHAIN = (
    ColumnType.LOCAL_DATE,
    ColumnType.LOCAL_DATE_TIME,
    ColumnType.INSTANT,
)
INTEGRAL_TYPES = frozenset(NUMERIC_CHAIN[:3])
FLOATING_TYPES = frozenset(NUMERIC_CHAIN[3:])
TEMPORAL_TYPES = frozenset(TEMPORAL_CHAIN + (ColumnType.LOCAL_TIME,))

# Inclusive value ranges; the minimum of each signed width is reserved
INTEGER_RANGES = {
    ColumnType.SHORT: (-(2 ** 15) + 1, 2 ** 15 - 1),
    ColumnType.INTEGER: (-(2 ** 31) + 1, 2 ** 31 - 1),
    ColumnType.LONG: (-(2 ** 63) + 1, 2 ** 63 - 1),
}

MISSING_SENTINELS = {
    ColumnType.BOOLEAN: None,
    ColumnType.SHORT: -(2 ** 15),
    ColumnType.INTEGER: -(2 ** 31),
    ColumnType.LONG: -(2 ** 63),
    ColumnType.FLOAT: float("nan"),
    ColumnType.DOUBLE: float("nan"),
    ColumnType.STRING: "",
    ColumnType.LOCAL_DATE: None,
    ColumnType.LOCAL_TIME: None,
    ColumnType.LOCAL_DATE_TIME: None,
    ColumnType.INSTANT: None,
    ColumnType.SKIP: None,
}


def missing_sentinel(column_type: ColumnType) -> Any:
    """Out-of-band value that marks an absent cell in a column of this type."""
    return MISSING_SENTINELS[column_type]


def is_missing(column_type: ColumnType, value: Any) -> bool:
    """Check whether a materialized cell is the missing sentinel for its type."""
    if column_type in FLOATING_TYPES:
        return value != value  # NaN
    return value == MISSING_SENTINELS[column_type] and type(value) is type(MISSING_SENTINELS[column_type])


def join_types(left: Optional[ColumnType], right: Optional[ColumnType]) -> Optional[ColumnType]:
    """
    Least upper bound of two types in the widening lattice.

    None means "no evidence" and is the identity element.
    """
    if left is None:
        return right
    if right is None or left == right:
        return left
    if ColumnType.STRING in (left, right):
        return ColumnType.STRING

    for chain in (NUMERIC_CHAIN, TEMPORAL_CHAIN):
        if left in chain and right in chain:
            return max(left, right, key=chain.index)

    return ColumnType.STRING


def can_widen(source: ColumnType, target: ColumnType) -> bool:
    """True if every value of `source` is representable in `target`."""
    return join_types(source, target) == target
