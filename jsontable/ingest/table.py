"""Typed tables produced by a read."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple, Union

import numpy as np

from jsontable.ingest.column_type import ColumnType, is_missing

NUMPY_DTYPES = {
    ColumnType.SHORT: np.int16,
    ColumnType.INTEGER: np.int32,
    ColumnType.LONG: np.int64,
    ColumnType.FLOAT: np.float32,
    ColumnType.DOUBLE: np.float64,
}


@dataclass
class Column:
    """One named, typed column."""
    name: str
    column_type: ColumnType
    values: List[Any] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, row: int) -> Any:
        return self.values[row]

    def append(self, value: Any) -> None:
        self.values.append(value)

    def is_missing(self, row: int) -> bool:
        return is_missing(self.column_type, self.values[row])

    def count_missing(self) -> int:
        return sum(1 for row in range(len(self.values)) if self.is_missing(row))

    def to_numpy(self) -> np.ndarray:
        """Column values as a numpy array; non-numeric types use dtype=object."""
        dtype = NUMPY_DTYPES.get(self.column_type, object)
        return np.array(self.values, dtype=dtype)


@dataclass
class Table:
    """Ordered columns of equal length."""
    name: str
    columns: List[Column] = field(default_factory=list)
    # Row count when there are no columns (e.g. every record was empty)
    record_count: int = 0

    @property
    def row_count(self) -> int:
        return len(self.columns[0]) if self.columns else self.record_count

    @property
    def column_count(self) -> int:
        return len(self.columns)

    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    def type_array(self) -> List[ColumnType]:
        return [column.column_type for column in self.columns]

    def column(self, key: Union[str, int]) -> Column:
        """Column by name or position."""
        if isinstance(key, int):
            return self.columns[key]
        for column in self.columns:
            if column.name == key:
                return column
        raise KeyError(f"No column named {key!r} in table {self.name!r}")

    def rows(self) -> Iterator[Tuple[Any, ...]]:
        for row in range(self.row_count):
            yield tuple(column.values[row] for column in self.columns)

    def to_dict(self) -> Dict[str, List[Any]]:
        return {column.name: list(column.values) for column in self.columns}

    def __repr__(self) -> str:
        return f"Table(name={self.name!r}, rows={self.row_count}, columns={self.column_count})"
