"""Options for reading JSON and JSONL documents into tables."""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from jsontable.config.settings import get_settings
from jsontable.ingest.source import Source
from jsontable.ingest.temporal import TemporalFormats
from jsontable.ingest.type_resolver import (
    FullOverride,
    PartialOverride,
    TypeOverrides,
    ValueParser,
)


@dataclass
class ReadOptions:
    """
    Everything that controls one read.

    Fields left as None fall back to the configured Settings.

    Attributes:
        source: Where the document comes from
        table_name: Name of the resulting table (defaults to the file name)
        header: For array-of-arrays input, whether the first row holds
            column names; None detects it
        path: JSON Pointer selecting the record list inside the document
        column_types: Type for every column, positional or by name function
        column_types_partial: Types for some columns, mapping or function
        date_format, time_format, date_time_format: strptime formats tried
            before the built-in ones
        locale: Decides day/month order of slash dates
        missing_value_indicators: Strings read as missing values
        minimize_column_sizes: Infer SHORT and FLOAT where values fit
        max_sample_size: Records used for type inference (None = all)
        prune_empty_columns: Drop columns that only ever held nulls
    """
    source: Source
    table_name: Optional[str] = None
    header: Optional[bool] = None
    path: Optional[str] = None
    column_types: Optional[FullOverride] = None
    column_types_partial: Optional[PartialOverride] = None
    date_format: Optional[str] = None
    time_format: Optional[str] = None
    date_time_format: Optional[str] = None
    locale: Optional[str] = None
    missing_value_indicators: Optional[Iterable[str]] = None
    minimize_column_sizes: Optional[bool] = None
    max_sample_size: Optional[int] = None
    prune_empty_columns: Optional[bool] = None

    def __post_init__(self):
        settings = get_settings()

        if self.table_name is None:
            self.table_name = self.source.name or settings.default_table_name
        if self.locale is None:
            self.locale = settings.locale
        if self.missing_value_indicators is None:
            self.missing_value_indicators = settings.missing_value_indicators
        self.missing_value_indicators = frozenset(self.missing_value_indicators)
        if self.minimize_column_sizes is None:
            self.minimize_column_sizes = settings.minimize_column_sizes
        if self.max_sample_size is None:
            self.max_sample_size = settings.max_sample_size
        if self.prune_empty_columns is None:
            self.prune_empty_columns = settings.prune_empty_columns

        if self.max_sample_size is not None and self.max_sample_size < 1:
            raise ValueError("max_sample_size must be at least 1")
        if self.column_types is not None and self.column_types_partial is not None:
            raise ValueError("Give either column_types or column_types_partial, not both")

    @classmethod
    def from_string(cls, text: str, **kwargs) -> "ReadOptions":
        return cls(source=Source.from_string(text), **kwargs)

    @classmethod
    def from_file(cls, path, **kwargs) -> "ReadOptions":
        return cls(source=Source.from_file(path), **kwargs)

    def value_parser(self) -> ValueParser:
        return ValueParser(
            missing_value_indicators=self.missing_value_indicators,
            minimize_column_sizes=self.minimize_column_sizes,
            temporal_formats=TemporalFormats.build(
                date_format=self.date_format,
                time_format=self.time_format,
                date_time_format=self.date_time_format,
                locale=self.locale,
            ),
        )

    def type_overrides(self) -> TypeOverrides:
        column_types = self.column_types
        if column_types is not None and not callable(column_types):
            column_types = list(column_types)
        return TypeOverrides(column_types=column_types, column_types_partial=self.column_types_partial)

    def describe(self) -> List[str]:
        """Names of the options that differ from the defaults, for logging."""
        defaults = {"header": None, "path": None, "column_types": None,
                    "column_types_partial": None, "date_format": None,
                    "time_format": None, "date_time_format": None}
        return [name for name, default in defaults.items() if getattr(self, name) != default]
