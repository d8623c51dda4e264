"""
Temporal value parsing.

Strings are matched against a fixed list of strptime formats per
granularity. A user-supplied format for a granularity is tried before the
built-in ones. The first matching format decides a value's granularity.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Optional, Tuple

from jsontable.ingest.column_type import ColumnType

ISO_DATE_FORMATS = ["%Y-%m-%d", "%Y/%m/%d"]
OTHER_DATE_FORMATS = ["%d.%m.%Y", "%d-%b-%Y", "%b %d, %Y", "%d %b %Y"]

TIME_FORMATS = ["%H:%M:%S", "%H:%M:%S.%f", "%H:%M", "%I:%M %p", "%I:%M:%S %p"]

ISO_DATE_TIME_FORMATS = [
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%d %H:%M",
]

INSTANT_FORMATS = [
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M%z",
    "%Y-%m-%d %H:%M:%S%z",
    "%Y-%m-%d %H:%M:%S.%f%z",
]

# Order in which granularities are tried for one value
GRANULARITY_ORDER = (
    ColumnType.INSTANT,
    ColumnType.LOCAL_DATE_TIME,
    ColumnType.LOCAL_DATE,
    ColumnType.LOCAL_TIME,
)


def month_first(locale: Optional[str]) -> bool:
    """US locales write slash dates month first; everyone else day first."""
    if not locale:
        return False
    return locale.replace("-", "_").upper().endswith("_US")


def _slash_date_formats(locale: Optional[str]) -> List[str]:
    if month_first(locale):
        return ["%m/%d/%Y", "%d/%m/%Y"]
    return ["%d/%m/%Y", "%m/%d/%Y"]


@dataclass
class TemporalFormats:
    """strptime formats per temporal column type, in priority order."""
    formats: Dict[ColumnType, List[str]] = field(default_factory=dict)
    # Explicitly configured formats; these are tried before numeric parsing
    user_formats: List[Tuple[ColumnType, str]] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        date_format: Optional[str] = None,
        time_format: Optional[str] = None,
        date_time_format: Optional[str] = None,
        locale: Optional[str] = None,
    ) -> "TemporalFormats":
        slash_dates = _slash_date_formats(locale)
        formats = {
            ColumnType.INSTANT: list(INSTANT_FORMATS),
            ColumnType.LOCAL_DATE_TIME: ISO_DATE_TIME_FORMATS
            + [f"{d} %H:%M:%S" for d in slash_dates]
            + [f"{d} %H:%M" for d in slash_dates],
            ColumnType.LOCAL_DATE: ISO_DATE_FORMATS + slash_dates + OTHER_DATE_FORMATS,
            ColumnType.LOCAL_TIME: list(TIME_FORMATS),
        }
        user_formats = []
        for column_type, user_format in (
            (ColumnType.LOCAL_DATE_TIME, date_time_format),
            (ColumnType.LOCAL_DATE, date_format),
            (ColumnType.LOCAL_TIME, time_format),
        ):
            if user_format:
                user_formats.append((column_type, user_format))
                formats[column_type] = [user_format] + [
                    f for f in formats[column_type] if f != user_format]
        return cls(formats=formats, user_formats=user_formats)

    def for_type(self, column_type: ColumnType) -> List[str]:
        return self.formats.get(column_type, [])

    def match_user_format(self, text: str) -> Optional[Tuple[ColumnType, Any]]:
        """Match text against the explicitly configured formats only."""
        for column_type, fmt in self.user_formats:
            value = _strptime(text, fmt, column_type)
            if value is not None:
                return column_type, value
        return None


def _strptime(text: str, fmt: str, column_type: ColumnType) -> Any:
    try:
        parsed = datetime.strptime(text, fmt)
    except ValueError:
        return None
    return _convert(parsed, column_type)


def _convert(parsed: datetime, column_type: ColumnType) -> Any:
    if column_type == ColumnType.LOCAL_DATE:
        return parsed.date()
    if column_type == ColumnType.LOCAL_TIME:
        return parsed.time()
    if column_type == ColumnType.INSTANT:
        if parsed.tzinfo is None:
            # A user date-time format may carry %z; anything naive here is UTC
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    if parsed.tzinfo is not None:
        # An offset-bearing user date-time format still yields an instant
        return None
    return parsed


def parse_as(text: str, column_type: ColumnType, formats: TemporalFormats) -> Any:
    """
    Parse text as one specific temporal type.

    Returns:
        The parsed date/time/datetime, or None if no format matches
    """
    for fmt in formats.for_type(column_type):
        value = _strptime(text, fmt, column_type)
        if value is not None:
            return value
    return None


def infer_temporal(text: str, formats: TemporalFormats) -> Optional[Tuple[ColumnType, Any]]:
    """
    Find the temporal granularity of a string.

    Args:
        text: Stripped string value
        formats: Formats to try

    Returns:
        (column type, parsed value) for the first matching format, or None
    """
    if not text or len(text) > 64 or not any(ch.isdigit() for ch in text):
        return None
    for column_type in GRANULARITY_ORDER:
        value = parse_as(text, column_type, formats)
        if value is not None:
            return column_type, value
    return None


def widen_temporal(value: Any, target: ColumnType) -> Any:
    """
    Widen a parsed temporal value along LOCAL_DATE < LOCAL_DATE_TIME < INSTANT.

    Dates become midnight date-times; naive date-times are taken as UTC.
    """
    if target == ColumnType.LOCAL_DATE:
        return value if type(value) is date else None
    if target == ColumnType.LOCAL_TIME:
        return value if isinstance(value, time) else None
    if type(value) is date:
        value = datetime.combine(value, time.min)
    if not isinstance(value, datetime):
        return None
    if target == ColumnType.LOCAL_DATE_TIME:
        return value if value.tzinfo is None else None
    if target == ColumnType.INSTANT:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return None
