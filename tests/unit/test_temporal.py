"""
Unit tests for temporal parsing.
"""

from datetime import date, datetime, time, timezone

from jsontable.ingest.column_type import ColumnType
from jsontable.ingest.temporal import (
    TemporalFormats,
    infer_temporal,
    month_first,
    parse_as,
    widen_temporal,
)


class TestInferTemporal:
    """Tests for granularity detection."""

    def setup_method(self):
        self.formats = TemporalFormats.build(locale="en_US")

    def test_local_date(self):
        assert infer_temporal("1991-04-03", self.formats) == (ColumnType.LOCAL_DATE, date(1991, 4, 3))

    def test_local_time(self):
        assert infer_temporal("10:15", self.formats) == (ColumnType.LOCAL_TIME, time(10, 15))
        assert infer_temporal("10:15:30", self.formats) == (ColumnType.LOCAL_TIME, time(10, 15, 30))

    def test_local_date_time(self):
        result = infer_temporal("2020-12-03T10:15:30", self.formats)
        assert result == (ColumnType.LOCAL_DATE_TIME, datetime(2020, 12, 3, 10, 15, 30))

        result = infer_temporal("2020-12-03 10:15", self.formats)
        assert result == (ColumnType.LOCAL_DATE_TIME, datetime(2020, 12, 3, 10, 15))

    def test_instant_with_zulu(self):
        column_type, value = infer_temporal("2007-12-03T10:15:30.00Z", self.formats)

        assert column_type == ColumnType.INSTANT
        assert value == datetime(2007, 12, 3, 10, 15, 30, tzinfo=timezone.utc)

    def test_instant_normalized_to_utc(self):
        _, value = infer_temporal("2007-12-03T12:15:30+02:00", self.formats)
        assert value == datetime(2007, 12, 3, 10, 15, 30, tzinfo=timezone.utc)
        assert value.utcoffset().total_seconds() == 0

    def test_not_temporal(self):
        assert infer_temporal("hello", self.formats) is None
        assert infer_temporal("", self.formats) is None
        assert infer_temporal("2020-13-45", self.formats) is None


class TestLocaleOrdering:
    """Tests for slash-date day/month order."""

    def test_month_first_locales(self):
        assert month_first("en_US") is True
        assert month_first("en-us") is True
        assert month_first("de_DE") is False
        assert month_first(None) is False

    def test_us_slash_date(self):
        formats = TemporalFormats.build(locale="en_US")
        assert infer_temporal("03/04/2020", formats) == (ColumnType.LOCAL_DATE, date(2020, 3, 4))

    def test_european_slash_date(self):
        formats = TemporalFormats.build(locale="de_DE")
        assert infer_temporal("03/04/2020", formats) == (ColumnType.LOCAL_DATE, date(2020, 4, 3))

    def test_unambiguous_slash_date_falls_back(self):
        formats = TemporalFormats.build(locale="de_DE")
        assert infer_temporal("12/31/2020", formats) == (ColumnType.LOCAL_DATE, date(2020, 12, 31))


class TestUserFormats:
    """Tests for explicitly configured formats."""

    def test_user_date_format_tried_first(self):
        formats = TemporalFormats.build(date_format="%Y%m%d")

        assert formats.for_type(ColumnType.LOCAL_DATE)[0] == "%Y%m%d"
        assert formats.match_user_format("20200131") == (ColumnType.LOCAL_DATE, date(2020, 1, 31))

    def test_user_date_time_format(self):
        formats = TemporalFormats.build(date_time_format="%d.%m.%Y %H.%M")
        assert parse_as("31.01.2020 10.30", ColumnType.LOCAL_DATE_TIME, formats) == datetime(2020, 1, 31, 10, 30)

    def test_no_user_formats(self):
        assert TemporalFormats.build().match_user_format("20200131") is None


class TestWidenTemporal:
    """Tests for widening along the temporal chain."""

    def test_date_to_date_time(self):
        assert widen_temporal(date(2020, 1, 2), ColumnType.LOCAL_DATE_TIME) == datetime(2020, 1, 2)

    def test_date_to_instant(self):
        result = widen_temporal(date(2020, 1, 2), ColumnType.INSTANT)
        assert result == datetime(2020, 1, 2, tzinfo=timezone.utc)

    def test_date_time_not_narrowed_to_date(self):
        assert widen_temporal(datetime(2020, 1, 2, 3, 4), ColumnType.LOCAL_DATE) is None

    def test_time_does_not_widen_to_date_time(self):
        assert widen_temporal(time(3, 4), ColumnType.LOCAL_DATE_TIME) is None
