"""
Unit tests for schema discovery.
"""

import pytest

from jsontable.ingest.column_type import ColumnType
from jsontable.ingest.errors import StructuralShapeError
from jsontable.ingest.flattener import PathFlattener
from jsontable.ingest.schema_accumulator import ColumnSchema, SchemaAccumulator
from jsontable.ingest.type_resolver import ValueParser
from jsontable.ingest.value_tree import JsonKind


def _accumulate(records, max_sample_size=None, header=None):
    flattener = PathFlattener(header=header)
    records = flattener.prepare(records)
    accumulator = SchemaAccumulator(
        flattener,
        ValueParser(missing_value_indicators=frozenset({"", "NA"})),
        max_sample_size=max_sample_size,
    )
    accumulator.observe_all(records)
    return accumulator


class TestColumnOrder:
    """Tests for first-seen column ordering."""

    def test_first_seen_order(self):
        accumulator = _accumulate([
            {"a": 1, "b": 2},
            {"b": 3, "c": 4, "a": 5},
            {"d": 1, "c": 2},
        ])
        assert accumulator.schema.paths() == ["a", "b", "c", "d"]

    def test_order_independent_of_later_key_order(self):
        first = _accumulate([{"x": 1, "y": 2}, {"y": 1, "x": 2, "z": 3}])
        second = _accumulate([{"x": 1, "y": 2}, {"z": 3, "x": 2, "y": 1}])
        assert first.schema.paths() == second.schema.paths() == ["x", "y", "z"]

    def test_absent_columns_are_kept(self):
        accumulator = _accumulate([{"a": 1, "b": 2}, {"a": 3}])

        assert accumulator.schema.paths() == ["a", "b"]
        assert accumulator.schema.evidence("b").presence_count == 1

    def test_empty_records_advance_count(self):
        accumulator = _accumulate([{}, {"a": 1}, {}])

        assert accumulator.records_observed == 3
        assert accumulator.schema.paths() == ["a"]


class TestEvidence:
    """Tests for type evidence gathered per column."""

    def test_incomplete_indexes(self):
        accumulator = _accumulate([{"A": "123", "B": "456"}, {"B": "789", "C": "123"}])
        schema = accumulator.schema

        assert [schema.evidence(p).inferred for p in schema.paths()] == [ColumnType.INTEGER] * 3

    def test_evidence_widens(self):
        accumulator = _accumulate([{"v": 1}, {"v": 2.5}, {"v": None}])
        evidence = accumulator.schema.evidence("v")

        assert evidence.inferred == ColumnType.DOUBLE
        assert evidence.null_count == 1
        assert evidence.presence_count == 3

    def test_structured_values_flagged(self):
        accumulator = _accumulate([{"tags": ["a", "b"]}])
        assert accumulator.schema.evidence("tags").saw_structured is True

    def test_sampling_limits_evidence(self):
        accumulator = _accumulate([{"a": 1}, {"a": "x", "b": 2}], max_sample_size=1)
        schema = accumulator.schema

        assert schema.paths() == ["a", "b"]
        assert schema.evidence("a").inferred == ColumnType.INTEGER
        assert schema.evidence("b").inferred is None

    def test_unsampled_values_count_as_present(self):
        accumulator = _accumulate([{"a": 1}, {"a": 2, "b": "x"}, {"b": None}], max_sample_size=1)
        evidence = accumulator.schema.evidence("b")

        assert evidence.inferred is None
        assert evidence.presence_count == 2
        assert evidence.null_count == 1
        assert evidence.has_values is True

    def test_only_nulls_has_no_values(self):
        accumulator = _accumulate([{"a": None}, {"a": "NA"}])
        assert accumulator.schema.evidence("a").has_values is False

    def test_summary(self):
        summary = _accumulate([{"a": 1}, {"b": "x"}]).get_summary()

        assert summary["records_observed"] == 2
        assert summary["columns"]["a"]["inferred_type"] == "integer"
        assert summary["columns"]["a"]["presence"] == 0.5
        assert summary["columns"]["b"]["sample_values"] == ["x"]


class TestNestingConsistency:
    """Tests for paths seen at different nesting depths."""

    def test_nested_then_scalar(self):
        with pytest.raises(StructuralShapeError):
            _accumulate([{"b": {"c": 1}}, {"b": 2}])

    def test_scalar_then_nested(self):
        with pytest.raises(StructuralShapeError):
            _accumulate([{"b": 2}, {"b": {"c": 1}}])

    def test_deeper_nesting_at_same_path(self):
        with pytest.raises(StructuralShapeError):
            _accumulate([{"b": {"c": 1}}, {"b": {"c": {"d": 2}}}])

    def test_null_where_object_expected_is_ignored(self):
        accumulator = _accumulate([{"b": {"c": 1}}, {"b": None}])
        assert accumulator.schema.paths() == ["b.c"]

    def test_null_then_object_is_read_as_object(self):
        accumulator = _accumulate([{"b": None}, {"b": {"c": 1}}, {"b": None}])

        assert accumulator.schema.paths() == ["b.c"]
        assert accumulator.schema.evidence("b.c").inferred == ColumnType.INTEGER

    def test_dotted_key_beside_plain_key(self):
        accumulator = _accumulate([{"a": 1, "a.b": 2}])
        assert accumulator.schema.paths() == ["a", "a.b"]

    def test_dotted_key_then_plain_key(self):
        accumulator = _accumulate([{"a.b": 2}, {"a": 1}])
        assert accumulator.schema.paths() == ["a.b", "a"]

    def test_dotted_key_merges_with_nested_path(self):
        accumulator = _accumulate([{"a.b": 1}, {"a": {"b": 2}}])
        assert accumulator.schema.paths() == ["a.b"]

    def test_consistent_nesting(self):
        accumulator = _accumulate([{"a": 1, "b": {"c": 1}}, {"b": {"c": 2}}])
        assert accumulator.schema.paths() == ["a", "b.c"]


class TestColumnSchema:
    """Tests for schema freezing."""

    def test_frozen_schema_rejects_changes(self):
        schema = ColumnSchema()
        schema.add_leaf("a")
        schema.freeze()

        with pytest.raises(RuntimeError):
            schema.add_leaf("b")

    def test_null_only_leaf_becomes_container(self):
        schema = ColumnSchema()
        schema.add_leaf("b").add_value(None, JsonKind.NULL, None)
        schema.add_container("b")

        assert "b" not in schema
        assert schema.container_paths == {"b"}

    def test_known_path_keeps_position(self):
        schema = ColumnSchema()
        schema.add_leaf("a")
        schema.add_leaf("b")
        schema.add_leaf("a")

        assert schema.paths() == ["a", "b"]


class TestPositionalHeader:
    """Tests for columns fixed by a header row."""

    def test_header_only_input_keeps_columns(self):
        accumulator = _accumulate([["Date", "Value"]], header=True)

        assert accumulator.records_observed == 0
        assert accumulator.schema.paths() == ["Date", "Value"]
        assert accumulator.schema.evidence("Date").inferred is None

    def test_header_fixes_column_order(self):
        accumulator = _accumulate([["b", "a"], [1, None], [2, "x"]])
        assert accumulator.schema.paths() == ["b", "a"]
