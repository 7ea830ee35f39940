"""Tests for index_by_key / group_by_key."""

from __future__ import annotations

from hypothesis import given, strategies as st

from querycache.core.shaping import flatten_groups, group_by_key, index_by_key

ITEMS = [
    {"id": 100, "catalog_id": 1, "name": "a"},
    {"id": 101, "catalog_id": 1, "name": "b"},
    {"id": 103, "catalog_id": 2, "name": "c"},
]


class TestIndexByKey:
    """Indexing by a column value."""

    def test_indexes_rows_by_column(self) -> None:
        result = index_by_key(ITEMS, "id")

        assert list(result) == [100, 101, 103]
        assert result[101]["name"] == "b"

    def test_last_duplicate_wins(self) -> None:
        rows = [{"id": 1, "v": "first"}, {"id": 1, "v": "second"}]

        assert index_by_key(rows, "id") == {1: {"id": 1, "v": "second"}}

    def test_missing_column_returns_input_unchanged(self) -> None:
        rows = [{"id": 1}, {"name": "no id"}]

        assert index_by_key(rows, "id") is rows

    def test_none_value_returns_input_unchanged(self) -> None:
        rows = [{"id": 1}, {"id": None}]

        assert index_by_key(rows, "id") is rows

    def test_accepts_mapping_of_rows(self) -> None:
        rows = {"x": {"id": 5}, "y": {"id": 6}}

        assert index_by_key(rows, "id") == {5: {"id": 5}, 6: {"id": 6}}

    def test_empty_input(self) -> None:
        assert index_by_key([], "id") == {}


class TestGroupByKey:
    """Grouping by a column value."""

    def test_full_row_grouping(self) -> None:
        result = group_by_key(ITEMS, "catalog_id")

        assert result == {1: [ITEMS[0], ITEMS[1]], 2: [ITEMS[2]]}

    def test_projected_grouping(self) -> None:
        result = group_by_key(ITEMS, "catalog_id", ["id", "missing"])

        assert result == {1: [{"id": 100}, {"id": 101}], 2: [{"id": 103}]}

    def test_direct_value_grouping(self) -> None:
        result = group_by_key(ITEMS, "catalog_id", ["id"], direct_value=True)

        assert result == {1: [100, 101], 2: [103]}

    def test_stops_at_first_row_missing_column(self) -> None:
        rows = [ITEMS[0], {"id": 102}, ITEMS[2]]

        assert group_by_key(rows, "catalog_id") == {1: [ITEMS[0]]}

    def test_empty_input_is_empty_mapping(self) -> None:
        assert group_by_key([], "catalog_id") == {}


rows_strategy = st.lists(
    st.fixed_dictionaries(
        {
            "id": st.integers(min_value=0, max_value=20),
            "group": st.sampled_from(["a", "b", "c"]),
            "value": st.text(max_size=5),
        }
    ),
    max_size=30,
)


class TestShapingProperties:
    """Properties that hold for any well-formed row list."""

    @given(rows_strategy)
    def test_indexing_is_deterministic_and_keeps_last(self, rows: list[dict]) -> None:
        result = index_by_key(rows, "id")

        assert result == index_by_key(list(rows), "id")
        assert set(result) == {row["id"] for row in rows}
        for key, row in result.items():
            assert row == [r for r in rows if r["id"] == key][-1]

    @given(rows_strategy)
    def test_full_row_grouping_round_trips(self, rows: list[dict]) -> None:
        groups = group_by_key(rows, "group")

        flattened = flatten_groups(groups)

        assert sorted(flattened, key=repr) == sorted(rows, key=repr)
        for key, members in groups.items():
            assert members == [row for row in rows if row["group"] == key]
