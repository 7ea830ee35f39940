"""Tests for the mutation statement builder."""

from __future__ import annotations

from hypothesis import given, strategies as st

from querycache.core.options import WriteOptions
from querycache.core.statements import (
    append_in_predicate,
    build_set_statement,
    placeholders,
    quote_identifier,
)


class TestBuildSetStatement:
    """INSERT/UPDATE selection and parameter order."""

    def test_update_by_index(self) -> None:
        statement = build_set_statement({"name": "a", "age": 5}, "users", 7)

        assert statement.sql == "UPDATE `users` SET `name`=?, `age`=? WHERE `id`=?"
        assert statement.params == ["a", 5, 7]

    def test_update_by_custom_index_key(self) -> None:
        statement = build_set_statement({"name": "a"}, "users", "x1", WriteOptions(index_key="uid"))

        assert statement.sql == "UPDATE `users` SET `name`=? WHERE `uid`=?"
        assert statement.params == ["a", "x1"]

    def test_insert_without_index_or_where(self) -> None:
        statement = build_set_statement({"name": "a", "age": 5}, "users")

        assert statement.sql == "INSERT `users` SET `name`=?, `age`=?"
        assert statement.params == ["a", 5]

    def test_falsy_index_means_insert(self) -> None:
        assert build_set_statement({"name": "a"}, "users", 0).sql.startswith("INSERT")

    def test_where_with_list_values_appends(self) -> None:
        options = WriteOptions(where="WHERE `team`=? AND `age`>?", where_vals=["red", 3])

        statement = build_set_statement({"name": "a"}, "users", options=options)

        assert statement.sql == "UPDATE `users` SET `name`=? WHERE `team`=? AND `age`>?"
        assert statement.params == ["a", "red", 3]

    def test_where_list_never_overwrites_set_values(self) -> None:
        # Given: two SET values and a list of two where values
        options = WriteOptions(where="WHERE `team`=? AND `age`>?", where_vals=["red", 3])

        # When
        statement = build_set_statement({"name": "a", "age": 4}, "users", options=options)

        # Then: list indexes 0 and 1 do not replace the SET values
        assert statement.params == ["a", 4, "red", 3]

    def test_where_with_positional_mapping(self) -> None:
        options = WriteOptions(where="WHERE `id`=?", where_vals={1: 9})

        statement = build_set_statement({"name": "a"}, "users", options=options)

        assert statement.params == ["a", 9]

    def test_where_mapping_overwrites_existing_position(self) -> None:
        options = WriteOptions(where="WHERE `id`=1", where_vals={0: "b"})

        statement = build_set_statement({"name": "a"}, "users", options=options)

        assert statement.params == ["b"]

    def test_where_without_values(self) -> None:
        options = WriteOptions(where="WHERE `id`=1")

        statement = build_set_statement({"name": "a"}, "users", options=options)

        assert statement.sql == "UPDATE `users` SET `name`=? WHERE `id`=1"
        assert statement.params == ["a"]

    def test_index_wins_over_where(self) -> None:
        options = WriteOptions(where="WHERE `team`=?", where_vals=["red"])

        statement = build_set_statement({"name": "a"}, "users", 2, options)

        assert statement.sql.endswith("WHERE `id`=?")
        assert statement.params == ["a", 2]

    def test_double_quote_identifiers(self) -> None:
        statement = build_set_statement({"name": "a"}, "users", 1, quote='"')

        assert statement.sql == 'UPDATE "users" SET "name"=? WHERE "id"=?'

    @given(
        st.dictionaries(
            st.text(alphabet="abcdefghij", min_size=1, max_size=6),
            st.integers(),
            min_size=1,
            max_size=8,
        ),
        st.integers(min_value=1),
    )
    def test_update_params_are_values_then_index(self, data: dict, index: int) -> None:
        statement = build_set_statement(data, "t", index)

        assert statement.params == [*data.values(), index]
        assert statement.sql.count("?") == len(data) + 1


class TestSqlHelpers:
    def test_quote_identifier(self) -> None:
        assert quote_identifier("users") == "`users`"

    def test_placeholders(self) -> None:
        assert placeholders(3) == "?,?,?"

    def test_append_in_predicate(self) -> None:
        sql = append_in_predicate("SELECT * FROM users WHERE", "`id`", 2)

        assert sql == "SELECT * FROM users WHERE `id` IN (?,?)"
