"""Tests for the CachedDatabaseManager write path, transactions and wiring."""

from __future__ import annotations

import pytest

from conftest import USERS, FakeCache, FakeDatabase
from querycache.config.models.settings import Settings
from querycache.core.envelope import ResultEnvelope
from querycache.core.trace import CollectedQuery, QueryTrace
from querycache.services.cached_db import CachedDatabaseManager
from querycache.shared.errors import ConfigurationError, DatabaseError


class TestQuery:
    """query(): statement execution and envelope building."""

    def test_update_reports_affected_rows(self, manager: CachedDatabaseManager, fake_db: FakeDatabase) -> None:
        fake_db.affected = 2

        result = manager.query("UPDATE users SET team = ? WHERE team = ?", ["green", "red"])

        assert result == ResultEnvelope.success(affected=2)
        assert fake_db.calls == [("execute", "UPDATE users SET team = ? WHERE team = ?", ["green", "red"])]

    def test_insert_reports_insert_id(self, manager: CachedDatabaseManager, fake_db: FakeDatabase) -> None:
        fake_db.execute_result = 4
        fake_db.affected = 1

        result = manager.query("INSERT INTO users (name) VALUES (?)", ["dave"])

        assert result == ResultEnvelope.success(affected=1, insert_id=4)

    def test_return_projects_single_field(self, manager: CachedDatabaseManager, fake_db: FakeDatabase) -> None:
        fake_db.execute_result = 4

        assert manager.query("INSERT INTO users (name) VALUES (?)", ["dave"], {"return": "insert_id"}) == 4

    def test_empty_query_fails_without_database(self, manager: CachedDatabaseManager, fake_db: FakeDatabase) -> None:
        result = manager.query("")

        assert result == ResultEnvelope.failure("Empty query!")
        assert fake_db.calls == []

    def test_database_error_becomes_failure(self, manager: CachedDatabaseManager, fake_db: FakeDatabase) -> None:
        fake_db.error = DatabaseError("Duplicate entry '1' for key 'PRIMARY'", error_code=1062)

        result = manager.query("INSERT INTO users (id) VALUES (1)")

        assert result.status is False
        assert result.error_code == 1062
        assert manager.query("INSERT INTO users (id) VALUES (1)", None, {"return": "status"}) is False

    def test_writes_never_touch_cache(self, manager: CachedDatabaseManager, fake_cache: FakeCache) -> None:
        manager.query("DELETE FROM users")

        assert fake_cache.calls == []


class TestSet:
    """set(): INSERT/UPDATE built from a column mapping."""

    def test_update_by_index(self, manager: CachedDatabaseManager, fake_db: FakeDatabase) -> None:
        fake_db.affected = 1

        result = manager.set({"name": "alicia"}, "users", 1)

        assert result == ResultEnvelope.success(affected=1)
        assert fake_db.calls == [("execute", "UPDATE `users` SET `name`=? WHERE `id`=?", ["alicia", 1])]

    def test_insert_returns_projected_id(self, manager: CachedDatabaseManager, fake_db: FakeDatabase) -> None:
        fake_db.execute_result = 9

        result = manager.set({"name": "erin", "team": "red"}, "users", options={"return": "insert_id"})

        assert result == 9
        assert fake_db.calls[0][1] == "INSERT `users` SET `name`=?, `team`=?"

    def test_update_with_where_values(self, manager: CachedDatabaseManager, fake_db: FakeDatabase) -> None:
        manager.set({"team": "green"}, "users", options={"where": "WHERE `team`=?", "where_vals": ["red"]})

        assert fake_db.calls == [("execute", "UPDATE `users` SET `team`=? WHERE `team`=?", ["green", "red"])]

    @pytest.mark.parametrize(("data", "table"), [({}, "users"), ({"name": "a"}, "")])
    def test_empty_input(self, data: dict, table: str, manager: CachedDatabaseManager, fake_db: FakeDatabase) -> None:
        assert manager.set(data, table) == ResultEnvelope.failure("Empty input")
        assert manager.set(data, table, options={"return": "message"}) == "Empty input"
        assert fake_db.calls == []

    def test_configured_index_column(self, fake_db: FakeDatabase, fake_cache: FakeCache) -> None:
        manager = CachedDatabaseManager(fake_db, fake_cache, index_column="uid")

        manager.set({"name": "a"}, "users", "u-1")

        assert fake_db.calls[0][1] == "UPDATE `users` SET `name`=? WHERE `uid`=?"


class TestTransactions:
    def test_start_commit_rollback_delegate(self, manager: CachedDatabaseManager, fake_db: FakeDatabase) -> None:
        manager.start()
        manager.rollback()

        assert manager.commit() is True
        assert fake_db.methods() == ["begin_transaction", "rollback", "commit"]

    def test_failed_commit_returns_false(self, manager: CachedDatabaseManager, fake_db: FakeDatabase) -> None:
        fake_db.commit_error = DatabaseError("deadlock", error_code=1213)
        trace = QueryTrace()

        assert manager.commit(trace, debug=True) is False
        assert trace.messages == ["commit: deadlock"]

    def test_transaction_context_commits(self, manager: CachedDatabaseManager, fake_db: FakeDatabase) -> None:
        with manager.transaction() as db:
            db.set({"name": "a"}, "users")

        assert fake_db.methods() == ["begin_transaction", "execute", "commit"]

    def test_transaction_context_rolls_back_and_reraises(
        self, manager: CachedDatabaseManager, fake_db: FakeDatabase
    ) -> None:
        with pytest.raises(RuntimeError, match="boom"):
            with manager.transaction():
                raise RuntimeError("boom")

        assert fake_db.methods() == ["begin_transaction", "rollback"]

    def test_connect_delegates(self, manager: CachedDatabaseManager, fake_db: FakeDatabase) -> None:
        assert manager.connect({"path": ":memory:"}) == "connection"
        assert fake_db.calls == [("connect", "", {"path": ":memory:"})]


class TestTracing:
    """Per-call QueryTrace sink."""

    def test_debug_messages_and_collected_queries(self, manager: CachedDatabaseManager, fake_db: FakeDatabase) -> None:
        trace = QueryTrace(collect_queries=True)
        cache = manager.cache
        cache.entries["user_1"] = USERS[0]

        manager.fetch_array("SELECT * FROM users WHERE", [1, 2], {"cache": True, "cache_prefix": "user_", "debug": True}, trace)

        assert trace.messages[0] == "fetch_array: Query: SELECT * FROM users WHERE | Bound values: [1, 2]"
        assert "fetch_array: Loaded from cache: {1: " in trace.messages[-2]
        assert trace.messages[-1].startswith("fetch_array: Saving in cache: {'user_2'")
        assert trace.queries == [CollectedQuery("SELECT * FROM users WHERE `id` IN (?)", (2,))]

    def test_full_hit_message(self, fake_db: FakeDatabase) -> None:
        manager = CachedDatabaseManager(fake_db, FakeCache({"user_1": USERS[0]}))
        trace = QueryTrace()

        manager.fetch_array("SELECT * FROM users WHERE", [1], {"cache": True, "cache_prefix": "user_", "debug": True}, trace)

        assert trace.messages[-1] == "fetch_array: Cached results found. Skipping query..."

    def test_debug_off_leaves_trace_empty(self, manager: CachedDatabaseManager) -> None:
        trace = QueryTrace()

        manager.query("DELETE FROM users", None, None, trace)

        assert trace.messages == []

    def test_separate_traces_do_not_share_state(self, manager: CachedDatabaseManager) -> None:
        first, second = QueryTrace(collect_queries=True), QueryTrace(collect_queries=True)

        manager.query("DELETE FROM a", None, None, first)
        manager.query("DELETE FROM b", None, None, second)

        assert [q.query for q in first.queries] == ["DELETE FROM a"]
        assert [q.query for q in second.queries] == ["DELETE FROM b"]


class TestFacadeWiring:
    def test_invalid_options_raise_before_any_call(
        self, manager: CachedDatabaseManager, fake_db: FakeDatabase, fake_cache: FakeCache
    ) -> None:
        with pytest.raises(ConfigurationError):
            manager.fetch_array("SELECT * FROM users WHERE", [1], {"cache_bycol_group": True, "arr_index": "id"})

        assert fake_db.calls == []
        assert fake_cache.calls == []

    @pytest.mark.parametrize("method", ["fetch_array", "fetch_column", "fetch_row"])
    def test_empty_read_query_fails(self, method: str, manager: CachedDatabaseManager, fake_db: FakeDatabase) -> None:
        assert getattr(manager, method)("") == ResultEnvelope.failure("Empty query!")
        assert fake_db.calls == []

    def test_from_settings(self, fake_db: FakeDatabase, fake_cache: FakeCache) -> None:
        settings = Settings(
            query={"identifier_quote": '"', "default_index_column": "uid"},
            cache={"enabled": False},
        )

        manager = CachedDatabaseManager.from_settings(settings, fake_db, fake_cache)
        manager.fetch_array("SELECT * FROM users WHERE", [1], {"cache": True, "cache_prefix": "user_"})
        manager.set({"name": "a"}, "users", 1)

        assert fake_cache.calls == []
        assert fake_db.calls[-1][1] == 'UPDATE "users" SET "name"=? WHERE "uid"=?'

    def test_shaping_helpers(self) -> None:
        assert CachedDatabaseManager.index_by_key(USERS, "name")["bob"] == USERS[1]
        assert list(CachedDatabaseManager.group_by_key(USERS, "team")) == ["red", "blue"]
