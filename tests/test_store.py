import sqlite3

import pytest

from todograph.errors import StorageError
from todograph.settings import Settings
from todograph.store import Filter, InMemoryStore, get_store
from todograph.store.sqlite import SQLiteStore


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    if request.param == "sqlite":
        s = SQLiteStore(str(tmp_path / "todos.db"))
    else:
        s = InMemoryStore()
    yield s
    s.close()


def seed(store, *titles):
    return [store.table("todos").insert([{"title": t}])[0] for t in titles]


class TestInsertAndSelect:
    def test_insert_applies_server_defaults(self, store):
        [row] = store.table("todos").insert([{"title": "Buy milk"}])
        assert row["id"]
        assert row["title"] == "Buy milk"
        assert row["completed"] is False
        assert row["flagged"] is False
        assert row["created_at"]

    def test_insert_requires_title(self, store):
        with pytest.raises(StorageError):
            store.table("todos").insert([{"completed": True}])

    def test_unknown_column(self, store):
        with pytest.raises(StorageError):
            store.table("todos").insert([{"title": "x", "owner": "me"}])
        with pytest.raises(StorageError):
            store.table("todos").select([Filter.eq("owner", "me")])

    def test_unknown_table(self, store):
        with pytest.raises(StorageError):
            store.table("projects")

    def test_filters(self, store):
        a, b, c = seed(store, "a", "b", "c")
        todos = store.table("todos")
        assert [r["title"] for r in todos.select([Filter.eq("id", b["id"])])] == ["b"]
        assert {r["title"] for r in todos.select([Filter.neq("id", b["id"])])} == {"a", "c"}
        assert {r["title"] for r in todos.select([Filter.in_("id", [a["id"], c["id"]])])} == {"a", "c"}
        assert todos.select([Filter.in_("id", [])]) == []
        assert len(todos.select([Filter.not_null("id")])) == 3

    def test_order_and_limit(self, store):
        seed(store, "first", "second", "third")
        todos = store.table("todos")
        newest = todos.select(order="created_at", descending=True)
        assert [r["title"] for r in newest] == ["third", "second", "first"]
        oldest = todos.select(order="created_at", limit=2)
        assert [r["title"] for r in oldest] == ["first", "second"]

    def test_selected_rows_are_copies(self, store):
        [row] = seed(store, "a")
        fetched = store.table("todos").select()[0]
        fetched["title"] = "mutated"
        assert store.table("todos").select()[0]["title"] == "a"
        assert row["title"] == "a"


class TestUpdateAndDelete:
    def test_update_returns_rows(self, store):
        a, b = seed(store, "a", "b")
        updated = store.table("todos").update({"completed": True}, [Filter.eq("id", a["id"])])
        assert len(updated) == 1
        assert updated[0]["completed"] is True
        assert updated[0]["title"] == "a"
        other = store.table("todos").select([Filter.eq("id", b["id"])])[0]
        assert other["completed"] is False

    def test_update_missing_row(self, store):
        assert store.table("todos").update({"completed": True}, [Filter.eq("id", "nope")]) == []

    def test_update_and_delete_require_filter(self, store):
        seed(store, "a")
        with pytest.raises(StorageError):
            store.table("todos").update({"completed": True}, [])
        with pytest.raises(StorageError):
            store.table("todos").delete([])
        assert len(store.table("todos").select()) == 1

    def test_delete_returns_deleted_rows(self, store):
        a, _ = seed(store, "a", "b")
        deleted = store.table("todos").delete([Filter.eq("id", a["id"])])
        assert [r["title"] for r in deleted] == ["a"]
        assert [r["title"] for r in store.table("todos").select()] == ["b"]

    def test_delete_everything_with_single_filter(self, store):
        seed(store, "a", "b", "c")
        assert len(store.table("todos").delete([Filter.not_null("id")])) == 3
        assert store.table("todos").select() == []


class TestAssignmentsTable:
    def test_pair_is_unique(self, store):
        [todo] = seed(store, "a")
        [user] = store.table("users").insert([{"name": "Alice", "email": "a@x.com"}])
        links = store.table("todo_assignments")
        links.insert([{"todo_id": todo["id"], "user_id": user["id"]}])
        with pytest.raises(StorageError):
            links.insert([{"todo_id": todo["id"], "user_id": user["id"]}])
        assert len(links.select()) == 1


class TestSQLiteSpecifics:
    def test_cascade_on_delete(self, tmp_path):
        store = SQLiteStore(str(tmp_path / "cascade.db"))
        [todo] = store.table("todos").insert([{"title": "a"}])
        [user] = store.table("users").insert([{"name": "Alice", "email": "a@x.com"}])
        store.table("todo_assignments").insert([{"todo_id": todo["id"], "user_id": user["id"]}])

        store.table("users").delete([Filter.eq("id", user["id"])])

        assert store.table("todo_assignments").select() == []

    def test_foreign_keys_enforced(self, tmp_path):
        store = SQLiteStore(str(tmp_path / "fk.db"))
        with pytest.raises(StorageError):
            store.table("todo_assignments").insert([{"todo_id": "x", "user_id": "y"}])

    def test_data_survives_reopen(self, tmp_path):
        path = str(tmp_path / "persist.db")
        SQLiteStore(path).table("todos").insert([{"title": "kept"}])
        rows = SQLiteStore(path).table("todos").select()
        assert [r["title"] for r in rows] == ["kept"]

    def test_booleans_stored_as_integers(self, tmp_path):
        path = str(tmp_path / "bools.db")
        SQLiteStore(path).table("todos").insert([{"title": "x", "flagged": True}])
        conn = sqlite3.connect(path)
        try:
            assert conn.execute("SELECT completed, flagged FROM todos").fetchone() == (0, 1)
        finally:
            conn.close()


class TestFactory:
    def test_memory_default(self):
        assert get_store(Settings()).backend == "memory"

    def test_sqlite(self, tmp_path):
        store = get_store(Settings(persistence_backend="sqlite", sqlite_db_path=str(tmp_path / "f.db")))
        assert store.backend == "sqlite"

    def test_postgrest_without_url_falls_back(self):
        assert get_store(Settings(persistence_backend="postgrest")).backend == "memory"

    def test_postgrest(self):
        store = get_store(Settings(persistence_backend="postgrest", postgrest_url="http://store.test/rest/v1"))
        try:
            assert store.backend == "postgrest"
        finally:
            store.close()
