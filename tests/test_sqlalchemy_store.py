"""Tests for the SQLite-backed document store."""

from famfin.database.factories import create_sqlite_store
from famfin.database.repository import LedgerRepository


def test_get_missing_key(temp_db):
    assert temp_db.get("categories") is None


def test_set_get_and_replace(temp_db):
    temp_db.set("categories", "[]")
    assert temp_db.get("categories") == "[]"

    temp_db.set("categories", '[{"id": "1"}]')
    assert temp_db.get("categories") == '[{"id": "1"}]'
    assert temp_db.list_keys() == ["categories"]


def test_delete(temp_db):
    temp_db.set("transactions", "[]")
    temp_db.delete("transactions")
    temp_db.delete("transactions")
    assert temp_db.get("transactions") is None
    assert temp_db.list_keys() == []


def test_list_keys_sorted(temp_db):
    for key in ("transactions", "bankAccounts", "categories"):
        temp_db.set(key, "[]")
    assert temp_db.list_keys() == ["bankAccounts", "categories", "transactions"]


def test_documents_survive_reconnect(temp_db, make_transaction):
    repo = LedgerRepository(temp_db)
    repo.save_transactions([make_transaction(id="t1")])
    temp_db.disconnect()

    reopened = create_sqlite_store(database_path=temp_db.database_path)
    try:
        assert [t.id for t in LedgerRepository(reopened).get_transactions()] == ["t1"]
    finally:
        reopened.disconnect()


def test_factory_creates_parent_directories(tmp_path):
    path = tmp_path / "nested" / "dir" / "famfin.db"
    store = create_sqlite_store(database_path=str(path))
    try:
        store.set("ccClosingDays", "{}")
    finally:
        store.disconnect()
    assert path.exists()
