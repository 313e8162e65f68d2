"""Tests for backup export and import."""

import json
from datetime import datetime

from famfin.database.base import (
    CATEGORIES_KEY,
    COPYRIGHT_IMAGE_KEY,
    TRANSACTIONS_KEY,
)
from famfin.database.memory import MemoryStore
from famfin.database.repository import LedgerRepository
from famfin.domain.backup import (
    BOM,
    HEADER,
    BackupService,
    default_backup_name,
    quote_value,
)


def test_quoting_doubles_embedded_quotes():
    assert quote_value('[{"id":"1"}]') == '"[{""id"":""1""}]"'


def test_default_backup_name():
    assert default_backup_name(datetime(2025, 3, 7, 9, 5)) == "famfin_backup_2025-03-07_09-05.csv"


def test_export_layout(ledger, store):
    store.set(COPYRIGHT_IMAGE_KEY, "data:image/png;base64,AAAA")

    text = BackupService(ledger).export_csv()

    assert text.startswith(BOM + HEADER + "\n")
    lines = text[len(BOM):].split("\n")
    keys = [line.split(";", 1)[0] for line in lines[1:]]
    assert keys == ["categories", "paymentMethods", "bankAccounts", COPYRIGHT_IMAGE_KEY]
    assert lines[-1] == f'{COPYRIGHT_IMAGE_KEY};"data:image/png;base64,AAAA"'


def test_export_then_import_restores_documents(ledger, store, transaction_service, make_transaction):
    transaction_service.save_transaction(make_transaction(description='Say "cheese"'))
    ledger.save_closing_days({"2025-2": 20})
    text = BackupService(ledger).export_csv()

    fresh_store = MemoryStore()
    assert BackupService(LedgerRepository(fresh_store)).import_csv(text)

    for key in store.list_keys():
        assert fresh_store.get(key) == store.get(key)


def test_import_replaces_existing_values(repo, store):
    store.set(CATEGORIES_KEY, "[]")
    value = json.dumps([{"id": "9", "name": "Pets", "type": "Expense"}])

    assert BackupService(repo).import_csv(f"{HEADER}\n{CATEGORIES_KEY};{quote_value(value)}\n")

    assert store.get(CATEGORIES_KEY) == value
    assert [c.name for c in repo.get_categories()] == ["Pets"]


def test_import_rejects_missing_header(repo, store):
    assert BackupService(repo).import_csv("categories;\"[]\"") is False
    assert store.list_keys() == []


def test_import_skips_unknown_keys_and_blank_lines(repo, store):
    text = f'{BOM}{HEADER}\r\n\r\nsomething;"x"\r\n{TRANSACTIONS_KEY};"[]"\r\n'

    assert BackupService(repo).import_csv(text)

    assert store.list_keys() == [TRANSACTIONS_KEY]
    assert store.get(TRANSACTIONS_KEY) == "[]"


def test_file_round_trip(ledger, store, backup_dir):
    service = BackupService(ledger)
    path = service.export_to_file(str(backup_dir))

    assert path.parent == backup_dir
    assert path.name.startswith("famfin_backup_")
    assert path.read_bytes().startswith(BOM.encode("utf-8"))

    fresh_store = MemoryStore()
    assert BackupService(LedgerRepository(fresh_store)).import_from_file(str(path))
    assert fresh_store.get(CATEGORIES_KEY) == store.get(CATEGORIES_KEY)


def test_export_to_named_file(ledger, backup_dir):
    target = backup_dir / "mine.csv"
    assert BackupService(ledger).export_to_file(str(target)) == target
    assert target.exists()


def test_import_reads_quoted_values_with_newlines_and_delimiters(repo, store):
    value = 'data:image/png;base64,AA\nBB "x"'
    text = f"{BOM}{HEADER}\n{COPYRIGHT_IMAGE_KEY};{quote_value(value)}\n{TRANSACTIONS_KEY};\"[]\"\n"

    assert BackupService(repo).import_csv(text)

    assert store.get(COPYRIGHT_IMAGE_KEY) == value
    assert store.get(TRANSACTIONS_KEY) == "[]"
