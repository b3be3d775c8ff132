import sqlite3
import types

import pytest

from items import Item, ItemPersistError, ItemStore


def test_save_assigns_id(store):
    saved = store.save(Item(name="Item", description="Desc Save", status="NEW", email="save@test.com"))
    assert saved.id is not None
    assert store.find_by_id(saved.id) == saved


def test_save_does_not_mutate_input(store):
    item = Item(name="Item")
    saved = store.save(item)
    assert item.id is None
    assert saved.name == "Item"


def test_save_updates_existing(store, make_items):
    first, _ = make_items(2)
    first.status = "PROCESSED"
    store.save(first)

    assert store.find_by_id(first.id).status == "PROCESSED"
    assert len(store.find_all()) == 2


def test_save_with_unknown_id_inserts(store):
    store.save(Item(id=42, name="Explicit"))
    assert store.find_by_id(42).name == "Explicit"


def test_find_all_and_ids_ordered(store, make_items):
    saved = make_items(3)
    assert store.find_all() == saved
    assert store.find_all_ids() == [item.id for item in saved]


def test_find_by_id_missing(store):
    assert store.find_by_id(100) is None


def test_exists_and_delete(store, make_items):
    (item,) = make_items(1)
    assert store.exists_by_id(item.id)
    store.delete_by_id(item.id)
    assert not store.exists_by_id(item.id)
    assert store.find_all_ids() == []


def test_save_failure_raises_persist_error():
    rolled_back = []

    def failing_execute(*a, **k):
        raise sqlite3.OperationalError("disk I/O error")

    conn = types.SimpleNamespace(
        cursor=lambda: types.SimpleNamespace(execute=failing_execute),
        commit=lambda: None,
        rollback=lambda: rolled_back.append(True),
    )
    store = ItemStore(conn)

    with pytest.raises(ItemPersistError) as excinfo:
        store.save(Item(id=1, name="Item"))

    assert isinstance(excinfo.value.__cause__, sqlite3.OperationalError)
    assert rolled_back == [True]


def test_update_existing_row(store, make_items):
    (item,) = make_items(1)
    item.status = "PROCESSED"
    updated = store.update(item)
    assert updated == item
    assert store.find_by_id(item.id).status == "PROCESSED"


def test_update_missing_row_returns_none(store, make_items):
    (item,) = make_items(1)
    store.delete_by_id(item.id)
    item.status = "PROCESSED"
    assert store.update(item) is None
    assert not store.exists_by_id(item.id)
