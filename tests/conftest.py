import sqlite3

import pytest
from fastapi.testclient import TestClient

from api import create_app
from items import BatchProcessor, Item, ItemService, ItemStore, WorkerPool, init_db


def setup_in_memory_db() -> sqlite3.Connection:
    return init_db(sqlite3.connect(":memory:", check_same_thread=False))


@pytest.fixture
def store():
    conn = setup_in_memory_db()
    yield ItemStore(conn)
    conn.close()


@pytest.fixture
def pool():
    pool = WorkerPool(core_size=5, max_size=10, queue_capacity=20)
    yield pool
    pool.shutdown()


@pytest.fixture
def processor(store, pool):
    processor = BatchProcessor(store, pool, delay=0)
    yield processor
    processor.close()


@pytest.fixture
def service(store, processor):
    return ItemService(store, processor)


@pytest.fixture
def client(service):
    return TestClient(create_app(service))


@pytest.fixture
def make_items(store):
    """Insert ``count`` items and return the saved copies."""

    def _make(count, status="NEW"):
        return [
            store.save(
                Item(
                    name=f"Item {i}",
                    description=f"Description {i}",
                    status=status,
                    email=f"item{i}@test.com",
                )
            )
            for i in range(1, count + 1)
        ]

    return _make
