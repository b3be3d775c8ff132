import sqlite3
import types

import pytest

import main
from items import WorkerPool


def test_build_service_uses_pool_settings(monkeypatch):
    monkeypatch.setattr(main, "POOL_CORE_SIZE", 2)
    monkeypatch.setattr(main, "POOL_MAX_SIZE", 3)
    monkeypatch.setattr(main, "POOL_QUEUE_CAPACITY", 4)
    monkeypatch.setattr(main, "PROCESSING_DELAY", 0)
    service = main.build_service(sqlite3.connect(":memory:", check_same_thread=False))
    try:
        pool = service.processor.pool
        assert isinstance(pool, WorkerPool)
        assert (pool.core_size, pool.max_size, pool.queue_capacity) == (2, 3, 4)
        assert service.process_items_async().result(timeout=10) == []
    finally:
        main.shutdown(service)


def test_schedule_processing_disabled(monkeypatch):
    monkeypatch.setattr(main, "PROCESS_INTERVAL_MINUTES", 0)
    assert main.schedule_processing(types.SimpleNamespace()) is None


def test_schedule_processing_registers_job(monkeypatch):
    jobs = []

    class FakeScheduler:
        started = False

        def add_job(self, func, trigger, **kwargs):
            jobs.append((func, trigger, kwargs))

        def start(self):
            self.started = True

    monkeypatch.setattr(main, "PROCESS_INTERVAL_MINUTES", 15)
    monkeypatch.setattr(main, "BackgroundScheduler", FakeScheduler)
    service = types.SimpleNamespace(process_items_async=lambda: None)

    scheduler = main.schedule_processing(service)

    assert scheduler.started
    assert jobs == [(service.process_items_async, "interval", {"minutes": 15})]


@pytest.mark.parametrize(
    "level,expected",
    [
        ("INFO", "info"),
        ("WARN", "warning"),
        ("warning", "warning"),
        ("FATAL", "critical"),
        ("DEBUG", "debug"),
        ("nonsense", "info"),
    ],
)
def test_uvicorn_log_level(level, expected):
    assert main.uvicorn_log_level(level) == expected
