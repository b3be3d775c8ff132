"""Item service entry point.

Opens the SQLite database, builds the worker pool, batch processor and HTTP
application, and serves it with uvicorn. When ``PROCESS_INTERVAL_MINUTES`` is
positive, a background scheduler also triggers item processing periodically.
"""

import logging
from typing import Optional

import uvicorn
from apscheduler.schedulers.background import BackgroundScheduler

from api import create_app
from config import get_config, get_float_config, get_int_config
from items import BatchProcessor, ItemService, ItemStore, WorkerPool, init_db

# Configuration via environment variables or .env file
POOL_CORE_SIZE = get_int_config("ITEM_POOL_CORE_SIZE", 5)
POOL_MAX_SIZE = get_int_config("ITEM_POOL_MAX_SIZE", 10)
POOL_QUEUE_CAPACITY = get_int_config("ITEM_POOL_QUEUE_CAPACITY", 20)
POOL_POLICY = get_config("ITEM_POOL_POLICY", "block")
PROCESSING_DELAY = get_float_config("ITEM_PROCESSING_DELAY", 0.1)
PROCESS_INTERVAL_MINUTES = get_int_config("PROCESS_INTERVAL_MINUTES", 0)
API_HOST = get_config("API_HOST", "127.0.0.1")
API_PORT = get_int_config("API_PORT", 8080)
LOG_LEVEL = get_config("LOG_LEVEL", "INFO")

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(levelname)s - %(message)s",
)


UVICORN_LEVELS = ("critical", "error", "warning", "info", "debug", "trace")
LEVEL_ALIASES = {"warn": "warning", "fatal": "critical"}


def uvicorn_log_level(level: str) -> str:
    """Map a logging level name onto one uvicorn accepts."""
    name = level.strip().lower()
    name = LEVEL_ALIASES.get(name, name)
    return name if name in UVICORN_LEVELS else "info"


def build_service(conn=None) -> ItemService:
    """Wire the store, worker pool and processor together."""
    store = ItemStore(init_db(conn))
    pool = WorkerPool(
        core_size=POOL_CORE_SIZE,
        max_size=POOL_MAX_SIZE,
        queue_capacity=POOL_QUEUE_CAPACITY,
        policy=POOL_POLICY,
    )
    processor = BatchProcessor(store, pool, delay=PROCESSING_DELAY)
    return ItemService(store, processor)


def schedule_processing(service: ItemService) -> Optional[BackgroundScheduler]:
    if PROCESS_INTERVAL_MINUTES <= 0:
        return None
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        service.process_items_async, "interval", minutes=PROCESS_INTERVAL_MINUTES
    )
    scheduler.start()
    logging.info("Periodic processing every %s minutes", PROCESS_INTERVAL_MINUTES)
    return scheduler


def shutdown(service: ItemService, scheduler: Optional[BackgroundScheduler] = None) -> None:
    if scheduler is not None:
        scheduler.shutdown()
    service.processor.close()
    service.processor.pool.shutdown()
    service.store.conn.close()
    logging.info("Shutdown complete")


def main() -> None:
    service = build_service()
    scheduler = schedule_processing(service)
    app = create_app(service)
    logging.info("Serving item API on %s:%s", API_HOST, API_PORT)
    try:
        uvicorn.run(app, host=API_HOST, port=API_PORT, log_level=uvicorn_log_level(LOG_LEVEL))
    finally:
        shutdown(service, scheduler)


if __name__ == "__main__":
    main()
