"""Item storage and batch processing."""

from .db import init_db
from .errors import (
    ItemPersistError,
    ItemServiceError,
    JobFetchError,
    PoolSaturatedError,
    TaskExecutionError,
)
from .models import PROCESSED, Item, OutcomeStatus, ProcessingJob, TaskOutcome
from .pool import WorkerPool
from .processor import AtomicCounter, BatchProcessor
from .service import ItemService
from .store import ItemStore

__all__ = [
    "init_db",
    "ItemServiceError",
    "JobFetchError",
    "ItemPersistError",
    "TaskExecutionError",
    "PoolSaturatedError",
    "PROCESSED",
    "Item",
    "OutcomeStatus",
    "ProcessingJob",
    "TaskOutcome",
    "WorkerPool",
    "AtomicCounter",
    "BatchProcessor",
    "ItemService",
    "ItemStore",
]
