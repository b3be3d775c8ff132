"""Fan-out/fan-in job that marks every stored item as processed.

``BatchProcessor.process_all`` returns a future straight away. The job itself
runs on a single coordinator thread: it snapshots the item ids, submits one
task per id to the worker pool, waits for all of them and resolves the future
with the processed items in id order. Items that vanished or failed to save
are left out of the result and logged.
"""
from __future__ import annotations

import itertools
import logging
import threading
import time
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor, wait
from typing import List, Optional

from .errors import ItemPersistError, JobFetchError, PoolSaturatedError, TaskExecutionError
from .models import PROCESSED, Item, OutcomeStatus, ProcessingJob, TaskOutcome
from .pool import WorkerPool
from .store import ItemStore


class AtomicCounter:
    """Integer counter that can be incremented from many threads."""

    def __init__(self, initial: int = 0):
        self._value = initial
        self._lock = threading.Lock()

    def increment_and_get(self, delta: int = 1) -> int:
        with self._lock:
            self._value += delta
            return self._value

    def get(self) -> int:
        with self._lock:
            return self._value


class BatchProcessor:
    def __init__(
        self,
        store: ItemStore,
        pool: WorkerPool,
        delay: float = 0.1,
        counter: Optional[AtomicCounter] = None,
    ):
        self.store = store
        self.pool = pool
        self.delay = delay
        self.processed_count = counter if counter is not None else AtomicCounter()
        self._coordinator = ThreadPoolExecutor(max_workers=1, thread_name_prefix="ItemJob-")
        self._job_ids = itertools.count(1)

    def process_all(self) -> "Future[List[Item]]":
        """Start a job and return a future resolving to the processed items.

        The future raises :class:`JobFetchError` when the item ids cannot be
        listed. Per-item problems never fail the future.
        """
        return self._coordinator.submit(self._run_job)

    def close(self) -> None:
        self._coordinator.shutdown(wait=True)

    def _run_job(self) -> List[Item]:
        job_id = next(self._job_ids)
        try:
            item_ids = self.store.find_all_ids()
        except Exception as exc:
            logging.error("Job %s: unable to list item ids: %s", job_id, exc)
            raise JobFetchError(f"Unable to list item ids: {exc}") from exc

        job = ProcessingJob(item_ids=tuple(item_ids), job_id=job_id)
        if not job.item_ids:
            logging.info("Job %s: no items to process", job.job_id)
            return []

        logging.info("Job %s: processing %s items", job.job_id, len(job.item_ids))
        started = time.perf_counter()
        futures = [self._submit(item_id) for item_id in job.item_ids]
        wait(futures)
        outcomes = [
            self._collect(item_id, future) for item_id, future in zip(job.item_ids, futures)
        ]
        processed = self._aggregate(job, outcomes)
        logging.info(
            "Job %s: %s/%s items processed in %.2fs",
            job.job_id,
            len(processed),
            len(job.item_ids),
            time.perf_counter() - started,
        )
        return processed

    def _submit(self, item_id: int) -> Future:
        try:
            return self.pool.submit(self.process_item, item_id)
        except (PoolSaturatedError, RuntimeError) as exc:
            future: Future = Future()
            future.set_exception(exc)
            return future

    @staticmethod
    def _collect(item_id: int, future: Future) -> TaskOutcome:
        if future.cancelled():
            return TaskOutcome.failure(item_id, CancelledError(f"task for item {item_id} was cancelled"))
        exc = future.exception()
        if exc is not None:
            return TaskOutcome.failure(item_id, exc)
        return future.result()

    def process_item(self, item_id: int) -> TaskOutcome:
        """Mark one item as processed. Never raises."""
        try:
            if self.delay > 0:
                time.sleep(self.delay)
            item = self.store.find_by_id(item_id)
            if item is None:
                return TaskOutcome.not_found(item_id)
            item.status = PROCESSED
            saved = self.store.update(item)
            if saved is None:
                # deleted between lookup and update
                return TaskOutcome.not_found(item_id)
        except ItemPersistError as exc:
            return TaskOutcome.failure(item_id, exc)
        except Exception as exc:
            return TaskOutcome.failure(item_id, TaskExecutionError(item_id, exc))
        # only a persisted item counts
        self.processed_count.increment_and_get()
        return TaskOutcome.success(item_id, saved)

    @staticmethod
    def _aggregate(job: ProcessingJob, outcomes: List[TaskOutcome]) -> List[Item]:
        processed: List[Item] = []
        for outcome in outcomes:
            if outcome.status is OutcomeStatus.SUCCESS:
                processed.append(outcome.item)
            elif outcome.status is OutcomeStatus.NOT_FOUND:
                logging.warning("Job %s: item %s not found", job.job_id, outcome.item_id)
            else:
                logging.error(
                    "Job %s: item %s failed: %s",
                    job.job_id,
                    outcome.item_id,
                    outcome.error,
                    exc_info=outcome.error,
                )
        return processed
