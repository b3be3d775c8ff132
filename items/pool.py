"""Bounded worker pool.

Workers are started, up to ``core_size``, as tasks arrive. Further tasks wait
in a backlog holding at most ``queue_capacity`` entries. When the backlog is
full extra workers are started up to ``max_size``; past that point the
submission policy applies: ``"block"`` waits for backlog space and
``"reject"`` raises :class:`PoolSaturatedError`. Work is never dropped.
"""
from __future__ import annotations

import itertools
import logging
import queue
import threading
from concurrent.futures import Future
from typing import Any, Callable, List, Optional, Tuple

from .errors import PoolSaturatedError

POLICIES = ("block", "reject")

WorkItem = Tuple[Future, Callable[..., Any], tuple, dict]


class WorkerPool:
    def __init__(
        self,
        core_size: int = 5,
        max_size: int = 10,
        queue_capacity: int = 20,
        policy: str = "block",
        thread_name_prefix: str = "ItemThread-",
    ):
        if core_size < 1:
            raise ValueError("core_size must be at least 1")
        if max_size < core_size:
            raise ValueError("max_size must not be smaller than core_size")
        if queue_capacity < 1:
            raise ValueError("queue_capacity must be at least 1")
        if policy not in POLICIES:
            raise ValueError(f"Unknown pool policy: {policy}")
        self.core_size = core_size
        self.max_size = max_size
        self.queue_capacity = queue_capacity
        self.policy = policy
        self.thread_name_prefix = thread_name_prefix
        self._queue: "queue.Queue[Optional[WorkItem]]" = queue.Queue(maxsize=queue_capacity)
        self._threads: List[threading.Thread] = []
        self._lock = threading.Lock()
        self._space = threading.Condition(self._lock)
        self._shutdown = False
        self._names = itertools.count(1)

    @property
    def worker_count(self) -> int:
        with self._lock:
            return len(self._threads)

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """Schedule ``fn(*args, **kwargs)`` and return its future."""
        future: Future = Future()
        work = (future, fn, args, kwargs)
        with self._lock:
            if self._shutdown:
                raise RuntimeError("cannot submit to a pool that has been shut down")
            if len(self._threads) < self.core_size:
                self._start_worker(work)
                return future
            try:
                self._queue.put_nowait(work)
                return future
            except queue.Full:
                pass
            if len(self._threads) < self.max_size:
                self._start_worker(work)
                return future
        if self.policy == "reject":
            raise PoolSaturatedError(
                f"pool saturated: {self.max_size} workers busy, {self.queue_capacity} tasks queued"
            )
        # backpressure: wait for a worker to free up backlog space
        with self._space:
            while not self._shutdown and self._queue.full():
                self._space.wait()
            if self._shutdown:
                raise RuntimeError("pool shut down while waiting for capacity")
            self._queue.put_nowait(work)
        return future

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; queued tasks still run before workers exit."""
        with self._lock:
            if self._shutdown:
                return
            self._shutdown = True
            self._space.notify_all()
            threads = list(self._threads)
        for _ in threads:
            self._queue.put(None)
        if not wait:
            return
        for t in threads:
            t.join()
        logging.debug("Worker pool %s shut down", self.thread_name_prefix)

    def __enter__(self) -> "WorkerPool":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown(wait=True)

    def _start_worker(self, first: WorkItem) -> None:
        t = threading.Thread(
            target=self._work,
            args=(first,),
            name=f"{self.thread_name_prefix}{next(self._names)}",
            daemon=True,
        )
        self._threads.append(t)
        t.start()

    def _work(self, work: Optional[WorkItem]) -> None:
        while work is not None:
            self._run(work)
            work = self._queue.get()
            with self._space:
                self._space.notify()

    @staticmethod
    def _run(work: WorkItem) -> None:
        future, fn, args, kwargs = work
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = fn(*args, **kwargs)
        except BaseException as exc:
            future.set_exception(exc)
        else:
            future.set_result(result)
