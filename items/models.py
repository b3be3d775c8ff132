"""Data structures shared by the store, the processor and the HTTP layer."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

PROCESSED = "PROCESSED"


@dataclass
class Item:
    """A stored item record. ``id`` is assigned by the store on first save."""

    id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    email: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class OutcomeStatus(Enum):
    """Terminal states of a single processing task"""
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    FAILURE = "failure"


@dataclass
class TaskOutcome:
    """Result of processing one identifier."""

    item_id: int
    status: OutcomeStatus
    item: Optional[Item] = None
    error: Optional[BaseException] = None

    @classmethod
    def success(cls, item_id: int, item: Item) -> "TaskOutcome":
        return cls(item_id, OutcomeStatus.SUCCESS, item=item)

    @classmethod
    def not_found(cls, item_id: int) -> "TaskOutcome":
        return cls(item_id, OutcomeStatus.NOT_FOUND)

    @classmethod
    def failure(cls, item_id: int, error: BaseException) -> "TaskOutcome":
        return cls(item_id, OutcomeStatus.FAILURE, error=error)


@dataclass(frozen=True)
class ProcessingJob:
    """Snapshot of the identifiers taken when a job starts."""

    item_ids: Tuple[int, ...]
    job_id: int = 0
