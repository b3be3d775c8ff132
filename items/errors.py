"""Exceptions raised by the item store, worker pool and batch processor."""


class ItemServiceError(Exception):
    """Base class for item service failures."""


class JobFetchError(ItemServiceError):
    """The identifiers of a processing job could not be enumerated."""


class ItemPersistError(ItemServiceError):
    """Saving an item to the store failed."""


class TaskExecutionError(ItemServiceError):
    """Unexpected fault inside a single processing task."""

    def __init__(self, item_id: int, cause: BaseException):
        super().__init__(f"Processing item {item_id} failed: {cause}")
        self.item_id = item_id
        self.cause = cause


class PoolSaturatedError(ItemServiceError):
    """The worker pool is at capacity and configured to reject new work."""
