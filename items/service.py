"""Item operations used by the HTTP layer."""
from __future__ import annotations

from concurrent.futures import Future
from typing import List, Optional

from .models import Item
from .processor import BatchProcessor
from .store import ItemStore


class ItemService:
    def __init__(self, store: ItemStore, processor: BatchProcessor):
        self.store = store
        self.processor = processor

    @property
    def processed_count(self) -> int:
        return self.processor.processed_count.get()

    def find_all(self) -> List[Item]:
        return self.store.find_all()

    def find_by_id(self, item_id: int) -> Optional[Item]:
        return self.store.find_by_id(item_id)

    def exists_by_id(self, item_id: int) -> bool:
        return self.store.exists_by_id(item_id)

    def save(self, item: Item) -> Item:
        return self.store.save(item)

    def update(self, item: Item) -> Optional[Item]:
        return self.store.update(item)

    def delete_by_id(self, item_id: int) -> None:
        self.store.delete_by_id(item_id)

    def process_items_async(self) -> "Future[List[Item]]":
        """Mark every stored item as processed in the background."""
        return self.processor.process_all()
