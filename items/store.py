"""SQLite backed repository for item records."""
from __future__ import annotations

import dataclasses
import sqlite3
import threading
from typing import List, Optional

from .errors import ItemPersistError
from .models import Item

COLUMNS = "id, name, description, status, email"


def _row_to_item(row) -> Item:
    return Item(id=row[0], name=row[1], description=row[2], status=row[3], email=row[4])


class ItemStore:
    """Item repository over a single shared connection.

    Every call holds ``self._lock`` so worker threads can use the store
    concurrently without interleaving statements on the connection.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self._lock = threading.Lock()

    def find_all(self) -> List[Item]:
        with self._lock:
            rows = self.conn.execute(f"SELECT {COLUMNS} FROM items ORDER BY id").fetchall()
        return [_row_to_item(row) for row in rows]

    def find_all_ids(self) -> List[int]:
        with self._lock:
            rows = self.conn.execute("SELECT id FROM items ORDER BY id").fetchall()
        return [row[0] for row in rows]

    def find_by_id(self, item_id: int) -> Optional[Item]:
        with self._lock:
            row = self.conn.execute(
                f"SELECT {COLUMNS} FROM items WHERE id = ?", (item_id,)
            ).fetchone()
        return _row_to_item(row) if row is not None else None

    def exists_by_id(self, item_id: int) -> bool:
        with self._lock:
            row = self.conn.execute("SELECT 1 FROM items WHERE id = ?", (item_id,)).fetchone()
        return row is not None

    def save(self, item: Item) -> Item:
        """Insert or update *item* and return the stored copy."""
        values = (item.name, item.description, item.status, item.email)
        with self._lock:
            try:
                cur = self.conn.cursor()
                if item.id is None:
                    cur.execute(
                        "INSERT INTO items (name, description, status, email) VALUES (?, ?, ?, ?)",
                        values,
                    )
                    item_id = cur.lastrowid
                else:
                    cur.execute(
                        """
                        INSERT INTO items (id, name, description, status, email)
                        VALUES (?, ?, ?, ?, ?)
                        ON CONFLICT(id) DO UPDATE SET
                            name = excluded.name,
                            description = excluded.description,
                            status = excluded.status,
                            email = excluded.email
                        """,
                        (item.id, *values),
                    )
                    item_id = item.id
                self.conn.commit()
            except sqlite3.Error as exc:
                self.conn.rollback()
                raise ItemPersistError(f"Could not save item {item.id}: {exc}") from exc
        return dataclasses.replace(item, id=item_id)

    def update(self, item: Item) -> Optional[Item]:
        """Update an existing row; return ``None`` when the row is gone."""
        with self._lock:
            try:
                cur = self.conn.cursor()
                cur.execute(
                    "UPDATE items SET name = ?, description = ?, status = ?, email = ? WHERE id = ?",
                    (item.name, item.description, item.status, item.email, item.id),
                )
                updated = cur.rowcount
                self.conn.commit()
            except sqlite3.Error as exc:
                self.conn.rollback()
                raise ItemPersistError(f"Could not update item {item.id}: {exc}") from exc
        if updated == 0:
            return None
        return dataclasses.replace(item)

    def delete_by_id(self, item_id: int) -> None:
        with self._lock:
            self.conn.execute("DELETE FROM items WHERE id = ?", (item_id,))
            self.conn.commit()
