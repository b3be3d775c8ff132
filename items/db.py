import sqlite3
from typing import Optional

from config import get_config

DB_FILE = get_config("DB_FILE", "items.db")


def init_db(conn: Optional[sqlite3.Connection] = None) -> sqlite3.Connection:
    """Initialise the SQLite database and the items table."""
    if conn is None:
        conn = sqlite3.connect(DB_FILE, check_same_thread=False)
    cur = conn.cursor()
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS items (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT,
            description TEXT,
            status TEXT,
            email TEXT
        )
        """
    )
    cur.execute("PRAGMA journal_mode=WAL;")
    conn.commit()
    return conn
