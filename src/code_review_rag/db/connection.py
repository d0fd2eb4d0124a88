"""Index connection management with FTS5."""

import logging
import sqlite3
from pathlib import Path

import aiosqlite

from code_review_rag.config import get_index_path
from code_review_rag.db.sqlite_backend import SQLiteBackend
from code_review_rag.errors import IndexWriteError

logger = logging.getLogger(__name__)


async def create_connection(index_path: Path | str | None = None) -> SQLiteBackend:
    """Open (creating if needed) the index at ``index_path`` and apply the schema.

    Falls back to REVIEW_INDEX_PATH. For an in-memory index, pass ":memory:".
    Raises IndexWriteError when the location cannot be created or written.
    """
    location = str(index_path or get_index_path())

    try:
        if location != ":memory:":
            Path(location).parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(location)
    except (OSError, sqlite3.Error) as exc:
        raise IndexWriteError(f"Cannot open index at {location}: {exc}") from exc

    conn.row_factory = aiosqlite.Row
    db = SQLiteBackend(conn, location)

    try:
        # WAL lets searchers read while a single writer re-indexes
        await conn.execute("PRAGMA journal_mode=WAL")
        await db.apply_schema()
    except sqlite3.Error as exc:
        await conn.close()
        raise IndexWriteError(f"Cannot initialize index at {location}: {exc}") from exc

    logger.debug("Index opened at %s", location)
    return db
