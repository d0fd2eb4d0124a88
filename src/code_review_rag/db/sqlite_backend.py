"""SQLite implementation of the Database protocol.

Thin wrapper around aiosqlite.Connection plus the FTS5 MATCH helper.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import aiosqlite

    from code_review_rag.db.backend import Cursor, Row

logger = logging.getLogger(__name__)

# FTS5 tables that can be queried with MATCH
FTS_TABLES = frozenset({"documents_fts", "documents_trigram"})


class SQLiteCursor:
    """Wraps aiosqlite.Cursor to satisfy the Cursor protocol."""

    def __init__(self, cursor: aiosqlite.Cursor) -> None:
        """Initialize with an aiosqlite cursor."""
        self._cursor = cursor

    @property
    def rowcount(self) -> int:
        """Number of rows affected by the last operation."""
        rc = self._cursor.rowcount
        return rc if rc is not None else -1

    async def fetchone(self) -> Row | None:
        """Fetch the next row, or None if exhausted."""
        return await self._cursor.fetchone()

    async def fetchall(self) -> list[Row]:
        """Fetch all remaining rows."""
        return list(await self._cursor.fetchall())


class SQLiteBackend:
    """SQLite implementation of the Database protocol.

    Passes all calls through to the underlying aiosqlite.Connection and adds
    the FTS5 MATCH helper the searcher needs.
    """

    def __init__(self, conn: aiosqlite.Connection, location: str = ":memory:") -> None:
        """Initialize with an aiosqlite connection and the path it was opened on."""
        self._conn = conn
        self._location = location

    @property
    def location(self) -> str:
        """Where the index lives."""
        return self._location

    async def execute(self, sql: str, params: tuple[Any, ...] | list[Any] = ()) -> Cursor:
        """Execute a single SQL statement and return a cursor."""
        cursor = await self._conn.execute(sql, params)
        return SQLiteCursor(cursor)

    async def executescript(self, sql: str) -> None:
        """Execute multiple SQL statements (DDL)."""
        await self._conn.executescript(sql)

    async def commit(self) -> None:
        """Commit the current transaction."""
        await self._conn.commit()

    async def close(self) -> None:
        """Close the database connection."""
        await self._conn.close()

    # -- FTS5 search --

    async def fts_match(self, table: str, expression: str) -> list[tuple[str, float]]:
        """Run an FTS5 MATCH expression against one of the index tables.

        Returns (doc_id, bm25_score) pairs. Lower scores are better
        (FTS5 returns negative scores where more negative = better match).
        """
        if table not in FTS_TABLES:
            raise ValueError(f"Not an FTS table: {table}")
        # Join FTS results back to documents via rowid
        sql = f"""
            SELECT d.doc_id, bm25({table}) AS score
            FROM {table} f
            JOIN documents d ON d.rowid = f.rowid
            WHERE {table} MATCH ?
        """  # noqa: S608
        cursor = await self._conn.execute(sql, (expression,))
        rows = await cursor.fetchall()
        return [(row[0], row[1]) for row in rows]

    # -- Schema --

    async def apply_schema(self) -> None:
        """Apply all SQLite DDL: documents table, FTS5 tables, triggers."""
        from code_review_rag.db.schema import apply_schema

        await apply_schema(self)
