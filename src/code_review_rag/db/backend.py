"""Database backend protocol for the async connection holding the index.

Application code programs against these protocols; ``SQLiteBackend`` is the
only implementation. All SQL uses ``?`` placeholders and SQLite syntax, since
the full-text index relies on FTS5.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Row(Protocol):
    """A database row supporting both named and positional access."""

    def __getitem__(self, key: str | int) -> Any:
        """Get a column value by name or position."""
        ...

    def keys(self) -> Any:
        """Return column names."""
        ...


@runtime_checkable
class Cursor(Protocol):
    """Async cursor returned by Database.execute()."""

    @property
    def rowcount(self) -> int:
        """Number of rows affected by the last operation."""
        ...

    async def fetchone(self) -> Row | None:
        """Fetch the next row, or None if exhausted."""
        ...

    async def fetchall(self) -> list[Row]:
        """Fetch all remaining rows."""
        ...


@runtime_checkable
class Database(Protocol):
    """Async handle on one index location."""

    @property
    def location(self) -> str:
        """Where the index lives (a file path or ``:memory:``)."""
        ...

    async def execute(self, sql: str, params: tuple[Any, ...] | list[Any] = ()) -> Cursor:
        """Execute a single SQL statement and return a cursor."""
        ...

    async def executescript(self, sql: str) -> None:
        """Execute multiple SQL statements (DDL)."""
        ...

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def fts_match(self, table: str, expression: str) -> list[tuple[str, float]]:
        """Run a full-text MATCH and return (doc_id, bm25_score) pairs."""
        ...

    async def close(self) -> None:
        """Close the database connection."""
        ...
