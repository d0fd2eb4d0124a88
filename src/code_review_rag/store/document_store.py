"""Key/value storage for indexed documents.

Consistency contract: a single writer per index location, any number of
readers, last write wins per key. Readers never mutate stored documents.
"""

import logging
import sqlite3
from datetime import UTC, datetime
from typing import Protocol, runtime_checkable

from code_review_rag.db.backend import Database, Row
from code_review_rag.errors import IndexWriteError
from code_review_rag.models.document import IndexedDocument

logger = logging.getLogger(__name__)


@runtime_checkable
class DocumentStore(Protocol):
    """Storage interface the indexer writes through and the searcher reads from."""

    async def put(self, doc_id: str, document: IndexedDocument) -> None:
        """Insert or replace the document stored under ``doc_id``."""
        ...

    async def get(self, doc_id: str) -> IndexedDocument | None:
        """Return the document stored under ``doc_id``, if any."""
        ...

    async def delete(self, doc_id: str) -> bool:
        """Remove ``doc_id``. Returns False when nothing was stored."""
        ...

    async def scan(self) -> list[tuple[str, IndexedDocument]]:
        """Return every (doc_id, document) pair in key order."""
        ...


class SQLiteDocumentStore:
    """DocumentStore over the ``documents`` table. FTS is synced via triggers."""

    def __init__(self, db: Database) -> None:
        """Initialize with an index database."""
        self.db = db

    @property
    def location(self) -> str:
        """Where the underlying index lives."""
        return self.db.location

    async def put(self, doc_id: str, document: IndexedDocument) -> None:
        """Upsert one document and commit it on its own."""
        try:
            await self.db.execute(
                """INSERT INTO documents
                (doc_id, title, type, description, example, reference, tags, indexed_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(doc_id) DO UPDATE SET
                    title = excluded.title,
                    type = excluded.type,
                    description = excluded.description,
                    example = excluded.example,
                    reference = excluded.reference,
                    tags = excluded.tags,
                    indexed_at = excluded.indexed_at""",
                (
                    doc_id,
                    document.title,
                    document.type,
                    document.description,
                    document.example,
                    document.reference,
                    document.tags,
                    datetime.now(UTC).isoformat(),
                ),
            )
            await self.db.commit()
        except sqlite3.Error as exc:
            raise IndexWriteError(f"Cannot write {doc_id} to {self.location}: {exc}") from exc

    async def get(self, doc_id: str) -> IndexedDocument | None:
        """Get a single document by key."""
        cursor = await self.db.execute("SELECT * FROM documents WHERE doc_id = ?", (doc_id,))
        row = await cursor.fetchone()
        return row_to_document(row) if row else None

    async def delete(self, doc_id: str) -> bool:
        """Delete a document by key."""
        try:
            cursor = await self.db.execute("DELETE FROM documents WHERE doc_id = ?", (doc_id,))
            await self.db.commit()
        except sqlite3.Error as exc:
            raise IndexWriteError(f"Cannot delete {doc_id} from {self.location}: {exc}") from exc
        return cursor.rowcount > 0

    async def scan(self) -> list[tuple[str, IndexedDocument]]:
        """Full scan in key order."""
        cursor = await self.db.execute("SELECT * FROM documents ORDER BY doc_id")
        rows = await cursor.fetchall()
        return [(row["doc_id"], row_to_document(row)) for row in rows]


def row_to_document(row: Row) -> IndexedDocument:
    """Convert a database row to an IndexedDocument."""
    return IndexedDocument(
        title=row["title"],
        type=row["type"],
        description=row["description"],
        example=row["example"],
        reference=row["reference"],
        tags=row["tags"],
    )
