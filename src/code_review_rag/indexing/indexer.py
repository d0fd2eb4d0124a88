"""Writes knowledge entries into the searchable document index."""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from code_review_rag.models.document import IndexedDocument
from code_review_rag.models.entry import KnowledgeEntry, validate_entry
from code_review_rag.store.document_store import SQLiteDocumentStore

logger = logging.getLogger(__name__)

# One writer per index location
_WRITE_LOCKS: dict[str, asyncio.Lock] = {}


def _write_lock(location: str) -> asyncio.Lock:
    lock = _WRITE_LOCKS.get(location)
    if lock is None:
        lock = _WRITE_LOCKS[location] = asyncio.Lock()
    return lock


def doc_key(position: int) -> str:
    """Storage key for the entry at ``position`` (1-based) among valid entries."""
    return f"doc-{position:05d}"


@dataclass
class IndexResult:
    """Handle on a finished indexing run."""

    location: str
    indexed: int = 0
    skipped: int = 0
    removed: int = 0
    doc_ids: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class KnowledgeIndexer:
    """Converts knowledge entries into IndexedDocuments.

    Indexing is idempotent: entries land under position-derived keys, so
    re-indexing the same entries rewrites identical documents under identical
    keys, and keys left over from a previous, larger run are deleted.
    """

    def __init__(self, store: SQLiteDocumentStore) -> None:
        """Initialize with the document store to write through."""
        self._store = store

    async def index_knowledge_base(self, entries: Iterable[KnowledgeEntry]) -> IndexResult:
        """Index all valid entries. Raises IndexWriteError if the store rejects a write."""
        result = IndexResult(location=self._store.location)

        async with _write_lock(self._store.location):
            existing = {doc_id for doc_id, _doc in await self._store.scan()}

            for entry in entries:
                problem = validate_entry(entry)
                if problem:
                    label = entry.title.strip() or "<untitled>"
                    message = f"Skipping entry {label!r}: {problem}"
                    logger.warning(message)
                    result.warnings.append(message)
                    result.skipped += 1
                    continue

                doc_id = doc_key(result.indexed + 1)
                await self._store.put(doc_id, IndexedDocument.from_entry(entry))
                result.doc_ids.append(doc_id)
                result.indexed += 1

            for stale in sorted(existing - set(result.doc_ids)):
                if await self._store.delete(stale):
                    result.removed += 1

        logger.info(
            "Indexed %d entries at %s (%d skipped, %d stale removed)",
            result.indexed,
            result.location,
            result.skipped,
            result.removed,
        )
        return result
