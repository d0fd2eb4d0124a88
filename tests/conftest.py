"""Shared test fixtures."""

import pytest_asyncio

from code_review_rag.db.connection import create_connection
from code_review_rag.indexing.indexer import KnowledgeIndexer
from code_review_rag.models.entry import EntryType, KnowledgeEntry
from code_review_rag.search.searcher import KnowledgeSearcher
from code_review_rag.store.document_store import SQLiteDocumentStore


def make_entry(
    title: str = "Test entry",
    entry_type: EntryType = EntryType.BEST_PRACTICE,
    description: str = "Some description",
    example: str | None = None,
    reference: str | None = None,
    tags: list[str] | None = None,
) -> KnowledgeEntry:
    return KnowledgeEntry(
        title=title,
        type=entry_type,
        description=description,
        example=example,
        reference=reference,
        tags=tags or [],
    )


def sample_entries() -> list[KnowledgeEntry]:
    """Three entries with disjoint vocabularies."""
    return [
        make_entry(
            title="Replace Vector with ArrayList",
            entry_type=EntryType.ANTI_PATTERN,
            description="Vector synchronizes every call; prefer ArrayList for legacy code paths.",
            example="List<String> items = new ArrayList<>();",
            reference="Effective Java, Item 64",
            tags=["vector", "arraylist", "legacy"],
        ),
        make_entry(
            title="Prefer Iterator over Enumeration",
            entry_type=EntryType.BEST_PRACTICE,
            description="Enumeration predates the Iterator interface and lacks remove().",
            example="Iterator<String> it = list.iterator();",
            tags=["enumeration", "iterator"],
        ),
        make_entry(
            title="Avoid synchronized blocks on hot paths",
            entry_type=EntryType.ENHANCEMENT,
            description="Coarse locking serializes threads; consider java.util.concurrent types.",
            tags=["synchronized", "concurrent"],
        ),
    ]


class FakeLLM:
    """Controllable fake generation backend for testing."""

    def __init__(
        self,
        response: str | None = "Generated feedback",
        available: bool = True,
        error: Exception | None = None,
    ):
        self.response = response
        self._available = available
        self.error = error
        self.last_prompt: str | None = None
        self.last_system: str | None = None
        self.generate_count = 0
        self.closed = False

    async def is_available(self) -> bool:
        return self._available

    async def generate(self, prompt: str, *, system: str | None = None) -> str | None:
        self.last_prompt = prompt
        self.last_system = system
        self.generate_count += 1
        if self.error is not None:
            raise self.error
        if not self._available:
            return None
        return self.response

    async def close(self) -> None:
        self.closed = True


@pytest_asyncio.fixture
async def db():
    """In-memory index with full schema."""
    conn = await create_connection(":memory:")
    yield conn
    await conn.close()


@pytest_asyncio.fixture
async def store(db):
    """Document store backed by the in-memory index."""
    return SQLiteDocumentStore(db)


@pytest_asyncio.fixture
async def indexed_store(store):
    """Store holding the three sample entries."""
    await KnowledgeIndexer(store).index_knowledge_base(sample_entries())
    return store


@pytest_asyncio.fixture
async def searcher(indexed_store):
    """Searcher opened over the sample entries."""
    return await KnowledgeSearcher.open(indexed_store)


@pytest_asyncio.fixture
async def fake_llm():
    """Controllable fake generation backend."""
    return FakeLLM()
