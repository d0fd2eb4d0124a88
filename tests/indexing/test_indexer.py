"""Tests for the knowledge indexer."""

import pytest

from code_review_rag.errors import IndexWriteError
from code_review_rag.indexing.indexer import KnowledgeIndexer, doc_key
from code_review_rag.search.searcher import KnowledgeSearcher
from tests.conftest import make_entry, sample_entries


def test_doc_key():
    assert doc_key(1) == "doc-00001"
    assert doc_key(123) == "doc-00123"


@pytest.mark.asyncio
async def test_index_writes_one_document_per_entry(store):
    result = await KnowledgeIndexer(store).index_knowledge_base(sample_entries())
    assert result.indexed == 3
    assert result.skipped == 0
    assert result.doc_ids == ["doc-00001", "doc-00002", "doc-00003"]

    doc = await store.get("doc-00001")
    assert doc is not None
    assert doc.title == "Replace Vector with ArrayList"
    assert doc.tags == "vector arraylist legacy"


@pytest.mark.asyncio
async def test_invalid_entries_are_skipped_with_warning(store):
    entries = [
        make_entry(title="Valid one"),
        make_entry(title=""),
        make_entry(title="No description", description="  "),
        make_entry(title="Valid two"),
    ]
    result = await KnowledgeIndexer(store).index_knowledge_base(entries)
    assert result.indexed == 2
    assert result.skipped == 2
    assert len(result.warnings) == 2
    assert "empty title" in result.warnings[0]
    assert "empty description" in result.warnings[1]
    assert [doc.title for _, doc in await store.scan()] == ["Valid one", "Valid two"]


@pytest.mark.asyncio
async def test_reindexing_is_idempotent(store):
    indexer = KnowledgeIndexer(store)
    await indexer.index_knowledge_base(sample_entries())
    first_scan = await store.scan()
    first = await (await KnowledgeSearcher.open(store)).search_scored("vector", 5)

    await indexer.index_knowledge_base(sample_entries())
    assert await store.scan() == first_scan
    second = await (await KnowledgeSearcher.open(store)).search_scored("vector", 5)
    assert [(r.entry, r.score) for r in second] == [(r.entry, r.score) for r in first]


@pytest.mark.asyncio
async def test_reindexing_fewer_entries_removes_stale_documents(store):
    indexer = KnowledgeIndexer(store)
    await indexer.index_knowledge_base(sample_entries())
    result = await indexer.index_knowledge_base(sample_entries()[:1])
    assert result.removed == 2
    assert [doc_id for doc_id, _ in await store.scan()] == ["doc-00001"]


@pytest.mark.asyncio
async def test_empty_knowledge_base(store):
    result = await KnowledgeIndexer(store).index_knowledge_base([])
    assert result.indexed == 0
    assert await store.scan() == []


@pytest.mark.asyncio
async def test_rejected_write_raises_index_write_error(db, store):
    await db.executescript(
        """CREATE TRIGGER documents_readonly BEFORE INSERT ON documents BEGIN
            SELECT RAISE(ABORT, 'index is read-only');
        END;"""
    )
    with pytest.raises(IndexWriteError):
        await KnowledgeIndexer(store).index_knowledge_base([make_entry()])
