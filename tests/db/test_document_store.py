"""Tests for the SQLite document store."""

import pytest

from code_review_rag.models.document import IndexedDocument
from code_review_rag.search.fts import TOKEN_TABLE, TRIGRAM_TABLE


def _doc(title: str = "Title", tags: str = "alpha beta") -> IndexedDocument:
    return IndexedDocument(
        title=title,
        type="BestPractice",
        description="Description text",
        tags=tags,
    )


@pytest.mark.asyncio
async def test_put_and_get(store):
    await store.put("doc-00001", _doc())
    doc = await store.get("doc-00001")
    assert doc == _doc()


@pytest.mark.asyncio
async def test_get_missing_returns_none(store):
    assert await store.get("doc-99999") is None


@pytest.mark.asyncio
async def test_put_replaces_existing_key(store):
    await store.put("doc-00001", _doc("First"))
    await store.put("doc-00001", _doc("Second"))
    doc = await store.get("doc-00001")
    assert doc is not None
    assert doc.title == "Second"
    assert len(await store.scan()) == 1


@pytest.mark.asyncio
async def test_replace_keeps_fts_in_sync(store, db):
    await store.put("doc-00001", _doc("Obsolete wording"))
    await store.put("doc-00001", _doc("Current wording"))
    assert await db.fts_match(TOKEN_TABLE, 'title : "obsolete"') == []
    assert [d for d, _ in await db.fts_match(TOKEN_TABLE, 'title : "current"')] == ["doc-00001"]
    assert [d for d, _ in await db.fts_match(TRIGRAM_TABLE, 'title : "urren"')] == ["doc-00001"]


@pytest.mark.asyncio
async def test_delete(store, db):
    await store.put("doc-00001", _doc())
    assert await store.delete("doc-00001") is True
    assert await store.get("doc-00001") is None
    assert await store.delete("doc-00001") is False
    assert await db.fts_match(TOKEN_TABLE, 'title : "title"') == []


@pytest.mark.asyncio
async def test_scan_is_key_ordered(store):
    await store.put("doc-00002", _doc("Two"))
    await store.put("doc-00001", _doc("One"))
    scanned = await store.scan()
    assert [doc_id for doc_id, _ in scanned] == ["doc-00001", "doc-00002"]
    assert [doc.title for _, doc in scanned] == ["One", "Two"]


@pytest.mark.asyncio
async def test_location(store):
    assert store.location == ":memory:"
