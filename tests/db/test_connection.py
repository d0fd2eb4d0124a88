"""Tests for index connection and schema initialization."""

import pytest

from code_review_rag.db.connection import create_connection
from code_review_rag.errors import IndexWriteError


@pytest.mark.asyncio
async def test_create_in_memory_connection():
    db = await create_connection(":memory:")
    try:
        cursor = await db.execute("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name")
        tables = {row[0] for row in await cursor.fetchall()}
        assert "documents" in tables
        assert "documents_fts" in tables
        assert "documents_trigram" in tables
        assert "schema_version" in tables
    finally:
        await db.close()


@pytest.mark.asyncio
async def test_schema_version():
    db = await create_connection(":memory:")
    try:
        cursor = await db.execute("SELECT version FROM schema_version")
        row = await cursor.fetchone()
        assert row[0] == 1
    finally:
        await db.close()


@pytest.mark.asyncio
async def test_schema_is_reapplied_idempotently(tmp_path):
    path = tmp_path / "index.db"
    db = await create_connection(path)
    await db.close()
    db = await create_connection(path)
    try:
        cursor = await db.execute("SELECT COUNT(*) FROM schema_version")
        row = await cursor.fetchone()
        assert row[0] == 1
        assert db.location == str(path)
    finally:
        await db.close()


@pytest.mark.asyncio
async def test_creates_parent_directory(tmp_path):
    path = tmp_path / "nested" / "dir" / "index.db"
    db = await create_connection(path)
    try:
        assert path.parent.is_dir()
    finally:
        await db.close()


@pytest.mark.asyncio
async def test_unwritable_location_raises_index_write_error(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file in the way")
    with pytest.raises(IndexWriteError):
        await create_connection(blocker / "index.db")


@pytest.mark.asyncio
async def test_fts_match_rejects_unknown_table():
    db = await create_connection(":memory:")
    try:
        with pytest.raises(ValueError):
            await db.fts_match("documents", "anything")
    finally:
        await db.close()
