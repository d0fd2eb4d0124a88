"""DDL for the knowledge index."""

from code_review_rag.db.backend import Database

SCHEMA_VERSION = 1

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS documents (
    doc_id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    type TEXT NOT NULL,
    description TEXT NOT NULL,
    example TEXT NOT NULL DEFAULT '',
    reference TEXT NOT NULL DEFAULT '',
    tags TEXT NOT NULL DEFAULT '',
    indexed_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_documents_type ON documents(type);

-- Whole-token index: exact-term and expansion clauses
CREATE VIRTUAL TABLE IF NOT EXISTS documents_fts USING fts5(
    title,
    description,
    tags,
    content='documents',
    content_rowid='rowid',
    tokenize='unicode61'
);

-- Trigram index: substring (*query*) clauses
CREATE VIRTUAL TABLE IF NOT EXISTS documents_trigram USING fts5(
    title,
    description,
    tags,
    content='documents',
    content_rowid='rowid',
    tokenize='trigram'
);

CREATE TRIGGER IF NOT EXISTS documents_ai AFTER INSERT ON documents BEGIN
    INSERT INTO documents_fts(rowid, title, description, tags)
    VALUES (new.rowid, new.title, new.description, new.tags);
    INSERT INTO documents_trigram(rowid, title, description, tags)
    VALUES (new.rowid, new.title, new.description, new.tags);
END;

CREATE TRIGGER IF NOT EXISTS documents_ad AFTER DELETE ON documents BEGIN
    INSERT INTO documents_fts(documents_fts, rowid, title, description, tags)
    VALUES ('delete', old.rowid, old.title, old.description, old.tags);
    INSERT INTO documents_trigram(documents_trigram, rowid, title, description, tags)
    VALUES ('delete', old.rowid, old.title, old.description, old.tags);
END;

CREATE TRIGGER IF NOT EXISTS documents_au AFTER UPDATE ON documents BEGIN
    INSERT INTO documents_fts(documents_fts, rowid, title, description, tags)
    VALUES ('delete', old.rowid, old.title, old.description, old.tags);
    INSERT INTO documents_trigram(documents_trigram, rowid, title, description, tags)
    VALUES ('delete', old.rowid, old.title, old.description, old.tags);
    INSERT INTO documents_fts(rowid, title, description, tags)
    VALUES (new.rowid, new.title, new.description, new.tags);
    INSERT INTO documents_trigram(rowid, title, description, tags)
    VALUES (new.rowid, new.title, new.description, new.tags);
END;
"""


async def apply_schema(db: Database) -> None:
    """Create index tables, FTS5 tables and sync triggers."""
    await db.executescript(SCHEMA_SQL)

    cursor = await db.execute("SELECT version FROM schema_version")
    row = await cursor.fetchone()
    if row is None:
        await db.execute("INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))

    await db.commit()
