"""Index database connection and schema management."""

from code_review_rag.db.backend import Cursor, Database, Row
from code_review_rag.db.sqlite_backend import SQLiteBackend

__all__ = ["Cursor", "Database", "Row", "SQLiteBackend"]
