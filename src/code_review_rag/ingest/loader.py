"""Knowledge-base loader. Reads one JSON record per file."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from code_review_rag.errors import IndexWriteError, RecordParseError
from code_review_rag.models.entry import KnowledgeEntry

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """Entries parsed from a knowledge-base directory."""

    entries: list[KnowledgeEntry] = field(default_factory=list)
    skipped: list[RecordParseError] = field(default_factory=list)
    files: list[str] = field(default_factory=list)


def parse_record(path: Path) -> KnowledgeEntry:
    """Parse one knowledge record file. Raises RecordParseError on any failure."""
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise RecordParseError(path.name, f"unreadable: {e}") from e
    try:
        return KnowledgeEntry.model_validate_json(raw)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'record'}: {err['msg']}"
            for err in e.errors()
        )
        raise RecordParseError(path.name, errors) from e


def load_knowledge_dir(kb_dir: Path) -> LoadResult:
    """Load every ``*.json`` record in ``kb_dir`` (sorted, non-recursive).

    A malformed record is logged and skipped. A missing or unreadable
    directory raises IndexWriteError: without a knowledge base nothing can
    be retrieved.
    """
    if not kb_dir.is_dir():
        raise IndexWriteError(f"Knowledge-base directory not found: {kb_dir}")
    try:
        paths = sorted(p for p in kb_dir.iterdir() if p.suffix == ".json" and p.is_file())
    except OSError as e:
        raise IndexWriteError(f"Cannot read knowledge-base directory {kb_dir}: {e}") from e

    result = LoadResult(files=[p.name for p in paths])
    if not paths:
        logger.warning("No JSON files found in knowledge-base directory: %s", kb_dir)

    for path in paths:
        try:
            result.entries.append(parse_record(path))
        except RecordParseError as e:
            logger.warning("Skipping knowledge record %s", e)
            result.skipped.append(e)

    logger.info(
        "Loaded %d knowledge record(s) from %s (%d skipped)",
        len(result.entries),
        kb_dir,
        len(result.skipped),
    )
    return result
