"""Stored index document model."""

from pydantic import BaseModel

from code_review_rag.models.entry import EntryType, KnowledgeEntry

# Fields exposed to full-text search
SEARCH_FIELDS: tuple[str, ...] = ("title", "description", "tags")


class IndexedDocument(BaseModel):
    """Field map stored per entry so results rebuild without re-reading source files.

    ``type`` and ``reference`` are exact-match fields; ``tags`` is the
    space-joined tag list.
    """

    title: str
    type: str
    description: str
    example: str = ""
    reference: str = ""
    tags: str = ""

    @classmethod
    def from_entry(cls, entry: KnowledgeEntry) -> "IndexedDocument":
        """Build the stored field map for an entry."""
        return cls(
            title=entry.title,
            type=entry.type.value,
            description=entry.description,
            example=entry.example or "",
            reference=entry.reference or "",
            tags=" ".join(entry.tags),
        )

    def to_entry(self) -> KnowledgeEntry:
        """Reconstruct the knowledge entry from stored fields."""
        return KnowledgeEntry(
            title=self.title,
            type=EntryType(self.type),
            description=self.description,
            example=self.example or None,
            reference=self.reference or None,
            tags=self.tag_list,
        )

    @property
    def tag_list(self) -> list[str]:
        """Tags split back on whitespace."""
        return self.tags.split() if self.tags.strip() else []
