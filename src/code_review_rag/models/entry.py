"""Knowledge entry models."""

import re
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

_TYPE_SEPARATORS_RE = re.compile(r"[\s_\-]+")


class EntryType(StrEnum):
    """Classification of knowledge entries."""

    BEST_PRACTICE = "BestPractice"
    ANTI_PATTERN = "AntiPattern"
    ENHANCEMENT = "Enhancement"


_TYPE_ALIASES = {member.value.lower(): member for member in EntryType}


class KnowledgeEntry(BaseModel):
    """A best-practice, anti-pattern, or enhancement record used as retrieval context."""

    title: str
    type: EntryType
    description: str
    example: str | None = None
    reference: str | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: object) -> object:
        """Accept spelling variants like "Best Practice" or "anti-pattern"."""
        if isinstance(value, str):
            key = _TYPE_SEPARATORS_RE.sub("", value).lower()
            if key in _TYPE_ALIASES:
                return _TYPE_ALIASES[key]
        return value

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: list[str]) -> list[str]:
        """Tags are an ordered set: drop blanks and repeats, keep first occurrence."""
        return list(dict.fromkeys(t.strip() for t in value if t.strip()))


def validate_entry(entry: KnowledgeEntry) -> str | None:
    """Return why an entry cannot be indexed, or None if it is indexable."""
    if not entry.title.strip():
        return "empty title"
    if not entry.description.strip():
        return "empty description"
    return None
