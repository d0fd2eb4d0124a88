"""Term-association cache built from co-occurring keywords.

Every keyword of an entry (from its title, description and tags) is
associated with every other keyword of the same entry. A query that uses one
vocabulary ("vector") can then reach entries written in a related one
("legacy collections") as long as both co-occurred somewhere in the index.
"""

import re
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from code_review_rag.models.document import IndexedDocument

MIN_KEYWORD_LENGTH = 3

STOP_WORDS = frozenset(
    {
        "the", "and", "for", "are", "but", "not", "you", "all", "can", "had",
        "her", "was", "one", "our", "out", "day", "get", "has", "him", "his",
        "how", "its", "may", "new", "now", "old", "see", "two", "who", "boy",
        "did", "she", "use", "way", "will", "with",
    }
)  # fmt: skip

_SPLIT_RE = re.compile(r"[\s,.\-]+")
_EDGE_PUNCT = "()[]{}<>\"'`;:!?/\\*=+"


def _keep(word: str) -> bool:
    return len(word) >= MIN_KEYWORD_LENGTH and word not in STOP_WORDS


def extract_keywords(text: str) -> set[str]:
    """Lowercase keywords of ``text`` after stop-word and length filtering."""
    words = (w.strip(_EDGE_PUNCT) for w in _SPLIT_RE.split(text.lower()))
    return {w for w in words if _keep(w)}


def document_keywords(doc: IndexedDocument) -> set[str]:
    """All keywords one document contributes: title and description words plus whole tags."""
    keywords = extract_keywords(doc.title) | extract_keywords(doc.description)
    keywords.update(t for t in (tag.lower() for tag in doc.tag_list) if _keep(t))
    return keywords


class PatternCache:
    """Immutable keyword → co-occurring keywords mapping.

    Associations are symmetric: whenever ``b in cache.related(a)``, also
    ``a in cache.related(b)``.
    """

    __slots__ = ("_associations",)

    def __init__(self, associations: Mapping[str, Iterable[str]] | None = None) -> None:
        """Freeze ``associations`` into a read-only mapping."""
        frozen = {k: frozenset(v) for k, v in (associations or {}).items()}
        self._associations: Mapping[str, frozenset[str]] = MappingProxyType(frozen)

    @classmethod
    def from_documents(cls, documents: Iterable[IndexedDocument]) -> "PatternCache":
        """Build the cache from a full index scan. Pure: same documents, same cache."""
        associations: dict[str, set[str]] = {}
        for doc in documents:
            keywords = document_keywords(doc)
            for keyword in keywords:
                associations.setdefault(keyword, set()).update(keywords)
        return cls(associations)

    def related(self, keyword: str) -> frozenset[str]:
        """Keywords associated with ``keyword`` (empty when it is not a key)."""
        return self._associations.get(keyword.lower(), frozenset())

    def expand(self, query: str) -> frozenset[str]:
        """Keywords associated with any key that occurs inside ``query``.

        Compound rule names such as ``ReplaceVectorWithList`` carry no
        separators, so every key found as a substring contributes, not only
        an exact key.
        """
        needle = query.lower()
        terms: set[str] = set()
        for key, related in self._associations.items():
            if key in needle:
                terms.update(related)
        return frozenset(terms)

    def __contains__(self, keyword: object) -> bool:
        return isinstance(keyword, str) and keyword.lower() in self._associations

    def __len__(self) -> int:
        return len(self._associations)

    def keys(self) -> frozenset[str]:
        """Every keyword with associations."""
        return frozenset(self._associations)
