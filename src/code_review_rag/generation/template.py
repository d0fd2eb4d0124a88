"""Deterministic template feedback."""

import logging
from pathlib import Path
from string import Template

from code_review_rag.generation.request import FeedbackRequest
from code_review_rag.models.entry import KnowledgeEntry
from code_review_rag.models.finding import Finding
from code_review_rag.models.outcome import GenerationOutcome

logger = logging.getLogger(__name__)

MISSING = "N/A"
MAX_SUGGESTED_TOPICS = 3

DEFAULT_TEMPLATE = """\
=== CODE REVIEW FEEDBACK ===
Issue Detected: $issue
Location: $location

Knowledge Base Guidance:
Title: $title
Type: $type
Description: $description

Example/Suggestion: $example

Reference: $reference
=============================
"""

_RULE = "============================="


def load_template(path: Path | None) -> str:
    """Read a feedback template, falling back to the built-in one."""
    if path is None:
        return DEFAULT_TEMPLATE
    try:
        text = path.read_text(encoding="utf-8")
    except OSError:
        logger.warning("Feedback template %s unreadable, using built-in template", path)
        return DEFAULT_TEMPLATE
    if not text.strip():
        logger.warning("Feedback template %s is empty, using built-in template", path)
        return DEFAULT_TEMPLATE
    return text


def _or_missing(value: str | None) -> str:
    return value if value and value.strip() else MISSING


def template_fields(finding: Finding, entry: KnowledgeEntry) -> dict[str, str]:
    """The fixed placeholder values for one (finding, entry) pair."""
    return {
        "issue": finding.issue,
        "location": finding.details,
        "title": entry.title,
        "type": entry.type.value,
        "description": entry.description,
        "example": _or_missing(entry.example),
        "reference": _or_missing(entry.reference),
    }


def render_feedback(template: str, finding: Finding, entry: KnowledgeEntry) -> str:
    """Substitute placeholders; unknown placeholders are left untouched."""
    return Template(template).safe_substitute(template_fields(finding, entry))


def render_basic_feedback(finding: Finding, topics: list[str] | tuple[str, ...] = ()) -> str:
    """Minimal report for a finding without knowledge-base guidance."""
    lines = [
        "=== CODE REVIEW FEEDBACK ===",
        f"Issue Detected: {finding.issue}",
        f"Location: {finding.details}",
        "Note: No specific guidance found in knowledge base.",
    ]
    suggestions = list(topics)[:MAX_SUGGESTED_TOPICS]
    if suggestions:
        lines.append("Suggested topics:")
        lines.extend(f"  - {topic}" for topic in suggestions)
    lines.append(_RULE)
    return "\n".join(lines) + "\n"


class TemplateStrategy:
    """Fills the feedback template with the top retrieved entry. Never fails."""

    name = "template"

    def __init__(self, template: str | None = None) -> None:
        """Initialize with template text (built-in default when None)."""
        self.template = template or DEFAULT_TEMPLATE

    def render(self, request: FeedbackRequest) -> str:
        """Feedback text for a request, without side effects."""
        if request.entries:
            return render_feedback(self.template, request.finding, request.entries[0])
        return render_basic_feedback(request.finding, request.topics)

    async def generate(self, request: FeedbackRequest) -> GenerationOutcome:
        """Render the template for a request."""
        return GenerationOutcome.success(self.name, self.render(request))
