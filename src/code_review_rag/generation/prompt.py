"""Structured prompt construction for a generative backend."""

from code_review_rag.generation.request import FeedbackRequest
from code_review_rag.models.entry import KnowledgeEntry
from code_review_rag.models.finding import Finding

SYSTEM_INSTRUCTION = (
    "You are an expert Java code reviewer. "
    "Provide clear, educational, and actionable feedback."
)

TRUNCATION_MARKER = "\n... (truncated)"
MAX_PROMPT_FINDINGS = 5
DEFAULT_CODE_CHARS = 500

_INSTRUCTIONS = """\
INSTRUCTIONS:
Provide a helpful response that:
1. Explains why the detected issues matter
2. References the best practices from the knowledge base
3. Suggests concrete improvements
4. Uses a friendly, educational tone
"""


def truncate_code(code: str, max_chars: int = DEFAULT_CODE_CHARS) -> str:
    """Cap code at ``max_chars``, marking the cut."""
    if len(code) <= max_chars:
        return code
    return code[:max_chars] + TRUNCATION_MARKER


def build_prompt(
    user_query: str | None,
    findings: list[Finding] | tuple[Finding, ...],
    entries: list[KnowledgeEntry] | tuple[KnowledgeEntry, ...],
    code: str | None = None,
    *,
    max_code_chars: int = DEFAULT_CODE_CHARS,
) -> str:
    """Combine instruction, request, code, findings and knowledge into one prompt."""
    parts = [SYSTEM_INSTRUCTION, ""]

    if user_query and user_query.strip():
        parts += ["USER REQUEST:", user_query.strip(), ""]

    if code:
        parts += ["CODE BEING ANALYZED:", "```java", truncate_code(code, max_code_chars), "```", ""]

    if findings:
        parts.append("ISSUES DETECTED:")
        for i, finding in enumerate(findings[:MAX_PROMPT_FINDINGS], 1):
            parts.append(f"{i}. {finding.issue}")
            parts.append(f"   Location: {finding.details}")
        parts.append("")

    if entries:
        parts.append("RELEVANT BEST PRACTICES:")
        for entry in entries:
            parts.append(f"- {entry.title} ({entry.type.value})")
            parts.append(f"  {entry.description}")
            if entry.example:
                parts.append(f"  Example: {entry.example}")
        parts.append("")

    parts.append(_INSTRUCTIONS)
    return "\n".join(parts)


def build_request_prompt(request: FeedbackRequest, max_code_chars: int = DEFAULT_CODE_CHARS) -> str:
    """Prompt for one finding; general best practices stand in when nothing matched."""
    entries = request.entries or request.general_entries
    return build_prompt(
        request.user_query,
        request.context_findings,
        entries,
        request.source_code,
        max_code_chars=max_code_chars,
    )
