"""Static-analysis finding model."""

from pydantic import BaseModel, ConfigDict


class Finding(BaseModel):
    """A single issue reported against source code.

    Immutable and hashable; two findings are equal when both issue and
    details match, which is what deduplication relies on.
    """

    model_config = ConfigDict(frozen=True)

    issue: str
    details: str


def dedupe_findings(findings: list[Finding]) -> list[Finding]:
    """Drop repeated findings, keeping first-seen order."""
    return list(dict.fromkeys(findings))
