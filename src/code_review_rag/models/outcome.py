"""Generation outcome model."""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class GenerationOutcome:
    """Result of one generation attempt: text on success, a failure reason otherwise.

    ``warning`` is set when the text was produced by a fallback and the user
    should be told why.
    """

    strategy: str
    text: str | None = None
    failure: str | None = None
    warning: str | None = None

    @property
    def ok(self) -> bool:
        """True when the attempt produced text."""
        return self.failure is None and bool(self.text)

    @classmethod
    def success(cls, strategy: str, text: str) -> "GenerationOutcome":
        """Build a successful outcome."""
        return cls(strategy=strategy, text=text)

    @classmethod
    def failed(cls, strategy: str, reason: str) -> "GenerationOutcome":
        """Build a failed outcome carrying the reason."""
        return cls(strategy=strategy, failure=reason)

    def with_warning(self, warning: str) -> "GenerationOutcome":
        """Return a copy carrying a user-visible warning."""
        return replace(self, warning=warning)
