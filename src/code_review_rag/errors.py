"""Error taxonomy for indexing, analysis, and generation."""


class ReviewRagError(Exception):
    """Base class for all code-review-rag errors."""


class IndexWriteError(ReviewRagError):
    """Knowledge-base directory unreadable or index location unwritable. Fatal."""


class RecordParseError(ReviewRagError):
    """A single knowledge record could not be read or validated."""

    def __init__(self, source: str, reason: str) -> None:
        """Initialize with the offending record source and the reason."""
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


class AnalyzerError(ReviewRagError):
    """An external static analyzer failed to produce findings."""


class GenerationBackendError(ReviewRagError):
    """The generation backend timed out, was unreachable, or answered garbage."""


class ConfigurationError(ReviewRagError):
    """A required setting is missing. The message carries the remediation."""
