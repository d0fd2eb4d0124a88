"""Backend protocol for generative feedback."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class LLMProvider(Protocol):
    """A text-generation backend that degrades to None instead of raising."""

    async def is_available(self) -> bool:
        """Check if the backend is reachable."""
        ...

    async def generate(self, prompt: str, *, system: str | None = None) -> str | None:
        """Generate text from a prompt. Returns None if unavailable or on failure."""
        ...

    async def close(self) -> None:
        """Release resources."""
        ...
