"""Anthropic generation backend with graceful degradation."""

from __future__ import annotations

import logging
import os
from typing import Any

from code_review_rag.config import get_anthropic_model, get_anthropic_timeout
from code_review_rag.errors import GenerationBackendError

logger = logging.getLogger(__name__)

MAX_TOKENS = 1024


def _message_text(response: Any) -> str:
    """Concatenate the text blocks of a Messages API response."""
    blocks = getattr(response, "content", None) or []
    text = "".join(getattr(block, "text", "") for block in blocks)
    if not text:
        raise GenerationBackendError("Anthropic response has no text content")
    return text


class AnthropicLLMClient:
    """Generates text via the Anthropic Messages API."""

    def __init__(self, client: Any = None) -> None:
        """Initialize with an optional AsyncAnthropic client (created lazily otherwise)."""
        self._client: Any = client
        self._available: bool | None = None

    async def is_available(self) -> bool:
        """Check the SDK is importable and a key is configured."""
        if self._available is True:
            return True
        if self._get_client() is None:
            return False
        if not os.environ.get("ANTHROPIC_API_KEY"):
            logger.warning("ANTHROPIC_API_KEY not set, Anthropic backend disabled")
            return False
        # Key is set; the first generate() confirms it
        return True

    async def generate(self, prompt: str, *, system: str | None = None) -> str | None:
        """Generate text from a prompt. Returns None if unavailable or on failure."""
        try:
            client = self._get_client()
            if client is None:
                return None

            kwargs: dict[str, Any] = {
                "model": get_anthropic_model(),
                "max_tokens": MAX_TOKENS,
                "messages": [{"role": "user", "content": prompt}],
            }
            if system is not None:
                kwargs["system"] = system

            response = await client.messages.create(
                **kwargs,
                timeout=get_anthropic_timeout(),
            )
            result = _message_text(response)
            self._available = True
            return result
        except Exception:
            logger.warning("Anthropic generation failed", exc_info=True)
            self._available = None
            return None

    def _get_client(self) -> Any:
        """Lazily create the AsyncAnthropic client. Returns None if the SDK is missing."""
        if self._client is None:
            try:
                from anthropic import AsyncAnthropic

                self._client = AsyncAnthropic()
            except ImportError:
                logger.warning("anthropic package not installed, Anthropic backend disabled")
                return None
        return self._client

    async def close(self) -> None:
        """Close the Anthropic client if open."""
        if self._client is not None:
            await self._client.close()
            self._client = None
