"""Feedback generation strategies and the fallback chain between them."""

import logging
from typing import Protocol, runtime_checkable

from code_review_rag.generation.prompt import DEFAULT_CODE_CHARS, SYSTEM_INSTRUCTION, build_request_prompt
from code_review_rag.generation.request import FeedbackRequest
from code_review_rag.generation.template import TemplateStrategy
from code_review_rag.llm.provider import LLMProvider
from code_review_rag.models.outcome import GenerationOutcome

logger = logging.getLogger(__name__)

UNAVAILABLE_WARNING = "Generation backend unavailable; showing template feedback."


@runtime_checkable
class GenerationStrategy(Protocol):
    """Turns a feedback request into text."""

    name: str

    async def generate(self, request: FeedbackRequest) -> GenerationOutcome:
        """Produce feedback; failures are reported in the outcome, not raised."""
        ...


class BackendStrategy:
    """Asks a generative backend to explain a finding."""

    name = "backend"

    def __init__(self, llm: LLMProvider, max_code_chars: int = DEFAULT_CODE_CHARS) -> None:
        """Initialize with a backend and the code excerpt cap for prompts."""
        self._llm = llm
        self._max_code_chars = max_code_chars

    async def is_available(self) -> bool:
        """Whether the backend answers at all; a check that raises counts as unavailable."""
        try:
            return await self._llm.is_available()
        except Exception:
            logger.warning("Generation backend availability check raised", exc_info=True)
            return False

    async def generate(self, request: FeedbackRequest) -> GenerationOutcome:
        """Build the prompt and call the backend once."""
        prompt = build_request_prompt(request, self._max_code_chars)
        try:
            text = await self._llm.generate(prompt, system=SYSTEM_INSTRUCTION)
        except Exception as exc:
            logger.warning("Generation backend raised", exc_info=True)
            return GenerationOutcome.failed(self.name, f"backend error: {exc}")
        if text is None:
            return GenerationOutcome.failed(self.name, "backend unavailable or timed out")
        if not text.strip():
            return GenerationOutcome.failed(self.name, "backend returned an empty response")
        return GenerationOutcome.success(self.name, text.strip())


class ResilientStrategy:
    """Tries the backend, retries, then falls back to the template.

    An unavailable backend is skipped without a retry. Whenever the template
    answers, its text is exactly what the template strategy alone would
    produce; only the warning differs.
    """

    def __init__(
        self,
        primary: BackendStrategy,
        fallback: TemplateStrategy,
        retries: int = 1,
    ) -> None:
        """Initialize with the backend, the template fallback and a retry count."""
        self.primary = primary
        self.fallback = fallback
        self.retries = retries
        self.name = primary.name

    async def generate(self, request: FeedbackRequest) -> GenerationOutcome:
        """Generate with the backend when possible, else with the template."""
        if not await self.primary.is_available():
            logger.info("Generation backend unavailable, using template feedback")
            fallback = await self.fallback.generate(request)
            return fallback.with_warning(UNAVAILABLE_WARNING)

        outcome = await self.primary.generate(request)
        for attempt in range(self.retries):
            if outcome.ok:
                return outcome
            logger.warning(
                "Backend generation failed (%s), retry %d of %d",
                outcome.failure,
                attempt + 1,
                self.retries,
            )
            outcome = await self.primary.generate(request)
        if outcome.ok:
            return outcome

        fallback = await self.fallback.generate(request)
        return fallback.with_warning(
            f"Generation backend failed ({outcome.failure}); showing template feedback."
        )


def create_strategy(
    llm: LLMProvider | None,
    template: str | None = None,
    *,
    max_code_chars: int = DEFAULT_CODE_CHARS,
) -> GenerationStrategy:
    """Pick the strategy for the configured backend.

    With no backend the template strategy is used directly.
    """
    fallback = TemplateStrategy(template)
    if llm is None:
        return fallback
    return ResilientStrategy(BackendStrategy(llm, max_code_chars), fallback)
