"""
Review Generators - Concrete review drafting implementations.
"""

import hashlib
import logging
import re
from typing import Any, Optional

from promptpages.ai.base import BaseReviewGenerator, GenerationContext
from promptpages.core.base import ComponentStatus, HealthCheckResult
from promptpages.core.config import get_settings
from promptpages.core.exceptions import ConfigurationError, GenerationError

logger = logging.getLogger(__name__)

_OPENINGS = (
    "I had a wonderful experience with {subject}.",
    "{subject} went above and beyond for me.",
    "I can't say enough good things about {subject}.",
    "Working with {subject} was a pleasure from start to finish.",
)

_CLOSINGS = (
    "I would recommend them to anyone.",
    "I'll definitely be back.",
    "Five stars, without hesitation.",
)


class LocalStubReviewGenerator(BaseReviewGenerator):
    """
    Deterministic review generator for development and testing.

    Picks sentences by hashing the context, so identical input always
    yields the identical draft.
    """

    def __init__(self):
        super().__init__(model="local-stub-v1")

    @property
    def name(self) -> str:
        return "local_stub"

    async def generate(self, context: GenerationContext) -> str:
        digest = hashlib.sha256(repr(sorted(context.to_dict().items())).encode("utf-8")).digest()
        subject = context.business_name or "this team"
        opening = _OPENINGS[digest[0] % len(_OPENINGS)].format(subject=subject)
        opening = opening[0].upper() + opening[1:]
        closing = _CLOSINGS[digest[1] % len(_CLOSINGS)]

        sentences = [opening]
        if context.existing_text.strip():
            sentences.append(context.existing_text.strip())
        sentences.append(closing)

        words = " ".join(sentences).split()
        return " ".join(words[: max(context.target_word_count, 1)])

    async def fix_grammar(self, text: str) -> str:
        cleaned = re.sub(r"\s+", " ", text or "").strip()
        if not cleaned:
            return cleaned
        cleaned = re.sub(r"\bi\b", "I", cleaned)
        cleaned = re.sub(r"([.!?]\s+)([a-z])", lambda m: m.group(1) + m.group(2).upper(), cleaned)
        cleaned = cleaned[0].upper() + cleaned[1:]
        if cleaned[-1] not in ".!?":
            cleaned += "."
        return cleaned

    async def health_check(self) -> HealthCheckResult:
        return HealthCheckResult(
            status=ComponentStatus.HEALTHY,
            component_name=self.name,
            message="Local stub generator ready",
        )


class OpenAIReviewGenerator(BaseReviewGenerator):
    """
    OpenAI chat-completion review generator.

    Requires an API key; the client is created on first use.
    """

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        """
        Initialize the OpenAI generator.

        Args:
            api_key: OpenAI API key (falls back to settings if not provided)
            model: Chat model to use (falls back to settings)

        Raises:
            ConfigurationError: If API key is not provided or configured
        """
        settings = get_settings()
        super().__init__(model=model or settings.openai_model)

        self._api_key = api_key or settings.openai_api_key
        if not self._api_key:
            raise ConfigurationError(
                setting="PROMPTPAGES_OPENAI_API_KEY",
                reason="OpenAI API key is required for the OpenAI review generator",
                suggestion="Set PROMPTPAGES_OPENAI_API_KEY environment variable or pass api_key parameter",
            )
        self._client: Optional[Any] = None

    @property
    def name(self) -> str:
        return "openai"

    def _get_client(self) -> Any:
        """Get or create OpenAI client (lazy initialization)."""
        if self._client is None:
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI(api_key=self._api_key)
        return self._client

    async def _chat(self, system: str, user: str, max_tokens: int) -> str:
        client = self._get_client()
        try:
            response = await client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                max_tokens=max_tokens,
                temperature=0.7,
            )
        except Exception as e:
            logger.error(f"OpenAI request failed: {e}")
            raise GenerationError(provider=self.name, reason=str(e)) from e
        return (response.choices[0].message.content or "").strip()

    async def generate(self, context: GenerationContext) -> str:
        return await self._chat(
            "You help happy customers write honest online reviews.",
            context.to_prompt(),
            max_tokens=max(context.target_word_count * 2, 64),
        )

    async def fix_grammar(self, text: str) -> str:
        return await self._chat(
            "Fix spelling and grammar. Keep the meaning and tone. Reply with the corrected text only.",
            text,
            max_tokens=max(len(text.split()) * 2, 64),
        )
