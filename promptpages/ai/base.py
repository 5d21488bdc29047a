"""
Review Generator Base - Protocol for AI review drafting.

The page only decides when generation is allowed and what context is
passed; producing the text is delegated to a provider.
"""

from abc import abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from promptpages.core.base import PromptPagesComponent


@dataclass
class GenerationContext:
    """
    Everything a provider may use to draft one review.

    Attributes:
        page_slug: Slug of the prompt page
        platform_name: Display name of the target platform
        target_word_count: Suggested length of the review
        business_name: Business being reviewed, when known
        prompts: Rendered kickstarter questions selected on the page
        existing_text: Draft already typed by the customer
    """

    page_slug: Optional[str]
    platform_name: str
    target_word_count: int = 200
    business_name: Optional[str] = None
    prompts: List[str] = field(default_factory=list)
    existing_text: str = ""

    def to_prompt(self) -> str:
        """Instruction text for chat-style models."""
        subject = self.business_name or "the business"
        lines = [
            f"Write a genuine, positive customer review of {subject} for {self.platform_name}.",
            f"Keep it around {self.target_word_count} words, first person, no hashtags.",
        ]
        if self.prompts:
            lines.append("Draw on these questions:")
            lines.extend(f"- {prompt}" for prompt in self.prompts)
        if self.existing_text.strip():
            lines.append(f"Build on the customer's draft: {self.existing_text.strip()}")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page_slug": self.page_slug,
            "platform_name": self.platform_name,
            "target_word_count": self.target_word_count,
            "business_name": self.business_name,
            "prompts": list(self.prompts),
            "existing_text": self.existing_text,
        }


@runtime_checkable
class ReviewGenerator(Protocol):
    """
    Protocol for review generators.

    Example:
        class CannedGenerator:
            @property
            def name(self) -> str:
                return "canned"

            async def generate(self, context: GenerationContext) -> str:
                return "Great service!"

            async def fix_grammar(self, text: str) -> str:
                return text
    """

    @property
    def name(self) -> str:
        ...

    async def generate(self, context: GenerationContext) -> str:
        """Draft a review for ``context``. Raises GenerationError on failure."""
        ...

    async def fix_grammar(self, text: str) -> str:
        """Return ``text`` with spelling and grammar corrected."""
        ...


class BaseReviewGenerator(PromptPagesComponent):
    """Base class for review generators."""

    def __init__(self, model: Optional[str] = None):
        self._model = model

    @property
    def model_name(self) -> Optional[str]:
        return self._model

    @abstractmethod
    async def generate(self, context: GenerationContext) -> str:
        ...

    @abstractmethod
    async def fix_grammar(self, text: str) -> str:
        ...
