"""
Prompt Pages AI - Review drafting and grammar fixing providers.

Usage:
    from promptpages.ai import get_review_generator, GenerationContext

    generator = get_review_generator()
    text = await generator.generate(GenerationContext(page_slug="demo", platform_name="Yelp"))
"""

from typing import Optional

from promptpages.ai.base import BaseReviewGenerator, GenerationContext, ReviewGenerator
from promptpages.ai.generators import LocalStubReviewGenerator, OpenAIReviewGenerator
from promptpages.core.base import Registry
from promptpages.core.config import get_settings
from promptpages.core.exceptions import ProviderNotFoundError

# Global registry for review generators
generator_registry: Registry[ReviewGenerator] = Registry(name="review_generators")


def register_default_generators() -> None:
    """Register the local stub and, when a key is configured, OpenAI."""
    settings = get_settings()
    generator_registry.register("local_stub", LocalStubReviewGenerator(), set_as_default=True)

    if settings.openai_api_key:
        generator_registry.register(
            "openai",
            OpenAIReviewGenerator(api_key=settings.openai_api_key, model=settings.openai_model),
            set_as_default=settings.default_review_generator == "openai",
        )


def get_review_generator(key: Optional[str] = None) -> ReviewGenerator:
    """
    Get a review generator by key or return the default.

    Registers the default generators on first use.

    Raises:
        ProviderNotFoundError: If the generator is not registered
    """
    if not len(generator_registry):
        register_default_generators()

    provider = generator_registry.get_default() if key is None else generator_registry.get(key)
    if provider is None:
        raise ProviderNotFoundError(
            provider_key=key or "default",
            available_providers=generator_registry.list_keys(),
        )
    return provider


__all__ = [
    "GenerationContext",
    "ReviewGenerator",
    "BaseReviewGenerator",
    "LocalStubReviewGenerator",
    "OpenAIReviewGenerator",
    "generator_registry",
    "register_default_generators",
    "get_review_generator",
]
