"""Page storage and review generator tests."""
from types import SimpleNamespace

import pytest

from promptpages.ai import (
    GenerationContext,
    LocalStubReviewGenerator,
    OpenAIReviewGenerator,
    generator_registry,
    get_review_generator,
)
from promptpages.core.base import ComponentStatus
from promptpages.core.config import get_settings
from promptpages.core.exceptions import ConfigurationError, GenerationError, ProviderNotFoundError
from promptpages.storage import InMemoryPageStorage, PageStorageProtocol, get_storage


@pytest.fixture
def clean_settings(monkeypatch):
    """Settings without an OpenAI key, rebuilt for the test."""
    monkeypatch.delenv("PROMPTPAGES_OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("PROMPTPAGES_DEFAULT_REVIEW_GENERATOR", raising=False)
    get_settings.cache_clear()
    generator_registry.clear()
    yield get_settings()
    get_settings.cache_clear()
    generator_registry.clear()


@pytest.mark.asyncio
async def test_memory_storage_round_trip_is_isolated():
    """Stored records are copies; callers cannot mutate them afterwards."""
    storage = InMemoryPageStorage()
    record = {"slug": "acme", "platforms": [{"name": "Yelp"}]}

    await storage.save("page-1", record)
    record["platforms"][0]["name"] = "Changed"
    loaded = await storage.load("page-1")
    loaded["slug"] = "changed"

    assert (await storage.load("page-1")) == {"slug": "acme", "platforms": [{"name": "Yelp"}]}
    assert await storage.load("missing") is None
    assert await storage.exists("page-1") is True


@pytest.mark.asyncio
async def test_memory_storage_failure_hook():
    """fail_next_saves makes the next saves raise, then recovers."""
    storage = InMemoryPageStorage()
    storage.fail_next_saves(2)

    for _ in range(2):
        with pytest.raises(ConnectionError):
            await storage.save("page-1", {"slug": "acme"})
    await storage.save("page-1", {"slug": "acme"})

    assert storage.save_calls == 3
    assert storage.peek("page-1") == {"slug": "acme"}


@pytest.mark.asyncio
async def test_memory_storage_health():
    storage = InMemoryPageStorage(records={"a": {}})
    health = await storage.health_check()
    assert health.status == ComponentStatus.HEALTHY
    assert health.details["page_count"] == 1
    assert isinstance(storage, PageStorageProtocol)


def test_get_storage_default():
    assert get_storage().name == "in_memory"
    with pytest.raises(KeyError):
        get_storage("postgres")


@pytest.mark.asyncio
async def test_local_stub_generator_is_deterministic():
    """The same context always yields the same draft."""
    generator = LocalStubReviewGenerator()
    context = GenerationContext(page_slug="acme", platform_name="Yelp", business_name="Acme Dental")

    first = await generator.generate(context)
    second = await generator.generate(context)

    assert first == second
    assert "Acme Dental" in first


@pytest.mark.asyncio
async def test_local_stub_respects_word_count():
    generator = LocalStubReviewGenerator()
    context = GenerationContext(
        page_slug="acme",
        platform_name="Yelp",
        target_word_count=5,
        existing_text="The hygienist was gentle and explained every step of the cleaning.",
    )
    assert len((await generator.generate(context)).split()) == 5


def test_generation_context_prompt():
    """The prompt names the platform, length and kickstarter questions."""
    context = GenerationContext(
        page_slug="acme",
        platform_name="Google Business Profile",
        target_word_count=80,
        business_name="Acme",
        prompts=["What did Acme get right?"],
    )
    prompt = context.to_prompt()
    assert "Google Business Profile" in prompt
    assert "around 80 words" in prompt
    assert "- What did Acme get right?" in prompt


def test_get_review_generator_defaults_to_local_stub(clean_settings):
    """Without an OpenAI key only the local stub is registered."""
    assert get_review_generator().name == "local_stub"
    assert get_review_generator("local_stub").name == "local_stub"
    with pytest.raises(ProviderNotFoundError):
        get_review_generator("openai")


def test_openai_generator_requires_key(clean_settings):
    with pytest.raises(ConfigurationError) as exc_info:
        OpenAIReviewGenerator()
    assert exc_info.value.setting == "PROMPTPAGES_OPENAI_API_KEY"


class _FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _with_fake_client(generator, completions):
    generator._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return generator


@pytest.mark.asyncio
async def test_openai_generator_uses_chat_completions():
    """The OpenAI generator sends the context prompt to the configured model."""
    completions = _FakeCompletions(content="  Great visit!  ")
    generator = _with_fake_client(OpenAIReviewGenerator(api_key="sk-test", model="gpt-test"), completions)

    text = await generator.generate(GenerationContext(page_slug="acme", platform_name="Yelp"))

    assert text == "Great visit!"
    assert completions.calls[0]["model"] == "gpt-test"
    assert "Yelp" in completions.calls[0]["messages"][1]["content"]


@pytest.mark.asyncio
async def test_openai_generator_wraps_errors():
    completions = _FakeCompletions(error=RuntimeError("rate limited"))
    generator = _with_fake_client(OpenAIReviewGenerator(api_key="sk-test"), completions)

    with pytest.raises(GenerationError) as exc_info:
        await generator.fix_grammar("i liked it")
    assert exc_info.value.provider == "openai"
    assert exc_info.value.retry_possible is True


def test_engine_falls_back_when_configured_generator_is_missing(clean_settings):
    """Asking for OpenAI without a key falls back to the local stub."""
    from promptpages.composition import CompositionEngine
    from promptpages.core.config import PromptPagesSettings

    settings = PromptPagesSettings(_env_file=None, default_review_generator="openai")
    engine = CompositionEngine("page-1", settings=settings)

    assert engine.review_generator.name == "local_stub"
