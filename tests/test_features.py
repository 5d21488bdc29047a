"""Feature module and handle tests."""
import asyncio

import pytest

from promptpages.composition import CompositionEngine, UpdateStatus
from promptpages.core.config import PromptPagesSettings
from promptpages.core.exceptions import (
    CapacityError,
    CatalogItemNotFoundError,
    ConfigurationError,
    FeatureOperationError,
    UnknownFieldError,
)
from promptpages.features import FeatureKey, FeatureRegistry, default_registry
from promptpages.features.definitions import (
    PLATFORM_OPTIONS,
    NoteFeature,
    get_falling_icon,
    icons_by_category,
)
from promptpages.kickstarters import DEFAULT_KICKSTARTERS, InMemoryKickstarterStorage, KickstarterCatalog

from conftest import FIXED_NOW


def test_default_registry_order_and_groups():
    """The seven features are registered in page order with one exclusivity group."""
    registry = default_registry()

    assert [m.key for m in registry] == [
        FeatureKey.NOTE,
        FeatureKey.SENTIMENT,
        FeatureKey.FALLING_ANIMATION,
        FeatureKey.AI_ASSIST,
        FeatureKey.OFFER,
        FeatureKey.PLATFORMS,
        FeatureKey.KICKSTARTERS,
    ]
    assert [m.key.value for m in registry.group_members("arrival_popup")] == ["note", "sentiment"]
    assert registry.describe()["exclusivity_groups"] == {"arrival_popup": ["note", "sentiment"]}


def test_registry_rejects_duplicates():
    """A feature key can be registered once."""
    registry = FeatureRegistry()
    registry.register(NoteFeature())
    with pytest.raises(ValueError):
        registry.register(NoteFeature())


def test_handle_enable_disable_toggle(engine):
    """Handles route enable/disable/toggle through the engine."""
    note = engine.feature("note")

    assert note.enable().applied
    assert note.is_enabled is True
    assert note.toggle().applied
    assert note.is_enabled is False
    assert note.disable().status == UpdateStatus.UNCHANGED


def test_ai_assist_flags(engine):
    """AI assistance counts as enabled while either flag is on."""
    ai = engine.feature("ai_assist")
    ai.set("generation_enabled", False)
    assert ai.is_enabled is True

    ai.disable()
    section = engine.configuration.ai_assist
    assert section.generation_enabled is False
    assert section.grammar_fix_enabled is False
    assert ai.is_enabled is False

    ai.enable()
    assert engine.configuration.ai_assist.generation_enabled is True


def test_falling_animation_validation(engine):
    """Icon must be in the icon catalog and colour must be hex."""
    engine.feature("falling_animation").update(icon_key="unicorn", color_hex="gold")

    violations = engine.validate()

    assert "Unknown falling animation icon 'unicorn'." in violations
    assert "Falling animation colour 'gold' is not a hex colour." in violations


def test_falling_icon_catalog():
    """The default icon is in the catalog and icons are grouped."""
    assert get_falling_icon("star").label == "Stars"
    assert get_falling_icon("unicorn") is None
    assert "General" in icons_by_category()


def test_sentiment_requires_question(engine):
    """An enabled emoji flow needs its question."""
    engine.feature("sentiment").update(enabled=True, question="   ")

    assert "Emoji sentiment flow needs a question." in engine.validate()


def test_offer_valid_when_complete(engine):
    """A complete offer passes validation."""
    engine.feature("offer").update(enabled=True, title="10% off", url="https://acme.example/offer")

    assert engine.validate() == []


def test_platform_list_operations(engine):
    """Platforms can be added, changed, verified and removed."""
    platforms = engine.feature("platforms")
    platforms.add_platform("Yelp", "https://yelp.com/biz/acme")
    platforms.add_platform("Other", "https://reviews.example/acme", custom_name="Local Guide")

    platforms.update_platform(0, target_word_count=120)
    platforms.mark_verified(1)

    config = engine.configuration
    assert [p.name for p in config.platforms] == ["Yelp", "Other"]
    assert config.platforms[0].target_word_count == 120
    assert config.platforms[1].verified is True
    assert config.platforms[1].verified_at == FIXED_NOW
    assert config.platforms[1].display_name == "Other: Local Guide"

    platforms.remove_platform(0)
    assert [p.name for p in engine.configuration.platforms] == ["Other"]


def test_platform_validation(engine):
    """Each platform needs a name, an http(s) URL and a positive word count."""
    platforms = engine.feature("platforms")
    platforms.add_platform("", "https://yelp.com/biz/acme")
    platforms.add_platform("Other", "yelp.com", target_word_count=0)

    violations = engine.validate()

    assert violations == [
        "Platform 1 needs a platform name.",
        "Platform 2 is 'Other' but has no custom name.",
        "Platform 2 review URL must be an http(s) URL.",
        "Platform 2 word count must be positive.",
    ]


def test_platforms_have_no_on_off_state(engine):
    """The platform list cannot be toggled or patched by field."""
    platforms = engine.feature("platforms")

    with pytest.raises(FeatureOperationError):
        platforms.enable()
    with pytest.raises(FeatureOperationError):
        platforms.update(name="Yelp")
    platforms.add_platform("Yelp", "https://yelp.com/biz/acme")
    with pytest.raises(UnknownFieldError):
        platforms.update_platform(0, stars=5)


def test_platform_options_end_with_other():
    assert PLATFORM_OPTIONS[0] == "Google Business Profile"
    assert PLATFORM_OPTIONS[-1] == "Other"


def test_kickstarter_toggle_through_handle(engine):
    """Selecting kickstarters updates the page's selection in order."""
    kickstarters = engine.feature("kickstarters")

    kickstarters.toggle("people-01")
    kickstarters.toggle("process-02")
    kickstarters.toggle("people-01")

    assert engine.configuration.kickstarters.selected_ids == ["process-02"]


def test_kickstarter_toggle_without_id_toggles_feature(engine):
    kickstarters = engine.feature("kickstarters")
    kickstarters.toggle()
    assert engine.configuration.kickstarters.enabled is True


def test_kickstarter_cap_from_settings(page_storage, catalog):
    """The selection cap is read from settings and rejections change nothing."""
    settings = PromptPagesSettings(_env_file=None, kickstarter_selection_cap=2)
    engine = CompositionEngine("page-1", storage=page_storage, catalog=catalog, settings=settings)
    kickstarters = engine.feature("kickstarters")
    kickstarters.toggle("people-01")
    kickstarters.toggle("people-02")

    with pytest.raises(CapacityError) as exc_info:
        kickstarters.toggle("people-03")

    assert exc_info.value.message == "You can select up to 2 kickstarters."
    assert engine.configuration.kickstarters.selected_ids == ["people-01", "people-02"]


def test_kickstarter_unknown_id_rejected(engine):
    with pytest.raises(CatalogItemNotFoundError):
        engine.feature("kickstarters").toggle("missing-01")


def test_kickstarter_handle_requires_catalog(settings):
    engine = CompositionEngine("page-1", settings=settings)
    with pytest.raises(ConfigurationError):
        engine.feature("kickstarters").toggle("people-01")


def test_kickstarter_validation_reports_stale_ids(engine):
    """Stored selections must still exist in the catalog."""
    engine.hydrate({"kickstarters": {"enabled": True, "selected_ids": ["people-01", "gone-01"]}})

    assert engine.validate() == ["Kickstarter 'gone-01' is no longer available."]

    engine.feature("kickstarters").prune()
    assert engine.configuration.kickstarters.selected_ids == ["people-01"]
    assert engine.validate() == []


def test_kickstarter_validation_reports_over_cap(catalog):
    """A stored selection larger than the cap is a violation."""
    capped = PromptPagesSettings(_env_file=None, kickstarter_selection_cap=1)
    engine = CompositionEngine("page-1", catalog=catalog, settings=capped)
    engine.hydrate({"kickstarters": {"selected_ids": ["people-01", "people-02"]}})

    assert engine.validate() == ["You can select up to 1 kickstarters."]


@pytest.mark.asyncio
async def test_create_custom_selects_by_default(engine, catalog):
    """Creating through the handle adds to the catalog and selects the item."""
    kickstarters = engine.feature("kickstarters")

    item = await kickstarters.create_custom("What did [Business Name] get right?", "OUTCOMES")

    assert item in catalog.items
    assert engine.configuration.kickstarters.selected_ids == [item.id]


@pytest.mark.asyncio
async def test_create_custom_without_select(engine, catalog):
    """Creation and selection are separate steps when asked."""
    item = await engine.feature("kickstarters").create_custom("Anything else?", select=False)

    assert item.id in catalog
    assert engine.configuration.kickstarters.selected_ids == []


def _slow_catalog(settings):
    return KickstarterCatalog(
        InMemoryKickstarterStorage(latency=0.02),
        account_id="acct-1",
        settings=settings,
        items=DEFAULT_KICKSTARTERS,
    )


@pytest.mark.asyncio
async def test_create_custom_keeps_toggles_made_while_storing(settings, page_storage):
    """Kickstarters selected while the new item is being stored stay selected."""
    engine = CompositionEngine("page-1", storage=page_storage, catalog=_slow_catalog(settings), settings=settings)
    kickstarters = engine.feature("kickstarters")

    pending = asyncio.create_task(kickstarters.create_custom("Why did you choose [Business Name]?"))
    await asyncio.sleep(0)
    kickstarters.toggle("process-01")
    item = await pending

    assert engine.configuration.kickstarters.selected_ids == ["process-01", item.id]


@pytest.mark.asyncio
async def test_create_custom_rechecks_capacity_after_storing(page_storage):
    """If the selection filled up meanwhile, the new item is kept but not selected."""
    capped = PromptPagesSettings(_env_file=None, kickstarter_selection_cap=1)
    catalog = _slow_catalog(capped)
    engine = CompositionEngine("page-1", storage=page_storage, catalog=catalog, settings=capped)
    kickstarters = engine.feature("kickstarters")

    pending = asyncio.create_task(kickstarters.create_custom("Why did you choose [Business Name]?"))
    await asyncio.sleep(0)
    kickstarters.toggle("process-01")

    with pytest.raises(CapacityError):
        await pending
    assert engine.configuration.kickstarters.selected_ids == ["process-01"]
    assert len(catalog.custom_items) == 1


def test_would_enable_detects_off_to_on():
    """Only patches that switch a feature on count as enabling it."""
    note = NoteFeature()
    off = note.default_section()
    on = note.merge(off, {"enabled": True})

    assert note.would_enable(off, {"enabled": True, "text": "Hi"}) is True
    assert note.would_enable(off, {"text": "Hi"}) is False
    assert note.would_enable(on, {"text": "Hi"}) is False
