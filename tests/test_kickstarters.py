"""Kickstarter catalog and selection tests."""
import asyncio
import random

import pytest

from promptpages.core.config import MAX_QUESTION_LENGTH, SELECTION_CAP
from promptpages.core.exceptions import (
    CapacityError,
    CatalogItemNotFoundError,
    EmptyQuestionError,
    ImmutableItemError,
    OperationInProgressError,
    QuestionLengthError,
)
from promptpages.kickstarters import (
    BUSINESS_NAME_PLACEHOLDER,
    DEFAULT_KICKSTARTERS,
    PREVIEW_SAMPLES,
    InMemoryKickstarterStorage,
    Kickstarter,
    KickstarterCatalog,
    KickstarterCategory,
    KickstarterSelection,
    create_and_select,
    cycle_preview,
    example_for_preview,
    render,
)


def test_length_ceiling_matches_longest_default():
    """The custom question ceiling is the longest default question."""
    assert max(len(item.question) for item in DEFAULT_KICKSTARTERS) == MAX_QUESTION_LENGTH


def test_selection_stops_at_cap(bulk_catalog, bulk_items):
    """Selecting past the cap is rejected and the selection keeps its size."""
    selection = KickstarterSelection(cap=SELECTION_CAP)
    for item in bulk_items[:SELECTION_CAP]:
        selection.toggle(item.id, bulk_catalog)

    with pytest.raises(CapacityError) as exc_info:
        selection.toggle(bulk_items[SELECTION_CAP].id, bulk_catalog)

    assert exc_info.value.cap == 50
    assert len(selection) == 50
    assert bulk_items[SELECTION_CAP].id not in selection
    assert selection.is_full is True


def test_deselect_is_allowed_when_full(bulk_catalog, bulk_items):
    """A full selection can still drop items."""
    selection = KickstarterSelection([item.id for item in bulk_items[:50]], cap=50)

    assert selection.toggle(bulk_items[0].id, bulk_catalog) is False
    assert selection.toggle(bulk_items[55].id, bulk_catalog) is True
    assert len(selection) == 50


def test_random_sequences_respect_cap(bulk_catalog, bulk_items):
    """No toggle sequence grows the selection past the cap."""
    rng = random.Random(11)
    selection = KickstarterSelection(cap=10)
    for _ in range(500):
        item = rng.choice(bulk_items)
        try:
            selection.toggle(item.id, bulk_catalog)
        except CapacityError:
            pass
        assert len(selection) <= 10


def test_toggle_unknown_item(catalog):
    selection = KickstarterSelection()
    with pytest.raises(CatalogItemNotFoundError):
        selection.toggle("nope", catalog)
    assert len(selection) == 0


@pytest.mark.asyncio
async def test_over_length_question_rejected(catalog, kickstarter_storage):
    """A 90-character question is rejected and nothing is stored."""
    question = "Q" * 90
    before = catalog.items

    with pytest.raises(QuestionLengthError) as exc_info:
        await catalog.create_custom_item(question, KickstarterCategory.PROCESS)

    assert exc_info.value.violations == ["Question must be 89 characters or less (got 90)."]
    assert catalog.items == before
    assert len(await kickstarter_storage.list_items("acct-1")) == len(DEFAULT_KICKSTARTERS)


@pytest.mark.asyncio
async def test_question_at_ceiling_accepted_after_trim(catalog):
    """Length is checked on the trimmed question."""
    item = await catalog.create_custom_item("  " + "Q" * 89 + "  ", "PEOPLE")

    assert item.question == "Q" * 89
    assert item.is_default is False
    assert item.account_id == "acct-1"
    assert item.category == KickstarterCategory.PEOPLE


@pytest.mark.asyncio
async def test_empty_question_rejected(catalog):
    with pytest.raises(EmptyQuestionError) as exc_info:
        await catalog.create_custom_item("   ", "PEOPLE")
    assert exc_info.value.message == "Please enter a question."


@pytest.mark.asyncio
async def test_created_item_visible_without_reload(catalog, kickstarter_storage):
    """New items appear in the held catalog and in storage at once."""
    item = await catalog.create_custom_item("Why [Business Name]?", KickstarterCategory.EXPERIENCE)

    assert catalog.get(item.id) == item
    assert item in catalog.custom_items
    assert kickstarter_storage.list_calls == 0
    assert item in await kickstarter_storage.list_items("acct-1")


@pytest.mark.asyncio
async def test_create_and_select(catalog):
    """The editor flow creates then selects."""
    selection = KickstarterSelection(["people-01"], cap=5)

    item = await create_and_select(catalog, selection, "What made you smile?", "EXPERIENCE")

    assert selection.selected_ids == ["people-01", item.id]


@pytest.mark.asyncio
async def test_create_and_select_checks_capacity_first(catalog):
    """A full selection blocks creation entirely."""
    selection = KickstarterSelection(["people-01"], cap=1)
    count = len(catalog)

    with pytest.raises(CapacityError):
        await create_and_select(catalog, selection, "What made you smile?", "EXPERIENCE")

    assert len(catalog) == count
    assert selection.selected_ids == ["people-01"]


@pytest.mark.asyncio
async def test_delete_custom_item(catalog):
    """Custom items can be deleted; defaults cannot."""
    item = await catalog.create_custom_item("Temporary question?", "PROCESS")

    await catalog.delete_custom_item(item.id)

    assert item.id not in catalog
    with pytest.raises(ImmutableItemError):
        await catalog.delete_custom_item("people-01")
    with pytest.raises(CatalogItemNotFoundError):
        await catalog.delete_custom_item(item.id)


@pytest.mark.asyncio
async def test_load_shows_only_own_custom_items(settings):
    """Accounts see defaults plus their own custom questions."""
    storage = InMemoryKickstarterStorage(
        seeds=list(DEFAULT_KICKSTARTERS)
        + [
            Kickstarter("mine", "Mine?", KickstarterCategory.PEOPLE, account_id="acct-1"),
            Kickstarter("theirs", "Theirs?", KickstarterCategory.PEOPLE, account_id="acct-2"),
        ]
    )
    catalog = KickstarterCatalog(storage, account_id="acct-1", settings=settings)
    assert catalog.loaded is False

    items = await catalog.load()

    assert catalog.loaded is True
    ids = {item.id for item in items}
    assert "mine" in ids
    assert "theirs" not in ids
    assert len(items) == len(DEFAULT_KICKSTARTERS) + 1
    assert [c.value for c in dict.fromkeys(item.category for item in items)] == [
        "EXPERIENCE",
        "OUTCOMES",
        "PEOPLE",
        "PROCESS",
    ]


@pytest.mark.asyncio
async def test_only_one_load_in_flight(settings):
    """A second load while one is pending is refused."""
    catalog = KickstarterCatalog(InMemoryKickstarterStorage(latency=0.01), settings=settings)

    first = asyncio.create_task(catalog.load())
    await asyncio.sleep(0)

    with pytest.raises(OperationInProgressError):
        await catalog.load()

    await first
    assert len(catalog) == len(DEFAULT_KICKSTARTERS)
    await catalog.load()


def test_filter_and_stats(catalog):
    """Filtering by category and text, and per-category counts."""
    people = catalog.filter(category=KickstarterCategory.PEOPLE)
    assert [item.id for item in people] == ["people-01", "people-02", "people-03", "people-04"]
    assert [item.id for item in catalog.filter(search="THANK")] == ["people-01"]
    assert len(catalog.filter(category="ALL")) == len(DEFAULT_KICKSTARTERS)

    stats = {row["category"]: row for row in catalog.category_stats(["people-01", "process-02"])}
    assert stats["PEOPLE"]["total"] == 4
    assert stats["PEOPLE"]["selected"] == 1
    assert stats["PROCESS"]["label"] == "Process"
    assert stats["OUTCOMES"]["selected"] == 0


@pytest.mark.parametrize("name", ["Acme Dental", "Joe's Café", "A", "[Business Name] & Co"])
def test_render_replaces_placeholder(name):
    """Rendering substitutes every placeholder with the business name."""
    template = f"How was {BUSINESS_NAME_PLACEHOLDER}? Would you visit {BUSINESS_NAME_PLACEHOLDER} again?"

    rendered = render(template, name)

    assert rendered == f"How was {name}? Would you visit {name} again?"
    assert name in rendered


def test_render_leaves_template_without_placeholder():
    assert render("What result are you most happy with?", "Acme") == "What result are you most happy with?"


def test_render_accepts_items():
    item = Kickstarter("x", "Thanks, [Business Name]!", KickstarterCategory.PEOPLE)
    rendered = render(item, "Acme")
    assert rendered == "Thanks, Acme!"
    assert BUSINESS_NAME_PLACEHOLDER not in rendered


def test_preview_rotates_samples_when_nothing_selected(catalog):
    """Samples rotate every ten seconds of wall-clock time."""
    assert example_for_preview([], catalog, now=0) == PREVIEW_SAMPLES[0]
    assert example_for_preview([], catalog, now=19.9) == PREVIEW_SAMPLES[1]
    assert example_for_preview([], catalog, now=35) == PREVIEW_SAMPLES[3]
    assert example_for_preview([], catalog, now=40) == PREVIEW_SAMPLES[0]
    assert "Acme" in example_for_preview([], catalog, now=0, business_name="Acme")


def test_preview_shows_first_selected(catalog):
    """With a selection the first selected question is rendered."""
    preview = example_for_preview(["people-03", "people-01"], catalog, business_name="Acme")
    assert preview == "How did the team at Acme make you feel?"


def test_cycle_preview_wraps(catalog):
    selected = ["people-01", "people-02"]
    assert cycle_preview(selected, catalog, 0) == catalog.get("people-01").question
    assert cycle_preview(selected, catalog, 3) == catalog.get("people-02").question


@pytest.mark.asyncio
async def test_zero_limits_are_respected(settings, kickstarter_storage):
    """An explicit zero cap or ceiling is a limit, not a missing value."""
    selection = KickstarterSelection(cap=0, settings=settings)
    assert selection.is_full
    with pytest.raises(CapacityError):
        selection.select("people-01")

    catalog = KickstarterCatalog(kickstarter_storage, max_length=0, settings=settings, items=DEFAULT_KICKSTARTERS)
    assert catalog.max_length == 0
    with pytest.raises(QuestionLengthError):
        await catalog.create_custom_item("Why?", "PEOPLE")
