"""Shared fixtures."""
from datetime import datetime, timezone

import pytest

from promptpages.ai import LocalStubReviewGenerator
from promptpages.composition import CompositionEngine
from promptpages.core.config import PromptPagesSettings
from promptpages.kickstarters import (
    DEFAULT_KICKSTARTERS,
    InMemoryKickstarterStorage,
    Kickstarter,
    KickstarterCatalog,
    KickstarterCategory,
)
from promptpages.storage import InMemoryPageStorage

FIXED_NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def settings():
    """Settings isolated from any local .env file."""
    return PromptPagesSettings(_env_file=None)


@pytest.fixture
def kickstarter_storage():
    return InMemoryKickstarterStorage()


@pytest.fixture
def catalog(settings, kickstarter_storage):
    """Catalog preloaded with the default kickstarters."""
    return KickstarterCatalog(
        kickstarter_storage,
        account_id="acct-1",
        settings=settings,
        items=DEFAULT_KICKSTARTERS,
    )


@pytest.fixture
def bulk_items():
    """Sixty catalog items, more than the selection cap."""
    return [
        Kickstarter(
            id=f"bulk-{i:02d}",
            question=f"What did you enjoy about visit {i}?",
            category=KickstarterCategory.EXPERIENCE,
            is_default=True,
        )
        for i in range(60)
    ]


@pytest.fixture
def bulk_catalog(settings, bulk_items):
    storage = InMemoryKickstarterStorage(seeds=bulk_items)
    return KickstarterCatalog(storage, account_id="acct-1", settings=settings, items=bulk_items)


@pytest.fixture
def page_storage():
    return InMemoryPageStorage()


@pytest.fixture
def engine(settings, page_storage, catalog):
    """Engine for a fresh page with a fixed clock."""
    return CompositionEngine(
        "page-1",
        storage=page_storage,
        catalog=catalog,
        review_generator=LocalStubReviewGenerator(),
        settings=settings,
        clock=lambda: FIXED_NOW,
        business_name="Acme Dental",
    )
