"""
Prompt Pages Kickstarters - Constrained selection of review prompts.

Usage:
    from promptpages.kickstarters import KickstarterCatalog, KickstarterSelection

    catalog = KickstarterCatalog(account_id="acct-1")
    await catalog.load()
    selection = KickstarterSelection(cap=50)
    selection.toggle("people-01", catalog)
"""

from promptpages.kickstarters.models import (
    BUSINESS_NAME_PLACEHOLDER,
    DEFAULT_KICKSTARTERS,
    PREVIEW_SAMPLES,
    Kickstarter,
    KickstarterCategory,
)
from promptpages.kickstarters.storage import (
    BaseKickstarterStorage,
    InMemoryKickstarterStorage,
    KickstarterStorageProtocol,
)
from promptpages.kickstarters.catalog import ALL_CATEGORIES, KickstarterCatalog
from promptpages.kickstarters.selection import (
    KickstarterSelection,
    create_and_select,
    cycle_preview,
    example_for_preview,
    render,
)

__all__ = [
    "BUSINESS_NAME_PLACEHOLDER",
    "DEFAULT_KICKSTARTERS",
    "PREVIEW_SAMPLES",
    "Kickstarter",
    "KickstarterCategory",
    "BaseKickstarterStorage",
    "InMemoryKickstarterStorage",
    "KickstarterStorageProtocol",
    "ALL_CATEGORIES",
    "KickstarterCatalog",
    "KickstarterSelection",
    "create_and_select",
    "cycle_preview",
    "example_for_preview",
    "render",
]
