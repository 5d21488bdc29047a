"""
Kickstarter Catalog.

In-memory view of the kickstarters available to one account: the seeded
defaults plus the account's custom questions. Writes go to storage and
are reflected in the in-memory list immediately, so a selection UI
holding this catalog stays consistent without reloading.
"""

import logging
import uuid
from typing import Callable, Dict, Iterable, List, Optional, Union

from promptpages.core.config import PromptPagesSettings, get_settings
from promptpages.core.exceptions import (
    CatalogItemNotFoundError,
    EmptyQuestionError,
    ImmutableItemError,
    OperationInProgressError,
    QuestionLengthError,
)
from promptpages.kickstarters.models import Kickstarter, KickstarterCategory
from promptpages.kickstarters.storage import InMemoryKickstarterStorage, KickstarterStorageProtocol

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "ALL"


class KickstarterCatalog:
    """
    Catalog of default and custom kickstarters for one account.

    Example:
        catalog = KickstarterCatalog(storage, account_id="acct-1")
        await catalog.load()
        item = await catalog.create_custom_item("Why [Business Name]?", "PEOPLE")
    """

    def __init__(
        self,
        storage: Optional[KickstarterStorageProtocol] = None,
        account_id: Optional[str] = None,
        max_length: Optional[int] = None,
        settings: Optional[PromptPagesSettings] = None,
        id_factory: Optional[Callable[[], str]] = None,
        items: Optional[Iterable[Kickstarter]] = None,
    ):
        """
        Initialize the catalog.

        Args:
            storage: Backend holding the kickstarters (in-memory by default)
            account_id: Account that owns newly created custom items
            max_length: Custom question ceiling; defaults to the configured value
            settings: Settings override
            id_factory: Generates ids for custom items
            items: Preloaded items; marks the catalog as loaded
        """
        settings = settings or get_settings()
        self._storage = storage or InMemoryKickstarterStorage()
        self._account_id = account_id
        self._max_length = settings.kickstarter_max_length if max_length is None else max_length
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self._items: List[Kickstarter] = list(items or [])
        self._loaded = items is not None
        self._pending: set = set()

    @property
    def max_length(self) -> int:
        return self._max_length

    @property
    def account_id(self) -> Optional[str]:
        return self._account_id

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def items(self) -> List[Kickstarter]:
        return list(self._items)

    @property
    def custom_items(self) -> List[Kickstarter]:
        return [item for item in self._items if not item.is_default]

    @property
    def ids(self) -> set:
        return {item.id for item in self._items}

    def _begin(self, operation: str) -> None:
        if operation in self._pending:
            raise OperationInProgressError(operation)
        self._pending.add(operation)

    async def load(self) -> List[Kickstarter]:
        """
        Fetch the catalog from storage, replacing the in-memory list.

        Raises:
            OperationInProgressError: If a load is already pending
        """
        self._begin("load_kickstarters")
        try:
            self._items = list(await self._storage.list_items(self._account_id))
            self._loaded = True
            logger.info(f"Loaded {len(self._items)} kickstarters for account {self._account_id}")
            return self.items
        finally:
            self._pending.discard("load_kickstarters")

    def get(self, item_id: str) -> Optional[Kickstarter]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def get_or_raise(self, item_id: str) -> Kickstarter:
        item = self.get(item_id)
        if item is None:
            raise CatalogItemNotFoundError(item_id)
        return item

    def filter(
        self,
        category: Union[KickstarterCategory, str, None] = None,
        search: Optional[str] = None,
    ) -> List[Kickstarter]:
        """
        Items matching a category and a case-insensitive search term.

        ``None`` or "ALL" for category means every category.
        """
        result = self._items
        if category and category != ALL_CATEGORIES:
            wanted = KickstarterCategory(category)
            result = [item for item in result if item.category == wanted]
        if search:
            needle = search.lower()
            result = [item for item in result if needle in item.question.lower()]
        return list(result)

    def category_stats(self, selected_ids: Iterable[str] = ()) -> List[Dict[str, object]]:
        """Per-category totals and selected counts."""
        selected = set(selected_ids)
        stats = []
        for category in KickstarterCategory:
            members = [item for item in self._items if item.category == category]
            stats.append(
                {
                    "category": category.value,
                    "label": category.label,
                    "total": len(members),
                    "selected": sum(1 for item in members if item.id in selected),
                }
            )
        return stats

    def check_question(self, question: str) -> str:
        """
        Validate a custom question and return it trimmed.

        Raises:
            EmptyQuestionError: If the question is blank
            QuestionLengthError: If the trimmed question is over the ceiling
        """
        trimmed = (question or "").strip()
        if not trimmed:
            raise EmptyQuestionError()
        if len(trimmed) > self._max_length:
            raise QuestionLengthError(length=len(trimmed), max_length=self._max_length)
        return trimmed

    async def create_custom_item(
        self,
        question: str,
        category: Union[KickstarterCategory, str] = KickstarterCategory.EXPERIENCE,
    ) -> Kickstarter:
        """
        Add a custom kickstarter to storage and to this catalog.

        Creating does not select the item; see ``create_and_select``.

        Raises:
            EmptyQuestionError: If the question is blank
            QuestionLengthError: If the question is over the ceiling
            OperationInProgressError: If another create is pending
        """
        trimmed = self.check_question(question)
        item = Kickstarter(
            id=self._id_factory(),
            question=trimmed,
            category=KickstarterCategory(category),
            is_default=False,
            account_id=self._account_id,
        )
        self._begin("create_kickstarter")
        try:
            stored = await self._storage.insert_item(item)
        finally:
            self._pending.discard("create_kickstarter")
        self._items.append(stored)
        logger.info(f"Created custom kickstarter {stored.id} in {stored.category.value}")
        return stored

    async def delete_custom_item(self, item_id: str) -> Kickstarter:
        """
        Remove a custom kickstarter.

        Raises:
            CatalogItemNotFoundError: If the id is unknown
            ImmutableItemError: If the item is a default
        """
        item = self.get_or_raise(item_id)
        if item.is_default:
            raise ImmutableItemError(item_id)
        await self._storage.delete_item(item_id)
        self._items = [existing for existing in self._items if existing.id != item_id]
        logger.info(f"Deleted custom kickstarter {item_id}")
        return item

    def __contains__(self, item_id: object) -> bool:
        return any(item.id == item_id for item in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items))
