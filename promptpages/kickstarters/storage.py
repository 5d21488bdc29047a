"""
Kickstarter Storage - Protocol and in-memory backend.

The catalog is read-mostly: it is listed once per editing session and
written only when an account adds or removes a custom question.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Protocol, runtime_checkable

from promptpages.core.base import ComponentStatus, HealthCheckResult, PromptPagesComponent
from promptpages.kickstarters.models import DEFAULT_KICKSTARTERS, Kickstarter


@runtime_checkable
class KickstarterStorageProtocol(Protocol):
    """Protocol for kickstarter catalog backends."""

    @property
    def name(self) -> str:
        ...

    async def list_items(self, account_id: Optional[str] = None) -> List[Kickstarter]:
        """Defaults plus the account's custom items, ordered by category then creation."""
        ...

    async def insert_item(self, item: Kickstarter) -> Kickstarter:
        ...

    async def delete_item(self, item_id: str) -> bool:
        ...


class BaseKickstarterStorage(PromptPagesComponent, ABC):
    """Base class for kickstarter storage backends."""

    @abstractmethod
    async def list_items(self, account_id: Optional[str] = None) -> List[Kickstarter]:
        ...

    @abstractmethod
    async def insert_item(self, item: Kickstarter) -> Kickstarter:
        ...

    @abstractmethod
    async def delete_item(self, item_id: str) -> bool:
        ...


class InMemoryKickstarterStorage(BaseKickstarterStorage):
    """
    In-memory kickstarter storage for development and testing.

    Seeded with DEFAULT_KICKSTARTERS unless other seeds are passed.
    ``latency`` (seconds) makes each call yield to the event loop, which
    lets tests observe in-flight operations.
    """

    def __init__(self, seeds: Optional[Iterable[Kickstarter]] = None, latency: float = 0.0):
        self._items: Dict[str, Kickstarter] = {}
        self._latency = latency
        self.list_calls = 0
        for item in DEFAULT_KICKSTARTERS if seeds is None else seeds:
            self._items[item.id] = item

    @property
    def name(self) -> str:
        return "in_memory"

    async def _pause(self) -> None:
        if self._latency:
            await asyncio.sleep(self._latency)

    async def list_items(self, account_id: Optional[str] = None) -> List[Kickstarter]:
        await self._pause()
        self.list_calls += 1
        visible = [
            item
            for item in self._items.values()
            if item.is_default or item.account_id is None or item.account_id == account_id
        ]
        order = {category: i for i, category in enumerate(sorted({i.category.value for i in visible}))}
        # dicts keep insertion order, which stands in for creation time
        return sorted(visible, key=lambda item: order[item.category.value])

    async def insert_item(self, item: Kickstarter) -> Kickstarter:
        await self._pause()
        if item.id in self._items:
            raise ValueError(f"Kickstarter '{item.id}' already exists")
        self._items[item.id] = item
        return item

    async def delete_item(self, item_id: str) -> bool:
        await self._pause()
        return self._items.pop(item_id, None) is not None

    async def health_check(self) -> HealthCheckResult:
        return HealthCheckResult(
            status=ComponentStatus.HEALTHY,
            component_name=self.name,
            message="In-memory kickstarter storage operational",
            details={"item_count": len(self._items)},
        )
