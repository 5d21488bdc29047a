"""
Page Storage Base - Protocol and base class for page persistence.

The engine treats storage as opaque key-value persistence: one record
per page id, always read and written whole.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from promptpages.core.base import PromptPagesComponent

PageRecord = Dict[str, Any]


@runtime_checkable
class PageStorageProtocol(Protocol):
    """Protocol for page configuration storage backends."""

    @property
    def name(self) -> str:
        ...

    async def load(self, page_id: str) -> Optional[PageRecord]:
        """Return the stored record, or None when the page has never been saved."""
        ...

    async def save(self, page_id: str, record: PageRecord) -> None:
        """Persist ``record`` in full. Raises on failure."""
        ...


class BasePageStorage(PromptPagesComponent, ABC):
    """
    Base class for page storage backends.

    Subclasses implement ``load`` and ``save``; ``exists`` is derived.
    """

    @abstractmethod
    async def load(self, page_id: str) -> Optional[PageRecord]:
        ...

    @abstractmethod
    async def save(self, page_id: str, record: PageRecord) -> None:
        ...

    async def exists(self, page_id: str) -> bool:
        return await self.load(page_id) is not None
