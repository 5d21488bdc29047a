"""
Page Storage - In-Memory Backend.

Keeps deep copies of saved records so callers can never mutate what is
stored. Intended for development and tests.
"""

import asyncio
import copy
from typing import Dict, Optional

from promptpages.core.base import ComponentStatus, HealthCheckResult
from promptpages.storage.base import BasePageStorage, PageRecord


class InMemoryPageStorage(BasePageStorage):
    """
    In-memory page storage.

    ``fail_next_saves(n)`` makes the next ``n`` saves raise, and
    ``latency`` makes each call yield to the event loop.
    """

    def __init__(self, records: Optional[Dict[str, PageRecord]] = None, latency: float = 0.0):
        self._records: Dict[str, PageRecord] = copy.deepcopy(records or {})
        self._latency = latency
        self._failures_pending = 0
        self.save_calls = 0

    @property
    def name(self) -> str:
        return "in_memory"

    def fail_next_saves(self, count: int = 1) -> None:
        self._failures_pending = count

    async def load(self, page_id: str) -> Optional[PageRecord]:
        if self._latency:
            await asyncio.sleep(self._latency)
        record = self._records.get(page_id)
        return copy.deepcopy(record) if record is not None else None

    async def save(self, page_id: str, record: PageRecord) -> None:
        if self._latency:
            await asyncio.sleep(self._latency)
        self.save_calls += 1
        if self._failures_pending:
            self._failures_pending -= 1
            raise ConnectionError("storage unavailable")
        self._records[page_id] = copy.deepcopy(record)

    def peek(self, page_id: str) -> Optional[PageRecord]:
        """Stored record without going through the async API (for tests)."""
        return copy.deepcopy(self._records.get(page_id))

    async def health_check(self) -> HealthCheckResult:
        return HealthCheckResult(
            status=ComponentStatus.HEALTHY,
            component_name=self.name,
            message="In-memory page storage operational",
            details={"page_count": len(self._records)},
        )
