"""
Kickstarter Selection.

A bounded, ordered set of selected kickstarter ids plus the helpers the
editor uses to preview them with the business name filled in.
"""

import logging
import time
from typing import Iterable, List, Optional, Union

from promptpages.core.config import PromptPagesSettings, get_settings
from promptpages.core.exceptions import CapacityError, CatalogItemNotFoundError
from promptpages.kickstarters.catalog import KickstarterCatalog
from promptpages.kickstarters.models import (
    BUSINESS_NAME_PLACEHOLDER,
    PREVIEW_ROTATION_SECONDS,
    PREVIEW_SAMPLES,
    Kickstarter,
    KickstarterCategory,
)

logger = logging.getLogger(__name__)


class KickstarterSelection:
    """
    Ordered selection of kickstarter ids that never grows past ``cap``.

    Example:
        selection = KickstarterSelection(config.kickstarters.selected_ids, cap=50)
        selection.toggle("people-01", catalog)
    """

    def __init__(
        self,
        selected_ids: Iterable[str] = (),
        cap: Optional[int] = None,
        settings: Optional[PromptPagesSettings] = None,
    ):
        self._cap = (settings or get_settings()).kickstarter_selection_cap if cap is None else cap
        self._ids: List[str] = list(dict.fromkeys(selected_ids))

    @property
    def cap(self) -> int:
        return self._cap

    @property
    def selected_ids(self) -> List[str]:
        return list(self._ids)

    @property
    def is_full(self) -> bool:
        return len(self._ids) >= self._cap

    @property
    def remaining(self) -> int:
        return max(self._cap - len(self._ids), 0)

    def select(self, item_id: str, catalog: Optional[KickstarterCatalog] = None) -> None:
        """
        Add ``item_id`` unless already selected.

        Raises:
            CatalogItemNotFoundError: If a catalog is given and lacks the id
            CapacityError: If the selection is full
        """
        if item_id in self._ids:
            return
        if catalog is not None and item_id not in catalog:
            raise CatalogItemNotFoundError(item_id)
        if self.is_full:
            raise CapacityError(cap=self._cap, current=len(self._ids))
        self._ids.append(item_id)

    def deselect(self, item_id: str) -> bool:
        if item_id not in self._ids:
            return False
        self._ids.remove(item_id)
        return True

    def toggle(self, item_id: str, catalog: Optional[KickstarterCatalog] = None) -> bool:
        """
        Flip selection of ``item_id``; returns True when it ends up selected.

        A rejected add leaves the selection unchanged.
        """
        if self.deselect(item_id):
            return False
        self.select(item_id, catalog)
        return True

    def prune(self, catalog: KickstarterCatalog) -> List[str]:
        """Drop ids no longer in ``catalog``; returns the dropped ids."""
        dropped = [item_id for item_id in self._ids if item_id not in catalog]
        if dropped:
            self._ids = [item_id for item_id in self._ids if item_id in catalog]
        return dropped

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self):
        return iter(list(self._ids))


async def create_and_select(
    catalog: KickstarterCatalog,
    selection: KickstarterSelection,
    question: str,
    category: Union[KickstarterCategory, str] = KickstarterCategory.EXPERIENCE,
) -> Kickstarter:
    """
    Create a custom kickstarter and select it, as the editor does.

    Capacity is checked before anything is written, so a full selection
    leaves the catalog untouched.

    Raises:
        CapacityError: If the selection is already full
        EmptyQuestionError / QuestionLengthError: If the question is rejected
    """
    catalog.check_question(question)
    if selection.is_full:
        raise CapacityError(cap=selection.cap, current=len(selection))
    item = await catalog.create_custom_item(question, category)
    selection.select(item.id, catalog)
    return item


def render(item: Union[Kickstarter, str], business_name: Optional[str]) -> str:
    """Fill every business-name placeholder in a kickstarter question."""
    template = item.question if isinstance(item, Kickstarter) else item
    if not business_name or BUSINESS_NAME_PLACEHOLDER not in template:
        return template
    return template.replace(BUSINESS_NAME_PLACEHOLDER, business_name)


def example_for_preview(
    selected_ids: Iterable[str],
    catalog: KickstarterCatalog,
    now: Optional[float] = None,
    business_name: Optional[str] = None,
) -> str:
    """
    Question to show in the editor's kickstarter preview.

    With nothing selected a sample rotates every PREVIEW_ROTATION_SECONDS
    of wall-clock time; otherwise the first selected item is shown.
    """
    selected = list(selected_ids)
    if not selected:
        now = time.time() if now is None else now
        index = int(now // PREVIEW_ROTATION_SECONDS) % len(PREVIEW_SAMPLES)
        return render(PREVIEW_SAMPLES[index], business_name)

    item = catalog.get(selected[0])
    return render(item if item else PREVIEW_SAMPLES[0], business_name)


def cycle_preview(
    selected_ids: Iterable[str],
    catalog: KickstarterCatalog,
    index: int,
    business_name: Optional[str] = None,
) -> str:
    """
    Question at position ``index`` (wrapping) for manual preview paging.

    Pages through the selected items, or the whole catalog when nothing
    is selected.
    """
    wanted = set(selected_ids)
    pool = [item for item in catalog if item.id in wanted] if wanted else catalog.items
    if not pool:
        return render(PREVIEW_SAMPLES[0], business_name)
    return render(pool[index % len(pool)], business_name)
