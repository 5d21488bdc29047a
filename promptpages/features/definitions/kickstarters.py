"""
Kickstarters feature.

Short prompts shown while the customer writes a review. Selection is
bounded and must refer to items the catalog still holds.
"""

from typing import Any, List, Optional, Union

from promptpages.core.exceptions import CapacityError, ConfigurationError
from promptpages.features.base import FeatureHandle, FeatureModule, ValidationContext
from promptpages.features.models import FeatureKey, KickstartersConfig, PageConfiguration
from promptpages.kickstarters.models import Kickstarter, KickstarterCategory
from promptpages.kickstarters.selection import KickstarterSelection


class KickstartersFeature(FeatureModule):
    key = FeatureKey.KICKSTARTERS
    title = "Kickstarters"
    description = "Inspiring questions that help customers start writing."
    section_type = KickstartersConfig

    def validate(self, config: PageConfiguration, context: ValidationContext) -> List[str]:
        violations = []
        selected = config.kickstarters.selected_ids
        if len(selected) > context.selection_cap:
            violations.append(f"You can select up to {context.selection_cap} kickstarters.")

        catalog = context.catalog
        if catalog is None or not catalog.loaded:
            return violations

        for item_id in selected:
            if item_id not in catalog:
                violations.append(f"Kickstarter '{item_id}' is no longer available.")
        for item in catalog.custom_items:
            if len(item.question) > context.max_question_length:
                violations.append(
                    f"Kickstarter '{item.id}' is longer than "
                    f"{context.max_question_length} characters."
                )
        return violations

    def bind(self, engine: Any) -> "KickstartersHandle":
        return KickstartersHandle(self, engine)


class KickstartersHandle(FeatureHandle):
    """
    Selection operations routed through the engine.

    Capacity and unknown-id rejections raise before the engine is touched,
    so a rejected selection leaves the configuration unchanged.
    """

    def _catalog(self):
        catalog = getattr(self.engine, "catalog", None)
        if catalog is None:
            raise ConfigurationError(
                setting="catalog",
                reason="No kickstarter catalog is attached to this page",
                suggestion="Pass catalog= to CompositionEngine",
            )
        return catalog

    def selection(self) -> KickstarterSelection:
        """Working copy of the current selection."""
        return KickstarterSelection(self.section.selected_ids, cap=self.engine.selection_cap)

    def _store(self, selection: KickstarterSelection):
        return self.engine.update(self.key, {"selected_ids": selection.selected_ids})

    def toggle(self, item_id: Optional[str] = None):
        """
        Toggle one kickstarter in or out of the selection.

        Without ``item_id`` this toggles the feature itself.

        Raises:
            CapacityError: If adding would exceed the cap
            CatalogItemNotFoundError: If the id is not in the catalog
        """
        if item_id is None:
            return super().toggle()
        selection = self.selection()
        selection.toggle(item_id, self._catalog())
        return self._store(selection)

    def prune(self):
        """Drop selected ids the catalog no longer holds."""
        selection = self.selection()
        selection.prune(self._catalog())
        return self._store(selection)

    async def create_custom(
        self,
        question: str,
        category: Union[KickstarterCategory, str] = KickstarterCategory.EXPERIENCE,
        select: bool = True,
    ) -> Kickstarter:
        """
        Add a custom kickstarter to the catalog, selecting it unless ``select`` is False.

        The selection is read again once the item is stored, so changes made
        while the insert was pending are kept. If those changes filled the
        selection, the item stays in the catalog unselected.

        Raises:
            EmptyQuestionError / QuestionLengthError: If the question is rejected
            CapacityError: If selecting is requested and the selection is full
        """
        catalog = self._catalog()
        if not select:
            return await catalog.create_custom_item(question, category)

        catalog.check_question(question)
        before = self.selection()
        if before.is_full:
            raise CapacityError(cap=before.cap, current=len(before))

        item = await catalog.create_custom_item(question, category)
        selection = self.selection()
        selection.select(item.id, catalog)
        self._store(selection)
        return item

    def inheritance_text(self) -> Optional[str]:
        """Editor note describing the business-level kickstarters this page inherits."""
        business = self.engine.business_defaults.get(self.key.value)
        if business is None or not self.inherited:
            return None
        defaults = self.module.hydrate(business)
        if defaults.enabled and defaults.selected_ids:
            return f"Inheriting {len(defaults.selected_ids)} kickstarters from business settings"
        if defaults.enabled:
            return "Inheriting kickstarters from business settings (no specific selection)"
        return "Business-level kickstarters are disabled"
