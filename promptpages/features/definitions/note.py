"""Personalized note feature."""

from typing import List

from promptpages.features.base import ARRIVAL_POPUP_GROUP, FeatureModule, ValidationContext
from promptpages.features.models import FeatureKey, NoteConfig, PageConfiguration


class NoteFeature(FeatureModule):
    """Popup note addressed to the recipient; exclusive with the emoji flow."""

    key = FeatureKey.NOTE
    title = "Personalized note pop-up"
    description = "Show a friendly note when the customer opens the page."
    section_type = NoteConfig
    exclusivity_group = ARRIVAL_POPUP_GROUP

    def validate(self, config: PageConfiguration, context: ValidationContext) -> List[str]:
        note = config.note
        if note.enabled and not note.text.strip():
            return ["Personalized note is enabled but the note is empty."]
        return []
