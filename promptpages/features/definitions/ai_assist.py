"""AI assistance feature: review generation and grammar fixing."""

from typing import Any, Dict

from promptpages.features.base import FeatureModule
from promptpages.features.models import AIAssistConfig, FeatureKey


class AIAssistFeature(FeatureModule):
    """
    Two independent flags; the feature counts as enabled while either
    is on, and enable/disable switch both.
    """

    key = FeatureKey.AI_ASSIST
    title = "AI assistance"
    description = "Let customers generate a review draft or fix its grammar with AI."
    section_type = AIAssistConfig

    def is_enabled(self, section: AIAssistConfig) -> bool:
        return section.generation_enabled or section.grammar_fix_enabled

    def enable_patch(self) -> Dict[str, Any]:
        return {"generation_enabled": True, "grammar_fix_enabled": True}

    def disable_patch(self) -> Dict[str, Any]:
        return {"generation_enabled": False, "grammar_fix_enabled": False}
