"""
Prompt Pages Features - The closed set of page capabilities.

Usage:
    from promptpages.features import default_registry, FeatureKey

    registry = default_registry()
    registry.get(FeatureKey.SENTIMENT).exclusivity_group  # "arrival_popup"
"""

from promptpages.features.models import (
    AIAssistConfig,
    FallingAnimationConfig,
    FeatureKey,
    KickstartersConfig,
    NoteConfig,
    OfferConfig,
    PAGE_KEY,
    PageConfiguration,
    ReviewPlatform,
    SentimentConfig,
)
from promptpages.features.base import (
    ARRIVAL_POPUP_GROUP,
    FeatureHandle,
    FeatureModule,
    ValidationContext,
)
from promptpages.features.registry import FeatureRegistry, default_registry

__all__ = [
    "AIAssistConfig",
    "FallingAnimationConfig",
    "FeatureKey",
    "KickstartersConfig",
    "NoteConfig",
    "OfferConfig",
    "PAGE_KEY",
    "PageConfiguration",
    "ReviewPlatform",
    "SentimentConfig",
    "ARRIVAL_POPUP_GROUP",
    "FeatureHandle",
    "FeatureModule",
    "ValidationContext",
    "FeatureRegistry",
    "default_registry",
]
