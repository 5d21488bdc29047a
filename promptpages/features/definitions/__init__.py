"""
Built-in feature definitions.

Registration order matters: it is the validation order and decides
which arrival popup survives when a stored page enables both.
"""

from promptpages.features.definitions.note import NoteFeature
from promptpages.features.definitions.sentiment import (
    SENTIMENT_LABELS,
    SentimentFeature,
)
from promptpages.features.definitions.falling import (
    FALLING_ICONS,
    FallingAnimationFeature,
    FallingIcon,
    get_falling_icon,
    icons_by_category,
)
from promptpages.features.definitions.ai_assist import AIAssistFeature
from promptpages.features.definitions.offer import OfferFeature
from promptpages.features.definitions.platforms import (
    PLATFORM_OPTIONS,
    PlatformListFeature,
    PlatformsHandle,
)
from promptpages.features.definitions.kickstarters import KickstartersFeature, KickstartersHandle

ALL_FEATURES = (
    NoteFeature,
    SentimentFeature,
    FallingAnimationFeature,
    AIAssistFeature,
    OfferFeature,
    PlatformListFeature,
    KickstartersFeature,
)


def register_all_features(registry) -> None:
    """Register one instance of every built-in feature, in page order."""
    for feature_cls in ALL_FEATURES:
        registry.register(feature_cls())


__all__ = [
    "ALL_FEATURES",
    "register_all_features",
    "NoteFeature",
    "SentimentFeature",
    "SENTIMENT_LABELS",
    "FallingAnimationFeature",
    "FallingIcon",
    "FALLING_ICONS",
    "get_falling_icon",
    "icons_by_category",
    "AIAssistFeature",
    "OfferFeature",
    "PlatformListFeature",
    "PlatformsHandle",
    "PLATFORM_OPTIONS",
    "KickstartersFeature",
    "KickstartersHandle",
]
