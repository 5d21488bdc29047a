"""
Prompt Page Configuration Models.

Defines the flat per-page configuration record: one dataclass per
feature slice plus the page-level bookkeeping fields. These are plain
data structures; all mutation goes through the composition engine.
"""

import copy
from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

S = TypeVar("S")


class FeatureKey(str, Enum):
    """Closed set of features a prompt page can compose."""

    NOTE = "note"
    SENTIMENT = "sentiment"
    FALLING_ANIMATION = "falling_animation"
    AI_ASSIST = "ai_assist"
    OFFER = "offer"
    PLATFORMS = "platforms"
    KICKSTARTERS = "kickstarters"


# Listener key for page bookkeeping fields (slug, is_active).
PAGE_KEY = "page"


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def section_from_dict(section_type: Type[S], data: Optional[Dict[str, Any]]) -> S:
    """
    Build a section dataclass from a persisted mapping.

    Fields absent from ``data`` keep their defaults; keys the section
    does not declare are ignored.
    """
    known = {f.name for f in fields(section_type)}
    values = {k: copy.deepcopy(v) for k, v in (data or {}).items() if k in known}
    return section_type(**values)


@dataclass
class NoteConfig:
    """
    Personalized note shown in a popup when the page opens.

    Attributes:
        enabled: Whether the note popup is shown
        text: Note body written for the recipient
    """

    enabled: bool = False
    text: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"enabled": self.enabled, "text": self.text}


@dataclass
class SentimentConfig:
    """
    Emoji sentiment flow settings.

    Attributes:
        enabled: Whether visitors pick an emoji before reviewing
        question: Question shown above the five emojis
        feedback_prompt: Message asking unhappy visitors for private feedback
        thank_you_text: Message shown after feedback is submitted
        popup_header: Optional header of the feedback popup
        page_header: Optional header of the feedback page
    """

    enabled: bool = False
    question: str = "How was your experience?"
    feedback_prompt: str = "How can we improve?"
    thank_you_text: str = "Thank you for your feedback!"
    popup_header: str = ""
    page_header: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "question": self.question,
            "feedback_prompt": self.feedback_prompt,
            "thank_you_text": self.thank_you_text,
            "popup_header": self.popup_header,
            "page_header": self.page_header,
        }


@dataclass
class FallingAnimationConfig:
    """Icon rain animation played when the page loads."""

    enabled: bool = True
    icon_key: str = "star"
    color_hex: str = "#fbbf24"

    def to_dict(self) -> Dict[str, Any]:
        return {"enabled": self.enabled, "icon_key": self.icon_key, "color_hex": self.color_hex}


@dataclass
class AIAssistConfig:
    """AI review generation and grammar fixing toggles."""

    generation_enabled: bool = True
    grammar_fix_enabled: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generation_enabled": self.generation_enabled,
            "grammar_fix_enabled": self.grammar_fix_enabled,
        }


@dataclass
class OfferConfig:
    """Special offer banner."""

    enabled: bool = False
    title: str = ""
    body: str = ""
    url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"enabled": self.enabled, "title": self.title, "body": self.body, "url": self.url}


@dataclass
class ReviewPlatform:
    """
    One review destination listed on the page.

    Attributes:
        name: Platform name (e.g., "Google Business Profile", or "Other")
        url: Review URL on the platform
        target_word_count: Suggested review length
        custom_name: Display name used when ``name`` is "Other"
        verified: Whether the posted review was confirmed
        verified_at: When the review was confirmed
        review_text: Draft review text (typed or AI generated)
    """

    name: str = ""
    url: str = ""
    target_word_count: int = 200
    custom_name: Optional[str] = None
    verified: bool = False
    verified_at: Optional[datetime] = None
    review_text: str = ""

    @property
    def display_name(self) -> str:
        """Name shown on the platform card."""
        if self.name == "Other" and self.custom_name:
            return f"Other: {self.custom_name}"
        return self.name or "Platform"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "url": self.url,
            "target_word_count": self.target_word_count,
            "custom_name": self.custom_name,
            "verified": self.verified,
            "verified_at": _format_datetime(self.verified_at),
            "review_text": self.review_text,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReviewPlatform":
        platform = section_from_dict(cls, data)
        platform.verified_at = _parse_datetime(platform.verified_at)
        return platform


@dataclass
class KickstartersConfig:
    """
    Kickstarter prompts shown while writing a review.

    ``selected_ids`` keeps selection order and never holds duplicates.
    """

    enabled: bool = False
    selected_ids: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.selected_ids = list(dict.fromkeys(self.selected_ids or []))

    def to_dict(self) -> Dict[str, Any]:
        return {"enabled": self.enabled, "selected_ids": list(self.selected_ids)}


@dataclass
class PageConfiguration:
    """
    Full configuration of one prompt page.

    Attributes:
        note: Personalized note slice
        sentiment: Emoji sentiment slice
        falling_animation: Falling icon animation slice
        ai_assist: AI assistance slice
        offer: Special offer slice
        platforms: Ordered review platforms
        kickstarters: Kickstarter selection slice
        slug: Public page slug
        is_active: Whether the page is live
        created_at: First successful save
        updated_at: Latest successful save
    """

    note: NoteConfig = field(default_factory=NoteConfig)
    sentiment: SentimentConfig = field(default_factory=SentimentConfig)
    falling_animation: FallingAnimationConfig = field(default_factory=FallingAnimationConfig)
    ai_assist: AIAssistConfig = field(default_factory=AIAssistConfig)
    offer: OfferConfig = field(default_factory=OfferConfig)
    platforms: List[ReviewPlatform] = field(default_factory=list)
    kickstarters: KickstartersConfig = field(default_factory=KickstartersConfig)
    slug: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def copy(self) -> "PageConfiguration":
        """Deep snapshot of this configuration."""
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted record format."""
        return {
            FeatureKey.NOTE.value: self.note.to_dict(),
            FeatureKey.SENTIMENT.value: self.sentiment.to_dict(),
            FeatureKey.FALLING_ANIMATION.value: self.falling_animation.to_dict(),
            FeatureKey.AI_ASSIST.value: self.ai_assist.to_dict(),
            FeatureKey.OFFER.value: self.offer.to_dict(),
            FeatureKey.PLATFORMS.value: [p.to_dict() for p in self.platforms],
            FeatureKey.KICKSTARTERS.value: self.kickstarters.to_dict(),
            "slug": self.slug,
            "is_active": self.is_active,
            "created_at": _format_datetime(self.created_at),
            "updated_at": _format_datetime(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PageConfiguration":
        """Create from a persisted record, filling gaps with defaults."""
        return cls(
            note=section_from_dict(NoteConfig, data.get(FeatureKey.NOTE.value)),
            sentiment=section_from_dict(SentimentConfig, data.get(FeatureKey.SENTIMENT.value)),
            falling_animation=section_from_dict(
                FallingAnimationConfig, data.get(FeatureKey.FALLING_ANIMATION.value)
            ),
            ai_assist=section_from_dict(AIAssistConfig, data.get(FeatureKey.AI_ASSIST.value)),
            offer=section_from_dict(OfferConfig, data.get(FeatureKey.OFFER.value)),
            platforms=[
                ReviewPlatform.from_dict(p) for p in data.get(FeatureKey.PLATFORMS.value) or []
            ],
            kickstarters=section_from_dict(
                KickstartersConfig, data.get(FeatureKey.KICKSTARTERS.value)
            ),
            slug=data.get("slug"),
            is_active=data.get("is_active", True),
            created_at=_parse_datetime(data.get("created_at")),
            updated_at=_parse_datetime(data.get("updated_at")),
        )
