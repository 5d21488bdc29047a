"""
Embed Options - Presentation inputs and their fail-closed resolution.

Every option the caller can get wrong resolves to a usable value; each
substitution is reported as a GenerationInputError warning instead of
being raised, so generated markup is never empty or unstyled.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from promptpages.core.config import PromptPagesSettings, get_settings
from promptpages.core.exceptions import GenerationInputError, ValidationError
from promptpages.features.definitions.falling import HEX_COLOR_RE
from promptpages.features.definitions.sentiment import SENTIMENT_LABELS

logger = logging.getLogger(__name__)

DEFAULT_QUESTION = "How was your experience?"

EMOJI_SIZE_TIERS: Dict[str, int] = {"xs": 28, "sm": 36, "md": 48}
HEADER_SIZE_TIERS: Dict[str, str] = {"sm": "1rem", "md": "1.25rem", "lg": "1.5rem"}

# Ordered size scale used to find the nearest defined tier.
TIER_SCALE = ("xxs", "xs", "sm", "md", "lg", "xl", "xxl")
TIER_ALIASES = {
    "small": "sm",
    "medium": "md",
    "large": "lg",
    "extra-small": "xs",
    "extra-large": "xl",
    "s": "sm",
    "m": "md",
    "l": "lg",
}

ICON_COLORS: Dict[str, str] = dict(
    zip(SENTIMENT_LABELS, ("#f472b6", "#22c55e", "#9ca3af", "#f97316", "#ef4444"))
)
NEUTRAL_ICON_COLOR = "#9ca3af"


class EmbedTarget(str, Enum):
    """Where the markup will be pasted."""

    EMAIL = "email"
    WEBSITE = "website"

    @property
    def image_format(self) -> str:
        # Email clients cannot be trusted with vector images.
        return "png" if self == EmbedTarget.EMAIL else "svg"


@dataclass(frozen=True)
class EmbedOptions:
    """
    Caller-facing widget options.

    ``None`` for a size, colour or base URL means "use the configured default".

    Raises:
        ValidationError: If the label set does not have exactly five labels
            or the slug is empty
    """

    slug: str
    question: str = DEFAULT_QUESTION
    labels: Tuple[str, ...] = SENTIMENT_LABELS
    emoji_size: Optional[str] = None
    header_size: Optional[str] = None
    header_color: Optional[str] = None
    show_card: bool = True
    target: EmbedTarget = EmbedTarget.WEBSITE
    destination_base_url: Optional[str] = None

    def __post_init__(self):
        labels = tuple(self.labels)
        object.__setattr__(self, "labels", labels)
        object.__setattr__(self, "target", EmbedTarget(self.target))
        violations = []
        if len(labels) != len(SENTIMENT_LABELS):
            violations.append(
                f"The sentiment scale has exactly {len(SENTIMENT_LABELS)} labels (got {len(labels)})."
            )
        if any(not str(label).strip() for label in labels):
            violations.append("Sentiment labels cannot be blank.")
        if not (self.slug or "").strip():
            violations.append("A page slug is required to build embed links.")
        if violations:
            raise ValidationError(violations, code="INVALID_EMBED_OPTIONS")


@dataclass(frozen=True)
class ResolvedOptions:
    """Options after defaults and fallbacks have been applied."""

    slug: str
    question: str
    labels: Tuple[str, ...]
    emoji_tier: str
    emoji_px: int
    header_tier: str
    header_font_size: str
    header_color: str
    show_card: bool
    target: EmbedTarget
    base_url: str
    warnings: Tuple[GenerationInputError, ...] = field(default=(), compare=False)


def resolve_tier(
    value: Optional[str],
    tiers: Sequence[str],
    default: str,
    option: str,
) -> Tuple[str, Optional[GenerationInputError]]:
    """
    Map ``value`` onto one of ``tiers``.

    Aliases are normalised first; a known size outside ``tiers`` maps to
    the nearest defined tier on TIER_SCALE (the smaller one on a tie);
    anything else maps to ``default``.
    """
    if value is None:
        return default, None
    key = str(value).strip().lower()
    key = TIER_ALIASES.get(key, key)
    if key in tiers:
        return key, None

    if key in TIER_SCALE:
        position = TIER_SCALE.index(key)
        fallback = min(tiers, key=lambda tier: (abs(TIER_SCALE.index(tier) - position), TIER_SCALE.index(tier)))
    else:
        fallback = default
    return fallback, GenerationInputError(option, value, fallback)


def resolve_color(value: Optional[str], default: str) -> Tuple[str, Optional[GenerationInputError]]:
    if value is None or value == "":
        return default, None
    color = str(value).strip()
    if HEX_COLOR_RE.match(color):
        return color.lower(), None
    return default, GenerationInputError("header_color", value, default)


def resolve_options(
    options: EmbedOptions,
    settings: Optional[PromptPagesSettings] = None,
) -> ResolvedOptions:
    """Apply configured defaults and fail-closed fallbacks to ``options``."""
    settings = settings or get_settings()
    warnings: List[GenerationInputError] = []

    def keep(result):
        value, warning = result
        if warning is not None:
            logger.warning(f"Embed for '{options.slug}': {warning.message}")
            warnings.append(warning)
        return value

    default_emoji, _ = resolve_tier(settings.default_emoji_size, EMOJI_SIZE_TIERS, "sm", "emoji_size")
    default_header, _ = resolve_tier(settings.default_header_size, HEADER_SIZE_TIERS, "md", "header_size")
    emoji_tier = keep(resolve_tier(options.emoji_size, EMOJI_SIZE_TIERS, default_emoji, "emoji_size"))
    header_tier = keep(resolve_tier(options.header_size, HEADER_SIZE_TIERS, default_header, "header_size"))
    header_color = keep(resolve_color(options.header_color, settings.default_header_color))

    question = (options.question or "").strip()
    if not question:
        keep((DEFAULT_QUESTION, GenerationInputError("question", options.question, DEFAULT_QUESTION)))
        question = DEFAULT_QUESTION

    base_url = (options.destination_base_url or settings.app_base_url).rstrip("/")

    return ResolvedOptions(
        slug=options.slug.strip(),
        question=question,
        labels=options.labels,
        emoji_tier=emoji_tier,
        emoji_px=EMOJI_SIZE_TIERS[emoji_tier],
        header_tier=header_tier,
        header_font_size=HEADER_SIZE_TIERS[header_tier],
        header_color=header_color,
        show_card=options.show_card,
        target=options.target,
        base_url=base_url,
        warnings=tuple(warnings),
    )
