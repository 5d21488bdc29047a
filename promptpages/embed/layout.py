"""
Widget Layout - The shared description of an emoji widget.

A layout is the single intermediate form from which both the pasted
markup and the live preview are produced. It says *what* the widget
shows; how it is laid out for a target is decided in ``elements``.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple
from urllib.parse import quote

from promptpages.core.config import PromptPagesSettings, get_settings
from promptpages.core.exceptions import GenerationInputError
from promptpages.embed.options import (
    ICON_COLORS,
    NEUTRAL_ICON_COLOR,
    EmbedOptions,
    EmbedTarget,
    resolve_options,
)

# Size of the attribution badge image in email markup.
BRANDING_BADGE_PX = 25
BRANDING_BADGE_FILE = "prompt-reviews-get-more-reviews.png"
BRANDING_TEXT = "[P]"


def sentiment_link(base_url: str, slug: str, label: str) -> str:
    """Destination of one emoji: ``{base}/r/{slug}?emoji_sentiment={label}&source=embed``."""
    return f"{base_url.rstrip('/')}/r/{quote(slug, safe='')}?emoji_sentiment={quote(label.lower(), safe='')}&source=embed"


def emoji_asset(asset_base_url: str, label: str, image_format: str) -> str:
    return f"{asset_base_url.rstrip('/')}/emojis/{quote(label.lower(), safe='')}.{image_format}"


@dataclass(frozen=True)
class HeaderNode:
    text: str
    font_size: str
    color: str


@dataclass(frozen=True)
class SentimentLinkNode:
    label: str
    href: str
    image_src: str
    image_format: str
    size_px: int
    color: str


@dataclass(frozen=True)
class SentimentRowNode:
    links: Tuple[SentimentLinkNode, ...]


@dataclass(frozen=True)
class AttributionNode:
    href: str
    title: str
    text: str
    image_src: Optional[str] = None


@dataclass(frozen=True)
class WidgetLayout:
    """
    Complete description of one widget.

    Attributes:
        header: Question block
        row: The five sentiment links, in scale order
        attribution: The single outbound attribution link
        show_card: Whether the widget sits on a bordered card
        target: Email or website
        comment: Identifying comment placed before the markup
        warnings: Options that fell back to safe values
    """

    header: HeaderNode
    row: SentimentRowNode
    attribution: AttributionNode
    show_card: bool
    target: EmbedTarget
    comment: str
    warnings: Tuple[GenerationInputError, ...] = field(default=(), compare=False)

    @property
    def links(self) -> Tuple[str, ...]:
        return tuple(link.href for link in self.row.links)


def build_layout(
    options: EmbedOptions,
    settings: Optional[PromptPagesSettings] = None,
) -> WidgetLayout:
    """Resolve ``options`` and describe the widget they produce."""
    settings = settings or get_settings()
    resolved = resolve_options(options, settings)
    image_format = resolved.target.image_format

    links = tuple(
        SentimentLinkNode(
            label=label,
            href=sentiment_link(resolved.base_url, resolved.slug, label),
            image_src=emoji_asset(settings.asset_base_url, label, image_format),
            image_format=image_format,
            size_px=resolved.emoji_px,
            color=ICON_COLORS.get(label, NEUTRAL_ICON_COLOR),
        )
        for label in resolved.labels
    )

    title = f"Powered by {settings.brand_name} - Make writing reviews quick and easy with AI"
    if resolved.target == EmbedTarget.EMAIL:
        attribution = AttributionNode(
            href=settings.branding_url,
            title=title,
            text=f"{settings.brand_name} - Get More Reviews",
            image_src=f"{settings.asset_base_url.rstrip('/')}/emojis/{BRANDING_BADGE_FILE}",
        )
    else:
        attribution = AttributionNode(href=settings.branding_url, title=title, text=BRANDING_TEXT)

    site = settings.branding_url.split("://", 1)[-1].rstrip("/")
    return WidgetLayout(
        header=HeaderNode(
            text=resolved.question,
            font_size=resolved.header_font_size,
            color=resolved.header_color,
        ),
        row=SentimentRowNode(links=links),
        attribution=attribution,
        show_card=resolved.show_card,
        target=resolved.target,
        comment=f"emoji review widget by {settings.brand_name} {site}",
        warnings=resolved.warnings,
    )
