"""
Prompt Pages Embed - Copy-paste emoji sentiment widget.

Both the pasted markup and the live preview are rendered from one
element tree built from one layout, so they always agree.
"""

from promptpages.embed.options import (
    DEFAULT_QUESTION,
    EMOJI_SIZE_TIERS,
    HEADER_SIZE_TIERS,
    EmbedOptions,
    EmbedTarget,
    resolve_options,
)
from promptpages.embed.layout import WidgetLayout, build_layout, sentiment_link
from promptpages.embed.elements import Element, compose
from promptpages.embed.renderers import render_markup, render_preview
from promptpages.embed.generator import EmbedGenerator, EmbedResult, LiveEmbed

__all__ = [
    "DEFAULT_QUESTION",
    "EMOJI_SIZE_TIERS",
    "HEADER_SIZE_TIERS",
    "EmbedOptions",
    "EmbedTarget",
    "resolve_options",
    "WidgetLayout",
    "build_layout",
    "sentiment_link",
    "Element",
    "compose",
    "render_markup",
    "render_preview",
    "EmbedGenerator",
    "EmbedResult",
    "LiveEmbed",
]
