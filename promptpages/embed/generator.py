"""
Embed Generator - Emoji sentiment widget for websites and email.

Usage:
    generator = EmbedGenerator()
    result = generator.generate(EmbedOptions(slug="demo", target=EmbedTarget.EMAIL))
    result.markup    # paste-ready HTML
    result.preview   # same tree as a dict, for the live preview
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from promptpages.core.config import PromptPagesSettings, get_settings
from promptpages.core.exceptions import GenerationInputError
from promptpages.embed.elements import compose
from promptpages.embed.layout import WidgetLayout, build_layout
from promptpages.embed.options import EmbedOptions, EmbedTarget
from promptpages.embed.renderers import render_markup, render_preview
from promptpages.features.definitions.sentiment import SENTIMENT_LABELS
from promptpages.features.models import PAGE_KEY, FeatureKey, PageConfiguration, SentimentConfig

logger = logging.getLogger(__name__)


@dataclass
class EmbedResult:
    """
    Generated widget.

    Attributes:
        markup: Self-contained HTML string
        preview: DOM-style dict tree built from the same elements
        links: The five sentiment destinations, in scale order
        target: Email or website
        warnings: Options that were replaced by safe fallbacks
    """

    markup: str
    preview: Dict[str, Any]
    links: Tuple[str, ...]
    target: EmbedTarget
    warnings: List[GenerationInputError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "markup": self.markup,
            "preview": self.preview,
            "links": list(self.links),
            "target": self.target.value,
            "warnings": [w.to_dict() for w in self.warnings],
        }


class EmbedGenerator:
    """Builds widget markup and preview from one layout."""

    def __init__(self, settings: Optional[PromptPagesSettings] = None):
        self.settings = settings or get_settings()

    def layout(self, options: EmbedOptions) -> WidgetLayout:
        return build_layout(options, self.settings)

    def generate(self, options: EmbedOptions) -> EmbedResult:
        """Generate the widget for ``options``; never raises on presentation options."""
        layout = self.layout(options)
        tree = compose(layout)
        return EmbedResult(
            markup=render_markup(tree),
            preview=render_preview(tree),
            links=layout.links,
            target=layout.target,
            warnings=list(layout.warnings),
        )

    def generate_for(
        self,
        sentiment: SentimentConfig,
        slug: str,
        **presentation: Any,
    ) -> EmbedResult:
        """Generate from a page's sentiment section plus presentation options."""
        options = EmbedOptions(
            slug=slug,
            question=sentiment.question,
            labels=presentation.pop("labels", SENTIMENT_LABELS),
            **presentation,
        )
        return self.generate(options)


class LiveEmbed:
    """
    Keeps a generated widget in step with an editing session.

    Regenerates whenever the engine reports a change to the sentiment
    section or to the page fields (a new slug changes every link). ``result`` is None while the flow is off
    or the page has no slug yet.

    Example:
        live = LiveEmbed(engine, EmbedGenerator(), target="email")
        engine.feature("sentiment").update(question="Enjoy your stay?")
        live.result.markup
    """

    def __init__(
        self,
        engine: Any,
        generator: Optional[EmbedGenerator] = None,
        on_change: Optional[Callable[[Optional[EmbedResult]], None]] = None,
        **presentation: Any,
    ):
        self.engine = engine
        self.generator = generator or EmbedGenerator(getattr(engine, "settings", None))
        self.presentation = presentation
        self.on_change = on_change
        self.result: Optional[EmbedResult] = None
        self._refresh(engine.configuration)
        self._unsubscribe = engine.subscribe(self._on_update)

    def _on_update(self, keys: Tuple[Union[FeatureKey, str], ...], configuration: PageConfiguration) -> None:
        if FeatureKey.SENTIMENT in keys or PAGE_KEY in keys:
            self._refresh(configuration)

    def _refresh(self, configuration: PageConfiguration) -> None:
        sentiment = configuration.sentiment
        if sentiment.enabled and configuration.slug:
            self.result = self.generator.generate_for(
                sentiment, configuration.slug, **dict(self.presentation)
            )
        else:
            self.result = None
        if self.on_change is not None:
            self.on_change(self.result)

    def set_presentation(self, **presentation: Any) -> Optional[EmbedResult]:
        """Change presentation options and regenerate."""
        self.presentation.update(presentation)
        self._refresh(self.engine.configuration)
        return self.result

    def close(self) -> None:
        self._unsubscribe()
