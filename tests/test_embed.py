"""Embeddable widget generator tests."""
import re

import pytest

from promptpages.core.exceptions import ValidationError
from promptpages.embed import (
    EmbedGenerator,
    EmbedOptions,
    EmbedTarget,
    LiveEmbed,
    build_layout,
    compose,
    render_markup,
    render_preview,
)
from promptpages.features.definitions import SENTIMENT_LABELS

LINK_RE = re.compile(r'href="(https://example\.com/r/demo\?emoji_sentiment=([a-z]+)&source=embed)"')


def _options(**overrides):
    values = dict(slug="demo", destination_base_url="https://example.com")
    values.update(overrides)
    return EmbedOptions(**values)


def _walk(node):
    if isinstance(node, dict):
        yield node
        for child in node["children"]:
            yield from _walk(child)


@pytest.fixture
def generator(settings):
    return EmbedGenerator(settings)


def test_email_markup_uses_tables_and_raster_images(generator):
    """Email markup links every label and uses tables with PNG images."""
    result = generator.generate(_options(target=EmbedTarget.EMAIL))

    links = LINK_RE.findall(result.markup)
    assert [label for _, label in links] == [label.lower() for label in SENTIMENT_LABELS]
    assert result.markup.count(".png") == 6
    assert ".svg" not in result.markup
    assert "<table" in result.markup
    assert "display:flex" not in result.markup
    assert "position:absolute" not in result.markup


def test_website_markup_uses_flexbox_and_vector_images(generator):
    """Website markup uses SVG images and no tables, with the same links as email."""
    email = generator.generate(_options(target="email"))
    website = generator.generate(_options(target="website"))

    assert "<table" not in website.markup
    assert "<td" not in website.markup
    assert ".png" not in website.markup
    assert website.markup.count(".svg") == 5
    assert "display:flex" in website.markup
    assert website.links == email.links
    assert [url for url, _ in LINK_RE.findall(website.markup)] == list(email.links)


def test_links_follow_destination_scheme(generator):
    result = generator.generate(_options())
    assert result.links[0] == "https://example.com/r/demo?emoji_sentiment=excellent&source=embed"
    assert result.links[-1] == "https://example.com/r/demo?emoji_sentiment=frustrated&source=embed"


def test_default_destination_comes_from_settings(generator, settings):
    result = generator.generate(EmbedOptions(slug="demo"))
    assert result.links[0].startswith(f"{settings.app_base_url}/r/demo?")


@pytest.mark.parametrize("target", ["email", "website"])
def test_generation_is_deterministic(settings, target):
    """Identical input gives byte-identical markup, even across generators."""
    first = EmbedGenerator(settings).generate(_options(target=target, question="Rate us!"))
    second = EmbedGenerator(settings).generate(_options(target=target, question="Rate us!"))
    assert first.markup == second.markup
    assert first.preview == second.preview


@pytest.mark.parametrize("target", ["email", "website"])
def test_exactly_one_attribution_link(generator, settings, target):
    """Besides the five emoji links there is one link, to the marketing site."""
    markup = generator.generate(_options(target=target)).markup

    hrefs = re.findall(r'href="([^"]+)"', markup)
    assert len(hrefs) == 6
    assert hrefs.count(settings.branding_url) == 1
    assert markup.startswith("<!-- emoji review widget by Prompt Reviews promptreviews.app -->\n")


def test_label_set_must_have_five_labels():
    """The sentiment scale is fixed at five labels."""
    with pytest.raises(ValidationError):
        _options(labels=("Good", "Bad"))
    with pytest.raises(ValidationError):
        _options(slug="  ")


@pytest.mark.parametrize(
    "value,expected_px,warns",
    [
        ("xs", 28, False),
        ("sm", 36, False),
        ("md", 48, False),
        ("small", 36, False),
        ("lg", 48, True),
        ("xxl", 48, True),
        ("xxs", 28, True),
        ("huge", 36, True),
    ],
)
def test_emoji_size_fails_closed(generator, value, expected_px, warns):
    """Unknown emoji sizes map to the nearest tier, or the default."""
    result = generator.generate(_options(emoji_size=value))

    assert f'width="{expected_px}" height="{expected_px}"' in result.markup
    assert bool(result.warnings) is warns
    if warns:
        assert result.warnings[0].option == "emoji_size"


@pytest.mark.parametrize(
    "value,expected",
    [("sm", "1rem"), ("md", "1.25rem"), ("large", "1.5rem"), ("xl", "1.5rem"), ("xs", "1rem"), ("???", "1.25rem")],
)
def test_header_size_fails_closed(generator, value, expected):
    result = generator.generate(_options(header_size=value))
    assert f"font-size:{expected};" in result.markup


def test_invalid_header_color_falls_back(generator, settings):
    """Bad colours are replaced by the default colour with a warning."""
    result = generator.generate(_options(header_color="red; background:url(x)"))

    assert f"color:{settings.default_header_color};" in result.markup
    assert "url(x)" not in result.markup
    assert result.warnings[0].option == "header_color"


def test_custom_header_color(generator):
    result = generator.generate(_options(header_color="#FF0000"))
    assert "color:#ff0000;" in result.markup
    assert result.warnings == []


def test_empty_question_falls_back(generator):
    result = generator.generate(_options(question="   "))
    assert ">How was your experience?<" in result.markup
    assert result.warnings[0].option == "question"


def test_question_is_escaped(generator):
    """Question text is HTML-escaped in markup and raw in the preview."""
    result = generator.generate(_options(question="<b>Tom & Jerry</b>"))

    assert "&lt;b&gt;Tom &amp; Jerry&lt;/b&gt;" in result.markup
    assert "<b>" not in result.markup
    texts = [child for node in _walk(result.preview) for child in node["children"] if isinstance(child, str)]
    assert "<b>Tom & Jerry</b>" in texts


def test_card_toggle(generator):
    with_card = generator.generate(_options(show_card=True)).markup
    without_card = generator.generate(_options(show_card=False)).markup
    assert "border:1px solid #e5e7eb;" in with_card
    assert "border:1px solid #e5e7eb;" not in without_card


@pytest.mark.parametrize("target", ["email", "website"])
def test_preview_matches_markup(generator, target):
    """The preview tree carries the same links, images and labels as the markup."""
    result = generator.generate(_options(target=target, emoji_size="md"))
    nodes = list(_walk(result.preview))

    preview_links = [n["props"]["href"] for n in nodes if n["type"] == "a"]
    images = [n["props"] for n in nodes if n["type"] == "img"]

    assert preview_links[:5] == list(result.links)
    assert re.findall(r'href="([^"]+)"', result.markup) == preview_links
    emoji_images = [img for img in images if img["alt"] in SENTIMENT_LABELS]
    assert [img["alt"] for img in emoji_images] == list(SENTIMENT_LABELS)
    assert {img["width"] for img in emoji_images} == {"48"}
    assert re.findall(r'<img src="([^"]+)"', result.markup) == [img["src"] for img in images]


def test_layout_is_shared_by_both_renderers(settings):
    """Markup and preview come from one element tree."""
    tree = compose(build_layout(_options(target="email"), settings))
    preview = render_preview(tree)
    assert preview["type"] == "#fragment"
    assert render_markup(tree).count("<a ") == len([n for n in _walk(preview) if n["type"] == "a"])


def test_generate_for_reads_sentiment_section(generator, engine):
    engine.feature("sentiment").update(enabled=True, question="Did we nail it?")
    result = generator.generate_for(engine.configuration.sentiment, "acme", target="email")
    assert ">Did we nail it?<" in result.markup


def test_live_embed_follows_sentiment_changes(engine, settings):
    """The live widget regenerates when the sentiment section changes."""
    engine.update_page(slug="acme")
    live = LiveEmbed(engine, EmbedGenerator(settings), target="website")
    assert live.result is None

    engine.feature("sentiment").enable()
    assert live.result is not None
    assert "emoji_sentiment=excellent" in live.result.markup

    engine.feature("sentiment").set("question", "Enjoy your visit?")
    assert ">Enjoy your visit?<" in live.result.markup

    live.set_presentation(target="email")
    assert ".png" in live.result.markup

    engine.feature("sentiment").disable()
    assert live.result is None

    live.close()
    engine.feature("sentiment").enable()
    assert live.result is None


def test_live_embed_follows_slug_changes(engine, settings):
    """Renaming the page slug rewrites every widget link."""
    engine.update_page(slug="old")
    live = LiveEmbed(engine, EmbedGenerator(settings))
    engine.feature("sentiment").enable()

    engine.update_page(slug="new")

    assert live.result.links[0] == "https://app.promptreviews.app/r/new?emoji_sentiment=excellent&source=embed"
    assert "/r/old" not in live.result.markup
