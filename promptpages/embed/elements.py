"""
Widget Elements - Target-specific element trees.

``compose`` turns a WidgetLayout into a small tree of HTML elements.
Email trees use nested tables and raster images, website trees use
flexbox and vector images. Both renderers in ``renderers`` walk the
same tree, so the preview cannot drift from the pasted markup.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Union

from promptpages.embed.layout import BRANDING_BADGE_PX, SentimentLinkNode, WidgetLayout
from promptpages.embed.options import EmbedTarget

FRAGMENT = "#fragment"

CARD_STYLE = {
    "border-radius": "0.5rem",
    "border": "1px solid #e5e7eb",
    "background": "#fff",
    "padding": "1rem",
    "box-shadow": "0 1px 3px rgba(0,0,0,0.1)",
}
LABEL_STYLE = {
    "font-size": ".75rem",
    "color": "#666",
    "margin-top": ".5rem",
    "display": "block",
}


@dataclass
class Comment:
    text: str


@dataclass
class Element:
    """
    One HTML element.

    ``attrs`` and ``style`` keep insertion order, which is the order the
    string renderer writes them in.
    """

    tag: str
    attrs: Dict[str, str] = field(default_factory=dict)
    style: Dict[str, str] = field(default_factory=dict)
    children: List[Union["Element", Comment, str]] = field(default_factory=list)

    def iter(self):
        """Depth-first walk over this element and its descendant elements."""
        yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.iter()

    def find_all(self, tag: str) -> List["Element"]:
        return [element for element in self.iter() if element.tag == tag]


def _header_style(layout: WidgetLayout) -> Dict[str, str]:
    return {
        "font-weight": "bold",
        "text-align": "center",
        "font-size": layout.header.font_size,
        "color": layout.header.color,
    }


def _emoji_image(link: SentimentLinkNode) -> Element:
    size = str(link.size_px)
    return Element(
        "img",
        attrs={"src": link.image_src, "width": size, "height": size, "alt": link.label},
        style={"display": "block", "margin": "0 auto", "border": "none"},
    )


def _emoji_anchor(link: SentimentLinkNode, style: Dict[str, str]) -> Element:
    return Element(
        "a",
        attrs={"href": link.href, "target": "_blank", "title": link.label},
        style=style,
        children=[_emoji_image(link), Element("span", style=dict(LABEL_STYLE), children=[link.label])],
    )


def _compose_email(layout: WidgetLayout) -> Element:
    cells = [
        Element(
            "td",
            style={"text-align": "center", "vertical-align": "top"},
            children=[
                _emoji_anchor(
                    link,
                    {"text-decoration": "none", "display": "inline-block", "text-align": "center"},
                )
            ],
        )
        for link in layout.row.links
    ]
    row_table = Element(
        "table",
        attrs={"role": "presentation", "cellpadding": "0", "cellspacing": "0", "border": "0"},
        style={"margin": "0 auto", "border-collapse": "separate", "border-spacing": "12px"},
        children=[Element("tr", children=cells)],
    )

    badge = layout.attribution
    attribution = Element(
        "a",
        attrs={"href": badge.href, "target": "_blank", "title": badge.title},
        style={"text-decoration": "none"},
        children=[
            Element(
                "img",
                attrs={
                    "src": badge.image_src or "",
                    "width": str(BRANDING_BADGE_PX),
                    "height": str(BRANDING_BADGE_PX),
                    "alt": badge.text,
                },
                style={"display": "inline-block", "border": "none", "opacity": "0.8"},
            )
        ],
    )

    outer_style = {"width": "100%", "max-width": "450px", "margin": "0.5rem auto"}
    if layout.show_card:
        outer_style.update(CARD_STYLE)
    header_style = _header_style(layout)
    header_style["padding-bottom"] = "0.5rem"

    return Element(
        "table",
        attrs={"role": "presentation", "cellpadding": "0", "cellspacing": "0", "border": "0"},
        style=outer_style,
        children=[
            Element("tr", children=[Element("td", style=header_style, children=[layout.header.text])]),
            Element("tr", children=[Element("td", style={"text-align": "center", "padding": "0.5rem"}, children=[row_table])]),
            Element("tr", children=[Element("td", style={"text-align": "right"}, children=[attribution])]),
        ],
    )


def _compose_website(layout: WidgetLayout) -> Element:
    anchors = [
        _emoji_anchor(
            link,
            {
                "text-decoration": "none",
                "display": "flex",
                "flex-direction": "column",
                "align-items": "center",
                "text-align": "center",
            },
        )
        for link in layout.row.links
    ]
    row = Element(
        "div",
        style={
            "display": "flex",
            "flex-wrap": "wrap",
            "justify-content": "center",
            "gap": "12px",
            "padding": "0.5rem 0.5rem 2rem 0.5rem",
        },
        children=anchors,
    )

    badge = layout.attribution
    attribution = Element(
        "div",
        style={"position": "absolute", "bottom": "8px", "right": "8px"},
        children=[
            Element(
                "a",
                attrs={"href": badge.href, "target": "_blank", "title": badge.title},
                style={
                    "width": "24px",
                    "height": "20px",
                    "font-size": "10px",
                    "font-family": "monospace",
                    "border-radius": "4px",
                    "display": "flex",
                    "align-items": "center",
                    "justify-content": "center",
                    "border": "1px solid #d1d5db",
                    "background-color": "#f8fafc",
                    "color": "#2E4A7D",
                    "line-height": "1",
                    "text-decoration": "none",
                },
                children=[badge.text],
            )
        ],
    )

    outer_style = {"max-width": "450px", "margin": "0.5rem auto"}
    if layout.show_card:
        outer_style.update(CARD_STYLE)
    outer_style["position"] = "relative"
    header_style = _header_style(layout)
    header_style["margin-bottom"] = "0.5rem"

    return Element(
        "div",
        style=outer_style,
        children=[Element("div", style=header_style, children=[layout.header.text]), row, attribution],
    )


def compose(layout: WidgetLayout) -> Element:
    """Build the element tree for ``layout``'s target, wrapped in a fragment."""
    if layout.target == EmbedTarget.EMAIL:
        body = _compose_email(layout)
    else:
        body = _compose_website(layout)
    return Element(FRAGMENT, children=[Comment(layout.comment), body])
