"""
Widget Renderers - Markup string and preview tree from one element tree.
"""

from typing import Any, Dict, List, Union

from markupsafe import escape

from promptpages.embed.elements import FRAGMENT, Comment, Element

VOID_TAGS = frozenset({"img", "br", "hr"})

# URL attributes keep bare ampersands; unsafe characters are percent-encoded.
URL_ATTRS = frozenset({"href", "src"})
_URL_UNSAFE = {'"': "%22", "<": "%3C", ">": "%3E", " ": "%20"}


def _attr_value(name: str, value: str) -> str:
    if name in URL_ATTRS:
        return "".join(_URL_UNSAFE.get(char, char) for char in value)
    return str(escape(value))


def _style_text(style: Dict[str, str]) -> str:
    return "".join(f"{name}:{value};" for name, value in style.items())


def _render_node(node: Union[Element, Comment, str], parts: List[str]) -> None:
    if isinstance(node, str):
        parts.append(str(escape(node)))
        return
    if isinstance(node, Comment):
        parts.append(f"<!-- {node.text.replace('--', '- -')} -->\n")
        return
    if node.tag == FRAGMENT:
        for child in node.children:
            _render_node(child, parts)
        return

    attrs = dict(node.attrs)
    if node.style:
        attrs["style"] = _style_text(node.style)
    attr_text = "".join(f' {name}="{_attr_value(name, value)}"' for name, value in attrs.items())
    parts.append(f"<{node.tag}{attr_text}>")
    if node.tag in VOID_TAGS:
        return
    for child in node.children:
        _render_node(child, parts)
    parts.append(f"</{node.tag}>")


def render_markup(element: Element) -> str:
    """
    Serialize an element tree to self-contained HTML.

    Styles are inline only and text is HTML-escaped. Output depends on
    nothing but the tree, so equal trees give byte-identical strings.
    """
    parts: List[str] = []
    _render_node(element, parts)
    return "".join(parts)


def render_preview(element: Union[Element, Comment, str]) -> Any:
    """
    DOM-style tree for the live preview.

    Elements become ``{"type", "props", "children"}`` dicts whose props
    carry the attributes plus a ``style`` mapping; text stays a string.
    """
    if isinstance(element, str):
        return element
    if isinstance(element, Comment):
        return {"type": "#comment", "props": {}, "children": [element.text]}
    props: Dict[str, Any] = dict(element.attrs)
    if element.style:
        props["style"] = dict(element.style)
    return {
        "type": element.tag,
        "props": props,
        "children": [render_preview(child) for child in element.children],
    }
