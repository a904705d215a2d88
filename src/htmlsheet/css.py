"""Inline CSS parsing and the default computed-style resolver.

``InheritedStyleResolver`` approximates a browser's computed style without a
rendering engine: a node's own declarations, plus inheritable properties
from its nearest declaring ancestor, plus a few tag defaults and HTML
presentational attributes.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from htmlsheet.protocols import HtmlNode


_IMPORTANT_RE = re.compile(r"\s*!\s*important\s*$", re.IGNORECASE)

INHERITED_PROPERTIES = frozenset({
    "color",
    "font-family",
    "font-size",
    "font-style",
    "font-weight",
    "text-align",
    "visibility",
})

_TAG_DEFAULTS: dict[str, dict[str, str]] = {
    "th": {"font-weight": "bold", "text-align": "center"},
    "b": {"font-weight": "bold"},
    "strong": {"font-weight": "bold"},
    "i": {"font-style": "italic"},
    "em": {"font-style": "italic"},
    "u": {"text-decoration": "underline"},
}

# (attribute, css property, tags the attribute applies to)
_PRESENTATIONAL_ATTRIBUTES: tuple[tuple[str, str, frozenset[str]], ...] = (
    ("align", "text-align", frozenset({"td", "th", "tr", "thead", "tbody", "tfoot", "p", "div"})),
    ("valign", "vertical-align", frozenset({"td", "th", "tr", "thead", "tbody", "tfoot"})),
    ("bgcolor", "background-color", frozenset({"table", "tr", "td", "th"})),
    ("width", "width", frozenset({"table", "td", "th", "col", "colgroup"})),
)


def parse_style_attribute(text: str | None) -> dict[str, str]:
    """Parse a CSS declaration list into ``{property: value}``.

    Property names are lower-cased, ``!important`` is dropped, the last
    declaration of a property wins, and malformed declarations are ignored.
    """
    styles: dict[str, str] = {}
    if not text:
        return styles
    for declaration in text.split(";"):
        prop, sep, value = declaration.partition(":")
        if not sep:
            continue
        prop = prop.strip().lower()
        value = _IMPORTANT_RE.sub("", value).strip()
        if prop and value:
            styles[prop] = value
    return styles


def serialize_style(styles: Mapping[str, str]) -> str:
    """Inverse of :func:`parse_style_attribute`."""
    return "; ".join(f"{prop}: {value}" for prop, value in styles.items())


def declared_style(node: HtmlNode) -> dict[str, str]:
    """Return the styles declared on *node* itself.

    Priority, lowest first: tag defaults, presentational attributes, inline
    ``style``.
    """
    tag = node.tag
    styles: dict[str, str] = dict(_TAG_DEFAULTS.get(tag, {}))
    for attribute, prop, tags in _PRESENTATIONAL_ATTRIBUTES:
        if tag in tags:
            value = node.get_attribute(attribute)
            if value:
                styles[prop] = value.strip()
    styles.update(node.inline_style())
    return styles


class InheritedStyleResolver:
    """Default :class:`~htmlsheet.protocols.StyleResolver`.

    Non-inherited properties (``background-color``, ``vertical-align``,
    ``display``, ``text-decoration``, ``width``) come from the node only.
    """

    def computed_style(self, node: HtmlNode) -> dict[str, str]:
        chain: list[HtmlNode] = []
        ancestor = node.parent()
        while ancestor is not None:
            chain.append(ancestor)
            ancestor = ancestor.parent()

        computed: dict[str, str] = {}
        for element in reversed(chain):
            for prop, value in declared_style(element).items():
                if prop in INHERITED_PROPERTIES and value.lower() != "inherit":
                    computed[prop] = value
        for prop, value in declared_style(node).items():
            if value.lower() == "inherit":
                continue
            computed[prop] = value
        return computed
