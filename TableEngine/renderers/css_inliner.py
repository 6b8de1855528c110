"""Copy the table's CSS rule set onto the elements it targets.

Only the rules HTMLRenderer emits are handled: every selector is a single class
name, so matching is a class lookup (`find_class`) rather than a CSS engine.
Declarations are merged in rule order, and a declaration already present in an
element's `style` attribute is kept over the rule's."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from lxml import html as lxml_html

CssRule = Tuple[str, Dict[str, str]]


def parse_style(style: str | None) -> Dict[str, str]:
    """`"a: 1; b: 2"` -> `{"a": "1", "b": "2"}`; malformed declarations are skipped."""
    declarations: Dict[str, str] = {}
    if not style:
        return declarations
    for chunk in style.split(";"):
        if ":" not in chunk:
            continue
        prop, value = chunk.split(":", 1)
        prop, value = prop.strip().lower(), value.strip()
        if prop and value:
            declarations[prop] = value
    return declarations


def serialize_style(declarations: Dict[str, str]) -> str:
    return " ".join(f"{prop}: {value};" for prop, value in declarations.items())


def inline_styles(html_fragment: str, rules: Sequence[CssRule]) -> str:
    """Return `html_fragment` with `rules` written into `style` attributes.

    Parameters:
        html_fragment: markup with a single root element (the `<table>`).
        rules: (class name, declarations) pairs in cascade order."""
    root = lxml_html.fragment_fromstring(html_fragment.strip())

    matched: Dict[object, Dict[str, str]] = {}
    elements: List[object] = []
    for class_name, declarations in rules:
        for element in root.find_class(class_name):
            if element not in matched:
                matched[element] = {}
                elements.append(element)
            matched[element].update(declarations)

    for element in elements:
        merged = {**matched[element], **parse_style(element.get("style"))}
        if merged:
            element.set("style", serialize_style(merged))

    return lxml_html.tostring(root, encoding="unicode")


__all__ = ["parse_style", "serialize_style", "inline_styles"]
