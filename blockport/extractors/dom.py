"""Selector cascades over BeautifulSoup trees.

Every optional field a template reads follows the same rule: try the
primary selector, then each fallback, and settle on an empty value when
nothing matches.  None of these helpers raise for a missing element.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

from blockport.extractors.inline import clean_text


def text_of(root: Tag | None, *selectors: str, default: str = "") -> str:
    """Return the trimmed text of the first selector that yields any."""
    if root is None:
        return default
    for selector in selectors:
        el = root.select_one(selector)
        if el is not None:
            text = clean_text(el.get_text())
            if text:
                return text
    return default


def attr_of(
    root: Tag | None,
    selectors: str | tuple[str, ...],
    attr: str,
    default: str = "",
) -> str:
    """Return attribute *attr* of the first matching element that has it."""
    if root is None:
        return default
    if isinstance(selectors, str):
        selectors = (selectors,)
    for selector in selectors:
        el = root.select_one(selector)
        if el is not None:
            value = el.get(attr)
            if isinstance(value, list):
                value = " ".join(value)
            if value and str(value).strip():
                return str(value).strip()
    return default


def select_all(root: Tag | None, *selectors: str) -> list[Tag]:
    """All elements matching any of *selectors*, in document order, once each."""
    if root is None or not selectors:
        return []
    return root.select(", ".join(selectors))


def closest(el: Tag | None, name: str, class_: str | None = None) -> Tag | None:
    """Nearest ancestor-or-self named *name* (and carrying *class_*)."""
    node = el
    while isinstance(node, Tag):
        if node.name == name and (class_ is None or class_ in (node.get("class") or [])):
            return node
        node = node.parent
    return None


def meta_content(soup: BeautifulSoup | Tag, *names: str) -> str:
    """``content`` of the first ``<meta>`` whose ``property`` or ``name`` matches."""
    for name in names:
        for attr in ("property", "name"):
            el = soup.find("meta", attrs={attr: name})
            if isinstance(el, Tag):
                content = el.get("content")
                if content and str(content).strip():
                    return str(content).strip()
    return ""


def top_level_sections(main: Tag | None) -> list[Tag]:
    """Section wrappers of a page body: ``.block--section-wrapper`` or direct children."""
    if main is None:
        return []
    return main.select(":scope section.block--section-wrapper, :scope > section")


def has_class_prefix(el: Tag, prefix: str) -> str:
    """Return the first class of *el* starting with *prefix* ("" if none)."""
    for cls in el.get("class") or []:
        if cls.startswith(prefix):
            return cls
    return ""
