"""Article body extraction: WordPress cleanup and typed content blocks."""

from __future__ import annotations

import logging

from bs4 import Tag

from blockport.extractors.inline import clean_text, inline_to_markdown, resolve_url
from blockport.items import ContentBlock
from blockport.markdown import bullets, heading, image

logger = logging.getLogger(__name__)

_STRIP_CLASS_PREFIXES = ("wp-block-", "acf-", "block")
_STRIP_ID_PREFIXES = ("section-wrapper-", "h-")

_HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
_CONTAINER_TAGS = frozenset({"div", "section"})

# Body headings never compete with the page h1/h2
MIN_BODY_HEADING_LEVEL = 3


def strip_wordpress_markup(container: Tag | None) -> Tag | None:
    """Remove builder-generated ``class``/``id`` attributes from *container* in place."""
    if container is None:
        return None
    for el in [container, *container.find_all(True)]:
        classes = el.get("class")
        if classes:
            kept = [c for c in classes if not c.startswith(_STRIP_CLASS_PREFIXES)]
            if kept:
                el["class"] = kept
            else:
                del el["class"]
        el_id = el.get("id")
        if isinstance(el_id, str) and el_id.startswith(_STRIP_ID_PREFIXES):
            del el["id"]
    return container


def _blocks_for(el: Tag, base_url: str) -> list[ContentBlock]:
    name = el.name
    if name in _HEADING_TAGS:
        text = clean_text(el.get_text())
        return [ContentBlock(kind="heading", level=int(name[1]), text=text)] if text else []
    if name == "p":
        text = inline_to_markdown(el, base_url)
        return [ContentBlock(kind="paragraph", text=text)] if text else []
    if name in ("ul", "ol"):
        items = [inline_to_markdown(li, base_url) for li in el.find_all("li")]
        return [ContentBlock(kind="list", ordered=name == "ol", items=items)] if items else []
    if name == "blockquote":
        text = clean_text(el.get_text())
        return [ContentBlock(kind="quote", text=text)] if text else []
    if name == "figure":
        img = el.find("img")
        if isinstance(img, Tag) and img.get("src"):
            src = resolve_url(str(img["src"]), base_url)
            return [ContentBlock(kind="image", src=src, alt=str(img.get("alt") or ""))]
        return []
    if name in _CONTAINER_TAGS:
        return extract_content_blocks(el, base_url)
    return []


def extract_content_blocks(container: Tag | None, base_url: str = "") -> list[ContentBlock]:
    """Walk the element children of *container* and return its content blocks.

    ``div`` and ``section`` children are descended into; unrecognised
    elements contribute nothing.
    """
    if container is None:
        return []
    return [
        block
        for child in container.find_all(True, recursive=False)
        for block in _blocks_for(child, base_url)
    ]


def _block_markdown(block: ContentBlock) -> str:
    if block.kind == "heading":
        return heading(max(block.level, MIN_BODY_HEADING_LEVEL), block.text)
    if block.kind == "list":
        return bullets(block.items, ordered=block.ordered)
    if block.kind == "quote":
        return f"> {block.text}"
    if block.kind == "image":
        return image(block.alt, block.src)
    return block.text


def blocks_to_markdown(blocks: list[ContentBlock]) -> str:
    """Render body blocks as markdown separated by blank lines."""
    return "\n\n".join(md for md in map(_block_markdown, blocks) if md)
