"""Extractions and markdown fragments shared by several templates."""

from __future__ import annotations

import logging
from enum import StrEnum
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

from blockport import settings
from blockport.extractors.dom import (
    attr_of,
    has_class_prefix,
    meta_content,
    select_all,
    text_of,
)
from blockport.extractors.inline import clean_text, resolve_url
from blockport.items import (
    AccordionItem,
    Card,
    GenericSection,
    ImageRef,
    LinkRef,
    PageMetadata,
    ShareLink,
    Stat,
)
from blockport.markdown import Block, BlockKind, heading, image, join_inline, link, strong

logger = logging.getLogger(__name__)


class TemplateId(StrEnum):
    BLOG_ARTICLE = "blog-article"
    GATED_RESOURCE = "gated-resource"
    CASE_STUDY = "case-study"
    SOLUTIONS_PAGE = "solutions-page"
    BUILT_FOR_AUDIENCE = "built-for-audience"
    COMPANY_UTILITY = "company-utility"


BUTTON_SELECTORS = ("a.wp-block-button__link", "a.btn-primary")
RELATED_CARD_SELECTOR = ".related-posts .resource"
LOADER_MARKER = "ajax-loader"


def find_anchor(soup: BeautifulSoup, *selectors: str) -> Tag | None:
    """First element matched by *selectors*, tried in order."""
    for selector in selectors:
        el = soup.select_one(selector)
        if el is not None:
            return el
    logger.debug("No structural anchor among %s", ", ".join(selectors))
    return None


def origin_of(url: str) -> str:
    parsed = urlparse(url)
    if not parsed.netloc:
        return ""
    return f"{parsed.scheme or 'https'}://{parsed.netloc}"


# ---------------------------------------------------------------------------
# Shared extraction
# ---------------------------------------------------------------------------

def extract_tags(soup: BeautifulSoup) -> list[str]:
    tags = (clean_text(a.get_text()) for a in select_all(
        soup, ".resource-tags .tags li a", ".resource-tags .tag a",
    ))
    return [t for t in tags if t]


def extract_share_links(soup: BeautifulSoup) -> list[ShareLink]:
    links: list[ShareLink] = []
    for a in soup.select(".share-post a[href]"):
        platform = text_of(a, ".visually-hidden") or clean_text(a.get_text())
        href = str(a.get("href") or "").strip()
        if platform and href:
            links.append(ShareLink(platform=platform, href=href))
    return links


def extract_cards(
    root: Tag | None,
    base_url: str,
    selector: str = RELATED_CARD_SELECTOR,
    *,
    default_link_text: str = "View resource",
) -> list[Card]:
    """Resource cards (image, ``h3`` title, teaser, link) found under *root*."""
    if root is None:
        return []
    cards: list[Card] = []
    for el in root.select(selector):
        title = text_of(el, "h3")
        if not title:
            continue
        img = el.select_one(".wp-post-image") or el.select_one("img")
        cta = el.select_one("a.mt-auto") or el.select_one("a:last-of-type")
        cards.append(Card(
            title=title,
            description=text_of(el, ".content-group p", "p:not(.leader)"),
            image=resolve_url(str(img.get("src") or ""), base_url) if img else "",
            image_alt=str(img.get("alt") or "") if img else "",
            link=resolve_url(str(cta.get("href") or ""), base_url) if cta else "",
            link_text=(clean_text(cta.get_text()) if cta else "") or default_link_text,
            category=text_of(el, ".leader"),
        ))
    return cards


def extract_button_links(root: Tag | None, base_url: str) -> list[LinkRef]:
    links = []
    for a in select_all(root, *BUTTON_SELECTORS):
        text = clean_text(a.get_text())
        if text:
            links.append(LinkRef(text=text, href=resolve_url(str(a.get("href") or ""), base_url)))
    return links


def first_button(root: Tag | None, base_url: str, *selectors: str) -> LinkRef | None:
    for a in select_all(root, *(selectors or BUTTON_SELECTORS)):
        text = clean_text(a.get_text())
        if text:
            return LinkRef(text=text, href=resolve_url(str(a.get("href") or ""), base_url))
    return None


def extract_image(root: Tag | None, base_url: str, *selectors: str) -> ImageRef | None:
    src = attr_of(root, selectors, "src")
    if not src:
        return None
    alt = ""
    for selector in selectors:
        el = root.select_one(selector) if root is not None else None
        if el is not None and el.get("src"):
            alt = str(el.get("alt") or "")
            break
    return ImageRef(src=resolve_url(src, base_url), alt=alt)


def paragraphs_longer_than(root: Tag | None, min_length: int, selector: str = "p") -> list[str]:
    texts = (clean_text(p.get_text()) for p in select_all(root, selector))
    return [t for t in texts if len(t) > min_length]


def extract_accordion_items(root: Tag | None, selector: str = ".accordion-item") -> list[AccordionItem]:
    items = []
    for el in select_all(root, selector):
        title = text_of(el, ".accordion-button", ".accordion-header", "h3", "h4")
        if title:
            items.append(AccordionItem(title=title, body=text_of(el, ".accordion-body", "p")))
    return items


def extract_generic_sections(
    main: Tag,
    base_url: str,
    *,
    min_paragraph_length: int = 20,
    with_subtitle: bool = False,
) -> list[GenericSection]:
    """One :class:`GenericSection` per ``section`` of *main* that has content."""
    sections = []
    for el in main.select(":scope section, :scope > div > div"):
        subtitle = text_of(el, ".has-lead-font-size") if with_subtitle else ""
        para_selector = "p:not(.has-lead-font-size)" if with_subtitle else "p"
        section = GenericSection(
            heading=text_of(el, "h2"),
            subtitle=subtitle,
            paragraphs=paragraphs_longer_than(el, min_paragraph_length, para_selector),
            links=extract_button_links(el, base_url),
        )
        if section.heading or section.paragraphs:
            sections.append(section)
    return sections


def category_from_article(soup: BeautifulSoup) -> str:
    """Title-cased category from the ``category-*`` class of ``<article>``."""
    article = soup.find("article")
    if not isinstance(article, Tag):
        return ""
    cls = has_class_prefix(article, "category-")
    if not cls:
        return ""
    return cls.removeprefix("category-").replace("-", " ").title()


def page_metadata(
    soup: BeautifulSoup,
    template: TemplateId,
    *,
    title: str = "",
    image: str = "",
    author: str = "",
    tags: list[str] | None = None,
    category: str = "",
) -> PageMetadata:
    """Metadata from ``<meta>`` tags, falling back to values found on the page."""
    published = meta_content(soup, "article:published_time")
    return PageMetadata(
        title=meta_content(soup, "og:title") or title,
        description=meta_content(soup, "og:description", "description"),
        template=str(template),
        author=meta_content(soup, "author") or author,
        date=published.split("T")[0],
        image=meta_content(soup, "og:image") or image,
        tags=", ".join(tags or []),
        category=category,
    )


# ---------------------------------------------------------------------------
# Markdown fragments
# ---------------------------------------------------------------------------

def metadata_pairs(metadata: PageMetadata, *keys: str) -> dict[str, str]:
    """Ordered ``{key: value}`` for the ``Metadata`` block."""
    return {key: getattr(metadata, key) for key in keys}


def card_row(card: Card) -> list[str]:
    return [
        image(card.image_alt or card.title, card.image),
        join_inline(strong(card.title), card.description, link(card.link_text, card.link)),
    ]


def cards_block(cards: list[Card]) -> Block:
    return Block(BlockKind.CARDS, [card_row(c) for c in cards])


def stat_rows(stats: list[Stat]) -> list[list[str]]:
    return [[join_inline(strong(s.value), s.description), ""] for s in stats]


def accordion_block(items: list[AccordionItem]) -> Block:
    return Block(BlockKind.ACCORDION, [[i.title, i.body] for i in items])


def tags_line(tags: list[str]) -> str:
    return ", ".join(tags)


def share_line(share_links: list[ShareLink]) -> str:
    if not share_links:
        return ""
    return "Share: " + " ".join(link(s.platform, s.href) for s in share_links)


def link_line(ref: LinkRef | None) -> str:
    return link(ref.text, ref.href) if ref else ""


def image_line(ref: ImageRef | None, default_alt: str = "") -> str:
    return image(ref.alt or default_alt, ref.src) if ref else ""


def generic_section_content(section: GenericSection) -> list[str]:
    return [
        section.subtitle,
        heading(2, section.heading),
        *section.paragraphs,
        *(image(i.alt, i.src) for i in section.images),
        *(link(lk.text, lk.href) for lk in section.links),
    ]


def resources_index(url: str) -> str:
    origin = origin_of(url)
    return f"{origin}{settings.RESOURCES_INDEX_PATH}" if origin else settings.RESOURCES_INDEX_PATH
