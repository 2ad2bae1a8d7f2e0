"""Company and utility pages (about us, leadership, careers, ...).

These pages share no fixed layout, so every top-level section after the
hero is captured generically: lead subtitle, heading, paragraphs, images,
stat cards, a milestone timeline, resource cards and button links.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

from blockport.extractors.dom import select_all, text_of, top_level_sections
from blockport.extractors.inline import clean_text, resolve_url
from blockport.items import AccordionItem, CompanyPage, CompanySection, Hero, ImageRef, Stat
from blockport.markdown import Block, BlockKind, Document, Section, heading, image, link
from blockport.templates.common import (
    LOADER_MARKER,
    TemplateId,
    accordion_block,
    cards_block,
    extract_button_links,
    extract_cards,
    find_anchor,
    first_button,
    link_line,
    metadata_pairs,
    page_metadata,
    stat_rows,
)

HERO_MIN_PARAGRAPH_LENGTH = 20
MIN_PARAGRAPH_LENGTH = 15

_STAT_SELECTOR = ".stat"
_CARD_SELECTOR = ".resource"
_MILESTONE_SELECTORS = (".milestone-item", ".swiper-slide", ".slick-slide:not(.slick-cloned)")
_NESTED_ITEM_CLASSES = ("stat", "resource", "milestone-item", "swiper-slide", "slick-slide")


def _inside_item(el: Tag, section: Tag) -> bool:
    for parent in el.parents:
        if parent is section:
            return False
        if any(cls in (parent.get("class") or []) for cls in _NESTED_ITEM_CLASSES):
            return True
    return False


def _paragraphs(section: Tag, min_length: int) -> list[str]:
    texts = (
        clean_text(p.get_text())
        for p in section.select("p:not(.has-lead-font-size)")
        if not _inside_item(p, section)
    )
    return [t for t in texts if len(t) > min_length]


def _images(section: Tag, url: str) -> list[ImageRef]:
    images = []
    for img in section.select("img"):
        src = resolve_url(str(img.get("src") or ""), url)
        if src and LOADER_MARKER not in src and not _inside_item(img, section):
            images.append(ImageRef(src=src, alt=str(img.get("alt") or "")))
    return images


def _stats(section: Tag) -> list[Stat]:
    return [
        Stat(value=value, description=text_of(el, ".desc"))
        for el in section.select(_STAT_SELECTOR)
        if (value := text_of(el, ".value", "strong") or clean_text(el.get_text()))
    ]


def _milestones(section: Tag) -> list[AccordionItem]:
    seen: set[str] = set()
    milestones = []
    for slide in select_all(section, *_MILESTONE_SELECTORS):
        year = text_of(slide, ".year", "h3", "strong", ".has-title-font-family")
        if year and year not in seen:
            seen.add(year)
            milestones.append(AccordionItem(title=year, body=text_of(slide, "p", ".description")))
    return milestones


def _section(el: Tag, url: str) -> CompanySection:
    return CompanySection(
        subtitle=text_of(el, ".has-lead-font-size"),
        heading=text_of(el, "h2"),
        paragraphs=_paragraphs(el, MIN_PARAGRAPH_LENGTH),
        images=_images(el, url),
        stats=_stats(el),
        milestones=_milestones(el),
        cards=extract_cards(el, url, _CARD_SELECTOR, default_link_text=""),
        links=extract_button_links(el, url),
    )


def _has_content(section: CompanySection) -> bool:
    return bool(
        section.heading or section.paragraphs or section.stats
        or section.milestones or section.cards
    )


def parse(soup: BeautifulSoup, url: str) -> CompanyPage | None:
    main = find_anchor(soup, "main")
    if main is None:
        return None

    sections = top_level_sections(main)
    hero_el = sections[0] if sections else None
    title = text_of(hero_el, "h1") or text_of(main, "h1")
    hero = Hero(title=title, cta=first_button(hero_el, url))

    body = [s for s in (_section(el, url) for el in sections[1:]) if _has_content(s)]
    return CompanyPage(
        metadata=page_metadata(soup, TemplateId.COMPANY_UTILITY, title=title),
        hero=hero,
        hero_paragraphs=_paragraphs(hero_el, HERO_MIN_PARAGRAPH_LENGTH) if hero_el else [],
        sections=body,
    )


def _section_content(section: CompanySection) -> list[str | Block]:
    content: list[str | Block] = [
        section.subtitle,
        heading(2, section.heading),
        *section.paragraphs,
        *(image(i.alt, i.src) for i in section.images),
    ]
    if section.stats:
        content.append(Block(BlockKind.CARDS, stat_rows(section.stats)))
    if section.milestones:
        content.append(accordion_block(section.milestones))
    if section.cards:
        content.append(cards_block(section.cards))
    content += [link(lk.text, lk.href) for lk in section.links]
    return content


def serialize(page: CompanyPage) -> str:
    sections = []
    if page.hero.title:
        sections.append(Section(
            [heading(1, page.hero.title), *page.hero_paragraphs, link_line(page.hero.cta)],
            style="dark",
        ))
    sections += [Section(_section_content(s)) for s in page.sections]

    metadata = metadata_pairs(page.metadata, "title", "description", "image", "template")
    return Document(sections, metadata).render()
