"""Solutions and product pages.

Structured layout: hero, product intro with key benefits, capabilities
accordion, stats, partnership columns and a closing meeting call-to-action.
Pages built without those blocks fall back to one section per content
section plus an accordion of any ``.accordion-item`` entries.
"""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup, Tag

from blockport.extractors.dom import closest, select_all, text_of, top_level_sections
from blockport.extractors.inline import clean_text, inline_to_markdown
from blockport.items import (
    AccordionGroup,
    AccordionItem,
    CallToAction,
    Hero,
    Partnership,
    ProductIntro,
    SolutionsPage,
    Stat,
    StatGroup,
)
from blockport.markdown import Block, BlockKind, Document, Section, bullets, heading, strong
from blockport.templates.common import (
    TemplateId,
    accordion_block,
    extract_accordion_items,
    extract_generic_sections,
    extract_image,
    find_anchor,
    first_button,
    generic_section_content,
    image_line,
    link_line,
    metadata_pairs,
    page_metadata,
    stat_rows,
)

logger = logging.getLogger(__name__)


def _hero(main: Tag, url: str) -> Hero:
    sections = top_level_sections(main)
    if not sections:
        return Hero(title=text_of(main, "h1"))
    first = sections[0]
    return Hero(
        title=text_of(first, "h1"),
        description=text_of(first, ".has-body-large-font-size"),
        cta=first_button(first, url, ".wp-block-button__link"),
    )


def _intro(soup: BeautifulSoup) -> ProductIntro:
    key_points = soup.select_one(".block--key-points")
    if key_points is None:
        return ProductIntro()
    wrapper = closest(key_points, "section", "block--section-wrapper")
    return ProductIntro(
        heading=text_of(wrapper, "h2"),
        descriptions=[
            t for p in select_all(wrapper, ".has-body-large-font-size")
            if (t := clean_text(p.get_text()))
        ],
        benefits_heading=text_of(key_points, "h3", default="Key benefits"),
        benefits=[t for li in key_points.select(".item") if (t := clean_text(li.get_text()))],
    )


def _capabilities(soup: BeautifulSoup, url: str) -> AccordionGroup:
    accordion = soup.select_one(".block--accordion")
    if accordion is None:
        return AccordionGroup()
    wrapper = closest(accordion, "section", "block--section-wrapper")
    items = []
    for el in accordion.select(".accordion-item"):
        title = text_of(el, ".accordion-button")
        if title:
            body = el.select_one(".accordion-body")
            items.append(AccordionItem(title=title, body=inline_to_markdown(body, url)))
    return AccordionGroup(heading=text_of(wrapper, "h2"), items=items)


def _stats(soup: BeautifulSoup, url: str) -> StatGroup:
    cards = soup.select_one(".block--cards")
    if cards is None:
        return StatGroup()
    wrapper = closest(cards, "section", "block--section-wrapper")
    items = [
        Stat(value=value, description=text_of(el, "p"))
        for el in cards.select(".icon-card")
        if (value := text_of(el, ".title"))
    ]
    return StatGroup(
        heading=text_of(wrapper, "h2"),
        items=items,
        cta=first_button(wrapper, url, ".wp-block-button__link"),
    )


def _partnership(soup: BeautifulSoup, url: str) -> Partnership:
    gold = soup.select_one("section.has-gold-background-color")
    if gold is None:
        return Partnership()
    return Partnership(
        heading=text_of(gold, "h2"),
        description=text_of(gold, "p"),
        image=extract_image(gold, url, "figure img"),
    )


def _meeting(soup: BeautifulSoup, url: str) -> CallToAction:
    candidates = soup.select("section.has-ink-blue-5-background-color")
    # The meeting CTA is the last of at least two ink-blue sections
    if len(candidates) < 2:
        return CallToAction()
    last = candidates[-1]
    return CallToAction(
        subtitle=text_of(last, ".has-lead-font-size"),
        heading=text_of(last, "h2"),
        description=text_of(last, "p:not(.has-lead-font-size)"),
        cta=first_button(last, url, ".wp-block-button__link"),
    )


def parse(soup: BeautifulSoup, url: str) -> SolutionsPage | None:
    main = find_anchor(soup, "main")
    if main is None:
        return None

    page = SolutionsPage(
        metadata=page_metadata(soup, TemplateId.SOLUTIONS_PAGE),
        hero=_hero(main, url),
        intro=_intro(soup),
        capabilities=_capabilities(soup, url),
        stats=_stats(soup, url),
        partnership=_partnership(soup, url),
        meeting=_meeting(soup, url),
    )
    structured = any((
        page.intro.heading,
        page.capabilities.heading,
        page.stats.heading,
        page.partnership.heading,
        page.meeting.heading,
    ))
    title = page.hero.title or text_of(main, "h1")
    update: dict[str, object] = {
        "metadata": page.metadata.model_copy(
            update={"title": page.metadata.title or title},
        ),
        "hero": page.hero.model_copy(update={"title": title}),
    }
    if not structured:
        logger.debug("No structured solution blocks on %s; using generic sections", url)
        update["fallback_sections"] = extract_generic_sections(main, url)
        update["fallback_accordion"] = extract_accordion_items(main)
    return page.model_copy(update=update)


def _structured_sections(page: SolutionsPage) -> list[Section]:
    sections = []

    intro = page.intro
    if intro.heading:
        sections.append(Section([
            heading(2, intro.heading),
            Block(BlockKind.COLUMNS, [[" ".join(intro.descriptions), strong(intro.benefits_heading)]]),
            bullets(intro.benefits),
        ]))

    caps = page.capabilities
    if caps.heading:
        sections.append(Section([heading(2, caps.heading), accordion_block(caps.items)]))

    stats = page.stats
    if stats.heading:
        sections.append(Section([
            heading(2, stats.heading),
            Block(BlockKind.CARDS, stat_rows(stats.items)),
            link_line(stats.cta),
        ]))

    partner = page.partnership
    if partner.heading:
        sections.append(Section([
            heading(2, partner.heading),
            Block(BlockKind.COLUMNS, [[
                partner.description, image_line(partner.image, "Partnership ecosystem"),
            ]]),
        ]))

    meeting = page.meeting
    if meeting.heading:
        sections.append(Section([
            meeting.subtitle,
            heading(2, meeting.heading),
            meeting.description,
            link_line(meeting.cta),
        ], style="dark"))
    return sections


def serialize(page: SolutionsPage) -> str:
    hero = page.hero
    sections = [Section([heading(1, hero.title), hero.description, link_line(hero.cta)])]

    if page.fallback_sections or page.fallback_accordion:
        sections += [Section(generic_section_content(s)) for s in page.fallback_sections]
        if page.fallback_accordion:
            sections.append(Section([accordion_block(page.fallback_accordion)]))
    else:
        sections += _structured_sections(page)

    metadata = metadata_pairs(page.metadata, "title", "description", "image", "template")
    return Document(sections, metadata).render()
