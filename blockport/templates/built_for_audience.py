"""Audience landing pages ("built for payers", "built for providers", ...)."""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup, Tag

from blockport.extractors.dom import closest, select_all, text_of
from blockport.extractors.inline import clean_text, resolve_url
from blockport.items import (
    AccordionGroup,
    AccordionItem,
    BuiltForPage,
    CallToAction,
    Card,
    CardGroup,
    Hero,
    LinkRef,
    Testimonial,
)
from blockport.markdown import (
    Block,
    BlockKind,
    Document,
    Section,
    bullets,
    heading,
    join_inline,
    link,
    strong,
)
from blockport.templates.common import (
    TemplateId,
    accordion_block,
    cards_block,
    extract_cards,
    extract_generic_sections,
    extract_image,
    find_anchor,
    first_button,
    generic_section_content,
    image_line,
    link_line,
    metadata_pairs,
    page_metadata,
)

logger = logging.getLogger(__name__)


def _hero(soup: BeautifulSoup, url: str) -> Hero:
    block = soup.select_one(".block--hero")
    if block is None:
        return Hero()
    return Hero(
        title=text_of(block, "h1"),
        description=text_of(block, "p"),
        cta=first_button(block, url, ".btn"),
        image=extract_image(block, url, ".wrapper img"),
    )


def _accordion_body(item: Tag, url: str) -> str:
    parts = []
    for p in item.select(".accordion-body p"):
        a = p.find("a")
        if isinstance(a, Tag):
            parts.append(link(clean_text(a.get_text()), resolve_url(str(a.get("href") or ""), url)))
        else:
            parts.append(clean_text(p.get_text()))
    return join_inline(*parts)


def _use_cases(soup: BeautifulSoup, url: str) -> AccordionGroup:
    accordion = soup.select_one(".block--accordion")
    if accordion is None:
        return AccordionGroup()
    wrapper = closest(accordion, "section", "block--section-wrapper")
    items = [
        AccordionItem(title=title, body=_accordion_body(el, url))
        for el in accordion.select(".accordion-item")
        if (title := text_of(el, ".accordion-button"))
    ]
    key_points = soup.select_one(".block--key-points")
    points = [t for li in select_all(key_points, ".item") if (t := clean_text(li.get_text()))]
    return AccordionGroup(
        subtitle=text_of(wrapper, ".has-lead-font-size"),
        heading=text_of(wrapper, "h2"),
        items=items,
        key_points=points,
    )


def _capabilities(soup: BeautifulSoup) -> CardGroup:
    block = soup.select_one(".block--icon-cards")
    if block is None:
        return CardGroup()
    cards = [
        Card(title=title, description=text_of(el, "p"))
        for el in block.select(".icon-card")
        if (title := text_of(el, "h3"))
    ]
    return CardGroup(subtitle=text_of(block, ".leader"), heading=text_of(block, "h2"), cards=cards)


def _testimonials(block: Tag | None, url: str) -> list[Testimonial]:
    seen: set[str] = set()
    testimonials = []
    for el in select_all(block, ".testimonial"):
        quote = text_of(el, "blockquote")
        if not quote or quote in seen:
            continue
        seen.add(quote)
        case_link = el.select_one('a[href*="case-studies"]')
        testimonials.append(Testimonial(
            quote=quote,
            name=text_of(el, ".blockquote-footer__author-info__name"),
            title=text_of(el, ".blockquote-footer__author-info__title"),
            link=LinkRef(
                text=clean_text(case_link.get_text()) or "View case study",
                href=resolve_url(str(case_link.get("href") or ""), url),
            ) if case_link else None,
        ))
    return testimonials


def _resources(soup: BeautifulSoup, url: str) -> CardGroup:
    block = soup.select_one(".block--resources")
    if block is None:
        return CardGroup()
    wrapper = closest(block, "section", "block--section-wrapper")
    view_all = first_button(wrapper, url, ".wp-block-button__link")
    return CardGroup(
        heading=text_of(wrapper, "h2"),
        view_all=view_all,
        cards=extract_cards(block, url, ".resource", default_link_text=""),
    )


def _meeting(soup: BeautifulSoup, url: str) -> CallToAction:
    block = soup.select_one(".block--media-callout")
    if block is None:
        return CallToAction()
    return CallToAction(
        subtitle=text_of(block, ".leader"),
        heading=text_of(block, "h2"),
        description=text_of(block, ".inner-wrapper p"),
        cta=first_button(block, url, ".btn"),
        image=extract_image(block, url, ".image-wrapper img"),
    )


def parse(soup: BeautifulSoup, url: str) -> BuiltForPage | None:
    main = find_anchor(soup, "main")
    if main is None:
        return None

    hero = _hero(soup, url)
    use_cases = _use_cases(soup, url)
    testimonial_block = soup.select_one(".block--testimonials")
    columns = closest(testimonial_block, "div", "wp-block-columns")

    page = BuiltForPage(
        metadata=page_metadata(soup, TemplateId.BUILT_FOR_AUDIENCE),
        hero=hero,
        use_cases=use_cases,
        capabilities=_capabilities(soup),
        testimonial_image=extract_image(columns, url, ".wp-block-image img"),
        testimonials=_testimonials(testimonial_block, url),
        resources=_resources(soup, url),
        meeting=_meeting(soup, url),
    )

    structured = any((
        hero.title,
        use_cases.heading,
        page.capabilities.heading,
        page.testimonials,
        page.resources.heading,
        page.meeting.heading,
    ))
    title = hero.title or text_of(main, "h1")
    update: dict[str, object] = {
        "metadata": page.metadata.model_copy(update={"title": page.metadata.title or title}),
    }
    if not structured:
        logger.debug("No audience blocks on %s; using generic sections", url)
        update["hero"] = Hero(title=title, description=text_of(main, ".hero p"))
        update["fallback_sections"] = extract_generic_sections(main, url, with_subtitle=True)
    return page.model_copy(update=update)


def _testimonial_entry(t: Testimonial) -> str:
    byline = ", ".join(p for p in (strong(t.name), t.title) if p)
    return join_inline(f'"{t.quote}"', f"— {byline}" if byline else "", link_line(t.link))


def _structured_sections(page: BuiltForPage) -> list[Section]:
    hero = page.hero
    sections = [Section([
        heading(1, hero.title),
        Block(BlockKind.COLUMNS, [[
            join_inline(hero.description, link_line(hero.cta)),
            image_line(hero.image, "Hero image"),
        ]]),
    ])]

    uses = page.use_cases
    if uses.heading:
        sections.append(Section([
            uses.subtitle,
            heading(2, uses.heading),
            accordion_block(uses.items),
            bullets(uses.key_points),
        ]))

    caps = page.capabilities
    if caps.heading:
        sections.append(Section([
            caps.subtitle,
            heading(2, caps.heading),
            Block(BlockKind.CARDS, [
                [join_inline(strong(c.title), c.description), ""] for c in caps.cards
            ]),
        ]))

    if page.testimonials:
        content: list[str | Block] = []
        if page.testimonial_image:
            content.append(Block(BlockKind.COLUMNS, [[
                image_line(page.testimonial_image, "Testimonial image"), "",
            ]]))
        content.append(Block(BlockKind.CAROUSEL, [
            [_testimonial_entry(t), ""] for t in page.testimonials
        ]))
        sections.append(Section(content))

    res = page.resources
    if res.heading:
        view_all = link(res.view_all.text or "View all resources", res.view_all.href) if res.view_all else ""
        sections.append(Section(
            [heading(2, res.heading), view_all, cards_block(res.cards)], style="dark",
        ))

    meeting = page.meeting
    if meeting.heading:
        sections.append(Section([
            meeting.subtitle,
            heading(2, meeting.heading),
            Block(BlockKind.COLUMNS, [[
                image_line(meeting.image, "Meeting"),
                join_inline(meeting.description, link_line(meeting.cta)),
            ]]),
        ]))
    return sections


def serialize(page: BuiltForPage) -> str:
    if page.fallback_sections:
        sections = [Section([heading(1, page.hero.title), page.hero.description])]
        sections += [Section(generic_section_content(s)) for s in page.fallback_sections]
    else:
        sections = _structured_sections(page)

    metadata = metadata_pairs(page.metadata, "title", "description", "image", "template")
    return Document(sections, metadata).render()
