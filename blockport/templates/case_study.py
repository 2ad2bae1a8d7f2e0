"""Case studies: hero, challenge/solution summary, stats and narrative."""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

from blockport.extractors.dom import select_all, text_of, top_level_sections
from blockport.extractors.inline import clean_text
from blockport.items import CaseNarrative, CaseStudy, CaseSummary, Stat
from blockport.markdown import Block, BlockKind, Document, Section, heading, join_inline, link, strong
from blockport.templates.common import (
    TemplateId,
    cards_block,
    extract_cards,
    extract_image,
    extract_share_links,
    extract_tags,
    find_anchor,
    first_button,
    image_line,
    link_line,
    metadata_pairs,
    page_metadata,
    resources_index,
    share_line,
    stat_rows,
    tags_line,
)

CATEGORY = "Case Studies"


def _section(sections: list[Tag], index: int) -> Tag | None:
    return sections[index] if len(sections) > index else None


def _summary(section: Tag | None) -> CaseSummary:
    if section is None:
        return CaseSummary()
    columns = select_all(section, ".wp-block-columns .wp-block-column")
    summary = CaseSummary(heading=text_of(section, "h2"))
    if len(columns) < 2:
        return summary
    return summary.model_copy(update={
        "challenge_heading": text_of(columns[0], "h3", default="The Challenge"),
        "challenge_text": text_of(columns[0], "p"),
        "solution_heading": text_of(columns[1], "h3", default="The Solution"),
        "solution_text": text_of(columns[1], "p"),
    })


def _narrative(section: Tag | None, url: str) -> CaseNarrative:
    if section is None:
        return CaseNarrative()
    narrative = CaseNarrative(
        subtitle=text_of(section, ".has-lead-font-size"),
        heading=text_of(section, "h2"),
        cta=first_button(section, url, ".wp-block-button__link"),
    )
    column_groups = select_all(section, ".wp-block-columns")
    if len(column_groups) < 2:
        return narrative
    cols = column_groups[1].select(".wp-block-column")
    if len(cols) < 2:
        return narrative

    def paragraphs(col: Tag) -> list[str]:
        return [clean_text(p.get_text()) for p in col.select("p")] + ["", ""]

    challenge, solution = paragraphs(cols[0]), paragraphs(cols[1])
    return narrative.model_copy(update={
        "challenge_heading": text_of(cols[0], "h3", default="The Challenge"),
        "challenge_lead": challenge[0],
        "challenge_text": challenge[1],
        "solution_heading": text_of(cols[1], "h3", default="The Solution"),
        "solution_lead": solution[0],
        "solution_text": solution[1],
    })


def parse(soup: BeautifulSoup, url: str) -> CaseStudy | None:
    main = find_anchor(soup, "main")
    if main is None:
        return None

    sections = top_level_sections(main)
    hero = _section(sections, 0)
    title = text_of(hero, ".post-title", "h1") or text_of(main, "h1")
    hero_image = extract_image(hero, url, ".featured-wrapper img", ".wp-post-image")

    stats_root = soup.select_one("section.has-gold-background-color, .block--stats")
    stats = [
        Stat(value=value, description=text_of(el, ".desc"))
        for el in select_all(stats_root, ".stat")
        if (value := text_of(el, ".value"))
    ]

    tags = extract_tags(soup)
    return CaseStudy(
        metadata=page_metadata(
            soup,
            TemplateId.CASE_STUDY,
            title=title,
            image=hero_image.src if hero_image else "",
            tags=tags,
            category=CATEGORY,
        ),
        title=title,
        hero_image=hero_image,
        summary=_summary(_section(sections, 1)),
        stats=stats,
        narrative=_narrative(_section(sections, 3), url),
        tags=tags,
        share_links=extract_share_links(soup),
        related=extract_cards(soup, url),
        resources_url=resources_index(url),
    )


def _columns_cell(title: str, lead: str, text: str) -> str:
    return join_inline(strong(title), strong(lead), text)


def serialize(page: CaseStudy) -> str:
    sections = [Section([heading(1, page.title), image_line(page.hero_image, "Case study hero")])]

    summary = page.summary
    if summary.heading:
        content: list[str | Block] = [heading(2, summary.heading)]
        if summary.challenge_heading:
            content.append(Block(BlockKind.COLUMNS, [[
                _columns_cell(summary.challenge_heading, "", summary.challenge_text),
                _columns_cell(summary.solution_heading, "", summary.solution_text),
            ]]))
        sections.append(Section(content))

    if page.stats:
        sections.append(Section([Block(BlockKind.CARDS, stat_rows(page.stats))], style="highlight"))

    narrative = page.narrative
    if narrative.heading:
        content = [narrative.subtitle, heading(2, narrative.heading)]
        if narrative.challenge_heading:
            content.append(Block(BlockKind.COLUMNS, [[
                _columns_cell(
                    narrative.challenge_heading, narrative.challenge_lead, narrative.challenge_text,
                ),
                _columns_cell(
                    narrative.solution_heading, narrative.solution_lead, narrative.solution_text,
                ),
            ]]))
        content.append(link_line(narrative.cta))
        sections.append(Section(content))

    sections.append(Section([tags_line(page.tags), share_line(page.share_links)]))

    if page.related:
        sections.append(Section([
            heading(2, "Related Posts"),
            link("View all resources", page.resources_url),
            cards_block(page.related),
        ], style="dark"))

    metadata = metadata_pairs(
        page.metadata, "title", "description", "date", "image", "tags", "template", "category",
    )
    return Document(sections, metadata).render()
