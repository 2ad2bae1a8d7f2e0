"""Gated resources: white papers and webinars behind a HubSpot form."""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

from blockport.extractors.dom import attr_of, select_all, text_of
from blockport.extractors.inline import clean_text, resolve_url
from blockport.items import GatedResource
from blockport.markdown import Block, BlockKind, Document, Section, bullets, heading, image, strong
from blockport.templates.common import (
    TemplateId,
    cards_block,
    category_from_article,
    extract_cards,
    extract_share_links,
    extract_tags,
    find_anchor,
    metadata_pairs,
    page_metadata,
    share_line,
    tags_line,
)

HUBSPOT_SHARE_URL = "https://share.hsforms.com/"
MIN_PARAGRAPH_LENGTH = 10


def _form_id(soup: BeautifulSoup) -> str:
    form = soup.select_one(".hbspt-form, [data-hs-form-id]")
    if not isinstance(form, Tag):
        return ""
    form_el_id = str(form.get("id") or "")
    if form_el_id.startswith("hbspt-form-"):
        return form_el_id.removeprefix("hbspt-form-")
    return str(form.get("data-hs-form-id") or form_el_id)


def parse(soup: BeautifulSoup, url: str) -> GatedResource | None:
    anchor = find_anchor(soup, ".block--resource-hero", "article", "main")
    if anchor is None:
        return None

    title = text_of(soup, "h1.post-title", ".post-title", "h1")
    featured = resolve_url(attr_of(
        soup, (".hero .featured-img img", ".featured-wrapper img", ".wp-post-image"), "src",
    ), url)

    left = (
        soup.select_one(".block--resource-hero .col-12.col-lg-6:first-child")
        or soup.select_one(".post-content")
    )
    paragraphs = [
        text for p in select_all(left, "p")
        if len(text := clean_text(p.get_text())) > MIN_PARAGRAPH_LENGTH
    ]
    bullet_points = [text for li in select_all(left, "ul li") if (text := clean_text(li.get_text()))]

    tags = extract_tags(soup)
    return GatedResource(
        metadata=page_metadata(
            soup,
            TemplateId.GATED_RESOURCE,
            title=title,
            image=featured,
            tags=tags,
            category=category_from_article(soup),
        ),
        title=title,
        featured_image=featured,
        subtitle=text_of(left, "h3 b span", "h3"),
        paragraphs=paragraphs,
        bullet_points=bullet_points,
        form_id=_form_id(soup),
        form_heading=text_of(soup, ".gated-wrapper h2", default="Read now"),
        tags=tags,
        share_links=extract_share_links(soup),
        related=extract_cards(soup, url),
    )


def serialize(page: GatedResource) -> str:
    body: list[str | Block] = [strong(page.subtitle), *page.paragraphs, bullets(page.bullet_points)]
    if page.form_id:
        body += [
            heading(2, page.form_heading),
            Block(BlockKind.EMBED, [[f"{HUBSPOT_SHARE_URL}{page.form_id}", ""]]),
        ]

    sections = [
        Section([heading(1, page.title), image(page.title, page.featured_image)]),
        Section(body),
        Section([tags_line(page.tags), share_line(page.share_links)]),
    ]
    if page.related:
        sections.append(Section(
            [heading(2, "Related Resources"), cards_block(page.related)], style="dark",
        ))

    metadata = metadata_pairs(
        page.metadata, "title", "description", "date", "image", "tags", "category", "template",
    )
    return Document(sections, metadata).render()
