"""Blog posts: hero with author bio, article body, tags and related posts."""

from __future__ import annotations

from bs4 import BeautifulSoup

from blockport.extractors.body import (
    blocks_to_markdown,
    extract_content_blocks,
    strip_wordpress_markup,
)
from blockport.extractors.dom import attr_of, text_of
from blockport.extractors.inline import clean_text, resolve_url
from blockport.items import AuthorBio, BlogArticle
from blockport.markdown import (
    Block,
    BlockKind,
    Document,
    Section,
    heading,
    image,
    join_inline,
    link,
    strong,
)
from blockport.templates.common import (
    TemplateId,
    cards_block,
    extract_cards,
    extract_share_links,
    extract_tags,
    find_anchor,
    metadata_pairs,
    page_metadata,
    share_line,
    tags_line,
)

_BODY_SELECTORS = (
    ".post-content .acf-innerblocks-container > .wp-block-column",
    ".post-content",
    ".entry-content",
)


def parse(soup: BeautifulSoup, url: str) -> BlogArticle | None:
    article = find_anchor(soup, "article", "main")
    if article is None:
        return None

    title = text_of(article, ".hero .post-title", "h1")
    featured = resolve_url(
        attr_of(article, (".hero .featured-img img", ".wp-post-image"), "src"), url,
    )

    author_link_el = article.select_one(".post-author strong a") or article.select_one(".post-author a")
    author = AuthorBio(
        name=clean_text(author_link_el.get_text()) if author_link_el else "",
        link=resolve_url(str(author_link_el.get("href") or ""), url) if author_link_el else "",
        avatar=resolve_url(
            attr_of(article, (".post-author .author-image", ".post-author img"), "src"), url,
        ),
        bio=text_of(article, ".post-author .has-small-font-size", ".post-author p"),
    )

    body_container = find_anchor(article, *_BODY_SELECTORS)
    body = extract_content_blocks(strip_wordpress_markup(body_container), url)

    tags = extract_tags(soup)
    return BlogArticle(
        metadata=page_metadata(
            soup,
            TemplateId.BLOG_ARTICLE,
            title=title,
            image=featured,
            author=author.name,
            tags=tags,
        ),
        title=title,
        date=text_of(article, ".hero .leader", ".published-date"),
        featured_image=featured,
        author=author,
        body=body,
        tags=tags,
        share_links=extract_share_links(soup),
        related=extract_cards(soup, url),
    )


def serialize(page: BlogArticle) -> str:
    hero: list[str | Block] = [
        image(page.title, page.featured_image),
        heading(1, page.title),
        page.date,
    ]
    if page.author.name:
        byline = strong(f"By: {link(page.author.name, page.author.link)}")
        hero.append(Block(BlockKind.COLUMNS, [[
            image(page.author.name, page.author.avatar),
            join_inline(byline, page.author.bio),
        ]]))

    sections = [
        Section(hero),
        Section([blocks_to_markdown(page.body)]),
        Section([tags_line(page.tags), share_line(page.share_links)]),
    ]
    if page.related:
        sections.append(Section(
            [heading(2, "Related Posts"), cards_block(page.related)], style="dark",
        ))

    metadata = metadata_pairs(
        page.metadata, "title", "description", "author", "date", "image", "tags", "template",
    )
    return Document(sections, metadata).render()
