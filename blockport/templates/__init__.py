"""Template registry: one (parse, serialize) pair per page layout.

``parse(soup, url)`` returns the layout's IR, or ``None`` when the page's
structural anchor is missing.  ``serialize(ir)`` is pure: the same IR
always yields byte-identical markdown.

Usage::

    from blockport.templates import TemplateId, get_strategy

    strategy = get_strategy(TemplateId.CASE_STUDY)
    page = strategy.parse(parse_html(html), url)
    markdown = strategy.serialize(page) if page else None
"""

from __future__ import annotations

from typing import Any, Callable, NamedTuple

from bs4 import BeautifulSoup

from blockport.templates import (
    blog_article,
    built_for_audience,
    case_study,
    company_utility,
    gated_resource,
    solutions_page,
)
from blockport.templates.common import TemplateId


class TemplateStrategy(NamedTuple):
    parse: Callable[[BeautifulSoup, str], Any]
    serialize: Callable[[Any], str]


REGISTRY: dict[TemplateId, TemplateStrategy] = {
    TemplateId.BLOG_ARTICLE: TemplateStrategy(blog_article.parse, blog_article.serialize),
    TemplateId.GATED_RESOURCE: TemplateStrategy(gated_resource.parse, gated_resource.serialize),
    TemplateId.CASE_STUDY: TemplateStrategy(case_study.parse, case_study.serialize),
    TemplateId.SOLUTIONS_PAGE: TemplateStrategy(solutions_page.parse, solutions_page.serialize),
    TemplateId.BUILT_FOR_AUDIENCE: TemplateStrategy(
        built_for_audience.parse, built_for_audience.serialize,
    ),
    TemplateId.COMPANY_UTILITY: TemplateStrategy(
        company_utility.parse, company_utility.serialize,
    ),
}


def get_strategy(
    template_id: str, registry: dict[TemplateId, TemplateStrategy] | None = None,
) -> TemplateStrategy:
    """Look up the strategy for *template_id*.

    Raises:
        KeyError: *template_id* is not a known template.
    """
    registry = REGISTRY if registry is None else registry
    try:
        return registry[TemplateId(template_id)]
    except (ValueError, KeyError):
        valid = ", ".join(t.value for t in registry)
        raise KeyError(f"Unknown template: {template_id} (valid: {valid})") from None


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


__all__ = [
    "REGISTRY",
    "TemplateId",
    "TemplateStrategy",
    "get_strategy",
    "parse_html",
]
