"""Tests for the page-template parsers and serializers."""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from blockport.templates import REGISTRY, TemplateId, get_strategy, parse_html

BASE_URL = "https://www.example.com"
EMPTY_PAGE = "<html><body><div><p>Nothing here</p></div></body></html>"


def _metadata_keys(markdown: str) -> list[str]:
    block = markdown.split("| Metadata |  |\n| --- | --- |\n", 1)[1]
    return [line.split("|")[1].strip() for line in block.strip().splitlines()]


def _sections(markdown: str) -> list[str]:
    return markdown.split("\n\n---\n\n")


class TestRegistry:
    def test_every_template_registered(self):
        assert set(REGISTRY) == set(TemplateId)

    def test_lookup_by_string(self):
        assert get_strategy("case-study") is REGISTRY[TemplateId.CASE_STUDY]

    def test_unknown_template(self):
        with pytest.raises(KeyError, match="Unknown template: landing-page"):
            get_strategy("landing-page")

    @pytest.mark.parametrize("template", list(TemplateId))
    def test_missing_anchor_returns_none(self, template):
        assert get_strategy(template).parse(parse_html(EMPTY_PAGE), BASE_URL + "/x/") is None


class TestBlogArticle:
    URL = BASE_URL + "/blog/cut-claim-denials/"

    @pytest.fixture
    def page(self, blog_html):
        return get_strategy(TemplateId.BLOG_ARTICLE).parse(parse_html(blog_html), self.URL)

    @pytest.fixture
    def markdown(self, page):
        return get_strategy(TemplateId.BLOG_ARTICLE).serialize(page)

    def test_title_and_date(self, page):
        assert page.title == "Five Ways to Cut Claim Denials"
        assert page.date == "March 12, 2024"

    def test_author(self, page):
        assert page.author.name == "Dana Reyes"
        assert page.author.link == "https://www.example.com/author/dana-reyes/"
        assert page.author.bio == "Dana leads revenue cycle research."

    def test_body_blocks(self, page):
        assert [b.kind for b in page.body] == ["heading", "paragraph", "list", "quote", "image"]

    def test_tags_and_share(self, page):
        assert page.tags == ["Revenue Cycle", "Claims"]
        assert page.share_links[0].platform == "LinkedIn"

    def test_related_card(self, page):
        [card] = page.related
        assert card.title == "Prior Authorization Basics"
        assert card.link == "https://www.example.com/blog/prior-auth-basics/"
        assert card.link_text == "Read more"

    def test_markdown_hero(self, markdown):
        hero = _sections(markdown)[0]
        assert hero.startswith(
            "![Five Ways to Cut Claim Denials](https://www.example.com/wp-content/uploads/denials.jpg)",
        )
        assert "# Five Ways to Cut Claim Denials" in hero
        assert "| Columns |  |" in hero
        assert "**By: [Dana Reyes](https://www.example.com/author/dana-reyes/)**" in hero

    def test_markdown_body(self, markdown):
        body = _sections(markdown)[1]
        assert "### Why denials happen" in body
        assert "Most denials start with **incomplete** eligibility data." in body
        assert "[our guide](https://www.example.com/resources/denials-guide/)" in body
        assert "- Verify coverage\n- Check codes" in body
        assert "> Prevention beats appeal." in body
        assert "![Denial chart](https://www.example.com/wp-content/uploads/chart.png)" in body
        assert "dataLayer" not in body

    def test_related_section_is_dark(self, markdown):
        related = _sections(markdown)[3]
        assert related.startswith("## Related Posts")
        assert related.endswith("| style | dark |")

    def test_metadata(self, markdown):
        assert _metadata_keys(markdown) == [
            "title", "description", "author", "date", "image", "tags", "template",
        ]
        assert "| date | 2024-03-12 |" in markdown
        assert "| tags | Revenue Cycle, Claims |" in markdown
        assert markdown.endswith("| template | blog-article |\n")

    def test_deterministic(self, page):
        serialize = get_strategy(TemplateId.BLOG_ARTICLE).serialize
        assert serialize(page) == serialize(page)


class TestGatedResource:
    URL = BASE_URL + "/resources/state-of-prior-auth/"

    @pytest.fixture
    def page(self, gated_html):
        return get_strategy(TemplateId.GATED_RESOURCE).parse(parse_html(gated_html), self.URL)

    @pytest.fixture
    def markdown(self, page):
        return get_strategy(TemplateId.GATED_RESOURCE).serialize(page)

    def test_fields(self, page):
        assert page.title == "The State of Prior Authorization 2024"
        assert page.subtitle == "Download the full report"
        assert page.paragraphs == ["Our survey of 500 providers shows a rising administrative burden."]
        assert page.bullet_points == ["Key trends", "Benchmarks by specialty"]
        assert page.featured_image == "https://www.example.com/wp-content/uploads/pa-report.png"

    def test_form(self, page):
        assert page.form_id == "1234-abcd"
        assert page.form_heading == "Get the report"

    def test_category_from_article_class(self, page):
        assert page.metadata.category == "White Papers"

    def test_markdown(self, markdown):
        assert "**Download the full report**" in markdown
        assert "## Get the report" in markdown
        assert "| Embed |  |\n| --- | --- |\n| https://share.hsforms.com/1234-abcd |  |" in markdown
        assert "## Related Resources" in markdown
        assert "Prior Authorization" in markdown

    def test_metadata(self, markdown):
        assert _metadata_keys(markdown) == [
            "title", "description", "date", "image", "tags", "category", "template",
        ]

    def test_no_form_no_embed(self, gated_html):
        html = gated_html.replace('<div class="hbspt-form" id="hbspt-form-1234-abcd"></div>', "")
        strategy = get_strategy(TemplateId.GATED_RESOURCE)
        markdown = strategy.serialize(strategy.parse(parse_html(html), self.URL))
        assert "| Embed |" not in markdown


class TestCaseStudy:
    URL = BASE_URL + "/case-studies/acme-health/"

    @pytest.fixture
    def page(self, case_study_html):
        return get_strategy(TemplateId.CASE_STUDY).parse(parse_html(case_study_html), self.URL)

    @pytest.fixture
    def markdown(self, page):
        return get_strategy(TemplateId.CASE_STUDY).serialize(page)

    def test_hero(self, page):
        assert page.title == "How Acme Health Cut Denials 40%"
        assert page.hero_image.alt == "Acme Health campus"

    def test_summary(self, page):
        assert page.summary.heading == "At a glance"
        assert page.summary.challenge_text == "Denials were climbing every quarter."
        assert page.summary.solution_heading == "The Solution"

    def test_stats(self, page):
        assert [(s.value, s.description) for s in page.stats] == [
            ("40%", "fewer denials"), ("$2M", "recovered revenue"),
        ]

    def test_narrative(self, page):
        n = page.narrative
        assert n.subtitle == "Customer story"
        assert n.challenge_lead == "Manual reviews everywhere."
        assert n.solution_text == "Requests are now checked before submission."
        assert n.cta.href == "https://www.example.com/contact/"

    def test_markdown(self, markdown):
        assert "| **40%** fewer denials |  |" in markdown
        assert "| style | highlight |" in markdown
        assert "**Challenge** **Manual reviews everywhere.** Staff spent hours" in markdown
        assert "[Talk to us](https://www.example.com/contact/)" in markdown
        assert "[View all resources](https://www.example.com/resources/)" in markdown

    def test_metadata(self, markdown):
        assert _metadata_keys(markdown) == [
            "title", "description", "image", "tags", "template", "category",
        ]
        assert "| category | Case Studies |" in markdown

    def test_missing_sections_tolerated(self):
        html = "<html><body><main><section><h1>Only a title</h1></section></main></body></html>"
        strategy = get_strategy(TemplateId.CASE_STUDY)
        page = strategy.parse(parse_html(html), self.URL)
        assert page.title == "Only a title"
        assert page.stats == []
        assert "# Only a title" in strategy.serialize(page)


class TestSolutionsPage:
    URL = BASE_URL + "/solutions/prior-authorization/"

    @pytest.fixture
    def page(self, solutions_html):
        return get_strategy(TemplateId.SOLUTIONS_PAGE).parse(parse_html(solutions_html), self.URL)

    @pytest.fixture
    def markdown(self, page):
        return get_strategy(TemplateId.SOLUTIONS_PAGE).serialize(page)

    def test_hero(self, page):
        assert page.hero.title == "Prior Authorization Automation"
        assert page.hero.description == "Approve care faster."
        assert page.hero.cta.text == "Request a demo"

    def test_intro(self, page):
        assert page.intro.heading == "Why automate"
        assert page.intro.benefits == ["Faster approvals", "Fewer phone calls"]

    def test_capabilities_keep_inline_markup(self, page):
        assert [i.title for i in page.capabilities.items] == ["Intake", "Decisioning"]
        assert page.capabilities.items[0].body == "Capture requests from **any** channel."

    def test_stats_partnership_meeting(self, page):
        assert [s.value for s in page.stats.items] == ["60%", "3x"]
        assert page.partnership.heading == "Partner ecosystem"
        assert page.meeting.heading == "Book a meeting"
        assert page.meeting.description == "See the platform in action."

    def test_no_fallback_when_structured(self, page):
        assert page.fallback_sections == []

    def test_markdown(self, markdown):
        assert markdown.startswith("# Prior Authorization Automation\n\nApprove care faster.")
        assert "| Accordion |  |" in markdown
        assert "| Intake | Capture requests from **any** channel. |" in markdown
        assert "| **60%** less manual work |  |" in markdown
        assert "![Partners](https://www.example.com/wp-content/uploads/partners.png)" in markdown
        assert "## Book a meeting" in markdown
        assert "| title | Prior Authorization Automation |" in markdown

    def test_metadata(self, markdown):
        assert _metadata_keys(markdown) == ["title", "description", "template"]

    def test_fallback_sections(self, solutions_fallback_html):
        strategy = get_strategy(TemplateId.SOLUTIONS_PAGE)
        page = strategy.parse(parse_html(solutions_fallback_html), self.URL)
        assert page.hero.title == "Interoperability"
        [section] = page.fallback_sections
        assert section.heading == "Connect every system"
        assert section.links[0].href == "https://www.example.com/contact/"
        assert page.fallback_accordion[0].title == "Which standards?"

        markdown = strategy.serialize(page)
        assert "## Connect every system" in markdown
        assert "[Contact sales](https://www.example.com/contact/)" in markdown
        assert "| Which standards? | FHIR and X12. |" in markdown


class TestBuiltForAudience:
    URL = BASE_URL + "/built-for/health-plans/"

    @pytest.fixture
    def page(self, built_for_html):
        return get_strategy(TemplateId.BUILT_FOR_AUDIENCE).parse(parse_html(built_for_html), self.URL)

    @pytest.fixture
    def markdown(self, page):
        return get_strategy(TemplateId.BUILT_FOR_AUDIENCE).serialize(page)

    def test_hero(self, page):
        assert page.hero.title == "Built for Health Plans"
        assert page.hero.cta.href == "https://www.example.com/demo/"
        assert page.hero.image.alt == "Health plan team"

    def test_use_cases(self, page):
        uses = page.use_cases
        assert uses.subtitle == "Use cases"
        assert uses.items[0].body == (
            "Automate reviews. [Learn more](https://www.example.com/solutions/prior-auth/)"
        )
        assert uses.key_points == ["Lower admin cost"]

    def test_testimonials_deduplicated(self, page):
        [t] = page.testimonials
        assert t.name == "Sam Lee"
        assert t.link.href == "https://www.example.com/case-studies/acme/"
        assert page.testimonial_image.alt == "Customer"

    def test_resources_and_meeting(self, page):
        assert page.resources.heading == "Resources"
        assert page.resources.view_all.text == "View all"
        assert page.resources.cards[0].link_text == "Download"
        assert page.meeting.subtitle == "Next step"
        assert page.meeting.description == "Get a tailored walkthrough."

    def test_markdown(self, markdown):
        assert markdown.startswith("# Built for Health Plans")
        assert "| Carousel |  |" in markdown
        assert '"It changed how we work." — **Sam Lee**, VP Operations' in markdown
        assert "[View all](https://www.example.com/resources/)" in markdown
        assert "| **Rules engine** Configurable criteria. |  |" in markdown
        assert "## Talk with our team" in markdown

    def test_fallback_sections(self):
        html = (
            "<html><body><main>"
            "<div class='hero'><h1>Built for Providers</h1><p>Less paperwork.</p></div>"
            "<section><p class='has-lead-font-size'>Why</p><h2>Focus on patients</h2>"
            "<p>Spend your time on care, not on the phone.</p></section>"
            "</main></body></html>"
        )
        strategy = get_strategy(TemplateId.BUILT_FOR_AUDIENCE)
        page = strategy.parse(parse_html(html), self.URL)
        assert page.hero.title == "Built for Providers"
        [section] = page.fallback_sections
        assert section.subtitle == "Why"
        markdown = strategy.serialize(page)
        assert markdown.startswith("# Built for Providers\n\nLess paperwork.")
        assert "Why\n\n## Focus on patients" in markdown


class TestCompanyUtility:
    URL = BASE_URL + "/about/"

    @pytest.fixture
    def page(self, company_html):
        return get_strategy(TemplateId.COMPANY_UTILITY).parse(parse_html(company_html), self.URL)

    @pytest.fixture
    def markdown(self, page):
        return get_strategy(TemplateId.COMPANY_UTILITY).serialize(page)

    def test_hero(self, page):
        assert page.hero.title == "About Example Health"
        assert page.hero_paragraphs == ["We build software that helps care move faster for everyone."]
        assert page.hero.cta.text == "Join us"

    def test_sections(self, page):
        assert [s.heading for s in page.sections] == ["Why we exist", "By the numbers", "Our history"]

    def test_loader_images_excluded(self, page):
        assert [i.alt for i in page.sections[0].images] == ["Team"]

    def test_stat_text_not_duplicated_as_paragraph(self, page):
        numbers = page.sections[1]
        assert numbers.paragraphs == []
        assert numbers.stats[0].value == "300+"

    def test_milestones_unique_years(self, page):
        assert [m.title for m in page.sections[2].milestones] == ["2015", "2020"]

    def test_markdown(self, markdown):
        hero = _sections(markdown)[0]
        assert hero.startswith("# About Example Health")
        assert hero.endswith("| style | dark |")
        assert "Our mission\n\n## Why we exist" in markdown
        assert "| **300+** employees across the country |  |" in markdown
        assert "| 2015 | Founded in Boston. |" in markdown
        assert "ajax-loader" not in markdown


def test_parse_html_uses_lxml():
    soup = parse_html("<p>x")
    assert isinstance(soup, BeautifulSoup)
    assert soup.find("html") is not None
