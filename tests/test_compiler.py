"""Tests for the block-markdown -> HTML compiler."""

from __future__ import annotations

from bs4 import BeautifulSoup

from blockport.compiler import (
    build_page,
    compile_markdown,
    kebab_case,
    render_inline,
    split_cells,
)


def _sections(html: str):
    soup = BeautifulSoup(f"<body>{html}</body>", "lxml")
    return soup.body.find_all("div", recursive=False)


def _children(el):
    return el.find_all("div", recursive=False)


class TestBlocks:
    def test_cards_table(self):
        md = (
            "| Cards |  |\n"
            "| --- | --- |\n"
            "| **A** desc-a |  |\n"
            "| **B** desc-b |  |\n"
        )
        [section] = _sections(compile_markdown(md))
        cards = section.find("div", class_="cards")
        rows = _children(cards)
        assert len(rows) == 2
        assert all(len(_children(r)) == 2 for r in rows)
        assert _children(rows[0])[0].strong.get_text() == "A"
        assert _children(rows[1])[0].strong.get_text() == "B"
        assert _children(rows[0])[1].get_text() == ""

    def test_metadata_rows_in_order(self):
        md = (
            "| Metadata |  |\n"
            "| --- | --- |\n"
            "| title | Foo |\n"
            "| template | case-study |\n"
        )
        [section] = _sections(compile_markdown(md))
        meta = section.find("div", class_="metadata")
        pairs = [[c.get_text() for c in _children(row)] for row in _children(meta)]
        assert pairs == [["title", "Foo"], ["template", "case-study"]]

    def test_section_metadata_class(self):
        md = "| Section Metadata |  |\n| --- | --- |\n| style | dark |\n"
        assert '<div class="section-metadata">' in compile_markdown(md)

    def test_metadata_values_escaped_not_rendered(self):
        md = "| Metadata |  |\n| --- | --- |\n| title | **A & B** |\n"
        out = compile_markdown(md)
        assert "<div>**A &amp; B**</div>" in out

    def test_multi_word_kind_kebab_cased(self):
        assert kebab_case("Section Metadata") == "section-metadata"

    def test_unknown_kind_passes_through(self):
        md = "| Widget |  |\n| --- | --- |\n| a | b |\n"
        out = compile_markdown(md)
        assert 'class="widget"' not in out
        assert "<p>| Widget |  |</p>" in out
        assert "<p>| a | b |</p>" in out

    def test_table_without_separator_is_paragraph(self):
        assert "<p>| just | text |</p>" in compile_markdown("| just | text |")

    def test_escaped_pipe_in_cell(self):
        md = "| Columns |  |\n| --- | --- |\n| A \\| B | C |\n"
        [section] = _sections(compile_markdown(md))
        [row] = _children(section.find("div", class_="columns"))
        assert [c.get_text() for c in _children(row)] == ["A | B", "C"]

    def test_table_ends_at_first_non_pipe_line(self):
        md = "| Cards |  |\n| --- | --- |\n| a | b |\nAfter table\n"
        [section] = _sections(compile_markdown(md))
        assert section.find("p").get_text() == "After table"


class TestSections:
    def test_divider_splits_sections(self):
        sections = _sections(compile_markdown("X\n\n---\n\nY"))
        assert len(sections) == 2
        assert sections[0].get_text(strip=True) == "X"
        assert sections[1].get_text(strip=True) == "Y"

    def test_empty_regions_dropped(self):
        assert len(_sections(compile_markdown("---\n\nA\n\n---\n\n---\n"))) == 1


class TestLines:
    def test_headings(self):
        out = compile_markdown("# One\n### Three")
        assert "<h1>One</h1>" in out
        assert "<h3>Three</h3>" in out

    def test_image_line(self):
        out = compile_markdown("![Alt text](https://x.test/a.png)")
        assert '<p><picture><img src="https://x.test/a.png" alt="Alt text"></picture></p>' in out

    def test_link_line(self):
        assert '<p><a href="https://x.test/">Go</a></p>' in compile_markdown("[Go](https://x.test/)")

    def test_bullet_list(self):
        soup = BeautifulSoup(compile_markdown("- a\n* b\n\nafter"), "lxml")
        assert [li.get_text() for li in soup.find("ul").find_all("li")] == ["a", "b"]

    def test_numbered_list(self):
        soup = BeautifulSoup(compile_markdown("1. a\n2. b"), "lxml")
        assert [li.get_text() for li in soup.find("ol").find_all("li")] == ["a", "b"]

    def test_blockquote(self):
        assert "<blockquote><p>Quote</p></blockquote>" in compile_markdown("> Quote")

    def test_raw_html_escaped(self):
        out = compile_markdown("<script>alert(1)</script>")
        assert "<script>" not in out
        assert "&lt;script&gt;" in out


class TestRenderInline:
    def test_bold_italic(self):
        assert render_inline("**b** and *i*") == "<strong>b</strong> and <em>i</em>"

    def test_link(self):
        assert render_inline("see [x](https://a.test/?q=1&r=2)") == (
            'see <a href="https://a.test/?q=1&amp;r=2">x</a>'
        )

    def test_image(self):
        assert render_inline("![a](/b.png)") == '<picture><img src="/b.png" alt="a"></picture>'

    def test_escapes_html(self):
        assert render_inline("a < b") == "a &lt; b"

    def test_angle_entities_not_double_escaped(self):
        assert render_inline("use a &lt;b&gt; tag") == "use a &lt;b&gt; tag"


class TestSplitCells:
    def test_keeps_empty_cells(self):
        assert split_cells("| a |  | c |") == ["a", "", "c"]


class TestBuildPage:
    def test_wraps_fragment(self):
        page = build_page("<div><p>x</p></div>", "Title & More")
        assert page.startswith("<!DOCTYPE html>")
        assert "<title>Title &amp; More</title>" in page
        assert "<main>\n<div><p>x</p></div>\n</main>" in page
        assert "<header></header>" in page
        assert "<footer></footer>" in page
