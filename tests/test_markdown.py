"""Tests for the block-table markdown model."""

from __future__ import annotations

from blockport.markdown import (
    Block,
    BlockKind,
    Document,
    Section,
    bullets,
    format_cell,
    heading,
    image,
    join_inline,
    link,
    strong,
)


class TestFormatCell:
    def test_newlines_flattened(self):
        assert format_cell("a\n\nb  c") == "a b c"

    def test_pipes_escaped(self):
        assert format_cell("A | B") == "A \\| B"

    def test_escaped_pipe_not_double_escaped(self):
        assert format_cell("A \\| B") == "A \\| B"


class TestBlock:
    def test_two_column_header(self):
        rendered = Block(BlockKind.CARDS, [["a", "b"]]).render()
        assert rendered.splitlines() == [
            "| Cards |  |",
            "| --- | --- |",
            "| a | b |",
        ]

    def test_short_rows_padded(self):
        rendered = Block(BlockKind.COLUMNS, [["a", "b", "c"], ["d"]]).render()
        lines = rendered.splitlines()
        assert lines[0] == "| Columns |  |  |"
        assert lines[-1] == "| d |  |  |"

    def test_empty_block_has_header_only(self):
        assert Block(BlockKind.EMBED).render() == "| Embed |  |\n| --- | --- |"


class TestSection:
    def test_empty_strings_dropped(self):
        assert Section(["", "# T", "  ", "text"]).render() == "# T\n\ntext"

    def test_style_appends_section_metadata(self):
        rendered = Section(["# T"], style="dark").render()
        assert rendered.endswith("| Section Metadata |  |\n| --- | --- |\n| style | dark |")

    def test_empty_section_renders_nothing_even_with_style(self):
        assert Section(["", ""], style="dark").render() == ""


class TestDocument:
    def test_sections_divided_and_metadata_last(self):
        doc = Document([Section(["X"]), Section([]), Section(["Y"])], {"title": "T", "image": ""})
        assert doc.render() == (
            "X\n\n---\n\nY\n\n---\n\n"
            "| Metadata |  |\n| --- | --- |\n| title | T |\n"
        )

    def test_metadata_order_preserved(self):
        doc = Document([], {"title": "T", "date": "2024-01-01", "author": "A"})
        rows = doc.render().splitlines()[2:]
        assert [r.split("|")[1].strip() for r in rows] == ["title", "date", "author"]

    def test_render_is_deterministic(self):
        doc = Document([Section(["# H", Block(BlockKind.CARDS, [["x", "y"]])], "dark")], {"title": "T"})
        assert doc.render() == doc.render()


class TestInlineHelpers:
    def test_heading(self):
        assert heading(2, "Hi") == "## Hi"
        assert heading(2, "") == ""

    def test_strong(self):
        assert strong("x") == "**x**"
        assert strong("") == ""

    def test_link_without_href_is_text(self):
        assert link("Read", "") == "Read"
        assert link("Read", "/x") == "[Read](/x)"
        assert link("", "/x") == ""

    def test_image_needs_src(self):
        assert image("alt", "") == ""
        assert image("alt", "/a.png") == "![alt](/a.png)"

    def test_bullets(self):
        assert bullets(["a", "b"]) == "- a\n- b"
        assert bullets(["a", "b"], ordered=True) == "1. a\n2. b"

    def test_join_inline(self):
        assert join_inline("a ", "", " b", "  ") == "a b"
