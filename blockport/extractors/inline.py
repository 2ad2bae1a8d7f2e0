"""Inline HTML to markdown conversion and text normalisation."""

from __future__ import annotations

import re
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Comment, Tag
from markdownify import MarkdownConverter, chomp

# Characters normalised after entity decoding
_CHAR_MAP = str.maketrans({
    "\u00a0": " ",
    "\u2019": "'",
    "\u201c": '"',
    "\u201d": '"',
})

_HSPACE_RE = re.compile(r"[ \t\r\f\v]+")
_SPACE_AROUND_NEWLINE_RE = re.compile(r" *\n *")
_WHITESPACE_RE = re.compile(r"\s+")

_SKIP_TAGS = ["script", "style", "noscript", "template"]

# Decoded angle brackets go back out as entities so a reparse keeps them text
_ANGLE_ESCAPES = str.maketrans({"<": "&lt;", ">": "&gt;"})


def resolve_url(href: str, base_url: str = "") -> str:
    """Make site-relative *href* absolute against the origin of *base_url*.

    Empty stays empty, ``//host/x`` takes the base scheme, ``/x`` takes the
    base origin; anything else is returned unchanged.
    """
    if not href:
        return ""
    base = urlparse(base_url)
    scheme = base.scheme or "https"
    if href.startswith("//"):
        return f"{scheme}:{href}"
    if href.startswith("/") and base.netloc:
        return f"{scheme}://{base.netloc}{href}"
    return href


def clean_text(text: str | None) -> str:
    """Collapse all whitespace to single spaces and normalise quotes."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text.translate(_CHAR_MAP)).strip()


class _InlineConverter(MarkdownConverter):
    """markdownify restricted to bold, italic, links and line breaks.

    Tags outside ``convert`` keep only their text.  Nothing is
    backslash-escaped, so markers already in the input pass through.
    """

    class Options(MarkdownConverter.DefaultOptions):
        convert = ["strong", "b", "em", "i", "a", "br"]
        autolinks = False
        escape_asterisks = False
        escape_underscores = False
        escape_misc = False
        strong_em_symbol = "*"

    def __init__(self, base_url: str = "", **options) -> None:
        super().__init__(**options)
        self.base_url = base_url

    def convert_a(self, el, text, parent_tags):  # noqa: ANN001
        href = resolve_url(str(el.get("href") or "").strip(), self.base_url)
        prefix, suffix, text = chomp(text)
        if not href or not text:
            return f"{prefix}{text}{suffix}"
        return f"{prefix}[{text}]({href}){suffix}"

    def convert_br(self, el, text, parent_tags):  # noqa: ANN001
        return "\n"


def _inline_soup(node_or_html: Tag | str) -> BeautifulSoup:
    # Work on a private copy; the caller's tree is left untouched.
    soup = BeautifulSoup(str(node_or_html), "lxml")
    for el in soup.find_all(_SKIP_TAGS):
        el.decompose()
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()
    return soup


def inline_to_markdown(node_or_html: Tag | str | None, base_url: str = "") -> str:
    """Convert an inline HTML fragment to markdown.

    ``strong``/``b`` become ``**x**``, ``em``/``i`` become ``*x*``, links
    become ``[text](href)`` with *href* resolved against *base_url*, ``br``
    becomes a newline and every other tag keeps only its text.  A literal
    ``<`` or ``>`` in the text is written as ``&lt;``/``&gt;``, so running
    the function over its own output returns it unchanged.
    """
    if node_or_html is None:
        return ""
    if isinstance(node_or_html, str) and not node_or_html.strip():
        return ""

    text = _InlineConverter(base_url).convert_soup(_inline_soup(node_or_html))
    text = text.translate(_CHAR_MAP).translate(_ANGLE_ESCAPES)
    text = _HSPACE_RE.sub(" ", text)
    text = _SPACE_AROUND_NEWLINE_RE.sub("\n", text)
    return text.strip()
