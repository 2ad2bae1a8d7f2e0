"""Extraction sub-package: DOM helpers, inline conversion and body blocks."""

from .body import blocks_to_markdown, extract_content_blocks, strip_wordpress_markup
from .dom import attr_of, closest, meta_content, select_all, text_of, top_level_sections
from .inline import clean_text, inline_to_markdown, resolve_url

__all__ = [
    "attr_of",
    "blocks_to_markdown",
    "clean_text",
    "closest",
    "extract_content_blocks",
    "inline_to_markdown",
    "meta_content",
    "resolve_url",
    "select_all",
    "strip_wordpress_markup",
    "text_of",
    "top_level_sections",
]
