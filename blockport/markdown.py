"""Block-table markdown model.

A :class:`Document` is an ordered list of :class:`Section` objects separated
by ``---`` and terminated by a ``Metadata`` table.  Sections hold plain
markdown strings and :class:`Block` tables::

    | Cards |  |
    | --- | --- |
    | ![Title](img.png) | **Title** description [Read](https://...) |

The block header text must match one of :class:`BlockKind` exactly; it is
what the compiler and the downstream site build dispatch on.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum


class BlockKind(StrEnum):
    COLUMNS = "Columns"
    CARDS = "Cards"
    ACCORDION = "Accordion"
    CAROUSEL = "Carousel"
    EMBED = "Embed"
    METADATA = "Metadata"
    SECTION_METADATA = "Section Metadata"


SECTION_DIVIDER = "---"

_UNESCAPED_PIPE_RE = re.compile(r"(?<!\\)\|")
_WHITESPACE_RE = re.compile(r"\s+")


def format_cell(text: str) -> str:
    """Flatten *text* to a single table-safe line."""
    return _UNESCAPED_PIPE_RE.sub(r"\\|", _WHITESPACE_RE.sub(" ", text or "").strip())


def _table_line(cells: list[str]) -> str:
    return "| " + " | ".join(cells) + " |"


@dataclass(frozen=True)
class Block:
    kind: BlockKind
    rows: list[list[str]] = field(default_factory=list)

    def render(self) -> str:
        width = max([2, *(len(r) for r in self.rows)])
        lines = [
            _table_line([str(self.kind)] + [""] * (width - 1)),
            _table_line(["---"] * width),
        ]
        for row in self.rows:
            cells = [format_cell(c) for c in row]
            lines.append(_table_line(cells + [""] * (width - len(cells))))
        return "\n".join(lines)


@dataclass(frozen=True)
class Section:
    content: list[str | Block] = field(default_factory=list)
    style: str = ""

    def render(self) -> str:
        parts = [
            item.render() if isinstance(item, Block) else item.strip()
            for item in self.content
        ]
        parts = [p for p in parts if p]
        if not parts:
            return ""
        if self.style:
            parts.append(Block(BlockKind.SECTION_METADATA, [["style", self.style]]).render())
        return "\n\n".join(parts)


@dataclass(frozen=True)
class Document:
    sections: list[Section] = field(default_factory=list)
    metadata: dict[str, str] = field(default_factory=dict)

    def metadata_block(self) -> Block:
        rows = [[key, value] for key, value in self.metadata.items() if value]
        return Block(BlockKind.METADATA, rows)

    def render(self) -> str:
        parts = [rendered for s in self.sections if (rendered := s.render())]
        parts.append(self.metadata_block().render())
        return f"\n\n{SECTION_DIVIDER}\n\n".join(parts) + "\n"


# ---------------------------------------------------------------------------
# Inline helpers
# ---------------------------------------------------------------------------

def heading(level: int, text: str) -> str:
    return f"{'#' * level} {text}" if text else ""


def strong(text: str) -> str:
    return f"**{text}**" if text else ""


def link(text: str, href: str) -> str:
    if not text:
        return ""
    return f"[{text}]({href})" if href else text


def image(alt: str, src: str) -> str:
    return f"![{alt}]({src})" if src else ""


def bullets(items: list[str], *, ordered: bool = False) -> str:
    if ordered:
        return "\n".join(f"{i}. {item}" for i, item in enumerate(items, start=1))
    return "\n".join(f"- {item}" for item in items)


def join_inline(*parts: str) -> str:
    """Join non-empty inline fragments with single spaces."""
    return " ".join(p.strip() for p in parts if p and p.strip())
