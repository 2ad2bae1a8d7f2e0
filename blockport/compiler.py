"""Compile block-table markdown into the nested ``<div>`` HTML the site renders.

Only the dialect that :mod:`blockport.markdown` writes is understood.
Lines are handled in this order:

1. table (header row followed by a ``| --- |`` separator row)
2. ``---`` section divider
3. ``#`` .. ``######`` heading
4. image-only line
5. link-only line
6. ``-``/``*`` and ``N.`` lists (contiguous lines)
7. ``> `` blockquote
8. any other non-empty line becomes a paragraph

Anything else, nested tables and raw HTML included, comes out as escaped
literal text.
"""

from __future__ import annotations

import html
import re

from blockport.markdown import SECTION_DIVIDER, BlockKind

_SEPARATOR_RE = re.compile(r"^\|(\s*:?-{3,}:?\s*\|)+\s*$")
_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
_IMAGE_LINE_RE = re.compile(r"^!\[([^\]]*)\]\(([^)]+)\)$")
_LINK_LINE_RE = re.compile(r"^\[([^\]]+)\]\(([^)]+)\)$")
_BULLET_RE = re.compile(r"^[-*]\s+")
_NUMBERED_RE = re.compile(r"^\d+\.\s+")
_CELL_SPLIT_RE = re.compile(r"(?<!\\)\|")

_BOLD_RE = re.compile(r"\*\*([^*]+)\*\*")
_ITALIC_RE = re.compile(r"\*([^*]+)\*")
_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")
_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

_KEY_VALUE_KINDS = frozenset({BlockKind.METADATA, BlockKind.SECTION_METADATA})
_KNOWN_KINDS = frozenset(k.value for k in BlockKind)


def _attr(value: str) -> str:
    return value.replace('"', "&quot;")


def _picture(alt: str, src: str) -> str:
    return f'<picture><img src="{_attr(src)}" alt="{_attr(alt)}"></picture>'


def _escape_text(text: str) -> str:
    # &lt; and &gt; in markdown text are already entities
    out = html.escape(text, quote=False)
    return out.replace("&amp;lt;", "&lt;").replace("&amp;gt;", "&gt;")


def render_inline(text: str) -> str:
    """Escape *text* and render bold, italic, images and links."""
    out = _escape_text(text)
    out = _BOLD_RE.sub(r"<strong>\1</strong>", out)
    out = _ITALIC_RE.sub(r"<em>\1</em>", out)
    out = _IMAGE_RE.sub(lambda m: _picture(m.group(1), m.group(2)), out)
    out = _LINK_RE.sub(lambda m: f'<a href="{_attr(m.group(2))}">{m.group(1)}</a>', out)
    return out


def kebab_case(kind: str) -> str:
    return re.sub(r"\s+", "-", kind.strip().lower())


def split_cells(line: str) -> list[str]:
    """Cells of a ``| a | b |`` row, with ``\\|`` unescaped and empty cells kept."""
    body = line.strip()
    if body.startswith("|"):
        body = body[1:]
    if body.endswith("|") and not body.endswith("\\|"):
        body = body[:-1]
    return [cell.strip().replace("\\|", "|") for cell in _CELL_SPLIT_RE.split(body)]


def _render_table(header: str, separator: str, rows: list[str]) -> list[str]:
    kind = split_cells(header)[0]
    if kind not in _KNOWN_KINDS:
        return [f"<p>{html.escape(line.strip())}</p>" for line in (header, separator, *rows)]

    out = [f'<div class="{kebab_case(kind)}">']
    for row in rows:
        cells = split_cells(row)
        if kind in _KEY_VALUE_KINDS:
            key = cells[0]
            if not key:
                continue
            value = " ".join(c for c in cells[1:] if c)
            out.append(
                f"  <div><div>{html.escape(key)}</div><div>{html.escape(value)}</div></div>",
            )
        else:
            inner = "".join(f"<div>{render_inline(c)}</div>" for c in cells)
            out.append(f"  <div>{inner}</div>")
    out.append("</div>")
    return out


def _render_list(items: list[str], tag: str, marker: re.Pattern[str]) -> list[str]:
    return [
        f"<{tag}>",
        *(f"  <li>{render_inline(marker.sub('', item, count=1))}</li>" for item in items),
        f"</{tag}>",
    ]


def _collect(lines: list[str], start: int, pattern: re.Pattern[str]) -> list[str]:
    end = start
    while end < len(lines) and pattern.match(lines[end].strip()):
        end += 1
    return [line.strip() for line in lines[start:end]]


def _is_table_start(lines: list[str], i: int) -> bool:
    return (
        lines[i].lstrip().startswith("|")
        and i + 1 < len(lines)
        and bool(_SEPARATOR_RE.match(lines[i + 1].strip()))
    )


def _sections(text: str) -> list[list[str]]:
    lines = text.splitlines()
    sections: list[list[str]] = [[]]
    i = 0
    while i < len(lines):
        line = lines[i].strip()
        current = sections[-1]

        if _is_table_start(lines, i):
            j = i + 2
            while j < len(lines) and lines[j].lstrip().startswith("|"):
                j += 1
            current.extend(_render_table(lines[i], lines[i + 1], lines[i + 2:j]))
            i = j
            continue

        if line == SECTION_DIVIDER:
            sections.append([])
        elif m := _HEADING_RE.match(line):
            level = len(m.group(1))
            current.append(f"<h{level}>{render_inline(m.group(2).strip())}</h{level}>")
        elif m := _IMAGE_LINE_RE.match(line):
            current.append(f"<p>{_picture(html.escape(m.group(1)), html.escape(m.group(2)))}</p>")
        elif m := _LINK_LINE_RE.match(line):
            href = _attr(html.escape(m.group(2), quote=False))
            current.append(f'<p><a href="{href}">{render_inline(m.group(1))}</a></p>')
        elif _BULLET_RE.match(line):
            items = _collect(lines, i, _BULLET_RE)
            current.extend(_render_list(items, "ul", _BULLET_RE))
            i += len(items)
            continue
        elif _NUMBERED_RE.match(line):
            items = _collect(lines, i, _NUMBERED_RE)
            current.extend(_render_list(items, "ol", _NUMBERED_RE))
            i += len(items)
            continue
        elif line.startswith("> ") or line == ">":
            current.append(f"<blockquote><p>{render_inline(line[2:])}</p></blockquote>")
        elif line:
            current.append(f"<p>{render_inline(line)}</p>")
        i += 1
    return [s for s in sections if s]


def compile_markdown(text: str) -> str:
    """Compile *text* to an HTML fragment of one ``<div>`` per section."""
    return "\n".join(
        "<div>\n" + "\n".join(f"  {chunk}" for chunk in section) + "\n</div>"
        for section in _sections(text)
    )


def build_page(fragment: str, title: str = "") -> str:
    """Wrap a compiled *fragment* in a full preview document."""
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        f"<title>{html.escape(title)}</title>\n"
        '<meta name="viewport" content="width=device-width, initial-scale=1"/>\n'
        '<script src="/scripts/aem.js" type="module"></script>\n'
        '<script src="/scripts/scripts.js" type="module"></script>\n'
        '<link rel="stylesheet" href="/styles/styles.css"/>\n'
        "</head>\n"
        "<body>\n"
        "<header></header>\n"
        "<main>\n"
        f"{fragment}\n"
        "</main>\n"
        "<footer></footer>\n"
        "</body>\n"
        "</html>\n"
    )
