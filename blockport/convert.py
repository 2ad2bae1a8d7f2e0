"""Preview builder: compile imported markdown pages into static HTML.

For every ``*.md`` under the content directory that lacks a ``.html`` or
``.plain.html`` sibling (every page with ``--force``) two files are written
next to it:

- ``<name>.plain.html``: the compiled section fragment
- ``<name>.html``: a full document titled by the page's first ``# `` heading

Usage::

    blockport-convert --content-dir content
    blockport-convert --dry-run
"""

from __future__ import annotations

import argparse
import logging
import re
import sys
from pathlib import Path
from typing import NamedTuple

from rich.console import Console
from rich.markup import escape

from blockport import settings
from blockport.compiler import build_page, compile_markdown
from blockport.console import configure_logging

logger = logging.getLogger(__name__)

_TITLE_RE = re.compile(r"^#\s+(.+)$", re.MULTILINE)


class ConversionResult(NamedTuple):
    success: int
    failed: int


def html_siblings(md_path: Path) -> tuple[Path, Path]:
    """The ``(plain, full)`` HTML paths written for *md_path*."""
    stem = md_path.with_suffix("")
    return stem.with_name(f"{stem.name}.plain.html"), stem.with_name(f"{stem.name}.html")


def find_pending(content_dir: str | Path, *, force: bool = False) -> list[Path]:
    """Markdown files under *content_dir* that still need HTML, sorted."""
    root = Path(content_dir)
    if not root.is_dir():
        return []
    pending = []
    for md_path in sorted(root.rglob("*.md")):
        plain, full = html_siblings(md_path)
        if force or not plain.exists() or not full.exists():
            pending.append(md_path)
    return pending


def page_title(markdown: str) -> str:
    m = _TITLE_RE.search(markdown)
    return m.group(1).strip() if m else ""


def convert_file(md_path: Path) -> tuple[Path, Path]:
    """Compile *md_path* and write both HTML siblings.

    Raises:
        OSError: the markdown cannot be read or the HTML cannot be written.
    """
    markdown = md_path.read_text(encoding="utf-8")
    fragment = compile_markdown(markdown)
    plain, full = html_siblings(md_path)
    plain.write_text(fragment + "\n", encoding="utf-8")
    full.write_text(build_page(fragment, page_title(markdown)), encoding="utf-8")
    logger.debug("Compiled %s -> %s, %s", md_path, plain.name, full.name)
    return plain, full


def convert_all(
    content_dir: str | Path,
    *,
    force: bool = False,
    dry_run: bool = False,
    console: Console | None = None,
) -> ConversionResult:
    """Convert every pending page; a failing file is counted, never fatal."""
    console = console or Console(highlight=False)
    root = Path(content_dir)
    pending = find_pending(root, force=force)
    console.print(f"Found {len(pending)} markdown files needing conversion")

    success = failed = 0
    for md_path in pending:
        rel = md_path.relative_to(root).as_posix()
        if dry_run:
            console.print(f"  Would convert: {escape(rel)}")
            continue
        try:
            convert_file(md_path)
        except (OSError, UnicodeDecodeError) as exc:
            failed += 1
            logger.warning("Failed to convert %s: %s", md_path, exc)
            console.print(f"  [red]✗[/red] {escape(rel)} — {escape(str(exc))}")
        else:
            success += 1
            console.print(f"  [green]✓[/green] {escape(rel)}")

    if not dry_run:
        console.print()
        console.print(f"Conversion complete: {success} success, {failed} failed")
    return ConversionResult(success, failed)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blockport-convert",
        description="Compile imported markdown pages into preview HTML.",
    )
    parser.add_argument("--content-dir", default=settings.CONTENT_DIR, metavar="DIR",
                        help=f"Content directory to scan (default: {settings.CONTENT_DIR})")
    parser.add_argument("--force", action="store_true", default=False,
                        help="Recompile pages that already have HTML")
    parser.add_argument("--dry-run", action="store_true", default=False,
                        help="List the pages that would be compiled")
    parser.add_argument("--verbose", action="store_true", default=False,
                        help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    configure_logging("DEBUG" if args.verbose else settings.LOG_LEVEL)
    convert_all(args.content_dir, force=args.force, dry_run=args.dry_run)
    return 0


if __name__ == "__main__":
    sys.exit(main())
