"""Batch orchestration: plan work from the catalog, import pages, build the report.

Pages are processed strictly one after another.  Each page's outcome is a
:class:`~blockport.items.PageResult`; the run report is the fold of those
results, so nothing is shared between items except the value threaded
through the loop.

Usage::

    from blockport.catalog import load_catalog
    from blockport.orchestrator import Selection, plan_work, run_batches

    catalog = load_catalog("tools/importer/url-catalog.json")
    plans = plan_work(catalog, Selection(batch="3a-blog", limit=5))
    report = run_batches(plans, content_root="content", dry_run=True)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from blockport import settings
from blockport.catalog import Catalog
from blockport.console import RunConsole
from blockport.errors import CatalogError, MigrationError, ParseError, SerializationError, WriteError
from blockport.fetcher import fetch_html
from blockport.items import PageResult, RunReport, WorkItem, WorkStatus
from blockport.paths import find_collisions, resolve_output_path
from blockport.templates import REGISTRY, TemplateId, TemplateStrategy, get_strategy, parse_html

logger = logging.getLogger(__name__)

ALL_BATCHES = "all"
SINGLE_BATCH_NAME = "single"

Fetch = Callable[[str], str]


@dataclass(frozen=True)
class Selection:
    """Which URLs to import: one explicit *url*, or a *batch* name (or ``all``)."""

    url: str | None = None
    batch: str | None = None
    offset: int = 0
    limit: int | None = None

    def __post_init__(self) -> None:
        if bool(self.url) == bool(self.batch):
            raise ValueError("Selection needs exactly one of url or batch")
        if self.offset < 0:
            raise ValueError("offset must be >= 0")
        if self.limit is not None and self.limit < 0:
            raise ValueError("limit must be >= 0")


@dataclass(frozen=True)
class BatchPlan:
    name: str
    template: TemplateId
    items: list[WorkItem] = field(default_factory=list)
    available: int = 0


def _slice(urls: list[str], offset: int, limit: int | None) -> list[str]:
    end = None if limit is None else offset + limit
    return urls[offset:end]


def plan_work(
    catalog: Catalog,
    selection: Selection,
    fallback_template: str = settings.FALLBACK_TEMPLATE,
) -> list[BatchPlan]:
    """Expand *selection* into per-batch lists of :class:`WorkItem`.

    Raises:
        CatalogError: the named batch does not exist, or *fallback_template*
            is not a known template.
    """
    if selection.url:
        template = catalog.template_for(selection.url)
        if template is None:
            try:
                template = TemplateId(fallback_template)
            except ValueError:
                raise CatalogError(f"Unknown fallback template: {fallback_template}") from None
        items = [WorkItem(url=selection.url, template=template)]
        return [BatchPlan(SINGLE_BATCH_NAME, template, items, available=1)]

    if selection.batch == ALL_BATCHES:
        names = list(catalog.batches)
    elif selection.batch in catalog.batches:
        names = [selection.batch]
    else:
        available = ", ".join(catalog.batches) or "(none)"
        raise CatalogError(
            f"Unknown batch: {selection.batch}. Available batches: {available}",
        )

    plans = []
    for name in names:
        batch = catalog.batches[name]
        pending = catalog.pending_urls(batch)
        urls = _slice(pending, selection.offset, selection.limit)
        for path, owners in find_collisions(urls).items():
            logger.warning("Batch %s: %s is claimed by %s", name, path, ", ".join(owners))
        plans.append(BatchPlan(
            name=name,
            template=batch.template,
            items=[WorkItem(url=u, template=batch.template) for u in urls],
            available=len(pending),
        ))
    return plans


def import_page(
    url: str,
    template: str,
    *,
    fetch: Fetch = fetch_html,
    registry: dict[TemplateId, TemplateStrategy] | None = None,
    content_root: str | Path = settings.CONTENT_DIR,
    dry_run: bool = False,
    min_length: int = settings.MIN_MARKDOWN_LENGTH,
) -> PageResult:
    """Fetch, parse, serialize and (unless *dry_run*) write one page.

    Raises:
        FetchError, ParseError, SerializationError, WriteError
    """
    strategy = get_strategy(template, REGISTRY if registry is None else registry)

    html = fetch(url)
    page = strategy.parse(parse_html(html), url)
    if page is None:
        raise ParseError(f"Parser returned no content for {url}", url=url)

    markdown = strategy.serialize(page)
    if len(markdown) < min_length:
        raise SerializationError(
            f"Generated markdown too short for {url} ({len(markdown)} chars)", url=url,
        )

    target = resolve_output_path(url, content_root)
    if dry_run:
        logger.debug("Dry run: not writing %s", target.md_path)
    else:
        try:
            target.directory.mkdir(parents=True, exist_ok=True)
            target.md_path.write_text(markdown, encoding="utf-8")
        except OSError as exc:
            raise WriteError(f"Cannot write {target.md_path}: {exc}", url=url) from exc
        logger.debug("Wrote %s (%d chars)", target.md_path, len(markdown))

    return PageResult(
        url=url,
        template=str(template),
        status=WorkStatus.SUCCESS,
        path=target.relative_path,
        chars=len(markdown),
    )


def _process(
    item: WorkItem,
    produced: frozenset[str],
    *,
    fetch: Fetch,
    registry: dict[TemplateId, TemplateStrategy] | None,
    content_root: str | Path,
    dry_run: bool,
    min_length: int,
) -> PageResult:
    try:
        path = resolve_output_path(item.url, content_root).relative_path
        if path in produced:
            logger.warning("Skipping %s: %s was already produced in this run", item.url, path)
            return PageResult(
                url=item.url,
                template=item.template,
                status=WorkStatus.SKIPPED,
                path=path,
                error=f"Duplicate output path {path}",
            )
        return import_page(
            item.url,
            item.template,
            fetch=fetch,
            registry=registry,
            content_root=content_root,
            dry_run=dry_run,
            min_length=min_length,
        )
    except MigrationError as exc:
        message = str(exc)
    except Exception as exc:
        logger.debug("Unexpected error importing %s", item.url, exc_info=True)
        message = f"{type(exc).__name__}: {exc}"

    logger.warning("Failed %s: %s", item.url, message)
    return PageResult(url=item.url, template=item.template, status=WorkStatus.FAILED, error=message)


def run_batches(
    plans: list[BatchPlan],
    *,
    fetch: Fetch = fetch_html,
    registry: dict[TemplateId, TemplateStrategy] | None = None,
    content_root: str | Path = settings.CONTENT_DIR,
    dry_run: bool = False,
    min_length: int = settings.MIN_MARKDOWN_LENGTH,
    delay: float = settings.DOWNLOAD_DELAY,
    sleep: Callable[[float], None] = time.sleep,
    offset: int = 0,
    limit: int | None = None,
    console: RunConsole | None = None,
) -> RunReport:
    """Import every planned page in order and return the run report.

    Per-page failures are recorded and never stop the loop.  *delay*
    seconds are slept between consecutive pages of the same batch.
    """
    report = RunReport()
    produced: frozenset[str] = frozenset()

    for plan in plans:
        if console is not None:
            console.batch_banner(plan.name, str(plan.template), plan.available, offset, limit)
        count = len(plan.items)
        for index, item in enumerate(plan.items):
            result = _process(
                item,
                produced,
                fetch=fetch,
                registry=registry,
                content_root=content_root,
                dry_run=dry_run,
                min_length=min_length,
            )
            report = report.record(result)
            if result.status is WorkStatus.SUCCESS:
                produced = produced | {result.path}
            if console is not None:
                console.page_result(index + 1, count, result, dry_run=dry_run)
            if index < count - 1:
                sleep(delay)

    return report


def write_report(report: RunReport, path: str | Path) -> Path:
    """Write *report* as JSON to *path*, replacing any previous report."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report.to_json() + "\n", encoding="utf-8")
    logger.debug("Run report written to %s", path)
    return path
