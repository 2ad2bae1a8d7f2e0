"""blockport - import legacy site pages into block-table markdown.

Single page usage::

    from blockport import import_page

    result = import_page(
        "https://www.example.com/blog/some-post/", "blog-article", dry_run=True,
    )
    print(result.path, result.chars)

Batch usage::

    from blockport import Selection, load_catalog, plan_work, run_batches

    catalog = load_catalog("tools/importer/url-catalog.json")
    plans = plan_work(catalog, Selection(batch="all", limit=10))
    report = run_batches(plans, content_root="content")
    print(report.success, report.failed)

Preview HTML::

    from blockport import compile_markdown

    fragment = compile_markdown(open("content/index.md").read())
"""

from blockport.catalog import Catalog, load_catalog
from blockport.compiler import build_page, compile_markdown
from blockport.errors import (
    CatalogError,
    FetchError,
    MigrationError,
    ParseError,
    SerializationError,
    WriteError,
)
from blockport.fetcher import fetch_html
from blockport.items import PageResult, RunReport, WorkStatus
from blockport.orchestrator import Selection, import_page, plan_work, run_batches
from blockport.paths import resolve_output_path
from blockport.templates import TemplateId, get_strategy

__version__ = "0.1.0"
__all__ = [
    "Catalog",
    "CatalogError",
    "FetchError",
    "MigrationError",
    "PageResult",
    "ParseError",
    "RunReport",
    "Selection",
    "SerializationError",
    "TemplateId",
    "WorkStatus",
    "WriteError",
    "build_page",
    "compile_markdown",
    "fetch_html",
    "get_strategy",
    "import_page",
    "load_catalog",
    "plan_work",
    "resolve_output_path",
    "run_batches",
]
