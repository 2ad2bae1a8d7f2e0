"""CLI entry point: python -m blockport --batch NAME [options]"""

from __future__ import annotations

import argparse
import logging
import sys

import yaml

from blockport import settings
from blockport.catalog import load_catalog
from blockport.config import MigrationConfig, load_config
from blockport.console import RunConsole, configure_logging
from blockport.errors import CatalogError
from blockport.fetcher import fetch_html
from blockport.orchestrator import Selection, plan_work, run_batches, write_report

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CATALOG_ERROR = 1
EXIT_CONFIG_ERROR = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blockport",
        description=(
            "Import pages of a legacy site into block-table markdown.\n"
            "Each catalog batch is bound to one page template."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    target = parser.add_mutually_exclusive_group()
    target.add_argument("--batch", default=None, metavar="NAME",
                        help="Catalog batch to import, or 'all'")
    target.add_argument("--url", default=None, metavar="URL",
                        help="Import a single URL")
    parser.add_argument("--limit", type=int, default=None, metavar="N",
                        help="Import at most N URLs per batch (default: all)")
    parser.add_argument("--offset", type=int, default=0, metavar="N",
                        help="Skip the first N pending URLs of each batch (default: 0)")
    parser.add_argument("--dry-run", action="store_true", default=False,
                        help="Fetch and convert but write nothing under the content root")
    parser.add_argument("--verbose", action="store_true", default=False,
                        help="Debug logging")
    parser.add_argument("--catalog", default=None, metavar="PATH",
                        help=f"URL catalog (default: {settings.CATALOG_PATH})")
    parser.add_argument("--content-dir", default=None, metavar="DIR",
                        help=f"Content root (default: {settings.CONTENT_DIR})")
    parser.add_argument("--report", default=None, metavar="PATH",
                        help=f"Run report path (default: {settings.REPORT_PATH})")
    parser.add_argument("--delay", type=float, default=None, metavar="SECONDS",
                        help=f"Pause between pages (default: {settings.DOWNLOAD_DELAY})")
    parser.add_argument("--config", default=None, metavar="PATH",
                        help="YAML file with run settings")
    parser.add_argument("--log-level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        metavar="{DEBUG,INFO,WARNING,ERROR}",
                        help="Logging level (overrides --verbose)")
    return parser


def _load_config(args: argparse.Namespace) -> MigrationConfig:
    return load_config(
        args.config,
        content_dir=args.content_dir,
        catalog_path=args.catalog,
        report_path=args.report,
        delay=args.delay,
    )


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level or ("DEBUG" if args.verbose else settings.LOG_LEVEL))

    try:
        config = _load_config(args)
    except (ValueError, yaml.YAMLError, OSError) as exc:
        print(f"ERROR: invalid configuration: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    logger.debug("Effective config: %s", config.model_dump(mode="json"))

    try:
        catalog = load_catalog(config.catalog_path)
    except CatalogError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_CATALOG_ERROR

    console = RunConsole()
    if not args.batch and not args.url:
        console.usage(catalog)
        return EXIT_OK

    try:
        selection = Selection(
            url=args.url, batch=args.batch, offset=args.offset, limit=args.limit,
        )
    except ValueError as exc:
        parser.error(str(exc))

    try:
        plans = plan_work(catalog, selection, config.fallback_template)
    except CatalogError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_CATALOG_ERROR

    console.header(dry_run=args.dry_run)
    if args.url:
        console.single_url(args.url, str(plans[0].template))

    def fetch(url: str) -> str:
        return fetch_html(
            url,
            timeout=config.timeout,
            user_agent=config.user_agent,
            max_redirects=config.max_redirects,
        )

    report = run_batches(
        plans,
        fetch=fetch,
        content_root=config.content_dir,
        dry_run=args.dry_run,
        min_length=config.min_markdown_length,
        delay=config.delay,
        offset=selection.offset,
        limit=selection.limit,
        console=console,
    )

    console.summary(report)
    path = write_report(report, config.report_path)
    console.saved(path)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
