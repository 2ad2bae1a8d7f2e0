"""User-facing run output: banners, per-URL lines and the summary block."""

from __future__ import annotations

import logging
from pathlib import Path

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table

from blockport import settings
from blockport.catalog import Catalog
from blockport.items import PageResult, RunReport, WorkStatus

_BATCH_NAME_WIDTH = 40


class RunConsole:
    """Prints the running log of an import to a rich :class:`Console`."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(highlight=False)

    def header(self, *, dry_run: bool) -> None:
        mode = "[yellow]DRY RUN[/yellow]" if dry_run else "[green]LIVE[/green]"
        self.console.print(Panel.fit(
            f"[bold cyan]blockport[/bold cyan] bulk import\nMode: {mode}",
            border_style="cyan",
        ))

    def usage(self, catalog: Catalog) -> None:
        self.console.print("[bold]Usage:[/bold]")
        self.console.print("  blockport --batch <batch-name>    Import a batch")
        self.console.print("  blockport --batch all             Import all batches")
        self.console.print("  blockport --url <url>             Import single URL")
        self.console.print("  blockport --dry-run --batch <n>   Preview without saving")
        self.console.print()
        self.console.print("[bold]Available batches:[/bold]")
        for name, batch in catalog.batches.items():
            self.console.print(
                f"  {escape(name.ljust(_BATCH_NAME_WIDTH))} "
                f"{len(batch.urls)} URLs ({batch.template})",
            )

    def single_url(self, url: str, template: str) -> None:
        self.console.print(f"Single URL mode: {escape(url)} (template: {template})")

    def batch_banner(
        self, name: str, template: str, available: int, offset: int, limit: int | None,
    ) -> None:
        self.console.print()
        self.console.print(Rule(f"[bold]Batch: {escape(name)}[/bold] ({template})"))
        limit_text = "unbounded" if limit is None else str(limit)
        self.console.print(f"URLs: {available} | Offset: {offset} | Limit: {limit_text}")

    def page_result(self, index: int, count: int, result: PageResult, *, dry_run: bool) -> None:
        progress = f"[{index}/{count}]"
        url = escape(result.url)
        if result.status is WorkStatus.SUCCESS:
            if dry_run:
                self.console.print(
                    f"  [DRY RUN] Would save to: {escape(result.path)} ({result.chars} chars)",
                    markup=False,
                )
            self.console.print(
                f"  {escape(progress)} [green]✓[/green] {url} → {escape(result.path)} "
                f"({result.chars} chars)",
            )
        elif result.status is WorkStatus.SKIPPED:
            self.console.print(
                f"  {escape(progress)} [yellow]↷[/yellow] {url} — {escape(result.error)}",
            )
        else:
            self.console.print(
                f"  {escape(progress)} [red]✗[/red] {url} — {escape(result.error)}",
            )

    def summary(self, report: RunReport) -> None:
        self.console.print()
        self.console.print(Rule("[bold cyan]IMPORT SUMMARY[/bold cyan]"))
        self.console.print(f"  [bold]Total:  [/bold] {report.total}")
        self.console.print(f"  [bold]Success:[/bold] [green]{report.success}[/green]")
        self.console.print(f"  [bold]Failed: [/bold] [red]{report.failed}[/red]")
        self.console.print(f"  [bold]Skipped:[/bold] [yellow]{report.skipped}[/yellow]")

        if report.errors:
            tbl = Table(
                title=f"[bold red]Failed URLs ({len(report.errors)})[/bold red]",
                box=box.SIMPLE_HEAVY,
                show_lines=False,
            )
            tbl.add_column("#", style="dim", justify="right", width=4, no_wrap=True)
            tbl.add_column("URL", style="blue", overflow="fold")
            tbl.add_column("Error", style="red", overflow="fold")
            for i, entry in enumerate(report.errors, 1):
                tbl.add_row(str(i), entry.url, entry.error)
            self.console.print()
            self.console.print(tbl)

    def saved(self, path: Path) -> None:
        self.console.print()
        self.console.print(f"Results saved to: [green]{escape(str(path))}[/green]")


def configure_logging(level: str = settings.LOG_LEVEL) -> None:
    """Set the root level and install one :class:`RichHandler` on stderr."""
    root = logging.getLogger()
    root.setLevel(level.upper())
    if any(isinstance(h, RichHandler) for h in root.handlers):
        return
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter(settings.LOG_FORMAT, datefmt="[%X]"))
    root.addHandler(handler)
