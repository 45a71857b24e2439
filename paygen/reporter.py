from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from paygen.domain.models import JobReport


def _megabytes(value: Optional[int]) -> str:
    if not value:
        return "N/A"
    return f"{value / (1024 * 1024):.2f}"


def _status(thread: Mapping[str, Any]) -> str:
    if thread.get("error"):
        return "[red]FAILED[/red]"
    return "[green]OK[/green]"


def build_job_table(report: JobReport) -> Table:
    """
    Build the per-thread results table for one job.
    """
    title = (
        f"Job {report.get('job_index')} │ partition {report.get('partition_date')} "
        f"│ order {report.get('partition_order')}"
    )
    extra: Dict[str, Any] = report.get("extra", {})
    caption = (
        f"{report.get('rows', 0):,} rows in {report.get('duration_seconds', 0.0):.1f}s "
        f"({report.get('throughput_rows_per_sec', 0.0):,.2f} rows/s) │ "
        f"peak RSS {_megabytes(report.get('peak_rss_bytes'))} MB │ "
        f"CPU {report.get('cpu_percent') or 0.0:.1f}%"
    )

    table = Table(title=title, caption=caption, box=box.ROUNDED)
    table.add_column("Thread", style="cyan", no_wrap=True)
    table.add_column("Rows", justify="right", style="magenta")
    table.add_column("Chargebacks", justify="right", style="magenta")
    table.add_column("Tables", justify="right", style="blue")
    table.add_column("Uploads OK", justify="right", style="green")
    table.add_column("Uploads Failed", justify="right", style="red")
    table.add_column("Duration (s)", justify="right", style="green")
    table.add_column("Status", justify="center")

    for thread in report.get("threads", []):
        table.add_row(
            str(thread.get("thread_id")),
            f"{thread.get('rows', 0):,}",
            f"{thread.get('chargeback_rows', 0):,}",
            str(len(thread.get("tables", []))),
            str(thread.get("uploads_succeeded", 0)),
            str(thread.get("uploads_failed", 0)),
            f"{thread.get('duration_seconds', 0.0):.1f}",
            _status(thread),
        )

    table.add_section()
    table.add_row(
        "[bold]Total[/bold]",
        f"{report.get('rows', 0):,}",
        f"{extra.get('chargeback_rows', 0):,}",
        "",
        str(extra.get("uploads_succeeded", 0)),
        str(extra.get("uploads_failed", 0)),
        f"{report.get('duration_seconds', 0.0):.1f}",
        "[green]COMPLETE[/green]" if report.get("completed") else "[red]INCOMPLETE[/red]",
    )
    return table


def print_job_report(report: JobReport, console: Optional[Console] = None) -> None:
    """
    Render a job report as a rich table.
    """
    console = console or Console()
    if not report:
        console.print("[yellow]No results to display.[/yellow]")
        return
    console.print(build_job_table(report))
