from __future__ import annotations

import logging
from pathlib import Path
from enum import Enum
from typing import Optional

import typer

from . import config
from .models import ExportStatus, reset_engine
from .pipeline.ingest import fetch_report, load_report, resolve_date_range
from .pipeline.run import ExportResult, export_report_sync
from .storage import list_exports

app = typer.Typer(help="Project activity report exporter")


class ReportType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


def _setup(out: Optional[Path], asset_base: Optional[str], verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if out:
        config.set_out_dir(out)
        reset_engine()
    if asset_base:
        config.set_asset_base_url(asset_base)


def _echo_result(result: ExportResult) -> None:
    typer.echo(f"READY: {result.path}")
    typer.echo(f"Pages: {result.page_count}")
    if result.preview:
        typer.echo(f"Preview: {result.preview}")


@app.command()
def export(
    report_json: Path = typer.Argument(..., help="Report JSON from the reporting API"),
    report_type: ReportType = typer.Option(ReportType.DAILY, "--type", help="daily or weekly"),
    start: str = typer.Option(..., "--start", help="Start date, YYYY-MM-DD"),
    end: Optional[str] = typer.Option(None, "--end", help="End date, YYYY-MM-DD"),
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
    asset_base: Optional[str] = typer.Option(None, "--asset-base", help="Base URL for relative image paths"),
    max_documents: Optional[int] = typer.Option(None, "--max-documents", help="Documents drawn per update"),
    preview: bool = typer.Option(False, "--preview", help="Also render a cover PNG"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    _setup(out, asset_base, verbose)
    report = load_report(report_json)
    result = export_report_sync(
        report,
        report_type.value,
        start,
        end_date=end,
        max_documents=max_documents,
        preview=preview,
    )
    _echo_result(result)


@app.command()
def fetch(
    api: str = typer.Option(..., "--api", help="Reporting API base URL"),
    project: str = typer.Option(..., "--project", help="Project id"),
    report_type: ReportType = typer.Option(ReportType.DAILY, "--type", help="daily or weekly"),
    start: str = typer.Option(..., "--start", help="Start date, YYYY-MM-DD"),
    end: Optional[str] = typer.Option(None, "--end", help="End date, YYYY-MM-DD"),
    token: Optional[str] = typer.Option(None, "--token", envvar="WORKLOG_API_TOKEN"),
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
    asset_base: Optional[str] = typer.Option(None, "--asset-base", help="Base URL for relative image paths"),
    max_documents: Optional[int] = typer.Option(None, "--max-documents", help="Documents drawn per update"),
    preview: bool = typer.Option(False, "--preview", help="Also render a cover PNG"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    _setup(out, asset_base, verbose)
    start_date, end_date = resolve_date_range(report_type.value, start, end)
    report = fetch_report(api, project, start_date, end_date, token=token)
    result = export_report_sync(
        report,
        report_type.value,
        start_date,
        end_date=end_date,
        max_documents=max_documents,
        preview=preview,
    )
    _echo_result(result)


@app.command()
def history(
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
    project: Optional[str] = typer.Option(None, "--project", help="Filter by project name"),
    limit: int = typer.Option(20, "--limit"),
) -> None:
    if out:
        config.set_out_dir(out)
        reset_engine()
    exports = list_exports(project_name=project, limit=limit)
    if not exports:
        typer.echo("No exports recorded")
        return
    for row in exports:
        detail = f" ({row.fail_detail})" if row.fail_detail else ""
        typer.echo(
            f"{row.created_at:%Y-%m-%d %H:%M} {ExportStatus(row.status).value} {row.file_name} "
            f"{row.page_count}p{detail}"
        )


if __name__ == "__main__":
    app()
