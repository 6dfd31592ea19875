from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..models import ExportStatus
from ..storage import preview_path, record_export, report_path, temp_report_path
from .assemble import ReportAssembler
from .finalize import report_filename, stamp_page_numbers
from .images import ImageResolver, ImageSource
from .ingest import resolve_date_range
from .render_preview import render_cover_preview
from .report_data import Report
from .surface import PdfSurface

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportResult:
    path: Path
    page_count: int
    start_date: str
    end_date: str
    preview: Optional[Path] = None


async def render_report(
    report: Report,
    report_type: str,
    start_date: str,
    end_date: str,
    output_path: Path,
    resolver: Optional[ImageSource] = None,
    max_documents: Optional[int] = None,
    generated_at: Optional[datetime] = None,
) -> int:
    surface = PdfSurface(output_path)
    assembler = ReportAssembler(
        surface,
        resolver or ImageResolver(),
        max_documents=max_documents,
        generated_at=generated_at,
    )
    await assembler.assemble(report, report_type, start_date, end_date)
    pages = stamp_page_numbers(surface)
    surface.save()
    return pages


async def export_report(
    report: Report,
    report_type: str,
    start_date: str,
    end_date: Optional[str] = None,
    out_dir: Optional[Path] = None,
    resolver: Optional[ImageSource] = None,
    max_documents: Optional[int] = None,
    preview: bool = False,
    generated_at: Optional[datetime] = None,
) -> ExportResult:
    start_date, end_date = resolve_date_range(report_type, start_date, end_date)
    file_name = report_filename(report.project.name, report_type, start_date)
    final_path = report_path(file_name, base_dir=out_dir)
    temp_path = temp_report_path(file_name, base_dir=out_dir)

    try:
        pages = await render_report(
            report,
            report_type,
            start_date,
            end_date,
            temp_path,
            resolver=resolver,
            max_documents=max_documents,
            generated_at=generated_at,
        )
        temp_path.replace(final_path)
    except Exception as exc:
        logger.exception("Report export failed for %s", report.project.name)
        temp_path.unlink(missing_ok=True)
        record_export(
            report.project.name,
            report_type,
            start_date,
            end_date,
            file_name,
            status=ExportStatus.FAILED,
            fail_detail=str(exc) or exc.__class__.__name__,
        )
        raise

    cover = render_cover_preview(final_path, preview_path(final_path)) if preview else None
    record_export(report.project.name, report_type, start_date, end_date, file_name, page_count=pages)
    logger.info("Wrote %s (%d pages)", final_path, pages)
    return ExportResult(path=final_path, page_count=pages, start_date=start_date, end_date=end_date, preview=cover)


def export_report_sync(report: Report, report_type: str, start_date: str, **kwargs) -> ExportResult:
    return asyncio.run(export_report(report, report_type, start_date, **kwargs))
