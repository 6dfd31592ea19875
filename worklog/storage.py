from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from sqlmodel import select

from . import config
from .models import ExportStatus, ReportExport, get_session, init_db


def report_dir(base_dir: Path | None = None) -> Path:
    root = base_dir or config.OUT_DIR
    root.mkdir(parents=True, exist_ok=True)
    return root


def report_path(file_name: str, base_dir: Path | None = None) -> Path:
    return report_dir(base_dir) / file_name


def temp_report_path(file_name: str, base_dir: Path | None = None) -> Path:
    return report_dir(base_dir) / f".{file_name}.tmp"


def preview_path(pdf_path: Path) -> Path:
    return pdf_path.with_name(f"{pdf_path.stem}_cover.png")


def record_export(
    project_name: str,
    report_type: str,
    start_date: str,
    end_date: str,
    file_name: str,
    page_count: int = 0,
    status: ExportStatus = ExportStatus.READY,
    fail_detail: Optional[str] = None,
) -> ReportExport:
    init_db()
    row = ReportExport(
        project_name=project_name,
        report_type=report_type,
        start_date=start_date,
        end_date=end_date,
        file_name=file_name,
        page_count=page_count,
        status=status,
        fail_detail=fail_detail,
    )
    with get_session() as session:
        session.add(row)
        session.commit()
        session.refresh(row)
    return row


def list_exports(project_name: str | None = None, limit: int = 20) -> List[ReportExport]:
    init_db()
    with get_session() as session:
        statement = select(ReportExport)
        if project_name:
            statement = statement.where(ReportExport.project_name == project_name)
        statement = statement.order_by(ReportExport.created_at.desc()).limit(limit)
        return list(session.exec(statement))
