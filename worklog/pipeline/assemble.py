from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from .. import config
from .formatting import format_date, format_generated, parse_date, report_type_label
from .images import ImageSource
from .layout import LayoutCursor
from .report_data import Member, Report, member_display_name
from .text_flow import TextFlow
from .update_block import UpdateBlockRenderer

logger = logging.getLogger(__name__)


def enumerate_dates(start_date: str, end_date: str) -> List[str]:
    """Every day from start to end inclusive, most recent first."""
    start = parse_date(start_date)
    end = parse_date(end_date)
    days: List[str] = []
    current = start
    while current <= end:
        days.append(current.isoformat())
        current += timedelta(days=1)
    days.sort(reverse=True)
    return days


class ReportAssembler:
    """Draws the cover, the summary and the per-date timeline onto one surface."""

    def __init__(
        self,
        surface,
        images: ImageSource,
        max_documents: Optional[int] = None,
        generated_at: Optional[datetime] = None,
    ) -> None:
        self.surface = surface
        self.cursor = LayoutCursor(surface)
        self.text = TextFlow(surface, self.cursor)
        self.updates = UpdateBlockRenderer(surface, self.cursor, self.text, images, max_documents=max_documents)
        self.generated_at = generated_at

    async def assemble(self, report: Report, report_type: str, start_date: str, end_date: str) -> int:
        self.render_cover(report, report_type, start_date, end_date)
        self.render_summary(report)
        dates = enumerate_dates(start_date, end_date)
        for date_key in dates:
            await self.render_date(report, date_key)
        pages = self.surface.page_count()
        logger.info("Assembled %s: %d day(s), %d page(s)", report.project.name, len(dates), pages)
        return pages

    def render_cover(self, report: Report, report_type: str, start_date: str, end_date: str) -> None:
        center = self.surface.page_width / 2
        cursor = self.cursor

        self.surface.set_font(24, "bold")
        self.surface.text("Project Report", center, cursor.y, align="center")
        cursor.advance(15)

        self.surface.set_font(18)
        self.surface.text(report.project.name, center, cursor.y, align="center")
        cursor.advance(10)

        if report.project.description:
            self.text.add_text(report.project.description, 12, line_height=6, align="center")
        cursor.advance(10)

        generated = self.generated_at or datetime.now()
        self.surface.set_font(10)
        for line in (
            f"Report Type: {report_type_label(report_type)}",
            f"Date Range: {format_date(start_date)} - {format_date(end_date)}",
            f"Generated: {format_generated(generated)}",
        ):
            self.surface.text(line, center, cursor.y, align="center")
            cursor.advance(6)
        cursor.advance(15)

    def render_summary(self, report: Report) -> None:
        self.cursor.reserve(30)
        self.surface.set_font(16, "bold")
        self.surface.text("Summary", self.cursor.margin, self.cursor.y)
        self.cursor.advance(10)

        self.text.add_text(f"Project Status: {report.project.status}", 11)
        self.text.add_text(f"Number of Teams: {len(report.teams)}", 11)
        self.text.add_text(f"Total Members: {len(report.members)}", 11)
        self.cursor.advance(config.SECTION_SPACING_MM)

    async def render_date(self, report: Report, date_key: str) -> None:
        self.cursor.reserve(40)
        self.cursor.advance(config.SECTION_SPACING_MM)
        self.text.add_text(format_date(date_key), 14, bold=True)
        self.cursor.advance(5)

        for member in report.members:
            await self.render_member(report, date_key, member)

    async def render_member(self, report: Report, date_key: str, member: Member) -> None:
        slot = report.updates_for(date_key, member)

        self.cursor.reserve(50)
        self.text.add_text(member_display_name(member), 12, bold=True)
        self.cursor.advance(3)

        for label, color, update in (
            ("Morning Update", config.MORNING_COLOR, slot.morning),
            ("Evening Update", config.EVENING_COLOR, slot.evening),
        ):
            self.cursor.reserve(30)
            self.text.add_text(label, 10, bold=True, color=color)
            self.cursor.advance(2)
            await self.updates.render_slot(update)
            self.cursor.advance(10)

        self.cursor.advance(5)
