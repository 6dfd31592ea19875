from __future__ import annotations

import logging
from typing import Protocol

from .. import config
from .formatting import slug_project_name

logger = logging.getLogger(__name__)


class PagedSurface(Protocol):
    page_width: float
    page_height: float

    def page_count(self) -> int: ...

    def set_page(self, number: int) -> None: ...

    def set_font(self, size: float, style: str = "normal") -> None: ...

    def set_color(self, value: str) -> None: ...

    def text(self, value: str, x: float, y: float, align: str = "left") -> None: ...


def stamp_page_numbers(surface: PagedSurface) -> int:
    """Second pass: write 'Page i of N' on every page once N is known."""
    total = surface.page_count()
    for number in range(1, total + 1):
        surface.set_page(number)
        surface.set_font(8)
        surface.set_color(config.TEXT_COLOR)
        surface.text(
            f"Page {number} of {total}",
            surface.page_width / 2,
            surface.page_height - config.FOOTER_OFFSET_MM,
            align="center",
        )
    surface.set_page(total)
    logger.debug("Stamped %d page footer(s)", total)
    return total


def report_filename(project_name: str, report_type: str, start_date: str, ext: str = "pdf") -> str:
    return f"{slug_project_name(project_name)}_{report_type}_report_{start_date}.{ext}"
