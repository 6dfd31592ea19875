from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from .. import config

logger = logging.getLogger(__name__)


class PageSink(Protocol):
    page_width: float
    page_height: float

    def add_page(self) -> None: ...


@dataclass
class LayoutState:
    y: float
    page_width: float
    page_height: float
    margin: float

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def bottom_limit(self) -> float:
        return self.page_height - self.margin


class LayoutCursor:
    """Vertical write position on the current page, plus the page-break rule."""

    def __init__(self, surface: PageSink, margin: Optional[float] = None) -> None:
        margin = config.MARGIN_MM if margin is None else float(margin)
        self.surface = surface
        self.state = LayoutState(
            y=margin,
            page_width=surface.page_width,
            page_height=surface.page_height,
            margin=margin,
        )

    @property
    def y(self) -> float:
        return self.state.y

    @property
    def margin(self) -> float:
        return self.state.margin

    @property
    def content_width(self) -> float:
        return self.state.content_width

    def reserve(self, required: Optional[float] = None) -> bool:
        """Start a new page when `required` mm no longer fit above the bottom margin."""
        needed = config.DEFAULT_RESERVATION_MM if required is None else required
        if self.state.y + needed <= self.state.bottom_limit:
            return False
        logger.debug("Page break at y=%.1f (needed %.1f)", self.state.y, needed)
        self.surface.add_page()
        self.state.y = self.state.margin
        return True

    def advance(self, amount: float) -> float:
        self.state.y += amount
        return self.state.y

    def move_to(self, y: float) -> None:
        self.state.y = y
