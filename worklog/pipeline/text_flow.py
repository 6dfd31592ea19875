from __future__ import annotations

from typing import List, Optional, Protocol

from .. import config
from .layout import LayoutCursor


class TextSurface(Protocol):
    page_width: float

    def set_font(self, size: float, style: str = "normal") -> None: ...

    def set_color(self, value: str) -> None: ...

    def text(self, value: str, x: float, y: float, align: str = "left") -> None: ...

    def split_text(self, value: str, width: float) -> List[str]: ...


class TextFlow:
    def __init__(self, surface: TextSurface, cursor: LayoutCursor, line_height: Optional[float] = None) -> None:
        self.surface = surface
        self.cursor = cursor
        self.line_height = config.LINE_HEIGHT_MM if line_height is None else line_height

    def add_text(
        self,
        text: str,
        font_size: float,
        bold: bool = False,
        color: str = config.TEXT_COLOR,
        *,
        style: Optional[str] = None,
        indent: float = 0.0,
        line_height: Optional[float] = None,
        align: str = "left",
    ) -> int:
        """
        Wrap `text` to the content width and draw it line by line.

        Each line reserves its own height, so a paragraph may continue on the
        next page. The fill colour is reset afterwards. Returns the number of
        lines drawn.
        """
        step = self.line_height if line_height is None else line_height
        self.cursor.reserve(step * 2)
        self.surface.set_font(font_size, style or ("bold" if bold else "normal"))
        self.surface.set_color(color)

        if align == "center":
            x = self.surface.page_width / 2
        else:
            x = self.cursor.margin + indent
        lines = self.surface.split_text(text, self.cursor.content_width - 2 * indent)
        for line in lines:
            self.cursor.reserve(step)
            self.surface.text(line, x, self.cursor.y, align=align)
            self.cursor.advance(step)

        self.surface.set_color(config.TEXT_COLOR)
        return len(lines)

    def add_line(
        self,
        text: str,
        font_size: float,
        *,
        style: str = "normal",
        color: Optional[str] = None,
        indent: float = 0.0,
        advance: float = 0.0,
    ) -> None:
        """Draw a single unwrapped line at the cursor; the caller reserves space."""
        self.surface.set_font(font_size, style)
        if color:
            self.surface.set_color(color)
        self.surface.text(text, self.cursor.margin + indent, self.cursor.y)
        if color:
            self.surface.set_color(config.TEXT_COLOR)
        if advance:
            self.cursor.advance(advance)
