from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from reportlab.lib import colors
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from .. import config


_BOOKKEEPING = frozenset({"_closed_pages", "_active_page", "_newest_page"})


class PagedCanvas(canvas.Canvas):
    """
    Canvas that keeps every page open until save().

    showPage() only parks the finished page state; activate_page() swaps a
    parked page back in so it can be drawn on again (page footers need the
    final page count, which is unknown until the last page exists).
    """

    def __init__(self, *args, **kwargs) -> None:
        canvas.Canvas.__init__(self, *args, **kwargs)
        self._closed_pages: List[Dict] = []
        self._active_page: Optional[int] = None  # None = newest page
        self._newest_page: Dict = {}

    def _snapshot(self) -> Dict:
        return {key: value for key, value in self.__dict__.items() if key not in _BOOKKEEPING}

    def page_total(self) -> int:
        return len(self._closed_pages) + 1

    def activate_page(self, number: int) -> None:
        total = self.page_total()
        if not 1 <= number <= total:
            raise IndexError(f"Page {number} out of range 1..{total}")
        target = None if number == total else number - 1
        if target == self._active_page:
            return
        if self._active_page is None:
            self._newest_page = self._snapshot()
        else:
            self._closed_pages[self._active_page] = self._snapshot()
        self.__dict__.update(self._newest_page if target is None else self._closed_pages[target])
        self._active_page = target

    def showPage(self) -> None:
        self.activate_page(self.page_total())
        self._closed_pages.append(self._snapshot())
        self._startPage()

    def save(self) -> None:
        self.activate_page(self.page_total())
        pages = self._closed_pages + [self._snapshot()]
        for state in pages:
            self.__dict__.update(state)
            canvas.Canvas.showPage(self)
        self._closed_pages = []
        canvas.Canvas.save(self)


class PdfSurface:
    """
    Drawing surface in millimetres with the origin at the top-left corner.

    y grows downwards; text y is the baseline, image y is the top edge.
    """

    def __init__(self, output_path: Path, page_size: Optional[Tuple[float, float]] = None) -> None:
        size = page_size or config.PAGE_SIZE
        self.output_path = Path(output_path)
        self.page_width = size[0] / mm
        self.page_height = size[1] / mm
        self._canvas = PagedCanvas(str(self.output_path), pagesize=size)
        self._font_name = config.FONT_NAMES["normal"]
        self._font_size = 10.0
        self._fill_color = config.TEXT_COLOR
        self.set_font(self._font_size)

    def add_page(self) -> None:
        self._canvas.showPage()
        # a fresh page starts with reportlab's default font and fill colour
        self._canvas.setFont(self._font_name, self._font_size)
        self._canvas.setFillColor(colors.HexColor(self._fill_color))

    def page_count(self) -> int:
        return self._canvas.page_total()

    def set_page(self, number: int) -> None:
        self._canvas.activate_page(number)

    def set_font(self, size: float, style: str = "normal") -> None:
        self._font_name = config.FONT_NAMES.get(style, config.FONT_NAMES["normal"])
        self._font_size = float(size)
        self._canvas.setFont(self._font_name, self._font_size)

    def set_color(self, value: str) -> None:
        self._fill_color = value
        self._canvas.setFillColor(colors.HexColor(value))

    def text(self, value: str, x: float, y: float, align: str = "left") -> None:
        px = x * mm
        py = (self.page_height - y) * mm
        if align == "center":
            self._canvas.drawCentredString(px, py, value)
        elif align == "right":
            self._canvas.drawRightString(px, py, value)
        else:
            self._canvas.drawString(px, py, value)

    def split_text(self, value: str, width: float) -> List[str]:
        return simpleSplit(value or "", self._font_name, self._font_size, width * mm)

    def image(self, data: bytes, x: float, y: float, width: float, height: float) -> None:
        reader = ImageReader(BytesIO(data))
        self._canvas.drawImage(
            reader,
            x * mm,
            (self.page_height - y - height) * mm,
            width=width * mm,
            height=height * mm,
        )

    def save(self) -> None:
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._canvas.save()
