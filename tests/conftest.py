from __future__ import annotations

import textwrap
from dataclasses import dataclass
from datetime import datetime
from io import BytesIO
from typing import Dict, List, Optional

import pytest
from PIL import Image

from worklog.pipeline.images import ResolvedImage
from worklog.pipeline.report_data import Document, MemberRef, MemberUpdates, Project, Report, Update


@dataclass
class DrawnText:
    page: int
    value: str
    x: float
    y: float
    align: str
    size: float
    style: str
    color: str


@dataclass
class DrawnImage:
    page: int
    x: float
    y: float
    width: float
    height: float


class FakeSurface:
    """Records draw calls per page; wraps text at roughly two characters per mm."""

    def __init__(self, page_width: float = 210.0, page_height: float = 297.0) -> None:
        self.page_width = page_width
        self.page_height = page_height
        self.total = 1
        self.active = 1
        self.size = 10.0
        self.style = "normal"
        self.color = "#000000"
        self.color_calls: List[str] = []
        self.texts: List[DrawnText] = []
        self.images: List[DrawnImage] = []
        self.fail_images = False

    def add_page(self) -> None:
        self.total += 1
        self.active = self.total

    def page_count(self) -> int:
        return self.total

    def set_page(self, number: int) -> None:
        assert 1 <= number <= self.total
        self.active = number

    def set_font(self, size: float, style: str = "normal") -> None:
        self.size = size
        self.style = style

    def set_color(self, value: str) -> None:
        self.color = value
        self.color_calls.append(value)

    def text(self, value: str, x: float, y: float, align: str = "left") -> None:
        self.texts.append(DrawnText(self.active, value, x, y, align, self.size, self.style, self.color))

    def split_text(self, value: str, width: float) -> List[str]:
        return textwrap.wrap(value, width=max(1, int(width // 2))) or [""]

    def image(self, data: bytes, x: float, y: float, width: float, height: float) -> None:
        if self.fail_images:
            raise RuntimeError("surface rejected image")
        self.images.append(DrawnImage(self.active, x, y, width, height))

    def values(self) -> List[str]:
        return [item.value for item in self.texts]

    def count(self, value: str) -> int:
        return sum(1 for item in self.texts if item.value == value)


class FakeResolver:
    """Returns a canned image per reference; unknown references resolve to None."""

    def __init__(self, images: Optional[Dict[str, ResolvedImage]] = None, default: Optional[ResolvedImage] = None) -> None:
        self.images = images or {}
        self.default = default
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.errors: Dict[str, Exception] = {}

    async def resolve(self, source_ref: str) -> Optional[ResolvedImage]:
        self.calls.append(source_ref)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if source_ref in self.errors:
                raise self.errors[source_ref]
            return self.images.get(source_ref, self.default)
        finally:
            self.in_flight -= 1


def png_bytes(width: int = 40, height: int = 20, mode: str = "RGBA") -> bytes:
    out = BytesIO()
    Image.new(mode, (width, height), (200, 30, 30, 255) if mode == "RGBA" else (200, 30, 30)).save(out, format="PNG")
    return out.getvalue()


def make_update(documents: int = 0, description: Optional[str] = None, status: str = "In progress") -> Update:
    return Update(
        status=status,
        timestamp=datetime(2024, 1, 3, 9, 5),
        update_description=description,
        documents=tuple(
            Document(file_path=f"/uploads/photo_{i}.jpg", file_name=f"photo_{i}.jpg") for i in range(documents)
        ),
    )


def make_report(members=None, updates_by_date=None, description: Optional[str] = "Road resurfacing") -> Report:
    return Report(
        project=Project(name="Main Street", status="active", description=description),
        teams=({"name": "North"},),
        members=tuple(members if members is not None else (MemberRef(id="u1", name="Ada"),)),
        updates_by_date=updates_by_date or {},
    )


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver(default=ResolvedImage(data=b"jpeg", width_px=400, height_px=300))


@pytest.fixture
def morning_only_report() -> Report:
    return make_report(
        updates_by_date={"2024-01-03": {"u1": MemberUpdates(morning=make_update(description="Laid kerbs"))}},
    )
