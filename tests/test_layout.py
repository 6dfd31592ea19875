from __future__ import annotations

import pytest

from worklog import config
from worklog.pipeline.layout import LayoutCursor


def test_reserve_fits_without_page_break(surface) -> None:
    cursor = LayoutCursor(surface)
    cursor.move_to(100)
    assert cursor.reserve(50) is False
    assert cursor.y == 100
    assert surface.page_count() == 1


def test_reserve_breaks_and_resets_to_top_margin(surface) -> None:
    cursor = LayoutCursor(surface)
    cursor.move_to(280)
    assert cursor.reserve(20) is True
    assert surface.page_count() == 2
    assert cursor.y == config.MARGIN_MM


def test_reserve_exact_fit_stays_on_page(surface) -> None:
    cursor = LayoutCursor(surface)
    cursor.move_to(surface.page_height - config.MARGIN_MM - 20)
    assert cursor.reserve(20) is False
    assert surface.page_count() == 1


def test_default_reservation(surface) -> None:
    cursor = LayoutCursor(surface)
    cursor.move_to(surface.page_height - config.MARGIN_MM - config.DEFAULT_RESERVATION_MM + 0.5)
    assert cursor.reserve() is True
    assert surface.page_count() == 2


@pytest.mark.parametrize("start_y", [15.0, 120.0, 250.0, 262.0, 262.1, 281.0, 300.0])
@pytest.mark.parametrize("required", [0.0, 6.0, 20.0, 50.0])
def test_reserve_rule(surface, start_y: float, required: float) -> None:
    cursor = LayoutCursor(surface)
    cursor.move_to(start_y)
    should_break = start_y + required > surface.page_height - cursor.margin
    cursor.reserve(required)
    if should_break:
        assert surface.page_count() == 2
        assert cursor.y == cursor.margin
    else:
        assert surface.page_count() == 1
        assert cursor.y == start_y


def test_content_width_uses_both_margins(surface) -> None:
    cursor = LayoutCursor(surface, margin=20)
    assert cursor.content_width == surface.page_width - 40
    assert cursor.y == 20
