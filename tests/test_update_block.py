from __future__ import annotations

import asyncio
from datetime import datetime

from worklog import config
from worklog.pipeline.images import ResolvedImage
from worklog.pipeline.layout import LayoutCursor
from worklog.pipeline.report_data import Document, Update
from worklog.pipeline.text_flow import TextFlow
from worklog.pipeline.update_block import UpdateBlockRenderer

from conftest import FakeResolver, make_update


def _renderer(surface, resolver, max_documents=None):
    cursor = LayoutCursor(surface)
    return cursor, UpdateBlockRenderer(surface, cursor, TextFlow(surface, cursor), resolver, max_documents=max_documents)


def test_fields_render_in_order(surface, resolver) -> None:
    _, renderer = _renderer(surface, resolver)
    asyncio.run(renderer.render(make_update(documents=1, description="Poured the slab")))
    values = surface.values()
    order = [values.index(label) for label in ("Status:", "Description:", "Timestamp:", "Documents (1):")]
    assert order == sorted(order)
    assert "In progress" in values
    assert "Poured the slab" in values
    assert "Jan 3, 2024, 09:05 AM" in values


def test_description_is_optional(surface, resolver) -> None:
    _, renderer = _renderer(surface, resolver)
    asyncio.run(renderer.render(make_update()))
    assert "Description:" not in surface.values()
    assert not any(value.startswith("Documents") for value in surface.values())


def test_eight_documents_render_six_and_a_summary(surface, resolver) -> None:
    _, renderer = _renderer(surface, resolver)
    asyncio.run(renderer.render(make_update(documents=8)))
    names = [value for value in surface.values() if value.startswith("photo_")]
    assert len(names) == 6
    assert surface.count("+2 more document(s)") == 1
    assert len(resolver.calls) == 6
    assert len(surface.images) == 6


def test_six_documents_have_no_summary_line(surface, resolver) -> None:
    _, renderer = _renderer(surface, resolver)
    asyncio.run(renderer.render(make_update(documents=6)))
    assert len([value for value in surface.values() if value.startswith("photo_")]) == 6
    assert not any("more document" in value for value in surface.values())


def test_document_limit_is_configurable(surface, resolver) -> None:
    _, renderer = _renderer(surface, resolver, max_documents=2)
    asyncio.run(renderer.render(make_update(documents=5)))
    assert len(resolver.calls) == 2
    assert surface.count("+3 more document(s)") == 1


def test_unnamed_document_and_location(surface, resolver) -> None:
    update = Update(
        status="Done",
        timestamp=datetime(2024, 1, 3, 18, 30),
        documents=(
            Document(file_path="/a.jpg", file_name="gate.jpg", latitude=51.5, longitude=-0.1234567),
            Document(file_path="/b.jpg", latitude=51.5),
            Document(file_path="/c.jpg"),
        ),
    )
    _, renderer = _renderer(surface, resolver)
    asyncio.run(renderer.render(update))
    values = surface.values()
    assert "gate.jpg" in values
    assert "Document 2" in values
    assert "Document 3" in values
    assert [value for value in values if value.startswith("Lat:")] == ["Lat: 51.500000, Lng: -0.123457"]


def test_failed_images_show_indicator(surface) -> None:
    resolver = FakeResolver(images={"/uploads/photo_0.jpg": ResolvedImage(b"jpeg", 200, 100)})
    resolver.errors["/uploads/photo_2.jpg"] = OSError("connection reset")
    _, renderer = _renderer(surface, resolver)
    asyncio.run(renderer.render(make_update(documents=3)))
    assert surface.count(config.IMAGE_FAILED_TEXT) == 2
    assert len(surface.images) == 1
    assert surface.count("photo_2.jpg") == 1


def test_rejected_embed_keeps_going_without_indicator(surface, resolver) -> None:
    surface.fail_images = True
    _, renderer = _renderer(surface, resolver)
    asyncio.run(renderer.render(make_update(documents=2)))
    assert surface.count(config.IMAGE_FAILED_TEXT) == 0
    assert surface.count("photo_1.jpg") == 1


def test_images_resolve_one_at_a_time_in_order(surface, resolver) -> None:
    _, renderer = _renderer(surface, resolver)
    asyncio.run(renderer.render(make_update(documents=5)))
    assert resolver.max_in_flight == 1
    assert resolver.calls == [f"/uploads/photo_{i}.jpg" for i in range(5)]


def test_document_block_may_break_page(surface, resolver) -> None:
    cursor, renderer = _renderer(surface, resolver)
    cursor.move_to(200)
    asyncio.run(renderer.render(make_update(documents=6)))
    assert surface.page_count() > 1
    assert {item.page for item in surface.images} != {1}
    limit = surface.page_height - config.MARGIN_MM
    assert all(item.y + item.height <= limit for item in surface.images)


def test_empty_slot(surface, resolver) -> None:
    cursor, renderer = _renderer(surface, resolver)
    y = asyncio.run(renderer.render_slot(None))
    assert surface.values() == [config.NO_UPDATE_TEXT]
    assert surface.texts[0].style == "italic"
    assert surface.texts[0].color == config.MUTED_COLOR
    assert y == config.MARGIN_MM + config.LINE_HEIGHT_MM
    assert surface.color == config.TEXT_COLOR
