from __future__ import annotations

import logging
from typing import Optional

from .. import config
from .formatting import format_location, format_timestamp
from .images import ImageSource, ImageSurface, embed_image
from .layout import LayoutCursor
from .report_data import Document, Update
from .text_flow import TextFlow

logger = logging.getLogger(__name__)


INDENT = 5.0
STATUS_VALUE_X = 20.0
TIMESTAMP_VALUE_X = 30.0
SMALL_SIZE = 9
DOC_NAME_SIZE = 8
DOC_NOTE_SIZE = 7
DOCUMENT_RESERVATION = 50.0


class UpdateBlockRenderer:
    """Renders one morning/evening slot: status, description, timestamp, documents."""

    def __init__(
        self,
        surface: ImageSurface,
        cursor: LayoutCursor,
        text: TextFlow,
        images: ImageSource,
        max_documents: Optional[int] = None,
    ) -> None:
        self.surface = surface
        self.cursor = cursor
        self.text = text
        self.images = images
        self.max_documents = config.MAX_DOCUMENTS_PER_UPDATE if max_documents is None else max_documents
        self.line_height = config.UPDATE_LINE_HEIGHT_MM

    async def render_slot(self, update: Optional[Update]) -> float:
        if update is None:
            self.render_empty()
        else:
            await self.render(update)
        return self.cursor.y

    def render_empty(self) -> None:
        self.cursor.reserve(config.LINE_HEIGHT_MM)
        self.text.add_line(
            config.NO_UPDATE_TEXT,
            SMALL_SIZE,
            style="italic",
            color=config.MUTED_COLOR,
            indent=INDENT,
            advance=config.LINE_HEIGHT_MM,
        )

    async def render(self, update: Update) -> float:
        lh = self.line_height

        self.cursor.reserve(lh)
        self._label_value("Status:", update.status, STATUS_VALUE_X)
        self.cursor.advance(lh)

        if update.update_description:
            self.cursor.reserve(lh * 3)
            self.text.add_line("Description:", SMALL_SIZE, style="bold", indent=INDENT, advance=lh)
            self.text.add_text(update.update_description, SMALL_SIZE, indent=INDENT, line_height=lh)

        self.cursor.reserve(lh)
        self._label_value("Timestamp:", format_timestamp(update.timestamp), TIMESTAMP_VALUE_X)
        self.cursor.advance(lh + 3)

        if update.documents:
            await self._render_documents(update)
        return self.cursor.y

    def _label_value(self, label: str, value: str, value_x: float) -> None:
        self.text.add_line(label, SMALL_SIZE, style="bold", indent=INDENT)
        self.text.add_line(value, SMALL_SIZE, indent=value_x)

    async def _render_documents(self, update: Update) -> None:
        lh = self.line_height
        total = len(update.documents)

        self.cursor.reserve(lh * 2)
        self.text.add_line(f"Documents ({total}):", SMALL_SIZE, style="bold", indent=INDENT, advance=lh + 3)

        # one at a time: each image's real height decides where the next block starts
        for index, document in enumerate(update.documents[: self.max_documents]):
            await self._render_document(index, document)

        hidden = total - self.max_documents
        if hidden > 0:
            self.cursor.reserve(lh)
            self.text.add_line(
                f"+{hidden} more document(s)",
                DOC_NAME_SIZE,
                color=config.MUTED_COLOR,
                indent=INDENT,
                advance=lh,
            )

    async def _render_document(self, index: int, document: Document) -> None:
        self.cursor.reserve(DOCUMENT_RESERVATION)
        self.text.add_line(document.file_name or f"Document {index + 1}", DOC_NAME_SIZE, indent=INDENT)

        if document.has_location:
            self.cursor.advance(4)
            self.text.add_line(format_location(document.latitude, document.longitude), DOC_NOTE_SIZE, indent=INDENT)
        self.cursor.advance(4)

        try:
            image = await self.images.resolve(document.file_path)
        except Exception as exc:
            logger.warning("Image resolver failed for %s: %s", document.file_path, exc)
            image = None

        if image is None:
            self.text.add_line(
                config.IMAGE_FAILED_TEXT,
                DOC_NOTE_SIZE,
                color=config.MUTED_COLOR,
                indent=INDENT,
                advance=8,
            )
        else:
            x = self.cursor.margin + INDENT
            max_width = self.cursor.content_width - 2 * INDENT
            self.cursor.move_to(embed_image(self.surface, image, x, self.cursor.y, max_width, config.IMAGE_MAX_HEIGHT_MM))
            self.cursor.advance(3)

        self.cursor.advance(3)
