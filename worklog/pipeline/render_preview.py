from __future__ import annotations

from pathlib import Path

import fitz  # PyMuPDF


def render_cover_preview(pdf_path: Path, out_path: Path, min_px: int = 1200) -> Path:
    with fitz.open(pdf_path) as doc:
        page = doc.load_page(0)
        short_side = min(page.rect.width, page.rect.height)
        zoom = max(1.0, min_px / float(short_side))
        pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=False)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        pix.save(str(out_path))
    return out_path
