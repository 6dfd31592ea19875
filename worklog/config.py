from __future__ import annotations

from pathlib import Path
from typing import Optional

from reportlab.lib.pagesizes import A4


BASE_DIR = Path(__file__).resolve().parents[1]
OUT_DIR = BASE_DIR / "out"
DB_PATH = OUT_DIR / "worklog.db"

REPORT_TYPES = ("daily", "weekly")
WEEKLY_SPAN_DAYS = 7

# Layout, in millimetres
PAGE_SIZE = A4
MARGIN_MM = 15.0
LINE_HEIGHT_MM = 7.0
UPDATE_LINE_HEIGHT_MM = 6.0
SECTION_SPACING_MM = 10.0
DEFAULT_RESERVATION_MM = 20.0
FOOTER_OFFSET_MM = 10.0

MAX_DOCUMENTS_PER_UPDATE = 6
IMAGE_MAX_HEIGHT_MM = 40.0
IMAGE_GAP_MM = 5.0
PX_TO_MM = 0.264583  # 96 DPI
JPEG_QUALITY = 80
IMAGE_TIMEOUT_SECONDS: Optional[float] = None

ASSET_BASE_URL: Optional[str] = None

FONT_NAMES = {
    "normal": "Helvetica",
    "bold": "Helvetica-Bold",
    "italic": "Helvetica-Oblique",
}

TEXT_COLOR = "#000000"
MUTED_COLOR = "#666666"
MORNING_COLOR = "#1e40af"
EVENING_COLOR = "#ea580c"

IMAGE_FAILED_TEXT = "[Image could not be loaded]"
NO_UPDATE_TEXT = "No update posted"


def set_out_dir(path: Path) -> None:
    global OUT_DIR, DB_PATH
    OUT_DIR = path
    DB_PATH = OUT_DIR / "worklog.db"


def set_asset_base_url(url: Optional[str]) -> None:
    global ASSET_BASE_URL
    ASSET_BASE_URL = url.rstrip("/") if url else None
