from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional, Protocol, Tuple
from urllib.parse import unquote, urljoin, urlparse

import httpx
from PIL import Image

from .. import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedImage:
    """JPEG payload ready for the drawing surface, with its natural pixel size."""

    data: bytes
    width_px: int
    height_px: int


class ImageSource(Protocol):
    async def resolve(self, source_ref: str) -> Optional[ResolvedImage]: ...


class ImageSurface(Protocol):
    def image(self, data: bytes, x: float, y: float, width: float, height: float) -> None: ...


def rasterize(raw: bytes, quality: Optional[int] = None) -> ResolvedImage:
    with Image.open(BytesIO(raw)) as img:
        img.load()
        rgb = img.convert("RGB")
    out = BytesIO()
    rgb.save(out, format="JPEG", quality=quality or config.JPEG_QUALITY)
    return ResolvedImage(data=out.getvalue(), width_px=rgb.width, height_px=rgb.height)


class ImageResolver:
    """
    Loads an image reference and re-encodes it as JPEG.

    References may be http(s) URLs, data: URIs, file:// URLs, or paths. Paths
    are joined to the asset base URL when one is configured, otherwise read
    from disk. Every call is independent: no retries, no caching. Any failure
    yields None.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        quality: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url if base_url is not None else config.ASSET_BASE_URL
        self.timeout = timeout if timeout is not None else config.IMAGE_TIMEOUT_SECONDS
        self.quality = quality
        self._transport = transport

    async def resolve(self, source_ref: str) -> Optional[ResolvedImage]:
        if not source_ref:
            return None
        try:
            raw = await self._load(source_ref)
            return rasterize(raw, self.quality)
        except Exception as exc:  # any fetch or decode problem is non-fatal
            logger.warning("Image could not be loaded from %s: %s", source_ref, exc)
            return None

    async def _load(self, source_ref: str) -> bytes:
        if source_ref.startswith("data:"):
            header, _, payload = source_ref.partition(",")
            if ";base64" in header:
                return base64.b64decode(payload)
            return unquote(payload).encode("latin-1")

        scheme = urlparse(source_ref).scheme.lower()
        if scheme in ("http", "https"):
            return await self._download(source_ref)
        if scheme == "file":
            return Path(unquote(urlparse(source_ref).path)).read_bytes()
        if self.base_url:
            return await self._download(urljoin(self.base_url.rstrip("/") + "/", source_ref.lstrip("/")))
        return Path(source_ref).read_bytes()

    async def _download(self, url: str) -> bytes:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.content


def fit_image_size(
    width_px: float,
    height_px: float,
    max_width: float,
    max_height: float,
    px_to_mm: Optional[float] = None,
) -> Tuple[float, float]:
    """Convert pixels to mm, then shrink (never grow) to fit, keeping the aspect ratio."""
    factor = config.PX_TO_MM if px_to_mm is None else px_to_mm
    width = width_px * factor
    height = height_px * factor
    if width <= 0 or height <= 0:
        raise ValueError(f"Image has no area: {width_px}x{height_px}px")
    if width > max_width:
        scale = max_width / width
        width, height = width * scale, height * scale
    if height > max_height:
        scale = max_height / height
        width, height = width * scale, height * scale
    return width, height


def embed_image(
    surface: ImageSurface,
    image: Optional[ResolvedImage],
    x: float,
    y: float,
    max_width: float,
    max_height: float,
) -> float:
    """Draw `image` with its top edge at y; return the y below it, or y itself when nothing was drawn."""
    if image is None:
        return y
    try:
        width, height = fit_image_size(image.width_px, image.height_px, max_width, max_height)
        surface.image(image.data, x, y, width, height)
    except Exception as exc:
        logger.warning("Image could not be placed on the page: %s", exc)
        return y
    return y + height + config.IMAGE_GAP_MM
