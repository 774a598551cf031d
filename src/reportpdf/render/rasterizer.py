"""Rasterizer adapter.

Captures a mounted container as one master raster covering the whole
document height.  The result always measures
``(round(logical_width * scale), round(measured_height * scale))`` pixels; if
the capture comes back at a different size (device scale mismatch, fractional
layout heights) it is resampled to the expected size.
"""

from __future__ import annotations

import asyncio
import io
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from reportpdf.utils.cancel import CancellationToken
from reportpdf.utils.errors import ExportError, RasterizationError
from reportpdf.utils.logging import get_logger

from .host import RenderHandle

__all__ = ["MasterRaster", "rasterize"]

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class MasterRaster:
    """Immutable full-document raster and the scale it was captured at."""

    image: Image.Image
    scale: float
    logical_width: int
    logical_height: float

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height


def _decode(data: bytes, size: tuple[int, int]) -> Image.Image:
    try:
        with Image.open(io.BytesIO(data)) as captured:
            image = captured.convert("RGB")
    except (UnidentifiedImageError, OSError) as exc:
        raise RasterizationError(f"capture is not a decodable image: {exc}") from exc
    if image.size != size:
        logger.debug("resampling capture from %s to %s", image.size, size)
        image = image.resize(size, Image.Resampling.LANCZOS)
    image.load()
    return image


async def rasterize(
    handle: RenderHandle,
    scale: float,
    *,
    token: CancellationToken | None = None,
) -> MasterRaster:
    """Capture ``handle`` at ``scale`` into a :class:`MasterRaster`.

    Raises
    ------
    RasterizationError
        If the content has no measurable height or the capture fails.
    """

    if scale <= 0:
        raise RasterizationError(f"scale must be positive, got {scale}")

    try:
        height = await handle.measure_height()
    except ExportError:
        raise
    except Exception as exc:
        raise RasterizationError(f"could not measure rendered content: {exc}") from exc

    size = (round(handle.logical_width * scale), round(height * scale))
    if height <= 0 or size[1] <= 0:
        raise RasterizationError("rendered content has zero height")

    try:
        data = await handle.capture(scale)
    except ExportError:
        raise
    except Exception as exc:
        raise RasterizationError(f"capture failed: {exc}") from exc
    if token is not None:
        token.raise_if_cancelled()

    image = await asyncio.to_thread(_decode, data, size)
    logger.debug("master raster %dx%d at scale %s", image.width, image.height, scale)
    return MasterRaster(
        image=image,
        scale=scale,
        logical_width=handle.logical_width,
        logical_height=height,
    )
