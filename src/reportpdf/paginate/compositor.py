"""Page compositor.

Extracts the pixel rectangle ``(0, source_y, width, source_y + source_height)``
of the master raster into a fresh image per band.  Extraction only reads the
master raster, so bands can be cut concurrently; :func:`composite_pages`
always yields pages in band order regardless of how many workers run.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from PIL import Image

from reportpdf.utils.errors import SliceComputationError

from .slicer import PageBand

__all__ = ["PageRaster", "composite", "composite_pages"]


@dataclass(frozen=True, slots=True)
class PageRaster:
    """Extracted sub-image for a single page."""

    band: PageBand
    image: Image.Image

    @property
    def index(self) -> int:
        return self.band.index


def composite(raster: Image.Image, band: PageBand) -> PageRaster:
    """Cut ``band`` out of ``raster`` into a new image of the same width."""

    if band.source_y < 0 or band.source_end > raster.height or band.source_height <= 0:
        raise SliceComputationError(
            f"band {band.index} [{band.source_y}, {band.source_end}) "
            f"outside raster of height {raster.height}"
        )
    page = raster.crop((0, band.source_y, raster.width, band.source_end))
    page.load()
    return PageRaster(band=band, image=page)


def composite_pages(
    raster: Image.Image,
    bands: Sequence[PageBand],
    *,
    workers: int = 1,
) -> Iterator[PageRaster]:
    """Yield a :class:`PageRaster` for every band, in band order."""

    if workers <= 1 or len(bands) <= 1:
        for band in bands:
            yield composite(raster, band)
        return

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="reportpdf-band") as pool:
        yield from pool.map(lambda band: composite(raster, band), bands)
