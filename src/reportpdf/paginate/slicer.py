"""Pagination slicer.

Given the pixel size of the master raster and the printable area of the page,
compute how many pages are needed and which horizontal band of the raster
belongs to each page.  Content is always scaled to fill the printable width,
so the physical content height is ``height * printable_width / width``.

Bands use the half-open convention ``[source_y, source_y + source_height)``
and are contiguous: together they cover ``[0, height)`` with no gap and no
overlap.  All scaling is done with :class:`fractions.Fraction`, built from
the decimal form of the millimetre values, so a document that is an exact
multiple of the printable height never gains a spurious extra page through
float rounding, Letter's 12.7mm margins included.

Two policies are supported:

``equal``
    ``page_count`` bands of (near) equal height.  Only when the content is an
    exact multiple of the printable height does a band hold a full page of
    content; otherwise every band is shorter and the assembler stretches it to
    fill the printable height.
``fixed``
    Every band holds exactly one printable page of content except the last,
    which holds the remainder and is placed at its natural height.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction

from reportpdf.utils.errors import SliceComputationError

__all__ = [
    "A4_WIDTH_MM",
    "A4_HEIGHT_MM",
    "DEFAULT_MARGIN_MM",
    "SlicePolicy",
    "PageGeometry",
    "PageBand",
    "PagePlan",
    "page_count_for",
    "plan_pages",
]

A4_WIDTH_MM = 210.0
A4_HEIGHT_MM = 297.0
DEFAULT_MARGIN_MM = 10.0


def _exact(value: float) -> Fraction:
    # Read the millimetre value as the decimal it was written as, so 12.7 is
    # 127/10 and not the nearest binary float.
    return Fraction(repr(value))


class SlicePolicy(Enum):
    """Band sizing policy."""

    EQUAL = "equal"
    FIXED = "fixed"


@dataclass(frozen=True, slots=True)
class PageGeometry:
    """Physical page size and uniform margin in millimetres."""

    page_width_mm: float = A4_WIDTH_MM
    page_height_mm: float = A4_HEIGHT_MM
    margin_mm: float = DEFAULT_MARGIN_MM

    def __post_init__(self) -> None:
        if self.margin_mm < 0:
            raise ValueError("margin must not be negative")
        if self.printable_width_mm <= 0 or self.printable_height_mm <= 0:
            raise ValueError("margins leave no printable area")

    @property
    def printable_width_mm(self) -> float:
        return float(self.exact_printable_width)

    @property
    def printable_height_mm(self) -> float:
        return float(self.exact_printable_height)

    @property
    def exact_printable_width(self) -> Fraction:
        return _exact(self.page_width_mm) - 2 * _exact(self.margin_mm)

    @property
    def exact_printable_height(self) -> Fraction:
        return _exact(self.page_height_mm) - 2 * _exact(self.margin_mm)


@dataclass(frozen=True, slots=True)
class PageBand:
    """Pixel slice of the master raster destined for one page.

    ``height_mm`` is the natural physical height of the band when the raster is
    scaled to the printable width.
    """

    index: int
    source_y: int
    source_height: int
    height_mm: float

    @property
    def source_end(self) -> int:
        return self.source_y + self.source_height


@dataclass(frozen=True, slots=True)
class PagePlan:
    """Result of slicing a raster for a given geometry."""

    raster_width: int
    raster_height: int
    geometry: PageGeometry
    policy: SlicePolicy
    content_height_mm: float
    bands: tuple[PageBand, ...]

    @property
    def page_count(self) -> int:
        return len(self.bands)

    def placement_height_mm(self, band: PageBand) -> float:
        """Return the height at which ``band`` is drawn on its page.

        Equal bands are stretched to the full printable height; fixed bands
        keep their natural height, capped at the printable height.  A fixed
        band can hold one pixel row more than a page (boundaries are floored),
        which is squeezed in rather than drawn into the bottom margin.
        """

        printable = self.geometry.printable_height_mm
        if self.policy is SlicePolicy.EQUAL:
            return printable
        return min(band.height_mm, printable)


def _content_height_mm(width: int, height: int, geometry: PageGeometry) -> Fraction:
    return Fraction(height) * geometry.exact_printable_width / width


def page_count_for(width: int, height: int, geometry: PageGeometry) -> int:
    """Return ``ceil(content_height / printable_height)``, never less than one."""

    if width <= 0:
        raise SliceComputationError(f"raster width must be positive, got {width}")
    if height <= 0:
        raise SliceComputationError(f"raster height must be positive, got {height}")
    content = _content_height_mm(width, height, geometry)
    return max(1, math.ceil(content / geometry.exact_printable_height))


def _equal_boundaries(height: int, count: int) -> list[int]:
    return [(i * height) // count for i in range(count)] + [height]


def _fixed_boundaries(height: int, count: int, capacity_px: Fraction) -> list[int]:
    return [math.floor(i * capacity_px) for i in range(count)] + [height]


def plan_pages(
    width: int,
    height: int,
    geometry: PageGeometry | None = None,
    *,
    policy: SlicePolicy | str = SlicePolicy.EQUAL,
) -> PagePlan:
    """Slice a ``width`` x ``height`` raster into page bands.

    Parameters
    ----------
    width, height:
        Master raster size in pixels.
    geometry:
        Page size and margin; defaults to A4 with 10mm margins.
    policy:
        :class:`SlicePolicy` or its string value.

    Raises
    ------
    SliceComputationError
        If the raster is degenerate or too small to give every page at least
        one pixel row.
    """

    geometry = geometry or PageGeometry()
    policy = SlicePolicy(policy)
    count = page_count_for(width, height, geometry)

    if policy is SlicePolicy.EQUAL:
        boundaries = _equal_boundaries(height, count)
    else:
        capacity_px = geometry.exact_printable_height * width / geometry.exact_printable_width
        boundaries = _fixed_boundaries(height, count, capacity_px)

    mm_per_px = geometry.exact_printable_width / width
    bands: list[PageBand] = []
    for index in range(count):
        start, end = boundaries[index], boundaries[index + 1]
        if end <= start:
            raise SliceComputationError(
                f"raster of {height}px rows cannot fill {count} pages"
            )
        bands.append(
            PageBand(
                index=index,
                source_y=start,
                source_height=end - start,
                height_mm=float((end - start) * mm_per_px),
            )
        )

    return PagePlan(
        raster_width=width,
        raster_height=height,
        geometry=geometry,
        policy=policy,
        content_height_mm=float(_content_height_mm(width, height, geometry)),
        bands=tuple(bands),
    )
