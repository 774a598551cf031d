"""PDF assembler built on reportlab.

Pages are appended strictly in band order.  The first page rides on the
canvas' implicit first page; every later page calls ``showPage`` before its
image is drawn.  Each image is anchored at ``(margin, margin)`` measured from
the top-left corner of the page and spans the printable width.  reportlab's
origin is bottom-left, so the y coordinate is derived from the top margin.
"""

from __future__ import annotations

import io

from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from reportpdf.paginate.compositor import PageRaster
from reportpdf.paginate.slicer import PageGeometry
from reportpdf.utils.errors import AssemblyError
from reportpdf.utils.logging import get_logger

__all__ = ["PdfAssembler"]

logger = get_logger(__name__)


class PdfAssembler:
    """Append-only PDF document finalized once into bytes."""

    def __init__(
        self,
        geometry: PageGeometry,
        *,
        title: str | None = None,
        author: str | None = None,
        invariant: bool = True,
    ) -> None:
        self.geometry = geometry
        self._buffer = io.BytesIO()
        try:
            self._canvas = canvas.Canvas(
                self._buffer,
                pagesize=(geometry.page_width_mm * mm, geometry.page_height_mm * mm),
                invariant=1 if invariant else 0,
            )
            if title:
                self._canvas.setTitle(title)
            if author:
                self._canvas.setAuthor(author)
        except Exception as exc:
            raise AssemblyError(f"could not create PDF document: {exc}") from exc
        self._page_count = 0
        self._finalized = False

    @property
    def page_count(self) -> int:
        return self._page_count

    def add_page(self, page: PageRaster, *, height_mm: float | None = None) -> None:
        """Place ``page`` on the next PDF page.

        ``height_mm`` defaults to the printable height, stretching the band to
        fill the page.
        """

        if self._finalized:
            raise AssemblyError("document already finalized")
        if page.index != self._page_count:
            raise AssemblyError(
                f"page for band {page.index} added at position {self._page_count}"
            )

        geometry = self.geometry
        height = geometry.printable_height_mm if height_mm is None else height_mm
        x = geometry.margin_mm * mm
        y = (geometry.page_height_mm - geometry.margin_mm - height) * mm
        try:
            if self._page_count > 0:
                self._canvas.showPage()
            self._canvas.drawImage(
                ImageReader(page.image),
                x,
                y,
                width=geometry.printable_width_mm * mm,
                height=height * mm,
            )
        except Exception as exc:
            raise AssemblyError(f"failed to place page {page.index + 1}: {exc}") from exc
        self._page_count += 1
        logger.debug(
            "placed band %d (%dpx) at %.1fmm tall", page.index, page.band.source_height, height
        )

    def finalize(self) -> bytes:
        """Serialize the document and return the PDF bytes."""

        if self._finalized:
            raise AssemblyError("document already finalized")
        if self._page_count == 0:
            raise AssemblyError("document has no pages")
        try:
            self._canvas.save()
        except Exception as exc:
            raise AssemblyError(f"failed to serialize PDF: {exc}") from exc
        self._finalized = True
        return self._buffer.getvalue()
