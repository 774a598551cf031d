"""PDF assembly of composited page rasters."""

from .assembler import PdfAssembler

__all__ = ["PdfAssembler"]
