"""Offscreen rendering and master raster capture."""

from .host import RenderHandle, RenderHost, build_container_document, mounted
from .rasterizer import MasterRaster, rasterize

__all__ = [
    "MasterRaster",
    "RenderHandle",
    "RenderHost",
    "build_container_document",
    "mounted",
    "rasterize",
]
