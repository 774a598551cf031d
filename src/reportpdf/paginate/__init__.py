"""Page planning and band extraction for the master raster."""

from .compositor import PageRaster, composite, composite_pages
from .slicer import PageBand, PageGeometry, PagePlan, SlicePolicy, plan_pages

__all__ = [
    "PageBand",
    "PageGeometry",
    "PagePlan",
    "PageRaster",
    "SlicePolicy",
    "composite",
    "composite_pages",
    "plan_pages",
]
