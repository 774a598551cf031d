"""Export orchestration: render, rasterize, slice, composite, assemble."""

from .pipeline import DocumentExporter, ExportResult, HostFactory, save_result

__all__ = ["DocumentExporter", "ExportResult", "HostFactory", "save_result"]
