"""Paginated PDF export for edited legal-document markup.

The export pipeline renders markup offscreen, captures one master raster,
slices it into page bands and assembles an A4 PDF.  The command line
interface lives in :mod:`reportpdf.cli`.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
