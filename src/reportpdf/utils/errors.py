"""Typed exceptions for the export pipeline and I/O formats."""


class ExportError(RuntimeError):
    """Base class for every failure surfaced by an export attempt.

    ``retryable`` tells the caller whether offering a retry makes sense.
    """

    retryable: bool = False


class RenderMountError(ExportError):
    """Raised when the offscreen container cannot be attached."""


class RasterizationError(ExportError):
    """Raised when the capture fails or the content has zero height."""

    retryable = True


class SliceComputationError(ExportError):
    """Raised when the raster is degenerate (zero width or height)."""


class AssemblyError(ExportError):
    """Raised when the PDF library fails while adding pages or finalizing."""

    retryable = True


class ExportBusyError(ExportError):
    """Raised when an export is already running and queuing is disabled."""

    retryable = True


class ExportCancelledError(ExportError):
    """Raised when a cancellation token fires at a suspension point."""

    retryable = True


class IOFormatError(ValueError):
    """Base class for I/O format related errors."""


class UnsupportedFormatError(IOFormatError):
    """Raised when no reader or writer is registered for a file format."""


__all__ = [
    "ExportError",
    "RenderMountError",
    "RasterizationError",
    "SliceComputationError",
    "AssemblyError",
    "ExportBusyError",
    "ExportCancelledError",
    "IOFormatError",
    "UnsupportedFormatError",
]
