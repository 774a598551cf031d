"""Cooperative cancellation for long-running exports."""

from __future__ import annotations

from .errors import ExportCancelledError

__all__ = ["CancellationToken"]


class CancellationToken:
    """Flag checked by the pipeline at each suspension point.

    The token is single-use: once cancelled it stays cancelled.
    """

    __slots__ = ("_cancelled", "_reason")

    def __init__(self) -> None:
        self._cancelled = False
        self._reason = ""

    def cancel(self, reason: str = "export cancelled") -> None:
        self._cancelled = True
        self._reason = reason

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise ExportCancelledError(self._reason)
