"""Logging utilities.

All loggers live below the ``reportpdf`` namespace.  A single stderr handler
is attached to the package root logger the first time :func:`configure_logging`
runs; later calls point it at the current ``sys.stderr`` and adjust the level,
so configuration is idempotent.
"""

from __future__ import annotations

import logging
import sys

ROOT_LOGGER_NAME = "reportpdf"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the package namespace for module ``name``."""

    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def _package_handler(root: logging.Logger) -> logging.StreamHandler | None:  # type: ignore[type-arg]
    for handler in root.handlers:
        if isinstance(handler, logging.StreamHandler) and handler.get_name() == ROOT_LOGGER_NAME:
            return handler
    return None


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach the package handler once and set the level from ``verbose``."""

    root = logging.getLogger(ROOT_LOGGER_NAME)
    handler = _package_handler(root)
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(ROOT_LOGGER_NAME)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
    else:
        # sys.stderr may have been swapped since the last call
        handler.setStream(sys.stderr)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return root


__all__ = ["ROOT_LOGGER_NAME", "get_logger", "configure_logging"]
