"""HTML markup reader.

The export pipeline treats markup as opaque, so :func:`read_html` returns the
file contents unchanged.  A UTF-8 byte-order mark is consumed by default.
"""

from __future__ import annotations

import os


def read_html(
    path: str | os.PathLike[str],
    *,
    encoding: str = "utf-8-sig",
    errors: str = "strict",
) -> str:
    """Return the raw markup stored at ``path``."""

    with open(path, "r", encoding=encoding, errors=errors) as f:
        return f.read()


__all__ = ["read_html"]
