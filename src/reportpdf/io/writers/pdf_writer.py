"""PDF file writer.

:func:`write_pdf_bytes` stores finished PDF bytes.  The data goes to a
temporary file in the destination directory first and is moved into place with
:func:`os.replace`, so a failed write never leaves a partial PDF behind.
Parent directories are created automatically.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


def write_pdf_bytes(path: str | os.PathLike[str], data: bytes) -> None:
    """Atomically write ``data`` to ``path``."""

    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{file_path.name}.", suffix=".part", dir=file_path.parent
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, file_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


__all__ = ["write_pdf_bytes"]
