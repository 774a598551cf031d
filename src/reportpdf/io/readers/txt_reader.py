"""Plain-text reader.

:func:`read_text_as_markup` turns a text file into minimal markup: every line
becomes one ``<p>`` element with HTML special characters escaped, and blank
lines become empty paragraphs so vertical spacing survives rendering.
``\n``, ``\r\n`` and ``\r`` line endings are all recognized.
"""

from __future__ import annotations

import html
import os


def text_to_markup(text: str) -> str:
    """Return ``text`` as escaped paragraph markup."""

    lines = text.splitlines()
    return "\n".join(
        f"<p>{html.escape(line)}</p>" if line.strip() else "<p>&nbsp;</p>" for line in lines
    )


def read_text_as_markup(
    path: str | os.PathLike[str],
    *,
    encoding: str = "utf-8-sig",
    errors: str = "strict",
) -> str:
    """Read a plain-text file and return it as paragraph markup.

    ``FileNotFoundError`` and other I/O errors propagate to the caller.
    """

    with open(path, "r", encoding=encoding, errors=errors, newline="") as f:
        return text_to_markup(f.read())


__all__ = ["read_text_as_markup", "text_to_markup"]
