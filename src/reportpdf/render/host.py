"""Offscreen render host contracts.

A render host materializes markup into a container of fixed logical width
whose styling is fully inline, so the capture does not depend on the viewer's
viewport, theme or stylesheets.  Hosts hand out :class:`RenderHandle` objects;
:func:`mounted` scopes a handle so it is released on every exit path and runs
the settle step before the caller rasterizes.

Settling prefers an explicit readiness signal from the handle.  When the
handle cannot provide one, or it does not arrive within
``ready_timeout_ms``, a fixed ``settle_delay_ms`` wait is used instead.  The
fixed wait is a best-effort approximation, not a load-completion guarantee.
"""

from __future__ import annotations

import asyncio
import html
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Protocol, runtime_checkable

from reportpdf.config.schema import RenderSettings
from reportpdf.utils.cancel import CancellationToken
from reportpdf.utils.errors import ExportError, RenderMountError
from reportpdf.utils.logging import get_logger

__all__ = [
    "CONTAINER_ID",
    "RenderHandle",
    "RenderHost",
    "build_container_document",
    "settle",
    "mounted",
]

logger = get_logger(__name__)

CONTAINER_ID = "reportpdf-export-root"


@runtime_checkable
class RenderHandle(Protocol):
    """A mounted container ready to be measured and captured."""

    logical_width: int

    async def wait_ready(self) -> bool:
        """Wait for sub-resources; return ``False`` when no signal is available."""

        ...

    async def measure_height(self) -> float:
        """Return the rendered content height in logical units."""

        ...

    async def capture(self, scale: float) -> bytes:
        """Return an encoded image of the whole container at ``scale``."""

        ...


@runtime_checkable
class RenderHost(Protocol):
    """Factory and owner of offscreen containers."""

    async def mount(self, markup: str) -> RenderHandle:
        ...

    async def release(self, handle: RenderHandle) -> None:
        ...


def build_container_document(markup: str, settings: RenderSettings, *, title: str = "") -> str:
    """Wrap ``markup`` in a standalone document with an inline-styled container.

    The container uses ``box-sizing: border-box`` so its outer width, padding
    included, equals ``settings.logical_width``.  Colours are set on both the
    page and the container and ``color-scheme`` is pinned to light so dark mode
    never leaks into the capture.
    """

    style = (
        f"box-sizing:border-box;width:{settings.logical_width}px;"
        f"padding:{settings.padding}px;margin:0;"
        f"background-color:{settings.background};color:{settings.foreground};"
        f"line-height:{settings.line_height};font-family:{html.escape(settings.font_family)};"
        "overflow-wrap:break-word;"
    )
    return (
        "<!DOCTYPE html>\n"
        '<html><head><meta charset="utf-8">'
        '<meta name="color-scheme" content="light">'
        f"<title>{html.escape(title)}</title>"
        "<style>html,body{margin:0;padding:0;"
        f"background:{settings.background};color-scheme:light;}}"
        "*{animation:none!important;transition:none!important}</style>"
        "</head><body>"
        f'<div id="{CONTAINER_ID}" style="{style}">{markup}</div>'
        "</body></html>"
    )


async def settle(
    handle: RenderHandle,
    settings: RenderSettings,
    token: CancellationToken | None = None,
) -> None:
    """Wait until the mounted content is ready to be captured."""

    if settings.wait_for_ready:
        try:
            ready = await asyncio.wait_for(
                handle.wait_ready(), timeout=settings.ready_timeout_ms / 1000
            )
        except asyncio.TimeoutError:
            logger.warning(
                "render not ready after %d ms; falling back to fixed settle delay",
                settings.ready_timeout_ms,
            )
            ready = False
        if token is not None:
            token.raise_if_cancelled()
        if ready:
            return

    await asyncio.sleep(settings.settle_delay_ms / 1000)
    if token is not None:
        token.raise_if_cancelled()


@asynccontextmanager
async def mounted(
    host: RenderHost,
    markup: str,
    settings: RenderSettings,
    *,
    token: CancellationToken | None = None,
) -> AsyncIterator[RenderHandle]:
    """Mount ``markup`` on ``host``, settle it and release it afterwards."""

    try:
        handle = await host.mount(markup)
    except ExportError:
        raise
    except Exception as exc:
        raise RenderMountError(f"could not attach offscreen container: {exc}") from exc

    try:
        await settle(handle, settings, token)
        yield handle
    finally:
        await host.release(handle)
        logger.debug("released offscreen container")
