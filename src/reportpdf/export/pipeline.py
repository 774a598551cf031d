"""Export pipeline.

:class:`DocumentExporter` is the export boundary.  One call runs

    mount + settle -> rasterize -> release -> plan -> composite -> assemble

and returns an :class:`ExportResult`.  The render host comes from a factory so
every export owns a fresh host that is released before slicing starts, on
success and on failure alike.

Only one export runs per exporter.  A second concurrent call is rejected with
:class:`ExportBusyError` or waits its turn, depending on ``export.on_busy``.
A :class:`CancellationToken` is checked after the settle step, after capture,
before each page and before serialization.  Every failure is logged here and
re-raised as an :class:`ExportError` subclass; nothing is written to disk.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from time import perf_counter

from reportpdf.config import ConfigModel
from reportpdf.io import write_file
from reportpdf.paginate.compositor import composite_pages
from reportpdf.paginate.slicer import PageGeometry, PagePlan, SlicePolicy, plan_pages
from reportpdf.pdf.assembler import PdfAssembler
from reportpdf.render.host import RenderHost, mounted
from reportpdf.render.rasterizer import MasterRaster, rasterize
from reportpdf.templates import content_or_default
from reportpdf.utils.cancel import CancellationToken
from reportpdf.utils.errors import ExportBusyError, ExportError
from reportpdf.utils.logging import get_logger

__all__ = ["DocumentExporter", "ExportResult", "HostFactory", "geometry_from_config", "save_result"]

logger = get_logger(__name__)

HostFactory = Callable[[ConfigModel], RenderHost]


@dataclass(frozen=True, slots=True)
class ExportResult:
    """A finished export ready to be saved."""

    pdf: bytes
    filename: str
    plan: PagePlan

    @property
    def page_count(self) -> int:
        return self.plan.page_count


def geometry_from_config(cfg: ConfigModel) -> PageGeometry:
    return PageGeometry(
        page_width_mm=cfg.page.width_mm,
        page_height_mm=cfg.page.height_mm,
        margin_mm=cfg.page.margin_mm,
    )


def _default_host_factory(cfg: ConfigModel) -> RenderHost:
    from reportpdf.render.playwright_host import PlaywrightRenderHost

    return PlaywrightRenderHost(cfg.render, scale=cfg.raster.scale, title=cfg.export.title)


class DocumentExporter:
    """Turns markup into a paginated PDF, one export at a time."""

    def __init__(self, cfg: ConfigModel, *, host_factory: HostFactory | None = None) -> None:
        self.cfg = cfg
        self.geometry = geometry_from_config(cfg)
        self._host_factory = host_factory or _default_host_factory
        self._lock: asyncio.Lock | None = None
        self._lock_loop: asyncio.AbstractEventLoop | None = None

    @property
    def busy(self) -> bool:
        return self._lock is not None and self._lock.locked()

    def _loop_lock(self) -> asyncio.Lock:
        # asyncio.Lock binds to the loop that first waits on it; each loop
        # gets its own so an exporter can be reused across asyncio.run calls.
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def export(
        self,
        markup: str | None,
        *,
        token: CancellationToken | None = None,
    ) -> ExportResult:
        """Export ``markup`` (or the default template when empty)."""

        lock = self._loop_lock()
        if lock.locked() and self.cfg.export.on_busy == "reject":
            logger.warning("export rejected: another export is in progress")
            raise ExportBusyError("an export is already in progress")

        async with lock:
            start = perf_counter()
            try:
                result = await self._run(content_or_default(markup), token)
            except ExportError as exc:
                logger.error("export failed (%s): %s", type(exc).__name__, exc)
                raise
            except Exception as exc:
                logger.exception("export failed unexpectedly")
                raise ExportError(f"export failed: {exc}") from exc
            logger.info(
                "exported %d page(s) in %.1f ms",
                result.page_count,
                (perf_counter() - start) * 1000.0,
            )
            return result

    async def _capture(self, markup: str, token: CancellationToken | None) -> MasterRaster:
        host = self._host_factory(self.cfg)
        async with mounted(host, markup, self.cfg.render, token=token) as handle:
            return await rasterize(handle, self.cfg.raster.scale, token=token)

    async def _run(self, markup: str, token: CancellationToken | None) -> ExportResult:
        if token is not None:
            token.raise_if_cancelled()

        raster = await self._capture(markup, token)

        plan = plan_pages(
            raster.width,
            raster.height,
            self.geometry,
            policy=SlicePolicy(self.cfg.slicing.policy),
        )
        logger.debug(
            "content %.1fmm over %d page(s) (%s policy)",
            plan.content_height_mm,
            plan.page_count,
            plan.policy.value,
        )

        assembler = PdfAssembler(
            self.geometry,
            title=self.cfg.export.title,
            author=self.cfg.export.author,
            invariant=self.cfg.export.invariant,
        )
        pages = composite_pages(raster.image, plan.bands, workers=self.cfg.compositor.workers)
        try:
            for page in pages:
                if token is not None:
                    token.raise_if_cancelled()
                assembler.add_page(page, height_mm=plan.placement_height_mm(page.band))
        finally:
            pages.close()

        if token is not None:
            token.raise_if_cancelled()
        pdf = await asyncio.to_thread(assembler.finalize)
        return ExportResult(pdf=pdf, filename=self.cfg.export.filename, plan=plan)


def save_result(result: ExportResult, destination: str | Path | None = None) -> Path:
    """Write ``result`` to ``destination`` (a file or directory) atomically.

    A directory destination receives ``result.filename``; ``None`` means the
    current directory.
    """

    path = Path(destination) if destination is not None else Path.cwd()
    if path.is_dir():
        path = path / result.filename
    write_file(path, result.pdf)
    return path
