"""Playwright (headless Chromium) render host.

Every mount starts a private browser and page, so each export owns its render
surface and nothing is shared between exports.  The page itself is never shown;
the container sits in normal flow at the top-left of an otherwise empty
document so element screenshots can reach all of it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from playwright.async_api import Browser, BrowserContext, Locator, Page, Playwright
from playwright.async_api import async_playwright

from reportpdf.config.schema import RenderSettings
from reportpdf.utils.errors import RenderMountError
from reportpdf.utils.logging import get_logger

from .host import CONTAINER_ID, RenderHandle, build_container_document

__all__ = ["PlaywrightRenderHandle", "PlaywrightRenderHost"]

logger = get_logger(__name__)

_READY_SCRIPT = """
async () => {
  if (document.fonts && document.fonts.ready) {
    await document.fonts.ready;
  }
  const pending = Array.from(document.images).filter((img) => !img.complete);
  await Promise.all(pending.map((img) => new Promise((resolve) => {
    img.addEventListener('load', resolve, { once: true });
    img.addEventListener('error', resolve, { once: true });
  })));
  return true;
}
"""

_HEIGHT_SCRIPT = "(el) => el.getBoundingClientRect().height"


@dataclass(eq=False)
class PlaywrightRenderHandle:
    """A container mounted in its own Chromium page."""

    logical_width: int
    device_scale_factor: float
    playwright: Playwright
    browser: Browser
    context: BrowserContext
    page: Page
    locator: Locator
    closed: bool = field(default=False)

    async def wait_ready(self) -> bool:
        await self.page.wait_for_load_state("networkidle")
        return bool(await self.page.evaluate(_READY_SCRIPT))

    async def measure_height(self) -> float:
        return float(await self.locator.evaluate(_HEIGHT_SCRIPT))

    async def capture(self, scale: float) -> bytes:
        if scale != self.device_scale_factor:
            logger.debug(
                "capturing at device scale %s for requested scale %s",
                self.device_scale_factor,
                scale,
            )
        return await self.locator.screenshot(type="png", animations="disabled", scale="device")


class PlaywrightRenderHost:
    """Mounts markup into headless Chromium at a fixed device scale."""

    def __init__(
        self,
        settings: RenderSettings,
        *,
        scale: float = 2.0,
        title: str = "",
        launch_options: dict[str, Any] | None = None,
    ) -> None:
        self.settings = settings
        self.scale = scale
        self.title = title
        self.launch_options = dict(launch_options or {})
        if settings.browser_executable:
            self.launch_options.setdefault("executable_path", settings.browser_executable)
        self._active: list[PlaywrightRenderHandle] = []

    @property
    def active_handles(self) -> int:
        return len(self._active)

    async def mount(self, markup: str) -> RenderHandle:
        document = build_container_document(markup, self.settings, title=self.title)
        playwright = await async_playwright().start()
        browser: Browser | None = None
        try:
            browser = await playwright.chromium.launch(**self.launch_options)
            context = await browser.new_context(
                viewport={"width": self.settings.logical_width, "height": 1024},
                device_scale_factor=self.scale,
                color_scheme="light",
                reduced_motion="reduce",
            )
            page = await context.new_page()
            await page.set_content(document, wait_until="load")
            locator = page.locator(f"#{CONTAINER_ID}")
            if await locator.count() != 1:
                raise RenderMountError("offscreen container missing after load")
        except RenderMountError:
            await self._shutdown(browser, playwright)
            raise
        except Exception as exc:
            await self._shutdown(browser, playwright)
            raise RenderMountError(f"chromium could not mount content: {exc}") from exc

        handle = PlaywrightRenderHandle(
            logical_width=self.settings.logical_width,
            device_scale_factor=self.scale,
            playwright=playwright,
            browser=browser,
            context=context,
            page=page,
            locator=locator,
        )
        self._active.append(handle)
        logger.debug("mounted %d chars of markup in chromium", len(markup))
        return handle

    async def release(self, handle: RenderHandle) -> None:
        if not isinstance(handle, PlaywrightRenderHandle):
            raise TypeError(f"cannot release foreign handle {handle!r}")
        if handle.closed:
            return
        handle.closed = True
        if handle in self._active:
            self._active.remove(handle)
        try:
            await handle.context.close()
        finally:
            await self._shutdown(handle.browser, handle.playwright)

    @staticmethod
    async def _shutdown(browser: Browser | None, playwright: Playwright) -> None:
        try:
            if browser is not None:
                await browser.close()
        finally:
            await playwright.stop()
