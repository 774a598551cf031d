from __future__ import annotations

import io
from typing import Any

import pytest
from PIL import Image, ImageDraw

from reportpdf.config import ConfigModel, load_config
from reportpdf.config.schema import merge_sections

STRIPE_COLORS = [(255, 0, 0), (0, 128, 0), (0, 0, 255), (200, 200, 0)]


def stripe_image(width: int, height: int, stripe: int = 100) -> Image.Image:
    """Return an RGB image made of horizontal stripes cycling ``STRIPE_COLORS``."""

    img = Image.new("RGB", (width, height), "white")
    draw = ImageDraw.Draw(img)
    for n, top in enumerate(range(0, height, stripe)):
        color = STRIPE_COLORS[n % len(STRIPE_COLORS)]
        draw.rectangle([0, top, width - 1, min(top + stripe, height) - 1], fill=color)
    return img


def png_bytes(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


class FakeHandle:
    """In-memory render handle drawing a striped capture."""

    def __init__(
        self,
        logical_width: int,
        height: float,
        *,
        ready: bool = True,
        fail_capture: bool = False,
        on_ready: Any = None,
    ) -> None:
        self.logical_width = logical_width
        self.height = height
        self.ready = ready
        self.fail_capture = fail_capture
        self.on_ready = on_ready
        self.capture_calls: list[float] = []

    async def wait_ready(self) -> bool:
        if self.on_ready is not None:
            await self.on_ready()
        return self.ready

    async def measure_height(self) -> float:
        return self.height

    async def capture(self, scale: float) -> bytes:
        self.capture_calls.append(scale)
        if self.fail_capture:
            raise RuntimeError("capture crashed")
        size = (round(self.logical_width * scale), max(1, round(self.height * scale)))
        return png_bytes(stripe_image(*size))


class FakeRenderHost:
    """Render host tracking attached handles."""

    def __init__(
        self,
        *,
        logical_width: int = 400,
        height: float = 2000,
        fail_mount: bool = False,
        **handle_kwargs: Any,
    ) -> None:
        self.logical_width = logical_width
        self.height = height
        self.fail_mount = fail_mount
        self.handle_kwargs = handle_kwargs
        self.attached: list[FakeHandle] = []
        self.mounted_markup: list[str] = []
        self.released = 0

    async def mount(self, markup: str) -> FakeHandle:
        if self.fail_mount:
            raise RuntimeError("no document body")
        handle = FakeHandle(self.logical_width, self.height, **self.handle_kwargs)
        self.attached.append(handle)
        self.mounted_markup.append(markup)
        return handle

    async def release(self, handle: FakeHandle) -> None:
        self.attached.remove(handle)
        self.released += 1


def make_config(overrides: dict[str, Any] | None = None) -> ConfigModel:
    """Default config with ``overrides`` deep-merged and re-validated."""

    base = load_config(env={}).model_dump()
    return ConfigModel.model_validate(merge_sections(base, overrides or {}))


@pytest.fixture()
def fast_config() -> ConfigModel:
    return make_config({"render": {"settle_delay_ms": 0}})
