"""Typed configuration schema and loader for the reportpdf package."""

from __future__ import annotations

import os
from collections.abc import Mapping
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, confloat, conint, model_validator

SLICING_POLICY_ENV = "REPORTPDF_SLICING_POLICY"

# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class PageSettings(BaseModel):
    """Physical page size and uniform margin, in millimetres."""

    width_mm: confloat(gt=0.0)
    height_mm: confloat(gt=0.0)
    margin_mm: confloat(ge=0.0)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _check_printable_area(self) -> "PageSettings":
        if self.width_mm - 2 * self.margin_mm <= 0 or self.height_mm - 2 * self.margin_mm <= 0:
            raise ValueError("margins leave no printable area")
        return self


class RenderSettings(BaseModel):
    """Offscreen container styling and settle behaviour."""

    logical_width: conint(gt=0)
    padding: conint(ge=0)
    background: str
    foreground: str
    line_height: confloat(gt=0.0)
    font_family: str
    settle_delay_ms: conint(ge=0)
    wait_for_ready: bool
    ready_timeout_ms: conint(ge=0)
    browser_executable_env: str
    browser_executable: str | None = None

    model_config = ConfigDict(extra="forbid")


class RasterSettings(BaseModel):
    """Oversampling applied when capturing the master raster."""

    scale: confloat(gt=0.0, le=8.0)

    model_config = ConfigDict(extra="forbid")


class SlicingSettings(BaseModel):
    """How the master raster is divided into page bands."""

    policy: Literal["equal", "fixed"]

    model_config = ConfigDict(extra="forbid")


class CompositorSettings(BaseModel):
    """Band extraction fan-out."""

    workers: conint(ge=1)

    model_config = ConfigDict(extra="forbid")


class ExportSettings(BaseModel):
    """Output naming, document metadata and busy handling."""

    filename: str
    on_busy: Literal["reject", "queue"]
    title: str
    author: str
    invariant: bool

    model_config = ConfigDict(extra="forbid")


class ConfigModel(BaseModel):
    """Top-level configuration model."""

    schema_version: conint(ge=1)
    page: PageSettings
    render: RenderSettings
    raster: RasterSettings
    slicing: SlicingSettings
    compositor: CompositorSettings
    export: ExportSettings

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------------
# Loader utilities
# ---------------------------------------------------------------------------


def merge_sections(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Lay ``overrides`` over ``base`` section by section.

    A user file naming one key of a section keeps the section's other keys;
    anything that is not a mapping on both sides is replaced whole.  Neither
    argument is modified.
    """

    merged: dict[str, Any] = dict(base)
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = merge_sections(current, value)
        merged[key] = value
    return merged


def load_config(
    path: str | os.PathLike[str] | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> ConfigModel:
    """Load configuration from defaults and optional user overrides.

    Precedence of sources: package ``defaults.yml`` < user-provided YAML <
    environment variables.  The variable named by
    ``render.browser_executable_env`` sets ``render.browser_executable`` and
    ``REPORTPDF_SLICING_POLICY`` overrides ``slicing.policy``.
    """

    with (
        importlib_resources.files("reportpdf.config")
        .joinpath("defaults.yml")
        .open("r", encoding="utf-8") as f
    ):
        defaults = yaml.safe_load(f) or {}

    if path is not None:
        with Path(path).open("r", encoding="utf-8") as f:
            overrides = yaml.safe_load(f) or {}
        merged = merge_sections(defaults, overrides)
    else:
        merged = defaults

    environ = env if env is not None else os.environ
    policy = environ.get(SLICING_POLICY_ENV)
    if policy:
        merged = merge_sections(merged, {"slicing": {"policy": policy.strip().lower()}})

    cfg = ConfigModel.model_validate(merged)

    executable_env = cfg.render.browser_executable_env
    if environ.get(executable_env):
        cfg.render.browser_executable = environ[executable_env]

    return cfg


__all__ = [
    "ConfigModel",
    "PageSettings",
    "RenderSettings",
    "RasterSettings",
    "SlicingSettings",
    "CompositorSettings",
    "ExportSettings",
    "SLICING_POLICY_ENV",
    "merge_sections",
    "load_config",
]
