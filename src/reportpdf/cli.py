"""Typer-based command line interface for the PDF export pipeline.

``export`` renders a markup file in headless Chromium and writes the
paginated PDF; ``plan`` prints the page bands for a raster of a given size
without rendering anything.  Playwright is imported only when ``export``
actually needs a browser.

Exit codes
----------
0 success
3 I/O error (missing reader/writer, filesystem issues)
4 configuration error
5 export failed (render, rasterization, slicing or assembly)
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer
from pydantic import ValidationError

from .config import ConfigModel, load_config
from .export.pipeline import DocumentExporter, geometry_from_config, save_result
from .io import read_file
from .paginate.slicer import PagePlan, SlicePolicy, plan_pages
from .utils.errors import ExportError, UnsupportedFormatError
from .utils.logging import configure_logging

if not sys.stdout.isatty():  # pragma: no cover - CLI test context
    os.environ.setdefault("NO_COLOR", "1")
    os.environ.setdefault("RICH_DISABLE_NO_COLOR", "1")

app = typer.Typer(
    name="reportpdf",
    help="Export edited document markup as a paginated A4 PDF.",
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _safe_exit(code: int, msg: str | None = None) -> NoReturn:
    """Exit the CLI with ``code`` emitting ``msg`` to stderr if provided."""

    if msg:
        typer.echo(msg, err=True)
    raise typer.Exit(code)


def _load(config_path: Path | None) -> ConfigModel:
    try:
        return load_config(config_path)
    except (ValidationError, Exception) as exc:  # pragma: no cover - diverse
        _safe_exit(4, str(exc).splitlines()[0])


def _apply_overrides(
    cfg: ConfigModel,
    *,
    policy: str | None,
    scale: float | None,
) -> ConfigModel:
    """Return a copy of ``cfg`` with CLI overrides applied and re-validated."""

    data = cfg.model_dump()
    if policy is not None:
        data["slicing"]["policy"] = policy.lower()
    if scale is not None:
        data["raster"]["scale"] = scale
    try:
        return ConfigModel.model_validate(data)
    except ValidationError as exc:
        _safe_exit(4, str(exc).splitlines()[0])


def _plan_table(plan: PagePlan) -> str:
    lines = [
        f"raster {plan.raster_width}x{plan.raster_height}px, "
        f"content {plan.content_height_mm:.2f}mm, "
        f"{plan.page_count} page(s), policy={plan.policy.value}"
    ]
    for band in plan.bands:
        lines.append(
            f"  page {band.index + 1}: y={band.source_y} h={band.source_height}px "
            f"({band.height_mm:.2f}mm -> {plan.placement_height_mm(band):.2f}mm)"
        )
    return "\n".join(lines)


@app.callback()
def main() -> None:
    """Entry point for the reportpdf command group."""
    pass


@app.command()
def export(  # noqa: PLR0913
    in_path: Path = typer.Option(  # noqa: B008
        ..., "--in", "--input", help="Markup file (.html, .htm or .txt)"
    ),
    out_path: Optional[Path] = typer.Option(  # noqa: B008
        None, "--out", help="Output PDF file or directory (default: configured filename)"
    ),
    config_path: Optional[Path] = typer.Option(  # noqa: B008
        None, "--config", help="YAML config to override defaults"
    ),
    policy: Optional[str] = typer.Option(  # noqa: B008
        None, "--policy", help="Slicing policy [equal|fixed]"
    ),
    scale: Optional[float] = typer.Option(  # noqa: B008
        None, "--scale", help="Raster oversampling factor"
    ),
    verbose: bool = typer.Option(  # noqa: B008
        False, "--verbose", "-v", help="Log pipeline progress to stderr"
    ),
) -> None:
    """Render ``in_path`` and write the paginated PDF."""

    configure_logging(verbose)
    cfg = _apply_overrides(_load(config_path), policy=policy, scale=scale)

    try:
        markup = read_file(in_path)
    except (FileNotFoundError, UnsupportedFormatError, OSError) as exc:
        _safe_exit(3, str(exc))

    exporter = DocumentExporter(cfg)
    try:
        result = asyncio.run(exporter.export(markup))
    except ExportError as exc:
        hint = " (you can retry)" if exc.retryable else ""
        _safe_exit(5, f"Export failed: {exc}{hint}")

    destination = out_path if out_path is not None else Path(cfg.export.filename)
    try:
        written = save_result(result, destination)
    except (UnsupportedFormatError, OSError) as exc:
        _safe_exit(3, str(exc))
    typer.echo(f"Wrote {result.page_count} page(s) to {written}")


@app.command()
def plan(
    width: int = typer.Option(..., "--width", help="Raster width in pixels"),  # noqa: B008
    height: int = typer.Option(..., "--height", help="Raster height in pixels"),  # noqa: B008
    config_path: Optional[Path] = typer.Option(  # noqa: B008
        None, "--config", help="YAML config to override defaults"
    ),
    policy: Optional[str] = typer.Option(  # noqa: B008
        None, "--policy", help="Slicing policy [equal|fixed]"
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),  # noqa: B008
) -> None:
    """Print the page bands for a ``width`` x ``height`` raster."""

    cfg = _apply_overrides(_load(config_path), policy=policy, scale=None)
    try:
        page_plan = plan_pages(
            width,
            height,
            geometry_from_config(cfg),
            policy=SlicePolicy(cfg.slicing.policy),
        )
    except ExportError as exc:
        _safe_exit(5, str(exc))

    if as_json:
        payload = {
            "page_count": page_plan.page_count,
            "content_height_mm": page_plan.content_height_mm,
            "policy": page_plan.policy.value,
            "bands": [
                {
                    "index": b.index,
                    "source_y": b.source_y,
                    "source_height": b.source_height,
                    "height_mm": b.height_mm,
                    "placement_height_mm": page_plan.placement_height_mm(b),
                }
                for b in page_plan.bands
            ],
        }
        typer.echo(json.dumps(payload, indent=2))
    else:
        typer.echo(_plan_table(page_plan))
