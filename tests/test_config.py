from pathlib import Path
from typing import Any

import pytest
from pydantic import ValidationError

from reportpdf.config import load_config
from reportpdf.config.schema import SLICING_POLICY_ENV, merge_sections


def test_default_values() -> None:
    cfg = load_config(env={})
    assert cfg.page.width_mm == 210.0
    assert cfg.page.height_mm == 297.0
    assert cfg.page.margin_mm == 10.0
    assert cfg.render.logical_width == 800
    assert cfg.render.padding == 30
    assert cfg.render.background == "#ffffff"
    assert cfg.render.foreground == "#000000"
    assert cfg.render.line_height == 1.6
    assert cfg.render.settle_delay_ms == 300
    assert cfg.render.browser_executable is None
    assert cfg.raster.scale == 2.0
    assert cfg.slicing.policy == "equal"
    assert cfg.compositor.workers == 1
    assert cfg.export.filename == "edited_report.pdf"
    assert cfg.export.on_busy == "reject"


def test_user_file_overrides_subset(tmp_path: Path) -> None:
    cfg_file = tmp_path / "cfg.yml"
    cfg_file.write_text("page:\n  margin_mm: 15\nslicing:\n  policy: fixed\n")
    cfg = load_config(cfg_file, env={})
    assert cfg.page.margin_mm == 15.0
    assert cfg.page.width_mm == 210.0
    assert cfg.slicing.policy == "fixed"


def test_env_policy_override() -> None:
    cfg = load_config(env={SLICING_POLICY_ENV: "FIXED"})
    assert cfg.slicing.policy == "fixed"


def test_browser_executable_from_env(monkeypatch: Any) -> None:
    monkeypatch.setenv("REPORTPDF_BROWSER_EXECUTABLE", "/opt/chromium/chrome")
    cfg = load_config()
    assert cfg.render.browser_executable == "/opt/chromium/chrome"


def test_custom_executable_env(tmp_path: Path) -> None:
    cfg_file = tmp_path / "cfg.yml"
    cfg_file.write_text('render:\n  browser_executable_env: "MY_CHROME"\n')
    cfg = load_config(cfg_file, env={"MY_CHROME": "/usr/bin/chromium"})
    assert cfg.render.browser_executable == "/usr/bin/chromium"


def test_unknown_key_rejected(tmp_path: Path) -> None:
    cfg_file = tmp_path / "bad.yml"
    cfg_file.write_text("unknown: true\n")
    with pytest.raises(ValidationError):
        load_config(cfg_file, env={})


def test_margins_must_leave_printable_area(tmp_path: Path) -> None:
    cfg_file = tmp_path / "bad.yml"
    cfg_file.write_text("page:\n  margin_mm: 120\n")
    with pytest.raises(ValidationError):
        load_config(cfg_file, env={})


def test_bad_policy_rejected() -> None:
    with pytest.raises(ValidationError):
        load_config(env={SLICING_POLICY_ENV: "diagonal"})


def test_settle_delay_override_keeps_other_render_keys(tmp_path: Path) -> None:
    cfg_file = tmp_path / "cfg.yml"
    cfg_file.write_text("render:\n  settle_delay_ms: 50\n")
    cfg = load_config(cfg_file, env={})
    assert cfg.render.settle_delay_ms == 50
    assert cfg.render.logical_width == 800
    assert cfg.render.line_height == 1.6
    assert cfg.render.browser_executable_env == "REPORTPDF_BROWSER_EXECUTABLE"


def test_merge_sections_leaves_inputs_untouched() -> None:
    defaults = {"page": {"width_mm": 210.0, "margin_mm": 10.0}, "schema_version": 1}
    user = {"page": {"margin_mm": 12.7}, "schema_version": 2}
    merged = merge_sections(defaults, user)
    assert merged == {"page": {"width_mm": 210.0, "margin_mm": 12.7}, "schema_version": 2}
    assert defaults["page"] == {"width_mm": 210.0, "margin_mm": 10.0}
    assert user == {"page": {"margin_mm": 12.7}, "schema_version": 2}


def test_section_replaced_by_scalar() -> None:
    merged = merge_sections({"slicing": {"policy": "equal"}}, {"slicing": None})
    assert merged == {"slicing": None}
