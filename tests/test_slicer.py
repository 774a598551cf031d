"""Tests for page count and band computation."""

from __future__ import annotations

import math
import random
from fractions import Fraction

import pytest

from reportpdf.paginate.slicer import (
    PageGeometry,
    SlicePolicy,
    page_count_for,
    plan_pages,
)
from reportpdf.utils.errors import SliceComputationError

A4 = PageGeometry()


def _assert_contiguous(plan, height: int) -> None:
    cursor = 0
    for i, band in enumerate(plan.bands):
        assert band.index == i
        assert band.source_y == cursor
        assert band.source_height > 0
        cursor = band.source_end
    assert cursor == height
    assert sum(b.source_height for b in plan.bands) == height


def test_a4_printable_area() -> None:
    assert A4.printable_width_mm == 190.0
    assert A4.printable_height_mm == 277.0


def test_reference_scenario_four_pages() -> None:
    plan = plan_pages(800, 4000, A4)
    assert plan.content_height_mm == pytest.approx(950.0)
    assert plan.page_count == 4
    assert [b.source_height for b in plan.bands] == [1000, 1000, 1000, 1000]
    assert [b.source_y for b in plan.bands] == [0, 1000, 2000, 3000]


def test_exact_multiple_gives_equal_bands() -> None:
    # 760px over 190mm is 4px per mm, so three printable pages are 3 * 277 * 4 rows.
    height = 3 * 277 * 4
    plan = plan_pages(760, height, A4)
    assert plan.page_count == 3
    assert {b.source_height for b in plan.bands} == {277 * 4}
    for band in plan.bands:
        assert band.height_mm == pytest.approx(277.0)


def test_exact_multiple_same_under_fixed_policy() -> None:
    height = 3 * 277 * 4
    equal = plan_pages(760, height, A4, policy=SlicePolicy.EQUAL)
    fixed = plan_pages(760, height, A4, policy=SlicePolicy.FIXED)
    assert [b.source_height for b in equal.bands] == [b.source_height for b in fixed.bands]


def test_short_content_is_one_page() -> None:
    plan = plan_pages(1600, 10, A4)
    assert plan.page_count == 1
    assert plan.bands[0].source_y == 0
    assert plan.bands[0].source_height == 10


def test_fixed_policy_full_pages_then_remainder() -> None:
    plan = plan_pages(800, 4000, A4, policy="fixed")
    assert plan.policy is SlicePolicy.FIXED
    assert plan.page_count == 4
    # one printable page holds 277 * 800 / 190 = 1166.3 rows
    assert [b.source_height for b in plan.bands] == [1166, 1166, 1166, 502]
    _assert_contiguous(plan, 4000)
    assert plan.placement_height_mm(plan.bands[-1]) == pytest.approx(502 * 190 / 800)


def test_equal_policy_stretches_to_printable_height() -> None:
    plan = plan_pages(800, 4000, A4)
    for band in plan.bands:
        assert plan.placement_height_mm(band) == 277.0


def test_uneven_height_splits_without_gaps() -> None:
    plan = plan_pages(1600, 6901, A4)
    assert plan.page_count == 3
    heights = [b.source_height for b in plan.bands]
    assert max(heights) - min(heights) <= 1
    _assert_contiguous(plan, 6901)


@pytest.mark.parametrize("policy", [SlicePolicy.EQUAL, SlicePolicy.FIXED])
def test_random_rasters_cover_height_exactly(policy: SlicePolicy) -> None:
    rng = random.Random(1234)
    for _ in range(200):
        width = rng.randint(50, 3000)
        height = rng.randint(1, 60000)
        plan = plan_pages(width, height, A4, policy=policy)
        expected = math.ceil(Fraction(height) * 190 / width / 277)
        assert plan.page_count == max(1, expected)
        _assert_contiguous(plan, height)


def test_custom_geometry() -> None:
    letter = PageGeometry(page_width_mm=215.9, page_height_mm=279.4, margin_mm=12.7)
    assert letter.exact_printable_width == Fraction("190.5")
    assert letter.exact_printable_height == Fraction("254.0")
    # 4000 rows at 800 wide is 952.5mm of content, 3.75 Letter pages
    assert page_count_for(800, 4000, letter) == 4


@pytest.mark.parametrize("policy", [SlicePolicy.EQUAL, SlicePolicy.FIXED])
def test_letter_exact_multiple_gains_no_page(policy: SlicePolicy) -> None:
    letter = PageGeometry(page_width_mm=215.9, page_height_mm=279.4, margin_mm=12.7)
    # 381px across 190.5mm is 2px/mm, so 3 * 254mm is 1524 rows
    plan = plan_pages(381, 1524, letter, policy=policy)
    assert plan.page_count == 3
    assert [b.source_height for b in plan.bands] == [508, 508, 508]
    assert plan.content_height_mm == pytest.approx(762.0)


def test_fixed_placement_never_enters_bottom_margin() -> None:
    for height in range(1000, 20001, 7):
        plan = plan_pages(800, height, A4, policy="fixed")
        for band in plan.bands:
            assert plan.placement_height_mm(band) <= A4.printable_height_mm


def test_zero_width_rejected() -> None:
    with pytest.raises(SliceComputationError):
        plan_pages(0, 4000, A4)


def test_zero_height_rejected() -> None:
    with pytest.raises(SliceComputationError):
        plan_pages(800, 0, A4)


def test_more_pages_than_rows_rejected() -> None:
    wide = PageGeometry(page_width_mm=520.0, page_height_mm=30.0, margin_mm=10.0)
    with pytest.raises(SliceComputationError):
        plan_pages(1, 2, wide)


def test_geometry_without_printable_area() -> None:
    with pytest.raises(ValueError):
        PageGeometry(page_width_mm=20.0, page_height_mm=297.0, margin_mm=10.0)


def test_same_input_same_plan() -> None:
    assert plan_pages(1600, 12345, A4) == plan_pages(1600, 12345, A4)
