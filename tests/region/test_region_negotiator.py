"""
Region Negotiator Tests

Tests for region selection showing:
- Even-dimension flooring and minimum size
- Re-prompting after a too-small drag
- Cancellation
- Display origin and scale factor conversion
- Fixed (non-interactive) selector

To run:
    pytest tests/region/test_region_negotiator.py -v
"""

import pytest

from region.controllers.region_negotiator import RegionNegotiator, floor_even, validate_region
from region.implementations.fixed_selector import FixedRegionSelector
from region.implementations.mock_selector import MockRegionSelector
from region.interfaces.region_selector_interface import (
    DisplayInfo,
    DragSelection,
    InvalidRegionError,
    Rect,
    RegionTooSmallError,
)

# =============================================================================
# VALIDATION
# =============================================================================


@pytest.mark.unit
def test_floor_even():
    assert floor_even(17) == 16
    assert floor_even(16) == 16
    assert floor_even(1) == 0


@pytest.mark.unit
def test_validate_region_floors_odd_dimensions():
    rect = validate_region(Rect(10, 20, 301, 199))

    assert rect == Rect(10, 20, 300, 198)


@pytest.mark.unit
def test_validate_region_keeps_even_dimensions():
    assert validate_region(Rect(0, 0, 640, 480)) == Rect(0, 0, 640, 480)


@pytest.mark.unit
def test_validate_region_rejects_small():
    with pytest.raises(RegionTooSmallError) as excinfo:
        validate_region(Rect(0, 0, 15, 100), min_size=16)

    assert excinfo.value.min_size == 16
    assert "16x16" in str(excinfo.value)


@pytest.mark.unit
def test_validate_region_odd_minimum_checked_after_flooring():
    with pytest.raises(RegionTooSmallError):
        validate_region(Rect(0, 0, 17, 17), min_size=17)


@pytest.mark.unit
def test_validate_region_rejects_negative_origin():
    with pytest.raises(InvalidRegionError):
        validate_region(Rect(-1, 0, 100, 100))


@pytest.mark.unit
def test_validate_region_rejects_oversized():
    with pytest.raises(InvalidRegionError):
        validate_region(Rect(0, 0, 8000, 100))


# =============================================================================
# NEGOTIATION
# =============================================================================


@pytest.mark.unit
def test_select_region_accepts_first_valid_drag():
    selector = MockRegionSelector([DragSelection(100, 50, 741, 531)])

    rect = RegionNegotiator(selector).select_region()

    assert rect == Rect(100, 50, 640, 480)
    assert selector.get_prompt_count() == 1
    assert selector.closed is True


@pytest.mark.unit
def test_reversed_drag_is_normalised():
    selector = MockRegionSelector([DragSelection(740, 530, 100, 50)])

    rect = RegionNegotiator(selector).select_region()

    assert rect == Rect(100, 50, 640, 480)


@pytest.mark.unit
def test_too_small_drag_reprompts_with_message():
    selector = MockRegionSelector([
        DragSelection(0, 0, 5, 5),
        DragSelection(0, 0, 200, 100),
    ])

    rect = RegionNegotiator(selector, min_size=16).select_region()

    assert rect == Rect(0, 0, 200, 100)
    assert selector.prompts[0] is None
    assert "too small" in selector.prompts[1]


@pytest.mark.unit
def test_cancel_returns_none():
    selector = MockRegionSelector([None])

    assert RegionNegotiator(selector).select_region() is None
    assert selector.closed is True


@pytest.mark.unit
def test_max_prompts_gives_up():
    selector = MockRegionSelector([DragSelection(0, 0, 2, 2)] * 5)

    assert RegionNegotiator(selector, max_prompts=2).select_region() is None
    assert selector.get_prompt_count() == 2


@pytest.mark.unit
def test_display_origin_and_scale_applied():
    display = DisplayInfo(x=1920, y=0, width=1280, height=720, scale_factor=1.5)
    selector = MockRegionSelector([DragSelection(10, 20, 110, 120)], display=display)

    rect = RegionNegotiator(selector).select_region()

    # (10 + 1920) * 1.5 = 2895, 20 * 1.5 = 30, 100 * 1.5 = 150
    assert rect == Rect(2895, 30, 150, 150)


# =============================================================================
# FIXED SELECTOR
# =============================================================================


@pytest.mark.unit
def test_fixed_selector_reports_rect():
    selector = FixedRegionSelector(Rect(100, 100, 1281, 721))

    rect = RegionNegotiator(selector).select_region()

    assert rect == Rect(100, 100, 1280, 720)


@pytest.mark.unit
def test_fixed_selector_too_small_cancels():
    selector = FixedRegionSelector(Rect(0, 0, 4, 4))

    assert RegionNegotiator(selector).select_region() is None
