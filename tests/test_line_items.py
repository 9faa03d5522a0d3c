"""
Line-item calculator tests.

Tests:
1-4.   Interior sqft (height precedence, width fallback, zero)
5-8.   False ceiling area and other item totals
9-14.  Decimal input sanitization and numeric parsing
15-21. Rate override transitions
22.    Calculator registry
"""

import pytest

from interior_quotes.calculators.base import (
    InvalidNumericInput,
    optional_number,
    parse_number,
    sanitize_decimal_input,
)
from interior_quotes.calculators.false_ceiling import FalseCeilingCalculator, false_ceiling_area
from interior_quotes.calculators.interior import (
    InteriorItemCalculator,
    InteriorItemState,
    apply_interior_change,
    interior_sqft,
)
from interior_quotes.calculators.other_item import OtherItemCalculator, other_item_total
from interior_quotes.calculators.registry import get_calculator, list_calculators
from interior_quotes.rates import resolve_rate


def _sample_item(**overrides):
    """Kitchen base unit, 10 x 8 with a 5 width, generic materials."""
    fields = {
        "room_type": "Kitchen",
        "description": "Base cabinets",
        "length": 10,
        "height": 8,
        "width": 5,
        "material": "Generic Ply",
        "finish": "Generic Laminate",
        "hardware": "Nimmi",
        "build_type": "handmade",
    }
    fields.update(overrides)
    return apply_interior_change(InteriorItemState(), fields)


def _overridden_item():
    return apply_interior_change(_sample_item(), {"rate_override": 2000})


# ============================================================
# 1-4. Interior sqft
# ============================================================

def test_example_item_uses_height_precedence():
    """L=10, H=8, W=5 -> 80 sqft at the generic handmade rate."""
    item = _sample_item()
    rate = resolve_rate("handmade", "Generic Ply", "Generic Laminate", "Nimmi")
    assert item.sqft == 80.00
    assert item.unit_price == rate
    assert item.total_price == rate * 80


def test_width_used_when_height_missing():
    assert interior_sqft(10, None, 2.5) == 25.0
    assert interior_sqft("10", "", "2.5") == 25.0


def test_sqft_zero_without_second_dimension():
    assert interior_sqft(10, None, None) == 0.0
    assert interior_sqft(None, 8, 5) == 0.0


def test_sqft_rounded_to_two_decimals():
    assert interior_sqft(3.333, 3, None) == 9.99
    assert interior_sqft(1.11, 1.11, None) == 1.23


# ============================================================
# 5-8. False ceiling and other items
# ============================================================

def test_false_ceiling_area_and_total():
    result = FalseCeilingCalculator().calculate({"length": "12", "width": "10.5", "unit_price": 110})
    assert result["area"] == 126.0
    assert result["length"] == 12.0
    assert result["total_price"] == 13860.0
    assert false_ceiling_area(12, 0) == 0.0


def test_other_item_count_multiplies():
    assert other_item_total("count", 6, 850) == 5100.0
    result = OtherItemCalculator().calculate({"item_type": "Lights", "value_type": "count", "value": "4", "unit_price": "250"})
    assert result["total_price"] == 1000.0


def test_other_item_lumpsum_ignores_unit_price():
    assert other_item_total("lumpsum", 25000, 999) == 25000.0
    result = OtherItemCalculator().calculate({"item_type": "Painting", "value": 18000})
    assert result["value_type"] == "lumpsum"
    assert result["total_price"] == 18000.0


def test_unknown_value_type_reads_as_lumpsum():
    result = OtherItemCalculator().calculate({"value_type": "per_metre", "value": 900, "unit_price": 40})
    assert result["value_type"] == "lumpsum"
    assert result["total_price"] == 900.0


# ============================================================
# 9-14. Sanitization and parsing
# ============================================================

def test_sanitize_keeps_one_separator_and_two_decimals():
    assert sanitize_decimal_input("12.345") == "12.34"
    assert sanitize_decimal_input("1.2.3") == "1.23"
    assert sanitize_decimal_input("abc7x8") == "78"
    assert sanitize_decimal_input("12.") == "12."
    assert sanitize_decimal_input(None) == ""


def test_parse_number_rejects_text_and_negatives():
    assert parse_number("", "length") == 0.0
    assert parse_number("7.5", "length") == 7.5
    with pytest.raises(InvalidNumericInput) as exc:
        parse_number("ten", "length")
    assert exc.value.field == "length"
    with pytest.raises(InvalidNumericInput):
        parse_number(-1, "rate_override")


def test_parse_number_sanitizes_typed_text():
    """Text is cleaned the same way the scope screen cleans keystrokes."""
    assert parse_number("10.567", "length") == 10.56
    assert parse_number("1.2.3", "length") == 1.23
    assert parse_number("12.", "length") == 12.0
    assert parse_number("12ft", "length") == 12.0
    with pytest.raises(InvalidNumericInput):
        parse_number(".", "length")
    with pytest.raises(InvalidNumericInput):
        parse_number("-4", "length")


def test_parse_number_clamps_numbers_to_two_decimals():
    assert parse_number(10.567, "length") == 10.56
    assert parse_number(0.1 + 0.2, "length") == 0.3
    assert parse_number(7, "length") == 7.0
    assert optional_number("", "width") is None
    assert optional_number("2.999", "width") == 2.99


def test_interior_edit_uses_sanitized_dimensions():
    item = apply_interior_change(InteriorItemState(), {"length": "10.567", "height": "8"})
    assert item.length == 10.56
    assert item.sqft == 84.48
    item = apply_interior_change(item, {"length": "1.2.3"})
    assert item.length == 1.23
    assert item.sqft == 9.84


def test_false_ceiling_and_other_items_use_sanitized_inputs():
    fc = FalseCeilingCalculator().calculate({"length": "12.345", "width": "10.5.5", "unit_price": "110.999"})
    assert fc["length"] == 12.34
    assert fc["width"] == 10.55
    assert fc["area"] == 130.19
    assert fc["unit_price"] == 110.99
    assert fc["total_price"] == pytest.approx(14449.79)

    other = OtherItemCalculator().calculate({"value_type": "count", "value": "4.9.9", "unit_price": 250})
    assert other["value"] == 4.99
    assert other["total_price"] == 1247.5


def test_invalid_dimension_leaves_state_untouched():
    """A malformed edit raises and the input state is not modified."""
    item = _sample_item()
    with pytest.raises(InvalidNumericInput):
        apply_interior_change(item, {"length": "twelve"})
    assert item.length == 10
    assert item.sqft == 80.0


# ============================================================
# 15-21. Rate override transitions
# ============================================================

def test_override_replaces_unit_price_and_keeps_auto_rate():
    item = _overridden_item()
    assert item.is_rate_overridden is True
    assert item.unit_price == 2000
    assert item.rate_auto == 1300
    assert item.total_price == 2000 * 80


@pytest.mark.parametrize("field,value", [
    ("material", "Century Ply"),
    ("finish", "Acrylic"),
    ("hardware", "Hettich"),
    ("description", "Tall unit"),
])
def test_override_reset_on_rate_input_change(field, value):
    """Changing material, finish, hardware or description drops the manual rate."""
    item = apply_interior_change(_overridden_item(), {field: value})
    assert item.is_rate_overridden is False
    assert item.rate_override is None
    assert item.unit_price == item.rate_auto
    assert item.rate_auto == resolve_rate("handmade", item.material, item.finish, item.hardware)


def test_dimension_change_keeps_override():
    item = apply_interior_change(_overridden_item(), {"length": 12})
    assert item.is_rate_overridden is True
    assert item.sqft == 96.0
    assert item.total_price == 2000 * 96


def test_same_value_does_not_reset_override():
    item = apply_interior_change(_overridden_item(), {"material": "Generic Ply"})
    assert item.is_rate_overridden is True


def test_explicit_override_wins_over_reset_in_same_edit():
    item = apply_interior_change(_overridden_item(), {"material": "Century Ply", "rate_override": 2500})
    assert item.is_rate_overridden is True
    assert item.unit_price == 2500
    assert item.rate_auto == 1400


def test_clearing_override_returns_to_auto_rate():
    for change in ({"rate_override": None}, {"rate_override": 0}, {"is_rate_overridden": False}):
        item = apply_interior_change(_overridden_item(), change)
        assert item.is_rate_overridden is False
        assert item.unit_price == 1300


def test_wall_paneling_on_factory_project_prices_handmade():
    item = _sample_item(description="Custom wall paneling", build_type="factory")
    assert item.rate_auto == 1300


def test_calculator_update_reads_existing_values():
    calc = InteriorItemCalculator()
    current = _overridden_item().to_dict()
    updated = calc.update(current, {"finish": "Merino"})
    assert updated["is_rate_overridden"] is False
    assert updated["unit_price"] == 1400
    assert updated["sqft"] == 80.0


# ============================================================
# 22. Registry
# ============================================================

def test_registry_lists_and_builds_calculators():
    assert list_calculators() == ["interior", "false_ceiling", "other"]
    assert isinstance(get_calculator("interior", {"core": {}}), InteriorItemCalculator)
    with pytest.raises(ValueError):
        get_calculator("plumbing")
