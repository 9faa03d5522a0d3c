"""
Rate resolution tests.

Tests:
1-4.  Base rates and default fallbacks
5-8.  Brand adders (standard, Acrylic, unknown names, database table)
9-11. Always-handmade descriptions
"""

from interior_quotes.rates import (
    ACRYLIC_FINISH_ADDER,
    BASE_RATES,
    effective_build_type,
    is_always_handmade,
    normalize_build_type,
    resolve_rate,
)


# ============================================================
# 1-4. Base rates and defaults
# ============================================================

def test_generic_handmade_is_base_rate():
    """Generic Ply + Generic Laminate + Nimmi on handmade prices at the base rate."""
    assert resolve_rate("handmade", "Generic Ply", "Generic Laminate", "Nimmi") == 1300


def test_generic_factory_is_base_rate():
    assert resolve_rate("factory", "Generic Ply", "Generic Laminate", "Nimmi") == 1500


def test_missing_selections_fall_back_to_generics():
    """None and empty strings resolve like the generic defaults."""
    assert resolve_rate("handmade", None, "", None) == 1300
    assert resolve_rate(None, None, None, None) == BASE_RATES["handmade"]


def test_unknown_build_type_prices_as_handmade():
    assert normalize_build_type("prefab") == "handmade"
    assert normalize_build_type(" Factory ") == "factory"
    assert resolve_rate("prefab", "Generic Ply", "Generic Laminate", "Nimmi") == 1300


# ============================================================
# 5-8. Adders
# ============================================================

def test_branded_selections_add_100_each():
    """Century Ply + Merino + Hettich on factory = 1500 + 3 x 100."""
    assert resolve_rate("factory", "Century Ply", "Merino", "Hettich") == 1800


def test_acrylic_finish_adds_200():
    rate = resolve_rate("handmade", "Generic Ply", "Acrylic", "Nimmi")
    assert rate == 1300 + ACRYLIC_FINISH_ADDER == 1500


def test_unknown_brand_names_price_as_generic():
    """Lookup is total: a name outside the table adds nothing and never raises."""
    rate = resolve_rate("handmade", "Mystery Board", "Unobtainium", "NoName")
    assert rate == 1300
    assert isinstance(rate, float)


def test_database_adders_override_builtin_table():
    """Active brand rows win over the built-in adders for the names they carry."""
    adders = {"core": {"Century Ply": 150}, "finish": {"Acrylic": 250}}
    assert resolve_rate("handmade", "Century Ply", "Acrylic", "Hettich", adders) == 1300 + 150 + 250 + 100


# ============================================================
# 9-11. Always-handmade descriptions
# ============================================================

def test_wall_paneling_is_always_handmade():
    assert is_always_handmade("Custom Wall Paneling - living")
    assert effective_build_type("factory", "Wall highlights behind TV") == "handmade"


def test_regular_items_keep_project_build_type():
    assert not is_always_handmade("Kitchen base cabinets")
    assert effective_build_type("factory", "Kitchen base cabinets") == "factory"


def test_empty_description_uses_project_build_type():
    assert effective_build_type("factory", None) == "factory"
