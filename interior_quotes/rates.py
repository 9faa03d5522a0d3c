"""
Rate resolution for interior items.

Rate per sqft = base rate for the build type
              + core material adder
              + finish adder
              + hardware adder

Lookup is total: missing selections fall back to the generic defaults
(Generic Ply / Generic Laminate / Nimmi), an unknown build type prices as
handmade, and a brand name that is not in the adder table prices like its
generic default. The active brand table from the database can be passed in
as ``adders`` and wins over the built-in table for the names it carries.

All prices are INR per square foot.
"""

BUILD_TYPES = ("handmade", "factory")
DEFAULT_BUILD_TYPE = "handmade"

BASE_RATES = {
    "handmade": 1300,   # work-on-site carpentry
    "factory": 1500,    # factory-finished modules
}

DEFAULT_CORE = "Generic Ply"
DEFAULT_FINISH = "Generic Laminate"
DEFAULT_HARDWARE = "Nimmi"

STANDARD_BRAND_ADDER = 100

# Acrylic is the one finish priced above the standard branded adder.
# It replaces the +100 rather than stacking on it.
ACRYLIC_FINISH = "Acrylic"
ACRYLIC_FINISH_ADDER = 200

CORE_ADDERS = {
    "Generic Ply": 0,
    "Century Ply": STANDARD_BRAND_ADDER,
    "Green Ply": STANDARD_BRAND_ADDER,
    "Greenply": STANDARD_BRAND_ADDER,
    "Kitply": STANDARD_BRAND_ADDER,
    "HDHMR": STANDARD_BRAND_ADDER,
    "BWP": STANDARD_BRAND_ADDER,
    "MDF": STANDARD_BRAND_ADDER,
    "HDF": STANDARD_BRAND_ADDER,
}

FINISH_ADDERS = {
    "Generic Laminate": 0,
    "Generic Laminate (Nimmi)": 0,
    "Greenlam": STANDARD_BRAND_ADDER,
    "Merino": STANDARD_BRAND_ADDER,
    "Century Laminate": STANDARD_BRAND_ADDER,
    "Duco": STANDARD_BRAND_ADDER,
    "PU": STANDARD_BRAND_ADDER,
    ACRYLIC_FINISH: ACRYLIC_FINISH_ADDER,
    "Veneer": STANDARD_BRAND_ADDER,
    "Fluted Panel": STANDARD_BRAND_ADDER,
    "Back Painted Glass": STANDARD_BRAND_ADDER,
    "CNC Finish": STANDARD_BRAND_ADDER,
}

HARDWARE_ADDERS = {
    "Nimmi": 0,
    "Generic": 0,
    "Ebco": STANDARD_BRAND_ADDER,
    "Hettich": STANDARD_BRAND_ADDER,
    "Häfele": STANDARD_BRAND_ADDER,
    "Hafele": STANDARD_BRAND_ADDER,
    "Sleek": STANDARD_BRAND_ADDER,
    "Blum": STANDARD_BRAND_ADDER,
}

DEFAULT_ADDERS = {
    "core": CORE_ADDERS,
    "finish": FINISH_ADDERS,
    "hardware": HARDWARE_ADDERS,
}

# Descriptions that are always built on site, whatever the project build type
ALWAYS_HANDMADE_KEYWORDS = (
    "custom wall highlight",
    "custom wall paneling",
    "wall highlights",
    "wall paneling",
)


def normalize_build_type(build_type) -> str:
    """Map any input to a known build type; unknown values price as handmade."""
    value = str(build_type or "").strip().lower()
    return value if value in BUILD_TYPES else DEFAULT_BUILD_TYPE


def is_always_handmade(description) -> bool:
    desc = str(description or "").lower()
    return any(keyword in desc for keyword in ALWAYS_HANDMADE_KEYWORDS)


def effective_build_type(project_build_type, description) -> str:
    """Wall highlights and paneling are handmade even on factory projects."""
    if is_always_handmade(description):
        return "handmade"
    return normalize_build_type(project_build_type)


def _adder(kind: str, name: str, adders: dict = None) -> float:
    overrides = (adders or {}).get(kind) or {}
    if name in overrides:
        return float(overrides[name])
    return float(DEFAULT_ADDERS[kind].get(name, 0))


def resolve_rate(build_type, core_material, finish_material, hardware_brand,
                 adders: dict = None) -> float:
    """
    Resolve the per-sqft rate for one material combination.

    Args:
        build_type: "handmade" | "factory" (anything else prices as handmade)
        core_material: core board name, e.g. "Century Ply"
        finish_material: finish name, e.g. "Acrylic"
        hardware_brand: hardware brand name, e.g. "Hettich"
        adders: optional {"core": {name: adder}, "finish": {...}, "hardware": {...}}
                from the active brand table

    Returns:
        Rate in INR per sqft. Never None.
    """
    base = BASE_RATES[normalize_build_type(build_type)]
    core = core_material or DEFAULT_CORE
    finish = finish_material or DEFAULT_FINISH
    hardware = hardware_brand or DEFAULT_HARDWARE

    return float(
        base
        + _adder("core", core, adders)
        + _adder("finish", finish, adders)
        + _adder("hardware", hardware, adders)
    )
