"""
Interior item calculator.

sqft:
    L x H when length and height are both > 0 (vertical surfaces: cabinets, walls)
    L x W when only width is given             (horizontal surfaces: counters, ledges)
    0 otherwise

rate_auto  = resolve_rate(effective build type, material, finish, hardware)
unit_price = rate_override while the override is active, else rate_auto
total      = unit_price x sqft

A manual rate survives dimension edits but not edits to the inputs that fed
the automatic rate: changing material, finish, hardware or description drops
the override and goes back to rate_auto.
"""

import logging
from dataclasses import asdict, dataclass, fields as dataclass_fields, replace
from typing import Optional

from ..rates import (
    DEFAULT_BUILD_TYPE,
    DEFAULT_CORE,
    DEFAULT_FINISH,
    DEFAULT_HARDWARE,
    effective_build_type,
    resolve_rate,
)
from .base import BaseItemCalculator, line_amount, optional_number, parse_number, round_area

logger = logging.getLogger(__name__)

DIMENSION_FIELDS = ("length", "height", "width")

# Editing any of these invalidates a manual rate
OVERRIDE_RESET_FIELDS = ("material", "finish", "hardware", "description")


def interior_sqft(length, height, width) -> float:
    """Area with the height-over-width tie-break."""
    l = parse_number(length, "length")
    h = parse_number(height, "height")
    w = parse_number(width, "width")
    if l > 0 and h > 0:
        return round_area(l * h)
    if l > 0 and w > 0:
        return round_area(l * w)
    return 0.0


def effective_rate(rate_auto: float, rate_override: Optional[float], is_rate_overridden: bool) -> float:
    if is_rate_overridden and rate_override is not None and rate_override > 0:
        return rate_override
    return rate_auto


@dataclass
class InteriorItemState:
    room_type: str = ""
    description: str = ""
    length: Optional[float] = None
    height: Optional[float] = None
    width: Optional[float] = None
    build_type: str = DEFAULT_BUILD_TYPE
    material: str = DEFAULT_CORE
    finish: str = DEFAULT_FINISH
    hardware: str = DEFAULT_HARDWARE
    sqft: float = 0.0
    rate_auto: float = 0.0
    rate_override: Optional[float] = None
    is_rate_overridden: bool = False
    unit_price: float = 0.0
    total_price: float = 0.0

    @classmethod
    def from_source(cls, source) -> "InteriorItemState":
        """Build a state from a dict or an ORM row."""
        values = {}
        for f in dataclass_fields(cls):
            value = source.get(f.name) if isinstance(source, dict) else getattr(source, f.name, None)
            if value is not None:
                values[f.name] = value
        return cls(**values)

    def to_dict(self) -> dict:
        return asdict(self)


def _clear_override(state: InteriorItemState) -> InteriorItemState:
    return replace(state, is_rate_overridden=False, rate_override=None)


def recompute(state: InteriorItemState, adders: dict = None) -> InteriorItemState:
    """Recompute every derived field from the state's inputs."""
    sqft = interior_sqft(state.length, state.height, state.width)
    rate_auto = resolve_rate(
        effective_build_type(state.build_type, state.description),
        state.material,
        state.finish,
        state.hardware,
        adders,
    )
    unit_price = effective_rate(rate_auto, state.rate_override, state.is_rate_overridden)
    return replace(
        state,
        sqft=sqft,
        rate_auto=rate_auto,
        unit_price=unit_price,
        total_price=line_amount(unit_price, sqft),
    )


def apply_interior_change(state: InteriorItemState, changes: dict, adders: dict = None) -> InteriorItemState:
    """
    Apply a user edit to an interior item and return the new state.

    Transitions:
        material / finish / hardware / description changed
            -> is_rate_overridden False, rate_override None, unit_price = rate_auto
        rate_override set to a value > 0
            -> override active, unit_price = rate_override
        rate_override set to None / 0, or is_rate_overridden set False
            -> override cleared
        length / height / width changed
            -> sqft recomputed, override kept
    Derived fields (sqft, rate_auto, unit_price, total_price) in ``changes``
    are ignored; they are always recomputed.

    Raises InvalidNumericInput for malformed dimensions or a negative rate.
    The input state is never modified.
    """
    updates = {}
    for key in DIMENSION_FIELDS:
        if key in changes:
            updates[key] = optional_number(changes[key], key)

    for key in ("room_type", "description", "build_type", "material", "finish", "hardware"):
        if key in changes:
            updates[key] = changes[key] if changes[key] is not None else ""

    for key, default in (("material", DEFAULT_CORE), ("finish", DEFAULT_FINISH),
                         ("hardware", DEFAULT_HARDWARE), ("build_type", DEFAULT_BUILD_TYPE)):
        if key in updates and not updates[key]:
            updates[key] = default

    new_state = replace(state, **updates)

    if any(key in updates and updates[key] != getattr(state, key) for key in OVERRIDE_RESET_FIELDS):
        if state.is_rate_overridden:
            logger.debug("Rate override cleared by change to %s",
                         [k for k in OVERRIDE_RESET_FIELDS if k in updates])
        new_state = _clear_override(new_state)

    if changes.get("is_rate_overridden") is False:
        new_state = _clear_override(new_state)

    if "rate_override" in changes:
        raw = changes["rate_override"]
        if raw in (None, ""):
            new_state = _clear_override(new_state)
        else:
            override = parse_number(raw, "rate_override")
            if override > 0:
                new_state = replace(new_state, rate_override=override, is_rate_overridden=True)
            else:
                new_state = _clear_override(new_state)

    return recompute(new_state, adders)


class InteriorItemCalculator(BaseItemCalculator):
    """Normalizes interior item payloads; client-sent derived values are discarded."""

    def __init__(self, adders: dict = None):
        self.adders = adders

    def calculate(self, fields: dict) -> dict:
        state = apply_interior_change(InteriorItemState(), fields, self.adders)
        return state.to_dict()

    def update(self, current, changes: dict) -> dict:
        """Apply ``changes`` on top of an existing item (dict or ORM row)."""
        state = apply_interior_change(InteriorItemState.from_source(current), changes, self.adders)
        return state.to_dict()

