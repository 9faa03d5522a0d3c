"""
Calculator registry: maps line-item kinds to calculator classes.
"""

from .base import BaseItemCalculator
from .false_ceiling import FalseCeilingCalculator
from .interior import InteriorItemCalculator
from .other_item import OtherItemCalculator

CALCULATOR_REGISTRY: dict[str, type] = {
    "interior": InteriorItemCalculator,
    "false_ceiling": FalseCeilingCalculator,
    "other": OtherItemCalculator,
}


def get_calculator(kind: str, adders: dict = None) -> BaseItemCalculator:
    """Returns a calculator for an item kind, or raises ValueError."""
    if kind not in CALCULATOR_REGISTRY:
        raise ValueError(
            f"No calculator registered for item kind: {kind}. "
            f"Available: {list(CALCULATOR_REGISTRY.keys())}"
        )
    if kind == "interior":
        return InteriorItemCalculator(adders)
    return CALCULATOR_REGISTRY[kind]()


def list_calculators() -> list[str]:
    return list(CALCULATOR_REGISTRY.keys())
