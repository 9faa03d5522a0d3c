"""
Shared helpers for the line-item calculators.

Input: raw field values as the scope screen sends them (strings, numbers or None)
Output: the derived fields (area / sqft, unit price, total price) the API stores

Numbers typed into the scope screen are normalized with
``sanitize_decimal_input`` before they ever reach a calculator.
"""

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

MAX_FRACTION_DIGITS = 2


class InvalidNumericInput(ValueError):
    """A numeric field could not be accepted. The stored value stays as it was."""

    def __init__(self, field: str, value, reason: str = "must be a number"):
        self.field = field
        self.value = value
        super().__init__(f"{field} {reason} (got {value!r})")


def sanitize_decimal_input(text) -> str:
    """
    Normalize a keystroke-level numeric string.

    Keeps digits and one decimal point, clamps to two fractional digits.
    Every separator after the first is dropped, so "1.2.3" becomes "1.23".
    A trailing point is kept so partially typed values ("12.") survive.
    """
    if text is None:
        return ""
    kept = "".join(ch for ch in str(text) if ch.isdigit() or ch == ".")
    if "." not in kept:
        return kept
    whole, _, rest = kept.partition(".")
    fraction = rest.replace(".", "")[:MAX_FRACTION_DIGITS]
    return f"{whole}.{fraction}"


def _clamp_fraction(number: float) -> float:
    """Drop fractional digits past the second, the way typed input is clamped."""
    text = sanitize_decimal_input(f"{abs(number):.10f}")
    clamped = float(text)
    return -clamped if number < 0 else clamped


def parse_number(value, field: str = "value", allow_negative: bool = False) -> float:
    """
    Parse a numeric field. Empty and None read as 0.

    Text goes through ``sanitize_decimal_input`` first, so "1.2.3" reads as
    1.23 and "10.567" as 10.56. Numbers are clamped to 2 fractional digits
    the same way.

    Raises InvalidNumericInput for text with no digits left after
    sanitizing, and for negative numbers unless allow_negative is set.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise InvalidNumericInput(field, value)
    if isinstance(value, (int, float)):
        number = float(value)
        if number != number or number in (float("inf"), float("-inf")):
            raise InvalidNumericInput(field, value)
    else:
        text = str(value).strip()
        if not text:
            return 0.0
        cleaned = sanitize_decimal_input(text)
        if not cleaned.strip("."):
            raise InvalidNumericInput(field, value)
        number = float(cleaned)
        if text.startswith("-"):
            number = -number
    if number < 0 and not allow_negative:
        raise InvalidNumericInput(field, value, "must not be negative")
    return _clamp_fraction(number)


def optional_number(value, field: str = "value"):
    """Like parse_number, but an empty field stays None instead of reading as 0."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_number(value, field)


def round_area(value: float) -> float:
    """Areas are stored with 2 decimals."""
    return round(value, 2)


def round_currency(value: float) -> float:
    """Rupees and paise."""
    return round(value, 2)


def line_amount(rate: float, area: float) -> float:
    """Amount for one line: rate x area, in paise precision."""
    return round_currency(rate * area)


class BaseItemCalculator(ABC):
    """All line-item calculators inherit from this."""

    @abstractmethod
    def calculate(self, fields: dict) -> dict:
        """
        Takes the raw item fields.
        Returns the fields with every derived value recomputed.
        """
        pass

    def number(self, fields: dict, key: str) -> float:
        return parse_number(fields.get(key), key)
