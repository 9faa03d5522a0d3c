"""
False ceiling item calculator.

area  = L x W when both are > 0, else 0
total = area x unit_price
"""

from .base import BaseItemCalculator, line_amount, optional_number, parse_number, round_area


def false_ceiling_area(length, width) -> float:
    l = parse_number(length, "length")
    w = parse_number(width, "width")
    if l > 0 and w > 0:
        return round_area(l * w)
    return 0.0


class FalseCeilingCalculator(BaseItemCalculator):

    def calculate(self, fields: dict) -> dict:
        area = false_ceiling_area(fields.get("length"), fields.get("width"))
        unit_price = self.number(fields, "unit_price")
        result = dict(fields)
        result["length"] = optional_number(fields.get("length"), "length")
        result["width"] = optional_number(fields.get("width"), "width")
        result["area"] = area
        result["unit_price"] = unit_price
        result["total_price"] = line_amount(unit_price, area)
        return result
