"""
Other items: painting, lights, fan hook rods and similar extras.

count   -> total = value x unit_price   (value is a quantity)
lumpsum -> total = value                (value is the amount itself)

Other items are totalled with the false ceiling side of the quotation.
"""

from .base import BaseItemCalculator, parse_number, round_currency

VALUE_TYPES = ("lumpsum", "count")


def other_item_total(value_type: str, value, unit_price) -> float:
    amount = parse_number(value, "value")
    if value_type == "count":
        return round_currency(amount * parse_number(unit_price, "unit_price"))
    return round_currency(amount)


class OtherItemCalculator(BaseItemCalculator):

    def calculate(self, fields: dict) -> dict:
        value_type = fields.get("value_type")
        if value_type not in VALUE_TYPES:
            value_type = "lumpsum"
        result = dict(fields)
        result["value_type"] = value_type
        result["value"] = self.number(fields, "value")
        result["unit_price"] = self.number(fields, "unit_price")
        result["total_price"] = other_item_total(value_type, fields.get("value"), result["unit_price"])
        return result
