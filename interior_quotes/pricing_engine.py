"""
Pricing Engine: totals, discount, GST and the two-document split.

Pure math, no persistence. Line items come in (dicts or ORM rows with a
``total_price``), subtotals and discount/GST breakdowns come out.

    interiors_subtotal = sum(interior item totals)
    fc_subtotal        = sum(false ceiling item totals) + sum(other item totals)
    grand_subtotal     = interiors_subtotal + fc_subtotal

    discount   = subtotal x pct / 100   (percent)   |   value   (amount)
    discounted = max(0, subtotal - discount)
    gst        = discounted x 18%
    final      = discounted + gst

The interiors quotation and the false ceiling quotation are issued as two
separate PDFs. Each shows its own discount, GST and final total, and the two
together reconcile with the combined quotation.
"""

import logging

logger = logging.getLogger(__name__)

GST_RATE = 0.18
GST_PERCENT = 18

DISCOUNT_TYPES = ("percent", "amount")

DEFAULT_PAYMENT_SCHEDULE = [
    {"label": "Token Advance", "percent": 10},
    {"label": "Design Finalisation", "percent": 60},
    {"label": "Mid Execution", "percent": 25},
    {"label": "After Handover", "percent": 5},
]

TOTALS_KEYS = ("interiors_subtotal", "fc_subtotal", "grand_subtotal")


def _safe_number(value) -> float:
    """Treat missing or unparseable amounts as 0 when summing."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if number != number else number


def normalize_discount_type(discount_type) -> str:
    """Unknown or missing discount types read as percent, the quotation default."""
    value = str(getattr(discount_type, "value", discount_type) or "").strip().lower()
    return value if value in DISCOUNT_TYPES else "percent"


def _item_total(item) -> float:
    if isinstance(item, dict):
        return _safe_number(item.get("total_price"))
    return _safe_number(getattr(item, "total_price", None))


class PricingEngine:
    """Totals aggregation, discount/GST and per-document allocation."""

    GST_RATE = GST_RATE

    def aggregate(self, interior_items: list, false_ceiling_items: list, other_items: list) -> dict:
        """
        Sum line item totals into the quotation's subtotals.

        Other items are grouped with the false ceiling side.
        Same inputs always give the same dict.
        """
        interiors_subtotal = round(sum(_item_total(i) for i in interior_items), 2)
        fc_room_subtotal = sum(_item_total(i) for i in false_ceiling_items)
        fc_others_subtotal = sum(_item_total(i) for i in other_items)
        fc_subtotal = round(fc_room_subtotal + fc_others_subtotal, 2)
        return {
            "interiors_subtotal": interiors_subtotal,
            "fc_subtotal": fc_subtotal,
            "grand_subtotal": round(interiors_subtotal + fc_subtotal, 2),
        }

    def totals_changed(self, previous: dict, current: dict) -> bool:
        """True when any subtotal differs from the stored snapshot (or there is none)."""
        if not previous:
            return True
        return any(previous.get(key) != current.get(key) for key in TOTALS_KEYS)

    def discount_amount(self, subtotal: float, discount_type: str, discount_value: float) -> float:
        value = _safe_number(discount_value)
        discount_type = normalize_discount_type(discount_type)
        if discount_type == "percent":
            return subtotal * value / 100.0
        return value

    def apply_discount_and_tax(self, subtotal: float, discount_type: str, discount_value: float) -> dict:
        """
        Apply a discount then 18% GST.

        Returns:
            {subtotal, discount_type, discount_value, discount_amount,
             discounted, gst_amount, final_total}
        """
        subtotal = _safe_number(subtotal)
        discount_type = normalize_discount_type(discount_type)
        discount = self.discount_amount(subtotal, discount_type, discount_value)
        discounted = max(0.0, subtotal - discount)
        gst_amount = discounted * self.GST_RATE
        return {
            "subtotal": subtotal,
            "discount_type": discount_type,
            "discount_value": _safe_number(discount_value),
            "discount_amount": discount,
            "discounted": discounted,
            "gst_amount": gst_amount,
            "final_total": discounted + gst_amount,
        }

    def allocate_discount(self, interiors_subtotal: float, fc_subtotal: float,
                          discount_type: str, discount_value: float) -> dict:
        """
        Split one quotation discount across the interiors and false ceiling documents.

        percent: the same percentage on each subtotal.
        amount:  proportional to each subtotal's share of the grand subtotal;
                 both 0 when the grand subtotal is 0.

        Returns:
            {
                interiors_discount, fc_discount,
                interiors: apply_discount_and_tax(...) for the interiors document,
                false_ceiling: apply_discount_and_tax(...) for the FC document,
            }
        """
        interiors_subtotal = _safe_number(interiors_subtotal)
        fc_subtotal = _safe_number(fc_subtotal)
        discount_type = normalize_discount_type(discount_type)
        value = _safe_number(discount_value)

        if discount_type == "percent":
            interiors_discount = interiors_subtotal * value / 100.0
            fc_discount = fc_subtotal * value / 100.0
        else:
            grand_subtotal = interiors_subtotal + fc_subtotal
            if grand_subtotal > 0:
                interiors_discount = value * (interiors_subtotal / grand_subtotal)
                fc_discount = value * (fc_subtotal / grand_subtotal)
            else:
                interiors_discount = 0.0
                fc_discount = 0.0

        interiors = self.apply_discount_and_tax(interiors_subtotal, "amount", interiors_discount)
        false_ceiling = self.apply_discount_and_tax(fc_subtotal, "amount", fc_discount)
        # Each document still shows the quotation's own discount terms
        for doc in (interiors, false_ceiling):
            doc["discount_type"] = discount_type
            doc["discount_value"] = value

        return {
            "interiors_discount": interiors_discount,
            "fc_discount": fc_discount,
            "interiors": interiors,
            "false_ceiling": false_ceiling,
        }

    def quote_summary(self, totals: dict, discount_type: str, discount_value: float) -> dict:
        """Combined breakdown plus the per-document split for one set of subtotals."""
        combined = self.apply_discount_and_tax(totals.get("grand_subtotal", 0), discount_type, discount_value)
        allocation = self.allocate_discount(
            totals.get("interiors_subtotal", 0),
            totals.get("fc_subtotal", 0),
            discount_type,
            discount_value,
        )
        return {
            "totals": {key: totals.get(key, 0.0) for key in TOTALS_KEYS},
            "combined": combined,
            "interiors": allocation["interiors"],
            "false_ceiling": allocation["false_ceiling"],
            "gst_percent": GST_PERCENT,
        }

    def payment_schedule(self, final_total: float, schedule: list = None) -> list:
        """
        Milestone amounts for the agreement, rounded to whole rupees.

        Raises ValueError when the percentages do not add up to 100.
        """
        schedule = schedule or DEFAULT_PAYMENT_SCHEDULE
        total_pct = sum(_safe_number(m.get("percent")) for m in schedule)
        if abs(total_pct - 100) > 0.01:
            raise ValueError(f"Payment schedule percentages must sum to 100% (currently {total_pct:g}%)")
        return [
            {
                "label": m["label"],
                "percent": m["percent"],
                "amount": round(final_total * _safe_number(m["percent"]) / 100.0),
            }
            for m in schedule
        ]
