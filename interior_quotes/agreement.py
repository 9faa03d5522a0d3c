"""
Service agreement data.

Composes everything the agreement document shows from a quotation dict
(see routers.quotations.quotation_to_dict) and its saved customizations:
room-wise interior totals, the false ceiling total, combined financials,
branded materials in use and the payment schedule.
"""

from datetime import datetime

from .formatters import group_by_room
from .pricing_engine import PricingEngine
from .rates import DEFAULT_CORE, DEFAULT_FINISH, DEFAULT_HARDWARE

# Names that mean "no specific brand" and are left out of the materials list
GENERIC_NAMES = {
    "core": {DEFAULT_CORE, ""},
    "finish": {DEFAULT_FINISH, "Generic Laminate (Nimmi)", ""},
    "hardware": {DEFAULT_HARDWARE, "Generic", ""},
}

ITEM_FIELDS = {"core": "material", "finish": "finish", "hardware": "hardware"}


def materials_used(interior_items) -> dict:
    """Distinct branded materials per kind, in first-seen order."""
    used = {kind: [] for kind in ITEM_FIELDS}
    for item in interior_items:
        for kind, field in ITEM_FIELDS.items():
            name = (item.get(field) or "").strip()
            if name not in GENERIC_NAMES[kind] and name not in used[kind]:
                used[kind].append(name)
    return used


def room_totals(interior_items) -> list:
    return [
        {"room": room, "subtotal": round(sum(i.get("total_price") or 0 for i in items), 2)}
        for room, items in group_by_room(interior_items)
    ]


def build_agreement_data(quote: dict, engine: PricingEngine = None) -> dict:
    """
    Returns:
        {
            quote_id, client_name, project_name, project_address, agreement_date,
            room_totals: [{room, subtotal}], fc_subtotal, has_false_ceiling,
            materials_used: {core, finish, hardware},
            financials: combined discount/GST breakdown,
            payment_schedule: [{label, percent, amount}],
            additional_terms: [...],
        }

    Raises ValueError for a custom payment schedule that does not sum to 100%.
    """
    engine = engine or PricingEngine()
    interiors = quote.get("interior_items", [])
    ceilings = quote.get("false_ceiling_items", [])
    others = quote.get("other_items", [])
    customizations = quote.get("agreement_customizations") or {}

    totals = engine.aggregate(interiors, ceilings, others)
    financials = engine.apply_discount_and_tax(
        totals["grand_subtotal"], quote.get("discount_type"), quote.get("discount_value"),
    )

    return {
        "quote_id": quote.get("quote_id"),
        "client_name": quote.get("client_name"),
        "project_name": quote.get("project_name"),
        "project_address": quote.get("project_address"),
        "agreement_date": customizations.get("agreement_date") or quote.get("approved_at") or datetime.utcnow().isoformat(),
        "room_totals": room_totals(interiors),
        "interiors_subtotal": totals["interiors_subtotal"],
        "fc_subtotal": totals["fc_subtotal"],
        "has_false_ceiling": bool(ceilings or others),
        "materials_used": materials_used(interiors),
        "financials": financials,
        "payment_schedule": engine.payment_schedule(financials["final_total"], customizations.get("payment_schedule")),
        "additional_terms": customizations.get("additional_terms") or [],
    }
