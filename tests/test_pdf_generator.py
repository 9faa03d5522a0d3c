"""
PDF document tests.

Tests:
1-3. Quotation PDFs render
4-5. Agreement PDF and agreement data
6-9. Formatting helpers
"""

from datetime import date

from interior_quotes.agreement import build_agreement_data, materials_used
from interior_quotes.formatters import (
    format_dimensions,
    format_display_date,
    format_inr,
    format_inr_whole,
    sort_rooms,
    validity_date,
)
from interior_quotes.pdf_generator import (
    _safe,
    count_pages,
    generate_agreement_pdf,
    generate_false_ceiling_pdf,
    generate_interiors_pdf,
    merge_pdf_bytes,
)
from interior_quotes.pricing_engine import PricingEngine


def _sample_quote():
    """Quotation dict as routers.quotations.quotation_to_dict returns it."""
    return {
        "quote_id": "QT_251017_AB12",
        "project_name": "Lakeview 3BHK",
        "client_name": "A. Sharma",
        "project_address": "Flat 402, Lakeview Residency",
        "created_at": "2025-10-17T10:00:00",
        "discount_type": "percent",
        "discount_value": 10,
        "interior_items": [
            {"room_type": "Living", "description": "TV unit", "length": 8, "height": 6, "width": None,
             "sqft": 48.0, "material": "Century Ply", "finish": "Acrylic", "hardware": "Hettich",
             "unit_price": 1700.0, "total_price": 81600.0},
            {"room_type": "Kitchen", "description": "Base cabinets", "length": 10, "height": 3, "width": 2,
             "sqft": 30.0, "material": "Generic Ply", "finish": "Generic Laminate", "hardware": "Nimmi",
             "unit_price": 1300.0, "total_price": 39000.0},
        ],
        "false_ceiling_items": [
            {"room_type": "Living", "description": "Gypsum ceiling", "length": 12, "width": 10,
             "area": 120.0, "unit_price": 110.0, "total_price": 13200.0},
        ],
        "other_items": [
            {"item_type": "Painting", "description": "Full home", "value_type": "lumpsum",
             "value": 45000.0, "unit_price": 0.0, "total_price": 45000.0},
            {"item_type": "Lights", "description": "COB lights", "value_type": "count",
             "value": 20.0, "unit_price": 350.0, "total_price": 7000.0},
        ],
    }


def _breakdowns(quote):
    engine = PricingEngine()
    totals = engine.aggregate(quote["interior_items"], quote["false_ceiling_items"], quote["other_items"])
    return engine.quote_summary(totals, quote["discount_type"], quote["discount_value"])


# ============================================================
# 1-3. Quotation PDFs
# ============================================================

def test_interiors_pdf_generates_valid_bytes():
    quote = _sample_quote()
    pdf_bytes = generate_interiors_pdf(quote, _breakdowns(quote)["interiors"])
    assert isinstance(pdf_bytes, bytes)
    assert pdf_bytes[:5] == b"%PDF-"
    assert count_pages(pdf_bytes) >= 1


def test_false_ceiling_pdf_generates_valid_bytes():
    quote = _sample_quote()
    pdf_bytes = generate_false_ceiling_pdf(quote, _breakdowns(quote)["false_ceiling"])
    assert pdf_bytes[:5] == b"%PDF-"


def test_empty_quotation_still_renders():
    quote = dict(_sample_quote(), interior_items=[], false_ceiling_items=[], other_items=[])
    pdf_bytes = generate_interiors_pdf(quote, _breakdowns(quote)["interiors"])
    assert pdf_bytes[:5] == b"%PDF-"


# ============================================================
# 4-5. Agreement
# ============================================================

def test_agreement_data_and_pdf():
    quote = _sample_quote()
    agreement = build_agreement_data(quote)
    assert [r["room"] for r in agreement["room_totals"]] == ["Kitchen", "Living"]
    assert agreement["has_false_ceiling"] is True
    assert agreement["fc_subtotal"] == 65200.0
    assert agreement["financials"]["subtotal"] == 185800.0
    assert sum(m["percent"] for m in agreement["payment_schedule"]) == 100

    pdf_bytes = generate_agreement_pdf(agreement)
    merged = merge_pdf_bytes([pdf_bytes, pdf_bytes])
    assert count_pages(merged) == 2 * count_pages(pdf_bytes)


def test_materials_used_lists_only_brands():
    used = materials_used(_sample_quote()["interior_items"])
    assert used == {"core": ["Century Ply"], "finish": ["Acrylic"], "hardware": ["Hettich"]}


# ============================================================
# 6-9. Formatting
# ============================================================

def test_inr_lakh_grouping():
    assert format_inr(1234) == "₹1,234.00"
    assert format_inr(123456) == "₹1,23,456.00"
    assert format_inr(12345678.5) == "₹1,23,45,678.50"
    assert format_inr(-999) == "-₹999.00"
    assert format_inr(None) == "₹0.00"
    assert format_inr_whole(106200.4) == "₹1,06,200"
    assert _safe(format_inr(1500)) == "Rs. 1,500.00"


def test_dates():
    assert format_display_date("2025-11-01T09:30:00") == "1 November 2025"
    assert format_display_date(None) == ""
    assert validity_date(date(2025, 10, 17), days=30) == date(2025, 11, 16)


def test_dimensions_text():
    assert format_dimensions(10, 8, None) == "10 x 8 x 0"
    assert format_dimensions("12.5", 10) == "12.5 x 10"


def test_room_order_known_then_alphabetical():
    rooms = ["Study", "Living", "Balcony", "Kitchen", "Master Bedroom"]
    assert sort_rooms(rooms) == ["Kitchen", "Living", "Master Bedroom", "Balcony", "Study"]
