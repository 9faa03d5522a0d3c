"""
PDF documents for a quotation.

Generates the client-facing PDFs from plain quotation dicts.
Uses fpdf2 (pure Python, no system dependencies) and pypdf for merging.

Documents:
1. Interiors quotation       - interior items grouped by room, own discount / GST
2. False ceiling quotation   - false ceiling items + other items, own discount / GST
3. Service agreement         - parties, scope summary, financials, payment schedule
4. Annexure title page       - single page separator used inside the agreement pack

Each quotation document carries its share of the discount (see
PricingEngine.allocate_discount) so the two PDFs add up to the combined quote.
"""

from datetime import datetime
from io import BytesIO

from fpdf import FPDF
from pypdf import PdfReader, PdfWriter

from .config import settings
from .formatters import (
    format_display_date,
    format_dimensions,
    format_inr,
    group_by_room,
    validity_date,
)
from .pricing_engine import GST_PERCENT

DEFAULT_TERMS = [
    "Prices are inclusive of material, labour and installation unless stated otherwise.",
    "GST at 18% is charged on the discounted amount.",
    "Any change in scope after sign-off is quoted separately.",
    "Electrical, plumbing and civil works are excluded unless listed.",
    "Measurements are final only after site verification.",
]


def _fmt(amount) -> str:
    """Format a number as Rs. X,XX,XXX.XX (lakh grouping)."""
    return format_inr(amount, symbol="Rs. ")


def _fmt_qty(value) -> str:
    try:
        return f"{float(value):.2f}"
    except (ValueError, TypeError):
        return "-"


def _safe(text) -> str:
    """Replace Unicode chars that can't be rendered by built-in PDF fonts (latin-1)."""
    if not text:
        return ""
    return (
        str(text)
        .replace("\u20b9", "Rs. ")  # rupee sign
        .replace("\u2022", "-")     # bullet
        .replace("\u2014", " - ")   # em dash
        .replace("\u2013", "-")     # en dash
        .replace("\u00d7", "x")     # multiplication sign
        .replace("\u201c", '"')     # left double quote
        .replace("\u201d", '"')     # right double quote
        .replace("\u2018", "'")     # left single quote
        .replace("\u2019", "'")     # right single quote
        .encode("latin-1", errors="replace")
        .decode("latin-1")
    )


def _company_info() -> str:
    parts = [settings.COMPANY_ADDRESS, settings.COMPANY_PHONE, settings.COMPANY_EMAIL, settings.COMPANY_WEBSITE]
    return " | ".join(p for p in parts if p)


class QuotePDF(FPDF):
    """Custom PDF class for quotation and agreement documents."""

    def __init__(self, title=""):
        super().__init__()
        self.doc_title = title
        self.set_auto_page_break(auto=True, margin=20)

    def header(self):
        pass  # We handle headers manually per document

    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(150, 150, 150)
        self.cell(0, 10, _safe(f"{settings.COMPANY_NAME} | Page {self.page_no()}/{{nb}}"), align="C")

    def company_header(self, heading):
        self.set_font("Helvetica", "B", 18)
        self.cell(0, 9, _safe(settings.COMPANY_NAME), new_x="LMARGIN", new_y="NEXT")
        if settings.COMPANY_TAGLINE:
            self.set_font("Helvetica", "I", 9)
            self.cell(0, 5, _safe(settings.COMPANY_TAGLINE), new_x="LMARGIN", new_y="NEXT")
        info = _company_info()
        if info:
            self.set_font("Helvetica", "", 8)
            self.set_text_color(100, 100, 100)
            self.cell(0, 5, _safe(info), new_x="LMARGIN", new_y="NEXT")
            self.set_text_color(0, 0, 0)
        self.ln(3)
        self.set_font("Helvetica", "B", 14)
        self.cell(0, 8, _safe(heading), new_x="LMARGIN", new_y="NEXT")

    def section_header(self, title):
        """Render a section header bar."""
        self.set_font("Helvetica", "B", 11)
        self.set_fill_color(45, 55, 72)
        self.set_text_color(255, 255, 255)
        self.cell(0, 8, _safe(f"  {title}"), fill=True, new_x="LMARGIN", new_y="NEXT")
        self.set_text_color(0, 0, 0)
        self.ln(2)

    def table_header(self, cols):
        """Render a table header row. cols: [(label, width), ...]"""
        self.set_font("Helvetica", "B", 8)
        self.set_fill_color(240, 240, 240)
        for label, width in cols:
            align = "R" if label in ("Sqft", "Area", "Qty", "Rate", "Total", "Value", "Percent") else "L"
            self.cell(width, 6, label, border="B", fill=True, align=align)
        self.ln()

    def table_row(self, values, widths, numeric_from=None):
        """Render a table data row. Columns from ``numeric_from`` on are right-aligned."""
        if numeric_from is None:
            numeric_from = len(widths) - 2
        self.set_font("Helvetica", "", 8)
        for i, (val, width) in enumerate(zip(values, widths)):
            align = "R" if i >= numeric_from else "L"
            self.cell(width, 5.5, _safe(val), align=align)
        self.ln()

    def subtotal_row(self, label, amount):
        """Render a subtotal row spanning the full width."""
        self.set_font("Helvetica", "B", 9)
        self.cell(140, 6, _safe(label), align="R", border="T")
        self.cell(50, 6, _fmt(amount), align="R", border="T")
        self.ln(8)

    def client_block(self, quote):
        self.set_font("Helvetica", "", 10)
        created = quote.get("created_at") or datetime.utcnow()
        self.cell(0, 5, _safe(f"Quote ID: {quote.get('quote_id', '')}"), new_x="LMARGIN", new_y="NEXT")
        self.cell(0, 5, f"Date: {format_display_date(created)}", new_x="LMARGIN", new_y="NEXT")
        self.cell(0, 5, f"Valid until: {format_display_date(validity_date(created))}", new_x="LMARGIN", new_y="NEXT")
        self.ln(2)
        self.cell(0, 5, _safe(f"Prepared for: {quote.get('client_name', '')}"), new_x="LMARGIN", new_y="NEXT")
        self.cell(0, 5, _safe(f"Project: {quote.get('project_name', '')}"), new_x="LMARGIN", new_y="NEXT")
        if quote.get("project_address"):
            self.multi_cell(0, 5, _safe(f"Site: {quote['project_address']}"), new_x="LMARGIN", new_y="NEXT")
        self.ln(4)

    def summary_block(self, breakdown):
        """Subtotal, discount, GST and final total for one document."""
        self.section_header("SUMMARY")
        self.set_font("Helvetica", "", 10)
        discount_type = breakdown.get("discount_type")
        discount_value = breakdown.get("discount_value", 0)
        discount_label = "Discount"
        if discount_type == "percent" and discount_value:
            discount_label = f"Discount ({discount_value:g}%)"

        rows = [("Subtotal", breakdown.get("subtotal", 0))]
        if breakdown.get("discount_amount"):
            rows.append((discount_label, -breakdown["discount_amount"]))
            rows.append(("Amount after discount", breakdown.get("discounted", 0)))
        rows.append((f"GST ({GST_PERCENT}%)", breakdown.get("gst_amount", 0)))
        for label, amount in rows:
            self.cell(130, 6, label)
            self.cell(60, 6, _fmt(amount), align="R")
            self.ln()

        self.ln(1)
        self.set_fill_color(45, 55, 72)
        self.set_text_color(255, 255, 255)
        self.set_font("Helvetica", "B", 13)
        self.cell(130, 10, "  FINAL TOTAL", fill=True)
        self.cell(60, 10, f"{_fmt(breakdown.get('final_total', 0))}  ", fill=True, align="R")
        self.set_text_color(0, 0, 0)
        self.ln(14)

    def bullet_list(self, title, lines):
        if not lines:
            return
        self.section_header(title)
        self.set_font("Helvetica", "", 8)
        pw = self.w - self.l_margin - self.r_margin
        for line in lines:
            self.set_x(self.l_margin)
            self.multi_cell(pw, 4.5, _safe(f"  - {line}"), new_x="LMARGIN", new_y="NEXT")
        self.ln(3)


def generate_interiors_pdf(quote: dict, breakdown: dict) -> bytes:
    """
    Interiors quotation.

    Args:
        quote: quotation dict with ``interior_items``
        breakdown: the interiors document's discount/GST breakdown

    Returns:
        PDF bytes
    """
    pdf = QuotePDF(title="Interiors Quotation")
    pdf.alias_nb_pages()
    pdf.add_page()
    pdf.company_header("INTERIORS QUOTATION")
    pdf.client_block(quote)

    cols = [("Description", 50), ("L x H x W", 28), ("Sqft", 18), ("Material / Finish", 46), ("Rate", 22), ("Total", 26)]
    widths = [c[1] for c in cols]

    for room, items in group_by_room(quote.get("interior_items", [])):
        pdf.section_header(room.upper())
        pdf.table_header(cols)
        room_total = 0.0
        for item in items:
            dims = format_dimensions(item.get("length"), item.get("height"), item.get("width"))
            materials = f"{item.get('material', '')} / {item.get('finish', '')}"
            pdf.table_row(
                [
                    (item.get("description") or "")[:30],
                    dims,
                    _fmt_qty(item.get("sqft")),
                    materials[:28],
                    _fmt(item.get("unit_price")),
                    _fmt(item.get("total_price")),
                ],
                widths,
                numeric_from=2,
            )
            room_total += item.get("total_price") or 0
        pdf.subtotal_row(f"{room} Subtotal", room_total)

    pdf.summary_block(breakdown)
    pdf.bullet_list("TERMS & CONDITIONS", DEFAULT_TERMS)
    return bytes(pdf.output())


def generate_false_ceiling_pdf(quote: dict, breakdown: dict) -> bytes:
    """False ceiling quotation: ceiling items by room, then other items."""
    pdf = QuotePDF(title="False Ceiling Quotation")
    pdf.alias_nb_pages()
    pdf.add_page()
    pdf.company_header("FALSE CEILING QUOTATION")
    pdf.client_block(quote)

    cols = [("Description", 64), ("L x W", 30), ("Area", 24), ("Rate", 34), ("Total", 38)]
    widths = [c[1] for c in cols]
    for room, items in group_by_room(quote.get("false_ceiling_items", [])):
        pdf.section_header(room.upper())
        pdf.table_header(cols)
        room_total = 0.0
        for item in items:
            pdf.table_row(
                [
                    (item.get("description") or "False ceiling")[:38],
                    format_dimensions(item.get("length"), item.get("width")),
                    _fmt_qty(item.get("area")),
                    _fmt(item.get("unit_price")),
                    _fmt(item.get("total_price")),
                ],
                widths,
                numeric_from=2,
            )
            room_total += item.get("total_price") or 0
        pdf.subtotal_row(f"{room} Subtotal", room_total)

    others = quote.get("other_items", [])
    if others:
        pdf.section_header("OTHER ITEMS")
        other_cols = [("Item", 50), ("Description", 54), ("Value", 26), ("Rate", 30), ("Total", 30)]
        other_widths = [c[1] for c in other_cols]
        pdf.table_header(other_cols)
        others_total = 0.0
        for item in others:
            is_count = item.get("value_type") == "count"
            pdf.table_row(
                [
                    (item.get("item_type") or "")[:28],
                    (item.get("description") or "")[:30],
                    _fmt_qty(item.get("value")) if is_count else "Lumpsum",
                    _fmt(item.get("unit_price")) if is_count else "-",
                    _fmt(item.get("total_price")),
                ],
                other_widths,
                numeric_from=2,
            )
            others_total += item.get("total_price") or 0
        pdf.subtotal_row("Other Items Subtotal", others_total)

    pdf.summary_block(breakdown)
    pdf.bullet_list("TERMS & CONDITIONS", DEFAULT_TERMS)
    return bytes(pdf.output())


def generate_agreement_pdf(agreement: dict) -> bytes:
    """
    Service agreement.

    Args:
        agreement: composed agreement data (see agreement.build_agreement_data)
    """
    pdf = QuotePDF(title="Service Agreement")
    pdf.alias_nb_pages()
    pdf.add_page()
    pw = pdf.w - pdf.l_margin - pdf.r_margin
    pdf.company_header("INTERIOR DESIGN SERVICE AGREEMENT")

    pdf.set_font("Helvetica", "", 10)
    pdf.cell(0, 5, _safe(f"Agreement date: {format_display_date(agreement.get('agreement_date'))}"),
             new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 5, _safe(f"Quote ID: {agreement.get('quote_id', '')}"), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(3)

    pdf.section_header("PARTIES")
    pdf.set_font("Helvetica", "", 9)
    pdf.multi_cell(pw, 5, _safe(
        f"This agreement is made between {settings.COMPANY_NAME} (the Service Provider) "
        f"and {agreement.get('client_name', '')} (the Client) for the interior works at "
        f"{agreement.get('project_address') or agreement.get('project_name', '')}."
    ), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(3)

    pdf.section_header("SCOPE OF WORK")
    cols = [("Room / Section", 140), ("Total", 50)]
    widths = [c[1] for c in cols]
    pdf.table_header(cols)
    for row in agreement.get("room_totals", []):
        pdf.table_row([row["room"], _fmt(row["subtotal"])], widths, numeric_from=1)
    if agreement.get("has_false_ceiling"):
        pdf.table_row(["False Ceiling & Other Items", _fmt(agreement.get("fc_subtotal", 0))], widths, numeric_from=1)
    pdf.ln(3)

    materials = agreement.get("materials_used") or {}
    lines = []
    for kind, label in (("core", "Core"), ("finish", "Finish"), ("hardware", "Hardware")):
        if materials.get(kind):
            lines.append(f"{label}: {', '.join(materials[kind])}")
    pdf.bullet_list("MATERIALS", lines)

    pdf.summary_block(agreement.get("financials", {}))

    pdf.section_header("PAYMENT SCHEDULE")
    pay_cols = [("Milestone", 110), ("Percent", 30), ("Total", 50)]
    pdf.table_header(pay_cols)
    for m in agreement.get("payment_schedule", []):
        pdf.table_row([m["label"], f"{m['percent']:g}%", _fmt(m["amount"])], [c[1] for c in pay_cols], numeric_from=1)
    pdf.ln(4)

    pdf.bullet_list("TERMS", DEFAULT_TERMS + list(agreement.get("additional_terms") or []))

    pdf.ln(10)
    pdf.set_font("Helvetica", "", 9)
    pdf.cell(95, 5, "For the Service Provider")
    pdf.cell(95, 5, "Client", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(14)
    pdf.cell(95, 5, _safe(settings.COMPANY_NAME))
    pdf.cell(95, 5, _safe(agreement.get("client_name", "")), new_x="LMARGIN", new_y="NEXT")
    return bytes(pdf.output())


def generate_annexure_title_pdf(letter: str, title: str, quote_id: str = "", client_name: str = "") -> bytes:
    """Single-page annexure separator ('ANNEXURE A' / 'Interiors Quotation')."""
    pdf = QuotePDF(title=f"Annexure {letter}")
    pdf.alias_nb_pages()
    pdf.add_page()
    pdf.set_y(pdf.h / 3)
    pdf.set_font("Helvetica", "B", 28)
    pdf.cell(0, 14, _safe(f"ANNEXURE {letter}"), align="C", new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 16)
    pdf.cell(0, 10, _safe(title), align="C", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(8)
    pdf.set_font("Helvetica", "", 10)
    pdf.set_text_color(100, 100, 100)
    if quote_id:
        pdf.cell(0, 6, _safe(f"Quote ID: {quote_id}"), align="C", new_x="LMARGIN", new_y="NEXT")
    if client_name:
        pdf.cell(0, 6, _safe(f"Client: {client_name}"), align="C", new_x="LMARGIN", new_y="NEXT")
    pdf.set_text_color(0, 0, 0)
    return bytes(pdf.output())


def merge_pdf_bytes(buffers) -> bytes:
    """Concatenate PDF documents in the given order."""
    writer = PdfWriter()
    for data in buffers:
        writer.append(PdfReader(BytesIO(data)))
    out = BytesIO()
    writer.write(out)
    return out.getvalue()


def count_pages(data: bytes) -> int:
    return len(PdfReader(BytesIO(data)).pages)
