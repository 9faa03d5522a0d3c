"""
Display formatting shared by the PDFs and the agreement view.

Amounts use the Indian numbering system (lakh / crore grouping):
    1234      -> Rs. 1,234.00
    123456    -> Rs. 1,23,456.00
    12345678  -> Rs. 1,23,45,678.00
"""

from datetime import date, datetime, timedelta

from .config import settings

CURRENCY_SYMBOL = "₹"

ROOM_ORDER = [
    "Kitchen",
    "Living",
    "Dining",
    "Master Bedroom",
    "Bedroom 2",
    "Bedroom 3",
    "Bedroom 4",
    "Foyer",
    "Utility",
    "Puja",
    "Bathroom",
    "Others",
]


def _group_indian(integer_part: str) -> str:
    if len(integer_part) <= 3:
        return integer_part
    last_three = integer_part[-3:]
    rest = integer_part[:-3]
    groups = []
    while len(rest) > 2:
        groups.insert(0, rest[-2:])
        rest = rest[:-2]
    if rest:
        groups.insert(0, rest)
    return ",".join(groups) + "," + last_three


def format_inr(value, symbol: str = CURRENCY_SYMBOL) -> str:
    """Format as rupees with 2 decimals. None / NaN / junk format as zero."""
    try:
        amount = float(value)
    except (TypeError, ValueError):
        amount = 0.0
    if amount != amount:
        amount = 0.0
    sign = "-" if amount < 0 else ""
    integer_part, decimal_part = f"{abs(amount):.2f}".split(".")
    return f"{sign}{symbol}{_group_indian(integer_part)}.{decimal_part}"


def format_inr_whole(value, symbol: str = CURRENCY_SYMBOL) -> str:
    """Rounded to whole rupees, no paise."""
    try:
        amount = float(value)
    except (TypeError, ValueError):
        amount = 0.0
    if amount != amount:
        amount = 0.0
    return format_inr(round(amount), symbol)[:-3]


def format_dimensions(*values) -> str:
    """Joins dimensions as "10 x 8 x 0"; blanks read as 0."""
    return " x ".join(str(_dimension(v)) for v in values)


def _dimension(value):
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    return int(number) if number.is_integer() else number


def format_display_date(value) -> str:
    """'1 November 2025'. Accepts a date, datetime or ISO string; empty on failure."""
    if not value:
        return ""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return ""
    return f"{value.day} {value.strftime('%B %Y')}"


def validity_date(issue_date=None, days: int = None) -> date:
    """Date the quotation stops being valid (issue date + QUOTE_VALIDITY_DAYS)."""
    if days is None:
        days = settings.QUOTE_VALIDITY_DAYS
    if issue_date is None:
        issue_date = datetime.utcnow()
    if isinstance(issue_date, str):
        issue_date = datetime.fromisoformat(issue_date.replace("Z", "+00:00"))
    if isinstance(issue_date, datetime):
        issue_date = issue_date.date()
    return issue_date + timedelta(days=days)


def room_sort_key(room: str):
    """Known rooms in their natural order, then everything else alphabetically."""
    name = (room or "").strip()
    if name in ROOM_ORDER:
        return (ROOM_ORDER.index(name), "")
    return (len(ROOM_ORDER), name.lower())


def sort_rooms(rooms) -> list:
    return sorted(rooms, key=room_sort_key)


def group_by_room(items) -> list:
    """
    Group items (dicts or ORM rows) by room_type in room order.

    Returns:
        [(room, [items...]), ...]
    """
    groups = {}
    for item in items:
        room = item.get("room_type") if isinstance(item, dict) else getattr(item, "room_type", None)
        groups.setdefault(room or "Others", []).append(item)
    return [(room, groups[room]) for room in sort_rooms(groups)]
