"""
Money helpers. All amounts are Decimal inside the app; these functions are
only for parsing API values and for display. Never format a wire value.
"""
from datetime import datetime
from decimal import Decimal, InvalidOperation

CURRENCY_CODE = "KES"


def to_decimal(value):
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        # str() first so floats like 0.1 don't drag binary noise along
        return Decimal(str(value).replace(",", "").strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")


def format_kes(amount):
    """
    Format amount for display, e.g. KES 1,234 or KES 1,234.50.
    Whole amounts drop the cents.
    """
    value = to_decimal(amount)
    if value == value.to_integral_value():
        return f"{CURRENCY_CODE} {int(value):,}"
    return f"{CURRENCY_CODE} {value:,.2f}"


def format_date(value):
    if not value:
        return "-"
    try:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return "-"
    return dt.strftime("%d/%m/%Y")
