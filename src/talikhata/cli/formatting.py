"""Display helpers shared by CLI commands."""

from decimal import Decimal

CURRENCY = "৳"


def format_money(amount: Decimal) -> str:
    """Format an amount as e.g. ৳1,250.00 or -৳200.00."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{CURRENCY}{abs(amount):,.2f}"


def describe_due(due_amount: Decimal) -> str:
    """Describe a signed due amount from the business's point of view."""
    if due_amount > 0:
        return f"{format_money(due_amount)} to receive"
    if due_amount < 0:
        return f"{format_money(-due_amount)} to give"
    return "settled"
