"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

# Bengali digits ০-৯ to ASCII
_BENGALI_DIGITS = str.maketrans("০১২৩৪৫৬৭৮৯", "0123456789")

_CURRENCY = re.compile(r"(?i)^(?:bdt|tk\.?|৳|\$)\s*|\s*(?:bdt|tk\.?|taka|৳)$")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles:
    - "500", "500.50"
    - "৳500", "Tk 500", "500 BDT", "$500"
    - "1,500.00" and lakh grouping "1,50,000"
    - Bengali digits: "৫০০"

    Sign and precision are left for the domain to validate.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip().translate(_BENGALI_DIGITS)
    text = _CURRENCY.sub("", text).replace(",", "").strip()

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return amount
