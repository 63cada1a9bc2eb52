"""Field validation shared by the domain services and the ledger engine."""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Optional

from talikhata.domain import errors
from talikhata.domain.entities import PAYMENT_METHODS, TRANSACTION_TYPES
from talikhata.domain.errors import ValidationError

CENT = Decimal("0.01")
# Largest value a Numeric(14, 2) column holds exactly
MAX_AMOUNT = Decimal("999999999999.99")

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100
MAX_ADDRESS_LENGTH = 500
MAX_DESCRIPTION_LENGTH = 1000
MAX_NOTE_LENGTH = 500
MAX_PHOTO_URL_LENGTH = 2048

PHONE_PATTERN = re.compile(r"^(\+880|880|0)?1[3-9]\d{8}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")


def to_money(value: Decimal | int | str, field_name: str = "amount") -> Decimal:
    """Convert a value to a Decimal with exactly two fractional digits.

    Raises:
        ValidationError: If the value is not a finite number or carries more
            than two fractional digits.
    """
    if isinstance(value, float):
        # Floats are accepted only through their shortest repr
        value = repr(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"Invalid {field_name}: {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"Invalid {field_name}: {value!r}")
    try:
        cents = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # Too many digits for the decimal context
        raise ValidationError(errors.amount_too_large(value, MAX_AMOUNT))
    if amount != cents:
        raise ValidationError(f"{field_name.capitalize()} cannot have more than 2 decimal places")
    return cents


def validate_amounts(amount: Decimal, refund_amount: Decimal) -> tuple[Decimal, Decimal]:
    """Validate an amount/refund pair.

    Returns:
        The pair normalized to two decimal places

    Raises:
        ValidationError: If amount <= 0, refund < 0, amount > MAX_AMOUNT or refund >= amount
    """
    amount = to_money(amount, "amount")
    refund_amount = to_money(refund_amount, "refund amount")
    if amount <= 0:
        raise ValidationError(errors.amount_not_positive(amount))
    if amount > MAX_AMOUNT:
        raise ValidationError(errors.amount_too_large(amount, MAX_AMOUNT))
    if refund_amount < 0:
        raise ValidationError(errors.refund_negative(refund_amount))
    if refund_amount >= amount:
        raise ValidationError(errors.refund_not_less_than_amount(refund_amount, amount))
    return amount, refund_amount


def validate_transaction_type(type_: str) -> str:
    if type_ not in TRANSACTION_TYPES:
        raise ValidationError(f"Type must be one of: {', '.join(TRANSACTION_TYPES)}")
    return type_


def validate_payment_method(method: str) -> str:
    if method not in PAYMENT_METHODS:
        raise ValidationError(f"Payment method must be one of: {', '.join(PAYMENT_METHODS)}")
    return method


def validate_time(value: str) -> str:
    """Validate a 24h HH:MM time and zero-pad the hour."""
    value = value.strip()
    if not TIME_PATTERN.match(value):
        raise ValidationError(f"Time must be in HH:MM format (got '{value}')")
    hours, minutes = value.split(":")
    return f"{int(hours):02d}:{minutes}"


def validate_name(name: str) -> str:
    name = name.strip()
    if len(name) < MIN_NAME_LENGTH or len(name) > MAX_NAME_LENGTH:
        raise ValidationError(
            f"Name must be between {MIN_NAME_LENGTH} and {MAX_NAME_LENGTH} characters"
        )
    return name


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """Trim a phone number and check it is a Bangladeshi mobile number.

    Empty strings are treated as "no phone".
    """
    if phone is None or not phone.strip():
        return None
    phone = phone.strip()
    if not PHONE_PATTERN.match(phone):
        raise ValidationError("Please enter a valid Bangladeshi phone number")
    return phone


def normalize_email(email: Optional[str]) -> Optional[str]:
    if email is None or not email.strip():
        return None
    email = email.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Please enter a valid email")
    return email


def validate_optional_text(value: Optional[str], field_name: str, max_length: int) -> Optional[str]:
    """Trim optional free text, returning None when empty."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if len(value) > max_length:
        raise ValidationError(f"{field_name} cannot be more than {max_length} characters")
    return value


def normalize_tags(tags: Optional[Iterable[str]]) -> tuple[str, ...]:
    """Trim tags, dropping empties and duplicates while keeping order."""
    if not tags:
        return ()
    seen: list[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return tuple(seen)
