"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as duplicate customer contact details."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


def customer_not_found(customer_id: int) -> str:
    """Return message for missing customer."""
    return f"Customer {customer_id} not found"


def customer_inactive(customer_id: int) -> str:
    """Return message for a soft-deleted customer."""
    return f"Customer {customer_id} is not active"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def amount_not_positive(amount: Decimal) -> str:
    """Return message for a zero or negative amount."""
    return f"Amount must be greater than 0 (got {amount})"


def amount_too_large(amount: Decimal, limit: Decimal) -> str:
    """Return message for an amount beyond what the ledger can store."""
    return f"Amount cannot exceed {limit} (got {amount})"


def refund_negative(refund_amount: Decimal) -> str:
    """Return message for a negative refund."""
    return f"Refund amount cannot be negative (got {refund_amount})"


def refund_not_less_than_amount(refund_amount: Decimal, amount: Decimal) -> str:
    """Return message when refund is not strictly less than amount."""
    return (
        f"Refund amount {refund_amount} must be less than the transaction amount {amount}"
    )


def duplicate_customer_contact(field: str, value: str) -> str:
    """Return message for a phone/email already used by another active customer."""
    return f"Customer with {field} '{value}' already exists"


def customer_delete_blocked(customer_id: int, transaction_count: int) -> str:
    """Return message when customer still owns transactions."""
    return (
        f"Cannot delete customer {customer_id}: it has {transaction_count} "
        f"transaction{'s' if transaction_count != 1 else ''}. "
        "Please delete them first."
    )
