"""Utility for resolving customer names to IDs."""

from typing import Iterable

from talikhata.domain.customer import CustomerService
from talikhata.domain.entities import Customer
from talikhata.domain.errors import ConflictError, NotFoundError


def _single_match(matches: list[Customer], text: str) -> int:
    if len(matches) == 1:
        return matches[0].id
    if len(matches) > 1:
        ids = ", ".join(str(c.id) for c in matches)
        raise ConflictError(f"Several customers are named '{text}' (IDs: {ids}); use the ID")
    raise NotFoundError(f"Customer '{text}' not found")


def resolve_customer(customer_service: CustomerService, customer: str | int) -> int:
    """Resolve customer name or ID to an active customer's ID.

    Numeric input is treated as an ID first. Otherwise the name must match
    exactly one active customer (case-insensitive).

    Args:
        customer_service: CustomerService instance
        customer: Customer name or ID

    Returns:
        Customer ID

    Raises:
        NotFoundError: If no active customer matches
        ConflictError: If the name matches more than one active customer
    """
    if isinstance(customer, int):
        customer_service.require_customer(customer)
        return customer

    text = customer.strip()
    if text.isdigit():
        customer_id = int(text)
        if customer_service.get_customer(customer_id) is not None:
            return customer_id

    matches = [
        c for c in customer_service.list_customers(search=text) if c.name.lower() == text.lower()
    ]
    return _single_match(matches, text)


def match_customer(customers: Iterable[Customer], customer: str | int) -> int:
    """Resolve customer name or ID against an already loaded customer list.

    Used where inactive customers must be reachable too.
    """
    candidates = list(customers)
    text = str(customer).strip()
    if text.isdigit():
        customer_id = int(text)
        if any(c.id == customer_id for c in candidates):
            return customer_id

    return _single_match([c for c in candidates if c.name.lower() == text.lower()], text)
