"""CLI helpers for customer resolution."""

from __future__ import annotations

import click
from talikhata.domain.customer import CustomerService
from talikhata.domain.errors import DomainError
from talikhata.cli.error_handling import handle_domain_error
from talikhata.utils.customer_resolver import resolve_customer


def resolve_customer_or_exit(
    ctx: click.Context, customer_service: CustomerService, customer: str | int
) -> int:
    """Resolve customer name or ID, or exit with a CLI error."""
    try:
        return resolve_customer(customer_service, customer)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
