"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the domain entities stay the
same if the storage schema changes (e.g., storing amounts in minor units).
"""

from decimal import Decimal
from typing import Optional

from talikhata.domain import entities as domain
from talikhata.database.models import (
    Customer as ORMCustomer,
    Transaction as ORMTransaction,
)

CENT = Decimal("0.01")


def _money(value: Optional[Decimal]) -> Decimal:
    """Normalize a stored numeric to a two-place Decimal."""
    if value is None:
        return Decimal("0.00")
    return Decimal(value).quantize(CENT)


def customer_to_domain(orm_customer: ORMCustomer) -> domain.Customer:
    """Convert SQLAlchemy Customer model to domain Customer entity."""
    return domain.Customer(
        id=orm_customer.id,
        name=orm_customer.name,
        phone=orm_customer.phone,
        email=orm_customer.email,
        address=orm_customer.address,
        description=orm_customer.description,
        photo_url=orm_customer.photo_url,
        tags=tuple(orm_customer.tags or ()),
        is_active=bool(orm_customer.is_active),
        total_given=_money(orm_customer.total_given),
        total_received=_money(orm_customer.total_received),
        due_amount=_money(orm_customer.due_amount),
        created_at=orm_customer.created_at,
        updated_at=orm_customer.updated_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        customer_id=orm_transaction.customer_id,
        type=orm_transaction.type,
        amount=_money(orm_transaction.amount),
        refund_amount=_money(orm_transaction.refund_amount),
        note=orm_transaction.note,
        refund_note=orm_transaction.refund_note,
        date=orm_transaction.date,
        time=orm_transaction.time,
        due_date=orm_transaction.due_date,
        payment_method=orm_transaction.payment_method,
        is_paid=bool(orm_transaction.is_paid),
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
    )
