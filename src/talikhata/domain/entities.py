"""Domain model entities for talikhata.

These are pure data classes representing business concepts, independent of
database schema. Services and the ledger engine only ever see these types;
the SQLAlchemy models stay behind the database layer.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from typing import Optional

GIVEN = "given"
RECEIVED = "received"
TRANSACTION_TYPES = (GIVEN, RECEIVED)

PAYMENT_METHODS = ("cash", "bank", "mobile_banking", "other")
DEFAULT_PAYMENT_METHOD = "cash"

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class Balance:
    """Customer aggregate totals, or the effect of one transaction on them.

    Balances add and subtract field by field, so the effect of a
    transaction can be applied to a customer and later reversed exactly.
    """

    total_given: Decimal = ZERO
    total_received: Decimal = ZERO
    due_amount: Decimal = ZERO

    def __add__(self, other: "Balance") -> "Balance":
        return Balance(
            total_given=self.total_given + other.total_given,
            total_received=self.total_received + other.total_received,
            due_amount=self.due_amount + other.due_amount,
        )

    def __sub__(self, other: "Balance") -> "Balance":
        return Balance(
            total_given=self.total_given - other.total_given,
            total_received=self.total_received - other.total_received,
            due_amount=self.due_amount - other.due_amount,
        )


@dataclass(frozen=True)
class Customer:
    """Customer domain entity."""

    id: int
    name: str
    phone: Optional[str]
    email: Optional[str]
    address: Optional[str]
    description: Optional[str]
    photo_url: Optional[str]
    tags: tuple[str, ...]
    is_active: bool
    total_given: Decimal
    total_received: Decimal
    due_amount: Decimal
    created_at: datetime
    updated_at: datetime

    @property
    def balance(self) -> Balance:
        """Stored aggregate totals as a Balance."""
        return Balance(
            total_given=self.total_given,
            total_received=self.total_received,
            due_amount=self.due_amount,
        )


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    customer_id: int
    type: str
    amount: Decimal
    refund_amount: Decimal
    note: Optional[str]
    refund_note: Optional[str]
    date: date
    time: str
    due_date: Optional[date]
    payment_method: str
    is_paid: bool
    created_at: datetime
    updated_at: datetime

    @property
    def net_amount(self) -> Decimal:
        """Amount net of refund."""
        return self.amount - self.refund_amount


@dataclass(frozen=True)
class BalanceRepair:
    """A customer whose stored totals disagreed with its transactions."""

    customer_id: int
    before: Balance
    after: Balance


@dataclass(frozen=True)
class CustomerStats:
    """Per-customer transaction statistics."""

    customer: Customer
    transaction_count: int
    total_given: Decimal
    total_received: Decimal
    total_refund: Decimal

    @property
    def net_balance(self) -> Decimal:
        return self.total_given - self.total_received


@dataclass(frozen=True)
class LedgerOverview:
    """Business-wide overview of transactions and customer balances."""

    start_date: Optional[date]
    end_date: Optional[date]
    transaction_count: int
    total_given: Decimal
    total_received: Decimal
    total_refund: Decimal
    customer_count: int
    total_due: Decimal
    customer_total_given: Decimal
    customer_total_received: Decimal
    net_receivable: Decimal
    net_payable: Decimal
    customers_with_due: int
    top_debtors: tuple[Customer, ...] = field(default_factory=tuple)

    @property
    def net_balance(self) -> Decimal:
        return self.total_given - self.total_received
