"""Summary and statistics domain service."""

from datetime import date
from typing import Optional

from talikhata.database.base import Database
from talikhata.domain import errors
from talikhata.domain.entities import (
    GIVEN,
    ZERO,
    CustomerStats,
    LedgerOverview,
)
from talikhata.domain.errors import NotFoundError, ValidationError


class SummaryService:
    """Service for building customer statistics and business overviews."""

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db

    def customer_stats(self, customer_id: int) -> CustomerStats:
        """Summarize all transactions of one active customer.

        Raises:
            NotFoundError: If the customer is missing or soft-deleted
        """
        customer = self.db.get_customer(customer_id)
        if customer is None or not customer.is_active:
            raise NotFoundError(errors.customer_not_found(customer_id))

        transactions = self.db.list_transactions(customer_id=customer_id)
        total_given = sum((t.amount for t in transactions if t.type == GIVEN), ZERO)
        total_received = sum((t.amount for t in transactions if t.type != GIVEN), ZERO)
        total_refund = sum((t.refund_amount for t in transactions), ZERO)

        return CustomerStats(
            customer=customer,
            transaction_count=len(transactions),
            total_given=total_given,
            total_received=total_received,
            total_refund=total_refund,
        )

    def overview(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        top: int = 5,
    ) -> LedgerOverview:
        """Build a business-wide overview.

        Transaction figures honour the date range; customer figures always
        reflect current balances of active customers.

        Args:
            start_date: Optional start date for transaction figures
            end_date: Optional end date for transaction figures
            top: How many customers with the largest dues to include

        Returns:
            LedgerOverview
        """
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError("Start date must not be after end date")

        transactions = self.db.list_transactions(start_date=start_date, end_date=end_date)
        customers = self.db.list_customers(active_only=True, sort_by="due_amount", descending=True)

        dues = [c.due_amount for c in customers]
        receivable = sum((d for d in dues if d > 0), ZERO)
        payable = sum((-d for d in dues if d < 0), ZERO)

        return LedgerOverview(
            start_date=start_date,
            end_date=end_date,
            transaction_count=len(transactions),
            total_given=sum((t.amount for t in transactions if t.type == GIVEN), ZERO),
            total_received=sum((t.amount for t in transactions if t.type != GIVEN), ZERO),
            total_refund=sum((t.refund_amount for t in transactions), ZERO),
            customer_count=len(customers),
            total_due=sum(dues, ZERO),
            customer_total_given=sum((c.total_given for c in customers), ZERO),
            customer_total_received=sum((c.total_received for c in customers), ZERO),
            net_receivable=receivable,
            net_payable=payable,
            customers_with_due=sum(1 for d in dues if d > 0),
            top_debtors=tuple(c for c in customers if c.due_amount > 0)[:top],
        )
