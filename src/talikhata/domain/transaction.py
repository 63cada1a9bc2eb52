"""Transaction domain service."""

import logging
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

from talikhata.database.base import Database
from talikhata.domain import errors
from talikhata.domain.entities import (
    DEFAULT_PAYMENT_METHOD,
    Customer as CustomerEntity,
    Transaction as TransactionEntity,
)
from talikhata.domain.errors import NotFoundError, ValidationError
from talikhata.domain.ledger import LedgerEngine
from talikhata.domain.validation import (
    MAX_NOTE_LENGTH,
    to_money,
    validate_amounts,
    validate_optional_text,
    validate_payment_method,
    validate_time,
    validate_transaction_type,
)

logger = logging.getLogger(__name__)

# Marks "leave this field alone" in update_transaction
UNCHANGED = object()


class TransactionService:
    """Service for managing transactions.

    Every write goes through one database unit of work together with the
    matching ledger engine call, under the owning customer's lock.
    """

    def __init__(self, db: Database, ledger: Optional[LedgerEngine] = None):
        """Initialize transaction service.

        Args:
            db: Database instance
            ledger: Ledger engine (a new one bound to db by default)
        """
        self.db = db
        self.ledger = ledger if ledger is not None else LedgerEngine(db)

    def _require_active_customer(self, customer_id: int) -> CustomerEntity:
        customer = self.db.get_customer(customer_id)
        if customer is None:
            raise NotFoundError(errors.customer_not_found(customer_id))
        if not customer.is_active:
            raise NotFoundError(errors.customer_inactive(customer_id))
        return customer

    def _require_transaction(self, transaction_id: int) -> TransactionEntity:
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(errors.transaction_not_found(transaction_id))
        return txn

    def create_transaction(
        self,
        customer_id: int,
        type: str,
        amount: Decimal,
        refund_amount: Decimal = Decimal("0"),
        note: Optional[str] = None,
        refund_note: Optional[str] = None,
        date: Optional[date] = None,
        time: Optional[str] = None,
        due_date: Optional[date] = None,
        payment_method: str = DEFAULT_PAYMENT_METHOD,
        is_paid: bool = False,
    ) -> int:
        """Create a transaction and add it to the customer's balance.

        Args:
            customer_id: Owning customer ID
            type: "given" or "received"
            amount: Transaction amount (> 0, at most 2 decimal places)
            refund_amount: Refunded part of the amount (>= 0, < amount)
            note: Optional note
            refund_note: Optional note about the refund
            date: Transaction date (defaults to today)
            time: Time of day as HH:MM (defaults to now)
            due_date: Optional date the amount is due
            payment_method: cash, bank, mobile_banking or other
            is_paid: Whether the transaction is settled

        Returns:
            Transaction ID

        Raises:
            ValidationError: If any field is invalid
            NotFoundError: If the customer doesn't exist or is inactive
        """
        type = validate_transaction_type(type)
        amount, refund_amount = validate_amounts(amount, refund_amount)
        payment_method = validate_payment_method(payment_method)
        note = validate_optional_text(note, "Note", MAX_NOTE_LENGTH)
        refund_note = validate_optional_text(refund_note, "Refund note", MAX_NOTE_LENGTH)

        now = datetime.now()
        txn_date = date if date is not None else now.date()
        txn_time = validate_time(time) if time is not None else now.strftime("%H:%M")

        with self.ledger.locked(customer_id), self.db.unit_of_work():
            self._require_active_customer(customer_id)
            transaction_id = self.db.create_transaction(
                customer_id=customer_id,
                type=type,
                amount=amount,
                refund_amount=refund_amount,
                date=txn_date,
                time=txn_time,
                note=note,
                refund_note=refund_note,
                due_date=due_date,
                payment_method=payment_method,
                is_paid=is_paid,
            )
            customer = self.ledger.apply_create(self._require_transaction(transaction_id))

        logger.info(
            "Created %s transaction %s of %s for customer %s (due now %s)",
            type,
            transaction_id,
            amount,
            customer_id,
            customer.due_amount,
        )
        return transaction_id

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def update_transaction(
        self,
        transaction_id: int,
        customer_id=UNCHANGED,
        type=UNCHANGED,
        amount=UNCHANGED,
        refund_amount=UNCHANGED,
        note=UNCHANGED,
        refund_note=UNCHANGED,
        date=UNCHANGED,
        time=UNCHANGED,
        due_date=UNCHANGED,
        payment_method=UNCHANGED,
        is_paid=UNCHANGED,
    ) -> TransactionEntity:
        """Update transaction fields.

        Only the fields that are passed are changed. Passing None for note,
        refund_note or due_date clears it. When customer, type, amount or
        refund change, the affected customer totals are recomputed.

        Returns:
            The updated transaction

        Raises:
            NotFoundError: If the transaction or the new customer doesn't exist
            ValidationError: If the resulting field values are invalid
        """
        old = self._require_transaction(transaction_id)

        changes = {}
        if type is not UNCHANGED:
            changes["type"] = validate_transaction_type(type)
        if amount is not UNCHANGED:
            changes["amount"] = to_money(amount, "amount")
        if refund_amount is not UNCHANGED:
            changes["refund_amount"] = to_money(refund_amount, "refund amount")
        if note is not UNCHANGED:
            changes["note"] = validate_optional_text(note, "Note", MAX_NOTE_LENGTH)
        if refund_note is not UNCHANGED:
            changes["refund_note"] = validate_optional_text(refund_note, "Refund note", MAX_NOTE_LENGTH)
        if date is not UNCHANGED:
            if date is None:
                raise ValidationError("Date is required")
            changes["date"] = date
        if time is not UNCHANGED:
            changes["time"] = validate_time(time)
        if due_date is not UNCHANGED:
            changes["due_date"] = due_date
        if payment_method is not UNCHANGED:
            changes["payment_method"] = validate_payment_method(payment_method)
        if is_paid is not UNCHANGED:
            changes["is_paid"] = bool(is_paid)

        if not changes and (customer_id is UNCHANGED or customer_id == old.customer_id):
            return old

        while True:
            owner = old.customer_id
            target = owner if customer_id is UNCHANGED else customer_id
            with self.ledger.locked(owner, target), self.db.unit_of_work():
                # Re-read under the lock; a concurrent edit may have landed
                old = self._require_transaction(transaction_id)
                if old.customer_id != owner:
                    # Moved to a customer we don't hold; lock that one instead
                    continue
                fields = dict(changes)
                if target != owner:
                    self._require_active_customer(target)
                    fields["customer_id"] = target
                if not fields:
                    return old
                # Validate the pair as it will be stored, not just the edited half
                validate_amounts(
                    fields.get("amount", old.amount), fields.get("refund_amount", old.refund_amount)
                )
                self.db.update_transaction(transaction_id, fields)
                new = self._require_transaction(transaction_id)
                self.ledger.apply_update(old, new)
            break

        logger.info("Updated transaction %s: %s", transaction_id, ", ".join(sorted(fields)))
        return new

    def delete_transaction(self, transaction_id: int) -> CustomerEntity:
        """Delete a transaction and reverse its effect on the customer.

        Args:
            transaction_id: Transaction ID to delete

        Returns:
            The owning customer with updated totals

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        txn = self._require_transaction(transaction_id)

        while True:
            owner = txn.customer_id
            with self.ledger.locked(owner), self.db.unit_of_work():
                txn = self._require_transaction(transaction_id)
                if txn.customer_id != owner:
                    # Moved to a customer we don't hold; lock that one instead
                    continue
                self.db.delete_transaction(transaction_id)
                customer = self.ledger.apply_delete(txn)
            break

        logger.info(
            "Deleted transaction %s of customer %s (due now %s)",
            transaction_id,
            customer.id,
            customer.due_amount,
        )
        return customer

    def list_transactions(
        self,
        customer_id: Optional[int] = None,
        type: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        sort_by: str = "date",
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> list[TransactionEntity]:
        """List transactions with filters.

        Args:
            customer_id: Optional owning customer filter
            type: Optional "given"/"received" filter
            start_date: Optional start date filter
            end_date: Optional end date filter
            sort_by: date, amount or created_at
            descending: Sort direction (newest/largest first by default)
            limit: Optional maximum number of transactions

        Returns:
            List of transaction entities
        """
        if type is not None:
            validate_transaction_type(type)
        return self.db.list_transactions(
            customer_id=customer_id,
            type=type,
            start_date=start_date,
            end_date=end_date,
            sort_by=sort_by,
            descending=descending,
            limit=limit,
        )
