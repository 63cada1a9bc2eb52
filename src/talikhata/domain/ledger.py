"""Ledger consistency engine.

Keeps each customer's ``total_given``, ``total_received`` and ``due_amount``
in step with the transactions the customer owns.

Balance policy, applied identically by the incremental and the recompute
paths:

- ``total_given`` / ``total_received`` are gross sums of ``amount`` by type.
- ``due_amount`` nets refunds out: a ``given`` transaction adds
  ``amount - refund_amount``, a ``received`` transaction subtracts it.

Every read-modify-write of a customer's totals runs under that customer's
lock and inside one database unit of work, so concurrent writers for the same
customer cannot lose each other's updates and a failed write leaves nothing
behind.
"""

import dataclasses
import logging
import threading
from contextlib import ExitStack, contextmanager
from typing import Iterable, Iterator, Optional

from talikhata.database.base import Database
from talikhata.domain import errors
from talikhata.domain.entities import (
    GIVEN,
    Balance,
    BalanceRepair,
    Customer,
    Transaction,
)
from talikhata.domain.errors import NotFoundError
from talikhata.domain.validation import validate_amounts, validate_transaction_type

logger = logging.getLogger(__name__)

BALANCE_FIELDS = ("customer_id", "type", "amount", "refund_amount")


def transaction_effect(transaction: Transaction) -> Balance:
    """Return the change a transaction makes to its customer's totals."""
    net = transaction.amount - transaction.refund_amount
    if transaction.type == GIVEN:
        return Balance(total_given=transaction.amount, due_amount=net)
    return Balance(total_received=transaction.amount, due_amount=-net)


def compute_balance(transactions: Iterable[Transaction]) -> Balance:
    """Compute customer totals from scratch."""
    return sum((transaction_effect(t) for t in transactions), Balance())


def balance_changed(old: Transaction, new: Transaction) -> bool:
    """True if an edit touches any field that feeds the customer totals."""
    return any(getattr(old, name) != getattr(new, name) for name in BALANCE_FIELDS)


def _with_balance(customer: Customer, balance: Balance) -> Customer:
    return dataclasses.replace(
        customer,
        total_given=balance.total_given,
        total_received=balance.total_received,
        due_amount=balance.due_amount,
    )


class CustomerLocks:
    """Registry of per-customer re-entrant locks.

    Locks for different customers are independent; several customers are
    always acquired in ascending id order.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[int, threading.RLock] = {}

    def get(self, customer_id: int) -> threading.RLock:
        """Return the lock for a customer, creating it on first use."""
        with self._guard:
            lock = self._locks.get(customer_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[customer_id] = lock
            return lock

    @contextmanager
    def hold(self, *customer_ids: int) -> Iterator[None]:
        """Hold the locks of all given customers."""
        with ExitStack() as stack:
            for customer_id in sorted(set(customer_ids)):
                stack.enter_context(self.get(customer_id))
            yield


# Shared by every engine in the process unless one is given explicitly
DEFAULT_LOCKS = CustomerLocks()


class LedgerEngine:
    """Applies transaction changes to customer aggregate totals."""

    def __init__(self, db: Database, locks: Optional[CustomerLocks] = None):
        """Initialize ledger engine.

        Args:
            db: Database instance
            locks: Per-customer lock registry (defaults to the process-wide one)
        """
        self.db = db
        self.locks = locks if locks is not None else DEFAULT_LOCKS

    def locked(self, *customer_ids: int):
        """Serialize work on the given customers' totals.

        CRUD services hold this around "write transaction record + update
        totals" so the pair is ordered against other writers.
        """
        return self.locks.hold(*customer_ids)

    def _require_customer(self, customer_id: int, active: bool = False) -> Customer:
        customer = self.db.get_customer(customer_id)
        if customer is None:
            raise NotFoundError(errors.customer_not_found(customer_id))
        if active and not customer.is_active:
            raise NotFoundError(errors.customer_inactive(customer_id))
        return customer

    def _save(self, customer: Customer, balance: Balance) -> Customer:
        self.db.save_customer_balance(customer.id, balance)
        return _with_balance(customer, balance)

    def apply_create(self, transaction: Transaction) -> Customer:
        """Add a newly created transaction to its customer's totals.

        Args:
            transaction: The committed (or pending) transaction record

        Returns:
            Customer with updated totals

        Raises:
            ValidationError: If type or amounts are invalid
            NotFoundError: If the customer is missing or inactive
        """
        validate_transaction_type(transaction.type)
        validate_amounts(transaction.amount, transaction.refund_amount)

        with self.locked(transaction.customer_id), self.db.unit_of_work():
            customer = self._require_customer(transaction.customer_id, active=True)
            updated = self._save(customer, customer.balance + transaction_effect(transaction))

        logger.debug(
            "Applied %s transaction %s (%s) to customer %s: due %s -> %s",
            transaction.type,
            transaction.id,
            transaction.amount,
            customer.id,
            customer.due_amount,
            updated.due_amount,
        )
        return updated

    def apply_update(self, old: Transaction, new: Transaction) -> Customer:
        """Resynchronize totals after a transaction edit.

        Totals are recomputed from the full transaction set rather than
        patched with a delta. If the edit moved the transaction to another
        customer, both customers are recomputed. The new transaction record
        must already be persisted.

        Returns:
            The (new) owning customer with current totals
        """
        if not balance_changed(old, new):
            return self._require_customer(new.customer_id)

        validate_transaction_type(new.type)
        validate_amounts(new.amount, new.refund_amount)

        with self.locked(old.customer_id, new.customer_id), self.db.unit_of_work():
            if old.customer_id != new.customer_id:
                self._recompute(old.customer_id)
            updated = self._recompute(new.customer_id)

        logger.debug("Resynchronized customer %s after editing transaction %s", updated.id, new.id)
        return updated

    def apply_delete(self, transaction: Transaction) -> Customer:
        """Reverse a deleted transaction's effect on its customer's totals.

        Raises:
            NotFoundError: If the customer is missing
        """
        with self.locked(transaction.customer_id), self.db.unit_of_work():
            customer = self._require_customer(transaction.customer_id)
            updated = self._save(customer, customer.balance - transaction_effect(transaction))

        logger.debug(
            "Reversed %s transaction %s (%s) on customer %s: due %s -> %s",
            transaction.type,
            transaction.id,
            transaction.amount,
            customer.id,
            customer.due_amount,
            updated.due_amount,
        )
        return updated

    def _recompute(self, customer_id: int) -> Customer:
        customer = self._require_customer(customer_id)
        balance = compute_balance(self.db.list_transactions(customer_id=customer_id))
        if balance == customer.balance:
            return customer
        return self._save(customer, balance)

    def recompute(self, customer_id: int) -> Customer:
        """Rebuild a customer's totals from all of its transactions.

        Idempotent; nothing is written when the stored totals are already
        correct.

        Raises:
            NotFoundError: If the customer is missing
        """
        with self.locked(customer_id), self.db.unit_of_work():
            customer = self._recompute(customer_id)
        logger.debug("Recomputed customer %s: due %s", customer_id, customer.due_amount)
        return customer

    def detect_drift(self, customer_id: int) -> Optional[BalanceRepair]:
        """Compare stored totals with the transactions without writing.

        Returns:
            BalanceRepair describing the needed fix, or None if consistent
        """
        with self.locked(customer_id):
            customer = self._require_customer(customer_id)
            expected = compute_balance(self.db.list_transactions(customer_id=customer_id))
        if expected == customer.balance:
            return None
        return BalanceRepair(customer_id=customer_id, before=customer.balance, after=expected)

    def recompute_all(self) -> list[BalanceRepair]:
        """Recompute every customer, active or not.

        Returns:
            One BalanceRepair per customer whose stored totals had drifted
        """
        repairs = []
        for customer in self.db.list_customers(active_only=False, sort_by="name", descending=False):
            with self.locked(customer.id), self.db.unit_of_work():
                current = self._require_customer(customer.id)
                updated = self._recompute(customer.id)
            if updated.balance != current.balance:
                logger.warning(
                    "Repaired drift on customer %s: %s -> %s",
                    customer.id,
                    current.balance,
                    updated.balance,
                )
                repairs.append(
                    BalanceRepair(customer_id=customer.id, before=current.balance, after=updated.balance)
                )
        return repairs
