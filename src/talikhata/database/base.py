"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Any
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from talikhata.domain.entities import Balance, Customer, Transaction

CUSTOMER_SORT_FIELDS = ("name", "due_amount", "created_at", "updated_at")
TRANSACTION_SORT_FIELDS = ("date", "amount", "created_at")


class Database(ABC):
    """Abstract database interface for talikhata."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[None]:
        """Group writes into one atomic unit.

        Writes issued inside the block are committed together when the block
        exits normally and rolled back together if it raises. Units of work
        may nest; only the outermost one commits.
        """
        pass

    # Customer operations
    @abstractmethod
    def create_customer(
        self,
        name: str,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        address: Optional[str] = None,
        description: Optional[str] = None,
        photo_url: Optional[str] = None,
        tags: tuple[str, ...] = (),
    ) -> int:
        """Create a customer with zero balance. Returns customer ID."""
        pass

    @abstractmethod
    def get_customer(self, customer_id: int) -> Optional[Customer]:
        """Get customer by ID, active or not."""
        pass

    @abstractmethod
    def list_customers(
        self,
        search: Optional[str] = None,
        active_only: bool = True,
        sort_by: str = "created_at",
        descending: bool = True,
    ) -> list[Customer]:
        """List customers.

        Args:
            search: Optional case-insensitive substring matched against name,
                phone, email and address
            active_only: If True, skip soft-deleted customers
            sort_by: One of CUSTOMER_SORT_FIELDS
            descending: Sort direction
        """
        pass

    @abstractmethod
    def find_active_customer_by_contact(
        self,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        exclude_id: Optional[int] = None,
    ) -> Optional[Customer]:
        """Find an active customer using the given phone or email."""
        pass

    @abstractmethod
    def update_customer(self, customer_id: int, changes: dict[str, Any]) -> None:
        """Update customer contact fields (not balance totals)."""
        pass

    @abstractmethod
    def set_customer_active(self, customer_id: int, is_active: bool) -> None:
        """Set the customer's active flag."""
        pass

    @abstractmethod
    def save_customer_balance(self, customer_id: int, balance: Balance) -> None:
        """Persist customer aggregate totals.

        Only the ledger engine calls this.
        """
        pass

    @abstractmethod
    def count_customer_transactions(self, customer_id: int) -> int:
        """Count transactions owned by a customer."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        customer_id: int,
        type: str,
        amount: Decimal,
        refund_amount: Decimal,
        date: date,
        time: str,
        note: Optional[str] = None,
        refund_note: Optional[str] = None,
        due_date: Optional[date] = None,
        payment_method: str = "cash",
        is_paid: bool = False,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: int, changes: dict[str, Any]) -> None:
        """Update transaction fields."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction permanently."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        customer_id: Optional[int] = None,
        type: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        sort_by: str = "date",
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters.

        Args:
            customer_id: Optional owning customer filter
            type: Optional transaction type filter
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            sort_by: One of TRANSACTION_SORT_FIELDS
            descending: Sort direction
            limit: Optional maximum number of rows
        """
        pass
