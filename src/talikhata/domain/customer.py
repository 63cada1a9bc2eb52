"""Customer domain service."""

import logging
from typing import Iterable, Optional

from talikhata.database.base import Database
from talikhata.domain import errors
from talikhata.domain.entities import Customer as CustomerEntity
from talikhata.domain.errors import ConflictError, DependencyError, NotFoundError
from talikhata.domain.ledger import DEFAULT_LOCKS, CustomerLocks
from talikhata.domain.validation import (
    MAX_ADDRESS_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_PHOTO_URL_LENGTH,
    normalize_email,
    normalize_phone,
    normalize_tags,
    validate_name,
    validate_optional_text,
)

logger = logging.getLogger(__name__)

# Marks "leave this field alone" in update_customer
UNCHANGED = object()


class CustomerService:
    """Service for managing customers.

    Balance totals are never written here; they belong to the ledger engine.
    """

    def __init__(self, db: Database, locks: Optional[CustomerLocks] = None):
        """Initialize customer service.

        Args:
            db: Database instance
            locks: Per-customer lock registry shared with the ledger engine
        """
        self.db = db
        self.locks = locks if locks is not None else DEFAULT_LOCKS

    def _check_contact_unique(
        self, phone: Optional[str], email: Optional[str], exclude_id: Optional[int] = None
    ) -> None:
        existing = self.db.find_active_customer_by_contact(
            phone=phone, email=email, exclude_id=exclude_id
        )
        if existing is None:
            return
        if phone and existing.phone == phone:
            raise ConflictError(errors.duplicate_customer_contact("phone", phone))
        raise ConflictError(errors.duplicate_customer_contact("email", email))

    def create_customer(
        self,
        name: str,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        address: Optional[str] = None,
        description: Optional[str] = None,
        photo_url: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> int:
        """Create a new customer with a zero balance.

        Args:
            name: Customer name (2-100 characters)
            phone: Optional Bangladeshi mobile number
            email: Optional email address
            address: Optional address
            description: Optional free-text description
            photo_url: Optional reference to an already stored photo
            tags: Optional free-form tags

        Returns:
            Customer ID

        Raises:
            ValidationError: If any field is invalid
            ConflictError: If another active customer has the same phone or email
        """
        name = validate_name(name)
        phone = normalize_phone(phone)
        email = normalize_email(email)
        address = validate_optional_text(address, "Address", MAX_ADDRESS_LENGTH)
        description = validate_optional_text(description, "Description", MAX_DESCRIPTION_LENGTH)
        photo_url = validate_optional_text(photo_url, "Photo URL", MAX_PHOTO_URL_LENGTH)

        self._check_contact_unique(phone, email)

        customer_id = self.db.create_customer(
            name=name,
            phone=phone,
            email=email,
            address=address,
            description=description,
            photo_url=photo_url,
            tags=normalize_tags(tags),
        )
        logger.info("Created customer %s (%s)", customer_id, name)
        return customer_id

    def get_customer(self, customer_id: int) -> Optional[CustomerEntity]:
        """Get an active customer by ID.

        Returns:
            Customer entity or None if not found or soft-deleted
        """
        customer = self.db.get_customer(customer_id)
        if customer is None or not customer.is_active:
            return None
        return customer

    def require_customer(self, customer_id: int) -> CustomerEntity:
        """Get an active customer by ID or raise.

        Raises:
            NotFoundError: If the customer is missing or soft-deleted
        """
        customer = self.get_customer(customer_id)
        if customer is None:
            raise NotFoundError(errors.customer_not_found(customer_id))
        return customer

    def list_customers(
        self,
        search: Optional[str] = None,
        sort_by: str = "created_at",
        descending: bool = True,
    ) -> list[CustomerEntity]:
        """List active customers.

        Args:
            search: Optional text matched against name, phone, email and address
            sort_by: name, due_amount, created_at or updated_at
            descending: Sort direction
        """
        return self.db.list_customers(
            search=search, active_only=True, sort_by=sort_by, descending=descending
        )

    def update_customer(
        self,
        customer_id: int,
        name=UNCHANGED,
        phone=UNCHANGED,
        email=UNCHANGED,
        address=UNCHANGED,
        description=UNCHANGED,
        photo_url=UNCHANGED,
        tags=UNCHANGED,
    ) -> CustomerEntity:
        """Update customer contact fields.

        Only the fields that are passed are changed. Passing None (or an empty
        string) for an optional field clears it.

        Returns:
            The updated customer

        Raises:
            NotFoundError: If the customer is missing or soft-deleted
            ValidationError: If any field is invalid
            ConflictError: If the new phone or email belongs to another customer
        """
        self.require_customer(customer_id)

        changes = {}
        if name is not UNCHANGED:
            changes["name"] = validate_name(name)
        if phone is not UNCHANGED:
            changes["phone"] = normalize_phone(phone)
        if email is not UNCHANGED:
            changes["email"] = normalize_email(email)
        if address is not UNCHANGED:
            changes["address"] = validate_optional_text(address, "Address", MAX_ADDRESS_LENGTH)
        if description is not UNCHANGED:
            changes["description"] = validate_optional_text(
                description, "Description", MAX_DESCRIPTION_LENGTH
            )
        if photo_url is not UNCHANGED:
            changes["photo_url"] = validate_optional_text(photo_url, "Photo URL", MAX_PHOTO_URL_LENGTH)
        if tags is not UNCHANGED:
            changes["tags"] = normalize_tags(tags)

        if changes.get("phone") or changes.get("email"):
            self._check_contact_unique(
                changes.get("phone"), changes.get("email"), exclude_id=customer_id
            )

        if changes:
            self.db.update_customer(customer_id, changes)
            logger.info("Updated customer %s: %s", customer_id, ", ".join(sorted(changes)))
        return self.require_customer(customer_id)

    def delete_customer(self, customer_id: int) -> None:
        """Soft-delete a customer.

        Args:
            customer_id: Customer ID to delete

        Raises:
            NotFoundError: If the customer is missing or already deleted
            DependencyError: If the customer still owns transactions
        """
        with self.locks.hold(customer_id), self.db.unit_of_work():
            self.require_customer(customer_id)

            transaction_count = self.db.count_customer_transactions(customer_id)
            if transaction_count > 0:
                raise DependencyError(
                    errors.customer_delete_blocked(customer_id, transaction_count)
                )

            self.db.set_customer_active(customer_id, False)
        logger.info("Deactivated customer %s", customer_id)
