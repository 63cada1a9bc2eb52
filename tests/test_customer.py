"""Tests for customer service and commands."""

import pytest
from datetime import date
from decimal import Decimal

from talikhata.cli.main import cli
from talikhata.domain.errors import ConflictError, DependencyError, NotFoundError, ValidationError


class TestCustomerService:
    """Tests for CustomerService."""

    def test_create_customer(self, customer_service):
        customer_id = customer_service.create_customer(
            name="  Rahim Uddin ",
            phone="+8801712345678",
            email="Rahim@Example.com",
            tags=["wholesale", " wholesale", ""],
        )

        customer = customer_service.get_customer(customer_id)
        assert customer.name == "Rahim Uddin"
        assert customer.phone == "+8801712345678"
        assert customer.email == "rahim@example.com"
        assert customer.tags == ("wholesale",)
        assert customer.due_amount == Decimal("0.00")

    @pytest.mark.parametrize("name", ["R", "x" * 101, "   "])
    def test_create_customer_rejects_bad_name(self, customer_service, name):
        with pytest.raises(ValidationError, match="Name must be between"):
            customer_service.create_customer(name=name)

    @pytest.mark.parametrize("phone", ["12345", "01212345678", "0171234567"])
    def test_create_customer_rejects_bad_phone(self, customer_service, phone):
        with pytest.raises(ValidationError, match="phone"):
            customer_service.create_customer(name="Rahim Uddin", phone=phone)

    def test_create_customer_rejects_bad_email(self, customer_service):
        with pytest.raises(ValidationError, match="email"):
            customer_service.create_customer(name="Rahim Uddin", email="not-an-email")

    def test_create_customer_rejects_long_address(self, customer_service):
        with pytest.raises(ValidationError, match="Address"):
            customer_service.create_customer(name="Rahim Uddin", address="a" * 501)

    def test_duplicate_phone_is_rejected(self, customer_service, sample_customer):
        with pytest.raises(ConflictError, match="already exists"):
            customer_service.create_customer(name="Another Rahim", phone=sample_customer.phone)

    def test_duplicate_phone_allowed_after_delete(self, customer_service, sample_customer):
        customer_service.delete_customer(sample_customer.id)

        customer_id = customer_service.create_customer(name="New Owner", phone=sample_customer.phone)
        assert customer_service.get_customer(customer_id).phone == sample_customer.phone

    def test_update_customer(self, customer_service, sample_customer):
        updated = customer_service.update_customer(
            sample_customer.id, email="rahim@example.com", address="Mirpur 10", phone=None
        )

        assert updated.email == "rahim@example.com"
        assert updated.address == "Mirpur 10"
        assert updated.phone is None
        assert updated.name == sample_customer.name

    def test_update_customer_conflicting_phone(self, customer_service, sample_customer, other_customer):
        with pytest.raises(ConflictError):
            customer_service.update_customer(other_customer.id, phone=sample_customer.phone)

    def test_update_customer_keeps_own_phone(self, customer_service, sample_customer):
        updated = customer_service.update_customer(sample_customer.id, phone=sample_customer.phone)
        assert updated.phone == sample_customer.phone

    def test_update_missing_customer(self, customer_service):
        with pytest.raises(NotFoundError):
            customer_service.update_customer(999, name="Nobody Here")

    def test_list_customers_sorted_by_due(self, customer_service, transaction_service, sample_customer, other_customer):
        transaction_service.create_transaction(
            customer_id=other_customer.id, type="given", amount=Decimal("900"), date=date(2024, 1, 1)
        )
        transaction_service.create_transaction(
            customer_id=sample_customer.id, type="given", amount=Decimal("100"), date=date(2024, 1, 1)
        )

        customers = customer_service.list_customers(sort_by="due_amount")
        assert [c.id for c in customers] == [other_customer.id, sample_customer.id]

    def test_delete_customer(self, customer_service, sample_customer):
        customer_service.delete_customer(sample_customer.id)

        assert customer_service.get_customer(sample_customer.id) is None
        assert customer_service.list_customers() == []
        with pytest.raises(NotFoundError):
            customer_service.delete_customer(sample_customer.id)

    def test_delete_customer_with_transactions_is_blocked(
        self, customer_service, transaction_service, sample_customer
    ):
        transaction_service.create_transaction(
            customer_id=sample_customer.id, type="given", amount=Decimal("50")
        )

        with pytest.raises(DependencyError, match="1 transaction. Please delete them first"):
            customer_service.delete_customer(sample_customer.id)
        assert customer_service.get_customer(sample_customer.id) is not None

    def test_inactive_customer_cannot_get_transactions(
        self, customer_service, transaction_service, sample_customer
    ):
        customer_service.delete_customer(sample_customer.id)

        with pytest.raises(NotFoundError, match="not active"):
            transaction_service.create_transaction(
                customer_id=sample_customer.id, type="given", amount=Decimal("50")
            )


class TestCustomerCommands:
    """Tests for customer CLI commands."""

    def test_customer_add(self, cli_runner, temp_db):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path",
                temp_db.database_path,
                "customer",
                "add",
                "Rahim Uddin",
                "--phone",
                "01712345678",
                "--tag",
                "wholesale",
            ],
        )

        assert result.exit_code == 0
        assert "Created customer 'Rahim Uddin'" in result.output
        customers = temp_db.list_customers()
        assert len(customers) == 1
        assert customers[0].tags == ("wholesale",)

    def test_customer_add_duplicate_phone(self, cli_runner, temp_db, sample_customer):
        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "customer", "add", "Other", "--phone", "01712345678"],
        )

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_customer_list(self, cli_runner, temp_db, sample_customer, other_customer):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "customer", "list"])

        assert result.exit_code == 0
        assert "Rahim Uddin" in result.output
        assert "Karim Store" in result.output
        assert "Total: 2 customer(s)" in result.output

    def test_customer_list_empty(self, cli_runner, temp_db):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "customer", "list"])

        assert result.exit_code == 0
        assert "No customers found." in result.output

    def test_customer_show_by_name(self, cli_runner, temp_db, sample_customer):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "customer", "show", "rahim uddin"]
        )

        assert result.exit_code == 0
        assert f"ID:          {sample_customer.id}" in result.output
        assert "settled" in result.output

    def test_customer_show_unknown(self, cli_runner, temp_db):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "customer", "show", "Nobody"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_customer_edit(self, cli_runner, temp_db, sample_customer):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path",
                temp_db.database_path,
                "customer",
                "edit",
                str(sample_customer.id),
                "--email",
                "rahim@example.com",
                "--phone",
                "",
            ],
        )

        assert result.exit_code == 0
        customer = temp_db.get_customer(sample_customer.id)
        assert customer.email == "rahim@example.com"
        assert customer.phone is None

    def test_customer_delete_with_confirmation(self, cli_runner, temp_db, sample_customer):
        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "customer", "delete", str(sample_customer.id)],
            input="y\n",
        )

        assert result.exit_code == 0
        assert "Deleted customer" in result.output
        assert temp_db.get_customer(sample_customer.id).is_active is False

    def test_customer_delete_cancelled(self, cli_runner, temp_db, sample_customer):
        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "customer", "delete", str(sample_customer.id)],
            input="n\n",
        )

        assert result.exit_code == 0
        assert "Cancelled." in result.output
        assert temp_db.get_customer(sample_customer.id).is_active is True

    def test_customer_delete_blocked(self, cli_runner, temp_db, transaction_service, sample_customer):
        transaction_service.create_transaction(
            customer_id=sample_customer.id, type="given", amount=Decimal("50")
        )

        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "customer", "delete", str(sample_customer.id), "--yes"]
        )

        assert result.exit_code == 1
        assert "Please delete them first" in result.output

    def test_customer_stats(self, cli_runner, temp_db, transaction_service, sample_customer):
        transaction_service.create_transaction(
            customer_id=sample_customer.id, type="given", amount=Decimal("1000"), refund_amount=Decimal("300")
        )
        transaction_service.create_transaction(
            customer_id=sample_customer.id, type="received", amount=Decimal("200")
        )

        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "customer", "stats", "Rahim Uddin"]
        )

        assert result.exit_code == 0
        assert "Transactions:  2" in result.output
        assert "৳300.00" in result.output
        assert "৳500.00 to receive" in result.output

    def test_customer_show_lists_recent_transactions(
        self, cli_runner, temp_db, transaction_service, sample_customer
    ):
        transaction_service.create_transaction(
            customer_id=sample_customer.id, type="given", amount=Decimal("250"), note="Lentils"
        )

        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "customer", "show", str(sample_customer.id)]
        )

        assert result.exit_code == 0
        assert "Recent transactions:" in result.output
        assert "Lentils" in result.output
        assert "৳250.00 to receive" in result.output
