"""Integration tests for end-to-end workflows."""

from decimal import Decimal

from talikhata.cli.main import cli


def _customer_id(output: str) -> str:
    # "Created customer 'Rahim Uddin' (ID: 1)"
    return output.split("ID:")[1].strip().rstrip(")")


def test_full_workflow(cli_runner, temp_db):
    """Customer -> give -> receive -> edit -> delete -> summary -> repair."""
    db = ["--db-path", temp_db.database_path]

    result = cli_runner.invoke(cli, db + ["customer", "add", "Rahim Uddin", "--phone", "01712345678"])
    assert result.exit_code == 0
    customer_id = _customer_id(result.output)

    result = cli_runner.invoke(cli, db + ["give", customer_id, "500", "--note", "Rice"])
    assert result.exit_code == 0
    result = cli_runner.invoke(cli, db + ["receive", "Rahim Uddin", "200"])
    assert result.exit_code == 0
    assert "৳300.00 to receive" in result.output

    given = temp_db.list_transactions(type="given")[0]
    result = cli_runner.invoke(
        cli, db + ["transaction", "update", str(given.id), "--refund", "50", "--note", ""]
    )
    assert result.exit_code == 0
    customer = temp_db.get_customer(int(customer_id))
    assert customer.due_amount == Decimal("250.00")
    assert customer.total_given == Decimal("500.00")
    assert temp_db.get_transaction(given.id).note is None

    result = cli_runner.invoke(cli, db + ["transaction", "delete", str(given.id), "--yes"])
    assert result.exit_code == 0
    assert "৳200.00 to give" in result.output

    result = cli_runner.invoke(cli, db + ["summary"])
    assert result.exit_code == 0
    assert "৳200.00" in result.output

    result = cli_runner.invoke(cli, db + ["repair", "--dry-run"])
    assert result.exit_code == 0
    assert "All customer totals match their transactions." in result.output

    # Customers with history cannot be removed
    result = cli_runner.invoke(cli, db + ["customer", "delete", customer_id, "--yes"])
    assert result.exit_code == 1
    assert "Please delete them first" in result.output


def test_verbose_logging(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "--verbose", "customer", "add", "Rahim Uddin"]
    )

    assert result.exit_code == 0
    assert "talikhata.domain.customer - INFO - Created customer" in result.output


def test_help_does_not_touch_database(cli_runner, tmp_path):
    db_path = tmp_path / "never.db"

    result = cli_runner.invoke(cli, ["--db-path", str(db_path), "--help"])

    assert result.exit_code == 0
    assert "customer" in result.output
    assert not db_path.exists()


def test_db_path_from_environment(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli,
        ["customer", "add", "Env Customer"],
        env={"TALIKHATA_DB_PATH": temp_db.database_path},
    )

    assert result.exit_code == 0
    assert [c.name for c in temp_db.list_customers()] == ["Env Customer"]
