"""Shared pytest fixtures for talikhata tests."""

import tempfile
import os
import pytest

from talikhata.database.factories import create_sqlite_database
from talikhata.domain.customer import CustomerService
from talikhata.domain.ledger import CustomerLocks, LedgerEngine
from talikhata.domain.summary import SummaryService
from talikhata.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def locks():
    """A private lock registry so tests never share locks."""
    return CustomerLocks()


@pytest.fixture
def ledger(temp_db, locks):
    """Create a LedgerEngine with a temporary database."""
    return LedgerEngine(temp_db, locks=locks)


@pytest.fixture
def customer_service(temp_db, locks):
    """Create a CustomerService with a temporary database."""
    return CustomerService(temp_db, locks=locks)


@pytest.fixture
def transaction_service(temp_db, ledger):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db, ledger=ledger)


@pytest.fixture
def summary_service(temp_db):
    """Create a SummaryService with a temporary database."""
    return SummaryService(temp_db)


@pytest.fixture
def sample_customer(customer_service):
    """Create a sample customer for testing."""
    customer_id = customer_service.create_customer(name="Rahim Uddin", phone="01712345678")
    return customer_service.get_customer(customer_id)


@pytest.fixture
def other_customer(customer_service):
    """Create a second customer for testing."""
    customer_id = customer_service.create_customer(name="Karim Store", phone="01812345678")
    return customer_service.get_customer(customer_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
