"""SQLAlchemy models for talikhata database."""

from datetime import datetime, date, UTC
from decimal import Decimal
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    JSON,
    Index,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Customer(Base):
    """Customer model with denormalized balance totals."""

    __tablename__ = "customers"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    address = Column(String(500), nullable=True)
    description = Column(String(1000), nullable=True)
    photo_url = Column(String, nullable=True)
    tags = Column(JSON, default=list, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Written only by the ledger engine
    total_given = Column(Numeric(14, 2), default=Decimal("0.00"), nullable=False)
    total_received = Column(Numeric(14, 2), default=Decimal("0.00"), nullable=False)
    due_amount = Column(Numeric(14, 2), default=Decimal("0.00"), nullable=False)

    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (
        Index("ix_customers_name", "name"),
        Index("ix_customers_phone", "phone"),
        Index("ix_customers_email", "email"),
        Index("ix_customers_is_active", "is_active"),
    )

    # Relationships
    transactions = relationship("Transaction", back_populates="customer")


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    type = Column(String(16), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    refund_amount = Column(Numeric(14, 2), default=Decimal("0.00"), nullable=False)
    note = Column(String(500), nullable=True)
    refund_note = Column(String(500), nullable=True)
    date = Column(Date, default=date.today, nullable=False)
    time = Column(String(5), nullable=False)
    due_date = Column(Date, nullable=True)
    payment_method = Column(String(32), default="cash", nullable=False)
    is_paid = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (
        Index("ix_transactions_customer_id", "customer_id"),
        Index("ix_transactions_type", "type"),
        Index("ix_transactions_customer_date", "customer_id", "date"),
    )

    # Relationships
    customer = relationship("Customer", back_populates="transactions")


def create_db_engine(database_url: str) -> Engine:
    """Create a SQLAlchemy engine and make sure all tables exist."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    return sessionmaker(bind=engine)
