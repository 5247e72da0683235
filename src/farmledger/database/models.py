"""SQLAlchemy models for the farmledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Account(Base):
    """Chart of accounts model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    account_type = Column(String, nullable=False)
    initial_balance = Column(Numeric(14, 2), default=0, nullable=False)
    currency = Column(String(3), nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class JournalEntry(Base):
    """Journal entry header model."""

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    currency = Column(String(3), nullable=False)
    category = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    lines = relationship(
        "JournalLine",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="JournalLine.position",
    )


class JournalLine(Base):
    """Journal entry line model.

    ``account_id`` is deliberately not a foreign key: deleting an account
    leaves its lines in place and the calculators skip them.
    """

    __tablename__ = "journal_lines"

    id = Column(Integer, primary_key=True)
    entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=False)
    position = Column(Integer, nullable=False)
    account_id = Column(Integer, nullable=False, index=True)
    line_type = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    plot_id = Column(String, nullable=True)
    season_id = Column(String, nullable=True)

    # Relationships
    entry = relationship("JournalEntry", back_populates="lines")


class AccountRoleBinding(Base):
    """Binding of a well-known role to an account."""

    __tablename__ = "account_roles"

    role = Column(String, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)


class ExpenseClassification(Base):
    """Projection bucket override for an expense account."""

    __tablename__ = "expense_classifications"

    account_id = Column(Integer, ForeignKey("accounts.id"), primary_key=True)
    expense_class = Column(String, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
