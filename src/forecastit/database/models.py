"""SQLAlchemy models for forecastit database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    Index,
    UniqueConstraint,
    create_engine,
    event,
    text,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Account(Base):
    """Bank account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    account_type = Column(String, default="checking", nullable=False)
    current_balance = Column(Numeric(12, 2), default=0, nullable=False)
    balance_date = Column(Date, nullable=False)
    warning_threshold = Column(Numeric(12, 2), default=300, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    entries = relationship("LedgerEntry", back_populates="account", cascade="all, delete-orphan")
    recurring_rules = relationship(
        "RecurringRule",
        back_populates="account",
        foreign_keys="RecurringRule.account_id",
        cascade="all, delete-orphan",
    )


class CategoryGroup(Base):
    """Category group model."""

    __tablename__ = "category_groups"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    color = Column(String, nullable=False)
    display_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    categories = relationship("Category", back_populates="group", cascade="all, delete-orphan")


class Category(Base):
    """Category model, always inside a group."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    group_id = Column(Integer, ForeignKey("category_groups.id"), nullable=False)
    display_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("group_id", "name", name="uq_category_group_name"),)

    # Relationships
    group = relationship("CategoryGroup", back_populates="categories")


class RecurringRule(Base):
    """Recurring rule model."""

    __tablename__ = "recurring_rules"

    id = Column(Integer, primary_key=True)
    description = Column(String, nullable=False)
    rule_type = Column(String, default="income", nullable=False)
    frequency = Column(String, default="weekly", nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    anchor_date = Column(Date, nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    destination_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    day_of_month = Column(Integer, nullable=True)
    day_of_week = Column(Integer, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    is_estimated = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    account = relationship("Account", back_populates="recurring_rules", foreign_keys=[account_id])
    destination_account = relationship("Account", foreign_keys=[destination_account_id])
    entries = relationship("LedgerEntry", back_populates="recurring_rule", cascade="all, delete-orphan")


class LedgerEntry(Base):
    """Ledger entry (transaction) model."""

    __tablename__ = "ledger_entries"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    recurring_rule_id = Column(Integer, ForeignKey("recurring_rules.id"), nullable=True, index=True)
    linked_entry_id = Column(
        Integer, ForeignKey("ledger_entries.id", ondelete="SET NULL"), nullable=True, index=True
    )
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    date = Column(Date, nullable=False, index=True)
    description = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String, default="estimated", nullable=False)
    user_modified = Column(Boolean, default=False, nullable=False)
    original_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # At most one generated entry per rule, account and date. Transfer pairs
    # share rule and date but live in different accounts.
    __table_args__ = (
        Index(
            "uq_entry_rule_account_date",
            "recurring_rule_id",
            "account_id",
            "date",
            unique=True,
            sqlite_where=text("recurring_rule_id IS NOT NULL"),
            postgresql_where=text("recurring_rule_id IS NOT NULL"),
        ),
        Index("ix_entry_account_date", "account_id", "date"),
    )

    # Relationships
    account = relationship("Account", back_populates="entries")
    recurring_rule = relationship("RecurringRule", back_populates="entries")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_session_factory(database_url: str, **engine_options) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory.

    Extra keyword arguments are passed to create_engine.
    """
    engine = create_engine(database_url, echo=False, **engine_options)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
