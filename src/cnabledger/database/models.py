"""SQLAlchemy models for cnabledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    BigInteger,
    String,
    ForeignKey,
    DateTime,
    Date,
    Time,
    JSON,
    UniqueConstraint,
    CheckConstraint,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from cnabledger.domain.file_status import FileStatus

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class File(Base):
    """Uploaded CNAB file model."""

    __tablename__ = "files"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    size = Column(Integer, nullable=False)
    storage_key = Column(String, nullable=True)
    uploaded_by = Column(String, nullable=True)
    status = Column(String(20), default=FileStatus.UPLOADED.value, nullable=False, index=True)
    uploaded_at = Column(DateTime, default=_utcnow, nullable=False)
    processed_at = Column(DateTime, nullable=True)
    error_message = Column(String, nullable=True)
    validation_errors = Column(JSON, nullable=True)
    transaction_count = Column(Integer, default=0, nullable=False)
    store_count = Column(Integer, default=0, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "status IN ('Uploaded', 'Processing', 'Processed', 'Rejected')",
            name="ck_files_status",
        ),
    )

    # Relationships
    transactions = relationship(
        "Transaction", back_populates="file", cascade="all, delete-orphan", passive_deletes=True
    )


class Store(Base):
    """Store model. Natural key is (owner_name, name)."""

    __tablename__ = "stores"

    id = Column(String(36), primary_key=True)
    owner_name = Column(String(14), nullable=False)
    name = Column(String(19), nullable=False)
    balance_cents = Column(BigInteger, default=0, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("owner_name", "name", name="uq_store_owner_name"),)

    # Relationships
    transactions = relationship("Transaction", back_populates="store", passive_deletes="all")


class Transaction(Base):
    """Transaction model. Rows are written once and never updated."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    file_id = Column(String(36), ForeignKey("files.id", ondelete="CASCADE"), nullable=False, index=True)
    store_id = Column(String(36), ForeignKey("stores.id", ondelete="RESTRICT"), nullable=False, index=True)
    type_code = Column(String(1), nullable=False)
    amount_cents = Column(BigInteger, nullable=False)
    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)
    payer_id = Column(String(11), nullable=False)
    card = Column(String(12), nullable=False)
    line_number = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # A file can contribute each of its lines only once
    __table_args__ = (
        UniqueConstraint("file_id", "line_number", name="uq_transaction_file_line"),
        CheckConstraint("amount_cents > 0", name="ck_transactions_amount_positive"),
    )

    # Relationships
    file = relationship("File", back_populates="transactions")
    store = relationship("Store", back_populates="transactions")


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """Turn on foreign key enforcement for SQLite connections."""
    module = type(dbapi_connection).__module__
    if module.startswith("sqlite3") or module.startswith("pysqlite"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
