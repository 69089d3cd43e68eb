"""
SQLAlchemy Storage Implementation

DESIGN DECISION: A single relational table per entity, mapped with
SQLAlchemy's declarative ORM:
1. SQLite works out of the box for a single shop
2. The same code runs on PostgreSQL by changing DATABASE_URL
3. The amount/type invariants are repeated as CHECK constraints

TRADEOFFS:
- Sessions are synchronous; the async interface methods block the
  event loop for the duration of a query (fine at shop scale)
- Tables are created with create_all; there are no migrations

The implementation follows the abstract interface, so flows never
import SQLAlchemy directly.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Engine,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    create_engine,
    select,
    text,
)
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    Session,
    mapped_column,
    sessionmaker,
)
from sqlalchemy.pool import StaticPool
from tenacity import retry, stop_after_attempt, wait_exponential

from shopledger.config import DatabaseSettings, get_settings
from shopledger.models.transaction import (
    Transaction,
    TransactionFields,
    TransactionType,
    utc_now,
)
from shopledger.models.user import UserRecord
from shopledger.services.storage.interface import (
    DuplicateError,
    NotFoundError,
    StorageConnectionError,
    StorageError,
    TransactionStorageInterface,
    UserStorageInterface,
)
from shopledger.telemetry import get_logger


logger = get_logger(__name__)


class Base(DeclarativeBase):
    pass


class UserRow(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    password: Mapped[str] = mapped_column(Text, nullable=False)


class TransactionRow(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
        CheckConstraint(
            "type IN ('profit', 'expense')",
            name="ck_transactions_type",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utc_now
    )


class DatabaseClient:
    """
    Low-level engine/session wrapper.

    Handles engine creation and provides retry logic for the
    initial connection.
    """

    def __init__(
        self,
        settings: Optional[DatabaseSettings] = None,
        engine: Optional[Engine] = None,
    ):
        self._settings = settings or get_settings().database
        self._engine = engine
        self._session_factory: Optional[sessionmaker] = None

    @staticmethod
    def _engine_options(url: str) -> dict:
        """SQLite needs cross-thread access; in-memory SQLite needs one shared connection."""
        if not url.startswith("sqlite"):
            return {"pool_pre_ping": True}
        options: dict = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = create_engine(
                self._settings.url,
                echo=self._settings.echo,
                **self._engine_options(self._settings.url),
            )
        return self._engine

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> Engine:
        """
        Verify the database is reachable.

        Retries a few times so that a database container that is
        still starting does not fail the whole app.
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise StorageConnectionError(f"Failed to connect to database: {e}")
        return self.engine

    def create_tables(self) -> None:
        """Create any missing tables."""
        Base.metadata.create_all(self.engine)
        logger.info("database_tables_ready", url=self.engine.url.render_as_string())

    def session(self) -> Session:
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.engine,
                expire_on_commit=False,
            )
        return self._session_factory()


def _row_to_transaction(row: TransactionRow) -> Transaction:
    return Transaction(
        id=row.id,
        user_id=row.user_id,
        type=TransactionType(row.type),
        amount=Decimal(row.amount),
        category=row.category,
        description=row.description,
        timestamp=row.timestamp,
    )


def _row_to_user(row: UserRow) -> UserRecord:
    return UserRecord(
        id=row.id,
        username=row.username,
        name=row.name,
        password_hash=row.password,
    )


def _fields_to_row(user_id: int, fields: TransactionFields) -> TransactionRow:
    return TransactionRow(
        user_id=user_id,
        type=fields.type.value,
        amount=fields.amount,
        category=fields.category,
        description=fields.description,
        timestamp=fields.timestamp or utc_now(),
    )


class SQLAlchemyTransactionStorage(TransactionStorageInterface):
    """
    SQLAlchemy implementation of transaction storage.

    Each call opens its own session and commits before returning.
    """

    def __init__(self, client: Optional[DatabaseClient] = None):
        self._client = client or DatabaseClient()

    async def create_transaction(
        self,
        user_id: int,
        fields: TransactionFields,
    ) -> Transaction:
        created = await self.create_transactions(user_id, [fields])
        return created[0]

    async def create_transactions(
        self,
        user_id: int,
        fields: list[TransactionFields],
    ) -> list[Transaction]:
        rows = [_fields_to_row(user_id, f) for f in fields]
        try:
            with self._client.session() as session:
                session.add_all(rows)
                session.commit()
                return [_row_to_transaction(row) for row in rows]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to save transactions: {e}")

    async def get_transaction_by_id(
        self,
        transaction_id: int,
    ) -> Optional[Transaction]:
        try:
            with self._client.session() as session:
                row = session.get(TransactionRow, transaction_id)
                return _row_to_transaction(row) if row else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to get transaction: {e}")

    async def list_transactions(
        self,
        user_id: int,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> list[Transaction]:
        stmt = select(TransactionRow).where(TransactionRow.user_id == user_id)
        if date_from:
            stmt = stmt.where(TransactionRow.timestamp >= date_from)
        if date_to:
            stmt = stmt.where(TransactionRow.timestamp <= date_to)
        stmt = stmt.order_by(TransactionRow.id)

        try:
            with self._client.session() as session:
                rows = session.execute(stmt).scalars().all()
                return [_row_to_transaction(row) for row in rows]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list transactions: {e}")

    async def update_transaction(
        self,
        transaction_id: int,
        fields: TransactionFields,
    ) -> Transaction:
        try:
            with self._client.session() as session:
                row = session.get(TransactionRow, transaction_id)
                if row is None:
                    raise NotFoundError(f"Transaction with ID {transaction_id} not found")

                row.type = fields.type.value
                row.amount = fields.amount
                row.category = fields.category
                row.description = fields.description
                if fields.timestamp:
                    row.timestamp = fields.timestamp

                session.commit()
                return _row_to_transaction(row)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to update transaction: {e}")

    async def delete_transaction(self, transaction_id: int) -> None:
        try:
            with self._client.session() as session:
                row = session.get(TransactionRow, transaction_id)
                if row is not None:
                    session.delete(row)
                    session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete transaction: {e}")


class SQLAlchemyUserStorage(UserStorageInterface):
    """SQLAlchemy implementation of user storage."""

    def __init__(self, client: Optional[DatabaseClient] = None):
        self._client = client or DatabaseClient()

    async def create_user(
        self,
        username: str,
        name: str,
        password_hash: str,
    ) -> UserRecord:
        row = UserRow(username=username, name=name, password=password_hash)
        try:
            with self._client.session() as session:
                session.add(row)
                session.commit()
                return _row_to_user(row)
        except IntegrityError:
            raise DuplicateError(f"Username already exists: {username}")
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to create user: {e}")

    async def get_user(self, user_id: int) -> Optional[UserRecord]:
        try:
            with self._client.session() as session:
                row = session.get(UserRow, user_id)
                return _row_to_user(row) if row else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to get user: {e}")

    async def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        stmt = select(UserRow).where(UserRow.username == username)
        try:
            with self._client.session() as session:
                row = session.execute(stmt).scalars().first()
                return _row_to_user(row) if row else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to get user: {e}")
