"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap SQLite for PostgreSQL (or anything else) without touching flows
2. Keep business logic decoupled from storage implementation

The interface is intentionally simple. It performs NO authorization:
callers must check that the acting user owns a transaction before
updating or deleting it.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from shopledger.models.transaction import Transaction, TransactionFields
from shopledger.models.user import UserRecord


class TransactionStorageInterface(ABC):
    """
    Abstract interface for transaction storage operations.

    Any storage implementation (SQLite, PostgreSQL, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def create_transaction(
        self,
        user_id: int,
        fields: TransactionFields,
    ) -> Transaction:
        """
        Persist a new transaction for a user.

        The timestamp defaults to now when the fields carry none.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def create_transactions(
        self,
        user_id: int,
        fields: list[TransactionFields],
    ) -> list[Transaction]:
        """
        Persist several transactions atomically.

        Either every row is committed or none is.

        Returns:
            The created transactions, in input order
        """
        pass

    @abstractmethod
    async def get_transaction_by_id(
        self,
        transaction_id: int,
    ) -> Optional[Transaction]:
        """
        Retrieve a transaction by its ID.

        Returns:
            The transaction if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_transactions(
        self,
        user_id: int,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> list[Transaction]:
        """
        List a user's transactions in storage order.

        Args:
            user_id: Owning user
            date_from: Only transactions at or after this moment
            date_to: Only transactions at or before this moment

        Returns:
            Matching transactions, oldest insert first
        """
        pass

    @abstractmethod
    async def update_transaction(
        self,
        transaction_id: int,
        fields: TransactionFields,
    ) -> Transaction:
        """
        Replace the writable fields of a transaction.

        The timestamp is only changed when the fields carry one.

        Raises:
            NotFoundError: If the transaction doesn't exist
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction. Deleting a missing id is a no-op."""
        pass


class UserStorageInterface(ABC):
    """Abstract interface for user accounts."""

    @abstractmethod
    async def create_user(
        self,
        username: str,
        name: str,
        password_hash: str,
    ) -> UserRecord:
        """
        Create a user.

        Raises:
            DuplicateError: If the username is taken
        """
        pass

    @abstractmethod
    async def get_user(self, user_id: int) -> Optional[UserRecord]:
        pass

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
