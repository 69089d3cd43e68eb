"""Services package."""

from shopledger.services.storage import (
    DatabaseClient,
    DuplicateError,
    NotFoundError,
    SQLAlchemyTransactionStorage,
    SQLAlchemyUserStorage,
    StorageConnectionError,
    StorageError,
    TransactionStorageInterface,
    UserStorageInterface,
)

__all__ = [
    "DatabaseClient",
    "DuplicateError",
    "NotFoundError",
    "SQLAlchemyTransactionStorage",
    "SQLAlchemyUserStorage",
    "StorageConnectionError",
    "StorageError",
    "TransactionStorageInterface",
    "UserStorageInterface",
]
