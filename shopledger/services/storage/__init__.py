"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements SQLAlchemy as the backend, but designed to be swappable.
"""

from shopledger.services.storage.interface import (
    DuplicateError,
    NotFoundError,
    StorageConnectionError,
    StorageError,
    TransactionStorageInterface,
    UserStorageInterface,
)
from shopledger.services.storage.database import (
    Base,
    DatabaseClient,
    SQLAlchemyTransactionStorage,
    SQLAlchemyUserStorage,
)

__all__ = [
    # Interfaces
    "TransactionStorageInterface",
    "UserStorageInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageConnectionError",
    "StorageError",
    # SQLAlchemy implementation
    "Base",
    "DatabaseClient",
    "SQLAlchemyTransactionStorage",
    "SQLAlchemyUserStorage",
]
