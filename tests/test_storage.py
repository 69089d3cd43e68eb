"""
Tests for the SQLAlchemy storage layer (in-memory SQLite).
"""

from datetime import datetime
from decimal import Decimal

import pytest

from shopledger.config import DatabaseSettings
from shopledger.models import TransactionFields, TransactionType
from shopledger.services.storage import (
    DatabaseClient,
    DuplicateError,
    NotFoundError,
)

from conftest import run


def fields(amount="10", type="expense", category="Rent", timestamp=None, description=None):
    return TransactionFields(
        type=type,
        amount=amount,
        category=category,
        description=description,
        timestamp=timestamp,
    )


class TestDatabaseClient:
    """Tests for the database client."""

    def test_connect_runs_against_sqlite(self):
        """Test connect returns a working engine."""
        client = DatabaseClient(settings=DatabaseSettings(url="sqlite://"))
        assert client.connect() is client.engine


class TestTransactionStorage:
    """Tests for SQLAlchemyTransactionStorage."""

    def test_create_assigns_id_and_timestamp(self, owner, transaction_storage):
        """Test a new row gets an id and a default timestamp."""
        created = run(transaction_storage.create_transaction(owner.id, fields("12.50")))
        assert created.id is not None
        assert created.user_id == owner.id
        assert created.amount == Decimal("12.50")
        assert created.type == TransactionType.EXPENSE
        assert isinstance(created.timestamp, datetime)

    def test_get_by_id(self, owner, transaction_storage):
        """Test a stored transaction reads back by id."""
        created = run(transaction_storage.create_transaction(owner.id, fields(description="Shop rent")))
        fetched = run(transaction_storage.get_transaction_by_id(created.id))
        assert fetched == created

    def test_get_missing_returns_none(self, transaction_storage):
        """Test an unknown id gives None."""
        assert run(transaction_storage.get_transaction_by_id(999)) is None

    def test_list_in_insertion_order_and_scoped_to_user(self, owner, user_storage, transaction_storage):
        """Test listings keep insertion order and only hold the owner's rows."""
        other = run(user_storage.create_user("other", "Other", "hash"))
        first = run(transaction_storage.create_transaction(owner.id, fields("1", timestamp=datetime(2024, 5, 1))))
        run(transaction_storage.create_transaction(other.id, fields("2")))
        second = run(transaction_storage.create_transaction(owner.id, fields("3", timestamp=datetime(2023, 5, 1))))

        listed = run(transaction_storage.list_transactions(owner.id))
        assert [t.id for t in listed] == [first.id, second.id]

    def test_list_with_date_filter(self, owner, transaction_storage):
        """Test date bounds filter inclusively."""
        run(transaction_storage.create_transaction(owner.id, fields("1", timestamp=datetime(2024, 1, 10))))
        inside = run(transaction_storage.create_transaction(owner.id, fields("2", timestamp=datetime(2024, 2, 10))))
        run(transaction_storage.create_transaction(owner.id, fields("3", timestamp=datetime(2024, 3, 10))))

        listed = run(transaction_storage.list_transactions(
            owner.id,
            date_from=datetime(2024, 2, 1),
            date_to=datetime(2024, 2, 29, 23, 59, 59),
        ))
        assert [t.id for t in listed] == [inside.id]

    def test_update_replaces_fields(self, owner, transaction_storage):
        """Test an update replaces every writable field."""
        created = run(transaction_storage.create_transaction(owner.id, fields("10")))
        updated = run(transaction_storage.update_transaction(
            created.id,
            fields("99.99", type="profit", category="Sales", description="Corrected"),
        ))
        assert updated.id == created.id
        assert updated.amount == Decimal("99.99")
        assert updated.type == TransactionType.PROFIT
        assert updated.description == "Corrected"
        # No timestamp given: the original is kept
        assert updated.timestamp == created.timestamp

    def test_update_missing_raises(self, transaction_storage):
        """Test updating an unknown id raises NotFoundError."""
        with pytest.raises(NotFoundError):
            run(transaction_storage.update_transaction(404, fields()))

    def test_delete(self, owner, transaction_storage):
        """Test a deleted transaction is gone."""
        created = run(transaction_storage.create_transaction(owner.id, fields()))
        run(transaction_storage.delete_transaction(created.id))
        assert run(transaction_storage.get_transaction_by_id(created.id)) is None

    def test_delete_missing_is_noop(self, transaction_storage):
        """Test deleting an unknown id does nothing."""
        run(transaction_storage.delete_transaction(12345))


class TestUserStorage:
    """Tests for SQLAlchemyUserStorage."""

    def test_create_and_lookup(self, user_storage):
        """Test a user is found by id and username."""
        created = run(user_storage.create_user("alice", "Alice", "hash"))
        assert run(user_storage.get_user(created.id)) == created
        assert run(user_storage.get_user_by_username("alice")) == created

    def test_unknown_user(self, user_storage):
        """Test an unknown user id gives None."""
        assert run(user_storage.get_user(42)) is None
        assert run(user_storage.get_user_by_username("nobody")) is None

    def test_duplicate_username_rejected(self, user_storage):
        """Test usernames are unique."""
        run(user_storage.create_user("alice", "Alice", "hash"))
        with pytest.raises(DuplicateError):
            run(user_storage.create_user("alice", "Another Alice", "hash2"))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
