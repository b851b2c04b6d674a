"""Usage record storage.

Two stores share one interface: an in-memory store for development and
tests, and a PostgreSQL repository over the users table:

    CREATE TABLE users (
        user_id TEXT PRIMARY KEY,
        usage_count INTEGER NOT NULL DEFAULT 0,
        usage_reset_date TIMESTAMPTZ NOT NULL,
        subscription_status TEXT NOT NULL DEFAULT 'free',
        created_at TIMESTAMPTZ NOT NULL
    );
"""
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional

from realtalk.shared.database import (
    BaseRepository,
    ConnectionManager,
    DuplicateError,
    NotFoundError,
)


@dataclass(frozen=True)
class UsageRecord:
    """Stored usage counters for one extension user."""
    user_id: str
    usage_count: int
    usage_reset_date: datetime
    subscription_status: str
    created_at: datetime

    def __post_init__(self):
        if self.usage_count < 0:
            raise ValueError(f"usage_count must be >= 0, got {self.usage_count}")


class UsageStore(ABC):
    """Storage interface used by the usage ledger."""

    @abstractmethod
    def get(self, user_id: str) -> Optional[UsageRecord]:
        """Return the record for a user, or None."""

    @abstractmethod
    def create(self, record: UsageRecord) -> UsageRecord:
        """Insert a new record; return the existing one if the user exists."""

    @abstractmethod
    def save(self, record: UsageRecord) -> UsageRecord:
        """Insert or replace a record."""

    @abstractmethod
    def increment(self, user_id: str) -> UsageRecord:
        """Atomically add one to a user's usage count.

        Raises:
            NotFoundError: If the user has no record
        """

    @abstractmethod
    def increment_if_below(self, user_id: str, limit: int) -> Optional[UsageRecord]:
        """Atomically add one to the usage count if it is below limit.

        Returns:
            The updated record, or None when the count already reached
            limit (or, for the database store, when the user has no row)
        """


class InMemoryUsageStore(UsageStore):
    """Thread-safe dictionary store."""

    def __init__(self):
        self._records: Dict[str, UsageRecord] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> Optional[UsageRecord]:
        with self._lock:
            return self._records.get(user_id)

    def create(self, record: UsageRecord) -> UsageRecord:
        with self._lock:
            return self._records.setdefault(record.user_id, record)

    def save(self, record: UsageRecord) -> UsageRecord:
        with self._lock:
            self._records[record.user_id] = record
            return record

    def increment(self, user_id: str) -> UsageRecord:
        with self._lock:
            record = self._records.get(user_id)
            if record is None:
                raise NotFoundError("No usage record for user")
            record = replace(record, usage_count=record.usage_count + 1)
            self._records[user_id] = record
            return record

    def increment_if_below(self, user_id: str, limit: int) -> Optional[UsageRecord]:
        with self._lock:
            record = self._records.get(user_id)
            if record is None or record.usage_count >= limit:
                return None
            record = replace(record, usage_count=record.usage_count + 1)
            self._records[user_id] = record
            return record


class PostgresUsageRepository(BaseRepository[UsageRecord], UsageStore):
    """Usage records in the PostgreSQL users table."""

    columns = ("user_id", "usage_count", "usage_reset_date", "subscription_status", "created_at")

    def __init__(self, connection_manager: ConnectionManager):
        super().__init__(connection_manager, table_name="users", key_column="user_id")

    def _row_to_entity(self, row: tuple) -> UsageRecord:
        return UsageRecord(
            user_id=row[0],
            usage_count=row[1],
            usage_reset_date=row[2],
            subscription_status=row[3],
            created_at=row[4],
        )

    def _entity_to_params(self, entity: UsageRecord) -> Dict[str, Any]:
        return {
            "user_id": entity.user_id,
            "usage_count": entity.usage_count,
            "usage_reset_date": entity.usage_reset_date,
            "subscription_status": entity.subscription_status,
            "created_at": entity.created_at,
        }

    def get(self, user_id: str) -> Optional[UsageRecord]:
        return self.find_by_id(user_id)

    def create(self, record: UsageRecord) -> UsageRecord:
        try:
            return self.insert(record)
        except DuplicateError:
            return self.get_by_id(record.user_id)

    def increment(self, user_id: str) -> UsageRecord:
        query = (
            f"UPDATE {self.table_name} SET usage_count = usage_count + 1 "
            f"WHERE user_id = %s RETURNING {', '.join(self.columns)}"
        )
        row = self._fetch_one(query, (user_id,), commit=True)
        if row is None:
            raise NotFoundError("No usage record for user")
        return self._row_to_entity(row)

    def increment_if_below(self, user_id: str, limit: int) -> Optional[UsageRecord]:
        query = (
            f"UPDATE {self.table_name} SET usage_count = usage_count + 1 "
            f"WHERE user_id = %s AND usage_count < %s RETURNING {', '.join(self.columns)}"
        )
        row = self._fetch_one(query, (user_id, limit), commit=True)
        return self._row_to_entity(row) if row is not None else None
