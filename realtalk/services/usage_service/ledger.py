"""Monthly usage ledger.

Every rewrite or smooth request counts against a per-user monthly quota:
20 for free users, 1000 for pro users. Counters reset on the first day of
each month (UTC). Unknown users are created on first access.
A request is reserved before it runs, so concurrent requests at the last
free slot cannot both get through.

No PII in logs: user ids are only logged as salted hashes.
"""
import logging
import os
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from realtalk.shared.utils import hash_pii
from .store import InMemoryUsageStore, UsageRecord, UsageStore

logger = logging.getLogger(__name__)

FREE_STATUS = "free"
PRO_STATUS = "pro"
SUBSCRIPTION_STATUSES = frozenset({FREE_STATUS, PRO_STATUS})


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def first_of_next_month(now: datetime) -> datetime:
    """Midnight UTC on the first day of the month after now."""
    if now.month == 12:
        return datetime(now.year + 1, 1, 1, tzinfo=timezone.utc)
    return datetime(now.year, now.month + 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class UsageLimits:
    """Monthly request limits per subscription status."""
    free: int = 20
    pro: int = 1000

    def __post_init__(self):
        if self.free < 0 or self.pro < 0:
            raise ValueError("Usage limits must be >= 0")

    def limit_for(self, status: str) -> int:
        return self.pro if status == PRO_STATUS else self.free

    @classmethod
    def from_env(cls) -> "UsageLimits":
        """Create limits from USAGE_FREE_LIMIT / USAGE_PRO_LIMIT."""
        return cls(
            free=int(os.getenv("USAGE_FREE_LIMIT", "20")),
            pro=int(os.getenv("USAGE_PRO_LIMIT", "1000")),
        )


@dataclass(frozen=True)
class UsageStatus:
    """Quota snapshot returned to callers."""
    status: str
    usage: int
    limit: int
    remaining: int
    reset_date: datetime
    can_use: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "usage": self.usage,
            "limit": self.limit,
            "remaining": self.remaining,
            "reset_date": self.reset_date.isoformat(),
            "can_use": self.can_use,
        }


class UsageLimitExceeded(Exception):
    """The user has no requests left this month."""

    def __init__(self, usage_status: UsageStatus):
        super().__init__(
            f"Monthly limit of {usage_status.limit} requests reached "
            f"(resets {usage_status.reset_date.date().isoformat()})"
        )
        self.usage_status = usage_status


class UsageLedger:
    """Checks and records per-user monthly usage."""

    def __init__(
        self,
        store: Optional[UsageStore] = None,
        limits: Optional[UsageLimits] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize ledger.

        Args:
            store: Usage storage (in-memory by default)
            limits: Monthly limits per subscription status
            clock: Returns the current UTC time, injectable for tests
        """
        self.store = store or InMemoryUsageStore()
        self.limits = limits or UsageLimits()
        self.clock = clock
        # Serializes create-or-reset so two first requests can't race
        self._lock = threading.Lock()

        logger.info(
            "USAGE_LEDGER_INITIALIZED",
            extra={
                "store": type(self.store).__name__,
                "free_limit": self.limits.free,
                "pro_limit": self.limits.pro,
            }
        )

    def check_usage(self, user_id: str) -> UsageStatus:
        """Current quota for a user, resetting the month if it rolled over."""
        return self._status(self._current_record(user_id))

    def increment_usage(self, user_id: str) -> UsageStatus:
        """Record one request and return the updated quota."""
        self._current_record(user_id)
        record = self.store.increment(user_id)
        status = self._status(record)

        logger.info(
            "USAGE_INCREMENTED",
            extra={
                "user_id_hash": hash_pii(user_id),
                "usage": status.usage,
                "limit": status.limit,
            }
        )
        return status

    def reserve_usage(self, user_id: str) -> UsageStatus:
        """Claim one request from the quota in a single atomic step.

        Two concurrent requests at the last free slot cannot both succeed:
        the store only increments while the count is below the limit.

        Raises:
            UsageLimitExceeded: If no requests remain this month
        """
        record = self._current_record(user_id)
        limit = self.limits.limit_for(record.subscription_status or FREE_STATUS)
        reserved = self.store.increment_if_below(user_id, limit)

        if reserved is None:
            status = self._status(self.store.get(user_id) or record)
            logger.warning(
                "USAGE_LIMIT_REACHED",
                extra={"user_id_hash": hash_pii(user_id), "limit": status.limit}
            )
            raise UsageLimitExceeded(status)

        status = self._status(reserved)
        logger.info(
            "USAGE_RESERVED",
            extra={
                "user_id_hash": hash_pii(user_id),
                "usage": status.usage,
                "limit": status.limit,
            }
        )
        return status

    def set_subscription_status(self, user_id: str, status: str) -> UsageStatus:
        """Set a user's plain subscription status ("free" or "pro").

        Raises:
            ValueError: If the status is unknown
        """
        if status not in SUBSCRIPTION_STATUSES:
            raise ValueError(f"Unknown subscription status: {status!r}")

        with self._lock:
            record = self._current_record_locked(user_id)
            record = self.store.save(replace(record, subscription_status=status))

        logger.info(
            "SUBSCRIPTION_STATUS_UPDATED",
            extra={"user_id_hash": hash_pii(user_id), "status": status}
        )
        return self._status(record)

    def _current_record(self, user_id: str) -> UsageRecord:
        with self._lock:
            return self._current_record_locked(user_id)

    def _current_record_locked(self, user_id: str) -> UsageRecord:
        if not isinstance(user_id, str) or not user_id.strip():
            raise ValueError("User ID is required")

        now = self.clock()
        record = self.store.get(user_id)

        if record is None:
            record = self.store.create(UsageRecord(
                user_id=user_id,
                usage_count=0,
                usage_reset_date=first_of_next_month(now),
                subscription_status=FREE_STATUS,
                created_at=now,
            ))
            logger.info("USAGE_USER_CREATED", extra={"user_id_hash": hash_pii(user_id)})

        elif now > record.usage_reset_date:
            record = self.store.save(replace(
                record,
                usage_count=0,
                usage_reset_date=first_of_next_month(now),
            ))
            logger.info(
                "USAGE_RESET",
                extra={
                    "user_id_hash": hash_pii(user_id),
                    "next_reset": record.usage_reset_date.isoformat(),
                }
            )

        return record

    def _status(self, record: UsageRecord) -> UsageStatus:
        status = record.subscription_status or FREE_STATUS
        limit = self.limits.limit_for(status)
        remaining = max(0, limit - record.usage_count)
        return UsageStatus(
            status=status,
            usage=record.usage_count,
            limit=limit,
            remaining=remaining,
            reset_date=record.usage_reset_date,
            can_use=remaining > 0,
        )
