"""Usage Service: monthly per-user request quotas.

Components:
- store.py: UsageRecord plus in-memory and PostgreSQL stores
- ledger.py: UsageLedger (check, increment, monthly reset, limits)
- handler.py: Flask HTTP endpoints (/usage/check, /usage/increment)

Usage:
    from realtalk.services.usage_service import UsageLedger
    ledger = UsageLedger()
    if ledger.check_usage(user_id).can_use:
        ...
        ledger.increment_usage(user_id)
"""

from .ledger import (
    UsageLedger,
    UsageLimits,
    UsageStatus,
    UsageLimitExceeded,
    first_of_next_month,
)
from .store import (
    UsageRecord,
    UsageStore,
    InMemoryUsageStore,
    PostgresUsageRepository,
)

__all__ = [
    "UsageLedger",
    "UsageLimits",
    "UsageStatus",
    "UsageLimitExceeded",
    "first_of_next_month",
    "UsageRecord",
    "UsageStore",
    "InMemoryUsageStore",
    "PostgresUsageRepository",
]
