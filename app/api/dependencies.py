from datetime import datetime, timezone, tzinfo
from functools import lru_cache
from typing import Optional

from app.core.config import settings
from app.features.analysis.service import CompanionAnalyzer
from app.features.journal.store import EntryStore


@lru_cache(maxsize=1)
def get_analyzer() -> CompanionAnalyzer:
    """Provide a singleton Claude analyzer for request handlers."""
    return CompanionAnalyzer()


@lru_cache(maxsize=1)
def get_store() -> EntryStore:
    """Provide the process-wide entry store for request handlers."""
    return EntryStore()


def get_now() -> datetime:
    """Reference instant for time-dependent metrics."""
    return datetime.now(timezone.utc)


def get_timezone() -> Optional[tzinfo]:
    """Zone used for calendar bucketing; None is the server's local time."""
    return settings.JOURNAL_TIMEZONE
