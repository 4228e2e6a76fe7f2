"""
Timeline queries over a snapshot of entries.

Day grouping for the chat history view, hashtag (theme) filters and the flat
30-day trend list. Days are local calendar days; entries without a usable
timestamp never appear in a day group or a date-windowed list.
"""

from datetime import date, datetime, tzinfo
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.features.journal.models import JournalEntry, Sentiment
from app.features.journal.timestamps import local_time_of
from app.features.metrics.engine import entries_since
from app.shared.constants import TREND_WINDOW_DAYS


class _TimelineModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DailyChats(_TimelineModel):
    date: str
    display_date: str
    chats: List[JournalEntry] = Field(default_factory=list)
    thumbnail: Optional[JournalEntry] = None


class TrendPoint(_TimelineModel):
    date: str
    sentiment: Sentiment
    emotions: List[str] = Field(default_factory=list)
    themes: List[str] = Field(default_factory=list)


class TrendList(_TimelineModel):
    trends: List[TrendPoint] = Field(default_factory=list)
    total_entries: int = 0


def display_date(day: date, with_year: bool = True) -> str:
    """``Oct 5, 2026`` style label; ``Oct 5`` without the year."""
    label = f"{day:%b} {day.day}"
    return f"{label}, {day.year}" if with_year else label


def _chronological_key(moment: Optional[datetime], entry: Any):
    return (moment is not None, moment or datetime.min, getattr(entry, "id", 0))


def daily_chats(entries: Sequence[JournalEntry], tz: Optional[tzinfo] = None) -> List[DailyChats]:
    """Entries bucketed per day: newest day first, chats oldest first within a day."""
    buckets: Dict[date, List[tuple]] = {}
    for entry in entries:
        moment = local_time_of(entry.timestamp, tz)
        if moment is None:
            continue
        buckets.setdefault(moment.date(), []).append((moment, entry))

    days = []
    for day in sorted(buckets, reverse=True):
        pairs = sorted(buckets[day], key=lambda pair: _chronological_key(*pair))
        chats = [entry for _, entry in pairs]
        days.append(
            DailyChats(
                date=day.isoformat(),
                display_date=display_date(day),
                chats=chats,
                thumbnail=chats[0],
            )
        )
    return days


def entries_on_date(
    entries: Sequence[JournalEntry],
    day: date,
    tz: Optional[tzinfo] = None,
) -> List[JournalEntry]:
    """The chats of a single day, oldest first."""
    pairs = []
    for entry in entries:
        moment = local_time_of(entry.timestamp, tz)
        if moment is not None and moment.date() == day:
            pairs.append((moment, entry))
    pairs.sort(key=lambda pair: _chronological_key(*pair))
    return [entry for _, entry in pairs]


def entries_with_hashtag(
    entries: Sequence[JournalEntry],
    hashtag: str,
    tz: Optional[tzinfo] = None,
) -> List[JournalEntry]:
    """Entries tagged with ``hashtag`` (case-insensitive), newest first."""
    wanted = hashtag.strip().lstrip("#").lower()
    matches = [
        (local_time_of(entry.timestamp, tz), entry)
        for entry in entries
        if any(theme.lower() == wanted for theme in entry.themes)
    ]
    matches.sort(key=lambda pair: _chronological_key(*pair), reverse=True)
    return [entry for _, entry in matches]


def all_hashtags(entries: Sequence[JournalEntry]) -> List[str]:
    """Sorted unique themes across all entries."""
    return sorted({theme for entry in entries for theme in entry.themes})


def recent_trend_points(
    entries: Sequence[JournalEntry],
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
    days: int = TREND_WINDOW_DAYS,
) -> TrendList:
    """Entries of the trailing window as flat chart points, oldest first."""
    recent = entries_since(entries, days, now=now, tz=tz)
    points = [
        TrendPoint(
            date=moment.date().isoformat(),
            sentiment=entry.sentiment,
            emotions=list(entry.emotions),
            themes=list(entry.themes),
        )
        for moment, entry in recent
    ]
    return TrendList(trends=points, total_entries=len(points))
