"""
==============================================================================
JOURNAL METRICS ENGINE
==============================================================================

Pure functions over a snapshot of journal entries:

1. Writing streak - consecutive calendar days with at least one entry
2. Mood trend - least-squares slope of the last 7 days of sentiment
3. Current mood - sentiment of the chronologically newest entry
4. Growth score - five capped sub-scores summed into 0-100
5. Aggregate helpers - average recent sentiment, top-K themes/emotions

Time-dependent functions take ``now`` (defaults to the clock) and an optional
``tz`` for calendar bucketing. Entries with a missing or unparseable
timestamp are left out of every date-based computation; nothing here raises
on a malformed entry.
"""

import math
from datetime import datetime, timedelta, tzinfo
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.core.tracing import get_tracer
from app.features.journal.models import Sentiment
from app.features.journal.timestamps import local_now, local_time_of
from app.shared.constants import WEEK_WINDOW_DAYS

tracer = get_tracer(__name__)

STREAK_SCAN_LIMIT_DAYS = 365
TREND_SLOPE_THRESHOLD = 0.1
SUB_SCORE_CAP = 20.0

GROWTH_BANDS = (
    (80, "excellent", "Excellent progress"),
    (60, "good", "Good progress"),
    (40, "steady", "Steady progress"),
    (20, "building momentum", "Building momentum"),
)

MOOD_PRESENTATION = {
    Sentiment.VERY_POSITIVE: ("😄", "Feeling amazing"),
    Sentiment.POSITIVE: ("😊", "Feeling good"),
    Sentiment.NEUTRAL: ("😐", "Feeling balanced"),
    Sentiment.NEGATIVE: ("😔", "Having a tough time"),
    Sentiment.VERY_NEGATIVE: ("😢", "Really struggling"),
}


# =============================================================================
# RESULT MODELS
# =============================================================================

class _MetricModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class MoodTrend(_MetricModel):
    trend: str = "stable"
    direction: str = "➡️"
    description: str = "No data yet"
    slope: Optional[float] = None
    sufficient_data: bool = False


class CurrentMood(_MetricModel):
    mood: Sentiment = Sentiment.NEUTRAL
    emoji: str = "😐"
    description: str = "No data yet"
    has_data: bool = False


class GrowthScore(_MetricModel):
    score: int = 0
    percentage: str = "0%"
    band: str = "getting started"
    description: str = "No data yet"
    components: Dict[str, float] = {}
    has_data: bool = False


class DashboardMetrics(_MetricModel):
    writing_streak: int
    mood_trend: MoodTrend
    current_mood: CurrentMood
    growth_score: GrowthScore


# =============================================================================
# ENTRY ACCESSORS (tolerant of malformed entries)
# =============================================================================

def entry_time(entry: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Naive local time of an entry, or None when it has no usable timestamp."""
    return local_time_of(getattr(entry, "timestamp", None), tz)


def entry_sentiment(entry: Any) -> Sentiment:
    return Sentiment.coerce(getattr(entry, "sentiment", None))


def _entry_id(entry: Any) -> int:
    value = getattr(entry, "id", 0)
    return value if isinstance(value, int) else 0


def _entry_word_count(entry: Any) -> int:
    value = getattr(entry, "word_count", 0)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        return 0
    return int(value)


def entry_labels(entry: Any, field: str) -> Tuple[str, ...]:
    value = getattr(entry, field, None) or ()
    if isinstance(value, str):
        return (value,)
    return tuple(label for label in value if isinstance(label, str))


# =============================================================================
# WRITING STREAK
# =============================================================================

def writing_streak(
    entries: Iterable[Any],
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> int:
    """
    Count consecutive calendar days, backward from today, that have an entry.

    A day without an entry yet today does not break the streak: the scan
    then starts at yesterday. At most a year is scanned.
    """
    days_with_entries = set()
    for entry in entries:
        moment = entry_time(entry, tz)
        if moment is not None:
            days_with_entries.add(moment.date())

    if not days_with_entries:
        return 0

    day = local_now(now, tz).date()
    if day not in days_with_entries:
        day -= timedelta(days=1)

    streak = 0
    for _ in range(STREAK_SCAN_LIMIT_DAYS):
        if day not in days_with_entries:
            break
        streak += 1
        day -= timedelta(days=1)

    return streak


# =============================================================================
# MOOD TREND
# =============================================================================

def regression_slope(values: Sequence[float]) -> float:
    """Ordinary least-squares slope of ``values`` against their index."""
    n = len(values)
    if n < 2:
        return 0.0

    sum_x = sum(range(n))
    sum_y = sum(values)
    sum_xy = sum(index * value for index, value in enumerate(values))
    sum_xx = sum(index * index for index in range(n))

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return 0.0
    return (n * sum_xy - sum_x * sum_y) / denominator


def entries_since(
    entries: Iterable[Any],
    days: int,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> List[Tuple[datetime, Any]]:
    """(local time, entry) pairs at or after ``now - days``, oldest first."""
    cutoff = local_now(now, tz) - timedelta(days=days)
    recent = []
    for entry in entries:
        moment = entry_time(entry, tz)
        if moment is not None and moment >= cutoff:
            recent.append((moment, entry))
    recent.sort(key=lambda pair: (pair[0], _entry_id(pair[1])))
    return recent


def mood_trend(
    entries: Iterable[Any],
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> MoodTrend:
    """Classify the trailing week's sentiment as improving, declining or stable."""
    entries = list(entries)
    if not entries:
        return MoodTrend()

    recent = entries_since(entries, WEEK_WINDOW_DAYS, now=now, tz=tz)
    if len(recent) < 2:
        return MoodTrend(description="Need more data")

    slope = regression_slope([entry_sentiment(entry).score for _, entry in recent])

    if slope > TREND_SLOPE_THRESHOLD:
        return MoodTrend(trend="improving", direction="↗️", description="Getting better",
                         slope=slope, sufficient_data=True)
    if slope < -TREND_SLOPE_THRESHOLD:
        return MoodTrend(trend="declining", direction="↘️", description="Needs attention",
                         slope=slope, sufficient_data=True)
    return MoodTrend(trend="stable", direction="➡️", description="Staying steady",
                     slope=slope, sufficient_data=True)


# =============================================================================
# CURRENT MOOD
# =============================================================================

def latest_entry(entries: Iterable[Any], tz: Optional[tzinfo] = None) -> Optional[Any]:
    """
    The chronologically newest entry; O(n), no caching.

    Ties on timestamp go to the higher id. Entries without a usable
    timestamp only win when no entry has one.
    """
    best = None
    best_key = None
    for entry in entries:
        moment = entry_time(entry, tz)
        key = (moment is not None, moment or datetime.min, _entry_id(entry))
        if best_key is None or key > best_key:
            best, best_key = entry, key
    return best


def current_mood(entries: Iterable[Any], tz: Optional[tzinfo] = None) -> CurrentMood:
    newest = latest_entry(entries, tz)
    if newest is None:
        return CurrentMood()

    mood = entry_sentiment(newest)
    emoji, description = MOOD_PRESENTATION[mood]
    return CurrentMood(mood=mood, emoji=emoji, description=description, has_data=True)


# =============================================================================
# GROWTH SCORE
# =============================================================================

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def growth_band(score: int) -> Tuple[str, str]:
    for threshold, band, description in GROWTH_BANDS:
        if score >= threshold:
            return band, description
    return "getting started", "Getting started"


def days_since_first_entry(
    entries: Iterable[Any],
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> int:
    """Whole days (rounded up) since the earliest entry, never less than 1."""
    times = [moment for moment in (entry_time(entry, tz) for entry in entries) if moment is not None]
    if not times:
        return 1
    elapsed = local_now(now, tz) - min(times)
    return max(math.ceil(elapsed.total_seconds() / 86400), 1)


def growth_score(
    entries: Iterable[Any],
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> GrowthScore:
    """
    Composite 0-100 engagement and wellbeing score.

    Five sub-scores, each capped at 20: consistency (streak), sentiment
    trajectory (mood trend), frequency (entries per day since the first),
    reflection depth (average words) and positivity (share of positive
    entries).
    """
    entries = list(entries)
    if not entries:
        return GrowthScore()

    count = len(entries)

    consistency = min(writing_streak(entries, now=now, tz=tz) * 2, SUB_SCORE_CAP)

    trend = mood_trend(entries, now=now, tz=tz).trend
    trajectory = {"improving": 20.0, "declining": 5.0}.get(trend, 10.0)

    frequency = min(count / days_since_first_entry(entries, now=now, tz=tz) * 10, SUB_SCORE_CAP)

    average_words = sum(_entry_word_count(entry) for entry in entries) / count
    depth = min(average_words / 5, SUB_SCORE_CAP)

    positive = sum(
        1 for entry in entries
        if entry_sentiment(entry) in (Sentiment.POSITIVE, Sentiment.VERY_POSITIVE)
    )
    positivity = positive / count * SUB_SCORE_CAP

    components = {
        "consistency": round(float(consistency), 2),
        "sentimentTrajectory": trajectory,
        "frequency": round(frequency, 2),
        "reflectionDepth": round(depth, 2),
        "positivity": round(positivity, 2),
    }

    total = consistency + trajectory + frequency + depth + positivity
    score = min(max(_round_half_up(total), 0), 100)
    band, description = growth_band(score)

    return GrowthScore(
        score=score,
        percentage=f"{score}%",
        band=band,
        description=description,
        components=components,
        has_data=True,
    )


# =============================================================================
# AGGREGATE HELPERS
# =============================================================================

def average_sentiment(entries: Sequence[Any], last: Optional[int] = None) -> Sentiment:
    """Mean sentiment of the last ``last`` entries (insertion order), bucketed."""
    window = list(entries)
    if last is not None:
        window = window[-last:] if last > 0 else []
    if not window:
        return Sentiment.NEUTRAL

    average = sum(entry_sentiment(entry).score for entry in window) / len(window)
    return Sentiment.from_average(average)


def top_labels(labels: Iterable[str], k: int) -> List[Tuple[str, int]]:
    """Most frequent labels, ties kept in first-seen order."""
    counts: Dict[str, int] = {}
    for label in labels:
        counts[label] = counts.get(label, 0) + 1
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return ranked[:max(k, 0)]


def top_themes(entries: Iterable[Any], k: int) -> List[Tuple[str, int]]:
    return top_labels((theme for entry in entries for theme in entry_labels(entry, "themes")), k)


def top_emotions(entries: Iterable[Any], k: int) -> List[Tuple[str, int]]:
    return top_labels((emotion for entry in entries for emotion in entry_labels(entry, "emotions")), k)


# =============================================================================
# DASHBOARD
# =============================================================================

def compute_metrics(
    entries: Sequence[Any],
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> DashboardMetrics:
    """All derived metrics for one snapshot, computed against a single ``now``."""
    now = now or local_now(None, tz)
    with tracer.start_as_current_span("metrics.compute") as span:
        span.set_attribute("entries.count", len(entries))
        return DashboardMetrics(
            writing_streak=writing_streak(entries, now=now, tz=tz),
            mood_trend=mood_trend(entries, now=now, tz=tz),
            current_mood=current_mood(entries, tz=tz),
            growth_score=growth_score(entries, now=now, tz=tz),
        )
