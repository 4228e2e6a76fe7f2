"""
Daily sentiment series for the trends chart.

Each day in the trailing window becomes one point: the mean sentiment on a
half scale (-1 .. 1), the number of entries, and the day's most frequent
emotion and theme. Points are then annotated with notable changes and the
best and worst days of the window.
"""

import math
from datetime import date, datetime, tzinfo
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.features.metrics.engine import entry_labels, entries_since, entry_sentiment, top_labels
from app.shared.constants import TREND_WINDOW_DAYS

SIGNIFICANT_CHANGE = 0.5
BEST_DAY_THRESHOLD = 0.3
WORST_DAY_THRESHOLD = -0.3

DEFAULT_TOP_EMOTION = "neutral"
DEFAULT_TOP_THEME = "general"


class _TrendModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Annotation(_TrendModel):
    type: str
    text: str


class DailySentiment(_TrendModel):
    date: str
    display_date: str
    sentiment: float
    entry_count: int
    top_emotion: str = DEFAULT_TOP_EMOTION
    top_theme: str = DEFAULT_TOP_THEME
    annotation: Optional[Annotation] = None


class TrendSummary(_TrendModel):
    total_days: int = 0
    average_sentiment: float = 0.0
    best_day: Optional[DailySentiment] = None
    worst_day: Optional[DailySentiment] = None


class SentimentTrends(_TrendModel):
    data: List[DailySentiment] = Field(default_factory=list)
    summary: TrendSummary = Field(default_factory=TrendSummary)


def _round2(value: float) -> float:
    return math.floor(value * 100 + 0.5) / 100


def half_scale(entry: Any) -> float:
    """Sentiment score mapped onto -1 .. 1."""
    return entry_sentiment(entry).score / 2


def _annotate(points: List[DailySentiment]) -> List[DailySentiment]:
    if not points:
        return points

    highest = max(point.sentiment for point in points)
    lowest = min(point.sentiment for point in points)

    annotated = []
    previous = None
    for point in points:
        annotation = None
        if previous is not None:
            change = point.sentiment - previous.sentiment
            if abs(change) >= SIGNIFICANT_CHANGE:
                annotation = (
                    Annotation(type="improvement", text="Great day!")
                    if change > 0
                    else Annotation(type="decline", text="Challenging day")
                )

        # Best/worst labels take precedence over change labels
        if point.sentiment == highest and point.sentiment > BEST_DAY_THRESHOLD:
            annotation = Annotation(type="best", text="Best day this month!")
        elif point.sentiment == lowest and point.sentiment < WORST_DAY_THRESHOLD:
            annotation = Annotation(type="worst", text="Tough day")

        annotated.append(point.model_copy(update={"annotation": annotation}))
        previous = point
    return annotated


def sentiment_trends(
    entries: Sequence[Any],
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
    days: int = TREND_WINDOW_DAYS,
) -> SentimentTrends:
    """Daily averages, annotations and a summary for the trailing ``days``."""
    grouped: Dict[date, List[Any]] = {}
    for moment, entry in entries_since(entries, days, now=now, tz=tz):
        grouped.setdefault(moment.date(), []).append(entry)

    points = []
    for day in sorted(grouped):
        day_entries = grouped[day]
        scores = [half_scale(entry) for entry in day_entries]
        emotions = top_labels((e for entry in day_entries for e in entry_labels(entry, "emotions")), 1)
        themes = top_labels((t for entry in day_entries for t in entry_labels(entry, "themes")), 1)
        points.append(
            DailySentiment(
                date=day.isoformat(),
                display_date=f"{day:%b} {day.day}",
                sentiment=_round2(sum(scores) / len(scores)),
                entry_count=len(day_entries),
                top_emotion=emotions[0][0] if emotions else DEFAULT_TOP_EMOTION,
                top_theme=themes[0][0] if themes else DEFAULT_TOP_THEME,
            )
        )

    points = _annotate(points)
    if not points:
        return SentimentTrends()

    best = worst = points[0]
    for point in points[1:]:
        if point.sentiment > best.sentiment:
            best = point
        if point.sentiment < worst.sentiment:
            worst = point

    summary = TrendSummary(
        total_days=len(points),
        average_sentiment=_round2(sum(point.sentiment for point in points) / len(points)),
        best_day=best,
        worst_day=worst,
    )
    return SentimentTrends(data=points, summary=summary)
