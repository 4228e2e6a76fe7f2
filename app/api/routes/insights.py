"""
Insight API routes: dashboard metrics, weekly summary, trend series and
writing prompt suggestions. Everything is recomputed from one store snapshot
per request.
"""

import logging
from datetime import datetime, tzinfo
from typing import Optional

from fastapi import APIRouter, Depends, Request

from app.api.dependencies import get_analyzer, get_now, get_store, get_timezone
from app.api.models import InsightsResponse, JourneyPoint, ThemeCountResponse
from app.api.routes.health import privacy_settings
from app.features.analysis.models import WeeklySummary
from app.features.analysis.service import CompanionAnalyzer
from app.features.journal.store import EntryStore
from app.features.journal.timeline import TrendList, recent_trend_points
from app.features.metrics.engine import compute_metrics, entries_since, top_themes
from app.features.metrics.trends import SentimentTrends, sentiment_trends
from app.features.suggestions.writing_prompts import PromptSuggestions, suggest_prompts
from app.shared.constants import DASHBOARD_TOP_K, EMOTIONAL_JOURNEY_LIMIT, WEEK_WINDOW_DAYS
from app.shared.errors import get_correlation_id, internal_error

router = APIRouter(tags=["Insights"])
logger = logging.getLogger("Companion.API.Insights")


@router.get("/insights", response_model=InsightsResponse)
def get_insights(
    store: EntryStore = Depends(get_store),
    now: datetime = Depends(get_now),
    tz: Optional[tzinfo] = Depends(get_timezone),
) -> InsightsResponse:
    """Dashboard data: totals, top themes, emotional journey and derived metrics."""
    entries = store.snapshot()
    metrics = compute_metrics(entries, now=now, tz=tz)

    average_words = int(sum(e.word_count for e in entries) / len(entries) + 0.5) if entries else 0

    return InsightsResponse(
        total_entries=len(entries),
        average_word_count=average_words,
        most_common_themes=[
            ThemeCountResponse(theme=theme, count=count)
            for theme, count in top_themes(entries, DASHBOARD_TOP_K)
        ],
        emotional_journey=[
            JourneyPoint(date=e.timestamp, sentiment=e.sentiment, emotions=list(e.emotions))
            for e in entries[-EMOTIONAL_JOURNEY_LIMIT:]
        ],
        privacy_settings=privacy_settings(),
        writing_streak=metrics.writing_streak,
        mood_trend=metrics.mood_trend,
        current_mood=metrics.current_mood,
        growth_score=metrics.growth_score,
    )


@router.get("/summary", response_model=WeeklySummary)
def get_weekly_summary(
    store: EntryStore = Depends(get_store),
    analyzer: CompanionAnalyzer = Depends(get_analyzer),
    now: datetime = Depends(get_now),
    tz: Optional[tzinfo] = Depends(get_timezone),
) -> WeeklySummary:
    """Gentle summary of the trailing week."""
    week = [entry for _, entry in entries_since(store.snapshot(), WEEK_WINDOW_DAYS, now=now, tz=tz)]
    logger.info("Summarizing %d entries from the past week", len(week))
    return analyzer.summarize_week(week)


@router.get("/trends", response_model=TrendList)
def get_trends(
    store: EntryStore = Depends(get_store),
    now: datetime = Depends(get_now),
    tz: Optional[tzinfo] = Depends(get_timezone),
) -> TrendList:
    """Entries of the last 30 days as chart points."""
    return recent_trend_points(store.snapshot(), now=now, tz=tz)


@router.get("/sentiment-trends", response_model=SentimentTrends)
def get_sentiment_trends(
    store: EntryStore = Depends(get_store),
    now: datetime = Depends(get_now),
    tz: Optional[tzinfo] = Depends(get_timezone),
) -> SentimentTrends:
    """Daily sentiment averages with annotations for the last 30 days."""
    return sentiment_trends(store.snapshot(), now=now, tz=tz)


@router.get("/ai-prompts", response_model=PromptSuggestions, response_model_exclude_none=True)
def get_ai_prompts(http_request: Request, store: EntryStore = Depends(get_store)):
    """Writing prompts tailored to the recent entries."""
    try:
        return suggest_prompts(store.snapshot())
    except Exception:
        logger.exception("Failed to generate prompts")
        return internal_error("Failed to generate prompts", correlation_id=get_correlation_id(http_request))
