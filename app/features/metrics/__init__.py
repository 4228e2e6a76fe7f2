"""
Metrics feature module.

Derived statistics over journal entries, recomputed on every request:
streak, mood trend, current mood, growth score and aggregate helpers
(engine), plus the 30-day trend series (trends).
"""

from app.features.metrics.engine import (
    CurrentMood,
    DashboardMetrics,
    GrowthScore,
    MoodTrend,
    average_sentiment,
    compute_metrics,
    current_mood,
    growth_score,
    mood_trend,
    top_emotions,
    top_labels,
    top_themes,
    writing_streak,
)

__all__ = [
    "CurrentMood",
    "DashboardMetrics",
    "GrowthScore",
    "MoodTrend",
    "average_sentiment",
    "compute_metrics",
    "current_mood",
    "growth_score",
    "mood_trend",
    "top_emotions",
    "top_labels",
    "top_themes",
    "writing_streak",
]
