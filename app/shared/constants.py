"""
Shared vocabularies for the journaling companion.

Sentiment classes are ordered from most negative to most positive; the
integer scores are what the metrics engine regresses and averages over.
"""

# Ordered five-point sentiment scale
SENTIMENT_SCORES = {
    "very_negative": -2,
    "negative": -1,
    "neutral": 0,
    "positive": 1,
    "very_positive": 2,
}

DEFAULT_SENTIMENT = "neutral"

# Fixed emotion vocabulary
EMOTIONS = (
    "joy",
    "sadness",
    "anger",
    "fear",
    "surprise",
    "disgust",
)

# Curated theme vocabulary (open: analyzers may add close relatives)
THEMES = (
    "work",
    "relationships",
    "health",
    "creativity",
    "travel",
    "learning",
    "stress",
    "gratitude",
    "goals",
    "nature",
    "growth",
    "family",
)

# Window sizes used by dashboards and prompt suggestions
RECENT_ENTRY_WINDOW = 5
PROMPT_TOP_K = 3
DASHBOARD_TOP_K = 5
EMOTIONAL_JOURNEY_LIMIT = 30
TREND_WINDOW_DAYS = 30
WEEK_WINDOW_DAYS = 7

AI_PROVIDER = "Claude API"
