"""
Journal feature module.

- models: entries, sentiment scale, analysis results
- store: the in-memory, append-only entry store
- timeline: day grouping, hashtag filters, trend series
"""

from app.features.journal.models import (
    JournalEntry,
    Sentiment,
    SentimentAnalysis,
)
from app.features.journal.store import EntryStore

__all__ = [
    "EntryStore",
    "JournalEntry",
    "Sentiment",
    "SentimentAnalysis",
]
