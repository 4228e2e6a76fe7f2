"""
In-memory entry store.

Entries live for the lifetime of the process. Appends are serialized under a
lock so id assignment and insertion never interleave; readers take a tuple
snapshot and compute on it without further locking.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from app.core.logging_utils import sanitize_log_message
from app.features.journal.models import JournalEntry, SentimentAnalysis, count_words

logger = logging.getLogger("Companion.EntryStore")


class EntryStore:
    """Append-only, ordered collection of journal entries."""

    def __init__(self, entries: Optional[List[JournalEntry]] = None):
        self._lock = threading.Lock()
        self._entries: List[JournalEntry] = []
        self._last_id = 0
        for entry in entries or []:
            self._insert(entry)

    def _insert(self, entry: JournalEntry) -> None:
        if entry.id <= self._last_id:
            raise ValueError(f"Entry id {entry.id} is not greater than {self._last_id}")
        self._entries.append(entry)
        self._last_id = entry.id

    def add_entry(
        self,
        text: str,
        analysis: SentimentAnalysis,
        ai_response: str,
        timestamp: Optional[datetime] = None,
        analysis_source: str = "fallback",
    ) -> JournalEntry:
        """
        Create and append an entry, assigning the next id.

        Args:
            text: Raw user text; stored trimmed
            analysis: Sentiment/emotion/theme analysis of the text
            ai_response: Companion reply
            timestamp: Caller-supplied creation time (backfills); defaults to now
            analysis_source: Which analysis variant produced ``analysis``

        Returns:
            The stored entry
        """
        cleaned = text.strip()
        if not cleaned:
            raise ValueError("Entry text must not be empty")

        with self._lock:
            entry = JournalEntry(
                id=self._last_id + 1,
                text=cleaned,
                sentiment=analysis.sentiment,
                emotions=analysis.emotions,
                themes=analysis.themes,
                confidence=analysis.confidence,
                word_count=count_words(cleaned),
                timestamp=timestamp or datetime.now(timezone.utc),
                ai_response=ai_response,
                analysis_source=analysis_source,
            )
            self._insert(entry)

        logger.info(
            "New entry saved: %s",
            sanitize_log_message(cleaned, max_len=40),
            extra={
                "entry_id": entry.id,
                "sentiment": entry.sentiment.value,
                "emotions": list(entry.emotions),
                "themes": list(entry.themes),
                "confidence": entry.confidence,
                "analysis_source": analysis_source,
            },
        )
        return entry

    def snapshot(self) -> Tuple[JournalEntry, ...]:
        """Immutable view of every entry in insertion order."""
        with self._lock:
            return tuple(self._entries)

    def get(self, entry_id: int) -> Optional[JournalEntry]:
        for entry in self.snapshot():
            if entry.id == entry_id:
                return entry
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
