"""
Journal entry and analysis models.

Entries are frozen pydantic models: once the store has created one it is
never mutated. JSON uses camelCase keys (``wordCount``, ``aiResponse``)
while Python code uses snake_case attributes.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

from app.shared.constants import DEFAULT_SENTIMENT, SENTIMENT_SCORES


class Sentiment(str, Enum):
    """Five-point ordered sentiment scale."""

    VERY_NEGATIVE = "very_negative"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    POSITIVE = "positive"
    VERY_POSITIVE = "very_positive"

    @property
    def score(self) -> int:
        return SENTIMENT_SCORES[self.value]

    @classmethod
    def coerce(cls, value: Any) -> "Sentiment":
        """Map any analyzer output onto the scale; unknown values are neutral."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower().replace("-", "_").replace(" ", "_")
            if normalized in SENTIMENT_SCORES:
                return cls(normalized)
        return cls(DEFAULT_SENTIMENT)

    @classmethod
    def from_average(cls, average: float) -> "Sentiment":
        """Bucket a mean score back into a sentiment class."""
        if average >= 1.5:
            return cls.VERY_POSITIVE
        if average >= 0.5:
            return cls.POSITIVE
        if average >= -0.5:
            return cls.NEUTRAL
        if average >= -1.5:
            return cls.NEGATIVE
        return cls.VERY_NEGATIVE


def normalize_labels(values: Optional[Iterable[Any]]) -> Tuple[str, ...]:
    """Lowercase, strip, drop blanks and duplicates; first occurrence wins."""
    if values is None:
        return ()
    if isinstance(values, str):
        values = [values]

    seen: List[str] = []
    for value in values:
        if not isinstance(value, str):
            continue
        label = value.strip().lower()
        if label and label not in seen:
            seen.append(label)
    return tuple(seen)


def count_words(text: str) -> int:
    """Number of whitespace-delimited tokens."""
    return len(text.split())


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _AnalysisFields(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    sentiment: Sentiment = Sentiment.NEUTRAL
    emotions: Tuple[str, ...] = ()
    themes: Tuple[str, ...] = ()
    confidence: float = 0.5

    @field_validator("sentiment", mode="before")
    @classmethod
    def coerce_sentiment(cls, value: Any) -> Sentiment:
        return Sentiment.coerce(value)

    @field_validator("emotions", "themes", mode="before")
    @classmethod
    def normalize_label_fields(cls, value: Any) -> Tuple[str, ...]:
        return normalize_labels(value)

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, value: Any) -> float:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0.5
        if number != number:  # NaN
            return 0.5
        return min(max(number, 0.0), 1.0)


class SentimentAnalysis(_AnalysisFields):
    """Structured analysis of one piece of journal text."""


class ConversationMessage(_CamelModel):
    role: str
    text: str
    timestamp: Optional[datetime] = None


class JournalEntry(_AnalysisFields):
    """One user submission together with its analysis and companion reply."""

    id: int
    text: str
    word_count: int = Field(default=0, ge=0)
    timestamp: Optional[datetime] = None
    ai_response: str = ""
    analysis_source: str = "fallback"

    @computed_field
    @property
    def conversation(self) -> List[ConversationMessage]:
        """The entry as a two-message exchange; the reply lands one second later."""
        reply_time = self.timestamp + timedelta(seconds=1) if self.timestamp else None
        return [
            ConversationMessage(role="user", text=self.text, timestamp=self.timestamp),
            ConversationMessage(role="ai", text=self.ai_response, timestamp=reply_time),
        ]
