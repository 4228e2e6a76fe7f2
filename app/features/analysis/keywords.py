"""
Deterministic keyword analysis.

Used whenever Claude is unavailable, times out, or answers with something
unusable. Matching is case-insensitive and substring based, so "worried"
also matches "unworried"; that is accepted for a fallback.
"""

import re
from typing import Dict, List, Sequence

from app.features.journal.models import JournalEntry, Sentiment, SentimentAnalysis

FALLBACK_CONFIDENCE = 0.6

_POSITIVE = re.compile(
    r"happy|great|excited|joy|love|amazing|wonderful|fantastic|good|positive|grateful|blessed",
    re.IGNORECASE,
)
_NEGATIVE = re.compile(
    r"sad|angry|stressed|bad|tired|worried|anxious|frustrated|upset|terrible|awful|horrible",
    re.IGNORECASE,
)

# Label -> pattern, in the order labels are reported
EMOTION_PATTERNS = {
    "joy": re.compile(r"happy|joy|excited|amazing", re.IGNORECASE),
    "sadness": re.compile(r"sad|down|blue|hurt", re.IGNORECASE),
    "anger": re.compile(r"angry|mad|furious|upset", re.IGNORECASE),
    "fear": re.compile(r"worried|anxious|scared|afraid", re.IGNORECASE),
}

THEME_PATTERNS = {
    "work": re.compile(r"work|job|career|office", re.IGNORECASE),
    "relationships": re.compile(r"family|friend|relationship|love", re.IGNORECASE),
    "health": re.compile(r"health|exercise|gym|doctor", re.IGNORECASE),
    "creativity": re.compile(r"creative|art|music|write|design", re.IGNORECASE),
}

FALLBACK_REPLY = (
    "Thank you for sharing that with me. I'm here to listen and help you process "
    "your thoughts and feelings. How are you feeling about this situation?"
)

NO_ENTRIES_SUMMARY = "No entries this week to reflect on."


def _matching_labels(text: str, patterns: Dict[str, "re.Pattern[str]"]) -> List[str]:
    return [label for label, pattern in patterns.items() if pattern.search(text)]


def keyword_sentiment(text: str) -> Sentiment:
    """Positive keywords win over negative ones; no match is neutral."""
    if _POSITIVE.search(text):
        return Sentiment.POSITIVE
    if _NEGATIVE.search(text):
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


def keyword_analysis(text: str) -> SentimentAnalysis:
    return SentimentAnalysis(
        sentiment=keyword_sentiment(text),
        emotions=_matching_labels(text, EMOTION_PATTERNS),
        themes=_matching_labels(text, THEME_PATTERNS),
        confidence=FALLBACK_CONFIDENCE,
    )


def fallback_follow_up(entry: JournalEntry) -> str:
    if entry.sentiment == Sentiment.POSITIVE:
        return "That sounds wonderful! What made today feel so good?"
    if entry.sentiment == Sentiment.NEGATIVE:
        return "I hear you. What's one small thing that helped you today?"
    if re.search(r"work", entry.text, re.IGNORECASE):
        return "Work can be intense. How did you find balance today?"
    if re.search(r"family", entry.text, re.IGNORECASE):
        return "Family moments matter. How are you feeling about your connections?"
    return "How are you feeling about everything right now?"


def sentiment_counts(entries: Sequence[JournalEntry]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for entry in entries:
        key = Sentiment.coerce(entry.sentiment).value
        counts[key] = counts.get(key, 0) + 1
    return counts


def fallback_week_summary(entries: Sequence[JournalEntry]) -> str:
    if not entries:
        return NO_ENTRIES_SUMMARY

    counts = sentiment_counts(entries)
    positive = counts.get("positive", 0) + counts.get("very_positive", 0)
    negative = counts.get("negative", 0) + counts.get("very_negative", 0)

    summary = f"This week, you wrote {len(entries)} entries. "
    if positive > negative:
        summary += "🌟 You've had more positive moments than challenging ones."
    elif negative > positive:
        summary += "💙 This week seems challenging. Remember, it's okay to not be okay."
    else:
        summary += "⚖️ Your emotional landscape shows balance."
    return summary
