"""
LLM prompts for journal analysis.
Centralized prompt templates for consistent companion behavior.
"""

import json
from typing import Sequence

from app.features.journal.models import JournalEntry, SentimentAnalysis
from app.shared.constants import EMOTIONS, THEMES

COMPANION_NAME = "Sam"


def build_analysis_prompt(text: str) -> str:
    """Ask for a JSON-only sentiment/emotion/theme classification."""
    return f"""Analyze the sentiment and emotions in this journal entry. Respond with ONLY a JSON object containing:
{{
  "sentiment": "very_positive|positive|neutral|negative|very_negative",
  "emotions": {json.dumps(list(EMOTIONS))},
  "themes": {json.dumps(list(THEMES))},
  "confidence": 0.0-1.0
}}

Use only the emotion labels listed above. Themes may go beyond the list when nothing fits.

Journal entry: "{text}\""""


def build_reply_prompt(text: str, analysis: SentimentAnalysis) -> str:
    themes = ", ".join(analysis.themes) or "none"
    return f"""You are {COMPANION_NAME}, an empathetic journaling companion. Respond to this journal entry with a supportive, thoughtful message. Be encouraging and help the person reflect on their feelings. Keep it warm and direct: no formal greetings, no stage directions, no signatures. Respond as if you're continuing a natural conversation.

Journal entry: "{text}"
Detected sentiment: {analysis.sentiment.value}
Themes: {themes}"""


def build_follow_up_prompt(entry: JournalEntry, recent_entries: Sequence[JournalEntry]) -> str:
    recent = "\n".join(f"{e.sentiment.value}: {e.text}" for e in recent_entries) or "(none)"
    return f"""You are an empathetic journaling companion. Based on this journal entry and the recent ones, write ONE supportive follow-up QUESTION (not a response).

Current entry: "{entry.text}"
Sentiment: {entry.sentiment.value}
Emotions: {", ".join(entry.emotions) or "none"}
Themes: {", ".join(entry.themes) or "none"}

Recent entries:
{recent}

The question should acknowledge their current emotional state, invite deeper reflection, stay non-judgmental and specific to their situation, and start with a question word (What, How, When, ...).

Respond with ONLY the question text, no quotes or formatting."""


def build_week_summary_prompt(entries: Sequence[JournalEntry]) -> str:
    lines = "\n".join(f"{e.sentiment.value}: {e.text}" for e in entries)
    return f"""Analyze these journal entries from the past week and write a gentle, insightful summary.

Entries:
{lines}

The summary should acknowledge their emotional journey, name patterns or themes, offer a gentle insight, and be 2-3 sentences long.

Respond with ONLY the summary text."""
