"""LLM-powered journal analysis and companion replies."""

from __future__ import annotations

import json
import logging
import re
import time
from typing import Any, Dict, List, Optional, Sequence

import httpx
from anthropic import Anthropic, APIError, APITimeoutError
from pydantic import ValidationError

from app.core.config import settings
from app.core.logging_utils import log_llm_usage
from app.features.analysis.keywords import (
    FALLBACK_REPLY,
    NO_ENTRIES_SUMMARY,
    fallback_follow_up,
    fallback_week_summary,
    keyword_analysis,
    sentiment_counts,
)
from app.features.analysis.models import (
    AnalysisOutcome,
    Analyzed,
    Fallback,
    ThemeCount,
    WeeklySummary,
)
from app.features.analysis.prompts import (
    build_analysis_prompt,
    build_follow_up_prompt,
    build_reply_prompt,
    build_week_summary_prompt,
)
from app.features.journal.models import JournalEntry, SentimentAnalysis
from app.features.metrics.engine import top_themes
from app.shared.constants import DASHBOARD_TOP_K, EMOTIONS

logger = logging.getLogger("Companion.Analysis")


class AnalysisUnavailable(Exception):
    """Raised internally when no model produced a usable answer."""

    def __init__(self, reason: str, last_error: Optional[Exception] = None):
        super().__init__(reason)
        self.reason = reason
        self.last_error = last_error


class CompanionAnalyzer:
    """Analyze journal text and write companion replies with Claude."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[Any] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
    ) -> None:
        key = api_key or settings.ANTHROPIC_API_KEY
        if client is not None:
            self.client = client
        elif key:
            self.client = Anthropic(
                api_key=key,
                timeout=httpx.Timeout(timeout or settings.ANALYSIS_TIMEOUT_SECONDS, connect=5.0),
                max_retries=settings.ANALYSIS_MAX_RETRIES if max_retries is None else max_retries,
            )
        else:
            self.client = None

        primary_model = model or settings.CLAUDE_MODEL_PRIMARY
        fallback_models: List[str] = []
        for candidate in settings.CLAUDE_MODEL_OPTIONS:
            if candidate and candidate not in fallback_models and candidate != primary_model:
                fallback_models.append(candidate)

        self.model_candidates = [primary_model] + fallback_models

        if self.client is None:
            logger.warning("No Anthropic API key configured; using keyword analysis only")
        else:
            logger.info(
                "Companion analyzer initialized with models: %s",
                ", ".join(self.model_candidates),
            )

    @property
    def available(self) -> bool:
        return self.client is not None

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def analyze(self, text: str) -> AnalysisOutcome:
        """Classify sentiment, emotions and themes; never returns without an analysis."""
        if self.client is None:
            return Fallback(analysis=keyword_analysis(text), reason="not_configured")

        prompt = build_analysis_prompt(text)
        try:
            model_name, analysis = self._first_success(
                lambda model: self._parse_analysis(
                    self._invoke_model(prompt, model, max_tokens=200, operation="analysis")
                ),
            )
        except AnalysisUnavailable as exc:
            logger.error(
                "All Claude models failed, falling back to keyword analysis: %s",
                exc.last_error,
            )
            return Fallback(analysis=keyword_analysis(text), reason=exc.reason)

        logger.info(
            "Analysis complete with model %s: sentiment=%s, emotions=%s, themes=%s",
            model_name,
            analysis.sentiment.value,
            len(analysis.emotions),
            len(analysis.themes),
        )
        return Analyzed(analysis=analysis, model=model_name)

    def generate_reply(self, text: str, analysis: SentimentAnalysis) -> str:
        """Empathetic reply to an entry, or the canned reply on failure."""
        if self.client is None:
            return FALLBACK_REPLY

        prompt = build_reply_prompt(text, analysis)
        try:
            _, reply = self._first_success(
                lambda model: self._require_text(
                    self._invoke_model(prompt, model, max_tokens=1000, operation="reply")
                ),
            )
        except AnalysisUnavailable as exc:
            logger.error("Claude reply generation failed: %s", exc.last_error)
            return FALLBACK_REPLY
        return reply

    def generate_follow_up_question(
        self,
        entry: JournalEntry,
        recent_entries: Sequence[JournalEntry] = (),
    ) -> str:
        """One reflective follow-up question about ``entry``."""
        if self.client is None:
            return fallback_follow_up(entry)

        prompt = build_follow_up_prompt(entry, list(recent_entries)[-3:])
        try:
            _, question = self._first_success(
                lambda model: self._require_text(
                    self._invoke_model(prompt, model, max_tokens=150, operation="follow_up")
                ),
            )
        except AnalysisUnavailable as exc:
            logger.error("Claude follow-up generation failed: %s", exc.last_error)
            return fallback_follow_up(entry)
        return question.strip().strip('"')

    def summarize_week(self, entries: Sequence[JournalEntry]) -> WeeklySummary:
        """Gentle summary of a week of entries plus the counts behind it."""
        counts = sentiment_counts(entries)
        themes = [ThemeCount(theme=theme, count=count) for theme, count in top_themes(entries, DASHBOARD_TOP_K)]

        if not entries:
            return WeeklySummary(summary=NO_ENTRIES_SUMMARY, sentiment_counts=counts, top_themes=themes)

        if self.client is not None:
            prompt = build_week_summary_prompt(entries)
            try:
                _, summary = self._first_success(
                    lambda model: self._require_text(
                        self._invoke_model(prompt, model, max_tokens=300, operation="weekly_summary")
                    ),
                )
                return WeeklySummary(
                    summary=summary,
                    sentiment_counts=counts,
                    top_themes=themes,
                    source="claude",
                )
            except AnalysisUnavailable as exc:
                logger.error("Claude weekly summary failed: %s", exc.last_error)

        return WeeklySummary(
            summary=fallback_week_summary(entries),
            sentiment_counts=counts,
            top_themes=themes,
        )

    # ------------------------------------------------------------------
    # Model plumbing
    # ------------------------------------------------------------------

    def _first_success(self, attempt):
        """Run ``attempt(model)`` for each candidate; return (model, result) of the first success."""
        last_error: Optional[Exception] = None
        reason = "error"

        for model_name in self.model_candidates:
            try:
                return model_name, attempt(model_name)
            except APITimeoutError as exc:
                logger.warning("Model %s timed out: %s", model_name, exc)
                last_error, reason = exc, "timeout"
            except APIError as exc:
                logger.warning("Model %s failed: %s", model_name, exc)
                last_error, reason = exc, "api_error"
            except (json.JSONDecodeError, ValidationError, ValueError) as exc:
                logger.error("Model %s returned an unusable response: %s", model_name, exc)
                last_error, reason = exc, "invalid_response"
            except Exception as exc:  # pylint: disable=broad-except
                logger.warning("Model %s failed unexpectedly: %s", model_name, exc)
                last_error, reason = exc, "error"

        raise AnalysisUnavailable(reason, last_error)

    def _invoke_model(self, prompt: str, model_name: str, max_tokens: int, operation: str) -> str:
        """Send the prompt to Claude and return raw text output."""
        started = time.monotonic()
        response = self.client.messages.create(
            model=model_name,
            max_tokens=max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        duration_ms = int((time.monotonic() - started) * 1000)

        usage = getattr(response, "usage", None)
        if usage is not None:
            log_llm_usage(
                model=model_name,
                input_tokens=getattr(usage, "input_tokens", 0) or 0,
                output_tokens=getattr(usage, "output_tokens", 0) or 0,
                operation=operation,
                duration_ms=duration_ms,
            )

        if not response.content:
            raise ValueError(f"Model {model_name} returned empty content")

        block = response.content[0]
        result_text = block.text if hasattr(block, "text") else str(block)
        result_text = result_text.strip()

        if result_text.startswith("```"):
            result_text = re.sub(r"^```(?:json)?\n?", "", result_text)
            result_text = re.sub(r"\n?```$", "", result_text)

        return result_text.strip()

    @staticmethod
    def _require_text(text: str) -> str:
        if not text:
            raise ValueError("empty completion")
        return text

    @staticmethod
    def _parse_analysis(result_text: str) -> SentimentAnalysis:
        """Validate Claude's JSON; unknown emotions are dropped, bad sentiment is neutral."""
        payload = json.loads(result_text)
        if not isinstance(payload, dict):
            raise ValueError("analysis payload is not a JSON object")

        emotions = payload.get("emotions") or []
        if isinstance(emotions, list):
            emotions = [e for e in emotions if isinstance(e, str) and e.strip().lower() in EMOTIONS]
        else:
            emotions = []

        fields: Dict[str, Any] = {
            "sentiment": payload.get("sentiment"),
            "emotions": emotions,
            "themes": payload.get("themes") if isinstance(payload.get("themes"), list) else [],
        }
        if payload.get("confidence") is not None:
            fields["confidence"] = payload["confidence"]
        return SentimentAnalysis(**fields)
