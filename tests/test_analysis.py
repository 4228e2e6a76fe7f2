import json
import logging

import httpx
from anthropic import APIConnectionError, APITimeoutError

from app.features.analysis.keywords import (
    FALLBACK_REPLY,
    NO_ENTRIES_SUMMARY,
    fallback_follow_up,
    fallback_week_summary,
    keyword_analysis,
)
from app.features.analysis.models import Analyzed, Fallback
from app.features.journal.models import Sentiment, SentimentAnalysis
from conftest import make_entry

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")

GOOD_ANALYSIS = json.dumps({
    "sentiment": "positive",
    "emotions": ["joy", "hope"],
    "themes": ["work", "career"],
    "confidence": 0.85,
})


# ==================== Keyword fallback ====================

def test_keyword_positive_words_take_precedence():
    analysis = keyword_analysis("I feel happy but so tired")
    assert analysis.sentiment == Sentiment.POSITIVE
    assert analysis.emotions == ("joy",)
    assert analysis.confidence == 0.6


def test_keyword_negative_with_emotion_and_theme():
    analysis = keyword_analysis("So stressed and ANXIOUS about the office")
    assert analysis.sentiment == Sentiment.NEGATIVE
    assert analysis.emotions == ("fear",)
    assert analysis.themes == ("work",)


def test_keyword_no_match_is_neutral():
    analysis = keyword_analysis("Went for a walk")
    assert analysis.sentiment == Sentiment.NEUTRAL
    assert analysis.emotions == ()
    assert analysis.themes == ()


def test_fallback_follow_up_questions():
    assert fallback_follow_up(make_entry(1, "positive")) == "That sounds wonderful! What made today feel so good?"
    assert fallback_follow_up(make_entry(1, "negative")).startswith("I hear you.")
    assert fallback_follow_up(make_entry(1, text="Long day at work")).startswith("Work can be intense.")
    assert fallback_follow_up(make_entry(1, text="Dinner with family")).startswith("Family moments matter.")
    assert fallback_follow_up(make_entry(1, text="Nothing much")) == "How are you feeling about everything right now?"


def test_fallback_week_summary():
    entries = [make_entry(1, "positive"), make_entry(2, "very_positive"), make_entry(3, "negative")]
    summary = fallback_week_summary(entries)
    assert summary.startswith("This week, you wrote 3 entries. ")
    assert "more positive moments" in summary
    assert "balance" in fallback_week_summary([make_entry(1, "neutral")])
    assert fallback_week_summary([]) == NO_ENTRIES_SUMMARY


# ==================== Claude analyzer ====================

def test_analyzer_without_api_key_falls_back(offline_analyzer):
    assert not offline_analyzer.available

    outcome = offline_analyzer.analyze("Feeling great today")
    assert isinstance(outcome, Fallback)
    assert outcome.reason == "not_configured"
    assert outcome.analysis.sentiment == Sentiment.POSITIVE
    assert offline_analyzer.generate_reply("Feeling great", outcome.analysis) == FALLBACK_REPLY


def test_analyze_parses_fenced_json(fake_client_analyzer):
    analyzer = fake_client_analyzer(f"```json\n{GOOD_ANALYSIS}\n```")
    outcome = analyzer.analyze("Got promoted at work")

    assert isinstance(outcome, Analyzed)
    assert outcome.model == "model-a"
    assert outcome.analysis.sentiment == Sentiment.POSITIVE
    assert outcome.analysis.emotions == ("joy",)
    assert outcome.analysis.themes == ("work", "career")
    assert outcome.analysis.confidence == 0.85

    call = analyzer.client.messages.calls[0]
    assert call["model"] == "model-a"
    assert "Got promoted at work" in call["messages"][0]["content"]


def test_invalid_sentiment_becomes_neutral(fake_client_analyzer):
    analyzer = fake_client_analyzer(json.dumps({"sentiment": "meh", "emotions": "joy", "themes": []}))
    outcome = analyzer.analyze("ok")
    assert isinstance(outcome, Analyzed)
    assert outcome.analysis.sentiment == Sentiment.NEUTRAL
    assert outcome.analysis.emotions == ()
    assert outcome.analysis.confidence == 0.5


def test_timeout_moves_on_to_the_next_model(fake_client_analyzer):
    analyzer = fake_client_analyzer(APITimeoutError(request=_REQUEST), GOOD_ANALYSIS)
    outcome = analyzer.analyze("Good day")

    assert isinstance(outcome, Analyzed)
    assert outcome.model == "model-b"
    assert [call["model"] for call in analyzer.client.messages.calls] == ["model-a", "model-b"]


def test_every_model_failing_yields_keyword_fallback(fake_client_analyzer):
    analyzer = fake_client_analyzer("Sorry, I can't help with that.")
    outcome = analyzer.analyze("I am so worried")

    assert isinstance(outcome, Fallback)
    assert outcome.reason == "invalid_response"
    assert outcome.analysis == keyword_analysis("I am so worried")
    assert len(analyzer.client.messages.calls) == 2


def test_fallback_reason_reflects_the_last_failure(fake_client_analyzer):
    analyzer = fake_client_analyzer(APIConnectionError(request=_REQUEST))
    assert analyzer.analyze("hello").reason == "api_error"

    analyzer = fake_client_analyzer(APITimeoutError(request=_REQUEST))
    assert analyzer.analyze("hello").reason == "timeout"

    analyzer = fake_client_analyzer(RuntimeError("boom"))
    assert analyzer.analyze("hello").reason == "error"


def test_usage_is_logged_per_call(fake_client_analyzer, caplog):
    caplog.set_level(logging.INFO, logger="Companion.Usage")
    analyzer = fake_client_analyzer(GOOD_ANALYSIS)
    analyzer.analyze("Good day")

    usage_lines = [r.getMessage() for r in caplog.records if r.name == "Companion.Usage"]
    assert len(usage_lines) == 1
    event = json.loads(usage_lines[0].split(" ", 1)[1])
    assert event["event"] == "llm_usage"
    assert event["operation"] == "analysis"
    assert event["total_tokens"] == 49


def test_reply_and_follow_up(fake_client_analyzer):
    analyzer = fake_client_analyzer("That sounds like a big step.", '"What made it feel right?"')
    analysis = SentimentAnalysis(sentiment="positive")

    assert analyzer.generate_reply("I quit my job", analysis) == "That sounds like a big step."
    question = analyzer.generate_follow_up_question(make_entry(1, "positive"), [])
    assert question == "What made it feel right?"


def test_reply_failure_returns_canned_text(fake_client_analyzer):
    analyzer = fake_client_analyzer(APIConnectionError(request=_REQUEST))
    assert analyzer.generate_reply("hi", SentimentAnalysis()) == FALLBACK_REPLY
    assert analyzer.generate_follow_up_question(make_entry(1, "negative")).startswith("I hear you.")


def test_summarize_week_with_claude(fake_client_analyzer):
    analyzer = fake_client_analyzer("A week of steady growth.")
    entries = [make_entry(1, "positive", themes=["work"]), make_entry(2, "negative", themes=["work", "health"])]
    summary = analyzer.summarize_week(entries)

    assert summary.source == "claude"
    assert summary.summary == "A week of steady growth."
    assert summary.sentiment_counts == {"positive": 1, "negative": 1}
    assert [(t.theme, t.count) for t in summary.top_themes] == [("work", 2), ("health", 1)]


def test_summarize_week_falls_back(fake_client_analyzer):
    analyzer = fake_client_analyzer("")
    summary = analyzer.summarize_week([make_entry(1, "negative")])
    assert summary.source == "fallback"
    assert summary.summary.startswith("This week, you wrote 1 entries.")

    empty = analyzer.summarize_week([])
    assert empty.summary == NO_ENTRIES_SUMMARY
    assert empty.sentiment_counts == {}
