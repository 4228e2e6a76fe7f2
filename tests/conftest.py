from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_analyzer, get_now, get_store, get_timezone
from app.core.config import settings
from app.features.analysis.keywords import keyword_analysis
from app.features.analysis.models import Fallback, WeeklySummary
from app.features.analysis.service import CompanionAnalyzer
from app.features.journal.models import JournalEntry
from app.features.journal.store import EntryStore

# Fixed reference instant; naive datetimes are read as local time
NOW = datetime(2026, 3, 15, 12, 0, 0)


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "api: Tests that go through the HTTP layer")


def days_ago(days, hour=10):
    """Naive local time ``days`` before NOW at ``hour`` o'clock."""
    return (NOW - timedelta(days=days)).replace(hour=hour, minute=0, second=0)


def make_entry(entry_id, sentiment="neutral", timestamp=None, text="Some words here", **fields):
    fields.setdefault("word_count", len(text.split()))
    return JournalEntry(
        id=entry_id,
        text=text,
        sentiment=sentiment,
        timestamp=timestamp,
        **fields,
    )


# ==================== Fake Claude client ====================

class FakeMessages:
    """Stands in for ``client.messages``; replays canned replies in order.

    A reply may be a string (the completion text) or an exception to raise.
    The last reply is repeated once the others are used up.
    """

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(
            content=[SimpleNamespace(type="text", text=reply)],
            usage=SimpleNamespace(input_tokens=42, output_tokens=7),
        )


class FakeClaudeClient:
    def __init__(self, *replies):
        self.messages = FakeMessages(replies)


@pytest.fixture
def fake_client_analyzer():
    """Build an analyzer over a fake client with two deterministic model candidates."""

    def _build(*replies):
        analyzer = CompanionAnalyzer(client=FakeClaudeClient(*replies), model="model-a")
        analyzer.model_candidates = ["model-a", "model-b"]
        return analyzer

    return _build


@pytest.fixture
def offline_analyzer(monkeypatch):
    """Analyzer with no API key configured: keyword fallback only."""
    monkeypatch.setattr(settings, "ANTHROPIC_API_KEY", None)
    return CompanionAnalyzer()


# ==================== API fixtures ====================

class StubAnalyzer:
    """Deterministic analyzer for route tests."""

    available = False

    def __init__(self):
        self.analyzed = []

    def analyze(self, text):
        self.analyzed.append(text)
        return Fallback(analysis=keyword_analysis(text), reason="not_configured")

    def generate_reply(self, text, analysis):
        return f"Reply to: {text}"

    def generate_follow_up_question(self, entry, recent_entries=()):
        return f"What else about entry {entry.id} ({len(recent_entries)} before)?"

    def summarize_week(self, entries):
        return WeeklySummary(summary=f"{len(entries)} entries this week")


@pytest.fixture
def store():
    return EntryStore()


@pytest.fixture
def stub_analyzer():
    return StubAnalyzer()


@pytest.fixture
def client(store, stub_analyzer):
    from main import app

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_analyzer] = lambda: stub_analyzer
    app.dependency_overrides[get_now] = lambda: NOW
    app.dependency_overrides[get_timezone] = lambda: None
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
