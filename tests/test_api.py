import pytest

from app.features.journal.models import SentimentAnalysis
from conftest import NOW, days_ago

pytestmark = pytest.mark.api


def _seed(store, text, sentiment, timestamp, themes=(), reply="reply"):
    return store.add_entry(
        text,
        SentimentAnalysis(sentiment=sentiment, themes=list(themes)),
        reply,
        timestamp=timestamp,
    )


def test_health(client, store):
    _seed(store, "hello", "neutral", days_ago(0))
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["aiProvider"] == "Claude API"
    assert body["privacy"] == {"onDeviceProcessing": False, "dataRetention": 30, "totalEntries": 1}
    assert response.headers["X-Correlation-ID"]


def test_correlation_id_is_echoed(client):
    response = client.get("/api/privacy", headers={"X-Correlation-ID": "abc12345"})
    assert response.headers["X-Correlation-ID"] == "abc12345"
    assert response.json() == {"onDeviceProcessing": False, "dataRetention": 30}


def test_create_entry(client, stub_analyzer):
    response = client.post(
        "/api/sentiment",
        json={"text": "  Great day at work  ", "timestamp": "2026-03-15T09:30:00"},
    )

    assert response.status_code == 200
    entry = response.json()
    assert entry["id"] == 1
    assert entry["text"] == "Great day at work"
    assert entry["sentiment"] == "positive"
    assert entry["themes"] == ["work"]
    assert entry["wordCount"] == 4
    assert entry["aiResponse"] == "Reply to: Great day at work"
    assert entry["analysisSource"] == "fallback"
    assert entry["timestamp"] == "2026-03-15T09:30:00"
    assert [m["role"] for m in entry["conversation"]] == ["user", "ai"]
    assert stub_analyzer.analyzed == ["Great day at work"]


@pytest.mark.parametrize("payload", [{}, {"text": ""}, {"text": "   "}])
def test_create_entry_requires_text(client, store, payload):
    response = client.post("/api/sentiment", json=payload)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    assert len(store) == 0


def test_create_entry_rejects_bad_timestamp(client, store):
    response = client.post("/api/sentiment", json={"text": "hi", "timestamp": "last tuesday"})

    assert response.status_code == 400
    assert response.json()["error"]["details"]["field"] == "timestamp"
    assert len(store) == 0


def test_malformed_body_uses_error_envelope(client):
    response = client.post("/api/sentiment", json={"text": ["not", "a", "string"]})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_list_and_get_entries(client, store):
    _seed(store, "one", "neutral", days_ago(1))
    _seed(store, "two", "positive", days_ago(0))

    assert [e["id"] for e in client.get("/api/entries").json()] == [1, 2]
    assert client.get("/api/entries/2").json()["text"] == "two"

    missing = client.get("/api/entries/9")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "NOT_FOUND"


def test_follow_up_question(client, store):
    _seed(store, "one", "neutral", days_ago(1))
    _seed(store, "two", "positive", days_ago(0))

    response = client.post("/api/entries/2/follow-up")
    assert response.status_code == 200
    assert response.json() == {"entryId": 2, "question": "What else about entry 2 (1 before)?"}
    assert client.post("/api/entries/5/follow-up").status_code == 404


def test_prompt_returns_stored_reply(client, store):
    _seed(store, "Rough day", "negative", days_ago(1), reply="older reply")
    _seed(store, "Rough day", "negative", days_ago(0), reply="newer reply")

    assert client.post("/api/prompt", json={"text": "Rough day ", "sentiment": "negative"}).json() == {
        "prompt": "newer reply"
    }
    fallback = client.post("/api/prompt", json={"text": "Rough day", "sentiment": "positive"}).json()
    assert fallback["prompt"].startswith("I'm here to listen and support you.")


def test_insights(client, store):
    _seed(store, "a b c d", "negative", days_ago(2), themes=["work"])
    _seed(store, "a b", "positive", days_ago(1), themes=["work", "health"])
    _seed(store, "a b c", "very_positive", days_ago(0), themes=["health", "travel"])

    body = client.get("/api/insights").json()

    assert body["totalEntries"] == 3
    assert body["averageWordCount"] == 3
    assert body["mostCommonThemes"][:2] == [{"theme": "work", "count": 2}, {"theme": "health", "count": 2}]
    assert len(body["emotionalJourney"]) == 3
    assert body["writingStreak"] == 3
    assert body["moodTrend"]["trend"] == "improving"
    assert body["currentMood"]["mood"] == "very_positive"
    assert 0 <= body["growthScore"]["score"] <= 100
    assert body["privacySettings"]["dataRetention"] == 30


def test_insights_empty_store(client):
    body = client.get("/api/insights").json()
    assert body["totalEntries"] == 0
    assert body["averageWordCount"] == 0
    assert body["writingStreak"] == 0
    assert body["moodTrend"]["description"] == "No data yet"
    assert body["growthScore"]["score"] == 0


def test_summary_uses_the_trailing_week(client, store):
    _seed(store, "old", "neutral", days_ago(10))
    _seed(store, "recent", "neutral", days_ago(2))
    _seed(store, "today", "neutral", days_ago(0))

    assert client.get("/api/summary").json()["summary"] == "2 entries this week"


def test_trend_routes(client, store):
    _seed(store, "fine", "positive", days_ago(1), themes=["work"])
    _seed(store, "long ago", "negative", days_ago(60))

    trends = client.get("/api/trends").json()
    assert trends["totalEntries"] == 1
    assert trends["trends"][0] == {"date": "2026-03-14", "sentiment": "positive", "emotions": [], "themes": ["work"]}

    sentiment = client.get("/api/sentiment-trends").json()
    assert sentiment["data"][0]["sentiment"] == 0.5
    assert sentiment["summary"]["totalDays"] == 1


def test_chat_routes(client, store):
    _seed(store, "morning", "neutral", days_ago(0, hour=8), themes=["Work"])
    _seed(store, "yesterday", "neutral", days_ago(1), themes=["health"])

    daily = client.get("/api/chats/daily").json()
    assert [d["date"] for d in daily] == ["2026-03-15", "2026-03-14"]
    assert daily[0]["thumbnail"]["text"] == "morning"
    assert daily[0]["displayDate"] == "Mar 15, 2026"

    history = client.get("/api/chat-history/2026-03-14").json()
    assert [e["text"] for e in history] == ["yesterday"]
    assert client.get("/api/chat-history/14-03-2026").status_code == 400

    assert [e["text"] for e in client.get("/api/chats/hashtag/WORK").json()] == ["morning"]
    assert client.get("/api/hashtags").json() == ["health", "work"]


def test_ai_prompts(client, store):
    default = client.get("/api/ai-prompts").json()
    assert len(default["prompts"]) == 5
    assert "analysis" not in default

    _seed(store, "stressful week", "negative", days_ago(0), themes=["stress"])
    contextual = client.get("/api/ai-prompts").json()
    assert contextual["analysis"] == {"sentiment": "negative", "themes": ["stress"], "emotions": []}
    assert len(contextual["prompts"]) == 5


def test_now_dependency_drives_metrics(client, store):
    _seed(store, "today", "positive", NOW)
    assert client.get("/api/insights").json()["writingStreak"] == 1
