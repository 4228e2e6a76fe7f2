from app.features.journal.models import Sentiment
from app.features.suggestions.writing_prompts import (
    DEFAULT_PROMPTS,
    GENERAL_PROMPTS,
    contextual_prompts,
    suggest_prompts,
)
from conftest import make_entry


def test_new_users_get_default_prompts():
    suggestions = suggest_prompts([])
    assert suggestions.prompts == list(DEFAULT_PROMPTS)
    assert suggestions.analysis is None


def test_positive_sentiment_prompts_come_first():
    prompts = contextual_prompts(Sentiment.VERY_POSITIVE, [], [])
    assert prompts[0] == "🌟 What's making you feel so good lately?"
    assert len(prompts) == 5
    assert prompts[4] == GENERAL_PROMPTS[0]


def test_theme_prompt_follows_sentiment_prompts():
    prompts = contextual_prompts(Sentiment.NEGATIVE, ["stress", "work"], ["fear"])
    assert prompts[0] == "🤗 What's one small thing that went well today?"
    # Sentiment prompts fill four slots; the first theme prompt takes the fifth
    assert prompts[4] == "💼 How do you want to feel about work tomorrow?"


def test_prompts_are_unique():
    prompts = contextual_prompts(Sentiment.NEUTRAL, ["growth"], ["joy"])
    assert len(prompts) == len(set(prompts)) == 5


def test_suggestions_analyse_the_last_five_entries():
    entries = [make_entry(1, "very_negative", themes=["family"])] + [
        make_entry(i, "positive", themes=["work"], emotions=["joy"]) for i in range(2, 7)
    ]
    suggestions = suggest_prompts(entries)

    assert suggestions.analysis.sentiment == Sentiment.POSITIVE
    assert suggestions.analysis.themes == ["work"]
    assert suggestions.analysis.emotions == ["joy"]
    assert suggestions.prompts[0] == "🌟 What's making you feel so good lately?"
