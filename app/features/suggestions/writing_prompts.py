"""
Writing prompt suggestions.

New users get a fixed starter set. Everyone else gets prompts chosen from the
average sentiment, top themes and top emotions of their last few entries,
padded with general prompts and cut to five.
"""

from typing import List, Optional, Sequence

from pydantic import BaseModel

from app.features.journal.models import JournalEntry, Sentiment
from app.features.metrics.engine import average_sentiment, top_emotions, top_themes
from app.shared.constants import PROMPT_TOP_K, RECENT_ENTRY_WINDOW

PROMPT_COUNT = 5

DEFAULT_PROMPTS = (
    "💭 What's on your mind today?",
    "🌱 What's one thing you learned about yourself recently?",
    "❤️ What made you smile today?",
    "🎯 What's a goal you're working towards?",
    "✨ What are you grateful for right now?",
)

_POSITIVE_PROMPTS = (
    "🌟 What's making you feel so good lately?",
    "💪 How can you maintain this positive energy?",
    "🎉 What would you tell someone who's having a tough day?",
    "✨ What's one way you can spread positivity today?",
)

_NEGATIVE_PROMPTS = (
    "🤗 What's one small thing that went well today?",
    "💙 How are you taking care of yourself right now?",
    "🌱 What's one thing you're looking forward to?",
    "❤️ What would you tell a friend in your situation?",
)

_NEUTRAL_PROMPTS = (
    "🤔 What's been on your mind lately?",
    "💭 How are you feeling about your current situation?",
    "🎯 What's one thing you'd like to focus on?",
    "🌅 What does a good day look like for you?",
)

THEME_PROMPTS = {
    "work": "💼 How do you want to feel about work tomorrow?",
    "relationships": "👥 What's one way you can nurture your relationships?",
    "stress": "🧘 What helps you feel calm and centered?",
    "growth": "🌱 What's one way you've grown recently?",
    "gratitude": "🙏 What are you most grateful for today?",
}

EMOTION_PROMPTS = {
    "fear": "💚 What's one thing that helps you feel safe?",
    "joy": "😊 What brought you the most joy today?",
}

GENERAL_PROMPTS = (
    "📝 What's one thing you learned about yourself today?",
    "🎨 If today had a color, what would it be and why?",
    "🔄 What's one habit you'd like to start or change?",
    "🌟 What's your biggest win this week?",
    "💭 What would your future self thank you for?",
)


class PromptAnalysis(BaseModel):
    sentiment: Sentiment
    themes: List[str]
    emotions: List[str]


class PromptSuggestions(BaseModel):
    prompts: List[str]
    analysis: Optional[PromptAnalysis] = None


def contextual_prompts(sentiment: Sentiment, themes: Sequence[str], emotions: Sequence[str]) -> List[str]:
    """Sentiment prompts first, then theme and emotion prompts, then general ones; five unique."""
    if sentiment in (Sentiment.POSITIVE, Sentiment.VERY_POSITIVE):
        candidates = list(_POSITIVE_PROMPTS)
    elif sentiment in (Sentiment.NEGATIVE, Sentiment.VERY_NEGATIVE):
        candidates = list(_NEGATIVE_PROMPTS)
    else:
        candidates = list(_NEUTRAL_PROMPTS)

    candidates.extend(prompt for theme, prompt in THEME_PROMPTS.items() if theme in themes)
    candidates.extend(prompt for emotion, prompt in EMOTION_PROMPTS.items() if emotion in emotions)
    candidates.extend(GENERAL_PROMPTS)

    unique: List[str] = []
    for prompt in candidates:
        if prompt not in unique:
            unique.append(prompt)
    return unique[:PROMPT_COUNT]


def suggest_prompts(entries: Sequence[JournalEntry]) -> PromptSuggestions:
    if not entries:
        return PromptSuggestions(prompts=list(DEFAULT_PROMPTS))

    recent = list(entries)[-RECENT_ENTRY_WINDOW:]
    analysis = PromptAnalysis(
        sentiment=average_sentiment(recent),
        themes=[theme for theme, _ in top_themes(recent, PROMPT_TOP_K)],
        emotions=[emotion for emotion, _ in top_emotions(recent, PROMPT_TOP_K)],
    )
    return PromptSuggestions(
        prompts=contextual_prompts(analysis.sentiment, analysis.themes, analysis.emotions),
        analysis=analysis,
    )
