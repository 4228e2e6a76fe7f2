"""
Suggestions feature module.

Contextual writing prompts built from the user's recent entries.
"""

from app.features.suggestions.writing_prompts import (
    DEFAULT_PROMPTS,
    PromptAnalysis,
    PromptSuggestions,
    contextual_prompts,
    suggest_prompts,
)

__all__ = [
    "DEFAULT_PROMPTS",
    "PromptAnalysis",
    "PromptSuggestions",
    "contextual_prompts",
    "suggest_prompts",
]
