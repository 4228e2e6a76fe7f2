# Shared constants and utilities
from .constants import (
    SENTIMENT_SCORES,
    DEFAULT_SENTIMENT,
    EMOTIONS,
    THEMES,
)

__all__ = [
    "SENTIMENT_SCORES",
    "DEFAULT_SENTIMENT",
    "EMOTIONS",
    "THEMES",
]
