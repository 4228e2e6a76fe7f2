"""
Analysis feature module.

- service: Claude-backed analyzer with model fallback
- keywords: deterministic keyword analyzer used when Claude is unavailable
- prompts: prompt templates
- models: Analyzed / Fallback outcomes and weekly summaries
"""

from app.features.analysis.models import (
    AnalysisOutcome,
    Analyzed,
    Fallback,
    WeeklySummary,
)
from app.features.analysis.service import CompanionAnalyzer

__all__ = [
    "AnalysisOutcome",
    "Analyzed",
    "CompanionAnalyzer",
    "Fallback",
    "WeeklySummary",
]
