"""
Analysis outcome types.

An analysis is either ``Analyzed`` (Claude answered with a usable payload) or
``Fallback`` (the keyword analyzer stood in). Both carry a complete
``SentimentAnalysis``, so downstream code never has to handle a missing one.
"""

from typing import Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.features.journal.models import SentimentAnalysis


class Analyzed(BaseModel):
    source: Literal["claude"] = "claude"
    analysis: SentimentAnalysis
    model: str


class Fallback(BaseModel):
    source: Literal["fallback"] = "fallback"
    analysis: SentimentAnalysis
    reason: str


AnalysisOutcome = Union[Analyzed, Fallback]


class ThemeCount(BaseModel):
    theme: str
    count: int


class WeeklySummary(BaseModel):
    """Summary of the trailing week of entries."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    summary: str
    insights: List[str] = Field(default_factory=list)
    sentiment_counts: Dict[str, int] = Field(default_factory=dict)
    top_themes: List[ThemeCount] = Field(default_factory=list)
    source: str = "fallback"
