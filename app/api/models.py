from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.features.journal.models import Sentiment
from app.features.metrics.engine import CurrentMood, GrowthScore, MoodTrend


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =========================================================================
# REQUEST MODELS
# =========================================================================

class CreateEntryRequest(BaseModel):
    text: Optional[str] = None
    timestamp: Optional[str] = None  # ISO-8601, for backfilled entries


class PromptRequest(BaseModel):
    text: str = ""
    sentiment: Optional[str] = None


# =========================================================================
# RESPONSE MODELS
# =========================================================================

class PrivacySettings(_CamelModel):
    on_device_processing: bool
    data_retention: int


class HealthPrivacy(PrivacySettings):
    total_entries: int


class HealthResponse(_CamelModel):
    status: str
    ai_provider: str
    ai_configured: bool
    privacy: HealthPrivacy
    timestamp: datetime


class PromptResponse(BaseModel):
    prompt: str


class FollowUpResponse(_CamelModel):
    entry_id: int
    question: str


class ThemeCountResponse(BaseModel):
    theme: str
    count: int


class JourneyPoint(BaseModel):
    date: Optional[datetime] = None
    sentiment: Sentiment
    emotions: List[str] = Field(default_factory=list)


class InsightsResponse(_CamelModel):
    total_entries: int
    average_word_count: int
    most_common_themes: List[ThemeCountResponse]
    emotional_journey: List[JourneyPoint]
    privacy_settings: PrivacySettings
    writing_streak: int
    mood_trend: MoodTrend
    current_mood: CurrentMood
    growth_score: GrowthScore
