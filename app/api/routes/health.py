from datetime import datetime

from fastapi import APIRouter, Depends

from app.api.dependencies import get_analyzer, get_now, get_store
from app.api.models import HealthPrivacy, HealthResponse, PrivacySettings
from app.core.config import settings
from app.features.analysis.service import CompanionAnalyzer
from app.features.journal.store import EntryStore
from app.shared.constants import AI_PROVIDER

router = APIRouter(tags=["Health"])


def privacy_settings() -> PrivacySettings:
    return PrivacySettings(
        on_device_processing=settings.ON_DEVICE_PROCESSING,
        data_retention=settings.DATA_RETENTION_DAYS,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(
    store: EntryStore = Depends(get_store),
    analyzer: CompanionAnalyzer = Depends(get_analyzer),
    now: datetime = Depends(get_now),
) -> HealthResponse:
    """Simple health endpoint for monitoring."""
    privacy = privacy_settings()
    return HealthResponse(
        status="healthy",
        ai_provider=AI_PROVIDER,
        ai_configured=analyzer.available,
        privacy=HealthPrivacy(**privacy.model_dump(), total_entries=len(store)),
        timestamp=now,
    )


@router.get("/privacy", response_model=PrivacySettings)
async def get_privacy_settings() -> PrivacySettings:
    """Privacy settings reported to the client."""
    return privacy_settings()
