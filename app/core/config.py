import os
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

_ANTHROPIC_API_KEY = os.getenv('ANTHROPIC_API_KEY') or os.getenv('CLAUDE_API_KEY')

_CLAUDE_MODEL_PRIMARY = os.getenv('CLAUDE_MODEL_PRIMARY') or os.getenv('CLAUDE_MODEL', 'claude-3-haiku-20240307')
_CLAUDE_MODEL_FALLBACKS = [
    model.strip()
    for model in os.getenv('CLAUDE_MODEL_FALLBACKS', '').split(',')
    if model.strip()
]
_CLAUDE_MODEL_OPTIONS = [_CLAUDE_MODEL_PRIMARY] + [m for m in _CLAUDE_MODEL_FALLBACKS if m and m != _CLAUDE_MODEL_PRIMARY]

_CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv('CORS_ORIGINS', 'http://localhost:3000').split(',')
    if origin.strip()
]


def _load_timezone(name: Optional[str]) -> Optional[ZoneInfo]:
    """Resolve JOURNAL_TIMEZONE; None means the server's local time."""
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return None


class Config:
    """Central configuration for the journaling companion service."""

    ANTHROPIC_API_KEY = _ANTHROPIC_API_KEY

    CLAUDE_MODEL_PRIMARY = _CLAUDE_MODEL_PRIMARY
    CLAUDE_MODEL_FALLBACKS = _CLAUDE_MODEL_FALLBACKS
    CLAUDE_MODEL = _CLAUDE_MODEL_PRIMARY
    CLAUDE_MODEL_OPTIONS: List[str] = _CLAUDE_MODEL_OPTIONS

    ANALYSIS_TIMEOUT_SECONDS = float(os.getenv('ANALYSIS_TIMEOUT_SECONDS', '20'))
    ANALYSIS_MAX_RETRIES = int(os.getenv('ANALYSIS_MAX_RETRIES', '1'))

    JOURNAL_TIMEZONE_NAME = os.getenv('JOURNAL_TIMEZONE')
    JOURNAL_TIMEZONE = _load_timezone(JOURNAL_TIMEZONE_NAME)

    DATA_RETENTION_DAYS = int(os.getenv('DATA_RETENTION_DAYS', '30'))
    ON_DEVICE_PROCESSING = False

    CORS_ORIGINS = _CORS_ORIGINS
    ENVIRONMENT = os.getenv('ENVIRONMENT', 'production').lower()
    PORT = int(os.getenv('PORT', '5001'))

    SERVICE_NAME = "journal-companion-service"


settings = Config()
