import logging
from datetime import date, tzinfo
from typing import List, Optional

from fastapi import APIRouter, Depends, Request

from app.api.dependencies import get_store, get_timezone
from app.features.journal.models import JournalEntry
from app.features.journal.store import EntryStore
from app.features.journal.timeline import (
    DailyChats,
    all_hashtags,
    daily_chats,
    entries_on_date,
    entries_with_hashtag,
)
from app.shared.errors import get_correlation_id, validation_error

router = APIRouter(tags=["Chats"])
logger = logging.getLogger("Companion.API.Chats")


@router.get("/chats/daily", response_model=List[DailyChats])
def get_daily_chats(
    store: EntryStore = Depends(get_store),
    tz: Optional[tzinfo] = Depends(get_timezone),
):
    """Chat history grouped by day, newest day first."""
    return daily_chats(store.snapshot(), tz=tz)


@router.get("/chat-history/{day}", response_model=List[JournalEntry])
def get_chat_history(
    day: str,
    http_request: Request,
    store: EntryStore = Depends(get_store),
    tz: Optional[tzinfo] = Depends(get_timezone),
):
    """Chats of one YYYY-MM-DD day, oldest first."""
    try:
        wanted = date.fromisoformat(day)
    except ValueError:
        return validation_error(
            "Date must be formatted as YYYY-MM-DD",
            details={"field": "date", "value": day},
            correlation_id=get_correlation_id(http_request),
        )
    return entries_on_date(store.snapshot(), wanted, tz=tz)


@router.get("/chats/hashtag/{hashtag}", response_model=List[JournalEntry])
def get_chats_by_hashtag(
    hashtag: str,
    store: EntryStore = Depends(get_store),
    tz: Optional[tzinfo] = Depends(get_timezone),
):
    """Chats tagged with a theme, newest first."""
    chats = entries_with_hashtag(store.snapshot(), hashtag, tz=tz)
    logger.debug("Hashtag %s matched %d chats", hashtag, len(chats))
    return chats


@router.get("/hashtags", response_model=List[str])
def get_hashtags(store: EntryStore = Depends(get_store)):
    """Every theme used so far, sorted."""
    return all_hashtags(store.snapshot())
