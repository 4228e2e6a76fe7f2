"""
Journal entry API routes.

Submitting an entry runs the analysis pipeline (Claude, or the keyword
fallback), asks for a companion reply and appends the result to the store.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request

from app.api.dependencies import get_analyzer, get_store
from app.api.models import CreateEntryRequest, FollowUpResponse, PromptRequest, PromptResponse
from app.core.logging_utils import sanitize_log_message
from app.features.analysis.service import CompanionAnalyzer
from app.features.journal.models import JournalEntry, Sentiment
from app.features.journal.store import EntryStore
from app.features.journal.timestamps import parse_timestamp
from app.shared.errors import ErrorResponse, get_correlation_id, internal_error, not_found_error, validation_error

router = APIRouter(tags=["Entries"])
logger = logging.getLogger("Companion.API.Entries")

NO_MATCH_PROMPT = "I'm here to listen and support you. How are you feeling right now?"


@router.post("/sentiment", response_model=JournalEntry, responses={400: {"model": ErrorResponse}})
def create_entry(
    request: CreateEntryRequest,
    http_request: Request,
    store: EntryStore = Depends(get_store),
    analyzer: CompanionAnalyzer = Depends(get_analyzer),
):
    """Analyze a new journal entry, generate a reply and save it."""
    correlation_id = get_correlation_id(http_request)

    text = (request.text or "").strip()
    if not text:
        return validation_error("Text is required", details={"field": "text"}, correlation_id=correlation_id)

    timestamp = None
    if request.timestamp:
        timestamp = parse_timestamp(request.timestamp)
        if timestamp is None:
            return validation_error(
                "Timestamp must be an ISO-8601 date-time",
                details={"field": "timestamp", "value": request.timestamp},
                correlation_id=correlation_id,
            )

    try:
        logger.info("Analyzing entry: %s", sanitize_log_message(text, max_len=40))
        outcome = analyzer.analyze(text)
        reply = analyzer.generate_reply(text, outcome.analysis)
        return store.add_entry(
            text,
            outcome.analysis,
            reply,
            timestamp=timestamp,
            analysis_source=outcome.source,
        )
    except Exception:
        logger.exception("Failed to analyze entry")
        return internal_error("Failed to analyze entry", correlation_id=correlation_id)


@router.get("/entries", response_model=List[JournalEntry])
def list_entries(store: EntryStore = Depends(get_store)):
    """All entries in insertion order."""
    return list(store.snapshot())


@router.get("/entries/{entry_id}", response_model=JournalEntry, responses={404: {"model": ErrorResponse}})
def get_entry(entry_id: int, http_request: Request, store: EntryStore = Depends(get_store)):
    entry = store.get(entry_id)
    if entry is None:
        return not_found_error(
            f"Entry {entry_id} not found",
            resource_type="entry",
            resource_id=str(entry_id),
            correlation_id=get_correlation_id(http_request),
        )
    return entry


@router.post("/entries/{entry_id}/follow-up", response_model=FollowUpResponse, responses={404: {"model": ErrorResponse}})
def follow_up_question(
    entry_id: int,
    http_request: Request,
    store: EntryStore = Depends(get_store),
    analyzer: CompanionAnalyzer = Depends(get_analyzer),
):
    """Ask one reflective follow-up question about an entry."""
    snapshot = store.snapshot()
    position = next((i for i, entry in enumerate(snapshot) if entry.id == entry_id), None)
    if position is None:
        return not_found_error(
            f"Entry {entry_id} not found",
            resource_type="entry",
            resource_id=str(entry_id),
            correlation_id=get_correlation_id(http_request),
        )

    entry = snapshot[position]
    question = analyzer.generate_follow_up_question(entry, snapshot[:position])
    return FollowUpResponse(entry_id=entry.id, question=question)


@router.post("/prompt", response_model=PromptResponse)
def get_prompt(request: PromptRequest, store: EntryStore = Depends(get_store)):
    """
    Return the reply already stored for a submitted entry.

    Matches the newest entry with the same text (and sentiment, when given);
    otherwise a generic supportive prompt.
    """
    text = request.text.strip()
    sentiment = Sentiment.coerce(request.sentiment) if request.sentiment else None

    for entry in reversed(store.snapshot()):
        if entry.text != text or not entry.ai_response:
            continue
        if sentiment is not None and entry.sentiment != sentiment:
            continue
        return PromptResponse(prompt=entry.ai_response)

    return PromptResponse(prompt=NO_MATCH_PROMPT)
