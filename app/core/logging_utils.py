"""
Logging utilities for journal text and LLM calls.

Includes:
- PII redaction and truncation for journal snippets
- Structured token-usage logging for Claude calls
"""
import json
import logging
import re
from typing import Optional


_EMAIL_PATTERN = re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b')
_PHONE_PATTERNS = [
    re.compile(r'\+\d{1,3}[-.\s]?\(?\d{1,4}\)?[-.\s]?\d{3,4}[-.\s]?\d{3,4}'),  # International
    re.compile(r'\(?\b\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}\b'),  # US format
]
_CONTROL_CHARS = re.compile(r'[\x00-\x1F\x7F]')


def redact_emails(text: str) -> str:
    """Replace email addresses with [EMAIL_REDACTED]."""
    return _EMAIL_PATTERN.sub('[EMAIL_REDACTED]', text)


def redact_phone_numbers(text: str) -> str:
    """Replace phone numbers with [PHONE_REDACTED]."""
    for pattern in _PHONE_PATTERNS:
        text = pattern.sub('[PHONE_REDACTED]', text)
    return text


def sanitize_log_message(message: str, max_len: Optional[int] = 100) -> str:
    """
    Make user-written text safe for a single log line.

    Emails and phone numbers are redacted, control characters (including
    newlines) removed, and the result truncated to ``max_len`` characters.
    """
    message = redact_emails(message)
    message = redact_phone_numbers(message)
    message = _CONTROL_CHARS.sub(' ', message).strip()
    if max_len is not None and len(message) > max_len:
        return message[:max_len] + "..."
    return message


# =============================================================================
# STRUCTURED USAGE LOGGING
# =============================================================================

_usage_logger = logging.getLogger("Companion.Usage")


def log_llm_usage(
    model: str,
    input_tokens: int,
    output_tokens: int,
    operation: str,
    duration_ms: Optional[int] = None,
) -> None:
    """
    Log one structured usage event for a Claude call.

    Produces a single JSON log line that log aggregation can parse.

    Args:
        model: Model identifier
        input_tokens: Number of input tokens
        output_tokens: Number of output tokens
        operation: What the call was for ('analysis', 'reply', ...)
        duration_ms: Request duration in milliseconds
    """
    event = {
        "event": "llm_usage",
        "model": model,
        "operation": operation,
        "input_tokens": input_tokens,
        "output_tokens": output_tokens,
        "total_tokens": input_tokens + output_tokens,
    }

    if duration_ms is not None:
        event["duration_ms"] = duration_ms

    _usage_logger.info("LLM_USAGE %s", json.dumps(event))
