"""Encode/decode a single comment to and from its marker JSON payload"""

import base64
import binascii
import logging
from datetime import datetime, timezone

from pydantic import ValidationError

from mdview.comments.models import CommentPayload, MarkdownComment


logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with second precision, e.g. 2026-01-15T10:30:00Z. Naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO-8601 timestamp; raises ValueError. Offset-less values are taken as UTC."""
    value = datetime.fromisoformat(text.replace('Z', '+00:00'))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


def encode(comment: MarkdownComment) -> str | None:
    """Return the compact JSON payload for comment, or None if it cannot be encoded."""
    try:
        payload = CommentPayload(
            id=comment.id,
            created=format_timestamp(comment.created),
            updated=format_timestamp(comment.updated),
            bodyB64=base64.b64encode(comment.body.encode('utf-8')).decode('ascii'),
        )
    except (ValidationError, UnicodeEncodeError, ValueError) as e:
        logger.debug("Cannot encode comment %s: %s", comment.id, e)
        return None
    return payload.model_dump_json()


def decode(json_text: str) -> MarkdownComment | None:
    """Return the comment in a JSON payload, or None when any part of it is malformed."""
    try:
        payload = CommentPayload.model_validate_json(json_text)
        created = parse_timestamp(payload.created)
        updated = parse_timestamp(payload.updated)
        body = base64.b64decode(payload.bodyB64, validate=True).decode('utf-8')
        return MarkdownComment(id=payload.id, created=created, updated=updated, body=body)
    except (ValidationError, ValueError, binascii.Error, UnicodeDecodeError) as e:
        logger.debug("Ignoring malformed comment payload: %s", e)
        return None
