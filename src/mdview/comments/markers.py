"""Scanning and rewriting of comment markers embedded in markdown source

Markers are HTML comments, so markdown renderers ignore them:

    <!-- MV-COMMENT-START {"id":"COM-1",...} -->commented text<!-- MV-COMMENT-END COM-1 -->

Every function here is pure (text in, text out). Offsets taken as arguments
are UTF-8 byte offsets; the scanner itself works on str indices.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator

from mdview.comments.codec import decode, encode
from mdview.comments.models import MarkdownComment, format_comment_id
from mdview.core.frontmatter import parse_front_matter
from mdview.core.utils.source_map import byte_length, char_index_for_byte_offset


logger = logging.getLogger(__name__)

START_KEYWORD = "MV-COMMENT-START"
END_KEYWORD = "MV-COMMENT-END"
MARKER_SIGNATURE = "MV-COMMENT-"
COMMENT_HEADER_PREFIX = "<!-- MarkdownViewer comments:"
COMMENT_HEADER_LINE = (
    COMMENT_HEADER_PREFIX + " Do not remove MV-COMMENT markers. They anchor inline comments. -->"
)

_OPEN = "<!--"
_CLOSE = "-->"


@dataclass(frozen=True)
class Marker:
    """A start or end marker located in a source string (str indices)."""
    kind:          str      # 'start' or 'end'
    start:         int      # index of "<!--"
    end:           int      # index just past "-->"
    payload_start: int
    payload_end:   int
    payload:       str      # JSON for start markers, comment id for end markers


def start_marker(payload: str) -> str:
    return f"<!-- {START_KEYWORD} {payload} -->"


def end_marker(comment_id: str) -> str:
    return f"<!-- {END_KEYWORD} {comment_id} -->"


def _skip_space(text: str, pos: int, limit: int) -> int:
    while pos < limit and text[pos].isspace():
        pos += 1
    return pos


def iter_markers(text: str) -> Iterator[Marker]:
    """Yield every well-formed start/end marker in document order.

    A marker is "<!--", optional whitespace, a keyword, at least one whitespace,
    a non-empty payload, optional whitespace and the first following "-->".
    Other HTML comments are skipped.
    """
    pos = 0
    while True:
        opening = text.find(_OPEN, pos)
        if opening < 0:
            return
        closing = text.find(_CLOSE, opening + len(_OPEN))
        if closing < 0:
            return
        pos = closing + len(_CLOSE)

        i = _skip_space(text, opening + len(_OPEN), closing)
        if text.startswith(START_KEYWORD, i, closing):
            kind, keyword_end = 'start', i + len(START_KEYWORD)
        elif text.startswith(END_KEYWORD, i, closing):
            kind, keyword_end = 'end', i + len(END_KEYWORD)
        else:
            continue

        payload_start = _skip_space(text, keyword_end, closing)
        if payload_start == keyword_end:
            continue
        payload_end = closing
        while payload_end > payload_start and text[payload_end - 1].isspace():
            payload_end -= 1
        if payload_end == payload_start:
            continue
        payload = text[payload_start:payload_end]
        if kind == 'start' and not (payload.startswith('{') and payload.endswith('}')):
            continue
        yield Marker(kind, opening, pos, payload_start, payload_end, payload)


def _decoded_starts(text: str) -> Iterator[tuple[Marker, MarkdownComment]]:
    for marker in iter_markers(text):
        if marker.kind != 'start':
            continue
        comment = decode(marker.payload)
        if comment is None:
            logger.debug("Skipping malformed comment marker at index %d", marker.start)
            continue
        yield marker, comment


def parse_comments(text: str) -> list[MarkdownComment]:
    """Return comments whose start marker has a matching end marker later in text, by numeric id."""
    end_positions: dict[str, list[int]] = {}
    for marker in iter_markers(text):
        if marker.kind == 'end':
            end_positions.setdefault(marker.payload, []).append(marker.start)

    comments = []
    for marker, comment in _decoded_starts(text):
        if not any(p > marker.start for p in end_positions.get(comment.id, [])):
            logger.debug("Skipping comment %s without an end marker", comment.id)
            continue
        comments.append(comment)
    return sorted(comments, key=lambda c: c.numeric_id)


def next_comment_id(text: str) -> str:
    """Return COM-<max+1> over every decodable start marker, COM-1 when there are none."""
    highest = max((c.numeric_id for _, c in _decoded_starts(text)), default=0)
    return format_comment_id(highest + 1)


def ensure_comment_header(text: str, insertion_offset: int) -> tuple[str, int]:
    """Insert the header guard line once at insertion_offset. Returns (text, inserted_bytes)."""
    if COMMENT_HEADER_PREFIX in text:
        return text, 0
    header = COMMENT_HEADER_LINE + "\n\n"
    index = char_index_for_byte_offset(text, insertion_offset)
    return text[:index] + header + text[index:], byte_length(header)


def insert_comment_markers(text: str, start_offset: int, end_offset: int, comment: MarkdownComment) -> str:
    """Splice a start marker before start_offset and an end marker after end_offset."""
    start = char_index_for_byte_offset(text, start_offset)
    end = char_index_for_byte_offset(text, end_offset)
    if start > end:
        raise ValueError(f"Start offset {start_offset} is after end offset {end_offset}")
    payload = encode(comment)
    if payload is None:
        raise ValueError(f"Comment {comment.id} could not be encoded")
    return text[:start] + start_marker(payload) + text[start:end] + end_marker(comment.id) + text[end:]


def add_comment(text: str, start_offset: int, end_offset: int, body: str, now: datetime) -> tuple[str, MarkdownComment]:
    """Return (new_text, comment) with a new comment anchored to [start_offset, end_offset).

    Raises ValueError for an empty/inverted range or offsets that are out of
    bounds or not on a UTF-8 boundary; text is never partially modified.
    """
    if start_offset >= end_offset:
        raise ValueError(f"Start offset {start_offset} must be before end offset {end_offset}")
    char_index_for_byte_offset(text, start_offset)
    char_index_for_byte_offset(text, end_offset)

    insertion_offset = parse_front_matter(text).front_matter_end_offset
    text, inserted = ensure_comment_header(text, insertion_offset)
    if inserted:
        # offsets before the header insertion point keep their position
        if start_offset >= insertion_offset:
            start_offset += inserted
        if end_offset >= insertion_offset:
            end_offset += inserted

    comment = MarkdownComment(id=next_comment_id(text), created=now, updated=now, body=body)
    return insert_comment_markers(text, start_offset, end_offset, comment), comment


def update_comment_payload(text: str, comment_id: str, body: str, now: datetime) -> str | None:
    """Replace the payload of comment_id's start marker in place. None if no marker matches."""
    for marker, existing in _decoded_starts(text):
        if existing.id != comment_id:
            continue
        updated = existing.model_copy(update={"updated": now, "body": body})
        payload = encode(updated)
        if payload is None:
            return None
        return text[:marker.payload_start] + payload + text[marker.payload_end:]
    return None


def remove_comment_markers(text: str, comment_id: str) -> str | None:
    """Remove comment_id's start marker and the first end marker after it. None if no start matches."""
    for marker, existing in _decoded_starts(text):
        if existing.id == comment_id:
            break
    else:
        return None

    text = text[:marker.start] + text[marker.end:]
    for end in iter_markers(text):
        if end.kind == 'end' and end.payload == comment_id and end.start >= marker.start:
            return text[:end.start] + text[end.end:]
    logger.debug("Comment %s had no end marker to remove", comment_id)
    return text
