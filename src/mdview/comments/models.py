"""Comment records and their wire payload"""

from datetime import datetime

from pydantic import BaseModel, Field


COMMENT_ID_PATTERN = r"^COM-[0-9]+$"


class MarkdownComment(BaseModel):
    """A ranged comment anchored in the markdown source by a start/end marker pair."""
    id:      str = Field(..., pattern=COMMENT_ID_PATTERN)
    created: datetime
    updated: datetime
    body:    str

    @property
    def numeric_id(self) -> int:
        return int(self.id.split('-', 1)[1])


class CommentPayload(BaseModel):
    """JSON form embedded in a start marker; the body is base64 so it cannot break the marker."""
    id:      str = Field(..., pattern=COMMENT_ID_PATTERN)
    created: str
    updated: str
    bodyB64: str


def format_comment_id(numeric_id: int) -> str:
    return f"COM-{numeric_id}"
