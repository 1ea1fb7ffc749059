"""Data models for render results, front matter, and loaded documents"""

from dataclasses import dataclass, field

from pydantic import BaseModel, Field

from mdview.comments.models import MarkdownComment


class OutlineItem(BaseModel):
    """One navigable heading; consumers scroll to '#' + anchor_id on selection."""
    title:     str
    level:     int = Field(..., ge=1, le=6)
    anchor_id: str = Field(..., serialization_alias="anchorID")


@dataclass(frozen=True)
class RenderedMarkdown:
    """Result of one render pass: body HTML fragment plus the raw (unnormalized) outline."""
    html:    str
    outline: list[OutlineItem] = field(default_factory=list)


@dataclass(frozen=True)
class FrontMatterInfo:
    items:                  list[tuple[str, str]]
    content:                str        # text after the closing delimiter line
    content_start_offset:   int        # byte offset of content in the original source
    front_matter_end_offset: int


class LoadedDocument(BaseModel):
    """Public result of the document pipeline for one source text."""
    title:    str = ""
    html:     str
    outline:  list[OutlineItem] = []
    comments: list[MarkdownComment] = []
    error:    str | None = None     # set when html is an error placeholder
