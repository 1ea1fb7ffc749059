"""Document pipeline: front matter -> parse -> render -> outline -> comment scan"""

import logging
import os

from markdown_it.common.utils import escapeHtml

from mdview.comments.markers import parse_comments
from mdview.core.frontmatter import parse_front_matter, render_front_matter
from mdview.core.models import LoadedDocument
from mdview.core.outline import normalize_outline
from mdview.core.parse import DEFAULT_PRESET, parse_markdown
from mdview.core.render import IMAGE_SCHEME, MarkdownRenderer


logger = logging.getLogger(__name__)


def error_document(message: str, title: str = "Error") -> LoadedDocument:
    """Placeholder document shown in place of content that could not be loaded."""
    return LoadedDocument(
        title=title,
        html=f"<p>Error loading file: {escapeHtml(message)}</p>",
        outline=[],
        comments=[],
        error=message,
    )


def render_source(
    source: str,
    *,
    title: str = "",
    base_dir: str | os.PathLike | None = None,
    parser_config: str = DEFAULT_PRESET,
    image_scheme: str = IMAGE_SCHEME,
    ) -> LoadedDocument:
    """Run every pipeline step on source; exceptions propagate."""
    front_matter = parse_front_matter(source)
    document = parse_markdown(front_matter.content, parser_config)
    renderer = MarkdownRenderer(
        source=front_matter.content,
        source_offset_base=front_matter.content_start_offset,
        base_dir=base_dir,
        image_scheme=image_scheme,
    )
    rendered = renderer.render(document)
    return LoadedDocument(
        title=title,
        html=render_front_matter(front_matter.items) + rendered.html,
        outline=normalize_outline(rendered.outline),
        # markers may sit inside or after the front matter, so scan the unstripped text
        comments=parse_comments(source),
    )


def load_document(source: str, **options) -> LoadedDocument:
    """Render source into a LoadedDocument, degrading any failure to an error document."""
    try:
        return render_source(source, **options)
    except Exception as e:
        logger.warning("Failed to render document: %s", e)
        return error_document(str(e))
