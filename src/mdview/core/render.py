"""HTML rendering of parsed markdown with source offsets, heading anchors and outline"""

import os
from dataclasses import dataclass, field
from typing import Callable

from markdown_it.common.utils import escapeHtml

from mdview.comments.markers import COMMENT_HEADER_PREFIX, MARKER_SIGNATURE
from mdview.core import nodes as n
from mdview.core.models import OutlineItem, RenderedMarkdown
from mdview.core.utils.slug import HeadingSlugger
from mdview.core.utils.source_map import SourceMapper


IMAGE_SCHEME = "localimage"
PASSTHROUGH_SIGNATURES = (MARKER_SIGNATURE, COMMENT_HEADER_PREFIX)

# node kinds that only wrap their rendered children
WRAP_TAGS: dict[type, tuple[str, str]] = {
    n.Paragraph:     ('<p>', '</p>\n'),
    n.Emphasis:      ('<em>', '</em>'),
    n.Strong:        ('<strong>', '</strong>'),
    n.Strikethrough: ('<del>', '</del>'),
    n.BulletList:    ('<ul>\n', '</ul>\n'),
    n.ListItem:      ('<li>', '</li>\n'),
    n.BlockQuote:    ('<blockquote>\n', '</blockquote>\n'),
    n.Table:         ('<table>\n', '</table>\n'),
    n.TableHead:     ('<thead>\n', '</thead>\n'),
    n.TableBody:     ('<tbody>\n', '</tbody>\n'),
    n.TableRow:      ('<tr>\n', '</tr>\n'),
}

LEAF_HTML: dict[type, str] = {
    n.ThematicBreak: '<hr>\n',
    n.SoftBreak:     ' ',
    n.LineBreak:     '<br>\n',
}


def resolve_image_source(source: str, base_dir: str | os.PathLike | None, scheme: str = IMAGE_SCHEME) -> str:
    """Rewrite local image paths to the custom scheme; web and data URLs pass through."""
    if not source:
        return ""
    if source.startswith(('http://', 'https://', 'data:')):
        return source
    if source.startswith('file://'):
        return f"{scheme}://{source[len('file://'):]}"
    if base_dir is not None:
        resolved = os.path.abspath(os.path.join(os.fspath(base_dir), source))
        return f"{scheme}://{resolved}"
    return source


def should_pass_through(raw_html: str) -> bool:
    """Raw HTML survives rendering only when it is a single comment marker or the comment header."""
    stripped = raw_html.strip()
    if not (stripped.startswith('<!--') and stripped.endswith('-->')):
        return False
    if stripped.find('-->') != len(stripped) - 3:
        return False
    return any(sig in stripped for sig in PASSTHROUGH_SIGNATURES)


@dataclass
class RenderContext:
    """Mutable state of one render pass."""
    parts:   list[str] = field(default_factory=list)
    outline: list[OutlineItem] = field(default_factory=list)
    slugger: HeadingSlugger = field(default_factory=HeadingSlugger)

    def write(self, html: str) -> None:
        self.parts.append(html)


class MarkdownRenderer:
    """Renders an n.Document to an HTML fragment.

    When `source` (the exact text that was parsed) is given, every text leaf
    with a source range is wrapped in a span carrying data-mv-text-start and
    data-mv-text-end byte offsets, shifted by `source_offset_base` so they
    address the original file rather than the parsed slice.
    """

    def __init__(
        self,
        source: str | None = None,
        source_offset_base: int = 0,
        base_dir: str | os.PathLike | None = None,
        image_scheme: str = IMAGE_SCHEME,
        ):
        self.mapper = SourceMapper(source) if source is not None else None
        self.source_offset_base = source_offset_base
        self.base_dir = base_dir
        self.image_scheme = image_scheme
        self._handlers: dict[type, Callable[[n.Node, RenderContext], None]] = {
            n.Heading:     self._heading,
            n.Text:        self._text,
            n.InlineCode:  self._inline_code,
            n.CodeBlock:   self._code_block,
            n.Link:        self._link,
            n.Image:       self._image,
            n.OrderedList: self._ordered_list,
            n.TableCell:   self._table_cell,
            n.HTMLBlock:   self._raw_html,
            n.InlineHTML:  self._raw_html,
        }

    def render(self, document: n.Document) -> RenderedMarkdown:
        ctx = RenderContext()
        self._children(document, ctx)
        return RenderedMarkdown(html=''.join(ctx.parts), outline=list(ctx.outline))

    def visit(self, node: n.Node, ctx: RenderContext) -> None:
        handler = self._handlers.get(type(node))
        if handler is not None:
            handler(node, ctx)
        elif type(node) in WRAP_TAGS:
            opening, closing = WRAP_TAGS[type(node)]
            ctx.write(opening)
            self._children(node, ctx)
            ctx.write(closing)
        elif type(node) in LEAF_HTML:
            ctx.write(LEAF_HTML[type(node)])
        else:
            # Document, Container and unknown kinds: children only
            self._children(node, ctx)

    def _children(self, node: n.Node, ctx: RenderContext) -> None:
        for child in node.children:
            self.visit(child, ctx)

    def _offsets(self, rng: n.SourceRange | None) -> tuple[int, int] | None:
        if rng is None or self.mapper is None:
            return None
        start = self.mapper.offset(rng.start)
        end = self.mapper.offset(rng.end)
        if start is None or end is None:
            return None
        return start + self.source_offset_base, end + self.source_offset_base

    def _heading(self, node: n.Heading, ctx: RenderContext) -> None:
        title = n.plain_text(node).strip()
        anchor_id = ctx.slugger.slug(title)
        if title:
            ctx.outline.append(OutlineItem(title=title, level=node.level, anchor_id=anchor_id))
        ctx.write(f'<h{node.level} id="{anchor_id}">')
        self._children(node, ctx)
        ctx.write(f'</h{node.level}>\n')

    def _text(self, node: n.Text, ctx: RenderContext) -> None:
        escaped = escapeHtml(node.text)
        offsets = self._offsets(node.range)
        if offsets is None:
            ctx.write(escaped)
            return
        start, end = offsets
        ctx.write(f'<span data-mv-text-start="{start}" data-mv-text-end="{end}">{escaped}</span>')

    def _inline_code(self, node: n.InlineCode, ctx: RenderContext) -> None:
        ctx.write(f'<code>{escapeHtml(node.code)}</code>')

    def _code_block(self, node: n.CodeBlock, ctx: RenderContext) -> None:
        ctx.write(f'<pre><code class="language-{escapeHtml(node.language)}">{escapeHtml(node.code)}</code></pre>\n')

    def _link(self, node: n.Link, ctx: RenderContext) -> None:
        ctx.write(f'<a href="{escapeHtml(node.destination)}">')
        self._children(node, ctx)
        ctx.write('</a>')

    def _image(self, node: n.Image, ctx: RenderContext) -> None:
        src = resolve_image_source(node.source, self.base_dir, self.image_scheme)
        ctx.write(f'<img src="{escapeHtml(src)}" alt="{escapeHtml(n.plain_text(node))}">')

    def _ordered_list(self, node: n.OrderedList, ctx: RenderContext) -> None:
        ctx.write('<ol>\n' if node.start == 1 else f'<ol start="{node.start}">\n')
        self._children(node, ctx)
        ctx.write('</ol>\n')

    def _table_cell(self, node: n.TableCell, ctx: RenderContext) -> None:
        tag = 'th' if node.header else 'td'
        ctx.write(f'<{tag}>')
        self._children(node, ctx)
        ctx.write(f'</{tag}>\n')

    def _raw_html(self, node: n.HTMLBlock | n.InlineHTML, ctx: RenderContext) -> None:
        if should_pass_through(node.raw):
            ctx.write(node.raw)


def render_document(
    document: n.Document,
    source: str | None = None,
    source_offset_base: int = 0,
    **options,
    ) -> RenderedMarkdown:
    """Convenience wrapper: render document with a fresh MarkdownRenderer."""
    return MarkdownRenderer(source, source_offset_base, **options).render(document)
