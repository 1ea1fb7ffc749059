"""markdown-it tokenization and conversion into mdview nodes with source ranges

markdown-it only records line maps for block tokens. Inline source ranges are
recovered by locating each text token inside its block's source lines, moving
a cursor forward so repeated words map to successive occurrences. Text that
cannot be located literally gets no range and renders without offsets.
"""

from bisect import bisect_right

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from mdview.comments.markers import iter_markers
from mdview.core import nodes as n
from mdview.core.utils.source_map import byte_length


DEFAULT_PRESET = 'gfm-like'


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    md = MarkdownIt(preset, options_update={"linkify": False})
    # keep escapes and entities as separate text_special tokens
    md.disable("text_join", ignoreInvalid=True)
    return md


BLOCK_TYPE_MAP: dict[str, type] = {
    'bullet_list':  n.BulletList,
    'list_item':    n.ListItem,
    'blockquote':   n.BlockQuote,
    'table':        n.Table,
    'thead':        n.TableHead,
    'tbody':        n.TableBody,
    'tr':           n.TableRow,
    'hr':           n.ThematicBreak,
}

INLINE_TYPE_MAP: dict[str, type] = {
    'em':           n.Emphasis,
    'strong':       n.Strong,
    's':            n.Strikethrough,
    'softbreak':    n.SoftBreak,
    'hardbreak':    n.LineBreak,
}


class _Cursor:
    """Forward-only search position inside one inline block's source region."""

    def __init__(self, pos: int, end: int):
        self.pos = pos
        self.end = end


class TreeBuilder:
    """Converts a markdown-it syntax tree over `source` into an n.Document."""

    def __init__(self, source: str, md: MarkdownIt | None = None):
        self.source = source
        self.md = md or _make_parser(DEFAULT_PRESET)
        self._line_starts = [0] + [i + 1 for i, ch in enumerate(source) if ch == '\n']

    def build(self, tokens: list) -> n.Document:
        root = SyntaxTreeNode(tokens)
        return n.Document(children=[self._block(child) for child in root.children])

    # --- locations ---

    def _location(self, index: int) -> n.SourceLocation:
        line_idx = bisect_right(self._line_starts, index) - 1
        line_start = self._line_starts[line_idx]
        return n.SourceLocation(line=line_idx + 1, column=byte_length(self.source[line_start:index]) + 1)

    def _line_index(self, line: int) -> int:
        """str index of the start of 0-based line, or len(source) past the end."""
        if line < len(self._line_starts):
            return self._line_starts[line]
        return len(self.source)

    def _block_range(self, line_map) -> n.SourceRange | None:
        if not line_map:
            return None
        start, end = line_map
        return n.SourceRange(self._location(self._line_index(start)), self._location(self._line_index(end)))

    def _cursor_for(self, line_map) -> _Cursor:
        """Cursor over the source lines of line_map; empty when there is no map."""
        if not line_map:
            return _Cursor(0, 0)
        return _Cursor(self._line_index(line_map[0]), self._line_index(line_map[1]))

    def _locate(self, needle: str, cursor: _Cursor) -> n.SourceRange | None:
        if not needle:
            return None
        i = self.source.find(needle, cursor.pos, cursor.end)
        if i < 0:
            return None
        cursor.pos = i + len(needle)
        return n.SourceRange(self._location(i), self._location(cursor.pos))

    # --- blocks ---

    def _inline_children(self, node: SyntaxTreeNode, fallback_map=None, cursor: _Cursor | None = None) -> list[n.Node]:
        """Convert the inline child of a leaf block (heading, paragraph, cell).

        Cells of one table row share the row's cursor so repeated cell text
        maps to successive occurrences.
        """
        result: list[n.Node] = []
        for child in node.children:
            if child.type != 'inline':
                result.append(self._block(child))
                continue
            inline_cursor = cursor or self._cursor_for(child.map or fallback_map)
            result.extend(self._inline(c, inline_cursor) for c in child.children)
        return result

    def _block(self, node: SyntaxTreeNode) -> n.Node:
        kind = node.type
        rng = self._block_range(node.map)

        if kind == 'heading':
            return n.Heading(level=int(node.tag[1:]), children=self._inline_children(node, node.map), range=rng)
        if kind == 'paragraph':
            children = self._inline_children(node, node.map)
            if node.hidden:     # tight list item
                return n.Container(kind=kind, children=children, range=rng)
            return n.Paragraph(children=children, range=rng)
        if kind == 'tr':
            row = self._cursor_for(node.map)
            cells = [
                n.TableCell(header=c.type == 'th', children=self._inline_children(c, cursor=row), range=self._block_range(c.map))
                for c in node.children
            ]
            return n.TableRow(children=cells, range=rng)
        if kind in ('th', 'td'):
            return n.TableCell(header=kind == 'th', children=self._inline_children(node), range=rng)
        if kind == 'fence':
            info = node.info.strip()
            return n.CodeBlock(code=node.content, language=info.split()[0] if info else "", range=rng)
        if kind == 'code_block':
            return n.CodeBlock(code=node.content, range=rng)
        if kind == 'html_block':
            return self._html_block(node, rng)
        if kind == 'ordered_list':
            start = node.attrs.get('start', 1)
            return n.OrderedList(start=int(start), children=[self._block(c) for c in node.children], range=rng)

        cls = BLOCK_TYPE_MAP.get(kind)
        children = [self._block(c) for c in node.children]
        if cls is None:
            return n.Container(kind=kind, children=children, range=rng)
        return cls(children=children, range=rng)

    def _html_block(self, node: SyntaxTreeNode, rng: n.SourceRange | None) -> n.Node:
        """Keep plain HTML blocks raw; re-read blocks holding comment markers as a paragraph.

        A start marker at the beginning of a line makes markdown-it swallow the
        whole line as an HTML block. The markers become InlineHTML and the text
        between them is parsed as inline markdown, so it keeps its source ranges
        and any other HTML in it stays subject to the renderer's filtering.
        """
        raw = node.content
        markers = list(iter_markers(raw))
        if not markers:
            return n.HTMLBlock(raw=raw, range=rng)

        cursor = self._cursor_for(node.map)
        children: list[n.Node] = []
        pos = 0
        for marker in markers:
            children.extend(self._inline_fragment(raw[pos:marker.start], cursor))
            marker_text = raw[marker.start:marker.end]
            children.append(n.InlineHTML(raw=marker_text, range=self._locate(marker_text, cursor)))
            pos = marker.end
        children.extend(self._inline_fragment(raw[pos:].rstrip('\n'), cursor))
        return n.Paragraph(children=children, range=rng)

    def _inline_fragment(self, text: str, cursor: _Cursor) -> list[n.Node]:
        if not text:
            return []
        root = SyntaxTreeNode(self.md.parseInline(text))
        return [self._inline(c, cursor) for inline in root.children for c in inline.children]

    # --- inlines ---

    def _inline(self, node: SyntaxTreeNode, cursor: _Cursor) -> n.Node:
        kind = node.type

        if kind == 'text':
            return n.Text(text=node.content, range=self._locate(node.content, cursor))
        if kind == 'text_special':
            # markup holds the source spelling ("\\*", "&amp;"), content the decoded text
            return n.Text(text=node.content, range=self._locate(node.markup or node.content, cursor))
        if kind == 'code_inline':
            return n.InlineCode(code=node.content, range=self._locate(node.content, cursor))
        if kind == 'html_inline':
            return n.InlineHTML(raw=node.content, range=self._locate(node.content, cursor))
        if kind == 'link':
            link = n.Link(destination=str(node.attrs.get('href', "")))
            link.children = [self._inline(c, cursor) for c in node.children]
            self._skip_link_tail(cursor, autolink=node.markup == "autolink")
            return link
        if kind == 'image':
            alt = [self._inline(c, _Cursor(0, 0)) for c in node.children]
            self._skip_image(cursor)
            return n.Image(source=str(node.attrs.get('src', "")), children=alt)

        children = [self._inline(c, cursor) for c in node.children]
        cls = INLINE_TYPE_MAP.get(kind)
        if cls is None:
            return n.Container(kind=kind, children=children)
        return cls(children=children)

    def _skip_link_tail(self, cursor: _Cursor, autolink: bool = False) -> None:
        """Move the cursor past "](destination)" or "][label]" so URLs are never matched as text."""
        src = self.source
        if autolink:
            if src.startswith('>', cursor.pos):
                cursor.pos += 1
            return
        close = src.find(']', cursor.pos, cursor.end)
        if close < 0:
            return
        pos = close + 1
        if src.startswith('(', pos):
            pos = self._balanced_end(pos)
        elif src.startswith('[', pos):
            label_end = src.find(']', pos, cursor.end)
            pos = label_end + 1 if label_end >= 0 else pos
        cursor.pos = pos

    def _skip_image(self, cursor: _Cursor) -> None:
        start = self.source.find('![', cursor.pos, cursor.end)
        if start < 0:
            return
        depth = 0
        for i in range(start + 2, cursor.end):
            ch = self.source[i]
            if ch == '[':
                depth += 1
            elif ch == ']':
                if depth == 0:
                    cursor.pos = i
                    self._skip_link_tail(cursor)
                    return
                depth -= 1

    def _balanced_end(self, pos: int) -> int:
        """Index just past the ")" closing the "(" at pos, bounded by the source."""
        depth = 0
        for i in range(pos, len(self.source)):
            ch = self.source[i]
            if ch == '(':
                depth += 1
            elif ch == ')':
                depth -= 1
                if depth == 0:
                    return i + 1
            elif ch == '\n' and self.source.startswith('\n', i + 1):
                break
        return pos + 1


def parse_markdown(text: str, parser_config: str = DEFAULT_PRESET) -> n.Document:
    """Parse markdown text into an n.Document whose ranges are relative to text."""
    md = _make_parser(parser_config)
    return TreeBuilder(text, md).build(md.parse(text))
