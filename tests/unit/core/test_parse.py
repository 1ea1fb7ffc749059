"""Unit tests for core/parse.py"""

import pytest

from mdview.comments.markers import end_marker, start_marker
from mdview.core import nodes as n
from mdview.core.parse import parse_markdown


def _loc(line, column):
    return n.SourceLocation(line, column)


def _texts(node):
    """All Text leaves under node in document order."""
    if isinstance(node, n.Text):
        return [node]
    return [t for child in node.children for t in _texts(child)]


def test_parse_heading_and_paragraph():
    """Block kinds map to nodes; text leaves carry 1-based line/byte-column ranges."""
    doc = parse_markdown("# Hello\n\nWorld")
    heading, para = doc.children
    assert isinstance(heading, n.Heading) and heading.level == 1
    assert isinstance(para, n.Paragraph)
    assert heading.children[0].range == n.SourceRange(_loc(1, 3), _loc(1, 8))
    assert para.children[0].range == n.SourceRange(_loc(3, 1), _loc(3, 6))


def test_parse_repeated_text_maps_to_successive_occurrences():
    """Identical text fragments in one block get distinct, increasing ranges."""
    doc = parse_markdown("a *a* a")
    first, emphasized, last = _texts(doc)
    assert first.range == n.SourceRange(_loc(1, 1), _loc(1, 3))
    assert emphasized.range == n.SourceRange(_loc(1, 4), _loc(1, 5))
    assert last.range == n.SourceRange(_loc(1, 6), _loc(1, 8))


def test_parse_columns_are_byte_columns():
    """Columns count UTF-8 bytes, so text after a multi-byte character shifts."""
    doc = parse_markdown("é *x*")
    emphasized = _texts(doc)[1]
    assert emphasized.text == "x"
    assert emphasized.range.start == _loc(1, 5)


def test_parse_link_destination_is_not_matched_as_text():
    """Text after a link is located after the destination, not inside it."""
    doc = parse_markdown("[docs](http://docs.example/docs) docs")
    link = doc.children[0].children[0]
    assert isinstance(link, n.Link)
    assert link.destination == "http://docs.example/docs"
    assert link.children[0].range.start == _loc(1, 2)
    tail = doc.children[0].children[1]
    assert tail.text == " docs"
    assert tail.range.start == _loc(1, 33)


def test_parse_escape_keeps_source_spelling_in_range():
    """Backslash escapes decode in the text but their range covers the escape sequence."""
    doc = parse_markdown("\\*not em\\*")
    texts = _texts(doc)
    assert "".join(t.text for t in texts) == "*not em*"
    assert texts[0].range == n.SourceRange(_loc(1, 1), _loc(1, 3))


def test_parse_softbreak_spans_lines():
    """A soft line break splits text across source lines."""
    para = parse_markdown("one\ntwo").children[0]
    one, brk, two = para.children
    assert isinstance(brk, n.SoftBreak)
    assert one.range.start == _loc(1, 1)
    assert two.range.start == _loc(2, 1)


def test_parse_tight_list_items_unwrap_paragraphs():
    """Tight list items hold a Container instead of a Paragraph."""
    items = parse_markdown("- one\n- two\n").children[0]
    assert isinstance(items, n.BulletList)
    assert all(isinstance(item.children[0], n.Container) for item in items.children)


def test_parse_loose_list_items_keep_paragraphs():
    """Loose list items keep their Paragraph nodes."""
    items = parse_markdown("- one\n\n- two\n").children[0]
    assert all(isinstance(item.children[0], n.Paragraph) for item in items.children)


def test_parse_ordered_list_start():
    """The first item number becomes the list start."""
    lst = parse_markdown("3. c\n4. d\n").children[0]
    assert isinstance(lst, n.OrderedList)
    assert lst.start == 3


def test_parse_fence_language_and_code():
    """Only the first word of the info string is the language."""
    block = parse_markdown("```python extra\nprint(1)\n```\n").children[0]
    assert isinstance(block, n.CodeBlock)
    assert block.language == "python"
    assert block.code == "print(1)\n"


def test_parse_indented_code_has_no_language():
    """Indented code blocks become CodeBlock with an empty language."""
    block = parse_markdown("    x = 1\n").children[0]
    assert isinstance(block, n.CodeBlock)
    assert block.language == ""


def test_parse_table_cells():
    """Tables produce head/body sections and header/data cells."""
    table = parse_markdown("| a | b |\n|---|---|\n| 1 | 2 |\n").children[0]
    assert isinstance(table, n.Table)
    head, body = table.children
    assert isinstance(head, n.TableHead) and isinstance(body, n.TableBody)
    header_cell = head.children[0].children[0]
    data_cell = body.children[0].children[0]
    assert header_cell.header is True and n.plain_text(header_cell) == "a"
    assert data_cell.header is False and n.plain_text(data_cell) == "1"


def test_parse_table_repeated_cell_text_gets_distinct_ranges():
    """Cells of one row share a search position, so identical cell text maps to each cell's own column."""
    table = parse_markdown("| a | a |\n|---|---|\n| x | x |\n").children[0]
    head, body = table.children
    header_texts = _texts(head)
    body_texts = _texts(body)
    assert [t.range.start for t in header_texts] == [_loc(1, 3), _loc(1, 7)]
    assert [t.range.start for t in body_texts] == [_loc(3, 3), _loc(3, 7)]


def test_parse_image_alt_text():
    """Image alt text is kept as children without source ranges."""
    image = parse_markdown("![alt text](pic.png)").children[0].children[0]
    assert isinstance(image, n.Image)
    assert image.source == "pic.png"
    assert n.plain_text(image) == "alt text"
    assert all(t.range is None for t in _texts(image))


def test_parse_raw_html():
    """Block and inline HTML are kept raw."""
    doc = parse_markdown("<div>x</div>\n\ntext <b>bold</b>\n")
    assert isinstance(doc.children[0], n.HTMLBlock)
    assert doc.children[0].raw == "<div>x</div>\n"
    inline = [c for c in doc.children[1].children if isinstance(c, n.InlineHTML)]
    assert [c.raw for c in inline] == ["<b>", "</b>"]


def test_parse_line_starting_with_marker_is_a_paragraph():
    """A comment marker at the start of a line does not turn the line into a raw HTML block."""
    start = start_marker('{"id":"COM-1"}')
    end = end_marker("COM-1")
    para = parse_markdown(f"{start}Hello{end} world <b>x</b>\n").children[0]
    assert isinstance(para, n.Paragraph)
    raw = [c.raw for c in para.children if isinstance(c, n.InlineHTML)]
    assert raw == [start, end, "<b>", "</b>"]
    hello, world = _texts(para)[:2]
    assert hello.text == "Hello"
    assert hello.range == n.SourceRange(_loc(1, len(start) + 1), _loc(1, len(start) + 6))
    assert world.text == " world "
    assert world.range.start == _loc(1, len(start) + 6 + len(end))


def test_parse_plain_html_comment_block_stays_raw():
    """An HTML block without markers is kept as a raw block."""
    block = parse_markdown("<!-- note -->\n").children[0]
    assert isinstance(block, n.HTMLBlock)
    assert block.raw == "<!-- note -->\n"


def test_parse_strikethrough_and_break():
    """GFM strikethrough and hard line breaks are recognized."""
    para = parse_markdown("~~gone~~  \nnext").children[0]
    assert isinstance(para.children[0], n.Strikethrough)
    assert any(isinstance(c, n.LineBreak) for c in para.children)


def test_parse_unknown_preset():
    """An unknown parser preset name is an error."""
    with pytest.raises(KeyError):
        parse_markdown("text", parser_config="no-such-preset")
