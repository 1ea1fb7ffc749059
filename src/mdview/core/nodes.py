"""Closed set of parsed Markdown node kinds carrying source ranges

The renderer dispatches on these classes. Anything not listed here is parsed
into a Container so its children still render.
"""

from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass(frozen=True)
class SourceLocation:
    """1-based line and 1-based UTF-8 byte column."""
    line: int
    column: int


@dataclass(frozen=True)
class SourceRange:
    start: SourceLocation
    end:   SourceLocation      # exclusive


@dataclass
class Node:
    children: list["Node"] = field(default_factory=list)
    range:    Optional[SourceRange] = None


@dataclass
class Document(Node):
    pass


@dataclass
class Heading(Node):
    level: int = 1


@dataclass
class Paragraph(Node):
    pass


@dataclass
class Text(Node):
    text: str = ""


@dataclass
class Emphasis(Node):
    pass


@dataclass
class Strong(Node):
    pass


@dataclass
class Strikethrough(Node):
    pass


@dataclass
class InlineCode(Node):
    code: str = ""


@dataclass
class CodeBlock(Node):
    code:     str = ""
    language: str = ""


@dataclass
class Link(Node):
    destination: str = ""


@dataclass
class Image(Node):
    source: str = ""           # alt text lives in children


@dataclass
class BulletList(Node):
    pass


@dataclass
class OrderedList(Node):
    start: int = 1


@dataclass
class ListItem(Node):
    pass


@dataclass
class BlockQuote(Node):
    pass


@dataclass
class Table(Node):
    pass


@dataclass
class TableHead(Node):
    pass


@dataclass
class TableBody(Node):
    pass


@dataclass
class TableRow(Node):
    pass


@dataclass
class TableCell(Node):
    header: bool = False


@dataclass
class ThematicBreak(Node):
    pass


@dataclass
class SoftBreak(Node):
    pass


@dataclass
class LineBreak(Node):
    pass


@dataclass
class HTMLBlock(Node):
    raw: str = ""


@dataclass
class InlineHTML(Node):
    raw: str = ""


@dataclass
class Container(Node):
    """Any node kind without a dedicated class; only its children are rendered."""
    kind: str = ""


NodeKind = Union[
    Document, Heading, Paragraph, Text, Emphasis, Strong, Strikethrough,
    InlineCode, CodeBlock, Link, Image, BulletList, OrderedList, ListItem,
    BlockQuote, Table, TableHead, TableBody, TableRow, TableCell,
    ThematicBreak, SoftBreak, LineBreak, HTMLBlock, InlineHTML, Container,
]


def plain_text(node: Node) -> str:
    """Concatenate the visible text of node and its descendants."""
    if isinstance(node, Text):
        return node.text
    if isinstance(node, InlineCode):
        return node.code
    if isinstance(node, (SoftBreak, LineBreak)):
        return " "
    return "".join(plain_text(c) for c in node.children)
