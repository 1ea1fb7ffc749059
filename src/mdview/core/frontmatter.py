"""Front matter extraction (--- delimited key: value lines) and its HTML block"""

from markdown_it.common.utils import escapeHtml

from mdview.core.models import FrontMatterInfo
from mdview.core.utils.source_map import byte_length


DELIMITER = "---"


def parse_front_matter(markdown: str) -> FrontMatterInfo:
    """Split leading front matter from markdown.

    Lines between the delimiters that contain a colon become trimmed
    (key, value) pairs, split at the first colon; other lines are skipped.
    Without an opening delimiter the whole text is content. Without a closing
    delimiter the items are still collected, but the whole text stays content
    and both offsets are 0.
    """
    lines = markdown.split('\n')
    if not lines or lines[0] != DELIMITER:
        return FrontMatterInfo(items=[], content=markdown, content_start_offset=0, front_matter_end_offset=0)

    end_idx = None
    items: list[tuple[str, str]] = []
    for i in range(1, len(lines)):
        line = lines[i]
        if line == DELIMITER:
            end_idx = i + 1
            break
        key, sep, value = line.partition(':')
        if sep and key.strip():
            items.append((key.strip(), value.strip()))
    if end_idx is None:
        return FrontMatterInfo(items=items, content=markdown, content_start_offset=0, front_matter_end_offset=0)

    # line lengths vary, so sum each skipped line plus its newline
    offset = 0
    for line in lines[:end_idx]:
        offset += byte_length(line) + 1
    offset = min(offset, byte_length(markdown))

    return FrontMatterInfo(
        items=items,
        content='\n'.join(lines[end_idx:]),
        content_start_offset=offset,
        front_matter_end_offset=offset,
    )


def _display_key(key: str) -> str:
    return ' '.join(word.capitalize() for word in key.replace('_', ' ').split(' '))


def render_front_matter(items: list[tuple[str, str]]) -> str:
    """Return the front matter key/value table, or "" when there are no items."""
    if not items:
        return ""
    rows = [
        f'<tr><td class="fm-key">{escapeHtml(_display_key(key))}</td>'
        f'<td class="fm-value">{escapeHtml(value)}</td></tr>\n'
        for key, value in items
    ]
    return (
        '<div class="front-matter" data-mv-frontmatter="true">\n'
        '<table class="front-matter-table">\n'
        + ''.join(rows)
        + '</table></div>\n'
    )
