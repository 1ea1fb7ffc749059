"""Outline post-processing for table-of-contents consumers"""

from mdview.core.models import OutlineItem


def normalize_outline(items: list[OutlineItem]) -> list[OutlineItem]:
    """Treat a lone H1 as the document title: drop it and lift every other level by one (floor 1).

    Outlines with zero or several H1 headings are returned unchanged.
    """
    if sum(1 for item in items if item.level == 1) != 1:
        return list(items)
    return [
        item.model_copy(update={"level": max(1, item.level - 1)})
        for item in items
        if item.level != 1
    ]
