"""Heading anchor slug generation with per-document collision handling"""


FALLBACK_SLUG = "section"


def slugify(text: str) -> str:
    """Convert text to a lowercase ASCII slug; any other character becomes a single hyphen."""
    result: list[str] = []
    needs_hyphen = False
    for ch in text.strip().lower():
        if ('a' <= ch <= 'z') or ('0' <= ch <= '9'):
            if needs_hyphen and result:
                result.append('-')
            needs_hyphen = False
            result.append(ch)
        else:
            needs_hyphen = True
    return ''.join(result)


class HeadingSlugger:
    """Stateful anchor id generator; use one instance per rendered document.

    Counts are kept per slugified key, so "Intro" and "INTRO" collide.
    The first occurrence of a key is returned as-is, the n-th repeat gets "-n".
    """

    def __init__(self):
        self._counts: dict[str, int] = {}

    def slug(self, title: str) -> str:
        key = slugify(title) or FALLBACK_SLUG
        count = self._counts.get(key, 0)
        self._counts[key] = count + 1
        if count == 0:
            return key
        return f"{key}-{count}"
