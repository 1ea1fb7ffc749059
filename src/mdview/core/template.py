"""Standalone HTML page assembly around a rendered markdown fragment"""

from markdown_it.common.utils import escapeHtml


TITLE_TOKEN  = "__MARKDOWN_VIEWER_TITLE__"
BODY_TOKEN   = "__MARKDOWN_VIEWER_BODY__"
STYLE_TOKEN  = "__MARKDOWN_VIEWER_STYLE_BLOCKS__"
SCRIPT_TOKEN = "__MARKDOWN_VIEWER_SCRIPT_BLOCKS__"

PAGE_TEMPLATE = f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{TITLE_TOKEN}</title>
    {STYLE_TOKEN}
</head>
<body>
    <div id="mv-document">
{BODY_TOKEN}
    </div>
    {SCRIPT_TOKEN}
</body>
</html>
"""

DEFAULT_STYLE = """\
body { font-family: -apple-system, "Segoe UI", Helvetica, Arial, sans-serif; line-height: 1.5; }
#mv-document { max-width: 880px; margin: 0 auto; padding: 32px; }
pre { padding: 16px; overflow: auto; background: #f6f8fa; border-radius: 6px; }
table { border-collapse: collapse; }
th, td { border: 1px solid #d0d7de; padding: 6px 13px; }
.front-matter-table td.fm-key { font-weight: 600; }
"""


def safe_script(script: str) -> str:
    """Escape closing tags so an inlined script cannot end its own <script> element."""
    return script.replace("</script>", "<\\/script>")


def style_blocks(styles: list[str]) -> str:
    return '\n'.join(f"<style>\n{css}\n</style>" for css in styles)


def script_blocks(scripts: list[str]) -> str:
    return '\n'.join(f"<script>\n{safe_script(js)}\n</script>" for js in scripts)


def render_page(
    body: str,
    title: str,
    styles: list[str] | None = None,
    scripts: list[str] | None = None,
    template: str = PAGE_TEMPLATE,
    ) -> str:
    """Fill template's title, body, style and script tokens."""
    return (
        template
        .replace(TITLE_TOKEN, escapeHtml(title))
        .replace(STYLE_TOKEN, style_blocks([DEFAULT_STYLE] if styles is None else styles))
        .replace(SCRIPT_TOKEN, script_blocks(scripts or []))
        .replace(BODY_TOKEN, body)
    )
