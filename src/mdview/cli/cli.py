"""CLI entrypoint: Typer app definition and command registration"""

import logging
from typing import Annotated

import typer

from mdview.cli.commands import (
    comment_add_cmd,
    comment_delete_cmd,
    comment_update_cmd,
    comments_cmd,
    open_cmd,
    outline_cmd,
    recent_cmd,
    render_cmd,
)


app = typer.Typer(name="mdview", no_args_is_help=True, help="Markdown viewer with source-anchored comments")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log progress to stderr")] = False,
    ):
    """Render markdown to HTML and manage inline comments stored in the file."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


app.command(name="render")(render_cmd)
app.command(name="outline")(outline_cmd)
app.command(name="comments")(comments_cmd)
app.command(name="comment-add")(comment_add_cmd)
app.command(name="comment-update")(comment_update_cmd)
app.command(name="comment-delete")(comment_delete_cmd)
app.command(name="recent")(recent_cmd)
app.command(name="open")(open_cmd)
