"""CLI command implementations"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdview.comments.editor import CommentMarkerEditor
from mdview.config import Settings, load_config
from mdview.core.document import DocumentState
from mdview.core.template import render_page
from mdview.core.utils.fs import atomic_write_text
from mdview.store.backend import SQLBackend
from mdview.store.database import init_db, make_engine
from mdview.store.files import OpenFilesStore, RecentFilesStore


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _backend(settings: Settings) -> SQLBackend:
    engine = make_engine(settings.db_url)
    init_db(engine)
    return SQLBackend(engine)


def _recent_files(settings: Settings) -> RecentFilesStore:
    return RecentFilesStore(_backend(settings), settings.max_recent_files)


def _open(path: str, settings: Settings) -> DocumentState:
    """Load path into a fresh DocumentState, exiting 1 if it cannot be rendered."""
    state = DocumentState(
        recent_files=_recent_files(settings),
        parser_config=settings.parser_config,
        image_scheme=settings.image_scheme,
    )
    document = state.load_file(Path(path))
    if document.error:
        _fail(f"Could not load {path}", document.error)
    return state


def render_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file to render")],
    out: Annotated[Optional[str], typer.Option("--out", "-o", help="Write HTML here instead of stdout")] = None,
    standalone: Annotated[bool, typer.Option("--standalone", help="Wrap the fragment in a full HTML page")] = False,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Render a markdown file to an HTML fragment (or a full page)."""
    settings = _settings(overrides={"parser_config": parser})
    state = _open(path, settings)
    html = render_page(state.html, state.title) if standalone or settings.standalone else state.html

    if out is None:
        typer.echo(html, nl=False)
        return
    try:
        atomic_write_text(Path(out), html)
    except OSError as e:
        _fail(f"Could not write {out}", e)
    typer.echo(f"  {path} -> {out}")


def outline_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file")],
    as_json: Annotated[bool, typer.Option("--json", help="Print the outline as JSON")] = False,
    ):
    """Print the heading outline (title, level, anchor)."""
    state = _open(path, _settings())
    if as_json:
        typer.echo(json.dumps([item.model_dump(by_alias=True) for item in state.outline], indent=2))
        return
    for item in state.outline:
        typer.echo(f"{'  ' * (item.level - 1)}{item.title}  #{item.anchor_id}")


def comments_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file")],
    as_json: Annotated[bool, typer.Option("--json", help="Print comments as JSON")] = False,
    ):
    """List the comments anchored in a file."""
    state = _open(path, _settings())
    if as_json:
        typer.echo(json.dumps([c.model_dump(mode="json") for c in state.comments], indent=2))
        return
    if not state.comments:
        typer.echo("No comments.")
        return
    for comment in state.comments:
        typer.echo(f"{comment.id}  {comment.updated.isoformat()}  {comment.body}")


def comment_add_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file")],
    start: Annotated[int, typer.Argument(help="UTF-8 byte offset where the comment starts")],
    end: Annotated[int, typer.Argument(help="UTF-8 byte offset where the comment ends (exclusive)")],
    body: Annotated[str, typer.Argument(help="Comment text")],
    ):
    """Anchor a new comment to a byte range of the file."""
    state = _open(path, _settings())
    editor = CommentMarkerEditor(state)
    try:
        added = editor.add_comment(start, end, body)
    except (ValueError, OSError) as e:
        _fail("Could not add comment", e)
    if not added:
        _fail(f"Could not add comment to {path}")
    comment = max(state.comments, key=lambda c: c.numeric_id)
    typer.echo(f"Added {comment.id}")


def comment_update_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file")],
    comment_id: Annotated[str, typer.Argument(help="Comment id, e.g. COM-1")],
    body: Annotated[str, typer.Argument(help="New comment text")],
    ):
    """Replace the body of an existing comment."""
    state = _open(path, _settings())
    try:
        updated = CommentMarkerEditor(state).update_comment(comment_id, body)
    except OSError as e:
        _fail("Could not update comment", e)
    if not updated:
        _fail(f"No comment {comment_id} in {path}")
    typer.echo(f"Updated {comment_id}")


def comment_delete_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file")],
    comment_id: Annotated[str, typer.Argument(help="Comment id, e.g. COM-1")],
    ):
    """Remove a comment and its markers from the file."""
    state = _open(path, _settings())
    try:
        deleted = CommentMarkerEditor(state).delete_comment(comment_id)
    except OSError as e:
        _fail("Could not delete comment", e)
    if not deleted:
        _fail(f"No comment {comment_id} in {path}")
    typer.echo(f"Deleted {comment_id}")


def recent_cmd(
    clear: Annotated[bool, typer.Option("--clear", help="Forget all recent files")] = False,
    ):
    """List recently opened files, most recent first."""
    recent = _recent_files(_settings())
    if clear:
        recent.clear()
        typer.echo("Recent files cleared.")
        return
    if not recent.recent_files:
        typer.echo("No recent files.")
        return
    for path in recent.recent_files:
        typer.echo(str(path))


def open_cmd(
    paths: Annotated[Optional[list[str]], typer.Argument(help="Files to mark as open, in display order")] = None,
    clear: Annotated[bool, typer.Option("--clear", help="Close all open files")] = False,
    ):
    """Show or replace the list of open files; missing files are dropped."""
    store = OpenFilesStore(_backend(_settings()))
    if clear:
        store.set([])
        typer.echo("Open files cleared.")
        return
    if paths:
        store.set(paths)
    if not store.open_files:
        typer.echo("No open files.")
        return
    for path in store.open_files:
        typer.echo(str(path))
