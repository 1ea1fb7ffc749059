"""File-level comment editing: rewrite markers in the loaded file and reload it"""

import logging
from datetime import datetime
from typing import Callable

from mdview.comments import markers
from mdview.comments.codec import utc_now
from mdview.core.document import DocumentState
from mdview.core.utils.fs import atomic_write_text, read_source


logger = logging.getLogger(__name__)


class CommentMarkerEditor:
    """Applies comment edits to the file held by a DocumentState.

    Each edit reads the file fresh, writes the result atomically and reloads
    the state, all under the state's lock. Edits return False when no file is
    loaded or the target comment does not exist; invalid byte ranges raise
    ValueError and leave the file untouched.
    """

    def __init__(self, state: DocumentState, clock: Callable[[], datetime] = utc_now):
        self.state = state
        self.clock = clock

    def add_comment(self, start_offset: int, end_offset: int, body: str) -> bool:
        with self.state.lock:
            path = self.state.current_path
            if path is None:
                return False
            text, comment = markers.add_comment(read_source(path), start_offset, end_offset, body, self.clock())
            atomic_write_text(path, text)
            logger.info("Added comment %s to %s", comment.id, path)
            self.state.reload()
            return True

    def update_comment(self, comment_id: str, body: str) -> bool:
        with self.state.lock:
            path = self.state.current_path
            if path is None:
                return False
            text = markers.update_comment_payload(read_source(path), comment_id, body, self.clock())
            if text is None:
                logger.info("Comment %s not found in %s", comment_id, path)
                return False
            atomic_write_text(path, text)
            logger.info("Updated comment %s in %s", comment_id, path)
            self.state.reload()
            return True

    def delete_comment(self, comment_id: str) -> bool:
        with self.state.lock:
            path = self.state.current_path
            if path is None:
                return False
            text = markers.remove_comment_markers(read_source(path), comment_id)
            if text is None:
                logger.info("Comment %s not found in %s", comment_id, path)
                return False
            atomic_write_text(path, text)
            logger.info("Deleted comment %s from %s", comment_id, path)
            self.state.reload()
            return True
