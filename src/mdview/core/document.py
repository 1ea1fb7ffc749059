"""Current-document state: the open file, its source text and rendered result"""

import logging
import os
import threading
from pathlib import Path

from mdview.comments.models import MarkdownComment
from mdview.core.models import LoadedDocument, OutlineItem
from mdview.core.parse import DEFAULT_PRESET
from mdview.core.pipeline import error_document, load_document
from mdview.core.render import IMAGE_SCHEME
from mdview.core.utils.fs import read_source
from mdview.store.files import RecentFilesStore


logger = logging.getLogger(__name__)


class DocumentState:
    """Holds the loaded file and its rendered document.

    `lock` serializes loads with comment edits so a reload never observes a
    half-applied change.
    """

    def __init__(
        self,
        recent_files: RecentFilesStore | None = None,
        parser_config: str = DEFAULT_PRESET,
        image_scheme: str = IMAGE_SCHEME,
        ):
        self.recent_files = recent_files
        self.parser_config = parser_config
        self.image_scheme = image_scheme
        self.current_path: Path | None = None
        self.source: str = ""
        self.document = LoadedDocument(html="")
        self.lock = threading.RLock()

    def load_file(self, path: str | os.PathLike) -> LoadedDocument:
        """Read, render and remember path; read failures yield an error document."""
        path = Path(path)
        with self.lock:
            self.current_path = path
            try:
                source = read_source(path)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Failed to read %s: %s", path, e)
                self.source = ""
                self.document = error_document(str(e))
                return self.document

            self.document = load_document(
                source,
                title=path.name,
                base_dir=path.parent,
                parser_config=self.parser_config,
                image_scheme=self.image_scheme,
            )
            self.source = "" if self.document.error else source
            if self.recent_files is not None:
                self.recent_files.add(path)
            logger.info("Loaded %s (%d comments)", path, len(self.document.comments))
            return self.document

    def reload(self) -> LoadedDocument | None:
        """Re-read the current file; None when nothing is loaded."""
        with self.lock:
            if self.current_path is None:
                return None
            return self.load_file(self.current_path)

    @property
    def title(self) -> str:
        return self.document.title

    @property
    def html(self) -> str:
        return self.document.html

    @property
    def outline(self) -> list[OutlineItem]:
        return self.document.outline

    @property
    def comments(self) -> list[MarkdownComment]:
        return self.document.comments
