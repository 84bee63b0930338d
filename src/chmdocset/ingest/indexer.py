"""Indexer: walk the content root and feed page titles to the index store.

For every regular file whose extension matches (case-insensitively) one of
``extensions``, the header bytes are decoded and the page title extracted.
Titled pages become ``(title, entry_type, relative_path)`` rows; untitled
pages are silently left out.

A page that cannot be read or decoded is recorded as a ``SkippedDocument``
and the walk continues. Only index store failures abort the run.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from chmdocset.db.models import IndexEntry
from chmdocset.db.repository import IndexStore
from chmdocset.ingest.document import HEADER_READ_LIMIT, SourceDocument

DEFAULT_ENTRY_TYPE = "Guide"
DEFAULT_EXTENSIONS: tuple[str, ...] = (".htm", ".html")


@dataclass
class SkippedDocument:
    """A page left out of the index because it could not be processed."""

    path: str
    reason: str


@dataclass
class IndexReport:
    """Outcome of one indexing walk."""

    scanned: int = 0
    indexed: int = 0
    untitled: int = 0
    skipped: list[SkippedDocument] = field(default_factory=list)


class Indexer:
    """Walk a content root and index the title of every HTML page.

    Args:
        content_root: Directory holding the extracted pages.
        entry_type: Category stored in the ``type`` column.
        extensions: File suffixes to scan (compared case-insensitively).
        header_limit: Maximum bytes read from each page.
    """

    def __init__(
        self,
        content_root: Path | str,
        entry_type: str = DEFAULT_ENTRY_TYPE,
        extensions: tuple[str, ...] = DEFAULT_EXTENSIONS,
        header_limit: int = HEADER_READ_LIMIT,
    ) -> None:
        self.content_root = Path(content_root)
        self.entry_type = entry_type
        self.extensions = frozenset(ext.lower() for ext in extensions)
        self.header_limit = header_limit

    def iter_documents(
        self, onerror: Callable[[OSError], None] | None = None
    ) -> Iterator[Path]:
        """Yield candidate page paths under the content root in sorted order.

        Directories that cannot be listed are reported to *onerror* and skipped.
        """
        for dirpath, dirnames, filenames in os.walk(self.content_root, onerror=onerror):
            dirnames.sort()
            for name in sorted(filenames):
                path = Path(dirpath) / name
                if path.suffix.lower() in self.extensions and path.is_file():
                    yield path

    def relative_path(self, path: Path) -> str:
        """Return *path* relative to the content root with forward slashes."""
        return path.relative_to(self.content_root).as_posix()

    def entry_for(self, document: SourceDocument) -> IndexEntry | None:
        if not document.title:
            return None
        return IndexEntry(
            name=document.title,
            type=self.entry_type,
            path=self.relative_path(document.path),
        )

    def run(
        self,
        store: IndexStore,
        on_progress: Callable[[Path], None] | None = None,
    ) -> IndexReport:
        """Index every page into *store*, which must have an open batch.

        Args:
            store: Index store with ``begin_batch()`` already called.
            on_progress: Optional callback invoked with each scanned path.

        Returns:
            An IndexReport; per-page failures are listed in ``skipped``.

        Raises:
            IndexStoreError: If an insert fails. The caller rolls back.
        """
        report = IndexReport()

        def _unlistable(exc: OSError) -> None:
            report.skipped.append(
                SkippedDocument(path=str(exc.filename or self.content_root), reason=str(exc))
            )

        for path in self.iter_documents(onerror=_unlistable):
            report.scanned += 1
            if on_progress is not None:
                on_progress(path)
            try:
                document = SourceDocument.load(path, self.header_limit)
            except (OSError, UnicodeError, ValueError) as exc:
                report.skipped.append(
                    SkippedDocument(path=self.relative_path(path), reason=str(exc))
                )
                continue

            entry = self.entry_for(document)
            if entry is None:
                report.untitled += 1
                continue
            store.insert(entry)
            report.indexed += 1
        return report
