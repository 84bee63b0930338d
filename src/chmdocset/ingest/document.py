"""Transient per-file document state used while indexing."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from chmdocset.ingest.encoding import decode_document, sniff_charset
from chmdocset.ingest.title import extract_title

# The <head> of a help page sits well inside the first 64 KB.
HEADER_READ_LIMIT = 64 * 1024


def read_header(path: Path, limit: int = HEADER_READ_LIMIT) -> tuple[bytes, bool]:
    """Read at most *limit* bytes of *path*.

    Returns:
        (raw_bytes, truncated), where *truncated* is True when the file is
        longer than *limit*.
    """
    with path.open("rb") as fh:
        raw = fh.read(limit + 1)
    if len(raw) > limit:
        return raw[:limit], True
    return raw, False


@dataclass
class SourceDocument:
    """One HTML page, alive only while the indexer processes it.

    Attributes:
        path: Absolute (or content-root-joined) file path.
        raw: Leading bytes of the file, capped at the header limit.
        encoding: Charset declared in the page, if any.
        text: Decoded header text.
        title: Normalised page title; None excludes the page from the index.
    """

    path: Path
    raw: bytes
    encoding: str | None
    text: str
    title: str | None = None

    @classmethod
    def load(cls, path: Path, limit: int = HEADER_READ_LIMIT) -> SourceDocument:
        """Read, decode and title *path*. Raises OSError if it cannot be read."""
        raw, truncated = read_header(path, limit)
        text = decode_document(raw, final=not truncated)
        return cls(
            path=path,
            raw=raw,
            encoding=sniff_charset(raw),
            text=text,
            title=extract_title(text),
        )
