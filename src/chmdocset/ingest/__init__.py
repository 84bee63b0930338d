"""Indexing pipeline: charset detection, title extraction, directory walk."""

from chmdocset.ingest.document import HEADER_READ_LIMIT, SourceDocument
from chmdocset.ingest.encoding import decode_document, resolve_encoding, sniff_charset
from chmdocset.ingest.indexer import IndexReport, Indexer, SkippedDocument
from chmdocset.ingest.title import extract_title, normalize_title

__all__ = [
    "HEADER_READ_LIMIT",
    "IndexReport",
    "Indexer",
    "SkippedDocument",
    "SourceDocument",
    "decode_document",
    "extract_title",
    "normalize_title",
    "resolve_encoding",
    "sniff_charset",
]
