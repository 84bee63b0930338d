"""Domain models for the docset search index."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class IndexEntry:
    name: str
    type: str
    path: str  # relative to the content root, forward slashes
