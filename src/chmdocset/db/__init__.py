"""Docset search index database layer."""

from chmdocset.db.connection import Database
from chmdocset.db.models import IndexEntry
from chmdocset.db.repository import IndexStore
from chmdocset.db.schema import initialize

__all__ = [
    "Database",
    "IndexEntry",
    "IndexStore",
    "initialize",
]
