"""Docset index schema DDL and initialization."""

from __future__ import annotations

import sqlite3

# Table and index names are fixed by the docset format read by Dash/Zeal.
_CREATE_SEARCH_INDEX = """
CREATE TABLE searchIndex(
    id      INTEGER PRIMARY KEY,
    name    TEXT,
    type    TEXT,
    path    TEXT
)
"""

_CREATE_ANCHOR_INDEX = """
CREATE UNIQUE INDEX anchor ON searchIndex (name, type, path)
"""


def initialize(conn: sqlite3.Connection) -> None:
    """Create the searchIndex table and its uniqueness index on a fresh database."""
    conn.execute(_CREATE_SEARCH_INDEX)
    conn.execute(_CREATE_ANCHOR_INDEX)
    conn.commit()
