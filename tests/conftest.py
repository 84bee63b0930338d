"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from chmdocset.db.repository import IndexStore
from chmdocset.errors import ExtractionError, ExtractorNotFoundError


def html_page(title: str | None, *, charset: str | None = None, encoding: str = "utf-8") -> bytes:
    """Return a minimal HTML page encoded with *encoding*."""
    meta = f'<meta charset="{charset}">' if charset else ""
    head = f"<title>{title}</title>" if title is not None else ""
    return f"<html><head>{meta}{head}</head><body><p>body</p></body></html>".encode(encoding)


class FakeExtractor:
    """Stands in for extract_chmLib: writes fixed pages into the destination."""

    program = "extract_chmLib"

    def __init__(
        self,
        pages: dict[str, bytes] | None = None,
        available: bool = True,
        returncode: int = 0,
    ) -> None:
        self.pages = pages or {}
        self.available = available
        self.returncode = returncode
        self.calls: list[tuple[Path, Path]] = []

    def ensure_available(self) -> None:
        if not self.available:
            raise ExtractorNotFoundError(self.program)

    def extract(self, source: Path, destination: Path) -> None:
        self.calls.append((source, destination))
        if self.returncode:
            raise ExtractionError(self.program, self.returncode)
        for rel, data in self.pages.items():
            target = destination / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)


@pytest.fixture
def make_page():
    """Factory: make_page(title, charset=None, encoding='utf-8') -> bytes."""
    return html_page


@pytest.fixture
def make_extractor():
    """Factory for FakeExtractor instances."""
    return FakeExtractor


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    root = tmp_path / "Documents"
    root.mkdir()
    return root


@pytest.fixture
def store(tmp_path: Path) -> IndexStore:
    """Initialized IndexStore in tmp_path (batch not yet opened)."""
    s = IndexStore(tmp_path / "docSet.dsidx")
    s.initialize()
    yield s
    s.rollback()
