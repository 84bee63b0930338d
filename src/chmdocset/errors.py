"""Exception hierarchy shared by the docset build stages.

Library code raises these; only the CLI turns them into exit codes.
"""

from __future__ import annotations


class ChmDocsetError(RuntimeError):
    """Base class for fatal docset build errors."""


class ExtractorNotFoundError(ChmDocsetError):
    """The external CHM extraction program is not on PATH."""

    def __init__(self, program: str) -> None:
        super().__init__(f"{program} is required but was not found in PATH")
        self.program = program


class ExtractionError(ChmDocsetError):
    """The external CHM extraction program failed."""

    def __init__(self, program: str, returncode: int) -> None:
        super().__init__(f"{program} exited with status {returncode}")
        self.program = program
        self.returncode = returncode


class BundleWriteError(ChmDocsetError):
    """The bundle directory or descriptor could not be written."""


class IndexStoreError(ChmDocsetError):
    """The search index database could not be created or populated."""
