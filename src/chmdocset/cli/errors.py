"""chmdocset error messages, one actionable line each.

Every message states what went wrong and what to do about it.

Usage:
    from chmdocset.cli.errors import err_extractor_missing
    err_console.print(err_extractor_missing("extract_chmLib"))
    raise typer.Exit(1)
"""

from __future__ import annotations

from rich.markup import escape

from chmdocset.extract import WINDOWS_PROGRAM

_INSTALL_HINTS = {
    "extract_chmLib": "install chmlib (apt install libchm-bin, brew install chmlib)",
    WINDOWS_PROGRAM: "hh.exe ships with Windows HTML Help; check that it is on PATH",
}


def err_source_not_found(source: str) -> str:
    """Source container does not exist or is not a file."""
    return f"[red]Error:[/] Source file not found: '{escape(source)}'. Pass the path of a .chm file."


def err_extractor_missing(program: str) -> str:
    """Extraction program not on PATH.

    Example:
        Error: extract_chmLib is required but was not found in PATH; install chmlib (...)
    """
    hint = _INSTALL_HINTS.get(program, f"install {program} or set extractor.program in chmdocset.yaml")
    return (
        f"[red]Error:[/] {escape(program)} is required but was not found in PATH; "
        f"{escape(hint)}."
    )


def err_extraction_failed(program: str, returncode: int) -> str:
    """Extraction program exited with a nonzero status."""
    return (
        f"[red]Error:[/] Extracting the source failed ({escape(program)} exited with "
        f"status {returncode}); check its output above."
    )


def err_bundle_write(detail: str) -> str:
    """Bundle directory or Info.plist could not be written."""
    return f"[red]Error:[/] Cannot write docset bundle: {escape(detail)}. Choose a writable --out location."


def err_index_failed(detail: str) -> str:
    """Search index could not be created or committed."""
    return (
        f"[red]Error:[/] Cannot create search index: {escape(detail)}. "
        "No index was written; re-run after fixing the cause."
    )


def err_config(detail: str) -> str:
    """Config file is malformed or holds invalid values."""
    return f"[red]Error:[/] Invalid configuration: {escape(detail)}"


def warn_skipped_document(path: str, reason: str) -> str:
    """A page could not be read or decoded and was left out of the index."""
    return f"[yellow]Warning:[/] skipping {escape(path)}: {escape(reason)}"
