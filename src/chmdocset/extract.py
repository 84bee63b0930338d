"""CHM extraction via an external program.

The extractor is a collaborator behind a single ``extract(source,
destination)`` operation so the build pipeline can run in tests with a
fake that writes pages directly.

Platform defaults:
  POSIX    extract_chmLib <source> <destination>
  Windows  hh.exe -decompile <destination> <source>

Output of the external program is inherited, not captured: it appears on
this process's own stdout/stderr.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path
from typing import Protocol

from chmdocset.errors import ExtractionError, ExtractorNotFoundError

POSIX_PROGRAM = "extract_chmLib"
WINDOWS_PROGRAM = "hh.exe"


class Extractor(Protocol):
    """Anything that can unpack a source container into a directory."""

    def ensure_available(self) -> None:
        """Raise ExtractorNotFoundError if extraction cannot run at all."""

    def extract(self, source: Path, destination: Path) -> None:
        """Unpack *source* into *destination* (which already exists)."""


def default_program(windows: bool | None = None) -> str:
    if windows is None:
        windows = os.name == "nt"
    return WINDOWS_PROGRAM if windows else POSIX_PROGRAM


class ChmExtractor:
    """Run extract_chmLib (or hh.exe on Windows) resolved from PATH.

    Args:
        program: Executable name or path; defaults to the platform program.
        windows: Force the Windows argument order (defaults to ``os.name``).
    """

    def __init__(self, program: str | None = None, windows: bool | None = None) -> None:
        self.windows = os.name == "nt" if windows is None else windows
        self.program = program or default_program(self.windows)

    def resolve(self) -> str:
        """Return the full path of the program. Raises ExtractorNotFoundError."""
        resolved = shutil.which(self.program)
        if not resolved:
            raise ExtractorNotFoundError(self.program)
        return resolved

    def ensure_available(self) -> None:
        self.resolve()

    def command(self, executable: str, source: Path, destination: Path) -> list[str]:
        source_arg = os.path.normpath(source)
        destination_arg = os.path.normpath(destination)
        if self.windows:
            return [executable, "-decompile", destination_arg, source_arg]
        return [executable, source_arg, destination_arg]

    def extract(self, source: Path, destination: Path) -> None:
        """Run the extraction program and wait for it (shell=False).

        Raises:
            ExtractorNotFoundError: If the program is not on PATH.
            ExtractionError: If the program exits with a nonzero status.
        """
        executable = self.resolve()
        try:
            subprocess.run(
                self.command(executable, source, destination),
                shell=False,
                check=True,
            )
        except subprocess.CalledProcessError as exc:
            raise ExtractionError(self.program, exc.returncode) from None
        except OSError as exc:
            raise ExtractionError(self.program, -1) from exc
