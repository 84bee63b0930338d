"""Bundle descriptor (Contents/Info.plist) rendering and atomic write.

The descriptor is rendered with ``plistlib`` and written atomically
(temp file in the same directory → rename), so a reader never sees a
half-written Info.plist.
"""

from __future__ import annotations

import os
import plistlib
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path

from chmdocset.errors import BundleWriteError

DEFAULT_NAMESPACE = "io.ngs.documentation."
DEFAULT_PLATFORM = "unknown"
DEFAULT_INDEX_PAGE = "Welcome.htm"

_UNSAFE_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"[^A-Za-z0-9_^-]")


def sanitize_identifier(name: str) -> str:
    """Drop every character outside letters, digits, ``-``, ``_`` and ``^``."""
    return _UNSAFE_IDENTIFIER_RE.sub("", name)


@dataclass(frozen=True)
class BundleDescriptor:
    """Identity and display metadata of a docset bundle."""

    identifier: str
    display_name: str
    platform_family: str = DEFAULT_PLATFORM
    index_page: str = DEFAULT_INDEX_PAGE

    def to_dict(self) -> dict[str, object]:
        return {
            "dashIndexFilePath": self.index_page,
            "CFBundleIdentifier": self.identifier,
            "CFBundleName": self.display_name,
            "DocSetPlatformFamily": self.platform_family,
            "isDashDocset": True,
        }

    def render(self) -> bytes:
        """Return the XML property list document."""
        return plistlib.dumps(self.to_dict(), fmt=plistlib.FMT_XML, sort_keys=False)

    def write(self, path: Path) -> None:
        """Write the rendered descriptor to *path* atomically.

        Raises:
            BundleWriteError: If *path* (or its directory) is not writable.
        """
        try:
            _write_atomic(path, self.render())
        except OSError as exc:
            raise BundleWriteError(f"cannot write descriptor '{path}': {exc}") from exc


def _write_atomic(path: Path, data: bytes) -> None:
    """Write *data* to *path* via a temp file in the same directory."""
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up temp file on error
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
