"""Docset bundle directory layout.

    <Name>.docset/
      Contents/
        Info.plist
        Resources/
          docSet.dsidx
          Documents/        ← content root (extracted pages)
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from chmdocset.bundle.descriptor import DEFAULT_NAMESPACE, sanitize_identifier
from chmdocset.errors import BundleWriteError

DOCSET_SUFFIX = ".docset"


@dataclass(frozen=True)
class BundleLayout:
    """Paths of one docset bundle, derived from the source file and --out.

    If *out* ends with ``.docset`` it is the bundle path itself; otherwise
    the bundle is created inside *out* as ``<basename>.docset``.
    """

    source: Path
    out: Path = Path(".")
    namespace: str = DEFAULT_NAMESPACE

    @property
    def source_filename(self) -> str:
        return self.source.name

    @property
    def basename(self) -> str:
        """Source file name without its last extension (``Foo Bar.chm`` → ``Foo Bar``)."""
        return Path(self.source_filename).stem

    @property
    def docset_path(self) -> Path:
        if self.out.name.endswith(DOCSET_SUFFIX):
            return self.out
        return self.out / f"{self.basename}{DOCSET_SUFFIX}"

    @property
    def contents_path(self) -> Path:
        return self.docset_path / "Contents"

    @property
    def resources_path(self) -> Path:
        return self.contents_path / "Resources"

    @property
    def content_path(self) -> Path:
        """Documents directory: the extractor's destination and indexer's root."""
        return self.resources_path / "Documents"

    @property
    def database_path(self) -> Path:
        return self.resources_path / "docSet.dsidx"

    @property
    def plist_path(self) -> Path:
        return self.contents_path / "Info.plist"

    @property
    def bundle_identifier(self) -> str:
        return self.namespace + sanitize_identifier(self.basename)

    def clean(self) -> None:
        """Remove any previous bundle at the docset path."""
        path = self.docset_path
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            elif path.exists() or path.is_symlink():
                path.unlink()
        except OSError as exc:
            raise BundleWriteError(f"cannot remove existing bundle '{path}': {exc}") from exc

    def create_directories(self) -> None:
        """Create the bundle tree down to the Documents directory."""
        try:
            self.content_path.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as exc:
            raise BundleWriteError(
                f"cannot create bundle directory '{self.content_path}': {exc}"
            ) from exc
