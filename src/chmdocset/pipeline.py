"""Docset build pipeline.

Stages run strictly in order, each failing fast with a ChmDocsetError:

  1. check extractor     (before touching the filesystem)
  2. clean               (remove any previous bundle)
  3. create directories  (Contents/Resources/Documents)
  4. extract             (external program fills the content root)
  5. index               (one transaction into docSet.dsidx)
  6. write descriptor    (Contents/Info.plist)

The pipeline never exits the process; the CLI maps errors to exit codes.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from chmdocset.bundle.descriptor import BundleDescriptor
from chmdocset.bundle.layout import BundleLayout
from chmdocset.config import ChmDocsetConfig
from chmdocset.db.repository import IndexStore
from chmdocset.extract import Extractor
from chmdocset.ingest.indexer import IndexReport, Indexer


@dataclass
class BuildOptions:
    """Inputs of one docset build, after CLI flags and config are merged."""

    source: Path
    out: Path = Path(".")
    platform: str | None = None
    config: ChmDocsetConfig = field(default_factory=ChmDocsetConfig)

    @property
    def platform_family(self) -> str:
        return self.platform or self.config.bundle.platform

    def layout(self) -> BundleLayout:
        return BundleLayout(
            source=self.source,
            out=self.out,
            namespace=self.config.bundle.namespace,
        )


@dataclass
class BuildResult:
    layout: BundleLayout
    descriptor: BundleDescriptor
    report: IndexReport


def index_content(
    layout: BundleLayout,
    config: ChmDocsetConfig,
    on_progress: Callable[[Path], None] | None = None,
) -> IndexReport:
    """Rebuild the bundle's search index from its content root."""
    indexer = Indexer(
        layout.content_path,
        entry_type=config.index.entry_type,
        extensions=tuple(config.index.extensions),
        header_limit=config.index.header_bytes,
    )
    store = IndexStore(layout.database_path)
    store.initialize()
    with store.batch():
        report = indexer.run(store, on_progress=on_progress)
    return report


def build_descriptor(options: BuildOptions, layout: BundleLayout) -> BundleDescriptor:
    return BundleDescriptor(
        identifier=layout.bundle_identifier,
        display_name=layout.basename,
        platform_family=options.platform_family,
        index_page=options.config.bundle.index_page,
    )


def build_docset(
    options: BuildOptions,
    extractor: Extractor,
    on_stage: Callable[[str], None] | None = None,
    on_progress: Callable[[Path], None] | None = None,
) -> BuildResult:
    """Build a complete docset bundle for *options.source*.

    Args:
        options: Source, output location, platform and config.
        extractor: Extraction collaborator (real program or test fake).
        on_stage: Optional callback invoked with a short stage description.
        on_progress: Optional callback invoked per scanned page.

    Raises:
        ExtractorNotFoundError: Extraction program missing (nothing written).
        ExtractionError: Extraction program failed.
        BundleWriteError: Bundle directory or descriptor not writable.
        IndexStoreError: Index could not be created; no index is left behind.
    """

    def _stage(message: str) -> None:
        if on_stage is not None:
            on_stage(message)

    layout = options.layout()

    extractor.ensure_available()

    _stage(f"Cleaning {layout.docset_path}")
    layout.clean()
    layout.create_directories()

    _stage(f"Extracting {options.source}")
    extractor.extract(options.source, layout.content_path)

    _stage("Indexing pages")
    report = index_content(layout, options.config, on_progress=on_progress)

    _stage("Writing Info.plist")
    descriptor = build_descriptor(options, layout)
    descriptor.write(layout.plist_path)

    return BuildResult(layout=layout, descriptor=descriptor, report=report)
