"""Docset bundle layout and descriptor."""

from chmdocset.bundle.descriptor import BundleDescriptor, sanitize_identifier
from chmdocset.bundle.layout import BundleLayout

__all__ = ["BundleDescriptor", "BundleLayout", "sanitize_identifier"]
