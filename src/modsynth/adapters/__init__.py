"""Signature sources.

This module provides the adapter interface and the adapters that turn
interface files and manifests into signature lists.
"""

from pathlib import Path

from modsynth.adapters.base import ExtractionError, SignatureAdapter
from modsynth.adapters.manifest import ManifestAdapter, write_manifest
from modsynth.adapters.swiftinterface import SwiftInterfaceAdapter


def adapter_for(path: Path, interface_suffix: str = ".swiftinterface") -> SignatureAdapter:
    """Pick the adapter for an input path; manifests by ``.json`` suffix."""
    manifest = ManifestAdapter()
    if manifest.supports(path):
        return manifest
    return SwiftInterfaceAdapter(interface_suffix=interface_suffix)


__all__ = [
    "ExtractionError",
    "ManifestAdapter",
    "SignatureAdapter",
    "SwiftInterfaceAdapter",
    "adapter_for",
    "write_manifest",
]
