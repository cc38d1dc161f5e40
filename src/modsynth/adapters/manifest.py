"""Adapter reading JSON signature manifests."""

from __future__ import annotations

from pathlib import Path

from modsynth.adapters.base import ExtractionError, SignatureAdapter
from modsynth.core.models import OperationSignature, SignatureManifest
from modsynth.core.serializer import SerializationError, deserialize, serialize


class ManifestAdapter(SignatureAdapter):
    """Read signatures previously extracted to a ``.json`` manifest."""

    @property
    def source_kind(self) -> str:
        return "manifest"

    def supports(self, path: Path) -> bool:
        return path.suffix == ".json"

    def extract(self, path: Path) -> list[OperationSignature]:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ExtractionError(f"Failed to read manifest {path}", details=str(e)) from e
        try:
            return deserialize(text).signatures
        except SerializationError as e:
            raise ExtractionError(f"{path}: {e.message}", details=e.details) from e


def write_manifest(signatures: list[OperationSignature], path: Path) -> Path:
    """Write signatures to a manifest file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize(SignatureManifest(signatures=signatures)) + "\n", encoding="utf-8")
    return path
