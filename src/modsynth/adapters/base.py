"""Base class for signature sources.

An adapter turns some input (interface files, signature manifests) into the
ordered list of ``OperationSignature`` records the generator consumes, and
optionally the style constants discovered alongside them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from modsynth.core.models import OperationSignature, StyleCase


class ExtractionError(Exception):
    """Input could not be read."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class SignatureAdapter(ABC):
    """Abstract base class for signature sources."""

    @property
    @abstractmethod
    def source_kind(self) -> str:
        """Short name of the input format."""
        ...

    @abstractmethod
    def supports(self, path: Path) -> bool:
        """Return True if this adapter can read ``path``."""
        ...

    @abstractmethod
    def extract(self, path: Path) -> list[OperationSignature]:
        """Extract signatures from a file or directory.

        Args:
            path: Input file or directory.

        Returns:
            Signatures in input order.

        Raises:
            ExtractionError: If the input cannot be read.
        """
        ...

    def discover_styles(self, path: Path) -> dict[str, set[StyleCase]] | None:
        """Style constants keyed by protocol; None when the format carries none."""
        return None
