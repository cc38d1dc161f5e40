"""Adapter reading SwiftUI ``.swiftinterface`` files."""

from __future__ import annotations

import logging
from pathlib import Path

from modsynth.adapters.base import ExtractionError, SignatureAdapter
from modsynth.adapters.swiftinterface.scanner import InterfaceScanner
from modsynth.adapters.swiftinterface.styles import StyleScanner
from modsynth.core.models import OperationSignature, StyleCase

logger = logging.getLogger(__name__)


class SwiftInterfaceAdapter(SignatureAdapter):
    """Extract modifier signatures and style constants from interface files.

    A directory input is searched recursively; files are processed in sorted
    order so results do not depend on filesystem traversal order.
    """

    def __init__(self, interface_suffix: str = ".swiftinterface") -> None:
        self.interface_suffix = interface_suffix
        self._scanner = InterfaceScanner()
        self._styles = StyleScanner()

    @property
    def source_kind(self) -> str:
        return "swiftinterface"

    def supports(self, path: Path) -> bool:
        return path.is_dir() or path.name.endswith(self.interface_suffix)

    def interface_files(self, path: Path) -> list[Path]:
        if not path.exists():
            raise ExtractionError(f"Input path does not exist: {path}")
        if path.is_file():
            return [path]
        return sorted(p for p in path.rglob(f"*{self.interface_suffix}") if p.is_file())

    def extract(self, path: Path) -> list[OperationSignature]:
        signatures: list[OperationSignature] = []
        files = self.interface_files(path)
        if not files:
            logger.warning(f"No {self.interface_suffix} files found under {path}")
        for file in files:
            found = self._scanner.scan(self._read(file), source=str(file))
            logger.info(f"Extracted {len(found)} signatures from {file}")
            signatures.extend(found)
        return signatures

    def discover_styles(self, path: Path) -> dict[str, set[StyleCase]]:
        styles: dict[str, set[StyleCase]] = {}
        for file in self.interface_files(path):
            for protocol, cases in self._styles.scan(self._read(file)).items():
                styles.setdefault(protocol, set()).update(cases)
        return styles

    @staticmethod
    def _read(file: Path) -> str:
        try:
            return file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ExtractionError(f"Failed to read {file}", details=str(e)) from e
