"""File output for generated code.

``FileWriter`` creates the output directory on demand, writes each generated
file under its own name, and can clear stale files before a run.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from modsynth.core.models import GeneratedCode

logger = logging.getLogger(__name__)


class OutputError(Exception):
    """Error while writing generated files."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


@dataclass
class WriteResult:
    """Result of writing a batch of generated files."""

    paths: list[Path] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def files_written(self) -> int:
        return len(self.paths)

    @property
    def success(self) -> bool:
        """Check if every file was written."""
        return len(self.errors) == 0


class FileWriter:
    """Write generated code to an output directory."""

    def write(self, code: GeneratedCode, directory: Path | str) -> Path:
        """Write one file, creating the directory if needed.

        Raises:
            OutputError: If the directory cannot be created or the file written.
        """
        target_dir = self._ensure_directory(Path(directory))
        path = target_dir / code.file_name
        try:
            path.write_text(code.source_code, encoding="utf-8")
        except OSError as e:
            raise OutputError(f"Failed to write {path}", details=str(e)) from e
        logger.debug(f"Wrote {path}")
        return path

    def write_all(self, codes: list[GeneratedCode], directory: Path | str) -> WriteResult:
        """Write several files; a failed file is recorded and the rest still written.

        Raises:
            OutputError: If the directory itself is unusable.
        """
        self._ensure_directory(Path(directory))
        result = WriteResult()
        for code in codes:
            try:
                result.paths.append(self.write(code, directory))
            except OutputError as e:
                result.errors.append(f"{e.message}: {e.details}" if e.details else e.message)
        logger.info(f"Wrote {result.files_written} files to {directory}")
        return result

    def clean(self, directory: Path | str) -> int:
        """Remove everything inside ``directory``; a missing directory is a no-op.

        Returns:
            Number of entries removed.
        """
        path = Path(directory)
        if not path.is_dir():
            return 0
        removed = 0
        for entry in sorted(path.iterdir()):
            try:
                if entry.is_dir() and not entry.is_symlink():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
            except OSError as e:
                raise OutputError(f"Failed to remove {entry}", details=str(e)) from e
            removed += 1
        logger.info(f"Removed {removed} entries from {path}")
        return removed

    @staticmethod
    def _ensure_directory(path: Path) -> Path:
        if path.exists():
            if not path.is_dir():
                raise OutputError("Path exists but is not a directory", details=str(path))
            return path
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputError(f"Failed to create directory {path}", details=str(e)) from e
        return path
