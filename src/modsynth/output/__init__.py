"""Writing generated files to disk."""

from modsynth.output.writer import FileWriter, OutputError, WriteResult

__all__ = ["FileWriter", "OutputError", "WriteResult"]
