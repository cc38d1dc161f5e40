"""CLI package for modsynth."""
