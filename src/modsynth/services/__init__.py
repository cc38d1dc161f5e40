"""Business services for modsynth."""

from modsynth.services.generation_service import (
    GenerationRun,
    GenerationService,
    GroupResult,
    ResolveResult,
)

__all__ = [
    "GenerationRun",
    "GenerationService",
    "GroupResult",
    "ResolveResult",
]
