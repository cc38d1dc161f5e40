"""Merged variant type generation: erasure, naming, resolution, and dispatch."""

from modsynth.generator.call_site import (
    AcceptingOracle,
    Argument,
    CallSite,
    CallSyntaxError,
    LiteralTypeOracle,
    TypeOracle,
    parse_call,
)
from modsynth.generator.dispatch import DispatchSynthesizer
from modsynth.generator.enum_generator import GenerationError, MergedTypeGenerator, UnsupportedTypeError
from modsynth.generator.erasure import DEFAULT_ERASURE_TABLE, ErasureTable
from modsynth.generator.guards import Environment
from modsynth.generator.namer import VariantNamer
from modsynth.generator.resolution import (
    AmbiguousVariant,
    ArgumentCountMismatch,
    InvalidArguments,
    NoMatchingVariant,
    Resolution,
    ResolutionError,
    ResolutionPlan,
    ResolutionSynthesizer,
)
from modsynth.generator.transformer import SignatureTransformer

__all__ = [
    "AcceptingOracle",
    "AmbiguousVariant",
    "Argument",
    "ArgumentCountMismatch",
    "CallSite",
    "CallSyntaxError",
    "DEFAULT_ERASURE_TABLE",
    "DispatchSynthesizer",
    "Environment",
    "ErasureTable",
    "GenerationError",
    "InvalidArguments",
    "LiteralTypeOracle",
    "MergedTypeGenerator",
    "NoMatchingVariant",
    "Resolution",
    "ResolutionError",
    "ResolutionPlan",
    "ResolutionSynthesizer",
    "SignatureTransformer",
    "TypeOracle",
    "UnsupportedTypeError",
    "VariantNamer",
    "parse_call",
]
