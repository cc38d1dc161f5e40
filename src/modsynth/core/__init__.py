"""Core module containing models, type syntax, configuration, serializer, and validator."""

from modsynth.core.models import (
    ArrayType,
    ClosureType,
    ExistentialKind,
    ExistentialType,
    GeneratedCode,
    GenericParameter,
    GenericRef,
    GroupSummary,
    MergedVariant,
    MergedVariantType,
    NamedType,
    OperationSignature,
    OptionalType,
    OverloadGroup,
    Parameter,
    ParameterType,
    Predicate,
    SignatureManifest,
    StyleCase,
    group_signatures,
)
from modsynth.core.serializer import (
    SerializationError,
    deserialize,
    deserialize_from_dict,
    serialize,
    serialize_to_dict,
)
from modsynth.core.type_syntax import TypeSyntaxError, parse_type, render_type
from modsynth.core.validator import (
    ValidationError,
    ValidationErrorType,
    ValidationResult,
    validate_signature,
    validate_signatures,
)

__all__ = [
    "ArrayType",
    "ClosureType",
    "ExistentialKind",
    "ExistentialType",
    "GeneratedCode",
    "GenericParameter",
    "GenericRef",
    "GroupSummary",
    "MergedVariant",
    "MergedVariantType",
    "NamedType",
    "OperationSignature",
    "OptionalType",
    "OverloadGroup",
    "Parameter",
    "ParameterType",
    "Predicate",
    "SerializationError",
    "SignatureManifest",
    "StyleCase",
    "TypeSyntaxError",
    "ValidationError",
    "ValidationErrorType",
    "ValidationResult",
    "deserialize",
    "deserialize_from_dict",
    "group_signatures",
    "parse_type",
    "render_type",
    "serialize",
    "serialize_to_dict",
    "validate_signature",
    "validate_signatures",
]
