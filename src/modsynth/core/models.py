"""Data models for the modsynth code generator.

This module defines the closed type model used for parameter and return types,
the signature records extracted from interface files, guard predicates for
availability and build conditions, and the merged variant type produced for
each overload group.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ExistentialKind(str, Enum):
    """Existential spelling of a constraint."""

    SOME = "some"
    ANY = "any"


# ---------------------------------------------------------------------------
# Parameter types
# ---------------------------------------------------------------------------


class NamedType(BaseModel):
    """Nominal type such as ``SwiftUI.Edge.Set`` or ``Binding<Bool>``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["named"] = "named"
    path: tuple[str, ...] = Field(..., min_length=1, description="Dotted path components")
    arguments: tuple[ParameterType, ...] = Field(default=(), description="Generic arguments")

    @classmethod
    def of(cls, dotted: str, *arguments: ParameterType) -> NamedType:
        """Build a named type from dotted text, e.g. ``NamedType.of("Edge.Set")``."""
        return cls(path=tuple(dotted.split(".")), arguments=tuple(arguments))

    @property
    def simple_name(self) -> str:
        """Last path component."""
        return self.path[-1]


class OptionalType(BaseModel):
    """``T?``"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["optional"] = "optional"
    inner: ParameterType


class ArrayType(BaseModel):
    """``[T]``"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["array"] = "array"
    element: ParameterType


class ClosureType(BaseModel):
    """Function type such as ``@escaping () -> some View``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["closure"] = "closure"
    parameters: tuple[ParameterType, ...] = ()
    returns: ParameterType
    attributes: tuple[str, ...] = Field(default=(), description="e.g. @escaping, @ViewBuilder")
    effects: tuple[str, ...] = Field(default=(), description="e.g. async, throws")


class ExistentialType(BaseModel):
    """``some P`` or ``any P``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["existential"] = "existential"
    existential: ExistentialKind = ExistentialKind.SOME
    constraint: NamedType


class GenericRef(BaseModel):
    """Reference to a generic parameter declared by the enclosing signature."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["generic"] = "generic"
    name: str


ParameterType = Annotated[
    Union[NamedType, OptionalType, ArrayType, ClosureType, ExistentialType, GenericRef],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Guard predicates
# ---------------------------------------------------------------------------


class PlatformVersion(BaseModel):
    """Minimum version requirement on one platform (``iOS 15.0``)."""

    model_config = ConfigDict(frozen=True)

    platform: str
    version: str

    @property
    def version_tuple(self) -> tuple[int, ...]:
        return tuple(int(part) for part in self.version.split(".") if part.isdigit())


class PlatformAtom(BaseModel):
    """Compile-time platform test, ``os(iOS)``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["platform"] = "platform"
    platform: str


class VersionAtom(BaseModel):
    """Runtime availability check, ``#available(iOS 15.0, macOS 12.0, *)``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["version"] = "version"
    requirements: tuple[PlatformVersion, ...] = Field(..., min_length=1)


class FlagAtom(BaseModel):
    """Opaque compile-time condition such as ``canImport(UIKit)``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["flag"] = "flag"
    expression: str


class AllOf(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["all"] = "all"
    operands: tuple[Predicate, ...] = Field(..., min_length=1)


class AnyOf(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["any"] = "any"
    operands: tuple[Predicate, ...] = Field(..., min_length=1)


class Not(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["not"] = "not"
    operand: Predicate


Predicate = Annotated[
    Union[PlatformAtom, VersionAtom, FlagAtom, AllOf, AnyOf, Not],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Signatures
# ---------------------------------------------------------------------------


class Parameter(BaseModel):
    """A parameter of an operation signature.

    The label is the call-site argument label (``None`` for ``_``); the name is
    the internal binding name.
    """

    label: str | None = Field(None, description="Argument label, None when unlabeled")
    name: str = Field(..., description="Binding name")
    type: ParameterType
    has_default: bool = False
    default_value: str | None = Field(None, description="Raw default-value source text")

    @model_validator(mode="after")
    def _default_requires_flag(self) -> Parameter:
        if self.default_value is not None and not self.has_default:
            raise ValueError(f"parameter '{self.name}' has default text but has_default is false")
        return self

    @property
    def is_optional(self) -> bool:
        return isinstance(self.type, OptionalType)

    @property
    def has_fallback(self) -> bool:
        """A default with source text, or an optional type that falls back to nil."""
        return (self.has_default and self.default_value is not None) or self.is_optional

    @property
    def is_required(self) -> bool:
        """No usable default text and not optional.

        A default flag without default text cannot be emitted, so such a
        parameter is required.
        """
        return not self.has_fallback


class GenericParameter(BaseModel):
    """Generic parameter with its (optional) constraint text."""

    name: str
    constraint: str | None = None


class OperationSignature(BaseModel):
    """One public overload of a modifier operation."""

    name: str = Field(..., description="Operation name")
    parameters: list[Parameter] = Field(default_factory=list)
    return_type: ParameterType
    availability: Predicate | None = Field(None, description="Runtime availability guard")
    build_condition: Predicate | None = Field(None, description="Compile-time platform guard")
    generic_parameters: list[GenericParameter] = Field(default_factory=list)
    documentation: str | None = None

    @property
    def required_count(self) -> int:
        return sum(1 for p in self.parameters if p.is_required)


class OverloadGroup(BaseModel):
    """All signatures sharing one public name; the unit of merging."""

    name: str
    signatures: list[OperationSignature] = Field(default_factory=list)


class SignatureManifest(BaseModel):
    """Serialized list of extracted signatures."""

    version: str = Field(default="1.0", description="Manifest format version")
    signatures: list[OperationSignature] = Field(default_factory=list)


def group_signatures(signatures: list[OperationSignature]) -> list[OverloadGroup]:
    """Group signatures by name, preserving first-seen order of names and members."""
    groups: dict[str, OverloadGroup] = {}
    for signature in signatures:
        if signature.name not in groups:
            groups[signature.name] = OverloadGroup(name=signature.name)
        groups[signature.name].signatures.append(signature)
    return list(groups.values())


# ---------------------------------------------------------------------------
# Merge results
# ---------------------------------------------------------------------------


class MergedVariant(BaseModel):
    """One case of a merged variant type."""

    name: str = Field(..., description="Enum case name")
    signature: OperationSignature = Field(..., description="Erased signature")
    source: OperationSignature = Field(..., description="Original signature")

    @property
    def payload(self) -> list[Parameter]:
        return self.signature.parameters


class MergedVariantType(BaseModel):
    """The tagged union produced for one overload group."""

    type_name: str
    operation_name: str
    variants: list[MergedVariant] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _distinct_variant_names(self) -> MergedVariantType:
        names = [v.name for v in self.variants]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"duplicate variant names: {duplicates}")
        return self


class GeneratedCode(BaseModel):
    """Generated source text destined for one file."""

    source_code: str
    file_name: str
    variant_count: int = 0


class GroupSummary(BaseModel):
    """Machine-readable summary of one generated group."""

    type_name: str
    signature_count: int


class StyleCase(BaseModel):
    """Named constant instance of a style protocol (``.bordered``)."""

    model_config = ConfigDict(frozen=True)

    name: str
    concrete_type: str


for _model in (
    NamedType,
    OptionalType,
    ArrayType,
    ClosureType,
    ExistentialType,
    GenericRef,
    AllOf,
    AnyOf,
    Not,
    Parameter,
    OperationSignature,
    OverloadGroup,
    SignatureManifest,
    MergedVariant,
    MergedVariantType,
):
    _model.model_rebuild()
