"""Merged variant type generation.

``MergedTypeGenerator`` turns one overload group into Swift source: an enum
with one case per overload, an initializer that resolves a parsed call to a
case, and a ``body(content:)`` that forwards the case to the original overload.
"""

from __future__ import annotations

import logging

from modsynth.core.config import ModsynthConfig, get_config
from modsynth.core.models import (
    GeneratedCode,
    GroupSummary,
    MergedVariant,
    MergedVariantType,
    OperationSignature,
)
from modsynth.core.type_syntax import render_type
from modsynth.generator.dispatch import DispatchSynthesizer
from modsynth.generator.erasure import ErasureTable
from modsynth.generator.guards import indent_lines
from modsynth.generator.namer import VariantNamer, sanitize_identifier
from modsynth.generator.resolution import ResolutionPlan, ResolutionSynthesizer
from modsynth.generator.support import generate_support_file
from modsynth.generator.transformer import SignatureTransformer, find_unresolved_generics

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """Error while generating a merged variant type."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class UnsupportedTypeError(GenerationError):
    """A parameter type could not be erased into a storable payload type."""


class MergedTypeGenerator:
    """Generate merged variant types for overload groups.

    Args:
        config: Generation settings; the global configuration when omitted.
        table: Erasure table; built from ``config`` when omitted.
    """

    def __init__(self, config: ModsynthConfig | None = None, table: ErasureTable | None = None) -> None:
        self.config = config or get_config()
        self.table = table or ErasureTable(marker=self.config.erased_name_prefix)
        opaque = self.config.opaque_reference_type
        self.transformer = SignatureTransformer(self.table, opaque)
        self.namer = VariantNamer(opaque, self.config.reserved_prefix_word)
        self.resolution = ResolutionSynthesizer(self.config.parse_error_type, opaque)
        self.dispatch = DispatchSynthesizer(self.config.receiver_name, opaque)

    def type_name_for(self, operation: str) -> str:
        """``padding`` -> ``PaddingModifier``."""
        base = self.namer.base_name(operation)
        return sanitize_identifier(base[:1].upper() + base[1:] + self.config.type_name_suffix)

    def merge(self, type_name: str, signatures: list[OperationSignature]) -> MergedVariantType:
        """Erase, name, and collect the variants of one group.

        Raises:
            GenerationError: If the group is empty or mixes operation names.
            UnsupportedTypeError: If a parameter type cannot be erased.
        """
        if not signatures:
            raise GenerationError("Cannot generate a type with no signatures", details=type_name)
        operation = signatures[0].name
        mixed = sorted({s.name for s in signatures} - {operation})
        if mixed:
            raise GenerationError(
                f"Signatures for '{type_name}' mix operation names",
                details=", ".join([operation, *mixed]),
            )

        erased = [self.transformer.transform(s) for s in signatures]
        for signature in erased:
            unresolved = find_unresolved_generics(signature)
            if unresolved:
                raise UnsupportedTypeError(
                    f"{operation}: cannot erase generic parameter types",
                    details=f"parameters: {', '.join(unresolved)}",
                )

        names = self.namer.assign_names(erased)
        variants = [
            MergedVariant(name=name, signature=sig, source=original)
            for name, sig, original in zip(names, erased, signatures)
        ]
        return MergedVariantType(type_name=type_name, operation_name=operation, variants=variants)

    def plan(self, type_name: str, signatures: list[OperationSignature]) -> ResolutionPlan:
        return self.resolution.plan(self.merge(type_name, signatures))

    def generate(self, type_name: str, signatures: list[OperationSignature]) -> GeneratedCode:
        """Generate the Swift source file for one group.

        Args:
            type_name: Name of the generated enum.
            signatures: The group's overloads, in declaration order.

        Returns:
            Generated code with one case per signature.

        Raises:
            GenerationError: If the group is empty or mixes operation names.
            UnsupportedTypeError: If a parameter type cannot be erased.
        """
        merged = self.merge(type_name, signatures)
        plan = self.resolution.plan(merged)
        source = "\n".join(self._render(merged, plan)) + "\n"
        logger.debug(f"Generated {type_name} with {len(merged.variants)} variants")
        return GeneratedCode(
            source_code=source,
            file_name=f"{type_name}.swift",
            variant_count=len(merged.variants),
        )

    def summarize(self, type_name: str, signatures: list[OperationSignature]) -> GroupSummary:
        return GroupSummary(type_name=type_name, signature_count=len(signatures))

    def generate_support_file(self) -> GeneratedCode:
        return generate_support_file(self.config.parse_error_type)

    def _render(self, merged: MergedVariantType, plan: ResolutionPlan) -> list[str]:
        cases: list[str] = []
        for variant in merged.variants:
            cases.extend(self._render_case(variant))

        extension = [
            f'public static var baseName: String {{ "{merged.operation_name}" }}',
            "",
            *self.resolution.render(plan),
            "",
            *self.dispatch.render(merged),
        ]
        return [
            "import SwiftUI",
            "import SwiftSyntax",
            "",
            f"/// Generated modifier enum for `{merged.operation_name}` overloads.",
            f"public enum {merged.type_name}: Sendable {{",
            *indent_lines(cases),
            "}",
            "",
            f"extension {merged.type_name}: RuntimeViewModifier {{",
            *indent_lines(extension),
            "}",
        ]

    def _render_case(self, variant: MergedVariant) -> list[str]:
        lines = []
        if variant.source.documentation:
            lines.extend(f"/// {line}".rstrip() for line in variant.source.documentation.splitlines())
        if not variant.payload:
            lines.append(f"case {variant.name}")
            return lines
        payload = ", ".join(
            f"{p.label}: {render_type(p.type, include_attributes=False)}"
            if p.label
            else render_type(p.type, include_attributes=False)
            for p in variant.payload
        )
        lines.append(f"case {variant.name}({payload})")
        return lines
