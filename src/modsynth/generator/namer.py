"""Variant naming for merged overload groups."""

from __future__ import annotations

import re
from collections.abc import Sequence
from functools import reduce

from modsynth.core.models import (
    ArrayType,
    ClosureType,
    ExistentialType,
    GenericRef,
    NamedType,
    OperationSignature,
    OptionalType,
    ParameterType,
)

_NON_IDENTIFIER_RE = re.compile(r"[^A-Za-z0-9_]")
_NON_ALNUM_RE = re.compile(r"[^A-Za-z0-9]")

OPAQUE_TOKEN = "View"
FALLBACK_NAME = "unknown"


def sanitize_identifier(candidate: str) -> str:
    """Reduce text to a valid identifier."""
    cleaned = _NON_IDENTIFIER_RE.sub("", candidate)
    if not cleaned:
        return FALLBACK_NAME
    if cleaned[0].isdigit():
        return "_" + cleaned
    return cleaned


class VariantNamer:
    """Deterministic, collision-free variant names for an overload group.

    Args:
        opaque_reference_type: Name of the opaque closure reference type; it
            always contributes the ``View`` token.
        reserved_prefix_word: Replacement for a leading underscore.
    """

    def __init__(
        self,
        opaque_reference_type: str = "ViewReference",
        reserved_prefix_word: str = "underscore",
    ) -> None:
        self.opaque_reference_type = opaque_reference_type
        self.reserved_prefix_word = reserved_prefix_word

    def base_name(self, operation: str) -> str:
        name = operation
        if name.startswith("_"):
            rest = name[1:]
            name = self.reserved_prefix_word + rest[:1].upper() + rest[1:]
        return name[:1].lower() + name[1:]

    def type_token(self, node: ParameterType) -> str:
        return _NON_ALNUM_RE.sub("", self._raw_token(node))

    def _raw_token(self, node: ParameterType) -> str:
        if isinstance(node, NamedType):
            if node.path == (self.opaque_reference_type,) and not node.arguments:
                return OPAQUE_TOKEN
            return node.simple_name + "".join(self._raw_token(a) for a in node.arguments)
        if isinstance(node, OptionalType):
            return self._raw_token(node.inner) + "Optional"
        if isinstance(node, ArrayType):
            return "Array" + self._raw_token(node.element)
        if isinstance(node, ClosureType):
            return "Closure" + self._raw_token(node.returns)
        if isinstance(node, ExistentialType):
            return self._raw_token(node.constraint)
        if isinstance(node, GenericRef):
            return node.name
        raise TypeError(f"Unknown type node: {node!r}")

    def candidate(self, signature: OperationSignature) -> str:
        base = self.base_name(signature.name)
        if not signature.parameters:
            return sanitize_identifier(base)
        tokens = "".join(self.type_token(p.type) for p in signature.parameters)
        return sanitize_identifier(f"{base}With{tokens}")

    def assign_names(self, signatures: Sequence[OperationSignature]) -> list[str]:
        """Assign one distinct name per signature, in group order.

        A single-member group gets the bare base name. Collisions are broken
        with ``1, 2, ...`` suffixes in iteration order.
        """
        if not signatures:
            return []
        if len(signatures) == 1:
            return [sanitize_identifier(self.base_name(signatures[0].name))]

        def step(
            acc: tuple[tuple[str, ...], frozenset[str]], candidate: str
        ) -> tuple[tuple[str, ...], frozenset[str]]:
            names, used = acc
            unique = _first_unused(candidate, used)
            return names + (unique,), used | {unique}

        initial: tuple[tuple[str, ...], frozenset[str]] = ((), frozenset())
        names, _ = reduce(step, (self.candidate(s) for s in signatures), initial)
        return list(names)


def local_name(name: str, reserved: frozenset[str]) -> str:
    """Binding name for generated code, suffixed when it shadows a reserved name."""
    return f"{name}Value" if name in reserved else name


def _first_unused(candidate: str, used: frozenset[str]) -> str:
    if candidate not in used:
        return candidate
    suffix = 1
    while f"{candidate}{suffix}" in used:
        suffix += 1
    return f"{candidate}{suffix}"
