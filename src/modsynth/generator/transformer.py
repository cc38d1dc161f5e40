"""Signature transformer.

Rewrites a signature's parameter types into storable payload types:

1. generic parameters are replaced by the erasure of their constraint,
2. closures producing views collapse into the opaque reference type,
3. inline existentials are replaced by their erasure,
4. defaults of rewritten parameters are wrapped in the erased type's initializer.

The transform is a pure tree rewrite and is idempotent.
"""

from __future__ import annotations

from modsynth.core.models import (
    ClosureType,
    ExistentialType,
    GenericParameter,
    GenericRef,
    NamedType,
    OperationSignature,
    OptionalType,
    Parameter,
    ParameterType,
)
from modsynth.core.type_syntax import contains_generic, render_type, rewrite_type, strip_optional
from modsynth.generator.erasure import DEFAULT_ERASURE_TABLE, ErasureTable, strip_namespaces

UI_TYPE_NAMES = frozenset({"View", "AnyView"})

NULL_DEFAULTS = frozenset({"", "nil"})


class SignatureTransformer:
    """Erase generic and existential payload types of signatures."""

    def __init__(
        self,
        table: ErasureTable = DEFAULT_ERASURE_TABLE,
        opaque_reference_type: str = "ViewReference",
    ) -> None:
        self.table = table
        self.opaque_reference = NamedType.of(opaque_reference_type)

    def transform(self, signature: OperationSignature) -> OperationSignature:
        substitutions = self._substitutions(signature.generic_parameters)
        constraints = {g.name: g.constraint for g in signature.generic_parameters}
        parameters = [
            self._transform_parameter(p, substitutions, constraints) for p in signature.parameters
        ]
        return signature.model_copy(update={"parameters": parameters})

    def _substitutions(self, generics: list[GenericParameter]) -> dict[str, ParameterType]:
        substitutions = {}
        for generic in generics:
            if generic.constraint is None:
                continue
            erased = self.table.lookup(generic.constraint)
            if erased is not None:
                substitutions[generic.name] = erased
        return substitutions

    def _transform_parameter(
        self,
        parameter: Parameter,
        substitutions: dict[str, ParameterType],
        constraints: dict[str, str | None],
    ) -> Parameter:
        original = parameter.type

        if self._is_view_closure(original, substitutions, constraints):
            new_type: ParameterType = self.opaque_reference
            if isinstance(original, OptionalType):
                new_type = OptionalType(inner=new_type)
        else:
            new_type = rewrite_type(original, lambda node: self._erase_node(node, substitutions))

        if new_type == original:
            return parameter

        default_value = parameter.default_value
        if parameter.has_default and default_value is not None and default_value.strip() not in NULL_DEFAULTS:
            erased_name = render_type(strip_optional(new_type), include_attributes=False)
            default_value = f"{erased_name}({default_value})"

        return Parameter(
            label=parameter.label,
            name=parameter.name,
            type=new_type,
            has_default=parameter.has_default,
            default_value=default_value,
        )

    def _erase_node(
        self, node: ParameterType, substitutions: dict[str, ParameterType]
    ) -> ParameterType | None:
        if isinstance(node, GenericRef):
            return substitutions.get(node.name)
        if isinstance(node, ExistentialType):
            return self.table.lookup(render_type(node))
        return None

    def _is_view_closure(
        self,
        node: ParameterType,
        substitutions: dict[str, ParameterType],
        constraints: dict[str, str | None],
    ) -> bool:
        closure = strip_optional(node)
        if not isinstance(closure, ClosureType):
            return False
        return self._is_ui_like(closure.returns, substitutions, constraints)

    def _is_ui_like(
        self,
        node: ParameterType,
        substitutions: dict[str, ParameterType],
        constraints: dict[str, str | None],
    ) -> bool:
        if isinstance(node, NamedType):
            return not node.arguments and strip_namespaces(".".join(node.path)) in UI_TYPE_NAMES
        if isinstance(node, ExistentialType):
            return self._is_ui_like(node.constraint, substitutions, constraints)
        if isinstance(node, GenericRef):
            constraint = constraints.get(node.name)
            if constraint is not None and strip_namespaces(constraint) in UI_TYPE_NAMES:
                return True
            erased = substitutions.get(node.name)
            return erased is not None and self._is_ui_like(erased, {}, {})
        return False


def find_unresolved_generics(signature: OperationSignature) -> list[str]:
    """Names of parameters whose types still reference generic parameters."""
    return [p.name for p in signature.parameters if contains_generic(p.type)]
