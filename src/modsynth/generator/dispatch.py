"""Dispatch synthesizer: forwards each variant back to its original overload."""

from __future__ import annotations

from collections.abc import Sequence

from modsynth.core.models import MergedVariant, MergedVariantType, NamedType, OptionalType, Parameter
from modsynth.generator.guards import Environment, guard_lines, indent_lines
from modsynth.generator.namer import local_name
from modsynth.generator.resolution import Resolution


class DispatchSynthesizer:
    """Render the ``body(content:)`` switch and mirror its decisions in Python.

    Args:
        receiver_name: Name of the view the modifier is applied to.
        opaque_reference_type: Payload type that stands in for view closures;
            such values are re-wrapped as ``{ value }`` when forwarded.
    """

    def __init__(self, receiver_name: str = "content", opaque_reference_type: str = "ViewReference") -> None:
        self.receiver_name = receiver_name
        self.opaque_reference = NamedType.of(opaque_reference_type)

    def binding_names(self, variant: MergedVariant) -> list[str]:
        reserved = frozenset({self.receiver_name, "self"})
        return [local_name(p.name, reserved) for p in variant.payload]

    def forwarded_call(self, variant: MergedVariant, values: Sequence[str]) -> str:
        """Call of the original overload with ``values`` bound to the payload, in order."""
        arguments = []
        for parameter, value in zip(variant.payload, values):
            text = self._forward_value(parameter, value)
            arguments.append(f"{parameter.label}: {text}" if parameter.label else text)
        return f"{self.receiver_name}.{variant.source.name}({', '.join(arguments)})"

    def _forward_value(self, parameter: Parameter, value: str) -> str:
        if parameter.type == self.opaque_reference:
            return f"{{ {value} }}"
        if parameter.type == OptionalType(inner=self.opaque_reference):
            if value == "nil":
                return value
            return f"{value}.map {{ reference in {{ reference }} }}"
        return value

    def forward(self, resolution: Resolution, environment: Environment | None = None) -> str:
        """Evaluate dispatch for a resolved value.

        Returns:
            The forwarded call text, or the receiver name when a guard fails.
        """
        environment = environment or Environment()
        source = resolution.variant.source
        if not environment.satisfies(source.build_condition):
            return self.receiver_name
        if not environment.satisfies(source.availability):
            return self.receiver_name
        return self.forwarded_call(resolution.variant, resolution.values)

    def render_case(self, variant: MergedVariant) -> list[str]:
        bindings = self.binding_names(variant)
        if bindings:
            patterns = ", ".join(f"let {name}" for name in bindings)
            header = f"case .{variant.name}({patterns}):"
        else:
            header = f"case .{variant.name}:"
        call = guard_lines(
            [self.forwarded_call(variant, bindings)],
            availability=variant.source.availability,
            build_condition=variant.source.build_condition,
            fallback=[self.receiver_name],
        )
        return [header, *indent_lines(call)]

    def render(self, merged: MergedVariantType) -> list[str]:
        """Render the ``@ViewBuilder`` body, unindented."""
        if self.receiver_name == "content":
            signature = "public func body(content: Content) -> some View {"
        else:
            signature = f"public func body(content {self.receiver_name}: Content) -> some View {{"
        cases: list[str] = []
        for variant in merged.variants:
            cases.extend(self.render_case(variant))
        return [
            "@ViewBuilder",
            signature,
            "    switch self {",
            *indent_lines(cases),
            "    }",
            "}",
        ]
