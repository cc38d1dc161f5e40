"""Resolution synthesizer.

Builds, per merged variant type, the plan that maps a call site's arguments to
exactly one variant:

- variants are tried in specificity order (required count, then total count,
  both descending; stable in group order),
- a tier of variants with equal required counts whose first-parameter labels
  differ is split on the call's first argument label,
- the first variant whose arguments all parse wins,
- a variant whose count fits but whose labels or values do not is recorded as
  a failure, and all failures are reported as one aggregate error.

The plan is rendered to the Swift ``init(syntax:)`` initializer and can also be
evaluated against a ``CallSite`` in Python; both make the same decisions.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from itertools import groupby
from typing import Union

from modsynth.core.models import (
    ClosureType,
    MergedVariant,
    MergedVariantType,
    NamedType,
    Parameter,
    Predicate,
)
from modsynth.core.type_syntax import render_type, strip_optional
from modsynth.generator.call_site import AcceptingOracle, CallSite, TypeOracle
from modsynth.generator.guards import Environment, guard_lines, indent_lines
from modsynth.generator.namer import local_name

logger = logging.getLogger(__name__)

RESERVED_LOCALS = frozenset({"arguments", "failures", "syntax", "self", "expectedCounts"})


# ---------------------------------------------------------------------------
# Errors raised by Python evaluation of a plan
# ---------------------------------------------------------------------------


class ResolutionError(Exception):
    """A call site could not be resolved to a variant."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ArgumentCountMismatch(ResolutionError):
    def __init__(self, operation: str, expected: Sequence[int], found: int) -> None:
        super().__init__(f"{operation}: unexpected argument count {found}, expected one of {list(expected)}")
        self.operation = operation
        self.expected = tuple(expected)
        self.found = found


class InvalidArguments(ResolutionError):
    def __init__(self, operation: str, variant: str, expected_types: str) -> None:
        super().__init__(f"{operation}: invalid arguments for '{variant}', expected types: {expected_types}")
        self.operation = operation
        self.variant = variant
        self.expected_types = expected_types


class AmbiguousVariant(ResolutionError):
    def __init__(self, operation: str, expected_labels: Sequence[str]) -> None:
        super().__init__(
            f"{operation}: ambiguous variant, expected first argument label to be one of {list(expected_labels)}"
        )
        self.operation = operation
        self.expected_labels = tuple(expected_labels)


class NoMatchingVariant(ResolutionError):
    def __init__(self, operation: str, found: int, failures: Sequence[ResolutionError]) -> None:
        super().__init__(
            f"{operation}: no matching variant found for argument count {found}",
            details="; ".join(f.message for f in failures) or None,
        )
        self.operation = operation
        self.found = found
        self.failures = tuple(failures)


# ---------------------------------------------------------------------------
# Plan
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ArgumentBinding:
    """How one payload parameter is located in, and extracted from, a call."""

    parameter: Parameter
    binding: str
    unlabeled_index: int | None = None
    takes_trailing_closure: bool = False

    @property
    def fallback(self) -> str | None:
        """Value used when the argument is absent or unparseable; None when required."""
        if self.parameter.has_default and self.parameter.default_value is not None:
            return self.parameter.default_value
        if self.parameter.is_optional:
            return "nil"
        return None

    @property
    def required(self) -> bool:
        return self.parameter.is_required

    def locate(self, call: CallSite) -> str | None:
        label = self.parameter.label
        if label is None:
            return call.unlabeled(self.unlabeled_index or 0)
        expression = call.expression(label)
        if expression is None and self.takes_trailing_closure:
            return call.trailing_closure
        return expression

    def accessor(self) -> str:
        label = self.parameter.label
        if label is None:
            return f"arguments.unlabeled(at: {self.unlabeled_index or 0})"
        if self.takes_trailing_closure:
            return f'(arguments.expression(named: "{label}") ?? arguments.trailingClosure)'
        return f'arguments.expression(named: "{label}")'


@dataclass(frozen=True)
class VariantAttempt:
    """One variant's extraction attempt."""

    variant: MergedVariant
    bindings: tuple[ArgumentBinding, ...]

    @property
    def required_count(self) -> int:
        return sum(1 for b in self.bindings if b.required)

    @property
    def total_count(self) -> int:
        return len(self.bindings)

    @property
    def labels(self) -> frozenset[str]:
        return frozenset(b.parameter.label for b in self.bindings if b.parameter.label is not None)

    @property
    def first_label(self) -> str | None:
        return self.bindings[0].parameter.label if self.bindings else None

    @property
    def availability(self) -> Predicate | None:
        return self.variant.source.availability

    @property
    def build_condition(self) -> Predicate | None:
        return self.variant.source.build_condition

    @property
    def expected_types(self) -> str:
        return ", ".join(render_type(b.parameter.type, include_attributes=False) for b in self.bindings)

    def covers(self, count: int) -> bool:
        return self.required_count <= count <= self.total_count


@dataclass(frozen=True)
class LabelBranch:
    """Variants sharing a required count, split on the call's first argument label.

    The branch covers counts from that required count up to the largest total
    count in the tier.
    """

    required_count: int
    total_count: int
    cases: tuple[tuple[str | None, tuple[VariantAttempt, ...]], ...]

    @property
    def expected_labels(self) -> tuple[str, ...]:
        return tuple("_" if label is None else label for label, _ in self.cases)

    def covers(self, count: int) -> bool:
        return self.required_count <= count <= self.total_count

    def attempts_for(self, label: str | None) -> tuple[VariantAttempt, ...] | None:
        for case_label, attempts in self.cases:
            if case_label == label:
                return attempts
        return None


ResolutionStep = Union[VariantAttempt, LabelBranch]


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a call: the chosen variant and one value per payload parameter."""

    variant: MergedVariant
    values: tuple[str, ...]

    @property
    def arguments(self) -> list[tuple[Parameter, str]]:
        return list(zip(self.variant.payload, self.values))

    def case_expression(self) -> str:
        return _case_expression(self.variant.name, self.arguments)


@dataclass(frozen=True)
class ResolutionPlan:
    """Ordered resolution steps for one merged variant type."""

    type_name: str
    operation_name: str
    steps: tuple[ResolutionStep, ...]

    @property
    def attempts(self) -> list[VariantAttempt]:
        flat: list[VariantAttempt] = []
        for step in self.steps:
            if isinstance(step, LabelBranch):
                for _, attempts in step.cases:
                    flat.extend(attempts)
            else:
                flat.append(step)
        return flat

    @property
    def accepted_counts(self) -> tuple[int, ...]:
        counts: set[int] = set()
        for attempt in self.attempts:
            counts.update(range(attempt.required_count, attempt.total_count + 1))
        return tuple(sorted(counts))

    def resolve(
        self,
        call: CallSite,
        oracle: TypeOracle | None = None,
        environment: Environment | None = None,
    ) -> Resolution:
        """Select the variant a call refers to and extract its values.

        Raises:
            ArgumentCountMismatch: No variant takes this many arguments.
            AmbiguousVariant: Every attempt failed on an unrecognized first label.
            NoMatchingVariant: All applicable variants failed to parse.
        """
        oracle = oracle or AcceptingOracle()
        environment = environment or Environment()
        found = call.count
        if found not in self.accepted_counts:
            raise ArgumentCountMismatch(self.operation_name, self.accepted_counts, found)

        failures: list[ResolutionError] = []
        for step in self.steps:
            if isinstance(step, LabelBranch):
                if not step.covers(found):
                    continue
                attempts = step.attempts_for(call.first_label)
                if attempts is None:
                    failures.append(AmbiguousVariant(self.operation_name, step.expected_labels))
                    continue
            else:
                attempts = (step,)

            for attempt in attempts:
                if not environment.satisfies(attempt.build_condition):
                    continue
                if not environment.satisfies(attempt.availability):
                    continue
                if not attempt.covers(found):
                    continue
                if not call.accepts(attempt.labels):
                    failures.append(
                        InvalidArguments(self.operation_name, attempt.variant.name, attempt.expected_types)
                    )
                    continue
                outcome = self._extract(attempt, call, oracle)
                if isinstance(outcome, Resolution):
                    logger.debug(f"{self.operation_name}: resolved to {attempt.variant.name}")
                    return outcome
                failures.append(outcome)

        if failures and all(isinstance(f, AmbiguousVariant) for f in failures):
            raise failures[0]
        raise NoMatchingVariant(self.operation_name, found, failures)

    def _extract(
        self, attempt: VariantAttempt, call: CallSite, oracle: TypeOracle
    ) -> Resolution | InvalidArguments:
        values = []
        for binding in attempt.bindings:
            expression = binding.locate(call)
            target = strip_optional(binding.parameter.type)
            if expression is not None and oracle.parses(expression, target):
                values.append(expression)
            elif binding.required:
                return InvalidArguments(self.operation_name, attempt.variant.name, attempt.expected_types)
            else:
                values.append(binding.fallback)
        return Resolution(variant=attempt.variant, values=tuple(values))


# ---------------------------------------------------------------------------
# Synthesizer
# ---------------------------------------------------------------------------


def _case_expression(case_name: str, arguments: Sequence[tuple[Parameter, str]]) -> str:
    if not arguments:
        return f".{case_name}"
    rendered = ", ".join(f"{p.label}: {value}" if p.label else value for p, value in arguments)
    return f".{case_name}({rendered})"


def _parse_target(parameter: Parameter) -> str:
    target = strip_optional(parameter.type)
    text = render_type(target, include_attributes=False)
    return f"({text})" if isinstance(target, ClosureType) else text


def _is_closure_like(parameter: Parameter, opaque_reference_type: str) -> bool:
    target = strip_optional(parameter.type)
    if isinstance(target, ClosureType):
        return True
    return isinstance(target, NamedType) and target.path == (opaque_reference_type,)


class ResolutionSynthesizer:
    """Build and render resolution plans.

    Args:
        error_type: Name of the generated failure type.
        opaque_reference_type: Opaque closure reference type name; a labeled
            trailing parameter of this type also accepts a trailing closure.
    """

    def __init__(
        self,
        error_type: str = "ModifierParseError",
        opaque_reference_type: str = "ViewReference",
    ) -> None:
        self.error_type = error_type
        self.opaque_reference_type = opaque_reference_type

    def attempt_for(self, variant: MergedVariant) -> VariantAttempt:
        parameters = variant.payload
        bindings = []
        unlabeled = 0
        for index, parameter in enumerate(parameters):
            unlabeled_index = None
            if parameter.label is None:
                unlabeled_index = unlabeled
                unlabeled += 1
            is_last = index == len(parameters) - 1
            bindings.append(
                ArgumentBinding(
                    parameter=parameter,
                    binding=local_name(parameter.name, RESERVED_LOCALS),
                    unlabeled_index=unlabeled_index,
                    takes_trailing_closure=(
                        is_last
                        and parameter.label is not None
                        and _is_closure_like(parameter, self.opaque_reference_type)
                    ),
                )
            )
        return VariantAttempt(variant=variant, bindings=tuple(bindings))

    def order(self, attempts: Sequence[VariantAttempt]) -> list[VariantAttempt]:
        """Most specific first: required count desc, total count desc, stable."""
        return sorted(attempts, key=lambda a: (-a.required_count, -a.total_count))

    def plan(self, merged: MergedVariantType) -> ResolutionPlan:
        ordered = self.order([self.attempt_for(v) for v in merged.variants])
        steps: list[ResolutionStep] = []
        for required, tier in groupby(ordered, key=lambda a: a.required_count):
            tier = list(tier)
            total = max(a.total_count for a in tier)
            first_labels = list(dict.fromkeys(a.first_label for a in tier))
            if len(tier) > 1 and len(first_labels) > 1:
                cases = tuple(
                    (label, tuple(a for a in tier if a.first_label == label)) for label in first_labels
                )
                steps.append(LabelBranch(required_count=required, total_count=total, cases=cases))
            else:
                steps.extend(tier)
        return ResolutionPlan(
            type_name=merged.type_name,
            operation_name=merged.operation_name,
            steps=tuple(steps),
        )

    # -- rendering ---------------------------------------------------------

    def render(self, plan: ResolutionPlan) -> list[str]:
        """Render the ``init(syntax:)`` declaration, unindented."""
        counts = ", ".join(str(c) for c in plan.accepted_counts)
        operation = plan.operation_name
        body = [
            "let arguments = ModifierArguments(syntax)",
            f"let expectedCounts = [{counts}]",
            "guard expectedCounts.contains(arguments.count) else {",
            f"    throw {self.error_type}.unexpectedArgumentCount("
            f'modifier: "{operation}", expected: expectedCounts, found: arguments.count)',
            "}",
            f"var failures: [{self.error_type}] = []",
        ]
        for step in plan.steps:
            if isinstance(step, LabelBranch):
                body.extend(self._render_branch(step, operation))
            else:
                body.extend(self._render_guarded(step, operation))
        body += [
            "if let ambiguity = failures.first, failures.allSatisfy({ $0.isAmbiguousVariant }) {",
            "    throw ambiguity",
            "}",
            f"throw {self.error_type}.noMatchingVariant("
            f'modifier: "{operation}", found: arguments.count, failures: failures)',
        ]
        return ["public init(syntax: FunctionCallExprSyntax) throws {", *indent_lines(body), "}"]

    def _render_branch(self, branch: LabelBranch, operation: str) -> list[str]:
        lines = ["switch arguments.firstLabel {"]
        for label, attempts in branch.cases:
            lines.append("case .none:" if label is None else f'case .some("{label}"):')
            case_body: list[str] = []
            for attempt in attempts:
                case_body.extend(self._render_guarded(attempt, operation))
            if all(a.build_condition is not None for a in attempts):
                case_body.append("break")
            lines.extend(indent_lines(case_body))
        expected = ", ".join(f'"{label}"' for label in branch.expected_labels)
        lines += [
            "default:",
            f'    failures.append(.ambiguousVariant(modifier: "{operation}", expectedLabels: [{expected}]))',
            "}",
        ]
        return [
            f"if {_count_condition(branch.required_count, branch.total_count)} {{",
            *indent_lines(lines),
            "}",
        ]

    def _render_guarded(self, attempt: VariantAttempt, operation: str) -> list[str]:
        return guard_lines(
            self._render_attempt(attempt, operation),
            availability=attempt.availability,
            build_condition=attempt.build_condition,
        )

    def _render_attempt(self, attempt: VariantAttempt, operation: str) -> list[str]:
        labels = ", ".join(f'"{label}"' for label in sorted(attempt.labels))
        count_gate = _count_condition(attempt.required_count, attempt.total_count)
        label_gate = f"arguments.accepts(labels: [{labels}])"

        required = [b for b in attempt.bindings if b.required]
        defaulted = [
            f"let {b.binding}: {render_type(b.parameter.type, include_attributes=False)} = "
            f"{self._extraction(b)} ?? {b.fallback}"
            for b in attempt.bindings
            if not b.required
        ]
        arguments = [(b.parameter, b.binding) for b in attempt.bindings]
        success = [
            *defaulted,
            f"self = {_case_expression(attempt.variant.name, arguments)}",
            "return",
        ]

        conditions = ", ".join(
            [label_gate, *(f"let {b.binding} = {self._extraction(b)}" for b in required)]
        )
        return [
            f"if {count_gate} {{",
            f"    if {conditions} {{",
            *indent_lines(success, 2),
            "    }",
            f'    failures.append(.invalidArguments(modifier: "{operation}", '
            f'variant: "{attempt.variant.name}", expectedTypes: "{attempt.expected_types}"))',
            "}",
        ]

    @staticmethod
    def _extraction(binding: ArgumentBinding) -> str:
        return f"{binding.accessor()}.flatMap({{ {_parse_target(binding.parameter)}(syntax: $0) }})"


def _count_condition(required: int, total: int) -> str:
    if required == total:
        return f"arguments.count == {required}"
    return f"arguments.count >= {required} && arguments.count <= {total}"
