"""Availability and build-condition guards.

Predicates are rendered into Swift guard text (``#available``, ``#if``) and
can be evaluated against an ``Environment`` so the Python mirrors of the
emitted code make the same gating decisions.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from modsynth.core.models import (
    AllOf,
    AnyOf,
    FlagAtom,
    Not,
    PlatformAtom,
    PlatformVersion,
    Predicate,
    VersionAtom,
)

INDENT = "    "


def indent_lines(lines: Sequence[str], levels: int = 1) -> list[str]:
    prefix = INDENT * levels
    return [prefix + line if line else line for line in lines]


@dataclass(frozen=True)
class Environment:
    """Call-site environment: target platform, its version, and compile flags.

    A ``version`` of None means the newest version of the platform.
    """

    platform: str = "iOS"
    version: str | None = None
    flags: frozenset[str] = field(default_factory=frozenset)

    @property
    def version_tuple(self) -> tuple[int, ...] | None:
        if self.version is None:
            return None
        return PlatformVersion(platform=self.platform, version=self.version).version_tuple

    def satisfies(self, predicate: Predicate | None) -> bool:
        """Evaluate a predicate; a missing predicate always holds."""
        if predicate is None:
            return True
        if isinstance(predicate, VersionAtom):
            return self._meets_version(predicate.requirements)
        if isinstance(predicate, PlatformAtom):
            return predicate.platform == self.platform
        if isinstance(predicate, FlagAtom):
            return predicate.expression in self.flags
        if isinstance(predicate, AllOf):
            return all(self.satisfies(p) for p in predicate.operands)
        if isinstance(predicate, AnyOf):
            return any(self.satisfies(p) for p in predicate.operands)
        if isinstance(predicate, Not):
            return not self.satisfies(predicate.operand)
        raise TypeError(f"Unknown predicate: {predicate!r}")

    def _meets_version(self, requirements: tuple[PlatformVersion, ...]) -> bool:
        for requirement in requirements:
            if requirement.platform != self.platform:
                continue
            current = self.version_tuple
            if current is None:
                return True
            return _pad(current) >= _pad(requirement.version_tuple)
        # Unlisted platforms fall under the '*' wildcard
        return True


def _pad(version: tuple[int, ...]) -> tuple[int, ...]:
    return version + (0,) * (3 - len(version))


def render_version_list(atom: VersionAtom) -> str:
    parts = [f"{r.platform} {r.version}" for r in atom.requirements]
    parts.append("*")
    return ", ".join(parts)


def render_availability(predicate: Predicate) -> str:
    """Render a runtime availability predicate as an ``if`` condition list.

    Raises:
        ValueError: If the predicate has a shape ``#available`` cannot express.
    """
    if isinstance(predicate, VersionAtom):
        return f"#available({render_version_list(predicate)})"
    if isinstance(predicate, Not) and isinstance(predicate.operand, VersionAtom):
        return f"#unavailable({render_version_list(predicate.operand)})"
    if isinstance(predicate, AllOf):
        return ", ".join(render_availability(p) for p in predicate.operands)
    raise ValueError(f"Cannot render availability predicate: {predicate!r}")


def render_build_condition(predicate: Predicate) -> str:
    """Render a compile-time predicate as ``#if`` condition text.

    Raises:
        ValueError: If the predicate contains a runtime version check.
    """
    if isinstance(predicate, PlatformAtom):
        return f"os({predicate.platform})"
    if isinstance(predicate, FlagAtom):
        return predicate.expression
    if isinstance(predicate, AllOf):
        return " && ".join(_operand(p) for p in predicate.operands)
    if isinstance(predicate, AnyOf):
        return " || ".join(_operand(p) for p in predicate.operands)
    if isinstance(predicate, Not):
        return "!" + _operand(predicate.operand)
    raise ValueError(f"Cannot render build condition: {predicate!r}")


def _operand(predicate: Predicate) -> str:
    text = render_build_condition(predicate)
    if isinstance(predicate, (AllOf, AnyOf)) and len(predicate.operands) > 1:
        return f"({text})"
    if isinstance(predicate, FlagAtom) and " " in text:
        return f"({text})"
    return text


def guard_lines(
    body: Sequence[str],
    availability: Predicate | None = None,
    build_condition: Predicate | None = None,
    fallback: Sequence[str] | None = None,
) -> list[str]:
    """Wrap statements in guards, build condition outermost.

    Args:
        body: Statements to guard.
        availability: Runtime check, emitted as ``if #available``.
        build_condition: Compile-time check, emitted as ``#if``.
        fallback: Statements for the failing branch of each guard; omitted
            when None.

    Returns:
        The guarded statement lines.
    """
    lines = list(body)
    if availability is not None:
        guarded = [f"if {render_availability(availability)} {{", *indent_lines(lines)]
        if fallback is not None:
            guarded += ["} else {", *indent_lines(fallback)]
        lines = guarded + ["}"]
    if build_condition is not None:
        guarded = [f"#if {render_build_condition(build_condition)}", *lines]
        if fallback is not None:
            guarded += ["#else", *fallback]
        lines = guarded + ["#endif"]
    return lines
