"""Parsing of individual interface declarations.

Turns one function header (``public func padding(_ length: CGFloat) -> some View``),
its ``@available`` attributes, and enclosing ``#if`` conditions into an
``OperationSignature``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from lark import Lark, Transformer
from lark.exceptions import LarkError

from modsynth.adapters.swiftinterface._text import find_matching, find_top_level, split_top_level
from modsynth.core.models import (
    AllOf,
    AnyOf,
    FlagAtom,
    GenericParameter,
    Not,
    OperationSignature,
    Parameter,
    PlatformAtom,
    PlatformVersion,
    Predicate,
    VersionAtom,
)
from modsynth.core.type_syntax import TypeSyntaxError, parse_type

RUNTIME_PLATFORMS = frozenset({"iOS", "macOS", "tvOS", "watchOS", "visionOS", "macCatalyst"})

_FUNC_RE = re.compile(r"\bfunc\s+(`?)([A-Za-z_][A-Za-z0-9_]*)\1")
_OWNERSHIP_RE = re.compile(r"\b(?:__owned|__shared|borrowing|consuming|sending)\s+")
_VERSION_RE = re.compile(r"^(\d+(?:\.\d+)*)$")


class DeclarationError(Exception):
    """A declaration could not be parsed."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


# ---------------------------------------------------------------------------
# Function headers
# ---------------------------------------------------------------------------


def declaration_modifiers(header: str) -> list[str]:
    """Words between the attributes and ``func``, e.g. ``["nonisolated", "public"]``."""
    match = _FUNC_RE.search(header)
    if match is None:
        return []
    prefix = header[: match.start()]
    return [w for w in prefix.split() if not w.startswith("@") and w.isidentifier()]


def parse_declaration(
    header: str,
    documentation: str | None = None,
    availability: Predicate | None = None,
    build_condition: Predicate | None = None,
) -> OperationSignature:
    """Parse a function header into a signature.

    Args:
        header: Declaration text from ``func`` (attributes and modifiers may
            precede it) up to, not including, any body.
        documentation: Doc comment text without ``///`` markers.
        availability: Runtime availability predicate.
        build_condition: Compile-time condition from enclosing ``#if`` blocks.

    Raises:
        DeclarationError: If the header is not a supported function declaration.
    """
    match = _FUNC_RE.search(header)
    if match is None:
        raise DeclarationError("Not a function declaration", details=header)
    name = match.group(2)
    rest = header[match.end() :].strip()

    generics: list[GenericParameter] = []
    if rest.startswith("<"):
        close = find_matching(rest, 0)
        if close < 0:
            raise DeclarationError("Unterminated generic clause", details=header)
        generics = _parse_generic_clause(rest[1:close])
        rest = rest[close + 1 :].strip()

    if not rest.startswith("("):
        raise DeclarationError("Missing parameter list", details=header)
    close = find_matching(rest, 0)
    if close < 0:
        raise DeclarationError("Unterminated parameter list", details=header)
    parameter_text = rest[1:close]
    rest = rest[close + 1 :].strip()

    where_index = find_top_level(rest, "where ")
    where_text = ""
    if where_index >= 0:
        where_text = rest[where_index + len("where ") :]
        rest = rest[:where_index].strip()
    generics = _apply_where_clause(generics, where_text)

    arrow = find_top_level(rest, "->")
    return_text = rest[arrow + 2 :].strip() if arrow >= 0 else "Void"

    generic_names = [g.name for g in generics]
    try:
        parameters = [
            _parse_parameter(p, generic_names) for p in split_top_level(parameter_text, ",") if p.strip()
        ]
        return_type = parse_type(_OWNERSHIP_RE.sub("", return_text), generic_names)
    except TypeSyntaxError as e:
        raise DeclarationError(f"{name}: {e.message}", details=e.details) from e

    return OperationSignature(
        name=name,
        parameters=parameters,
        return_type=return_type,
        availability=availability,
        build_condition=build_condition,
        generic_parameters=generics,
        documentation=documentation,
    )


def _parse_generic_clause(text: str) -> list[GenericParameter]:
    generics = []
    for item in split_top_level(text, ","):
        item = item.strip()
        if not item:
            continue
        if item.startswith("each "):
            raise DeclarationError("Parameter packs are not supported", details=item)
        name, _, constraint = item.partition(":")
        generics.append(GenericParameter(name=name.strip(), constraint=constraint.strip() or None))
    return generics


def _apply_where_clause(generics: list[GenericParameter], where_text: str) -> list[GenericParameter]:
    """Override inline constraints with ``where`` requirements on the same name."""
    if not where_text.strip():
        return generics
    overrides: dict[str, str] = {}
    for requirement in split_top_level(where_text, ","):
        requirement = requirement.strip()
        if "==" in requirement:
            left, _, right = requirement.partition("==")
        else:
            left, _, right = requirement.partition(":")
        if right.strip():
            overrides[left.strip()] = right.strip()
    return [
        GenericParameter(name=g.name, constraint=overrides.get(g.name, g.constraint)) for g in generics
    ]


def _split_default(text: str) -> tuple[str, str | None]:
    """Split ``Type = default`` on the first top-level assignment ``=``."""
    index = 0
    while True:
        index = find_top_level(text, "=", index)
        if index < 0:
            return text, None
        before = text[index - 1] if index > 0 else ""
        after = text[index + 1] if index + 1 < len(text) else ""
        if before not in "=!<>" and after != "=":
            return text[:index], text[index + 1 :].strip()
        index += 2


def _parse_parameter(text: str, generic_names: list[str]) -> Parameter:
    colon = find_top_level(text, ":")
    if colon < 0:
        raise DeclarationError("Parameter without type", details=text.strip())
    names_part, type_part = text[:colon], text[colon + 1 :]

    words = names_part.split()
    attributes = [w for w in words if w.startswith("@")]
    names = [w for w in words if not w.startswith("@")]
    if not names or len(names) > 2:
        raise DeclarationError("Unexpected parameter names", details=text.strip())
    first = names[0].strip("`")
    second = names[-1].strip("`")
    label = None if first == "_" else first

    type_text, default_value = _split_default(type_part)
    type_text = _OWNERSHIP_RE.sub("", type_text.strip())
    if type_text.startswith("inout "):
        raise DeclarationError("inout parameters are not supported", details=text.strip())
    if attributes:
        type_text = " ".join(attributes) + " " + type_text

    return Parameter(
        label=label,
        name=second,
        type=parse_type(type_text, generic_names),
        has_default=default_value is not None,
        default_value=default_value,
    )


# ---------------------------------------------------------------------------
# @available attributes
# ---------------------------------------------------------------------------


@dataclass
class AvailabilityInfo:
    """Facts gathered from one ``@available`` attribute."""

    introduced: list[PlatformVersion] = field(default_factory=list)
    unavailable: list[str] = field(default_factory=list)


def parse_availability(attribute: str) -> AvailabilityInfo:
    """Parse ``@available(...)`` in shorthand or long form.

    Shorthand ``@available(iOS 15.0, macOS 12.0, *)`` lists introductions.
    Long form ``@available(iOS, introduced: 15.0, deprecated: ...)`` gives one
    platform; ``@available(tvOS, unavailable)`` marks it unavailable. Non-runtime
    platforms (``*``, application extensions, ``swift``) are ignored.
    """
    text = attribute.strip()
    start = text.find("(")
    end = text.rfind(")")
    info = AvailabilityInfo()
    if start < 0 or end < start:
        return info
    items = [i.strip() for i in split_top_level(text[start + 1 : end], ",") if i.strip()]
    if not items:
        return info

    head = items[0].split()
    if len(head) == 1 and len(items) > 1 and not _VERSION_RE.match(items[1]):
        platform = head[0]
        if platform not in RUNTIME_PLATFORMS:
            return info
        for item in items[1:]:
            key, _, value = item.partition(":")
            key, value = key.strip(), value.strip()
            if key == "unavailable":
                info.unavailable.append(platform)
            elif key == "introduced" and _VERSION_RE.match(value):
                info.introduced.append(PlatformVersion(platform=platform, version=value))
        return info

    for item in items:
        parts = item.split()
        if len(parts) == 2 and parts[0] in RUNTIME_PLATFORMS and _VERSION_RE.match(parts[1]):
            info.introduced.append(PlatformVersion(platform=parts[0], version=parts[1]))
    return info


def combine_availability(infos: list[AvailabilityInfo]) -> tuple[Predicate | None, Predicate | None]:
    """Fold several attributes into (runtime availability, compile-time exclusion)."""
    introduced: dict[str, PlatformVersion] = {}
    unavailable: list[str] = []
    for info in infos:
        for requirement in info.introduced:
            introduced.setdefault(requirement.platform, requirement)
        for platform in info.unavailable:
            if platform not in unavailable:
                unavailable.append(platform)

    availability = VersionAtom(requirements=tuple(introduced.values())) if introduced else None
    exclusion: Predicate | None = None
    if unavailable:
        negated = tuple(Not(operand=PlatformAtom(platform=p)) for p in unavailable)
        exclusion = negated[0] if len(negated) == 1 else AllOf(operands=negated)
    return availability, exclusion


# ---------------------------------------------------------------------------
# #if conditions
# ---------------------------------------------------------------------------

_CONDITION_GRAMMAR = r"""
?start: or_expr
?or_expr: and_expr
    | or_expr "||" and_expr      -> any_of
?and_expr: unary
    | and_expr "&&" unary        -> all_of
?unary: "!" unary                -> negate
    | atom
?atom: PLATFORM_TEST             -> platform
    | FLAG                       -> flag
    | "(" or_expr ")"

PLATFORM_TEST.3: /os\(\s*[A-Za-z]+\s*\)/
FLAG: /[A-Za-z_$][A-Za-z0-9_]*(\([^()]*\))?/

%import common.WS
%ignore WS
"""


class _ConditionBuilder(Transformer):
    def any_of(self, children: list) -> AnyOf:
        left, right = children
        operands = left.operands if isinstance(left, AnyOf) else (left,)
        return AnyOf(operands=operands + (right,))

    def all_of(self, children: list) -> AllOf:
        left, right = children
        operands = left.operands if isinstance(left, AllOf) else (left,)
        return AllOf(operands=operands + (right,))

    def negate(self, children: list) -> Not:
        return Not(operand=children[0])

    def platform(self, children: list) -> PlatformAtom:
        text = str(children[0])
        return PlatformAtom(platform=text[text.index("(") + 1 : text.rindex(")")].strip())

    def flag(self, children: list) -> FlagAtom:
        return FlagAtom(expression=str(children[0]))


_CONDITION_PARSER = Lark(_CONDITION_GRAMMAR, parser="lalr")


def parse_build_condition(text: str) -> Predicate:
    """Parse the condition of an ``#if``/``#elseif`` directive.

    Raises:
        DeclarationError: If the condition text is malformed.
    """
    try:
        return _ConditionBuilder().transform(_CONDITION_PARSER.parse(text.strip()))
    except LarkError as e:
        raise DeclarationError(f"Unsupported build condition: {text.strip()!r}", details=str(e)) from e
