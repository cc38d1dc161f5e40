"""Call-site model used to exercise resolution plans from Python.

A ``CallSite`` is the ordered, optionally labeled argument list of one modifier
call, mirroring the ``ModifierArguments`` accessor of the generated code. A
``TypeOracle`` stands in for the generated ``T(syntax:)`` initializers: it
decides whether an argument expression parses as a given type.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from modsynth.core.models import (
    ArrayType,
    ClosureType,
    ExistentialType,
    GenericRef,
    NamedType,
    OptionalType,
    ParameterType,
)


class CallSyntaxError(Exception):
    """A call expression could not be split into arguments."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


@dataclass(frozen=True)
class Argument:
    """One call argument: optional label plus unevaluated expression text."""

    expression: str
    label: str | None = None


@dataclass(frozen=True)
class CallSite:
    """Arguments of one call. A trailing closure counts as a final unlabeled argument."""

    arguments: tuple[Argument, ...] = ()
    trailing_closure: str | None = None

    @property
    def all_arguments(self) -> tuple[Argument, ...]:
        if self.trailing_closure is None:
            return self.arguments
        return self.arguments + (Argument(self.trailing_closure),)

    @property
    def count(self) -> int:
        return len(self.all_arguments)

    @property
    def labels(self) -> frozenset[str]:
        return frozenset(a.label for a in self.arguments if a.label is not None)

    @property
    def first_label(self) -> str | None:
        arguments = self.all_arguments
        return arguments[0].label if arguments else None

    def accepts(self, labels: frozenset[str]) -> bool:
        """True if every label used at the call is one of ``labels``."""
        return self.labels <= labels

    def expression(self, named: str) -> str | None:
        for argument in self.arguments:
            if argument.label == named:
                return argument.expression
        return None

    def unlabeled(self, at: int) -> str | None:
        unlabeled = [a.expression for a in self.all_arguments if a.label is None]
        return unlabeled[at] if 0 <= at < len(unlabeled) else None

    @classmethod
    def of(cls, *positional: str, trailing_closure: str | None = None, **labeled: str) -> CallSite:
        """Build a call site; positional arguments come first, then labeled ones."""
        arguments = tuple(Argument(e) for e in positional)
        arguments += tuple(Argument(e, label) for label, e in labeled.items())
        return cls(arguments=arguments, trailing_closure=trailing_closure)


_CALL_RE = re.compile(r"^\s*\.?([A-Za-z_][A-Za-z0-9_]*)\s*([({].*)$", re.DOTALL)
_LABEL_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\s*:(?!:)\s*(.+)$", re.DOTALL)
_OPENERS = {"(": ")", "[": "]", "{": "}"}


def _split_top_level(text: str, separator: str = ",") -> list[str]:
    parts: list[str] = []
    depth = 0
    in_string = False
    current: list[str] = []
    previous = ""
    for char in text:
        if in_string:
            current.append(char)
            if char == '"' and previous != "\\":
                in_string = False
        elif char == '"':
            in_string = True
            current.append(char)
        elif char in _OPENERS:
            depth += 1
            current.append(char)
        elif char in _OPENERS.values():
            depth -= 1
            current.append(char)
        elif char == separator and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
        previous = char
    if depth != 0 or in_string:
        raise CallSyntaxError("Unbalanced brackets or quotes in call", details=text)
    parts.append("".join(current))
    return parts


def _matching_paren(text: str) -> int:
    """Index of the ``)`` closing an argument list that opened before ``text``."""
    depth = 1
    in_string = False
    previous = ""
    for index, char in enumerate(text):
        if in_string:
            if char == '"' and previous != "\\":
                in_string = False
        elif char == '"':
            in_string = True
        elif char in _OPENERS:
            depth += 1
        elif char in _OPENERS.values():
            depth -= 1
            if depth == 0:
                return index
        previous = char
    raise CallSyntaxError("Missing closing parenthesis", details=text)


def parse_call(text: str) -> tuple[str, CallSite]:
    """Split ``padding(.top, 8)``, ``overlay(alignment: .top) { Text("x") }`` or ``overlay { Text("x") }``.

    Returns:
        The operation name and the call site.

    Raises:
        CallSyntaxError: If the text is not a single call expression.
    """
    match = _CALL_RE.match(text)
    if match is None:
        raise CallSyntaxError("Expected a call expression such as 'padding(8)'", details=text)
    name, rest = match.groups()
    if rest.startswith("{"):
        inner, tail = "", rest.strip()
    else:
        close = _matching_paren(rest[1:]) + 1
        inner, tail = rest[1:close], rest[close + 1 :].strip()

    trailing = None
    if tail:
        if not (tail.startswith("{") and tail.endswith("}")):
            raise CallSyntaxError("Unexpected text after argument list", details=tail)
        trailing = tail

    arguments = []
    if inner.strip():
        for part in _split_top_level(inner):
            part = part.strip()
            if not part:
                raise CallSyntaxError("Empty argument", details=text)
            labeled = _LABEL_RE.match(part)
            if labeled:
                arguments.append(Argument(labeled.group(2).strip(), labeled.group(1)))
            else:
                arguments.append(Argument(part))
    return name, CallSite(arguments=tuple(arguments), trailing_closure=trailing)


class TypeOracle(ABC):
    """Decides whether an argument expression parses as a target type."""

    @abstractmethod
    def parses(self, expression: str, target: ParameterType) -> bool:
        """Return True if ``expression`` is a valid value of ``target``."""


class AcceptingOracle(TypeOracle):
    """Oracle that accepts every expression."""

    def parses(self, expression: str, target: ParameterType) -> bool:
        return True


_FLOAT_RE = re.compile(r"^-?(\d+(\.\d+)?|\.\d+)([eE][-+]?\d+)?$")
_INT_RE = re.compile(r"^-?\d+$")
_STRING_RE = re.compile(r'^".*"$', re.DOTALL)

FLOATING_TYPES = frozenset({"Float", "Double", "CGFloat"})
INTEGER_TYPES = frozenset({"Int", "Int8", "Int16", "Int32", "Int64", "UInt", "UInt8", "UInt16", "UInt32", "UInt64"})
STRING_TYPES = frozenset({"String", "LocalizedStringKey", "Text", "StringProtocol", "Substring"})


@dataclass
class LiteralTypeOracle(TypeOracle):
    """Heuristic oracle judging expressions by their literal shape.

    Numeric, string and boolean literals parse only as matching standard
    types; closure literals parse as closures and opaque references; other
    expressions (implicit members, initializer calls, identifiers) parse as
    any non-literal type.
    """

    opaque_reference_type: str = "ViewReference"
    closure_types: frozenset[str] = field(default_factory=frozenset)

    def parses(self, expression: str, target: ParameterType) -> bool:
        expression = expression.strip()
        if isinstance(target, OptionalType):
            return expression == "nil" or self.parses(expression, target.inner)
        if isinstance(target, ArrayType):
            return expression.startswith("[") and not self._is_dictionary(expression)
        if isinstance(target, ClosureType):
            return expression.startswith("{")
        if isinstance(target, ExistentialType):
            return not self._is_literal(expression)
        if isinstance(target, GenericRef):
            return True
        return self._parses_named(expression, target)

    def _parses_named(self, expression: str, target: NamedType) -> bool:
        name = target.simple_name
        if target.path == (self.opaque_reference_type,) or name in self.closure_types:
            return expression.startswith("{")
        if name == "Dictionary":
            return self._is_dictionary(expression)
        if name in FLOATING_TYPES:
            return bool(_FLOAT_RE.match(expression)) or self._is_reference(expression, name)
        if name in INTEGER_TYPES:
            return bool(_INT_RE.match(expression)) or self._is_reference(expression, name)
        if name == "Bool":
            return expression in ("true", "false") or expression.startswith("!") or self._is_reference(expression, name)
        if name in STRING_TYPES:
            return bool(_STRING_RE.match(expression)) or self._is_reference(expression, name)
        if name.startswith("Binding"):
            return expression.startswith("$") or expression.startswith(".constant(")
        return not self._is_literal(expression)

    def _is_reference(self, expression: str, type_name: str) -> bool:
        """Initializer or member of the type, or a plain identifier."""
        if expression.startswith(type_name + "(") or expression.startswith(type_name + "."):
            return True
        if expression.startswith("."):
            return not _FLOAT_RE.match(expression)
        return expression.isidentifier() and expression not in ("true", "false", "nil")

    def _is_literal(self, expression: str) -> bool:
        return (
            bool(_FLOAT_RE.match(expression))
            or bool(_STRING_RE.match(expression))
            or expression in ("true", "false", "nil")
            or expression.startswith("{")
            or expression.startswith("[")
        )

    @staticmethod
    def _is_dictionary(expression: str) -> bool:
        if not (expression.startswith("[") and expression.endswith("]")):
            return False
        inner = expression[1:-1].strip()
        if inner == ":":
            return True
        try:
            first = _split_top_level(inner)[0]
        except CallSyntaxError:
            return False
        return ":" in _strip_strings(first)


def _strip_strings(text: str) -> str:
    return re.sub(r'"(\\.|[^"\\])*"', '""', text)
