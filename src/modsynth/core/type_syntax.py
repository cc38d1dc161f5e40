"""Parsing, rendering, and rewriting of Swift type expressions.

Type text extracted from interface files (``@escaping () -> some SwiftUI.View``,
``[Swift.String]?``, ``Binding<V>``) is parsed with a small lark grammar into
the closed ``ParameterType`` model. All later rewrites (erasure, closure
collapsing) operate on the tree, never on the text.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator

from lark import Lark, Token, Transformer
from lark.exceptions import LarkError, VisitError

from modsynth.core.models import (
    ArrayType,
    ClosureType,
    ExistentialKind,
    ExistentialType,
    GenericRef,
    NamedType,
    OptionalType,
    ParameterType,
)

_GRAMMAR = r"""
?type: ATTRIBUTE type                     -> attributed
     | function_type
     | postfix_type

function_type: tuple_like EFFECT* "->" type

?postfix_type: primary_type
     | postfix_type "?"                   -> optional
     | postfix_type "!"                   -> optional

?primary_type: qualified
     | existential
     | "[" type "]"                       -> array
     | "[" type ":" type "]"              -> dictionary
     | tuple_like                         -> parenthesized

existential: EXISTENTIAL qualified
qualified: component ("." component)*
component: NAME generic_args?
generic_args: "<" type ("," type)* ">"
tuple_like: "(" (element ("," element)*)? ")"
element: (NAME NAME? ":")? type

ATTRIBUTE: /@[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*/
EXISTENTIAL.2: /(some|any)(?=\s)/
EFFECT.2: /(async|rethrows|throws)(?![A-Za-z0-9_])/
NAME: /[A-Za-z_][A-Za-z0-9_]*/

%import common.WS
%ignore WS
"""

_PARSER = Lark(_GRAMMAR, parser="earley", lexer="basic", start="type")


class TypeSyntaxError(Exception):
    """Type text could not be parsed into the supported type grammar."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class _TupleElements(list):
    """Elements of a parenthesized list, before deciding tuple vs. closure params."""


class _TypeBuilder(Transformer):
    """Turn a lark parse tree into ParameterType nodes."""

    def attributed(self, children: list) -> ParameterType:
        attribute, inner = children
        if isinstance(inner, ClosureType):
            return ClosureType(
                parameters=inner.parameters,
                returns=inner.returns,
                attributes=(str(attribute),) + inner.attributes,
                effects=inner.effects,
            )
        # Attributes on non-function types carry no meaning for payloads
        return inner

    def function_type(self, children: list) -> ClosureType:
        elements = children[0]
        effects = tuple(str(c) for c in children[1:-1] if isinstance(c, Token))
        return ClosureType(parameters=tuple(elements), returns=children[-1], effects=effects)

    def optional(self, children: list) -> OptionalType:
        return OptionalType(inner=children[0])

    def array(self, children: list) -> ArrayType:
        return ArrayType(element=children[0])

    def dictionary(self, children: list) -> NamedType:
        return NamedType(path=("Dictionary",), arguments=(children[0], children[1]))

    def parenthesized(self, children: list) -> ParameterType:
        elements = children[0]
        if not elements:
            return NamedType.of("Void")
        if len(elements) > 1:
            raise TypeSyntaxError("Tuple types are not supported", details=f"{len(elements)} elements")
        return elements[0]

    def existential(self, children: list) -> ExistentialType:
        keyword, constraint = children
        return ExistentialType(existential=ExistentialKind(str(keyword)), constraint=constraint)

    def qualified(self, children: list) -> NamedType:
        path = tuple(name for name, _ in children)
        if any(arguments for _, arguments in children[:-1]):
            raise TypeSyntaxError("Generic arguments on nested path components are not supported")
        return NamedType(path=path, arguments=children[-1][1])

    def component(self, children: list) -> tuple[str, tuple]:
        name = str(children[0])
        arguments = children[1] if len(children) > 1 else ()
        return name, arguments

    def generic_args(self, children: list) -> tuple:
        return tuple(children)

    def tuple_like(self, children: list) -> _TupleElements:
        return _TupleElements(children)

    def element(self, children: list) -> ParameterType:
        # Labels inside function-type parameter lists are dropped
        return children[-1]


def parse_type(text: str, generic_names: Iterable[str] = ()) -> ParameterType:
    """Parse Swift type text.

    Args:
        text: Type text, e.g. ``@escaping () -> some SwiftUI.View``.
        generic_names: Generic parameter names in scope; bare references to
            them become ``GenericRef`` nodes.

    Returns:
        The parsed type.

    Raises:
        TypeSyntaxError: If the text is outside the supported grammar.
    """
    try:
        tree = _PARSER.parse(text.strip())
        parsed = _TypeBuilder().transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, TypeSyntaxError):
            raise TypeSyntaxError(e.orig_exc.message, details=text) from e
        raise TypeSyntaxError("Failed to build type", details=f"{text}: {e.orig_exc}") from e
    except LarkError as e:
        raise TypeSyntaxError(f"Unsupported type syntax: {text!r}", details=str(e)) from e

    names = frozenset(generic_names)
    if not names:
        return parsed
    return rewrite_type(parsed, lambda node: _as_generic_ref(node, names))


def _as_generic_ref(node: ParameterType, names: frozenset[str]) -> ParameterType | None:
    if (
        isinstance(node, NamedType)
        and len(node.path) == 1
        and not node.arguments
        and node.path[0] in names
    ):
        return GenericRef(name=node.path[0])
    return None


def render_type(node: ParameterType, include_attributes: bool = True) -> str:
    """Render a type back to Swift source text."""
    if isinstance(node, NamedType):
        if node.path == ("Dictionary",) and len(node.arguments) == 2:
            key, value = node.arguments
            return f"[{render_type(key, include_attributes)}: {render_type(value, include_attributes)}]"
        text = ".".join(node.path)
        if node.arguments:
            text += "<" + ", ".join(render_type(a, include_attributes) for a in node.arguments) + ">"
        return text
    if isinstance(node, OptionalType):
        inner = render_type(node.inner, include_attributes)
        if isinstance(node.inner, (ClosureType, ExistentialType)):
            return f"({inner})?"
        return f"{inner}?"
    if isinstance(node, ArrayType):
        return f"[{render_type(node.element, include_attributes)}]"
    if isinstance(node, ClosureType):
        params = ", ".join(render_type(p, include_attributes) for p in node.parameters)
        parts = []
        if include_attributes:
            parts.extend(node.attributes)
        parts.append(f"({params})")
        parts.extend(node.effects)
        parts.append("->")
        parts.append(render_type(node.returns, include_attributes))
        return " ".join(parts)
    if isinstance(node, ExistentialType):
        return f"{node.existential.value} {render_type(node.constraint)}"
    if isinstance(node, GenericRef):
        return node.name
    raise TypeError(f"Unknown type node: {node!r}")


def rewrite_type(
    node: ParameterType, replace: Callable[[ParameterType], ParameterType | None]
) -> ParameterType:
    """Rewrite a type tree top-down.

    ``replace`` is offered every node; a non-None result replaces the node and
    its subtree is not visited further. Structural nodes are rebuilt only when a
    child changed, so an untouched tree is returned as the same object.
    """
    replacement = replace(node)
    if replacement is not None:
        return replacement

    if isinstance(node, NamedType):
        arguments = tuple(rewrite_type(a, replace) for a in node.arguments)
        if arguments == node.arguments:
            return node
        return NamedType(path=node.path, arguments=arguments)
    if isinstance(node, OptionalType):
        inner = rewrite_type(node.inner, replace)
        return node if inner == node.inner else OptionalType(inner=inner)
    if isinstance(node, ArrayType):
        element = rewrite_type(node.element, replace)
        return node if element == node.element else ArrayType(element=element)
    if isinstance(node, ClosureType):
        parameters = tuple(rewrite_type(p, replace) for p in node.parameters)
        returns = rewrite_type(node.returns, replace)
        if parameters == node.parameters and returns == node.returns:
            return node
        return ClosureType(
            parameters=parameters,
            returns=returns,
            attributes=node.attributes,
            effects=node.effects,
        )
    return node


def iter_type_nodes(node: ParameterType) -> Iterator[ParameterType]:
    """Yield every node of a type tree, pre-order."""
    yield node
    if isinstance(node, NamedType):
        for argument in node.arguments:
            yield from iter_type_nodes(argument)
    elif isinstance(node, OptionalType):
        yield from iter_type_nodes(node.inner)
    elif isinstance(node, ArrayType):
        yield from iter_type_nodes(node.element)
    elif isinstance(node, ClosureType):
        for parameter in node.parameters:
            yield from iter_type_nodes(parameter)
        yield from iter_type_nodes(node.returns)
    elif isinstance(node, ExistentialType):
        yield node.constraint


def contains_generic(node: ParameterType) -> bool:
    """True if any GenericRef remains in the tree."""
    return any(isinstance(n, GenericRef) for n in iter_type_nodes(node))


def strip_optional(node: ParameterType) -> ParameterType:
    """``T?`` -> ``T``; other types unchanged."""
    return node.inner if isinstance(node, OptionalType) else node
