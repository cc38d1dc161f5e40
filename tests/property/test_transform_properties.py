"""Property-based tests for signature erasure."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from modsynth.core.models import GenericParameter, OperationSignature, Parameter
from modsynth.core.type_syntax import contains_generic, parse_type
from modsynth.generator.transformer import SignatureTransformer

pytestmark = pytest.mark.property

ERASABLE_CONSTRAINTS = ["View", "SwiftUI.ShapeStyle", "Swift.Hashable", "SwiftUI.Shape", "ButtonStyle"]

PLAIN_TYPES = ["CGFloat", "Edge.Set?", "[String]", "some ShapeStyle", "any Shape", "@escaping () -> Void"]
GENERIC_TYPES = ["T", "T?", "[T]", "Binding<T>", "@escaping () -> T", "(() -> T)?"]


@st.composite
def signatures(draw) -> OperationSignature:
    constraint = draw(st.sampled_from(ERASABLE_CONSTRAINTS))
    type_texts = draw(st.lists(st.sampled_from(PLAIN_TYPES + GENERIC_TYPES), min_size=1, max_size=4))
    has_defaults = draw(st.lists(st.booleans(), min_size=len(type_texts), max_size=len(type_texts)))
    parameters = [
        Parameter(
            name=f"p{i}",
            type=parse_type(text, ["T"]),
            has_default=default,
            default_value=".init()" if default else None,
        )
        for i, (text, default) in enumerate(zip(type_texts, has_defaults))
    ]
    return OperationSignature(
        name="modifier",
        parameters=parameters,
        return_type=parse_type("some View"),
        generic_parameters=[GenericParameter(name="T", constraint=constraint)],
    )


@given(signatures())
def test_transform_is_idempotent(signature: OperationSignature) -> None:
    transformer = SignatureTransformer()
    once = transformer.transform(signature)
    assert transformer.transform(once) == once


@given(signatures())
def test_erasable_generics_are_removed(signature: OperationSignature) -> None:
    transformed = SignatureTransformer().transform(signature)
    assert not any(contains_generic(p.type) for p in transformed.parameters)


@given(signatures())
def test_labels_names_and_arity_preserved(signature: OperationSignature) -> None:
    transformed = SignatureTransformer().transform(signature)
    assert [(p.label, p.name, p.has_default) for p in transformed.parameters] == [
        (p.label, p.name, p.has_default) for p in signature.parameters
    ]
