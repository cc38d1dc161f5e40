"""Unit tests for the signature transformer."""

from modsynth.core.models import GenericParameter, NamedType, OptionalType
from modsynth.core.type_syntax import render_type
from modsynth.generator.transformer import SignatureTransformer, find_unresolved_generics

VIEW_REFERENCE = NamedType.of("ViewReference")


def _generic_sig(sig, param, name, type_text, constraint, **kwargs):
    return sig(
        name,
        param("value", type_text, generics=("T",), **kwargs),
        generic_parameters=[GenericParameter(name="T", constraint=constraint)],
    )


class TestGenericErasure:
    def test_view_constraint(self, sig, param) -> None:
        transformed = SignatureTransformer().transform(_generic_sig(sig, param, "overlay", "T", "View"))
        assert transformed.parameters[0].type == NamedType.of("AnyView")

    def test_nested_generic(self, sig, param) -> None:
        transformed = SignatureTransformer().transform(_generic_sig(sig, param, "tags", "[T]?", "Hashable"))
        assert render_type(transformed.parameters[0].type) == "[AnyHashable]?"

    def test_unconstrained_generic_is_unresolved(self, sig, param) -> None:
        transformed = SignatureTransformer().transform(_generic_sig(sig, param, "onChange", "T", None))
        assert find_unresolved_generics(transformed) == ["value"]

    def test_unknown_constraint_is_unresolved(self, sig, param) -> None:
        transformed = SignatureTransformer().transform(_generic_sig(sig, param, "onChange", "T", "Equatable"))
        assert find_unresolved_generics(transformed) == ["value"]

    def test_generic_default_is_wrapped(self, sig, param) -> None:
        signature = _generic_sig(sig, param, "fill", "T", "ShapeStyle", default=".red")
        transformed = SignatureTransformer().transform(signature)
        assert transformed.parameters[0].default_value == "AnyShapeStyle(.red)"


class TestExistentialErasure:
    def test_inline_existential(self, sig, param) -> None:
        transformed = SignatureTransformer().transform(sig("tint", param("tint", "some ShapeStyle")))
        assert transformed.parameters[0].type == NamedType.of("AnyShapeStyle")

    def test_existential_default_is_wrapped(self, sig, param) -> None:
        signature = sig("fill", param("content", "some ShapeStyle", label="style", default=".center"))
        transformed = SignatureTransformer().transform(signature)
        assert transformed.parameters[0].default_value == "AnyShapeStyle(.center)"

    def test_optional_existential_nil_default_unchanged(self, sig, param) -> None:
        signature = sig("tint", param("tint", "(some ShapeStyle)?", default="nil"))
        transformed = SignatureTransformer().transform(signature)
        assert transformed.parameters[0].type == OptionalType(inner=NamedType.of("AnyShapeStyle"))
        assert transformed.parameters[0].default_value == "nil"

    def test_unchanged_default_is_not_wrapped(self, sig, param) -> None:
        signature = sig("frame", param("alignment", "Alignment", label="alignment", default=".center"))
        transformed = SignatureTransformer().transform(signature)
        assert transformed.parameters[0].default_value == ".center"


class TestViewClosures:
    def test_some_view_closure(self, sig, param) -> None:
        signature = sig("overlay", param("content", "@ViewBuilder () -> some View", label="content"))
        transformed = SignatureTransformer().transform(signature)
        assert transformed.parameters[0].type == VIEW_REFERENCE

    def test_generic_view_closure(self, sig, param) -> None:
        signature = _generic_sig(sig, param, "overlay", "@escaping () -> T", "SwiftUI.View")
        transformed = SignatureTransformer().transform(signature)
        assert transformed.parameters[0].type == VIEW_REFERENCE

    def test_optional_view_closure(self, sig, param) -> None:
        signature = sig("toolbar", param("content", "(() -> AnyView)?", default="nil"))
        transformed = SignatureTransformer().transform(signature)
        assert transformed.parameters[0].type == OptionalType(inner=VIEW_REFERENCE)
        assert transformed.parameters[0].default_value == "nil"

    def test_non_view_closure_is_kept(self, sig, param) -> None:
        signature = sig("onTapGesture", param("action", "@escaping () -> Void", label="perform"))
        transformed = SignatureTransformer().transform(signature)
        assert transformed.parameters[0] == signature.parameters[0]

    def test_custom_opaque_name(self, sig, param) -> None:
        signature = sig("overlay", param("content", "() -> some View"))
        transformed = SignatureTransformer(opaque_reference_type="AnyViewBox").transform(signature)
        assert transformed.parameters[0].type == NamedType.of("AnyViewBox")


def test_transform_is_idempotent(sig, param) -> None:
    signature = sig(
        "background",
        param("style", "some ShapeStyle", default=".blue"),
        param("content", "() -> some View", label="content"),
    )
    transformer = SignatureTransformer()
    once = transformer.transform(signature)
    assert transformer.transform(once) == once


def test_signature_metadata_preserved(sig, param) -> None:
    signature = sig("tint", param("tint", "some ShapeStyle"), documentation="Tints the view.")
    transformed = SignatureTransformer().transform(signature)
    assert transformed.documentation == "Tints the view."
    assert transformed.name == "tint"
