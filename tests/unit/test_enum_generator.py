"""Unit tests for merged type generation."""

import pytest

from modsynth.core.models import GenericParameter, PlatformAtom
from modsynth.generator.enum_generator import GenerationError, MergedTypeGenerator, UnsupportedTypeError


@pytest.fixture
def generator(config) -> MergedTypeGenerator:
    return MergedTypeGenerator(config)


class TestTypeName:
    def test_capitalized_with_suffix(self, generator) -> None:
        assert generator.type_name_for("padding") == "PaddingModifier"

    def test_underscore_prefix(self, generator) -> None:
        assert generator.type_name_for("_identified") == "UnderscoreIdentifiedModifier"


class TestMerge:
    def test_empty_group(self, generator) -> None:
        with pytest.raises(GenerationError, match="no signatures"):
            generator.merge("XModifier", [])

    def test_mixed_names(self, generator, sig) -> None:
        with pytest.raises(GenerationError, match="mix operation names"):
            generator.merge("XModifier", [sig("a"), sig("b")])

    def test_unerasable_generic(self, generator, sig, param) -> None:
        signature = sig(
            "onChange",
            param("value", "V", label="of", generics=("V",)),
            generic_parameters=[GenericParameter(name="V", constraint="Equatable")],
        )
        with pytest.raises(UnsupportedTypeError) as exc_info:
            generator.merge("OnChangeModifier", [signature])
        assert "value" in exc_info.value.details

    def test_keeps_source_signature(self, generator, sig, param) -> None:
        original = sig("tint", param("tint", "some ShapeStyle"))
        merged = generator.merge("TintModifier", [original])
        assert merged.variants[0].source == original
        assert merged.variants[0].payload[0].type.path == ("AnyShapeStyle",)


class TestGenerate:
    def test_padding_group(self, generator, padding_signatures) -> None:
        code = generator.generate("PaddingModifier", padding_signatures)
        assert code.file_name == "PaddingModifier.swift"
        assert code.variant_count == 3
        source = code.source_code
        assert source.startswith("import SwiftUI\nimport SwiftSyntax\n")
        assert "public enum PaddingModifier: Sendable {" in source
        assert "    case paddingWithEdgeInsets(EdgeInsets)" in source
        assert "    case paddingWithSetCGFloatOptional(Edge.Set, CGFloat?)" in source
        assert "extension PaddingModifier: RuntimeViewModifier {" in source
        assert '    public static var baseName: String { "padding" }' in source
        assert "public init(syntax: FunctionCallExprSyntax) throws {" in source
        assert "content.padding(edges, length)" in source
        assert source.endswith("}\n")

    def test_zero_parameter_group(self, generator, sig) -> None:
        source = generator.generate("HiddenModifier", [sig("hidden")]).source_code
        assert "    case hidden\n" in source
        assert "let expectedCounts = [0]" in source
        assert "self = .hidden" in source
        assert "content.hidden()" in source

    def test_labeled_payload(self, generator, sig, param) -> None:
        signatures = [sig("overlay", param("content", "@ViewBuilder () -> some View", label="content"))]
        source = generator.generate("OverlayModifier", signatures).source_code
        assert "case overlay(content: ViewReference)" in source
        assert "case .overlay(let contentValue):" in source
        assert "content.overlay(content: { contentValue })" in source

    def test_documentation_passthrough(self, generator, sig) -> None:
        source = generator.generate("HiddenModifier", [sig("hidden", documentation="Hides the view.\n\nAlways.")]).source_code
        assert "    /// Hides the view.\n    ///\n    /// Always.\n    case hidden" in source

    def test_erased_default_text(self, generator, sig, param) -> None:
        signatures = [sig("fill", param("content", "some ShapeStyle", default=".foreground"))]
        source = generator.generate("FillModifier", signatures).source_code
        assert "?? AnyShapeStyle(.foreground)" in source

    def test_build_condition_guards_case(self, generator, sig) -> None:
        signatures = [sig("statusBarHidden", build_condition=PlatformAtom(platform="iOS"))]
        source = generator.generate("StatusBarHiddenModifier", signatures).source_code
        assert "#if os(iOS)" in source
        assert "#else" in source
        assert "#endif" in source

    def test_custom_error_type(self, sig) -> None:
        from modsynth.core.config import ModsynthConfig

        generator = MergedTypeGenerator(ModsynthConfig(_env_file=None, parse_error_type="SyntaxFailure"))
        source = generator.generate("HiddenModifier", [sig("hidden")]).source_code
        assert "throw SyntaxFailure.noMatchingVariant" in source


def test_summarize(generator, padding_signatures) -> None:
    summary = generator.summarize("PaddingModifier", padding_signatures)
    assert summary.type_name == "PaddingModifier"
    assert summary.signature_count == 3
