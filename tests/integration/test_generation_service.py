"""Integration tests for GenerationService over the sample interface."""

import pytest

from modsynth.adapters import SwiftInterfaceAdapter
from modsynth.generator import Environment, GenerationError, NoMatchingVariant
from modsynth.services import GenerationService


@pytest.fixture
def extracted(sample_interface):
    adapter = SwiftInterfaceAdapter()
    return adapter.extract(sample_interface), adapter.discover_styles(sample_interface)


@pytest.fixture
def service(config):
    return GenerationService(config)


class TestRun:
    def test_groups_and_failures(self, service, extracted) -> None:
        signatures, styles = extracted
        run = service.run(signatures, styles=styles)

        assert [g.operation_name for g in run.groups] == sorted(
            ["padding", "overlay", "background", "onChange", "hidden", "buttonStyle",
             "statusBarHidden", "navigationBarTitle"]
        )
        assert run.skipped == ["_identified"]
        assert not run.success
        assert len(run.errors) == 1
        assert run.errors[0].startswith("onChange:")
        assert sum(1 for g in run.groups if g.success) == 7

    def test_generated_files(self, service, extracted) -> None:
        signatures, styles = extracted
        run = service.run(signatures, styles=styles)
        names = [c.file_name for c in run.generated]
        assert names[0] == "ModifierParseError.swift"
        assert len(names) == 8
        assert "PaddingModifier.swift" in names
        assert "OnChangeModifier.swift" not in names

    def test_padding_source(self, service, extracted) -> None:
        signatures, styles = extracted
        run = service.run(signatures, styles=styles)
        padding = next(g for g in run.groups if g.operation_name == "padding")
        assert padding.signature_count == 3
        assert padding.code.variant_count == 3
        source = padding.code.source_code
        for name in ("paddingWithEdgeInsets", "paddingWithSetCGFloatOptional", "paddingWithCGFloat"):
            assert f"case {name}" in source

    def test_include_underscored(self, service, extracted) -> None:
        signatures, styles = extracted
        run = service.run(signatures, styles=styles, include_underscored=True)
        assert run.skipped == []
        identified = next(g for g in run.groups if g.operation_name == "_identified")
        assert identified.success

    def test_summaries(self, service, extracted) -> None:
        signatures, styles = extracted
        run = service.run(signatures, styles=styles)
        assert len(run.summaries) == 7

    def test_empty_input(self, service) -> None:
        run = service.run([])
        assert run.groups == []
        assert run.success
        assert [c.file_name for c in run.generated] == ["ModifierParseError.swift"]

    def test_style_erasers_follow_discovery(self, service, extracted) -> None:
        signatures, _ = extracted
        # Without discovered ButtonStyle cases the union has nothing to hold
        run = service.run(signatures, styles={"PrimitiveButtonStyle": set()})
        button_style = next(g for g in run.groups if g.operation_name == "buttonStyle")
        assert not button_style.success


class TestResolve:
    def test_padding_with_length(self, service, extracted) -> None:
        signatures, styles = extracted
        result = service.resolve(signatures, "padding(8)", styles=styles)
        assert result.type_name == "PaddingModifier"
        assert result.variant_name == "paddingWithCGFloat"
        assert result.forwarded == "content.padding(8)"

    def test_background_fills_defaults(self, service, extracted) -> None:
        signatures, styles = extracted
        result = service.resolve(signatures, "background(.red)", styles=styles)
        assert result.variant_name == "backgroundWithAnyShapeStyleSet"
        assert result.forwarded == "content.background(.red, ignoresSafeAreaEdges: .all)"

    def test_trailing_closure(self, service, extracted) -> None:
        signatures, styles = extracted
        result = service.resolve(signatures, 'overlay(alignment: .top) { Text("Hi") }', styles=styles)
        assert result.variant_name == "overlay"
        assert result.forwarded == 'content.overlay(alignment: .top, content: { { Text("Hi") } })'

    def test_availability_excludes_variant(self, service, extracted) -> None:
        signatures, styles = extracted
        with pytest.raises(NoMatchingVariant):
            service.resolve(
                signatures,
                'overlay { Text("Hi") }',
                environment=Environment(platform="iOS", version="14.0"),
                styles=styles,
            )

    def test_unknown_operation(self, service, extracted) -> None:
        signatures, styles = extracted
        with pytest.raises(GenerationError, match="No signatures named 'blur'"):
            service.resolve(signatures, "blur(radius: 3)", styles=styles)
