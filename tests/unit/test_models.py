"""Unit tests for core data models."""

import pytest
from pydantic import ValidationError

from modsynth.core.models import (
    ClosureType,
    GenericRef,
    MergedVariant,
    MergedVariantType,
    NamedType,
    OperationSignature,
    OptionalType,
    Parameter,
    PlatformVersion,
    group_signatures,
)


class TestNamedType:
    def test_of_splits_dotted_path(self) -> None:
        node = NamedType.of("SwiftUI.Edge.Set")
        assert node.path == ("SwiftUI", "Edge", "Set")
        assert node.simple_name == "Set"

    def test_of_with_arguments(self) -> None:
        node = NamedType.of("Binding", NamedType.of("Bool"))
        assert node.arguments == (NamedType.of("Bool"),)

    def test_is_frozen_and_hashable(self) -> None:
        node = NamedType.of("CGFloat")
        assert hash(node) == hash(NamedType.of("CGFloat"))
        with pytest.raises(ValidationError):
            node.path = ("Float",)

    def test_empty_path_rejected(self) -> None:
        with pytest.raises(ValidationError):
            NamedType(path=())


class TestParameter:
    def test_default_text_requires_flag(self) -> None:
        with pytest.raises(ValidationError, match="has_default"):
            Parameter(name="x", type=NamedType.of("Int"), default_value="0")

    def test_required_when_no_default_and_not_optional(self) -> None:
        parameter = Parameter(name="x", type=NamedType.of("Int"))
        assert parameter.is_required
        assert not parameter.is_optional

    def test_optional_is_not_required(self) -> None:
        parameter = Parameter(name="x", type=OptionalType(inner=NamedType.of("Int")))
        assert parameter.is_optional
        assert not parameter.is_required

    def test_defaulted_is_not_required(self) -> None:
        parameter = Parameter(name="x", type=NamedType.of("Int"), has_default=True, default_value="0")
        assert not parameter.is_required

    def test_default_flag_without_text_is_required(self) -> None:
        parameter = Parameter(name="x", type=NamedType.of("Int"), has_default=True)
        assert parameter.is_required
        assert not parameter.has_fallback

    def test_optional_default_flag_without_text_falls_back(self) -> None:
        parameter = Parameter(name="x", type=OptionalType(inner=NamedType.of("Int")), has_default=True)
        assert not parameter.is_required


class TestOperationSignature:
    def test_required_count(self) -> None:
        signature = OperationSignature(
            name="frame",
            parameters=[
                Parameter(label="width", name="width", type=NamedType.of("CGFloat")),
                Parameter(
                    label="height",
                    name="height",
                    type=OptionalType(inner=NamedType.of("CGFloat")),
                    has_default=True,
                    default_value="nil",
                ),
            ],
            return_type=NamedType.of("View"),
        )
        assert signature.required_count == 1

    def test_default_flag_without_text_counts_as_required(self) -> None:
        signature = OperationSignature(
            name="tint",
            parameters=[Parameter(name="color", type=NamedType.of("Color"), has_default=True)],
            return_type=NamedType.of("View"),
        )
        assert signature.required_count == 1

    def test_round_trips_through_json(self) -> None:
        signature = OperationSignature(
            name="overlay",
            parameters=[
                Parameter(
                    label="content",
                    name="content",
                    type=ClosureType(returns=GenericRef(name="V"), attributes=("@ViewBuilder",)),
                )
            ],
            return_type=NamedType.of("View"),
        )
        restored = OperationSignature.model_validate_json(signature.model_dump_json())
        assert restored == signature


class TestGroupSignatures:
    def test_preserves_first_seen_order(self) -> None:
        void = NamedType.of("Void")
        signatures = [
            OperationSignature(name=name, return_type=void) for name in ["b", "a", "b", "c", "a"]
        ]
        groups = group_signatures(signatures)
        assert [g.name for g in groups] == ["b", "a", "c"]
        assert [len(g.signatures) for g in groups] == [2, 2, 1]

    def test_empty(self) -> None:
        assert group_signatures([]) == []


class TestMergedVariantType:
    def test_duplicate_variant_names_rejected(self) -> None:
        signature = OperationSignature(name="hidden", return_type=NamedType.of("View"))
        variant = MergedVariant(name="hidden", signature=signature, source=signature)
        with pytest.raises(ValidationError, match="duplicate variant names"):
            MergedVariantType(type_name="HiddenModifier", operation_name="hidden", variants=[variant, variant])

    def test_requires_a_variant(self) -> None:
        with pytest.raises(ValidationError):
            MergedVariantType(type_name="HiddenModifier", operation_name="hidden", variants=[])


def test_platform_version_tuple() -> None:
    assert PlatformVersion(platform="iOS", version="15.4").version_tuple == (15, 4)
