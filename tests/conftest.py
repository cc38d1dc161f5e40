"""Shared pytest fixtures for modsynth tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from dotenv import load_dotenv
from hypothesis import settings

from modsynth.core.config import ModsynthConfig
from modsynth.core.models import OperationSignature, Parameter
from modsynth.core.type_syntax import parse_type

# Load environment variables from .env file
load_dotenv()

# Configure hypothesis for property-based testing
settings.register_profile("ci", max_examples=100, deadline=None)
settings.register_profile("dev", max_examples=20, deadline=None)
settings.load_profile("dev")

FIXTURES = Path(__file__).parent / "fixtures"


def make_parameter(
    name: str,
    type_text: str,
    label: str | None = None,
    default: str | None = None,
    generics: tuple[str, ...] = (),
) -> Parameter:
    """Build a parameter from Swift type text."""
    return Parameter(
        label=label,
        name=name,
        type=parse_type(type_text, generics),
        has_default=default is not None,
        default_value=default,
    )


def make_signature(name: str, *parameters: Parameter, **fields) -> OperationSignature:
    """Build a signature returning ``some View``."""
    return OperationSignature(
        name=name,
        parameters=list(parameters),
        return_type=parse_type("some View"),
        **fields,
    )


@pytest.fixture
def config() -> ModsynthConfig:
    """Default configuration, independent of the environment and .env."""
    return ModsynthConfig(_env_file=None)


@pytest.fixture
def sample_interface() -> Path:
    return FIXTURES / "swiftui_sample" / "SwiftUI.swiftinterface"


@pytest.fixture
def sample_directory() -> Path:
    return FIXTURES / "swiftui_sample"


@pytest.fixture
def padding_signatures() -> list[OperationSignature]:
    """The three ``padding`` overloads, in interface order."""
    return [
        make_signature("padding", make_parameter("insets", "EdgeInsets")),
        make_signature(
            "padding",
            make_parameter("edges", "Edge.Set", default=".all"),
            make_parameter("length", "CGFloat?", default="nil"),
        ),
        make_signature("padding", make_parameter("length", "CGFloat")),
    ]


@pytest.fixture
def param():
    """Factory fixture for ``Parameter`` built from type text."""
    return make_parameter


@pytest.fixture
def sig():
    """Factory fixture for ``OperationSignature`` returning ``some View``."""
    return make_signature
