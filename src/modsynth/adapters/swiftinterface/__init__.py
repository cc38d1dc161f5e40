"""SwiftUI interface file adapter."""

from modsynth.adapters.swiftinterface.adapter import SwiftInterfaceAdapter
from modsynth.adapters.swiftinterface.declarations import (
    DeclarationError,
    parse_availability,
    parse_build_condition,
    parse_declaration,
)
from modsynth.adapters.swiftinterface.scanner import InterfaceScanner
from modsynth.adapters.swiftinterface.styles import StyleScanner

__all__ = [
    "DeclarationError",
    "InterfaceScanner",
    "StyleScanner",
    "SwiftInterfaceAdapter",
    "parse_availability",
    "parse_build_condition",
    "parse_declaration",
]
