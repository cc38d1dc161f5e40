"""Unit tests for the shared support file."""

from modsynth.generator.support import generate_support_file


def test_default_error_type() -> None:
    code = generate_support_file()
    assert code.file_name == "ModifierParseError.swift"
    assert code.variant_count == 0
    source = code.source_code
    assert "public enum ModifierParseError: Error, CustomStringConvertible, Sendable {" in source
    assert "case noMatchingVariant(modifier: String, found: Int, failures: [ModifierParseError])" in source
    assert "public struct ModifierArguments" in source
    assert "$0" in source
    assert "$$" not in source
    assert "${" not in source


def test_custom_error_type() -> None:
    code = generate_support_file("SyntaxFailure")
    assert code.file_name == "SyntaxFailure.swift"
    assert "public enum SyntaxFailure:" in code.source_code
    assert "ModifierParseError" not in code.source_code
