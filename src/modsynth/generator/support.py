"""Shared support file emitted once per run.

Holds the failure type thrown by every generated ``init(syntax:)`` and the
``ModifierArguments`` accessor those initializers read call arguments through.
"""

from __future__ import annotations

from string import Template

from modsynth.core.models import GeneratedCode

_SUPPORT_TEMPLATE = Template(
    """\
import Foundation
import SwiftSyntax

/// Errors that can occur when parsing modifiers from syntax.
public enum ${error_type}: Error, CustomStringConvertible, Sendable {
    /// The number of arguments doesn't match any known variant.
    case unexpectedArgumentCount(modifier: String, expected: [Int], found: Int)
    /// The arguments could not be parsed for the specified variant.
    case invalidArguments(modifier: String, variant: String, expectedTypes: String)
    /// Variants share an argument count and the first label selected none of them.
    case ambiguousVariant(modifier: String, expectedLabels: [String])
    /// Every applicable variant failed; carries each attempt's failure.
    case noMatchingVariant(modifier: String, found: Int, failures: [${error_type}])

    public var isAmbiguousVariant: Bool {
        if case .ambiguousVariant = self {
            return true
        }
        return false
    }

    public var description: String {
        switch self {
        case .unexpectedArgumentCount(let modifier, let expected, let found):
            return "\\(modifier): unexpected argument count \\(found), expected one of \\(expected)"
        case .invalidArguments(let modifier, let variant, let expectedTypes):
            return "\\(modifier): invalid arguments for '\\(variant)', expected types: \\(expectedTypes)"
        case .ambiguousVariant(let modifier, let expectedLabels):
            return "\\(modifier): ambiguous variant, expected first argument label to be one of \\(expectedLabels)"
        case .noMatchingVariant(let modifier, let found, let failures):
            let reasons = failures.map(\\.description).joined(separator: "; ")
            return "\\(modifier): no matching variant found for argument count \\(found)"
                + (reasons.isEmpty ? "" : " (\\(reasons))")
        }
    }
}

/// Labeled and positional view of a modifier call's arguments.
///
/// A trailing closure counts as a final unlabeled argument.
public struct ModifierArguments {
    public let expressions: [(label: String?, expression: ExprSyntax)]
    public let trailingClosure: ExprSyntax?

    public init(_ syntax: FunctionCallExprSyntax) {
        expressions = syntax.arguments.map { (label: $$0.label?.text, expression: $$0.expression) }
        trailingClosure = syntax.trailingClosure.map { ExprSyntax($$0) }
    }

    public var count: Int {
        expressions.count + (trailingClosure == nil ? 0 : 1)
    }

    public var firstLabel: String? {
        expressions.first?.label
    }

    public func accepts(labels: Set<String>) -> Bool {
        expressions.allSatisfy { argument in
            argument.label.map { labels.contains($$0) } ?? true
        }
    }

    public func expression(named label: String) -> ExprSyntax? {
        expressions.first { $$0.label == label }?.expression
    }

    public func unlabeled(at index: Int) -> ExprSyntax? {
        var unlabeled = expressions.filter { $$0.label == nil }.map(\\.expression)
        if let trailingClosure {
            unlabeled.append(trailingClosure)
        }
        return index < unlabeled.count ? unlabeled[index] : nil
    }
}
"""
)


def generate_support_file(error_type: str = "ModifierParseError") -> GeneratedCode:
    """Render the shared failure type and argument accessor."""
    return GeneratedCode(
        source_code=_SUPPORT_TEMPLATE.substitute(error_type=error_type),
        file_name=f"{error_type}.swift",
        variant_count=0,
    )
