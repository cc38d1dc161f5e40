"""Unit tests for the interface scanner."""

from modsynth.adapters.swiftinterface.scanner import InterfaceScanner, is_view_extension
from modsynth.core.models import AllOf, Not, PlatformAtom, PlatformVersion, VersionAtom


def scan(text: str):
    return InterfaceScanner().scan(text)


def test_view_extension_detection() -> None:
    assert is_view_extension("SwiftUI.View")
    assert is_view_extension("View")
    assert not is_view_extension("SwiftUI.ViewModifier")
    assert not is_view_extension("SwiftUI.Text")


def test_collects_public_functions_in_view_extensions() -> None:
    signatures = scan(
        """
extension SwiftUI.View {
  public func hidden() -> some SwiftUI.View
  internal func helper() -> some SwiftUI.View
  public static func _makeView() -> Swift.Int
}
extension SwiftUI.Text {
  public func bold() -> SwiftUI.Text
}
"""
    )
    assert [s.name for s in signatures] == ["hidden"]


def test_nested_bodies_are_skipped() -> None:
    signatures = scan(
        """
extension SwiftUI.View {
  @inlinable public func padding(_ length: CoreFoundation.CGFloat) -> some SwiftUI.View {
    return padding(.all, length)
  }
  public func hidden() -> some SwiftUI.View
}
"""
    )
    assert [s.name for s in signatures] == ["padding", "hidden"]


def test_multiline_header() -> None:
    signatures = scan(
        """
extension SwiftUI.View {
  public func onChange<V>(
    of value: V,
    perform action: @escaping (V) -> Swift.Void
  ) -> some SwiftUI.View
    where V : Swift.Equatable
}
"""
    )
    signature = signatures[0]
    assert [p.label for p in signature.parameters] == ["of", "perform"]
    assert signature.generic_parameters[0].constraint == "Swift.Equatable"


def test_documentation_and_availability() -> None:
    signatures = scan(
        """
extension SwiftUI.View {
  /// Hides the view.
  ///
  /// Keeps its layout space.
  @available(iOS 13.0, macOS 10.15, *)
  @available(tvOS, unavailable)
  public func hidden() -> some SwiftUI.View
}
"""
    )
    signature = signatures[0]
    assert signature.documentation == "Hides the view.\n\nKeeps its layout space."
    assert signature.availability == VersionAtom(
        requirements=(
            PlatformVersion(platform="iOS", version="13.0"),
            PlatformVersion(platform="macOS", version="10.15"),
        )
    )
    assert signature.build_condition == Not(operand=PlatformAtom(platform="tvOS"))


def test_inline_attributes() -> None:
    signatures = scan(
        """
extension SwiftUI.View {
  @available(iOS 15.0, *) @inlinable public func f() -> some SwiftUI.View
}
"""
    )
    assert signatures[0].availability is not None


def test_build_conditions_follow_branches() -> None:
    signatures = scan(
        """
#if os(iOS)
extension SwiftUI.View {
  public func a() -> some SwiftUI.View
}
#elseif os(macOS)
extension SwiftUI.View {
  public func b() -> some SwiftUI.View
}
#else
extension SwiftUI.View {
  public func c() -> some SwiftUI.View
}
#endif
extension SwiftUI.View {
  public func d() -> some SwiftUI.View
}
"""
    )
    by_name = {s.name: s.build_condition for s in signatures}
    ios, macos = PlatformAtom(platform="iOS"), PlatformAtom(platform="macOS")
    assert by_name["a"] == ios
    assert by_name["b"] == AllOf(operands=(Not(operand=ios), macos))
    assert by_name["c"] == AllOf(operands=(Not(operand=ios), Not(operand=macos)))
    assert by_name["d"] is None


def test_condition_combines_with_unavailability() -> None:
    signatures = scan(
        """
extension SwiftUI.View {
  #if os(iOS) || os(tvOS)
  @available(tvOS, unavailable)
  public func f() -> some SwiftUI.View
  #endif
}
"""
    )
    condition = signatures[0].build_condition
    assert isinstance(condition, AllOf)
    assert condition.operands[1] == Not(operand=PlatformAtom(platform="tvOS"))


def test_unparseable_declaration_is_skipped(caplog) -> None:
    signatures = scan(
        """
extension SwiftUI.View {
  public func pair(_ value: (Swift.Int, Swift.Int)) -> some SwiftUI.View
  public func hidden() -> some SwiftUI.View
}
"""
    )
    assert [s.name for s in signatures] == ["hidden"]
    assert "skipping declaration" in caplog.text


def test_braces_in_strings_do_not_change_depth() -> None:
    signatures = scan(
        """
extension SwiftUI.View {
  @available(*, deprecated, message: "use { instead")
  public func a() -> some SwiftUI.View
  public func b() -> some SwiftUI.View
}
"""
    )
    assert [s.name for s in signatures] == ["a", "b"]


def test_braces_in_block_comments_do_not_change_depth() -> None:
    signatures = scan(
        """
extension SwiftUI.View {
  /* helper { */
  public func foo() -> some SwiftUI.View
  /*
   * public func commented() -> some SwiftUI.View {
   * // } not a close either
   */
  public func bar() -> some SwiftUI.View
}
"""
    )
    assert [s.name for s in signatures] == ["foo", "bar"]


def test_block_comment_markers_inside_strings_are_code() -> None:
    signatures = scan(
        """
extension SwiftUI.View {
  @available(*, deprecated, message: "see /* notes")
  public func a() -> some SwiftUI.View
  public func b() -> some SwiftUI.View
}
"""
    )
    assert [s.name for s in signatures] == ["a", "b"]
