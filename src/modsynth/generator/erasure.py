"""Erasure table: capability constraints to concrete type erasers.

Generic parameters and existentials cannot be stored in an enum payload, so
each constraint is mapped to one concrete type able to hold any conforming
value (``View`` -> ``AnyView``). Style protocols map to eraser unions that are
generated elsewhere; this table only knows their names.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from types import MappingProxyType

from modsynth.core.models import ParameterType, StyleCase
from modsynth.core.type_syntax import TypeSyntaxError, parse_type

logger = logging.getLogger(__name__)

BUILT_IN_ERASERS: Mapping[str, str] = MappingProxyType(
    {
        "View": "AnyView",
        "StringProtocol": "String",
        "Hashable": "AnyHashable",
        "Shape": "AnyShape",
        "InsettableShape": "AnyShape",
        "ShapeStyle": "AnyShapeStyle",
        "Gesture": "AnyGesture<Any>",
        "Transition": "AnyTransition",
        "Layout": "AnyLayout",
    }
)

CUSTOM_ERASERS: Mapping[str, str] = MappingProxyType(
    {
        "ButtonStyle": "AnyButtonStyle",
        "PrimitiveButtonStyle": "AnyPrimitiveButtonStyle",
        "ProgressViewStyle": "AnyProgressViewStyle",
        "PickerStyle": "AnyPickerStyle",
        "DatePickerStyle": "AnyDatePickerStyle",
        "ToggleStyle": "AnyToggleStyle",
        "ListStyle": "AnyListStyle",
        "NavigationViewStyle": "AnyNavigationViewStyle",
        "TabViewStyle": "AnyTabViewStyle",
        "TextFieldStyle": "AnyTextFieldStyle",
        "LabelStyle": "AnyLabelStyle",
        "MenuStyle": "AnyMenuStyle",
        "GaugeStyle": "AnyGaugeStyle",
        "GroupBoxStyle": "AnyGroupBoxStyle",
        "IndexViewStyle": "AnyIndexViewStyle",
        "ControlGroupStyle": "AnyControlGroupStyle",
        "FormStyle": "AnyFormStyle",
        "DisclosureGroupStyle": "AnyDisclosureGroupStyle",
    }
)

NAMESPACE_PREFIXES = ("SwiftUICore", "SwiftUI", "Swift")

_NAMESPACE_RE = re.compile(r"\b(?:" + "|".join(NAMESPACE_PREFIXES) + r")\.")
_EXISTENTIAL_RE = re.compile(r"^(?:some|any)\s+(.+)$")


def strip_namespaces(text: str) -> str:
    """Remove library namespace qualifiers, ``SwiftUI.Edge.Set`` -> ``Edge.Set``."""
    return _NAMESPACE_RE.sub("", text).strip()


class ErasureTable:
    """Immutable constraint -> eraser mapping.

    Args:
        built_in: Erasers that exist in the target library.
        custom: Erasers that must be generated as unions of discovered styles.
        marker: Prefix used to name erasers of unknown existential constraints.
    """

    def __init__(
        self,
        built_in: Mapping[str, str] | None = None,
        custom: Mapping[str, str] | None = None,
        marker: str = "Any",
    ) -> None:
        self._built_in = MappingProxyType(dict(BUILT_IN_ERASERS if built_in is None else built_in))
        self._custom = MappingProxyType(dict(CUSTOM_ERASERS if custom is None else custom))
        self._marker = marker

    @property
    def marker(self) -> str:
        return self._marker

    @property
    def custom_constraints(self) -> frozenset[str]:
        return frozenset(self._custom)

    def eraser_name(self, constraint: str) -> str | None:
        """Eraser type text for a constraint, or None for unknown free-standing ones."""
        clean = strip_namespaces(constraint)
        if clean in self._built_in:
            return self._built_in[clean]
        if clean in self._custom:
            return self._custom[clean]

        match = _EXISTENTIAL_RE.match(clean)
        if match is None:
            return None
        base = match.group(1).strip()
        resolved = self.eraser_name(base)
        if resolved is not None:
            return resolved
        return self._marker + base

    def lookup(self, constraint: str) -> ParameterType | None:
        """Erased type for a constraint, or None when there is no erasure.

        Synthesized names that are not valid type syntax are treated as having
        no erasure.
        """
        name = self.eraser_name(constraint)
        if name is None:
            return None
        try:
            return parse_type(name)
        except TypeSyntaxError:
            logger.warning(f"Eraser name for '{constraint}' is not a valid type: {name}")
            return None

    def needs_generated_wrapper(self, constraint: str) -> bool:
        return strip_namespaces(constraint) in self._custom

    def wrapper_name(self, constraint: str) -> str | None:
        """Name of the eraser union to generate for a style constraint."""
        return self._custom.get(strip_namespaces(constraint))

    def with_discovered_styles(self, styles: Mapping[str, set[StyleCase]]) -> ErasureTable:
        """Restrict custom erasers to constraints with at least one discovered style.

        Args:
            styles: Style enumerator output keyed by protocol name.

        Returns:
            A new table; this one is unchanged.
        """
        discovered = {strip_namespaces(name) for name, cases in styles.items() if cases}
        kept = {name: eraser for name, eraser in self._custom.items() if name in discovered}
        dropped = sorted(set(self._custom) - set(kept))
        if dropped:
            logger.debug(f"No discovered styles for {len(dropped)} custom erasers: {', '.join(dropped)}")
        return ErasureTable(built_in=self._built_in, custom=kept, marker=self._marker)


DEFAULT_ERASURE_TABLE = ErasureTable()
