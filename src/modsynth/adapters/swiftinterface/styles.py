"""Style enumeration.

Finds named style constants declared as

    extension SwiftUI.ButtonStyle where Self == SwiftUI.BorderedButtonStyle {
      public static var bordered: SwiftUI.BorderedButtonStyle { get }
    }

and groups them by protocol. The erasure table uses the result to decide which
custom eraser unions have anything to hold.
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict

from modsynth.adapters.swiftinterface._text import brace_delta, mask_block_text, strip_code
from modsynth.core.models import StyleCase
from modsynth.generator.erasure import strip_namespaces

logger = logging.getLogger(__name__)

_STYLE_EXTENSION_RE = re.compile(
    r"\bextension\s+([A-Za-z_][\w.]*)\s+where\s+Self\s*==\s*([A-Za-z_][\w.]*(?:<[^{]*>)?)\s*\{"
)
_STATIC_VAR_RE = re.compile(r"\bstatic\s+var\s+`?([A-Za-z_]\w*)`?\s*:\s*([^{]+?)\s*(?:\{|$)")


class StyleScanner:
    """Collect ``static var`` style constants from constrained protocol extensions."""

    def scan(self, text: str) -> dict[str, set[StyleCase]]:
        styles: dict[str, set[StyleCase]] = defaultdict(set)
        depth = 0
        current: tuple[str, str] | None = None

        for line in mask_block_text(text).splitlines():
            code = strip_code(line)
            if depth == 0:
                match = _STYLE_EXTENSION_RE.search(code)
                current = (match.group(1), match.group(2).strip()) if match else None
            elif depth == 1 and current is not None:
                case = self._style_case(code, current[1])
                if case is not None:
                    styles[strip_namespaces(current[0])].add(case)

            depth = max(depth + brace_delta(code), 0)
            if depth == 0:
                current = None

        logger.debug(f"Discovered styles for {len(styles)} protocols")
        return dict(styles)

    @staticmethod
    def _style_case(code: str, concrete_type: str) -> StyleCase | None:
        match = _STATIC_VAR_RE.search(code)
        if match is None:
            return None
        declared = match.group(2).strip()
        if declared != "Self" and not declared.endswith(".Self") and declared != concrete_type:
            return None
        return StyleCase(name=match.group(1), concrete_type=concrete_type)
