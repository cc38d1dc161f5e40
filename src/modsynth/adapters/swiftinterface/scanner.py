"""Scanner for modifier declarations in ``.swiftinterface`` text.

Walks the file line by line, tracking brace depth and ``#if`` nesting, and
collects public instance functions declared in ``View`` extensions together
with their documentation and ``@available`` attributes.

Block comments and multi-line strings are blanked with tree-sitter first so
their braces do not count toward depth.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from modsynth.adapters.swiftinterface._text import (
    brace_delta,
    find_top_level,
    mask_block_text,
    paren_balance,
    strip_code,
)
from modsynth.adapters.swiftinterface.declarations import (
    AvailabilityInfo,
    DeclarationError,
    combine_availability,
    declaration_modifiers,
    parse_availability,
    parse_build_condition,
    parse_declaration,
)
from modsynth.core.models import AllOf, Not, OperationSignature, Predicate

logger = logging.getLogger(__name__)

_LEADING_ATTRIBUTE_RE = re.compile(r'^\s*(@[A-Za-z_][\w.]*(?:\((?:[^()"]|"(?:\\.|[^"\\])*")*\))?)\s*')
_EXTENSION_RE = re.compile(r"\bextension\s+([A-Za-z_][\w.]*)")
_FUNC_RE = re.compile(r"\bfunc\b")
_CONTINUATION_RE = re.compile(r"^\s*(->|where\b|throws\b|rethrows\b|async\b)")
_EXCLUDED_MODIFIERS = frozenset({"static", "class"})
_PUBLIC_MODIFIERS = frozenset({"public", "open"})


@dataclass
class _ConditionFrame:
    """One ``#if`` block: earlier branch conditions and the active branch."""

    previous: list[Predicate] = field(default_factory=list)
    current: Predicate | None = None
    last: Predicate | None = None

    def branch(self, condition: Predicate | None) -> None:
        if self.last is not None:
            self.previous.append(self.last)
        self.last = condition
        negated = [Not(operand=p) for p in self.previous]
        operands = negated + ([condition] if condition is not None else [])
        self.current = _conjoin(operands)


def _conjoin(operands: list[Predicate]) -> Predicate | None:
    if not operands:
        return None
    if len(operands) == 1:
        return operands[0]
    return AllOf(operands=tuple(operands))


def is_view_extension(extended_type: str) -> bool:
    return "View" in extended_type and "ViewModifier" not in extended_type and "ViewDimensions" not in extended_type


class InterfaceScanner:
    """Extract modifier signatures from interface text."""

    def scan(self, text: str, source: str = "<text>") -> list[OperationSignature]:
        """Scan interface text.

        Declarations that fail to parse are logged and skipped.

        Args:
            text: Contents of a ``.swiftinterface`` file.
            source: Name used in log messages.

        Returns:
            Signatures in declaration order.
        """
        lines = mask_block_text(text).splitlines()
        signatures: list[OperationSignature] = []
        frames: list[_ConditionFrame] = []
        depth = 0
        extension_depth: int | None = None
        docs: list[str] = []
        attributes: list[str] = []

        index = 0
        while index < len(lines):
            line = lines[index]
            stripped = line.strip()
            index += 1

            if stripped.startswith("#"):
                self._directive(stripped, frames, source, index)
                continue
            if stripped.startswith("///"):
                docs.append(_doc_text(stripped))
                continue
            if not stripped or stripped.startswith("//"):
                continue

            # Attribute-only lines accumulate until the declaration they decorate
            if stripped.startswith("@") and not self._has_declaration(stripped):
                attribute = stripped
                while paren_balance(attribute) > 0 and index < len(lines):
                    attribute += " " + lines[index].strip()
                    index += 1
                attributes.append(attribute)
                continue

            if depth == 0:
                match = _EXTENSION_RE.search(strip_code(stripped))
                if match and is_view_extension(match.group(1)) and "{" in strip_code(stripped):
                    extension_depth = 1
            elif extension_depth is not None and depth == extension_depth and _FUNC_RE.search(strip_code(stripped)):
                header = stripped
                while index < len(lines) and self._continues(header, lines[index]):
                    header += " " + lines[index].strip()
                    index += 1
                signature = self._declaration(
                    header, docs, attributes, _active_condition(frames), source, index
                )
                if signature is not None:
                    signatures.append(signature)
                depth += brace_delta(header)
                docs, attributes = [], []
                if depth <= 0:
                    extension_depth = None
                continue

            depth += brace_delta(stripped)
            if depth <= 0:
                depth = 0
                extension_depth = None
            docs, attributes = [], []

        return signatures

    @staticmethod
    def _has_declaration(line: str) -> bool:
        rest = line
        while True:
            match = _LEADING_ATTRIBUTE_RE.match(rest)
            if match is None or not match.group(1):
                break
            rest = rest[match.end() :]
        return bool(rest.strip())

    @staticmethod
    def _continues(header: str, next_line: str) -> bool:
        code = strip_code(header)
        if paren_balance(code) > 0:
            return True
        if find_top_level(code, "{") >= 0:
            return False
        return bool(_CONTINUATION_RE.match(next_line))

    def _directive(self, line: str, frames: list[_ConditionFrame], source: str, line_number: int) -> None:
        keyword, _, condition_text = strip_code(line).strip().partition(" ")
        try:
            if keyword == "#if":
                frame = _ConditionFrame()
                frame.branch(parse_build_condition(condition_text))
                frames.append(frame)
            elif keyword == "#elseif" and frames:
                frames[-1].branch(parse_build_condition(condition_text))
            elif keyword == "#else" and frames:
                frames[-1].branch(None)
            elif keyword == "#endif" and frames:
                frames.pop()
        except DeclarationError as e:
            logger.warning(f"{source}:{line_number}: {e.message}; treating branch as unconditional")
            if keyword == "#if":
                frames.append(_ConditionFrame())

    def _declaration(
        self,
        header: str,
        docs: list[str],
        attributes: list[str],
        condition: Predicate | None,
        source: str,
        line_number: int,
    ) -> OperationSignature | None:
        # Attributes written on the declaration line itself
        rest = header
        attributes = list(attributes)
        while True:
            match = _LEADING_ATTRIBUTE_RE.match(rest)
            if match is None or not match.group(1):
                break
            attributes.append(match.group(1))
            rest = rest[match.end() :]

        modifiers = set(declaration_modifiers(rest))
        if modifiers & _EXCLUDED_MODIFIERS or not modifiers & _PUBLIC_MODIFIERS:
            return None

        body = find_top_level(strip_code(rest), "{")
        if body >= 0:
            rest = rest[:body]

        infos: list[AvailabilityInfo] = [parse_availability(a) for a in attributes if a.startswith("@available")]
        availability, exclusion = combine_availability(infos)
        build_condition = _conjoin([p for p in (condition, exclusion) if p is not None])

        try:
            return parse_declaration(
                rest.strip(),
                documentation="\n".join(docs) if docs else None,
                availability=availability,
                build_condition=build_condition,
            )
        except DeclarationError as e:
            logger.warning(f"{source}:{line_number}: skipping declaration: {e.message}")
            logger.debug(f"{source}:{line_number}: {e.details}")
            return None


def _active_condition(frames: list[_ConditionFrame]) -> Predicate | None:
    return _conjoin([f.current for f in frames if f.current is not None])


def _doc_text(line: str) -> str:
    text = line[3:]
    return text[1:] if text.startswith(" ") else text
