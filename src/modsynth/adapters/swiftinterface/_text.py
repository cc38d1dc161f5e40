"""Text helpers shared by the interface scanners."""

from __future__ import annotations

import re

import tree_sitter_swift as tsswift
from tree_sitter import Language, Node, Parser

_STRING_RE = re.compile(r'"(?:\\.|[^"\\])*"')

_OPEN = "([{<"
_CLOSE = ")]}>"

_SWIFT = Language(tsswift.language())

# Bodyless interface declarations come back as ERROR nodes, but comments and
# string literals are still lexed as their own nodes inside them.
_MASKED_NODES = {"multiline_comment", "multi_line_string_literal"}


def mask_block_text(text: str) -> str:
    """Blank out block comments and multi-line string literals.

    Masked characters become spaces and newlines are kept, so the result has
    the same lines as ``text`` and the line-oriented scanners never see braces
    or ``//`` inside those regions. Multi-line strings keep their delimiters.
    """
    source = text.encode("utf-8")
    tree = Parser(_SWIFT).parse(source)
    masked = bytearray(source)
    for start, end in _masked_ranges(tree.root_node):
        for offset in range(start, end):
            if masked[offset] != ord("\n"):
                masked[offset] = ord(" ")
    return masked.decode("utf-8")


def _masked_ranges(root: Node) -> list[tuple[int, int]]:
    ranges: list[tuple[int, int]] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "multiline_comment":
            ranges.append((node.start_byte, node.end_byte))
        elif node.type == "multi_line_string_literal":
            ranges.append((node.start_byte + 3, node.end_byte - 3))
        else:
            stack.extend(node.children)
    return ranges


def strip_code(line: str) -> str:
    """Drop string literals and trailing ``//`` comments."""
    without_strings = _STRING_RE.sub('""', line)
    comment = without_strings.find("//")
    return without_strings if comment < 0 else without_strings[:comment]


def brace_delta(line: str) -> int:
    code = strip_code(line)
    return code.count("{") - code.count("}")


def paren_balance(text: str) -> int:
    code = _STRING_RE.sub('""', text)
    return code.count("(") - code.count(")")


def _is_arrow(text: str, index: int) -> bool:
    return text[index] == ">" and index > 0 and text[index - 1] == "-"


def _is_comparison(text: str, index: int) -> bool:
    """``<`` or ``>`` used as an operator rather than a generic bracket."""
    before = text[index - 1] if index > 0 else ""
    after = text[index + 1] if index + 1 < len(text) else ""
    return before == " " and after in (" ", "=")


def split_top_level(text: str, separator: str) -> list[str]:
    """Split on ``separator`` outside brackets, generics, and string literals.

    ``separator`` must be a single character.
    """
    parts: list[str] = []
    depth = 0
    start = 0
    index = 0
    while index < len(text):
        char = text[index]
        if char == '"':
            match = _STRING_RE.match(text, index)
            index = match.end() if match else len(text)
            continue
        if char in _OPEN and not (char == "<" and _is_comparison(text, index)):
            depth += 1
        elif char in _CLOSE and not _is_arrow(text, index) and not (char == ">" and _is_comparison(text, index)):
            depth -= 1
        elif char == separator and depth == 0:
            parts.append(text[start:index])
            start = index + 1
        index += 1
    parts.append(text[start:])
    return parts


def find_top_level(text: str, needle: str, start: int = 0) -> int:
    """Index of ``needle`` outside brackets and strings, or -1."""
    depth = 0
    index = start
    while index < len(text):
        char = text[index]
        if char == '"':
            match = _STRING_RE.match(text, index)
            index = match.end() if match else len(text)
            continue
        if depth == 0 and text.startswith(needle, index):
            return index
        if char in _OPEN and not (char == "<" and _is_comparison(text, index)):
            depth += 1
        elif char in _CLOSE and not _is_arrow(text, index) and not (char == ">" and _is_comparison(text, index)):
            depth -= 1
        index += 1
    return -1


def find_matching(text: str, open_index: int) -> int:
    """Index of the bracket closing the one at ``open_index``, or -1."""
    opener = text[open_index]
    closer = _CLOSE[_OPEN.index(opener)]
    depth = 0
    index = open_index
    while index < len(text):
        char = text[index]
        if char == '"':
            match = _STRING_RE.match(text, index)
            index = match.end() if match else len(text)
            continue
        if char == opener:
            depth += 1
        elif char == closer and not _is_arrow(text, index):
            depth -= 1
            if depth == 0:
                return index
        index += 1
    return -1
