"""
Checks driven by the declaration tree.

`structure_violations` walks the tree once, carrying the nesting level down.
The root is the file itself (level 0) and is never checked; its direct
children are at level 1. Nodes whose kind is UNCLASSIFIED are not checked
but their children are still visited, one level deeper.
"""

from __future__ import annotations

import unicodedata
from typing import Callable, Container

from .positions import location_at
from .syntax import (
    FUNCTION_KINDS,
    TYPE_BODY_KINDS,
    TYPE_KINDS,
    VARIABLE_KINDS,
    DeclarationKind,
    SourceFile,
    SyntaxNode,
)
from .types import Violation, ViolationKind

MIN_NAME_LENGTH = 3
MAX_NAME_LENGTH = 40
MAX_TYPE_BODY_LINES = 200
MAX_FUNCTION_BODY_LINES = 40
MAX_TYPE_NESTING = 1
MAX_STATEMENT_NESTING = 5

NodeRule = Callable[[SourceFile, SyntaxNode, int], list[Violation]]


def _is_alphanumeric(name: str) -> bool:
    # Letters, marks and numbers, so decomposed accents ("e" + U+0301) pass.
    return all(unicodedata.category(ch)[0] in "LMN" for ch in name)


def _starts_uppercase(name: str) -> bool:
    # Uncased first characters (digits) count as uppercase.
    return name[0] == name[0].upper()


def _name_violation(file: SourceFile, node: SyntaxNode, label: str, uppercase: bool) -> list[Violation]:
    name = node.name
    loc = location_at(file.path, file.line_index, node.offset)
    if not name or loc is None:
        return []

    reason: str | None = None
    if not _is_alphanumeric(name):
        reason = f"{label} name should only contain alphanumeric characters: '{name}'"
    elif _starts_uppercase(name) != uppercase:
        case = "uppercase" if uppercase else "lowercase"
        reason = f"{label} name should start with an {case} character: '{name}'"
    elif not MIN_NAME_LENGTH <= len(name) <= MAX_NAME_LENGTH:
        reason = (
            f"{label} name should be between {MIN_NAME_LENGTH} and {MAX_NAME_LENGTH} "
            f"characters in length: '{name}'"
        )

    if reason is None:
        return []
    return [Violation(kind=ViolationKind.NAME_FORMAT, location=loc, reason=reason)]


def _body_span(file: SourceFile, node: SyntaxNode) -> int | None:
    if node.body_offset is None or node.body_length is None:
        return None
    start = file.line_index.line(node.body_offset)
    end = file.line_index.line(node.body_offset + node.body_length)
    if start is None or end is None:
        return None
    return end - start


def _body_length_violation(
    file: SourceFile, node: SyntaxNode, label: str, limit: int
) -> list[Violation]:
    loc = location_at(file.path, file.line_index, node.offset)
    span = _body_span(file, node)
    if loc is None or span is None or span <= limit:
        return []
    return [
        Violation(
            kind=ViolationKind.LENGTH,
            location=loc,
            reason=f"{label} body should span {limit} lines or less: currently spans {span} lines",
        )
    ]


def type_name_violations(file: SourceFile, node: SyntaxNode, level: int) -> list[Violation]:
    if node.kind not in TYPE_KINDS:
        return []
    return _name_violation(file, node, "Type", uppercase=True)


def variable_name_violations(file: SourceFile, node: SyntaxNode, level: int) -> list[Violation]:
    if node.kind not in VARIABLE_KINDS:
        return []
    return _name_violation(file, node, "Variable", uppercase=False)


def type_body_length_violations(file: SourceFile, node: SyntaxNode, level: int) -> list[Violation]:
    if node.kind not in TYPE_BODY_KINDS:
        return []
    return _body_length_violation(file, node, "Type", MAX_TYPE_BODY_LINES)


def function_body_length_violations(
    file: SourceFile, node: SyntaxNode, level: int
) -> list[Violation]:
    if node.kind not in FUNCTION_KINDS:
        return []
    return _body_length_violation(file, node, "Function", MAX_FUNCTION_BODY_LINES)


def nesting_violations(file: SourceFile, node: SyntaxNode, level: int) -> list[Violation]:
    loc = location_at(file.path, file.line_index, node.offset)
    if loc is None:
        return []
    # The statement check is skipped when the type check already fired.
    if level > MAX_TYPE_NESTING and node.kind in TYPE_KINDS:
        reason = f"Types should be nested at most {MAX_TYPE_NESTING} level deep"
    elif level > MAX_STATEMENT_NESTING:
        reason = f"Statements should be nested at most {MAX_STATEMENT_NESTING} levels deep"
    else:
        return []
    return [Violation(kind=ViolationKind.NESTING, location=loc, reason=reason)]


NODE_RULES: tuple[tuple[str, NodeRule], ...] = (
    ("type_name", type_name_violations),
    ("variable_name", variable_name_violations),
    ("type_body_length", type_body_length_violations),
    ("function_body_length", function_body_length_violations),
    ("nesting", nesting_violations),
)


def node_violations(
    file: SourceFile, node: SyntaxNode, level: int, enabled: Container[str] | None = None
) -> list[Violation]:
    if node.kind is DeclarationKind.UNCLASSIFIED:
        return []
    out: list[Violation] = []
    for rule_id, rule in NODE_RULES:
        if enabled is not None and rule_id not in enabled:
            continue
        out.extend(rule(file, node, level))
    return out


def structure_violations(
    file: SourceFile,
    node: SyntaxNode | None = None,
    level: int = 0,
    enabled: Container[str] | None = None,
) -> list[Violation]:
    """Check every descendant of `node` (default: the file's root)."""
    if node is None:
        node = file.structure
    out: list[Violation] = []
    for child in node.children:
        out.extend(node_violations(file, child, level + 1, enabled))
        out.extend(structure_violations(file, child, level + 1, enabled))
    return out
