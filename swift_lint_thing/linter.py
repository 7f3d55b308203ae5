from __future__ import annotations

import dataclasses
from typing import Callable

from . import structure_rules, text_rules
from .positions import SourceLine, split_lines
from .rules import RuleSet
from .syntax import SourceFile
from .types import Violation

TextRule = Callable[[SourceFile, list[SourceLine]], list[Violation]]

TEXT_RULES: tuple[tuple[str, TextRule], ...] = (
    ("line_length", text_rules.line_length_violations),
    ("leading_whitespace", lambda f, _lines: text_rules.leading_whitespace_violations(f)),
    ("trailing_whitespace", text_rules.trailing_whitespace_violations),
    ("trailing_newline", lambda f, _lines: text_rules.trailing_newline_violations(f)),
    ("force_cast", lambda f, _lines: text_rules.force_cast_violations(f)),
    ("file_length", text_rules.file_length_violations),
    ("todo", lambda f, _lines: text_rules.todo_violations(f)),
    ("colon", lambda f, _lines: text_rules.colon_violations(f)),
)


class Linter:
    """Runs every enabled check over one file: structural checks first, then textual ones."""

    def __init__(self, file: SourceFile, ruleset: RuleSet | None = None) -> None:
        self.file = file
        self.ruleset = ruleset if ruleset is not None else RuleSet.default()

    @property
    def style_violations(self) -> list[Violation]:
        violations = self.structure_violations() + self.string_violations()
        return [
            dataclasses.replace(v, severity=self.ruleset.severity_for(v.kind)) for v in violations
        ]

    def structure_violations(self) -> list[Violation]:
        return structure_rules.structure_violations(self.file, enabled=self.ruleset.enabled_rules)

    def string_violations(self) -> list[Violation]:
        lines = split_lines(self.file.contents)
        violations: list[Violation] = []
        for rule_id, rule in TEXT_RULES:
            if not self.ruleset.is_enabled(rule_id):
                continue
            violations.extend(rule(self.file, lines))
        return violations
