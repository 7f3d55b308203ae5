from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from .types import Severity, ViolationKind

# Every check, in the order the linter runs them.
RULE_DESCRIPTIONS: dict[str, str] = {
    "type_name": "Type names are alphanumeric, start uppercase, 3-40 characters.",
    "variable_name": "Variable names are alphanumeric, start lowercase, 3-40 characters.",
    "type_body_length": "Class, struct and enum bodies span 200 lines or less.",
    "function_body_length": "Function bodies span 40 lines or less.",
    "nesting": "Types nest at most 1 level deep, statements at most 5.",
    "line_length": "Lines are 100 characters or less.",
    "leading_whitespace": "Files don't start with whitespace.",
    "trailing_whitespace": "Lines have no trailing whitespace.",
    "trailing_newline": "Files end with exactly one newline.",
    "force_cast": "Force casts (as!) are avoided.",
    "file_length": "Files contain 400 lines or less.",
    "todo": "TODO and FIXME comments are avoided.",
    "colon": "Type annotation colons are attached to the identifier.",
}

RULE_IDS: tuple[str, ...] = tuple(RULE_DESCRIPTIONS)

DEFAULT_SEVERITY = Severity.LOW


@dataclass(frozen=True)
class RuleSet:
    version: int = 1
    disabled_rules: frozenset[str] = frozenset()
    severities: Mapping[ViolationKind, Severity] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def default(cls) -> RuleSet:
        return cls()

    @property
    def enabled_rules(self) -> frozenset[str]:
        return frozenset(r for r in RULE_IDS if r not in self.disabled_rules)

    def is_enabled(self, rule_id: str) -> bool:
        return rule_id not in self.disabled_rules

    def severity_for(self, kind: ViolationKind) -> Severity:
        return self.severities.get(kind, DEFAULT_SEVERITY)


class RulesFormatError(ValueError):
    pass


def _expect(d: dict[str, Any], key: str, typ: type, where: str) -> Any:
    if key not in d:
        raise RulesFormatError(f"Missing key '{key}' in {where}")
    v = d[key]
    if not isinstance(v, typ):
        raise RulesFormatError(f"Key '{key}' in {where} must be {typ.__name__}")
    return v


_KINDS_BY_ID = {k.identifier: k for k in ViolationKind}


def rules_from_dict(raw: Any) -> RuleSet:
    if not isinstance(raw, dict):
        raise RulesFormatError("Rules file must be a JSON object")

    version = _expect(raw, "version", int, "rules file")

    disabled = raw.get("disabled_rules", [])
    if not isinstance(disabled, list) or not all(isinstance(x, str) for x in disabled):
        raise RulesFormatError("disabled_rules must be a list of strings")
    unknown = sorted(set(disabled) - set(RULE_IDS))
    if unknown:
        raise RulesFormatError(f"disabled_rules: unknown rule id(s): {', '.join(unknown)}")

    raw_sev = raw.get("severity", {})
    if not isinstance(raw_sev, dict):
        raise RulesFormatError("severity must be an object")
    severities: dict[ViolationKind, Severity] = {}
    for key, value in raw_sev.items():
        kind = _KINDS_BY_ID.get(key)
        if kind is None:
            raise RulesFormatError(
                f"severity: unknown violation kind '{key}' "
                f"(expected one of {', '.join(sorted(_KINDS_BY_ID))})"
            )
        if not isinstance(value, str):
            raise RulesFormatError(f"severity.{key} must be a string")
        try:
            severities[kind] = Severity.from_identifier(value)
        except ValueError as e:
            raise RulesFormatError(f"severity.{key}: {e}") from e

    return RuleSet(
        version=version,
        disabled_rules=frozenset(disabled),
        severities=MappingProxyType(severities),
    )


def load_rules(path: Path) -> RuleSet:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise RulesFormatError(f"{path}: invalid JSON: {e}") from e
    return rules_from_dict(raw)
