import unittest

from swift_lint_thing.linter import Linter
from swift_lint_thing.rules import RuleSet
from swift_lint_thing.syntax import DeclarationKind, SourceFile, SyntaxNode, SyntaxToken, TokenKind
from swift_lint_thing.types import Location, Severity, Violation, ViolationKind


def _file(contents, children=(), tokens=(), path="Test.swift"):
    return SourceFile(
        path=path,
        contents=contents,
        structure=SyntaxNode(children=tuple(children)),
        tokens=tuple(SyntaxToken(*t) for t in tokens),
    )


class TestLinter(unittest.TestCase):
    def test_long_line_without_trailing_newline(self):
        f = _file("a" * 105, path=None)
        self.assertEqual(
            Linter(f).style_violations,
            [
                Violation(
                    ViolationKind.LENGTH,
                    Location(None, 1),
                    "Line #1 should be 100 characters or less: currently 105 characters",
                ),
                Violation(
                    ViolationKind.TRAILING_NEWLINE,
                    Location(None),
                    "File should have a single trailing newline: currently has 0",
                ),
            ],
        )

    def test_short_type_name_at_top_level(self):
        f = _file("class Ab {}\n", [SyntaxNode(kind=DeclarationKind.CLASS, name="Ab", offset=0)])
        (v,) = Linter(f).style_violations
        self.assertEqual(v.kind, ViolationKind.NAME_FORMAT)
        self.assertIn("between 3 and 40 characters", v.reason)

    def test_force_cast(self):
        f = _file(
            "let x = y as! Int\n",
            tokens=[
                (0, 3, TokenKind.KEYWORD.value),
                (4, 1, TokenKind.IDENTIFIER.value),
                (8, 1, TokenKind.IDENTIFIER.value),
                (10, 3, TokenKind.KEYWORD.value),
                (14, 3, TokenKind.TYPEIDENTIFIER.value),
            ],
        )
        self.assertEqual(
            Linter(f).style_violations,
            [Violation(ViolationKind.FORCE_CAST, Location("Test.swift", 1, 11), "Force casts should be avoided")],
        )

    def test_structural_violations_come_first(self):
        f = _file("class ab {} \n", [SyntaxNode(kind=DeclarationKind.CLASS, name="ab", offset=0)])
        kinds = [v.kind for v in Linter(f).style_violations]
        self.assertEqual(kinds, [ViolationKind.NAME_FORMAT, ViolationKind.TRAILING_WHITESPACE])

    def test_analysis_is_repeatable(self):
        f = _file(
            " class ab {}  \n\n",
            [SyntaxNode(kind=DeclarationKind.CLASS, name="ab", offset=1, children=(
                SyntaxNode(kind=DeclarationKind.STRUCT, name="Inner", offset=7),
            ))],
        )
        linter = Linter(f)
        first = linter.style_violations
        self.assertEqual(len(first), 5)
        self.assertEqual(first, linter.style_violations)
        self.assertEqual(first, Linter(f).style_violations)

    def test_default_severity_is_low(self):
        f = _file("let a = 1")
        self.assertEqual({v.severity for v in Linter(f).style_violations}, {Severity.LOW})

    def test_severity_policy(self):
        ruleset = RuleSet(severities={ViolationKind.TRAILING_NEWLINE: Severity.HIGH})
        f = _file("a" * 101)
        by_kind = {v.kind: v for v in Linter(f, ruleset).style_violations}
        self.assertEqual(by_kind[ViolationKind.TRAILING_NEWLINE].severity, Severity.HIGH)
        self.assertEqual(by_kind[ViolationKind.LENGTH].severity, Severity.LOW)
        self.assertIn(": error: Trailing Newline Violation (High Severity)", str(by_kind[ViolationKind.TRAILING_NEWLINE]))

    def test_disabled_rules_are_skipped(self):
        ruleset = RuleSet(disabled_rules=frozenset({"line_length", "type_name"}))
        f = _file("a" * 101 + "\n", [SyntaxNode(kind=DeclarationKind.CLASS, name="ab", offset=0)])
        self.assertEqual(Linter(f, ruleset).style_violations, [])

    def test_inputs_are_not_mutated(self):
        root = SyntaxNode(children=(SyntaxNode(kind=DeclarationKind.CLASS, name="ab", offset=0),))
        f = SourceFile(path="Test.swift", contents="class ab {}\n", structure=root)
        Linter(f).style_violations
        self.assertIs(f.structure, root)
        self.assertEqual(f.contents, "class ab {}\n")


if __name__ == "__main__":
    unittest.main()
