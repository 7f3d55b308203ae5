import unittest

from swift_lint_thing.structure_rules import (
    function_body_length_violations,
    nesting_violations,
    structure_violations,
    type_body_length_violations,
)
from swift_lint_thing.syntax import DeclarationKind, SourceFile, SyntaxNode
from swift_lint_thing.types import Location, ViolationKind

CONTENTS = "class Abc {\n    var x = 1\n}\n"


def _file(children, contents=CONTENTS):
    return SourceFile(path="Test.swift", contents=contents, structure=SyntaxNode(children=tuple(children)))


def _type(name, offset=0, kind=DeclarationKind.CLASS, children=()):
    return SyntaxNode(kind=kind, name=name, offset=offset, children=tuple(children))


def _var(name, offset=16, kind=DeclarationKind.VAR_INSTANCE):
    return SyntaxNode(kind=kind, name=name, offset=offset)


def _nested(depth, leaf):
    """Wrap `leaf` in free functions so it sits at level `depth` below the root."""
    node = leaf
    for _ in range(depth - 1):
        node = SyntaxNode(kind=DeclarationKind.FUNCTION_FREE, name="run", offset=0, children=(node,))
    return node


class TestTypeNames(unittest.TestCase):
    def _reasons(self, name, kind=DeclarationKind.CLASS):
        return [v.reason for v in structure_violations(_file([_type(name, kind=kind)]))]

    def test_valid_names(self):
        self.assertEqual(self._reasons("Abc"), [])
        self.assertEqual(self._reasons("A" + "b" * 39), [])
        self.assertEqual(self._reasons("Foo2", kind=DeclarationKind.STRUCT), [])
        self.assertEqual(self._reasons("Cafe\u0301"), [])

    def test_too_short(self):
        (v,) = structure_violations(_file([_type("Ab")]))
        self.assertEqual(v.kind, ViolationKind.NAME_FORMAT)
        self.assertEqual(v.location, Location("Test.swift", 1, 1))
        self.assertEqual(v.reason, "Type name should be between 3 and 40 characters in length: 'Ab'")

    def test_too_long(self):
        name = "A" + "b" * 40
        self.assertEqual(
            self._reasons(name), [f"Type name should be between 3 and 40 characters in length: '{name}'"]
        )

    def test_first_failing_check_wins(self):
        self.assertEqual(
            self._reasons("a_"), ["Type name should only contain alphanumeric characters: 'a_'"]
        )
        self.assertEqual(self._reasons("ab"), ["Type name should start with an uppercase character: 'ab'"])

    def test_applies_to_every_type_kind(self):
        for kind in (
            DeclarationKind.CLASS,
            DeclarationKind.STRUCT,
            DeclarationKind.TYPEALIAS,
            DeclarationKind.ENUM,
            DeclarationKind.ENUM_ELEMENT,
        ):
            self.assertEqual(len(self._reasons("lower", kind=kind)), 1, kind)
        self.assertEqual(self._reasons("lower", kind=DeclarationKind.PROTOCOL), [])


class TestVariableNames(unittest.TestCase):
    def _reasons(self, name, kind=DeclarationKind.VAR_INSTANCE):
        return [v.reason for v in structure_violations(_file([_type("Abc", children=[_var(name, kind=kind)])]))]

    def test_valid_names(self):
        self.assertEqual(self._reasons("count"), [])
        self.assertEqual(self._reasons("abc", kind=DeclarationKind.VAR_PARAMETER), [])

    def test_uppercase_start(self):
        self.assertEqual(
            self._reasons("Count"), ["Variable name should start with a lowercase character: 'Count'"]
        )

    def test_digit_start_is_not_lowercase(self):
        self.assertEqual(len(self._reasons("1abc")), 1)

    def test_length(self):
        self.assertEqual(
            self._reasons("x", kind=DeclarationKind.VAR_LOCAL),
            ["Variable name should be between 3 and 40 characters in length: 'x'"],
        )

    def test_non_alphanumeric(self):
        self.assertEqual(
            self._reasons("my_count", kind=DeclarationKind.VAR_GLOBAL),
            ["Variable name should only contain alphanumeric characters: 'my_count'"],
        )

    def test_combining_marks_are_alphanumeric(self):
        # "e" followed by U+0301 COMBINING ACUTE ACCENT.
        self.assertEqual(self._reasons("cafe\u0301", kind=DeclarationKind.VAR_GLOBAL), [])
        self.assertEqual(self._reasons("caf\u00e9", kind=DeclarationKind.VAR_GLOBAL), [])


class TestMissingData(unittest.TestCase):
    def test_missing_name_or_offset(self):
        nodes = [
            SyntaxNode(kind=DeclarationKind.CLASS, name=None, offset=0),
            SyntaxNode(kind=DeclarationKind.CLASS, name="ab", offset=None),
            SyntaxNode(kind=DeclarationKind.CLASS, name="ab", offset=10_000),
        ]
        self.assertEqual(structure_violations(_file(nodes)), [])

    def test_children_of_incomplete_nodes_are_still_checked(self):
        parent = SyntaxNode(kind=DeclarationKind.FUNCTION_FREE, children=(_var("X", kind=DeclarationKind.VAR_LOCAL),))
        reasons = [v.reason for v in structure_violations(_file([parent]))]
        self.assertEqual(reasons, ["Variable name should start with a lowercase character: 'X'"])


class TestBodyLength(unittest.TestCase):
    def _node(self, kind, contents):
        body_offset = contents.index("{") + 1
        return SyntaxNode(
            kind=kind,
            name="Abc",
            offset=0,
            body_offset=body_offset,
            body_length=contents.index("}") - body_offset,
        )

    def test_type_body_over_200_lines(self):
        contents = "class Abc {" + "\n" * 202 + "}\n"
        f = _file([], contents)
        (v,) = type_body_length_violations(f, self._node(DeclarationKind.CLASS, contents), 1)
        self.assertEqual(v.kind, ViolationKind.LENGTH)
        self.assertEqual(v.location, Location("Test.swift", 1, 1))
        self.assertEqual(v.reason, "Type body should span 200 lines or less: currently spans 202 lines")

    def test_type_body_of_200_lines(self):
        contents = "struct Abc {" + "\n" * 200 + "}\n"
        f = _file([], contents)
        self.assertEqual(type_body_length_violations(f, self._node(DeclarationKind.STRUCT, contents), 1), [])

    def test_function_body_over_40_lines(self):
        contents = "func run() {" + "\n" * 41 + "}\n"
        f = _file([], contents)
        node = self._node(DeclarationKind.FUNCTION_METHOD_INSTANCE, contents)
        (v,) = function_body_length_violations(f, node, 2)
        self.assertEqual(v.reason, "Function body should span 40 lines or less: currently spans 41 lines")
        # Only type kinds are measured against the type limit.
        self.assertEqual(type_body_length_violations(f, node, 2), [])

    def test_function_body_of_40_lines(self):
        contents = "func run() {" + "\n" * 40 + "}\n"
        f = _file([], contents)
        self.assertEqual(function_body_length_violations(f, self._node(DeclarationKind.FUNCTION_FREE, contents), 1), [])

    def test_missing_body_range(self):
        f = _file([])
        node = SyntaxNode(kind=DeclarationKind.CLASS, name="Abc", offset=0, body_offset=11)
        self.assertEqual(type_body_length_violations(f, node, 1), [])


class TestNesting(unittest.TestCase):
    def _nesting(self, tree):
        return [v for v in structure_violations(_file([tree])) if v.kind is ViolationKind.NESTING]

    def test_top_level_type(self):
        self.assertEqual(self._nesting(_type("Abc")), [])

    def test_type_nested_two_levels(self):
        (v,) = self._nesting(_type("Outer", children=[_type("Inner")]))
        self.assertEqual(v.reason, "Types should be nested at most 1 level deep")

    def test_statements_nested_six_levels(self):
        reasons = [v.reason for v in self._nesting(_nested(6, _var("value")))]
        self.assertEqual(reasons, ["Statements should be nested at most 5 levels deep"])
        self.assertEqual(self._nesting(_nested(5, _var("value"))), [])

    def test_deep_type_reports_only_type_nesting(self):
        reasons = [v.reason for v in self._nesting(_nested(6, _type("Deep")))]
        self.assertEqual(reasons, ["Types should be nested at most 1 level deep"])

    def test_unclassified_nodes_count_towards_depth(self):
        wrapper = SyntaxNode(kind=DeclarationKind.UNCLASSIFIED, offset=0, children=(_type("Inner"),))
        (v,) = self._nesting(wrapper)
        self.assertEqual(v.reason, "Types should be nested at most 1 level deep")

    def test_nesting_rule_needs_an_offset(self):
        f = _file([])
        node = SyntaxNode(kind=DeclarationKind.CLASS, name="Abc")
        self.assertEqual(nesting_violations(f, node, 3), [])


class TestWalk(unittest.TestCase):
    def test_enabled_filter(self):
        f = _file([_type("ab", children=[_type("Inner")])])
        kinds = {v.kind for v in structure_violations(f, enabled={"nesting"})}
        self.assertEqual(kinds, {ViolationKind.NESTING})

    def test_is_repeatable(self):
        f = _file([_type("ab", children=[_var("X"), _type("cd")])])
        self.assertEqual(structure_violations(f), structure_violations(f))


if __name__ == "__main__":
    unittest.main()
