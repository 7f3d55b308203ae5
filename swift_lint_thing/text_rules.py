"""Checks that only need the raw text, its lines, or regex matches over it."""

from __future__ import annotations

from .positions import SourceLine, location_at
from .syntax import SourceFile, TokenKind
from .token_context import ByteRange, match_pattern
from .types import Location, Violation, ViolationKind

MAX_LINE_LENGTH = 100
MAX_FILE_LENGTH = 400

# Line terminators Swift recognises; "\r\n" counts once.
_NEWLINES = frozenset("\n\r\x85\u2028\u2029")


def _count_leading_whitespace(text: str) -> int:
    n = 0
    for ch in text:
        if not ch.isspace():
            break
        n += 1
    return n


def _count_trailing_newlines(text: str) -> int:
    n = 0
    i = len(text)
    while i > 0:
        if text.endswith("\r\n", 0, i):
            i -= 2
        elif text[i - 1] in _NEWLINES:
            i -= 1
        else:
            break
        n += 1
    return n


def _matched_violations(
    file: SourceFile, ranges: list[ByteRange], kind: ViolationKind, reason: str
) -> list[Violation]:
    out: list[Violation] = []
    for r in ranges:
        loc = location_at(file.path, file.line_index, r.offset)
        if loc is None:
            continue
        out.append(Violation(kind=kind, location=loc, reason=reason))
    return out


def line_length_violations(file: SourceFile, lines: list[SourceLine]) -> list[Violation]:
    return [
        Violation(
            kind=ViolationKind.LENGTH,
            location=Location(file=file.path, line=ln.index),
            reason=(
                f"Line #{ln.index} should be {MAX_LINE_LENGTH} characters or less: "
                f"currently {len(ln.content)} characters"
            ),
        )
        for ln in lines
        if len(ln.content) > MAX_LINE_LENGTH
    ]


def leading_whitespace_violations(file: SourceFile) -> list[Violation]:
    count = _count_leading_whitespace(file.contents)
    if count == 0:
        return []
    return [
        Violation(
            kind=ViolationKind.LEADING_WHITESPACE,
            location=Location(file=file.path, line=1),
            reason=(
                "File shouldn't start with whitespace: "
                f"currently starts with {count} whitespace characters"
            ),
        )
    ]


def trailing_whitespace_violations(file: SourceFile, lines: list[SourceLine]) -> list[Violation]:
    out: list[Violation] = []
    for ln in lines:
        count = len(ln.content) - len(ln.content.rstrip())
        if count == 0:
            continue
        out.append(
            Violation(
                kind=ViolationKind.TRAILING_WHITESPACE,
                location=Location(file=file.path, line=ln.index),
                reason=(
                    f"Line #{ln.index} should have no trailing whitespace: "
                    f"currently has {count} trailing whitespace characters"
                ),
            )
        )
    return out


def trailing_newline_violations(file: SourceFile) -> list[Violation]:
    count = _count_trailing_newlines(file.contents)
    if count == 1:
        return []
    return [
        Violation(
            kind=ViolationKind.TRAILING_NEWLINE,
            location=Location(file=file.path),
            reason=f"File should have a single trailing newline: currently has {count}",
        )
    ]


def force_cast_violations(file: SourceFile) -> list[Violation]:
    return _matched_violations(
        file,
        match_pattern(file, "as!", [TokenKind.KEYWORD]),
        ViolationKind.FORCE_CAST,
        "Force casts should be avoided",
    )


def file_length_violations(file: SourceFile, lines: list[SourceLine]) -> list[Violation]:
    if len(lines) <= MAX_FILE_LENGTH:
        return []
    return [
        Violation(
            kind=ViolationKind.LENGTH,
            location=Location(file=file.path),
            reason=f"File should contain {MAX_FILE_LENGTH} lines or less: currently contains {len(lines)}",
        )
    ]


def todo_violations(file: SourceFile) -> list[Violation]:
    return _matched_violations(
        file,
        match_pattern(file, r"// (TODO|FIXME):", [TokenKind.COMMENT]),
        ViolationKind.TODO,
        "TODOs and FIXMEs should be avoided",
    )


def colon_violations(file: SourceFile) -> list[Violation]:
    kinds = [TokenKind.IDENTIFIER, TokenKind.TYPEIDENTIFIER]
    space_before = match_pattern(file, r"\w+\s+:\s*\S+", kinds)
    bad_space_after = match_pattern(file, r"\w+:(?:\s{0}|\s{2,})\S+", kinds)
    return _matched_violations(
        file,
        space_before + bad_space_after,
        ViolationKind.COLON,
        "When specifying a type, always associate the colon with the identifier",
    )
