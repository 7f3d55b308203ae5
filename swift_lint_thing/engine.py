from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

from .linter import Linter
from .rules import RuleSet
from .sourcekitten import SyntaxServiceError
from .syntax import SourceFile, SyntaxFormatError
from .types import Violation

logger = logging.getLogger(__name__)

SyntaxService = Callable[[Path, str], SourceFile]


@dataclass
class CheckResults:
    violations: list[Violation]
    files_checked: int


DEFAULT_EXTENSIONS = (".swift",)

DEFAULT_EXCLUDE_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".build",
    ".swiftpm",
    "Carthage",
    "Pods",
    "DerivedData",
    "node_modules",
    "build",
}


def _iter_files(paths: Iterable[Path], exts: tuple[str, ...]) -> Iterable[Path]:
    for p in paths:
        if p.is_dir():
            for fp in sorted(p.rglob("*")):
                if fp.is_file() and fp.suffix in exts:
                    if any(part in DEFAULT_EXCLUDE_DIRS for part in fp.parts):
                        continue
                    yield fp
        else:
            if p.is_file():
                yield p
            else:
                logger.warning("No such file: %s", p)


def lint_file(file: SourceFile, *, ruleset: RuleSet) -> list[Violation]:
    return Linter(file, ruleset).style_violations


def check_paths(
    paths: list[Path],
    *,
    ruleset: RuleSet,
    service: SyntaxService,
    exts: tuple[str, ...] = DEFAULT_EXTENSIONS,
) -> CheckResults:
    violations: list[Violation] = []
    files_checked = 0

    for fp in _iter_files(paths, exts):
        try:
            contents = fp.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            logger.warning("Skipping (not UTF-8): %s", fp)
            continue
        except OSError as e:
            logger.warning("Skipping (unreadable): %s: %s", fp, e)
            continue
        try:
            file = service(fp, contents)
        except (SyntaxServiceError, SyntaxFormatError) as e:
            logger.warning("Skipping (syntax analysis failed): %s: %s", fp, e)
            continue
        files_checked += 1
        found = lint_file(file, ruleset=ruleset)
        logger.debug("%s: %d violation(s)", fp, len(found))
        violations.extend(found)

    return CheckResults(violations=violations, files_checked=files_checked)
