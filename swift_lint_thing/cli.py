from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from .engine import DEFAULT_EXTENSIONS, check_paths
from .rules import RULE_DESCRIPTIONS, RuleSet, RulesFormatError, load_rules
from .sourcekitten import SourceKittenService
from .types import Violation


def _build_global_parser() -> argparse.ArgumentParser:
    gp = argparse.ArgumentParser(add_help=False)
    gp.add_argument(
        "--rules",
        required=False,
        help="Path to a JSON rules file (disabled rules, severities).",
    )
    gp.add_argument(
        "--json",
        dest="json_out",
        action="store_true",
        help="Emit machine-readable JSON results.",
    )
    gp.add_argument(
        "--extensions",
        default=",".join(DEFAULT_EXTENSIONS),
        help="Comma-separated extensions to scan in directories (default: .swift).",
    )
    gp.add_argument(
        "--group",
        default="none",
        choices=("none", "rule", "file", "rule,file"),
        help="Text output grouping (ignored with --json). Default: none (Xcode style).",
    )
    gp.add_argument(
        "--sourcekitten",
        default="sourcekitten",
        help="sourcekitten executable used for syntax analysis.",
    )
    gp.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr.",
    )
    return gp


def _build_parser() -> argparse.ArgumentParser:
    # Note: global flags are handled via a pre-parse step so they can appear
    # before or after the subcommand (argparse subparsers don't support this well).
    p = argparse.ArgumentParser(
        prog="swift-lint-thing",
        add_help=True,
        parents=[_build_global_parser()],
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_lint = sub.add_parser(
        "lint",
        help="Check Swift sources and report style violations.",
    )
    sp_lint.add_argument(
        "paths",
        nargs="+",
        help="Files or directories to check (directories are scanned recursively).",
    )

    sub.add_parser("rules", help="List the available rules.")

    return p


def _violation_to_dict(v: Violation) -> dict[str, Any]:
    return {
        "kind": v.kind.identifier,
        "severity": v.severity.name.lower(),
        "level": v.severity.xcode_description,
        "file": v.location.file,
        "line": v.location.line,
        "character": v.location.character,
        "reason": v.reason,
    }


def main(argv: list[str] | None = None) -> int:
    gp = _build_global_parser()
    global_args, remaining = gp.parse_known_args(argv)

    parser = _build_parser()
    args = parser.parse_args(remaining)

    # Merge globals back in (so downstream code doesn't care where flags appeared).
    for key, value in vars(global_args).items():
        setattr(args, key, value)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "rules":
        for rid, desc in RULE_DESCRIPTIONS.items():
            sys.stdout.write(f"{rid}\t{desc}\n")
        return 0

    ruleset = RuleSet.default()
    if args.rules:
        try:
            ruleset = load_rules(Path(args.rules))
        except (OSError, RulesFormatError) as e:
            sys.stderr.write(f"swift-lint-thing: {e}\n")
            return 2

    exts = tuple(
        e.strip() if e.strip().startswith(".") else f".{e.strip()}"
        for e in str(args.extensions).split(",")
        if e.strip()
    )

    try:
        results = check_paths(
            [Path(p) for p in args.paths],
            ruleset=ruleset,
            service=SourceKittenService(args.sourcekitten),
            exts=exts,
        )
    except FileNotFoundError as e:
        sys.stderr.write(f"swift-lint-thing: syntax analysis unavailable: {e}\n")
        return 2

    if args.json_out:
        payload = {
            "cwd": os.getcwd(),
            "rules_file": args.rules,
            "violations": [_violation_to_dict(v) for v in results.violations],
            "files_checked": results.files_checked,
        }
        sys.stdout.write(json.dumps(payload, indent=2, sort_keys=True))
        sys.stdout.write("\n")
    else:
        if args.group == "none":
            for v in results.violations:
                sys.stdout.write(f"{v}\n")
        else:
            _print_grouped(results.violations, group=args.group)
        if results.violations:
            sys.stdout.write(
                f"\n{len(results.violations)} violation(s) in {results.files_checked} file(s)\n"
            )

    return 1 if results.violations else 0


def _loc(v: Violation) -> str:
    line = v.location.line if v.location.line is not None else "-"
    char = v.location.character if v.location.character is not None else "-"
    return f"{line}:{char}"


def _sort_key(v: Violation) -> tuple[str, int, int]:
    return (v.location.file or "", v.location.line or 0, v.location.character or 0)


def _print_grouped(violations: list[Violation], *, group: str) -> None:
    if not violations:
        return

    if group == "file":
        by_file: dict[str, list[Violation]] = {}
        for v in violations:
            by_file.setdefault(str(v.location.file), []).append(v)
        for path in sorted(by_file):
            sys.stdout.write(f"{path}\n")
            for v in sorted(by_file[path], key=lambda x: (x.kind.value,) + _sort_key(x)):
                sys.stdout.write(f"  {_loc(v)} {v.kind} {v.reason or ''}\n")
        return

    # Default: rule or rule,file
    by_kind: dict[str, list[Violation]] = {}
    for v in violations:
        by_kind.setdefault(v.kind.value, []).append(v)

    for label in sorted(by_kind):
        kv = by_kind[label]
        sys.stdout.write(f"{label} ({len(kv)})\n")

        if group == "rule":
            for v in sorted(kv, key=_sort_key):
                sys.stdout.write(f"  {v.location}: {v.reason or ''}\n")
            continue

        # group == "rule,file"
        by_file = {}
        for v in kv:
            by_file.setdefault(str(v.location.file), []).append(v)
        for path in sorted(by_file):
            locs = sorted(by_file[path], key=_sort_key)
            loc_str = ", ".join(_loc(x) for x in locs)
            sys.stdout.write(f"  {path} ({len(locs)}): {loc_str}\n")


if __name__ == "__main__":
    raise SystemExit(main())
