"""
Adapter to the external syntax-analysis service.

`sourcekitten structure --file F` prints the declaration tree of F and
`sourcekitten syntax --file F` prints its classified tokens, both as JSON.
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

from .syntax import SourceFile, node_from_dict, tokens_from_list

logger = logging.getLogger(__name__)


class SyntaxServiceError(RuntimeError):
    pass


def load_source_file(path: Path | str | None, contents: str, structure: Any, syntax: Any) -> SourceFile:
    """Build a SourceFile from already-decoded structure and syntax JSON documents."""
    return SourceFile(
        path=str(path) if path is not None else None,
        contents=contents,
        structure=node_from_dict(structure),
        tokens=tokens_from_list(syntax),
    )


class SourceKittenService:
    def __init__(self, executable: str = "sourcekitten") -> None:
        self.executable = executable

    def _run(self, request: str, path: Path) -> Any:
        cmd = [self.executable, request, "--file", str(path)]
        logger.debug("Running %s", " ".join(cmd))
        # FileNotFoundError (no executable) propagates: nothing can be linted without it.
        result = subprocess.run(cmd, check=False, text=True, capture_output=True)
        if result.returncode != 0:
            raise SyntaxServiceError(
                f"{self.executable} {request} failed for {path} "
                f"(exit {result.returncode}): {result.stderr.strip()}"
            )
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise SyntaxServiceError(f"{self.executable} {request} printed invalid JSON for {path}: {e}") from e

    def __call__(self, path: Path, contents: str) -> SourceFile:
        return load_source_file(
            path,
            contents,
            structure=self._run("structure", path),
            syntax=self._run("syntax", path),
        )
