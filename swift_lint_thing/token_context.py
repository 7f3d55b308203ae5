from __future__ import annotations

import bisect
import itertools
import logging
import re
from dataclasses import dataclass
from typing import Sequence

from .syntax import SourceFile, TokenKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ByteRange:
    offset: int
    length: int


def _byte_offsets(text: str) -> list[int]:
    # byte_offsets[i] is the UTF-8 offset of text[i]; the last entry is len(encoded).
    return list(itertools.accumulate((len(ch.encode("utf-8")) for ch in text), initial=0))


def match_pattern(
    file: SourceFile, pattern: str, syntax_kinds: Sequence[TokenKind] = ()
) -> list[ByteRange]:
    """
    Search `file.contents` for `pattern`, keeping only matches whose tokens
    have exactly the kinds in `syntax_kinds`, in order.

    A token belongs to a match when its offset falls inside the match's byte
    range. Tokens of a kind we do not recognize are ignored. With no
    required kinds every match is kept.
    """
    try:
        rx = re.compile(pattern)
    except re.error as e:
        logger.warning("Ignoring invalid pattern %r: %s", pattern, e)
        return []

    text = file.contents
    byte_at = _byte_offsets(text)
    tokens = sorted(file.tokens, key=lambda t: t.offset)
    token_offsets = [t.offset for t in tokens]
    required = list(syntax_kinds)

    out: list[ByteRange] = []
    for m in rx.finditer(text):
        start, end = byte_at[m.start()], byte_at[m.end()]
        if required:
            lo = bisect.bisect_left(token_offsets, start)
            hi = bisect.bisect_left(token_offsets, end)
            kinds = [k for k in (t.token_kind for t in tokens[lo:hi]) if k is not None]
            if kinds != required:
                continue
        out.append(ByteRange(offset=start, length=end - start))
    return out
