from __future__ import annotations

import bisect
import re
from dataclasses import dataclass
from typing import Iterator

from .types import Location

# Line boundaries as Swift sees them. Vertical tab and form feed are whitespace, not breaks.
LINE_BREAK = re.compile(r"\r\n|[\n\r\x85\u2028\u2029]")


@dataclass(frozen=True)
class SourceLine:
    index: int
    content: str


def _line_spans(text: str) -> Iterator[tuple[int, int, int]]:
    # (start, end of content, end including terminator) in character indices.
    pos = 0
    for m in LINE_BREAK.finditer(text):
        yield pos, m.start(), m.end()
        pos = m.end()
    if pos < len(text):
        yield pos, len(text), len(text)


def split_lines(text: str) -> list[SourceLine]:
    """Split `text` on line boundaries; indices are 1-based, terminators dropped."""
    return [
        SourceLine(index=i, content=text[start:end])
        for i, (start, end, _) in enumerate(_line_spans(text), start=1)
    ]


class LineIndex:
    """
    Byte offset lookups for one text.

    Builds the UTF-8 encoding and the table of line starts once, so each
    lookup is a binary search.
    """

    def __init__(self, text: str) -> None:
        self.encoded = text.encode("utf-8")
        self.starts: list[int] = []
        pos = 0
        for start, _, end in _line_spans(text):
            self.starts.append(pos)
            pos += len(text[start:end].encode("utf-8"))
        if not self.starts:
            self.starts.append(0)

    def line_and_character(self, byte_offset: int) -> tuple[int, int] | None:
        encoded = self.encoded
        if byte_offset < 0 or byte_offset > len(encoded):
            return None
        if byte_offset < len(encoded) and (encoded[byte_offset] & 0xC0) == 0x80:
            # UTF-8 continuation byte
            return None

        line = bisect.bisect_right(self.starts, byte_offset)
        prefix = encoded[self.starts[line - 1] : byte_offset].decode("utf-8")
        return line, len(prefix) + 1

    def line(self, byte_offset: int) -> int | None:
        pos = self.line_and_character(byte_offset)
        return pos[0] if pos is not None else None


def offset_to_line_and_character(text: str, byte_offset: int) -> tuple[int, int] | None:
    """
    Map a UTF-8 byte offset into `text` to a 1-based (line, character) pair.

    The character is the 1-based count of code points from the start of the
    line. Returns None when the offset lies outside the text or inside a
    multi-byte character. An offset at the very end of the text belongs to
    the last line, even when the text ends with a newline.
    """
    return LineIndex(text).line_and_character(byte_offset)


def offset_to_line(text: str, byte_offset: int) -> int | None:
    return LineIndex(text).line(byte_offset)


def location_at(path: str | None, index: LineIndex, byte_offset: int | None) -> Location | None:
    if byte_offset is None:
        return None
    pos = index.line_and_character(byte_offset)
    if pos is None:
        return None
    return Location(file=path, line=pos[0], character=pos[1])
