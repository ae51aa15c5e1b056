"""Conversions between code-point indices and UTF-16 code-unit offsets."""
from __future__ import annotations

from bisect import bisect_right
from typing import List, Tuple


def utf16_length(text: str) -> int:
    if not text:
        return 0
    return len(text.encode("utf-16-le")) // 2


class Utf16Map:
    """Offset table for one text buffer.

    ``offsets[i]`` is the UTF-16 offset of code point *i*; the table has one
    extra entry for the end of the text.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        offsets: List[int] = [0]
        total = 0
        for ch in text:
            total += 1 if ord(ch) <= 0xFFFF else 2
            offsets.append(total)
        self._offsets = offsets

    @property
    def length(self) -> int:
        """Total length in UTF-16 code units."""
        return self._offsets[-1]

    def to_utf16(self, index: int) -> int:
        idx = max(0, min(len(self.text), int(index)))
        return self._offsets[idx]

    def to_codepoint(self, offset: int) -> int:
        """Return the code-point index for a UTF-16 offset.

        Offsets pointing into the middle of a surrogate pair round down.
        """
        units = max(0, min(self.length, int(offset)))
        return bisect_right(self._offsets, units) - 1

    def range_to_codepoints(self, location: int, length: int) -> Tuple[int, int]:
        """Convert a UTF-16 ``(location, length)`` range to code-point ``(start, end)``."""
        start = self.to_codepoint(location)
        end = self.to_codepoint(location + max(0, length))
        return start, end

    def span_to_utf16(self, start: int, end: int) -> Tuple[int, int]:
        """Convert a code-point ``[start, end)`` span to UTF-16 ``(location, length)``."""
        location = self.to_utf16(start)
        return location, self.to_utf16(end) - location
