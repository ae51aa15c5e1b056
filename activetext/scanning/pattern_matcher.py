"""
Pattern matcher — compiled-pattern cache and range-limited matching.

Patterns are compiled case-insensitively with the ``regex`` package (the
built-in patterns rely on ``\\p{L}`` letter classes) and memoised in a
:class:`PatternCache` keyed by pattern text. The cache never evicts: the
pattern set is the four built-ins plus a handful of custom ones per host.

A pattern that fails to compile is cached as a failure and simply yields no
matches; :meth:`PatternMatcher.compile_error` exposes the failure so the
scanner can report it on the result.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

import regex

from activetext.errors import PatternCompileError
from activetext.observability.metrics import PATTERN_COMPILE_ERRORS
from activetext.scanning.utf16 import Utf16Map

logger = logging.getLogger(__name__)

_FLAGS = regex.IGNORECASE


@dataclass(frozen=True)
class PatternMatch:
    """One match, with offsets in UTF-16 code units."""

    location: int
    length: int
    text: str
    """Full matched substring."""

    body_location: int
    body_length: int
    body: str
    """Substring of the ``body`` group, or the full match when the pattern has none."""


# ---------------------------------------------------------------------------
# PatternCache
# ---------------------------------------------------------------------------


class PatternCache:
    """Append-only cache of compiled patterns.

    Reads are lock-free; inserts happen under a lock so a pattern is
    compiled at most once.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Union[regex.Pattern, PatternCompileError]] = {}
        self._lock = threading.Lock()

    def get(self, pattern: str) -> Optional[regex.Pattern]:
        """Return the compiled pattern, or ``None`` if it does not compile."""
        entry = self._entries.get(pattern)
        if entry is None:
            entry = self._compile(pattern)
        return None if isinstance(entry, PatternCompileError) else entry

    def error(self, pattern: str) -> Optional[PatternCompileError]:
        """Return the compile failure recorded for *pattern*, if any."""
        if pattern not in self._entries:
            self.get(pattern)
        entry = self._entries.get(pattern)
        return entry if isinstance(entry, PatternCompileError) else None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, pattern: object) -> bool:
        return pattern in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def _compile(self, pattern: str) -> Union[regex.Pattern, PatternCompileError]:
        with self._lock:
            entry = self._entries.get(pattern)
            if entry is not None:
                return entry
            try:
                entry = regex.compile(pattern, _FLAGS)
            except (regex.error, TypeError) as exc:
                entry = PatternCompileError(pattern, str(exc))
                PATTERN_COMPILE_ERRORS.inc()
                logger.warning("Invalid pattern '%s': %s", pattern, exc)
            self._entries[pattern] = entry
            return entry


_default_cache: Optional[PatternCache] = None
_default_cache_lock = threading.Lock()


def default_cache() -> PatternCache:
    """Return the process-wide cache, creating it on first use."""
    global _default_cache
    if _default_cache is None:
        with _default_cache_lock:
            if _default_cache is None:
                _default_cache = PatternCache()
    return _default_cache


# ---------------------------------------------------------------------------
# PatternMatcher
# ---------------------------------------------------------------------------


class PatternMatcher:
    """Finds non-overlapping, left-to-right matches of a pattern in a text range."""

    def __init__(self, cache: Optional[PatternCache] = None) -> None:
        self.cache = cache if cache is not None else default_cache()

    def compile_error(self, pattern: str) -> Optional[PatternCompileError]:
        return self.cache.error(pattern)

    def match(
        self,
        pattern: str,
        text: str,
        text_range: Optional[Tuple[int, int]] = None,
        utf16: Optional[Utf16Map] = None,
    ) -> List[PatternMatch]:
        """
        Return all matches of *pattern* inside *text_range*.

        Args:
            pattern:    Pattern text; compiled through the cache.
            text:       Text to search.
            text_range: ``(location, length)`` in UTF-16 code units. The
                        sub-range is searched as if it were the whole string,
                        so ``^`` and ``$`` bind to its edges. Defaults to the
                        full text.
            utf16:      Precomputed offset table for *text*, if the caller
                        already has one.

        Returns:
            Matches in text order. An uncompilable pattern yields ``[]``.
        """
        compiled = self.cache.get(pattern)
        if compiled is None or not text:
            return []

        table = utf16 if utf16 is not None and utf16.text is text else Utf16Map(text)
        if text_range is None:
            start, end = 0, len(text)
        else:
            start, end = table.range_to_codepoints(*text_range)
        if end <= start:
            return []

        window = text[start:end]
        has_body = "body" in compiled.groupindex
        matches: List[PatternMatch] = []
        for m in compiled.finditer(window):
            m_start, m_end = m.start() + start, m.end() + start
            location, length = table.span_to_utf16(m_start, m_end)
            if has_body and m.start("body") >= 0:
                b_start, b_end = m.start("body") + start, m.end("body") + start
                body_location, body_length = table.span_to_utf16(b_start, b_end)
                body = m.group("body")
            else:
                body_location, body_length, body = location, length, m.group(0)
            matches.append(
                PatternMatch(
                    location=location,
                    length=length,
                    text=m.group(0),
                    body_location=body_location,
                    body_length=body_length,
                    body=body,
                )
            )
        return matches
