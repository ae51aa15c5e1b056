"""
Element extractor — turns raw pattern matches into element spans.

Three strategies, selected by kind:

* **Boundary-stripped** (mention, hashtag): the pattern consumes one leading
  boundary character; it is dropped from the payload, along with a leftover
  ``@``/``#`` sigil, while the span keeps the full match range so the
  highlighted region includes the separator cell.
* **Direct** (email, custom): the trimmed match is the payload and the match
  range is the span.
* **URL**: may rewrite the text. Long URLs are truncated in the buffer and
  their span is located in the rewritten text; URLs without a scheme get
  ``https://`` in their canonical form. URL extraction must finish, and its
  buffer must be handed on, before any other kind is scanned.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from activetext.models.element import Element, ElementKind, ElementSpan, KindName
from activetext.observability.metrics import URL_TRUNCATIONS
from activetext.scanning.pattern_matcher import PatternMatch, PatternMatcher
from activetext.scanning.utf16 import Utf16Map, utf16_length

logger = logging.getLogger(__name__)

FilterPredicate = Callable[[str], bool]

#: Appended to truncated URLs in the visible text.
ELLIPSIS = "..."

DEFAULT_SCHEME = "https://"

#: Raw match lengths at or below these are discarded.
MIN_MATCH_LENGTH = 2
MIN_CUSTOM_MATCH_LENGTH = 1

_SIGILS = ("@", "#")


def extract_elements(
    kind: ElementKind,
    text: str,
    text_range: Tuple[int, int],
    matcher: PatternMatcher,
    filter_predicate: Optional[FilterPredicate] = None,
    utf16: Optional[Utf16Map] = None,
) -> List[ElementSpan]:
    """
    Extract spans of a non-URL *kind* from *text*.

    Args:
        kind:             Element kind to extract; must not be URL.
        text:             Current working text (already URL-rewritten).
        text_range:       ``(location, length)`` in UTF-16 code units.
        matcher:          Pattern matcher used to run the kind's pattern.
        filter_predicate: Called with the cleaned payload text; returning
                          ``False`` drops the element. Exceptions propagate.
        utf16:            Precomputed offset table for *text*.

    Returns:
        Spans in match order. An uncompilable pattern yields ``[]``.
    """
    if kind.name is KindName.URL:
        raise ValueError("URL elements are extracted with extract_url_elements()")

    matches = matcher.match(kind.pattern, text, text_range, utf16=utf16)
    if kind.name in (KindName.MENTION, KindName.HASHTAG):
        spans = _extract_ignoring_first_character(kind, matches, filter_predicate)
    else:
        min_length = MIN_CUSTOM_MATCH_LENGTH if kind.is_custom else MIN_MATCH_LENGTH
        spans = _extract_direct(kind, matches, min_length, filter_predicate)

    logger.debug("Extracted %d %s spans from %d matches", len(spans), kind.label, len(matches))
    return spans


def extract_url_elements(
    text: str,
    text_range: Tuple[int, int],
    matcher: PatternMatcher,
    maximum_length: Optional[int] = None,
    utf16: Optional[Utf16Map] = None,
) -> Tuple[List[ElementSpan], str]:
    """
    Extract URL spans, truncating long URLs in the text.

    Each URL longer than *maximum_length* characters is replaced in the
    buffer by its first *maximum_length* characters plus :data:`ELLIPSIS`,
    and its span points at the replacement. Exactly *maximum_length*
    characters of URL followed by the ellipsis are taken as a previously
    truncated display form and left alone, so rescanning the output changes
    nothing.

    Returns:
        A tuple of the URL spans (ranges relative to the returned text) and
        the rewritten text.
    """
    table = utf16 if utf16 is not None and utf16.text is text else Utf16Map(text)
    matches = matcher.match(ElementKind.URL.pattern, text, text_range, utf16=table)

    buffer = text
    shift = 0
    spans: List[ElementSpan] = []

    for match in matches:
        if match.length <= MIN_MATCH_LENGTH:
            continue
        word = match.body.strip()
        if not word:
            continue

        leading = len(match.body) - len(match.body.lstrip())
        position = table.to_codepoint(match.body_location) + leading + shift
        display = word

        if maximum_length is not None and _is_truncated_form(buffer, position, word, maximum_length):
            display = buffer[position:position + maximum_length] + ELLIPSIS
        elif maximum_length is not None and len(word) > maximum_length:
            truncated = word[:maximum_length] + ELLIPSIS
            found = buffer.find(word, position)
            if found == -1:
                logger.warning("Could not locate URL %r for truncation; leaving it untruncated", word)
            else:
                buffer = buffer[:found] + truncated + buffer[found + len(word):]
                shift += len(truncated) - len(word)
                position = found
                display = truncated
                URL_TRUNCATIONS.inc()

        original = word if "://" in word else DEFAULT_SCHEME + word
        spans.append(
            ElementSpan(
                location=utf16_length(buffer[:position]),
                length=utf16_length(display),
                element=Element.url(original=original, display=display),
            )
        )

    return spans, buffer


def _is_truncated_form(buffer: str, position: int, word: str, maximum_length: int) -> bool:
    """
    True when *buffer* holds exactly *maximum_length* characters of URL at
    *position* followed by :data:`ELLIPSIS`, and *word* is a re-match of them.

    The URL pattern cannot end on ``.`` or ``-``, so a re-match may be shorter
    than the kept prefix; a bare-scheme re-match may run on into the marker.
    """
    kept = buffer[position:position + maximum_length]
    if len(kept) != maximum_length or not buffer.startswith(ELLIPSIS, position + maximum_length):
        return False
    return kept.startswith(word) or word.startswith(kept)


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


def _extract_ignoring_first_character(
    kind: ElementKind,
    matches: List[PatternMatch],
    filter_predicate: Optional[FilterPredicate],
) -> List[ElementSpan]:
    spans: List[ElementSpan] = []
    for match in matches:
        if match.length <= MIN_MATCH_LENGTH:
            continue
        word = match.text[1:]
        if word.startswith(_SIGILS):
            word = word[1:]
        if not word:
            continue
        if filter_predicate is not None and not filter_predicate(word):
            continue
        spans.append(ElementSpan(match.location, match.length, Element.with_text(kind, word)))
    return spans


def _extract_direct(
    kind: ElementKind,
    matches: List[PatternMatch],
    min_length: int,
    filter_predicate: Optional[FilterPredicate],
) -> List[ElementSpan]:
    spans: List[ElementSpan] = []
    for match in matches:
        if match.length <= min_length:
            continue
        word = match.text.strip()
        if not word:
            continue
        if filter_predicate is not None and not filter_predicate(word):
            continue
        spans.append(ElementSpan(match.location, match.length, Element.with_text(kind, word)))
    return spans
