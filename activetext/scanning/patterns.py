"""
Built-in recognition patterns.

Hashtag and mention patterns consume one leading boundary character (or
match at the start of the string), which the extractor strips from the
payload. The URL pattern consumes its leading boundary outside the ``body``
group and checks the trailing boundary with a lookahead.
"""
from __future__ import annotations

from typing import Dict

from activetext.models.element import KindName

HASHTAG_PATTERN = r"(?:^|\s|$)#[\p{L}0-9_]*"

MENTION_PATTERN = r"(?:^|\s|$|[.])@[\p{L}0-9_]+(?:\.[\p{L}0-9_]+)*"

EMAIL_PATTERN = r"[A-Z0-9a-z._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,64}"

URL_PATTERN = (
    r"(?:^|[\s.:;?\-\(])"                                  # leading boundary
    r"(?P<body>"
    r"(?:https?://|www\.|[a-zA-Z][a-zA-Z0-9+.-]*://)?"     # scheme or www.
    r"[\w-]+\.[a-zA-Z]{2,}"                                # domain + TLD
    r"(?:[\w./?&%=+-]*[\w/])?"                             # path / query
    r"|[a-zA-Z][a-zA-Z0-9+.-]*://[\w./?&%=+-]*"            # bare scheme URL
    r")"
    r"(?=$|[\s.,:;?\-\)])"                                 # trailing boundary
)

BUILTIN_PATTERNS: Dict[KindName, str] = {
    KindName.HASHTAG: HASHTAG_PATTERN,
    KindName.MENTION: MENTION_PATTERN,
    KindName.EMAIL: EMAIL_PATTERN,
    KindName.URL: URL_PATTERN,
}
