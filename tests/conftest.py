"""
Pytest fixtures shared across all test modules.
"""
import pytest

from activetext.models.element import ElementKind
from activetext.scanning.pattern_matcher import PatternCache, PatternMatcher


# ---------------------------------------------------------------------------
# Matcher fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def pattern_cache():
    """A fresh, empty pattern cache so tests never share compiled state."""
    return PatternCache()


@pytest.fixture
def matcher(pattern_cache):
    return PatternMatcher(cache=pattern_cache)


# ---------------------------------------------------------------------------
# Kind fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def ticket_kind():
    """Custom kind recognising ticket references such as TKT-42."""
    return ElementKind.custom("ticket", r"TKT-\d+")


@pytest.fixture
def all_kinds(ticket_kind):
    return [
        ElementKind.MENTION,
        ElementKind.HASHTAG,
        ElementKind.URL,
        ElementKind.EMAIL,
        ticket_kind,
    ]


# ---------------------------------------------------------------------------
# Sample text fixture
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_text():
    """A post touching every kind of element."""
    return (
        "Ping @alice about #release, see https://example.com/notes or "
        "www.status.example.org/incidents/2025/42 for details. "
        "Mail ops@example.com and quote TKT-1234."
    )
