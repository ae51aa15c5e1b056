"""activetext — recognise mentions, hashtags, URLs, emails and custom patterns in text."""
from activetext.config import LIBRARY_VERSION, ScanConfig
from activetext.controller import ActiveTextController, TouchPhase
from activetext.errors import PatternCompileError, ScanRequestError
from activetext.interaction.element_index import ElementIndex
from activetext.models.element import Element, ElementKind, ElementSpan, TextPayload, UrlPayload
from activetext.models.scan_result import ScanResult
from activetext.scanning.pattern_matcher import PatternCache, PatternMatcher
from activetext.scanning.scanner import scan

__version__ = LIBRARY_VERSION

__all__ = [
    "ActiveTextController",
    "Element",
    "ElementIndex",
    "ElementKind",
    "ElementSpan",
    "PatternCache",
    "PatternCompileError",
    "PatternMatcher",
    "ScanConfig",
    "ScanRequestError",
    "ScanResult",
    "TextPayload",
    "TouchPhase",
    "UrlPayload",
    "scan",
]
