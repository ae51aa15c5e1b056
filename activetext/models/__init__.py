"""Domain models — public API."""
from activetext.models.element import Element, ElementKind, ElementSpan, KindName, TextPayload, UrlPayload
from activetext.models.scan_request import ScanRequest
from activetext.models.scan_result import ScanResult

__all__ = [
    "Element",
    "ElementKind",
    "ElementSpan",
    "KindName",
    "ScanRequest",
    "ScanResult",
    "TextPayload",
    "UrlPayload",
]
