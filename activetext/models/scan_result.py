"""
Output of a scan: the (possibly rewritten) text plus the spans found per kind.

Non-fatal problems, such as a custom pattern that does not compile, are
recorded in ``errors`` instead of being raised; an empty text or a text
without matches is a normal, empty result.
"""
from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional

from activetext.models.element import ElementKind, ElementSpan

if TYPE_CHECKING:
    from activetext.interaction.element_index import ElementIndex


class ScanResult:
    """
    Result object built incrementally by the scanner.

    ``spans_by_kind`` preserves the order in which kinds were scanned; each
    list is in match order.
    """

    def __init__(self, text: str, source_text: Optional[str] = None) -> None:
        self.text = text
        self.source_text = text if source_text is None else source_text
        self.spans_by_kind: Dict[ElementKind, List[ElementSpan]] = {}
        self.errors: List[Dict[str, str]] = []
        self.timings: Dict[str, float] = {}

    # ------------------------------------------------------------------
    # Builder methods
    # ------------------------------------------------------------------

    def set_spans(self, kind: ElementKind, spans: List[ElementSpan]) -> None:
        self.spans_by_kind[kind] = list(spans)

    def add_error(self, component: str, kind: ElementKind, message: str) -> None:
        """Record a non-blocking error; scanning continued for other kinds."""
        self.errors.append({"component": component, "kind": kind.label, "message": message})

    def record_timing(self, component: str, elapsed_ms: float) -> None:
        self.timings[component] = round(elapsed_ms, 3)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def ok(self) -> bool:
        """True when every enabled pattern compiled."""
        return not self.errors

    @property
    def text_changed(self) -> bool:
        return self.text != self.source_text

    def spans(self, kind: ElementKind) -> List[ElementSpan]:
        return list(self.spans_by_kind.get(kind, []))

    def all_spans(self) -> Iterator[ElementSpan]:
        """Iterate spans in kind-then-insertion order."""
        for spans in self.spans_by_kind.values():
            yield from spans

    def index(self) -> "ElementIndex":
        from activetext.interaction.element_index import ElementIndex

        return ElementIndex(self.spans_by_kind)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "spans": {
                kind.label: [s.to_dict() for s in spans]
                for kind, spans in self.spans_by_kind.items()
            },
            "meta": {
                "text_changed": self.text_changed,
                "span_count": sum(len(s) for s in self.spans_by_kind.values()),
                "timings_ms": self.timings,
            },
            "errors": self.errors,
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"ScanResult(spans={sum(len(s) for s in self.spans_by_kind.values())},"
            f" errors={len(self.errors)}, text_changed={self.text_changed})"
        )
