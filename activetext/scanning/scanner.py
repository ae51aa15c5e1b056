"""
Scanner — full-text scan orchestration.

  Step 1. Request validation (text type, enabled kinds, URL max length)
  Step 2. URL extraction — runs first because it may rewrite the text; the
          rewritten buffer and its length become the working text and range
  Step 3. Every other enabled kind, in the caller's order, against the
          working text
  Step 4. Publish the final text and the spans per kind

A scan is synchronous and always rebuilds every span from scratch. Patterns
that do not compile are reported on :attr:`ScanResult.errors`; an exception
raised by a caller-supplied filter predicate propagates and fails the scan.
"""
from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Union

from activetext.models.element import ElementKind, ElementSpan, KindName
from activetext.models.scan_request import ScanRequest, validate_request
from activetext.models.scan_result import ScanResult
from activetext.observability.logging import ScanLogger
from activetext.observability.metrics import SCANS_TOTAL, record_span_counts, timer
from activetext.scanning.extractor import FilterPredicate, extract_elements, extract_url_elements
from activetext.scanning.pattern_matcher import PatternMatcher
from activetext.scanning.utf16 import Utf16Map

logger = logging.getLogger(__name__)

_scan_ids = itertools.count(1)


@dataclass
class ScanState:
    """Transient working state of one scan."""

    text: str
    range_length: int
    spans_by_kind: Dict[ElementKind, List[ElementSpan]] = field(default_factory=dict)

    @classmethod
    def start(cls, text: str) -> "ScanState":
        return cls(text=text, range_length=Utf16Map(text).length)

    @property
    def text_range(self) -> tuple:
        return (0, self.range_length)

    def publish_text(self, text: str) -> None:
        """Replace the working text after a rewrite and resize the scan range."""
        self.text = text
        self.range_length = Utf16Map(text).length


def scan(
    text: str,
    enabled_kinds: Iterable[Union[ElementKind, str]],
    filters: Optional[Mapping[ElementKind, FilterPredicate]] = None,
    url_max_length: Optional[int] = None,
    matcher: Optional[PatternMatcher] = None,
    request: Optional[ScanRequest] = None,
) -> ScanResult:
    """
    Scan *text* for every enabled kind.

    Args:
        text:           Source text.
        enabled_kinds:  Kinds to recognise, as :class:`ElementKind` values or
                        built-in names. URL is always extracted first,
                        wherever it appears in the list.
        filters:        Optional accept predicates per kind (not consulted
                        for URL). A kind without a predicate accepts all.
        url_max_length: Truncate visible URLs longer than this; ``None`` = no limit.
        matcher:        Pattern matcher; defaults to one backed by the
                        process-wide cache.
        request:        Pre-validated request; when given, *text*,
                        *enabled_kinds* and *url_max_length* are ignored.

    Returns:
        A :class:`ScanResult` whose ranges address ``result.text``.

    Raises:
        :class:`~activetext.errors.ScanRequestError` for a malformed request.
        Any exception raised by a filter predicate.
    """
    if request is None:
        request = validate_request(
            {"text": text, "enabled_kinds": list(enabled_kinds), "url_max_length": url_max_length}
        )
    matcher = matcher if matcher is not None else PatternMatcher()
    filters = filters or {}
    scan_log = ScanLogger(f"scan-{next(_scan_ids)}")

    state = ScanState.start(request.text)
    result = ScanResult(request.text)

    try:
        if not request.text:
            SCANS_TOTAL.labels(outcome="ok").inc()
            return result

        kinds = request.kinds

        # ------------------------------------------------------------------
        # Step 2 — URLs first: they may rewrite the buffer
        # ------------------------------------------------------------------
        if ElementKind.URL in kinds:
            with timer("url") as t_url:
                url_spans, rewritten = extract_url_elements(
                    state.text,
                    state.text_range,
                    matcher,
                    maximum_length=request.url_max_length,
                )
            state.publish_text(rewritten)
            state.spans_by_kind[ElementKind.URL] = url_spans
            result.record_timing("url", t_url.elapsed_ms)
            scan_log.debug("urls_done", count=len(url_spans), rewritten=rewritten != request.text)

        # ------------------------------------------------------------------
        # Step 3 — remaining kinds against the working text
        # ------------------------------------------------------------------
        table = Utf16Map(state.text)
        for kind in kinds:
            if kind.name is KindName.URL:
                continue
            error = matcher.compile_error(kind.pattern)
            if error is not None:
                result.add_error("pattern_matcher", kind, str(error))
                scan_log.log_pattern_error(kind.label, error.reason)
                state.spans_by_kind[kind] = []
                continue
            with timer(kind.label) as t_kind:
                state.spans_by_kind[kind] = extract_elements(
                    kind,
                    state.text,
                    state.text_range,
                    matcher,
                    filter_predicate=filters.get(kind),
                    utf16=table,
                )
            result.record_timing(kind.label, t_kind.elapsed_ms)

    except Exception:
        SCANS_TOTAL.labels(outcome="failed").inc()
        logger.exception("Scan failed")
        raise

    # ----------------------------------------------------------------------
    # Step 4 — publish
    # ----------------------------------------------------------------------
    result.text = state.text
    for kind, spans in state.spans_by_kind.items():
        result.set_spans(kind, spans)

    record_span_counts(result.all_spans())
    scan_log.log_span_summary(result.all_spans(), text_length=state.range_length)
    SCANS_TOTAL.labels(outcome="ok").inc()
    return result
