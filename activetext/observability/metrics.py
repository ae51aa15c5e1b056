"""
Prometheus metrics for the scanning engine.

Exported metrics
----------------
``activetext_scans_total``                  counter   — scans by outcome (ok/failed)
``activetext_spans_per_scan``               histogram — span count per scan, labelled by kind
``activetext_scan_latency_seconds``         histogram — latency per scan step (seconds)
``activetext_pattern_compile_errors_total`` counter   — patterns that failed to compile
``activetext_url_truncations_total``        counter   — URLs shortened in the text buffer
"""
from __future__ import annotations

import time
from collections import Counter as PyCounter
from typing import Any, Iterable

from prometheus_client import Counter, Histogram

# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

#: Number of spans produced per scan, labelled by element kind.
SPANS_PER_SCAN = Histogram(
    "activetext_spans_per_scan",
    "Number of spans produced per scan (histogram), by kind",
    labelnames=["kind"],
    buckets=[0, 1, 2, 5, 10, 20, 50],
)

#: Latency (seconds) per named scan step.
SCAN_LATENCY = Histogram(
    "activetext_scan_latency_seconds",
    "Per-step scan latency in seconds",
    labelnames=["component"],
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5],
)

#: Count of scans, labelled by outcome.
SCANS_TOTAL = Counter(
    "activetext_scans_total",
    "Total scans by outcome (ok/failed)",
    labelnames=["outcome"],
)

#: Count of patterns that failed to compile.
PATTERN_COMPILE_ERRORS = Counter(
    "activetext_pattern_compile_errors_total",
    "Total recognition patterns that failed to compile",
)

#: Count of URLs truncated in the text buffer.
URL_TRUNCATIONS = Counter(
    "activetext_url_truncations_total",
    "Total URLs truncated to the configured maximum length",
)


# ---------------------------------------------------------------------------
# Helper: context manager for timing a block
# ---------------------------------------------------------------------------


class _Timer:
    """Context manager that records elapsed time and emits the latency metric."""

    def __init__(self, component: str) -> None:
        self._component = component
        self._start: float = 0.0
        self.elapsed_ms: float = 0.0

    def __enter__(self) -> "_Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *_: Any) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000
        SCAN_LATENCY.labels(component=self._component).observe(self.elapsed_ms / 1000)


def timer(component: str) -> _Timer:
    """Return a context manager that times a scan step and records latency."""
    return _Timer(component)


def record_span_counts(spans: Iterable[Any]) -> None:
    """Record the span count of one scan per kind label."""
    counts = PyCounter(s.kind.label for s in spans)
    for kind, count in counts.items():
        SPANS_PER_SCAN.labels(kind=kind).observe(count)
