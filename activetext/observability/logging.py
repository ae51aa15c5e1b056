"""
Structured logging for the scanning engine.

Uses Python's standard ``logging`` module with a JSON-structured formatter so
each record is a single line that log aggregators can consume without text
parsing. Library modules log through ``logging.getLogger(__name__)``; the
host opts into JSON output with :func:`get_logger`.
"""
from __future__ import annotations

import json
import logging
import sys
import time
from typing import Any, Dict, Iterable, Optional


# ---------------------------------------------------------------------------
# JSON formatter
# ---------------------------------------------------------------------------


class _JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": time.strftime(
                "%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created)
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key.startswith("ctx_") or key == "scan_id":
                payload[key] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        try:
            return json.dumps(payload, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            return json.dumps({"message": str(payload)})


# ---------------------------------------------------------------------------
# Logger factory
# ---------------------------------------------------------------------------


def get_logger(name: str = "activetext") -> logging.Logger:
    """
    Return a logger that emits JSON-structured output to stdout.

    Idempotent: repeated calls with the same *name* return the same logger.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(_JSONFormatter())
        logger.addHandler(handler)
        logger.propagate = False
    return logger


# ---------------------------------------------------------------------------
# Context-enriched log helper
# ---------------------------------------------------------------------------


class ScanLogger:
    """
    Thin wrapper around :class:`logging.Logger` that attaches the scan id to
    every record. Extra keyword fields are emitted with a ``ctx_`` prefix.

    Usage::

        log = ScanLogger("scan-3")
        log.debug("urls_done", count=2)
    """

    def __init__(self, scan_id: str, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger("activetext.scan")
        self.scan_id = scan_id

    def _log(self, level: int, event: str, **extra: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        fields = {f"ctx_{k}": v for k, v in extra.items()}
        fields["scan_id"] = self.scan_id
        self._logger.log(level, event, extra=fields)

    def debug(self, event: str, **kw: Any) -> None:
        self._log(logging.DEBUG, event, **kw)

    def warning(self, event: str, **kw: Any) -> None:
        self._log(logging.WARNING, event, **kw)

    def log_span_summary(self, spans: Iterable[Any], text_length: int) -> None:
        """Log a compact count of spans grouped by kind."""
        summary: Dict[str, int] = {}
        total = 0
        for span in spans:
            summary[span.kind.label] = summary.get(span.kind.label, 0) + 1
            total += 1
        self.debug(
            "scan_complete",
            span_summary=summary,
            total_spans=total,
            text_length=text_length,
        )

    def log_pattern_error(self, kind_label: str, reason: str) -> None:
        """Log a pattern that was skipped because it does not compile."""
        self.warning("pattern_skipped", kind=kind_label, reason=reason)
