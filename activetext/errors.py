"""
Error types raised or reported by the scanning engine.

Only :class:`ScanRequestError` is ever raised out of a scan.
:class:`PatternCompileError` is recorded on the result instead, so one bad
custom pattern never blocks the other kinds.
"""
from __future__ import annotations

from typing import Dict, List


class PatternCompileError(ValueError):
    """A recognition pattern failed to compile."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")


class ScanRequestError(ValueError):
    """Raised when a scan request is malformed (hard error)."""

    def __init__(self, errors: List[Dict[str, str]]) -> None:
        self.validation_errors = errors
        messages = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
        super().__init__(f"Scan request validation failed: {messages}")
