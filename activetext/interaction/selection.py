"""
Selection state for press/hover feedback.

Three states:

* ``NONE``      — nothing highlighted
* ``PENDING``   — a touch is down over a span
* ``COMMITTED`` — the touch was released over that span; the tap is
  dispatched once and the highlight clears after ``reset_delay`` seconds or
  as soon as a new touch begins

Cancellation always returns to ``NONE`` without committing.
"""
from __future__ import annotations

import time
from enum import Enum
from typing import Callable, Optional

from activetext.config import DEFAULT_FEEDBACK_RESET_DELAY
from activetext.models.element import ElementSpan


class SelectionPhase(str, Enum):
    NONE = "none"
    PENDING = "pending"
    COMMITTED = "committed"


class SelectionState:
    """The active span of one rendered text instance."""

    def __init__(
        self,
        reset_delay: float = DEFAULT_FEEDBACK_RESET_DELAY,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.reset_delay = reset_delay
        self._clock = clock
        self.phase = SelectionPhase.NONE
        self.span: Optional[ElementSpan] = None
        self.committed_at: Optional[float] = None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def touch_down(self, span: Optional[ElementSpan]) -> bool:
        """Start a touch sequence. Returns True if it landed on a span."""
        self.reset()
        if span is not None:
            self._set(SelectionPhase.PENDING, span)
        return span is not None

    def touch_moved(self, span: Optional[ElementSpan]) -> bool:
        """Track the touch; returns True if the highlighted span changed."""
        if self.phase is SelectionPhase.COMMITTED:
            return False
        if span is None:
            changed = self.phase is not SelectionPhase.NONE
            self.reset()
            return changed
        if span != self.span:
            self._set(SelectionPhase.PENDING, span)
            return True
        return False

    def touch_up(self, span: Optional[ElementSpan]) -> Optional[ElementSpan]:
        """
        Finish the touch sequence.

        Returns the committed span when the release happened over the pending
        span, else ``None``.
        """
        if self.phase is not SelectionPhase.PENDING or span is None or span != self.span:
            if self.phase is not SelectionPhase.COMMITTED:
                self.reset()
            return None
        self._set(SelectionPhase.COMMITTED, span)
        self.committed_at = self._clock()
        return span

    def cancel(self) -> None:
        self.reset()

    def expire(self, now: Optional[float] = None) -> bool:
        """Clear a committed selection whose feedback delay has elapsed.

        Returns True if the state changed.
        """
        if self.phase is not SelectionPhase.COMMITTED or self.committed_at is None:
            return False
        now = self._clock() if now is None else now
        if now - self.committed_at < self.reset_delay:
            return False
        self.reset()
        return True

    def reset(self) -> None:
        self.phase = SelectionPhase.NONE
        self.span = None
        self.committed_at = None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def is_selected(self) -> bool:
        return self.phase is not SelectionPhase.NONE

    def _set(self, phase: SelectionPhase, span: ElementSpan) -> None:
        self.phase = phase
        self.span = span

    def __repr__(self) -> str:  # pragma: no cover
        return f"SelectionState({self.phase.value}, {self.span!r})"
