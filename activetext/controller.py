"""
Host-facing controller for one rendered text instance.

Owns the source text, the scan configuration, the latest scan result and
element index, the selection state and the tap handlers. The host calls
:meth:`ActiveTextController.rescan` when the text or the recognition setup
changes and :meth:`ActiveTextController.reconfigure_display` when only
styling changed; setters that affect recognition rescan on their own.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Union

from activetext.config import ScanConfig
from activetext.interaction.dispatcher import Delegate, TapDispatcher, TextHandler, UrlHandler
from activetext.interaction.element_index import ElementIndex
from activetext.interaction.selection import SelectionState
from activetext.models.element import ElementKind, ElementSpan
from activetext.models.scan_request import validate_request
from activetext.models.scan_result import ScanResult
from activetext.scanning.extractor import FilterPredicate
from activetext.scanning.pattern_matcher import PatternMatcher
from activetext.scanning.scanner import scan

logger = logging.getLogger(__name__)

DisplayCallback = Callable[[str, ElementIndex], None]
SelectionCallback = Callable[[SelectionState], None]


class TouchPhase(str, Enum):
    BEGAN = "began"
    MOVED = "moved"
    ENDED = "ended"
    CANCELLED = "cancelled"
    STATIONARY = "stationary"


class ActiveTextController:
    """Scan, index and interaction state for one text instance."""

    def __init__(
        self,
        config: Optional[ScanConfig] = None,
        matcher: Optional[PatternMatcher] = None,
        delegate: Optional[Delegate] = None,
        on_display: Optional[DisplayCallback] = None,
        on_selection: Optional[SelectionCallback] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.config = config if config is not None else ScanConfig.default()
        self.matcher = matcher if matcher is not None else PatternMatcher()
        self.dispatcher = TapDispatcher(delegate)
        self.on_display = on_display
        self.on_selection = on_selection

        self._enabled_kinds: List[ElementKind] = self.config.resolved_kinds()
        self._url_max_length: Optional[int] = self.config.url_max_length
        self._filters: Dict[ElementKind, FilterPredicate] = {}

        if clock is not None:
            self.selection = SelectionState(self.config.feedback_reset_delay, clock=clock)
        else:
            self.selection = SelectionState(self.config.feedback_reset_delay)

        self._source_text = ""
        self._result = ScanResult("")
        self._index = ElementIndex.empty()

        self._customizing = 0
        self._rescan_pending = False
        self._display_pending = False

    # ------------------------------------------------------------------
    # Recognition setup
    # ------------------------------------------------------------------

    @property
    def source_text(self) -> str:
        """The text as last set by the host."""
        return self._source_text

    @property
    def text(self) -> str:
        """The displayed text (URLs possibly truncated)."""
        return self._result.text

    def set_text(self, text: Optional[str]) -> None:
        self._source_text = text or ""
        self.rescan()

    @property
    def enabled_kinds(self) -> List[ElementKind]:
        return list(self._enabled_kinds)

    @enabled_kinds.setter
    def enabled_kinds(self, kinds: Iterable[Union[ElementKind, str]]) -> None:
        resolved: List[ElementKind] = []
        for item in kinds:
            kind = ElementKind.parse(item)
            if kind not in resolved:
                resolved.append(kind)
        self._enabled_kinds = resolved
        self.rescan()

    @property
    def url_max_length(self) -> Optional[int]:
        return self._url_max_length

    @url_max_length.setter
    def url_max_length(self, value: Optional[int]) -> None:
        self._url_max_length = value
        self.rescan()

    def filter_mention(self, predicate: FilterPredicate) -> None:
        self._filters[ElementKind.MENTION] = predicate
        self.rescan()

    def filter_hashtag(self, predicate: FilterPredicate) -> None:
        self._filters[ElementKind.HASHTAG] = predicate
        self.rescan()

    # ------------------------------------------------------------------
    # Tap handlers
    # ------------------------------------------------------------------

    def handle_mention_tap(self, handler: TextHandler) -> None:
        self.dispatcher.on_mention(handler)

    def handle_hashtag_tap(self, handler: TextHandler) -> None:
        self.dispatcher.on_hashtag(handler)

    def handle_url_tap(self, handler: UrlHandler) -> None:
        self.dispatcher.on_url(handler)

    def handle_email_tap(self, handler: TextHandler) -> None:
        self.dispatcher.on_email(handler)

    def handle_custom_tap(self, kind: ElementKind, handler: TextHandler) -> None:
        self.dispatcher.on_custom(kind, handler)

    def remove_handle(self, kind: ElementKind) -> None:
        self.dispatcher.remove_handler(kind)

    # ------------------------------------------------------------------
    # Scan / display
    # ------------------------------------------------------------------

    @property
    def result(self) -> ScanResult:
        return self._result

    @property
    def index(self) -> ElementIndex:
        return self._index

    @contextmanager
    def customize(self) -> Iterator["ActiveTextController"]:
        """Batch changes; on exit a single rescan, or a redisplay, runs if one was requested."""
        self._customizing += 1
        try:
            yield self
        finally:
            self._customizing -= 1
        if self._customizing:
            return
        if self._rescan_pending:
            self.rescan()
        elif self._display_pending:
            self.reconfigure_display()

    def rescan(self) -> ScanResult:
        """Run a full scan of the source text and publish the result."""
        if self._customizing:
            self._rescan_pending = True
            return self._result
        self._rescan_pending = False
        self._display_pending = False

        self.selection.reset()
        request = validate_request(
            {
                "text": self._source_text,
                "enabled_kinds": self._enabled_kinds,
                "url_max_length": self._url_max_length,
                "max_text_length": self.config.max_text_length,
            }
        )
        self._result = scan(
            request.text,
            request.kinds,
            filters=self._filters,
            matcher=self.matcher,
            request=request,
        )
        self._index = self._result.index()
        self.reconfigure_display()
        return self._result

    def reconfigure_display(self) -> None:
        """Hand the current text and index to the host without rescanning."""
        if self._customizing:
            self._display_pending = True
            return
        self._display_pending = False
        if self.on_display is not None:
            self.on_display(self._result.text, self._index)

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------

    def element_at(self, offset: Optional[int]) -> Optional[ElementSpan]:
        if offset is None or not self._result.text:
            return None
        return self._index.span_at(offset)

    def touch(self, phase: TouchPhase, offset: Optional[int]) -> bool:
        """
        Feed one touch event at a UTF-16 text *offset* (``None`` when the
        touch is outside the text).

        Returns True when the event was consumed by an element.
        """
        phase = TouchPhase(phase)
        if phase is TouchPhase.STATIONARY:
            return False

        if phase is TouchPhase.CANCELLED:
            was_selected = self.selection.is_selected
            self.selection.cancel()
            if was_selected:
                self._notify_selection()
            return False

        span = self.element_at(offset)

        if phase is TouchPhase.BEGAN:
            consumed = self.selection.touch_down(span)
            self._notify_selection()
            return consumed

        if phase is TouchPhase.MOVED:
            changed = self.selection.touch_moved(span)
            if changed:
                self._notify_selection()
            return changed

        committed = self.selection.touch_up(span)
        self._notify_selection()
        if committed is None:
            return False
        self.dispatcher.dispatch(committed.element)
        return True

    def expire_selection(self, now: Optional[float] = None) -> bool:
        """Clear tap feedback once its delay has elapsed; call from the host's timer."""
        if self.selection.expire(now):
            self._notify_selection()
            return True
        return False

    def _notify_selection(self) -> None:
        if self.on_selection is not None:
            self.on_selection(self.selection)
