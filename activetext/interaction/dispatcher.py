"""
Tap dispatch — routes a tapped element to its handler slot.

There is one slot per built-in kind and one per custom kind. When a kind has
no handler, the fallback delegate receives ``(text, kind)``.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional
from urllib.parse import SplitResult, urlsplit

from activetext.models.element import Element, ElementKind, KindName

logger = logging.getLogger(__name__)

TextHandler = Callable[[str], None]
UrlHandler = Callable[[SplitResult], None]
Delegate = Callable[[str, ElementKind], None]


class TapDispatcher:
    """Handler registry for tapped elements."""

    def __init__(self, delegate: Optional[Delegate] = None) -> None:
        self.delegate = delegate
        self._text_handlers: Dict[ElementKind, TextHandler] = {}
        self._url_handler: Optional[UrlHandler] = None

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def on_mention(self, handler: TextHandler) -> None:
        self._text_handlers[ElementKind.MENTION] = handler

    def on_hashtag(self, handler: TextHandler) -> None:
        self._text_handlers[ElementKind.HASHTAG] = handler

    def on_email(self, handler: TextHandler) -> None:
        self._text_handlers[ElementKind.EMAIL] = handler

    def on_url(self, handler: UrlHandler) -> None:
        self._url_handler = handler

    def on_custom(self, kind: ElementKind, handler: TextHandler) -> None:
        if not kind.is_custom:
            raise ValueError(f"{kind!r} is not a custom kind")
        self._text_handlers[kind] = handler

    def remove_handler(self, kind: ElementKind) -> None:
        if kind.name is KindName.URL:
            self._url_handler = None
        else:
            self._text_handlers.pop(kind, None)

    def has_handler(self, kind: ElementKind) -> bool:
        if kind.name is KindName.URL:
            return self._url_handler is not None
        return kind in self._text_handlers

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, element: Element) -> bool:
        """
        Deliver *element* to its handler, or to the delegate.

        Returns False when neither a handler nor a delegate was available.
        """
        value = element.value
        kind = element.kind

        if kind.name is KindName.URL:
            if self._url_handler is not None:
                try:
                    url = urlsplit(value)
                except ValueError as exc:
                    logger.debug("Unparseable URL %r handed to delegate: %s", value, exc)
                else:
                    self._url_handler(url)
                    return True
        else:
            handler = self._text_handlers.get(kind)
            if handler is not None:
                handler(value)
                return True

        if self.delegate is None:
            return False
        self.delegate(value, kind)
        return True
