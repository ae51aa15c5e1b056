"""
Element model for recognised active elements (mention / hashtag / URL / email / custom).

An :class:`ElementKind` is a closed set of four built-in kinds plus an
open-ended ``custom`` kind that carries its own tag and pattern, so a host can
register several independent custom kinds side by side.

Offsets on :class:`ElementSpan` are expressed in UTF-16 code units of the
text the scan produced, never of the original input.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional, Union


class KindName(str, Enum):
    """Discriminator for :class:`ElementKind`."""

    MENTION = "mention"
    HASHTAG = "hashtag"
    URL = "url"
    EMAIL = "email"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ElementKind:
    """A kind of active element.

    Built-in kinds are exposed as class constants; custom kinds are created
    with :meth:`custom`.
    """

    name: KindName
    tag: Optional[str] = None
    custom_pattern: Optional[str] = field(default=None, compare=False)

    MENTION: ClassVar["ElementKind"]
    HASHTAG: ClassVar["ElementKind"]
    URL: ClassVar["ElementKind"]
    EMAIL: ClassVar["ElementKind"]

    def __post_init__(self) -> None:
        if self.name is KindName.CUSTOM:
            if not self.tag:
                raise ValueError("custom element kinds need a non-empty tag")
        elif self.tag is not None or self.custom_pattern is not None:
            raise ValueError(f"built-in kind {self.name.value!r} takes no tag or pattern")

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def custom(cls, tag: str, pattern: Optional[str] = None) -> "ElementKind":
        """Return a custom kind identified by *tag*.

        When *pattern* is omitted the tag itself is used as the pattern.
        """
        return cls(KindName.CUSTOM, tag=tag, custom_pattern=pattern if pattern is not None else tag)

    @classmethod
    def parse(cls, value: Union[str, "ElementKind"]) -> "ElementKind":
        """Return the built-in kind named *value* (case-insensitive)."""
        if isinstance(value, ElementKind):
            return value
        try:
            name = KindName(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"unknown element kind: {value!r}") from None
        if name is KindName.CUSTOM:
            raise ValueError("custom kinds must be built with ElementKind.custom(tag, pattern)")
        return _BUILTINS[name]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def is_custom(self) -> bool:
        return self.name is KindName.CUSTOM

    @property
    def pattern(self) -> str:
        """The recognition pattern for this kind."""
        if self.is_custom:
            return self.custom_pattern or ""
        from activetext.scanning.patterns import BUILTIN_PATTERNS

        return BUILTIN_PATTERNS[self.name]

    @property
    def label(self) -> str:
        """Short printable label, e.g. ``"mention"`` or ``"custom:ticket"``."""
        return f"custom:{self.tag}" if self.is_custom else self.name.value

    def __repr__(self) -> str:
        return f"ElementKind({self.label})"


ElementKind.MENTION = ElementKind(KindName.MENTION)
ElementKind.HASHTAG = ElementKind(KindName.HASHTAG)
ElementKind.URL = ElementKind(KindName.URL)
ElementKind.EMAIL = ElementKind(KindName.EMAIL)

_BUILTINS = {
    KindName.MENTION: ElementKind.MENTION,
    KindName.HASHTAG: ElementKind.HASHTAG,
    KindName.URL: ElementKind.URL,
    KindName.EMAIL: ElementKind.EMAIL,
}


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextPayload:
    """Payload for mention / hashtag / email / custom elements."""

    text: str
    """Recognised substring with separator characters stripped."""


@dataclass(frozen=True)
class UrlPayload:
    """Payload for URL elements."""

    original: str
    """Canonical, scheme-qualified form used when the element is tapped."""

    display: str
    """Form embedded in the visible text (possibly truncated)."""


Payload = Union[TextPayload, UrlPayload]


@dataclass(frozen=True)
class Element:
    """A recognised active element."""

    kind: ElementKind
    payload: Payload

    @classmethod
    def with_text(cls, kind: ElementKind, text: str) -> "Element":
        return cls(kind, TextPayload(text))

    @classmethod
    def url(cls, original: str, display: str) -> "Element":
        return cls(ElementKind.URL, UrlPayload(original, display))

    @property
    def value(self) -> str:
        """The string handed to tap handlers (canonical URL for URL elements)."""
        if isinstance(self.payload, UrlPayload):
            return self.payload.original
        return self.payload.text

    def to_dict(self) -> dict:
        data = {"kind": self.kind.label}
        if isinstance(self.payload, UrlPayload):
            data["original"] = self.payload.original
            data["display"] = self.payload.display
        else:
            data["text"] = self.payload.text
        return data


@dataclass(frozen=True)
class ElementSpan:
    """An element together with the range it occupies in the scanned text."""

    location: int
    """Start offset in UTF-16 code units."""

    length: int
    """Length in UTF-16 code units."""

    element: Element

    @property
    def kind(self) -> ElementKind:
        return self.element.kind

    @property
    def end(self) -> int:
        """Exclusive end offset in UTF-16 code units."""
        return self.location + self.length

    # ------------------------------------------------------------------
    # Span helpers
    # ------------------------------------------------------------------

    def contains(self, offset: int) -> bool:
        """Return True if *offset* falls on this span, upper bound included."""
        return self.location <= offset <= self.location + self.length

    def overlaps(self, other: "ElementSpan") -> bool:
        """Return True if this span's range overlaps with *other*'s range."""
        return not (self.end <= other.location or other.end <= self.location)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "range": {"location": self.location, "length": self.length},
            "element": self.element.to_dict(),
        }

    def __repr__(self) -> str:
        return f"ElementSpan({self.kind.label}, [{self.location}+{self.length}], {self.element.value!r})"
