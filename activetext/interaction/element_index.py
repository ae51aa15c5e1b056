"""
Element index — per-kind spans plus offset hit-testing.

The host translates a touch point to a UTF-16 text offset; this index only
answers which element, if any, occupies that offset.
"""
from __future__ import annotations

from typing import Dict, Iterator, List, Mapping, Optional, Sequence

from activetext.models.element import Element, ElementKind, ElementSpan


class ElementIndex:
    """Read-only view over the spans of one scan."""

    def __init__(self, spans_by_kind: Optional[Mapping[ElementKind, Sequence[ElementSpan]]] = None) -> None:
        self._spans_by_kind: Dict[ElementKind, List[ElementSpan]] = {
            kind: list(spans) for kind, spans in (spans_by_kind or {}).items()
        }

    @classmethod
    def empty(cls) -> "ElementIndex":
        return cls()

    def span_at(self, offset: int) -> Optional[ElementSpan]:
        """
        Return the first span, in kind-then-insertion order, whose range
        contains *offset*.

        Both ends are inclusive: ``location <= offset <= location + length``.
        """
        for span in self:
            if span.contains(offset):
                return span
        return None

    def lookup(self, offset: int) -> Optional[Element]:
        span = self.span_at(offset)
        return span.element if span is not None else None

    def elements(self, kind: ElementKind) -> List[Element]:
        return [s.element for s in self._spans_by_kind.get(kind, [])]

    def spans(self, kind: ElementKind) -> List[ElementSpan]:
        return list(self._spans_by_kind.get(kind, []))

    @property
    def kinds(self) -> List[ElementKind]:
        return list(self._spans_by_kind)

    def __iter__(self) -> Iterator[ElementSpan]:
        for spans in self._spans_by_kind.values():
            yield from spans

    def __len__(self) -> int:
        return sum(len(spans) for spans in self._spans_by_kind.values())

    def __bool__(self) -> bool:
        return len(self) > 0
