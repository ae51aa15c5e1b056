"""
Input schema for a scan.

Validates the text and the per-scan configuration before extraction runs.
Filter predicates are plain callables and are passed alongside the request,
not inside it.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from activetext.errors import ScanRequestError
from activetext.models.element import ElementKind

_MAX_TEXT_LENGTH = 100_000


class ScanRequest(BaseModel):
    """
    Validated input for one full scan.

    ``enabled_kinds`` accepts :class:`ElementKind` values or built-in kind
    names; duplicates are dropped keeping the first occurrence.
    """

    model_config = {"frozen": True, "extra": "ignore", "arbitrary_types_allowed": True}

    text: str = Field(default="", description="Text to scan; may be empty")
    enabled_kinds: List[Any] = Field(default_factory=list, description="Kinds to recognise")
    url_max_length: Optional[int] = Field(
        default=None, gt=0, description="Truncate visible URLs longer than this; None = no limit"
    )
    max_text_length: int = Field(default=_MAX_TEXT_LENGTH, gt=0)

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("text", mode="before")
    @classmethod
    def _validate_text(cls, v: Any) -> str:
        if v is None:
            return ""
        if not isinstance(v, str):
            raise ValueError("text must be a string")
        return v

    @field_validator("enabled_kinds", mode="before")
    @classmethod
    def _validate_kinds(cls, v: Any) -> List[ElementKind]:
        if v is None:
            return []
        if isinstance(v, (str, ElementKind)):
            v = [v]
        kinds: List[ElementKind] = []
        for item in v:
            kind = ElementKind.parse(item)
            if kind not in kinds:
                kinds.append(kind)
        return kinds

    @model_validator(mode="after")
    def _validate_length(self) -> "ScanRequest":
        if len(self.text) > self.max_text_length:
            raise ValueError(
                f"text exceeds maximum allowed length of {self.max_text_length} chars "
                f"(got {len(self.text)})"
            )
        return self

    @property
    def kinds(self) -> List[ElementKind]:
        return list(self.enabled_kinds)


def validate_request(raw: Dict[str, Any]) -> ScanRequest:
    """
    Validate a raw request dict against :class:`ScanRequest`.

    Raises:
        :class:`~activetext.errors.ScanRequestError` if any field is invalid.
    """
    try:
        return ScanRequest.model_validate(raw)
    except ValidationError as exc:
        errors = [
            {
                "field": ".".join(str(loc) for loc in err["loc"]) or "request",
                "message": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        raise ScanRequestError(errors) from exc
