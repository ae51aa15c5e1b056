"""
Scan configuration — enabled kinds, URL truncation and interaction timing.

Load order:
  1. Built-in defaults.
  2. JSON config file (if the ``ACTIVETEXT_CONFIG_FILE`` env var is set).
  3. Individual environment variable overrides (``ACTIVETEXT_*`` prefix).
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, List, Optional

from activetext.models.element import ElementKind

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Library version
# ---------------------------------------------------------------------------
LIBRARY_VERSION = "1.0.0"

#: Seconds a committed (tapped) element keeps its selected styling.
DEFAULT_FEEDBACK_RESET_DELAY = 0.25


# ---------------------------------------------------------------------------
# ScanConfig
# ---------------------------------------------------------------------------


@dataclass
class ScanConfig:
    """All runtime-tunable parameters for scanning and interaction."""

    enabled_kinds: List[str] = field(
        default_factory=lambda: ["mention", "hashtag", "url"]
    )
    """Built-in kinds to recognise, by name, in scan order (URL always runs first)."""

    url_max_length: Optional[int] = None
    """Truncate visible URLs longer than this many characters. ``None`` disables truncation."""

    custom_patterns: Dict[str, str] = field(default_factory=dict)
    """Custom kinds as ``tag → pattern``; appended after the built-in kinds."""

    feedback_reset_delay: float = DEFAULT_FEEDBACK_RESET_DELAY
    """Delay before a committed selection returns to the idle state."""

    max_text_length: int = 100_000
    """Hard cap on text length (code points) accepted by a scan."""

    # ------------------------------------------------------------------
    # Factory helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "ScanConfig":
        """Build config from environment variables, falling back to defaults."""
        cfg = cls()

        config_file = os.environ.get("ACTIVETEXT_CONFIG_FILE")
        if config_file:
            path = Path(config_file)
            if path.exists():
                try:
                    raw = json.loads(path.read_text(encoding="utf-8"))
                    known = {f.name for f in fields(cls)}
                    cfg = cls(**{k: v for k, v in raw.items() if k in known})
                    logger.info("Loaded scan config from %s", path)
                except (OSError, ValueError, TypeError) as exc:
                    logger.warning("Failed to load config file %s: %s", path, exc)
            else:
                logger.warning("Config file %s does not exist; using defaults", path)

        _apply_env_overrides(cfg)
        return cfg

    @classmethod
    def default(cls) -> "ScanConfig":
        """Return a fresh config with all defaults (convenience alias)."""
        return cls()

    def resolved_kinds(self) -> List[ElementKind]:
        """Return the enabled kinds as :class:`ElementKind` values, custom kinds last."""
        kinds: List[ElementKind] = []
        for name in self.enabled_kinds:
            kind = ElementKind.parse(name)
            if kind not in kinds:
                kinds.append(kind)
        for tag, pattern in self.custom_patterns.items():
            kinds.append(ElementKind.custom(tag, pattern))
        return kinds


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _apply_env_overrides(cfg: ScanConfig) -> None:
    """Apply individual ACTIVETEXT_* environment variable overrides to *cfg* in-place."""

    def _getenv_int(key: str) -> Optional[int]:
        v = os.environ.get(key)
        return int(v) if v not in (None, "") else None

    def _getenv_float(key: str) -> Optional[float]:
        v = os.environ.get(key)
        return float(v) if v not in (None, "") else None

    kinds = os.environ.get("ACTIVETEXT_ENABLED_KINDS")
    if kinds is not None:
        cfg.enabled_kinds = [k.strip().lower() for k in kinds.split(",") if k.strip()]

    url_max = os.environ.get("ACTIVETEXT_URL_MAX_LENGTH")
    if url_max is not None:
        # "none" / "0" / "" switch truncation off
        value = url_max.strip().lower()
        cfg.url_max_length = None if value in ("", "0", "none") else int(value)

    delay = _getenv_float("ACTIVETEXT_FEEDBACK_DELAY")
    if delay is not None:
        cfg.feedback_reset_delay = delay

    max_len = _getenv_int("ACTIVETEXT_MAX_TEXT_LENGTH")
    if max_len is not None:
        cfg.max_text_length = max_len
