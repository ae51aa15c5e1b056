"""Scanning sub-package — public API."""
from activetext.scanning.pattern_matcher import PatternCache, PatternMatcher, default_cache
from activetext.scanning.scanner import scan

__all__ = ["scan", "PatternMatcher", "PatternCache", "default_cache"]
