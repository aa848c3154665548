"""Fact extraction: prioritized regex patterns over ability text."""

from .matcher import PatternMatcher
from .models import ExtractedFact, ExtractionResult, Pattern
from .patterns import build_patterns, default_matcher

__all__ = [
    "PatternMatcher",
    "ExtractedFact",
    "ExtractionResult",
    "Pattern",
    "build_patterns",
    "default_matcher",
]
