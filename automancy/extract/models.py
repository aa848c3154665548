"""Data models for fact extraction."""

import re
from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass(frozen=True)
class Pattern:
    """A named, prioritized text matcher.

    ``extractor`` receives the regex match and returns the fact payload.
    Repeatable patterns yield one fact per match; others only the first.
    """
    name: str
    regex: re.Pattern
    extractor: Callable[[re.Match], dict]
    priority: int = 50
    repeatable: bool = False


@dataclass
class ExtractedFact:
    """A typed fact produced by a pattern's extractor."""
    pattern: str
    data: dict = field(default_factory=dict)
    match_text: str = ""
    index: int = 0

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)


@dataclass
class ExtractionResult:
    """All facts found in one text, keyed by pattern name."""
    facts: dict[str, list[ExtractedFact]] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    def has(self, name: str) -> bool:
        return bool(self.facts.get(name))

    def first(self, name: str) -> ExtractedFact | None:
        found = self.facts.get(name)
        return found[0] if found else None

    def all(self, name: str) -> list[ExtractedFact]:
        return self.facts.get(name, [])

    def count(self) -> int:
        return sum(len(v) for v in self.facts.values())
