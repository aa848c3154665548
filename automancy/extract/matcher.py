"""Priority-ordered pattern matching over ability text."""

import logging
from typing import Iterable, Optional

from .models import ExtractedFact, ExtractionResult, Pattern

logger = logging.getLogger(__name__)


class PatternMatcher:
    """Registry of named patterns scanned in descending priority order."""

    def __init__(self, patterns: Optional[Iterable[Pattern]] = None):
        self._patterns: dict[str, Pattern] = {}
        self._ordered: list[Pattern] = []
        for pattern in patterns or []:
            self.register(pattern)

    def register(self, pattern: Pattern) -> None:
        """Register a pattern. Re-registering a name replaces it."""
        if pattern.name in self._patterns:
            logger.debug("Replacing pattern: %s", pattern.name)
        self._patterns[pattern.name] = pattern
        # Stable sort keeps registration order among equal priorities
        self._ordered = sorted(
            self._patterns.values(), key=lambda p: p.priority, reverse=True
        )

    def extract(self, text: str) -> ExtractionResult:
        """Run every pattern over ``text``.

        An extractor that raises is logged and its match skipped; the scan
        always completes.
        """
        result = ExtractionResult()

        for pattern in self._ordered:
            matches = (
                pattern.regex.finditer(text) if pattern.repeatable
                else filter(None, [pattern.regex.search(text)])
            )
            facts = []
            for match in matches:
                try:
                    data = pattern.extractor(match)
                except Exception as e:
                    msg = f"{pattern.name} at {match.start()}: {e}"
                    logger.warning("Extractor failed, skipping match: %s", msg)
                    result.errors.append(msg)
                    continue
                facts.append(ExtractedFact(
                    pattern=pattern.name,
                    data=data,
                    match_text=match.group(0),
                    index=match.start(),
                ))
            if facts:
                result.facts[pattern.name] = facts

        logger.debug(
            "Extracted %d facts across %d patterns",
            result.count(), len(result.facts),
        )
        return result

    def first_match(self, text: str, name: str) -> Optional[ExtractedFact]:
        """Return the first fact for one pattern, or None."""
        pattern = self._patterns.get(name)
        if pattern is None:
            return None
        match = pattern.regex.search(text)
        if not match:
            return None
        try:
            data = pattern.extractor(match)
        except Exception as e:
            logger.warning("Extractor failed for %s: %s", name, e)
            return None
        return ExtractedFact(
            pattern=name, data=data,
            match_text=match.group(0), index=match.start(),
        )

    def has(self, text: str, name: str) -> bool:
        """True if the named pattern matches anywhere in ``text``."""
        pattern = self._patterns.get(name)
        return bool(pattern and pattern.regex.search(text))

    def pattern_names(self) -> list[str]:
        """Registered names in scan order."""
        return [p.name for p in self._ordered]

    def __len__(self) -> int:
        return len(self._patterns)
