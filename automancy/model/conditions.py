"""Closed condition vocabulary and phrase-adjacency detection.

A vocabulary word only counts when it follows a linking verb
("is grappled", "becomes frightened"). Turn-timing detection is a
whole-text heuristic and can mis-tag unusual phrasing.
"""

import re

from .models import Condition, ConditionKind, SaveEndsTiming

STANDARD_CONDITIONS = (
    "blinded", "charmed", "deafened", "exhaustion", "frightened",
    "grappled", "incapacitated", "invisible", "paralyzed", "petrified",
    "poisoned", "prone", "restrained", "stunned", "unconscious",
)

HOMEBREW_CONDITIONS = ("dazed", "bleeding", "weakened", "slowed")

SAVE_ENDS_PATTERN = re.compile(
    r"save\s*ends|saving throw.*ends|ends?.*saving throw", re.IGNORECASE
)
END_OF_TURN_PATTERN = re.compile(
    r"(?:at\s+)?(?:the\s+)?end\s+of\s+(?:its|their|the target's|each|the|your)?\s*turn",
    re.IGNORECASE,
)

_ADJACENCY = {
    name: re.compile(rf"(?:be|is|becomes?|are)\s+(?:<[^>]+>)?\s*{name}\b", re.IGNORECASE)
    for name in STANDARD_CONDITIONS + HOMEBREW_CONDITIONS
}


def condition_kind(name: str) -> ConditionKind | None:
    """Vocabulary lookup; None for words outside the closed set."""
    if name in STANDARD_CONDITIONS:
        return ConditionKind.STANDARD
    if name in HOMEBREW_CONDITIONS:
        return ConditionKind.HOMEBREW
    return None


def detect_conditions(text: str) -> list[Condition]:
    """Find status conditions the text applies, in vocabulary order."""
    save_ends = bool(SAVE_ENDS_PATTERN.search(text))
    timing = (
        SaveEndsTiming.END_OF_TURN if END_OF_TURN_PATTERN.search(text)
        else SaveEndsTiming.START_OF_TURN
    )

    found = []
    for name, pattern in _ADJACENCY.items():
        if pattern.search(text):
            found.append(Condition(
                kind=condition_kind(name),
                name=name,
                save_ends=save_ends,
                save_ends_timing=timing,
            ))
    return found
