"""Default pattern registry for ability text.

Each entry pairs a regular expression with an extractor that turns the
match into a plain dict payload. Priorities order the scan; repeatable
patterns yield every match (damage, saves, advantage phrases).
"""

import re
from functools import lru_cache

from .matcher import PatternMatcher
from .models import Pattern

ABILITY_CODES = ("str", "dex", "con", "int", "wis", "cha")

DICE_FORMULA = r"\d+d\d+(?:\s*[+\-]\s*\d+)?"


def _compact(formula: str) -> str:
    """Strip whitespace inside a dice formula: '1d8 + 4' -> '1d8+4'."""
    return re.sub(r"\s+", "", formula)


def _attack(kind: str):
    def extract(m: re.Match) -> dict:
        reach = "m" if m.group(1).lower() == "melee" else "r"
        return {"type": f"{reach}{kind}", "bonus": int(m.group(2))}
    return extract


def _damage_with_average(m: re.Match) -> dict:
    return {
        "average": int(m.group(1)),
        "formula": _compact(m.group(2)),
        "type": m.group(3).lower(),
    }


def _damage_simple(m: re.Match) -> dict:
    return {"formula": _compact(m.group(1)), "type": m.group(2).lower()}


def _save_dc(m: re.Match) -> dict:
    return {"dc": int(m.group(1)), "ability": m.group(2)[:3].lower()}


def _duration_concentration(m: re.Match) -> dict:
    return {
        "value": int(m.group(1)),
        "unit": m.group(2).lower(),
        "concentration": "concentration" in m.group(0).lower(),
    }


def _range_distance(m: re.Match) -> dict:
    return {
        "value": int(m.group(1)),
        "long": int(m.group(2)) if m.group(2) else None,
        "units": "ft",
    }


def _area(shape: str):
    def extract(m: re.Match) -> dict:
        return {"shape": shape, "size": int(m.group(1)), "units": "ft"}
    return extract


def _roll_modifier(kind: str):
    def extract(m: re.Match) -> dict:
        phrase = m.group(0).lower()
        if m.group(1) and m.group(1).lower() != "ability":
            target = m.group(1).lower()
        elif "attack" in phrase:
            target = "attack"
        elif "sav" in phrase:
            target = "save"
        elif "check" in phrase:
            target = "check"
        else:
            target = "all"
        return {"type": kind, "target": target}
    return extract


def _damage_types(kind: str):
    def extract(m: re.Match) -> dict:
        types = [t.strip().lower() for t in re.split(r",\s*(?:and\s+|or\s+)?|\s+and\s+|\s+or\s+", m.group(1))]
        return {"type": kind, "damage_types": [t for t in types if t]}
    return extract


def _recharge(m: re.Match) -> dict:
    low = int(m.group(1))
    high = int(m.group(2)) if m.group(2) else 6
    if low > high:
        raise ValueError(f"recharge range {low}-{high} is inverted")
    return {"min": low, "max": high}


def _flag(**payload):
    return lambda m: dict(payload)


_I = re.IGNORECASE

# (name, regex, extractor, priority, repeatable)
DEFAULT_PATTERNS = [
    # Attack rolls
    ("weapon_attack", r"(Melee|Ranged) Weapon Attack:\s*\+(\d+) to hit",
     _attack("wak"), 100, False),
    ("spell_attack", r"(Melee|Ranged) Spell Attack:\s*\+(\d+) to hit",
     _attack("sak"), 100, False),

    # Saving throws
    ("save_dc", r"DC (\d+) (\w+) (?:saving throw|save)", _save_dc, 95, True),

    # Range
    ("range_touch", r"\btouch\b", _flag(type="touch"), 95, False),
    ("range_self", r"\bself\b", _flag(type="self"), 95, False),
    ("range_distance", r"range (\d+)(?:/(\d+))?\s*(?:foot|feet|ft\.?)",
     _range_distance, 90, False),

    # Damage, averaged format takes precedence over the bare formula
    ("damage_with_average", rf"(\d+) \(({DICE_FORMULA})\) (\w+) damage",
     _damage_with_average, 90, True),
    ("damage_simple", rf"({DICE_FORMULA})\s+(\w+)\s+damage",
     _damage_simple, 85, True),

    # Duration
    ("duration_instant", r"\binstantaneous\b", _flag(type="instant"), 90, False),
    ("duration_rounds", r"(?:for|lasts?)\s+(\d+)\s+rounds?",
     lambda m: {"value": int(m.group(1)), "unit": "round"}, 85, False),
    ("duration_concentration",
     r"(?:concentration,?\s+)?(?:up to\s+)?(\d+)\s+(minute|hour|day)s?\b",
     _duration_concentration, 80, False),

    # Area shapes
    ("area_radius", r"(\d+)(?:-|\s)(?:foot|ft\.?)\s+radius", _area("radius"), 85, False),
    ("area_cone", r"(\d+)(?:-|\s)(?:foot|ft\.?)\s+cone", _area("cone"), 85, False),
    ("area_line", r"(\d+)(?:-|\s)(?:foot|ft\.?)\s+line", _area("line"), 85, False),

    # Activation
    ("activation_bonus", r"\bbonus action\b", _flag(type="bonus"), 85, False),
    ("activation_reaction", r"\breaction\b", _flag(type="reaction"), 85, False),
    ("activation_action", r"\b(?:1\s+)?action\b", _flag(type="action"), 80, False),

    # Roll modifiers
    ("advantage",
     r"(?<!dis)advantage on (?:attack rolls?|(?:(\w+)\s+)?(?:ability checks?|checks?|saving throws?|saves?))",
     _roll_modifier("advantage"), 75, True),
    ("disadvantage",
     r"disadvantage on (?:attack rolls?|(?:(\w+)\s+)?(?:ability checks?|checks?|saving throws?|saves?))",
     _roll_modifier("disadvantage"), 75, True),

    # Defenses
    ("damage_resistance", r"(?:resistant?|resistance) to (\w+(?:(?:,\s*(?:and\s+|or\s+)?|\s+and\s+|\s+or\s+)\w+)*) damage",
     _damage_types("resistance"), 70, False),
    ("damage_immunity", r"(?:immune|immunity) to (\w+(?:(?:,\s*(?:and\s+|or\s+)?|\s+and\s+|\s+or\s+)\w+)*) damage",
     _damage_types("immunity"), 70, False),

    # Resources
    ("recharge", r"(?:Recharge|recharges on) (\d+)(?:-(\d+))?", _recharge, 65, False),
    ("uses_per_day", r"(\d+)/day",
     lambda m: {"uses": int(m.group(1)), "per": "day"}, 60, False),
    ("uses_per_rest", r"(\d+)/(short|long) rest",
     lambda m: {"uses": int(m.group(1)), "per": "sr" if m.group(2).lower() == "short" else "lr"},
     60, False),
]


def build_patterns() -> list[Pattern]:
    """Compile the default pattern table."""
    return [
        Pattern(
            name=name,
            regex=re.compile(regex, _I),
            extractor=extractor,
            priority=priority,
            repeatable=repeatable,
        )
        for name, regex, extractor, priority, repeatable in DEFAULT_PATTERNS
    ]


@lru_cache(maxsize=1)
def default_matcher() -> PatternMatcher:
    """Shared read-only matcher over the default patterns."""
    return PatternMatcher(build_patterns())

