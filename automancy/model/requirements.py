"""Activation requirements stated in ability text."""

import re
from dataclasses import dataclass
from typing import Optional

LEAP_PATTERN = re.compile(
    r"(?:leaps?|jumps?) at least (\d+) (?:feet|ft\.?) (?:toward|towards?) (?:a |the )?target",
    re.IGNORECASE,
)
SIGHT_PATTERN = re.compile(r"can see|within (?:sight|line of sight)", re.IGNORECASE)
DAMAGE_TRIGGER_PATTERN = re.compile(
    r"(?:when|if) (?:the [\w-]+|it|you) takes? damage", re.IGNORECASE
)
RECHARGE_PATTERN = re.compile(r"\(Recharge (\d+)(?:-(\d+))?\)", re.IGNORECASE)


@dataclass
class Requirement:
    """Something that must hold before the ability can be used."""
    type: str          # movement | visibility | trigger | recharge
    condition: str
    description: str
    hook: str
    value: Optional[int] = None
    value_max: Optional[int] = None


def detect_requirements(text: str) -> list[Requirement]:
    requirements = []

    m = LEAP_PATTERN.search(text)
    if m:
        distance = int(m.group(1))
        requirements.append(Requirement(
            type="movement",
            condition=f"leap_distance >= {distance}",
            description=f"Must leap at least {distance} feet toward target",
            hook="preAttackRoll",
            value=distance,
        ))

    if SIGHT_PATTERN.search(text):
        requirements.append(Requirement(
            type="visibility",
            condition="line_of_sight",
            description="Must have line of sight to target",
            hook="preTargeting",
        ))

    if DAMAGE_TRIGGER_PATTERN.search(text):
        requirements.append(Requirement(
            type="trigger",
            condition="takes_damage",
            description="Triggered when taking damage",
            hook="onDamaged",
        ))

    m = RECHARGE_PATTERN.search(text)
    if m:
        low, high = int(m.group(1)), int(m.group(2) or 6)
        requirements.append(Requirement(
            type="recharge",
            condition=f"recharge_{low}_{high}",
            description=f"Recharges on {low}-{high}",
            hook="preItemRoll",
            value=low,
            value_max=high,
        ))

    return requirements
