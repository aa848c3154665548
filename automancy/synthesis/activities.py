"""Attack and save activity sub-structures.

When an ability has both an attack and a status condition, the save
activity only applies the condition: its damage is suppressed so the
target is not damaged twice.
"""

import re

from ..model import AbilityDescriptor, AbilityType, Damage
from .flags import has_attack
from .ids import ATTACK_ACTIVITY_ID, SAVE_ACTIVITY_ID, EffectIdPlan

DICE_PART_PATTERN = re.compile(r"^(\d+)d(\d+)(?:\+(\d+))?$")

ON_SAVE_NONE = "none"
ON_SAVE_HALF = "half"


def damage_part(damage: Damage) -> dict:
    """One damage part: parsed dice when possible, custom formula otherwise."""
    m = DICE_PART_PATTERN.match(damage.formula)
    if m:
        return {
            "number": int(m.group(1)),
            "denomination": int(m.group(2)),
            "bonus": m.group(3) or "",
            "types": [damage.type],
            "custom": {"enabled": False, "formula": ""},
            "scaling": {"mode": "", "number": None, "formula": ""},
        }
    return {
        "number": None,
        "denomination": None,
        "bonus": "",
        "types": [damage.type],
        "custom": {"enabled": True, "formula": damage.formula},
        "scaling": {"mode": "", "number": None, "formula": ""},
    }


def suppressed_part(descriptor: AbilityDescriptor) -> dict:
    """Placeholder part for a save that must not deal damage."""
    return {
        "number": None,
        "denomination": None,
        "bonus": "",
        "types": [descriptor.damage[0].type] if descriptor.damage else [],
        "custom": {"enabled": False, "formula": ""},
        "scaling": {"number": 1},
    }


def is_melee(descriptor: AbilityDescriptor) -> bool:
    return bool(descriptor.attack and descriptor.attack.type in ("mwak", "msak"))


def save_is_condition_only(descriptor: AbilityDescriptor) -> bool:
    return has_attack(descriptor) and bool(descriptor.status_conditions)


def _common(descriptor: AbilityDescriptor, activity_id: str, activity_type: str) -> dict:
    target = descriptor.target
    return {
        "_id": activity_id,
        "type": activity_type,
        "activation": {
            "type": descriptor.activation.type.value,
            "value": descriptor.activation.cost,
            "condition": "",
            "override": False,
        },
        "consumption": {"targets": [], "scaling": {"allowed": False, "max": ""}, "spellSlot": True},
        "duration": {
            "concentration": descriptor.duration.concentration,
            "units": descriptor.duration.units,
            "special": "",
            "override": False,
        },
        "range": {
            "units": "touch" if is_melee(descriptor) else descriptor.range.units,
            "value": descriptor.range.value,
            "special": "",
            "override": False,
        },
        "target": {
            "template": {
                "type": target.shape or "",
                "size": str(target.value) if target.shape else "",
                "width": str(target.width) if target.width else "",
                "units": target.units or "any",
            },
            "affects": {
                "count": str(target.value or 1),
                "type": target.type,
                "choice": False,
            },
            "prompt": True,
            "override": False,
        },
        "uses": {"spent": 0, "max": "", "recovery": []},
        "sort": 0,
        "flags": {},
        "midiProperties": {
            "confirmTargets": "default",
            "autoTargetType": "any",
            "automationOnly": False,
            "otherActivityCompatible": True,
        },
    }


def attack_activity(descriptor: AbilityDescriptor, plan: EffectIdPlan) -> dict:
    activity = _common(descriptor, ATTACK_ACTIVITY_ID, "attack")
    bonus = descriptor.attack.bonus if descriptor.attack else None
    activity["effects"] = [{"_id": effect_id, "level": {}} for effect_id in plan.ids]
    activity["attack"] = {
        "ability": "",
        "bonus": str(bonus) if bonus is not None else "",
        "critical": {"threshold": None},
        "flat": bonus is not None,
        "type": {
            "value": "melee" if is_melee(descriptor) else "ranged",
            "classification": "spell" if descriptor.type is AbilityType.SPELL_ATTACK else "weapon",
        },
    }
    activity["damage"] = {
        "critical": {"bonus": ""},
        "includeBase": True,
        "parts": [damage_part(d) for d in descriptor.damage],
    }
    return activity


def save_activity(descriptor: AbilityDescriptor, plan: EffectIdPlan) -> dict:
    save = descriptor.saves[0]
    condition_only = save_is_condition_only(descriptor)

    activity = _common(descriptor, SAVE_ACTIVITY_ID, "save")
    activity["effects"] = [
        {"_id": effect_id, "onSave": False, "level": {"min": None, "max": None}}
        for effect_id in plan.ids
    ]
    activity["damage"] = {
        "onSave": ON_SAVE_NONE if condition_only else ON_SAVE_HALF,
        "parts": (
            [suppressed_part(descriptor)] if condition_only
            else [damage_part(d) for d in descriptor.damage]
        ),
        "critical": {"allow": False},
    }
    activity["save"] = {
        "ability": [save.ability],
        "dc": {"calculation": "", "formula": str(save.dc)},
    }
    activity["friendlySave"] = "default"
    return activity


def build_activities(descriptor: AbilityDescriptor, plan: EffectIdPlan) -> dict:
    """Activities keyed by id: attack when attacking, save when a save exists."""
    activities = {}
    if has_attack(descriptor):
        activities[ATTACK_ACTIVITY_ID] = attack_activity(descriptor, plan)
    if descriptor.saves:
        activities[SAVE_ACTIVITY_ID] = save_activity(descriptor, plan)
    return activities


def referenced_effect_ids(activities: dict) -> set[str]:
    """Every effect id any activity points at."""
    return {
        ref["_id"]
        for activity in activities.values()
        for ref in activity.get("effects", [])
    }
