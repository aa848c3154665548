"""Active effect descriptors for base synthesis."""

import logging
from typing import Optional

from ..model import (
    AbilityDescriptor, AbilityType, Condition, Duration, Effect,
    HOMEBREW_CONDITIONS, SaveEndsTiming,
)
from .ids import EffectIdPlan

logger = logging.getLogger(__name__)

# Change modes
MODE_CUSTOM = 0
MODE_ADD = 2
MODE_OVERRIDE = 5

SAVE_ENDS_ROUNDS = 100

HOMEBREW_DESCRIPTIONS = {
    "dazed": "Can only take an action, bonus action, OR move - not all three.",
    "bleeding": "Takes ongoing damage at the start of each turn.",
    "weakened": "Deals half damage with attacks.",
    "slowed": "Movement speed is halved.",
}

HOMEBREW_ICONS = {
    "dazed": "icons/svg/daze.svg",
    "bleeding": "icons/svg/blood.svg",
    "weakened": "icons/svg/downgrade.svg",
    "slowed": "icons/svg/frozen.svg",
}

EFFECT_ICONS = {
    "ac_bonus": "systems/dnd5e/icons/spells/protect-blue-3.jpg",
    "ability_modifier": "systems/dnd5e/icons/spells/enchant-utility-4.jpg",
    "damage_resistance": "systems/dnd5e/icons/spells/protect-cyan-2.jpg",
}
DEFAULT_EFFECT_ICON = "systems/dnd5e/icons/spells/enchant-utility-4.jpg"


def change(key: str, value, mode: int = MODE_OVERRIDE, priority: int = 20) -> dict:
    """One active-effect change entry."""
    return {"key": key, "mode": mode, "value": str(value), "priority": priority}


# Mechanical changes carried by specific statuses
CONDITION_CHANGES = {
    "blinded": [
        change("flags.midi-qol.disadvantage.attack.all", 1),
        change("flags.midi-qol.grants.advantage.attack.all", 1),
    ],
    "prone": [
        change("flags.midi-qol.disadvantage.attack.all", 1),
        change("flags.midi-qol.grants.advantage.attack.mwak", 1),
    ],
    "restrained": [
        change("flags.midi-qol.disadvantage.attack.all", 1),
        change("flags.midi-qol.disadvantage.ability.save.dex", 1),
        change("flags.midi-qol.grants.advantage.attack.all", 1),
    ],
    "dazed": [
        change("flags.midi-qol.dazed", 1),
        change("macro.tokenMagic", "blur", mode=MODE_CUSTOM),
    ],
}


def condition_icon(status: str) -> str:
    if status in HOMEBREW_ICONS:
        return HOMEBREW_ICONS[status]
    return f"systems/dnd5e/icons/conditions/{status}.svg"


def macro_repeat(condition: Condition) -> str:
    """dae repeat tag for a save-ends condition."""
    if not condition.save_ends:
        return "none"
    if condition.save_ends_timing is SaveEndsTiming.START_OF_TURN:
        return "startEveryTurn"
    return "endEveryTurn"


def convert_duration(duration: Duration) -> dict:
    """Descriptor duration -> effect duration (rounds or seconds)."""
    if duration.units == "inst" or not duration.value:
        return {}
    if duration.units == "round":
        return {"rounds": duration.value}
    seconds = {"minute": 60, "hour": 3600, "day": 86400}.get(duration.units)
    if seconds is None:
        return {}
    return {"seconds": duration.value * seconds}


class EffectGenerator:
    """Builds active effect dicts from a descriptor and its id plan."""

    def __init__(self, save_ends_rounds: int = SAVE_ENDS_ROUNDS):
        self.save_ends_rounds = save_ends_rounds

    def generate(self, descriptor: AbilityDescriptor, plan: EffectIdPlan) -> list[dict]:
        effects = []

        for effect in descriptor.effects:
            built = self.mechanical_effect(effect, descriptor, plan)
            if built:
                effects.append(built)

        for condition in descriptor.status_conditions:
            effect_id = plan.id_for(condition.name)
            if effect_id is None:
                continue
            effects.append(self.condition_effect(condition, effect_id, descriptor))

        if descriptor.type is AbilityType.PASSIVE:
            for effect in effects:
                effect["transfer"] = True
                effect["flags"].setdefault("dae", {})["transfer"] = True

        logger.debug("Generated %d effects for '%s'", len(effects), descriptor.name)
        return effects

    def mechanical_effect(self, effect: Effect, descriptor: AbilityDescriptor,
                          plan: EffectIdPlan) -> Optional[dict]:
        changes = self.changes_for(effect)
        if not changes:
            return None

        dae = {"stackable": "multi" if effect.type in ("ac_bonus", "ability_modifier") else "noneName"}
        if descriptor.type is AbilityType.PASSIVE:
            dae["transfer"] = True
        if descriptor.duration.concentration:
            dae["specialDuration"] = ["isConcentration"]

        label = "Immunity" if effect.immunity else effect.type.replace("_", " ").title()
        return {
            "_id": plan.new_id(),
            "name": f"{descriptor.name} - {label}",
            "img": EFFECT_ICONS.get(effect.type, DEFAULT_EFFECT_ICON),
            "changes": changes,
            "duration": convert_duration(descriptor.duration),
            "flags": {
                "dae": dae,
                "automancy": {"effectType": effect.type, "generated": True},
            },
            "statuses": [],
            "transfer": descriptor.type is AbilityType.PASSIVE,
            "disabled": False,
        }

    @staticmethod
    def changes_for(effect: Effect) -> list[dict]:
        if effect.type == "ac_bonus" and effect.amount is not None:
            return [change("system.attributes.ac.bonus", effect.amount, mode=MODE_ADD)]
        if effect.type == "damage_resistance":
            key = "system.traits.di.value" if effect.immunity else "system.traits.dr.value"
            return [change(key, t, mode=MODE_CUSTOM) for t in effect.damage_types]
        return []

    def condition_effect(self, condition: Condition, effect_id: str,
                         descriptor: AbilityDescriptor) -> dict:
        status = condition.name
        if condition.save_ends:
            special = (
                ["turnEndSource"]
                if condition.save_ends_timing is SaveEndsTiming.END_OF_TURN
                else ["turnStart"]
            )
        else:
            special = []

        flags = {
            "dae": {
                "stackable": "noneName",
                "specialDuration": special,
                "macroRepeat": macro_repeat(condition),
            }
        }

        if status in HOMEBREW_CONDITIONS:
            save = descriptor.saves[0] if descriptor.saves else None
            description = HOMEBREW_DESCRIPTIONS[status]
            flags["chris-premades"] = {
                "condition": True,
                "conditionType": status,
                "customCondition": True,
            }
            flags["convenient-effects"] = {"isCustom": True, "description": description}
            flags["automancy"] = {
                "generated": True,
                "homebrewCondition": True,
                "conditionType": status,
                "saveEnds": condition.save_ends,
                "saveEndsTiming": (
                    condition.save_ends_timing.value if condition.save_ends_timing else None
                ),
                "saveDC": save.dc if save else None,
                "saveType": save.ability if save else None,
                "description": description,
            }

        duration = (
            {"rounds": self.save_ends_rounds, "turns": 0} if condition.save_ends
            else convert_duration(descriptor.duration)
        )

        return {
            "_id": effect_id,
            "name": f"{descriptor.name} - {status.title()}",
            "img": condition_icon(status),
            "changes": [dict(c) for c in CONDITION_CHANGES.get(status, [])],
            "duration": duration,
            "flags": flags,
            "statuses": [status],
            "transfer": False,
            "disabled": False,
        }
