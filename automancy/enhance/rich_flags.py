"""Pass 3: richer flags for midi-qol, chris-premades, gambits-premades and dae."""

import re
from typing import Optional

from ..model import MODERATE, AbilityDescriptor, AbilityType
from ..synthesis import EffectIdPlan
from ..synthesis.flags import FLAG_VERSION, has_attack
from .models import PartialArtifact, PassContext

SYSTEM = "professional-flags"

CREATURE_TYPES = (
    "aberration", "beast", "celestial", "construct", "dragon", "elemental",
    "fey", "fiend", "giant", "humanoid", "monstrosity", "ooze", "plant", "undead",
)
TARGET_TYPE_PATTERN = re.compile(r"\b(" + "|".join(CREATURE_TYPES) + r")s?\b", re.IGNORECASE)
HP_THRESHOLD_PATTERN = re.compile(
    r"\bbloodied\b|half (?:its |their |of its |of their )?hit points", re.IGNORECASE
)

# Reaction trigger word -> gambits trigger name and priority key
REACTION_TRIGGERS = (
    (re.compile(r"takes? damage", re.IGNORECASE), "isDamaged", "damage"),
    (re.compile(r"\battacked\b|attack (?:roll )?(?:is )?made", re.IGNORECASE), "preAttackRoll", "attacked"),
    (re.compile(r"opportunity attack", re.IGNORECASE), "opportunityAttack", "opportunity"),
    (re.compile(r"casts? a spell", re.IGNORECASE), "preCastSpell", "default"),
    (re.compile(r"\bmoves?\b", re.IGNORECASE), "preMove", "default"),
)


def item_condition(descriptor: AbilityDescriptor) -> Optional[str]:
    """midi-qol itemCondition expression, or None when unrestricted."""
    parts = []
    types = {r.type: r for r in descriptor.requirements}

    if "visibility" in types:
        parts.append("game.canvas.sight.testVisibility(@token, @target)")
    if "movement" in types:
        parts.append(f'@token.getFlag("automancy", "leapDistance") >= {types["movement"].value}')

    m = TARGET_TYPE_PATTERN.search(descriptor.text)
    if m:
        parts.append(f'@target.actor.system.details.type.value === "{m.group(1).lower()}"')

    if HP_THRESHOLD_PATTERN.search(descriptor.text):
        parts.append(
            "@target.actor.system.attributes.hp.value <= "
            "(@target.actor.system.attributes.hp.max / 2)"
        )

    return " && ".join(parts) if parts else None


def reaction_trigger(text: str) -> tuple[str, str]:
    for pattern, trigger, priority_key in REACTION_TRIGGERS:
        if pattern.search(text):
            return trigger, priority_key
    return "manual", "default"


def midi_flags(descriptor: AbilityDescriptor) -> dict:
    flags: dict = {}

    condition = item_condition(descriptor)
    if condition:
        flags["itemCondition"] = condition

    if descriptor.saves:
        flags["saveScaling"] = descriptor.saves[0].scaling

    if has_attack(descriptor):
        flags["rollAttackPerTarget"] = "default" if (descriptor.target.value or 1) > 1 else "never"

    if descriptor.target.type == "space":
        flags["templateRequired"] = True
        flags["rangeTarget"] = "template"
    elif descriptor.target.type == "self":
        flags["selfTarget"] = True
        flags["selfTargetAlways"] = True

    return flags


def gambits_flags(descriptor: AbilityDescriptor, priorities: dict) -> dict:
    if descriptor.type is not AbilityType.REACTION and not descriptor.is_reaction:
        return {}
    trigger, priority_key = reaction_trigger(descriptor.text)
    return {
        "reaction": {"trigger": trigger, "enabled": True, "consumed": False},
        "priority": priorities.get(priority_key, priorities.get("default", 25)),
    }


def chris_premades_flags(descriptor: AbilityDescriptor) -> dict:
    flags: dict = {
        "info": {
            "name": descriptor.name,
            "version": FLAG_VERSION,
            "mutation": {"self": re.sub(r"\s+", "", descriptor.name.lower())},
        },
    }
    if descriptor.complexity < MODERATE:
        return flags

    config = []
    if descriptor.saves:
        config.append({
            "value": "saveDC", "label": f"{descriptor.name} Save DC",
            "type": "number", "default": descriptor.saves[0].dc,
        })
    if descriptor.damage:
        config.append({
            "value": "damageFormula", "label": f"{descriptor.name} Damage",
            "type": "text", "default": descriptor.damage[0].formula,
        })
    if descriptor.duration.value:
        config.append({
            "value": "duration", "label": f"{descriptor.name} Duration",
            "type": "number", "default": descriptor.duration.value,
        })
    if config:
        flags["config"] = config
    return flags


def rich_flags_pass(descriptor: AbilityDescriptor, plan: EffectIdPlan,
                    context: PassContext) -> PartialArtifact:
    flags = {
        "midi-qol": midi_flags(descriptor),
        "chris-premades": chris_premades_flags(descriptor),
        "gambits-premades": gambits_flags(descriptor, context.config.gambits_priority),
        "automancy": {
            "enhancedAutomation": True,
            "version": FLAG_VERSION,
            "sourceType": descriptor.type.value,
        },
    }
    return PartialArtifact(system=SYSTEM, flags=flags)
