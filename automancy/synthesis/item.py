"""Item record, description HTML and icons."""

import html

from ..model import AbilityDescriptor, AbilityType
from .activities import build_activities
from .effects import HOMEBREW_DESCRIPTIONS
from .ids import EffectIdPlan, generate_id

ITEM_ICONS = {
    AbilityType.WEAPON_ATTACK: "icons/svg/sword.svg",
    AbilityType.SPELL_ATTACK: "icons/svg/lightning.svg",
    AbilityType.SAVE_BASED: "icons/svg/shield.svg",
    AbilityType.HEALING: "icons/svg/heal.svg",
    AbilityType.UTILITY: "icons/svg/cog.svg",
    AbilityType.PASSIVE: "icons/svg/eye.svg",
    AbilityType.REACTION: "icons/svg/clockwork.svg",
}

ATTACK_LABELS = {
    "mwak": "Melee Weapon Attack",
    "rwak": "Ranged Weapon Attack",
    "msak": "Melee Spell Attack",
    "rsak": "Ranged Spell Attack",
}


def item_type(descriptor: AbilityDescriptor) -> str:
    return "weapon" if descriptor.type is AbilityType.WEAPON_ATTACK else "feat"


def describe(descriptor: AbilityDescriptor) -> str:
    """Short HTML summary of the ability's mechanics."""
    parts = []

    if descriptor.attack:
        label = ATTACK_LABELS.get(descriptor.attack.type, "Attack")
        reach = descriptor.range.value or 5
        parts.append(
            f"<p><strong>{label}:</strong> +{descriptor.attack.bonus} to hit, "
            f"reach {reach} ft., one {descriptor.target.type}.</p>"
        )

    if descriptor.damage:
        dealt = " plus ".join(f"{d.formula} {d.type} damage" for d in descriptor.damage)
        parts.append(f"<p><strong>Hit:</strong> {dealt}.</p>")

    statuses = descriptor.status_conditions
    if descriptor.saves:
        save = descriptor.saves[0]
        if statuses:
            cond = statuses[0]
            suffix = " (save ends)" if cond.save_ends else ""
            parts.append(
                f"<p>The target must succeed on a DC {save.dc} {save.ability.upper()} "
                f"saving throw or be <strong>{cond.name}</strong>{suffix}.</p>"
            )
        else:
            parts.append(f"<p>DC {save.dc} {save.ability.upper()} saving throw.</p>")

    for cond in statuses:
        if cond.name in HOMEBREW_DESCRIPTIONS:
            parts.append(
                f"<p><strong>{cond.name.title()}:</strong> {HOMEBREW_DESCRIPTIONS[cond.name]}</p>"
            )

    if not parts:
        return f"<p>{html.escape(descriptor.text)}</p>"
    return "\n".join(parts)


def build_item(descriptor: AbilityDescriptor, plan: EffectIdPlan) -> dict:
    """Item record with its activities wired to the planned effect ids."""
    kind = item_type(descriptor)

    system = {
        "description": {"value": describe(descriptor), "chat": ""},
        "uses": uses_data(descriptor),
        "requirements": "",
        "activities": build_activities(descriptor, plan),
        "identifier": "",
        "source": {"revision": 1, "rules": "2024"},
        "properties": [],
        "type": {"value": "monster" if kind == "feat" else "", "subtype": ""},
    }
    if descriptor.resources.recharge:
        system["recharge"] = {"value": descriptor.resources.recharge_min, "charged": True}

    if kind == "weapon":
        system.update({
            "quantity": 1,
            "weight": {"value": 0, "units": "lb"},
            "price": {"value": 0, "denomination": "gp"},
            "rarity": "common",
            "identified": True,
            "equipped": False,
            "proficient": True,
            "weaponType": "simpleM" if descriptor.attack and descriptor.attack.type == "mwak" else "simpleR",
        })

    return {
        "_id": generate_id(plan.length),
        "name": descriptor.name,
        "type": kind,
        "img": ITEM_ICONS.get(descriptor.type, "icons/svg/mystery-man.svg"),
        "system": system,
        "folder": None,
        "sort": 0,
        "ownership": {"default": 0},
    }


def uses_data(descriptor: AbilityDescriptor) -> dict:
    resources = descriptor.resources
    if resources.uses is None:
        return {"max": "", "spent": 0, "recovery": []}
    return {
        "max": str(resources.uses),
        "spent": 0,
        "recovery": [{"period": resources.per, "type": "recoverAll"}],
    }
