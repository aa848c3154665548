"""Base flag bundle: midi-qol workflow flags plus dae and chris-premades metadata."""

import re

from ..model import AbilityDescriptor, AbilityType, ConditionKind

FLAG_VERSION = "0.2.0"

ABILITY_CODES = {
    "strength": "str", "str": "str",
    "dexterity": "dex", "dex": "dex",
    "constitution": "con", "con": "con",
    "intelligence": "int", "int": "int",
    "wisdom": "wis", "wis": "wis",
    "charisma": "cha", "cha": "cha",
}

SKILL_CODES = {
    "acrobatics": "acr", "animal handling": "ani", "arcana": "arc",
    "athletics": "ath", "deception": "dec", "history": "his",
    "insight": "ins", "intimidation": "inti", "investigation": "inv",
    "medicine": "med", "nature": "nat", "perception": "prc",
    "performance": "per", "persuasion": "pers", "religion": "rel",
    "sleight of hand": "slt", "stealth": "ste", "survival": "sur",
}

HALF_ON_SAVE_PATTERN = re.compile(
    r"half (?:damage )?on (?:a )?(?:successful )?save|half as much damage",
    re.IGNORECASE,
)


def roll_modifier_keys(kind: str, target: str | None) -> list[str]:
    """midi-qol keys for an advantage/disadvantage target."""
    target = (target or "all").lower()
    if target in ("all", "attack"):
        return [f"{kind}.attack.all"]
    if target in ("save", "saves"):
        return [f"{kind}.ability.save.all"]
    if target in ("check", "checks"):
        return [f"{kind}.ability.check.all"]
    code = ABILITY_CODES.get(target)
    if code:
        return [f"{kind}.ability.check.{code}", f"{kind}.ability.save.{code}"]
    skill = SKILL_CODES.get(target)
    if skill:
        return [f"{kind}.skill.{skill}"]
    return []


def has_attack(descriptor: AbilityDescriptor) -> bool:
    return descriptor.type in (AbilityType.WEAPON_ATTACK, AbilityType.SPELL_ATTACK)


def identifier(name: str) -> str:
    return "automancy-" + re.sub(r"\s+", "-", name.strip().lower())


class FlagGenerator:
    """Synthesizes the base flag bundle for one descriptor."""

    def generate(self, descriptor: AbilityDescriptor) -> dict:
        """All base namespaces at once."""
        return {
            "midi-qol": self.midi_flags(descriptor),
            "dae": self.dae_flags(descriptor),
            "chris-premades": self.chris_premades_flags(descriptor),
            "automancy": {
                "generated": True,
                "version": FLAG_VERSION,
                "complexity": descriptor.complexity,
                "sourceType": descriptor.type.value,
            },
        }

    def midi_flags(self, descriptor: AbilityDescriptor) -> dict:
        flags: dict = {}

        for condition in descriptor.conditions:
            if condition.kind is ConditionKind.ADVANTAGE:
                kind = "advantage"
            elif condition.kind is ConditionKind.DISADVANTAGE:
                kind = "disadvantage"
            else:
                continue
            for key in roll_modifier_keys(kind, condition.value):
                flags[key] = True

        for effect in descriptor.effects:
            if effect.type != "damage_resistance":
                continue
            for damage_type in effect.damage_types:
                if effect.immunity:
                    flags[f"DI.{damage_type}"] = True
                else:
                    flags[f"DR.{damage_type}"] = 0.5

        if descriptor.type is AbilityType.SAVE_BASED and descriptor.saves:
            save = descriptor.saves[0]
            if save.scaling == "flat":
                flags["saveDC"] = save.dc
            else:
                flags[f"save.{save.ability}.scaling"] = save.scaling

        if descriptor.saves and descriptor.damage and HALF_ON_SAVE_PATTERN.search(descriptor.text):
            flags["halfdam"] = True

        if descriptor.effects or descriptor.conditions:
            flags["effectActivation"] = True

        if has_attack(descriptor) and descriptor.saves:
            flags["forceWorkflow"] = True
            # Attack carries damage; the save only applies the condition
            if descriptor.status_conditions and descriptor.damage:
                flags["noDamSave"] = True
                flags["saveDamage"] = "nodam"
                flags["otherSaveDamage"] = "nodam"
                flags["rollOtherDamage"] = "none"

        if descriptor.range.value and descriptor.range.value > 5:
            flags["checkRange"] = True

        return flags

    def dae_flags(self, descriptor: AbilityDescriptor) -> dict:
        flags: dict = {}
        if descriptor.type is AbilityType.PASSIVE:
            flags["transfer"] = True
        if descriptor.effects:
            stackable = any(e.type in ("ac_bonus", "ability_modifier") for e in descriptor.effects)
            flags["stackable"] = "multi" if stackable else "noneName"
        if descriptor.duration.concentration:
            flags["specialDuration"] = ["isConcentration"]
        return flags

    def chris_premades_flags(self, descriptor: AbilityDescriptor) -> dict:
        return {
            "identifier": identifier(descriptor.name),
            "complexity": descriptor.complexity,
            "automationType": descriptor.type.value,
        }
