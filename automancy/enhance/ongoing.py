"""Pass 7: ongoing effects that tick at the start or end of each turn.

Recognized entries:

  damage          "takes 5 (1d10) fire damage at the start of each of its turns"
  healing         "regains 5 (1d10) hit points at the end of its turn"
  save            "repeats the saving throw at the end of each of its turns"
  condition_link  "until this grapple ends" / "while grappled"

Every entry becomes an effect with a fresh id; healing and repeat-save
entries also get tick scripts. Damage tick scripts come from the
templating pass.
"""

import logging
import re
from dataclasses import asdict, dataclass
from typing import Optional

from ..model import COMPLEX, AbilityDescriptor
from ..scripts import BehaviorScript, ScriptRegistry, js_escape, script_name
from ..synthesis import EffectIdPlan
from ..synthesis.flags import ABILITY_CODES
from .models import PartialArtifact, PassContext

logger = logging.getLogger(__name__)

SYSTEM = "ongoing-effects"

START_OF_TURN = "start_of_turn"
END_OF_TURN = "end_of_turn"
PERSISTENT = "persistent"

_TURN = r"(?:each of )?(?:its|their|your) turns?"

DAMAGE_PATTERN = re.compile(
    r"takes? (\d+) \(([^)]+)\) (\w+) damage at the (start|end) of " + _TURN, re.IGNORECASE
)
HEALING_PATTERN = re.compile(
    r"(?:regains?|heals?) (\d+) \(([^)]+)\) hit points at the (start|end) of " + _TURN,
    re.IGNORECASE,
)
REPEAT_SAVE_PATTERN = re.compile(
    r"repeats? (?:this|the) (?:saving throw|save) at the (start|end) of " + _TURN, re.IGNORECASE
)
GRAPPLE_LINK_PATTERN = re.compile(r"until this grapple ends|while grappled", re.IGNORECASE)
SAVE_TYPE_PATTERN = re.compile(r"DC \d+ (\w+) (?:saving throw|save)", re.IGNORECASE)
DC_PATTERN = re.compile(r"DC (\d+)", re.IGNORECASE)
SAVE_TO_END_PATTERN = re.compile(r"DC (\d+) (\w+) (?:saving throw|save) to end", re.IGNORECASE)
ROUNDS_PATTERN = re.compile(r"for (\d+) rounds?", re.IGNORECASE)
MINUTES_PATTERN = re.compile(r"for (\d+) minutes?", re.IGNORECASE)
UNCONSCIOUS_END_PATTERN = re.compile(r"until (?:it is |they are |the target is )?unconscious", re.IGNORECASE)
FULL_HP_END_PATTERN = re.compile(r"at full hit points", re.IGNORECASE)

EFFECT_ICONS = {
    "damage": "systems/dnd5e/icons/spells/debuff-red-1.jpg",
    "healing": "systems/dnd5e/icons/spells/heal-sky-1.jpg",
    "save": "systems/dnd5e/icons/spells/debuff-blue-1.jpg",
    "condition_link": "systems/dnd5e/icons/spells/buff-utility-2.jpg",
}
EFFECT_LABELS = {
    "damage": "Ongoing Damage",
    "healing": "Ongoing Healing",
    "save": "Ongoing Save",
    "condition_link": "Linked Effect",
}


@dataclass
class OngoingEntry:
    """One recurring effect read from the text."""
    kind: str                              # damage | healing | save | condition_link
    timing: str                            # start_of_turn | end_of_turn | persistent
    formula: Optional[str] = None
    damage_type: Optional[str] = None
    save_ability: Optional[str] = None
    save_dc: Optional[int] = None
    duration: Optional[dict] = None
    end_condition: Optional[str] = None
    save_to_end: Optional[dict] = None
    linked_condition: Optional[str] = None

    @property
    def repeat(self) -> str:
        if self.timing == START_OF_TURN:
            return "startEveryTurn"
        if self.timing == END_OF_TURN:
            return "endEveryTurn"
        return "none"

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


def _timing(word: str) -> str:
    return START_OF_TURN if word.lower() == "start" else END_OF_TURN


def _ability(word: str, default: str) -> str:
    return ABILITY_CODES.get(word.lower(), default)


def extract_duration(text: str) -> Optional[dict]:
    m = ROUNDS_PATTERN.search(text)
    if m:
        return {"rounds": int(m.group(1))}
    m = MINUTES_PATTERN.search(text)
    if m:
        return {"seconds": int(m.group(1)) * 60}
    return None


def extract_end_condition(text: str) -> Optional[str]:
    if UNCONSCIOUS_END_PATTERN.search(text):
        return "unconscious"
    if GRAPPLE_LINK_PATTERN.search(text):
        return "parent_condition_ends"
    if FULL_HP_END_PATTERN.search(text):
        return "full_hp"
    return None


def extract_save_to_end(text: str) -> Optional[dict]:
    m = SAVE_TO_END_PATTERN.search(text)
    if not m:
        return None
    return {"dc": int(m.group(1)), "ability": _ability(m.group(2), m.group(2).lower()[:3])}


def detect_ongoing(text: str, default_ability: str = "con",
                   default_dc: int = 15) -> list[OngoingEntry]:
    """Every ongoing entry in ``text``, in a fixed order."""
    entries = []
    duration = extract_duration(text)
    end_condition = extract_end_condition(text)
    linked = "grappled" if end_condition == "parent_condition_ends" else None

    for m in DAMAGE_PATTERN.finditer(text):
        entries.append(OngoingEntry(
            kind="damage",
            timing=_timing(m.group(4)),
            formula=re.sub(r"\s+", "", m.group(2)),
            damage_type=m.group(3).lower(),
            duration=duration,
            end_condition=end_condition,
            save_to_end=extract_save_to_end(text),
            linked_condition=linked,
        ))

    m = HEALING_PATTERN.search(text)
    if m:
        entries.append(OngoingEntry(
            kind="healing",
            timing=_timing(m.group(3)),
            formula=re.sub(r"\s+", "", m.group(2)),
            damage_type="healing",
            duration=duration,
            end_condition=end_condition,
        ))

    m = REPEAT_SAVE_PATTERN.search(text)
    if m:
        save_type = SAVE_TYPE_PATTERN.search(text)
        dc = DC_PATTERN.search(text)
        entries.append(OngoingEntry(
            kind="save",
            timing=_timing(m.group(1)),
            save_ability=_ability(save_type.group(1), default_ability) if save_type else default_ability,
            save_dc=int(dc.group(1)) if dc else default_dc,
            duration=duration,
            end_condition="successful_save",
        ))

    if GRAPPLE_LINK_PATTERN.search(text):
        entries.append(OngoingEntry(
            kind="condition_link",
            timing=PERSISTENT,
            linked_condition="grappled",
            end_condition="parent_condition_ends",
        ))

    return entries


def macro_repeat(entries: list[OngoingEntry]) -> str:
    """dae repeat mode covering every timed entry."""
    has_start = any(e.timing == START_OF_TURN for e in entries)
    has_end = any(e.timing == END_OF_TURN for e in entries)
    if has_start and has_end:
        return "startEndEveryTurn"
    if has_start:
        return "startEveryTurn"
    if has_end:
        return "endEveryTurn"
    return "none"


def end_check(entry: OngoingEntry) -> str:
    """JS guard that stops a tick once the entry's end condition holds."""
    if entry.end_condition == "unconscious":
        return 'if (actor.effects.some(e => e.statuses.has("unconscious"))) return;'
    if entry.end_condition == "full_hp":
        return "if (actor.system.attributes.hp.value >= actor.system.attributes.hp.max) return;"
    if entry.end_condition == "parent_condition_ends" and entry.linked_condition:
        return f'if (!actor.effects.some(e => e.statuses.has("{entry.linked_condition}"))) return;'
    return ""


def tick_script(descriptor: AbilityDescriptor, entry: OngoingEntry,
                registry: ScriptRegistry) -> BehaviorScript:
    """Damage or healing applied on each tick."""
    suffix = "OngoingDamage" if entry.kind == "damage" else "OngoingHealing"
    return registry.script(
        script_name(descriptor.name, suffix), "ongoing_tick",
        {
            "name": js_escape(descriptor.name),
            "kind": entry.kind,
            "formula": entry.formula,
            "damage_type": entry.damage_type,
            "timing": entry.timing.split("_")[0],
            "repeat": entry.repeat,
            "end_check": end_check(entry),
        },
        hook=entry.repeat, kind="ongoing",
    )


def save_script(descriptor: AbilityDescriptor, entry: OngoingEntry,
                registry: ScriptRegistry) -> BehaviorScript:
    return registry.script(
        script_name(descriptor.name, "OngoingSave"), "ongoing_save",
        {
            "name": js_escape(descriptor.name),
            "dc": entry.save_dc,
            "ability": entry.save_ability,
            "timing": entry.timing.split("_")[0],
            "repeat": entry.repeat,
        },
        hook=entry.repeat, kind="ongoing",
    )


def ongoing_effect(descriptor: AbilityDescriptor, entry: OngoingEntry, effect_id: str) -> dict:
    special = ["isUnconscious"] if entry.end_condition == "unconscious" else []

    flags = {
        "dae": {"macroRepeat": entry.repeat, "stackable": "noneName", "specialDuration": special},
        "automancy": {
            "generated": True,
            "ongoingEffect": entry.to_dict(),
            "macroName": script_name(descriptor.name, EFFECT_LABELS[entry.kind].replace(" ", "")),
        },
    }
    if entry.kind in ("damage", "healing"):
        flags["chris-premades"] = {
            "ongoingEffect": True,
            "effectType": entry.kind,
            "formula": entry.formula,
            "damageType": entry.damage_type,
            "timing": entry.timing,
        }
    elif entry.kind == "save":
        flags["chris-premades"] = {
            "ongoingSave": True,
            "saveType": entry.save_ability,
            "saveDC": entry.save_dc,
        }
    else:
        flags["automancy"]["linkedCondition"] = entry.linked_condition

    return {
        "_id": effect_id,
        "name": f"{descriptor.name} - {EFFECT_LABELS[entry.kind]}",
        "img": EFFECT_ICONS[entry.kind],
        "changes": [],
        "duration": dict(entry.duration or {}),
        "flags": flags,
        "statuses": [],
        "transfer": False,
        "disabled": False,
    }


def ongoing_pass(descriptor: AbilityDescriptor, plan: EffectIdPlan,
                 context: PassContext) -> PartialArtifact:
    partial = PartialArtifact(system=SYSTEM)
    entries = detect_ongoing(
        descriptor.text,
        default_ability=context.config.ongoing_save_ability,
        default_dc=context.config.ongoing_save_dc,
    )
    if not entries:
        return partial

    for entry in entries:
        partial.effects.append(ongoing_effect(descriptor, entry, plan.new_id()))
        if entry.kind == "healing":
            partial.scripts.append(tick_script(descriptor, entry, context.registry))
        elif entry.kind == "save":
            partial.scripts.append(save_script(descriptor, entry, context.registry))

    partial.flags = {
        "midi-qol": {"ongoingEffects": True, "effectCount": len(entries)},
        "dae": {"macroRepeat": macro_repeat(entries), "ongoingTracking": True},
        "chris-premades": {"hasOngoingEffects": True, "effectTypes": [e.kind for e in entries]},
        "automancy": {"ongoingSystem": True, "ongoingEffects": [e.to_dict() for e in entries]},
    }
    partial.complexity_floor = COMPLEX
    partial.details["entries"] = entries

    logger.debug("%d ongoing entries for '%s'", len(entries), descriptor.name)
    return partial
