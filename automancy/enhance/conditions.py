"""Condition engine: fallback status effects read straight from the text.

Only merged when base synthesis produced no status effects, so effect ids
referenced by activities are never shadowed.
"""

import re

from ..model import MODERATE, AbilityDescriptor
from ..synthesis import EffectIdPlan
from ..synthesis.effects import CONDITION_CHANGES, HOMEBREW_DESCRIPTIONS, condition_icon
from ..synthesis.flags import ABILITY_CODES
from .models import PartialArtifact, PassContext

SYSTEM = "condition-engine"

PRONE_PATTERN = re.compile(r"knocked prone|falls? prone|\bprone\b", re.IGNORECASE)
GRAPPLE_PATTERN = re.compile(r"grappled.*?escape DC (\d+)", re.IGNORECASE | re.DOTALL)
RESTRAINED_PATTERN = re.compile(r"\brestrained\b", re.IGNORECASE)
DAZED_PATTERN = re.compile(r"\bdazed\b", re.IGNORECASE)
SAVE_TYPE_PATTERN = re.compile(r"DC \d+ (\w+) (?:saving throw|save)", re.IGNORECASE)
DC_PATTERN = re.compile(r"DC (\d+)", re.IGNORECASE)
SAVE_ENDS_START_PATTERN = re.compile(
    r"save ends at (?:the )?(?:start|beginning) of (?:their |its )?turn", re.IGNORECASE
)
SAVE_ENDS_PATTERN = re.compile(r"save ends", re.IGNORECASE)

DEFAULT_DAZED_DC = 10


def _save_type(text: str, default: str) -> str:
    m = SAVE_TYPE_PATTERN.search(text)
    if not m:
        return default
    return ABILITY_CODES.get(m.group(1).lower(), default)


def status_effect(descriptor: AbilityDescriptor, plan: EffectIdPlan, status: str,
                  dae: dict, extra_flags: dict) -> dict:
    flags = {"dae": {"stackable": "noneName", **dae}}
    flags.update(extra_flags)
    return {
        "_id": plan.id_for(status) or plan.new_id(),
        "name": f"{descriptor.name} - {status.title()}",
        "img": condition_icon(status),
        "changes": [dict(c) for c in CONDITION_CHANGES.get(status, [])],
        "duration": {},
        "flags": flags,
        "statuses": [status],
        "transfer": False,
        "disabled": False,
    }


def condition_engine_pass(descriptor: AbilityDescriptor, plan: EffectIdPlan,
                          context: PassContext) -> PartialArtifact:
    partial = PartialArtifact(system=SYSTEM)
    text = descriptor.text
    automancy: dict = {}

    if PRONE_PATTERN.search(text):
        save_type = _save_type(text, "str")
        partial.condition_effects.append(status_effect(
            descriptor, plan, "prone",
            {"specialDuration": []},
            {"automancy": {"generated": True, "trigger": "save_failure", "saveType": save_type}},
        ))
        automancy["applyProneOnFailedSave"] = True

    m = GRAPPLE_PATTERN.search(text)
    if m:
        escape_dc = int(m.group(1))
        partial.condition_effects.append(status_effect(
            descriptor, plan, "grappled",
            {"specialDuration": []},
            {"automancy": {"generated": True, "escapeDC": escape_dc}},
        ))
        if RESTRAINED_PATTERN.search(text):
            partial.condition_effects.append(status_effect(
                descriptor, plan, "restrained",
                {"specialDuration": []},
                {"automancy": {"generated": True, "linkedTo": "grappled"}},
            ))
        automancy["complexGrappleLogic"] = True
        automancy["grappleEscapeDC"] = escape_dc

    if DAZED_PATTERN.search(text):
        dc = DC_PATTERN.search(text)
        starts = bool(SAVE_ENDS_START_PATTERN.search(text))
        save_ends = starts or bool(SAVE_ENDS_PATTERN.search(text))
        repeat = "none"
        if save_ends:
            repeat = "startEveryTurn" if starts else "endEveryTurn"
        partial.condition_effects.append(status_effect(
            descriptor, plan, "dazed",
            {"macroRepeat": repeat, "specialDuration": []},
            {
                "convenient-effects": {"isCustom": True, "description": HOMEBREW_DESCRIPTIONS["dazed"]},
                "automancy": {
                    "generated": True,
                    "homebrewCondition": True,
                    "saveEnds": save_ends,
                    "saveDC": int(dc.group(1)) if dc else DEFAULT_DAZED_DC,
                    "saveType": _save_type(text, "wis"),
                },
            },
        ))
        automancy["dazed"] = True
        automancy["dazedSaveEnds"] = save_ends

    if automancy:
        partial.flags = {"automancy": automancy}
    if partial.condition_effects:
        partial.complexity_floor = MODERATE
    return partial
