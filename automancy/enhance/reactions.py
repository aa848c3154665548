"""Pass 6: reaction tracking for abilities activated as a reaction."""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from ..model import ADVANCED, AbilityDescriptor
from ..scripts import BehaviorScript, ScriptRegistry, js_escape, script_name
from ..synthesis import EffectIdPlan
from .models import PartialArtifact, PassContext
from .rich_flags import CREATURE_TYPES

logger = logging.getLogger(__name__)

SYSTEM = "reaction-tracking"


@dataclass(frozen=True)
class TriggerSpec:
    type: str
    pattern: re.Pattern
    hook: str
    priority: int
    validation: str


TRIGGERS = (
    TriggerSpec(
        "damage_taken", re.compile(r"(?:when|if).*takes? damage", re.IGNORECASE),
        "midi-qol.DamageWorkflowComplete", 100,
        "workflow.damageRoll?.total > 0 && workflow.hitTargets.has(token)",
    ),
    TriggerSpec(
        "being_attacked", re.compile(r"(?:when|if).*(?:attacked|attack[^.]*made)", re.IGNORECASE),
        "midi-qol.preAttackRoll", 90,
        "workflow.targets.has(token)",
    ),
    TriggerSpec(
        "spell_cast", re.compile(r"(?:when|if).*casts? a spell", re.IGNORECASE),
        "midi-qol.preItemRoll", 95,
        'workflow.item?.type === "spell"',
    ),
    TriggerSpec(
        "target_moves", re.compile(r"(?:when|if).*\bmoves?\b", re.IGNORECASE),
        "updateToken", 80,
        "canvas.grid.measureDistance(workflow.previousPosition, workflow.newPosition) >= 5",
    ),
    TriggerSpec(
        "opportunity_attack", re.compile(r"opportunity attack", re.IGNORECASE),
        "midi-qol.OpportunityAttack", 70,
        "workflow.token?.id !== token.id",
    ),
)

RANGE_PATTERN = re.compile(r"(?:within|range of) (\d+) (?:feet|ft)", re.IGNORECASE)
SIGHT_PATTERN = re.compile(r"can see", re.IGNORECASE)
WEAPON_ATTACK_PATTERN = re.compile(r"weapon attack", re.IGNORECASE)
TARGET_TYPE_PATTERN = re.compile(
    r"against (?:a |an )?(" + "|".join(CREATURE_TYPES) + r")s?\b", re.IGNORECASE
)
BEFORE_PATTERN = re.compile(r"\bbefore\b", re.IGNORECASE)
AFTER_PATTERN = re.compile(r"\bafter\b", re.IGNORECASE)

STANDARD_CHECKS = [
    '!actor.effects.some(e => e.statuses.has("incapacitated"))',
    '!actor.effects.some(e => e.statuses.has("unconscious"))',
]

# str.format templates; literal braces are doubled
CONDITION_CHECKS = {
    "line_of_sight": "canvas.visibility.testVisibility(workflow.token.center, {{ object: token }})",
    "weapon_attack": '["mwak", "rwak"].includes(workflow.item?.system.actionType)',
    "target_type": 'workflow.token.actor.system.details.type.value === "{value}"',
}


@dataclass
class ReactionProfile:
    """Everything the reaction scripts and flags are built from."""
    triggers: list[TriggerSpec] = field(default_factory=list)
    range: Optional[int] = None
    conditions: list[tuple[str, Optional[str]]] = field(default_factory=list)
    timing: str = "immediate"

    @property
    def primary(self) -> Optional[TriggerSpec]:
        return self.triggers[0] if self.triggers else None

    def to_dict(self) -> dict:
        return {
            "triggers": [
                {"type": t.type, "hook": t.hook, "priority": t.priority} for t in self.triggers
            ],
            "range": self.range,
            "conditions": [{"type": kind, "value": value} for kind, value in self.conditions],
            "timing": self.timing,
            "consumesReaction": True,
        }


def analyze_reaction(text: str) -> ReactionProfile:
    triggers = sorted(
        (t for t in TRIGGERS if t.pattern.search(text)),
        key=lambda t: t.priority, reverse=True,
    )

    m = RANGE_PATTERN.search(text)
    conditions: list[tuple[str, Optional[str]]] = []
    if SIGHT_PATTERN.search(text):
        conditions.append(("line_of_sight", None))
    if WEAPON_ATTACK_PATTERN.search(text):
        conditions.append(("weapon_attack", None))
    target = TARGET_TYPE_PATTERN.search(text)
    if target:
        conditions.append(("target_type", target.group(1).lower()))

    if BEFORE_PATTERN.search(text):
        timing = "before"
    elif AFTER_PATTERN.search(text):
        timing = "after"
    else:
        timing = "immediate"

    return ReactionProfile(
        triggers=triggers,
        range=int(m.group(1)) if m else None,
        conditions=conditions,
        timing=timing,
    )


def validation_checks(profile: ReactionProfile) -> list[str]:
    """JS boolean expressions that must all hold before the reaction fires."""
    checks = list(STANDARD_CHECKS)
    if profile.primary:
        checks.append(profile.primary.validation)
    if profile.range:
        checks.append(f"canvas.grid.measureDistance(token, workflow.token) <= {profile.range}")
    for kind, value in profile.conditions:
        checks.append(CONDITION_CHECKS[kind].format(value=value))
    return checks


def reaction_scripts(descriptor: AbilityDescriptor, profile: ReactionProfile,
                     registry: ScriptRegistry) -> list[BehaviorScript]:
    name = js_escape(descriptor.name)
    scripts = []

    if profile.primary:
        checks = ",\n    ".join(
            f"(workflow, actor, token) => {check}" for check in validation_checks(profile)
        )
        scripts.append(registry.script(
            script_name(descriptor.name, "ReactionTrigger"), "reaction_trigger",
            {
                "name": name,
                "trigger": profile.primary.type,
                "hook": profile.primary.hook,
                "checks": checks,
            },
            hook=profile.primary.hook, kind="reaction",
        ))

    scripts.append(registry.script(
        script_name(descriptor.name, "ReactionConsumption"), "reaction_consumption",
        {"name": name}, hook="combatRound", kind="reaction",
    ))
    scripts.append(registry.script(
        script_name(descriptor.name, "ReactionDialog"), "reaction_dialog",
        {"name": name, "timing": profile.timing}, hook="manual", kind="reaction",
    ))
    return scripts


def reactions_pass(descriptor: AbilityDescriptor, plan: EffectIdPlan,
                   context: PassContext) -> PartialArtifact:
    partial = PartialArtifact(system=SYSTEM)
    if not descriptor.is_reaction:
        return partial

    profile = analyze_reaction(descriptor.text)
    partial.scripts = reaction_scripts(descriptor, profile, context.registry)

    trigger_types = [t.type for t in profile.triggers]
    partial.flags = {
        "midi-qol": {
            "reactionTracking": True,
            "reactionType": profile.primary.type if profile.primary else "manual",
        },
        "gambits-premades": {
            "isReaction": True,
            "reactionTriggers": trigger_types,
            "consumesReaction": True,
        },
        "automancy": {"reactionSystem": True, "reaction": profile.to_dict()},
    }
    partial.complexity_floor = ADVANCED
    partial.details["profile"] = profile

    logger.debug("Reaction '%s' triggers: %s", descriptor.name, trigger_types or ["manual"])
    return partial
