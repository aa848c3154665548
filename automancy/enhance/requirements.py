"""Pass 1: validation scripts for activation requirements."""

import logging

from ..model import MODERATE, AbilityDescriptor, Requirement
from ..scripts import BehaviorScript, ScriptRegistry, js_escape, script_name
from ..synthesis import EffectIdPlan
from .models import PartialArtifact, PassContext

logger = logging.getLogger(__name__)

SYSTEM = "requirements-validation"

# requirement type -> (template, script name suffix)
REQUIREMENT_TEMPLATES = {
    "movement": ("require_movement", "MovementCheck"),
    "visibility": ("require_visibility", "SightCheck"),
    "trigger": ("require_damage_trigger", "DamageTrigger"),
    "recharge": ("require_recharge", "RechargeCheck"),
}


def requirement_script(descriptor: AbilityDescriptor, requirement: Requirement,
                       registry: ScriptRegistry) -> BehaviorScript:
    template_id, suffix = REQUIREMENT_TEMPLATES[requirement.type]
    if requirement.type == "movement":
        data = {"distance": requirement.value}
    elif requirement.type == "recharge":
        data = {"min": requirement.value, "max": requirement.value_max}
    elif requirement.type == "trigger":
        data = {"name": js_escape(descriptor.name)}
    else:
        data = {}
    return registry.script(
        script_name(descriptor.name, suffix), template_id, data,
        hook=requirement.hook, kind="requirement",
    )


def requirements_pass(descriptor: AbilityDescriptor, plan: EffectIdPlan,
                      context: PassContext) -> PartialArtifact:
    partial = PartialArtifact(system=SYSTEM)
    if not descriptor.requirements:
        return partial

    for requirement in descriptor.requirements:
        partial.scripts.append(requirement_script(descriptor, requirement, context.registry))
        partial.requirements.append(requirement)

    partial.flags = {
        "automancy": {
            "requirements": [
                {"type": r.type, "condition": r.condition, "hook": r.hook}
                for r in descriptor.requirements
            ],
        },
    }
    partial.complexity_floor = MODERATE

    logger.debug("%d requirement scripts for '%s'", len(partial.scripts), descriptor.name)
    return partial
