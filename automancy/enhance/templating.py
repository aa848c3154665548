"""Pass 4: behavior scripts keyed by archetype.

Archetypes, checked independently:

  grapple         "grappled (escape DC N)"
  prone_on_hit    attack that knocks the target prone on a failed save
  ongoing_damage  damage ticking at the start or end of each turn
  save_ends       status condition that ends on a successful save
  multi_step      text sequencing steps with "then" or "until"
"""

import re

from ..model import COMPLEX, AbilityDescriptor
from ..scripts import BehaviorScript, ScriptRegistry, js_escape, script_name
from ..synthesis import EffectIdPlan
from ..synthesis.flags import has_attack
from .models import PartialArtifact, PassContext
from .ongoing import detect_ongoing, tick_script

SYSTEM = "macro-templates"

GRAPPLE_ESCAPE_PATTERN = re.compile(r"grappled.*?escape DC (\d+)", re.IGNORECASE | re.DOTALL)
MULTI_STEP_PATTERN = re.compile(r"\bthen\b|\buntil\b", re.IGNORECASE)

MULTI_STEP_HOOKS = ["preItemRoll", "postAttackRoll", "postSave", "preActiveEffects"]


def grapple_script(descriptor: AbilityDescriptor, escape_dc: int,
                   registry: ScriptRegistry) -> BehaviorScript:
    linked = [
        c.name.title() for c in descriptor.status_conditions if c.name != "grappled"
    ]
    return registry.script(
        script_name(descriptor.name, "Grapple"), "workflow_grapple",
        {"name": js_escape(descriptor.name), "escape_dc": escape_dc, "linked": linked},
        hook="postSave", kind="workflow",
    )


def save_ends_scripts(descriptor: AbilityDescriptor, registry: ScriptRegistry) -> list[BehaviorScript]:
    if not descriptor.saves:
        return []
    save = descriptor.saves[0]
    scripts = []
    for condition in descriptor.status_conditions:
        if not condition.save_ends:
            continue
        timing = condition.save_ends_timing.value if condition.save_ends_timing else "end_of_turn"
        start = timing.startswith("start")
        scripts.append(registry.script(
            script_name(descriptor.name, condition.name.title() + "SaveEnds"), "workflow_save_ends",
            {
                "name": js_escape(descriptor.name),
                "condition": condition.name,
                "dc": save.dc,
                "ability": save.ability,
                "timing": "start" if start else "end",
                "repeat": "startEveryTurn" if start else "endEveryTurn",
            },
            hook="startEveryTurn" if start else "endEveryTurn", kind="workflow",
        ))
    return scripts


def templating_pass(descriptor: AbilityDescriptor, plan: EffectIdPlan,
                    context: PassContext) -> PartialArtifact:
    partial = PartialArtifact(system=SYSTEM)
    registry = context.registry
    archetypes = []
    name = js_escape(descriptor.name)

    m = GRAPPLE_ESCAPE_PATTERN.search(descriptor.text)
    if m:
        partial.scripts.append(grapple_script(descriptor, int(m.group(1)), registry))
        archetypes.append("grapple")

    statuses = {c.name for c in descriptor.status_conditions}
    if has_attack(descriptor) and descriptor.saves and "prone" in statuses:
        partial.scripts.append(registry.script(
            script_name(descriptor.name, "ProneOnHit"), "workflow_prone_on_hit",
            {"name": name}, hook="postSave", kind="workflow",
        ))
        archetypes.append("prone_on_hit")

    ongoing = [
        e for e in detect_ongoing(descriptor.text) if e.kind == "damage"
    ]
    for entry in ongoing:
        partial.scripts.append(tick_script(descriptor, entry, registry))
    if ongoing:
        archetypes.append("ongoing_damage")

    save_ends = save_ends_scripts(descriptor, registry)
    if save_ends:
        partial.scripts.extend(save_ends)
        archetypes.append("save_ends")

    if MULTI_STEP_PATTERN.search(descriptor.text):
        partial.scripts.append(registry.script(
            script_name(descriptor.name, "Workflow"), "workflow_multi_step",
            {"name": name, "steps": MULTI_STEP_HOOKS},
            hook="multi", kind="workflow",
        ))
        archetypes.append("multi_step")

    if partial.scripts:
        partial.flags = {
            "automancy": {
                "scriptArchetypes": archetypes,
                "scripts": [s.name for s in partial.scripts],
            },
        }
        partial.complexity_floor = COMPLEX
    return partial
