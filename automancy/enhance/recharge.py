"""Pass 5: recharge automation.

Three recharge rules, first match wins:

  standard     "(Recharge 5-6)"   roll 1d6 at the start of the owner's turn
  limited_use  "(3/Day)"          uses restored on a rest or at dawn
  conditional  "recharges when the dragon takes fire damage."
"""

import logging
import re
from dataclasses import asdict, dataclass
from typing import Optional

from ..model import AbilityDescriptor
from ..scripts import BehaviorScript, js_escape, script_name
from ..synthesis import EffectIdPlan
from .models import PartialArtifact, PassContext

logger = logging.getLogger(__name__)

SYSTEM = "recharge-automation"

STANDARD_PATTERN = re.compile(r"\(Recharge (\d+)(?:-(\d+))?\)", re.IGNORECASE)
LIMITED_USE_PATTERN = re.compile(r"\((\d+)/(Day|Rest|Short Rest|Long Rest)\)", re.IGNORECASE)
CONDITIONAL_PATTERN = re.compile(r"recharges? (?:when|if) (.+?)(?:\.|,|$)", re.IGNORECASE)

RECHARGE_HOOK = {"event": "combatTurn", "priority": 100}

REST_PERIODS = {"short rest": "sr", "long rest": "lr", "rest": "lr", "day": "day"}

# Conditional trigger keyword -> (hook, JS check)
CONDITIONAL_HOOKS = (
    (re.compile(r"damage", re.IGNORECASE), "midi-qol.DamageWorkflowComplete",
     "hookArgs[0]?.hitTargets?.some(t => t.actor?.id === actor.id)"),
    (re.compile(r"\b0 hit points\b|\bdies\b|\bkilled\b|\bdrops? to\b", re.IGNORECASE), "updateActor",
     "hookArgs[0]?.system?.attributes?.hp?.value <= 0"),
    (re.compile(r"\brests?\b", re.IGNORECASE), "dnd5e.restCompleted",
     "hookArgs[0]?.id === actor.id"),
    (re.compile(r"\bturn\b|\bround\b", re.IGNORECASE), "combatTurn",
     "hookArgs[0]?.combatant?.actor?.id === actor.id"),
)
DEFAULT_CONDITIONAL_HOOK = ("updateCombat", "true")

CONSUME_CHARGE = 'await item.update({ "system.recharge.charged": false });'
CONSUME_USE = 'await item.update({ "system.uses.spent": (item.system.uses.spent ?? 0) + 1 });'


@dataclass
class RechargeRule:
    type: str                          # standard | limited_use | conditional
    min_roll: Optional[int] = None
    max_roll: Optional[int] = None
    max_uses: Optional[int] = None
    per: Optional[str] = None          # sr | lr | day
    condition: Optional[str] = None
    automatic: bool = False

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


def detect_recharge(text: str) -> Optional[RechargeRule]:
    m = STANDARD_PATTERN.search(text)
    if m:
        return RechargeRule(
            type="standard", min_roll=int(m.group(1)),
            max_roll=int(m.group(2) or 6), automatic=True,
        )

    m = LIMITED_USE_PATTERN.search(text)
    if m:
        return RechargeRule(
            type="limited_use", max_uses=int(m.group(1)),
            per=REST_PERIODS[m.group(2).lower()],
        )

    m = CONDITIONAL_PATTERN.search(text)
    if m:
        return RechargeRule(type="conditional", condition=m.group(1).strip())

    return None


def conditional_hook(condition: str) -> tuple[str, str]:
    for pattern, hook, check in CONDITIONAL_HOOKS:
        if pattern.search(condition):
            return hook, check
    return DEFAULT_CONDITIONAL_HOOK


def item_patches(rule: RechargeRule) -> dict:
    if rule.type == "standard":
        return {"system.recharge": {"value": rule.min_roll, "charged": True}}
    if rule.type == "limited_use":
        return {"system.uses": {
            "value": rule.max_uses,
            "max": rule.max_uses,
            "per": rule.per,
            "spent": 0,
            "recovery": [{"period": rule.per, "type": "recoverAll"}],
        }}
    return {}


def recharge_scripts(descriptor: AbilityDescriptor, rule: RechargeRule,
                     context: PassContext) -> list[BehaviorScript]:
    registry = context.registry
    name = js_escape(descriptor.name)

    if rule.type == "standard":
        rule_text = f"recharge {rule.min_roll}-{rule.max_roll}"
    elif rule.type == "limited_use":
        rule_text = f"{rule.max_uses}/{rule.per}"
    else:
        rule_text = "conditional"

    scripts = [registry.script(
        script_name(descriptor.name, "Usage"), "recharge_usage",
        {
            "name": name,
            "rule": rule_text,
            "consume": CONSUME_USE if rule.type == "limited_use" else CONSUME_CHARGE,
        },
        hook="postItemRoll", kind="recharge",
    )]

    if rule.type == "standard":
        scripts.append(registry.script(
            script_name(descriptor.name, "Recharge"), "recharge_roll",
            {"name": name, "min": rule.min_roll, "max": rule.max_roll},
            hook=RECHARGE_HOOK["event"], kind="recharge",
        ))
    elif rule.type == "conditional":
        hook, check = conditional_hook(rule.condition)
        scripts.append(registry.script(
            script_name(descriptor.name, "ConditionalRecharge"), "recharge_conditional",
            {"name": name, "trigger": js_escape(rule.condition), "hook": hook, "check": check},
            hook=hook, kind="recharge",
        ))

    return scripts


def recharge_pass(descriptor: AbilityDescriptor, plan: EffectIdPlan,
                  context: PassContext) -> PartialArtifact:
    partial = PartialArtifact(system=SYSTEM)
    rule = detect_recharge(descriptor.text)
    if rule is None:
        return partial

    partial.item_patches = item_patches(rule)
    partial.scripts = recharge_scripts(descriptor, rule, context)

    automancy = {
        "rechargeType": rule.type,
        "recharge": rule.to_dict(),
        "automatedRecharge": rule.automatic,
    }
    if rule.type == "standard":
        automancy["rechargeHook"] = dict(RECHARGE_HOOK)
    partial.flags = {
        "midi-qol": {"rechargeTracking": True},
        "automancy": automancy,
    }
    partial.details["rule"] = rule

    logger.debug("Recharge rule for '%s': %s", descriptor.name, rule.type)
    return partial
