"""Semantic model builder: extracted facts -> AbilityDescriptor.

Each field is resolved in a fixed order with an explicit fallback, so the
same text always produces the same descriptor.
"""

import logging
import re
from typing import Optional

from ..extract import ExtractionResult, PatternMatcher, default_matcher
from .conditions import detect_conditions
from .models import (
    ADVANCED, SIMPLE,
    AbilityDescriptor, AbilityType, Activation, ActivationType, AttackInfo,
    Condition, ConditionKind, Damage, Duration, Effect, Range, Resources,
    Save, Target,
)
from .requirements import detect_requirements

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Unnamed Ability"

# Bonus actions mentioned later than this are usually prose, not activation
BONUS_ACTION_WINDOW = 50

ACTIVATION_PATTERNS = ("activation_action", "activation_bonus", "activation_reaction")
AREA_PATTERNS = ("area_radius", "area_cone", "area_line")

COUNTED_TARGET_PATTERN = re.compile(
    r"(?:targets?\s+)?(\d+)\s+(?:creature|target|enemy|ally)", re.IGNORECASE
)
YOURSELF_PATTERN = re.compile(r"\byourself\b", re.IGNORECASE)


class SemanticModelBuilder:
    """Builds an AbilityDescriptor from raw ability text."""

    def __init__(self, matcher: Optional[PatternMatcher] = None, default_range_ft: int = 5):
        self.matcher = matcher or default_matcher()
        self.default_range_ft = default_range_ft

    def build(self, text: str, name: Optional[str] = None) -> AbilityDescriptor:
        """Extract facts from ``text`` and resolve every descriptor field.

        Raises:
            ValueError: If ``text`` is empty or whitespace.
        """
        if not text or not text.strip():
            raise ValueError("Ability text is empty")

        facts = self.matcher.extract(text)

        descriptor = AbilityDescriptor(
            name=name or self.resolve_name(text),
            text=text,
            type=self.classify(facts),
            activation=self.resolve_activation(facts),
            target=self.resolve_target(text, facts),
            attack=self.resolve_attack(facts),
            damage=self.resolve_damage(facts),
            saves=[
                Save(ability=f.get("ability"), dc=f.get("dc"))
                for f in facts.all("save_dc")
            ],
            effects=self.resolve_effects(facts),
            conditions=self.resolve_conditions(text, facts),
            resources=self.resolve_resources(facts),
            duration=self.resolve_duration(facts),
            range=self.resolve_range(facts),
            requirements=detect_requirements(text),
        )
        descriptor.complexity = assess_complexity(descriptor)

        logger.info(
            "Built descriptor '%s': %s, %d damage, %d saves, %d conditions, tier %d",
            descriptor.name, descriptor.type.value, len(descriptor.damage),
            len(descriptor.saves), len(descriptor.conditions), descriptor.complexity,
        )
        return descriptor

    # ------------------------------------------------------------------
    # Field resolution
    # ------------------------------------------------------------------

    @staticmethod
    def resolve_name(text: str) -> str:
        text = text.strip()

        m = re.match(r"^([^:\n]+):", text)
        if m:
            return m.group(1).strip()

        m = re.match(r"^([^.\n]+)\.", text)
        if m and len(m.group(1)) < 50:
            return m.group(1).strip()

        first_line = text.split("\n", 1)[0].strip()
        if len(first_line.split()) <= 3 and len(first_line) < 30:
            return first_line

        return DEFAULT_NAME

    @staticmethod
    def classify(facts: ExtractionResult) -> AbilityType:
        if facts.has("weapon_attack"):
            return AbilityType.WEAPON_ATTACK
        if facts.has("spell_attack"):
            return AbilityType.SPELL_ATTACK
        if facts.has("save_dc"):
            return AbilityType.SAVE_BASED

        damage = facts.all("damage_with_average") + facts.all("damage_simple")
        if any(f.get("type") == "healing" for f in damage):
            return AbilityType.HEALING

        if facts.has("activation_reaction"):
            return AbilityType.REACTION
        if not any(facts.has(name) for name in ACTIVATION_PATTERNS):
            return AbilityType.PASSIVE
        return AbilityType.UTILITY

    @staticmethod
    def resolve_activation(facts: ExtractionResult) -> Activation:
        if facts.has("activation_reaction"):
            return Activation(ActivationType.REACTION)
        bonus = facts.first("activation_bonus")
        if bonus and bonus.index < BONUS_ACTION_WINDOW:
            return Activation(ActivationType.BONUS)
        return Activation(ActivationType.ACTION)

    @staticmethod
    def resolve_target(text: str, facts: ExtractionResult) -> Target:
        m = COUNTED_TARGET_PATTERN.search(text)
        if m:
            return Target(value=int(m.group(1)), type="creature", units="any")

        if facts.has("range_self") or YOURSELF_PATTERN.search(text):
            return Target(value=1, type="self")

        for name in AREA_PATTERNS:
            area = facts.first(name)
            if area:
                size = area.get("size")
                return Target(
                    value=size, type="space", units="ft",
                    width=size, shape=area.get("shape"),
                )

        return Target()

    @staticmethod
    def resolve_attack(facts: ExtractionResult) -> Optional[AttackInfo]:
        fact = facts.first("weapon_attack") or facts.first("spell_attack")
        if not fact:
            return None
        return AttackInfo(type=fact.get("type"), bonus=fact.get("bonus"))

    @staticmethod
    def resolve_damage(facts: ExtractionResult) -> list[Damage]:
        damage = []
        seen = set()
        for fact in facts.all("damage_with_average"):
            damage.append(Damage(
                formula=fact.get("formula"),
                type=fact.get("type"),
                average=fact.get("average"),
            ))
            seen.add(fact.get("formula"))
        for fact in facts.all("damage_simple"):
            if fact.get("formula") in seen:
                continue
            damage.append(Damage(formula=fact.get("formula"), type=fact.get("type")))
            seen.add(fact.get("formula"))
        return damage

    @staticmethod
    def resolve_effects(facts: ExtractionResult) -> list[Effect]:
        effects = []
        resistance = facts.first("damage_resistance")
        if resistance:
            effects.append(Effect(
                type="damage_resistance",
                damage_types=resistance.get("damage_types", []),
            ))
        immunity = facts.first("damage_immunity")
        if immunity:
            effects.append(Effect(
                type="damage_resistance",
                damage_types=immunity.get("damage_types", []),
                amount=0,
                immunity=True,
            ))
        return effects

    @staticmethod
    def resolve_conditions(text: str, facts: ExtractionResult) -> list[Condition]:
        conditions = detect_conditions(text)
        for name, kind in (
            ("advantage", ConditionKind.ADVANTAGE),
            ("disadvantage", ConditionKind.DISADVANTAGE),
        ):
            for fact in facts.all(name):
                conditions.append(Condition(
                    kind=kind,
                    name=name.capitalize(),
                    trigger="on_use",
                    value=fact.get("target"),
                ))
        return conditions

    @staticmethod
    def resolve_resources(facts: ExtractionResult) -> Resources:
        per_day = facts.first("uses_per_day")
        if per_day:
            return Resources(consumes=True, uses=per_day.get("uses"), per="day")
        per_rest = facts.first("uses_per_rest")
        if per_rest:
            return Resources(consumes=True, uses=per_rest.get("uses"), per=per_rest.get("per"))
        recharge = facts.first("recharge")
        if recharge:
            return Resources(
                consumes=True,
                recharge_min=recharge.get("min"),
                recharge_max=recharge.get("max"),
            )
        return Resources()

    @staticmethod
    def resolve_duration(facts: ExtractionResult) -> Duration:
        if facts.has("duration_instant"):
            return Duration()
        conc = facts.first("duration_concentration")
        if conc:
            return Duration(
                value=conc.get("value"),
                units=conc.get("unit"),
                concentration=conc.get("concentration", False),
            )
        rounds = facts.first("duration_rounds")
        if rounds:
            return Duration(value=rounds.get("value"), units="round")
        return Duration()

    def resolve_range(self, facts: ExtractionResult) -> Range:
        if facts.has("range_touch"):
            return Range(value=None, units="touch")
        if facts.has("range_self"):
            return Range(value=None, units="self")
        distance = facts.first("range_distance")
        if distance:
            return Range(value=distance.get("value"), long=distance.get("long"))
        return Range(value=self.default_range_ft)


def assess_complexity(descriptor: AbilityDescriptor) -> int:
    """Baseline complexity tier, 1 to 4."""
    score = SIMPLE
    if descriptor.conditions:
        score += 1
    if len(descriptor.damage) > 1:
        score += 1
    if len(descriptor.effects) > 1:
        score += 1
    if descriptor.saves and descriptor.effects:
        score += 1
    if descriptor.resources.consumes:
        score += 1
    if descriptor.is_reaction:
        score = ADVANCED
    return min(score, ADVANCED)


def build_descriptor(text: str, name: Optional[str] = None) -> AbilityDescriptor:
    """Convenience wrapper over the default builder."""
    return SemanticModelBuilder().build(text, name)
