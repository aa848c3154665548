"""Final complexity, automation coverage and the quality score."""

from dataclasses import dataclass

from ..config import QualityWeights
from ..model import ADVANCED, AbilityDescriptor, ConditionKind
from ..synthesis import AutomationArtifact
from .models import PartialArtifact


@dataclass
class Score:
    complexity: int
    coverage: float
    quality: int


def final_complexity(descriptor: AbilityDescriptor, partials: list[PartialArtifact]) -> int:
    """Highest of the base tier and every pass floor; reactions are always advanced."""
    tier = max([descriptor.complexity] + [p.complexity_floor for p in partials])
    if descriptor.is_reaction:
        tier = ADVANCED
    return min(tier, ADVANCED)


def points(value: float, thresholds: list[tuple[float, int]]) -> int:
    """Points for the highest threshold ``value`` reaches."""
    for minimum, awarded in thresholds:
        if value >= minimum:
            return awarded
    return 0


def _activity_formulas(artifact: AutomationArtifact) -> set[str]:
    formulas = set()
    for activity in artifact.item.get("system", {}).get("activities", {}).values():
        for part in activity.get("damage", {}).get("parts", []):
            if part.get("custom", {}).get("enabled"):
                formulas.add(part["custom"]["formula"])
            elif part.get("number"):
                bonus = f"+{part['bonus']}" if part.get("bonus") else ""
                formulas.add(f"{part['number']}d{part['denomination']}{bonus}")
    return formulas


def _ongoing_formulas(artifact: AutomationArtifact) -> set[str]:
    return {
        e["flags"]["automancy"]["ongoingEffect"].get("formula")
        for e in artifact.effects
        if "ongoingEffect" in e.get("flags", {}).get("automancy", {})
    }


def automation_coverage(descriptor: AbilityDescriptor, artifact: AutomationArtifact,
                        partials: list[PartialArtifact]) -> float:
    """Share of the ability's features the artifact actually automates.

    Features are damage entries, saves, mechanical effects, conditions,
    requirements and linked-effect chains. 1.0 when there are none.
    """
    total = 0
    automated = 0

    formulas = _activity_formulas(artifact) | _ongoing_formulas(artifact)
    for damage in descriptor.damage:
        total += 1
        automated += damage.formula in formulas

    activities = artifact.item.get("system", {}).get("activities", {})
    has_save_activity = any(a.get("type") == "save" for a in activities.values())
    for _ in descriptor.saves:
        total += 1
        automated += has_save_activity

    effect_types = {
        e.get("flags", {}).get("automancy", {}).get("effectType") for e in artifact.effects
    }
    for effect in descriptor.effects:
        total += 1
        automated += effect.type in effect_types

    statuses = {s for e in artifact.effects for s in e.get("statuses", [])}
    midi = artifact.flags.get("midi-qol", {})
    for condition in descriptor.conditions:
        total += 1
        if condition.is_status:
            automated += condition.name in statuses
        else:
            prefix = "advantage." if condition.kind is ConditionKind.ADVANTAGE else "disadvantage."
            automated += any(key.startswith(prefix) for key in midi)

    requirement_scripts = sum(1 for s in artifact.scripts if s.kind == "requirement")
    requirements = [r for p in partials for r in p.requirements] or descriptor.requirements
    total += len(requirements)
    automated += min(requirement_scripts, len(requirements))

    chains = [c for p in partials for c in p.linked_effects]
    workflows = any(s.kind == "workflow" for s in artifact.scripts)
    total += len(chains)
    automated += len(chains) if workflows else 0

    return automated / total if total else 1.0


def quality_score(artifact: AutomationArtifact, coverage: float, weights: QualityWeights) -> int:
    namespaces = sum(1 for value in artifact.flags.values() if value)
    score = (
        points(namespaces, weights.flag_namespaces)
        + points(len(artifact.scripts), weights.scripts)
        + points(coverage, weights.coverage)
        + weights.error_handling_bonus
        + weights.performance_bonus
    )
    return max(0, min(score, weights.max_score))


def score(descriptor: AbilityDescriptor, artifact: AutomationArtifact,
          partials: list[PartialArtifact], weights: QualityWeights) -> Score:
    coverage = automation_coverage(descriptor, artifact, partials)
    return Score(
        complexity=final_complexity(descriptor, partials),
        coverage=round(coverage, 3),
        quality=quality_score(artifact, coverage, weights),
    )
