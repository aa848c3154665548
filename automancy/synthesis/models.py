"""Artifact models shared by base synthesis and the enhancement passes."""

from dataclasses import dataclass, field
from typing import Optional

from ..model import AbilityDescriptor
from ..scripts import BehaviorScript
from .ids import EffectIdPlan


@dataclass
class AutomationArtifact:
    """Everything generated for one ability."""
    item: dict
    effects: list[dict] = field(default_factory=list)
    flags: dict = field(default_factory=dict)
    scripts: list[BehaviorScript] = field(default_factory=list)
    complexity: int = 1
    quality_score: int = 0
    applied_systems: list[str] = field(default_factory=list)

    def effect_ids(self) -> set[str]:
        return {e["_id"] for e in self.effects}

    def to_dict(self) -> dict:
        return {
            "item": self.item,
            "effects": self.effects,
            "flags": self.flags,
            "scripts": [s.source for s in self.scripts],
            "complexity": self.complexity,
            "quality_score": self.quality_score,
            "applied_systems": self.applied_systems,
        }


@dataclass
class BaseResult:
    """Output of base synthesis. On failure only ``error`` is set."""
    success: bool
    artifact: Optional[AutomationArtifact] = None
    descriptor: Optional[AbilityDescriptor] = None
    plan: Optional[EffectIdPlan] = None
    error: Optional[str] = None
