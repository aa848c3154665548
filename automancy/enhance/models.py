"""Data carried between the enhancement passes and the orchestrator."""

from dataclasses import dataclass, field
from typing import Optional

from ..config import AutomationConfig
from ..model import Requirement
from ..scripts import BehaviorScript, ScriptRegistry


@dataclass
class PassContext:
    """Read-only collaborators every pass may use."""
    config: AutomationConfig
    registry: ScriptRegistry


@dataclass
class LinkedStep:
    """One step of a linked-effect chain."""
    step: int
    action: str                    # apply_condition | ongoing_damage | validate_requirement | force_save
    timing: str                    # immediate | start_of_turn | pre_attack | post_hit | post_save_failure
    condition: Optional[str] = None
    linked_to: Optional[str] = None
    end_condition: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"step": self.step, "action": self.action, "timing": self.timing}
        if self.condition:
            data["condition"] = self.condition
        if self.linked_to:
            data["linkedTo"] = self.linked_to
        if self.end_condition:
            data["endCondition"] = self.end_condition
        return data


@dataclass
class LinkedEffect:
    """A fixed sequence of effect applications triggered by one event."""
    trigger: str                   # save_failure | successful_attack
    sequence: list[LinkedStep] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"trigger": self.trigger, "sequence": [s.to_dict() for s in self.sequence]}


@dataclass
class PartialArtifact:
    """Output of one pass. The orchestrator merges these into the base artifact.

    ``condition_effects`` are only merged when the base artifact carries no
    status effects; ``effects`` are always appended.
    """
    system: str
    effects: list[dict] = field(default_factory=list)
    condition_effects: list[dict] = field(default_factory=list)
    flags: dict = field(default_factory=dict)
    scripts: list[BehaviorScript] = field(default_factory=list)
    item_patches: dict = field(default_factory=dict)
    requirements: list[Requirement] = field(default_factory=list)
    linked_effects: list[LinkedEffect] = field(default_factory=list)
    complexity_floor: int = 0
    details: dict = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (
            self.effects or self.condition_effects or self.flags or self.scripts
            or self.item_patches or self.requirements or self.linked_effects
        )


@dataclass
class EnhancementReport:
    """What the orchestrator did to the base artifact."""
    applied: bool
    reason: Optional[str] = None
    complexity: Optional[int] = None
    quality_score: Optional[int] = None
    coverage: Optional[float] = None
    systems: list[str] = field(default_factory=list)
    script_count: int = 0
    additional_effects: int = 0
    timings: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        if not self.applied:
            return {"applied": False, "reason": self.reason}
        return {
            "applied": True,
            "complexity": self.complexity,
            "qualityScore": self.quality_score,
            "coverage": self.coverage,
            "systems": self.systems,
            "scriptCount": self.script_count,
            "additionalEffects": self.additional_effects,
            "timings": self.timings,
        }
