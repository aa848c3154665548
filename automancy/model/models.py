"""Semantic model for a single ability.

The builder produces one ``AbilityDescriptor`` per input text. Everything
downstream (base synthesis and the enhancement passes) reads from it.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Optional

from .requirements import Requirement


# ---------------------------------------------------------------------------
# Closed variants
# ---------------------------------------------------------------------------

class AbilityType(Enum):
    """Ability classification."""
    WEAPON_ATTACK = "weapon_attack"
    SPELL_ATTACK = "spell_attack"
    SAVE_BASED = "save_based"
    HEALING = "healing"
    UTILITY = "utility"
    PASSIVE = "passive"
    REACTION = "reaction"


class ActivationType(Enum):
    """How the ability is triggered."""
    ACTION = "action"
    BONUS = "bonus"
    REACTION = "reaction"


class ConditionKind(Enum):
    """Where a condition entry came from."""
    STANDARD = "standard"
    HOMEBREW = "homebrew"
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"


class SaveEndsTiming(Enum):
    START_OF_TURN = "start_of_turn"
    END_OF_TURN = "end_of_turn"


# Complexity tiers
SIMPLE = 1
MODERATE = 2
COMPLEX = 3
ADVANCED = 4


# ---------------------------------------------------------------------------
# Descriptor parts
# ---------------------------------------------------------------------------

@dataclass
class AttackInfo:
    """Attack roll: type is one of mwak, rwak, msak, rsak."""
    type: str
    bonus: int


@dataclass
class Activation:
    type: ActivationType = ActivationType.ACTION
    cost: int = 1


@dataclass
class Target:
    """Who or what the ability affects."""
    value: int = 1
    type: str = "creature"     # creature | self | space
    units: str = ""            # any | ft
    width: Optional[int] = None
    shape: Optional[str] = None  # radius | cone | line


@dataclass
class Damage:
    formula: str
    type: str
    average: Optional[int] = None
    conditional: bool = False


@dataclass
class Save:
    ability: str
    dc: int
    scaling: str = "flat"


@dataclass
class Effect:
    """A mechanical effect read from the text (resistance, immunity, ...)."""
    type: str
    damage_types: list[str] = field(default_factory=list)
    amount: Optional[int] = None
    immunity: bool = False


@dataclass
class Condition:
    """A status condition or roll modifier applied by the ability."""
    kind: ConditionKind
    name: str
    trigger: str = "on_failed_save"
    save_ends: bool = False
    save_ends_timing: Optional[SaveEndsTiming] = None
    value: Optional[str] = None

    @property
    def is_status(self) -> bool:
        return self.kind in (ConditionKind.STANDARD, ConditionKind.HOMEBREW)


@dataclass
class Resources:
    consumes: bool = False
    uses: Optional[int] = None
    per: Optional[str] = None          # day | sr | lr
    recharge_min: Optional[int] = None
    recharge_max: Optional[int] = None

    @property
    def recharge(self) -> Optional[dict]:
        if self.recharge_min is None:
            return None
        return {"min": self.recharge_min, "max": self.recharge_max}

    @property
    def recharge_text(self) -> Optional[str]:
        if self.recharge_min is None:
            return None
        return f"{self.recharge_min}-{self.recharge_max}"


@dataclass
class Duration:
    value: int = 0
    units: str = "inst"   # inst | round | minute | hour | day
    concentration: bool = False


@dataclass
class Range:
    value: Optional[int] = 5
    long: Optional[int] = None
    units: str = "ft"     # ft | touch | self


# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------

@dataclass
class AbilityDescriptor:
    """Structured semantic model of one ability."""
    name: str
    text: str
    type: AbilityType
    activation: Activation = field(default_factory=Activation)
    target: Target = field(default_factory=Target)
    attack: Optional[AttackInfo] = None
    damage: list[Damage] = field(default_factory=list)
    saves: list[Save] = field(default_factory=list)
    effects: list[Effect] = field(default_factory=list)
    conditions: list[Condition] = field(default_factory=list)
    resources: Resources = field(default_factory=Resources)
    duration: Duration = field(default_factory=Duration)
    range: Range = field(default_factory=Range)
    complexity: int = SIMPLE
    requirements: list[Requirement] = field(default_factory=list)

    def escalate(self, tier: int) -> int:
        """Raise complexity to at least ``tier``. Never lowers it."""
        self.complexity = max(self.complexity, min(tier, ADVANCED))
        return self.complexity

    @property
    def is_reaction(self) -> bool:
        return self.activation.type is ActivationType.REACTION

    @property
    def status_conditions(self) -> list[Condition]:
        return [c for c in self.conditions if c.is_status]

    def to_dict(self) -> dict:
        """Plain-JSON view with enum values unwrapped."""
        return _plain(asdict(self))


def _plain(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value
