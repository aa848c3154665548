"""Effect identifier generation.

Identifiers are generated once per conversion in an ``EffectIdPlan`` and
handed to every stage that creates or references effects. Nothing else
should call ``generate_id`` for a condition effect.
"""

import secrets
import string
from dataclasses import dataclass, field

from ..model import AbilityDescriptor

ID_ALPHABET = string.ascii_letters + string.digits
DEFAULT_ID_LENGTH = 16

ATTACK_ACTIVITY_ID = "dnd5eactivity000"
SAVE_ACTIVITY_ID = "dnd5eactivity100"


def generate_id(length: int = DEFAULT_ID_LENGTH) -> str:
    """Random alphanumeric identifier."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))


@dataclass
class EffectIdPlan:
    """Pre-generated ids for the status-condition effects of one ability.

    ``by_condition`` maps condition name -> effect id, in the order the
    conditions appear on the descriptor.
    """
    by_condition: dict[str, str] = field(default_factory=dict)
    length: int = DEFAULT_ID_LENGTH

    @classmethod
    def for_descriptor(cls, descriptor: AbilityDescriptor,
                       length: int = DEFAULT_ID_LENGTH) -> "EffectIdPlan":
        plan = cls(length=length)
        for condition in descriptor.status_conditions:
            if condition.name not in plan.by_condition:
                plan.by_condition[condition.name] = generate_id(length)
        return plan

    @property
    def ids(self) -> list[str]:
        return list(self.by_condition.values())

    def id_for(self, condition_name: str) -> str | None:
        return self.by_condition.get(condition_name)

    def new_id(self) -> str:
        """Fresh id for an effect no activity references (ongoing, passive)."""
        return generate_id(self.length)
