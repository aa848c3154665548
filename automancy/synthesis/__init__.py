"""Base synthesis: item record, activities, effects and flags."""

from .engine import BaseSynthesizer
from .ids import ATTACK_ACTIVITY_ID, SAVE_ACTIVITY_ID, EffectIdPlan, generate_id
from .models import AutomationArtifact, BaseResult

__all__ = [
    "BaseSynthesizer",
    "EffectIdPlan",
    "generate_id",
    "ATTACK_ACTIVITY_ID",
    "SAVE_ACTIVITY_ID",
    "AutomationArtifact",
    "BaseResult",
]
