"""Enhancement passes layered over the base artifact."""

from .merge import apply_item_patches, merge_flags, merge_partials
from .models import EnhancementReport, LinkedEffect, LinkedStep, PartialArtifact, PassContext
from .orchestrator import DEFAULT_PASSES, EnhancementOrchestrator
from .scoring import automation_coverage, final_complexity, quality_score

__all__ = [
    "EnhancementOrchestrator",
    "DEFAULT_PASSES",
    "EnhancementReport",
    "LinkedEffect",
    "LinkedStep",
    "PartialArtifact",
    "PassContext",
    "apply_item_patches",
    "merge_flags",
    "merge_partials",
    "automation_coverage",
    "final_complexity",
    "quality_score",
]
