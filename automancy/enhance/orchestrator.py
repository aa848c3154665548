"""
Enhancement Orchestrator - Runs the analyzer passes over a base artifact.

Pipeline:
  requirements -> linked effects -> rich flags -> templating -> recharge
  -> reactions -> ongoing -> movement -> condition engine -> merge -> score

Every pass reads the same descriptor and id plan and returns a
PartialArtifact; nothing is written to the base artifact. If any pass
raises, the base artifact is returned untouched with a failure report.
"""

import logging
import time
from typing import Callable, Optional

from ..config import AutomationConfig, get_default_config
from ..model import AbilityDescriptor
from ..scripts import ScriptRegistry, default_registry
from ..synthesis import AutomationArtifact, EffectIdPlan
from ..synthesis.flags import FLAG_VERSION
from .conditions import condition_engine_pass
from .linked import linked_effects_pass
from .merge import merge_flags, merge_partials
from .models import EnhancementReport, PartialArtifact, PassContext
from .movement import movement_pass
from .ongoing import ongoing_pass
from .reactions import reactions_pass
from .recharge import recharge_pass
from .requirements import requirements_pass
from .rich_flags import rich_flags_pass
from .scoring import score
from .templating import templating_pass

logger = logging.getLogger(__name__)

Pass = Callable[[AbilityDescriptor, EffectIdPlan, PassContext], PartialArtifact]

DEFAULT_PASSES: list[tuple[str, Pass]] = [
    ("requirements", requirements_pass),
    ("linked_effects", linked_effects_pass),
    ("rich_flags", rich_flags_pass),
    ("templating", templating_pass),
    ("recharge", recharge_pass),
    ("reactions", reactions_pass),
    ("ongoing", ongoing_pass),
    ("movement", movement_pass),
    ("condition_engine", condition_engine_pass),
]


class EnhancementOrchestrator:
    """
    Runs every enhancement pass and folds the results into one artifact.

    Passes can be replaced (tests swap in failing ones) and an observer
    can be notified as each pass starts.
    """

    def __init__(
        self,
        config: Optional[AutomationConfig] = None,
        registry: Optional[ScriptRegistry] = None,
        passes: Optional[list[tuple[str, Pass]]] = None,
        on_pass: Optional[Callable[[str], None]] = None,
    ):
        self.config = config or get_default_config()
        self.context = PassContext(config=self.config, registry=registry or default_registry())
        self.passes = list(passes) if passes is not None else list(DEFAULT_PASSES)
        self.on_pass = on_pass

    def _notify(self, name: str):
        if self.on_pass:
            self.on_pass(name)

    def enhance(
        self,
        descriptor: AbilityDescriptor,
        plan: EffectIdPlan,
        base: AutomationArtifact,
    ) -> tuple[AutomationArtifact, EnhancementReport]:
        """Return the enhanced artifact and a report.

        Never raises: on failure the base artifact comes back unchanged and
        the report carries the reason.
        """
        try:
            return self._run(descriptor, plan, base)
        except Exception as e:
            logger.warning("Enhancement failed for '%s', keeping base artifact: %s", descriptor.name, e)
            return base, EnhancementReport(applied=False, reason=f"Enhancement failed: {e}")

    def run_passes(self, descriptor: AbilityDescriptor,
                   plan: EffectIdPlan) -> tuple[list[PartialArtifact], dict]:
        partials = []
        timings = {}
        for name, analyzer in self.passes:
            self._notify(name)
            t0 = time.monotonic()
            partials.append(analyzer(descriptor, plan, self.context))
            timings[name] = int((time.monotonic() - t0) * 1000)
        return partials, timings

    def _run(self, descriptor: AbilityDescriptor, plan: EffectIdPlan,
             base: AutomationArtifact) -> tuple[AutomationArtifact, EnhancementReport]:
        partials, timings = self.run_passes(descriptor, plan)
        merged = merge_partials(base, partials)

        systems = [p.system for p in partials if not p.is_empty]
        result = score(descriptor, merged, partials, self.config.quality)

        merged.complexity = max(base.complexity, result.complexity)
        merged.quality_score = result.quality
        merged.applied_systems = systems
        merged.flags = merge_flags(merged.flags, {
            "chris-premades": {"complexity": merged.complexity},
            "automancy": {
                "complexity": merged.complexity,
                "enhanced": True,
                "version": FLAG_VERSION,
                "systemsIntegrated": systems,
                "qualityScore": merged.quality_score,
            },
        })

        additional = len(merged.effects) - len(base.effects)
        logger.info(
            "Enhanced '%s': tier %d -> %d, quality %d/%d, %d systems, %d extra effects",
            descriptor.name, base.complexity, merged.complexity, merged.quality_score,
            self.config.quality.max_score,
            len(systems), additional,
        )

        descriptor.escalate(merged.complexity)
        return merged, EnhancementReport(
            applied=True,
            complexity=merged.complexity,
            quality_score=merged.quality_score,
            coverage=result.coverage,
            systems=systems,
            script_count=len(merged.scripts),
            additional_effects=additional,
            timings=timings,
        )
