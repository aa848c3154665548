"""Base synthesis: AbilityDescriptor -> AutomationArtifact.

The effect id plan is built first and passed to both the effect
generator and the activity builders, so every activity reference
resolves to an effect in the artifact.
"""

import logging
from typing import Optional

from ..config import AutomationConfig, get_default_config
from ..model import AbilityDescriptor, AbilityType, SemanticModelBuilder
from ..scripts import BehaviorScript, ScriptRegistry, default_registry, js_escape, script_name
from .effects import EffectGenerator
from .flags import FlagGenerator
from .ids import EffectIdPlan
from .item import build_item
from .models import AutomationArtifact, BaseResult

logger = logging.getLogger(__name__)


class BaseSynthesizer:
    """Runs the builder and base synthesis for one ability text."""

    def __init__(
        self,
        builder: Optional[SemanticModelBuilder] = None,
        config: Optional[AutomationConfig] = None,
        registry: Optional[ScriptRegistry] = None,
    ):
        self.config = config or get_default_config()
        self.builder = builder or SemanticModelBuilder(default_range_ft=self.config.default_range_ft)
        self.registry = registry or default_registry()
        self.effects = EffectGenerator(save_ends_rounds=self.config.save_ends_rounds)
        self.flags = FlagGenerator()

    def convert(self, text: str, name: Optional[str] = None) -> BaseResult:
        """Build the descriptor and base artifact. Never raises."""
        try:
            descriptor = self.builder.build(text, name)
        except Exception as e:
            logger.error("Could not build descriptor: %s", e)
            return BaseResult(success=False, error=f"Parsing failed: {e}")

        try:
            plan, artifact = self.synthesize(descriptor)
        except Exception as e:
            logger.error("Base synthesis failed for '%s': %s", descriptor.name, e)
            return BaseResult(
                success=False, descriptor=descriptor,
                error=f"Synthesis failed: {e}",
            )

        return BaseResult(success=True, artifact=artifact, descriptor=descriptor, plan=plan)

    def synthesize(self, descriptor: AbilityDescriptor) -> tuple[EffectIdPlan, AutomationArtifact]:
        plan = EffectIdPlan.for_descriptor(descriptor, length=self.config.id_length)

        effects = self.effects.generate(descriptor, plan)
        item = build_item(descriptor, plan)
        flags = self.flags.generate(descriptor)

        scripts = []
        if descriptor.complexity >= self.config.basic_script_min_complexity:
            scripts.append(self.basic_script(descriptor))

        logger.info(
            "Synthesized '%s': %s item, %d effects, %d activities",
            descriptor.name, item["type"], len(effects),
            len(item["system"]["activities"]),
        )
        return plan, AutomationArtifact(
            item=item,
            effects=effects,
            flags=flags,
            scripts=scripts,
            complexity=descriptor.complexity,
        )

    def basic_script(self, descriptor: AbilityDescriptor) -> BehaviorScript:
        name = js_escape(descriptor.name)
        if descriptor.type is AbilityType.SAVE_BASED and descriptor.effects:
            body, hook = self.registry.render("basic_save_effects", {}), "postSave"
        elif descriptor.status_conditions:
            body = self.registry.render(
                "basic_conditions",
                {"conditions": [c.name.title() for c in descriptor.status_conditions]},
            )
            hook = "postActiveEffects"
        elif descriptor.resources.consumes:
            body, hook = self.registry.render("basic_resource", {}), "preItemRoll"
        else:
            body, hook = self.registry.render("basic_log", {"name": name}), "postItemRoll"

        return self.registry.script(
            script_name(descriptor.name, "Macro"), "basic",
            {"name": name, "complexity": descriptor.complexity, "body": body},
            hook=hook, kind="basic",
        )
