"""
Ability Converter - Public entry points.

  ability text -> descriptor -> base artifact -> enhancement passes -> result

``convert_ability`` never raises for bad input; failures come back as a
result with ``success`` False and an error message.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from . import __version__
from .config import AutomationConfig, get_default_config
from .enhance import DEFAULT_PASSES, EnhancementOrchestrator, EnhancementReport
from .extract import PatternMatcher, default_matcher
from .model import (
    HOMEBREW_CONDITIONS, STANDARD_CONDITIONS, AbilityDescriptor, AbilityType,
    SemanticModelBuilder,
)
from .scripts import ScriptRegistry, default_registry
from .synthesis import AutomationArtifact, BaseSynthesizer

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """Outcome of converting one ability."""
    success: bool
    name: str
    artifact: Optional[AutomationArtifact] = None
    descriptor: Optional[AbilityDescriptor] = None
    enhancement: EnhancementReport = field(
        default_factory=lambda: EnhancementReport(applied=False)
    )
    error: Optional[str] = None

    def to_dict(self) -> dict:
        """Export view with camel-cased keys."""
        data = {
            "success": self.success,
            "name": self.name,
            "error": self.error,
            "descriptor": self.descriptor.to_dict() if self.descriptor else None,
            "enhancement": self.enhancement.to_dict(),
        }
        artifact = self.artifact
        if artifact is None:
            data.update({
                "itemRecord": None,
                "effectList": [],
                "flagBundle": {},
                "behaviorScripts": [],
                "scriptIndex": [],
                "complexityTier": None,
                "qualityScore": None,
                "appliedSubsystems": [],
            })
            return data

        data.update({
            "itemRecord": artifact.item,
            "effectList": artifact.effects,
            "flagBundle": artifact.flags,
            "behaviorScripts": [s.source for s in artifact.scripts],
            "scriptIndex": [s.to_dict() for s in artifact.scripts],
            "complexityTier": artifact.complexity,
            "qualityScore": artifact.quality_score,
            "appliedSubsystems": artifact.applied_systems,
        })
        return data


class AbilityConverter:
    """Runs the whole conversion pipeline for one or many abilities."""

    def __init__(
        self,
        config: Optional[AutomationConfig] = None,
        registry: Optional[ScriptRegistry] = None,
        matcher: Optional[PatternMatcher] = None,
        orchestrator: Optional[EnhancementOrchestrator] = None,
    ):
        self.config = config or get_default_config()
        self.registry = registry or default_registry()
        self.synthesizer = BaseSynthesizer(
            builder=SemanticModelBuilder(matcher, default_range_ft=self.config.default_range_ft),
            config=self.config,
            registry=self.registry,
        )
        self.orchestrator = orchestrator or EnhancementOrchestrator(
            config=self.config, registry=self.registry,
        )

    def convert(self, text: str, name: Optional[str] = None) -> ConversionResult:
        base = self.synthesizer.convert(text, name)
        if not base.success:
            return ConversionResult(
                success=False,
                name=base.descriptor.name if base.descriptor else (name or ""),
                descriptor=base.descriptor,
                enhancement=EnhancementReport(applied=False, reason="Base conversion failed"),
                error=base.error,
            )

        artifact, report = self.orchestrator.enhance(base.descriptor, base.plan, base.artifact)
        return ConversionResult(
            success=True,
            name=base.descriptor.name,
            artifact=artifact,
            descriptor=base.descriptor,
            enhancement=report,
        )

    def convert_multiple(self, abilities: list[Union[str, dict]]) -> list[ConversionResult]:
        """Convert each ability independently; one failure does not stop the rest.

        Entries are either raw text or ``{"text": ..., "name": ...}``.
        """
        results = []
        for entry in abilities:
            if isinstance(entry, str):
                text, name = entry, None
            else:
                text, name = entry.get("text", ""), entry.get("name")
            results.append(self.convert(text, name))

        succeeded = sum(1 for r in results if r.success)
        logger.info("Converted %d/%d abilities", succeeded, len(results))
        return results


_default_converter: Optional[AbilityConverter] = None


def _converter() -> AbilityConverter:
    global _default_converter
    if _default_converter is None:
        _default_converter = AbilityConverter()
    return _default_converter


def convert_ability(text: str, name: Optional[str] = None) -> ConversionResult:
    return _converter().convert(text, name)


def convert_multiple(abilities: list[Union[str, dict]]) -> list[ConversionResult]:
    return _converter().convert_multiple(abilities)


def get_capabilities() -> dict:
    """What the converter can recognize and generate."""
    return {
        "version": __version__,
        "abilityTypes": [t.value for t in AbilityType],
        "patterns": default_matcher().pattern_names(),
        "conditions": {
            "standard": sorted(STANDARD_CONDITIONS),
            "homebrew": sorted(HOMEBREW_CONDITIONS),
        },
        "enhancementPasses": [name for name, _ in DEFAULT_PASSES],
        "scriptTemplates": default_registry().list_templates(),
        "complexityTiers": {"1": "simple", "2": "moderate", "3": "complex", "4": "advanced"},
    }
