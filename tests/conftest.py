"""
Shared pytest fixtures for all tests.
"""

import sys
from pathlib import Path

import pytest

# Add the repository root to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from automancy.config import AutomationConfig, get_default_config
from automancy.converter import AbilityConverter
from automancy.enhance import EnhancementOrchestrator, PassContext
from automancy.model import SemanticModelBuilder
from automancy.scripts import ScriptRegistry, default_registry
from automancy.synthesis import BaseSynthesizer, EffectIdPlan
from tests.fixtures.abilities import BEAR_HUG


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture
def config() -> AutomationConfig:
    """Packaged default configuration."""
    return get_default_config()


@pytest.fixture
def registry() -> ScriptRegistry:
    """Script registry over the packaged templates."""
    return default_registry()


@pytest.fixture
def context(config, registry) -> PassContext:
    """Context handed to every enhancement pass."""
    return PassContext(config=config, registry=registry)


# =============================================================================
# Pipeline Fixtures
# =============================================================================

@pytest.fixture
def builder() -> SemanticModelBuilder:
    return SemanticModelBuilder()


@pytest.fixture
def synthesizer(config, registry) -> BaseSynthesizer:
    return BaseSynthesizer(config=config, registry=registry)


@pytest.fixture
def orchestrator(config, registry) -> EnhancementOrchestrator:
    return EnhancementOrchestrator(config=config, registry=registry)


@pytest.fixture
def converter(config, registry) -> AbilityConverter:
    return AbilityConverter(config=config, registry=registry)


@pytest.fixture
def describe(builder):
    """Build a descriptor and its id plan from ability text."""
    def _describe(text, name=None):
        descriptor = builder.build(text, name)
        return descriptor, EffectIdPlan.for_descriptor(descriptor)
    return _describe


@pytest.fixture
def bear_hug(converter):
    """Full conversion of the Bear Hug ability."""
    return converter.convert(BEAR_HUG, "Bear Hug")
