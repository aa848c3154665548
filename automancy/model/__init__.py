"""Semantic model of an ability and the builder that produces it."""

from .builder import SemanticModelBuilder, assess_complexity, build_descriptor
from .conditions import HOMEBREW_CONDITIONS, STANDARD_CONDITIONS, detect_conditions
from .models import (
    ADVANCED, COMPLEX, MODERATE, SIMPLE,
    AbilityDescriptor, AbilityType, Activation, ActivationType, AttackInfo,
    Condition, ConditionKind, Damage, Duration, Effect, Range, Resources,
    Save, SaveEndsTiming, Target,
)
from .requirements import Requirement, detect_requirements

__all__ = [
    "SemanticModelBuilder",
    "assess_complexity",
    "build_descriptor",
    "detect_conditions",
    "detect_requirements",
    "STANDARD_CONDITIONS",
    "HOMEBREW_CONDITIONS",
    "AbilityDescriptor",
    "AbilityType",
    "Activation",
    "ActivationType",
    "AttackInfo",
    "Condition",
    "ConditionKind",
    "Damage",
    "Duration",
    "Effect",
    "Range",
    "Requirement",
    "Resources",
    "Save",
    "SaveEndsTiming",
    "Target",
    "SIMPLE",
    "MODERATE",
    "COMPLEX",
    "ADVANCED",
]
