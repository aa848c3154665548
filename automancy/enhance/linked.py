"""Pass 2: linked-effect chains.

Two fixed chains are recognized:

  grapple:   grappled -> restrained (while grappled) -> ongoing damage at
             the start of each turn, ending with the grapple
  knockdown: requirement check -> save after the hit -> prone on a failure
"""

import re

from ..model import COMPLEX, AbilityDescriptor
from ..synthesis import EffectIdPlan
from .models import LinkedEffect, LinkedStep, PartialArtifact, PassContext

SYSTEM = "linked-effects"

GRAPPLED_PATTERN = re.compile(r"\bgrappled\b", re.IGNORECASE)
RESTRAINED_PATTERN = re.compile(r"\brestrained\b", re.IGNORECASE)
START_DAMAGE_PATTERN = re.compile(r"damage at the start", re.IGNORECASE)
KNOCKDOWN_PATTERN = re.compile(
    r"(?:hits? them with.*then|then hits? them with).*saving throw", re.IGNORECASE | re.DOTALL
)


def grapple_chain() -> LinkedEffect:
    return LinkedEffect(trigger="save_failure", sequence=[
        LinkedStep(1, "apply_condition", "immediate", condition="grappled"),
        LinkedStep(2, "apply_condition", "immediate", condition="restrained", linked_to="grappled"),
        LinkedStep(3, "ongoing_damage", "start_of_turn", linked_to="grappled",
                   end_condition="grapple_ends"),
    ])


def knockdown_chain() -> LinkedEffect:
    return LinkedEffect(trigger="successful_attack", sequence=[
        LinkedStep(1, "validate_requirement", "pre_attack", condition="movement_distance"),
        LinkedStep(2, "force_save", "post_hit", linked_to="movement_validation"),
        LinkedStep(3, "apply_condition", "post_save_failure", condition="prone"),
    ])


def detect_linked_effects(text: str) -> list[LinkedEffect]:
    chains = []
    if (GRAPPLED_PATTERN.search(text) and RESTRAINED_PATTERN.search(text)
            and START_DAMAGE_PATTERN.search(text)):
        chains.append(grapple_chain())
    if KNOCKDOWN_PATTERN.search(text):
        chains.append(knockdown_chain())
    return chains


def linked_effects_pass(descriptor: AbilityDescriptor, plan: EffectIdPlan,
                        context: PassContext) -> PartialArtifact:
    partial = PartialArtifact(system=SYSTEM)
    chains = detect_linked_effects(descriptor.text)
    if not chains:
        return partial

    partial.linked_effects = chains
    partial.flags = {"automancy": {"linkedEffects": [c.to_dict() for c in chains]}}
    partial.complexity_floor = COMPLEX
    return partial
