"""Merging pass output into the base artifact.

Flag bundles use a different rule from configuration merging: lists are
replaced rather than concatenated, and empty mappings never overwrite
anything.
"""

import copy
import logging

from ..synthesis import AutomationArtifact
from .models import PartialArtifact

logger = logging.getLogger(__name__)


def merge_flags(*sources: dict) -> dict:
    """Merge flag bundles left to right into a new dict.

    - Mappings are merged recursively
    - Empty mappings are skipped
    - Lists and scalars take the later source's value
    """
    result: dict = {}

    for source in sources:
        if not source:
            continue
        for key, value in source.items():
            if isinstance(value, dict):
                if not value:
                    continue
                existing = result.get(key)
                if isinstance(existing, dict):
                    result[key] = merge_flags(existing, value)
                else:
                    result[key] = merge_flags(value)
            elif value is not None:
                result[key] = copy.deepcopy(value)

    return result


def apply_item_patches(item: dict, patches: dict) -> None:
    """Apply ``{"system.recharge": {...}}`` style updates in place."""
    for path, value in patches.items():
        node = item
        parts = path.split(".")
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = copy.deepcopy(value)


def has_status_effects(effects: list[dict]) -> bool:
    return any(e.get("statuses") for e in effects)


def merge_partials(base: AutomationArtifact, partials: list[PartialArtifact]) -> AutomationArtifact:
    """Return a new artifact with every partial folded in, in order.

    ``base`` is not modified.
    """
    item = copy.deepcopy(base.item)
    effects = copy.deepcopy(base.effects)
    scripts = list(base.scripts)
    guard_conditions = has_status_effects(effects)

    for partial in partials:
        if partial.item_patches:
            apply_item_patches(item, partial.item_patches)
        if partial.condition_effects:
            if guard_conditions:
                logger.debug(
                    "Skipping %d %s effects: base already carries status effects",
                    len(partial.condition_effects), partial.system,
                )
            else:
                effects.extend(copy.deepcopy(partial.condition_effects))
        effects.extend(copy.deepcopy(partial.effects))
        scripts.extend(partial.scripts)

    flags = merge_flags(base.flags, *(p.flags for p in partials))

    return AutomationArtifact(
        item=item,
        effects=effects,
        flags=flags,
        scripts=scripts,
        complexity=base.complexity,
        quality_score=base.quality_score,
        applied_systems=list(base.applied_systems),
    )
