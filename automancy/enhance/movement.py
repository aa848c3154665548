"""Pass 8: abilities that combine movement and an attack in one activation."""

import logging
import re
from dataclasses import dataclass, field

from ..model import COMPLEX, AbilityDescriptor
from ..scripts import BehaviorScript, ScriptRegistry, js_escape, script_name
from ..synthesis import EffectIdPlan
from .models import PartialArtifact, PassContext

logger = logging.getLogger(__name__)

SYSTEM = "movement-attack"


def _steps(*patterns):
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


# Step chains: each step is searched from the end of the previous match.
MOVE_ATTACK_CONDITIONAL_STEPS = _steps(
    r"moves?|leaps?|charges?|rushes?",
    r"(?:at least|up to) (\d+) (?:feet|ft)",
    r"toward|at",
    r"target|creature",
    r"then|\bif\b[^.]{0,120}?hits?",
    r"attack|hits?",
    r"must|makes?",
    r"saving throw|save|knocked|pushed",
)
ATTACK_MOVE_STEPS = _steps(
    r"attack|hits?",
    r"then|can",
    r"moves?",
    r"up to|half",
    r"speed|(\d+) (?:feet|ft)",
    r"without",
    r"opportunity",
)
MOVE_DISTANCE_PATTERN = re.compile(
    r"move up to (?:half (?:its|their) speed|(\d+) (?:feet|ft))", re.IGNORECASE
)
FLYBY_STEPS = _steps(
    r"flies?|moves?",
    r"attacks?",
    r"(?:without|doesn't) provoke",
    r"opportunity",
)
CHARGE_STEPS = _steps(
    r"charges?",
    r"(\d+)",
    r"feet|ft",
    r"straight line|toward",
    r"attack|ram",
    r"(?:additional|extra|bonus) (\d+(?:d\d+)?)",
)

HALF_SPEED_FT = 20
FLYBY_DISTANCE_FT = 30

# pattern type -> [(action, description), ...]
ACTIVATION_STEPS = {
    "move_attack_conditional": [
        ("template_targeting", "Select movement destination"),
        ("automatic_movement", "Token moves to location"),
        ("distance_validation", "Check movement requirements"),
        ("target_selection", "Select attack target if requirements met"),
        ("attack_workflow", "Execute attack with conditional effects"),
    ],
    "attack_move": [
        ("target_selection", "Select attack target"),
        ("attack_workflow", "Execute attack"),
        ("template_targeting", "Select movement destination"),
        ("automatic_movement", "Move without opportunity attacks"),
    ],
    "flyby_attack": [
        ("movement_path_selection", "Select flight path"),
        ("automatic_movement", "Begin movement"),
        ("attack_at_point", "Attack during movement"),
        ("complete_movement", "Finish movement without opportunity attacks"),
    ],
    "charge": [
        ("straight_line_template", "Select charge line"),
        ("automatic_movement", "Charge in straight line"),
        ("distance_validation", "Validate charge distance"),
        ("attack_workflow", "Attack with bonus damage"),
    ],
}

# Step action -> JS body; {distance} is filled per pattern
STEP_BODIES = {
    "template_targeting": (
        "state.destination = await automancyMovement.placeTemplate(args[0].token, "
        '{{ t: "circle", distance: {distance} }});\n'
        "if (!state.destination) return false;"
    ),
    "straight_line_template": (
        "state.destination = await automancyMovement.placeTemplate(args[0].token, "
        '{{ t: "ray", distance: {distance} }});\n'
        "if (!state.destination) return false;"
    ),
    "movement_path_selection": (
        "state.path = await automancyMovement.selectPath(args[0].token, {distance});\n"
        "if (!state.path) return false;"
    ),
    "automatic_movement": (
        "state.start = {{ x: args[0].token.x, y: args[0].token.y }};\n"
        "await automancyMovement.moveToken(args[0].token, state.destination ?? state.path?.at(-1));"
    ),
    "complete_movement": (
        "await automancyMovement.moveToken(args[0].token, state.path.at(-1), {{ ignoreOpportunity: true }});"
    ),
    "distance_validation": (
        "const moved = canvas.grid.measureDistance(state.start, args[0].token);\n"
        "if (moved < {distance}) {{\n"
        '  ui.notifications.warn(`Moved ${{moved}} ft; {distance} ft required.`);\n'
        "  return false;\n"
        "}}"
    ),
    "target_selection": (
        "state.targets = Array.from(game.user.targets);\n"
        "if (!state.targets.length) return false;"
    ),
    "attack_workflow": (
        "await MidiQOL.completeItemUse(args[0].item, {{}}, {{ targetUuids: state.targets?.map(t => t.document.uuid) }});"
    ),
    "attack_at_point": (
        "const target = state.path.find(p => p.token)?.token;\n"
        "if (target) await MidiQOL.completeItemUse(args[0].item, {{}}, {{ targetUuids: [target.document.uuid] }});"
    ),
}


@dataclass
class MovementPattern:
    type: str              # move_attack_conditional | attack_move | flyby_attack | charge
    distance: int
    movement_type: str     # leap | straight_line | fly | teleport | normal
    attack_type: str
    effect: str
    requirements: list[str] = field(default_factory=list)
    description: str = ""

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "distance": self.distance,
            "movementType": self.movement_type,
            "attackType": self.attack_type,
            "effect": self.effect,
            "requirements": self.requirements,
            "description": self.description,
        }


def movement_type(text: str) -> str:
    lowered = text.lower()
    if "leap" in lowered or "jump" in lowered:
        return "leap"
    if "charge" in lowered:
        return "straight_line"
    if "fly" in lowered or "flies" in lowered:
        return "fly"
    if "teleport" in lowered:
        return "teleport"
    return "normal"


def attack_type(text: str) -> str:
    lowered = text.lower()
    for word, kind in (("bite", "bite"), ("claw", "claw"),
                       ("weapon attack", "weapon"), ("spell attack", "spell")):
        if word in lowered:
            return kind
    return "attack"


def conditional_effect(text: str) -> str:
    lowered = text.lower()
    if "prone" in lowered:
        return "prone"
    if "grapple" in lowered:
        return "grapple"
    if "push" in lowered or "knock" in lowered:
        return "knockback"
    if "additional" in lowered or "bonus" in lowered or "extra" in lowered:
        return "bonus_damage"
    return "none"


def scan_chain(text: str, steps) -> list[re.Match] | None:
    """Match every step in order; returns the step matches or None."""
    matches = []
    pos = 0
    for step in steps:
        m = step.search(text, pos)
        if not m:
            return None
        matches.append(m)
        pos = m.end()
    return matches


def detect_patterns(text: str) -> list[MovementPattern]:
    patterns = []

    chain = scan_chain(text, MOVE_ATTACK_CONDITIONAL_STEPS)
    if chain:
        distance = int(chain[1].group(1))
        patterns.append(MovementPattern(
            type="move_attack_conditional",
            distance=distance,
            movement_type=movement_type(text),
            attack_type=attack_type(text),
            effect=conditional_effect(text),
            requirements=[f"Move at least {distance} feet toward target"],
            description=f"Move up to {distance} feet, then attack with conditional effects",
        ))

    attack_move = scan_chain(text, ATTACK_MOVE_STEPS)
    if attack_move:
        speed = MOVE_DISTANCE_PATTERN.search(text)
        distance = int(speed.group(1)) if speed and speed.group(1) else HALF_SPEED_FT
        patterns.append(MovementPattern(
            type="attack_move",
            distance=distance,
            movement_type="normal",
            attack_type=attack_type(text),
            effect="no_opportunity_attacks",
            requirements=["Make attack first"],
            description=f"Attack, then move up to {distance} feet without opportunity attacks",
        ))

    if not attack_move and scan_chain(text, FLYBY_STEPS):
        patterns.append(MovementPattern(
            type="flyby_attack",
            distance=FLYBY_DISTANCE_FT,
            movement_type="fly",
            attack_type=attack_type(text),
            effect="no_opportunity_attacks",
            requirements=["Can fly"],
            description="Move, attack, continue moving without opportunity attacks",
        ))

    chain = scan_chain(text, CHARGE_STEPS)
    if chain:
        distance = int(chain[1].group(1))
        bonus = chain[-1].group(1)
        patterns.append(MovementPattern(
            type="charge",
            distance=distance,
            movement_type="straight_line",
            attack_type=attack_type(text),
            effect=f"bonus_damage_{bonus}",
            requirements=[f"Move {distance} feet in straight line toward target"],
            description=f"Charge {distance} feet for +{bonus} damage",
        ))

    return patterns


def template_config(pattern: MovementPattern) -> dict:
    ray = pattern.type in ("charge", "flyby_attack")
    return {
        "templateType": "ray" if ray else "circle",
        "maxRange": pattern.distance,
        "shape": "ray" if pattern.movement_type in ("straight_line", "fly") else "circle",
        "requiresLineOfSight": pattern.movement_type != "teleport",
        "allowsPartialMovement": pattern.type != "charge",
    }


def step_scripts(descriptor: AbilityDescriptor, pattern: MovementPattern,
                 registry: ScriptRegistry) -> list[BehaviorScript]:
    scripts = []
    for order, (action, description) in enumerate(ACTIVATION_STEPS[pattern.type], start=1):
        scripts.append(registry.script(
            script_name(descriptor.name, f"Step{order}"), "movement_step",
            {
                "name": js_escape(descriptor.name),
                "step": order,
                "action": action,
                "description": description,
                "previous": order - 1,
                "body": STEP_BODIES[action].format(distance=pattern.distance),
            },
            hook=action, kind="movement",
        ))
    return scripts


def movement_pass(descriptor: AbilityDescriptor, plan: EffectIdPlan,
                  context: PassContext) -> PartialArtifact:
    partial = PartialArtifact(system=SYSTEM)
    patterns = detect_patterns(descriptor.text)
    if not patterns:
        return partial

    primary = patterns[0]
    config = template_config(primary)
    partial.scripts = step_scripts(descriptor, primary, context.registry)
    partial.flags = {
        "midi-qol": {
            "templateRequired": True,
            "rangeTarget": "template",
            "movementAttackIntegration": True,
        },
        "chris-premades": {
            "movementAttack": {
                "pattern": primary.type,
                "distance": primary.distance,
                "integratedWorkflow": True,
            },
        },
        "automancy": {
            "movementAttackPattern": primary.type,
            "movementPatterns": [p.to_dict() for p in patterns],
            "templateConfig": config,
            "activationSteps": [
                {"order": i, "action": a, "description": d}
                for i, (a, d) in enumerate(ACTIVATION_STEPS[primary.type], start=1)
            ],
        },
    }
    partial.complexity_floor = COMPLEX
    partial.details["patterns"] = patterns

    logger.debug("Movement-attack pattern for '%s': %s", descriptor.name, primary.type)
    return partial
