"""Tests for the semantic model builder."""

import pytest

from automancy.model import (
    ADVANCED, SIMPLE, AbilityType, ActivationType, ConditionKind, SaveEndsTiming,
    SemanticModelBuilder, assess_complexity, build_descriptor, detect_conditions,
    detect_requirements,
)
from tests.fixtures.abilities import (
    BEAR_HUG, DEADLY_LEAP, FIRE_BREATH, FLAME_SWORD, LIGHTNING_BOLT, MELEE_ATTACK,
    MIND_JOLT, SHIELD_BLOCK, STONE_SKIN,
)


class TestClassification:
    @pytest.mark.parametrize("text,expected", [
        (MELEE_ATTACK, AbilityType.WEAPON_ATTACK),
        ("Ranged Spell Attack: +6 to hit, range 120 ft. Hit: 10 (3d6) fire damage.",
         AbilityType.SPELL_ATTACK),
        (LIGHTNING_BOLT, AbilityType.SAVE_BASED),
        ("As an action, the cleric touches a creature, which regains 10 (2d8 + 1) healing damage.",
         AbilityType.HEALING),
        (SHIELD_BLOCK, AbilityType.REACTION),
        (STONE_SKIN, AbilityType.PASSIVE),
        ("As a bonus action, the rogue hides.", AbilityType.UTILITY),
    ])
    def test_classify(self, text, expected):
        assert build_descriptor(text).type is expected


class TestNameResolution:
    def test_name_before_colon(self):
        assert build_descriptor(FLAME_SWORD).name == "Flame Sword"

    def test_name_before_period(self):
        assert build_descriptor(STONE_SKIN).name == "Stone Skin"

    def test_explicit_name_wins(self):
        assert build_descriptor(BEAR_HUG, "Bear Hug").name == "Bear Hug"

    def test_fallback_name(self):
        text = "a very long sentence without any punctuation that goes on for quite a while"
        assert build_descriptor(text).name == "Unnamed Ability"

    def test_empty_text_rejected(self):
        with pytest.raises(ValueError):
            build_descriptor("   ")


class TestMeleeScenario:
    def test_fields(self):
        d = build_descriptor(MELEE_ATTACK)
        assert d.type is AbilityType.WEAPON_ATTACK
        assert d.attack.type == "mwak"
        assert d.attack.bonus == 5
        assert len(d.damage) == 1
        assert d.damage[0].formula == "1d8+4"
        assert d.damage[0].type == "slashing"
        assert d.damage[0].average == 8
        assert d.complexity == SIMPLE

    def test_damage_not_duplicated_by_simple_format(self):
        d = build_descriptor("Hit: 8 (1d8 + 4) slashing damage. Also 1d8+4 slashing damage.")
        assert [dmg.formula for dmg in d.damage] == ["1d8+4"]


class TestSaveScenario:
    def test_lightning_bolt(self):
        d = build_descriptor(LIGHTNING_BOLT)
        assert d.saves[0].ability == "dex"
        assert d.saves[0].dc == 15
        assert d.target.type == "space"
        assert d.target.shape == "line"
        assert d.target.width == 60
        assert d.damage[0].formula == "8d6"
        assert d.damage[0].type == "lightning"

    def test_area_cone(self):
        d = build_descriptor(FIRE_BREATH)
        assert d.target.shape == "cone"
        assert d.target.value == 30


class TestBearHug:
    def test_recharge(self):
        d = build_descriptor(BEAR_HUG, "Bear Hug")
        assert d.resources.recharge == {"min": 4, "max": 6}
        assert d.resources.consumes is True

    def test_conditions_in_vocabulary_order(self):
        d = build_descriptor(BEAR_HUG, "Bear Hug")
        assert [c.name for c in d.status_conditions] == ["grappled", "restrained"]
        assert all(c.kind is ConditionKind.STANDARD for c in d.status_conditions)

    def test_both_damage_entries(self):
        d = build_descriptor(BEAR_HUG, "Bear Hug")
        assert [(x.formula, x.type) for x in d.damage] == [
            ("4d10", "bludgeoning"), ("1d10", "bludgeoning"),
        ]

    def test_requirements(self):
        d = build_descriptor(BEAR_HUG, "Bear Hug")
        assert [r.type for r in d.requirements] == ["visibility", "recharge"]

    def test_complexity_tier(self):
        assert build_descriptor(BEAR_HUG, "Bear Hug").complexity >= 3


class TestConditions:
    def test_adjacency_required(self):
        assert detect_conditions("The spell can end the grappled condition.") == []

    def test_linking_verb(self):
        names = [c.name for c in detect_conditions("The target is frightened until the end of its turn.")]
        assert names == ["frightened"]

    def test_homebrew_condition(self):
        found = detect_conditions(MIND_JOLT)
        assert len(found) == 1
        assert found[0].name == "dazed"
        assert found[0].kind is ConditionKind.HOMEBREW
        assert found[0].save_ends is True

    def test_end_of_turn_timing(self):
        found = detect_conditions(
            "The target is stunned (save ends at the end of its turn)."
        )
        assert found[0].save_ends_timing is SaveEndsTiming.END_OF_TURN

    def test_roll_modifiers_are_not_status(self):
        d = build_descriptor("The target has disadvantage on attack rolls.")
        assert d.status_conditions == []
        assert d.conditions[0].kind is ConditionKind.DISADVANTAGE
        assert d.conditions[0].value == "attack"


class TestRequirements:
    def test_leap_requirement(self):
        reqs = detect_requirements(DEADLY_LEAP)
        assert len(reqs) == 1
        assert reqs[0].type == "movement"
        assert reqs[0].value == 20
        assert reqs[0].hook == "preAttackRoll"

    def test_damage_trigger(self):
        reqs = detect_requirements("When the knight takes damage, it can strike back.")
        assert [r.type for r in reqs] == ["trigger"]
        assert reqs[0].hook == "onDamaged"

    def test_none(self):
        assert detect_requirements(MELEE_ATTACK) == []


class TestActivationAndComplexity:
    def test_reaction_is_advanced(self):
        d = build_descriptor(SHIELD_BLOCK)
        assert d.activation.type is ActivationType.REACTION
        assert d.complexity == ADVANCED

    def test_bonus_action_window(self):
        d = build_descriptor("As a bonus action, the rogue hides.")
        assert d.activation.type is ActivationType.BONUS

    def test_late_bonus_action_is_prose(self):
        text = "The rogue takes the Hide action. " + "x" * 40 + " It can do so as a bonus action."
        d = build_descriptor(text)
        assert d.activation.type is ActivationType.ACTION

    def test_escalate_never_lowers(self):
        d = build_descriptor(FLAME_SWORD)
        assert d.complexity == 2
        assert d.escalate(1) == 2
        assert d.escalate(9) == ADVANCED

    def test_assess_complexity_counts_consumption(self):
        d = build_descriptor(FIRE_BREATH)
        assert d.resources.uses == 3
        assert d.resources.per == "day"
        assert assess_complexity(d) == 2


class TestRange:
    def test_explicit_range(self):
        d = build_descriptor("Ranged Spell Attack: +6 to hit, range 120/240 ft. Hit: 10 (3d6) fire damage.")
        assert (d.range.value, d.range.long, d.range.units) == (120, 240, "ft")

    def test_fallback_is_five_feet(self):
        assert build_descriptor(MIND_JOLT).range.value == 5

    def test_fallback_follows_builder_default(self):
        d = SemanticModelBuilder(default_range_ft=15).build(MIND_JOLT)
        assert d.range.value == 15
        assert d.range.units == "ft"
