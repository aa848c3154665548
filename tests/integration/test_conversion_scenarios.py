"""
Integration tests: full conversions of representative abilities.

Each test runs text through the whole pipeline (descriptor, base
synthesis, every enhancement pass, merge and scoring) and checks the
exported result.
"""

from automancy.synthesis import ATTACK_ACTIVITY_ID, SAVE_ACTIVITY_ID
from automancy.validate import validate_result
from tests.fixtures.abilities import (
    DEADLY_LEAP, FIRE_BREATH, FLAME_SWORD, LIGHTNING_BOLT, MELEE_ATTACK, SHIELD_BLOCK,
)


class TestSimpleMeleeAttack:
    def test_weapon_with_attack_activity(self, converter):
        result = converter.convert(MELEE_ATTACK)

        assert result.success
        item = result.artifact.item
        assert item["type"] == "weapon"
        assert list(item["system"]["activities"]) == [ATTACK_ACTIVITY_ID]
        assert result.artifact.effects == []

    def test_enhanced_but_simple(self, converter):
        result = converter.convert(MELEE_ATTACK)

        assert result.enhancement.applied
        assert result.enhancement.coverage == 1.0
        assert result.artifact.quality_score == 7
        assert "professional-flags" in result.artifact.applied_systems
        assert "reaction-tracking" not in result.artifact.applied_systems


class TestMultipleDamageTypes:
    def test_flame_sword(self, converter):
        result = converter.convert(FLAME_SWORD)

        assert result.name == "Flame Sword"
        parts = result.artifact.item["system"]["activities"][ATTACK_ACTIVITY_ID]["damage"]["parts"]
        assert [p["types"] for p in parts] == [["slashing"], ["fire"]]
        assert result.artifact.complexity >= 2


class TestAreaSave:
    def test_lightning_bolt(self, converter):
        result = converter.convert(LIGHTNING_BOLT)
        artifact = result.artifact

        assert artifact.item["type"] == "feat"
        save = artifact.item["system"]["activities"][SAVE_ACTIVITY_ID]
        assert save["damage"]["onSave"] == "half"
        assert artifact.flags["midi-qol"]["halfdam"] is True
        assert artifact.flags["midi-qol"]["templateRequired"] is True
        assert artifact.effects == []

    def test_limited_use_breath(self, converter):
        result = converter.convert(FIRE_BREATH)
        uses = result.artifact.item["system"]["uses"]

        assert (uses["max"], uses["per"]) == (3, "day")
        assert "recharge-automation" in result.artifact.applied_systems


class TestBearHug:
    """The grapple, restrain and crush ability exercises most passes."""

    def test_succeeds_and_validates(self, bear_hug):
        assert bear_hug.success
        assert bear_hug.name == "Bear Hug"
        assert validate_result(bear_hug, strict=True).valid

    def test_effects(self, bear_hug):
        effects = bear_hug.artifact.effects
        statuses = [e["statuses"] for e in effects if e["statuses"]]
        assert statuses == [["grappled"], ["restrained"]]
        assert len(effects) == 4
        assert bear_hug.enhancement.additional_effects == 2
        assert len({e["_id"] for e in effects}) == 4

    def test_recharge_and_requirements(self, bear_hug):
        artifact = bear_hug.artifact
        assert artifact.item["system"]["recharge"] == {"value": 4, "charged": True}
        names = [s.name for s in artifact.scripts]
        assert "BearHugSightCheck" in names
        assert "BearHugRecharge" in names

    def test_linked_chain(self, bear_hug):
        chains = bear_hug.artifact.flags["automancy"]["linkedEffects"]
        assert [c["trigger"] for c in chains] == ["save_failure"]
        assert [s["action"] for s in chains[0]["sequence"]] == [
            "apply_condition", "apply_condition", "ongoing_damage",
        ]

    def test_systems_and_scores(self, bear_hug):
        systems = set(bear_hug.artifact.applied_systems)
        assert {
            "requirements-validation", "linked-effects", "professional-flags",
            "macro-templates", "recharge-automation", "ongoing-effects",
        } <= systems
        assert "reaction-tracking" not in systems
        assert bear_hug.artifact.complexity == 4
        assert bear_hug.artifact.quality_score == 10
        assert bear_hug.enhancement.coverage == 1.0

    def test_export_view(self, bear_hug):
        data = bear_hug.to_dict()
        assert data["complexityTier"] == 4
        assert len(data["behaviorScripts"]) == len(data["scriptIndex"])
        assert data["enhancement"]["applied"] is True
        assert data["flagBundle"]["automancy"]["enhanced"] is True


class TestMovementAttack:
    def test_deadly_leap(self, converter):
        result = converter.convert(DEADLY_LEAP)
        artifact = result.artifact

        assert result.name == "Deadly Leap"
        assert "movement-attack" in artifact.applied_systems
        kinds = {s.kind for s in artifact.scripts}
        assert {"movement", "requirement"} <= kinds
        chains = artifact.flags["automancy"]["linkedEffects"]
        assert "successful_attack" in [c["trigger"] for c in chains]
        assert artifact.complexity >= 3


class TestReaction:
    def test_shield_block(self, converter):
        result = converter.convert(SHIELD_BLOCK)
        artifact = result.artifact

        assert artifact.complexity == 4
        assert "reaction-tracking" in artifact.applied_systems
        assert artifact.flags["gambits-premades"]["isReaction"] is True
        assert any(s.hook == "midi-qol.preAttackRoll" for s in artifact.scripts)
