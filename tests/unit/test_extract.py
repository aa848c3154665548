"""Tests for the pattern registry and matcher."""

import re

import pytest

from automancy.extract import Pattern, PatternMatcher, build_patterns, default_matcher
from tests.fixtures.abilities import BEAR_HUG, LIGHTNING_BOLT, MELEE_ATTACK


class TestPatternMatcher:
    def test_scan_order_is_descending_priority(self):
        matcher = PatternMatcher([
            Pattern("low", re.compile("a"), lambda m: {}, priority=10),
            Pattern("high", re.compile("a"), lambda m: {}, priority=90),
        ])
        assert matcher.pattern_names() == ["high", "low"]

    def test_reregistering_replaces(self):
        matcher = PatternMatcher([Pattern("x", re.compile("a"), lambda m: {"v": 1})])
        matcher.register(Pattern("x", re.compile("a"), lambda m: {"v": 2}))
        assert len(matcher) == 1
        assert matcher.extract("a").first("x").get("v") == 2

    def test_non_repeatable_yields_first_match_only(self):
        matcher = PatternMatcher([Pattern("num", re.compile(r"\d"), lambda m: {"n": m.group(0)})])
        result = matcher.extract("1 2 3")
        assert [f.get("n") for f in result.all("num")] == ["1"]

    def test_repeatable_yields_every_match(self):
        matcher = PatternMatcher([
            Pattern("num", re.compile(r"\d"), lambda m: {"n": m.group(0)}, repeatable=True),
        ])
        result = matcher.extract("1 2 3")
        assert [f.get("n") for f in result.all("num")] == ["1", "2", "3"]

    def test_failing_extractor_is_skipped_and_recorded(self):
        def boom(m):
            raise ValueError("bad match")

        matcher = PatternMatcher([
            Pattern("broken", re.compile("a"), boom),
            Pattern("fine", re.compile("a"), lambda m: {"ok": True}),
        ])
        result = matcher.extract("a")
        assert not result.has("broken")
        assert result.first("fine").get("ok") is True
        assert len(result.errors) == 1
        assert "bad match" in result.errors[0]

    def test_first_match_and_has(self):
        matcher = default_matcher()
        assert matcher.has(MELEE_ATTACK, "weapon_attack")
        assert not matcher.has(MELEE_ATTACK, "save_dc")
        assert matcher.first_match(MELEE_ATTACK, "unknown") is None


class TestDefaultPatterns:
    def test_weapon_attack_bonus(self):
        fact = default_matcher().extract(MELEE_ATTACK).first("weapon_attack")
        assert fact.data == {"type": "mwak", "bonus": 5}

    def test_ranged_spell_attack(self):
        fact = default_matcher().extract("Ranged Spell Attack: +6 to hit").first("spell_attack")
        assert fact.data == {"type": "rsak", "bonus": 6}

    def test_damage_with_average_compacts_formula(self):
        fact = default_matcher().extract(MELEE_ATTACK).first("damage_with_average")
        assert fact.data == {"average": 8, "formula": "1d8+4", "type": "slashing"}

    def test_save_dc_abbreviates_ability(self):
        saves = default_matcher().extract(BEAR_HUG).all("save_dc")
        assert saves[0].data == {"dc": 15, "ability": "dex"}

    def test_short_save_form(self):
        fact = default_matcher().extract(LIGHTNING_BOLT).first("save_dc")
        assert fact.data == {"dc": 15, "ability": "dex"}

    def test_area_line(self):
        fact = default_matcher().extract(LIGHTNING_BOLT).first("area_line")
        assert fact.data == {"shape": "line", "size": 60, "units": "ft"}

    def test_recharge_range(self):
        fact = default_matcher().extract(BEAR_HUG).first("recharge")
        assert fact.data == {"min": 4, "max": 6}

    def test_recharge_single_value_defaults_max(self):
        fact = default_matcher().extract("Fire Breath (Recharge 6).").first("recharge")
        assert fact.data == {"min": 6, "max": 6}

    def test_inverted_recharge_is_recorded_as_error(self):
        result = default_matcher().extract("Odd Power (Recharge 6-4).")
        assert not result.has("recharge")
        assert any("recharge" in e for e in result.errors)

    def test_advantage_does_not_match_inside_disadvantage(self):
        result = default_matcher().extract("The target has disadvantage on attack rolls.")
        assert not result.has("advantage")
        assert result.first("disadvantage").data == {"type": "disadvantage", "target": "attack"}

    def test_advantage_on_ability_saves(self):
        fact = default_matcher().extract("It has advantage on Wisdom saving throws.").first("advantage")
        assert fact.data == {"type": "advantage", "target": "wisdom"}

    def test_resistance_list(self):
        fact = default_matcher().extract(
            "resistant to bludgeoning, piercing and slashing damage"
        ).first("damage_resistance")
        assert fact.get("damage_types") == ["bludgeoning", "piercing", "slashing"]

    def test_uses_per_rest(self):
        fact = default_matcher().extract("Can be used 2/short rest.").first("uses_per_rest")
        assert fact.data == {"uses": 2, "per": "sr"}

    @pytest.mark.parametrize("text,pattern", [
        ("As a bonus action, it hides.", "activation_bonus"),
        ("It can use its reaction to parry.", "activation_reaction"),
        ("The effect is instantaneous.", "duration_instant"),
        ("A spell with range 120 feet.", "range_distance"),
        ("A 20-foot radius sphere.", "area_radius"),
    ])
    def test_pattern_recognized(self, text, pattern):
        assert default_matcher().has(text, pattern)

    def test_build_patterns_compiles_case_insensitive(self):
        for pattern in build_patterns():
            assert pattern.regex.flags & re.IGNORECASE
