"""Tests for the behavior script template registry."""

import pytest

from automancy.scripts import BehaviorScript, ScriptRegistry, default_registry, js_escape, script_name


@pytest.fixture
def templates(tmp_path):
    (tmp_path / "greet.js").write_text('console.log("{{name}}", {{targets}}, {{flag}});\n')
    (tmp_path / "plain.js").write_text("return true;\n")
    return tmp_path


class TestRender:
    def test_fills_placeholders(self, templates):
        registry = ScriptRegistry(templates)
        source = registry.render("greet", {"name": "Bear Hug", "targets": ["a", "b"], "flag": True})
        assert source == 'console.log("Bear Hug", ["a", "b"], true);\n'

    def test_none_renders_as_null(self, templates):
        registry = ScriptRegistry(templates)
        source = registry.render("greet", {"name": "x", "targets": None, "flag": False})
        assert "null, false" in source

    def test_missing_value_raises(self, templates):
        registry = ScriptRegistry(templates)
        with pytest.raises(KeyError, match="flag"):
            registry.render("greet", {"name": "x", "targets": []})

    def test_unknown_template_raises(self, templates):
        with pytest.raises(FileNotFoundError):
            ScriptRegistry(templates).render("absent", {})

    def test_extra_values_ignored(self, templates):
        assert ScriptRegistry(templates).render("plain", {"unused": 1}) == "return true;\n"


class TestRegistry:
    def test_templates_are_cached(self, templates):
        registry = ScriptRegistry(templates)
        first = registry.get_template("plain")
        (templates / "plain.js").write_text("changed\n")
        assert registry.get_template("plain") == first

    def test_list_templates(self, templates):
        assert ScriptRegistry(templates).list_templates() == ["greet", "plain"]

    def test_script_wraps_render(self, templates):
        script = ScriptRegistry(templates).script("PlainMacro", "plain", {}, hook="postSave", kind="basic")
        assert isinstance(script, BehaviorScript)
        assert script.source == "return true;\n"
        assert script.to_dict() == {"name": "PlainMacro", "hook": "postSave", "kind": "basic"}

    def test_packaged_templates(self):
        names = default_registry().list_templates()
        for expected in ("basic", "reaction_trigger", "recharge_roll", "ongoing_tick", "movement_step"):
            assert expected in names


class TestHelpers:
    def test_script_name(self):
        assert script_name("Bear Hug", "Recharge") == "BearHugRecharge"
        assert script_name("fire breath", "Macro") == "FireBreathMacro"
        assert script_name("Multi-Attack", "") == "MultiAttack"

    def test_js_escape(self):
        assert js_escape('say "hi"') == 'say \\"hi\\"'
        assert js_escape("a`b") == "a\\`b"
        assert js_escape("${x}") == "\\${x}"
        assert js_escape("line\nbreak") == "line break"
        assert js_escape("back\\slash") == "back\\\\slash"
