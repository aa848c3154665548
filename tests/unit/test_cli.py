"""
Tests for the command line interface.

Commands are run in-process through main() with output captured.
"""

import json

import pytest

from automancy.cli.main import DEMO_ABILITIES, build_parser, main, parse_batch_file
from tests.fixtures.abilities import BEAR_HUG, LIGHTNING_BOLT, MELEE_ATTACK


class TestParseBatchFile:
    def test_blank_lines_separate_abilities(self):
        abilities = parse_batch_file(f"{MELEE_ATTACK}\n\n{LIGHTNING_BOLT}\n")
        assert [a["text"] for a in abilities] == [MELEE_ATTACK, LIGHTNING_BOLT]
        assert all(a["name"] is None for a in abilities)

    def test_name_lines_and_comments(self):
        content = (
            "#comment only\n"
            "# Bear Hug\n"
            "The owlbear grabs.\n"
            "It squeezes.\n"
            "\n"
            "\n"
            "# Bolt\n"
            f"{LIGHTNING_BOLT}\n"
        )
        abilities = parse_batch_file(content)
        assert abilities == [
            {"text": "The owlbear grabs. It squeezes.", "name": "Bear Hug"},
            {"text": LIGHTNING_BOLT, "name": "Bolt"},
        ]

    def test_empty_file(self):
        assert parse_batch_file("\n\n# orphan name\n") == []


class TestParser:
    def test_global_options(self):
        args = build_parser().parse_args(["--config", "x.yaml", "-v", "demo"])
        assert args.config == "x.yaml"
        assert args.verbose
        assert args.command == "demo"

    def test_batch_output_default(self):
        args = build_parser().parse_args(["batch", "abilities.txt"])
        assert args.output == "batch-output.json"


class TestConvertCommand:
    def test_writes_result_file(self, tmp_path, capsys):
        output = tmp_path / "result.json"
        main(["convert", BEAR_HUG, "--name", "Bear Hug", "--output", str(output)])

        data = json.loads(output.read_text())
        assert data["success"] is True
        assert data["name"] == "Bear Hug"
        out = capsys.readouterr().out
        assert "Complexity: 4/4" in out
        assert f"Wrote {output}" in out

    def test_prints_json_without_output(self, capsys):
        main(["convert", MELEE_ATTACK])
        data = json.loads(capsys.readouterr().out)
        assert data["itemRecord"]["type"] == "weapon"

    def test_reads_file(self, tmp_path, capsys):
        source = tmp_path / "ability.txt"
        source.write_text(LIGHTNING_BOLT + "\n")
        main(["convert", "--file", str(source)])
        assert json.loads(capsys.readouterr().out)["success"] is True

    def test_no_text_exits(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["convert"])
        assert exc_info.value.code == 1
        assert "provide ability text" in capsys.readouterr().out

    def test_failed_conversion_exits(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["convert", "   "])
        assert exc_info.value.code == 1
        assert "Conversion failed" in capsys.readouterr().out

    def test_bad_config_reports_error(self, tmp_path, capsys):
        config = tmp_path / "config.yaml"
        config.write_text("ids:\n  length: 2\n")
        with pytest.raises(SystemExit):
            main(["--config", str(config), "convert", MELEE_ATTACK])
        assert capsys.readouterr().out.startswith("Error: ids.length")


class TestBatchAndValidate:
    def test_batch_then_validate(self, tmp_path, capsys):
        source = tmp_path / "abilities.txt"
        source.write_text(f"# Bear Hug\n{BEAR_HUG}\n\n{MELEE_ATTACK}\n")
        output = tmp_path / "out.json"

        main(["batch", str(source), "--output", str(output)])
        out = capsys.readouterr().out
        assert "Processing 2 abilities" in out
        assert "Converted 2/2 abilities" in out

        data = json.loads(output.read_text())
        assert [entry["name"] for entry in data][0] == "Bear Hug"

        main(["validate", str(output)])
        out = capsys.readouterr().out
        assert out.count("PASSED") == 2

    def test_batch_missing_input(self, tmp_path, capsys):
        with pytest.raises(SystemExit):
            main(["batch", str(tmp_path / "absent.txt")])
        assert "not found" in capsys.readouterr().out

    def test_validate_fails_on_broken_result(self, tmp_path, capsys):
        output = tmp_path / "result.json"
        main(["convert", BEAR_HUG, "--output", str(output)])
        data = json.loads(output.read_text())
        data["effectList"] = []
        output.write_text(json.dumps(data))
        capsys.readouterr()

        with pytest.raises(SystemExit) as exc_info:
            main(["validate", str(output)])
        assert exc_info.value.code == 1
        assert "FAILED" in capsys.readouterr().out


class TestInfoCommands:
    def test_demo(self, capsys):
        main(["demo"])
        out = capsys.readouterr().out
        for ability in DEMO_ABILITIES:
            assert ability["name"] in out

    def test_capabilities(self, capsys):
        main(["capabilities"])
        data = json.loads(capsys.readouterr().out)
        assert "condition_engine" in data["enhancementPasses"]
        assert "grappled" in data["conditions"]["standard"]

    def test_no_command_prints_help(self, capsys):
        main([])
        assert "usage" in capsys.readouterr().out.lower()
