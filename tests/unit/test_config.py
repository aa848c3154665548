"""
Tests for configuration loading.

Tests packaged defaults, user overrides, deep merging and the errors
raised for malformed files.
"""

import pytest

from automancy.config import (
    AutomationConfig,
    deep_merge,
    get_default_config,
    load_config,
    load_yaml_file,
)
from automancy.converter import AbilityConverter
from automancy.errors import ConfigError
from tests.fixtures.abilities import MIND_JOLT


class TestDefaults:
    """Tests for the packaged defaults.yaml."""

    def test_default_values(self):
        config = get_default_config()
        assert config.id_length == 16
        assert config.basic_script_min_complexity == 2
        assert config.save_ends_rounds == 100
        assert config.ongoing_save_ability == "con"
        assert config.ongoing_save_dc == 15
        assert config.source_path is None

    def test_quality_tables_sorted_highest_first(self):
        quality = get_default_config().quality
        assert quality.max_score == 10
        assert quality.flag_namespaces == [(4.0, 3), (2.0, 2), (1.0, 1)]
        assert quality.coverage[0] == (0.9, 3)

    def test_defaults_loaded_once(self):
        assert get_default_config() is get_default_config()

    def test_empty_dict_uses_dataclass_defaults(self):
        config = AutomationConfig.from_dict({})
        assert config.id_length == 16
        assert config.quality.flag_namespaces == []


class TestLoadConfig:
    """Tests for merging a user file over the defaults."""

    def test_override_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("ids:\n  length: 12\nquality:\n  max_score: 8\n")

        config = load_config(path)

        assert config.id_length == 12
        assert config.quality.max_score == 8
        # Untouched keys keep their defaults
        assert config.save_ends_rounds == 100
        assert config.source_path == str(path)

    def test_default_range_reaches_descriptor(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("synthesis:\n  default_range_ft: 10\n")

        config = load_config(path)
        base = AbilityConverter(config=config).synthesizer.convert(MIND_JOLT)

        assert config.default_range_ft == 10
        assert base.descriptor.range.value == 10

    def test_missing_file_is_not_an_error(self, tmp_path):
        config = load_config(tmp_path / "absent.yaml")
        assert config.id_length == 16
        assert config.source_path is None

    def test_env_var_location(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("synthesis:\n  save_ends_rounds: 10\n")
        monkeypatch.setenv("AUTOMANCY_CONFIG", str(path))

        assert load_config().save_ends_rounds == 10

    def test_threshold_lists_are_combined(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("quality:\n  scripts:\n    - [5, 3]\n")

        assert load_config(path).quality.scripts == [(5.0, 3), (3.0, 2), (1.0, 1)]


class TestConfigErrors:
    """Malformed files raise ConfigError."""

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("ids: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_root_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- one\n- two\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_yaml_file(path)

    def test_short_ids_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("ids:\n  length: 4\n")
        with pytest.raises(ConfigError, match="at least 8"):
            load_config(path)

    def test_non_numeric_value(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("ids:\n  length: lots\n")
        with pytest.raises(ConfigError, match="Invalid configuration value"):
            load_config(path)

    def test_bad_threshold_entry(self):
        with pytest.raises(ConfigError, match="minimum, points"):
            AutomationConfig.from_dict({"quality": {"scripts": [[1, 2, 3]]}})


class TestDeepMerge:
    def test_nested_dicts(self):
        merged = deep_merge({"a": {"b": 1, "c": 2}}, {"a": {"c": 3}})
        assert merged == {"a": {"b": 1, "c": 3}}

    def test_lists_concatenate_without_duplicates(self):
        assert deep_merge({"a": [1, 2]}, {"a": [2, 3]}) == {"a": [1, 2, 3]}

    def test_scalar_replaced(self):
        assert deep_merge({"a": 1}, {"a": "x"}) == {"a": "x"}

    def test_base_not_modified(self):
        base = {"a": 1}
        deep_merge(base, {"b": 2})
        assert base == {"a": 1}
