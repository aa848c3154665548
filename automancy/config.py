"""Configuration loading for the automation converter.

Packaged defaults live in ``defaults.yaml`` next to this module. A user file
(explicit path, ``AUTOMANCY_CONFIG`` or ``$XDG_CONFIG_HOME/automancy/config.yaml``)
is deep-merged over them:

  defaults.yaml -> user config.yaml
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"


def get_config_dir() -> Path:
    """Get the user configuration directory (not created)."""
    config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(config_home) / "automancy"


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge override dict into base dict.

    - Dicts are merged recursively
    - Lists are concatenated (override appended to base)
    - Scalars are replaced by override
    """
    result = base.copy()

    for key, value in override.items():
        if key in result:
            base_val = result[key]
            if isinstance(base_val, dict) and isinstance(value, dict):
                result[key] = deep_merge(base_val, value)
            elif isinstance(base_val, list) and isinstance(value, list):
                merged = []
                for item in base_val + value:
                    if item not in merged:
                        merged.append(item)
                result[key] = merged
            else:
                result[key] = value
        else:
            result[key] = value

    return result


def load_yaml_file(path: Path) -> dict:
    """Load a YAML file, returning empty dict if not found."""
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")
    return data


def _thresholds(raw) -> list[tuple[float, int]]:
    """Parse ``[[minimum, points], ...]`` into sorted tuples."""
    pairs = []
    for entry in raw or []:
        if not isinstance(entry, (list, tuple)) or len(entry) != 2:
            raise ConfigError(f"Threshold entries must be [minimum, points]: {entry!r}")
        pairs.append((float(entry[0]), int(entry[1])))
    return sorted(pairs, reverse=True)


@dataclass
class QualityWeights:
    """Point tables for the professional-grade quality score."""
    max_score: int = 10
    flag_namespaces: list[tuple[float, int]] = field(default_factory=list)
    scripts: list[tuple[float, int]] = field(default_factory=list)
    coverage: list[tuple[float, int]] = field(default_factory=list)
    error_handling_bonus: int = 1
    performance_bonus: int = 1


@dataclass
class AutomationConfig:
    """Resolved converter configuration."""
    id_length: int = 16
    basic_script_min_complexity: int = 2
    default_range_ft: int = 5
    save_ends_rounds: int = 100
    ongoing_save_ability: str = "con"
    ongoing_save_dc: int = 15
    quality: QualityWeights = field(default_factory=QualityWeights)
    gambits_priority: dict = field(default_factory=dict)
    source_path: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict, source_path: Optional[str] = None) -> "AutomationConfig":
        ids = data.get("ids", {})
        synthesis = data.get("synthesis", {})
        ongoing = data.get("ongoing", {})
        quality = data.get("quality", {})
        reactions = data.get("reactions", {})

        id_length = int(ids.get("length", 16))
        if id_length < 8:
            raise ConfigError(f"ids.length must be at least 8, got {id_length}")

        return cls(
            id_length=id_length,
            basic_script_min_complexity=int(synthesis.get("basic_script_min_complexity", 2)),
            default_range_ft=int(synthesis.get("default_range_ft", 5)),
            save_ends_rounds=int(synthesis.get("save_ends_rounds", 100)),
            ongoing_save_ability=str(ongoing.get("default_save_ability", "con")),
            ongoing_save_dc=int(ongoing.get("default_save_dc", 15)),
            quality=QualityWeights(
                max_score=int(quality.get("max_score", 10)),
                flag_namespaces=_thresholds(quality.get("flag_namespaces")),
                scripts=_thresholds(quality.get("scripts")),
                coverage=_thresholds(quality.get("coverage")),
                error_handling_bonus=int(quality.get("error_handling_bonus", 1)),
                performance_bonus=int(quality.get("performance_bonus", 1)),
            ),
            gambits_priority=dict(reactions.get("gambits_priority", {})),
            source_path=source_path,
        )


def load_config(path: Optional[str | Path] = None) -> AutomationConfig:
    """Load defaults and merge the user override file over them.

    Args:
        path: Explicit override file. Falls back to ``AUTOMANCY_CONFIG`` and
            then the XDG config location; a missing file is not an error.

    Raises:
        ConfigError: If a file is not valid YAML or holds invalid values.
    """
    merged = load_yaml_file(DEFAULTS_PATH)

    if path is None:
        env_path = os.environ.get("AUTOMANCY_CONFIG")
        path = Path(env_path) if env_path else get_config_dir() / "config.yaml"
    path = Path(path)

    override = load_yaml_file(path)
    if override:
        logger.info("Loaded config overrides from %s", path)
        merged = deep_merge(merged, override)
        source = str(path)
    else:
        source = None

    try:
        return AutomationConfig.from_dict(merged, source_path=source)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration value: {e}") from e


_default_config: Optional[AutomationConfig] = None


def get_default_config() -> AutomationConfig:
    """Return the packaged defaults, loaded once."""
    global _default_config
    if _default_config is None:
        _default_config = AutomationConfig.from_dict(load_yaml_file(DEFAULTS_PATH))
    return _default_config
