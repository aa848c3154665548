"""Behavior script templates.

Templates are stored as files: templates/{template_id}.js, with
``{{placeholder}}`` markers filled in at render time. Rendered scripts
are opaque source text for the host runtime; nothing here runs them.
"""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)\}\}")


@dataclass
class BehaviorScript:
    """A rendered script plus where the host should run it."""
    name: str
    source: str
    hook: str = "manual"
    kind: str = "script"

    def to_dict(self) -> dict:
        return {"name": self.name, "hook": self.hook, "kind": self.kind}


class ScriptRegistry:
    """Loads, caches and renders script templates."""

    def __init__(self, templates_dir: Optional[Path] = None):
        self.templates_dir = templates_dir or TEMPLATES_DIR
        self._cache: dict[str, str] = {}

    def get_template(self, template_id: str) -> str:
        if template_id in self._cache:
            return self._cache[template_id]

        path = self.templates_dir / f"{template_id}.js"
        if not path.exists():
            raise FileNotFoundError(f"Script template not found: {path}")

        template = path.read_text(encoding="utf-8")
        self._cache[template_id] = template
        return template

    def list_templates(self) -> list[str]:
        return sorted(p.stem for p in self.templates_dir.glob("*.js"))

    def render(self, template_id: str, data: dict) -> str:
        """Fill every placeholder in a template.

        Lists and dicts are rendered as JSON literals.

        Raises:
            FileNotFoundError: Unknown template.
            KeyError: A placeholder has no value in ``data``.
        """
        result = self.get_template(template_id)
        for key, value in data.items():
            placeholder = f"{{{{{key}}}}}"
            if isinstance(value, (dict, list, bool)) or value is None:
                value = json.dumps(value)
            result = result.replace(placeholder, str(value))

        missing = PLACEHOLDER_PATTERN.findall(result)
        if missing:
            raise KeyError(f"Template '{template_id}' missing values for: {', '.join(sorted(set(missing)))}")
        return result

    def script(self, name: str, template_id: str, data: dict,
               hook: str = "manual", kind: str = "script") -> BehaviorScript:
        return BehaviorScript(
            name=name, source=self.render(template_id, data), hook=hook, kind=kind,
        )


_default_registry: Optional[ScriptRegistry] = None


def default_registry() -> ScriptRegistry:
    global _default_registry
    if _default_registry is None:
        _default_registry = ScriptRegistry()
    return _default_registry


def script_name(ability_name: str, suffix: str) -> str:
    """'Bear Hug', 'Recharge' -> 'BearHugRecharge'."""
    return re.sub(r"[^A-Za-z0-9]", "", ability_name.title()) + suffix


def js_escape(text: str) -> str:
    """Make text safe inside a double-quoted or template JS string."""
    return (
        text.replace("\\", "\\\\").replace('"', '\\"')
        .replace("`", "\\`").replace("${", "\\${").replace("\n", " ")
    )
