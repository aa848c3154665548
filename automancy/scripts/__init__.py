"""Behavior script templates for the host runtime."""

from .registry import BehaviorScript, ScriptRegistry, default_registry, js_escape, script_name

__all__ = ["BehaviorScript", "ScriptRegistry", "default_registry", "js_escape", "script_name"]
