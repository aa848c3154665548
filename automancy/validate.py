"""
Output Validation - Checks a conversion result against the output contract.

  1. JSON Schema (schemas/artifact.schema.json)
  2. Effect id correlation: every id an activity references exists in the
     effect list, and effect ids are unique
  3. Soft checks reported as warnings (empty scripts, unresolved templates)
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

import jsonschema

from .converter import ConversionResult
from .errors import ContractError

logger = logging.getLogger(__name__)

SCHEMAS_DIR = Path(__file__).parent / "schemas"


@dataclass
class ValidationReport:
    """Validation results for one conversion result."""
    valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    stats: dict = field(default_factory=dict)

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)
        self.valid = False

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)


def load_schema(schema_name: str) -> dict:
    """Load a JSON schema from the schemas directory."""
    schema_path = SCHEMAS_DIR / f"{schema_name}.schema.json"
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_path}")

    with open(schema_path) as f:
        return json.load(f)


def _schema_errors(data: dict, schema: dict) -> list[str]:
    validator = jsonschema.Draft7Validator(schema)
    errors = []
    for error in sorted(validator.iter_errors(data), key=lambda e: list(e.path)):
        location = "/".join(str(p) for p in error.path) or "<root>"
        errors.append(f"{location}: {error.message}")
    return errors


def _check_effect_ids(data: dict, report: ValidationReport) -> None:
    effect_ids = [e.get("_id") for e in data.get("effectList", [])]
    known = set(effect_ids)

    if len(known) != len(effect_ids):
        report.add_error("Duplicate effect ids in effect list")

    item = data.get("itemRecord") or {}
    activities = item.get("system", {}).get("activities", {})
    for key, activity in activities.items():
        for ref in activity.get("effects", []):
            if ref.get("_id") not in known:
                report.add_error(
                    f"Activity '{key}' references unknown effect id {ref.get('_id')}"
                )

    report.stats["effects"] = len(effect_ids)
    report.stats["activities"] = len(activities)


def _check_scripts(data: dict, report: ValidationReport) -> None:
    scripts = data.get("behaviorScripts", [])
    for index, source in enumerate(scripts):
        if not source.strip():
            report.add_warning(f"Behavior script {index} is empty")
        elif "{{" in source:
            report.add_warning(f"Behavior script {index} has unfilled placeholders")
    report.stats["scripts"] = len(scripts)


def validate_result(result: Union[ConversionResult, dict], strict: bool = False) -> ValidationReport:
    """Validate a conversion result or its exported dict.

    Args:
        result: ConversionResult or the output of ``ConversionResult.to_dict``.
        strict: Raise instead of returning an invalid report.

    Raises:
        ContractError: In strict mode, if any error was found.
    """
    data = result.to_dict() if isinstance(result, ConversionResult) else result
    schema = load_schema("artifact")
    report = ValidationReport()

    if strict:
        try:
            jsonschema.validate(instance=data, schema=schema)
        except jsonschema.ValidationError as e:
            raise ContractError(
                f"Conversion result for '{data.get('name', '')}' fails schema: {e.message}",
                errors=_schema_errors(data, schema),
            ) from e

    for message in _schema_errors(data, schema):
        report.add_error(message)

    if data.get("success"):
        _check_effect_ids(data, report)
        _check_scripts(data, report)
    elif not data.get("error"):
        report.add_warning("Failed conversion carries no error message")

    log_fn = logger.info if report.valid else logger.error
    log_fn(
        "Validation of '%s' %s: %d errors, %d warnings",
        data.get("name", ""),
        "PASSED" if report.valid else "FAILED",
        len(report.errors),
        len(report.warnings),
    )

    if strict and not report.valid:
        raise ContractError(
            f"Conversion result for '{data.get('name', '')}' violates the output contract",
            errors=report.errors,
        )
    return report
