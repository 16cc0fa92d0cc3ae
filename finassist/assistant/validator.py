"""Parameter Validator - checks proposed calls against catalog schemas.

Every applicable check runs and every violation is reported, so the model
gets the full correction list in one round.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List

from finassist.assistant import catalog

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


@dataclass
class ValidationResult:
    """Outcome of validating one call."""
    ok: bool
    errors: List[str] = field(default_factory=list)


def _type_matches(expected: str, value: Any) -> bool:
    if expected == "string":
        return isinstance(value, str)
    if expected == "number":
        # bool is an int subclass but never a number here
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if expected == "boolean":
        return isinstance(value, bool)
    return True


def _format_bound(bound: Any) -> str:
    if isinstance(bound, float) and bound.is_integer():
        return str(int(bound))
    return str(bound)


def validate(name: str, arguments: Dict[str, Any]) -> ValidationResult:
    """
    Validate ``arguments`` for the catalog function ``name``.

    Returns:
        ValidationResult with ok=True, or ok=False and one message per violation
    """
    descriptor = catalog.find(name)
    if descriptor is None:
        return ValidationResult(ok=False, errors=[f"Function '{name}' not found in catalog"])

    if not isinstance(arguments, dict):
        return ValidationResult(ok=False, errors=[f"Arguments for '{name}' must be an object"])

    errors: List[str] = []
    properties = descriptor.properties

    for param in descriptor.required:
        if param not in arguments:
            errors.append(f"Required parameter '{param}' is missing")

    for param, value in arguments.items():
        schema = properties.get(param)
        if schema is None:
            errors.append(f"Unknown parameter '{param}' for function '{name}'")
            continue

        expected = schema.get("type")
        if not _type_matches(expected, value):
            errors.append(f"Parameter '{param}' must be a {expected}")
            # Value checks below assume the right type
            continue

        if "enum" in schema and value not in schema["enum"]:
            errors.append(f"Parameter '{param}' must be one of: {', '.join(schema['enum'])}")

        if schema.get("format") == "date" and not DATE_PATTERN.fullmatch(value):
            errors.append(f"Parameter '{param}' must be in YYYY-MM-DD format")

        if expected == "number":
            minimum = schema.get("minimum")
            maximum = schema.get("maximum")
            if minimum is not None and value < minimum:
                errors.append(f"Parameter '{param}' must be at least {_format_bound(minimum)}")
            if maximum is not None and value > maximum:
                errors.append(f"Parameter '{param}' must be at most {_format_bound(maximum)}")

    return ValidationResult(ok=not errors, errors=errors)
