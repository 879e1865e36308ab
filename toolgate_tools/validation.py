"""Input parameter validation.

Validates caller-supplied parameters against a tool's declared JSON Schema
using jsonschema with format checking enabled.
"""

from typing import Any

from jsonschema import Draft7Validator, FormatChecker
from jsonschema.exceptions import SchemaError

from toolgate_obs.logging import get_logger
from toolgate_tools.exceptions import ToolValidationError, UpstreamConfigurationError
from toolgate_tools.schemas import ToolInputSchema, ValidationIssue

logger = get_logger(__name__)


# Non-standard per-field required marker
REQUIRED_FLAG = "_isRequired"


def required_fields(input_schema: ToolInputSchema) -> list[str]:
    """Names of the parameters a call must supply.

    An explicit ``required`` list wins, even when empty. Without one, fields
    whose schema carries ``"_isRequired": true`` are required. Otherwise
    nothing is.
    """
    if input_schema.required is not None:
        return list(input_schema.required)
    return [
        name
        for name, param in input_schema.properties.items()
        if param.json_schema.get(REQUIRED_FLAG) is True
    ]


def build_json_schema(input_schema: ToolInputSchema) -> dict[str, Any]:
    """Combine per-field schemas into a single object schema."""
    return {
        "type": "object",
        "properties": {
            name: dict(param.json_schema) for name, param in input_schema.properties.items()
        },
        "required": required_fields(input_schema),
        "additionalProperties": False,
    }


def validate_input_parameters(
    input_schema: ToolInputSchema,
    raw_params: dict[str, Any] | None,
) -> dict[str, Any]:
    """Validate raw parameters against a tool's input schema.

    Args:
        input_schema: The tool's declared parameters
        raw_params: Parameters as supplied by the caller (not mutated)

    Returns:
        A new dict with the validated parameters. Tools that declare no
        properties always validate to an empty dict.

    Raises:
        ToolValidationError: With every violated constraint in ``details``
        UpstreamConfigurationError: The tool's schema itself is invalid
    """
    if not input_schema.properties:
        logger.debug("no_input_schema_defined")
        return {}

    schema = build_json_schema(input_schema)
    try:
        Draft7Validator.check_schema(schema)
    except SchemaError as e:
        raise UpstreamConfigurationError(f"Invalid tool input schema: {e.message}") from e

    params = raw_params if raw_params is not None else {}
    validator = Draft7Validator(schema, format_checker=FormatChecker())
    issues = sorted(
        (
            ValidationIssue(path=_json_pointer(error.absolute_path), message=error.message)
            for error in validator.iter_errors(params)
        ),
        key=lambda issue: (issue.path, issue.message),
    )

    if issues:
        logger.info("input_validation_failed", violations=len(issues))
        raise ToolValidationError(
            "Input validation failed.",
            details=[issue.model_dump() for issue in issues],
        )

    return dict(params)


def _json_pointer(path: Any) -> str:
    return "/" + "/".join(str(part) for part in path)
