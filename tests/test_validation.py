"""Input validation tests."""

import pytest

from toolgate_tools.exceptions import ToolValidationError, UpstreamConfigurationError
from toolgate_tools.schemas import ToolInputSchema
from toolgate_tools.validation import build_json_schema, validate_input_parameters


@pytest.fixture
def contact_schema():
    return ToolInputSchema.model_validate(
        {
            "properties": {
                "email": {"jsonSchema": {"type": "string", "format": "email"}},
                "age": {"jsonSchema": {"type": "integer", "minimum": 0}},
                "tags": {"jsonSchema": {"type": "array", "items": {"type": "string"}}},
            },
            "required": ["email"],
        }
    )


def _issues(exc_info):
    return exc_info.value.details


def test_valid_params_are_returned_as_new_dict(contact_schema):
    raw = {"email": "a@b.com", "age": 3}

    validated = validate_input_parameters(contact_schema, raw)

    assert validated == raw
    assert validated is not raw


def test_empty_schema_accepts_anything():
    assert validate_input_parameters(ToolInputSchema(), {"whatever": 1}) == {}


def test_fields_not_listed_as_required_are_optional(contact_schema):
    # Only explicitly listed fields are required, even though every field
    # appears in properties.
    assert validate_input_parameters(contact_schema, {"email": "a@b.com"}) == {"email": "a@b.com"}


def test_no_required_list_means_nothing_required():
    schema = ToolInputSchema.model_validate({"properties": {"q": {"jsonSchema": {"type": "string"}}}})

    assert validate_input_parameters(schema, {}) == {}
    assert validate_input_parameters(schema, None) == {}


def test_field_flag_marks_required_without_explicit_list():
    schema = ToolInputSchema.model_validate(
        {
            "properties": {
                "q": {"jsonSchema": {"type": "string", "_isRequired": True}},
                "page": {"jsonSchema": {"type": "integer", "_isRequired": False}},
            }
        }
    )

    with pytest.raises(ToolValidationError) as exc_info:
        validate_input_parameters(schema, {})

    assert _issues(exc_info) == [{"path": "/", "message": "'q' is a required property"}]
    assert validate_input_parameters(schema, {"q": "shoes"}) == {"q": "shoes"}


def test_explicit_required_list_overrides_field_flag():
    schema = ToolInputSchema.model_validate(
        {
            "properties": {"q": {"jsonSchema": {"type": "string", "_isRequired": True}}},
            "required": [],
        }
    )

    assert build_json_schema(schema)["required"] == []
    assert validate_input_parameters(schema, {}) == {}


def test_missing_required_field_reported_at_root(contact_schema):
    with pytest.raises(ToolValidationError) as exc_info:
        validate_input_parameters(contact_schema, {"age": 1})

    assert exc_info.value.message == "Input validation failed."
    assert _issues(exc_info) == [{"path": "/", "message": "'email' is a required property"}]


def test_collects_every_violation_with_pointer_paths(contact_schema):
    with pytest.raises(ToolValidationError) as exc_info:
        validate_input_parameters(contact_schema, {"email": "not-an-email", "age": -1, "tags": ["ok", 5]})

    paths = [issue["path"] for issue in _issues(exc_info)]
    assert paths == ["/age", "/email", "/tags/1"]


def test_unknown_property_is_rejected(contact_schema):
    with pytest.raises(ToolValidationError) as exc_info:
        validate_input_parameters(contact_schema, {"email": "a@b.com", "extra": True})

    (issue,) = _issues(exc_info)
    assert issue["path"] == "/"
    assert "extra" in issue["message"]


def test_validation_is_deterministic(contact_schema):
    bad = {"email": 1, "age": "x", "tags": "nope", "other": None}

    results = []
    for _ in range(3):
        with pytest.raises(ToolValidationError) as exc_info:
            validate_input_parameters(contact_schema, dict(bad))
        results.append(_issues(exc_info))

    assert results[0] == results[1] == results[2]
    assert results[0] == sorted(results[0], key=lambda issue: (issue["path"], issue["message"]))


def test_invalid_tool_schema_is_configuration_error():
    schema = ToolInputSchema.model_validate({"properties": {"q": {"jsonSchema": {"type": "strung"}}}})

    with pytest.raises(UpstreamConfigurationError):
        validate_input_parameters(schema, {"q": "x"})


def test_build_json_schema_combines_fields(contact_schema):
    schema = build_json_schema(contact_schema)

    assert schema["type"] == "object"
    assert schema["required"] == ["email"]
    assert schema["additionalProperties"] is False
    assert set(schema["properties"]) == {"email", "age", "tags"}
