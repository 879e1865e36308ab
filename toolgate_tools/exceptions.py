"""Tool engine exceptions.

Custom exception hierarchy for tool execution. Every class carries an
ErrorKind so the orchestrator can tag the Error outcome it produces.
"""

import json
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Classification of a terminal tool execution failure."""

    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    COLLABORATOR = "collaborator"
    UPSTREAM_API = "upstream_api"
    UPSTREAM_UNREACHABLE = "upstream_unreachable"
    INTERNAL = "internal"


class ToolEngineError(Exception):
    """Base exception for the tool engine."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, details: Any = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ToolValidationError(ToolEngineError):
    """Caller-supplied parameters violate the tool's input schema.

    ``details`` holds every violation, not just the first one.
    """

    kind = ErrorKind.VALIDATION


class UpstreamConfigurationError(ToolEngineError):
    """The tool's own configuration is inconsistent (broken catalog entry)."""

    kind = ErrorKind.CONFIGURATION


class MissingPathParameterError(UpstreamConfigurationError):
    """A path-mapped parameter has no value to substitute."""

    def __init__(self, param_name: str):
        self.param_name = param_name
        super().__init__(f"Missing required path parameter: {param_name}")


class CollaboratorCommunicationError(ToolEngineError):
    """The secret store or OAuth backend failed to answer, or broke its contract."""

    kind = ErrorKind.COLLABORATOR


class UpstreamApiError(ToolEngineError):
    """The external API answered with a non-2xx status."""

    kind = ErrorKind.UPSTREAM_API

    def __init__(self, status_code: int, body: Any):
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"External API Error ({status_code}): {_upstream_message(body)}",
            details={"status_code": status_code, "body": body},
        )


class UpstreamUnreachableError(ToolEngineError):
    """No response was received from the external API."""

    kind = ErrorKind.UPSTREAM_UNREACHABLE


class ToolCatalogError(Exception):
    """Base exception for catalog operations."""


class DuplicateToolError(ToolCatalogError):
    """A tool with the same id already exists in the catalog."""

    def __init__(self, tool_id: str):
        self.tool_id = tool_id
        super().__init__(f"Tool with ID '{tool_id}' already exists.")


class ToolNotFoundError(ToolCatalogError):
    """No tool with the requested id exists in the catalog."""

    def __init__(self, tool_id: str):
        self.tool_id = tool_id
        super().__init__(f"Tool configuration with ID '{tool_id}' not found.")


def _upstream_message(body: Any) -> str:
    """Pick the most readable message out of an upstream error body."""
    if isinstance(body, dict):
        error = body.get("error", body)
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        if isinstance(error, str):
            return error
        if isinstance(body.get("message"), str):
            return body["message"]
        return json.dumps(error, default=str)
    if body is None or body == "":
        return "empty response body"
    return str(body)
