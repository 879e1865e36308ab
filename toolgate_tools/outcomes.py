"""Execution outcome schemas.

Every invocation ends in exactly one of three shapes, discriminated by
``status``.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

from toolgate_tools.exceptions import ErrorKind, ToolEngineError
from toolgate_tools.schemas import Credentials, OAuthProvider, UtilityProvider

NO_CALL_REQUIRED_MESSAGE = "Prerequisites met. No API call required for this tool."
EXECUTION_FAILED_PREFIX = "Tool Execution Failed: "

_VERBATIM_KINDS = frozenset({ErrorKind.VALIDATION, ErrorKind.UPSTREAM_API})


class SuccessOutcome(BaseModel):
    """The external API's response body, or a confirmation when no call was made."""

    status: Literal["success"] = "success"
    data: Any = None


class SetupNeededOutcome(BaseModel):
    """Unmet prerequisites the caller must resolve out of band."""

    status: Literal["setup_needed"] = "setup_needed"
    title: str
    description: str
    message: str
    utility_provider: UtilityProvider
    oauth_provider: OAuthProvider | None = None
    required_secret_inputs: list[str] = Field(default_factory=list)
    required_action_confirmations: list[str] = Field(default_factory=list)
    oauth_authorization_url: str | None = None


class ErrorOutcome(BaseModel):
    """Terminal failure."""

    status: Literal["error"] = "error"
    kind: ErrorKind
    message: str
    details: Any = None

    @classmethod
    def from_exception(cls, error: ToolEngineError) -> "ErrorOutcome":
        """Build the outcome for an engine error.

        Validation and upstream API errors keep their own message; every
        other kind is reported as "Tool Execution Failed: <reason>".
        """
        message = error.message
        if error.kind not in _VERBATIM_KINDS:
            message = f"{EXECUTION_FAILED_PREFIX}{message}"
        return cls(kind=error.kind, message=message, details=error.details)

    @classmethod
    def internal(cls, error: Exception) -> "ErrorOutcome":
        return cls(kind=ErrorKind.INTERNAL, message=f"{EXECUTION_FAILED_PREFIX}{error}")


ExecutionOutcome = Annotated[
    Union[SuccessOutcome, SetupNeededOutcome, ErrorOutcome],
    Field(discriminator="status"),
]


class PrerequisiteResult(BaseModel):
    """Either resolved credentials or a setup-needed descriptor, never both."""

    met: bool
    credentials: Credentials | None = None
    setup_needed: SetupNeededOutcome | None = None

    @classmethod
    def satisfied(cls, credentials: Credentials) -> "PrerequisiteResult":
        return cls(met=True, credentials=credentials)

    @classmethod
    def unmet(cls, setup_needed: SetupNeededOutcome) -> "PrerequisiteResult":
        return cls(met=False, setup_needed=setup_needed)
