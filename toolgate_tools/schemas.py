"""Tool configuration schemas.

Pydantic models describing a declarative external tool: which provider it
talks to, how it authenticates, what input it accepts and how that input is
mapped onto an HTTP request. Configs are immutable once loaded.
"""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator, model_validator


# ============================================================================
# ENUMS
# ============================================================================


class UtilityProvider(str, Enum):
    """Third-party system a tool talks to."""

    CRISP = "crisp"
    STRIPE = "stripe"
    GMAIL = "gmail"
    CHARGEBEE = "chargebee"
    SLACK = "slack"


class OAuthProvider(str, Enum):
    """Identity provider the OAuth backend authorizes against."""

    GOOGLE = "google"
    FACEBOOK = "facebook"
    TWITTER = "twitter"
    LINKEDIN = "linkedin"
    GITHUB = "github"


class AuthMethod(str, Enum):
    """How a tool authenticates its outbound call."""

    NONE = "NONE"
    API_KEY = "API_KEY"  # Key stored in the secret store
    OAUTH = "OAUTH"  # Token issued through the OAuth backend


class ApiKeyAuthScheme(str, Enum):
    """How an API key is presented in the request."""

    BEARER = "Bearer"  # Authorization: Bearer <key>
    BASIC_USER = "BasicUser"  # Basic auth, username=<key>, empty password
    BASIC_PASS = "BasicPass"  # Basic auth, empty username, password=<key>
    HEADER = "Header"  # <headerName>: <key>


class HttpMethod(str, Enum):
    """HTTP methods a tool may use."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


class UtilitySecret(str, Enum):
    """Well-known secret identifiers.

    Tools may reference other identifiers too; these are the ones with
    meaning to the engine or shared across several catalog entries.
    """

    WEBSITE_ID = "website_id"
    API_SECRET_KEY = "api_secret_key"
    API_PUBLISHABLE_KEY = "api_publishable_key"
    API_IDENTIFIER = "api_identifier"
    WEBHOOK_URL_INPUTED = "webhook_url_inputed"  # User confirmed an action


# Secrets that record a one-time user acknowledgment rather than a value.
ACTION_CONFIRMATION_KEYS: frozenset[str] = frozenset(
    {UtilitySecret.WEBHOOK_URL_INPUTED.value}
)


def secret_key_name(secret_key: Any) -> str:
    """Plain string form of a secret identifier (enum member or str)."""
    if isinstance(secret_key, Enum):
        return str(secret_key.value)
    return str(secret_key)


def is_action_confirmation(secret_key: Any) -> bool:
    """Return True if the secret key belongs to the action-confirmation class."""
    return secret_key_name(secret_key) in ACTION_CONFIRMATION_KEYS


# ============================================================================
# TOOL CONFIGURATION
# ============================================================================


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ParamSchema(_FrozenModel):
    """JSON Schema of one input parameter."""

    json_schema: dict[str, Any] = Field(..., alias="jsonSchema")
    examples: tuple[Any, ...] | None = None

    @model_validator(mode="before")
    @classmethod
    def _wrap_bare_schema(cls, data: Any) -> Any:
        # Accept a bare JSON Schema as shorthand for {"jsonSchema": ...}
        if isinstance(data, dict) and "jsonSchema" not in data and "json_schema" not in data:
            return {"jsonSchema": data}
        return data


class ToolInputSchema(_FrozenModel):
    """Accepted parameters of a tool.

    ``required`` is an explicit list of parameter names. When it is absent,
    fields flagged ``"_isRequired": true`` in their schema are required.
    Everything else is optional, even when it appears in ``properties``.
    """

    properties: dict[str, ParamSchema] = Field(default_factory=dict)
    required: tuple[str, ...] | None = None


class ApiKeyDetails(_FrozenModel):
    """Which secret holds the API key and how it is injected."""

    secret_name: str = Field(..., alias="secretName")
    scheme: ApiKeyAuthScheme
    header_name: str | None = Field(None, alias="headerName")

    @field_validator("secret_name", mode="before")
    @classmethod
    def _normalize_secret_name(cls, value: Any) -> str:
        return secret_key_name(value)

    @model_validator(mode="after")
    def _header_scheme_needs_name(self) -> "ApiKeyDetails":
        if self.scheme == ApiKeyAuthScheme.HEADER and not self.header_name:
            raise ValueError("headerName is required for the 'Header' API key scheme")
        return self


class QueryParamMapping(_FrozenModel):
    """Query mapping entry with an optional value transform."""

    target: str
    transform: Literal["joinComma"] | None = None


class ParamMappings(_FrozenModel):
    """Maps input parameter names onto request locations.

    - path: parameter name -> placeholder name in the path template
    - query: parameter name -> query key (or key + transform)
    - body: parameter name -> JSON body field
    """

    path: dict[str, str] | None = None
    query: dict[str, str | QueryParamMapping] | None = None
    body: dict[str, str] | None = None


class ApiDetails(_FrozenModel):
    """The single HTTP call a tool makes once its prerequisites are met."""

    method: HttpMethod
    base_url: str = Field(..., alias="baseUrl")
    path_template: str = Field("", alias="pathTemplate")
    param_mappings: ParamMappings | None = Field(None, alias="paramMappings")
    static_headers: dict[str, str] | None = Field(None, alias="staticHeaders")


class ToolConfig(_FrozenModel):
    """Immutable description of one external tool.

    Example:
        >>> ToolConfig(
        ...     id="send_email",
        ...     description="Send an email",
        ...     utilityProvider="gmail",
        ...     authMethod="API_KEY",
        ...     requiredSecrets=["api_key"],
        ...     apiKeyDetails={"secretName": "api_key", "scheme": "Bearer"},
        ...     schema={"properties": {"to": {"jsonSchema": {"type": "string"}}}},
        ... )
    """

    id: str = Field(..., min_length=1)
    description: str
    utility_provider: UtilityProvider = Field(..., alias="utilityProvider")
    auth_method: AuthMethod = Field(AuthMethod.NONE, alias="authMethod")
    required_secrets: tuple[str, ...] = Field(default_factory=tuple, alias="requiredSecrets")
    required_scopes: tuple[str, ...] = Field(default_factory=tuple, alias="requiredScopes")
    api_key_details: ApiKeyDetails | None = Field(None, alias="apiKeyDetails")
    input_schema: ToolInputSchema = Field(default_factory=ToolInputSchema, alias="schema")
    api_details: ApiDetails | None = Field(None, alias="apiDetails")

    @field_validator("required_secrets", mode="before")
    @classmethod
    def _normalize_secret_names(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return tuple(secret_key_name(item) for item in value)
        return value

    @model_validator(mode="after")
    def _check_auth_invariants(self) -> "ToolConfig":
        if self.auth_method == AuthMethod.OAUTH and not self.required_scopes:
            raise ValueError(f"OAuth tool '{self.id}' must define requiredScopes")
        if self.auth_method == AuthMethod.API_KEY:
            if self.api_key_details is None:
                raise ValueError(f"API key tool '{self.id}' must define apiKeyDetails")
            if self.api_key_details.secret_name not in self.required_secrets:
                raise ValueError(
                    f"apiKeyDetails.secretName '{self.api_key_details.secret_name}' "
                    f"must be listed in requiredSecrets of tool '{self.id}'"
                )
        return self


# ============================================================================
# PER-INVOCATION VALUES
# ============================================================================


class Credentials(BaseModel):
    """Credentials resolved for one invocation. Never persisted or logged."""

    api_key: SecretStr | None = None
    oauth_token: SecretStr | None = None


class ValidationIssue(BaseModel):
    """One violated schema constraint."""

    path: str
    message: str


class HttpRequestDescriptor(BaseModel):
    """A fully assembled outbound request."""

    method: HttpMethod
    url: str
    query: dict[str, str] = Field(default_factory=dict)
    body: dict[str, Any] | None = None
    headers: dict[str, str] = Field(default_factory=dict, repr=False)


class HttpResponse(BaseModel):
    """What the transport received back."""

    status_code: int
    body: Any = None
    headers: dict[str, str] = Field(default_factory=dict, repr=False)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300
