"""HTTP request construction.

Turns a tool's declarative ApiDetails, the validated parameters and the
resolved credentials into a concrete HttpRequestDescriptor.
"""

import base64
import json
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

from toolgate_tools.exceptions import (
    MissingPathParameterError,
    ToolEngineError,
    UpstreamConfigurationError,
)
from toolgate_tools.schemas import (
    ApiDetails,
    ApiKeyAuthScheme,
    ApiKeyDetails,
    AuthMethod,
    Credentials,
    HttpRequestDescriptor,
    QueryParamMapping,
    ToolConfig,
)

# Characters encodeURIComponent leaves untouched besides alphanumerics
_PATH_SAFE_CHARS = "-_.!~*'()"


def stringify_param(value: Any) -> str:
    """Render a parameter value for a URL path segment or query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, dict)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def encode_path_segment(value: Any) -> str:
    return quote(stringify_param(value), safe=_PATH_SAFE_CHARS)


def _build_path(api_details: ApiDetails, params: dict[str, Any]) -> str:
    path = api_details.path_template
    mappings = api_details.param_mappings
    if mappings is None or not mappings.path:
        return path

    for param_name, placeholder in mappings.path.items():
        value = params.get(param_name)
        if value is None or value == "":
            raise MissingPathParameterError(param_name)
        path = path.replace(f"{{{placeholder}}}", encode_path_segment(value))
    return path


def _build_query(api_details: ApiDetails, params: dict[str, Any]) -> dict[str, str]:
    mappings = api_details.param_mappings
    if mappings is None or not mappings.query:
        return {}

    query: dict[str, str] = {}
    for param_name, mapping in mappings.query.items():
        value = params.get(param_name)
        if value is None:
            continue
        if isinstance(mapping, QueryParamMapping):
            if mapping.transform == "joinComma" and isinstance(value, (list, tuple)):
                query[mapping.target] = ",".join(stringify_param(item) for item in value)
            else:
                query[mapping.target] = stringify_param(value)
        else:
            query[mapping] = stringify_param(value)
    return query


def _build_body(api_details: ApiDetails, params: dict[str, Any]) -> dict[str, Any] | None:
    mappings = api_details.param_mappings
    if mappings is None or mappings.body is None:
        return None
    return {
        target: params[param_name]
        for param_name, target in mappings.body.items()
        if params.get(param_name) is not None
    }


# ============================================================================
# AUTH HEADERS
# ============================================================================


def _require(secret: Any, what: str) -> str:
    if secret is None or not secret.get_secret_value():
        raise ToolEngineError(f"{what} not available after prerequisite check.")
    return secret.get_secret_value()


def _basic(user: str, password: str) -> str:
    token = base64.b64encode(f"{user}:{password}".encode()).decode()
    return f"Basic {token}"


def _oauth_headers(details: ApiKeyDetails | None, creds: Credentials) -> dict[str, str]:
    return {"Authorization": f"Bearer {_require(creds.oauth_token, 'OAuth token')}"}


def _bearer_headers(details: ApiKeyDetails | None, creds: Credentials) -> dict[str, str]:
    return {"Authorization": f"Bearer {_require(creds.api_key, 'API key')}"}


def _basic_user_headers(details: ApiKeyDetails | None, creds: Credentials) -> dict[str, str]:
    return {"Authorization": _basic(_require(creds.api_key, "API key"), "")}


def _basic_pass_headers(details: ApiKeyDetails | None, creds: Credentials) -> dict[str, str]:
    return {"Authorization": _basic("", _require(creds.api_key, "API key"))}


def _custom_header_headers(details: ApiKeyDetails | None, creds: Credentials) -> dict[str, str]:
    if details is None or not details.header_name:
        raise UpstreamConfigurationError("API key scheme 'Header' requires headerName.")
    return {details.header_name: _require(creds.api_key, "API key")}


def _no_auth_headers(details: ApiKeyDetails | None, creds: Credentials) -> dict[str, str]:
    return {}


AuthHeaderFactory = Callable[[ApiKeyDetails | None, Credentials], dict[str, str]]

# One entry per supported (authMethod, scheme) pair; anything else is a
# configuration error.
AUTH_HEADER_FACTORIES: dict[tuple[AuthMethod, ApiKeyAuthScheme | None], AuthHeaderFactory] = {
    (AuthMethod.NONE, None): _no_auth_headers,
    (AuthMethod.OAUTH, None): _oauth_headers,
    (AuthMethod.API_KEY, ApiKeyAuthScheme.BEARER): _bearer_headers,
    (AuthMethod.API_KEY, ApiKeyAuthScheme.BASIC_USER): _basic_user_headers,
    (AuthMethod.API_KEY, ApiKeyAuthScheme.BASIC_PASS): _basic_pass_headers,
    (AuthMethod.API_KEY, ApiKeyAuthScheme.HEADER): _custom_header_headers,
}


def build_auth_headers(config: ToolConfig, credentials: Credentials) -> dict[str, str]:
    """Headers that authenticate the outbound call.

    Raises:
        UpstreamConfigurationError: Unsupported auth method / scheme combination
    """
    details = config.api_key_details
    scheme = details.scheme if config.auth_method == AuthMethod.API_KEY and details else None
    factory = AUTH_HEADER_FACTORIES.get((config.auth_method, scheme))
    if factory is None:
        raise UpstreamConfigurationError(
            f"Unsupported auth configuration for tool '{config.id}': "
            f"authMethod={config.auth_method.value}, scheme={scheme.value if scheme else None}"
        )
    return factory(details, credentials)


def _merge_headers(static: dict[str, str], overrides: dict[str, str]) -> dict[str, str]:
    overridden = {name.lower() for name in overrides}
    merged = {name: value for name, value in static.items() if name.lower() not in overridden}
    merged.update(overrides)
    return merged


def build_request(
    config: ToolConfig,
    validated_params: dict[str, Any],
    credentials: Credentials,
) -> HttpRequestDescriptor:
    """Assemble the outbound request for a tool.

    Args:
        config: Tool configuration; must declare apiDetails
        validated_params: Parameters that passed schema validation
        credentials: Credentials resolved by the prerequisite checker

    Returns:
        HttpRequestDescriptor ready for the transport

    Raises:
        MissingPathParameterError: A path-mapped parameter has no value
        UpstreamConfigurationError: The tool's request or auth config is unusable
    """
    api_details = config.api_details
    if api_details is None:
        raise UpstreamConfigurationError(f"Tool '{config.id}' does not declare apiDetails.")

    headers = _merge_headers(
        dict(api_details.static_headers or {}),
        build_auth_headers(config, credentials),
    )

    return HttpRequestDescriptor(
        method=api_details.method,
        url=f"{api_details.base_url}{_build_path(api_details, validated_params)}",
        query=_build_query(api_details, validated_params),
        body=_build_body(api_details, validated_params),
        headers=headers,
    )
