"""HTTP clients for the secret store and OAuth backend services."""

from toolgate_tools.clients.secret_service import SecretServiceClient, SecretServiceError
from toolgate_tools.clients.tool_auth_service import ToolAuthServiceClient

__all__ = ["SecretServiceClient", "SecretServiceError", "ToolAuthServiceClient"]
