"""Prerequisite checking (secrets, action confirmations, OAuth)."""

from pydantic import SecretStr

from toolgate_obs.logging import get_logger
from toolgate_tools.authorization import AuthorizationResolver, AuthorizationStatus
from toolgate_tools.exceptions import UpstreamConfigurationError
from toolgate_tools.outcomes import PrerequisiteResult, SetupNeededOutcome
from toolgate_tools.schemas import AuthMethod, Credentials, ToolConfig, is_action_confirmation
from toolgate_tools.secret_resolver import SecretResolver, is_secret_satisfied

logger = get_logger(__name__)


class PrerequisiteChecker:
    """Decides whether a tool can run for a user, and with which credentials.

    Checks, in order:
    1. Required secrets and action confirmations (all fetched, gaps collected)
    2. OAuth authorization, for OAuth tools

    An unauthorized OAuth tool is reported alone: the returned setup
    descriptor carries only the authorization URL, even when secrets are
    also missing. The redirect has to be completed before anything else.
    """

    def __init__(self, secrets: SecretResolver, authorization: AuthorizationResolver):
        self.secrets = secrets
        self.authorization = authorization

    async def check(self, config: ToolConfig, user_id: str) -> PrerequisiteResult:
        """Check every prerequisite of a tool.

        Args:
            config: The tool configuration
            user_id: The calling user

        Returns:
            PrerequisiteResult with credentials when met, or a setup-needed
            descriptor when not

        Raises:
            UpstreamConfigurationError: OAuth tool without scopes
            CollaboratorCommunicationError: Secret store or OAuth backend failed
        """
        log = logger.bind(tool_id=config.id, user_id=user_id)
        provider = config.utility_provider.value

        api_key: str | None = None
        required_secret_inputs: list[str] = []
        required_action_confirmations: list[str] = []

        if config.required_secrets:
            values = await self.secrets.fetch_secrets(
                user_id, config.utility_provider, config.required_secrets
            )
            for secret_key in config.required_secrets:
                value = values.get(secret_key)
                if not is_secret_satisfied(secret_key, value):
                    if is_action_confirmation(secret_key):
                        required_action_confirmations.append(secret_key)
                    else:
                        required_secret_inputs.append(secret_key)
                    log.info("secret_missing_or_invalid", secret_key=secret_key)
                if (
                    config.auth_method == AuthMethod.API_KEY
                    and config.api_key_details is not None
                    and config.api_key_details.secret_name == secret_key
                    and value
                ):
                    api_key = value

        oauth_token: SecretStr | None = None
        if config.auth_method == AuthMethod.OAUTH:
            if not config.required_scopes:
                raise UpstreamConfigurationError(
                    f"Configuration error: OAuth tool '{config.id}' must define requiredScopes."
                )
            status = await self.authorization.check_authorization(
                user_id, config.utility_provider, config.required_scopes
            )
            if not status.has_auth:
                log.info("prerequisites_unmet_oauth")
                return PrerequisiteResult.unmet(self._oauth_setup(config, status))
            oauth_token = status.access_token

        if required_secret_inputs or required_action_confirmations:
            log.info(
                "prerequisites_unmet_secrets",
                required_secret_inputs=required_secret_inputs,
                required_action_confirmations=required_action_confirmations,
            )
            return PrerequisiteResult.unmet(
                SetupNeededOutcome(
                    title=f"Configure {provider}",
                    description=config.description,
                    message=(
                        f"Configuration required for {provider}. Please provide the "
                        "following details or confirm actions."
                    ),
                    utility_provider=config.utility_provider,
                    required_secret_inputs=required_secret_inputs,
                    required_action_confirmations=required_action_confirmations,
                )
            )

        log.info("prerequisites_met")
        return PrerequisiteResult.satisfied(
            Credentials(
                api_key=SecretStr(api_key) if api_key is not None else None,
                oauth_token=oauth_token,
            )
        )

    @staticmethod
    def _oauth_setup(config: ToolConfig, status: AuthorizationStatus) -> SetupNeededOutcome:
        provider = config.utility_provider.value
        return SetupNeededOutcome(
            title=f"Connect {provider}",
            description=config.description,
            message=f"Authentication required for {provider}.",
            utility_provider=config.utility_provider,
            oauth_provider=status.oauth_provider,
            required_secret_inputs=[],
            required_action_confirmations=[],
            oauth_authorization_url=status.authorization_url,
        )
