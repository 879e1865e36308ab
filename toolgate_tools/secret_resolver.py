"""Secret resolution.

Fetches the secrets and action confirmations a tool requires for one user.
"""

import asyncio
from collections.abc import Sequence

from toolgate_obs.logging import get_logger
from toolgate_tools.base import SecretStore
from toolgate_tools.exceptions import CollaboratorCommunicationError
from toolgate_tools.schemas import UtilityProvider, is_action_confirmation

logger = get_logger(__name__)


class SecretResolver:
    """Resolves named secrets against the secret store.

    Lookups for different keys run concurrently and are independent: a
    lookup that fails or finds nothing resolves that key to None without
    affecting the others.

    Example:
        >>> resolver = SecretResolver(store)
        >>> values = await resolver.fetch_secrets("user-1", UtilityProvider.STRIPE, ["api_secret_key"])
        >>> values
        {'api_secret_key': 'sk_live_...'}
    """

    def __init__(self, store: SecretStore):
        self.store = store

    async def fetch_secrets(
        self,
        user_id: str,
        provider: UtilityProvider,
        secret_keys: Sequence[str],
    ) -> dict[str, str | None]:
        """Fetch every requested secret.

        Args:
            user_id: Owner of the secrets
            provider: Utility provider the secrets belong to
            secret_keys: Secret identifiers to look up

        Returns:
            Mapping of every requested key to its value, or None if missing

        Raises:
            CollaboratorCommunicationError: The secret store is not usable at all.
                Lookups still in flight are cancelled.
        """
        tasks = [
            asyncio.create_task(self._fetch_one(user_id, provider, key)) for key in secret_keys
        ]
        try:
            values = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise
        results = dict(zip(secret_keys, values))

        logger.debug(
            "secrets_fetched",
            requested=list(secret_keys),
            found=[key for key, value in results.items() if value is not None],
        )
        return results

    async def _fetch_one(
        self, user_id: str, provider: UtilityProvider, secret_key: str
    ) -> str | None:
        try:
            return await self.store.get_secret(user_id, provider, secret_key)
        except CollaboratorCommunicationError:
            # Store misconfiguration is not a per-key failure.
            raise
        except Exception as e:
            logger.warning(
                "secret_fetch_failed",
                secret_key=secret_key,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None


def is_secret_satisfied(secret_key: str, value: str | None) -> bool:
    """Decide whether a fetched secret value satisfies the requirement.

    Action confirmations only count when stored as exactly "true", so a
    declined or incomplete confirmation is distinguishable from a missing
    one but still unmet.
    """
    if not value:
        return False
    if is_action_confirmation(secret_key):
        return value == "true"
    return True
