"""Helpers shared by the network-backed tools.

Provider failures are logged with their type only and re-raised as
ToolExecutionError carrying the caller's generic message, so neither
provider error text nor URLs containing credentials reach the model.
"""

import logging
from typing import Any

import httpx
from pydantic import SecretStr

from finchat_server.errors import ConfigurationError, ToolExecutionError
from finchat_server.tools.registry import ToolContext

logger = logging.getLogger(__name__)


def require_credential(secret: SecretStr | None, message: str) -> str:
    """Return the secret value or raise ConfigurationError.

    Args:
        secret: The configured credential, if any
        message: Error message used when the credential is missing
    """
    if secret is None:
        raise ConfigurationError(message)
    value = secret.get_secret_value().strip()
    if not value:
        raise ConfigurationError(message)
    return value


async def fetch_json(
    context: ToolContext,
    url: str,
    failure_message: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> Any:
    """GET a URL and decode its JSON body.

    Args:
        context: Tool context holding the shared HTTP client
        url: Absolute URL to request
        failure_message: Message of the ToolExecutionError raised on failure
        params: Optional query parameters
        headers: Optional request headers

    Raises:
        ToolExecutionError: On network errors, non-2xx statuses or invalid JSON
    """
    if context.http is None:
        raise ToolExecutionError(failure_message)

    try:
        response = await context.http.get(url, params=params, headers=headers)
        response.raise_for_status()
        return response.json()
    except httpx.HTTPStatusError as e:
        logger.warning(f"{failure_message}: provider returned {e.response.status_code}")
        raise ToolExecutionError(failure_message) from e
    except httpx.HTTPError as e:
        logger.warning(f"{failure_message}: {type(e).__name__}")
        raise ToolExecutionError(failure_message) from e
    except ValueError as e:
        logger.warning(f"{failure_message}: invalid JSON body")
        raise ToolExecutionError(failure_message) from e
