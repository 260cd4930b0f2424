"""Builder for Tigris provider instances."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping

from ..constants import (
    DEFAULT_BASE_DELAY,
    DEFAULT_ENDPOINT,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_DELAY,
    DEFAULT_REQUEST_TIMEOUT,
    ENV_ACCESS_KEY_ID,
    ENV_ENDPOINT,
    ENV_SECRET_ACCESS_KEY,
)
from ..exceptions import ConfigurationError
from ..services.tigris.client import TigrisProvider
from ..services.tigris.retry import RetryPolicy
from ..utils.errors import sanitize_dict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderConfig:
    """Resolved provider configuration."""

    access_key: str
    secret_key: str
    endpoint: str = DEFAULT_ENDPOINT
    identity_id: str | None = None
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay: float = DEFAULT_BASE_DELAY
    max_delay: float = DEFAULT_MAX_DELAY
    timeout: float = DEFAULT_REQUEST_TIMEOUT

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.max_attempts,
            base_delay=self.base_delay,
            max_delay=self.max_delay,
        )


def create_config_from_spec(
    spec: Mapping[str, Any],
    environ: Mapping[str, str] | None = None,
) -> ProviderConfig:
    """Resolve provider configuration from attributes and the environment.

    Explicit attributes win over environment variables. Credentials fall back
    to AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY, the endpoint to
    TIGRIS_ENDPOINT and then the public Tigris endpoint.

    Args:
        spec: Provider attributes (access_key, secret_key, endpoint, identity_id, retry, timeout)
        environ: Environment to read fallbacks from, defaults to os.environ

    Returns:
        Resolved configuration

    Raises:
        ConfigurationError: If credentials are missing or retry settings are invalid
    """
    env = os.environ if environ is None else environ

    access_key = spec.get("access_key") or env.get(ENV_ACCESS_KEY_ID)
    secret_key = spec.get("secret_key") or env.get(ENV_SECRET_ACCESS_KEY)
    endpoint = spec.get("endpoint") or env.get(ENV_ENDPOINT) or DEFAULT_ENDPOINT

    if not access_key or not secret_key:
        raise ConfigurationError(
            f"access_key and secret_key are required, set them explicitly or via "
            f"{ENV_ACCESS_KEY_ID} and {ENV_SECRET_ACCESS_KEY}"
        )

    retry = spec.get("retry") or {}
    try:
        policy = RetryPolicy(
            max_attempts=int(retry.get("max_attempts", DEFAULT_MAX_ATTEMPTS)),
            base_delay=float(retry.get("base_delay", DEFAULT_BASE_DELAY)),
            max_delay=float(retry.get("max_delay", DEFAULT_MAX_DELAY)),
        )
        timeout = float(spec.get("timeout", DEFAULT_REQUEST_TIMEOUT))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"invalid provider configuration: {e}") from e

    config = ProviderConfig(
        access_key=access_key,
        secret_key=secret_key,
        endpoint=endpoint,
        identity_id=spec.get("identity_id") or None,
        max_attempts=policy.max_attempts,
        base_delay=policy.base_delay,
        max_delay=policy.max_delay,
        timeout=timeout,
    )

    logger.debug(f"Resolved provider configuration: {sanitize_dict(dict(spec))}")
    return config


def create_provider_from_spec(
    spec: Mapping[str, Any],
    environ: Mapping[str, str] | None = None,
) -> TigrisProvider:
    """Create a Tigris provider instance from provider attributes.

    Args:
        spec: Provider attributes
        environ: Environment to read fallbacks from

    Returns:
        Configured Tigris provider instance
    """
    config = create_config_from_spec(spec, environ)
    return TigrisProvider(
        access_key=config.access_key,
        secret_key=config.secret_key,
        endpoint=config.endpoint,
        identity_id=config.identity_id,
        retry_policy=config.retry_policy,
        timeout=config.timeout,
    )
