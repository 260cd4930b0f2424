"""Builders for provider configuration and bucket changesets."""

from .bucket import (
    bucket_state_from_metadata,
    create_bucket_update_from_spec,
    public_access_reset_input,
    shadow_reset_input,
    website_reset_input,
)
from .provider import ProviderConfig, create_config_from_spec, create_provider_from_spec

__all__ = [
    "ProviderConfig",
    "bucket_state_from_metadata",
    "create_bucket_update_from_spec",
    "create_config_from_spec",
    "create_provider_from_spec",
    "public_access_reset_input",
    "shadow_reset_input",
    "website_reset_input",
]
