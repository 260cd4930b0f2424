"""Builders mapping bucket resource attributes to changesets and back."""

from __future__ import annotations

from typing import Any, Collection, Mapping

from ..constants import (
    ATTR_ACL,
    ATTR_BUCKET,
    ATTR_DOMAIN_NAME,
    ATTR_PUBLIC_LIST_OBJECTS,
    ATTR_SHADOW_ACCESS_KEY,
    ATTR_SHADOW_BUCKET,
    ATTR_SHADOW_ENDPOINT,
    ATTR_SHADOW_REGION,
    ATTR_SHADOW_SECRET_KEY,
    ATTR_SHADOW_WRITE_THROUGH,
    DEFAULT_SHADOW_ENDPOINT,
    DEFAULT_SHADOW_REGION,
    DEFAULT_SHADOW_WRITE_THROUGH,
    SHADOW_ATTRS,
)
from ..exceptions import BucketValidationError
from ..services.tigris.models import (
    BucketCannedACL,
    BucketMetadata,
    BucketShadow,
    BucketUpdateInput,
    BucketWebsite,
    parse_acl,
    parse_flag,
)

_REQUIRED_SHADOW_ATTRS = (ATTR_SHADOW_BUCKET, ATTR_SHADOW_ACCESS_KEY, ATTR_SHADOW_SECRET_KEY)


def create_bucket_update_from_spec(
    spec: Mapping[str, Any],
    changed: Collection[str] | None = None,
) -> BucketUpdateInput:
    """Create a bucket changeset from resource attributes.

    Args:
        spec: Resource attributes keyed by attribute name
        changed: Attributes the caller wants to change. When None, every
            attribute present in ``spec`` is included, and an ACL or public
            listing setting brings the other along with its default
            (``private`` and False). Any shadow attribute marks the whole
            shadow configuration as changed.

    Returns:
        Changeset containing only the selected attributes

    Raises:
        BucketValidationError: If the bucket name or a required shadow attribute is missing
    """
    bucket = spec.get(ATTR_BUCKET)
    if not bucket:
        raise BucketValidationError("bucket name is required")

    def selected(attr: str) -> bool:
        return attr in spec if changed is None else attr in changed

    fields: dict[str, Any] = {}

    # A fresh bucket gets both access settings once either one is given.
    access_together = changed is None and (ATTR_ACL in spec or ATTR_PUBLIC_LIST_OBJECTS in spec)

    if access_together or selected(ATTR_ACL):
        fields["acl"] = parse_acl(spec.get(ATTR_ACL))

    if access_together or selected(ATTR_PUBLIC_LIST_OBJECTS):
        fields["public_list_objects"] = parse_flag(spec.get(ATTR_PUBLIC_LIST_OBJECTS), default=False)

    if selected(ATTR_DOMAIN_NAME):
        fields["website"] = BucketWebsite(domain_name=spec.get(ATTR_DOMAIN_NAME) or "")

    if any(selected(attr) for attr in SHADOW_ATTRS):
        fields["shadow"] = _shadow_from_spec(spec)

    return BucketUpdateInput(bucket=bucket, **fields)


def _shadow_from_spec(spec: Mapping[str, Any]) -> BucketShadow:
    missing = [attr for attr in _REQUIRED_SHADOW_ATTRS if not spec.get(attr)]
    if missing:
        raise BucketValidationError(f"shadow configuration requires {', '.join(missing)}")

    write_through = spec.get(ATTR_SHADOW_WRITE_THROUGH)
    return BucketShadow(
        name=spec[ATTR_SHADOW_BUCKET],
        access_key=spec[ATTR_SHADOW_ACCESS_KEY],
        secret_key=spec[ATTR_SHADOW_SECRET_KEY],
        region=spec.get(ATTR_SHADOW_REGION) or DEFAULT_SHADOW_REGION,
        endpoint=spec.get(ATTR_SHADOW_ENDPOINT) or DEFAULT_SHADOW_ENDPOINT,
        write_through=DEFAULT_SHADOW_WRITE_THROUGH if write_through is None else bool(write_through),
    )


def public_access_reset_input(bucket: str) -> BucketUpdateInput:
    """Changeset restoring the default access settings."""
    return BucketUpdateInput(bucket=bucket, acl=BucketCannedACL.PRIVATE, public_list_objects=True)


def website_reset_input(bucket: str) -> BucketUpdateInput:
    """Changeset removing the custom website domain."""
    return BucketUpdateInput(bucket=bucket, website=BucketWebsite())


def shadow_reset_input(bucket: str) -> BucketUpdateInput:
    """Changeset removing the shadow bucket configuration."""
    return BucketUpdateInput(bucket=bucket, shadow=BucketShadow())


def bucket_state_from_metadata(bucket: str, metadata: BucketMetadata) -> dict[str, Any]:
    """Map service metadata to resource attributes.

    ACL and public listing are always present with their defaults applied.
    The domain is present only when a website is configured, shadow
    attributes only when the shadow bucket has a name.

    Args:
        bucket: Bucket name the caller asked for
        metadata: Metadata reported by the service

    Returns:
        Attribute mapping
    """
    state: dict[str, Any] = {
        ATTR_BUCKET: bucket,
        ATTR_ACL: metadata.acl.value,
        ATTR_PUBLIC_LIST_OBJECTS: metadata.public_list_objects,
    }

    if metadata.website is not None and metadata.website.domain_name:
        state[ATTR_DOMAIN_NAME] = metadata.website.domain_name

    shadow = metadata.shadow
    if shadow is not None and shadow.name:
        state.update({
            ATTR_SHADOW_BUCKET: shadow.name,
            ATTR_SHADOW_ACCESS_KEY: shadow.access_key,
            ATTR_SHADOW_SECRET_KEY: shadow.secret_key,
            ATTR_SHADOW_REGION: shadow.region,
            ATTR_SHADOW_ENDPOINT: shadow.endpoint,
            ATTR_SHADOW_WRITE_THROUGH: shadow.write_through,
        })

    return state
