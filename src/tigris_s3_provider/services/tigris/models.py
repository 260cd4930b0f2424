"""Models for Tigris bucket operations."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from ...constants import HEADER_AMZ_ACL, HEADER_AMZ_PUBLIC_LIST_OBJECTS
from ...exceptions import BucketValidationError

logger = logging.getLogger(__name__)

_BUCKET_NAME_RE = re.compile(r"[0-9a-z.-]{3,63}")
_IP_ADDRESS_RE = re.compile(r"\d+\.\d+\.\d+\.\d+")


class _Unset:
    """Marker for an optional field the caller did not specify."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


class BucketCannedACL(str, Enum):
    """Canned ACLs supported by the service."""

    PRIVATE = "private"
    PUBLIC_READ = "public-read"

    @classmethod
    def values(cls) -> list[str]:
        return [acl.value for acl in cls]


def validate_bucket_name(name: str) -> None:
    """Validate a bucket name against the DNS label rules.

    Args:
        name: Bucket name

    Raises:
        BucketValidationError: If the name is not a valid bucket name
    """
    if not name:
        raise BucketValidationError("bucket name is required")
    if not _BUCKET_NAME_RE.fullmatch(name):
        raise BucketValidationError(
            f"invalid bucket name {name!r}: must be 3-63 characters of lowercase letters, digits, '.' or '-'"
        )
    if _IP_ADDRESS_RE.fullmatch(name):
        raise BucketValidationError(f"invalid bucket name {name!r}: must not be formatted as an IP address")
    if name.startswith(".") or name.endswith("."):
        raise BucketValidationError(f"invalid bucket name {name!r}: must not start or end with '.'")
    if ".." in name:
        raise BucketValidationError(f"invalid bucket name {name!r}: must not contain consecutive periods")


def parse_acl(value: str | BucketCannedACL | None) -> BucketCannedACL:
    """Resolve an ACL value, defaulting to private when empty."""
    if not value:
        return BucketCannedACL.PRIVATE
    try:
        return BucketCannedACL(value)
    except ValueError as e:
        raise BucketValidationError(
            f"invalid canned ACL {value!r}, expected one of {BucketCannedACL.values()}"
        ) from e


def parse_flag(value: Any, default: bool) -> bool:
    """Parse a string-typed boolean flag reported by the service."""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text == "true":
        return True
    if text == "false":
        return False
    logger.warning(f"Unrecognised flag value {value!r}, using default {default}")
    return default


def _parse_timestamp(value: Any) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Could not parse timestamp {value!r}")
        return None


@dataclass(frozen=True)
class BucketWebsite:
    """Custom domain configuration. An empty domain clears it."""

    domain_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"domain_name": self.domain_name}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> BucketWebsite | None:
        if not data:
            return None
        return cls(domain_name=data.get("domain_name") or "")


@dataclass(frozen=True)
class BucketShadow:
    """Shadow bucket configuration. An all-empty value clears it."""

    name: str = ""
    access_key: str = ""
    secret_key: str = field(default="", repr=False)
    region: str = ""
    endpoint: str = ""
    write_through: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "access_key": self.access_key,
            "secret_key": self.secret_key,
            "region": self.region,
            "name": self.name,
            "endpoint": self.endpoint,
            "write_through": self.write_through,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> BucketShadow | None:
        if not data:
            return None
        return cls(
            name=data.get("name") or "",
            access_key=data.get("access_key") or "",
            secret_key=data.get("secret_key") or "",
            region=data.get("region") or "",
            endpoint=data.get("endpoint") or "",
            write_through=parse_flag(data.get("write_through"), default=False),
        )


@dataclass(frozen=True)
class BucketUpdateInput:
    """Changeset for a bucket.

    Every optional field defaults to ``UNSET`` and is then left untouched at
    the service. ``None`` clears the attribute: ACL resets to ``private``,
    website and shadow are sent as empty configurations.
    """

    bucket: str
    acl: BucketCannedACL | Any = UNSET
    public_list_objects: bool | Any = UNSET
    website: BucketWebsite | Any = UNSET
    shadow: BucketShadow | Any = UNSET

    def __post_init__(self) -> None:
        if self.acl is not UNSET:
            object.__setattr__(self, "acl", parse_acl(self.acl))
        if self.public_list_objects is not UNSET and not isinstance(self.public_list_objects, bool):
            raise BucketValidationError("public_list_objects must be a boolean")
        if self.website is None:
            object.__setattr__(self, "website", BucketWebsite())
        if self.shadow is None:
            object.__setattr__(self, "shadow", BucketShadow())

    def changed_fields(self) -> list[str]:
        """Names of the fields the caller asked to change."""
        return [
            name
            for name in ("acl", "public_list_objects", "website", "shadow")
            if getattr(self, name) is not UNSET
        ]

    def has_changes(self) -> bool:
        return bool(self.changed_fields())


@dataclass(frozen=True)
class BucketMD:
    """Access settings nested in bucket metadata, all string-typed."""

    acl: str = ""
    public_list_objects: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> BucketMD | None:
        if data is None:
            return None
        return cls(
            acl=data.get(HEADER_AMZ_ACL) or "",
            public_list_objects=str(data.get(HEADER_AMZ_PUBLIC_LIST_OBJECTS) or ""),
        )


@dataclass(frozen=True)
class BucketMetadata:
    """Bucket state as reported by the service."""

    name: str
    cache_control: str = ""
    object_regions: str = ""
    md: BucketMD | None = None
    shadow: BucketShadow | None = None
    website: BucketWebsite | None = None
    created_at: datetime | None = None
    initial_created_at: datetime | None = None

    @property
    def acl(self) -> BucketCannedACL:
        """Canned ACL of the bucket, ``private`` when not reported."""
        if self.md is None or not self.md.acl:
            return BucketCannedACL.PRIVATE
        try:
            return BucketCannedACL(self.md.acl)
        except ValueError:
            logger.warning(f"Bucket {self.name} reports unknown ACL {self.md.acl!r}, treating as private")
            return BucketCannedACL.PRIVATE

    @property
    def public_list_objects(self) -> bool:
        """Whether objects can be listed publicly, enabled when not reported."""
        if self.md is None:
            return True
        return parse_flag(self.md.public_list_objects, default=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BucketMetadata:
        return cls(
            name=data.get("name") or "",
            cache_control=data.get("cache_control") or "",
            object_regions=data.get("object_regions") or "",
            md=BucketMD.from_dict(data.get("md")),
            shadow=BucketShadow.from_dict(data.get("shadow_bucket")),
            website=BucketWebsite.from_dict(data.get("website")),
            created_at=_parse_timestamp(data.get("created_at")),
            initial_created_at=_parse_timestamp(data.get("initial_created_at")),
        )


@dataclass(frozen=True)
class BucketUpdateResponse:
    """Outcome of a bucket update."""

    update: str = ""
    error_message: str = ""
    error_code: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BucketUpdateResponse:
        return cls(
            update=data.get("Update") or "",
            error_message=data.get("Message") or "",
            error_code=data.get("Code") or "",
        )
