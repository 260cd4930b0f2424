"""Builders for Tigris extension API requests."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Mapping
from urllib.parse import urlencode

from botocore.awsrequest import AWSRequest

from ...constants import (
    CONTENT_TYPE_JSON,
    HEADER_ACCEPT,
    HEADER_AMZ_ACL,
    HEADER_AMZ_PUBLIC_LIST_OBJECTS,
    HEADER_CONTENT_TYPE,
    OP_GET_BUCKET_METADATA,
    OP_UPDATE_BUCKET,
    QUERY_METADATA,
)
from .models import UNSET, BucketUpdateInput, validate_bucket_name


@dataclass(frozen=True)
class ApiRequest:
    """Immutable, replayable description of one HTTP request.

    The body is held as bytes so every attempt transmits identical content.
    """

    method: str
    url: str
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes = b""
    operation: str = field(default="", compare=False)

    @classmethod
    def create(
        cls,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        body: bytes | str | BinaryIO | None = None,
        operation: str = "",
    ) -> ApiRequest:
        """Create a request, draining stream bodies into bytes up front."""
        return cls(
            method=method.upper(),
            url=url,
            headers=tuple((headers or {}).items()),
            body=materialize_body(body),
            operation=operation,
        )

    def header(self, name: str) -> str | None:
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None

    def clone(self) -> AWSRequest:
        """Fresh mutable request for a single attempt."""
        return AWSRequest(
            method=self.method,
            url=self.url,
            headers=dict(self.headers),
            data=self.body,
        )


def materialize_body(body: bytes | str | BinaryIO | None) -> bytes:
    if body is None:
        return b""
    if isinstance(body, bytes):
        return body
    if isinstance(body, (bytearray, memoryview)):
        return bytes(body)
    if isinstance(body, str):
        return body.encode("utf-8")
    if hasattr(body, "read"):
        content = body.read()
        return content.encode("utf-8") if isinstance(content, str) else bytes(content)
    raise TypeError(f"unsupported request body type: {type(body).__name__}")


def bucket_url(endpoint: str, bucket: str, params: Mapping[str, str] | None = None) -> str:
    """Build the URL of a bucket on the extension API.

    Args:
        endpoint: Service endpoint URL
        bucket: Bucket name
        params: Optional query parameters, encoded in sorted key order

    Returns:
        Bucket URL
    """
    url = f"{endpoint.rstrip('/')}/{bucket}"
    if not params:
        return url
    return f"{url}?{urlencode(sorted(params.items()))}"


def _json_headers() -> dict[str, str]:
    return {
        HEADER_CONTENT_TYPE: CONTENT_TYPE_JSON,
        HEADER_ACCEPT: CONTENT_TYPE_JSON,
    }


def build_update_body(update: BucketUpdateInput) -> dict[str, Any]:
    """JSON body holding only the website and shadow fields that changed."""
    body: dict[str, Any] = {}
    if update.website is not UNSET:
        body["website"] = update.website.to_dict()
    if update.shadow is not UNSET:
        body["shadow_bucket"] = update.shadow.to_dict()
    return body


def build_update_headers(update: BucketUpdateInput) -> dict[str, str]:
    """Headers for the access settings that changed."""
    headers = _json_headers()
    if update.acl is not UNSET:
        headers[HEADER_AMZ_ACL] = update.acl.value
    if update.public_list_objects is not UNSET:
        headers[HEADER_AMZ_PUBLIC_LIST_OBJECTS] = "true" if update.public_list_objects else "false"
    return headers


def build_update_request(endpoint: str, update: BucketUpdateInput) -> ApiRequest:
    """Build the PATCH request applying a bucket changeset."""
    validate_bucket_name(update.bucket)
    return ApiRequest.create(
        "PATCH",
        bucket_url(endpoint, update.bucket),
        headers=build_update_headers(update),
        body=json.dumps(build_update_body(update), separators=(",", ":")),
        operation=OP_UPDATE_BUCKET,
    )


def build_metadata_request(endpoint: str, bucket: str) -> ApiRequest:
    """Build the GET request fetching bucket metadata."""
    validate_bucket_name(bucket)
    return ApiRequest.create(
        "GET",
        bucket_url(endpoint, bucket, {QUERY_METADATA: ""}),
        headers=_json_headers(),
        operation=OP_GET_BUCKET_METADATA,
    )
