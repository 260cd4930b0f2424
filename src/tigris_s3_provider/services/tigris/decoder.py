"""Decoding of Tigris extension API responses."""

from __future__ import annotations

import json
import logging
from typing import Any

import requests
from botocore.exceptions import ClientError

from ...constants import UPDATE_OK_STATUSES
from ...exceptions import ApiError, ResponseDecodeError
from .models import BucketMetadata, BucketUpdateResponse

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = frozenset({"404", "NotFound", "NoSuchBucket"})

_MAX_ERROR_TEXT = 256


def _decode_json(response: requests.Response, what: str) -> dict[str, Any]:
    """Parse the body, mapping a malformed body to the right error class."""
    status = response.status_code
    try:
        data = json.loads(response.content or b"")
    except (ValueError, UnicodeDecodeError) as e:
        if status == 200:
            raise ResponseDecodeError(f"failed to read {what}: {e}", status=status) from e
        text = (response.text or "").strip()[:_MAX_ERROR_TEXT]
        raise ApiError(
            f"request failed with code: {status}" + (f": {text}" if text else ""),
            status=status,
        ) from e
    if not isinstance(data, dict):
        if status == 200:
            raise ResponseDecodeError(f"failed to read {what}: expected a JSON object", status=status)
        raise ApiError(f"request failed with code: {status}", status=status)
    return data


def _raise_for_status(data: dict[str, Any], status: int) -> None:
    if status == 200:
        return
    code = data.get("Code") or None
    message = data.get("Message") or None
    detail = ": ".join(part for part in (code, message) if part)
    raise ApiError(
        f"request failed with code: {status}" + (f" ({detail})" if detail else ""),
        status=status,
        code=code,
        server_message=message,
    )


def decode_update_response(response: requests.Response) -> BucketUpdateResponse:
    """Decode the response to a bucket update.

    Args:
        response: HTTP response

    Returns:
        Decoded update response

    Raises:
        ResponseDecodeError: If a 200 response does not carry valid JSON
        ApiError: If the request failed or the update was not applied
    """
    data = _decode_json(response, "update response")
    _raise_for_status(data, response.status_code)

    result = BucketUpdateResponse.from_dict(data)
    if result.update not in UPDATE_OK_STATUSES:
        raise ApiError(
            f"update failed with error: {result.error_message or result.update or 'unknown error'}",
            status=response.status_code,
            code=result.error_code or None,
            server_message=result.error_message or None,
        )
    return result


def decode_metadata_response(response: requests.Response) -> BucketMetadata:
    """Decode bucket metadata.

    Raises:
        ResponseDecodeError: If a 200 response does not carry valid JSON
        ApiError: If the request failed
    """
    data = _decode_json(response, "bucket metadata")
    _raise_for_status(data, response.status_code)
    return BucketMetadata.from_dict(data)


def error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


def is_not_found(error: ClientError) -> bool:
    """Whether an S3 error means the bucket does not exist."""
    if error_code(error) in NOT_FOUND_CODES:
        return True
    return error.response.get("ResponseMetadata", {}).get("HTTPStatusCode") == 404


def api_error_from_client_error(error: ClientError, operation: str) -> ApiError:
    """Wrap an S3 client error, keeping its status, code and message."""
    err = error.response.get("Error", {})
    status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return ApiError(
        f"{operation} failed: {error}",
        status=status,
        code=err.get("Code") or None,
        server_message=err.get("Message") or None,
    )
