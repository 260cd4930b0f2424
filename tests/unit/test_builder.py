"""Unit tests for extension API request builders."""

from __future__ import annotations

import io
import json

import pytest

from tigris_s3_provider.exceptions import BucketValidationError
from tigris_s3_provider.services.tigris.builder import (
    ApiRequest,
    bucket_url,
    build_metadata_request,
    build_update_request,
    materialize_body,
)
from tigris_s3_provider.services.tigris.models import BucketShadow, BucketUpdateInput, BucketWebsite

ENDPOINT = "https://fly.storage.tigris.dev"


class TestBucketUrl:
    """Test bucket URL construction."""

    def test_without_params(self) -> None:
        """Test a plain bucket URL."""
        assert bucket_url(ENDPOINT, "my-bucket") == "https://fly.storage.tigris.dev/my-bucket"

    def test_trailing_slash_on_endpoint(self) -> None:
        """Test that a trailing slash on the endpoint is not doubled."""
        assert bucket_url(ENDPOINT + "/", "my-bucket") == "https://fly.storage.tigris.dev/my-bucket"

    def test_metadata_marker(self) -> None:
        """Test the metadata query marker encoding."""
        assert bucket_url(ENDPOINT, "my-bucket", {"metadata": ""}) == (
            "https://fly.storage.tigris.dev/my-bucket?metadata="
        )

    def test_params_sorted(self) -> None:
        """Test that query parameters are encoded deterministically."""
        url = bucket_url(ENDPOINT, "my-bucket", {"z": "1", "a": "x y"})

        assert url.endswith("?a=x+y&z=1")


class TestBuildUpdateRequest:
    """Test PATCH request construction."""

    def test_acl_only(self) -> None:
        """Test that an ACL-only change sends the header and no body fields."""
        request = build_update_request(ENDPOINT, BucketUpdateInput(bucket="my-bucket", acl="public-read"))

        assert request.method == "PATCH"
        assert request.url == "https://fly.storage.tigris.dev/my-bucket"
        assert request.header("X-Amz-Acl") == "public-read"
        assert request.header("X-Amz-Acl-Public-List-Objects-Enabled") is None
        assert request.header("Content-Type") == "application/json"
        assert request.header("Accept") == "application/json"
        assert json.loads(request.body) == {}

    def test_listing_flag_header(self) -> None:
        """Test the public listing header values."""
        enabled = build_update_request(ENDPOINT, BucketUpdateInput(bucket="my-bucket", public_list_objects=True))
        disabled = build_update_request(ENDPOINT, BucketUpdateInput(bucket="my-bucket", public_list_objects=False))

        assert enabled.header("X-Amz-Acl-Public-List-Objects-Enabled") == "true"
        assert disabled.header("X-Amz-Acl-Public-List-Objects-Enabled") == "false"
        assert enabled.header("X-Amz-Acl") is None

    def test_website_only(self) -> None:
        """Test that a website change omits the shadow field and access headers."""
        request = build_update_request(
            ENDPOINT,
            BucketUpdateInput(bucket="my-bucket", website=BucketWebsite("assets.example.com")),
        )

        assert json.loads(request.body) == {"website": {"domain_name": "assets.example.com"}}
        assert request.header("X-Amz-Acl") is None

    def test_clearing_website(self) -> None:
        """Test that clearing the website sends an empty domain."""
        request = build_update_request(ENDPOINT, BucketUpdateInput(bucket="my-bucket", website=None))

        assert json.loads(request.body) == {"website": {"domain_name": ""}}

    def test_shadow(self) -> None:
        """Test the shadow body layout."""
        shadow = BucketShadow(
            name="origin",
            access_key="AKIAEXAMPLE",
            secret_key="secret",
            region="us-east-1",
            endpoint="https://s3.us-east-1.amazonaws.com",
            write_through=True,
        )
        request = build_update_request(ENDPOINT, BucketUpdateInput(bucket="my-bucket", shadow=shadow))

        assert json.loads(request.body) == {
            "shadow_bucket": {
                "access_key": "AKIAEXAMPLE",
                "secret_key": "secret",
                "region": "us-east-1",
                "name": "origin",
                "endpoint": "https://s3.us-east-1.amazonaws.com",
                "write_through": True,
            }
        }

    def test_invalid_bucket_rejected(self) -> None:
        """Test that the bucket name is validated first."""
        with pytest.raises(BucketValidationError):
            build_update_request(ENDPOINT, BucketUpdateInput(bucket="Bad_Bucket", acl="private"))


class TestBuildMetadataRequest:
    """Test metadata request construction."""

    def test_metadata_request(self) -> None:
        """Test the GET request for bucket metadata."""
        request = build_metadata_request(ENDPOINT, "my-bucket")

        assert request.method == "GET"
        assert request.url == "https://fly.storage.tigris.dev/my-bucket?metadata="
        assert request.body == b""
        assert request.operation == "get_bucket_metadata"


class TestApiRequest:
    """Test the replayable request value."""

    def test_stream_body_materialized_once(self) -> None:
        """Test that a stream body is drained into bytes at construction."""
        stream = io.BytesIO(b'{"a":1}')
        request = ApiRequest.create("patch", "https://example.com/b", body=stream)

        assert request.method == "PATCH"
        assert request.body == b'{"a":1}'
        assert stream.read() == b""

    def test_clones_are_independent(self) -> None:
        """Test that mutating a clone leaves the template untouched."""
        request = ApiRequest.create("PATCH", "https://example.com/b", {"X-Amz-Acl": "private"}, b"{}")

        first = request.clone()
        first.headers["Authorization"] = "stale"
        first.data = b"mutated"
        second = request.clone()

        assert "Authorization" not in second.headers
        assert second.data == b"{}"
        assert request.body == b"{}"

    def test_header_lookup_case_insensitive(self) -> None:
        """Test header lookup."""
        request = ApiRequest.create("GET", "https://example.com/b", {"X-Amz-Acl": "private"})

        assert request.header("x-amz-acl") == "private"
        assert request.header("missing") is None

    def test_materialize_body_types(self) -> None:
        """Test body materialization for supported types."""
        assert materialize_body(None) == b""
        assert materialize_body("{}") == b"{}"
        assert materialize_body(bytearray(b"ab")) == b"ab"
        assert materialize_body(io.StringIO("x")) == b"x"
        with pytest.raises(TypeError):
            materialize_body(42)
