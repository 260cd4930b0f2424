"""Constants for the Tigris S3 provider."""

# Service defaults
DEFAULT_ENDPOINT = "https://fly.storage.tigris.dev"
DEFAULT_REGION = "auto"
SIGNING_SERVICE = "s3"

# Environment variables
ENV_ACCESS_KEY_ID = "AWS_ACCESS_KEY_ID"
ENV_SECRET_ACCESS_KEY = "AWS_SECRET_ACCESS_KEY"
ENV_ENDPOINT = "TIGRIS_ENDPOINT"

# Retry defaults (seconds)
DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_BASE_DELAY = 3.0
DEFAULT_MAX_DELAY = 60.0
DEFAULT_REQUEST_TIMEOUT = 30.0

# Request headers
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_ACCEPT = "Accept"
HEADER_AMZ_CONTENT_SHA = "X-Amz-Content-Sha256"
HEADER_AMZ_IDENTITY_ID = "S3-Identity-Id"
HEADER_AMZ_ACL = "X-Amz-Acl"
HEADER_AMZ_PUBLIC_LIST_OBJECTS = "X-Amz-Acl-Public-List-Objects-Enabled"

CONTENT_TYPE_JSON = "application/json"

# Query parameter selecting the metadata view of a bucket
QUERY_METADATA = "metadata"

# Update outcomes reported by the service
UPDATE_SUCCESS = "success"
UPDATE_NOT_MODIFIED = "not modified"
UPDATE_OK_STATUSES = frozenset({UPDATE_SUCCESS, UPDATE_NOT_MODIFIED})

# Resource attribute names
ATTR_BUCKET = "bucket"
ATTR_ACL = "acl"
ATTR_PUBLIC_LIST_OBJECTS = "public_list_objects"
ATTR_DOMAIN_NAME = "domain_name"
ATTR_SHADOW_BUCKET = "shadow_bucket"
ATTR_SHADOW_ACCESS_KEY = "shadow_access_key"
ATTR_SHADOW_SECRET_KEY = "shadow_secret_key"
ATTR_SHADOW_REGION = "shadow_region"
ATTR_SHADOW_ENDPOINT = "shadow_endpoint"
ATTR_SHADOW_WRITE_THROUGH = "shadow_write_through"

SHADOW_ATTRS = (
    ATTR_SHADOW_BUCKET,
    ATTR_SHADOW_ACCESS_KEY,
    ATTR_SHADOW_SECRET_KEY,
    ATTR_SHADOW_REGION,
    ATTR_SHADOW_ENDPOINT,
    ATTR_SHADOW_WRITE_THROUGH,
)

# Shadow bucket defaults
DEFAULT_SHADOW_REGION = "us-east-1"
DEFAULT_SHADOW_ENDPOINT = "https://s3.us-east-1.amazonaws.com"
DEFAULT_SHADOW_WRITE_THROUGH = True

# Operation names used in logs and metrics
OP_CREATE_BUCKET = "create_bucket"
OP_UPDATE_BUCKET = "update_bucket"
OP_HEAD_BUCKET = "head_bucket"
OP_DELETE_BUCKET = "delete_bucket"
OP_GET_BUCKET_METADATA = "get_bucket_metadata"

API_TYPE_S3 = "s3"
API_TYPE_TIGRIS = "tigris"
