# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

# HTTP subcode constants
HTTP_404 = "http_404"

# Upstream availability subcodes
UPSTREAM_NOT_CONFIGURED = "upstream_not_configured"
UPSTREAM_AUTH_FAILED = "upstream_auth_failed"
UPSTREAM_NETWORK_ERROR = "upstream_network_error"
UPSTREAM_INVALID_RESPONSE = "upstream_invalid_response"

# Validation subcodes
VALIDATION_MISSING_PARAMETER = "validation_missing_parameter"
VALIDATION_INVALID_FILENAME = "validation_invalid_filename"


def http_subcode(status_code: int) -> str:
    """Map an HTTP status to its subcode string (``http_<status>``)."""
    return f"http_{status_code}"
