"""Superset Python client.

A thin client for the Superset REST API: login, list dashboards, and export
or import dashboard archives.
"""

import logging

from superset_client.client import SupersetClient, is_download_success, is_generic_success
from superset_client.exceptions import (
    AuthenticationError,
    SupersetError,
    UnexpectedResponseError,
)
from superset_client.models import ApiRequest, ApiResponse, Session

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "SupersetClient",
    "ApiRequest",
    "ApiResponse",
    "AuthenticationError",
    "Session",
    "SupersetError",
    "UnexpectedResponseError",
    "is_download_success",
    "is_generic_success",
]
