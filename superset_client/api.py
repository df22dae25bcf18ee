"""Request builders for the Superset REST API.

Every function here is pure: it takes the connection parameters and tokens
explicitly and returns a frozen :class:`ApiRequest`. Nothing is sent.
"""

import json
from typing import Any, Dict, Mapping, Optional

import requests

from superset_client.models import ApiRequest

LOGIN_ENDPOINT = "/api/v1/security/login"
CSRF_TOKEN_ENDPOINT = "/api/v1/security/csrf_token/"
LIST_DASHBOARDS_ENDPOINT = "/api/v1/dashboard/"
EXPORT_DASHBOARD_ENDPOINT = "/api/v1/dashboard/export/"
IMPORT_DASHBOARD_ENDPOINT = "/api/v1/dashboard/import/"

APPLICATION_JSON = "application/json"
TEXT_PLAIN = "text/plain"
OCTET_STREAM = "application/octet-stream"

ARCHIVE_FILENAME = "dashboard.zip"
LIST_COLUMNS = ["dashboard_title", "id"]


def _to_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


def _auth_headers(bearer_token: str, accept: str = APPLICATION_JSON) -> Dict[str, str]:
    return {"Authorization": f"Bearer {bearer_token}", "Accept": accept}


def _prepare(
    method: str,
    url: str,
    headers: Dict[str, str],
    data: Any = None,
    files: Optional[Dict[str, Any]] = None,
) -> ApiRequest:
    """Encode a request with requests and freeze the result.

    Args:
        method: HTTP method
        url: Absolute URL
        headers: Headers to send
        data: Raw body or form fields
        files: Multipart file parts

    Returns:
        Frozen ApiRequest
    """
    prepared = requests.Request(method, url, headers=headers, data=data, files=files).prepare()
    body = prepared.body
    if isinstance(body, str):
        body = body.encode("utf-8")
    return ApiRequest(
        method=prepared.method or method,
        url=prepared.url or url,
        headers=dict(prepared.headers),
        body=body,
    )


def build_url(
    host: str, port: int, endpoint: str, params: Optional[Mapping[str, str]] = None
) -> str:
    """Build an http URL, percent-encoding any query parameters.

    Args:
        host: Server hostname
        port: Server port
        endpoint: Absolute API path
        params: Optional query parameters

    Returns:
        Full URL
    """
    url = f"http://{host}:{port}{endpoint}"
    if not params:
        return url
    prepared = requests.Request("GET", url, params=dict(params)).prepare()
    return prepared.url or url


def passwords_to_text(passwords: Any) -> str:
    """Return the form-field text for database passwords.

    Strings are assumed to be JSON already and are sent verbatim. Anything
    else is serialised as compact JSON; ``None`` becomes an empty object.
    """
    if passwords is None:
        return "{}"
    if isinstance(passwords, str):
        return passwords
    return _to_json(passwords)


def build_login_request(host: str, port: int, username: str, password: str) -> ApiRequest:
    """Build the login request that bootstraps authentication.

    Args:
        host: Server hostname
        port: Server port
        username: Database-provider username
        password: Database-provider password

    Returns:
        POST request carrying the credentials as JSON
    """
    body = _to_json(
        {"username": username, "password": password, "provider": "db", "refresh": True}
    )
    headers = {"Content-Type": APPLICATION_JSON, "Accept": APPLICATION_JSON}
    return _prepare("POST", build_url(host, port, LOGIN_ENDPOINT), headers, data=body)


def build_csrf_token_request(host: str, port: int, bearer_token: str) -> ApiRequest:
    """Build the request fetching a CSRF token."""
    return _prepare(
        "GET", build_url(host, port, CSRF_TOKEN_ENDPOINT), _auth_headers(bearer_token)
    )


def build_list_dashboards_request(host: str, port: int, bearer_token: str) -> ApiRequest:
    """Build the request listing dashboard titles and ids."""
    url = build_url(
        host, port, LIST_DASHBOARDS_ENDPOINT, {"q": _to_json({"columns": LIST_COLUMNS})}
    )
    return _prepare("GET", url, _auth_headers(bearer_token))


def build_export_dashboard_request(
    host: str, port: int, bearer_token: str, dashboard_id: int
) -> ApiRequest:
    """Build the request downloading one dashboard as a zip archive."""
    url = build_url(host, port, EXPORT_DASHBOARD_ENDPOINT, {"q": _to_json([dashboard_id])})
    return _prepare("GET", url, _auth_headers(bearer_token, accept=TEXT_PLAIN))


def build_import_dashboard_request(
    host: str,
    port: int,
    bearer_token: str,
    csrf_token: str,
    file_bytes: bytes,
    overwrite: bool,
    passwords: Any,
) -> ApiRequest:
    """Build the multipart request uploading a dashboard archive.

    Args:
        host: Server hostname
        port: Server port
        bearer_token: Access token from login
        csrf_token: Freshly fetched CSRF token
        file_bytes: Full content of the archive
        overwrite: Whether to replace an existing dashboard
        passwords: Database passwords keyed by config file name, as a dict
            or as a JSON string, e.g. ``{"databases/database.yaml": "secret"}``

    Returns:
        POST request with ``formData``, ``overwrite`` and ``passwords`` parts
    """
    headers = _auth_headers(bearer_token)
    headers["X-CSRF-Token"] = csrf_token
    fields = {
        "overwrite": str(overwrite).lower(),
        "passwords": passwords_to_text(passwords),
    }
    files = {"formData": (ARCHIVE_FILENAME, file_bytes, OCTET_STREAM)}
    return _prepare(
        "POST",
        build_url(host, port, IMPORT_DASHBOARD_ENDPOINT),
        headers,
        data=fields,
        files=files,
    )
