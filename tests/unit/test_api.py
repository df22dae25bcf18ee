"""Unit tests for the request builders."""

import json
from urllib.parse import parse_qs, urlsplit

from superset_client import api


def _query(url: str) -> dict:
    return parse_qs(urlsplit(url).query)


class TestBuildUrl:
    """Test URL construction."""

    def test_without_params(self) -> None:
        """Test a plain endpoint URL."""
        assert (
            api.build_url("localhost", 8088, api.LOGIN_ENDPOINT)
            == "http://localhost:8088/api/v1/security/login"
        )

    def test_keeps_trailing_slash(self) -> None:
        """Test endpoint paths are not normalised."""
        url = api.build_url("superset.local", 80, api.CSRF_TOKEN_ENDPOINT)
        assert url == "http://superset.local:80/api/v1/security/csrf_token/"

    def test_params_are_percent_encoded(self) -> None:
        """Test query values are encoded."""
        url = api.build_url("localhost", 8088, api.EXPORT_DASHBOARD_ENDPOINT, {"q": "[1]"})
        assert url == "http://localhost:8088/api/v1/dashboard/export/?q=%5B1%5D"


class TestLoginRequest:
    """Test the login request."""

    def test_shape(self) -> None:
        """Test method, URL, headers and JSON body."""
        request = api.build_login_request("localhost", 8088, "admin", "secret")

        assert request.method == "POST"
        assert request.url == "http://localhost:8088/api/v1/security/login"
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["Accept"] == "application/json"
        assert "Authorization" not in request.headers
        assert request.body is not None
        assert json.loads(request.body) == {
            "username": "admin",
            "password": "secret",
            "provider": "db",
            "refresh": True,
        }


class TestAuthenticatedRequests:
    """Test requests that carry the bearer token."""

    def test_csrf_token_request(self) -> None:
        """Test the CSRF token request."""
        request = api.build_csrf_token_request("localhost", 8088, "T")

        assert request.method == "GET"
        assert request.url == "http://localhost:8088/api/v1/security/csrf_token/"
        assert request.headers["Authorization"] == "Bearer T"
        assert request.headers["Accept"] == "application/json"
        assert request.body is None

    def test_list_dashboards_request(self) -> None:
        """Test the list request selects title and id columns."""
        request = api.build_list_dashboards_request("localhost", 8088, "T")

        assert request.method == "GET"
        assert request.url.startswith("http://localhost:8088/api/v1/dashboard/?q=")
        assert "%7B" in request.url
        assert _query(request.url)["q"] == ['{"columns":["dashboard_title","id"]}']
        assert request.headers["Authorization"] == "Bearer T"
        assert request.headers["Accept"] == "application/json"

    def test_export_dashboard_request(self) -> None:
        """Test the export request asks for plain text."""
        request = api.build_export_dashboard_request("localhost", 8088, "T", 5)

        assert request.method == "GET"
        assert request.url.startswith("http://localhost:8088/api/v1/dashboard/export/?q=")
        assert _query(request.url)["q"] == ["[5]"]
        assert request.headers["Authorization"] == "Bearer T"
        assert request.headers["Accept"] == "text/plain"


class TestImportRequest:
    """Test the multipart import request."""

    def test_headers(self) -> None:
        """Test auth, CSRF and multipart headers."""
        request = api.build_import_dashboard_request(
            "localhost", 8088, "T", "C", b"zip-bytes", True, {"databases/database.yaml": "pw"}
        )

        assert request.method == "POST"
        assert request.url == "http://localhost:8088/api/v1/dashboard/import/"
        assert request.headers["Authorization"] == "Bearer T"
        assert request.headers["Accept"] == "application/json"
        assert request.headers["X-CSRF-Token"] == "C"
        assert request.headers["Content-Type"].startswith("multipart/form-data; boundary=")

    def test_parts(self) -> None:
        """Test the three form parts."""
        request = api.build_import_dashboard_request(
            "localhost", 8088, "T", "C", b"PK\x03\x04zip", True, {"databases/database.yaml": "pw"}
        )
        body = request.body
        assert body is not None

        assert b'name="formData"; filename="dashboard.zip"' in body
        assert b"Content-Type: application/octet-stream\r\n\r\nPK\x03\x04zip\r\n" in body
        assert b'name="overwrite"\r\n\r\ntrue\r\n' in body
        assert b'name="passwords"\r\n\r\n{"databases/database.yaml":"pw"}\r\n' in body

    def test_overwrite_false(self) -> None:
        """Test a false overwrite flag."""
        request = api.build_import_dashboard_request(
            "localhost", 8088, "T", "C", b"zip", False, None
        )
        assert request.body is not None
        assert b'name="overwrite"\r\n\r\nfalse\r\n' in request.body
        assert b'name="passwords"\r\n\r\n{}\r\n' in request.body


class TestPasswordsToText:
    """Test the passwords form value."""

    def test_string_sent_verbatim(self) -> None:
        """Test a JSON string is not re-encoded."""
        text = '{"databases/database.yaml": "pw"}'
        assert api.passwords_to_text(text) == text

    def test_dict_serialised_compactly(self) -> None:
        """Test a dict is serialised as compact JSON."""
        assert api.passwords_to_text({"a.yaml": "x"}) == '{"a.yaml":"x"}'

    def test_none(self) -> None:
        """Test no passwords becomes an empty object."""
        assert api.passwords_to_text(None) == "{}"
