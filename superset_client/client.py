"""Superset REST client.

Authenticates once at construction and then lists, exports and imports
dashboards over a single ``requests.Session``.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import requests
from pydantic import ValidationError

from superset_client import api
from superset_client.exceptions import AuthenticationError, UnexpectedResponseError
from superset_client.models import (
    ApiRequest,
    ApiResponse,
    CsrfTokenResponse,
    LoginResponse,
    Session,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
CHUNK_SIZE = 8192

PathLike = Union[str, Path]


def is_generic_success(status_code: int) -> bool:
    """Return True for any 2xx status."""
    return 200 <= status_code < 300


def is_download_success(status_code: int) -> bool:
    """Return True only for 200, the single status accepted for downloads."""
    return status_code == 200


class SupersetClient:
    """Client for the Superset dashboard API.

    Construction performs the login round trip, so a client object only
    exists once it holds a bearer token. The client keeps mutable session
    state (the CSRF token) and must not be shared between threads.

    Example:
        with SupersetClient("localhost", 8088, "admin", "admin") as client:
            dashboards = client.list_dashboards()
            client.export_dashboard(1, "dashboard.zip")
            client.import_dashboard("dashboard.zip", {"databases/examples.yaml": "pw"})
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the client and log in.

        Args:
            host: Hostname of the Superset server
            port: Port of the Superset server
            username: Username for the database auth provider
            password: Password for the database auth provider
            timeout: Request timeout in seconds
            session: Optional pre-configured requests session; it is not
                closed by :meth:`close`

        Raises:
            ValueError: If host, port or timeout is invalid
            AuthenticationError: If the login call fails
            requests.exceptions.RequestException: On transport failure
        """
        if not host:
            raise ValueError("host cannot be empty")
        if not 0 < port < 65536:
            raise ValueError(f"invalid port: {port}")
        if timeout <= 0:
            raise ValueError("timeout must be positive")

        self.timeout = timeout
        self._owns_http = session is None
        self._http = session if session is not None else requests.Session()

        try:
            bearer_token = self._login(host, port, username, password)
        except Exception:
            self.close()
            raise

        self._session = Session(host=host, port=port, bearer_token=bearer_token)

    @property
    def session(self) -> Session:
        """Authenticated session state."""
        return self._session

    def _send(self, request: ApiRequest, stream: bool = False) -> requests.Response:
        logger.debug("Sending %s %s", request.method, request.url)
        response = self._http.request(
            request.method,
            request.url,
            headers=request.headers,
            data=request.body,
            timeout=self.timeout,
            stream=stream,
            allow_redirects=False,
        )
        logger.debug("Received %d from %s", response.status_code, request.url)
        return response

    def _execute(self, request: ApiRequest) -> ApiResponse:
        """Send a request and read the whole body as text.

        Args:
            request: Request to send

        Returns:
            ApiResponse for a 2xx status

        Raises:
            UnexpectedResponseError: For any status outside 2xx
        """
        with self._send(request) as response:
            status_code = response.status_code
            body = response.text

        if not is_generic_success(status_code):
            raise UnexpectedResponseError(request.url, status_code, body)
        return ApiResponse(status_code=status_code, body=body)

    def _login(self, host: str, port: int, username: str, password: str) -> str:
        request = api.build_login_request(host, port, username, password)
        try:
            response = self._execute(request)
        except UnexpectedResponseError as e:
            raise AuthenticationError(e.endpoint, e.status_code, e.message) from e

        try:
            payload = LoginResponse.model_validate_json(response.body)
        except ValidationError as e:
            raise AuthenticationError(
                request.url, response.status_code, f"invalid login response: {e}"
            ) from e

        logger.info("Logged in to %s:%d as %s", host, port, username)
        return payload.access_token

    def _fetch_csrf_token(self) -> str:
        request = api.build_csrf_token_request(
            self._session.host, self._session.port, self._session.bearer_token
        )
        response = self._execute(request)
        try:
            payload = CsrfTokenResponse.model_validate_json(response.body)
        except ValidationError as e:
            raise UnexpectedResponseError(
                request.url, response.status_code, f"invalid CSRF token response: {e}"
            ) from e
        return payload.result

    def list_dashboards(self) -> Any:
        """List dashboards with their titles and ids.

        Returns:
            The decoded JSON body, unmodified

        Raises:
            UnexpectedResponseError: On a non-2xx status or a body that is not JSON
        """
        request = api.build_list_dashboards_request(
            self._session.host, self._session.port, self._session.bearer_token
        )
        response = self._execute(request)
        try:
            return json.loads(response.body)
        except ValueError as e:
            raise UnexpectedResponseError(
                request.url, response.status_code, f"invalid JSON body: {e}"
            ) from e

    def export_dashboard(self, dashboard_id: int, destination: PathLike) -> Path:
        """Export a dashboard and stream the archive to a file.

        The destination is only created once the server has answered 200;
        an existing file is overwritten. The body is written to a hidden
        sibling file first, so an interrupted download leaves the destination
        untouched.

        Args:
            dashboard_id: ID of the dashboard to export
            destination: File to write the zip archive to

        Returns:
            Path of the written file

        Raises:
            UnexpectedResponseError: If the status is anything but 200
        """
        request = api.build_export_dashboard_request(
            self._session.host, self._session.port, self._session.bearer_token, dashboard_id
        )
        target = Path(destination)

        with self._send(request, stream=True) as response:
            if not is_download_success(response.status_code):
                raise UnexpectedResponseError(request.url, response.status_code, response.text)

            target.parent.mkdir(parents=True, exist_ok=True)
            partial = target.with_name(f".{target.name}.part")
            try:
                with partial.open("wb") as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
                partial.replace(target)
            except BaseException:
                partial.unlink(missing_ok=True)
                raise

        logger.info("Exported dashboard %d to %s", dashboard_id, target)
        return target

    def import_dashboard(
        self, archive: PathLike, passwords: Any = None, overwrite: bool = False
    ) -> None:
        """Import a dashboard archive.

        A fresh CSRF token is fetched before every import.

        Args:
            archive: Zip archive produced by an export
            passwords: Database passwords keyed by config file name, either a
                dict or a JSON string, e.g. ``{"databases/database.yaml": "pw"}``
            overwrite: Replace the dashboard if it already exists

        Raises:
            UnexpectedResponseError: If either call returns a non-2xx status
            OSError: If the archive cannot be read
        """
        csrf_token = self._fetch_csrf_token()
        self._session.csrf_token = csrf_token

        file_bytes = Path(archive).read_bytes()
        request = api.build_import_dashboard_request(
            self._session.host,
            self._session.port,
            self._session.bearer_token,
            csrf_token,
            file_bytes,
            overwrite,
            passwords,
        )
        self._execute(request)
        logger.info("Imported dashboard archive %s (overwrite=%s)", archive, overwrite)

    def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "SupersetClient":
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()
