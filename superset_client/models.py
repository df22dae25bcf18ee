"""Data models for the Superset client."""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class Session(BaseModel):
    """Authenticated session state owned by a single client."""

    model_config = ConfigDict(validate_assignment=True)

    host: str = Field(..., frozen=True, description="Superset server hostname")
    port: int = Field(..., frozen=True, description="Superset server port")
    bearer_token: str = Field(..., frozen=True, description="Access token issued at login")
    csrf_token: Optional[str] = Field(None, description="Token for the last import call")


class ApiRequest(BaseModel):
    """A fully specified HTTP request, ready to be sent."""

    model_config = ConfigDict(frozen=True)

    method: str = Field(..., description="HTTP method")
    url: str = Field(..., description="Absolute request URL including query string")
    headers: Dict[str, str] = Field(default_factory=dict, description="Request headers")
    body: Optional[bytes] = Field(None, description="Encoded request body")


class ApiResponse(BaseModel):
    """Status code and text body of a successful call."""

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(..., description="HTTP status code")
    body: str = Field("", description="Response body as text")


class LoginResponse(BaseModel):
    """Payload of the login endpoint."""

    access_token: str = Field(..., description="Bearer token for later calls")
    refresh_token: Optional[str] = Field(None, description="Refresh token, unused")


class CsrfTokenResponse(BaseModel):
    """Payload of the CSRF token endpoint."""

    result: str = Field(..., description="CSRF token value")
