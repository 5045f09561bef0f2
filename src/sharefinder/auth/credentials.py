"""Graph credential acquisition strategies.

Each provider turns the caller's bearer token (possibly absent) into a token
usable against Microsoft Graph. Providers only obtain tokens; validating the
caller's token happens before it reaches this module.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Protocol

import httpx

from sharefinder.errors import AuthorizationError

LOGGER = logging.getLogger(__name__)

GRAPH_SCOPE = "https://graph.microsoft.com/.default"
TOKEN_URL_TEMPLATE = "https://login.microsoftonline.com/{tenant_id}/oauth2/v2.0/token"
OBO_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"


def mask_token(token: str | None, segment: int = 15) -> str:
    """Shorten a token to its head and tail so it can be logged."""
    if not isinstance(token, str):
        return ""
    if len(token) <= segment * 2:
        return token
    return f"{token[:segment]}...{token[-segment:]}"


def bearer_from_header(authorization: str | None) -> str | None:
    """Return the token part of an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) < 2:
        return None
    return parts[1]


class CredentialProvider(Protocol):
    async def get_token(self, bearer_token: str | None) -> str:
        ...


class PassThroughCredentialProvider:
    """Use the caller's token as the Graph token."""

    async def get_token(self, bearer_token: str | None) -> str:
        if not bearer_token:
            raise AuthorizationError("A Graph access token is required")
        return bearer_token


class _TokenEndpointProvider:
    """Shared plumbing for providers that post to the Entra ID token endpoint."""

    def __init__(
        self,
        *,
        tenant_id: str | None,
        client_id: str | None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.tenant_id = tenant_id
        self.client_id = client_id
        self._http_client = http_client
        self._timeout = timeout

    @property
    def token_url(self) -> str:
        return TOKEN_URL_TEMPLATE.format(tenant_id=self.tenant_id)

    async def _request_token(self, form: Dict[str, str]) -> str:
        if self._http_client is not None:
            response = await self._post(self._http_client, form)
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await self._post(client, form)

        payload = _json_or_empty(response)
        if response.is_error:
            message = (
                payload.get("error_description")
                or payload.get("error")
                or f"Token endpoint returned HTTP {response.status_code}"
            )
            raise AuthorizationError(message)

        token = payload.get("access_token")
        if not token:
            raise AuthorizationError("Token endpoint response did not contain an access token")
        return token

    async def _post(self, client: httpx.AsyncClient, form: Dict[str, str]) -> httpx.Response:
        try:
            return await client.post(
                self.token_url,
                data=form,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.HTTPError as exc:
            raise AuthorizationError(str(exc) or "Unknown error occurred") from exc


def _json_or_empty(response: httpx.Response) -> Dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


class OnBehalfOfCredentialProvider(_TokenEndpointProvider):
    """Exchange the caller's token for a delegated Graph token (OAuth2 OBO)."""

    def __init__(
        self,
        *,
        tenant_id: str | None,
        client_id: str | None,
        client_secret: str | None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(
            tenant_id=tenant_id, client_id=client_id, http_client=http_client, timeout=timeout
        )
        self.client_secret = client_secret

    async def get_token(self, bearer_token: str | None) -> str:
        if not bearer_token:
            LOGGER.error("No bearer token provided - authentication required")
            raise AuthorizationError(
                "User authentication required. No bearer token provided in Authorization header."
            )
        if not (self.tenant_id and self.client_id and self.client_secret):
            raise AuthorizationError("Missing environment variables for OBO token exchange")

        LOGGER.debug("Exchanging bearer token %s on behalf of user", mask_token(bearer_token))
        try:
            token = await self._request_token(
                {
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "grant_type": OBO_GRANT_TYPE,
                    "assertion": bearer_token,
                    "requested_token_use": "on_behalf_of",
                    "scope": GRAPH_SCOPE,
                }
            )
        except AuthorizationError as exc:
            LOGGER.error("OBO token exchange failed: %s", exc)
            raise AuthorizationError(f"OBO token exchange failed: {exc}") from exc

        LOGGER.debug("OBO token acquired: %s", mask_token(token))
        return token


class ServiceAccountCredentialProvider(_TokenEndpointProvider):
    """Obtain a Graph token for a fixed service account (password grant)."""

    def __init__(
        self,
        *,
        tenant_id: str | None,
        client_id: str | None,
        username: str | None,
        password: str | None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(
            tenant_id=tenant_id, client_id=client_id, http_client=http_client, timeout=timeout
        )
        self.username = username
        self.password = password

    async def get_token(self, bearer_token: str | None = None) -> str:
        if not (self.tenant_id and self.client_id and self.username and self.password):
            raise AuthorizationError(
                "Missing environment variables for Service Account token exchange"
            )
        try:
            return await self._request_token(
                {
                    "client_id": self.client_id,
                    "scope": GRAPH_SCOPE,
                    "username": self.username,
                    "password": self.password,
                    "grant_type": "password",
                }
            )
        except AuthorizationError as exc:
            LOGGER.error("Error getting service account token: %s", exc)
            raise


class FallbackCredentialProvider:
    """On-behalf-of when the caller sent a token, service account otherwise."""

    def __init__(self, delegated: CredentialProvider, service: CredentialProvider) -> None:
        self.delegated = delegated
        self.service = service

    async def get_token(self, bearer_token: str | None) -> str:
        if bearer_token:
            return await self.delegated.get_token(bearer_token)
        return await self.service.get_token(None)
