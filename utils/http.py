"""
HTTP Utilities - AccessPlanIt Authentication and API Client

Wraps httpx for the two kinds of calls the fetchers make:
- Password-grant token exchange (Authenticator)
- Authenticated GET requests returning parsed JSON (ApiClient)

Neither retries. Failures are logged with response status/body when a response
exists and then raised to the caller.

Usage:
    async with build_async_client(settings) as client:
        token = await Authenticator(settings, client).get_token()
        data = await ApiClient(settings, client).request("/api/v2/coursedate", token)
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from utils.config import Settings
from utils.logging import success
from utils.schemas import TokenResponse

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Required configuration is missing; raised before any network call."""


class AuthenticationError(Exception):
    """Token exchange failed."""


def build_async_client(
    settings: Settings,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with the fetcher's default headers.

    Args:
        settings: Application settings
        transport: Optional transport override (e.g. httpx.MockTransport in tests)

    Returns:
        Configured AsyncClient; the caller owns its lifecycle
    """
    headers = {
        "User-Agent": f"{settings.APP_NAME}/{settings.APP_VERSION}",
        "Accept": "application/json",
    }
    return httpx.AsyncClient(headers=headers, transport=transport)


def _log_response_details(error: httpx.HTTPError) -> None:
    if isinstance(error, httpx.HTTPStatusError):
        logger.error("Response status: %s", error.response.status_code)
        logger.error("Response data: %s", error.response.text)


class Authenticator:
    """Exchanges username/password for a bearer token."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient) -> None:
        self.settings = settings
        self.client = client

    async def get_token(self) -> str:
        """
        POST the password grant to the token endpoint.

        Returns:
            Opaque bearer token

        Raises:
            AuthenticationError: On network failure, non-2xx status, or a body
                without a usable access_token
        """
        url = f"{self.settings.ACCESS_PLANIT_BASE_URL}{self.settings.TOKEN_ENDPOINT}"
        form = {
            "grant_type": "password",
            "username": self.settings.ACCESS_PLANIT_USER,
            "password": self.settings.ACCESS_PLANIT_PASS,
        }

        logger.info("Fetching API token...")

        try:
            response = await self.client.post(
                url,
                data=form,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
            response.raise_for_status()
            token = TokenResponse.model_validate(response.json())
        except httpx.HTTPError as e:
            logger.error("Failed to fetch API token: %s", e)
            _log_response_details(e)
            raise AuthenticationError("Failed to fetch API token.") from e
        except (ValueError, ValidationError) as e:
            # JSONDecodeError is a ValueError
            logger.error("Failed to fetch API token: unexpected response body: %s", e)
            raise AuthenticationError("Failed to fetch API token.") from e

        success(logger, "API token retrieved successfully")
        return token.access_token


class ApiClient:
    """Issues authenticated GET requests against the configured base URL."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient) -> None:
        self.settings = settings
        self.client = client

    async def request(
        self,
        endpoint: str,
        token: str,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """
        GET an endpoint with bearer auth.

        Args:
            endpoint: Path appended to the base URL
            token: Bearer token
            params: Optional query parameters

        Returns:
            Parsed JSON body

        Raises:
            httpx.HTTPError: If the request fails or returns a non-2xx status
        """
        url = f"{self.settings.ACCESS_PLANIT_BASE_URL}{endpoint}"

        try:
            response = await self.client.get(
                url,
                params=params,
                headers={"Authorization": f"Bearer {token}"},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("API request failed for %s: %s", endpoint, e)
            _log_response_details(e)
            raise

        return response.json()
